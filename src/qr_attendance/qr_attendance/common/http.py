from __future__ import annotations

from typing import Any, Optional

from flask import jsonify

from ..core.exceptions import ValidationError


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
