"""Signed QR payloads.

A payload carries the participant's external id and the issue time in epoch
seconds, signed with sha256 over ``"{id}:{issued_at}:{secret}"``. The secret
never leaves the server, so a scanned code can be verified without having been
registered in advance.

Wire format (UTF-8 JSON, exactly three keys)::

    {"studentId": "S-001", "timestamp": 1767225600, "hash": "<64 hex chars>"}
"""

from __future__ import annotations

import hashlib
import hmac
import json
import secrets
from typing import Any, Optional

from ..common.datetime_utils import epoch_seconds
from ..core.constants import QR_SECRET_BYTES, SECONDS_PER_DAY
from .model import QRPayload

_ID_KEY = "studentId"
_ISSUED_KEY = "timestamp"
_SIGNATURE_KEY = "hash"
_WIRE_KEYS = frozenset({_ID_KEY, _ISSUED_KEY, _SIGNATURE_KEY})


def generate_secret() -> str:
    """New per-participant signing secret (hex encoded)."""
    return secrets.token_hex(QR_SECRET_BYTES)


def _sign(participant_external_id: str, issued_at: int, secret: str) -> str:
    data = f"{participant_external_id}:{issued_at}:{secret}"
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def issue(participant_external_id: str, secret: str, *, now: Optional[int] = None) -> QRPayload:
    issued_at = int(now) if now is not None else epoch_seconds()
    return QRPayload(
        participant_external_id=participant_external_id,
        issued_at=issued_at,
        signature=_sign(participant_external_id, issued_at, secret),
    )


def verify(payload: QRPayload, secret: str) -> bool:
    expected = _sign(payload.participant_external_id, payload.issued_at, secret)
    # compare_digest only accepts ASCII str, so compare bytes.
    return hmac.compare_digest(expected.encode("utf-8"), payload.signature.encode("utf-8"))


def is_expired(payload: QRPayload, max_age_days: int, *, now: Optional[int] = None) -> bool:
    current = int(now) if now is not None else epoch_seconds()
    return current - payload.issued_at > int(max_age_days) * SECONDS_PER_DAY


def serialize(payload: QRPayload) -> str:
    return json.dumps(
        {
            _ID_KEY: payload.participant_external_id,
            _ISSUED_KEY: payload.issued_at,
            _SIGNATURE_KEY: payload.signature,
        },
        separators=(",", ":"),
    )


def _is_wire_text(value: Any) -> bool:
    # JSON "\ud800" escapes decode to lone surrogates that cannot be re-encoded.
    if not isinstance(value, str) or not value:
        return False
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def deserialize(text: Any) -> Optional[QRPayload]:
    """Parse a scanned string; returns None for anything that is not a payload.

    Camera noise and foreign QR codes are expected input, so this never raises.
    """

    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(text, str):
        return None

    try:
        data = json.loads(text)
    except (ValueError, RecursionError):
        return None

    if not isinstance(data, dict) or set(data) != _WIRE_KEYS:
        return None

    participant_external_id = data[_ID_KEY]
    issued_at = data[_ISSUED_KEY]
    signature = data[_SIGNATURE_KEY]

    if not _is_wire_text(participant_external_id):
        return None
    # bool is an int subclass; true/false is not a timestamp.
    if isinstance(issued_at, bool) or not isinstance(issued_at, int):
        return None
    if not _is_wire_text(signature):
        return None

    return QRPayload(
        participant_external_id=participant_external_id,
        issued_at=issued_at,
        signature=signature,
    )
