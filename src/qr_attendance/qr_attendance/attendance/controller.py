from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import json_error, optional_int
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError
from .outcomes import (
    ActivityNotFound,
    AlreadyArrived,
    AlreadyDeparted,
    Arrived,
    Departed,
    InvalidQRFormat,
    InvalidSignature,
    ParticipantNotFound,
    QRExpired,
)

logger = logging.getLogger(__name__)

_HTTP_STATUS = {
    Arrived: 200,
    Departed: 200,
    AlreadyArrived: 200,
    AlreadyDeparted: 200,
    InvalidQRFormat: 400,
    InvalidSignature: 400,
    QRExpired: 400,
    ParticipantNotFound: 404,
    ActivityNotFound: 404,
}


def register(app: Flask, container: Container) -> None:
    def _parse_day(value: str | None):
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD") from None

    @app.route("/api/attendance/scan", methods=["POST"], endpoint="api_attendance_scan")
    def api_attendance_scan():
        """Submit one scanned QR string; the server decides time-in vs time-out."""
        data = request.get_json(silent=True) or {}
        qr_data = data.get("qr_data")
        if not isinstance(qr_data, str) or not qr_data.strip():
            return json_error("QR data and activity ID are required", 400)

        try:
            activity_id = optional_int(data.get("activity_id"), "activity_id")
        except ValidationError as e:
            return json_error(str(e), 400)
        if activity_id is None:
            return json_error("QR data and activity ID are required", 400)

        station_id = request.headers.get("X-Scanner-Id") or request.remote_addr or "-"
        if not container.scan_debouncer.accept(station_id, qr_data):
            return json_error("Duplicate scan ignored", 429)

        try:
            outcome = container.attendance_service.submit_scan(qr_data, activity_id)
        except Exception:
            logger.exception("scan failed for activity %s", activity_id)
            return json_error("Scan failed", 500)

        body = container.attendance_service.outcome_to_dict(outcome)
        status = _HTTP_STATUS[type(outcome)]
        body["success"] = status == 200
        return jsonify(body), status

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_list")
    def api_attendance_list():
        try:
            owner_id = optional_int(request.args.get("owner_id"), "owner_id")
            if owner_id is None:
                return jsonify([])
            rows = container.attendance_service.list_records(
                owner_id=owner_id,
                activity_id=optional_int(request.args.get("activity_id"), "activity_id"),
                participant_id=optional_int(request.args.get("participant_id"), "participant_id"),
                day=_parse_day(request.args.get("date")),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            logger.exception("failed to list attendance")
            return json_error("Failed to fetch attendance", 500)
        return jsonify(rows)

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="api_attendance_stats")
    def api_attendance_stats():
        try:
            owner_id = optional_int(request.args.get("owner_id"), "owner_id")
            if owner_id is None:
                return json_error("owner_id is required", 400)
            stats = container.attendance_service.stats(
                owner_id=owner_id,
                period=request.args.get("period", "day"),
                reference=_parse_day(request.args.get("date")),
                activity_id=optional_int(request.args.get("activity_id"), "activity_id"),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            logger.exception("failed to compute attendance stats")
            return json_error("Failed to compute statistics", 500)
        return jsonify(stats.as_dict())

    @app.route("/api/attendance/<int:record_id>", methods=["DELETE"], endpoint="api_attendance_delete")
    def api_attendance_delete(record_id: int):
        try:
            owner_id = optional_int(request.args.get("owner_id"), "owner_id")
            if owner_id is None:
                return json_error("owner_id is required", 400)
            container.attendance_service.delete_record(record_id, owner_id=owner_id)
        except ValidationError as e:
            return json_error(str(e), 400)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except Exception:
            logger.exception("failed to delete attendance record %s", record_id)
            return json_error("Failed to delete attendance record", 500)
        return jsonify({"success": True, "message": "Attendance record deleted successfully"})
