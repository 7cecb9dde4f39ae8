from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.http import json_error, optional_int
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _activity_fields(data: dict) -> dict:
    return dict(
        title=data.get("title"),
        start_time=data.get("start_time"),
        end_time=data.get("end_time"),
        grace_period_minutes=data.get("grace_period_minutes"),
        allows_departure_scan=data.get("allows_departure_scan"),
        description=data.get("description"),
        room=data.get("room"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/activities", methods=["GET"], endpoint="api_activities_list")
    def api_activities_list():
        try:
            owner_id = optional_int(request.args.get("owner_id"), "owner_id")
        except ValidationError as e:
            return json_error(str(e), 400)
        if owner_id is None:
            # Without an owner there is nothing the caller may see.
            return jsonify([])

        activities = container.activity_service.list_for_owner(owner_id)
        return jsonify([container.activity_service.to_dict(a) for a in activities])

    @app.route("/api/activities", methods=["POST"], endpoint="api_activities_create")
    def api_activities_create():
        data = request.get_json(silent=True) or {}
        try:
            activity = container.activity_service.create(
                owner_id=optional_int(data.get("owner_id"), "owner_id"),
                **_activity_fields(data),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            logger.exception("failed to create activity")
            return json_error("Failed to create activity", 500)

        logger.info("created activity %s for owner %s", activity.activity_id, activity.owner_id)
        return jsonify(container.activity_service.to_dict(activity)), 201

    @app.route("/api/activities/<int:activity_id>", methods=["PUT"], endpoint="api_activities_update")
    def api_activities_update(activity_id: int):
        data = request.get_json(silent=True) or {}
        try:
            activity = container.activity_service.update(
                activity_id,
                owner_id=optional_int(data.get("owner_id"), "owner_id"),
                **_activity_fields(data),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except Exception:
            logger.exception("failed to update activity %s", activity_id)
            return json_error("Failed to update activity", 500)
        return jsonify(container.activity_service.to_dict(activity))

    @app.route("/api/activities/<int:activity_id>", methods=["DELETE"], endpoint="api_activities_delete")
    def api_activities_delete(activity_id: int):
        try:
            container.activity_service.delete(
                activity_id,
                owner_id=optional_int(request.args.get("owner_id"), "owner_id"),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except NotFoundError as e:
            return json_error(str(e), 404)
        except Exception:
            logger.exception("failed to delete activity %s", activity_id)
            return json_error("Failed to delete activity", 500)
        return jsonify({"success": True})
