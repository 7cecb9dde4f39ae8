from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.http import json_error, optional_int
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/participants", methods=["GET"], endpoint="api_participants_list")
    def api_participants_list():
        try:
            owner_id = optional_int(request.args.get("owner_id"), "owner_id")
        except ValidationError as e:
            return json_error(str(e), 400)
        if owner_id is None:
            return jsonify([])

        participants = container.participant_service.list_for_owner(owner_id)
        return jsonify([container.participant_service.to_public(p) for p in participants])

    @app.route("/api/participants", methods=["POST"], endpoint="api_participants_create")
    def api_participants_create():
        data = request.get_json(silent=True) or {}
        try:
            participant = container.participant_service.register(
                external_id=data.get("external_id"),
                first_name=data.get("first_name"),
                last_name=data.get("last_name"),
                section=data.get("section"),
                email=data.get("email"),
                owner_id=optional_int(data.get("owner_id"), "owner_id"),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception:
            logger.exception("failed to register participant")
            return json_error("Failed to create participant", 500)
        return jsonify(container.participant_service.to_public(participant)), 201

    @app.route("/api/participants/<int:participant_id>/qr", methods=["GET"], endpoint="api_participant_qr")
    def api_participant_qr(participant_id: int):
        try:
            if request.args.get("format") == "png":
                png = container.participant_service.render_qr_png(participant_id)
                return app.response_class(png, mimetype="image/png")
            return jsonify({"qr_code": container.participant_service.render_qr_data_url(participant_id)})
        except NotFoundError as e:
            return json_error(str(e), 404)
        except Exception:
            logger.exception("failed to generate QR code for participant %s", participant_id)
            return json_error("Failed to generate QR code", 500)
