from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_identity, json_api
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings", methods=["GET"], endpoint="settings_get")
    @json_api
    def settings_get():
        current_identity()
        return jsonify(container.settings_service.get_settings())

    @app.route("/api/settings", methods=["PUT"], endpoint="settings_update")
    @json_api
    def settings_update():
        identity = current_identity()
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise ValidationError("Expected a JSON object of settings")
        settings = container.settings_service.update_settings(current_role=identity.role, values=body)
        return jsonify({"success": True, "settings": settings})
