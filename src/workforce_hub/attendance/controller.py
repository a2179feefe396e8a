from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_user_id, json_action, json_body, login_required, parse_text
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_history")
    @login_required
    @json_action("Failed to load attendance")
    def attendance_history():
        return jsonify({"events": container.attendance_service.get_history_ui(current_user_id())})

    @app.route("/api/attendance", methods=["POST"], endpoint="record_attendance")
    @login_required
    @json_action("Failed to record attendance")
    def record_attendance():
        data = json_body()
        event_type = parse_text(data.get("type"), "Event type")
        event_id = container.attendance_service.record(current_user_id(), event_type)
        return jsonify({"id": event_id}), 201
