from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import current_role, current_user_id, json_action, login_required, parse_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/team/dashboard", methods=["GET"], endpoint="team_dashboard")
    @login_required
    @json_action("Failed to load team metrics")
    def team_dashboard():
        metrics = container.team_dashboard_service.metrics(current_role=current_role(), user_id=current_user_id())
        return jsonify(metrics.as_dict())

    @app.route("/api/team/calendar", methods=["GET"], endpoint="team_calendar")
    @login_required
    @json_action("Failed to load team leave calendar")
    def team_calendar():
        today = now_local().date()
        year = parse_int(request.args.get("year"), "Year")
        month = parse_int(request.args.get("month"), "Month")
        cal = container.team_dashboard_service.leave_calendar(
            current_role=current_role(),
            user_id=current_user_id(),
            year=today.year if year is None else year,
            month=today.month if month is None else month,
        )
        return jsonify(cal.as_dict())
