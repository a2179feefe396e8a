from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import (
    current_role,
    current_user_id,
    json_action,
    json_body,
    login_required,
    parse_date,
    parse_int,
    parse_text,
)
from ..container import Container
from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError
from .model import LeaveHistoryFilter


def register(app: Flask, container: Container) -> None:
    def _history_filter() -> LeaveHistoryFilter:
        status_s = request.args.get("status") or "all"
        try:
            status = None if status_s == "all" else RequestStatus(status_s)
        except ValueError:
            raise ValidationError("Unknown status filter")
        return LeaveHistoryFilter(
            status=status,
            month=parse_int(request.args.get("month"), "Month"),
            year=parse_int(request.args.get("year"), "Year"),
            start=parse_date(request.args.get("start_date")),
            end=parse_date(request.args.get("end_date")),
        )

    @app.route("/api/leave", methods=["GET"], endpoint="leave_history")
    @login_required
    @json_action("Failed to load leave requests")
    def leave_history():
        rows = container.leave_service.list_history(
            current_role=current_role(),
            user_id=current_user_id(),
            filters=_history_filter(),
        )
        return jsonify({"leaves": rows})

    @app.route("/api/leave", methods=["POST"], endpoint="submit_leave")
    @login_required
    @json_action("Failed to submit leave request")
    def submit_leave():
        data = json_body()
        request_id = container.leave_service.submit(
            user_id=current_user_id(),
            leave_type=parse_text(data.get("type"), "Leave type") or "annual",
            start_date=parse_date(data.get("start_date")),
            end_date=parse_date(data.get("end_date")),
            approver_id=parse_int(data.get("approver_id"), "Approver"),
            reason=parse_text(data.get("reason"), "Reason"),
        )
        return jsonify({"id": request_id, "message": "Leave request submitted successfully"}), 201

    @app.route("/api/leave/<int:request_id>", methods=["PUT"], endpoint="edit_leave")
    @login_required
    @json_action("Failed to update leave request")
    def edit_leave(request_id: int):
        data = json_body()
        container.leave_service.edit(
            user_id=current_user_id(),
            request_id=request_id,
            start_date=parse_date(data.get("start_date")),
            end_date=parse_date(data.get("end_date")),
            reason=parse_text(data.get("reason"), "Reason"),
        )
        return jsonify({"message": "Leave request updated"})

    @app.route("/api/leave/<int:request_id>", methods=["DELETE"], endpoint="delete_leave")
    @login_required
    @json_action("Failed to delete leave request")
    def delete_leave(request_id: int):
        container.leave_service.delete(
            current_role=current_role(),
            user_id=current_user_id(),
            request_id=request_id,
        )
        return jsonify({"message": "Leave request deleted"})

    @app.route("/api/leave/<int:request_id>/approve", methods=["POST"], endpoint="approve_leave")
    @login_required
    @json_action("Failed to approve leave request")
    def approve_leave(request_id: int):
        container.leave_service.approve(
            current_role=current_role(),
            decider_id=current_user_id(),
            request_id=request_id,
        )
        return jsonify({"message": "Leave request approved"})

    @app.route("/api/leave/<int:request_id>/reject", methods=["POST"], endpoint="reject_leave")
    @login_required
    @json_action("Failed to reject leave request")
    def reject_leave(request_id: int):
        data = json_body()
        container.leave_service.reject(
            current_role=current_role(),
            decider_id=current_user_id(),
            request_id=request_id,
            rejection_reason=parse_text(data.get("rejection_reason"), "Rejection reason"),
        )
        return jsonify({"message": "Leave request rejected"})

    @app.route("/api/leave/pending", methods=["GET"], endpoint="team_pending_leave")
    @login_required
    @json_action("Failed to load leave requests")
    def team_pending_leave():
        rows = container.leave_service.list_team_pending(current_role=current_role(), user_id=current_user_id())
        return jsonify({"leaves": rows})

    @app.route("/api/leave/balance", methods=["GET"], endpoint="leave_balance")
    @login_required
    @json_action("Failed to load leave balance")
    def leave_balance():
        return jsonify(container.leave_service.balance(user_id=current_user_id()))

    @app.route("/api/leave/types", methods=["GET"], endpoint="leave_types")
    @login_required
    @json_action("Failed to load leave types")
    def leave_types():
        return jsonify({"types": container.leave_service.list_leave_types()})
