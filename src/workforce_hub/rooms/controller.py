from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import (
    current_role,
    current_user_id,
    json_action,
    json_body,
    login_required,
    parse_datetime,
    parse_int,
    parse_text,
)
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _booking_fields(data: dict) -> dict:
        return {
            "room_id": parse_int(data.get("room_id"), "Room"),
            "title": parse_text(data.get("title"), "Title"),
            "start_time": parse_datetime(data.get("start_time")),
            "end_time": parse_datetime(data.get("end_time")),
            "description": parse_text(data.get("description"), "Description"),
        }

    @app.route("/api/rooms", methods=["GET"], endpoint="list_rooms")
    @login_required
    @json_action("Failed to load rooms")
    def list_rooms():
        return jsonify({"rooms": container.booking_service.list_rooms()})

    @app.route("/api/bookings", methods=["GET"], endpoint="list_bookings")
    @login_required
    @json_action("Failed to load bookings")
    def list_bookings():
        return jsonify({"bookings": container.booking_service.list_bookings()})

    @app.route("/api/bookings", methods=["POST"], endpoint="create_booking")
    @login_required
    @json_action("Failed to create booking")
    def create_booking():
        data = json_body()
        raw_attendees = data.get("attendees") or []
        if not isinstance(raw_attendees, list):
            raise ValidationError("Attendees must be a list")
        attendees = [parse_int(a, "Attendee") for a in raw_attendees]
        booking_id = container.booking_service.create(
            user_id=current_user_id(),
            attendees=[a for a in attendees if a is not None],
            **_booking_fields(data),
        )
        return jsonify({"id": booking_id, "message": "Booking created"}), 201

    @app.route("/api/bookings/<int:booking_id>", methods=["PUT"], endpoint="edit_booking")
    @login_required
    @json_action("Failed to update booking")
    def edit_booking(booking_id: int):
        data = json_body()
        container.booking_service.edit(
            current_role=current_role(),
            user_id=current_user_id(),
            booking_id=booking_id,
            **_booking_fields(data),
        )
        return jsonify({"message": "Booking updated successfully"})

    @app.route("/api/bookings/<int:booking_id>/approve", methods=["POST"], endpoint="approve_booking")
    @login_required
    @json_action("Failed to approve booking")
    def approve_booking(booking_id: int):
        container.booking_service.approve(current_role=current_role(), booking_id=booking_id)
        return jsonify({"message": "Booking approved"})

    @app.route("/api/bookings/<int:booking_id>/reject", methods=["POST"], endpoint="reject_booking")
    @login_required
    @json_action("Failed to reject booking")
    def reject_booking(booking_id: int):
        container.booking_service.reject(current_role=current_role(), booking_id=booking_id)
        return jsonify({"message": "Booking rejected"})

    @app.route("/api/bookings/<int:booking_id>/cancel", methods=["POST"], endpoint="cancel_booking")
    @login_required
    @json_action("Failed to cancel booking")
    def cancel_booking(booking_id: int):
        container.booking_service.cancel(
            current_role=current_role(),
            user_id=current_user_id(),
            booking_id=booking_id,
        )
        return jsonify({"message": "Booking cancelled successfully"})

    @app.route("/api/bookings/<int:booking_id>/join", methods=["POST"], endpoint="join_booking")
    @login_required
    @json_action("Failed to update attendance")
    def join_booking(booking_id: int):
        container.booking_service.join(user_id=current_user_id(), booking_id=booking_id)
        return jsonify({"message": "Joined booking successfully"})

    @app.route("/api/bookings/<int:booking_id>/leave", methods=["POST"], endpoint="leave_booking")
    @login_required
    @json_action("Failed to update attendance")
    def leave_booking(booking_id: int):
        container.booking_service.leave(user_id=current_user_id(), booking_id=booking_id)
        return jsonify({"message": "Left booking successfully"})
