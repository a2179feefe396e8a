from __future__ import annotations

from datetime import date, datetime

import pytest

from workforce_hub.core.enums import BookingStatus, RequestStatus
from workforce_hub.main import create_app


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, user_id: int, role: str) -> None:
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_api_requires_login(client):
    resp = client.get("/api/leave")

    assert resp.status_code == 401
    assert "log in" in resp.get_json()["error"]


def test_submit_leave_and_read_balance(client, leaves):
    login(client, 3, "staff")

    resp = client.post(
        "/api/leave",
        json={"type": "annual", "start_date": "2024-06-10", "end_date": "2024-06-12", "approver_id": 2},
    )
    assert resp.status_code == 201
    assert leaves.get(request_id=resp.get_json()["id"]).status == RequestStatus.PENDING

    balance = client.get("/api/leave/balance").get_json()
    assert balance == {"quota": 12, "used": 1, "remaining": 11, "can_submit": True}


def test_overlapping_leave_is_409(client, leaves):
    leaves.add(user_id=3, start=date(2024, 6, 10), end=date(2024, 6, 12))
    login(client, 3, "staff")

    resp = client.post(
        "/api/leave",
        json={"type": "annual", "start_date": "2024-06-12", "end_date": "2024-06-14", "approver_id": 2},
    )

    assert resp.status_code == 409
    assert resp.get_json()["error"] == "You already have a leave request for this date range"


def test_bad_date_is_400(client):
    login(client, 3, "staff")

    resp = client.post("/api/leave", json={"start_date": "10/06/2024", "end_date": "2024-06-12", "approver_id": 2})

    assert resp.status_code == 400


def test_staff_cannot_approve_leave(client, leaves):
    req = leaves.add(user_id=4, start=date(2024, 6, 10), end=date(2024, 6, 12))
    login(client, 3, "staff")

    resp = client.post(f"/api/leave/{req.request_id}/approve")

    assert resp.status_code == 403


def test_history_filter_by_status(client, leaves):
    leaves.add(user_id=3, start=date(2024, 6, 10), end=date(2024, 6, 12))
    leaves.add(user_id=3, start=date(2024, 7, 10), end=date(2024, 7, 12), status=RequestStatus.APPROVED)
    login(client, 3, "staff")

    rows = client.get("/api/leave?status=approved").get_json()["leaves"]

    assert [r["start_date"] for r in rows] == ["2024-07-10"]
    assert client.get("/api/leave?status=maybe").status_code == 400


def test_booking_conflict_is_409(client, bookings):
    bookings.add(
        room_id=1,
        user_id=4,
        start=datetime(2024, 6, 10, 9, 0),
        end=datetime(2024, 6, 10, 10, 0),
    )
    login(client, 3, "staff")

    ok = client.post(
        "/api/bookings",
        json={"room_id": 1, "title": "Retro", "start_time": "2024-06-10T10:00", "end_time": "2024-06-10T11:00"},
    )
    clash = client.post(
        "/api/bookings",
        json={"room_id": 1, "title": "Retro", "start_time": "2024-06-10T09:30", "end_time": "2024-06-10T10:30"},
    )

    assert ok.status_code == 201
    assert clash.status_code == 409


def test_admin_approves_booking(client, bookings):
    pending = bookings.add(
        room_id=1,
        user_id=3,
        start=datetime(2024, 6, 10, 9, 0),
        end=datetime(2024, 6, 10, 10, 0),
        status=BookingStatus.PENDING,
    )
    login(client, 1, "admin")

    resp = client.post(f"/api/bookings/{pending.booking_id}/approve")

    assert resp.status_code == 200
    assert bookings.get(booking_id=pending.booking_id).status == BookingStatus.APPROVED


def test_team_dashboard_for_leader(client, attendance):
    attendance.add(3, "check_in", datetime(2024, 6, 10, 8, 55))
    attendance.add(3, "check_out", datetime(2024, 6, 10, 17, 10))
    login(client, 2, "leader")

    payload = client.get("/api/team/dashboard").get_json()

    assert payload["team_size"] == 3
    assert payload["total_working_hours"] == 8.3


def test_team_calendar_for_staff_is_403(client):
    login(client, 3, "staff")

    assert client.get("/api/team/calendar?year=2024&month=6").status_code == 403


def test_record_attendance(client, attendance):
    login(client, 3, "staff")

    resp = client.post("/api/attendance", json={"type": "check_in"})

    assert resp.status_code == 201
    assert attendance.events[0].user_id == 3


def test_unexpected_failure_is_500_with_generic_message(client, bookings, monkeypatch):
    def broken(**kwargs):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(bookings, "list_rooms", broken)
    login(client, 3, "staff")

    resp = client.get("/api/rooms")

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to load rooms"}


def test_numeric_leave_date_is_400(client, leaves):
    login(client, 3, "staff")

    resp = client.post("/api/leave", json={"start_date": 20240610, "end_date": "2024-06-12", "approver_id": 2})

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Date must be text"
    assert leaves.rows == {}


def test_numeric_booking_title_is_400(client, bookings):
    login(client, 3, "staff")

    resp = client.post(
        "/api/bookings",
        json={"room_id": 1, "title": 42, "start_time": "2024-06-10T10:00", "end_time": "2024-06-10T11:00"},
    )

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Title must be text"
    assert bookings.rows == {}


def test_malformed_json_shapes_are_400(client):
    login(client, 3, "staff")

    not_object = client.post("/api/attendance", json=["check_in"])
    bad_reason = client.post(
        "/api/leave",
        json={"start_date": "2024-06-10", "end_date": "2024-06-12", "approver_id": 2, "reason": ["x"]},
    )
    bad_attendees = client.post(
        "/api/bookings",
        json={
            "room_id": 1,
            "title": "Retro",
            "start_time": "2024-06-10T10:00",
            "end_time": "2024-06-10T11:00",
            "attendees": "4",
        },
    )

    assert not_object.status_code == 400
    assert bad_reason.status_code == 400
    assert bad_attendees.status_code == 400


def test_team_calendar_month_zero_is_400(client):
    login(client, 2, "leader")

    resp = client.get("/api/team/calendar?year=2024&month=0")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Month must be between 1 and 12"


def test_team_calendar_defaults_to_current_month(client):
    login(client, 2, "leader")

    payload = client.get("/api/team/calendar").get_json()

    today = date.today()
    assert (payload["year"], payload["month"]) == (today.year, today.month)
