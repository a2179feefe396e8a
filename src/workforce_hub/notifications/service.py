from __future__ import annotations

import logging
from datetime import date

from ..core.enums import NotificationType, RequestStatus
from .model import NewNotification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Best-effort in-app notifications.

    A failed write is logged and reported as False; it never aborts the action
    that triggered it.
    """

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify(self, notification: NewNotification) -> bool:
        try:
            self._notifications.create(notification)
        except Exception:
            logger.warning("Notification for user %s skipped", notification.user_id, exc_info=True)
            return False
        return True

    def leave_requested(self, *, approver_id: int, requester_name: str, start_date: date, end_date: date) -> bool:
        return self.notify(
            NewNotification(
                user_id=int(approver_id),
                type=NotificationType.LEAVE_REQUEST,
                title="New Leave Request",
                message=f"{requester_name} has requested leave from {start_date:%Y-%m-%d} to {end_date:%Y-%m-%d}",
                link="/leave",
            )
        )

    def leave_decided(self, *, user_id: int, status: RequestStatus, start_date: date, end_date: date) -> bool:
        return self.notify(
            NewNotification(
                user_id=int(user_id),
                type=NotificationType.LEAVE_APPROVED,
                title=f"Leave Request {status.value.capitalize()}",
                message=f"Your leave from {start_date:%Y-%m-%d} to {end_date:%Y-%m-%d} was {status.value}",
                link="/leave",
            )
        )

    def booking_created(self, *, user_id: int, booking_title: str, room_name: str) -> bool:
        return self.notify(
            NewNotification(
                user_id=int(user_id),
                type=NotificationType.BOOKING,
                title="New Room Booking",
                message=f'New booking created: "{booking_title}" in {room_name}',
                link="/meeting-rooms",
            )
        )

    def booking_approved(self, *, user_id: int, booking_title: str, room_name: str) -> bool:
        return self.notify(
            NewNotification(
                user_id=int(user_id),
                type=NotificationType.BOOKING_APPROVED,
                title="Booking Approved",
                message=f'Your booking "{booking_title}" in {room_name} was approved',
                link="/meeting-rooms",
            )
        )
