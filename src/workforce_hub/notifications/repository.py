from __future__ import annotations

from typing import Protocol

from .model import NewNotification


class NotificationRepository(Protocol):
    def create(self, notification: NewNotification) -> int:
        raise NotImplementedError
