from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a profile with its role and team.

    `annual_leave_quota` is None when nothing is configured for the user.
    """

    user_id: int
    first_name: Optional[str]
    last_name: Optional[str]
    email: str
    role: Role
    team_id: Optional[int] = None
    annual_leave_quota: Optional[int] = None

    @property
    def display_name(self) -> str:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or "Unknown"
