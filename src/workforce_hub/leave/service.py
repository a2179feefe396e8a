from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import (
    QUALIFYING_LEAVE_STATUSES,
    STANDARD_LEAVE_TYPES,
    LeaveType,
    RequestStatus,
    Role,
    can_transition,
)
from ..core.exceptions import AuthorizationError, ConflictError, ValidationError
from ..notifications.service import NotificationService
from ..scheduling.intervals import Boundary, IntervalSet, Span
from ..users.model import User
from ..users.repository import UserRepository
from .balance import LeaveBalanceCounter
from .model import LeaveHistoryFilter, LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository, LeaveTypeRepository


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        leave_types: LeaveTypeRepository,
        users: UserRepository,
        notifications: NotificationService,
        *,
        balance: Optional[LeaveBalanceCounter] = None,
    ):
        self._leaves = leaves
        self._leave_types = leave_types
        self._users = users
        self._notifications = notifications
        self._balance = balance or LeaveBalanceCounter()

    @staticmethod
    def _validate_range(start_date: Optional[date], end_date: Optional[date]) -> None:
        if not start_date or not end_date:
            raise ValidationError("Start date and end date are required")
        if start_date > end_date:
            raise ValidationError("Start date must be before or equal to end date")

    def _own_requests(self, user_id: int) -> Sequence[LeaveRequest]:
        return self._leaves.list_requests(user_ids=[int(user_id)], limit=None)

    @staticmethod
    def _ensure_no_overlap(
        existing: Sequence[LeaveRequest],
        start_date: date,
        end_date: date,
        *,
        exclude_id: Optional[int] = None,
    ) -> None:
        intervals = IntervalSet(
            (r.as_span() for r in existing),
            boundary=Boundary.INCLUSIVE,
            relevant_statuses=QUALIFYING_LEAVE_STATUSES,
        )
        if intervals.has_conflict(Span(start=start_date, end=end_date), exclude_id=exclude_id):
            raise ConflictError("You already have a leave request for this date range")

    def _resolve_type(self, leave_type: str) -> tuple[LeaveType, Optional[int]]:
        value = require_non_empty(leave_type, "Leave type")
        if value in {t.value for t in STANDARD_LEAVE_TYPES}:
            return LeaveType(value), None

        if not value.isdigit() or not self._leave_types.get_by_id(int(value)):
            raise ValidationError("Unknown leave type")
        return LeaveType.CUSTOM, int(value)

    def _get_pending(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get(request_id=int(request_id))
        if not req:
            raise ValidationError("Leave request does not exist")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Leave request was already processed")
        return req

    def _require_decider(self, *, current_role: Role, decider_id: int, req: LeaveRequest) -> None:
        if current_role == Role.ADMIN:
            return
        if current_role != Role.LEADER:
            raise AuthorizationError("Only leaders and admins can decide leave requests")

        leader = self._users.get_by_id(int(decider_id))
        owner = self._users.get_by_id(req.user_id)
        if not leader or leader.team_id is None:
            raise AuthorizationError("You are not assigned to a team")
        if not owner or owner.team_id != leader.team_id:
            raise AuthorizationError("You can only decide requests from your own team")

    # ---- Balance ----
    def balance(self, *, user_id: int) -> dict:
        user = self._users.get_by_id(int(user_id))
        quota = self._balance.quota(user.annual_leave_quota if user else None)
        used = self._balance.used_count(self._own_requests(user_id), int(user_id))
        return {
            "quota": quota,
            "used": used,
            "remaining": self._balance.remaining(quota, used),
            "can_submit": self._balance.can_submit(quota, used),
        }

    # ---- Owner actions ----
    def submit(
        self,
        *,
        user_id: int,
        leave_type: str,
        start_date: Optional[date],
        end_date: Optional[date],
        approver_id: Optional[int],
        reason: str = "",
    ) -> int:
        self._validate_range(start_date, end_date)
        if not approver_id:
            raise ValidationError("Please select an approver")

        approver = self._users.get_by_id(int(approver_id))
        if not approver or approver.role not in {Role.LEADER, Role.ADMIN}:
            raise ValidationError("Approver must be a leader")

        kind, custom_type_id = self._resolve_type(leave_type)

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise ValidationError("User does not exist")

        existing = self._own_requests(user.user_id)
        quota = self._balance.quota(user.annual_leave_quota)
        if not self._balance.can_submit(quota, self._balance.used_count(existing, user.user_id)):
            raise ValidationError(f"You have reached your maximum leave requests for this year ({quota} times)")

        self._ensure_no_overlap(existing, start_date, end_date)

        request_id = self._leaves.create(
            NewLeaveRequest(
                user_id=user.user_id,
                leave_type=kind,
                start_date=start_date,
                end_date=end_date,
                approver_id=approver.user_id,
                custom_type_id=custom_type_id,
                reason=optional_text(reason, "Reason"),
            )
        )
        self._notifications.leave_requested(
            approver_id=approver.user_id,
            requester_name=user.display_name,
            start_date=start_date,
            end_date=end_date,
        )
        return request_id

    def edit(
        self,
        *,
        user_id: int,
        request_id: int,
        start_date: Optional[date],
        end_date: Optional[date],
        reason: str = "",
    ) -> None:
        self._validate_range(start_date, end_date)

        req = self._get_pending(request_id)
        if req.user_id != int(user_id):
            raise AuthorizationError("You can only edit your own leave requests")

        self._ensure_no_overlap(self._own_requests(req.user_id), start_date, end_date, exclude_id=req.request_id)

        ok = self._leaves.update_dates(
            request_id=req.request_id,
            start_date=start_date,
            end_date=end_date,
            reason=optional_text(reason, "Reason"),
        )
        if not ok:
            raise ValidationError("Failed to update leave request")

    def delete(self, *, current_role: Role, user_id: int, request_id: int) -> None:
        req = self._leaves.get(request_id=int(request_id))
        if not req:
            raise ValidationError("Leave request does not exist")
        if current_role != Role.ADMIN and req.user_id != int(user_id):
            raise AuthorizationError("You can only delete your own leave requests")

        if not self._leaves.delete(request_id=req.request_id):
            raise ValidationError("Failed to delete leave request")

    # ---- Approver actions ----
    def _decide(
        self,
        *,
        current_role: Role,
        decider_id: int,
        request_id: int,
        status: RequestStatus,
        rejection_reason: Optional[str] = None,
    ) -> None:
        req = self._get_pending(request_id)
        self._require_decider(current_role=current_role, decider_id=decider_id, req=req)
        if not can_transition(req.status, status):
            raise ValidationError("Leave request was already processed")

        ok = self._leaves.decide(
            request_id=req.request_id,
            status=status,
            decided_by=int(decider_id),
            rejection_reason=rejection_reason,
        )
        if not ok:
            raise ValidationError("Failed to update leave request")

        self._notifications.leave_decided(
            user_id=req.user_id,
            status=status,
            start_date=req.start_date,
            end_date=req.end_date,
        )

    def approve(self, *, current_role: Role, decider_id: int, request_id: int) -> None:
        self._decide(
            current_role=current_role,
            decider_id=decider_id,
            request_id=request_id,
            status=RequestStatus.APPROVED,
        )

    def reject(self, *, current_role: Role, decider_id: int, request_id: int, rejection_reason: str = "") -> None:
        self._decide(
            current_role=current_role,
            decider_id=decider_id,
            request_id=request_id,
            status=RequestStatus.REJECTED,
            rejection_reason=optional_text(rejection_reason, "Rejection reason"),
        )

    # ---- Listings ----
    def _to_ui(self, rows: Sequence[LeaveRequest]) -> list[dict]:
        names = {u.user_id: u.display_name for u in self._users.list_by_ids(sorted({r.user_id for r in rows}))}
        return [
            {
                "id": r.request_id,
                "user_id": r.user_id,
                "user_name": names.get(r.user_id, "Unknown"),
                "type": r.leave_type.value,
                "custom_type_id": r.custom_type_id,
                "start_date": r.start_date.strftime("%Y-%m-%d"),
                "end_date": r.end_date.strftime("%Y-%m-%d"),
                "reason": r.reason or "",
                "status": r.status.value,
                "approver_id": r.approver_id,
                "rejection_reason": r.rejection_reason or "",
                "created_at": r.created_at.strftime("%Y-%m-%d %H:%M"),
            }
            for r in rows
        ]

    def list_history(
        self,
        *,
        current_role: Role,
        user_id: int,
        filters: Optional[LeaveHistoryFilter] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[dict]:
        user_ids = None if current_role in {Role.LEADER, Role.ADMIN} else [int(user_id)]
        rows = self._leaves.list_requests(user_ids=user_ids, filters=filters, limit=limit)
        return self._to_ui(rows)

    def _team_of(self, current_role: Role, user_id: int) -> Sequence[User]:
        if current_role not in {Role.LEADER, Role.ADMIN}:
            raise AuthorizationError("Only leaders and admins can view team requests")
        leader = self._users.get_by_id(int(user_id))
        if not leader or leader.team_id is None:
            raise ValidationError("You are not assigned to a team")
        return self._users.list_team_members(leader.team_id)

    def list_team_pending(self, *, current_role: Role, user_id: int) -> list[dict]:
        members = self._team_of(current_role, user_id)
        if not members:
            return []
        rows = self._leaves.list_requests(
            user_ids=[m.user_id for m in members],
            status=RequestStatus.PENDING,
        )
        return self._to_ui(rows)

    def list_leave_types(self) -> list[dict]:
        standard = [{"value": t.value, "label": f"{t.value.capitalize()} Leave"} for t in STANDARD_LEAVE_TYPES]
        custom = [{"value": str(t.type_id), "label": t.name} for t in self._leave_types.list_all()]
        return standard + custom
