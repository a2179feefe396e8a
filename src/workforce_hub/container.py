from __future__ import annotations

from dataclasses import dataclass

from .attendance.aggregator import AttendanceAggregator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_LEAVE_QUOTA
from .database.connection import DBConfig, DatabaseConnection
from .leave.balance import LeaveBalanceCounter
from .leave.mysql_leave_repository import MySQLLeaveRepository, MySQLLeaveTypeRepository
from .leave.repository import LeaveRepository, LeaveTypeRepository
from .leave.service import LeaveService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .organization.service import TeamDashboardService
from .rooms.mysql_booking_repository import MySQLBookingRepository
from .rooms.repository import BookingRepository
from .rooms.service import BookingService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    leave_repo: LeaveRepository
    leave_types_repo: LeaveTypeRepository
    bookings_repo: BookingRepository
    notifications_repo: NotificationRepository

    notification_service: NotificationService
    attendance_service: AttendanceService
    leave_service: LeaveService
    booking_service: BookingService
    team_dashboard_service: TeamDashboardService


def wire(
    *,
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    leave_repo: LeaveRepository,
    leave_types_repo: LeaveTypeRepository,
    bookings_repo: BookingRepository,
    notifications_repo: NotificationRepository,
    default_leave_quota: int = DEFAULT_LEAVE_QUOTA,
) -> Container:
    """Build services on top of any repository implementations (MySQL or in-memory)."""
    notification_service = NotificationService(notifications_repo)
    attendance_service = AttendanceService(attendance_repo, users_repo)
    leave_service = LeaveService(
        leave_repo,
        leave_types_repo,
        users_repo,
        notification_service,
        balance=LeaveBalanceCounter(default_quota=default_leave_quota),
    )
    booking_service = BookingService(bookings_repo, users_repo, notification_service)
    team_dashboard_service = TeamDashboardService(
        users_repo,
        attendance_repo,
        leave_repo,
        aggregator=AttendanceAggregator(),
    )

    return Container(
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        leave_types_repo=leave_types_repo,
        bookings_repo=bookings_repo,
        notifications_repo=notifications_repo,
        notification_service=notification_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        booking_service=booking_service,
        team_dashboard_service=team_dashboard_service,
    )


def build_container(*, db_config: dict, default_leave_quota: int = DEFAULT_LEAVE_QUOTA) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        leave_types_repo=MySQLLeaveTypeRepository(conn),
        bookings_repo=MySQLBookingRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        default_leave_quota=default_leave_quota,
    )
