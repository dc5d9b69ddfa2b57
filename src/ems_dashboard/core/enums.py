from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role of an authenticated principal, used for route gating."""

    ADMIN = "admin"
    EMPLOYEE = "employee"

    @property
    def home_route(self) -> str:
        return "/admin" if self is Role.ADMIN else "/employee"


class AttendanceStatus(str, Enum):
    """Daily attendance status stored in attendance_records."""

    PRESENT = "present"
    ABSENT = "absent"
    OVERTIME = "overtime"
    HALFDAY = "halfday"


class TaskStatus(str, Enum):
    """Task lifecycle: pending -> accepted -> completed."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"

    @property
    def next_status(self) -> "TaskStatus | None":
        return {
            TaskStatus.PENDING: TaskStatus.ACCEPTED,
            TaskStatus.ACCEPTED: TaskStatus.COMPLETED,
        }.get(self)


class AuthState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class AuthEvent(str, Enum):
    """Events emitted by the auth gateway to its subscribers."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
