from __future__ import annotations

from enum import Enum


class MemberRole(str, Enum):
    """Position of a member inside a group."""

    INSTRUCTOR = "instructor"
    STUDENT = "student"
    GUARDIAN = "guardian"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    LATE = "late"
    EARLY_LEAVE = "early_leave"
    ABSENT = "absent"
    EXCUSED = "excused"


class LessonStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RequestStatus(str, Enum):
    """Approval workflow state (reschedule requests, reservations)."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class CalendarItemKind(str, Enum):
    EVENT = "event"
    LESSON = "lesson"
    RESERVATION = "reservation"
    RECURRING = "recurring"


class OwnershipFilter(str, Enum):
    ALL = "all"
    MINE = "mine"
