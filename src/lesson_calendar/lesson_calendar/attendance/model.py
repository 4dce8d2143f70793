from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceQrCode:
    """Scan code of one lesson session, valid for one group until expires_at."""

    code: str
    group_id: str
    lesson_id: str
    expires_at: datetime


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: at most one per (lesson_id, member_id)."""

    lesson_id: str
    member_id: str
    status: AttendanceStatus
    check_in_at: datetime
    attendance_id: Optional[int] = None


REJECTION_MESSAGES = {
    "invalid code": "This QR code is not valid.",
    "expired": "This QR code has expired (the lesson is over).",
    "duplicate": "Your attendance was already recorded.",
    "storage error": "Something went wrong while recording attendance. Please try again.",
}

ACCEPTED_MESSAGES = {
    AttendanceStatus.PRESENT: "Checked in!",
    AttendanceStatus.LATE: "Checked in as late.",
}


@dataclass(frozen=True)
class CheckInResult:
    """Outcome of one scan: Accepted(present|late) or Rejected(reason)."""

    accepted: bool
    message: str
    status: Optional[AttendanceStatus] = None
    reason: Optional[str] = None
    lesson_scheduled_at: Optional[datetime] = None
    member_name: Optional[str] = None

    @classmethod
    def accept(cls, status: AttendanceStatus, *, lesson_scheduled_at: datetime, member_name: str) -> "CheckInResult":
        return cls(
            accepted=True,
            message=ACCEPTED_MESSAGES[status],
            status=status,
            lesson_scheduled_at=lesson_scheduled_at,
            member_name=member_name,
        )

    @classmethod
    def reject(cls, reason: str) -> "CheckInResult":
        return cls(accepted=False, reason=reason, message=REJECTION_MESSAGES.get(reason, reason))

    def to_dict(self) -> dict:
        if not self.accepted:
            return {"success": False, "reason": self.reason, "message": self.message}
        return {
            "success": True,
            "status": self.status.value if self.status else None,
            "message": self.message,
            "lessonInfo": {
                "scheduledAt": self.lesson_scheduled_at.isoformat() if self.lesson_scheduled_at else None,
                "memberName": self.member_name or "",
            },
        }


@dataclass(frozen=True)
class AttendanceStats:
    total: int = 0
    present: int = 0
    late: int = 0
    early_leave: int = 0
    absent: int = 0
    excused: int = 0

    @property
    def rate(self) -> int:
        """Present share of completed lessons, in whole percent (0 when none)."""
        if self.total == 0:
            return 0
        return int(round(self.present / self.total * 100))
