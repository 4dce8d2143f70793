from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RequestStatus


@dataclass(frozen=True)
class RescheduleRequest:
    request_id: int
    lesson_id: str
    requested_by: str
    requested_date: datetime
    reason: str
    status: RequestStatus
    created_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None


REJECTION_MESSAGES = {
    "no lesson": "Please choose a lesson to reschedule.",
    "no datetime": "Please choose the new date and time.",
    "missing reason": "Please enter a reason for the change.",
    "past date": "Please choose a date from today onwards.",
    "beyond horizon": "Only dates within the next 3 weeks can be requested.",
    "duplicate pending": "This lesson already has a pending change request.",
    "submission failed": "The change request could not be submitted.",
}


@dataclass(frozen=True)
class RescheduleResult:
    """Outcome of one submission: Submitted(request_id) or Rejected(reason)."""

    submitted: bool
    message: str
    reason: Optional[str] = None
    request_id: Optional[int] = None

    @classmethod
    def ok(cls, request_id: int) -> "RescheduleResult":
        return cls(submitted=True, message="Your change request was submitted.", request_id=request_id)

    @classmethod
    def reject(cls, reason: str) -> "RescheduleResult":
        return cls(submitted=False, reason=reason, message=REJECTION_MESSAGES.get(reason, reason))

    def to_dict(self) -> dict:
        if self.submitted:
            return {"success": True, "requestId": self.request_id, "message": self.message}
        return {"success": False, "reason": self.reason, "message": self.message}
