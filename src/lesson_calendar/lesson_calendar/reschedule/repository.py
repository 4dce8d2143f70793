from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import RescheduleRequest


class RescheduleRepository(Protocol):
    def create(self, *, lesson_id: str, requested_by: str, requested_date: datetime, reason: str) -> int:
        """Append one pending request and return its id."""

        raise NotImplementedError

    def get_by_id(self, *, request_id: int) -> Optional[RescheduleRequest]:
        raise NotImplementedError

    def list_for_lesson(self, *, lesson_id: str, status: Optional[RequestStatus] = None) -> Sequence[RescheduleRequest]:
        raise NotImplementedError

    def list_pending_for_instructor(self, *, group_id: str, instructor_id: str) -> Sequence[RescheduleRequest]:
        """Pending requests on lessons taught by instructor_id, oldest first."""

        raise NotImplementedError

    def decide(self, *, request_id: int, status: RequestStatus, reviewed_by: str) -> bool:
        """Move a pending request to status; False when it was no longer pending."""

        raise NotImplementedError

    def approve(self, *, request_id: int, reviewed_by: str, lesson_id: str, scheduled_at: datetime) -> bool:
        """Approve a pending request and move its lesson in one transaction.

        False (and nothing written) when the request was no longer pending.
        """

        raise NotImplementedError
