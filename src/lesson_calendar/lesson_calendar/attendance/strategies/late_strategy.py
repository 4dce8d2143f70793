from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...lessons.model import Lesson
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, *, now: datetime, lesson: Lesson, grace_minutes: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE)
