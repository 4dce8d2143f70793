from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from ...lessons.model import Lesson
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Check-in up to the grace threshold after the lesson start."""

    def decide_checkin(self, *, now: datetime, lesson: Lesson, grace_minutes: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
