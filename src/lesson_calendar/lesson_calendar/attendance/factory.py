from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..common.datetime_utils import to_local_naive
from ..lessons.model import Lesson
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def late_threshold(self, *, lesson: Lesson, grace_minutes: int) -> datetime:
        return to_local_naive(lesson.scheduled_at) + timedelta(minutes=grace_minutes)

    def for_checkin(self, *, now: datetime, lesson: Lesson, grace_minutes: int) -> AttendanceStrategy:
        if to_local_naive(now) <= self.late_threshold(lesson=lesson, grace_minutes=grace_minutes):
            return PresentStrategy()
        return LateStrategy()
