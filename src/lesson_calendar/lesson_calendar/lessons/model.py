from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.enums import LessonStatus


@dataclass(frozen=True)
class Lesson:
    """Domain entity: one lesson session (read-only for the core)."""

    lesson_id: str
    group_id: str
    instructor_id: str
    scheduled_at: datetime
    duration_minutes: int
    status: LessonStatus
    student_id: Optional[str] = None
    room_id: Optional[str] = None

    @property
    def ends_at(self) -> datetime:
        return self.scheduled_at + timedelta(minutes=int(self.duration_minutes))
