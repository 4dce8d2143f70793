from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LessonStatus
from .model import Lesson


class LessonRepository(Protocol):
    def get_by_id(self, lesson_id: str) -> Optional[Lesson]:
        raise NotImplementedError

    def list_for_student(
        self,
        *,
        group_id: str,
        student_id: str,
        start: datetime,
        end: datetime,
        status: Optional[LessonStatus] = None,
    ) -> Sequence[Lesson]:
        """Lessons with start <= scheduled_at <= end, ordered by scheduled_at."""

        raise NotImplementedError
