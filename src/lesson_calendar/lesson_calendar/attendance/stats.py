from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping, Optional

from ..core.enums import AttendanceStatus, LessonStatus
from ..lessons.model import Lesson
from .model import AttendanceRecord, AttendanceStats


def calculate_attendance_stats(
    lessons: Iterable[Lesson],
    records: Mapping[str, Optional[AttendanceRecord]],
) -> AttendanceStats:
    """Count attendance outcomes over completed lessons only.

    `records` maps lesson_id to that member's record (or None).
    """
    completed = [lesson for lesson in lessons if lesson.status == LessonStatus.COMPLETED]
    counts: Counter[AttendanceStatus] = Counter()
    for lesson in completed:
        rec = records.get(lesson.lesson_id)
        if rec is not None:
            counts[rec.status] += 1

    return AttendanceStats(
        total=len(completed),
        present=counts[AttendanceStatus.PRESENT],
        late=counts[AttendanceStatus.LATE],
        early_leave=counts[AttendanceStatus.EARLY_LEAVE],
        absent=counts[AttendanceStatus.ABSENT],
        excused=counts[AttendanceStatus.EXCUSED],
    )
