from datetime import datetime

from src.lesson_calendar.lesson_calendar.attendance.factory import AttendanceStrategyFactory
from src.lesson_calendar.lesson_calendar.attendance.strategies.late_strategy import LateStrategy
from src.lesson_calendar.lesson_calendar.attendance.strategies.present_strategy import PresentStrategy
from src.lesson_calendar.lesson_calendar.core.enums import AttendanceStatus, LessonStatus
from src.lesson_calendar.lesson_calendar.lessons.model import Lesson


def _lesson(start: datetime) -> Lesson:
    return Lesson(
        lesson_id="l1",
        group_id="g1",
        instructor_id="instructor",
        scheduled_at=start,
        duration_minutes=50,
        status=LessonStatus.SCHEDULED,
        student_id="student",
    )


def test_factory_checkin_present_within_grace():
    lesson = _lesson(datetime(2025, 1, 1, 8, 0))
    now = datetime(2025, 1, 1, 8, 4, 59)

    strategy = AttendanceStrategyFactory().for_checkin(now=now, lesson=lesson, grace_minutes=5)

    assert isinstance(strategy, PresentStrategy)
    assert strategy.decide_checkin(now=now, lesson=lesson, grace_minutes=5).status == AttendanceStatus.PRESENT


def test_factory_checkin_present_exactly_at_threshold():
    lesson = _lesson(datetime(2025, 1, 1, 8, 0))

    strategy = AttendanceStrategyFactory().for_checkin(now=datetime(2025, 1, 1, 8, 5), lesson=lesson, grace_minutes=5)

    assert isinstance(strategy, PresentStrategy)


def test_factory_checkin_late_after_grace():
    lesson = _lesson(datetime(2025, 1, 1, 8, 0))
    now = datetime(2025, 1, 1, 8, 5, 1)

    strategy = AttendanceStrategyFactory().for_checkin(now=now, lesson=lesson, grace_minutes=5)

    assert isinstance(strategy, LateStrategy)
    assert strategy.decide_checkin(now=now, lesson=lesson, grace_minutes=5).status == AttendanceStatus.LATE


def test_factory_early_arrival_is_present():
    lesson = _lesson(datetime(2025, 1, 1, 8, 0))

    strategy = AttendanceStrategyFactory().for_checkin(now=datetime(2025, 1, 1, 7, 40), lesson=lesson, grace_minutes=5)

    assert isinstance(strategy, PresentStrategy)


def test_factory_respects_configured_grace():
    lesson = _lesson(datetime(2025, 1, 1, 8, 0))

    strategy = AttendanceStrategyFactory().for_checkin(now=datetime(2025, 1, 1, 8, 9), lesson=lesson, grace_minutes=10)

    assert isinstance(strategy, PresentStrategy)
