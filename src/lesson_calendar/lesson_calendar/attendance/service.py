from __future__ import annotations

from datetime import datetime, timedelta

from loguru import logger

from ..common.datetime_utils import now_local, to_local_naive
from ..common.validators import require_non_empty, require_positive
from ..core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_QR_CODE_TTL_HOURS
from ..core.enums import LessonStatus
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    DuplicateError,
    ExpiredError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from ..lessons.repository import LessonRepository
from ..members.model import ViewerContext
from .factory import AttendanceStrategyFactory
from .model import AttendanceQrCode, AttendanceStats, CheckInResult
from .repository import AttendanceRepository
from .stats import calculate_attendance_stats


class AttendanceService:
    """Scan-to-check-in protocol.

    A scan walks Idle -> Validating -> Accepted(present|late) | Rejected(reason).
    The first failing check wins, in this order: unknown code, expired code,
    existing record, then the present/late decision and the insert.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        lessons: LessonRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
        qr_ttl_hours: int = DEFAULT_QR_CODE_TTL_HOURS,
    ):
        self._attendance = attendance
        self._lessons = lessons
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._grace_minutes = int(grace_minutes)
        self._qr_ttl_hours = require_positive(qr_ttl_hours, "qr_ttl_hours")

    def scan(self, viewer: ViewerContext, code: str, *, now: datetime | None = None) -> CheckInResult:
        now = to_local_naive(now or now_local())
        try:
            result = self._check_in(viewer, (code or "").strip(), now)
        except DomainError as e:
            logger.info("Check-in rejected for member {} in group {}: {}", viewer.member_id, viewer.group_id, e.code)
            return CheckInResult.reject(e.code)

        logger.info(
            "Check-in accepted for member {} in group {}: {}",
            viewer.member_id,
            viewer.group_id,
            result.status.value if result.status else "",
        )
        return result

    def _check_in(self, viewer: ViewerContext, code: str, now: datetime) -> CheckInResult:
        if not code:
            raise NotFoundError("blank code")

        qr = self._attendance.get_qr_code(code=code, group_id=viewer.group_id)
        if not qr:
            raise NotFoundError(f"unknown code {code!r}")

        lesson = self._lessons.get_by_id(qr.lesson_id)
        if not lesson:
            raise NotFoundError(f"lesson {qr.lesson_id} not found")

        if now > to_local_naive(qr.expires_at):
            raise ExpiredError(f"code expired at {qr.expires_at}")

        if self._attendance.get_record(lesson_id=lesson.lesson_id, member_id=viewer.member_id):
            raise DuplicateError("attendance already recorded")

        strategy = self._factory.for_checkin(now=now, lesson=lesson, grace_minutes=self._grace_minutes)
        decision = strategy.decide_checkin(now=now, lesson=lesson, grace_minutes=self._grace_minutes)

        try:
            self._attendance.create_record(
                lesson_id=lesson.lesson_id,
                member_id=viewer.member_id,
                status=decision.status,
                check_in_at=now,
            )
        except StorageError:
            logger.exception("Failed to store attendance for lesson {}", lesson.lesson_id)
            raise

        return CheckInResult.accept(
            decision.status,
            lesson_scheduled_at=lesson.scheduled_at,
            member_name=viewer.display_name,
        )

    def issue_code(self, viewer: ViewerContext, lesson_id: str, *, now: datetime | None = None) -> AttendanceQrCode:
        """Return the lesson's live scan code, creating one when none is valid."""
        if not viewer.has_elevated_privilege:
            raise AuthorizationError("Only instructors can open attendance")
        lesson_id = require_non_empty(lesson_id, "lesson_id")

        lesson = self._lessons.get_by_id(lesson_id)
        if not lesson or lesson.group_id != viewer.group_id:
            raise ValidationError("Lesson not found")
        if lesson.status == LessonStatus.CANCELLED:
            raise ValidationError("Cannot open attendance for a cancelled lesson")

        now = to_local_naive(now or now_local())
        current = self._attendance.get_latest_qr_code_for_lesson(lesson_id=lesson_id)
        if current and to_local_naive(current.expires_at) >= now:
            return current

        epoch_ms = int(now.timestamp() * 1000)
        qr = AttendanceQrCode(
            code=f"{viewer.group_id}-{lesson_id}-{epoch_ms}",
            group_id=viewer.group_id,
            lesson_id=lesson_id,
            expires_at=now + timedelta(hours=self._qr_ttl_hours),
        )
        self._attendance.create_qr_code(
            code=qr.code,
            group_id=qr.group_id,
            lesson_id=qr.lesson_id,
            expires_at=qr.expires_at,
        )
        logger.info("Issued attendance code for lesson {} (expires {})", lesson_id, qr.expires_at)
        return qr

    def stats_for_member(self, viewer: ViewerContext, *, start: datetime, end: datetime) -> AttendanceStats:
        """Attendance counts of the viewer over completed lessons in [start, end].

        Lessons reference students by user id; records by member id.
        """
        lessons = self._lessons.list_for_student(
            group_id=viewer.group_id,
            student_id=viewer.user_id,
            start=start,
            end=end,
            status=LessonStatus.COMPLETED,
        )
        records = self._attendance.list_records_for_member(
            member_id=viewer.member_id,
            lesson_ids=[lesson.lesson_id for lesson in lessons],
        )
        by_lesson = {r.lesson_id: r for r in records}
        return calculate_attendance_stats(lessons, by_lesson)
