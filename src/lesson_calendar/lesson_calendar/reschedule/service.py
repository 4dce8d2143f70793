from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence, Union

from loguru import logger

from ..common.datetime_utils import now_local, parse_hhmm, start_of_day, to_local_naive
from ..common.validators import require_positive
from ..core.constants import (
    DEFAULT_RESCHEDULE_HORIZON_WEEKS,
    RESCHEDULE_SLOT_END_HOUR,
    RESCHEDULE_SLOT_MINUTES,
    RESCHEDULE_SLOT_START_HOUR,
)
from ..core.enums import LessonStatus, RequestStatus
from ..core.exceptions import AuthorizationError, RejectedError, StorageError, ValidationError
from ..lessons.model import Lesson
from ..lessons.repository import LessonRepository
from ..members.model import ViewerContext
from .model import RescheduleRequest, RescheduleResult
from .repository import RescheduleRepository


def time_slots(
    *,
    start_hour: int = RESCHEDULE_SLOT_START_HOUR,
    end_hour: int = RESCHEDULE_SLOT_END_HOUR,
    step_minutes: int = RESCHEDULE_SLOT_MINUTES,
) -> list[str]:
    """HH:MM options offered by the time picker, end_hour exclusive."""
    out: list[str] = []
    minutes = start_hour * 60
    while minutes < end_hour * 60:
        out.append(f"{minutes // 60:02d}:{minutes % 60:02d}")
        minutes += step_minutes
    return out


class RescheduleService:
    """Member-initiated lesson moves, bounded to a rolling horizon from today."""

    def __init__(
        self,
        requests: RescheduleRepository,
        lessons: LessonRepository,
        *,
        horizon_weeks: int = DEFAULT_RESCHEDULE_HORIZON_WEEKS,
        allow_multiple_pending: bool = True,
    ):
        self._requests = requests
        self._lessons = lessons
        self._horizon_weeks = require_positive(horizon_weeks, "horizon_weeks")
        self._allow_multiple_pending = bool(allow_multiple_pending)

    def window(self, now: datetime | None = None) -> tuple[datetime, datetime]:
        today = start_of_day(to_local_naive(now or now_local()))
        return today, today + timedelta(weeks=self._horizon_weeks)

    def candidates(self, viewer: ViewerContext, *, now: datetime | None = None) -> list[Lesson]:
        """Scheduled lessons of the viewer strictly inside (today, today + horizon)."""
        today, horizon = self.window(now)
        lessons = self._lessons.list_for_student(
            group_id=viewer.group_id,
            student_id=viewer.user_id,
            start=today,
            end=horizon,
            status=LessonStatus.SCHEDULED,
        )
        return [lesson for lesson in lessons if self._is_candidate(lesson, today, horizon)]

    @staticmethod
    def _is_candidate(lesson: Lesson, today: datetime, horizon: datetime) -> bool:
        return lesson.status == LessonStatus.SCHEDULED and today < to_local_naive(lesson.scheduled_at) < horizon

    def submit(
        self,
        viewer: ViewerContext,
        *,
        lesson_id: Optional[str],
        requested_date: Optional[date],
        requested_time: Union[str, time, None],
        reason: Optional[str],
        now: datetime | None = None,
    ) -> RescheduleResult:
        try:
            request_id = self._submit(viewer, lesson_id, requested_date, requested_time, reason, now)
        except RejectedError as e:
            return RescheduleResult.reject(e.code)
        except StorageError:
            logger.exception("Failed to store reschedule request for lesson {}", lesson_id)
            return RescheduleResult.reject("submission failed")

        logger.info("Reschedule request {} created for lesson {} by {}", request_id, lesson_id, viewer.user_id)
        return RescheduleResult.ok(request_id)

    def _submit(self, viewer, lesson_id, requested_date, requested_time, reason, now) -> int:
        lesson_id = (lesson_id or "").strip()
        if not lesson_id:
            raise RejectedError("no lesson")

        today, horizon = self.window(now)
        lesson = self._lessons.get_by_id(lesson_id)
        if not lesson or lesson.group_id != viewer.group_id or lesson.student_id != viewer.user_id:
            raise RejectedError("no lesson")
        if not self._is_candidate(lesson, today, horizon):
            raise RejectedError("no lesson")

        requested_at = self._combine(requested_date, requested_time)
        if requested_at is None:
            raise RejectedError("no datetime")

        reason = (reason or "").strip()
        if not reason:
            raise RejectedError("missing reason")

        if requested_at < today:
            raise RejectedError("past date")
        if requested_at.date() > horizon.date():
            raise RejectedError("beyond horizon")

        if not self._allow_multiple_pending:
            if self._requests.list_for_lesson(lesson_id=lesson_id, status=RequestStatus.PENDING):
                raise RejectedError("duplicate pending")

        return self._requests.create(
            lesson_id=lesson_id,
            requested_by=viewer.user_id,
            requested_date=requested_at,
            reason=reason,
        )

    @staticmethod
    def _combine(requested_date: Optional[date], requested_time: Union[str, time, None]) -> Optional[datetime]:
        if requested_date is None or requested_time is None:
            return None
        if isinstance(requested_time, str):
            if not requested_time.strip():
                return None
            try:
                requested_time = parse_hhmm(requested_time)
            except ValueError:
                return None
        return datetime.combine(requested_date, requested_time)

    # Review
    def group_id_for(self, request_id: int) -> str:
        """Group owning the request, so a review route can build the viewer context."""
        req = self._requests.get_by_id(request_id=int(request_id))
        lesson = self._lessons.get_by_id(req.lesson_id) if req else None
        if not lesson:
            raise ValidationError("Request not found")
        return lesson.group_id

    def list_pending_for_instructor(self, viewer: ViewerContext) -> Sequence[RescheduleRequest]:
        return self._requests.list_pending_for_instructor(group_id=viewer.group_id, instructor_id=viewer.user_id)

    def _reviewable(self, viewer: ViewerContext, request_id: int) -> tuple[RescheduleRequest, Lesson]:
        req = self._requests.get_by_id(request_id=int(request_id))
        if not req:
            raise ValidationError("Request not found")

        lesson = self._lessons.get_by_id(req.lesson_id)
        if not lesson:
            raise ValidationError("Lesson not found")
        if lesson.group_id != viewer.group_id or lesson.instructor_id != viewer.user_id:
            raise AuthorizationError("Only the lesson's instructor can review this request")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("This request was already reviewed")
        return req, lesson

    def approve(self, viewer: ViewerContext, request_id: int) -> None:
        """Mark the request approved and move the lesson, as one unit of work.

        A storage failure leaves the request pending so it can be reviewed again.
        """
        req, lesson = self._reviewable(viewer, request_id)

        approved = self._requests.approve(
            request_id=req.request_id,
            reviewed_by=viewer.user_id,
            lesson_id=lesson.lesson_id,
            scheduled_at=req.requested_date,
        )
        if not approved:
            raise ValidationError("This request was already reviewed")

        logger.info("Reschedule request {} approved; lesson {} moved to {}", req.request_id, lesson.lesson_id, req.requested_date)

    def reject(self, viewer: ViewerContext, request_id: int) -> None:
        req, _ = self._reviewable(viewer, request_id)

        decided = self._requests.decide(
            request_id=req.request_id,
            status=RequestStatus.REJECTED,
            reviewed_by=viewer.user_id,
        )
        if not decided:
            raise ValidationError("This request was already reviewed")

        logger.info("Reschedule request {} rejected by {}", req.request_id, viewer.user_id)
