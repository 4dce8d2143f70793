from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from src.lesson_calendar.lesson_calendar.core.enums import LessonStatus, MemberRole, RequestStatus
from src.lesson_calendar.lesson_calendar.core.exceptions import AuthorizationError, RejectedError, StorageError, ValidationError
from src.lesson_calendar.lesson_calendar.lessons.model import Lesson
from src.lesson_calendar.lesson_calendar.members.model import ViewerContext
from src.lesson_calendar.lesson_calendar.reschedule.model import RescheduleRequest
from src.lesson_calendar.lesson_calendar.reschedule.service import RescheduleService, time_slots

NOW = datetime(2026, 3, 2, 9, 30)
TODAY = date(2026, 3, 2)


class FakeRescheduleRepo:
    def __init__(self, lessons: FakeLessons):
        self._lessons = lessons
        self._next_id = 1
        self.requests: dict[int, RescheduleRequest] = {}
        self.fail_with: Optional[Exception] = None

    def create(self, *, lesson_id, requested_by, requested_date, reason):
        if self.fail_with is not None:
            raise self.fail_with
        rid = self._next_id
        self._next_id += 1
        self.requests[rid] = RescheduleRequest(
            request_id=rid,
            lesson_id=lesson_id,
            requested_by=requested_by,
            requested_date=requested_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=NOW,
        )
        return rid

    def get_by_id(self, *, request_id):
        return self.requests.get(int(request_id))

    def list_for_lesson(self, *, lesson_id, status=None):
        return [r for r in self.requests.values() if r.lesson_id == lesson_id and (status is None or r.status == status)]

    def list_pending_for_instructor(self, *, group_id, instructor_id):
        return [r for r in self.requests.values() if r.status == RequestStatus.PENDING]

    def decide(self, *, request_id, status, reviewed_by):
        req = self.requests.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.requests[int(request_id)] = replace(req, status=status, reviewed_by=reviewed_by, reviewed_at=NOW)
        return True

    def approve(self, *, request_id, reviewed_by, lesson_id, scheduled_at):
        req = self.requests.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        if self.fail_with is not None:
            raise self.fail_with
        self.requests[int(request_id)] = replace(req, status=RequestStatus.APPROVED, reviewed_by=reviewed_by, reviewed_at=NOW)
        self._lessons.lessons[lesson_id] = replace(self._lessons.lessons[lesson_id], scheduled_at=scheduled_at)
        return True


class FakeLessons:
    def __init__(self, *lessons: Lesson):
        self.lessons = {lesson.lesson_id: lesson for lesson in lessons}

    def get_by_id(self, lesson_id):
        return self.lessons.get(lesson_id)

    def list_for_student(self, *, group_id, student_id, start, end, status=None):
        return sorted(
            (
                lesson
                for lesson in self.lessons.values()
                if lesson.group_id == group_id
                and lesson.student_id == student_id
                and start <= lesson.scheduled_at <= end
                and (status is None or lesson.status == status)
            ),
            key=lambda lesson: lesson.scheduled_at,
        )


def _lesson(lesson_id: str, days_ahead: int, *, hour=15, status=LessonStatus.SCHEDULED, student_id="s1") -> Lesson:
    return Lesson(
        lesson_id=lesson_id,
        group_id="g1",
        instructor_id="t1",
        scheduled_at=datetime.combine(TODAY, datetime.min.time()) + timedelta(days=days_ahead, hours=hour),
        duration_minutes=50,
        status=status,
        student_id=student_id,
    )


def _viewer(user_id="s1", role=MemberRole.STUDENT) -> ViewerContext:
    return ViewerContext(group_id="g1", user_id=user_id, member_id=f"m-{user_id}", display_name=user_id, role=role)


def _svc(*lessons, **kw):
    lesson_repo = FakeLessons(*lessons)
    repo = FakeRescheduleRepo(lesson_repo)
    return RescheduleService(repo, lesson_repo, **kw), repo, lesson_repo


def test_candidates_are_bounded_by_three_week_horizon():
    svc, _, _ = _svc(
        _lesson("in-20", 20),
        _lesson("out-22", 22),
        _lesson("tomorrow", 1),
        _lesson("yesterday", -1),
        _lesson("done", 3, status=LessonStatus.COMPLETED),
        _lesson("someone-else", 2, student_id="s2"),
    )

    ids = [lesson.lesson_id for lesson in svc.candidates(_viewer(), now=NOW)]

    assert ids == ["tomorrow", "in-20"]


def test_candidates_exclude_lesson_exactly_at_start_of_today():
    svc, _, _ = _svc(_lesson("midnight", 0, hour=0), _lesson("later-today", 0, hour=18))

    ids = [lesson.lesson_id for lesson in svc.candidates(_viewer(), now=NOW)]

    assert ids == ["later-today"]


def test_request_at_horizon_day_is_accepted():
    svc, repo, _ = _svc(_lesson("l1", 5))

    result = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=21), requested_time="10:00", reason="School trip", now=NOW)

    assert result.submitted
    req = repo.requests[result.request_id]
    assert req.status == RequestStatus.PENDING
    assert req.requested_date == datetime(2026, 3, 23, 10, 0)
    assert req.requested_by == "s1"
    assert req.reason == "School trip"


def test_request_for_yesterday_is_rejected():
    svc, repo, _ = _svc(_lesson("l1", 5))

    result = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY - timedelta(days=1), requested_time="10:00", reason="x", now=NOW)

    assert not result.submitted
    assert result.reason == "past date"
    assert repo.requests == {}


def test_request_earlier_today_is_allowed():
    svc, _, _ = _svc(_lesson("l1", 5))

    result = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY, requested_time="07:00", reason="x", now=NOW)

    assert result.submitted


def test_request_beyond_horizon_is_rejected():
    svc, _, _ = _svc(_lesson("l1", 5))

    result = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=22), requested_time="10:00", reason="x", now=NOW)

    assert result.reason == "beyond horizon"


@pytest.mark.parametrize(
    "lesson_id, requested_date, requested_time, reason, expected",
    [
        (None, TODAY, "10:00", "x", "no lesson"),
        ("missing", TODAY, "10:00", "x", "no lesson"),
        ("l1", None, "10:00", "x", "no datetime"),
        ("l1", TODAY, "", "x", "no datetime"),
        ("l1", TODAY, "25:99", "x", "no datetime"),
        ("l1", TODAY, "10:00", "   ", "missing reason"),
        ("l1", TODAY - timedelta(days=1), "10:00", "", "missing reason"),
    ],
)
def test_validation_order(lesson_id, requested_date, requested_time, reason, expected):
    svc, repo, _ = _svc(_lesson("l1", 5))

    result = svc.submit(
        _viewer(),
        lesson_id=lesson_id,
        requested_date=requested_date,
        requested_time=requested_time,
        reason=reason,
        now=NOW,
    )

    assert result.reason == expected
    assert result.message
    assert repo.requests == {}


def test_cannot_request_for_someone_elses_lesson():
    svc, _, _ = _svc(_lesson("l1", 5, student_id="s2"))

    result = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY, requested_time="10:00", reason="x", now=NOW)

    assert result.reason == "no lesson"


def test_multiple_pending_requests_allowed_by_default():
    svc, repo, _ = _svc(_lesson("l1", 5))

    for hour in ("10:00", "11:00"):
        assert svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=3), requested_time=hour, reason="x", now=NOW).submitted

    assert len(repo.list_for_lesson(lesson_id="l1", status=RequestStatus.PENDING)) == 2


def test_duplicate_pending_guard_when_configured():
    svc, repo, _ = _svc(_lesson("l1", 5), allow_multiple_pending=False)
    svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=3), requested_time="10:00", reason="x", now=NOW)

    result = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=4), requested_time="10:00", reason="x", now=NOW)

    assert result.reason == "duplicate pending"
    assert len(repo.requests) == 1


def test_storage_failure_is_generic():
    svc, repo, _ = _svc(_lesson("l1", 5))
    repo.fail_with = StorageError("Lost connection to MySQL server")

    result = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY, requested_time="18:00", reason="x", now=NOW)

    assert not result.submitted
    assert result.reason == "submission failed"
    assert "MySQL" not in result.message
    assert repo.requests == {}


def test_time_slots_cover_morning_to_evening():
    slots = time_slots()

    assert slots[0] == "07:00"
    assert slots[1] == "07:30"
    assert slots[-1] == "21:30"
    assert len(slots) == 30


def test_approve_moves_lesson_and_closes_request():
    svc, repo, lessons = _svc(_lesson("l1", 5))
    rid = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=6), requested_time="16:30", reason="x", now=NOW).request_id

    svc.approve(_viewer("t1", MemberRole.INSTRUCTOR), rid)

    assert repo.requests[rid].status == RequestStatus.APPROVED
    assert repo.requests[rid].reviewed_by == "t1"
    assert lessons.get_by_id("l1").scheduled_at == datetime(2026, 3, 8, 16, 30)


def test_reject_leaves_lesson_untouched():
    svc, repo, lessons = _svc(_lesson("l1", 5))
    before = lessons.get_by_id("l1").scheduled_at
    rid = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=6), requested_time="16:30", reason="x", now=NOW).request_id

    svc.reject(_viewer("t1", MemberRole.INSTRUCTOR), rid)

    assert repo.requests[rid].status == RequestStatus.REJECTED
    assert lessons.get_by_id("l1").scheduled_at == before


def test_only_lesson_instructor_can_review():
    svc, _, _ = _svc(_lesson("l1", 5))
    rid = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=6), requested_time="16:30", reason="x", now=NOW).request_id

    with pytest.raises(AuthorizationError):
        svc.approve(_viewer("t2", MemberRole.INSTRUCTOR), rid)
    with pytest.raises(AuthorizationError):
        svc.approve(_viewer(), rid)


def test_decided_request_cannot_be_reviewed_again():
    svc, _, _ = _svc(_lesson("l1", 5))
    rid = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=6), requested_time="16:30", reason="x", now=NOW).request_id
    instructor = _viewer("t1", MemberRole.INSTRUCTOR)
    svc.reject(instructor, rid)

    with pytest.raises(ValidationError):
        svc.approve(instructor, rid)


def test_list_pending_for_instructor():
    svc, _, _ = _svc(_lesson("l1", 5))
    svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=6), requested_time="16:30", reason="x", now=NOW)

    pending = svc.list_pending_for_instructor(_viewer("t1", MemberRole.INSTRUCTOR))

    assert [r.lesson_id for r in pending] == ["l1"]


@pytest.mark.parametrize(
    "lesson",
    [
        _lesson("l1", -10, status=LessonStatus.COMPLETED),
        _lesson("l1", 3, status=LessonStatus.CANCELLED),
        _lesson("l1", 60),
        _lesson("l1", -1),
    ],
)
def test_only_candidate_lessons_can_be_rescheduled(lesson):
    svc, repo, _ = _svc(lesson)

    result = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=2), requested_time="10:00", reason="x", now=NOW)

    assert result.reason == "no lesson"
    assert repo.requests == {}


def test_failed_move_keeps_request_pending_for_retry():
    svc, repo, lessons = _svc(_lesson("l1", 5))
    before = lessons.get_by_id("l1").scheduled_at
    rid = svc.submit(_viewer(), lesson_id="l1", requested_date=TODAY + timedelta(days=6), requested_time="16:30", reason="x", now=NOW).request_id
    instructor = _viewer("t1", MemberRole.INSTRUCTOR)
    repo.fail_with = StorageError("Lost connection to MySQL server")

    with pytest.raises(StorageError):
        svc.approve(instructor, rid)

    assert repo.requests[rid].status == RequestStatus.PENDING
    assert lessons.get_by_id("l1").scheduled_at == before

    repo.fail_with = None
    svc.approve(instructor, rid)

    assert repo.requests[rid].status == RequestStatus.APPROVED
    assert lessons.get_by_id("l1").scheduled_at == datetime(2026, 3, 8, 16, 30)


def test_rejection_carries_rule_code_as_validation_error():
    err = RejectedError("past date")

    assert isinstance(err, ValidationError)
    assert err.code == "past date"
    assert str(err) == "past date"
