"""Per-kind projection of raw source records into CalendarItem.

Each projector returns None for a record it cannot place on the calendar
(missing/unparseable timestamps, end before start, cancelled or rejected
rows); the caller skips it and keeps aggregating.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, Optional

from loguru import logger

from ..common.datetime_utils import coerce_datetime, end_of_day, iter_dates, js_weekday, start_of_day
from ..core.enums import CalendarItemKind, LessonStatus, RequestStatus
from ..lessons.model import Lesson
from ..members.model import GroupMember
from .model import CalendarEvent, CalendarItem, CalendarSources, RoomReservation


def _span(kind: CalendarItemKind, record_id: str, start_raw, end_raw) -> Optional[tuple[datetime, datetime]]:
    start = coerce_datetime(start_raw)
    end = coerce_datetime(end_raw)
    if start is None or end is None:
        logger.debug("Skipping {} {}: missing or malformed start/end ({!r}, {!r})", kind.value, record_id, start_raw, end_raw)
        return None
    if end < start:
        logger.debug("Skipping {} {}: end {} before start {}", kind.value, record_id, end, start)
        return None
    return start, end


def project_event(event: CalendarEvent) -> Optional[CalendarItem]:
    span = _span(CalendarItemKind.EVENT, event.event_id, event.start_at, event.end_at)
    if span is None:
        return None

    start, end = span
    if event.all_day:
        start, end = start_of_day(start), end_of_day(end)

    return CalendarItem(
        item_id=f"event:{event.event_id}",
        kind=CalendarItemKind.EVENT,
        title=event.title,
        start_at=start,
        end_at=end,
        all_day=bool(event.all_day),
        owner_id=event.user_id,
        color_key=event.location_id or event.group_id,
        group_id=event.group_id,
        location_id=event.location_id,
        is_academy_holiday=bool(event.is_academy_holiday),
    )


def project_lesson(lesson: Lesson, *, title: Optional[str] = None) -> Optional[CalendarItem]:
    if lesson.status == LessonStatus.CANCELLED:
        return None

    start = coerce_datetime(lesson.scheduled_at)
    if start is None or lesson.duration_minutes is None or int(lesson.duration_minutes) < 0:
        logger.debug("Skipping lesson {}: unusable schedule", lesson.lesson_id)
        return None

    return CalendarItem(
        item_id=f"lesson:{lesson.lesson_id}",
        kind=CalendarItemKind.LESSON,
        title=title or "Lesson",
        start_at=start,
        end_at=start + timedelta(minutes=int(lesson.duration_minutes)),
        owner_id=lesson.instructor_id,
        color_key=lesson.room_id or lesson.group_id,
        group_id=lesson.group_id,
        location_id=lesson.room_id,
    )


def project_reservation(reservation: RoomReservation) -> Optional[CalendarItem]:
    if reservation.status == RequestStatus.REJECTED:
        return None

    span = _span(CalendarItemKind.RESERVATION, reservation.reservation_id, reservation.start_at, reservation.end_at)
    if span is None:
        return None

    start, end = span
    return CalendarItem(
        item_id=f"reservation:{reservation.reservation_id}",
        kind=CalendarItemKind.RESERVATION,
        title=reservation.title or f"Room {reservation.room_id}",
        start_at=start,
        end_at=end,
        owner_id=reservation.reserved_by,
        color_key=reservation.room_id,
        group_id=reservation.group_id,
        location_id=reservation.room_id,
    )


def expand_recurring(member: GroupMember, start: date, end: date) -> Iterator[CalendarItem]:
    """Place every weekly slot of a member on each matching date in [start, end]."""
    for day in iter_dates(start, end):
        weekday = js_weekday(day)
        for idx, slot in enumerate(member.lesson_schedule):
            if slot.day_of_week != weekday:
                continue
            slot_start = datetime.combine(day, slot.start_time)
            slot_end = datetime.combine(day, slot.end_time)
            if slot_end < slot_start:
                logger.debug("Skipping recurring slot {} of member {}: end before start", idx, member.member_id)
                continue
            yield CalendarItem(
                item_id=f"recurring:{member.member_id}:{day.isoformat()}:{idx}",
                kind=CalendarItemKind.RECURRING,
                title=member.display_name,
                start_at=slot_start,
                end_at=slot_end,
                owner_id=member.instructor_id,
                color_key=slot.room_id or member.group_id,
                group_id=member.group_id,
                location_id=slot.room_id,
            )


def project_sources(sources: CalendarSources, start: date, end: date) -> list[CalendarItem]:
    """Project all four kinds, in source order: events, lessons, reservations, recurring."""
    names = {m.user_id: m.display_name for m in sources.members}
    items: list[CalendarItem] = []

    items.extend(_compact(project_event(e) for e in sources.events))
    items.extend(_compact(project_lesson(lesson, title=names.get(lesson.student_id or "")) for lesson in sources.lessons))
    items.extend(_compact(project_reservation(r) for r in sources.reservations))
    for member in sources.members:
        items.extend(expand_recurring(member, start, end))

    return items


def _compact(items: Iterable[Optional[CalendarItem]]) -> list[CalendarItem]:
    return [i for i in items if i is not None]
