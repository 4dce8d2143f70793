from __future__ import annotations

from datetime import date, datetime, time

from src.lesson_calendar.lesson_calendar.calendar.engine import (
    CalendarAggregationEngine,
    belongs_to_day,
    color_keys,
    filter_by_owner,
    is_multi_day,
    sort_items,
    span_in_week,
)
from src.lesson_calendar.lesson_calendar.calendar.model import CalendarEvent, CalendarItem, CalendarSources, RoomReservation
from src.lesson_calendar.lesson_calendar.calendar.projection import expand_recurring, project_event, project_sources
from src.lesson_calendar.lesson_calendar.core.enums import (
    CalendarItemKind,
    LessonStatus,
    MemberRole,
    OwnershipFilter,
    RequestStatus,
)
from src.lesson_calendar.lesson_calendar.holidays.model import Holiday
from src.lesson_calendar.lesson_calendar.lessons.model import Lesson
from src.lesson_calendar.lesson_calendar.members.model import GroupMember, LessonSchedule, ViewerContext


def _item(item_id, start, end, *, all_day=False, kind=CalendarItemKind.EVENT, owner_id=None) -> CalendarItem:
    return CalendarItem(item_id=item_id, kind=kind, title=item_id, start_at=start, end_at=end, all_day=all_day, owner_id=owner_id)


def _lesson(lesson_id, start, *, instructor_id="t1", status=LessonStatus.SCHEDULED, student_id="s1") -> Lesson:
    return Lesson(
        lesson_id=lesson_id,
        group_id="g1",
        instructor_id=instructor_id,
        scheduled_at=start,
        duration_minutes=50,
        status=status,
        student_id=student_id,
    )


def _viewer(*, user_id="t1", role=MemberRole.INSTRUCTOR, instructor_count=2) -> ViewerContext:
    return ViewerContext(
        group_id="g1",
        user_id=user_id,
        member_id=f"m-{user_id}",
        display_name=user_id,
        role=role,
        instructor_count=instructor_count,
    )


def test_all_day_items_sort_before_timed_regardless_of_input_order():
    d = date(2026, 3, 2)
    timed_late = _item("t2", datetime(2026, 3, 2, 14), datetime(2026, 3, 2, 15))
    all_day = _item("a", datetime(2026, 3, 2), datetime(2026, 3, 2, 23, 59, 59), all_day=True)
    timed_early = _item("t1", datetime(2026, 3, 2, 9), datetime(2026, 3, 2, 10))

    ordered = sort_items([timed_late, timed_early, all_day])

    assert [i.item_id for i in ordered] == ["a", "t1", "t2"]
    assert all(belongs_to_day(i, d) for i in ordered)


def test_equal_start_keeps_source_order():
    start, end = datetime(2026, 3, 2, 9), datetime(2026, 3, 2, 10)
    items = [_item("second-source", start, end), _item("first-source", start, end)]

    assert [i.item_id for i in sort_items(items)] == ["second-source", "first-source"]


def test_multi_day_detection():
    one_day = _item("a", datetime(2026, 3, 2, 10), datetime(2026, 3, 2, 11))
    overnight = _item("b", datetime(2026, 3, 2, 23), datetime(2026, 3, 3, 1))
    three_days = _item("c", datetime(2026, 3, 2), datetime(2026, 3, 4, 23, 59, 59), all_day=True)

    assert not is_multi_day(one_day)
    assert is_multi_day(overnight)
    assert is_multi_day(three_days)


def test_item_belongs_to_every_day_it_spans():
    item = _item("trip", datetime(2026, 3, 2, 18), datetime(2026, 3, 4, 8))

    assert not belongs_to_day(item, date(2026, 3, 1))
    assert belongs_to_day(item, date(2026, 3, 2))
    assert belongs_to_day(item, date(2026, 3, 3))
    assert belongs_to_day(item, date(2026, 3, 4))
    assert not belongs_to_day(item, date(2026, 3, 5))


def test_span_in_week_is_capped_at_week_end():
    # Wednesday 2026-03-04 .. Tuesday 2026-03-10; week ends Saturday 2026-03-07.
    item = _item("camp", datetime(2026, 3, 4), datetime(2026, 3, 10, 23, 59), all_day=True)

    assert span_in_week(item, date(2026, 3, 4), date(2026, 3, 7)) == 4
    assert span_in_week(item, date(2026, 3, 8), date(2026, 3, 14)) == 3


def test_malformed_event_is_skipped():
    bad_start = CalendarEvent(event_id="e1", user_id="u", title="x", start_at="not-a-date", end_at="2026-03-02T10:00:00")
    missing_end = CalendarEvent(event_id="e2", user_id="u", title="x", start_at="2026-03-02T09:00:00", end_at=None)
    reversed_ = CalendarEvent(event_id="e3", user_id="u", title="x", start_at="2026-03-02T11:00:00", end_at="2026-03-02T10:00:00")
    good = CalendarEvent(event_id="e4", user_id="u", title="ok", start_at="2026-03-02T09:00:00", end_at="2026-03-02T10:00:00")

    items = project_sources(CalendarSources(events=[bad_start, missing_end, reversed_, good]), date(2026, 3, 2), date(2026, 3, 2))

    assert [i.item_id for i in items] == ["event:e4"]


def test_all_day_event_is_normalized_to_day_bounds():
    event = CalendarEvent(event_id="e1", user_id="u", title="Field day", start_at=datetime(2026, 3, 2, 13), end_at=datetime(2026, 3, 2, 14), all_day=True)

    item = project_event(event)

    assert item.start_at == datetime(2026, 3, 2, 0, 0)
    assert item.end_at.date() == date(2026, 3, 2)
    assert item.end_at.time() == time.max


def test_cancelled_lessons_and_rejected_reservations_are_excluded():
    sources = CalendarSources(
        lessons=[
            _lesson("keep", datetime(2026, 3, 2, 15)),
            _lesson("drop", datetime(2026, 3, 2, 16), status=LessonStatus.CANCELLED),
        ],
        reservations=[
            RoomReservation(reservation_id="r1", group_id="g1", room_id="room-a", reserved_by="t1", start_at=datetime(2026, 3, 2, 9), end_at=datetime(2026, 3, 2, 10), status=RequestStatus.APPROVED),
            RoomReservation(reservation_id="r2", group_id="g1", room_id="room-a", reserved_by="t1", start_at=datetime(2026, 3, 2, 11), end_at=datetime(2026, 3, 2, 12), status=RequestStatus.REJECTED),
        ],
    )

    ids = [i.item_id for i in project_sources(sources, date(2026, 3, 2), date(2026, 3, 2))]

    assert ids == ["lesson:keep", "reservation:r1"]


def test_recurring_schedule_expands_onto_matching_weekdays():
    member = GroupMember(
        member_id="m1",
        group_id="g1",
        user_id="s1",
        display_name="Jiwoo",
        role=MemberRole.STUDENT,
        instructor_id="t1",
        lesson_schedule=(LessonSchedule(day_of_week=1, start_time=time(16, 0), end_time=time(16, 50)),),
    )

    items = list(expand_recurring(member, date(2026, 3, 1), date(2026, 3, 14)))

    assert [i.start_at for i in items] == [datetime(2026, 3, 2, 16), datetime(2026, 3, 9, 16)]
    assert all(i.kind == CalendarItemKind.RECURRING and i.owner_id == "t1" for i in items)


def test_mine_filter_keeps_events_and_own_items_only():
    items = [
        _item("event", datetime(2026, 3, 2, 9), datetime(2026, 3, 2, 10), owner_id="someone"),
        _item("mine", datetime(2026, 3, 2, 11), datetime(2026, 3, 2, 12), kind=CalendarItemKind.LESSON, owner_id="t1"),
        _item("theirs", datetime(2026, 3, 2, 13), datetime(2026, 3, 2, 14), kind=CalendarItemKind.LESSON, owner_id="t2"),
        _item("room", datetime(2026, 3, 2, 15), datetime(2026, 3, 2, 16), kind=CalendarItemKind.RESERVATION, owner_id="t2"),
    ]

    kept = filter_by_owner(items, OwnershipFilter.MINE, "t1")

    assert [i.item_id for i in kept] == ["event", "mine"]
    assert filter_by_owner(items, OwnershipFilter.ALL, "t1") == items


def _two_instructor_sources() -> CalendarSources:
    return CalendarSources(
        lessons=[
            _lesson("a", datetime(2026, 3, 2, 15), instructor_id="t1"),
            _lesson("b", datetime(2026, 3, 2, 16), instructor_id="t2"),
        ]
    )


def test_mine_toggle_applies_for_instructor_of_multi_instructor_group():
    view = CalendarAggregationEngine().aggregate(
        _two_instructor_sources(),
        start=date(2026, 3, 2),
        end=date(2026, 3, 2),
        viewer=_viewer(),
        ownership=OwnershipFilter.MINE,
    )

    assert view.mine_toggle_visible
    assert view.ownership == OwnershipFilter.MINE
    assert [i.item_id for i in view.days[0].items] == ["lesson:a"]


def test_mine_toggle_hidden_for_single_instructor_group():
    view = CalendarAggregationEngine().aggregate(
        _two_instructor_sources(),
        start=date(2026, 3, 2),
        end=date(2026, 3, 2),
        viewer=_viewer(instructor_count=1),
        ownership=OwnershipFilter.MINE,
    )

    assert not view.mine_toggle_visible
    assert view.ownership == OwnershipFilter.ALL
    assert len(view.days[0].items) == 2


def test_mine_toggle_hidden_for_students():
    view = CalendarAggregationEngine().aggregate(
        _two_instructor_sources(),
        start=date(2026, 3, 2),
        end=date(2026, 3, 2),
        viewer=_viewer(user_id="s1", role=MemberRole.STUDENT),
        ownership=OwnershipFilter.MINE,
    )

    assert view.ownership == OwnershipFilter.ALL
    assert len(view.days[0].items) == 2


def test_range_view_has_one_day_per_date_with_holidays():
    holidays = {"2026-03-01": Holiday(day=date(2026, 3, 1), name="Independence Movement Day")}
    multi = CalendarEvent(event_id="e1", user_id="u", title="Camp", start_at=datetime(2026, 3, 2, 9), end_at=datetime(2026, 3, 3, 17))

    view = CalendarAggregationEngine().aggregate(
        CalendarSources(events=[multi], lessons=[_lesson("a", datetime(2026, 3, 2, 15))]),
        start=date(2026, 3, 1),
        end=date(2026, 3, 3),
        holidays=holidays,
    )

    assert [d.day for d in view.days] == [date(2026, 3, 1), date(2026, 3, 2), date(2026, 3, 3)]
    assert view.days[0].holiday.name == "Independence Movement Day"
    assert view.days[0].is_red_day
    assert not view.days[1].is_red_day
    assert [i.item_id for i in view.days[1].multi_day] == ["event:e1"]
    assert [i.item_id for i in view.days[1].single_day] == ["lesson:a"]
    assert [i.item_id for i in view.days[2].items] == ["event:e1"]


def test_serialize_resolves_colors():
    event = CalendarEvent(event_id="e1", user_id="u", title="Recital", start_at=datetime(2026, 3, 2, 9), end_at=datetime(2026, 3, 2, 10), location_id="hall")
    holiday = CalendarEvent(event_id="e2", user_id="u", title="Closed", start_at=datetime(2026, 3, 2), end_at=datetime(2026, 3, 2), all_day=True, is_academy_holiday=True)
    engine = CalendarAggregationEngine()

    view = engine.aggregate(CalendarSources(events=[event, holiday]), start=date(2026, 3, 2), end=date(2026, 3, 2), color_ids=["room", "hall"])
    payload = engine.serialize(view)

    day = payload["days"][0]
    assert [i["id"] for i in day["singleDay"]] == ["event:e2", "event:e1"]
    assert day["singleDay"][0]["color"]["bg"] == "bg-red-500"
    assert day["singleDay"][1]["color"]["bg"] == "bg-emerald-600"
    assert day["singleDay"][0]["date"] == "2026-03-02"
    assert day["singleDay"][1]["startAt"] == "2026-03-02T09:00:00"


def test_serialize_reports_week_span_of_multi_day_bars():
    # Friday 2026-03-06 .. Monday 2026-03-09 crosses the Saturday week end.
    trip = CalendarEvent(event_id="e1", user_id="u", title="Trip", start_at=datetime(2026, 3, 6, 8), end_at=datetime(2026, 3, 9, 20))
    engine = CalendarAggregationEngine()

    payload = engine.serialize(engine.aggregate(CalendarSources(events=[trip]), start=date(2026, 3, 6), end=date(2026, 3, 8)))

    spans = [d["multiDay"][0]["weekSpan"] for d in payload["days"]]
    assert spans == [2, 1, 2]


def test_default_color_map_indexes_distinct_keys():
    events = [
        CalendarEvent(event_id=f"a{n}", user_id="u", title="Lesson", start_at=datetime(2026, 3, 2, 9 + n), end_at=datetime(2026, 3, 2, 9 + n, 30), location_id="roomA")
        for n in range(8)
    ]
    events.append(CalendarEvent(event_id="b", user_id="u", title="Lesson", start_at=datetime(2026, 3, 2, 18), end_at=datetime(2026, 3, 2, 19), location_id="roomB"))

    view = CalendarAggregationEngine().aggregate(CalendarSources(events=events), start=date(2026, 3, 2), end=date(2026, 3, 2))

    assert list(view.color_map) == ["roomA", "roomB"]
    assert view.color_map["roomA"].bg == "bg-blue-600"
    assert view.color_map["roomB"].bg == "bg-emerald-600"


def test_color_keys_keep_first_appearance_order():
    items = [
        _item("x", datetime(2026, 3, 2, 9), datetime(2026, 3, 2, 10)),
        CalendarItem(item_id="1", kind=CalendarItemKind.EVENT, title="1", start_at=datetime(2026, 3, 2, 9), end_at=datetime(2026, 3, 2, 10), color_key="b"),
        CalendarItem(item_id="2", kind=CalendarItemKind.EVENT, title="2", start_at=datetime(2026, 3, 2, 9), end_at=datetime(2026, 3, 2, 10), color_key="a"),
        CalendarItem(item_id="3", kind=CalendarItemKind.EVENT, title="3", start_at=datetime(2026, 3, 2, 9), end_at=datetime(2026, 3, 2, 10), color_key="b"),
    ]

    assert color_keys(items) == ["b", "a"]
