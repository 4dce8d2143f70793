from src.lesson_calendar.lesson_calendar.calendar.colors import (
    CALENDAR_COLORS,
    DEFAULT_EVENT_COLOR,
    HOLIDAY_COLOR,
    create_color_map,
    resolve_color,
)
from src.lesson_calendar.lesson_calendar.calendar.model import CalendarEvent


def test_color_index_follows_position_and_wraps():
    ids = [f"room-{i}" for i in range(10)]

    m = create_color_map(ids)

    assert m["room-0"] == CALENDAR_COLORS[0]
    assert m["room-3"] == CALENDAR_COLORS[3]
    assert m["room-8"] == CALENDAR_COLORS[0]
    assert m["room-9"] == CALENDAR_COLORS[1]


def test_color_map_is_deterministic_and_rebuilt_per_list():
    assert create_color_map(["a", "b"]) == create_color_map(["a", "b"])
    assert create_color_map(["b", "a"])["a"] == CALENDAR_COLORS[1]


def test_repeated_id_keeps_first_color():
    m = create_color_map(["a", "b", "a", "c"])

    assert m["a"] == CALENDAR_COLORS[0]
    assert m["c"] == CALENDAR_COLORS[3]


def _event(**kw) -> CalendarEvent:
    return CalendarEvent(event_id="e", user_id="u", title="t", start_at=None, end_at=None, **kw)


def test_resolve_color_precedence():
    m = create_color_map(["hall", "g1"])

    assert resolve_color(_event(location_id="hall", group_id="g1", is_academy_holiday=True), m) == HOLIDAY_COLOR
    assert resolve_color(_event(location_id="hall", group_id="g1"), m) == CALENDAR_COLORS[0]
    assert resolve_color(_event(location_id="unknown", group_id="g1"), m) == CALENDAR_COLORS[1]
    assert resolve_color(_event(), m) == DEFAULT_EVENT_COLOR
