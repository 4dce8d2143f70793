from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import day_delta, end_of_day, iter_dates, js_weekday, noon_of, start_of_day
from ..core.enums import CalendarItemKind, OwnershipFilter
from ..holidays.model import Holiday
from ..members.model import ViewerContext
from .colors import create_color_map, resolve_color
from .model import CalendarItem, CalendarSources, CalendarView, DayView
from .projection import project_sources

_OWNER_FILTERED_KINDS = frozenset(
    {CalendarItemKind.LESSON, CalendarItemKind.RESERVATION, CalendarItemKind.RECURRING}
)


def belongs_to_day(item: CalendarItem, day: date) -> bool:
    """Noon of `day` within [start_of_day(start_at), end_of_day(end_at)]."""
    return start_of_day(item.start_at) <= noon_of(day) <= end_of_day(item.end_at)


def items_for_date(items: Iterable[CalendarItem], day: date) -> list[CalendarItem]:
    return [i for i in items if belongs_to_day(i, day)]


def sort_items(items: Iterable[CalendarItem]) -> list[CalendarItem]:
    """All-day first, then timed by start_at; sorted() keeps ties in source order."""
    return sorted(items, key=lambda i: (not i.all_day, datetime.min if i.all_day else i.start_at))


def is_multi_day(item: CalendarItem) -> bool:
    return day_delta(item.start_at, item.end_at) >= 1


def split_lanes(items: Iterable[CalendarItem]) -> tuple[list[CalendarItem], list[CalendarItem]]:
    single: list[CalendarItem] = []
    multi: list[CalendarItem] = []
    for item in items:
        (multi if is_multi_day(item) else single).append(item)
    return single, multi


def span_in_week(item: CalendarItem, day: date, week_end: date) -> int:
    """Number of cells a multi-day bar covers from `day`, clipped to the week end."""
    bar_end = min(end_of_day(item.end_at), end_of_day(week_end))
    days = (bar_end - start_of_day(day)).days + 1
    days_left_in_week = 7 - js_weekday(day)
    return max(0, min(days, days_left_in_week))


def effective_ownership(viewer: Optional[ViewerContext], requested: OwnershipFilter) -> OwnershipFilter:
    """MINE only when the viewer may see the toggle; otherwise ALL."""
    if requested == OwnershipFilter.MINE and viewer is not None and viewer.can_filter_mine:
        return OwnershipFilter.MINE
    return OwnershipFilter.ALL


def filter_by_owner(items: Iterable[CalendarItem], ownership: OwnershipFilter, viewer_id: Optional[str]) -> list[CalendarItem]:
    if ownership != OwnershipFilter.MINE or not viewer_id:
        return list(items)
    return [i for i in items if i.kind not in _OWNER_FILTERED_KINDS or i.owner_id == viewer_id]


def color_keys(items: Iterable[CalendarItem]) -> list[str]:
    return list(dict.fromkeys(i.color_key for i in items if i.color_key))


class CalendarAggregationEngine:
    """Pure merge of events, lessons, reservations and recurring schedules.

    Works on already-fetched data only; safe to recompute any number of times
    from the same inputs.
    """

    def aggregate(
        self,
        sources: CalendarSources,
        *,
        start: date,
        end: date,
        holidays: Optional[Mapping[str, Holiday]] = None,
        viewer: Optional[ViewerContext] = None,
        ownership: OwnershipFilter = OwnershipFilter.ALL,
        color_ids: Optional[Sequence[str]] = None,
    ) -> CalendarView:
        holidays = holidays or {}
        items = project_sources(sources, start, end)

        mode = effective_ownership(viewer, ownership)
        items = filter_by_owner(items, mode, viewer.user_id if viewer else None)

        color_map = create_color_map(color_ids if color_ids is not None else color_keys(items))
        days = [self.day_view(items, day, holidays=holidays) for day in iter_dates(start, end)]

        return CalendarView(
            start=start,
            end=end,
            ownership=mode,
            mine_toggle_visible=bool(viewer and viewer.can_filter_mine),
            color_map=color_map,
            days=days,
        )

    def day_view(self, items: Iterable[CalendarItem], day: date, *, holidays: Mapping[str, Holiday]) -> DayView:
        day_items = sort_items(items_for_date(items, day))
        single, multi = split_lanes(day_items)
        holiday = holidays.get(day.strftime("%Y-%m-%d"))

        return DayView(
            day=day,
            holiday=holiday,
            is_red_day=holiday is not None or day.weekday() == 6,
            items=day_items,
            single_day=single,
            multi_day=multi,
        )

    @staticmethod
    def serialize(view: CalendarView) -> dict:
        def _item(i: CalendarItem) -> dict:
            return i.to_dict(color=resolve_color(i, view.color_map), multi_day=is_multi_day(i))

        def _bar(i: CalendarItem, day: date) -> dict:
            out = _item(i)
            week_end = day + timedelta(days=6 - js_weekday(day))
            out["weekSpan"] = span_in_week(i, day, week_end)
            return out

        return {
            "start": view.start.isoformat(),
            "end": view.end.isoformat(),
            "ownership": view.ownership.value,
            "mineToggleVisible": view.mine_toggle_visible,
            "days": [
                {
                    "date": d.day.isoformat(),
                    "holiday": d.holiday.to_dict() if d.holiday else None,
                    "isRedDay": d.is_red_day,
                    "singleDay": [_item(i) for i in d.single_day],
                    "multiDay": [_bar(i, d.day) for i in d.multi_day],
                }
                for d in view.days
            ],
        }
