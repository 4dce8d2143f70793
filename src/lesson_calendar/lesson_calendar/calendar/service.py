from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import end_of_day, start_of_day
from ..core.constants import MAX_CALENDAR_RANGE_DAYS
from ..core.enums import OwnershipFilter
from ..core.exceptions import ValidationError
from ..holidays.model import Holiday
from ..holidays.service import HolidayCalendar
from ..members.model import ViewerContext
from ..members.repository import MemberRepository
from .engine import CalendarAggregationEngine
from .model import CalendarSources, CalendarView
from .repository import CalendarRepository


class CalendarService:
    """Loads the four sources for a group and hands them to the engine."""

    def __init__(
        self,
        calendar: CalendarRepository,
        members: MemberRepository,
        holidays: HolidayCalendar,
        *,
        engine: Optional[CalendarAggregationEngine] = None,
    ):
        self._calendar = calendar
        self._members = members
        self._holidays = holidays
        self._engine = engine or CalendarAggregationEngine()

    def load_sources(self, *, group_id: str, start: date, end: date) -> CalendarSources:
        range_start, range_end = start_of_day(start), end_of_day(end)
        return CalendarSources(
            events=self._calendar.list_events(group_id=group_id, start=range_start, end=range_end),
            lessons=self._calendar.list_lessons(group_id=group_id, start=range_start, end=range_end),
            reservations=self._calendar.list_reservations(group_id=group_id, start=range_start, end=range_end),
            members=self._members.list_for_group(group_id=group_id),
        )

    def holiday_map(self, start: date, end: date) -> dict[str, Holiday]:
        out: dict[str, Holiday] = {}
        year, month = start.year, start.month
        while (year, month) <= (end.year, end.month):
            for key, holiday in self._holidays.month_map(year, month).items():
                out.setdefault(key, holiday)
            year, month = (year + 1, 1) if month == 12 else (year, month + 1)
        return out

    def view(
        self,
        viewer: ViewerContext,
        *,
        start: date,
        end: date,
        mine: bool = False,
        color_ids: Optional[Sequence[str]] = None,
    ) -> CalendarView:
        if end < start:
            raise ValidationError("End date must be on or after start date")
        if (end - start).days + 1 > MAX_CALENDAR_RANGE_DAYS:
            raise ValidationError(f"Date range is limited to {MAX_CALENDAR_RANGE_DAYS} days")

        sources = self.load_sources(group_id=viewer.group_id, start=start, end=end)
        return self._engine.aggregate(
            sources,
            start=start,
            end=end,
            holidays=self.holiday_map(start, end),
            viewer=viewer,
            ownership=OwnershipFilter.MINE if mine else OwnershipFilter.ALL,
            color_ids=color_ids,
        )

    def view_dict(self, viewer: ViewerContext, **kwargs) -> dict:
        return self._engine.serialize(self.view(viewer, **kwargs))
