from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..core.enums import CalendarItemKind, OwnershipFilter, RequestStatus
from ..holidays.model import Holiday
from ..lessons.model import Lesson
from ..members.model import GroupMember
from .colors import CalendarColor


@dataclass(frozen=True)
class CalendarEvent:
    """Raw ad-hoc calendar event as read from the store.

    Timestamps are kept as stored (datetime or ISO string, possibly missing)
    and only validated when projected.
    """

    event_id: str
    user_id: str
    title: str
    start_at: Any
    end_at: Any
    all_day: bool = False
    group_id: Optional[str] = None
    location_id: Optional[str] = None
    is_academy_holiday: bool = False


@dataclass(frozen=True)
class RoomReservation:
    reservation_id: str
    group_id: str
    room_id: str
    reserved_by: str
    start_at: Any
    end_at: Any
    status: RequestStatus = RequestStatus.PENDING
    title: Optional[str] = None


@dataclass(frozen=True)
class CalendarSources:
    """Already-fetched input of one aggregation, in source order."""

    events: Sequence[CalendarEvent] = ()
    lessons: Sequence[Lesson] = ()
    reservations: Sequence[RoomReservation] = ()
    members: Sequence[GroupMember] = ()


@dataclass(frozen=True)
class CalendarItem:
    """Display projection shared by all four source kinds."""

    item_id: str
    kind: CalendarItemKind
    title: str
    start_at: datetime
    end_at: datetime
    all_day: bool = False
    owner_id: Optional[str] = None
    color_key: Optional[str] = None
    group_id: Optional[str] = None
    location_id: Optional[str] = None
    is_academy_holiday: bool = False

    def to_dict(self, *, color: Optional[CalendarColor] = None, multi_day: bool = False) -> dict:
        out = {
            "id": self.item_id,
            "kind": self.kind.value,
            "title": self.title,
            "allDay": self.all_day,
            "ownerId": self.owner_id,
            "colorKey": self.color_key,
            "multiDay": multi_day,
        }
        if self.all_day:
            out["date"] = self.start_at.strftime("%Y-%m-%d")
            out["endDate"] = self.end_at.strftime("%Y-%m-%d")
        else:
            out["startAt"] = self.start_at.isoformat()
            out["endAt"] = self.end_at.isoformat()
        if color is not None:
            out["color"] = color.to_dict()
        return out


@dataclass(frozen=True)
class DayView:
    day: date
    holiday: Optional[Holiday]
    is_red_day: bool
    items: list[CalendarItem] = field(default_factory=list)
    single_day: list[CalendarItem] = field(default_factory=list)
    multi_day: list[CalendarItem] = field(default_factory=list)


@dataclass(frozen=True)
class CalendarView:
    start: date
    end: date
    ownership: OwnershipFilter
    mine_toggle_visible: bool
    color_map: dict[str, CalendarColor]
    days: list[DayView]
