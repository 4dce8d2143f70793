from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ..lessons.model import Lesson
from .model import CalendarEvent, RoomReservation


class CalendarRepository(Protocol):
    """Range reads for the three stored calendar sources.

    Every list_* returns records overlapping [start, end] (start_at <= end and
    end_at >= start), ordered by start.
    """

    def list_events(self, *, group_id: str, start: datetime, end: datetime) -> Sequence[CalendarEvent]:
        raise NotImplementedError

    def list_lessons(self, *, group_id: str, start: datetime, end: datetime) -> Sequence[Lesson]:
        raise NotImplementedError

    def list_reservations(self, *, group_id: str, start: datetime, end: datetime) -> Sequence[RoomReservation]:
        raise NotImplementedError
