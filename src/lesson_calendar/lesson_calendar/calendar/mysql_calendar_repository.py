from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..lessons.mysql_lesson_repository import row_to_lesson
from ..lessons.model import Lesson
from .model import CalendarEvent, RoomReservation
from .repository import CalendarRepository


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_events(self, *, group_id: str, start: datetime, end: datetime) -> Sequence[CalendarEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, group_id, user_id, title, start_at, end_at, all_day, location_id, is_academy_holiday
                FROM calendar_events
                WHERE group_id=%s AND start_at <= %s AND end_at >= %s
                ORDER BY start_at ASC
                """,
                (group_id, end, start),
            )
            return [
                CalendarEvent(
                    event_id=str(r["event_id"]),
                    group_id=r.get("group_id"),
                    user_id=str(r["user_id"]),
                    title=r["title"],
                    start_at=r.get("start_at"),
                    end_at=r.get("end_at"),
                    all_day=bool(r.get("all_day")),
                    location_id=r.get("location_id"),
                    is_academy_holiday=bool(r.get("is_academy_holiday")),
                )
                for r in fetchall(cur)
            ]

    def list_lessons(self, *, group_id: str, start: datetime, end: datetime) -> Sequence[Lesson]:
        # A lesson's end is derived from its duration; overlap on that so a
        # lesson running past midnight into the range is kept.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT lesson_id, group_id, instructor_id, student_id, room_id, scheduled_at, duration_minutes, status
                FROM lessons
                WHERE group_id=%s AND scheduled_at <= %s
                  AND DATE_ADD(scheduled_at, INTERVAL duration_minutes MINUTE) >= %s
                ORDER BY scheduled_at ASC
                """,
                (group_id, end, start),
            )
            return [row_to_lesson(r) for r in fetchall(cur)]

    def list_reservations(self, *, group_id: str, start: datetime, end: datetime) -> Sequence[RoomReservation]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT reservation_id, group_id, room_id, reserved_by, start_at, end_at, status
                FROM room_reservations
                WHERE group_id=%s AND start_at <= %s AND end_at >= %s
                ORDER BY start_at ASC
                """,
                (group_id, end, start),
            )
            return [
                RoomReservation(
                    reservation_id=str(r["reservation_id"]),
                    group_id=str(r["group_id"]),
                    room_id=str(r["room_id"]),
                    reserved_by=str(r["reserved_by"]),
                    start_at=r.get("start_at"),
                    end_at=r.get("end_at"),
                    status=RequestStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]
