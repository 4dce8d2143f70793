from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import MemberRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import GroupMember, LessonSchedule
from .repository import MemberRepository

_MEMBER_COLUMNS = "member_id, group_id, user_id, display_name, role, is_owner, instructor_id"


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_user(self, *, group_id: str, user_id: str) -> Optional[GroupMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_MEMBER_COLUMNS}
                FROM group_members
                WHERE group_id=%s AND user_id=%s AND status='approved'
                """,
                (group_id, user_id),
            )
            r = fetchone(cur)
            if not r:
                return None
            return self._to_member(r, self._load_schedules(cur, [r["member_id"]]))

    def get_by_id(self, member_id: str) -> Optional[GroupMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_MEMBER_COLUMNS} FROM group_members WHERE member_id=%s", (member_id,))
            r = fetchone(cur)
            if not r:
                return None
            return self._to_member(r, self._load_schedules(cur, [r["member_id"]]))

    def list_for_group(self, *, group_id: str) -> Sequence[GroupMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_MEMBER_COLUMNS}
                FROM group_members
                WHERE group_id=%s AND status='approved'
                ORDER BY display_name ASC
                """,
                (group_id,),
            )
            rows = fetchall(cur)
            schedules = self._load_schedules(cur, [r["member_id"] for r in rows])
            return [self._to_member(r, schedules) for r in rows]

    @staticmethod
    def _load_schedules(cur, member_ids: list[str]) -> dict[str, list[LessonSchedule]]:
        out: dict[str, list[LessonSchedule]] = {}
        if not member_ids:
            return out

        placeholders = ",".join(["%s"] * len(member_ids))
        cur.execute(
            f"""
            SELECT member_id, day_of_week, start_time, end_time, room_id
            FROM lesson_schedules
            WHERE member_id IN ({placeholders})
            ORDER BY schedule_id ASC
            """,
            tuple(member_ids),
        )
        for r in fetchall(cur):
            out.setdefault(r["member_id"], []).append(
                LessonSchedule(
                    day_of_week=int(r["day_of_week"]),
                    start_time=normalize_mysql_time(r["start_time"]),
                    end_time=normalize_mysql_time(r["end_time"]),
                    room_id=r.get("room_id"),
                )
            )
        return out

    @staticmethod
    def _to_member(r: dict, schedules: dict[str, list[LessonSchedule]]) -> GroupMember:
        return GroupMember(
            member_id=str(r["member_id"]),
            group_id=str(r["group_id"]),
            user_id=str(r["user_id"]),
            display_name=r["display_name"],
            role=MemberRole(r["role"]),
            is_owner=bool(r.get("is_owner")),
            instructor_id=r.get("instructor_id"),
            lesson_schedule=tuple(schedules.get(r["member_id"], [])),
        )
