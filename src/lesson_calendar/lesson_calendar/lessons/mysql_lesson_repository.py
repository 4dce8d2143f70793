from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import LessonStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Lesson
from .repository import LessonRepository

_LESSON_COLUMNS = "lesson_id, group_id, instructor_id, student_id, room_id, scheduled_at, duration_minutes, status"


def row_to_lesson(r: dict) -> Lesson:
    return Lesson(
        lesson_id=str(r["lesson_id"]),
        group_id=str(r["group_id"]),
        instructor_id=str(r["instructor_id"]),
        student_id=r.get("student_id"),
        room_id=r.get("room_id"),
        scheduled_at=r["scheduled_at"],
        duration_minutes=int(r["duration_minutes"]),
        status=LessonStatus(r["status"]),
    )


class MySQLLessonRepository(LessonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, lesson_id: str) -> Optional[Lesson]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LESSON_COLUMNS} FROM lessons WHERE lesson_id=%s", (lesson_id,))
            r = fetchone(cur)
            return row_to_lesson(r) if r else None

    def list_for_student(
        self,
        *,
        group_id: str,
        student_id: str,
        start: datetime,
        end: datetime,
        status: Optional[LessonStatus] = None,
    ) -> Sequence[Lesson]:
        clauses = ["group_id=%s", "student_id=%s", "scheduled_at >= %s", "scheduled_at <= %s"]
        params: list[object] = [group_id, student_id, start, end]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_LESSON_COLUMNS}
                FROM lessons
                WHERE {where}
                ORDER BY scheduled_at ASC
                """,
                tuple(params),
            )
            return [row_to_lesson(r) for r in fetchall(cur)]
