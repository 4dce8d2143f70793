from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import RescheduleRequest
from .repository import RescheduleRepository

_COLUMNS = "r.request_id, r.lesson_id, r.requested_by, r.requested_date, r.reason, r.status, r.created_at, r.reviewed_by, r.reviewed_at"


def _to_request(r: dict) -> RescheduleRequest:
    return RescheduleRequest(
        request_id=int(r["request_id"]),
        lesson_id=str(r["lesson_id"]),
        requested_by=str(r["requested_by"]),
        requested_date=r["requested_date"],
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=r.get("created_at"),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
    )


class MySQLRescheduleRepository(RescheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, lesson_id: str, requested_by: str, requested_date: datetime, reason: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO reschedule_requests(lesson_id, requested_by, requested_date, reason, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (lesson_id, requested_by, requested_date, reason, RequestStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, *, request_id: int) -> Optional[RescheduleRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM reschedule_requests r WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_lesson(self, *, lesson_id: str, status: Optional[RequestStatus] = None) -> Sequence[RescheduleRequest]:
        sql = f"SELECT {_COLUMNS} FROM reschedule_requests r WHERE r.lesson_id=%s"
        params: list[object] = [lesson_id]
        if status is not None:
            sql += " AND r.status=%s"
            params.append(status.value)
        sql += " ORDER BY r.created_at ASC, r.request_id ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_request(r) for r in fetchall(cur)]

    def list_pending_for_instructor(self, *, group_id: str, instructor_id: str) -> Sequence[RescheduleRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM reschedule_requests r
                JOIN lessons l ON l.lesson_id = r.lesson_id
                WHERE l.group_id=%s AND l.instructor_id=%s AND r.status=%s
                ORDER BY r.created_at ASC, r.request_id ASC
                """,
                (group_id, instructor_id, RequestStatus.PENDING.value),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide(self, *, request_id: int, status: RequestStatus, reviewed_by: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE reschedule_requests
                SET status=%s, reviewed_by=%s, reviewed_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (status.value, reviewed_by, int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def approve(self, *, request_id: int, reviewed_by: str, lesson_id: str, scheduled_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE reschedule_requests
                SET status=%s, reviewed_by=%s, reviewed_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (RequestStatus.APPROVED.value, reviewed_by, int(request_id), RequestStatus.PENDING.value),
            )
            if cur.rowcount == 0:
                return False

            # rowcount is 0 here when the time is unchanged, so it is not checked.
            cur.execute("UPDATE lessons SET scheduled_at=%s WHERE lesson_id=%s", (scheduled_at, lesson_id))
            return True
