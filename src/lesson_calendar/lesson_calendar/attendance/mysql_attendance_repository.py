from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceQrCode, AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        lesson_id=str(r["lesson_id"]),
        member_id=str(r["member_id"]),
        status=AttendanceStatus(r["status"]),
        check_in_at=r["check_in_at"],
    )


def _to_qr(r: dict) -> AttendanceQrCode:
    return AttendanceQrCode(
        code=r["code"],
        group_id=str(r["group_id"]),
        lesson_id=str(r["lesson_id"]),
        expires_at=r["expires_at"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_qr_code(self, *, code: str, group_id: str) -> Optional[AttendanceQrCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT code, group_id, lesson_id, expires_at
                FROM attendance_qr_codes
                WHERE code=%s AND group_id=%s
                """,
                (code, group_id),
            )
            r = fetchone(cur)
            return _to_qr(r) if r else None

    def get_latest_qr_code_for_lesson(self, *, lesson_id: str) -> Optional[AttendanceQrCode]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT code, group_id, lesson_id, expires_at
                FROM attendance_qr_codes
                WHERE lesson_id=%s
                ORDER BY expires_at DESC
                LIMIT 1
                """,
                (lesson_id,),
            )
            r = fetchone(cur)
            return _to_qr(r) if r else None

    def create_qr_code(self, *, code: str, group_id: str, lesson_id: str, expires_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_qr_codes(code, group_id, lesson_id, expires_at)
                VALUES(%s,%s,%s,%s)
                """,
                (code, group_id, lesson_id, expires_at),
            )

    def get_record(self, *, lesson_id: str, member_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, lesson_id, member_id, status, check_in_at
                FROM attendance_records
                WHERE lesson_id=%s AND member_id=%s
                """,
                (lesson_id, member_id),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_record(
        self,
        *,
        lesson_id: str,
        member_id: str,
        status: AttendanceStatus,
        check_in_at: datetime,
    ) -> int:
        # uq_lesson_member turns a lost race into IntegrityError -> DuplicateError (see db_cursor).
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(lesson_id, member_id, status, check_in_at)
                VALUES(%s,%s,%s,%s)
                """,
                (lesson_id, member_id, status.value, check_in_at),
            )
            return int(cur.lastrowid)

    def list_records_for_member(self, *, member_id: str, lesson_ids: Sequence[str]) -> Sequence[AttendanceRecord]:
        if not lesson_ids:
            return []

        placeholders = ",".join(["%s"] * len(lesson_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT attendance_id, lesson_id, member_id, status, check_in_at
                FROM attendance_records
                WHERE member_id=%s AND lesson_id IN ({placeholders})
                """,
                (member_id, *lesson_ids),
            )
            return [_to_record(r) for r in fetchall(cur)]
