from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceQrCode, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_qr_code(self, *, code: str, group_id: str) -> Optional[AttendanceQrCode]:
        """Exact-match lookup scoped to one group."""

        raise NotImplementedError

    def get_latest_qr_code_for_lesson(self, *, lesson_id: str) -> Optional[AttendanceQrCode]:
        raise NotImplementedError

    def create_qr_code(self, *, code: str, group_id: str, lesson_id: str, expires_at: datetime) -> None:
        raise NotImplementedError

    def get_record(self, *, lesson_id: str, member_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_record(
        self,
        *,
        lesson_id: str,
        member_id: str,
        status: AttendanceStatus,
        check_in_at: datetime,
    ) -> int:
        """Insert one record.

        Raises DuplicateError when (lesson_id, member_id) already exists and
        StorageError for any other failure.
        """

        raise NotImplementedError

    def list_records_for_member(self, *, member_id: str, lesson_ids: Sequence[str]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
