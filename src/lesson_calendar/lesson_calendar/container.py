from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .calendar.mysql_calendar_repository import MySQLCalendarRepository
from .calendar.service import CalendarService
from .core.constants import (
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_QR_CODE_TTL_HOURS,
    DEFAULT_RESCHEDULE_HORIZON_WEEKS,
    HOLIDAY_API_TIMEOUT_SECONDS,
    HOLIDAY_API_URL,
)
from .database.connection import DBConfig, DatabaseConnection
from .holidays.provider import PublicDataHolidayProvider
from .holidays.service import HolidayCalendar
from .lessons.mysql_lesson_repository import MySQLLessonRepository
from .members.mysql_member_repository import MySQLMemberRepository
from .members.service import MemberService
from .reschedule.mysql_reschedule_repository import MySQLRescheduleRepository
from .reschedule.service import RescheduleService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    members_repo: MySQLMemberRepository
    lessons_repo: MySQLLessonRepository
    calendar_repo: MySQLCalendarRepository
    attendance_repo: MySQLAttendanceRepository
    reschedule_repo: MySQLRescheduleRepository

    holiday_calendar: HolidayCalendar
    member_service: MemberService
    calendar_service: CalendarService
    attendance_service: AttendanceService
    reschedule_service: RescheduleService


def build_holiday_calendar(settings: Mapping[str, Any]) -> HolidayCalendar:
    api_key = str(settings.get("HOLIDAY_API_KEY") or "")
    if not api_key:
        return HolidayCalendar()

    provider = PublicDataHolidayProvider(
        api_key,
        base_url=str(settings.get("HOLIDAY_API_URL") or HOLIDAY_API_URL),
        timeout=float(settings.get("HOLIDAY_API_TIMEOUT") or HOLIDAY_API_TIMEOUT_SECONDS),
    )
    return HolidayCalendar(provider=provider)


def build_container(*, db_config: dict, settings: Optional[Mapping[str, Any]] = None) -> Container:
    settings = settings or {}
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    members_repo = MySQLMemberRepository(conn)
    lessons_repo = MySQLLessonRepository(conn)
    calendar_repo = MySQLCalendarRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    reschedule_repo = MySQLRescheduleRepository(conn)

    holiday_calendar = build_holiday_calendar(settings)
    member_service = MemberService(members_repo)
    calendar_service = CalendarService(calendar_repo, members_repo, holiday_calendar)
    attendance_service = AttendanceService(
        attendance_repo,
        lessons_repo,
        strategy_factory=AttendanceStrategyFactory(),
        grace_minutes=int(settings.get("LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        qr_ttl_hours=int(settings.get("QR_CODE_TTL_HOURS", DEFAULT_QR_CODE_TTL_HOURS)),
    )
    reschedule_service = RescheduleService(
        reschedule_repo,
        lessons_repo,
        horizon_weeks=int(settings.get("RESCHEDULE_HORIZON_WEEKS", DEFAULT_RESCHEDULE_HORIZON_WEEKS)),
        allow_multiple_pending=bool(settings.get("ALLOW_MULTIPLE_PENDING_RESCHEDULES", True)),
    )

    return Container(
        conn=conn,
        members_repo=members_repo,
        lessons_repo=lessons_repo,
        calendar_repo=calendar_repo,
        attendance_repo=attendance_repo,
        reschedule_repo=reschedule_repo,
        holiday_calendar=holiday_calendar,
        member_service=member_service,
        calendar_service=calendar_service,
        attendance_service=attendance_service,
        reschedule_service=reschedule_service,
    )
