from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Optional

from ..core.enums import MemberRole


@dataclass(frozen=True)
class LessonSchedule:
    """One weekly recurring slot of a member (day_of_week: Sunday=0)."""

    day_of_week: int
    start_time: time
    end_time: time
    room_id: Optional[str] = None


@dataclass(frozen=True)
class GroupMember:
    """Domain entity: approved membership of a user in a group."""

    member_id: str
    group_id: str
    user_id: str
    display_name: str
    role: MemberRole
    is_owner: bool = False
    instructor_id: Optional[str] = None
    lesson_schedule: tuple[LessonSchedule, ...] = field(default_factory=tuple)

    @property
    def is_instructor_equivalent(self) -> bool:
        return self.is_owner or self.role == MemberRole.INSTRUCTOR


@dataclass(frozen=True)
class ViewerContext:
    """Explicit per-request identity/group context.

    Built once per request from the session and passed by reference to the
    services that need it, instead of reading shared global state.
    """

    group_id: str
    user_id: str
    member_id: str
    display_name: str
    role: MemberRole
    is_owner: bool = False
    instructor_count: int = 0

    @property
    def has_elevated_privilege(self) -> bool:
        return self.is_owner or self.role == MemberRole.INSTRUCTOR

    @property
    def can_filter_mine(self) -> bool:
        """The all/mine toggle is shown only to elevated viewers of multi-instructor groups."""
        return self.has_elevated_privilege and self.instructor_count > 1

    @classmethod
    def for_member(cls, member: GroupMember, *, instructor_count: int) -> "ViewerContext":
        return cls(
            group_id=member.group_id,
            user_id=member.user_id,
            member_id=member.member_id,
            display_name=member.display_name,
            role=member.role,
            is_owner=member.is_owner,
            instructor_count=int(instructor_count),
        )
