from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import GroupMember


class MemberRepository(Protocol):
    """Repository interface for group members.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_user(self, *, group_id: str, user_id: str) -> Optional[GroupMember]:
        raise NotImplementedError

    def get_by_id(self, member_id: str) -> Optional[GroupMember]:
        raise NotImplementedError

    def list_for_group(self, *, group_id: str) -> Sequence[GroupMember]:
        """Approved members, each with its weekly lesson_schedule loaded."""

        raise NotImplementedError
