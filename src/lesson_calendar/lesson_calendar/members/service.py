from __future__ import annotations

from ..core.exceptions import AuthorizationError
from .model import ViewerContext
from .repository import MemberRepository


class MemberService:
    def __init__(self, members: MemberRepository):
        self._members = members

    def viewer_context(self, *, group_id: str, user_id: str) -> ViewerContext:
        member = self._members.get_by_user(group_id=group_id, user_id=user_id)
        if not member:
            raise AuthorizationError("You are not a member of this group")

        instructors = [m for m in self._members.list_for_group(group_id=group_id) if m.is_instructor_equivalent]
        return ViewerContext.for_member(member, instructor_count=len(instructors))
