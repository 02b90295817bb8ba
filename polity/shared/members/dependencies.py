# polity/shared/members/dependencies.py
from collections.abc import Sequence

from polity.shared.members.service import MemberService
from polity.shared.permissions import (
    ActionType,
    PermissionSet,
    ResourceType,
    check_any_permission,
)


async def authorize_member_removal(
    service: MemberService,
    permissions: PermissionSet,
    scope_id: str,
    member_id: str,
    grants: Sequence[tuple[ActionType, ResourceType]],
) -> None:
    """
    Allow removing a member row to managers and to the row's own user.

    Callers without a management grant get 403 whether the row is missing
    or belongs to someone else, so the answer does not reveal which ids
    exist. Managers fall through to the lookup in ``remove_member`` and see
    404 for unknown ids.

    Raises:
        InsufficientPermissionsError: If the caller may not remove the row
    """
    if permissions.can_any(grants, strict=True):
        return

    member = await service.find_member(scope_id, member_id)
    if member is not None and permissions.is_me(member.user_id):
        return
    check_any_permission(permissions, grants)
