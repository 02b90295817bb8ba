# polity/domains/memberships/routes.py
from typing import List

from fastapi import APIRouter, Depends, status

from polity.core.database import DatabaseClient, get_db
from polity.domains.auth.dependencies import get_current_user_id
from polity.domains.memberships.dependencies import (
    MEMBERSHIP_MANAGEMENT_GRANTS,
    get_group_context,
    require_membership_management,
    require_membership_view,
)
from polity.domains.memberships.service import GroupMembershipService
from polity.shared.members import (
    MemberInvite,
    MemberResponse,
    MemberUpdate,
    authorize_member_removal,
)
from polity.shared.permissions import PermissionResolver, PermissionSet

router = APIRouter(prefix="/groups", tags=["Group Memberships"])


@router.get(
    "/{group_id}/members",
    response_model=List[MemberResponse],
    operation_id="listGroupMembers",
)
async def list_members(
    group_id: str,
    permissions: PermissionSet = Depends(require_membership_view),
    db: DatabaseClient = Depends(get_db),
) -> List[MemberResponse]:
    """Get all memberships of a group, invitations and requests included."""
    service = GroupMembershipService(db)
    return await service.list_members(group_id)


@router.post(
    "/{group_id}/members",
    response_model=List[MemberResponse],
    status_code=status.HTTP_201_CREATED,
    operation_id="inviteGroupMembers",
)
async def invite_members(
    group_id: str,
    invite: MemberInvite,
    permissions: PermissionSet = Depends(require_membership_management),
    db: DatabaseClient = Depends(get_db),
) -> List[MemberResponse]:
    """Invite users to the group with a role."""
    service = GroupMembershipService(db)
    return await service.invite(group_id, invite)


@router.patch(
    "/{group_id}/members/{membership_id}",
    response_model=MemberResponse,
    operation_id="updateGroupMember",
)
async def update_member(
    group_id: str,
    membership_id: str,
    update: MemberUpdate,
    permissions: PermissionSet = Depends(require_membership_management),
    db: DatabaseClient = Depends(get_db),
) -> MemberResponse:
    """
    Approve a membership request, change a member's role, or promote to
    Admin and demote to Member.
    """
    service = GroupMembershipService(db)
    return await service.update_member(group_id, membership_id, update)


@router.delete(
    "/{group_id}/members/{membership_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    operation_id="removeGroupMember",
)
async def remove_member(
    group_id: str,
    membership_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseClient = Depends(get_db),
) -> None:
    """
    Remove a member, reject a request or leave the group.

    Members may always leave; removing anyone else needs membership
    management rights.
    """
    permissions = await PermissionResolver(db).resolve(
        user_id, get_group_context(group_id)
    )
    service = GroupMembershipService(db)
    await authorize_member_removal(
        service, permissions, group_id, membership_id, MEMBERSHIP_MANAGEMENT_GRANTS
    )
    await service.remove_member(group_id, membership_id)
