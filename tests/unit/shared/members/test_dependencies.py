"""
Tests for authorize_member_removal in polity/shared/members/dependencies.py
"""

from unittest.mock import Mock

import pytest
from fastapi import HTTPException

from polity.domains.memberships.service import GroupMembershipService
from polity.shared.members import authorize_member_removal
from polity.shared.permissions import ActionType, PermissionSet, ResourceType
from polity.shared.permissions.types import Membership, PermissionContext
from tests.fixtures.permission_fixtures import make_membership, make_role

GROUP_ID = "group-123"
USER_ID = "test-user-id-123"
GRANTS = ((ActionType.MANAGE, ResourceType.GROUP_MEMBERSHIPS),)


def permission_set(*rows) -> PermissionSet:
    return PermissionSet(
        USER_ID,
        PermissionContext(group_id=GROUP_ID),
        memberships=tuple(Membership.model_validate(row) for row in rows),
    )


class TestAuthorizeMemberRemoval:
    @pytest.mark.asyncio
    async def test_manager_skips_lookup(self, mock_prisma: Mock):
        admin = make_role(
            "Admin", [(ResourceType.GROUP_MEMBERSHIPS, ActionType.MANAGE)]
        )

        await authorize_member_removal(
            GroupMembershipService(mock_prisma),
            permission_set(make_membership(GROUP_ID, admin)),
            GROUP_ID,
            "membership-9",
            GRANTS,
        )

        mock_prisma.groupmembership.find_first.assert_not_called()

    @pytest.mark.asyncio
    async def test_own_row_may_be_removed(self, mock_prisma: Mock):
        mock_prisma.groupmembership.find_first.return_value = make_membership(
            GROUP_ID, user_id=USER_ID
        )

        await authorize_member_removal(
            GroupMembershipService(mock_prisma),
            permission_set(make_membership(GROUP_ID)),
            GROUP_ID,
            "membership-1",
            GRANTS,
        )

    @pytest.mark.asyncio
    async def test_missing_row_is_forbidden_for_non_managers(self, mock_prisma: Mock):
        with pytest.raises(HTTPException) as exc_info:
            await authorize_member_removal(
                GroupMembershipService(mock_prisma),
                permission_set(make_membership(GROUP_ID)),
                GROUP_ID,
                "missing",
                GRANTS,
            )

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_other_row_is_forbidden_for_non_managers(self, mock_prisma: Mock):
        mock_prisma.groupmembership.find_first.return_value = make_membership(
            GROUP_ID, user_id="someone-else"
        )

        with pytest.raises(HTTPException) as exc_info:
            await authorize_member_removal(
                GroupMembershipService(mock_prisma),
                permission_set(make_membership(GROUP_ID)),
                GROUP_ID,
                "membership-2",
                GRANTS,
            )

        assert exc_info.value.status_code == 403
