"""
Tests for RoleService in polity/domains/roles/service.py
"""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import HTTPException

from polity.domains.roles.models import ActionRightUpdate, RoleCreate
from polity.domains.roles.service import RoleService
from polity.shared.permissions.models import ActionType, ResourceType, RoleScope
from tests.fixtures.permission_fixtures import make_membership, make_role

GROUP_ID = "group-123"


class TestListAndGetRoles:
    @pytest.mark.asyncio
    async def test_list_roles_filters_by_scope(self, mock_prisma: Mock):
        mock_prisma.role.find_many.return_value = [
            make_role("Admin", [(ResourceType.GROUPS, ActionType.MANAGE)])
        ]

        result = await RoleService(mock_prisma).list_roles(RoleScope.GROUP, GROUP_ID)

        assert [role.name for role in result] == ["Admin"]
        assert result[0].action_rights[0].action == "manage"
        where = mock_prisma.role.find_many.call_args.kwargs["where"]
        assert where == {"scope": "group", "groupId": GROUP_ID}

    @pytest.mark.asyncio
    async def test_get_role_not_found(self, mock_prisma: Mock):
        with pytest.raises(HTTPException) as exc_info:
            await RoleService(mock_prisma).get_role(
                RoleScope.EVENT, "event-1", "missing"
            )

        assert exc_info.value.status_code == 404
        where = mock_prisma.role.find_first.call_args.kwargs["where"]
        assert where == {"id": "missing", "scope": "event", "eventId": "event-1"}


class TestCreateAndRemoveRole:
    @pytest.mark.asyncio
    async def test_create_role(self, mock_prisma: Mock):
        mock_prisma.role.create.return_value = make_role("Treasurer", role_id="role-1")

        result = await RoleService(mock_prisma).create_role(
            RoleScope.GROUP, GROUP_ID, RoleCreate(name="  Treasurer ")
        )

        assert result.id == "role-1"
        data = mock_prisma.role.create.call_args.kwargs["data"]
        assert data["name"] == "Treasurer"
        assert data["scope"] == "group"
        assert data["groupId"] == GROUP_ID

    @pytest.mark.asyncio
    async def test_create_role_write_failure(self, mock_prisma: Mock):
        mock_prisma.role.create.side_effect = Exception("connection lost")

        with pytest.raises(HTTPException) as exc_info:
            await RoleService(mock_prisma).create_role(
                RoleScope.GROUP, GROUP_ID, RoleCreate(name="Treasurer")
            )

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_remove_role(self, mock_prisma: Mock):
        mock_prisma.role.find_first.return_value = make_role("Old", role_id="role-1")

        await RoleService(mock_prisma).remove_role(RoleScope.GROUP, GROUP_ID, "role-1")

        mock_prisma.actionright.delete_many.assert_called_once_with(
            where={"roles": {"some": {"id": "role-1"}, "every": {"id": "role-1"}}}
        )
        mock_prisma.role.delete.assert_called_once_with(where={"id": "role-1"})
        mock_prisma.tx.assert_called_once()

    @pytest.mark.asyncio
    async def test_remove_role_write_failure(self, mock_prisma: Mock):
        mock_prisma.role.find_first.return_value = make_role("Old", role_id="role-1")
        mock_prisma.role.delete.side_effect = Exception("foreign key")

        with pytest.raises(HTTPException) as exc_info:
            await RoleService(mock_prisma).remove_role(
                RoleScope.GROUP, GROUP_ID, "role-1"
            )

        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_remove_role_from_other_scope(self, mock_prisma: Mock):
        with pytest.raises(HTTPException) as exc_info:
            await RoleService(mock_prisma).remove_role(
                RoleScope.GROUP, GROUP_ID, "role-1"
            )

        assert exc_info.value.status_code == 404
        mock_prisma.role.delete.assert_not_called()


class TestSetActionRight:
    """Test grant and revoke of a single right."""

    @pytest.mark.asyncio
    async def test_grant_creates_scoped_right(self, mock_prisma: Mock):
        before = make_role("Custom", role_id="role-1")
        after = make_role(
            "Custom", [(ResourceType.GROUP_TODOS, ActionType.UPDATE)], role_id="role-1"
        )
        mock_prisma.role.find_first = AsyncMock(side_effect=[before, after])

        result = await RoleService(mock_prisma).set_action_right(
            RoleScope.GROUP,
            GROUP_ID,
            "role-1",
            ActionRightUpdate(
                resource=ResourceType.GROUP_TODOS,
                action=ActionType.UPDATE,
                granted=True,
            ),
        )

        data = mock_prisma.actionright.create.call_args.kwargs["data"]
        assert data == {
            "resource": "groupTodos",
            "action": "update",
            "groupId": GROUP_ID,
            "roles": {"connect": [{"id": "role-1"}]},
        }
        assert [(r.resource, r.action) for r in result.action_rights] == [
            ("groupTodos", "update")
        ]

    @pytest.mark.asyncio
    async def test_revoke_disconnects_shared_right(self, mock_prisma: Mock):
        granted = make_role(
            "Custom", [(ResourceType.GROUP_TODOS, ActionType.UPDATE)], role_id="role-1"
        )
        right_id = granted["actionRights"][0]["id"]
        mock_prisma.role.find_first = AsyncMock(
            side_effect=[granted, make_role("Custom", role_id="role-1")]
        )
        mock_prisma.role.count.return_value = 1

        result = await RoleService(mock_prisma).set_action_right(
            RoleScope.GROUP,
            GROUP_ID,
            "role-1",
            ActionRightUpdate(
                resource=ResourceType.GROUP_TODOS,
                action=ActionType.UPDATE,
                granted=False,
            ),
        )

        mock_prisma.actionright.update.assert_called_once_with(
            where={"id": right_id},
            data={"roles": {"disconnect": [{"id": "role-1"}]}},
        )
        assert result.action_rights == []
        mock_prisma.actionright.delete.assert_not_called()
        where = mock_prisma.role.count.call_args.kwargs["where"]
        assert where == {
            "id": {"not": "role-1"},
            "actionRights": {"some": {"id": right_id}},
        }

    @pytest.mark.asyncio
    async def test_revoke_deletes_right_held_by_no_other_role(
        self, mock_prisma: Mock
    ):
        granted = make_role(
            "Custom", [(ResourceType.GROUP_TODOS, ActionType.UPDATE)], role_id="role-1"
        )
        right_id = granted["actionRights"][0]["id"]
        mock_prisma.role.find_first = AsyncMock(
            side_effect=[granted, make_role("Custom", role_id="role-1")]
        )

        await RoleService(mock_prisma).set_action_right(
            RoleScope.GROUP,
            GROUP_ID,
            "role-1",
            ActionRightUpdate(
                resource=ResourceType.GROUP_TODOS,
                action=ActionType.UPDATE,
                granted=False,
            ),
        )

        mock_prisma.actionright.delete.assert_called_once_with(where={"id": right_id})
        mock_prisma.actionright.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_change_skips_write(self, mock_prisma: Mock):
        mock_prisma.role.find_first.return_value = make_role("Custom", role_id="role-1")

        await RoleService(mock_prisma).set_action_right(
            RoleScope.GROUP,
            GROUP_ID,
            "role-1",
            ActionRightUpdate(
                resource=ResourceType.GROUPS, action=ActionType.VIEW, granted=False
            ),
        )

        mock_prisma.actionright.create.assert_not_called()
        mock_prisma.actionright.update.assert_not_called()


class TestSeedDefaultRoles:
    @pytest.mark.asyncio
    async def test_seeds_missing_templates(self, mock_prisma: Mock):
        mock_prisma.role.find_many.return_value = [
            make_role("Author", scope="amendment")
        ]
        mock_prisma.role.create.return_value = make_role(
            "Collaborator", scope="amendment"
        )

        result = await RoleService(mock_prisma).seed_default_roles(
            RoleScope.AMENDMENT, "amendment-1"
        )

        assert len(result) == 1
        data = mock_prisma.role.create.call_args.kwargs["data"]
        assert data["name"] == "Collaborator"
        assert data["amendmentId"] == "amendment-1"
        assert {
            (right["resource"], right["action"])
            for right in data["actionRights"]["create"]
        } == {("amendments", "view"), ("amendments", "update")}

    @pytest.mark.asyncio
    async def test_links_caller_to_lead_role(self, mock_prisma: Mock):
        mock_prisma.role.create = AsyncMock(
            side_effect=[
                make_role("Author", role_id="role-author", scope="amendment"),
                make_role("Collaborator", role_id="role-collab", scope="amendment"),
            ]
        )

        result = await RoleService(mock_prisma).seed_default_roles(
            RoleScope.AMENDMENT, "amendment-1", "user-1"
        )

        assert [role.name for role in result] == ["Author", "Collaborator"]
        mock_prisma.amendmentrolecollaborator.create.assert_called_once_with(
            data={
                "userId": "user-1",
                "amendmentId": "amendment-1",
                "roleId": "role-author",
                "status": "admin",
            }
        )

    @pytest.mark.asyncio
    async def test_assigns_lead_role_to_roleless_membership(self, mock_prisma: Mock):
        mock_prisma.role.find_many.return_value = [
            make_role("Admin", role_id="role-admin"),
            make_role("Moderator"),
            make_role("Member"),
        ]
        mock_prisma.groupmembership.find_first.return_value = make_membership(
            GROUP_ID, None, status="admin", user_id="user-1"
        )

        result = await RoleService(mock_prisma).seed_default_roles(
            RoleScope.GROUP, GROUP_ID, "user-1"
        )

        assert result == []
        mock_prisma.role.create.assert_not_called()
        mock_prisma.groupmembership.update.assert_called_once()
        update = mock_prisma.groupmembership.update.call_args.kwargs
        assert update["data"] == {"roleId": "role-admin", "status": "admin"}

    @pytest.mark.asyncio
    async def test_keeps_existing_role_of_caller(self, mock_prisma: Mock, member_role):
        mock_prisma.role.find_many.return_value = [
            make_role("Admin"),
            make_role("Moderator"),
            make_role("Member"),
        ]
        mock_prisma.groupmembership.find_first.return_value = make_membership(
            GROUP_ID, member_role, user_id="user-1"
        )

        await RoleService(mock_prisma).seed_default_roles(
            RoleScope.GROUP, GROUP_ID, "user-1"
        )

        mock_prisma.groupmembership.update.assert_not_called()
        mock_prisma.groupmembership.create.assert_not_called()
