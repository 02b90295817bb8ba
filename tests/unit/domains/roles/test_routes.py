"""
Tests for role routes in polity/domains/roles/routes.py

Exercises the HTTP layer end to end against the mocked database: the
role-management guard, request validation and status codes.
"""

from typing import Dict
from unittest.mock import AsyncMock, Mock

from fastapi.testclient import TestClient

from polity.shared.permissions.models import ActionType, ResourceType
from tests.fixtures.permission_fixtures import (
    make_amendment,
    make_membership,
    make_role,
)

GROUP_ID = "group-123"
USER_ID = "test-user-id-123"


class TestRoleManagementGuard:
    def test_requires_authentication(self, client: TestClient):
        response = client.post(f"/api/v1/roles/group/{GROUP_ID}", json={"name": "X"})

        assert response.status_code == 401

    def test_member_cannot_create_role(
        self,
        client: TestClient,
        mock_prisma: Mock,
        auth_headers: Dict[str, str],
        admin_role,
        member_role,
    ):
        """The Admin role in the group's pool does not make a Member an admin."""
        mock_prisma.groupmembership.find_many.return_value = [
            make_membership(
                GROUP_ID, member_role, group_roles=[admin_role, member_role]
            )
        ]

        response = client.post(
            f"/api/v1/roles/group/{GROUP_ID}",
            json={"name": "Treasurer"},
            headers=auth_headers,
        )

        assert response.status_code == 403
        mock_prisma.role.create.assert_not_called()

    def test_invited_admin_cannot_create_role(
        self,
        client: TestClient,
        mock_prisma: Mock,
        auth_headers: Dict[str, str],
        admin_role,
        member_role,
    ):
        mock_prisma.groupmembership.find_many.return_value = [
            make_membership(
                GROUP_ID,
                admin_role,
                status="invited",
                group_roles=[admin_role, member_role],
            )
        ]

        response = client.post(
            f"/api/v1/roles/group/{GROUP_ID}",
            json={"name": "Treasurer"},
            headers=auth_headers,
        )

        assert response.status_code == 403
        mock_prisma.role.create.assert_not_called()

    def test_active_admin_creates_role(
        self,
        client: TestClient,
        mock_prisma: Mock,
        auth_headers: Dict[str, str],
        admin_role,
        member_role,
    ):
        mock_prisma.groupmembership.find_many.return_value = [
            make_membership(
                GROUP_ID, admin_role, group_roles=[admin_role, member_role]
            )
        ]
        mock_prisma.role.create.return_value = make_role("Treasurer", role_id="role-9")

        response = client.post(
            f"/api/v1/roles/group/{GROUP_ID}",
            json={"name": "Treasurer"},
            headers=auth_headers,
        )

        assert response.status_code == 201

    def test_manage_roles_grant_is_enough(
        self, client: TestClient, mock_prisma: Mock, auth_headers: Dict[str, str]
    ):
        role_manager = make_role(
            "Role Manager", [(ResourceType.GROUPS, ActionType.MANAGE_ROLES)]
        )
        mock_prisma.groupmembership.find_many.return_value = [
            make_membership(GROUP_ID, role_manager)
        ]
        mock_prisma.role.create.return_value = make_role("Treasurer", role_id="role-9")

        response = client.post(
            f"/api/v1/roles/group/{GROUP_ID}",
            json={"name": "Treasurer"},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["id"] == "role-9"

    def test_unknown_scope_is_rejected(
        self, client: TestClient, auth_headers: Dict[str, str]
    ):
        response = client.get("/api/v1/roles/planet/p-1", headers=auth_headers)

        assert response.status_code == 422


class TestRoleRoutes:
    def test_list_roles(
        self,
        client: TestClient,
        mock_prisma: Mock,
        auth_headers: Dict[str, str],
        member_role,
    ):
        mock_prisma.groupmembership.find_many.return_value = [
            make_membership(
                GROUP_ID, make_role("Viewer", [(ResourceType.GROUPS, ActionType.VIEW)])
            )
        ]
        mock_prisma.role.find_many.return_value = [member_role]

        response = client.get(f"/api/v1/roles/group/{GROUP_ID}", headers=auth_headers)

        assert response.status_code == 200
        assert [role["name"] for role in response.json()] == ["Member"]

    def test_toggle_right(
        self,
        client: TestClient,
        mock_prisma: Mock,
        auth_headers: Dict[str, str],
        admin_role,
    ):
        mock_prisma.groupmembership.find_many.return_value = [
            make_membership(GROUP_ID, admin_role)
        ]
        mock_prisma.role.find_first.return_value = make_role("Custom", role_id="role-1")

        response = client.put(
            f"/api/v1/roles/group/{GROUP_ID}/role-1/rights",
            json={"resource": "groupTodos", "action": "update", "granted": True},
            headers=auth_headers,
        )

        assert response.status_code == 200
        mock_prisma.actionright.create.assert_called_once()

    def test_toggle_unknown_action_is_rejected(
        self,
        client: TestClient,
        mock_prisma: Mock,
        auth_headers: Dict[str, str],
        admin_role,
    ):
        mock_prisma.groupmembership.find_many.return_value = [
            make_membership(GROUP_ID, admin_role)
        ]

        response = client.put(
            f"/api/v1/roles/group/{GROUP_ID}/role-1/rights",
            json={"resource": "groupTodos", "action": "fly", "granted": True},
            headers=auth_headers,
        )

        assert response.status_code == 422

    def test_remove_role(
        self,
        client: TestClient,
        mock_prisma: Mock,
        auth_headers: Dict[str, str],
        admin_role,
    ):
        mock_prisma.groupmembership.find_many.return_value = [
            make_membership(GROUP_ID, admin_role)
        ]
        mock_prisma.role.find_first.return_value = make_role("Old", role_id="role-1")

        response = client.delete(
            f"/api/v1/roles/group/{GROUP_ID}/role-1", headers=auth_headers
        )

        assert response.status_code == 204
        mock_prisma.role.delete.assert_called_once_with(where={"id": "role-1"})

    def test_action_right_options(self, client: TestClient):
        response = client.get("/api/v1/roles/action-rights")

        assert response.status_code == 200
        assert {
            "resource": "events",
            "action": "manage_votes",
            "label": "Manage Votes",
        } in response.json()


class TestSeedDefaultsRoute:
    def test_author_seeds_fresh_amendment(
        self, client: TestClient, mock_prisma: Mock, auth_headers: Dict[str, str]
    ):
        mock_prisma.amendment.find_unique.return_value = make_amendment(
            "amend-1", author_id=USER_ID
        )
        mock_prisma.role.create = AsyncMock(
            side_effect=[
                make_role("Author", role_id="role-author", scope="amendment"),
                make_role("Collaborator", role_id="role-collab", scope="amendment"),
            ]
        )

        response = client.post(
            "/api/v1/roles/amendment/amend-1/defaults", headers=auth_headers
        )

        assert response.status_code == 201
        assert [role["name"] for role in response.json()] == ["Author", "Collaborator"]
        data = mock_prisma.amendmentrolecollaborator.create.call_args.kwargs["data"]
        assert data["userId"] == USER_ID
        assert data["roleId"] == "role-author"

    def test_other_user_cannot_seed_amendment(
        self, client: TestClient, mock_prisma: Mock, auth_headers: Dict[str, str]
    ):
        mock_prisma.amendment.find_unique.return_value = make_amendment(
            "amend-1", author_id="someone-else"
        )

        response = client.post(
            "/api/v1/roles/amendment/amend-1/defaults", headers=auth_headers
        )

        assert response.status_code == 403
        mock_prisma.role.create.assert_not_called()

    def test_group_seeding_still_needs_role_management(
        self,
        client: TestClient,
        mock_prisma: Mock,
        auth_headers: Dict[str, str],
        member_role,
    ):
        mock_prisma.groupmembership.find_many.return_value = [
            make_membership(GROUP_ID, member_role)
        ]

        response = client.post(
            f"/api/v1/roles/group/{GROUP_ID}/defaults", headers=auth_headers
        )

        assert response.status_code == 403
