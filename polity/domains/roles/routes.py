# polity/domains/roles/routes.py
from typing import List

from fastapi import APIRouter, Depends, status

from polity.core.database import DatabaseClient, get_db
from polity.domains.roles.dependencies import (
    require_role_management,
    require_role_seeding,
    require_role_view,
)
from polity.domains.roles.models import (
    ActionRightOptionResponse,
    ActionRightUpdate,
    RoleCreate,
    RoleResponse,
)
from polity.domains.roles.service import RoleService
from polity.shared.permissions import ACTION_RIGHTS, PermissionSet, RoleScope

router = APIRouter(prefix="/roles", tags=["Roles"])


@router.get(
    "/action-rights",
    response_model=List[ActionRightOptionResponse],
    operation_id="listActionRightOptions",
)
async def list_action_right_options() -> List[ActionRightOptionResponse]:
    """Rights offered by the role permission matrix."""
    return [
        ActionRightOptionResponse(
            resource=option.resource, action=option.action, label=option.label
        )
        for option in ACTION_RIGHTS
    ]


@router.get(
    "/{scope}/{scope_id}",
    response_model=List[RoleResponse],
    operation_id="listRoles",
)
async def list_roles(
    scope: RoleScope,
    scope_id: str,
    permissions: PermissionSet = Depends(require_role_view),
    db: DatabaseClient = Depends(get_db),
) -> List[RoleResponse]:
    """Get all roles of a group, event, amendment or blog with their rights."""
    service = RoleService(db)
    return await service.list_roles(scope, scope_id)


@router.post(
    "/{scope}/{scope_id}",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
    operation_id="createRole",
)
async def create_role(
    scope: RoleScope,
    scope_id: str,
    role_data: RoleCreate,
    permissions: PermissionSet = Depends(require_role_management),
    db: DatabaseClient = Depends(get_db),
) -> RoleResponse:
    """Create a new role without any rights."""
    service = RoleService(db)
    return await service.create_role(scope, scope_id, role_data)


@router.post(
    "/{scope}/{scope_id}/defaults",
    response_model=List[RoleResponse],
    status_code=status.HTTP_201_CREATED,
    operation_id="seedDefaultRoles",
)
async def seed_default_roles(
    scope: RoleScope,
    scope_id: str,
    permissions: PermissionSet = Depends(require_role_seeding),
    db: DatabaseClient = Depends(get_db),
) -> List[RoleResponse]:
    """
    Create the default role templates for the scope instance.

    Returns only the roles that were created; templates already present by
    name are skipped. The caller is linked to the lead template unless they
    already hold a role on the instance.
    """
    service = RoleService(db)
    return await service.seed_default_roles(scope, scope_id, permissions.user_id)


@router.delete(
    "/{scope}/{scope_id}/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    operation_id="removeRole",
)
async def remove_role(
    scope: RoleScope,
    scope_id: str,
    role_id: str,
    permissions: PermissionSet = Depends(require_role_management),
    db: DatabaseClient = Depends(get_db),
) -> None:
    """Remove a role from the scope instance."""
    service = RoleService(db)
    await service.remove_role(scope, scope_id, role_id)


@router.put(
    "/{scope}/{scope_id}/{role_id}/rights",
    response_model=RoleResponse,
    operation_id="setActionRight",
)
async def set_action_right(
    scope: RoleScope,
    scope_id: str,
    role_id: str,
    update: ActionRightUpdate,
    permissions: PermissionSet = Depends(require_role_management),
    db: DatabaseClient = Depends(get_db),
) -> RoleResponse:
    """Grant or revoke one action right on a role."""
    service = RoleService(db)
    return await service.set_action_right(scope, scope_id, role_id, update)
