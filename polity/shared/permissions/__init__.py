"""
Shared permission system for role-based access control.

Roles bundle action rights (resource + action pairs) and are attached to
users through group memberships, event participations, blog bloggers and
amendment collaborators. A PermissionSet answers ``can(action, resource)``
for one user in one PermissionContext.

Usage:
    from polity.shared.permissions import ActionType, ResourceType, require_permission

    @router.delete("/{group_id}/todos/{todo_id}")
    async def delete_todo(
        permissions: PermissionSet = Depends(
            require_permission(ActionType.DELETE, ResourceType.GROUP_TODOS)
        )
    ):
        pass
"""

from .dependencies import (
    check_any_permission,
    get_permission_context,
    get_permissions,
    require_any_permission,
    require_permission,
)
from .models import (
    ACTION_RIGHTS,
    DEFAULT_ROLES,
    PERMISSION_IMPLIES,
    ActionType,
    ResourceType,
    RoleScope,
)
from .resolver import PermissionResolver, PermissionSet
from .services import action_satisfies
from .types import PermissionContext

__all__ = [
    "ACTION_RIGHTS",
    "DEFAULT_ROLES",
    "PERMISSION_IMPLIES",
    "ActionType",
    "PermissionContext",
    "PermissionResolver",
    "PermissionSet",
    "ResourceType",
    "RoleScope",
    "action_satisfies",
    "check_any_permission",
    "get_permission_context",
    "get_permissions",
    "require_any_permission",
    "require_permission",
]
