# polity/domains/roles/dependencies.py
from fastapi import Depends

from polity.core.database import DatabaseClient, get_db
from polity.domains.auth.dependencies import get_current_user_id
from polity.shared.permissions import (
    ActionType,
    PermissionContext,
    PermissionResolver,
    PermissionSet,
    ResourceType,
    RoleScope,
    check_any_permission,
)

A = ActionType
R = ResourceType

# Grants allowing changes to the roles of a scope instance
ROLE_MANAGEMENT_GRANTS: dict[RoleScope, list[tuple[ActionType, ResourceType]]] = {
    RoleScope.GROUP: [(A.MANAGE, R.GROUP_ROLES), (A.MANAGE_ROLES, R.GROUPS)],
    RoleScope.EVENT: [(A.MANAGE, R.EVENTS), (A.MANAGE_ROLES, R.EVENTS)],
    RoleScope.BLOG: [(A.MANAGE, R.BLOGS), (A.MANAGE_ROLES, R.BLOGS)],
    RoleScope.AMENDMENT: [(A.MANAGE, R.AMENDMENTS), (A.MANAGE_ROLES, R.AMENDMENTS)],
}

# Grants allowing the roles of a scope instance to be listed
ROLE_VIEW_GRANTS: dict[RoleScope, list[tuple[ActionType, ResourceType]]] = {
    RoleScope.GROUP: [(A.VIEW, R.GROUP_ROLES), (A.VIEW, R.GROUPS)],
    RoleScope.EVENT: [(A.VIEW, R.EVENTS)],
    RoleScope.BLOG: [(A.VIEW, R.BLOGS)],
    RoleScope.AMENDMENT: [(A.VIEW, R.AMENDMENTS)],
}


def get_scope_context(scope: RoleScope, scope_id: str) -> PermissionContext:
    """Permission context for the scope instance named in the path."""
    if scope == RoleScope.GROUP:
        return PermissionContext(group_id=scope_id)
    if scope == RoleScope.EVENT:
        return PermissionContext(event_id=scope_id)
    if scope == RoleScope.BLOG:
        return PermissionContext(blog_id=scope_id)
    return PermissionContext(amendment_id=scope_id)


async def _resolve_scope_permissions(
    scope: RoleScope, scope_id: str, user_id: str, db: DatabaseClient
) -> PermissionSet:
    return await PermissionResolver(db).resolve(
        user_id, get_scope_context(scope, scope_id)
    )


async def require_role_management(
    scope: RoleScope,
    scope_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseClient = Depends(get_db),
) -> PermissionSet:
    """
    Validate the user may manage the roles of the scope instance in the path.

    Raises:
        InsufficientPermissionsError: If none of the scope's grants is held
    """
    permissions = await _resolve_scope_permissions(scope, scope_id, user_id, db)
    check_any_permission(permissions, ROLE_MANAGEMENT_GRANTS[scope])
    return permissions


async def require_role_view(
    scope: RoleScope,
    scope_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseClient = Depends(get_db),
) -> PermissionSet:
    """Validate the user may list the roles of the scope instance in the path."""
    permissions = await _resolve_scope_permissions(scope, scope_id, user_id, db)
    check_any_permission(
        permissions,
        ROLE_VIEW_GRANTS[scope] + ROLE_MANAGEMENT_GRANTS[scope],
        strict=False,
    )
    return permissions


async def require_role_seeding(
    scope: RoleScope,
    scope_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseClient = Depends(get_db),
) -> PermissionSet:
    """
    Validate the user may seed the default roles of the scope instance.

    Role managers may always seed. An amendment has no roles right after it
    is created, so its author or owner may seed it too.

    Raises:
        InsufficientPermissionsError: If neither condition holds
    """
    permissions = await _resolve_scope_permissions(scope, scope_id, user_id, db)
    if scope == RoleScope.AMENDMENT and permissions.is_author():
        return permissions
    check_any_permission(permissions, ROLE_MANAGEMENT_GRANTS[scope])
    return permissions
