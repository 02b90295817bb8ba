import logging
from collections.abc import Sequence
from typing import Awaitable, Callable, Optional

from fastapi import Depends, Query

from polity.core.database import DatabaseClient, get_db
from polity.domains.auth.dependencies import get_current_user_id, get_optional_user_id
from polity.shared.exceptions import InsufficientPermissionsError

from .models import ActionType, ResourceType
from .resolver import PermissionResolver, PermissionSet
from .types import PermissionContext

logger = logging.getLogger(__name__)

ContextDependency = Callable[..., PermissionContext]


def get_permission_context(
    group_id: Optional[str] = Query(None),
    event_id: Optional[str] = Query(None),
    blog_id: Optional[str] = Query(None),
    amendment_id: Optional[str] = Query(None),
) -> PermissionContext:
    """Build the permission context from query parameters."""
    return PermissionContext(
        group_id=group_id,
        event_id=event_id,
        blog_id=blog_id,
        amendment_id=amendment_id,
    )


async def get_permissions(
    context: PermissionContext = Depends(get_permission_context),
    user_id: Optional[str] = Depends(get_optional_user_id),
    db: DatabaseClient = Depends(get_db),
) -> PermissionSet:
    """Resolve permissions for the caller, anonymous callers included."""
    return await PermissionResolver(db).resolve(user_id, context)


def check_any_permission(
    permissions: PermissionSet,
    grants: Sequence[tuple[ActionType, ResourceType]],
    strict: bool = True,
) -> None:
    """
    Raise unless the resolved permissions hold one of ``grants``.

    With ``strict`` set (the default, used for writes) a grant only counts
    through an active relation in its scope, see ``PermissionSet.can_act``.

    Raises:
        InsufficientPermissionsError: If no grant is held
    """
    if permissions.can_any(grants, strict=strict):
        return

    required = " or ".join(
        f"{action.value} {resource.value}" for action, resource in grants
    )
    logger.debug(f"Permission denied for user {permissions.user_id}: {required}")
    raise InsufficientPermissionsError(f"Insufficient permissions: {required} required")


def require_any_permission(
    *grants: tuple[ActionType, ResourceType],
    context: ContextDependency = get_permission_context,
    strict: bool = True,
) -> Callable[..., Awaitable[PermissionSet]]:
    """
    Dependency factory for role-based authorization.

    Creates a dependency that resolves the caller's permissions in the
    context produced by ``context`` and passes if any of ``grants`` is held.

    Args:
        grants: (action, resource) pairs, any one of which is sufficient
        context: Dependency producing the PermissionContext for the request
        strict: Require an active relation in the granting scope

    Returns:
        Async dependency function that validates permission and returns the
        resolved PermissionSet
    """
    if not grants:
        raise ValueError("require_any_permission needs at least one grant")

    async def check_permission(
        permission_context: PermissionContext = Depends(context),
        user_id: str = Depends(get_current_user_id),
        db: DatabaseClient = Depends(get_db),
    ) -> PermissionSet:
        """
        Validate the user holds one of the required grants.

        Raises:
            InsufficientPermissionsError: If no grant is held
        """
        permissions = await PermissionResolver(db).resolve(user_id, permission_context)
        check_any_permission(permissions, grants, strict=strict)
        return permissions

    return check_permission


def require_permission(
    action: ActionType,
    resource: ResourceType,
    context: ContextDependency = get_permission_context,
) -> Callable[..., Awaitable[PermissionSet]]:
    """Dependency factory requiring a single (action, resource) grant."""
    return require_any_permission((action, resource), context=context)
