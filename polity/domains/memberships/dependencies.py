# polity/domains/memberships/dependencies.py
from polity.shared.permissions import (
    ActionType,
    PermissionContext,
    ResourceType,
    require_any_permission,
)

MEMBERSHIP_MANAGEMENT_GRANTS = (
    (ActionType.MANAGE, ResourceType.GROUP_MEMBERSHIPS),
    (ActionType.MANAGE, ResourceType.GROUPS),
)
MEMBERSHIP_VIEW_GRANTS = (
    (ActionType.VIEW, ResourceType.GROUP_MEMBERSHIPS),
    (ActionType.VIEW, ResourceType.GROUPS),
)


def get_group_context(group_id: str) -> PermissionContext:
    """Permission context for the group named in the path."""
    return PermissionContext(group_id=group_id)


require_membership_view = require_any_permission(
    *MEMBERSHIP_VIEW_GRANTS,
    *MEMBERSHIP_MANAGEMENT_GRANTS,
    context=get_group_context,
    strict=False,
)
require_membership_management = require_any_permission(
    *MEMBERSHIP_MANAGEMENT_GRANTS, context=get_group_context
)
