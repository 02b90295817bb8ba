# polity/domains/participants/dependencies.py
from polity.shared.permissions import (
    ActionType,
    PermissionContext,
    ResourceType,
    require_any_permission,
)

PARTICIPANT_MANAGEMENT_GRANTS = (
    (ActionType.MANAGE_PARTICIPANTS, ResourceType.EVENTS),
    (ActionType.MANAGE, ResourceType.EVENT_PARTICIPANTS),
    (ActionType.MANAGE, ResourceType.EVENTS),
)
PARTICIPANT_VIEW_GRANTS = (
    (ActionType.VIEW, ResourceType.EVENT_PARTICIPANTS),
    (ActionType.VIEW, ResourceType.EVENTS),
)


def get_event_context(event_id: str) -> PermissionContext:
    """Permission context for the event named in the path."""
    return PermissionContext(event_id=event_id)


require_participant_view = require_any_permission(
    *PARTICIPANT_VIEW_GRANTS,
    *PARTICIPANT_MANAGEMENT_GRANTS,
    context=get_event_context,
    strict=False,
)
require_participant_management = require_any_permission(
    *PARTICIPANT_MANAGEMENT_GRANTS, context=get_event_context
)
