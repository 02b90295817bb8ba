# polity/domains/amendments/dependencies.py
from polity.domains.amendments.workflow import WorkflowStatus, is_event_phase
from polity.shared.exceptions import InvalidWorkflowTransitionError
from polity.shared.permissions import (
    ActionType,
    PermissionContext,
    ResourceType,
    require_any_permission,
)
from polity.shared.permissions.types import Amendment

COLLABORATOR_MANAGEMENT_GRANTS = (
    (ActionType.MANAGE, ResourceType.AMENDMENT_COLLABORATORS),
    (ActionType.MANAGE, ResourceType.AMENDMENTS),
)
COLLABORATOR_VIEW_GRANTS = (
    (ActionType.VIEW, ResourceType.AMENDMENT_COLLABORATORS),
    (ActionType.VIEW, ResourceType.AMENDMENTS),
)
COLLABORATOR_WORKFLOW_GRANTS = ((ActionType.UPDATE, ResourceType.AMENDMENTS),)
EVENT_WORKFLOW_GRANTS = (
    (ActionType.MANAGE_VOTES, ResourceType.EVENTS),
    (ActionType.MANAGE, ResourceType.EVENTS),
)


def get_amendment_context(amendment_id: str) -> PermissionContext:
    """Permission context for the amendment named in the path."""
    return PermissionContext(amendment_id=amendment_id)


require_collaborator_view = require_any_permission(
    *COLLABORATOR_VIEW_GRANTS,
    *COLLABORATOR_MANAGEMENT_GRANTS,
    context=get_amendment_context,
    strict=False,
)
require_collaborator_management = require_any_permission(
    *COLLABORATOR_MANAGEMENT_GRANTS, context=get_amendment_context
)


def workflow_permission_scope(
    amendment: Amendment, current: WorkflowStatus, target: WorkflowStatus
) -> tuple[PermissionContext, tuple[tuple[ActionType, ResourceType], ...]]:
    """
    Context and grants needed to move an amendment from ``current`` to
    ``target``.

    Moves between collaborator-selectable statuses are decided inside the
    amendment. Anything entering or leaving an event phase is decided by
    the amendment's current event alone.

    Raises:
        InvalidWorkflowTransitionError: If an event phase is involved but the
            amendment has no current event
    """
    if not (is_event_phase(current) or is_event_phase(target)):
        return PermissionContext(amendment=amendment), COLLABORATOR_WORKFLOW_GRANTS

    if not amendment.current_event_id:
        raise InvalidWorkflowTransitionError("Amendment is not assigned to an event")
    return (
        PermissionContext(event_id=amendment.current_event_id),
        EVENT_WORKFLOW_GRANTS,
    )
