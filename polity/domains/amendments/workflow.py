# polity/domains/amendments/workflow.py
"""
Amendment workflow states and the transitions allowed between them.

Collaborators move an amendment between the internal phases themselves;
once an amendment is handed to an event, its progress is driven by the
event's organizers until it is either passed or rejected.
"""

from enum import Enum


class WorkflowStatus(str, Enum):
    COLLABORATIVE_EDITING = "collaborative_editing"
    INTERNAL_SUGGESTING = "internal_suggesting"
    INTERNAL_VOTING = "internal_voting"
    VIEWING = "viewing"
    EVENT_SUGGESTING = "event_suggesting"
    EVENT_VOTING = "event_voting"
    PASSED = "passed"
    REJECTED = "rejected"


W = WorkflowStatus

WORKFLOW_TRANSITIONS: dict[WorkflowStatus, frozenset[WorkflowStatus]] = {
    W.COLLABORATIVE_EDITING: frozenset(
        {W.INTERNAL_SUGGESTING, W.INTERNAL_VOTING, W.VIEWING, W.EVENT_SUGGESTING}
    ),
    W.INTERNAL_SUGGESTING: frozenset(
        {W.COLLABORATIVE_EDITING, W.INTERNAL_VOTING, W.VIEWING, W.EVENT_SUGGESTING}
    ),
    W.INTERNAL_VOTING: frozenset(
        {W.COLLABORATIVE_EDITING, W.INTERNAL_SUGGESTING, W.VIEWING, W.EVENT_SUGGESTING}
    ),
    W.VIEWING: frozenset(
        {
            W.COLLABORATIVE_EDITING,
            W.INTERNAL_SUGGESTING,
            W.INTERNAL_VOTING,
            W.EVENT_SUGGESTING,
        }
    ),
    W.EVENT_SUGGESTING: frozenset({W.EVENT_VOTING, W.VIEWING, W.REJECTED}),
    W.EVENT_VOTING: frozenset({W.EVENT_SUGGESTING, W.PASSED, W.REJECTED}),
    W.PASSED: frozenset(),
    W.REJECTED: frozenset(),
}

COLLABORATOR_SELECTABLE_STATUSES = frozenset(
    {W.COLLABORATIVE_EDITING, W.INTERNAL_SUGGESTING, W.INTERNAL_VOTING, W.VIEWING}
)
EVENT_CONTROLLED_STATUSES = frozenset({W.EVENT_SUGGESTING, W.EVENT_VOTING})
TERMINAL_STATUSES = frozenset({W.PASSED, W.REJECTED})


def can_transition_to(current: WorkflowStatus, target: WorkflowStatus) -> bool:
    return target in WORKFLOW_TRANSITIONS[current]


def is_event_phase(status: WorkflowStatus) -> bool:
    """Event-controlled and terminal statuses are both owned by the event."""
    return status in EVENT_CONTROLLED_STATUSES or status in TERMINAL_STATUSES


def is_terminal_status(status: WorkflowStatus) -> bool:
    return status in TERMINAL_STATUSES


def is_selectable_by_collaborator(status: WorkflowStatus) -> bool:
    return status in COLLABORATOR_SELECTABLE_STATUSES


def get_default_workflow_status() -> WorkflowStatus:
    return WorkflowStatus.COLLABORATIVE_EDITING
