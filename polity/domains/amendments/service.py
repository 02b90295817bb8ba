# polity/domains/amendments/service.py
import logging

from polity.core.database import DatabaseClient
from polity.domains.amendments.models import AmendmentWorkflowResponse
from polity.domains.amendments.workflow import (
    WorkflowStatus,
    can_transition_to,
    get_default_workflow_status,
)
from polity.shared.exceptions import (
    AmendmentNotFoundError,
    CollaboratorNotFoundError,
    InvalidWorkflowTransitionError,
    WriteFailedError,
)
from polity.shared.members import MemberService
from polity.shared.permissions.models import RoleScope
from polity.shared.permissions.resolver import AMENDMENT_INCLUDE
from polity.shared.permissions.types import Amendment

logger = logging.getLogger(__name__)

AUTHOR_ROLE = "Author"
COLLABORATOR_ROLE = "Collaborator"


class AmendmentService:
    """Amendment lookup and workflow transitions."""

    def __init__(self, db: DatabaseClient):
        self.db = db

    async def get_amendment(self, amendment_id: str) -> Amendment:
        """
        Fetch an amendment with the relations permission checks need.

        Raises:
            AmendmentNotFoundError: If the amendment does not exist
        """
        row = await self.db.amendment.find_unique(
            where={"id": amendment_id}, include=AMENDMENT_INCLUDE
        )
        if not row:
            raise AmendmentNotFoundError()
        return Amendment.model_validate(row)

    @staticmethod
    def current_status(amendment: Amendment) -> WorkflowStatus:
        """Stored workflow status, falling back to the default phase."""
        if not amendment.workflow_status:
            return get_default_workflow_status()
        try:
            return WorkflowStatus(amendment.workflow_status)
        except ValueError:
            logger.warning(
                f"Amendment {amendment.id} has unknown workflow status "
                f"'{amendment.workflow_status}', treating it as "
                f"{get_default_workflow_status().value}"
            )
            return get_default_workflow_status()

    async def transition_workflow(
        self, amendment: Amendment, target: WorkflowStatus
    ) -> AmendmentWorkflowResponse:
        """
        Move an amendment to ``target`` along the workflow transition table.

        Raises:
            InvalidWorkflowTransitionError: If the transition is not allowed
            WriteFailedError: If the update fails
        """
        current = self.current_status(amendment)
        if not can_transition_to(current, target):
            raise InvalidWorkflowTransitionError(
                f"Cannot move amendment from {current.value} to {target.value}"
            )

        try:
            row = await self.db.amendment.update(
                where={"id": amendment.id},
                data={"workflowStatus": target.value},
            )
        except Exception as e:
            logger.error(
                f"Failed to update workflow of amendment {amendment.id}: {e}",
                exc_info=True,
            )
            raise WriteFailedError(
                "Failed to update workflow status. Please try again."
            )

        logger.info(
            f"Amendment {amendment.id} moved from {current.value} to {target.value}"
        )
        return AmendmentWorkflowResponse.from_record(Amendment.model_validate(row))


class CollaboratorService(MemberService):
    """Collaborator management on a single amendment."""

    model = "amendmentrolecollaborator"
    scope = RoleScope.AMENDMENT
    scope_field = "amendmentId"
    promote_role = AUTHOR_ROLE
    demote_role = COLLABORATOR_ROLE
    not_found = CollaboratorNotFoundError
    label = "collaborator"
