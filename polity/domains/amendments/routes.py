# polity/domains/amendments/routes.py
from typing import List

from fastapi import APIRouter, Depends, status

from polity.core.database import DatabaseClient, get_db
from polity.domains.amendments.dependencies import (
    COLLABORATOR_MANAGEMENT_GRANTS,
    get_amendment_context,
    require_collaborator_management,
    require_collaborator_view,
    workflow_permission_scope,
)
from polity.domains.amendments.models import AmendmentWorkflowResponse, WorkflowUpdate
from polity.domains.amendments.service import AmendmentService, CollaboratorService
from polity.domains.auth.dependencies import get_current_user_id
from polity.shared.members import (
    MemberInvite,
    MemberResponse,
    MemberUpdate,
    authorize_member_removal,
)
from polity.shared.permissions import (
    PermissionResolver,
    PermissionSet,
    check_any_permission,
)

router = APIRouter(prefix="/amendments", tags=["Amendments"])


@router.get(
    "/{amendment_id}/collaborators",
    response_model=List[MemberResponse],
    operation_id="listCollaborators",
)
async def list_collaborators(
    amendment_id: str,
    permissions: PermissionSet = Depends(require_collaborator_view),
    db: DatabaseClient = Depends(get_db),
) -> List[MemberResponse]:
    """Get all collaborators of an amendment with their roles."""
    service = CollaboratorService(db)
    return await service.list_members(amendment_id)


@router.post(
    "/{amendment_id}/collaborators",
    response_model=List[MemberResponse],
    status_code=status.HTTP_201_CREATED,
    operation_id="inviteCollaborators",
)
async def invite_collaborators(
    amendment_id: str,
    invite: MemberInvite,
    permissions: PermissionSet = Depends(require_collaborator_management),
    db: DatabaseClient = Depends(get_db),
) -> List[MemberResponse]:
    """Invite users to the amendment. Returns the rows that were created."""
    service = CollaboratorService(db)
    return await service.invite(amendment_id, invite)


@router.patch(
    "/{amendment_id}/collaborators/{collaborator_id}",
    response_model=MemberResponse,
    operation_id="updateCollaborator",
)
async def update_collaborator(
    amendment_id: str,
    collaborator_id: str,
    update: MemberUpdate,
    permissions: PermissionSet = Depends(require_collaborator_management),
    db: DatabaseClient = Depends(get_db),
) -> MemberResponse:
    """Change role or status, approve a request, promote or demote."""
    service = CollaboratorService(db)
    return await service.update_member(amendment_id, collaborator_id, update)


@router.delete(
    "/{amendment_id}/collaborators/{collaborator_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    operation_id="removeCollaborator",
)
async def remove_collaborator(
    amendment_id: str,
    collaborator_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseClient = Depends(get_db),
) -> None:
    """
    Remove a collaborator, reject a request or withdraw from an amendment.

    Users may always withdraw themselves; removing anyone else needs
    collaborator management rights.
    """
    permissions = await PermissionResolver(db).resolve(
        user_id, get_amendment_context(amendment_id)
    )
    service = CollaboratorService(db)
    await authorize_member_removal(
        service,
        permissions,
        amendment_id,
        collaborator_id,
        COLLABORATOR_MANAGEMENT_GRANTS,
    )
    await service.remove_member(amendment_id, collaborator_id)


@router.patch(
    "/{amendment_id}/workflow",
    response_model=AmendmentWorkflowResponse,
    operation_id="updateWorkflowStatus",
)
async def update_workflow_status(
    amendment_id: str,
    update: WorkflowUpdate,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseClient = Depends(get_db),
) -> AmendmentWorkflowResponse:
    """
    Move an amendment through its workflow.

    Collaborators with update rights switch between the internal phases;
    event phases and final outcomes are controlled by the organizers of
    the amendment's current event.
    """
    service = AmendmentService(db)
    amendment = await service.get_amendment(amendment_id)
    current = service.current_status(amendment)

    context, grants = workflow_permission_scope(
        amendment, current, update.workflow_status
    )
    permissions = await PermissionResolver(db).resolve(user_id, context)
    check_any_permission(permissions, grants)

    return await service.transition_workflow(amendment, update.workflow_status)
