# polity/domains/participants/routes.py
from typing import List

from fastapi import APIRouter, Depends, status

from polity.core.database import DatabaseClient, get_db
from polity.domains.auth.dependencies import get_current_user_id
from polity.domains.participants.dependencies import (
    PARTICIPANT_MANAGEMENT_GRANTS,
    get_event_context,
    require_participant_management,
    require_participant_view,
)
from polity.domains.participants.service import EventParticipantService
from polity.shared.members import (
    MemberInvite,
    MemberResponse,
    MemberUpdate,
    authorize_member_removal,
)
from polity.shared.permissions import PermissionResolver, PermissionSet

router = APIRouter(prefix="/events", tags=["Event Participants"])


@router.get(
    "/{event_id}/participants",
    response_model=List[MemberResponse],
    operation_id="listEventParticipants",
)
async def list_participants(
    event_id: str,
    permissions: PermissionSet = Depends(require_participant_view),
    db: DatabaseClient = Depends(get_db),
) -> List[MemberResponse]:
    service = EventParticipantService(db)
    return await service.list_members(event_id)


@router.post(
    "/{event_id}/participants",
    response_model=List[MemberResponse],
    status_code=status.HTTP_201_CREATED,
    operation_id="inviteEventParticipants",
)
async def invite_participants(
    event_id: str,
    invite: MemberInvite,
    permissions: PermissionSet = Depends(require_participant_management),
    db: DatabaseClient = Depends(get_db),
) -> List[MemberResponse]:
    """Invite users to the event with a role."""
    service = EventParticipantService(db)
    return await service.invite(event_id, invite)


@router.patch(
    "/{event_id}/participants/{participant_id}",
    response_model=MemberResponse,
    operation_id="updateEventParticipant",
)
async def update_participant(
    event_id: str,
    participant_id: str,
    update: MemberUpdate,
    permissions: PermissionSet = Depends(require_participant_management),
    db: DatabaseClient = Depends(get_db),
) -> MemberResponse:
    """Accept a participation request or change a participant's role."""
    service = EventParticipantService(db)
    return await service.update_member(event_id, participant_id, update)


@router.delete(
    "/{event_id}/participants/{participant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    operation_id="removeEventParticipant",
)
async def remove_participant(
    event_id: str,
    participant_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DatabaseClient = Depends(get_db),
) -> None:
    """Remove a participant, decline a request or leave the event."""
    permissions = await PermissionResolver(db).resolve(
        user_id, get_event_context(event_id)
    )
    service = EventParticipantService(db)
    await authorize_member_removal(
        service, permissions, event_id, participant_id, PARTICIPANT_MANAGEMENT_GRANTS
    )
    await service.remove_member(event_id, participant_id)
