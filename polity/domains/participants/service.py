# polity/domains/participants/service.py
from polity.shared.exceptions import ParticipantNotFoundError
from polity.shared.members import MemberService
from polity.shared.permissions.models import RoleScope

ORGANIZER_ROLE = "Organizer"
PARTICIPANT_ROLE = "Participant"


class EventParticipantService(MemberService):
    """Participant management on a single event."""

    model = "eventparticipant"
    scope = RoleScope.EVENT
    scope_field = "eventId"
    promote_role = ORGANIZER_ROLE
    demote_role = PARTICIPANT_ROLE
    not_found = ParticipantNotFoundError
    label = "participant"
