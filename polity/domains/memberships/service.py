# polity/domains/memberships/service.py
from polity.shared.exceptions import MembershipNotFoundError
from polity.shared.members import MemberService
from polity.shared.permissions.models import RoleScope

ADMIN_ROLE = "Admin"
MEMBER_ROLE = "Member"


class GroupMembershipService(MemberService):
    """Membership management on a single group."""

    model = "groupmembership"
    scope = RoleScope.GROUP
    scope_field = "groupId"
    promote_role = ADMIN_ROLE
    demote_role = MEMBER_ROLE
    not_found = MembershipNotFoundError
    label = "membership"
