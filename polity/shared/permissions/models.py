from enum import Enum
from typing import NamedTuple


class ResourceType(str, Enum):
    """
    Entity kinds subject to access control.

    Values match the entity names stored in the database so action rights
    can be read back without translation.
    """

    USERS = "$users"
    AGENDA_ITEMS = "agendaItems"
    AMENDMENT_COLLABORATORS = "amendmentCollaborators"
    AMENDMENTS = "amendments"
    BLOG_BLOGGERS = "blogBloggers"
    BLOGS = "blogs"
    COMMENTS = "comments"
    ELECTIONS = "elections"
    EVENT_PARTICIPANTS = "eventParticipants"
    EVENTS = "events"
    GROUP_DOCUMENTS = "groupDocuments"
    GROUP_LINKS = "groupLinks"
    GROUP_MEMBERSHIPS = "groupMemberships"
    GROUP_NOTIFICATIONS = "groupNotifications"
    GROUP_PAYMENTS = "groupPayments"
    GROUP_POSITIONS = "groupPositions"
    GROUP_RELATIONSHIPS = "groupRelationships"
    GROUP_ROLES = "groupRoles"
    GROUP_TODOS = "groupTodos"
    GROUPS = "groups"
    MESSAGES = "messages"
    NOTIFICATIONS = "notifications"
    ROLES = "roles"


class ActionType(str, Enum):
    """Operations that can be granted on a resource."""

    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"
    VOTE = "vote"
    MODERATE = "moderate"
    MANAGE_MEMBERS = "manage_members"
    MANAGE_ROLES = "manage_roles"
    MANAGE_PARTICIPANTS = "manage_participants"
    MANAGE_SPEAKERS = "manage_speakers"
    MANAGE_VOTES = "manage_votes"
    MANAGE_NOTIFICATIONS = "manageNotifications"
    ACTIVE_VOTING = "active_voting"  # may cast votes
    PASSIVE_VOTING = "passive_voting"  # may stand as candidate


class RoleScope(str, Enum):
    GROUP = "group"
    EVENT = "event"
    AMENDMENT = "amendment"
    BLOG = "blog"


class MembershipStatus(str, Enum):
    """Status values found on membership-style join records."""

    INVITED = "invited"
    REQUESTED = "requested"
    PENDING = "pending"
    MEMBER = "member"
    ADMIN = "admin"
    ACCEPTED = "accepted"
    WRITER = "writer"
    OWNER = "owner"


# Statuses that make a join record count as an actual member / participant
ACTIVE_STATUSES: frozenset[str] = frozenset(
    {
        MembershipStatus.MEMBER.value,
        MembershipStatus.ADMIN.value,
        MembershipStatus.ACCEPTED.value,
        MembershipStatus.WRITER.value,
        MembershipStatus.OWNER.value,
    }
)


# Actions implied by holding another action. One level deep: none of the
# implied actions imply anything further.
PERMISSION_IMPLIES: dict[ActionType, frozenset[ActionType]] = {
    ActionType.MANAGE: frozenset(
        {ActionType.VIEW, ActionType.CREATE, ActionType.UPDATE, ActionType.DELETE}
    ),
    ActionType.MODERATE: frozenset({ActionType.VIEW}),
    ActionType.MANAGE_MEMBERS: frozenset({ActionType.VIEW}),
    ActionType.MANAGE_ROLES: frozenset({ActionType.VIEW}),
    ActionType.MANAGE_PARTICIPANTS: frozenset({ActionType.VIEW}),
    ActionType.MANAGE_SPEAKERS: frozenset({ActionType.VIEW}),
    ActionType.MANAGE_VOTES: frozenset({ActionType.VIEW}),
}


class RightTemplate(NamedTuple):
    resource: ResourceType
    action: ActionType


class RoleTemplate(NamedTuple):
    name: str
    description: str
    permissions: tuple[RightTemplate, ...]


def _rights(*pairs: tuple[ResourceType, ActionType]) -> tuple[RightTemplate, ...]:
    return tuple(RightTemplate(resource, action) for resource, action in pairs)


R = ResourceType
A = ActionType

DEFAULT_GROUP_ROLES: tuple[RoleTemplate, ...] = (
    RoleTemplate(
        "Admin",
        "Full group control",
        _rights(
            (R.AMENDMENTS, A.MANAGE),
            (R.EVENTS, A.MANAGE),
            (R.GROUP_DOCUMENTS, A.MANAGE),
            (R.GROUP_LINKS, A.MANAGE),
            (R.GROUP_MEMBERSHIPS, A.MANAGE),
            (R.GROUP_NOTIFICATIONS, A.MANAGE_NOTIFICATIONS),
            (R.GROUP_PAYMENTS, A.MANAGE),
            (R.GROUP_POSITIONS, A.MANAGE),
            (R.GROUP_RELATIONSHIPS, A.MANAGE),
            (R.GROUP_ROLES, A.MANAGE),
            (R.GROUPS, A.MANAGE),
            (R.GROUP_TODOS, A.MANAGE),
            (R.MESSAGES, A.MANAGE),
        ),
    ),
    RoleTemplate(
        "Moderator",
        "Content moderation",
        _rights(
            (R.AMENDMENTS, A.MODERATE),
            (R.COMMENTS, A.MODERATE),
            (R.EVENTS, A.MANAGE),
        ),
    ),
    RoleTemplate(
        "Member",
        "Standard member access",
        _rights(
            (R.AMENDMENTS, A.CREATE),
            (R.AMENDMENTS, A.VIEW),
            (R.AMENDMENTS, A.VOTE),
            (R.EVENTS, A.VIEW),
            (R.MESSAGES, A.MANAGE),
        ),
    ),
)

DEFAULT_BLOG_ROLES: tuple[RoleTemplate, ...] = (
    RoleTemplate(
        "Owner",
        "Full blog control",
        _rights((R.BLOGS, A.MANAGE), (R.BLOG_BLOGGERS, A.MANAGE)),
    ),
    RoleTemplate(
        "Writer",
        "Can write and edit posts",
        _rights((R.BLOGS, A.VIEW), (R.BLOGS, A.UPDATE)),
    ),
)

DEFAULT_AMENDMENT_ROLES: tuple[RoleTemplate, ...] = (
    RoleTemplate(
        "Author",
        "Full amendment control",
        _rights((R.AMENDMENTS, A.MANAGE)),
    ),
    RoleTemplate(
        "Collaborator",
        "Can edit the amendment",
        _rights((R.AMENDMENTS, A.VIEW), (R.AMENDMENTS, A.UPDATE)),
    ),
)

DEFAULT_EVENT_ROLES: tuple[RoleTemplate, ...] = (
    RoleTemplate(
        "Organizer",
        "Event organizer with full permissions",
        _rights(
            (R.AGENDA_ITEMS, A.MANAGE),
            (R.EVENTS, A.MANAGE),
            (R.EVENT_PARTICIPANTS, A.MANAGE),
            (R.GROUP_NOTIFICATIONS, A.MANAGE_NOTIFICATIONS),
            (R.EVENTS, A.ACTIVE_VOTING),
        ),
    ),
    RoleTemplate(
        "Voter",
        "Event participant with voting rights",
        _rights((R.EVENTS, A.VIEW), (R.EVENTS, A.ACTIVE_VOTING)),
    ),
    RoleTemplate(
        "Participant",
        "Regular event participant",
        _rights(
            (R.EVENTS, A.VIEW),
            (R.EVENTS, A.ACTIVE_VOTING),
            (R.EVENTS, A.PASSIVE_VOTING),
        ),
    ),
)

DEFAULT_ROLES: dict[RoleScope, tuple[RoleTemplate, ...]] = {
    RoleScope.GROUP: DEFAULT_GROUP_ROLES,
    RoleScope.EVENT: DEFAULT_EVENT_ROLES,
    RoleScope.AMENDMENT: DEFAULT_AMENDMENT_ROLES,
    RoleScope.BLOG: DEFAULT_BLOG_ROLES,
}

# Rights held by legacy amendment collaborators, keyed by the role name stored
# on the collaborator row as (resource, action) values. Matched literally,
# without implication.
LEGACY_AMENDMENT_ROLE_RIGHTS: dict[str, frozenset[tuple[str, str]]] = {
    template.name: frozenset(
        (right.resource.value, right.action.value) for right in template.permissions
    )
    for template in DEFAULT_AMENDMENT_ROLES
}


class ActionRightOption(NamedTuple):
    resource: ResourceType
    action: ActionType
    label: str


# Rights offered by the role management matrix, sorted by resource, then
# action (manage before view).
ACTION_RIGHTS: tuple[ActionRightOption, ...] = (
    ActionRightOption(R.AGENDA_ITEMS, A.MANAGE, "Manage Agenda Items"),
    ActionRightOption(R.AGENDA_ITEMS, A.VIEW, "View Agenda Items"),
    ActionRightOption(R.AMENDMENTS, A.MANAGE, "Manage Amendments"),
    ActionRightOption(R.AMENDMENTS, A.VIEW, "View Amendments"),
    ActionRightOption(R.BLOGS, A.MANAGE, "Manage Blogs"),
    ActionRightOption(R.BLOGS, A.VIEW, "View Blogs"),
    ActionRightOption(R.COMMENTS, A.MODERATE, "Moderate Comments"),
    ActionRightOption(R.ELECTIONS, A.MANAGE, "Manage Elections"),
    ActionRightOption(R.EVENTS, A.MANAGE, "Manage Events"),
    ActionRightOption(R.EVENTS, A.MANAGE_PARTICIPANTS, "Manage Event Participants"),
    ActionRightOption(R.EVENTS, A.MANAGE_SPEAKERS, "Manage Speakers"),
    ActionRightOption(R.EVENTS, A.MANAGE_VOTES, "Manage Votes"),
    ActionRightOption(R.EVENTS, A.ACTIVE_VOTING, "Active Voting Rights"),
    ActionRightOption(
        R.EVENTS, A.PASSIVE_VOTING, "Passive Voting Rights (Can Be Candidate)"
    ),
    ActionRightOption(R.EVENTS, A.VIEW, "View Events"),
    ActionRightOption(R.GROUP_DOCUMENTS, A.MANAGE, "Manage Documents"),
    ActionRightOption(R.GROUP_DOCUMENTS, A.VIEW, "View Documents"),
    ActionRightOption(R.GROUP_LINKS, A.MANAGE, "Manage Links"),
    ActionRightOption(R.GROUP_LINKS, A.VIEW, "View Links"),
    ActionRightOption(R.GROUP_MEMBERSHIPS, A.MANAGE, "Manage Members"),
    ActionRightOption(R.GROUP_MEMBERSHIPS, A.VIEW, "View Members"),
    ActionRightOption(
        R.GROUP_NOTIFICATIONS, A.MANAGE_NOTIFICATIONS, "Manage Notifications"
    ),
    ActionRightOption(R.GROUP_PAYMENTS, A.MANAGE, "Manage Payments"),
    ActionRightOption(R.GROUP_PAYMENTS, A.VIEW, "View Payments"),
    ActionRightOption(R.GROUP_POSITIONS, A.MANAGE, "Manage Positions"),
    ActionRightOption(R.GROUP_POSITIONS, A.VIEW, "View Positions"),
    ActionRightOption(R.GROUP_RELATIONSHIPS, A.MANAGE, "Manage Group Relationships"),
    ActionRightOption(R.GROUP_RELATIONSHIPS, A.VIEW, "View Group Relationships"),
    ActionRightOption(R.GROUP_ROLES, A.MANAGE, "Manage Roles"),
    ActionRightOption(R.GROUP_ROLES, A.VIEW, "View Roles"),
    ActionRightOption(R.GROUPS, A.MANAGE, "Manage Group Settings"),
    ActionRightOption(R.GROUPS, A.VIEW, "View Group"),
    ActionRightOption(R.GROUP_TODOS, A.MANAGE, "Manage Todos"),
    ActionRightOption(R.GROUP_TODOS, A.VIEW, "View Todos"),
    ActionRightOption(R.MESSAGES, A.MANAGE, "Manage Messages"),
    ActionRightOption(R.MESSAGES, A.VIEW, "View Messages"),
)
