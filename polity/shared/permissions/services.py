"""
Permission checking functions for the role-based access control system.

These work across all scopes: group, event, blog and amendment. Every
function is pure and total: missing relations count as "not granted" and
nothing here raises.
"""

from collections.abc import Collection, Iterable, Sequence
from enum import Enum
from typing import Optional, Union

from .models import (
    ACTIVE_STATUSES,
    LEGACY_AMENDMENT_ROLE_RIGHTS,
    PERMISSION_IMPLIES,
    ActionType,
    ResourceType,
)
from .types import (
    ActionRight,
    Amendment,
    BloggerRelation,
    Membership,
    Participation,
    Role,
)

Action = Union[ActionType, str]
Resource = Union[ResourceType, str]


def _value(item: Union[Enum, str]) -> str:
    return item.value if isinstance(item, Enum) else item


def action_satisfies(granted: Action, required: Action) -> bool:
    """
    Check if a granted action covers the required one.

    Either the actions are equal or the granted action implies the required
    one through PERMISSION_IMPLIES. Only one level of implication is
    evaluated; an action without an entry implies nothing but itself.

    Args:
        granted: Action held through an action right
        required: Action being requested

    Returns:
        True if the granted action satisfies the requirement
    """
    granted_value, required_value = _value(granted), _value(required)
    if granted_value == required_value:
        return True
    try:
        implied = PERMISSION_IMPLIES.get(ActionType(granted_value), frozenset())
    except ValueError:
        return False
    return any(action.value == required_value for action in implied)


def _right_matches(
    right: ActionRight,
    resource: Resource,
    action: Action,
    scope_field: Optional[str] = None,
    scope_id: Optional[str] = None,
) -> bool:
    if right.resource != _value(resource):
        return False
    if not action_satisfies(right.action, action):
        return False
    # A right bound to another instance does not apply here
    if scope_field is not None:
        bound_to = getattr(right, scope_field)
        if bound_to is not None and bound_to != scope_id:
            return False
    return True


def _role_rights(role: Optional[Role]) -> tuple[ActionRight, ...]:
    return role.action_rights if role is not None else ()


def _any_right_matches(
    rights: Iterable[ActionRight],
    resource: Resource,
    action: Action,
    scope_field: Optional[str] = None,
    scope_id: Optional[str] = None,
) -> bool:
    return any(
        _right_matches(right, resource, action, scope_field, scope_id)
        for right in rights
    )


def is_self(target_user_id: Optional[str], auth_user_id: Optional[str]) -> bool:
    """Check if the target user is the authenticated user."""
    if not target_user_id or not auth_user_id:
        return False
    return target_user_id == auth_user_id


def has_group_permission(
    memberships: Optional[Sequence[Membership]],
    group_id: Optional[str],
    resource: Resource,
    action: Action,
    include_shared_roles: bool = True,
) -> bool:
    """
    Check if the user has group-level permission for a resource and action.

    Rights come from the role assigned on the membership and from every
    role the group exposes as its shared role pool.

    Args:
        memberships: User's group memberships with roles
        group_id: ID of the group to check permissions for
        resource: Resource type (e.g. 'events', 'amendments')
        action: Action type (e.g. 'create', 'update', 'manage')
        include_shared_roles: Whether the group's shared role pool counts

    Returns:
        True if any matching membership grants the permission
    """
    if not memberships or not group_id:
        return False

    for membership in memberships:
        if membership.group_id != group_id:
            continue
        if _any_right_matches(
            _role_rights(membership.role), resource, action, "group_id", group_id
        ):
            return True
        if not include_shared_roles or membership.group is None:
            continue
        shared_roles = membership.group.roles
        for role in shared_roles:
            if _any_right_matches(
                role.action_rights, resource, action, "group_id", group_id
            ):
                return True
    return False


def has_event_permission(
    participations: Optional[Sequence[Participation]],
    event_id: Optional[str],
    resource: Resource,
    action: Action,
) -> bool:
    """
    Check if the user has event-level permission for a resource and action.

    Only the directly assigned role counts; events have no shared role pool.
    """
    if not participations or not event_id:
        return False

    return any(
        participation.event_id == event_id
        and _any_right_matches(
            _role_rights(participation.role), resource, action, "event_id", event_id
        )
        for participation in participations
    )


def has_blog_permission(
    blogger_relations: Optional[Sequence[BloggerRelation]],
    blog_id: Optional[str],
    resource: Resource,
    action: Action,
) -> bool:
    """
    Check if the user has blog-level permission for a resource and action.

    Only the directly assigned role counts; blogs have no shared role pool.
    """
    if not blogger_relations or not blog_id:
        return False

    return any(
        relation.blog_id == blog_id
        and _any_right_matches(
            _role_rights(relation.role), resource, action, "blog_id", blog_id
        )
        for relation in blogger_relations
    )


def has_amendment_permission(
    amendment: Optional[Amendment],
    user_id: Optional[str],
    resource: Resource,
    action: Action,
) -> bool:
    """
    Check if the user has amendment-level permission via collaboration.

    Role-based collaborators are checked first with the usual implication
    rules. Otherwise the legacy collaborator row is consulted: its role
    name is looked up in LEGACY_AMENDMENT_ROLE_RIGHTS and the pair must be
    listed there literally.

    Args:
        amendment: The amendment with both collaborator relations
        user_id: ID of the user to check
        resource: Resource type
        action: Action type

    Returns:
        True if the user has the permission
    """
    if amendment is None or not user_id:
        return False

    for collaborator in amendment.role_collaborators:
        if collaborator.user_id != user_id:
            continue
        if _any_right_matches(
            _role_rights(collaborator.role),
            resource,
            action,
            "amendment_id",
            amendment.id,
        ):
            return True

    wanted = (_value(resource), _value(action))
    for legacy in amendment.collaborators:
        if legacy.user_id != user_id or not legacy.role_name:
            continue
        if wanted in LEGACY_AMENDMENT_ROLE_RIGHTS.get(legacy.role_name, frozenset()):
            return True
    return False


def _is_active(status: Optional[str], statuses: Optional[Collection[str]]) -> bool:
    if statuses is None or status is None:
        return True
    return status in statuses


def is_group_member(
    memberships: Optional[Sequence[Membership]],
    group_id: Optional[str],
    statuses: Optional[Collection[str]] = ACTIVE_STATUSES,
) -> bool:
    """
    Check if the user is a member of a group.

    Only records whose status is in ``statuses`` count, so invitations and
    open requests are not memberships. Pass ``statuses=None`` to accept any
    existing record.
    """
    if not memberships or not group_id:
        return False
    return any(
        m.group_id == group_id and _is_active(m.status, statuses) for m in memberships
    )


def is_event_participant(
    participations: Optional[Sequence[Participation]],
    event_id: Optional[str],
    statuses: Optional[Collection[str]] = ACTIVE_STATUSES,
) -> bool:
    """Check if the user is a participant in an event."""
    if not participations or not event_id:
        return False
    return any(
        p.event_id == event_id and _is_active(p.status, statuses)
        for p in participations
    )


def is_blogger(
    blogger_relations: Optional[Sequence[BloggerRelation]],
    blog_id: Optional[str],
    statuses: Optional[Collection[str]] = ACTIVE_STATUSES,
) -> bool:
    """Check if the user is a blogger (has any role) in a blog."""
    if not blogger_relations or not blog_id:
        return False
    return any(
        b.blog_id == blog_id and _is_active(b.status, statuses)
        for b in blogger_relations
    )


def is_amendment_collaborator(
    amendment: Optional[Amendment],
    user_id: Optional[str],
    statuses: Optional[Collection[str]] = ACTIVE_STATUSES,
) -> bool:
    """Check if the user collaborates on an amendment under either model."""
    if amendment is None or not user_id:
        return False
    return any(
        c.user_id == user_id and _is_active(c.status, statuses)
        for c in amendment.role_collaborators
    ) or any(
        c.user_id == user_id and _is_active(c.status, statuses)
        for c in amendment.collaborators
    )


def is_amendment_author(amendment: Optional[Amendment], user_id: Optional[str]) -> bool:
    """Check if the user is the author of an amendment (``user`` or ``owner``)."""
    if amendment is None or not user_id:
        return False
    return any(
        ref is not None and ref.id == user_id
        for ref in (amendment.user, amendment.owner)
    )


def has_active_voting_right(
    participations: Optional[Sequence[Participation]], event_id: Optional[str]
) -> bool:
    """Check if the user may cast votes in an event."""
    return has_event_permission(
        participations, event_id, ResourceType.EVENTS, ActionType.ACTIVE_VOTING
    )


def has_passive_voting_right(
    participations: Optional[Sequence[Participation]], event_id: Optional[str]
) -> bool:
    """Check if the user may stand as a candidate in an event."""
    return has_event_permission(
        participations, event_id, ResourceType.EVENTS, ActionType.PASSIVE_VOTING
    )
