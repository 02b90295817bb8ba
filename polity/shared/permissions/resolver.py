import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Optional

from .models import ActionType
from .services import (
    Action,
    Resource,
    has_active_voting_right,
    has_amendment_permission,
    has_blog_permission,
    has_event_permission,
    has_group_permission,
    has_passive_voting_right,
    is_amendment_author,
    is_amendment_collaborator,
    is_blogger,
    is_event_participant,
    is_group_member,
    is_self,
)
from .types import (
    Amendment,
    BloggerRelation,
    Membership,
    Participation,
    PermissionContext,
)

if TYPE_CHECKING:
    from polity.core.database import DatabaseClient

logger = logging.getLogger(__name__)

MEMBERSHIP_INCLUDE = {
    "group": {"include": {"roles": {"include": {"actionRights": True}}}},
    "role": {"include": {"actionRights": True}},
}
PARTICIPATION_INCLUDE = {"role": {"include": {"actionRights": True}}}
BLOGGER_INCLUDE = {"role": {"include": {"actionRights": True}}}
AMENDMENT_INCLUDE = {
    "user": True,
    "owner": True,
    "collaborators": True,
    "roleCollaborators": {"include": {"role": {"include": {"actionRights": True}}}},
}


class PermissionSet:
    """
    Permission answers for one user in one permission context.

    Checks across scopes are additive: ``can`` is true as soon as any scope
    supplied by the context grants the pair. While ``is_loading`` is set the
    relations are not fetched yet and every predicate answers False.
    """

    def __init__(
        self,
        user_id: Optional[str],
        context: PermissionContext,
        memberships: tuple[Membership, ...] = (),
        participations: tuple[Participation, ...] = (),
        blogger_relations: tuple[BloggerRelation, ...] = (),
        amendment: Optional[Amendment] = None,
        is_loading: bool = False,
    ) -> None:
        self.user_id = user_id
        self.context = context
        self.memberships = memberships
        self.participations = participations
        self.blogger_relations = blogger_relations
        self.amendment = amendment if amendment is not None else context.amendment
        self.is_loading = is_loading

    @classmethod
    def pending(
        cls, user_id: Optional[str] = None, context: Optional[PermissionContext] = None
    ) -> "PermissionSet":
        return cls(user_id, context or PermissionContext(), is_loading=True)

    def can(self, action: Action, resource: Resource) -> bool:
        """Check if the user may perform ``action`` on ``resource``."""
        return self._grants(action, resource, strict=False)

    def can_act(self, action: Action, resource: Resource) -> bool:
        """
        Stricter ``can`` used to authorize writes.

        A scope only counts while the user holds an active relation in it
        (invitations and open requests do not), and in groups only the role
        assigned on the membership counts, not the group's shared role pool.
        """
        return self._grants(action, resource, strict=True)

    def _grants(self, action: Action, resource: Resource, strict: bool) -> bool:
        if not self.user_id:
            return False
        context = self.context

        if (
            context.group_id
            and (not strict or self.is_member())
            and has_group_permission(
                self.memberships,
                context.group_id,
                resource,
                action,
                include_shared_roles=not strict,
            )
        ):
            return True
        if (
            context.event_id
            and (not strict or self.is_participant())
            and has_event_permission(
                self.participations, context.event_id, resource, action
            )
        ):
            return True
        if (
            context.blog_id
            and (not strict or self.is_a_blogger())
            and has_blog_permission(
                self.blogger_relations, context.blog_id, resource, action
            )
        ):
            return True
        if (
            self.amendment is not None
            and (not strict or self.is_collaborator() or self.is_author())
            and has_amendment_permission(
                self.amendment, self.user_id, resource, action
            )
        ):
            return True
        return False

    def can_view(self, resource: Resource) -> bool:
        return self.can(ActionType.VIEW, resource)

    def can_manage(self, resource: Resource) -> bool:
        return self.can(ActionType.MANAGE, resource)

    def can_create(self, resource: Resource) -> bool:
        return self.can(ActionType.CREATE, resource)

    def can_update(self, resource: Resource) -> bool:
        return self.can(ActionType.UPDATE, resource)

    def can_delete(self, resource: Resource) -> bool:
        return self.can(ActionType.DELETE, resource)

    def is_me(self, target_user_id: Optional[str]) -> bool:
        return is_self(target_user_id, self.user_id)

    def is_member(self) -> bool:
        return is_group_member(self.memberships, self.context.group_id)

    def is_participant(self) -> bool:
        return is_event_participant(self.participations, self.context.event_id)

    def is_a_blogger(self) -> bool:
        return is_blogger(self.blogger_relations, self.context.blog_id)

    def is_collaborator(self) -> bool:
        return is_amendment_collaborator(self.amendment, self.user_id)

    def is_author(self) -> bool:
        return is_amendment_author(self.amendment, self.user_id)

    def can_vote(self) -> bool:
        """Active voting right in the context event: may cast votes."""
        return has_active_voting_right(self.participations, self.context.event_id)

    def can_be_candidate(self) -> bool:
        """Passive voting right in the context event: may stand for election."""
        return has_passive_voting_right(self.participations, self.context.event_id)

    def can_any(
        self, grants: Sequence[tuple[Action, Resource]], strict: bool = False
    ) -> bool:
        return any(
            self._grants(action, resource, strict) for action, resource in grants
        )


class PermissionResolver:
    """
    Fetches the relations a permission context needs and builds a PermissionSet.

    Each relation query only runs when its scope id is in the context and a
    user is authenticated. The last result is reused while the user, the
    context and the fetched relations stay unchanged.
    """

    def __init__(self, db: "DatabaseClient"):
        self.db = db
        self.snapshot: PermissionSet = PermissionSet.pending()
        self._in_flight = 0
        self._last_inputs: Optional[tuple[object, ...]] = None

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0 or self.snapshot.is_loading

    async def resolve(
        self, user_id: Optional[str], context: PermissionContext
    ) -> PermissionSet:
        """
        Resolve permissions for a user in a context.

        Args:
            user_id: Authenticated user ID, or None for anonymous callers
            context: Scope identifiers relevant to the check

        Returns:
            The PermissionSet for these inputs, reused when nothing changed
        """
        self._in_flight += 1
        try:
            memberships: tuple[Membership, ...] = ()
            participations: tuple[Participation, ...] = ()
            blogger_relations: tuple[BloggerRelation, ...] = ()
            amendment = context.amendment

            if user_id:
                if context.group_id:
                    memberships = await self._fetch_memberships(user_id)
                if context.event_id:
                    participations = await self._fetch_participations(user_id)
                if context.blog_id:
                    blogger_relations = await self._fetch_blogger_relations(user_id)
                if amendment is None and context.amendment_id:
                    amendment = await self._fetch_amendment(context.amendment_id)
        finally:
            self._in_flight -= 1

        return self._memoize(
            user_id, context, memberships, participations, blogger_relations, amendment
        )

    def _memoize(
        self,
        user_id: Optional[str],
        context: PermissionContext,
        memberships: tuple[Membership, ...],
        participations: tuple[Participation, ...],
        blogger_relations: tuple[BloggerRelation, ...],
        amendment: Optional[Amendment],
    ) -> PermissionSet:
        inputs = (
            user_id,
            context,
            memberships,
            participations,
            blogger_relations,
            amendment,
        )
        if inputs == self._last_inputs:
            return self.snapshot

        self._last_inputs = inputs
        self.snapshot = PermissionSet(
            user_id,
            context,
            memberships=memberships,
            participations=participations,
            blogger_relations=blogger_relations,
            amendment=amendment,
        )
        logger.debug(
            f"Resolved permissions for user {user_id}: "
            f"{len(memberships)} memberships, {len(participations)} participations, "
            f"{len(blogger_relations)} blogger relations"
        )
        return self.snapshot

    async def _fetch_memberships(self, user_id: str) -> tuple[Membership, ...]:
        rows = await self.db.groupmembership.find_many(
            where={"userId": user_id},
            include=MEMBERSHIP_INCLUDE,
        )
        return tuple(Membership.model_validate(row) for row in rows)

    async def _fetch_participations(self, user_id: str) -> tuple[Participation, ...]:
        rows = await self.db.eventparticipant.find_many(
            where={"userId": user_id},
            include=PARTICIPATION_INCLUDE,
        )
        return tuple(Participation.model_validate(row) for row in rows)

    async def _fetch_blogger_relations(
        self, user_id: str
    ) -> tuple[BloggerRelation, ...]:
        rows = await self.db.blogblogger.find_many(
            where={"userId": user_id},
            include=BLOGGER_INCLUDE,
        )
        return tuple(BloggerRelation.model_validate(row) for row in rows)

    async def _fetch_amendment(self, amendment_id: str) -> Optional[Amendment]:
        row = await self.db.amendment.find_unique(
            where={"id": amendment_id},
            include=AMENDMENT_INCLUDE,
        )
        if row is None:
            logger.debug(f"Amendment {amendment_id} not found for permission check")
            return None
        return Amendment.model_validate(row)


