"""Permission type definitions.

Explicit record shapes for every relation the permission checks traverse.
Records validate straight from Prisma results (camelCase attributes) or
from plain dicts, and are frozen so a ``PermissionContext`` and the fetched
relations can be compared and hashed for memoization.
"""

from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from .models import RoleScope


def _none_as_empty(value: Any) -> Any:
    # Prisma returns None for relations that were not included
    return () if value is None else value


class Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
        extra="ignore",
    )


class UserRef(Record):
    id: str
    name: Optional[str] = None


class ActionRight(Record):
    """
    A grant of one (resource, action) pair.

    Resource and action are kept as stored strings so rows written with
    values outside the known enums are simply never matched.
    """

    id: Optional[str] = None
    resource: str
    action: str
    group_id: Optional[str] = None
    event_id: Optional[str] = None
    amendment_id: Optional[str] = None
    blog_id: Optional[str] = None


class Role(Record):
    id: str
    name: str
    description: Optional[str] = None
    scope: Optional[RoleScope] = None
    action_rights: Annotated[
        tuple[ActionRight, ...], BeforeValidator(_none_as_empty)
    ] = ()


class GroupRef(Record):
    id: str
    name: Optional[str] = None
    roles: Annotated[tuple[Role, ...], BeforeValidator(_none_as_empty)] = ()


class Membership(Record):
    id: Optional[str] = None
    user_id: Optional[str] = None
    group_id: str
    status: Optional[str] = None
    role: Optional[Role] = None
    group: Optional[GroupRef] = None


class Participation(Record):
    id: Optional[str] = None
    user_id: Optional[str] = None
    event_id: str
    status: Optional[str] = None
    role: Optional[Role] = None


class BloggerRelation(Record):
    id: Optional[str] = None
    user_id: Optional[str] = None
    blog_id: str
    status: Optional[str] = None
    role: Optional[Role] = None


class AmendmentCollaborator(Record):
    """Legacy collaborator row: the role is a bare name, not a Role record."""

    id: Optional[str] = None
    user_id: str
    role_name: Optional[str] = None
    status: Optional[str] = None


class AmendmentRoleCollaborator(Record):
    id: Optional[str] = None
    user_id: str
    status: Optional[str] = None
    role: Optional[Role] = None


class Amendment(Record):
    id: str
    title: Optional[str] = None
    status: Optional[str] = None
    workflow_status: Optional[str] = None
    group_id: Optional[str] = None
    current_event_id: Optional[str] = None
    user: Optional[UserRef] = None
    owner: Optional[UserRef] = None
    collaborators: Annotated[
        tuple[AmendmentCollaborator, ...], BeforeValidator(_none_as_empty)
    ] = ()
    role_collaborators: Annotated[
        tuple[AmendmentRoleCollaborator, ...], BeforeValidator(_none_as_empty)
    ] = ()
    roles: Annotated[tuple[Role, ...], BeforeValidator(_none_as_empty)] = ()


class PermissionContext(Record):
    """Scope identifiers relevant to one permission check."""

    group_id: Optional[str] = None
    event_id: Optional[str] = None
    blog_id: Optional[str] = None
    amendment_id: Optional[str] = None
    amendment: Optional[Amendment] = None

    @property
    def resolved_amendment_id(self) -> Optional[str]:
        if self.amendment is not None:
            return self.amendment.id
        return self.amendment_id

    @property
    def is_empty(self) -> bool:
        return not (
            self.group_id
            or self.event_id
            or self.blog_id
            or self.resolved_amendment_id
        )
