# polity/shared/members/models.py
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from polity.shared.permissions.models import MembershipStatus
from polity.shared.permissions.types import Record, Role


class MemberRecord(Record):
    """Common shape of membership, participant and collaborator rows."""

    id: Optional[str] = None
    user_id: str
    status: Optional[str] = None
    role: Optional[Role] = None


class MemberAction(str, Enum):
    APPROVE = "approve"
    PROMOTE = "promote"
    DEMOTE = "demote"


class MemberInvite(BaseModel):
    user_ids: list[str] = Field(min_length=1)
    role_id: str


class MemberUpdate(BaseModel):
    """
    Change a member. ``action`` is a shortcut: approve accepts an invitation
    or request, promote and demote switch between the scope's lead and
    regular roles.
    """

    role_id: Optional[str] = None
    status: Optional[MembershipStatus] = None
    action: Optional[MemberAction] = None

    @model_validator(mode="after")
    def check_has_change(self) -> "MemberUpdate":
        if self.role_id is None and self.status is None and self.action is None:
            raise ValueError("Provide a role_id, status or action")
        if self.action is not None and (self.role_id or self.status):
            raise ValueError("action cannot be combined with role_id or status")
        return self


class MemberRoleResponse(BaseModel):
    id: str
    name: str


class MemberResponse(BaseModel):
    id: Optional[str]
    user_id: str
    status: Optional[str]
    role: Optional[MemberRoleResponse]

    @classmethod
    def from_record(cls, member: MemberRecord) -> "MemberResponse":
        role = member.role
        return cls(
            id=member.id,
            user_id=member.user_id,
            status=member.status,
            role=MemberRoleResponse(id=role.id, name=role.name) if role else None,
        )
