# polity/domains/roles/models.py
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from polity.shared.permissions.models import ActionType, ResourceType, RoleScope
from polity.shared.permissions.types import ActionRight, Role


class RoleCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Role name must not be blank")
        return v


class ActionRightUpdate(BaseModel):
    """Grant (``granted=True``) or revoke one right on a role."""

    resource: ResourceType
    action: ActionType
    granted: bool


class ActionRightResponse(BaseModel):
    id: Optional[str]
    resource: str
    action: str

    @classmethod
    def from_record(cls, right: ActionRight) -> "ActionRightResponse":
        return cls(id=right.id, resource=right.resource, action=right.action)


class RoleResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    scope: Optional[RoleScope]
    action_rights: list[ActionRightResponse]

    @classmethod
    def from_record(cls, role: Role) -> "RoleResponse":
        return cls(
            id=role.id,
            name=role.name,
            description=role.description,
            scope=role.scope,
            action_rights=[
                ActionRightResponse.from_record(right) for right in role.action_rights
            ],
        )


class ActionRightOptionResponse(BaseModel):
    resource: ResourceType
    action: ActionType
    label: str
