# polity/domains/permissions/models.py
from typing import Optional

from pydantic import BaseModel, Field

from polity.shared.permissions.models import ActionType, ResourceType
from polity.shared.permissions.types import PermissionContext


class PermissionSummaryResponse(BaseModel):
    user_id: Optional[str]
    is_loading: bool
    is_member: bool
    is_participant: bool
    is_blogger: bool
    is_collaborator: bool
    is_author: bool
    can_vote: bool
    can_be_candidate: bool
    granted: list[str] = Field(
        default_factory=list,
        description="'action:resource' pairs granted in this context",
    )


class PermissionCheck(BaseModel):
    action: ActionType
    resource: ResourceType


class CheckContext(BaseModel):
    """Scope ids only; relations are always loaded server-side."""

    group_id: Optional[str] = None
    event_id: Optional[str] = None
    blog_id: Optional[str] = None
    amendment_id: Optional[str] = None

    def to_permission_context(self) -> PermissionContext:
        return PermissionContext(**self.model_dump())


class PermissionCheckRequest(BaseModel):
    context: CheckContext = Field(default_factory=CheckContext)
    checks: list[PermissionCheck] = Field(min_length=1)


class PermissionCheckResult(BaseModel):
    action: ActionType
    resource: ResourceType
    allowed: bool


class PermissionCheckResponse(BaseModel):
    results: list[PermissionCheckResult]
