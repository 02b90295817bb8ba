# polity/domains/permissions/routes.py
from typing import Optional

from fastapi import APIRouter, Depends

from polity.core.database import DatabaseClient, get_db
from polity.domains.auth.dependencies import get_optional_user_id
from polity.domains.permissions.models import (
    PermissionCheckRequest,
    PermissionCheckResponse,
    PermissionCheckResult,
    PermissionSummaryResponse,
)
from polity.shared.permissions import PermissionResolver, PermissionSet, get_permissions
from polity.shared.permissions.models import ActionType, ResourceType

router = APIRouter(prefix="/permissions", tags=["Permissions"])


def summarize(permissions: PermissionSet) -> PermissionSummaryResponse:
    granted = [
        f"{action.value}:{resource.value}"
        for resource in ResourceType
        for action in ActionType
        if permissions.can(action, resource)
    ]
    return PermissionSummaryResponse(
        user_id=permissions.user_id,
        is_loading=permissions.is_loading,
        is_member=permissions.is_member(),
        is_participant=permissions.is_participant(),
        is_blogger=permissions.is_a_blogger(),
        is_collaborator=permissions.is_collaborator(),
        is_author=permissions.is_author(),
        can_vote=permissions.can_vote(),
        can_be_candidate=permissions.can_be_candidate(),
        granted=granted,
    )


@router.get(
    "",
    response_model=PermissionSummaryResponse,
    operation_id="getPermissionSummary",
)
async def get_permission_summary(
    permissions: PermissionSet = Depends(get_permissions),
) -> PermissionSummaryResponse:
    """
    Get the caller's permissions in the context given by the query parameters
    ``group_id``, ``event_id``, ``blog_id`` and ``amendment_id``.

    Anonymous callers receive an all-false summary.
    """
    return summarize(permissions)


@router.post(
    "/check",
    response_model=PermissionCheckResponse,
    operation_id="checkPermissions",
)
async def check_permissions(
    request: PermissionCheckRequest,
    user_id: Optional[str] = Depends(get_optional_user_id),
    db: DatabaseClient = Depends(get_db),
) -> PermissionCheckResponse:
    """Evaluate a batch of (action, resource) checks in one context."""
    permissions = await PermissionResolver(db).resolve(
        user_id, request.context.to_permission_context()
    )
    return PermissionCheckResponse(
        results=[
            PermissionCheckResult(
                action=check.action,
                resource=check.resource,
                allowed=permissions.can(check.action, check.resource),
            )
            for check in request.checks
        ]
    )
