"""
Shared handling of the join records that attach users to a scope instance.

Group memberships, event participants and amendment collaborators all carry
a user, a status and a role owned by the instance. ``MemberService`` holds
the invite, approve, role change and removal flow once; each domain
subclasses it with its Prisma model, scope column and role names.
"""

from .dependencies import authorize_member_removal
from .models import (
    MemberAction,
    MemberInvite,
    MemberRecord,
    MemberResponse,
    MemberRoleResponse,
    MemberUpdate,
)
from .service import MemberService

__all__ = [
    "MemberAction",
    "MemberInvite",
    "MemberRecord",
    "MemberResponse",
    "MemberRoleResponse",
    "MemberService",
    "MemberUpdate",
    "authorize_member_removal",
]
