# polity/shared/members/service.py
import logging
from typing import Any, Optional

from polity.core.database import DatabaseClient
from polity.shared.exceptions import (
    BaseHTTPException,
    RoleNotFoundError,
    WriteFailedError,
)
from polity.shared.members.models import (
    MemberAction,
    MemberInvite,
    MemberRecord,
    MemberResponse,
    MemberUpdate,
)
from polity.shared.permissions.models import MembershipStatus, RoleScope
from polity.shared.permissions.types import Role

logger = logging.getLogger(__name__)

MEMBER_INCLUDE = {"role": {"include": {"actionRights": True}}}


class MemberService:
    """
    Member management on a single scope instance.

    Subclasses name the Prisma model holding the join rows, the column that
    links a row to its instance, the role scope, the roles used by promote
    and demote, and the error raised for an unknown row.
    """

    model: str
    scope: RoleScope
    scope_field: str
    promote_role: str
    demote_role: str
    not_found: type[BaseHTTPException]
    label: str = "member"

    def __init__(self, db: DatabaseClient):
        self.db = db

    @property
    def table(self) -> Any:
        return getattr(self.db, self.model)

    async def list_members(self, scope_id: str) -> list[MemberResponse]:
        rows = await self.table.find_many(
            where={self.scope_field: scope_id},
            include=MEMBER_INCLUDE,
            order={"createdAt": "asc"},
        )
        return [
            MemberResponse.from_record(MemberRecord.model_validate(row))
            for row in rows
        ]

    async def find_member(
        self, scope_id: str, member_id: str
    ) -> Optional[MemberRecord]:
        row = await self.table.find_first(
            where={"id": member_id, self.scope_field: scope_id},
            include=MEMBER_INCLUDE,
        )
        return MemberRecord.model_validate(row) if row else None

    async def get_member(self, scope_id: str, member_id: str) -> MemberRecord:
        """
        Fetch a member row of the scope instance.

        Raises:
            BaseHTTPException: The subclass's not-found error if the row does
                not belong to the instance
        """
        member = await self.find_member(scope_id, member_id)
        if member is None:
            raise self.not_found()
        return member

    async def _get_role(
        self,
        scope_id: str,
        role_id: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Role:
        where: dict[str, str] = {
            "scope": self.scope.value,
            self.scope_field: scope_id,
        }
        if role_id is not None:
            where["id"] = role_id
        if name is not None:
            where["name"] = name

        row = await self.db.role.find_first(where=where)
        if not row:
            if name is not None:
                raise RoleNotFoundError(
                    f"Role '{name}' not found on this {self.scope.value}"
                )
            raise RoleNotFoundError()
        return Role.model_validate(row)

    async def invite(self, scope_id: str, invite: MemberInvite) -> list[MemberResponse]:
        """
        Invite users with the given role.

        Users that already have a row on the instance are skipped. New rows
        start with status ``invited``.
        """
        role = await self._get_role(scope_id, role_id=invite.role_id)

        existing = await self.table.find_many(
            where={self.scope_field: scope_id, "userId": {"in": invite.user_ids}}
        )
        existing_user_ids = {
            MemberRecord.model_validate(row).user_id for row in existing
        }

        invited = []
        for user_id in dict.fromkeys(invite.user_ids):
            if user_id in existing_user_ids:
                logger.debug(
                    f"User {user_id} already has a {self.label} row on "
                    f"{self.scope.value} {scope_id}"
                )
                continue
            try:
                row = await self.table.create(
                    data={
                        self.scope_field: scope_id,
                        "userId": user_id,
                        "roleId": role.id,
                        "status": MembershipStatus.INVITED.value,
                    },
                    include=MEMBER_INCLUDE,
                )
            except Exception as e:
                logger.error(
                    f"Failed to invite user {user_id} to {self.scope.value} "
                    f"{scope_id}: {e}",
                    exc_info=True,
                )
                raise WriteFailedError(
                    f"Failed to invite {self.label}s. Please try again."
                )
            invited.append(MemberResponse.from_record(MemberRecord.model_validate(row)))

        logger.info(
            f"Invited {len(invited)} {self.label}s to {self.scope.value} {scope_id} "
            f"as '{role.name}'"
        )
        return invited

    async def update_member(
        self, scope_id: str, member_id: str, update: MemberUpdate
    ) -> MemberResponse:
        """Change the role and/or status of a member."""
        await self.get_member(scope_id, member_id)

        data: dict[str, str] = {}
        if update.action == MemberAction.APPROVE:
            data["status"] = MembershipStatus.MEMBER.value
        elif update.action == MemberAction.PROMOTE:
            role = await self._get_role(scope_id, name=self.promote_role)
            data["roleId"] = role.id
        elif update.action == MemberAction.DEMOTE:
            role = await self._get_role(scope_id, name=self.demote_role)
            data["roleId"] = role.id

        if update.role_id is not None:
            role = await self._get_role(scope_id, role_id=update.role_id)
            data["roleId"] = role.id
        if update.status is not None:
            data["status"] = update.status.value

        try:
            row = await self.table.update(
                where={"id": member_id},
                data=data,
                include=MEMBER_INCLUDE,
            )
        except Exception as e:
            logger.error(
                f"Failed to update {self.label} {member_id}: {e}", exc_info=True
            )
            raise WriteFailedError(
                f"Failed to update {self.label}. Please try again."
            )

        logger.info(
            f"Updated {self.label} {member_id} on {self.scope.value} {scope_id}: "
            f"{', '.join(sorted(data))}"
        )
        return MemberResponse.from_record(MemberRecord.model_validate(row))

    async def remove_member(self, scope_id: str, member_id: str) -> None:
        """Delete a member row. Covers remove, reject and leave."""
        await self.get_member(scope_id, member_id)

        try:
            await self.table.delete(where={"id": member_id})
        except Exception as e:
            logger.error(
                f"Failed to remove {self.label} {member_id}: {e}", exc_info=True
            )
            raise WriteFailedError(
                f"Failed to remove {self.label}. Please try again."
            )

        logger.info(
            f"Removed {self.label} {member_id} from {self.scope.value} {scope_id}"
        )
