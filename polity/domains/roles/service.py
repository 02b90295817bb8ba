# polity/domains/roles/service.py
import logging
from typing import Optional

from polity.core.database import DatabaseClient
from polity.domains.roles.models import ActionRightUpdate, RoleCreate, RoleResponse
from polity.shared.exceptions import RoleNotFoundError, WriteFailedError
from polity.shared.members import MemberRecord
from polity.shared.permissions.models import DEFAULT_ROLES, MembershipStatus, RoleScope
from polity.shared.permissions.types import ActionRight, Role

logger = logging.getLogger(__name__)

# Column linking roles and action rights to their owning scope instance
SCOPE_FIELDS: dict[RoleScope, str] = {
    RoleScope.GROUP: "groupId",
    RoleScope.EVENT: "eventId",
    RoleScope.AMENDMENT: "amendmentId",
    RoleScope.BLOG: "blogId",
}

# Relation table and status used to link an instance's creator to its lead role
LEAD_RELATIONS: dict[RoleScope, tuple[str, MembershipStatus]] = {
    RoleScope.GROUP: ("groupmembership", MembershipStatus.ADMIN),
    RoleScope.EVENT: ("eventparticipant", MembershipStatus.MEMBER),
    RoleScope.AMENDMENT: ("amendmentrolecollaborator", MembershipStatus.ADMIN),
    RoleScope.BLOG: ("blogblogger", MembershipStatus.OWNER),
}


class RoleService:
    """Role and action right management for one scope instance at a time."""

    def __init__(self, db: DatabaseClient):
        self.db = db

    def _scope_where(self, scope: RoleScope, scope_id: str) -> dict[str, str]:
        return {"scope": scope.value, SCOPE_FIELDS[scope]: scope_id}

    async def list_roles(self, scope: RoleScope, scope_id: str) -> list[RoleResponse]:
        """
        Get all roles owned by a scope instance with their action rights.

        Args:
            scope: Scope the roles belong to
            scope_id: ID of the group, event, amendment or blog

        Returns:
            Roles ordered by creation time
        """
        rows = await self.db.role.find_many(
            where=self._scope_where(scope, scope_id),
            include={"actionRights": True},
            order={"createdAt": "asc"},
        )
        return [RoleResponse.from_record(Role.model_validate(row)) for row in rows]

    async def get_role(self, scope: RoleScope, scope_id: str, role_id: str) -> Role:
        """
        Fetch a role, making sure it belongs to the given scope instance.

        Raises:
            RoleNotFoundError: If the role does not exist in this scope
        """
        row = await self.db.role.find_first(
            where={"id": role_id, **self._scope_where(scope, scope_id)},
            include={"actionRights": True},
        )
        if not row:
            raise RoleNotFoundError()
        return Role.model_validate(row)

    async def create_role(
        self, scope: RoleScope, scope_id: str, role_data: RoleCreate
    ) -> RoleResponse:
        """Create an empty role owned by the scope instance."""
        try:
            row = await self.db.role.create(
                data={
                    "name": role_data.name,
                    "description": role_data.description or "",
                    "scope": scope.value,
                    SCOPE_FIELDS[scope]: scope_id,
                },
                include={"actionRights": True},
            )
        except Exception as e:
            logger.error(
                f"Failed to create role '{role_data.name}' for {scope.value} "
                f"{scope_id}: {e}",
                exc_info=True,
            )
            raise WriteFailedError("Failed to create role. Please try again.")

        role = Role.model_validate(row)
        logger.info(f"Created role {role.id} '{role.name}' in {scope.value} {scope_id}")
        return RoleResponse.from_record(role)

    async def remove_role(self, scope: RoleScope, scope_id: str, role_id: str) -> None:
        """
        Delete a role together with the action rights only it holds. Links
        from memberships, participations and bloggers are cleared by the
        database.
        """
        await self.get_role(scope, scope_id, role_id)

        try:
            async with self.db.tx() as transaction:
                await transaction.actionright.delete_many(
                    where={
                        "roles": {"some": {"id": role_id}, "every": {"id": role_id}}
                    }
                )
                await transaction.role.delete(where={"id": role_id})
        except Exception as e:
            logger.error(f"Failed to remove role {role_id}: {e}", exc_info=True)
            raise WriteFailedError("Failed to remove role. Please try again.")

        logger.info(f"Removed role {role_id} from {scope.value} {scope_id}")

    async def set_action_right(
        self,
        scope: RoleScope,
        scope_id: str,
        role_id: str,
        update: ActionRightUpdate,
    ) -> RoleResponse:
        """
        Grant or revoke one action right on a role.

        Granting creates a right bound to the scope instance and links it to
        the role. Revoking unlinks the existing right and deletes it once no
        other role holds it. Requests that would not change anything leave
        the role untouched.

        Args:
            scope: Scope the role belongs to
            scope_id: ID of the owning instance
            role_id: Role to change
            update: Resource, action and whether the right should be held

        Returns:
            The role with its current rights
        """
        role = await self.get_role(scope, scope_id, role_id)
        existing = self._find_right(role, update.resource.value, update.action.value)

        if update.granted == (existing is not None):
            return RoleResponse.from_record(role)

        try:
            async with self.db.tx() as transaction:
                if update.granted:
                    await transaction.actionright.create(
                        data={
                            "resource": update.resource.value,
                            "action": update.action.value,
                            SCOPE_FIELDS[scope]: scope_id,
                            "roles": {"connect": [{"id": role_id}]},
                        }
                    )
                elif existing is not None:
                    await self._revoke(transaction, existing, role_id)
        except Exception as e:
            logger.error(
                f"Failed to update permission {update.action.value} "
                f"{update.resource.value} on role {role_id}: {e}",
                exc_info=True,
            )
            raise WriteFailedError("Failed to update permission. Please try again.")

        logger.info(
            f"{'Granted' if update.granted else 'Revoked'} "
            f"{update.action.value} {update.resource.value} on role {role_id}"
        )
        return RoleResponse.from_record(await self.get_role(scope, scope_id, role_id))

    async def seed_default_roles(
        self, scope: RoleScope, scope_id: str, user_id: Optional[str] = None
    ) -> list[RoleResponse]:
        """
        Create the default role templates of a scope on one of its instances.

        Templates whose name already exists on the instance are skipped, so
        seeding twice does not duplicate roles. When ``user_id`` is given,
        that user is linked to the first template (Admin, Organizer, Author
        or Owner) unless they already hold a role on the instance.

        Args:
            scope: Scope to seed
            scope_id: ID of the group, event, amendment or blog
            user_id: User seeding the instance, usually its creator

        Returns:
            The roles that were created
        """
        existing = {
            role.name: role.id for role in await self.list_roles(scope, scope_id)
        }
        field = SCOPE_FIELDS[scope]

        created = []
        for template in DEFAULT_ROLES[scope]:
            if template.name in existing:
                continue
            try:
                row = await self.db.role.create(
                    data={
                        "name": template.name,
                        "description": template.description,
                        "scope": scope.value,
                        field: scope_id,
                        "actionRights": {
                            "create": [
                                {
                                    "resource": right.resource.value,
                                    "action": right.action.value,
                                    field: scope_id,
                                }
                                for right in template.permissions
                            ]
                        },
                    },
                    include={"actionRights": True},
                )
            except Exception as e:
                logger.error(
                    f"Failed to seed role '{template.name}' for {scope.value} "
                    f"{scope_id}: {e}",
                    exc_info=True,
                )
                raise WriteFailedError("Failed to create default roles.")
            role = Role.model_validate(row)
            existing[role.name] = role.id
            created.append(RoleResponse.from_record(role))

        logger.info(
            f"Seeded {len(created)} default roles in {scope.value} {scope_id}"
        )

        if user_id is not None:
            lead_role_id = existing[DEFAULT_ROLES[scope][0].name]
            await self._link_lead(scope, scope_id, user_id, lead_role_id)
        return created

    async def _link_lead(
        self, scope: RoleScope, scope_id: str, user_id: str, role_id: str
    ) -> None:
        """Give ``user_id`` the lead role through the scope's relation table."""
        model, status = LEAD_RELATIONS[scope]
        relation = getattr(self.db, model)
        field = SCOPE_FIELDS[scope]

        row = await relation.find_first(
            where={"userId": user_id, field: scope_id}, include={"role": True}
        )
        try:
            if row is None:
                await relation.create(
                    data={
                        "userId": user_id,
                        field: scope_id,
                        "roleId": role_id,
                        "status": status.value,
                    }
                )
            else:
                current = MemberRecord.model_validate(row)
                if current.role is not None:
                    logger.debug(
                        f"User {user_id} already holds role {current.role.id} "
                        f"in {scope.value} {scope_id}"
                    )
                    return
                await relation.update(
                    where={"id": current.id},
                    data={"roleId": role_id, "status": status.value},
                )
        except Exception as e:
            logger.error(
                f"Failed to link user {user_id} to role {role_id}: {e}", exc_info=True
            )
            raise WriteFailedError("Failed to assign the default role.")

        logger.info(
            f"Linked user {user_id} to role {role_id} in {scope.value} {scope_id}"
        )

    async def _revoke(
        self, transaction: DatabaseClient, right: ActionRight, role_id: str
    ) -> None:
        others = await transaction.role.count(
            where={"id": {"not": role_id}, "actionRights": {"some": {"id": right.id}}}
        )
        if others:
            await transaction.actionright.update(
                where={"id": right.id},
                data={"roles": {"disconnect": [{"id": role_id}]}},
            )
        else:
            await transaction.actionright.delete(where={"id": right.id})

    @staticmethod
    def _find_right(role: Role, resource: str, action: str) -> Optional[ActionRight]:
        return next(
            (
                right
                for right in role.action_rights
                if right.resource == resource and right.action == action
            ),
            None,
        )
