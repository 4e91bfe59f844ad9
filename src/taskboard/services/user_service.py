"""User actions.

New identities are only ever minted by the privileged provisioning
function; everything else is a plain update of the member row.
"""

from collections.abc import Mapping
from typing import Any

from src.taskboard.authz import (
    Action,
    can_assign_company,
    can_grant_role,
    editable_user_fields,
    effective_company_id,
    require,
)
from src.taskboard.core.exceptions import (
    AuthError,
    NotFoundError,
    PayloadValidationError,
    PermissionDeniedError,
)
from src.taskboard.gateway import Table, from_row, to_row
from src.taskboard.models import User, UserStatus, new_id
from src.taskboard.schemas import (
    PreferencesUpdate,
    ProfileUpdate,
    ProvisionUserRequest,
    UserCreate,
    UserUpdate,
)
from src.taskboard.services.base import ActionResult, BaseService, parse_payload

DELETION_UNSUPPORTED_MESSAGE = (
    "User suspended. Permanent deletion is not supported; the account can be reactivated later."
)


class UserService(BaseService):
    """Provision, edit and suspend users; self-service profile and preferences."""

    def _get(self, user_id: str) -> User:
        user = self.snapshot.users.get(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def _write(self, user: User, changes: dict[str, Any]) -> User:
        row = await self.gateway.update(Table.MEMBERS, user.id, to_row(User, changes))
        updated = from_row(User, row) if row else user.model_copy(update=changes)
        self.snapshot.upsert(updated)
        return updated

    async def create_user(self, data: UserCreate | Mapping[str, Any]) -> ActionResult[User]:
        async def operation(actor: User) -> User:
            payload = parse_payload(UserCreate, data)
            company_id = effective_company_id(actor, payload.company_id)
            draft = User(
                id=new_id(),
                name=payload.name,
                email=payload.email,
                role=payload.role,
                company_id=company_id,
                status=payload.status,
                permissions=payload.permissions,
                job_title=payload.job_title,
            )
            require(actor, draft, Action.CREATE)
            if not can_grant_role(actor, payload.role):
                raise PermissionDeniedError(f"Cannot grant role {payload.role.value}")
            if company_id is not None and company_id not in self.snapshot.companies:
                raise PayloadValidationError("Selected company does not exist", fields=["company_id"])

            provisioner = self.ctx.provisioner
            session = self.gateway.current_session()
            if provisioner is None:
                raise PermissionDeniedError("User provisioning is not available")
            if session is None:
                raise AuthError("No session token for user provisioning")

            body = ProvisionUserRequest(
                email=payload.email,
                password=payload.password,
                full_name=payload.name,
                role=payload.role,
                company_id=company_id,
                job_title=payload.job_title,
                permissions=sorted(payload.permissions),
                status=payload.status,
            ).to_body()
            user_id = await provisioner.provision(session.access_token, body)

            user = from_row(User, await self.gateway.select_by_id(Table.MEMBERS, user_id))
            self.snapshot.upsert(user)
            return user

        return await self._execute(
            "create_user", operation, success=lambda user: f"User {user.name} created"
        )

    async def update_user(
        self, user_id: str, data: UserUpdate | Mapping[str, Any]
    ) -> ActionResult[User]:
        async def operation(actor: User) -> User:
            target = self._get(user_id)
            payload = parse_payload(UserUpdate, data)
            changes = payload.model_dump(exclude_unset=True)
            if not changes:
                return target

            forbidden = set(changes) - editable_user_fields(actor, target)
            if forbidden:
                raise PermissionDeniedError(
                    f"Cannot change {', '.join(sorted(forbidden))} of user {user_id}"
                )
            if "role" in changes and changes["role"] != target.role:
                require(actor, target, Action.CHANGE_ROLE)
                if not can_grant_role(actor, changes["role"]):
                    raise PermissionDeniedError(f"Cannot grant role {changes['role'].value}")
            if changes.get("status") == UserStatus.SUSPENDED:
                require(actor, target, Action.SUSPEND)
            if "company_id" in changes and not can_assign_company(actor, changes["company_id"]):
                raise PermissionDeniedError("Cannot move users to another company")

            return await self._write(target, changes)

        return await self._execute(
            "update_user", operation, success="User updated", target_user_id=user_id
        )

    async def suspend_user(self, user_id: str) -> ActionResult[User]:
        async def operation(actor: User) -> User:
            target = self._get(user_id)
            require(actor, target, Action.SUSPEND)
            return await self._write(target, {"status": UserStatus.SUSPENDED})

        return await self._execute(
            "suspend_user", operation, success="User suspended", target_user_id=user_id
        )

    async def delete_user(self, user_id: str) -> ActionResult[User]:
        """Deletion degrades to suspension; the account row is kept."""

        async def operation(actor: User) -> User:
            target = self._get(user_id)
            require(actor, target, Action.DELETE)
            return await self._write(target, {"status": UserStatus.SUSPENDED})

        return await self._execute(
            "delete_user",
            operation,
            success=DELETION_UNSUPPORTED_MESSAGE,
            target_user_id=user_id,
        )

    async def update_profile(self, data: ProfileUpdate | Mapping[str, Any]) -> ActionResult[User]:
        async def operation(actor: User) -> User:
            require(actor, actor, Action.EDIT_PROFILE)
            payload = parse_payload(ProfileUpdate, data)
            changes = payload.model_dump(exclude_unset=True)
            if not changes:
                return actor
            return await self._write(actor, changes)

        return await self._execute("update_profile", operation, success="Profile updated")

    async def update_preferences(
        self, data: PreferencesUpdate | Mapping[str, Any]
    ) -> ActionResult[User]:
        """Applied after the remote write confirms, like every other action."""

        async def operation(actor: User) -> User:
            require(actor, actor, Action.EDIT_PROFILE)
            payload = parse_payload(PreferencesUpdate, data)
            changes = payload.model_dump(exclude_unset=True, exclude_none=True)
            if not changes:
                return actor
            preferences = actor.preferences.model_copy(update=changes)
            return await self._write(actor, {"preferences": preferences})

        return await self._execute("update_preferences", operation, success="Preferences saved")
