"""Role service for role membership and admin-user provisioning."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from motopsy_identity.application.dtos import (
    AdminUserDTO,
    AdminUserPageDTO,
    CreatedAdminUserDTO,
    RoleDTO,
)
from motopsy_identity.application.results import returns_result
from motopsy_identity.application.validation import parse_id
from motopsy_identity.domain.role import (
    NotAnAdminUserError,
    Role,
    RoleAlreadyAssignedError,
    RoleNotAssignedError,
    RoleNotFoundError,
)
from motopsy_identity.domain.shared.time import Clock, utc_now
from motopsy_identity.domain.user import Email, User, UserNotFoundError
from motopsy_identity.exceptions import (
    DuplicateEmailError,
    IdentityError,
    TransactionError,
    ValidationError,
)

if TYPE_CHECKING:
    from motopsy_identity.domain.user import CredentialStore
    from motopsy_identity.services import PasswordHashingService

logger = logging.getLogger(__name__)


class RoleService:
    """
    Application service for role-based access provisioning.

    Keeps ``User.is_admin`` in step with membership of the ADMIN role:
    the membership row and the flag are always written in the same
    transaction.
    """

    DEFAULT_PAGE_SIZE = 20
    MAX_PAGE_SIZE = 100
    DEFAULT_ADMIN_PASSWORD_MIN_LENGTH = 6

    def __init__(
        self,
        credential_store: CredentialStore,
        password_service: PasswordHashingService,
        admin_password_min_length: int = DEFAULT_ADMIN_PASSWORD_MIN_LENGTH,
        clock: Clock = utc_now,
    ):
        self._store = credential_store
        self._password_service = password_service
        self._admin_password_min_length = admin_password_min_length
        self._clock = clock

    @returns_result("Failed to fetch roles")
    async def list_roles(self) -> list[RoleDTO]:
        roles = await self._store.list_roles()
        return [RoleDTO.from_role(r) for r in roles]

    @returns_result("Failed to fetch users")
    async def list_users_with_roles(
        self,
        page: int | str = 1,
        page_size: int | str = DEFAULT_PAGE_SIZE,
        search: str = "",
    ) -> AdminUserPageDTO:
        page = parse_id(page, "page")
        page_size = parse_id(page_size, "pageSize")
        if page_size > self.MAX_PAGE_SIZE:
            msg = f"pageSize must be between 1 and {self.MAX_PAGE_SIZE}"
            raise ValidationError(msg)

        search = (search or "").strip()
        total = await self._store.count_users_with_any_role(search)
        entries = []
        if total:
            entries = await self._store.list_users_with_roles(
                offset=(page - 1) * page_size,
                limit=page_size,
                search=search,
            )

        return AdminUserPageDTO(
            users=[AdminUserDTO.from_user_with_roles(e) for e in entries],
            total=total,
            page=page,
            page_size=page_size,
        )

    @returns_result("Failed to fetch user roles")
    async def list_user_roles(self, user_id: int | str) -> list[RoleDTO]:
        user = await self._get_user(parse_id(user_id, "userId"))
        roles = await self._store.list_roles_for_user(user.id)  # type: ignore[arg-type]
        return [RoleDTO.from_role(r) for r in roles]

    @returns_result("Failed to assign role")
    async def assign_role(self, user_id: int | str, role_id: int | str) -> str:
        user = await self._get_user(parse_id(user_id, "userId"))
        role = await self._get_role(parse_id(role_id, "roleId"))

        if await self._store.find_user_role(user.id, role.id) is not None:  # type: ignore[arg-type]
            raise RoleAlreadyAssignedError

        async def _assign() -> None:
            await self._store.create_user_role(user.id, role.id)  # type: ignore[arg-type]
            if role.is_admin_role:
                user.grant_admin(self._clock())
                await self._store.save_user(user)

        await self._store.run_in_transaction(_assign)
        logger.info("Role '%s' assigned to user %s", role.name, user.id)
        return f"Role '{role.name}' assigned successfully"

    @returns_result("Failed to remove role")
    async def remove_role(self, user_id: int | str, role_id: int | str) -> str:
        uid = parse_id(user_id, "userId")
        rid = parse_id(role_id, "roleId")

        if await self._store.find_user_role(uid, rid) is None:
            raise RoleNotAssignedError

        role = await self._get_role(rid)
        user = await self._store.find_user_by_id(uid)

        async def _remove() -> None:
            await self._store.destroy_user_role(uid, rid)
            if role.is_admin_role and user is not None:
                user.revoke_admin(self._clock())
                await self._store.save_user(user)

        await self._store.run_in_transaction(_remove)
        logger.info("Role '%s' removed from user %s", role.name, uid)
        return f"Role '{role.name}' removed successfully"

    @returns_result("Failed to create admin user")
    async def create_admin_user(  # noqa: PLR0913
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone_number: str | None = None,
        role_id: int | str | None = None,
    ) -> CreatedAdminUserDTO:
        if not email or not password or not role_id:
            msg = "Email, password, and role are required"
            raise ValidationError(msg)

        email_obj = Email(email)
        rid = parse_id(role_id, "roleId")

        if await self._store.find_user_by_normalized_email(email_obj.normalized):
            raise DuplicateEmailError(email_obj.value)

        role = await self._store.find_role_by_id(rid)
        if role is None:
            raise RoleNotFoundError(rid, "Invalid role selected")

        # Admin-created users are pre-confirmed
        user = User.create(
            email_obj,
            self._password_service.hash(password),
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
            email_confirmed=True,
            is_admin=role.is_admin_role,
        )

        async def _provision() -> None:
            await self._store.create_user(user)
            await self._store.create_user_role(user.id, role.id)  # type: ignore[arg-type]

        try:
            await self._store.run_in_transaction(_provision)
        except IdentityError:
            raise
        except Exception as e:
            logger.exception("Admin provisioning for %s rolled back", email_obj.value)
            raise TransactionError from e

        logger.info("Admin user created: %s with role %s", user.email, role.name)
        return CreatedAdminUserDTO(
            id=user.id,  # type: ignore[arg-type]
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=role.name,
            message=f"User created successfully with {role.name} role",
        )

    @returns_result("Failed to update password")
    async def update_admin_user_password(
        self,
        user_id: int | str,
        new_password: str,
    ) -> str:
        if not user_id or not new_password:
            msg = "User ID and new password are required"
            raise ValidationError(msg)

        if len(new_password) < self._admin_password_min_length:
            msg = (
                f"Password must be at least {self._admin_password_min_length} "
                "characters"
            )
            raise ValidationError(msg)

        uid = parse_id(user_id, "userId")
        if not await self._store.user_has_any_role(uid):
            raise NotAnAdminUserError

        user = await self._get_user(uid)
        user.change_password(self._password_service.hash(new_password), self._clock())
        await self._store.run_in_transaction(lambda: self._store.save_user(user))

        logger.info("Password updated for admin user %s", user.id)
        return "Password updated successfully"

    async def _get_user(self, user_id: int) -> User:
        user = await self._store.find_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def _get_role(self, role_id: int) -> Role:
        role = await self._store.find_role_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(role_id)
        return role
