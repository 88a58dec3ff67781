"""SQLAlchemy implementation of CredentialStore.

Provides data access for users, roles and memberships on a single
AsyncSession, which is also the unit of work for ``run_in_transaction``.
"""

import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy import ColumnElement, exists, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from motopsy_identity.domain.role import (
    Role,
    RoleAlreadyAssignedError,
    UserRoleAssignment,
)
from motopsy_identity.domain.shared.time import ensure_tz_aware
from motopsy_identity.domain.user import (
    CredentialStore,
    User,
    UserNotFoundError,
    UserWithRoles,
)
from motopsy_identity.exceptions import DuplicateEmailError
from motopsy_identity.infrastructure.persistence.sqlalchemy.models import (
    RoleModel,
    UserModel,
    UserRoleModel,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CredentialStoreSQLAlchemy(CredentialStore):
    """SQLAlchemy implementation of the CredentialStore interface."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize store with database session.

        Parameters
        ----------
        session
            SQLAlchemy async session (one per unit of work)
        """
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    # Users

    async def find_user_by_normalized_email(self, normalized_email: str) -> User | None:
        stmt = select(UserModel).where(UserModel.normalized_email == normalized_email)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._map_to_domain(model) if model else None

    async def find_user_by_id(self, user_id: int) -> User | None:
        model = await self._session.get(UserModel, user_id)
        return self._map_to_domain(model) if model else None

    async def create_user(self, user: User) -> User:
        model = self._map_to_model(user)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if "unique" in str(e).lower():
                raise DuplicateEmailError(user.email) from e
            raise

        user.bind_id(model.id)
        logger.info("Created user: %s (email: %s)", model.id, user.email)
        return user

    async def save_user(self, user: User) -> None:
        if user.id is None:
            msg = "Cannot save a user that has not been created"
            raise ValueError(msg)

        model = await self._session.get(UserModel, user.id)
        if model is None:
            raise UserNotFoundError(user.id)

        self._update_model(model, user)
        try:
            await self._session.flush()
        except IntegrityError as e:
            if "unique" in str(e).lower():
                raise DuplicateEmailError(user.email) from e
            raise
        logger.debug("Updated user: %s", user.id)

    # Roles

    async def find_role_by_id(self, role_id: int) -> Role | None:
        model = await self._session.get(RoleModel, role_id)
        return self._map_role(model) if model else None

    async def list_roles(self) -> list[Role]:
        stmt = select(RoleModel).order_by(RoleModel.id)
        result = await self._session.execute(stmt)
        return [self._map_role(m) for m in result.scalars().all()]

    async def find_user_role(self, user_id: int, role_id: int) -> UserRoleAssignment | None:
        model = await self._session.get(UserRoleModel, (user_id, role_id))
        if model is None:
            return None
        return UserRoleAssignment(user_id=model.user_id, role_id=model.role_id)

    async def create_user_role(self, user_id: int, role_id: int) -> UserRoleAssignment:
        if await self._session.get(UserRoleModel, (user_id, role_id)) is not None:
            raise RoleAlreadyAssignedError

        self._session.add(UserRoleModel(user_id=user_id, role_id=role_id))
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise RoleAlreadyAssignedError from e
        logger.debug("Created user role: user=%s role=%s", user_id, role_id)
        return UserRoleAssignment(user_id=user_id, role_id=role_id)

    async def destroy_user_role(self, user_id: int, role_id: int) -> bool:
        model = await self._session.get(UserRoleModel, (user_id, role_id))
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        logger.debug("Deleted user role: user=%s role=%s", user_id, role_id)
        return True

    async def list_roles_for_user(self, user_id: int) -> list[Role]:
        stmt = (
            select(RoleModel)
            .join(UserRoleModel, UserRoleModel.role_id == RoleModel.id)
            .where(UserRoleModel.user_id == user_id)
            .order_by(RoleModel.id)
        )
        result = await self._session.execute(stmt)
        return [self._map_role(m) for m in result.scalars().all()]

    async def user_has_any_role(self, user_id: int) -> bool:
        stmt = select(exists().where(UserRoleModel.user_id == user_id))
        result = await self._session.execute(stmt)
        return bool(result.scalar())

    async def count_users_with_any_role(self, search: str = "") -> int:
        stmt = select(func.count()).select_from(UserModel).where(
            *self._users_with_roles_filter(search),
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def list_users_with_roles(
        self,
        offset: int,
        limit: int,
        search: str = "",
    ) -> list[UserWithRoles]:
        stmt = (
            select(UserModel)
            .where(*self._users_with_roles_filter(search))
            .order_by(UserModel.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        users = [self._map_to_domain(m) for m in result.scalars().all()]
        if not users:
            return []

        roles_stmt = (
            select(UserRoleModel.user_id, RoleModel)
            .join(RoleModel, RoleModel.id == UserRoleModel.role_id)
            .where(UserRoleModel.user_id.in_([u.id for u in users]))
            .order_by(RoleModel.id)
        )
        roles_by_user: dict[int, list[Role]] = {}
        for user_id, role_model in (await self._session.execute(roles_stmt)).all():
            roles_by_user.setdefault(user_id, []).append(self._map_role(role_model))

        return [
            UserWithRoles(user=u, roles=roles_by_user.get(u.id, []))  # type: ignore[arg-type]
            for u in users
        ]

    # Unit of work

    async def run_in_transaction(self, fn: Callable[[], Awaitable[T]]) -> T:
        if not self._session.in_transaction():
            async with self._session.begin():
                return await fn()

        # The session autobegins on the first query, so most callers
        # arrive here with reads already inside the transaction.
        try:
            result = await fn()
            await self._session.commit()
        except BaseException:
            await self._session.rollback()
            raise
        return result

    # Mapping

    @staticmethod
    def _users_with_roles_filter(search: str) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = [
            UserModel.id.in_(select(UserRoleModel.user_id).distinct()),
        ]
        if search:
            needle = search.lower()
            clauses.append(
                or_(
                    func.lower(UserModel.email).contains(needle, autoescape=True),
                    func.lower(UserModel.first_name).contains(needle, autoescape=True),
                    func.lower(UserModel.last_name).contains(needle, autoescape=True),
                ),
            )
        return clauses

    @staticmethod
    def _map_role(model: RoleModel) -> Role:
        return Role(id=model.id, name=model.name, normalized_name=model.normalized_name)

    def _map_to_domain(self, model: UserModel) -> User:
        return User.reconstitute(
            id=model.id,
            email=model.email,
            password_hash=model.password_hash,
            email_confirmed=model.email_confirmed,
            phone_number=model.phone_number,
            first_name=model.first_name,
            last_name=model.last_name,
            lockout_enabled=model.lockout_enabled,
            access_failed_count=model.access_failed_count,
            lockout_end=ensure_tz_aware(model.lockout_end) if model.lockout_end else None,
            is_admin=model.is_admin,
            security_stamp=model.security_stamp,
            concurrency_stamp=model.concurrency_stamp,
            created_at=ensure_tz_aware(model.created_at),
            modified_at=ensure_tz_aware(model.modified_at) if model.modified_at else None,
        )

    def _map_to_model(self, user: User) -> UserModel:
        return UserModel(
            email=user.email,
            normalized_email=user.normalized_email,
            password_hash=user.password_hash,
            email_confirmed=user.email_confirmed,
            phone_number=user.phone_number,
            first_name=user.first_name,
            last_name=user.last_name,
            lockout_enabled=user.lockout_enabled,
            access_failed_count=user.access_failed_count,
            lockout_end=user.lockout_end,
            is_admin=user.is_admin,
            security_stamp=user.security_stamp,
            concurrency_stamp=user.concurrency_stamp,
            created_at=user.created_at,
            modified_at=user.modified_at,
        )

    def _update_model(self, model: UserModel, user: User) -> None:
        model.email = user.email
        model.normalized_email = user.normalized_email
        model.password_hash = user.password_hash
        model.email_confirmed = user.email_confirmed
        model.phone_number = user.phone_number
        model.first_name = user.first_name
        model.last_name = user.last_name
        model.lockout_enabled = user.lockout_enabled
        model.access_failed_count = user.access_failed_count
        model.lockout_end = user.lockout_end
        model.is_admin = user.is_admin
        model.security_stamp = user.security_stamp
        model.modified_at = user.modified_at
