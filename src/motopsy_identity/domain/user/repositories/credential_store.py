"""Abstract store interface for users, roles and role memberships.

This interface defines the contract for credential persistence.
Implementations can use SQLAlchemy or any other storage that offers
all-or-nothing transactions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Awaitable, Callable, TypeVar

from motopsy_identity.domain.role import Role, UserRoleAssignment
from motopsy_identity.domain.user.aggregates.user import User

T = TypeVar("T")


@dataclass(frozen=True)
class UserWithRoles:
    """A user together with the roles it currently holds."""

    user: User
    roles: list[Role] = field(default_factory=list)


class CredentialStore(ABC):
    """
    Durable storage for User, Role and UserRoleAssignment records.

    Lookups return domain objects or None. Writes only become durable
    through ``run_in_transaction``; a failure inside it must leave no
    partial writes behind.
    """

    @abstractmethod
    async def find_user_by_normalized_email(self, normalized_email: str) -> User | None:
        """Find a user by its uppercase e-mail key."""

    @abstractmethod
    async def find_user_by_id(self, user_id: int) -> User | None:
        """Find a user by id."""

    @abstractmethod
    async def create_user(self, user: User) -> User:
        """
        Insert a new user and bind its store-generated id.

        Raises
        ------
        DuplicateEmailError
            If the normalized e-mail is already taken
        """

    @abstractmethod
    async def save_user(self, user: User) -> None:
        """Persist changes to an existing user."""

    @abstractmethod
    async def find_role_by_id(self, role_id: int) -> Role | None:
        """Find a role by id."""

    @abstractmethod
    async def list_roles(self) -> list[Role]:
        """List all roles ordered by id."""

    @abstractmethod
    async def find_user_role(self, user_id: int, role_id: int) -> UserRoleAssignment | None:
        """Find the membership row for the pair, if any."""

    @abstractmethod
    async def create_user_role(self, user_id: int, role_id: int) -> UserRoleAssignment:
        """Insert a membership row."""

    @abstractmethod
    async def destroy_user_role(self, user_id: int, role_id: int) -> bool:
        """Delete a membership row. Returns False if it did not exist."""

    @abstractmethod
    async def list_roles_for_user(self, user_id: int) -> list[Role]:
        """List the roles a user holds, ordered by id."""

    @abstractmethod
    async def user_has_any_role(self, user_id: int) -> bool:
        """Check whether the user holds at least one role."""

    @abstractmethod
    async def count_users_with_any_role(self, search: str = "") -> int:
        """Count users holding at least one role, optionally filtered."""

    @abstractmethod
    async def list_users_with_roles(
        self,
        offset: int,
        limit: int,
        search: str = "",
    ) -> list[UserWithRoles]:
        """
        List users holding at least one role, newest id first.

        Parameters
        ----------
        offset
            Number of matching users to skip
        limit
            Maximum number of users to return
        search
            Case-insensitive substring matched against email, first
            name and last name (empty matches everything)
        """

    @abstractmethod
    async def run_in_transaction(self, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``fn`` as one unit of work.

        Commits when ``fn`` returns and rolls back every write made
        inside it when ``fn`` raises; the exception is re-raised.
        """
