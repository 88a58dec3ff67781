"""Data transfer objects returned by RoleService."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from motopsy_identity.domain.role import Role
    from motopsy_identity.domain.user import UserWithRoles


@dataclass(frozen=True)
class RoleDTO:
    id: int
    name: str

    @classmethod
    def from_role(cls, role: Role) -> RoleDTO:
        return cls(id=role.id, name=role.name)


@dataclass(frozen=True)
class AdminUserDTO:
    """A user that holds at least one role."""

    id: int
    email: str
    first_name: str | None
    last_name: str | None
    is_admin: bool
    created_at: datetime
    roles: list[RoleDTO] = field(default_factory=list)

    @classmethod
    def from_user_with_roles(cls, entry: UserWithRoles) -> AdminUserDTO:
        user = entry.user
        return cls(
            id=user.id,  # type: ignore[arg-type]
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            is_admin=user.is_admin,
            created_at=user.created_at,
            roles=[RoleDTO.from_role(r) for r in entry.roles],
        )


@dataclass(frozen=True)
class AdminUserPageDTO:
    users: list[AdminUserDTO]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total / self.page_size)


@dataclass(frozen=True)
class CreatedAdminUserDTO:
    id: int
    email: str
    first_name: str | None
    last_name: str | None
    role: str
    message: str
