"""Role reference data and the user-role join record."""

from dataclasses import dataclass

ADMIN_ROLE_NAME = "ADMIN"


def normalize_role_name(name: str) -> str:
    return name.strip().upper()


@dataclass(frozen=True)
class Role:
    """A named role; ``normalized_name`` is the comparison key."""

    id: int
    name: str
    normalized_name: str

    @property
    def is_admin_role(self) -> bool:
        return self.normalized_name == ADMIN_ROLE_NAME


@dataclass(frozen=True)
class UserRoleAssignment:
    """Membership of one user in one role (unique per pair)."""

    user_id: int
    role_id: int
