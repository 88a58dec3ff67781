"""Role domain: reference roles and user-role membership."""

from motopsy_identity.domain.role.exceptions import (
    NotAnAdminUserError,
    RoleAlreadyAssignedError,
    RoleNotAssignedError,
    RoleNotFoundError,
)
from motopsy_identity.domain.role.role import (
    ADMIN_ROLE_NAME,
    Role,
    UserRoleAssignment,
    normalize_role_name,
)

__all__ = [
    "ADMIN_ROLE_NAME",
    "NotAnAdminUserError",
    "Role",
    "RoleAlreadyAssignedError",
    "RoleNotAssignedError",
    "RoleNotFoundError",
    "UserRoleAssignment",
    "normalize_role_name",
]
