from motopsy_identity.application.dtos.account_dtos import (
    SessionTokenDTO,
    UserProfileDTO,
)
from motopsy_identity.application.dtos.role_dtos import (
    AdminUserDTO,
    AdminUserPageDTO,
    CreatedAdminUserDTO,
    RoleDTO,
)

__all__ = [
    "AdminUserDTO",
    "AdminUserPageDTO",
    "CreatedAdminUserDTO",
    "RoleDTO",
    "SessionTokenDTO",
    "UserProfileDTO",
]
