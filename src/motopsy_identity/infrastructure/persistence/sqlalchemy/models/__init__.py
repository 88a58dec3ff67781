from motopsy_identity.infrastructure.persistence.sqlalchemy.models.role_model import (
    RoleModel,
    UserRoleModel,
)
from motopsy_identity.infrastructure.persistence.sqlalchemy.models.user_model import (
    UserModel,
)

__all__ = ["RoleModel", "UserModel", "UserRoleModel"]
