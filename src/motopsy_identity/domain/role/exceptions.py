"""Role domain exceptions."""

from motopsy_identity.exceptions import ConflictError, ErrorCode, NotFoundError


class RoleNotFoundError(NotFoundError):
    """Role not found."""

    def __init__(self, role_id: object, message: str = "Role not found") -> None:
        self.role_id = role_id
        super().__init__(message)


class RoleAlreadyAssignedError(ConflictError):
    """The user already holds the role."""

    def __init__(self) -> None:
        super().__init__("User already has this role")


class RoleNotAssignedError(ConflictError):
    """The user does not hold the role."""

    code = ErrorCode.NOT_ASSIGNED

    def __init__(self) -> None:
        super().__init__("User does not have this role")


class NotAnAdminUserError(ConflictError):
    """The user holds no role, so it is not managed as an admin user."""

    code = ErrorCode.NOT_AN_ADMIN_USER

    def __init__(self) -> None:
        super().__init__("User is not an admin user")
