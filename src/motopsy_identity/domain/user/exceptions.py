"""User domain exceptions.

Custom exceptions for the user domain, used for validation
and business rule violations.
"""

from motopsy_identity.exceptions import NotFoundError, ValidationError


class InvalidEmailError(ValidationError):
    """Raised when email format is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class UserNotFoundError(NotFoundError):
    """User not found."""

    def __init__(self, user_id: object) -> None:
        self.user_id = user_id
        super().__init__("User not found")
