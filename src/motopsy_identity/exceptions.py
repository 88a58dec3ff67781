"""Identity and authentication exceptions.

These exceptions are raised inside the motopsy_identity package and are
converted into failure results at the application-service boundary.
Each carries a stable ``code`` so callers can branch without parsing
messages.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable failure categories."""

    VALIDATION = "validation"
    PASSWORD_MISMATCH = "password_mismatch"
    DUPLICATE_EMAIL = "duplicate_email"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    NOT_ASSIGNED = "not_assigned"
    NOT_AN_ADMIN_USER = "not_an_admin_user"
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_LOCKED = "account_locked"
    EMAIL_NOT_CONFIRMED = "email_not_confirmed"
    INVALID_TOKEN = "invalid_token"
    TOKEN_EXPIRED = "token_expired"
    PURPOSE_MISMATCH = "purpose_mismatch"
    TRANSACTION_FAILED = "transaction_failed"
    NOTIFICATION_FAILED = "notification_failed"
    UNEXPECTED = "unexpected"


class IdentityError(Exception):
    """Base exception for all identity errors."""

    code: ErrorCode = ErrorCode.UNEXPECTED

    def __init__(self, message: str = "Identity error"):
        self.message = message
        super().__init__(self.message)


# Validation


class ValidationError(IdentityError):
    """Raised when input is missing or malformed."""

    code = ErrorCode.VALIDATION

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message)


class PasswordMismatchError(ValidationError):
    """Raised when a password and its confirmation differ."""

    code = ErrorCode.PASSWORD_MISMATCH

    def __init__(
        self,
        message: str = "The password and confirmation password do not match",
    ):
        super().__init__(message)


class WeakPasswordError(ValidationError):
    """Raised when a password doesn't meet strength requirements."""

    def __init__(self, message: str = "Password does not meet requirements"):
        super().__init__(message)


# Lookup and uniqueness


class DuplicateEmailError(IdentityError):
    """Raised when the normalized e-mail is already registered."""

    code = ErrorCode.DUPLICATE_EMAIL

    def __init__(self, email: str):
        self.email = email
        super().__init__("User with this email already exists")


class NotFoundError(IdentityError):
    """Raised when a referenced record does not exist."""

    code = ErrorCode.NOT_FOUND

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class ConflictError(IdentityError):
    """Raised when a write would violate a uniqueness rule."""

    code = ErrorCode.CONFLICT

    def __init__(self, message: str = "Conflict"):
        super().__init__(message)


# Authentication


class AuthenticationError(IdentityError):
    """Base exception for login failures."""

    code = ErrorCode.INVALID_CREDENTIALS

    def __init__(self, message: str = "Authentication error"):
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when email or password is incorrect during login."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class AccountLockedError(AuthenticationError):
    """Raised when an account is locked due to too many failed login attempts."""

    code = ErrorCode.ACCOUNT_LOCKED

    def __init__(
        self,
        message: str = "Account is locked. Please try again later.",
        locked_until: str | None = None,
    ):
        self.locked_until = locked_until
        super().__init__(message)


class EmailNotConfirmedError(AuthenticationError):
    """Raised when the password is right but the e-mail is unconfirmed."""

    code = ErrorCode.EMAIL_NOT_CONFIRMED

    def __init__(self, message: str = "Please confirm your email before logging in"):
        super().__init__(message)


# Tokens


class TokenError(IdentityError):
    """Base exception for token verification failures."""

    code = ErrorCode.INVALID_TOKEN

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class InvalidTokenError(TokenError):
    """Raised when a token signature, structure or binding is wrong."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenExpiredError(TokenError):
    """Raised when a token is past its expiry."""

    code = ErrorCode.TOKEN_EXPIRED

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class PurposeMismatchError(TokenError):
    """Raised when a token was issued for a different purpose."""

    code = ErrorCode.PURPOSE_MISMATCH

    def __init__(self, expected: str, actual: str | None):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Token purpose '{actual}' does not match '{expected}'")


# Infrastructure


class TransactionError(IdentityError):
    """Raised when an atomic multi-write failed and was rolled back."""

    code = ErrorCode.TRANSACTION_FAILED

    def __init__(self, message: str = "Transaction failed and was rolled back"):
        super().__init__(message)


class NotificationError(IdentityError):
    """Raised when a notification that must be delivered was not."""

    code = ErrorCode.NOTIFICATION_FAILED

    def __init__(self, message: str = "Failed to send message"):
        super().__init__(message)
