"""User domain manages identity and credential state.

This domain handles:
- User aggregate (identity, password hash, lockout counters, stamps)
- Email value object and its normalized lookup key
- The CredentialStore contract used by the application services
"""

from motopsy_identity.domain.user.aggregates import User
from motopsy_identity.domain.user.exceptions import (
    InvalidEmailError,
    UserNotFoundError,
)
from motopsy_identity.domain.user.repositories import CredentialStore, UserWithRoles
from motopsy_identity.domain.user.value_objects import (
    Email,
    LockoutState,
    normalize_email,
)

__all__ = [
    "CredentialStore",
    "Email",
    "InvalidEmailError",
    "LockoutState",
    "User",
    "UserNotFoundError",
    "UserWithRoles",
    "normalize_email",
]
