"""Motopsy Identity - Accounts, credentials and role-based access.

This module handles all identity-related concerns:
- Account lifecycle (registration, e-mail confirmation, login)
- Credential safety (bcrypt hashing, lockout after failed logins)
- Purpose-scoped tokens (session, confirmation, reset, magic login)
- Role membership and admin-user provisioning
- Account notifications (confirmation, reset, contact form)

Persistence goes through the CredentialStore contract; the SQLAlchemy
implementation lives in motopsy_identity.infrastructure.
"""

from motopsy_identity.application.context import UserContext
from motopsy_identity.application.ports import Notifier
from motopsy_identity.application.results import Result
from motopsy_identity.application.services import (
    AccountService,
    NotificationDispatcher,
    RoleService,
)
from motopsy_identity.domain.role import (
    NotAnAdminUserError,
    Role,
    RoleAlreadyAssignedError,
    RoleNotAssignedError,
    RoleNotFoundError,
)
from motopsy_identity.domain.user import (
    CredentialStore,
    Email,
    InvalidEmailError,
    LockoutState,
    User,
    UserNotFoundError,
)
from motopsy_identity.exceptions import (
    AccountLockedError,
    DuplicateEmailError,
    EmailNotConfirmedError,
    ErrorCode,
    IdentityError,
    InvalidCredentialsError,
    InvalidTokenError,
    PasswordMismatchError,
    PurposeMismatchError,
    TokenExpiredError,
    ValidationError,
    WeakPasswordError,
)
from motopsy_identity.schemas import IssuedToken, TokenClaims, TokenPurpose
from motopsy_identity.services import (
    LockoutPolicy,
    PasswordHashingService,
    PurposeTokenService,
)

__all__ = [
    # Domain - User
    "CredentialStore",
    "Email",
    "InvalidEmailError",
    "LockoutState",
    "User",
    "UserNotFoundError",
    # Domain - Role
    "NotAnAdminUserError",
    "Role",
    "RoleAlreadyAssignedError",
    "RoleNotAssignedError",
    "RoleNotFoundError",
    # Exceptions
    "AccountLockedError",
    "DuplicateEmailError",
    "EmailNotConfirmedError",
    "ErrorCode",
    "IdentityError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "PasswordMismatchError",
    "PurposeMismatchError",
    "TokenExpiredError",
    "ValidationError",
    "WeakPasswordError",
    # Schemas
    "IssuedToken",
    "TokenClaims",
    "TokenPurpose",
    # Services
    "LockoutPolicy",
    "PasswordHashingService",
    "PurposeTokenService",
    # Application
    "AccountService",
    "NotificationDispatcher",
    "Notifier",
    "Result",
    "RoleService",
    "UserContext",
]
