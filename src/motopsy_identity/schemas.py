"""Token schemas and data structures.

These are simple data classes used for transferring token data
between components.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class TokenPurpose(str, Enum):
    """What a token may be used for. Verification binds to exactly one."""

    SESSION = "session"
    EMAIL_CONFIRMATION = "email-confirmation"
    PASSWORD_RESET = "password-reset"
    MAGIC_LOGIN = "magic-login"


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed token and its validity window."""

    token: str
    purpose: TokenPurpose
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    """Decoded and verified token payload.

    Attributes
    ----------
    subject
        The ``sub`` claim: a user id or an e-mail depending on purpose
    purpose
        The purpose the token was issued for
    issued_at
        Issue timestamp
    expires_at
        Expiration timestamp
    extra
        Remaining purpose-specific claims (``email``, ``isAdmin``,
        ``redirectPath``, ...)
    """

    subject: str
    purpose: TokenPurpose
    issued_at: datetime
    expires_at: datetime
    extra: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.extra.get(name, default)

    def is_session_token(self) -> bool:
        return self.purpose == TokenPurpose.SESSION
