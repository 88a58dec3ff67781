"""Email value object.

Provides validated email addresses together with the uppercase
normalized form used as the uniqueness and lookup key.
"""

import re
from dataclasses import dataclass

from motopsy_identity.domain.user.exceptions import InvalidEmailError

# Simple but effective email regex
# Validates: user@domain.tld (minimum requirements)
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def normalize_email(email: str) -> str:
    """Return the lookup key for an e-mail address."""
    return email.strip().upper()


@dataclass(frozen=True)
class Email:
    """Value object representing a validated email address.

    The address is stored as entered (trimmed); comparisons between
    users go through ``normalized``.
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            msg = "Email cannot be empty"
            raise InvalidEmailError(msg)

        trimmed = self.value.strip()

        if not EMAIL_PATTERN.match(trimmed):
            msg = f"Invalid email format: {self.value}"
            raise InvalidEmailError(msg)

        object.__setattr__(self, "value", trimmed)

    @property
    def normalized(self) -> str:
        return normalize_email(self.value)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Email('{self.value}')"
