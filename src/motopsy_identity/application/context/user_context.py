"""User context decoded from a verified session token."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from motopsy_identity.schemas import TokenClaims


@dataclass(frozen=True)
class UserContext:
    """Immutable context for the current authenticated user."""

    user_id: int
    email: str
    is_admin: bool = False

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> UserContext:
        return cls(
            user_id=int(claims.subject),
            email=str(claims.get("unique_name", "")),
            is_admin=claims.get("isAdmin") is True,
        )

    def __str__(self) -> str:
        return f"UserContext({self.email})"

    def __repr__(self) -> str:
        return (
            f"UserContext(user_id={self.user_id}, "
            f"email={self.email!r}, is_admin={self.is_admin})"
        )
