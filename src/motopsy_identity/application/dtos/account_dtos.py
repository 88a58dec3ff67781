"""Data transfer objects returned by AccountService."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from motopsy_identity.domain.user import User
    from motopsy_identity.schemas import IssuedToken


@dataclass(frozen=True)
class UserProfileDTO:
    """Public view of a user. Never carries the password hash or stamps."""

    id: int
    name: str
    email_address: str
    phone_number: str | None
    is_admin: bool
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> UserProfileDTO:
        return cls(
            id=user.id,  # type: ignore[arg-type]
            name=user.display_name,
            email_address=user.email,
            phone_number=user.phone_number,
            is_admin=user.is_admin,
            created_at=user.created_at,
        )


@dataclass(frozen=True)
class SessionTokenDTO:
    """A session token with its validity window."""

    access_token: str
    valid_from: datetime
    valid_to: datetime
    redirect_path: str | None = None

    @classmethod
    def from_issued(
        cls,
        issued: IssuedToken,
        redirect_path: str | None = None,
    ) -> SessionTokenDTO:
        return cls(
            access_token=issued.token,
            valid_from=issued.issued_at,
            valid_to=issued.expires_at,
            redirect_path=redirect_path,
        )
