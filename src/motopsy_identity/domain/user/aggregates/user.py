"""User aggregate for identity and credential state."""

import secrets
from datetime import datetime
from typing import Union
from uuid import uuid4

from motopsy_identity.domain.shared.time import utc_now
from motopsy_identity.domain.user.value_objects import Email, LockoutState


def new_security_stamp() -> str:
    return secrets.token_hex(16).upper()


def new_concurrency_stamp() -> str:
    return str(uuid4())


class User:
    """
    User aggregate root.

    Holds identity (e-mail, names, phone), the password hash and the
    lockout counters. The id is assigned by the store on first insert.
    """

    def __init__(  # noqa: PLR0913
        self,
        email: Union[str, Email],
        password_hash: str,
        id: int | None = None,
        email_confirmed: bool = False,
        phone_number: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
        lockout_enabled: bool = True,
        access_failed_count: int = 0,
        lockout_end: datetime | None = None,
        is_admin: bool = False,
        security_stamp: str | None = None,
        concurrency_stamp: str | None = None,
        created_at: datetime | None = None,
        modified_at: datetime | None = None,
    ):
        self._email = email if isinstance(email, Email) else Email(email)
        self._password_hash = password_hash
        self._id = id
        self._email_confirmed = email_confirmed
        self._phone_number = phone_number
        self._first_name = first_name
        self._last_name = last_name
        self._lockout_enabled = lockout_enabled
        self._access_failed_count = access_failed_count
        self._lockout_end = lockout_end
        self._is_admin = is_admin
        self._security_stamp = security_stamp or new_security_stamp()
        self._concurrency_stamp = concurrency_stamp or new_concurrency_stamp()
        self._created_at = created_at or utc_now()
        self._modified_at = modified_at

    @property
    def id(self) -> int | None:
        return self._id

    @property
    def email(self) -> str:
        return self._email.value

    @property
    def normalized_email(self) -> str:
        return self._email.normalized

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def email_confirmed(self) -> bool:
        return self._email_confirmed

    @property
    def phone_number(self) -> str | None:
        return self._phone_number

    @property
    def first_name(self) -> str | None:
        return self._first_name

    @property
    def last_name(self) -> str | None:
        return self._last_name

    @property
    def display_name(self) -> str:
        parts = [p for p in (self._first_name, self._last_name) if p]
        return " ".join(parts) or self.email

    @property
    def lockout_enabled(self) -> bool:
        return self._lockout_enabled

    @property
    def access_failed_count(self) -> int:
        return self._access_failed_count

    @property
    def lockout_end(self) -> datetime | None:
        return self._lockout_end

    @property
    def lockout_state(self) -> LockoutState:
        return LockoutState(
            access_failed_count=self._access_failed_count,
            lockout_end=self._lockout_end,
        )

    @property
    def is_admin(self) -> bool:
        return self._is_admin

    @property
    def security_stamp(self) -> str:
        return self._security_stamp

    @property
    def concurrency_stamp(self) -> str:
        return self._concurrency_stamp

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def modified_at(self) -> datetime | None:
        return self._modified_at

    def bind_id(self, user_id: int) -> None:
        """Record the identity the store generated on insert."""
        if self._id is not None and self._id != user_id:
            msg = f"User already has id {self._id}"
            raise ValueError(msg)
        self._id = user_id

    def confirm_email(self, now: datetime) -> None:
        self._email_confirmed = True
        self._modified_at = now

    def record_failed_login(self, state: LockoutState) -> None:
        self._access_failed_count = state.access_failed_count
        self._lockout_end = state.lockout_end

    def record_successful_login(self, state: LockoutState, now: datetime) -> None:
        self._access_failed_count = state.access_failed_count
        self._lockout_end = state.lockout_end
        self._modified_at = now

    def change_password(self, password_hash: str, now: datetime) -> None:
        """Replace the password hash and rotate the security stamp."""
        self._password_hash = password_hash
        self._security_stamp = new_security_stamp()
        self._modified_at = now

    def grant_admin(self, now: datetime) -> None:
        self._is_admin = True
        self._modified_at = now

    def revoke_admin(self, now: datetime) -> None:
        self._is_admin = False
        self._modified_at = now

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        email: Union[str, Email],
        password_hash: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone_number: str | None = None,
        email_confirmed: bool = False,
        is_admin: bool = False,
    ) -> "User":
        return cls(
            email=email,
            password_hash=password_hash,
            first_name=first_name or None,
            last_name=last_name or None,
            phone_number=phone_number or None,
            email_confirmed=email_confirmed,
            is_admin=is_admin,
        )

    @classmethod
    def reconstitute(cls, **fields) -> "User":
        return cls(**fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        if self._id is None or other._id is None:
            return self is other
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id) if self._id is not None else id(self)

    def __repr__(self) -> str:
        return f"User(id={self._id}, email={self._email.value})"
