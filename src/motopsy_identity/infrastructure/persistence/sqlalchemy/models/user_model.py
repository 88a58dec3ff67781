"""SQLAlchemy model for the User aggregate."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from motopsy_identity.domain.shared.time import utc_now
from motopsy_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase


class UserModel(IdentityBase):
    """
    SQLAlchemy model for persisting users.

    ``id`` is generated by the database. ``normalized_email`` carries the
    uniqueness constraint; ``email`` keeps the address as entered.

    Table: users
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_email: Mapped[str] = mapped_column(
        String(256),
        unique=True,
        nullable=False,
        index=True,
    )

    # Password hash (bcrypt format, ~60 chars)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    email_confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Lockout state
    lockout_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    access_failed_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    lockout_end: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    security_stamp: Mapped[str] = mapped_column(String(64), nullable=False)
    concurrency_stamp: Mapped[str] = mapped_column(String(64), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    modified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<UserModel(id={self.id}, email={self.email})>"
