"""SQLAlchemy models for roles and user-role membership."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from motopsy_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase


class RoleModel(IdentityBase):
    """Role reference data. Table: roles"""

    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    normalized_name: Mapped[str] = mapped_column(
        String(256),
        unique=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<RoleModel(id={self.id}, name={self.name})>"


class UserRoleModel(IdentityBase):
    """Membership of a user in a role. Table: user_roles

    The composite primary key makes each (user, role) pair unique.
    """

    __tablename__ = "user_roles"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<UserRoleModel(user_id={self.user_id}, role_id={self.role_id})>"
