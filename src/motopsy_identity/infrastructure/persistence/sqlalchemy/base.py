"""SQLAlchemy declarative base for motopsy_identity models.

Embedding applications that manage their own schema should include
``IdentityBase.metadata`` in their migration configuration.
"""

from sqlalchemy.orm import DeclarativeBase


class IdentityBase(DeclarativeBase):
    """Declarative base for identity tables."""
