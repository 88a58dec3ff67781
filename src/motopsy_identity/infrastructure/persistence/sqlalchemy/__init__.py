from motopsy_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from motopsy_identity.infrastructure.persistence.sqlalchemy.database import (
    create_engine,
    create_session_maker,
)
from motopsy_identity.infrastructure.persistence.sqlalchemy.init_db import (
    create_tables,
    seed_default_roles,
)
from motopsy_identity.infrastructure.persistence.sqlalchemy.repositories import (
    CredentialStoreSQLAlchemy,
)

__all__ = [
    "CredentialStoreSQLAlchemy",
    "IdentityBase",
    "create_engine",
    "create_session_maker",
    "create_tables",
    "seed_default_roles",
]
