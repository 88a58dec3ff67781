from motopsy_identity.infrastructure.persistence.sqlalchemy.repositories.credential_store import (
    CredentialStoreSQLAlchemy,
)

__all__ = ["CredentialStoreSQLAlchemy"]
