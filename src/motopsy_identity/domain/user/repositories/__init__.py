from motopsy_identity.domain.user.repositories.credential_store import (
    CredentialStore,
    UserWithRoles,
)

__all__ = ["CredentialStore", "UserWithRoles"]
