"""Pure identity services: hashing, tokens and lockout decisions."""

from motopsy_identity.services.lockout_policy import LockoutPolicy
from motopsy_identity.services.password_service import PasswordHashingService
from motopsy_identity.services.token_service import PurposeTokenService

__all__ = [
    "LockoutPolicy",
    "PasswordHashingService",
    "PurposeTokenService",
]
