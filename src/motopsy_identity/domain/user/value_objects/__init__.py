from motopsy_identity.domain.user.value_objects.email import Email, normalize_email
from motopsy_identity.domain.user.value_objects.lockout_state import LockoutState

__all__ = ["Email", "LockoutState", "normalize_email"]
