from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class LockoutState:
    """Failure counter and lockout window of one account."""

    access_failed_count: int = 0
    lockout_end: datetime | None = None
