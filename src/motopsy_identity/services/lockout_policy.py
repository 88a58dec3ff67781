"""Account lockout decisions.

Pure functions over a user's ``LockoutState``. The policy never touches
storage or passwords; the caller decides what to persist.
"""

from datetime import datetime, timedelta

from motopsy_identity.domain.user.value_objects import LockoutState


class LockoutPolicy:
    """Lock an account for a fixed window after repeated failed logins.

    An account is locked while ``lockout_end`` lies in the future. Once
    the window passes the account is usable again without any explicit
    unlock step; the counter is only cleared by a successful login.
    """

    DEFAULT_MAX_FAILED_ATTEMPTS = 10
    DEFAULT_LOCKOUT_DURATION = timedelta(hours=24)

    def __init__(
        self,
        max_failed_attempts: int = DEFAULT_MAX_FAILED_ATTEMPTS,
        lockout_duration: timedelta = DEFAULT_LOCKOUT_DURATION,
    ):
        if max_failed_attempts < 1:
            msg = "max_failed_attempts must be at least 1"
            raise ValueError(msg)
        self._max_failed_attempts = max_failed_attempts
        self._lockout_duration = lockout_duration

    @property
    def max_failed_attempts(self) -> int:
        return self._max_failed_attempts

    @property
    def lockout_duration(self) -> timedelta:
        return self._lockout_duration

    def is_locked(
        self,
        lockout_enabled: bool,
        state: LockoutState,
        now: datetime,
    ) -> bool:
        if not lockout_enabled or state.lockout_end is None:
            return False
        return state.lockout_end > now

    def register_failure(self, state: LockoutState, now: datetime) -> LockoutState:
        count = state.access_failed_count + 1
        lockout_end = state.lockout_end
        if count >= self._max_failed_attempts:
            lockout_end = now + self._lockout_duration
        return LockoutState(access_failed_count=count, lockout_end=lockout_end)

    def register_success(self, state: LockoutState) -> LockoutState:  # noqa: ARG002
        return LockoutState(access_failed_count=0, lockout_end=None)
