"""Explicit success/failure outcome returned by application services."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

from motopsy_identity.exceptions import ErrorCode, IdentityError

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a public service operation.

    A successful result carries ``value``; a failed one carries a
    user-presentable ``error`` message and a machine-readable ``code``.
    """

    is_success: bool
    value: T | None = None
    error: str | None = None
    code: ErrorCode | None = None

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(is_success=True, value=value)

    @classmethod
    def failure(
        cls,
        error: str,
        code: ErrorCode = ErrorCode.UNEXPECTED,
    ) -> Result[T]:
        return cls(is_success=False, error=error, code=code)

    def unwrap(self) -> T:
        """Return the value or raise when the result is a failure."""
        if not self.is_success:
            msg = f"Called unwrap() on a failed result: {self.error} ({self.code})"
            raise ValueError(msg)
        return self.value  # type: ignore[return-value]


def returns_result(
    failure_message: str,
) -> Callable[
    [Callable[..., Awaitable[T]]],
    Callable[..., Awaitable[Result[T]]],
]:
    """Turn a coroutine that raises into one that returns a ``Result``.

    ``IdentityError`` subclasses become failures with their own message
    and code. Any other exception is logged with its traceback and
    becomes a generic failure carrying ``failure_message``, so storage
    internals never leak to callers. Cancellation is not intercepted.
    """

    def decorator(
        fn: Callable[..., Awaitable[T]],
    ) -> Callable[..., Awaitable[Result[T]]]:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> Result[T]:
            try:
                value = await fn(*args, **kwargs)
            except IdentityError as e:
                logger.debug("%s: %s (%s)", fn.__qualname__, e.message, e.code.value)
                return Result.failure(e.message, e.code)
            except Exception:
                logger.exception("%s failed", fn.__qualname__)
                return Result.failure(failure_message, ErrorCode.UNEXPECTED)
            return Result.success(value)

        return wrapper

    return decorator
