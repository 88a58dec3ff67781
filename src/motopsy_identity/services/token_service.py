"""Purpose-scoped JWT token service.

Issues and verifies signed, time-bounded tokens. Nothing is stored
server-side: a token is valid exactly as long as its signature, expiry,
purpose and (for session tokens) issuer/audience check out.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any

import jwt

from motopsy_identity.domain.shared.time import Clock, utc_now
from motopsy_identity.exceptions import (
    InvalidTokenError,
    PurposeMismatchError,
    TokenExpiredError,
)
from motopsy_identity.schemas import IssuedToken, TokenClaims, TokenPurpose

if TYPE_CHECKING:
    from motopsy_config import Settings
    from motopsy_identity.domain.user import User

_RESERVED_CLAIMS = frozenset({"sub", "purpose", "iat", "exp", "nbf", "iss", "aud"})


class PurposeTokenService:
    """Service for purpose-scoped JWT creation and verification.

    Examples
    --------
    >>> service = PurposeTokenService(secret_key="s3cret", issuer="motopsy",
    ...                               audience="motopsy-clients")
    >>> issued = service.issue(TokenPurpose.PASSWORD_RESET, "user@example.com")
    >>> service.verify(issued.token, TokenPurpose.PASSWORD_RESET).subject
    'user@example.com'
    """

    ALGORITHM = "HS256"
    DEFAULT_SESSION_TTL = timedelta(hours=24)
    DEFAULT_EMAIL_TOKEN_TTL = timedelta(hours=6)
    DEFAULT_MAGIC_LOGIN_TTL = timedelta(days=7)

    def __init__(  # noqa: PLR0913
        self,
        secret_key: str,
        issuer: str,
        audience: str,
        session_ttl: timedelta = DEFAULT_SESSION_TTL,
        email_token_ttl: timedelta = DEFAULT_EMAIL_TOKEN_TTL,
        magic_login_ttl: timedelta = DEFAULT_MAGIC_LOGIN_TTL,
        clock: Clock = utc_now,
    ):
        """Initialize the token service.

        Parameters
        ----------
        secret_key
            Secret key for signing tokens. Must be kept secure.
        issuer
            ``iss`` value embedded in and required of session tokens
        audience
            ``aud`` value embedded in and required of session tokens
        session_ttl
            Lifetime of session tokens (default 24 hours)
        email_token_ttl
            Lifetime of e-mail confirmation and password reset tokens
            (default 6 hours)
        magic_login_ttl
            Lifetime of magic-login tokens (default 7 days)
        clock
            Source of the current time
        """
        if not secret_key:
            msg = "JWT secret key cannot be empty"
            raise ValueError(msg)

        self._secret_key = secret_key
        self._issuer = issuer
        self._audience = audience
        self._ttls = {
            TokenPurpose.SESSION: session_ttl,
            TokenPurpose.EMAIL_CONFIRMATION: email_token_ttl,
            TokenPurpose.PASSWORD_RESET: email_token_ttl,
            TokenPurpose.MAGIC_LOGIN: magic_login_ttl,
        }
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        clock: Clock = utc_now,
    ) -> PurposeTokenService:
        return cls(
            secret_key=settings.jwt_secret_key.get_secret_value(),
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            session_ttl=timedelta(hours=settings.jwt_session_expire_hours),
            email_token_ttl=timedelta(hours=settings.email_token_expire_hours),
            magic_login_ttl=timedelta(hours=settings.magic_login_token_expire_hours),
            clock=clock,
        )

    def issue(
        self,
        purpose: TokenPurpose,
        subject: str,
        ttl: timedelta | None = None,
        claims: dict[str, Any] | None = None,
    ) -> IssuedToken:
        """Sign a token for one purpose.

        Parameters
        ----------
        purpose
            What the token may be used for
        subject
            The ``sub`` claim (user id or e-mail)
        ttl
            Lifetime; defaults to the configured lifetime for the purpose
        claims
            Additional purpose-specific claims. Reserved registered
            claims cannot be overridden.

        Returns
        -------
        The signed token with its issue and expiry timestamps
        """
        purpose = TokenPurpose(purpose)
        extra = dict(claims or {})
        clashing = _RESERVED_CLAIMS.intersection(extra)
        if clashing:
            msg = f"Reserved claims cannot be set explicitly: {sorted(clashing)}"
            raise ValueError(msg)

        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + (ttl if ttl is not None else self._ttls[purpose])

        payload: dict[str, Any] = {
            **extra,
            "sub": str(subject),
            "purpose": purpose.value,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        if purpose == TokenPurpose.SESSION:
            payload["nbf"] = payload["iat"]
            payload["iss"] = self._issuer
            payload["aud"] = self._audience

        token = jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)
        return IssuedToken(
            token=token,
            purpose=purpose,
            issued_at=issued_at,
            expires_at=expires_at,
        )

    def issue_session_token(self, user: User) -> IssuedToken:
        return self.issue(
            TokenPurpose.SESSION,
            subject=str(user.id),
            claims={"unique_name": user.email, "isAdmin": user.is_admin},
        )

    def issue_email_confirmation_token(self, user_id: int, email: str) -> IssuedToken:
        return self.issue(
            TokenPurpose.EMAIL_CONFIRMATION,
            subject=str(user_id),
            claims={"email": email},
        )

    def issue_password_reset_token(self, email: str) -> IssuedToken:
        return self.issue(TokenPurpose.PASSWORD_RESET, subject=email)

    def issue_magic_login_token(
        self,
        user_id: int,
        redirect_path: str | None = None,
    ) -> IssuedToken:
        claims = {"redirectPath": redirect_path} if redirect_path else None
        return self.issue(TokenPurpose.MAGIC_LOGIN, subject=str(user_id), claims=claims)

    def verify(self, token: str, expected_purpose: TokenPurpose) -> TokenClaims:
        """Verify and decode a token issued for ``expected_purpose``.

        Parameters
        ----------
        token
            The JWT token string to verify
        expected_purpose
            The purpose the calling operation requires

        Returns
        -------
        TokenClaims containing the decoded data

        Raises
        ------
        InvalidTokenError
            If the signature or structure is invalid, or a session token
            carries the wrong issuer/audience
        TokenExpiredError
            If the token is past its expiry
        PurposeMismatchError
            If the token was issued for another purpose
        """
        expected_purpose = TokenPurpose(expected_purpose)
        if not token:
            msg = "Token is required"
            raise InvalidTokenError(msg)

        try:
            # Time-based claims are checked below against the injected clock
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                options={
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "verify_aud": False,
                    "verify_iss": False,
                    "require": ["sub", "purpose", "iat", "exp"],
                },
            )
            issued_at = datetime.fromtimestamp(int(payload["iat"]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(f"Invalid token: {e}") from e
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise InvalidTokenError(f"Malformed token payload: {e}") from e

        now = self._clock()
        if now > expires_at:
            raise TokenExpiredError

        actual_purpose = payload.get("purpose")
        if actual_purpose != expected_purpose.value:
            raise PurposeMismatchError(expected_purpose.value, actual_purpose)

        if expected_purpose == TokenPurpose.SESSION:
            self._check_session_binding(payload, now)

        extra = {k: v for k, v in payload.items() if k not in _RESERVED_CLAIMS}
        return TokenClaims(
            subject=str(payload["sub"]),
            purpose=expected_purpose,
            issued_at=issued_at,
            expires_at=expires_at,
            extra=extra,
        )

    def _check_session_binding(self, payload: dict[str, Any], now: datetime) -> None:
        if payload.get("iss") != self._issuer:
            msg = "Invalid token: issuer mismatch"
            raise InvalidTokenError(msg)

        audience = payload.get("aud")
        audiences = audience if isinstance(audience, list) else [audience]
        if self._audience not in audiences:
            msg = "Invalid token: audience mismatch"
            raise InvalidTokenError(msg)

        nbf = payload.get("nbf")
        if nbf is not None:
            try:
                not_before = datetime.fromtimestamp(int(nbf), tz=timezone.utc)
            except (TypeError, ValueError, OverflowError) as e:
                raise InvalidTokenError(f"Malformed token payload: {e}") from e
            if now < not_before:
                msg = "Invalid token: not yet valid"
                raise InvalidTokenError(msg)
