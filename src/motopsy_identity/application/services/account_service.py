"""Account service for registration, confirmation, login and password reset."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from motopsy_identity.application.context import UserContext
from motopsy_identity.application.dtos import SessionTokenDTO, UserProfileDTO
from motopsy_identity.application.results import Result, returns_result
from motopsy_identity.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from motopsy_identity.application.validation import parse_id
from motopsy_identity.domain.shared.time import Clock, utc_now
from motopsy_identity.domain.user import (
    Email,
    User,
    UserNotFoundError,
    normalize_email,
)
from motopsy_identity.exceptions import (
    AccountLockedError,
    DuplicateEmailError,
    EmailNotConfirmedError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotificationError,
    PasswordMismatchError,
    ValidationError,
)
from motopsy_identity.schemas import TokenPurpose

if TYPE_CHECKING:
    from motopsy_identity.application.ports import Notifier
    from motopsy_identity.domain.user import CredentialStore
    from motopsy_identity.services import (
        LockoutPolicy,
        PasswordHashingService,
        PurposeTokenService,
    )

logger = logging.getLogger(__name__)

DEFAULT_MAGIC_LOGIN_REDIRECT = "/my-profile"


class AccountService:
    """
    Application service for the user credential lifecycle.

    Orchestrates password hashing, purpose-scoped tokens and the lockout
    policy against the credential store:
    - Registration and e-mail confirmation
    - Password login with lockout
    - Forgot/reset password
    - Magic-link login and session verification
    - Contact form relay

    Every public coroutine returns a ``Result``; none of them raise for
    expected failures.
    """

    def __init__(  # noqa: PLR0913
        self,
        credential_store: CredentialStore,
        password_service: PasswordHashingService,
        token_service: PurposeTokenService,
        lockout_policy: LockoutPolicy,
        notifier: Notifier,
        dispatcher: NotificationDispatcher | None = None,
        clock: Clock = utc_now,
    ):
        self._store = credential_store
        self._password_service = password_service
        self._token_service = token_service
        self._lockout_policy = lockout_policy
        self._notifier = notifier
        self._dispatcher = dispatcher or NotificationDispatcher()
        self._clock = clock

    @property
    def dispatcher(self) -> NotificationDispatcher:
        return self._dispatcher

    @returns_result("Registration failed")
    async def register(
        self,
        email: str,
        password: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone_number: str | None = None,
    ) -> UserProfileDTO:
        if not email or not password:
            msg = "Email and password are required"
            raise ValidationError(msg)

        email_obj = Email(email)
        existing = await self._store.find_user_by_normalized_email(email_obj.normalized)
        if existing is not None:
            raise DuplicateEmailError(email_obj.value)

        password_hash = self._password_service.hash(password)
        user = User.create(
            email_obj,
            password_hash,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
        )
        await self._store.run_in_transaction(lambda: self._store.create_user(user))
        logger.info("User registered: %s (id: %s)", user.email, user.id)

        issued = self._token_service.issue_email_confirmation_token(user.id, user.email)
        self._dispatcher.dispatch(
            f"email confirmation for user {user.id}",
            self._notifier.send_email_confirmation(user.email, user.id, issued.token),
        )

        return UserProfileDTO.from_user(user)

    @returns_result("Email confirmation failed")
    async def confirm_email(self, user_id: int | str, code: str) -> str:
        if not user_id or not code:
            msg = "UserId and code are required"
            raise ValidationError(msg)

        user = await self._get_user(parse_id(user_id, "userId"))

        claims = self._token_service.verify(code, TokenPurpose.EMAIL_CONFIRMATION)
        if claims.subject != str(user.id):
            msg = "Invalid confirmation code"
            raise InvalidTokenError(msg)

        if user.email_confirmed:
            return "Email already confirmed"

        user.confirm_email(self._clock())
        await self._store.run_in_transaction(lambda: self._store.save_user(user))
        logger.info("Email confirmed for user %s", user.id)
        return "Email confirmed successfully"

    @returns_result("Login failed")
    async def login(self, email: str, password: str) -> SessionTokenDTO:
        if not email or not password:
            raise InvalidCredentialsError

        user = await self._store.find_user_by_normalized_email(normalize_email(email))
        if user is None:
            raise InvalidCredentialsError

        now = self._clock()
        self._ensure_not_locked(user, now)

        if not self._password_service.verify(password, user.password_hash):
            await self._record_failed_login(user, now)
            raise InvalidCredentialsError

        if not user.email_confirmed:
            raise EmailNotConfirmedError

        user.record_successful_login(
            self._lockout_policy.register_success(user.lockout_state),
            now,
        )
        await self._store.run_in_transaction(lambda: self._store.save_user(user))

        issued = self._token_service.issue_session_token(user)
        logger.info("User logged in: %s", user.email)
        return SessionTokenDTO.from_issued(issued)

    async def forgot_password(self, email: str) -> Result[None]:
        """Start a password reset.

        Always reports success: the outcome must not reveal whether the
        address belongs to an account or whether it is confirmed.
        """
        try:
            await self._send_password_reset(email)
        except Exception:
            logger.exception("Forgot password processing failed")
        return Result.success()

    @returns_result("Password reset failed")
    async def reset_password(
        self,
        user_id: int | str,
        new_password: str,
        confirm_password: str,
        code: str,
    ) -> str:
        if new_password != confirm_password:
            raise PasswordMismatchError

        if not user_id or not code or not new_password:
            msg = "UserId, new password and code are required"
            raise ValidationError(msg)

        user = await self._get_user(parse_id(user_id, "userId"))

        claims = self._token_service.verify(code, TokenPurpose.PASSWORD_RESET)
        if normalize_email(claims.subject) != user.normalized_email:
            msg = "Invalid reset code"
            raise InvalidTokenError(msg)

        user.change_password(self._password_service.hash(new_password), self._clock())
        await self._store.run_in_transaction(lambda: self._store.save_user(user))
        logger.info("Password reset for user %s", user.id)

        self._dispatcher.dispatch(
            f"password reset confirmation for user {user.id}",
            self._notifier.send_password_reset_success(user.email, user.display_name),
        )
        return "Password updated successfully"

    @returns_result("Failed to send message")
    async def contact_us(
        self,
        name: str,
        email: str,
        phone_number: str | None,
        registration_number: str | None,
        message: str,
    ) -> None:
        if not name or not email or not message:
            msg = "Name, email and message are required"
            raise ValidationError(msg)

        try:
            delivered = await self._notifier.send_contact_us(
                name,
                email,
                phone_number,
                registration_number,
                message,
            )
        except Exception as e:
            logger.exception("Contact form relay raised")
            raise NotificationError from e

        if not delivered:
            raise NotificationError
        logger.info("Contact form message relayed from %s", email)

    @returns_result("Failed to create login link")
    async def issue_magic_login_link(
        self,
        user_id: int | str,
        redirect_path: str | None = None,
    ) -> str:
        user = await self._get_user(parse_id(user_id, "userId"))
        issued = self._token_service.issue_magic_login_token(user.id, redirect_path)
        logger.info("Magic login link issued for user %s", user.id)
        return issued.token

    @returns_result("Login failed")
    async def login_with_email_token(self, token: str) -> SessionTokenDTO:
        if not token:
            msg = "Token is required"
            raise ValidationError(msg)

        claims = self._token_service.verify(token, TokenPurpose.MAGIC_LOGIN)
        try:
            user_id = int(claims.subject)
        except ValueError as e:
            msg = "Invalid login link"
            raise InvalidTokenError(msg) from e

        user = await self._get_user(user_id)
        self._ensure_not_locked(user, self._clock())

        issued = self._token_service.issue_session_token(user)
        logger.info("User logged in via email link: %s", user.email)
        return SessionTokenDTO.from_issued(
            issued,
            redirect_path=claims.get("redirectPath") or DEFAULT_MAGIC_LOGIN_REDIRECT,
        )

    @returns_result("Session verification failed")
    async def verify_session(self, token: str) -> UserContext:
        claims = self._token_service.verify(token, TokenPurpose.SESSION)
        try:
            return UserContext.from_claims(claims)
        except ValueError as e:
            msg = "Invalid token: malformed subject"
            raise InvalidTokenError(msg) from e

    async def _get_user(self, user_id: int) -> User:
        user = await self._store.find_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def _ensure_not_locked(self, user: User, now: datetime) -> None:
        if self._lockout_policy.is_locked(user.lockout_enabled, user.lockout_state, now):
            locked_until = user.lockout_end.isoformat() if user.lockout_end else None
            logger.warning("Login rejected for locked account: %s", user.email)
            raise AccountLockedError(locked_until=locked_until)

    async def _record_failed_login(self, user: User, now: datetime) -> None:
        # Read-modify-write on the user row: concurrent failures may
        # under-count (last writer wins).
        state = self._lockout_policy.register_failure(user.lockout_state, now)
        user.record_failed_login(state)
        await self._store.run_in_transaction(lambda: self._store.save_user(user))

        if state.access_failed_count >= self._lockout_policy.max_failed_attempts:
            logger.warning(
                "Account locked for %s due to %d failed attempts",
                user.email,
                state.access_failed_count,
            )

    async def _send_password_reset(self, email: str) -> None:
        if not email:
            return

        user = await self._store.find_user_by_normalized_email(normalize_email(email))
        if user is None:
            logger.info("Forgot password requested for unknown email")
            return

        if not user.email_confirmed:
            logger.warning("Forgot password requested for unconfirmed user %s", user.id)
            return

        issued = self._token_service.issue_password_reset_token(user.email)
        self._dispatcher.dispatch(
            f"password reset for user {user.id}",
            self._notifier.send_password_reset(user.email, user.id, issued.token),
        )
