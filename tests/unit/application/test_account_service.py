"""Unit tests for AccountService."""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from motopsy_identity import (
    AccountService,
    CredentialStore,
    LockoutPolicy,
    PasswordHashingService,
    PurposeTokenService,
    TokenPurpose,
    User,
    UserContext,
)
from motopsy_identity.application.services.account_service import (
    DEFAULT_MAGIC_LOGIN_REDIRECT,
)
from motopsy_identity.exceptions import DuplicateEmailError, ErrorCode
from tests.shared.fakes import (
    TEST_AUDIENCE,
    TEST_ISSUER,
    TEST_SECRET,
    FakeClock,
    RecordingNotifier,
)

TEST_EMAIL = "driver@example.com"
TEST_PASSWORD = "Abc12345"
TEST_HASH = "$2b$04$stored-hash"


async def _run_now(fn):
    return await fn()


def _stored_user(
    user_id: int = 1,
    email_confirmed: bool = True,
    **fields,
) -> User:
    return User.reconstitute(
        id=user_id,
        email=TEST_EMAIL,
        password_hash=TEST_HASH,
        email_confirmed=email_confirmed,
        **fields,
    )


class _AccountServiceTest:
    """Shared fixture setup for AccountService tests."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock()
        self.store = AsyncMock(spec=CredentialStore)
        self.store.run_in_transaction.side_effect = _run_now
        self.password_service = Mock(spec=PasswordHashingService)
        self.password_service.hash.return_value = "$2b$04$new-hash"
        self.token_service = PurposeTokenService(
            secret_key=TEST_SECRET,
            issuer=TEST_ISSUER,
            audience=TEST_AUDIENCE,
            clock=self.clock,
        )
        self.notifier = RecordingNotifier()

        self.service = AccountService(
            credential_store=self.store,
            password_service=self.password_service,
            token_service=self.token_service,
            lockout_policy=LockoutPolicy(),
            notifier=self.notifier,
            clock=self.clock,
        )


class TestRegister(_AccountServiceTest):
    """Tests for register."""

    @pytest.mark.asyncio
    async def test_register_success(self):
        """Creates an unconfirmed user and sends a confirmation token."""
        self.store.find_user_by_normalized_email.return_value = None

        async def _create(user):
            user.bind_id(11)
            return user

        self.store.create_user.side_effect = _create

        result = await self.service.register(
            TEST_EMAIL,
            TEST_PASSWORD,
            first_name="Ana",
            last_name="Pop",
        )
        await self.service.dispatcher.drain()

        assert result.is_success
        assert result.value.id == 11
        assert result.value.name == "Ana Pop"
        assert result.value.email_address == TEST_EMAIL
        self.store.find_user_by_normalized_email.assert_called_once_with(
            "DRIVER@EXAMPLE.COM",
        )
        created = self.store.create_user.call_args[0][0]
        assert created.email_confirmed is False
        assert created.password_hash == "$2b$04$new-hash"

        [message] = self.notifier.of_kind("confirmation")
        assert message.payload["user_id"] == 11
        claims = self.token_service.verify(
            message.payload["token"],
            TokenPurpose.EMAIL_CONFIRMATION,
        )
        assert claims.subject == "11"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raises", [True, False])
    async def test_register_survives_failed_confirmation_email(self, raises):
        """A notifier that raises or reports non-delivery leaves the user created."""
        self.store.find_user_by_normalized_email.return_value = None

        async def _create(user):
            user.bind_id(12)
            return user

        self.store.create_user.side_effect = _create
        if raises:
            self.notifier.send_email_confirmation = AsyncMock(
                side_effect=RuntimeError("smtp down"),
            )
        else:
            self.notifier.delivered = False

        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)
        await self.service.dispatcher.drain()

        assert result.is_success
        assert result.value.id == 12
        self.store.create_user.assert_awaited_once()
        self.store.run_in_transaction.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self):
        self.store.find_user_by_normalized_email.return_value = _stored_user()

        result = await self.service.register("DRIVER@example.com", TEST_PASSWORD)

        assert result.is_failure
        assert result.code == ErrorCode.DUPLICATE_EMAIL
        assert result.error == "User with this email already exists"
        self.store.create_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_register_duplicate_detected_by_store(self):
        """A concurrent insert that wins the race still reports a duplicate."""
        self.store.find_user_by_normalized_email.return_value = None
        self.store.create_user.side_effect = DuplicateEmailError(TEST_EMAIL)

        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)

        assert result.code == ErrorCode.DUPLICATE_EMAIL
        assert self.notifier.sent == []

    @pytest.mark.asyncio
    async def test_register_invalid_email(self):
        result = await self.service.register("not-an-email", TEST_PASSWORD)

        assert result.code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_register_missing_password(self):
        result = await self.service.register(TEST_EMAIL, "")

        assert result.code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_register_storage_fault_is_generic_failure(self):
        self.store.find_user_by_normalized_email.side_effect = RuntimeError("db down")

        result = await self.service.register(TEST_EMAIL, TEST_PASSWORD)

        assert result.is_failure
        assert result.code == ErrorCode.UNEXPECTED
        assert "db down" not in result.error


class TestConfirmEmail(_AccountServiceTest):
    """Tests for confirm_email."""

    @pytest.mark.asyncio
    async def test_confirm_email_success(self):
        user = _stored_user(user_id=5, email_confirmed=False)
        self.store.find_user_by_id.return_value = user
        code = self.token_service.issue_email_confirmation_token(5, TEST_EMAIL).token

        result = await self.service.confirm_email("5", code)

        assert result.is_success
        assert result.value == "Email confirmed successfully"
        assert user.email_confirmed is True
        self.store.save_user.assert_called_once_with(user)

    @pytest.mark.asyncio
    async def test_confirm_email_already_confirmed(self):
        self.store.find_user_by_id.return_value = _stored_user(user_id=5)
        code = self.token_service.issue_email_confirmation_token(5, TEST_EMAIL).token

        result = await self.service.confirm_email(5, code)

        assert result.value == "Email already confirmed"
        self.store.save_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_confirm_email_token_for_other_user(self):
        self.store.find_user_by_id.return_value = _stored_user(
            user_id=5,
            email_confirmed=False,
        )
        code = self.token_service.issue_email_confirmation_token(6, TEST_EMAIL).token

        result = await self.service.confirm_email(5, code)

        assert result.code == ErrorCode.INVALID_TOKEN

    @pytest.mark.asyncio
    async def test_confirm_email_reset_token_rejected(self):
        self.store.find_user_by_id.return_value = _stored_user(
            user_id=5,
            email_confirmed=False,
        )
        code = self.token_service.issue_password_reset_token(TEST_EMAIL).token

        result = await self.service.confirm_email(5, code)

        assert result.code == ErrorCode.PURPOSE_MISMATCH

    @pytest.mark.asyncio
    async def test_confirm_email_expired(self):
        self.store.find_user_by_id.return_value = _stored_user(
            user_id=5,
            email_confirmed=False,
        )
        code = self.token_service.issue_email_confirmation_token(5, TEST_EMAIL).token
        self.clock.advance(hours=7)

        result = await self.service.confirm_email(5, code)

        assert result.code == ErrorCode.TOKEN_EXPIRED

    @pytest.mark.asyncio
    async def test_confirm_email_unknown_user(self):
        self.store.find_user_by_id.return_value = None

        result = await self.service.confirm_email(99, "code")

        assert result.code == ErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", ["abc", "0", "-3"])
    async def test_confirm_email_bad_user_id(self, user_id):
        result = await self.service.confirm_email(user_id, "code")

        assert result.code == ErrorCode.VALIDATION
        self.store.find_user_by_id.assert_not_called()


class TestLogin(_AccountServiceTest):
    """Tests for login and lockout."""

    @pytest.mark.asyncio
    async def test_login_success_resets_counter(self):
        user = _stored_user(user_id=3, access_failed_count=4, is_admin=True)
        self.store.find_user_by_normalized_email.return_value = user
        self.password_service.verify.return_value = True

        result = await self.service.login("Driver@Example.com", TEST_PASSWORD)

        assert result.is_success
        assert user.access_failed_count == 0
        self.store.save_user.assert_called_once_with(user)
        assert result.value.valid_to - result.value.valid_from == timedelta(hours=24)

        context = (await self.service.verify_session(result.value.access_token)).value
        assert context == UserContext(user_id=3, email=TEST_EMAIL, is_admin=True)

    @pytest.mark.asyncio
    async def test_login_unknown_email(self):
        self.store.find_user_by_normalized_email.return_value = None

        result = await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        assert result.code == ErrorCode.INVALID_CREDENTIALS
        assert result.error == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_login_wrong_password_counts_failure(self):
        user = _stored_user(access_failed_count=2)
        self.store.find_user_by_normalized_email.return_value = user
        self.password_service.verify.return_value = False

        result = await self.service.login(TEST_EMAIL, "wrong")

        assert result.code == ErrorCode.INVALID_CREDENTIALS
        assert user.access_failed_count == 3
        assert user.lockout_end is None
        self.store.save_user.assert_called_once_with(user)

    @pytest.mark.asyncio
    async def test_tenth_failure_locks_account(self):
        user = _stored_user(access_failed_count=9)
        self.store.find_user_by_normalized_email.return_value = user
        self.password_service.verify.return_value = False

        result = await self.service.login(TEST_EMAIL, "wrong")

        assert result.code == ErrorCode.INVALID_CREDENTIALS
        assert user.access_failed_count == 10
        assert user.lockout_end == self.clock.now + timedelta(hours=24)

    @pytest.mark.asyncio
    async def test_locked_account_rejects_correct_password(self):
        user = _stored_user(
            access_failed_count=10,
            lockout_end=self.clock.now + timedelta(hours=1),
        )
        self.store.find_user_by_normalized_email.return_value = user
        self.password_service.verify.return_value = True

        result = await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        assert result.code == ErrorCode.ACCOUNT_LOCKED
        self.password_service.verify.assert_not_called()
        self.store.save_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_lockout_disabled_user_is_never_locked(self):
        user = _stored_user(
            lockout_enabled=False,
            access_failed_count=10,
            lockout_end=self.clock.now + timedelta(hours=1),
        )
        self.store.find_user_by_normalized_email.return_value = user
        self.password_service.verify.return_value = True

        result = await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        assert result.is_success

    @pytest.mark.asyncio
    async def test_unconfirmed_email_rejected_after_password_check(self):
        user = _stored_user(email_confirmed=False, access_failed_count=1)
        self.store.find_user_by_normalized_email.return_value = user
        self.password_service.verify.return_value = True

        result = await self.service.login(TEST_EMAIL, TEST_PASSWORD)

        assert result.code == ErrorCode.EMAIL_NOT_CONFIRMED
        assert user.access_failed_count == 1


class TestForgotPassword(_AccountServiceTest):
    """Tests for forgot_password."""

    @pytest.mark.asyncio
    async def test_confirmed_user_gets_reset_token(self):
        self.store.find_user_by_normalized_email.return_value = _stored_user(user_id=8)

        result = await self.service.forgot_password(TEST_EMAIL)
        await self.service.dispatcher.drain()

        assert result.is_success
        [message] = self.notifier.of_kind("reset")
        assert message.payload["user_id"] == 8
        claims = self.token_service.verify(
            message.payload["token"],
            TokenPurpose.PASSWORD_RESET,
        )
        assert claims.subject == TEST_EMAIL

    @pytest.mark.asyncio
    async def test_unknown_email_reports_success(self):
        self.store.find_user_by_normalized_email.return_value = None

        result = await self.service.forgot_password("nobody@example.com")
        await self.service.dispatcher.drain()

        assert result.is_success
        assert self.notifier.sent == []

    @pytest.mark.asyncio
    async def test_unconfirmed_user_reports_success_without_message(self):
        self.store.find_user_by_normalized_email.return_value = _stored_user(
            email_confirmed=False,
        )

        result = await self.service.forgot_password(TEST_EMAIL)
        await self.service.dispatcher.drain()

        assert result.is_success
        assert self.notifier.sent == []

    @pytest.mark.asyncio
    async def test_storage_fault_still_reports_success(self):
        self.store.find_user_by_normalized_email.side_effect = RuntimeError("db down")

        result = await self.service.forgot_password(TEST_EMAIL)

        assert result.is_success

    @pytest.mark.asyncio
    async def test_notifier_failure_does_not_change_result(self):
        self.store.find_user_by_normalized_email.return_value = _stored_user()
        self.notifier.delivered = False

        result = await self.service.forgot_password(TEST_EMAIL)
        await self.service.dispatcher.drain()

        assert result.is_success


class TestResetPassword(_AccountServiceTest):
    """Tests for reset_password."""

    @pytest.mark.asyncio
    async def test_reset_success(self):
        user = _stored_user(user_id=4, first_name="Ana")
        stamp = user.security_stamp
        self.store.find_user_by_id.return_value = user
        code = self.token_service.issue_password_reset_token(TEST_EMAIL).token

        result = await self.service.reset_password(4, "NewPass1", "NewPass1", code)
        await self.service.dispatcher.drain()

        assert result.value == "Password updated successfully"
        assert user.password_hash == "$2b$04$new-hash"
        assert user.security_stamp != stamp
        [message] = self.notifier.of_kind("reset_success")
        assert message.payload["display_name"] == "Ana"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raises", [True, False])
    async def test_reset_survives_failed_success_email(self, raises):
        user = _stored_user(user_id=4)
        self.store.find_user_by_id.return_value = user
        code = self.token_service.issue_password_reset_token(TEST_EMAIL).token
        if raises:
            self.notifier.send_password_reset_success = AsyncMock(
                side_effect=RuntimeError("smtp down"),
            )
        else:
            self.notifier.delivered = False

        result = await self.service.reset_password(4, "NewPass1", "NewPass1", code)
        await self.service.dispatcher.drain()

        assert result.is_success
        assert user.password_hash == "$2b$04$new-hash"
        self.store.save_user.assert_awaited_once_with(user)

    @pytest.mark.asyncio
    async def test_reset_mismatch_checked_first(self):
        result = await self.service.reset_password(4, "Abc12345", "Abc99999", "code")

        assert result.code == ErrorCode.PASSWORD_MISMATCH
        assert result.error == "The password and confirmation password do not match"
        self.store.find_user_by_id.assert_not_called()
        self.password_service.hash.assert_not_called()

    @pytest.mark.asyncio
    async def test_reset_token_for_other_email(self):
        user = _stored_user(user_id=4)
        self.store.find_user_by_id.return_value = user
        code = self.token_service.issue_password_reset_token("other@example.com").token

        result = await self.service.reset_password(4, "NewPass1", "NewPass1", code)

        assert result.code == ErrorCode.INVALID_TOKEN
        assert user.password_hash == TEST_HASH

    @pytest.mark.asyncio
    async def test_reset_token_email_compared_case_insensitively(self):
        self.store.find_user_by_id.return_value = _stored_user(user_id=4)
        code = self.token_service.issue_password_reset_token("DRIVER@example.COM").token

        result = await self.service.reset_password(4, "NewPass1", "NewPass1", code)

        assert result.is_success

    @pytest.mark.asyncio
    async def test_reset_with_session_token_rejected(self):
        user = _stored_user(user_id=4)
        self.store.find_user_by_id.return_value = user
        code = self.token_service.issue_session_token(user).token

        result = await self.service.reset_password(4, "NewPass1", "NewPass1", code)

        assert result.code == ErrorCode.PURPOSE_MISMATCH


class TestContactUs(_AccountServiceTest):
    """Tests for contact_us."""

    @pytest.mark.asyncio
    async def test_contact_us_relayed(self):
        result = await self.service.contact_us(
            "Ana",
            "ana@example.com",
            "+40 700 000 000",
            "B-123-XYZ",
            "When can I book?",
        )

        assert result.is_success
        [message] = self.notifier.of_kind("contact")
        assert message.payload["registration_number"] == "B-123-XYZ"

    @pytest.mark.asyncio
    async def test_contact_us_undelivered(self):
        self.notifier.delivered = False

        result = await self.service.contact_us("Ana", "ana@example.com", None, None, "Hi")

        assert result.code == ErrorCode.NOTIFICATION_FAILED
        assert result.error == "Failed to send message"

    @pytest.mark.asyncio
    async def test_contact_us_notifier_raises(self):
        notifier = AsyncMock()
        notifier.send_contact_us.side_effect = OSError("smtp down")
        service = AccountService(
            credential_store=self.store,
            password_service=self.password_service,
            token_service=self.token_service,
            lockout_policy=LockoutPolicy(),
            notifier=notifier,
            clock=self.clock,
        )

        result = await service.contact_us("Ana", "ana@example.com", None, None, "Hi")

        assert result.code == ErrorCode.NOTIFICATION_FAILED

    @pytest.mark.asyncio
    async def test_contact_us_requires_message(self):
        result = await self.service.contact_us("Ana", "ana@example.com", None, None, "")

        assert result.code == ErrorCode.VALIDATION
        assert self.notifier.sent == []


class TestMagicLogin(_AccountServiceTest):
    """Tests for magic-link login."""

    @pytest.mark.asyncio
    async def test_magic_link_round_trip(self):
        user = _stored_user(user_id=9)
        self.store.find_user_by_id.return_value = user

        link = (await self.service.issue_magic_login_link(9, "/inspections/1")).value
        result = await self.service.login_with_email_token(link)

        assert result.is_success
        assert result.value.redirect_path == "/inspections/1"
        context = (await self.service.verify_session(result.value.access_token)).value
        assert context.user_id == 9

    @pytest.mark.asyncio
    async def test_magic_link_default_redirect(self):
        self.store.find_user_by_id.return_value = _stored_user(user_id=9)

        link = (await self.service.issue_magic_login_link(9)).value
        result = await self.service.login_with_email_token(link)

        assert result.value.redirect_path == DEFAULT_MAGIC_LOGIN_REDIRECT

    @pytest.mark.asyncio
    async def test_magic_link_locked_user(self):
        self.store.find_user_by_id.return_value = _stored_user(
            user_id=9,
            access_failed_count=10,
            lockout_end=self.clock.now + timedelta(hours=2),
        )
        link = self.token_service.issue_magic_login_token(9).token

        result = await self.service.login_with_email_token(link)

        assert result.code == ErrorCode.ACCOUNT_LOCKED

    @pytest.mark.asyncio
    async def test_session_token_is_not_a_magic_link(self):
        user = _stored_user(user_id=9)
        self.store.find_user_by_id.return_value = user
        token = self.token_service.issue_session_token(user).token

        result = await self.service.login_with_email_token(token)

        assert result.code == ErrorCode.PURPOSE_MISMATCH


class TestVerifySession(_AccountServiceTest):
    """Tests for verify_session."""

    @pytest.mark.asyncio
    async def test_expired_session(self):
        token = self.token_service.issue_session_token(_stored_user()).token
        self.clock.advance(hours=25)

        result = await self.service.verify_session(token)

        assert result.code == ErrorCode.TOKEN_EXPIRED

    @pytest.mark.asyncio
    async def test_magic_token_is_not_a_session(self):
        token = self.token_service.issue_magic_login_token(1).token

        result = await self.service.verify_session(token)

        assert result.code == ErrorCode.PURPOSE_MISMATCH
