"""Integration tests for AccountService against the SQLAlchemy store."""

from datetime import timedelta

import pytest

from motopsy_identity.exceptions import ErrorCode

TEST_EMAIL = "driver@example.com"
TEST_PASSWORD = "Abc12345"


async def _register_and_confirm(account_service, notifier, email=TEST_EMAIL):
    registered = await account_service.register(email, TEST_PASSWORD, first_name="Ana")
    await account_service.dispatcher.drain()
    message = notifier.of_kind("confirmation")[-1]
    confirmed = await account_service.confirm_email(
        message.payload["user_id"],
        message.payload["token"],
    )
    assert confirmed.is_success, confirmed.error
    return registered.value


@pytest.mark.integration
class TestRegistrationFlow:
    """Registration, confirmation and first login."""

    @pytest.mark.asyncio
    async def test_register_confirm_login(self, account_service, notifier, store):
        profile = await _register_and_confirm(account_service, notifier)

        user = await store.find_user_by_id(profile.id)
        assert user.email_confirmed is True

        login = await account_service.login("DRIVER@example.com", TEST_PASSWORD)
        assert login.is_success, login.error

        context = await account_service.verify_session(login.value.access_token)
        assert context.value.user_id == profile.id
        assert context.value.email == TEST_EMAIL
        assert context.value.is_admin is False

    @pytest.mark.asyncio
    async def test_login_before_confirmation(self, account_service):
        await account_service.register(TEST_EMAIL, TEST_PASSWORD)

        result = await account_service.login(TEST_EMAIL, TEST_PASSWORD)

        assert result.code == ErrorCode.EMAIL_NOT_CONFIRMED

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "second_email",
        ["driver@example.com", "DRIVER@EXAMPLE.COM", "Driver@Example.Com"],
    )
    async def test_duplicate_email_in_any_case(self, account_service, second_email):
        first = await account_service.register(TEST_EMAIL, TEST_PASSWORD)
        second = await account_service.register(second_email, TEST_PASSWORD)

        assert first.is_success
        assert second.code == ErrorCode.DUPLICATE_EMAIL

    @pytest.mark.asyncio
    async def test_confirmation_is_idempotent(self, account_service, notifier):
        await _register_and_confirm(account_service, notifier)
        message = notifier.of_kind("confirmation")[-1]

        again = await account_service.confirm_email(
            message.payload["user_id"],
            message.payload["token"],
        )

        assert again.value == "Email already confirmed"


@pytest.mark.integration
class TestLockoutFlow:
    """Lockout after repeated failures, expiry and counter reset."""

    @pytest.mark.asyncio
    async def test_ten_failures_lock_the_account(
        self,
        account_service,
        notifier,
        store,
        clock,
    ):
        profile = await _register_and_confirm(account_service, notifier)

        for _ in range(10):
            failed = await account_service.login(TEST_EMAIL, "wrong-password")
            assert failed.code == ErrorCode.INVALID_CREDENTIALS

        user = await store.find_user_by_id(profile.id)
        assert user.access_failed_count == 10
        assert user.lockout_end == clock.now + timedelta(hours=24)

        locked = await account_service.login(TEST_EMAIL, TEST_PASSWORD)
        assert locked.code == ErrorCode.ACCOUNT_LOCKED

        clock.advance(hours=24, seconds=1)
        unlocked = await account_service.login(TEST_EMAIL, TEST_PASSWORD)
        assert unlocked.is_success, unlocked.error

        user = await store.find_user_by_id(profile.id)
        assert user.access_failed_count == 0
        assert user.lockout_end is None

    @pytest.mark.asyncio
    async def test_success_resets_partial_count(self, account_service, notifier, store):
        profile = await _register_and_confirm(account_service, notifier)
        for _ in range(3):
            await account_service.login(TEST_EMAIL, "wrong-password")

        result = await account_service.login(TEST_EMAIL, TEST_PASSWORD)

        assert result.is_success
        assert (await store.find_user_by_id(profile.id)).access_failed_count == 0


@pytest.mark.integration
class TestPasswordResetFlow:
    """Forgot password and reset."""

    @pytest.mark.asyncio
    async def test_forgot_and_reset(self, account_service, notifier, store):
        profile = await _register_and_confirm(account_service, notifier)

        forgot = await account_service.forgot_password("driver@EXAMPLE.com")
        await account_service.dispatcher.drain()
        assert forgot.is_success
        [reset] = notifier.of_kind("reset")

        result = await account_service.reset_password(
            reset.payload["user_id"],
            "NewPass99",
            "NewPass99",
            reset.payload["token"],
        )
        await account_service.dispatcher.drain()

        assert result.is_success, result.error
        assert notifier.of_kind("reset_success")[0].to == TEST_EMAIL
        assert (await account_service.login(TEST_EMAIL, TEST_PASSWORD)).is_failure
        assert (await account_service.login(TEST_EMAIL, "NewPass99")).is_success
        assert (await store.find_user_by_id(profile.id)) is not None

    @pytest.mark.asyncio
    async def test_mismatched_confirmation_leaves_hash(
        self,
        account_service,
        notifier,
        store,
        token_service,
    ):
        profile = await _register_and_confirm(account_service, notifier)
        before = (await store.find_user_by_id(profile.id)).password_hash
        code = token_service.issue_password_reset_token(TEST_EMAIL).token

        result = await account_service.reset_password(
            profile.id,
            "Abc12345",
            "Abc99999",
            code,
        )

        assert result.code == ErrorCode.PASSWORD_MISMATCH
        assert (await store.find_user_by_id(profile.id)).password_hash == before

    @pytest.mark.asyncio
    async def test_forgot_password_does_not_reveal_accounts(
        self,
        account_service,
        notifier,
    ):
        await _register_and_confirm(account_service, notifier)

        known = await account_service.forgot_password(TEST_EMAIL)
        unknown = await account_service.forgot_password("nobody@example.com")
        await account_service.dispatcher.drain()

        assert known == unknown
        assert len(notifier.of_kind("reset")) == 1

    @pytest.mark.asyncio
    async def test_unconfirmed_user_gets_no_reset(self, account_service, notifier):
        await account_service.register(TEST_EMAIL, TEST_PASSWORD)

        result = await account_service.forgot_password(TEST_EMAIL)
        await account_service.dispatcher.drain()

        assert result.is_success
        assert notifier.of_kind("reset") == []


@pytest.mark.integration
class TestMagicLoginFlow:
    """Magic-link login against stored users."""

    @pytest.mark.asyncio
    async def test_magic_link_login(self, account_service, notifier):
        profile = await _register_and_confirm(account_service, notifier)

        link = await account_service.issue_magic_login_link(profile.id, "/reports/5")
        result = await account_service.login_with_email_token(link.value)

        assert result.is_success
        assert result.value.redirect_path == "/reports/5"

    @pytest.mark.asyncio
    async def test_magic_link_for_unknown_user(self, account_service):
        result = await account_service.issue_magic_login_link(404)

        assert result.code == ErrorCode.NOT_FOUND
