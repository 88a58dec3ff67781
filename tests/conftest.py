"""Root pytest configuration.

Test Structure:
    tests/
    ├── unit/              # Fast, isolated tests (mocks, no database)
    │   ├── services/      # Hashing, tokens, lockout
    │   ├── domain/        # User aggregate and value objects
    │   ├── application/   # AccountService, RoleService, results
    │   ├── infrastructure/
    │   └── presentation/  # CLI
    ├── integration/       # Services against SQLAlchemy on in-memory SQLite
    └── shared/            # Fakes shared by both

Integration tests are marked with @pytest.mark.integration and run by
default; deselect them with ``-m "not integration"``.
"""

import pytest

from motopsy_config import clear_settings_cache
from motopsy_identity.services import (
    LockoutPolicy,
    PasswordHashingService,
    PurposeTokenService,
)
from tests.shared.fakes import (
    TEST_AUDIENCE,
    TEST_ISSUER,
    TEST_SECRET,
    FakeClock,
    RecordingNotifier,
)

# Lowest bcrypt work factor keeps hashing fast in tests
FAST_BCRYPT_ROUNDS = 4


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Every test sees a fresh settings object with a signing key."""
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_SECRET)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def password_service() -> PasswordHashingService:
    return PasswordHashingService(rounds=FAST_BCRYPT_ROUNDS)


@pytest.fixture
def token_service(clock) -> PurposeTokenService:
    return PurposeTokenService(
        secret_key=TEST_SECRET,
        issuer=TEST_ISSUER,
        audience=TEST_AUDIENCE,
        clock=clock,
    )


@pytest.fixture
def lockout_policy() -> LockoutPolicy:
    return LockoutPolicy()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()
