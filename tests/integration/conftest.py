"""
Pytest configuration for integration tests.

Integration tests run the services against the SQLAlchemy store on an
in-memory SQLite database. ``StaticPool`` keeps the single connection
alive so every session sees the same database.
"""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from motopsy_identity import AccountService, RoleService
from motopsy_identity.infrastructure.persistence.sqlalchemy import (
    CredentialStoreSQLAlchemy,
    create_session_maker,
    create_tables,
    seed_default_roles,
)


@pytest_asyncio.fixture
async def async_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(async_engine):
    maker = create_session_maker(async_engine)
    async with maker() as session:
        await seed_default_roles(session)
    return maker


@pytest_asyncio.fixture
async def db_session(session_maker):
    """Provide a session for one test; uncommitted changes are discarded."""
    async with session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store(db_session) -> CredentialStoreSQLAlchemy:
    return CredentialStoreSQLAlchemy(db_session)


@pytest.fixture
def account_service(
    store,
    password_service,
    token_service,
    lockout_policy,
    notifier,
    clock,
) -> AccountService:
    return AccountService(
        credential_store=store,
        password_service=password_service,
        token_service=token_service,
        lockout_policy=lockout_policy,
        notifier=notifier,
        clock=clock,
    )


@pytest.fixture
def role_service(store, password_service, clock) -> RoleService:
    return RoleService(
        credential_store=store,
        password_service=password_service,
        clock=clock,
    )
