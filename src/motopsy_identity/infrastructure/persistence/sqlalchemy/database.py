"""Engine and session factory construction."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async database engine.

    Parameters
    ----------
    database_url
        SQLAlchemy URL with an async driver (``sqlite+aiosqlite://``,
        ``postgresql+asyncpg://``)
    echo
        Log emitted SQL

    Returns
    -------
    AsyncEngine instance
    """
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,  # Verify connections before use
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory; domain objects stay usable after commit."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
