"""Database initialization utilities."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

# Import models to register with IdentityBase.metadata
import motopsy_identity.infrastructure.persistence.sqlalchemy.models  # noqa: F401
from motopsy_identity.domain.role import normalize_role_name
from motopsy_identity.infrastructure.persistence.sqlalchemy.base import IdentityBase
from motopsy_identity.infrastructure.persistence.sqlalchemy.models import RoleModel

logger = logging.getLogger(__name__)

DEFAULT_ROLES: tuple[tuple[int, str], ...] = (
    (1, "Admin"),
    (2, "Operator"),
)


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all identity tables (idempotent).

    Uses SQLAlchemy's create_all() which only creates missing tables.
    Existing tables and their data are never modified or deleted.
    """
    logger.info("Ensuring all identity tables exist...")
    async with engine.begin() as conn:
        await conn.run_sync(IdentityBase.metadata.create_all)
    logger.info("Identity schema is up to date (missing tables created if needed)")


async def seed_default_roles(session: AsyncSession) -> list[str]:
    """
    Insert the default roles that are not present yet.

    Returns
    -------
    Names of the roles that were created
    """
    result = await session.execute(select(RoleModel.normalized_name))
    existing = set(result.scalars().all())

    created = []
    for role_id, name in DEFAULT_ROLES:
        normalized = normalize_role_name(name)
        if normalized in existing:
            continue
        session.add(RoleModel(id=role_id, name=name, normalized_name=normalized))
        created.append(name)

    await session.commit()
    if created:
        logger.info("Seeded roles: %s", ", ".join(created))
    return created
