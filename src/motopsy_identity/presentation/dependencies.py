"""Service wiring from settings.

The token and password services are pure and built once per settings
object. Store-backed services are built per session, one session per
unit of work.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from motopsy_identity.application.services import (
    AccountService,
    NotificationDispatcher,
    RoleService,
)
from motopsy_identity.infrastructure.email import EmailNotifier
from motopsy_identity.infrastructure.persistence.sqlalchemy import (
    CredentialStoreSQLAlchemy,
)
from motopsy_identity.services import (
    LockoutPolicy,
    PasswordHashingService,
    PurposeTokenService,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from motopsy_config import Settings
    from motopsy_identity.application.ports import Notifier


def build_password_service(settings: Settings) -> PasswordHashingService:
    return PasswordHashingService(rounds=settings.bcrypt_rounds)


def build_lockout_policy(settings: Settings) -> LockoutPolicy:
    return LockoutPolicy(
        max_failed_attempts=settings.lockout_max_failed_attempts,
        lockout_duration=timedelta(hours=settings.lockout_duration_hours),
    )


def build_account_service(
    settings: Settings,
    session: AsyncSession,
    notifier: Notifier | None = None,
    dispatcher: NotificationDispatcher | None = None,
) -> AccountService:
    """
    Build an AccountService bound to one database session.

    Parameters
    ----------
    settings
        Application settings
    session
        Session used as the unit of work
    notifier
        Outbound notifier; defaults to the SMTP notifier
    dispatcher
        Shared dispatcher so pending notifications can be drained at
        shutdown; a private one is created when omitted

    Returns
    -------
    Configured AccountService
    """
    return AccountService(
        credential_store=CredentialStoreSQLAlchemy(session),
        password_service=build_password_service(settings),
        token_service=PurposeTokenService.from_settings(settings),
        lockout_policy=build_lockout_policy(settings),
        notifier=notifier or EmailNotifier(settings),
        dispatcher=dispatcher,
    )


def build_role_service(settings: Settings, session: AsyncSession) -> RoleService:
    return RoleService(
        credential_store=CredentialStoreSQLAlchemy(session),
        password_service=build_password_service(settings),
        admin_password_min_length=settings.admin_password_min_length,
    )
