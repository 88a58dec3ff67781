from motopsy_identity.application.services.account_service import AccountService
from motopsy_identity.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from motopsy_identity.application.services.role_service import RoleService

__all__ = [
    "AccountService",
    "NotificationDispatcher",
    "RoleService",
]
