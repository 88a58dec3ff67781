"""Outbound notification port."""

from abc import ABC, abstractmethod


class Notifier(ABC):
    """
    Sends account-related messages.

    Every method reports delivery as a boolean. Implementations must not
    raise past this boundary; transport errors are logged and reported
    as ``False``.
    """

    @abstractmethod
    async def send_email_confirmation(self, email: str, user_id: int, token: str) -> bool:
        """Send the link that confirms a newly registered address."""

    @abstractmethod
    async def send_password_reset(self, email: str, user_id: int, token: str) -> bool:
        """Send the link that lets a user choose a new password."""

    @abstractmethod
    async def send_password_reset_success(self, email: str, display_name: str) -> bool:
        """Tell a user their password was changed."""

    @abstractmethod
    async def send_contact_us(  # noqa: PLR0913
        self,
        name: str,
        email: str,
        phone_number: str | None,
        registration_number: str | None,
        message: str,
    ) -> bool:
        """Relay a contact-form submission to the operators."""
