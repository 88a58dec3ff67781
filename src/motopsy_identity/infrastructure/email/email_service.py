"""SMTP-backed Notifier."""

import asyncio
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from urllib.parse import urlencode

from motopsy_config.settings import Settings
from motopsy_identity.application.ports import Notifier
from motopsy_identity.infrastructure.email import templates

logger = logging.getLogger(__name__)


class EmailNotifier(Notifier):
    """Sends account e-mails over SMTP.

    ``smtplib`` is blocking, so delivery runs in a worker thread. Every
    send reports success as a boolean; failures are logged, never raised.
    """

    CONFIRM_EMAIL_PATH = "/#/account/confirm-email"
    RESET_PASSWORD_PATH = "/#/account/reset-password"

    def __init__(self, settings: Settings):
        self._settings = settings

    def confirmation_link(self, user_id: int, token: str) -> str:
        return self._build_link(self.CONFIRM_EMAIL_PATH, user_id, token)

    def reset_link(self, user_id: int, token: str) -> str:
        return self._build_link(self.RESET_PASSWORD_PATH, user_id, token)

    async def send_email_confirmation(self, email: str, user_id: int, token: str) -> bool:
        link = self.confirmation_link(user_id, token)
        message = self._create_message(
            to_email=email,
            subject=templates.CONFIRM_EMAIL_SUBJECT,
            text_body=templates.CONFIRM_EMAIL_TEXT.format(confirm_link=link),
            html_body=templates.CONFIRM_EMAIL_HTML.format(confirm_link=link),
        )
        return await self._deliver(email, message)

    async def send_password_reset(self, email: str, user_id: int, token: str) -> bool:
        link = self.reset_link(user_id, token)
        valid_hours = self._settings.email_token_expire_hours
        message = self._create_message(
            to_email=email,
            subject=templates.PASSWORD_RESET_SUBJECT,
            text_body=templates.PASSWORD_RESET_TEXT.format(
                reset_link=link,
                valid_hours=valid_hours,
            ),
            html_body=templates.PASSWORD_RESET_HTML.format(
                reset_link=link,
                valid_hours=valid_hours,
            ),
        )
        return await self._deliver(email, message)

    async def send_password_reset_success(self, email: str, display_name: str) -> bool:
        message = self._create_message(
            to_email=email,
            subject=templates.PASSWORD_RESET_SUCCESS_SUBJECT,
            text_body=templates.PASSWORD_RESET_SUCCESS_TEXT.format(
                display_name=display_name,
            ),
        )
        return await self._deliver(email, message)

    async def send_contact_us(  # noqa: PLR0913
        self,
        name: str,
        email: str,
        phone_number: str | None,
        registration_number: str | None,
        message: str,
    ) -> bool:
        recipient = (
            self._settings.contact_recipient_email or self._settings.smtp_from_email
        )
        if not recipient:
            logger.error("No recipient configured for contact form messages")
            return False

        mime = self._create_message(
            to_email=recipient,
            subject=templates.CONTACT_US_SUBJECT.format(name=name),
            text_body=templates.CONTACT_US_TEXT.format(
                name=name,
                email=email,
                phone_number=phone_number or "-",
                registration_number=registration_number or "-",
                message=message,
            ),
        )
        mime["Reply-To"] = email
        return await self._deliver(recipient, mime)

    def _build_link(self, path: str, user_id: int, token: str) -> str:
        query = urlencode({"userId": user_id, "code": token})
        return f"{self._settings.frontend_base_url}{path}?{query}"

    def _create_message(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self._settings.smtp_from_name} <{self._settings.smtp_from_email}>"
        msg["To"] = to_email

        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))

        return msg

    async def _deliver(self, to_email: str, message: MIMEMultipart) -> bool:
        if not self._settings.smtp_enabled:
            logger.warning(
                "SMTP disabled, email '%s' not sent to %s",
                message["Subject"],
                to_email,
            )
            return False

        if not self._settings.smtp_host:
            logger.error("SMTP host not configured")
            return False

        try:
            await asyncio.to_thread(self._send_email, message)
        except Exception as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            return False

        logger.info("Email sent to %s", to_email)
        return True

    def _send_email(self, message: MIMEMultipart) -> None:
        smtp_password = (
            self._settings.smtp_password.get_secret_value()
            if self._settings.smtp_password
            else ""
        )

        if self._settings.smtp_use_tls and not self._settings.smtp_starttls:
            # Implicit TLS (port 465)
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(
                self._settings.smtp_host,
                self._settings.smtp_port,
                context=context,
            ) as server:
                if self._settings.smtp_user:
                    server.login(self._settings.smtp_user, smtp_password)
                server.send_message(message)
        else:
            # STARTTLS (port 587) or plain
            with smtplib.SMTP(
                self._settings.smtp_host,
                self._settings.smtp_port,
            ) as server:
                if self._settings.smtp_starttls:
                    context = ssl.create_default_context()
                    server.starttls(context=context)
                if self._settings.smtp_user:
                    server.login(self._settings.smtp_user, smtp_password)
                server.send_message(message)
