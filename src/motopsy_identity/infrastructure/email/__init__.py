from motopsy_identity.infrastructure.email.email_service import EmailNotifier

__all__ = ["EmailNotifier"]
