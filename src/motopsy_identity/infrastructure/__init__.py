"""Infrastructure adapters: SQLAlchemy persistence and SMTP e-mail."""
