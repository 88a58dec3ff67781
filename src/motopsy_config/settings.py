"""Application settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. MOTOPSY_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / "pyproject.toml").is_file():
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. MOTOPSY_ENV_FILE env var (full or project-relative path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("MOTOPSY_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - token signing fails without it)
    jwt_secret_key: SecretStr

    # Database
    database_url: str = "sqlite+aiosqlite:///./data/motopsy.db"

    # JWT (JWT_ prefix)
    jwt_issuer: str = "motopsy"
    jwt_audience: str = "motopsy-clients"
    jwt_session_expire_hours: int = 24

    # Purpose-scoped e-mail tokens
    email_token_expire_hours: int = 6
    magic_login_token_expire_hours: int = 168

    # Credentials
    bcrypt_rounds: int = 10
    lockout_max_failed_attempts: int = 10
    lockout_duration_hours: int = 24
    admin_password_min_length: int = 6

    # SMTP (SMTP_ prefix)
    smtp_enabled: bool = False
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: SecretStr | None = None
    smtp_from_email: str = ""
    smtp_from_name: str = "Motopsy"
    smtp_use_tls: bool = True
    smtp_starttls: bool = True

    # Where contact-form submissions are delivered (defaults to the sender)
    contact_recipient_email: str = ""

    # Frontend URL (for confirmation and password reset links)
    frontend_base_url: str = "http://localhost:3000"

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @field_validator("frontend_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator(
        "jwt_session_expire_hours",
        "email_token_expire_hours",
        "magic_login_token_expire_hours",
        "lockout_max_failed_attempts",
        "lockout_duration_hours",
    )
    @classmethod
    def _require_positive(cls, v: int) -> int:
        if v <= 0:
            msg = "must be a positive integer"
            raise ValueError(msg)
        return v


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings.

    The required field (jwt_secret_key) must be provided via environment
    variables or .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
