"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so that
the API starts without any setup; in a deployment override them via
environment variables.  Tests build their own ``Settings`` instance
and hand it to ``create_app``.
"""

import os
from dataclasses import dataclass, field


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: os.getenv("PROJECT_NAME", "Catalog API"))
    api_version: str = field(default_factory=lambda: os.getenv("API_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env_flag("DEBUG"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: str = field(default_factory=lambda: os.getenv("LOG_FILE", ""))

    secret_key: str = field(default_factory=lambda: os.getenv("SECRET_KEY", "change_me"))
    access_token_expire_minutes: int = field(
        default_factory=lambda: int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    )
    # Password of the built-in ``admin`` account.  The account carries the
    # roles ``admin`` and ``mitarbeiter``.
    admin_password: str = field(default_factory=lambda: os.getenv("ADMIN_PASSWORD", "p"))

    # Path of the SQLite database file.  Relative paths are resolved
    # against the project root by the ``db`` module.
    database_url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "catalog.db"))
    # Serve fixture data from memory instead of SQLite.
    mock_db: bool = field(default_factory=lambda: _env_flag("MOCK_DB"))
    # Drop and reload the fixture films and songs on startup.
    db_populate: bool = field(default_factory=lambda: _env_flag("DB_POPULATE"))

    # ``skip`` disables the notification mail on creation.
    mail_host: str = field(default_factory=lambda: os.getenv("MAIL_HOST", "skip"))
    mail_port: int = field(default_factory=lambda: int(os.getenv("MAIL_PORT", "25")))
    mail_from: str = field(default_factory=lambda: os.getenv("MAIL_FROM", '"Joe Doe" <Joe.Doe@acme.com>'))
    mail_to: str = field(default_factory=lambda: os.getenv("MAIL_TO", '"Foo Bar" <Foo.Bar@acme.com>'))
    mail_timeout: float = field(default_factory=lambda: float(os.getenv("MAIL_TIMEOUT", "10")))

    api_host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    api_port: int = field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
