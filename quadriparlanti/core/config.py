# /quadriparlanti/core/config.py

"""
Environment-driven configuration for the application.

Two variables are mandatory because every backend-touching operation depends
on them: `BACKEND_URL` (the database URL of the backend store) and
`BACKEND_API_KEY` (the key used to sign session and action-link tokens).
Everything else has a sensible default for local development.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

REQUIRED_VARIABLES = ("BACKEND_URL", "BACKEND_API_KEY")


@dataclass(frozen=True)
class Settings:
    backend_url: str
    backend_api_key: str
    site_url: str = "http://localhost:8000"
    default_locale: str = "it"
    access_token_expire_minutes: int = 60 * 24
    link_expire_hours: int = 24
    session_cookie_name: str = "session"
    smtp_host: Optional[str] = None
    smtp_port: int = 465
    smtp_user: Optional[str] = None
    smtp_password: Optional[str] = None
    mail_from: str = "no-reply@quadriparlanti.local"
    log_level: str = "INFO"

    @property
    def smtp_enabled(self) -> bool:
        return bool(self.smtp_host)


@lru_cache()
def get_settings() -> Settings:
    """
    Builds the settings object once per process.

    Raises ConfigurationError naming every missing required variable, so a
    misconfigured deployment fails on the first request that needs the backend.
    """
    load_dotenv()

    missing = [name for name in REQUIRED_VARIABLES if not os.getenv(name)]
    if missing:
        raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

    return Settings(
        backend_url=os.environ["BACKEND_URL"],
        backend_api_key=os.environ["BACKEND_API_KEY"],
        site_url=os.getenv("SITE_URL", "http://localhost:8000").rstrip("/"),
        default_locale=os.getenv("DEFAULT_LOCALE", "it"),
        access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24)),
        link_expire_hours=int(os.getenv("LINK_EXPIRE_HOURS", 24)),
        smtp_host=os.getenv("SMTP_HOST") or None,
        smtp_port=int(os.getenv("SMTP_PORT", 465)),
        smtp_user=os.getenv("SMTP_USER") or None,
        smtp_password=os.getenv("SMTP_PASSWORD") or None,
        mail_from=os.getenv("MAIL_FROM", "no-reply@quadriparlanti.local"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
