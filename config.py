"""
Application configuration and logging setup.

Settings are read from environment variables, with a `.env` file next to this
module loaded first. Nothing here talks to the network: the Supabase client is
only created when the Supabase offer store is actually used.

Environment variables:
- SUPABASE_URL / SUPABASE_KEY: Supabase project credentials (server-side key)
- OFFER_STORE: "supabase" (default) or "memory" for local development
- HOST_URL: public base URL used to build candidate offer links
- SESSION_SECRET / SESSION_TTL_MINUTES: HR session signing
- HR_EMAIL / HR_PASSWORD: the HR account allowed to log in
- COOKIE_SECURE: mark session cookies Secure (default: true when APP_ENV is "production")
- SMTP_HOST / SMTP_PORT / SMTP_USERNAME / SMTP_PASSWORD / SMTP_SENDER / SMTP_USE_TLS
- EMPLOYER_NAME / EMPLOYER_LOCATION: printed on the offer letter
- ALLOWED_ORIGINS: comma separated CORS origins, or "*"
- LOG_LEVEL: root log level
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SESSION_SECRET = "default_session_secret"

# Load environment variables from .env file in the project root
env_path = Path(__file__).parent / ".env"
load_dotenv(dotenv_path=env_path)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True, slots=True)
class Settings:
    """Application settings loaded from environment variables."""

    supabase_url: Optional[str]
    supabase_key: Optional[str]
    offer_store: str

    host_url: str

    session_secret: str
    session_ttl_minutes: int
    hr_email: Optional[str]
    hr_password: Optional[str]
    cookie_secure: bool

    smtp_host: Optional[str]
    smtp_port: int
    smtp_username: Optional[str]
    smtp_password: Optional[str]
    smtp_sender: Optional[str]
    smtp_use_tls: bool

    employer_name: str
    employer_location: str

    allowed_origins: str
    log_level: str

    @property
    def allowed_origin_list(self) -> list[str]:
        raw = self.allowed_origins.strip()
        if raw == "*":
            return ["*"]
        return [o.strip() for o in raw.split(",") if o.strip()]


def load_settings() -> Settings:
    """Build a Settings instance from the current environment."""

    offer_store = (os.getenv("OFFER_STORE") or "supabase").strip().lower()
    if offer_store not in {"supabase", "memory"}:
        raise RuntimeError(
            f"Unsupported OFFER_STORE {offer_store!r}. Use 'supabase' or 'memory'."
        )

    return Settings(
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_key=os.getenv("SUPABASE_KEY"),
        offer_store=offer_store,
        host_url=(os.getenv("HOST_URL") or "http://localhost:3000").rstrip("/"),
        session_secret=os.getenv("SESSION_SECRET") or DEFAULT_SESSION_SECRET,
        session_ttl_minutes=_env_int("SESSION_TTL_MINUTES", 60),
        hr_email=os.getenv("HR_EMAIL"),
        hr_password=os.getenv("HR_PASSWORD"),
        cookie_secure=_env_bool(
            "COOKIE_SECURE",
            (os.getenv("APP_ENV") or "").strip().lower() == "production",
        ),
        smtp_host=os.getenv("SMTP_HOST"),
        smtp_port=_env_int("SMTP_PORT", 587),
        smtp_username=os.getenv("SMTP_USERNAME"),
        smtp_password=os.getenv("SMTP_PASSWORD"),
        smtp_sender=os.getenv("SMTP_SENDER"),
        smtp_use_tls=_env_bool("SMTP_USE_TLS", True),
        employer_name=os.getenv("EMPLOYER_NAME") or "TYROADS",
        employer_location=os.getenv("EMPLOYER_LOCATION") or "Gwalior",
        allowed_origins=os.getenv("ALLOWED_ORIGINS") or "*",
        log_level=os.getenv("LOG_LEVEL") or "INFO",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first call."""

    settings = load_settings()
    if settings.session_secret == DEFAULT_SESSION_SECRET:
        logger.warning("SESSION_SECRET is not set; using the insecure default secret")
    return settings


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure structured logging for the application.

    Sets the root logger level (LOG_LEVEL unless `level` is given) and installs a
    single StreamHandler writing to stdout.
    """

    level_name = level or get_settings().log_level
    log_level = getattr(logging, level_name.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(log_level)

    # Avoid adding duplicate handlers on repeated calls
    root.handlers.clear()
    root.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)


__all__ = ["Settings", "load_settings", "get_settings", "setup_logging"]
