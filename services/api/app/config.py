from __future__ import annotations

import logging
import os
from datetime import timedelta

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def configure_logging() -> None:
    level = os.getenv("MIXBOX_LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def db_auto_create() -> bool:
    return _parse_bool(os.getenv("MIXBOX_DB_AUTO_CREATE", "true"))


def session_retention() -> timedelta:
    """How long a session lives before the sweep removes it.

    Measured from session creation, not from the last basket change.
    """

    days = float(os.getenv("MIXBOX_SESSION_RETENTION_DAYS", "8"))
    if days <= 0:
        raise ValueError(f"MIXBOX_SESSION_RETENTION_DAYS must be positive, got {days!r}")
    return timedelta(days=days)


def cron_auth_token() -> str | None:
    token = os.getenv("MIXBOX_CRON_AUTH_TOKEN", "").strip()
    return token or None


def session_cookie_secure() -> bool:
    return _parse_bool(os.getenv("MIXBOX_COOKIE_SECURE", "false"))


def session_cookie_max_age() -> int:
    days = int(os.getenv("MIXBOX_COOKIE_MAX_AGE_DAYS", "365"))
    return int(timedelta(days=days).total_seconds())


def shop_currency() -> str:
    return os.getenv("MIXBOX_CURRENCY", "DKK").strip().upper()


def delivery_provider() -> str:
    return os.getenv("MIXBOX_DELIVERY_PROVIDER", "postnord").strip().lower()
