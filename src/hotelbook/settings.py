"""Runtime settings loaded from the environment.

Invalid or missing values fall back to the defaults below.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

ISOLATION_LEVELS = ("READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE")


@dataclass(frozen=True)
class Settings:
    """Core settings.

    Attributes:
        database_url: PostgreSQL DSN or URL, None when not configured.
        max_stay_days: Longest stay a single check-in may book.
        guest_price_name: GuestPrice row holding the per-guest surcharge.
        isolation_level: Transaction isolation for the Postgres store.
        log_level: Root level for the JSON loggers.
    """

    database_url: str | None = None
    max_stay_days: int = 15
    guest_price_name: str = "guest"
    isolation_level: str = "READ COMMITTED"
    log_level: str = "INFO"


def _positive_int(raw: str | None, default: int) -> int:
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value > 0 else default


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Variables: DATABASE_URL, HOTELBOOK_MAX_STAY_DAYS,
    HOTELBOOK_GUEST_PRICE_NAME, HOTELBOOK_DB_ISOLATION, LOG_LEVEL.
    """
    env = os.environ if environ is None else environ
    defaults = Settings()

    isolation = env.get("HOTELBOOK_DB_ISOLATION", defaults.isolation_level).upper()
    if isolation not in ISOLATION_LEVELS:
        isolation = defaults.isolation_level

    return Settings(
        database_url=env.get("DATABASE_URL") or None,
        max_stay_days=_positive_int(
            env.get("HOTELBOOK_MAX_STAY_DAYS"), defaults.max_stay_days
        ),
        guest_price_name=env.get("HOTELBOOK_GUEST_PRICE_NAME")
        or defaults.guest_price_name,
        isolation_level=isolation,
        log_level=env.get("LOG_LEVEL", defaults.log_level).upper(),
    )
