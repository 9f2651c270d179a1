from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.errors import ConfigurationError

DEFAULT_WEIGHTS_KEY = "crypto_scanner/adaptive_weights"


@dataclass(frozen=True)
class PostgresConfig:
    """Connection configuration.

    `database_url` should come from environment (e.g. DATABASE_URL).
    Do not log it.
    """

    database_url: str
    weights_key: str = DEFAULT_WEIGHTS_KEY

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "PostgresConfig":
        """Read DATABASE_URL and SCANNER_WEIGHTS_KEY.

        Raises:
            ConfigurationError: If DATABASE_URL is missing or not a SQLAlchemy URL
        """
        env = os.environ if env is None else env
        database_url = env.get("DATABASE_URL", "").strip()
        if not database_url:
            raise ConfigurationError("DATABASE_URL environment variable is required")
        if "://" not in database_url:
            raise ConfigurationError("DATABASE_URL must be a SQLAlchemy URL (dialect://...)")

        weights_key = env.get("SCANNER_WEIGHTS_KEY", "").strip() or DEFAULT_WEIGHTS_KEY
        return cls(database_url=database_url, weights_key=weights_key)
