"""
Configuration helpers for the user directory.

Services and repositories read a Settings object instead of fetching
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    default_limit: int
    max_limit: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    max_limit = max(1, _int(os.getenv("LIST_MAX_LIMIT", "200"), 200))
    default_limit = _int(os.getenv("LIST_DEFAULT_LIMIT", "20"), 20)
    if default_limit <= 0 or default_limit > max_limit:
        default_limit = min(20, max_limit)

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", ""),
        default_limit=default_limit,
        max_limit=max_limit,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
