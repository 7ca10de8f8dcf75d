"""Cache settings loaded from the environment (and a .env file if present)."""
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()

MEMORY_DATABASE_URL = "memory://"


class CacheSettings(BaseModel):
    """Settings for building a results cache."""

    database_url: str = Field(
        default="sqlite:///./results_cache.db",
        description=f"SQLAlchemy URL of the blob store, or '{MEMORY_DATABASE_URL}' for an in-process store",
    )
    ttl_seconds: float = Field(default=3600, ge=0, description="Grace period past a result's time to live marker")
    max_key_attempts: int = Field(default=16, ge=1, description="Key generation attempts before put gives up")


def load_settings() -> CacheSettings:
    """Read settings from RESULTS_CACHE_* environment variables."""
    values = {}
    for field, env_var in (
        ("database_url", "RESULTS_CACHE_DATABASE_URL"),
        ("ttl_seconds", "RESULTS_CACHE_TTL_SECONDS"),
        ("max_key_attempts", "RESULTS_CACHE_MAX_KEY_ATTEMPTS"),
    ):
        value = os.getenv(env_var)
        if value is not None:
            values[field] = value
    return CacheSettings(**values)


_settings_singleton: Optional[CacheSettings] = None


def get_settings() -> CacheSettings:
    global _settings_singleton
    if _settings_singleton is None:
        _settings_singleton = load_settings()
    return _settings_singleton
