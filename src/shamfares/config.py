"""Configuration utilities.

Central place to load environment driven settings (API credentials, defaults).
Avoids scattering os.getenv calls around the codebase.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

SEARCHAPI_URL = "https://www.searchapi.io/api/v1/search"


@dataclass(frozen=True)
class Settings:
    searchapi_api_key: Optional[str] = None
    searchapi_base_url: str = SEARCHAPI_URL
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    http_timeout: int = 30
    cache_ttl_seconds: int = 300
    default_airport: str = "DAM"
    log_level: str = "INFO"
    proxy_host: str = "127.0.0.1"
    proxy_port: int = 8788

    @property
    def has_search_api(self) -> bool:
        return bool(self.searchapi_api_key)

    @property
    def has_dataset(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        return cls(
            searchapi_api_key=os.getenv("SEARCHAPI_API_KEY") or None,
            searchapi_base_url=os.getenv("SEARCHAPI_BASE_URL", SEARCHAPI_URL),
            supabase_url=(os.getenv("SUPABASE_URL") or "").rstrip("/") or None,
            supabase_key=os.getenv("SUPABASE_KEY") or None,
            http_timeout=_int_env("HTTP_TIMEOUT", 30),
            cache_ttl_seconds=_int_env("CACHE_TTL_SECONDS", 300),
            default_airport=os.getenv("DEFAULT_AIRPORT", "DAM").upper(),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            proxy_host=os.getenv("PROXY_HOST", "127.0.0.1"),
            proxy_port=_int_env("PROXY_PORT", 8788),
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Load .env (without overriding real environment variables) and return Settings."""
    load_dotenv(dotenv_path)
    return Settings.from_env()
