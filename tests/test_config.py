"""Unit tests for settings loading."""

from pathlib import Path

import pytest

from shamfares import config

_VARS = [
    "SEARCHAPI_API_KEY",
    "SEARCHAPI_BASE_URL",
    "SUPABASE_URL",
    "SUPABASE_KEY",
    "HTTP_TIMEOUT",
    "CACHE_TTL_SECONDS",
    "DEFAULT_AIRPORT",
    "LOG_LEVEL",
    "PROXY_HOST",
    "PROXY_PORT",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path: Path):
    """Empty environment and a CWD without a .env file."""
    for name in _VARS:
        # setenv first so values written by load_dotenv are undone on teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


def test_defaults(clean_env, tmp_path: Path) -> None:
    settings = config.load_settings(str(tmp_path / "missing.env"))
    assert settings.searchapi_api_key is None
    assert settings.searchapi_base_url == config.SEARCHAPI_URL
    assert settings.http_timeout == 30
    assert settings.cache_ttl_seconds == 300
    assert settings.default_airport == "DAM"
    assert not settings.has_search_api
    assert not settings.has_dataset


def test_environment_values(clean_env, tmp_path: Path) -> None:
    clean_env.setenv("SEARCHAPI_API_KEY", "secret")
    clean_env.setenv("SUPABASE_URL", "https://example.supabase.co/")
    clean_env.setenv("SUPABASE_KEY", "anon")
    clean_env.setenv("CACHE_TTL_SECONDS", "60")
    clean_env.setenv("DEFAULT_AIRPORT", "alp")

    settings = config.load_settings(str(tmp_path / "missing.env"))
    assert settings.has_search_api
    assert settings.has_dataset
    assert settings.supabase_url == "https://example.supabase.co"
    assert settings.cache_ttl_seconds == 60
    assert settings.default_airport == "ALP"


def test_dotenv_file_loaded(clean_env, tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("SEARCHAPI_API_KEY=from-file\nPROXY_PORT=9000\n")

    settings = config.load_settings(str(env_file))
    assert settings.searchapi_api_key == "from-file"
    assert settings.proxy_port == 9000


def test_real_environment_wins_over_dotenv(clean_env, tmp_path: Path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("SEARCHAPI_API_KEY=from-file\n")
    clean_env.setenv("SEARCHAPI_API_KEY", "from-env")

    assert config.load_settings(str(env_file)).searchapi_api_key == "from-env"


def test_bad_integer(clean_env, tmp_path: Path) -> None:
    clean_env.setenv("HTTP_TIMEOUT", "soon")
    with pytest.raises(ValueError, match="HTTP_TIMEOUT must be an integer"):
        config.load_settings(str(tmp_path / "missing.env"))
