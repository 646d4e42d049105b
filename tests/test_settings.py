"""
==============================================================================
Settings Tests
==============================================================================

Tests for environment configuration and database URL handling.

==============================================================================
"""

import pytest
from pydantic import ValidationError

from suki_api.config.settings import Settings, get_settings
from suki_api.db.database import build_database_url
from suki_api.main import load_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("DATABASE_URL", "DATABASE_KEY", "PORT", "CATALOG_BACKEND", "CORS_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:

    def test_missing_credentials(self, clean_env):
        with pytest.raises(ValidationError) as exc:
            Settings(_env_file=None)
        missing = {err["loc"][0] for err in exc.value.errors()}
        assert missing == {"database_url", "database_key"}

    def test_missing_key_only(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgresql://suki@db.example.com/suki")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    @pytest.mark.parametrize("url, key", [
        ("YOUR_DATABASE_URL", "real-key"),
        ("postgresql://suki@db.example.com/suki", "your_database_key"),
        ("postgresql://suki@db.example.com/suki", "   "),
    ])
    def test_placeholder_rejected(self, clean_env, url, key):
        clean_env.setenv("DATABASE_URL", url)
        clean_env.setenv("DATABASE_KEY", key)
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_defaults(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite://")
        clean_env.setenv("DATABASE_KEY", "abcdefghijkl")

        settings = Settings(_env_file=None)

        assert settings.port == 3000
        assert settings.catalog_backend == "memory"
        assert settings.points_rate == 0.1
        assert settings.short_code_ttl_minutes == 10
        assert settings.cors_origins_list == ["*"]
        assert settings.database_key_preview == "abcdefgh..."

    def test_unknown_catalog_backend(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite://")
        clean_env.setenv("DATABASE_KEY", "key")
        clean_env.setenv("CATALOG_BACKEND", "redis")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_invalid_cors_json(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite://")
        clean_env.setenv("DATABASE_KEY", "key")
        clean_env.setenv("CORS_ORIGINS", "not json")
        assert Settings(_env_file=None).cors_origins_list == ["*"]


class TestDatabaseUrl:

    def test_key_becomes_password(self):
        url = build_database_url("postgresql://suki@db.example.com:5432/suki", "s3cret")
        assert url.password == "s3cret"
        assert url.host == "db.example.com"

    def test_existing_password_kept(self):
        url = build_database_url("postgresql://suki:pw@db.example.com/suki", "s3cret")
        assert url.password == "pw"

    def test_sqlite_untouched(self):
        url = build_database_url("sqlite:///suki.db", "s3cret")
        assert url.password is None


class TestLoadSettings:

    @pytest.fixture(autouse=True)
    def reset_settings_cache(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_missing_credentials_exit(self, clean_env):
        with pytest.raises(SystemExit) as exc:
            load_settings()
        assert exc.value.code == 1

    def test_placeholder_credentials_exit(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgresql://suki@YOUR_DATABASE_HOST/suki")
        clean_env.setenv("DATABASE_KEY", "YOUR_DATABASE_KEY")
        with pytest.raises(SystemExit) as exc:
            load_settings()
        assert exc.value.code == 1

    def test_valid_credentials_load(self, clean_env):
        clean_env.setenv("DATABASE_URL", "sqlite://")
        clean_env.setenv("DATABASE_KEY", "test-database-key")
        assert load_settings().database_key == "test-database-key"
