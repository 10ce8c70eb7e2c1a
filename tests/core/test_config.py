"""Tests for Settings."""

import pytest

from form_builder.core.config import Settings, get_settings, clear_settings_cache


class TestSettingsFromEnv:
    """Tests for Settings.from_env."""

    def test_defaults(self, monkeypatch):
        for var in ("MINIO_ENDPOINT", "MINIO_PORT", "MINIO_USE_SSL", "MINIO_BUCKET",
                    "LLM_MODEL", "LLM_TEMPERATURE", "LLM_MAX_TOKENS", "API_PORT", "PORT",
                    "RATE_LIMIT_MAX", "LLM_RATE_LIMIT_MAX", "TRUST_PROXY", "CORS_ORIGINS"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings.from_env()

        assert settings.api_port == 4000
        assert settings.storage_url == "http://localhost:9000"
        assert settings.storage_bucket == "forms"
        assert settings.llm_model is None
        assert settings.llm_temperature is None
        assert settings.rate_limit_window_seconds == 900
        assert settings.rate_limit_max == 100
        assert settings.llm_rate_limit_window_seconds == 60
        assert settings.llm_rate_limit_max == 10
        assert settings.trust_proxy is False
        assert settings.cors_origins == ["*"]

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("MINIO_ENDPOINT", "minio.internal")
        monkeypatch.setenv("MINIO_PORT", "443")
        monkeypatch.setenv("MINIO_USE_SSL", "true")
        monkeypatch.setenv("LLM_MODEL", "haiku")
        monkeypatch.setenv("LLM_TEMPERATURE", "0.5")
        monkeypatch.setenv("LLM_MAX_TOKENS", "2048")
        monkeypatch.setenv("TRUST_PROXY", "true")
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")

        settings = Settings.from_env()

        assert settings.storage_url == "https://minio.internal:443"
        assert settings.llm_model == "haiku"
        assert settings.llm_temperature == 0.5
        assert settings.llm_max_tokens == 2048
        assert settings.trust_proxy is True
        assert settings.cors_origins == ["http://a.test", "http://b.test"]


def test_get_settings_is_cached_until_cleared(monkeypatch):
    clear_settings_cache()
    first = get_settings()
    assert get_settings() is first

    monkeypatch.setenv("MINIO_BUCKET", "other")
    clear_settings_cache()
    assert get_settings().storage_bucket == "other"


class TestLogFormatDefault:
    @pytest.mark.parametrize("environment, expected", [
        ("development", "text"),
        ("test", "text"),
        ("staging", "json"),
        ("production", "json"),
    ])
    def test_follows_environment(self, monkeypatch, environment, expected):
        monkeypatch.setenv("ENVIRONMENT", environment)
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        assert Settings.from_env().log_format == expected

    def test_explicit_value_wins(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_FORMAT", "text")
        assert Settings.from_env().log_format == "text"
