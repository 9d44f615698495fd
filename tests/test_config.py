"""Tests for environment configuration."""

from datetime import date

import pytest

from stock_engine.config import Settings, parse_tokens


class TestSettings:

    def test_defaults(self) -> None:
        s = Settings.from_env({})
        assert s.reference_date == date(2023, 1, 15)
        assert s.redis_url is None
        assert s.rate_limit_max == 100
        assert s.rate_limit_window == 900
        assert s.cors_origins == ["*"]
        assert not s.is_development

    def test_overrides(self) -> None:
        s = Settings.from_env({
            "REFERENCE_DATE": "2024-06-30",
            "REDIS_URL": "redis://cache:6379",
            "APP_ENV": "development",
            "LOG_LEVEL": "debug",
            "API_TOKENS": "abc:alice, def:bob",
            "CORS_ORIGINS": "http://a.test,http://b.test",
        })
        assert s.reference_date == date(2024, 6, 30)
        assert s.redis_url == "redis://cache:6379"
        assert s.is_development
        assert s.log_level == "DEBUG"
        assert s.api_tokens == {"abc": "alice", "def": "bob"}
        assert s.cors_origins == ["http://a.test", "http://b.test"]


class TestParseTokens:

    def test_empty(self) -> None:
        assert parse_tokens("") == {}

    @pytest.mark.parametrize("raw", ["abc", "abc:", ":alice"])
    def test_malformed(self, raw: str) -> None:
        with pytest.raises(ValueError):
            parse_tokens(raw)
