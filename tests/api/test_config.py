"""Tests for configuration classes."""

import dataclasses
import os
from unittest.mock import patch

import pytest

from config import (
    AppConfig,
    CORSConfig,
    HouseConfig,
    RateLimitConfig,
    RedisConfig,
    SecurityConfig,
    TableConfig,
    _parse_cors_origins,
)


class TestCORSConfig:
    """Tests for CORSConfig class."""

    def test_cors_default_origins(self):
        with patch.dict(os.environ, {}, clear=True):
            assert CORSConfig().allowed_origins == ["http://localhost:8000"]

    def test_cors_parses_origins_with_whitespace(self):
        """Origins are split on commas and stripped; empty entries are dropped."""
        with patch.dict(os.environ, {"CORS_ORIGINS": "  http://a.test , http://b.test ,,"}):
            assert _parse_cors_origins() == ["http://a.test", "http://b.test"]


class TestRateLimitConfig:
    """Tests for RateLimitConfig class."""

    def test_rate_limit_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = RateLimitConfig()
            assert config.enabled is True
            assert config.requests_per_minute == 60

    def test_rate_limit_from_env(self):
        with patch.dict(os.environ, {"RATE_LIMIT_ENABLED": "False", "RATE_LIMIT_RPM": "120"}):
            config = RateLimitConfig()
            assert config.enabled is False
            assert config.requests_per_minute == 120


class TestSecurityConfig:
    """Tests for SecurityConfig class."""

    def test_secret_key_auto_generates(self):
        with patch.dict(os.environ, {}, clear=True):
            assert len(SecurityConfig().secret_key) > 0
            assert SecurityConfig().token_max_age == 86400

    def test_secret_key_from_env(self):
        with patch.dict(os.environ, {"SECRET_KEY": "k", "TOKEN_MAX_AGE": "60"}):
            config = SecurityConfig()
            assert config.secret_key == "k"
            assert config.token_max_age == 60


class TestRedisConfig:
    """Tests for RedisConfig class."""

    def test_redis_url_without_password(self):
        with patch.dict(os.environ, {}, clear=True):
            assert RedisConfig().url == "redis://localhost:6379/0"

    def test_redis_url_with_password(self):
        with patch.dict(
            os.environ,
            {"REDIS_HOST": "cache", "REDIS_PORT": "6380", "REDIS_DB": "2", "REDIS_PASSWORD": "pw"},
            clear=True,
        ):
            assert RedisConfig().url == "redis://:pw@cache:6380/2"


class TestTableConfig:
    """Tests for TableConfig class."""

    def test_table_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = TableConfig()
            assert config.required_bet == 100
            assert config.winning_payout == 200
            assert config.min_dealer_stand == 17
            assert config.dealer_stand_range == 5
            assert config.house_seed_funds == 0

    def test_table_from_env(self):
        with patch.dict(
            os.environ,
            {
                "REQUIRED_BET": "10",
                "WINNING_PAYOUT": "25",
                "MIN_DEALER_STAND": "16",
                "DEALER_STAND_RANGE": "2",
                "HOUSE_SEED_FUNDS": "5000",
            },
        ):
            config = TableConfig()
            assert config.required_bet == 10
            assert config.winning_payout == 25
            assert config.min_dealer_stand == 16
            assert config.dealer_stand_range == 2
            assert config.house_seed_funds == 5000

    def test_non_numeric_value_rejected(self):
        with patch.dict(os.environ, {"REQUIRED_BET": "lots"}):
            with pytest.raises(ValueError):
                TableConfig()

    def test_table_config_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            TableConfig().required_bet = 1


class TestHouseConfig:
    """Tests for HouseConfig class."""

    def test_owner_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert HouseConfig().owner_id == "house"

    def test_owner_from_env(self):
        with patch.dict(os.environ, {"OWNER_ID": "casino-ops"}):
            assert HouseConfig().owner_id == "casino-ops"


class TestAppConfig:
    """Tests for AppConfig class."""

    def test_app_config_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = AppConfig()
            assert config.debug is False
            assert config.port == 8000
            assert config.log_level == "INFO"
            assert config.archive_ttl == 7 * 86400

    def test_log_level_normalised(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            assert AppConfig().log_level == "DEBUG"

    def test_app_config_has_nested_configs(self):
        config = AppConfig()
        assert isinstance(config.table, TableConfig)
        assert isinstance(config.house, HouseConfig)
        assert isinstance(config.redis, RedisConfig)
        assert isinstance(config.security, SecurityConfig)
