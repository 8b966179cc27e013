"""Tests for configuration validation.

Settings must refuse to load when a required key is missing or blank.
"""

import os
from unittest.mock import patch

import pytest

from wishlist.core.config import ConfigurationError, Settings, load_settings

VALID_ENV = {
    "JWT__KEY": "a" * 40,
    "JWT__ISSUER": "issuer",
    "JWT__AUDIENCE": "audience",
    "CONNECTION_STRINGS__DEFAULT_CONNECTION": "sqlite+aiosqlite:///./test.db",
}


def _load(env: dict[str, str]) -> Settings:
    with patch.dict(os.environ, env, clear=True):
        return load_settings(_env_file=None)


class TestRequiredKeys:
    """Tests for required settings."""

    def test_valid_environment_loads(self):
        config = _load(VALID_ENV)
        assert config.jwt.issuer == "issuer"
        assert config.jwt.audience == "audience"
        assert config.jwt.expiration_minutes == 60
        assert config.database_url == "sqlite+aiosqlite:///./test.db"
        assert config.is_sqlite is True

    def test_missing_sections_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            _load({})
        assert "jwt" in exc_info.value.keys
        assert "connection_strings" in exc_info.value.keys

    @pytest.mark.parametrize(
        "key",
        ["JWT__KEY", "JWT__ISSUER", "JWT__AUDIENCE", "CONNECTION_STRINGS__DEFAULT_CONNECTION"],
    )
    def test_blank_required_value_rejected(self, key):
        with pytest.raises(ConfigurationError):
            _load({**VALID_ENV, key: "   "})

    def test_blank_key_reports_key_name(self):
        with pytest.raises(ConfigurationError) as exc_info:
            _load({**VALID_ENV, "JWT__KEY": ""})
        assert "jwt.key" in exc_info.value.keys

    @pytest.mark.parametrize("minutes", ["0", "-5", "soon"])
    def test_expiration_must_be_positive_integer(self, minutes):
        with pytest.raises(ConfigurationError):
            _load({**VALID_ENV, "JWT__EXPIRATION_MINUTES": minutes})


class TestOptionalKeys:
    """Tests for optional settings."""

    def test_expiration_minutes_override(self):
        config = _load({**VALID_ENV, "JWT__EXPIRATION_MINUTES": "15"})
        assert config.jwt.expiration_minutes == 15

    def test_cors_defaults_to_empty(self):
        assert _load(VALID_ENV).cors.allowed_origins == []

    def test_cors_origins_parsed(self):
        config = _load(
            {**VALID_ENV, "CORS__ALLOWED_ORIGINS": '["https://a.example", "https://b.example"]'}
        )
        assert config.cors.allowed_origins == ["https://a.example", "https://b.example"]

    def test_admin_bootstrap_requires_both_values(self):
        with pytest.raises(ConfigurationError):
            _load({**VALID_ENV, "ADMIN__NAME": "root"})

    def test_admin_bootstrap_enabled(self):
        config = _load({**VALID_ENV, "ADMIN__NAME": "root", "ADMIN__PASSWORD": "secret"})
        assert config.admin.enabled is True
        assert _load(VALID_ENV).admin.enabled is False

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ConfigurationError):
            _load({**VALID_ENV, "LOG_LEVEL": "chatty"})

    def test_sweep_interval_in_seconds(self):
        config = _load({**VALID_ENV, "BLACKLIST_SWEEP_INTERVAL_MINUTES": "5"})
        assert config.blacklist_sweep_interval_seconds == 300.0


class TestSecurityWarnings:
    """Tests for check_security_configuration."""

    def test_no_warnings_for_strong_setup(self):
        assert _load(VALID_ENV).check_security_configuration() == []

    def test_short_key_warns(self):
        config = _load({**VALID_ENV, "JWT__KEY": "short"})
        warnings = config.check_security_configuration()
        assert any("Jwt:Key" in w for w in warnings)

    def test_debug_warns(self):
        config = _load({**VALID_ENV, "DEBUG": "true"})
        assert any("DEBUG" in w for w in config.check_security_configuration())
