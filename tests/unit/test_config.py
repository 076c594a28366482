"""Tests for configuration loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from metaso_mcp.config.loader import load_config, validate_api_key_format
from metaso_mcp.config.schema import DEFAULT_BASE_URL, Config
from metaso_mcp.core.errors import ConfigError
from tests.conftest import TEST_API_KEY


class TestConfigModel:
    def test_defaults(self):
        cfg = Config(api_key=TEST_API_KEY)
        assert cfg.base_url == DEFAULT_BASE_URL == "https://metaso.cn"
        assert cfg.timeout == 30.0
        assert cfg.debug is False

    def test_frozen(self):
        cfg = Config(api_key=TEST_API_KEY)
        with pytest.raises(ValidationError):
            cfg.debug = True  # type: ignore[misc]

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Config(api_key=TEST_API_KEY, timeout=0)


class TestApiKeyFormat:
    def test_valid(self):
        assert validate_api_key_format(TEST_API_KEY) is True

    @pytest.mark.parametrize(
        "key",
        [
            "",
            "mk-",
            "mk-abcdefghijklmnopqrstuvwxyz012345",  # lowercase
            "mk-ABCDEFGHIJKLMNOPQRSTUVWXYZ01234",  # 31 chars
            "mk-ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456",  # 33 chars
            "sk-ABCDEFGHIJKLMNOPQRSTUVWXYZ012345",
        ],
    )
    def test_invalid(self, key):
        assert validate_api_key_format(key) is False


class TestLoadConfig:
    def test_minimal_env(self):
        cfg = load_config(env={"METASO_API_KEY": TEST_API_KEY})
        assert cfg.api_key == TEST_API_KEY
        assert cfg.base_url == "https://metaso.cn"
        assert cfg.timeout == 30.0
        assert cfg.debug is False

    def test_full_env(self):
        cfg = load_config(
            env={
                "METASO_API_KEY": TEST_API_KEY,
                "METASO_BASE_URL": "https://proxy.example.com",
                "METASO_TIMEOUT": "5000",
                "METASO_DEBUG": "true",
            }
        )
        assert cfg.base_url == "https://proxy.example.com"
        assert cfg.timeout == 5.0
        assert cfg.debug is True

    def test_debug_only_when_true(self):
        cfg = load_config(env={"METASO_API_KEY": TEST_API_KEY, "METASO_DEBUG": "1"})
        assert cfg.debug is False

    def test_overrides_win(self):
        cfg = load_config(
            env={"METASO_API_KEY": TEST_API_KEY, "METASO_DEBUG": "false"},
            overrides={"debug": True},
        )
        assert cfg.debug is True

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("METASO_API_KEY", TEST_API_KEY)
        monkeypatch.delenv("METASO_BASE_URL", raising=False)
        assert load_config().api_key == TEST_API_KEY

    def test_missing_key(self):
        with pytest.raises(ConfigError, match="METASO_API_KEY is required"):
            load_config(env={})

    def test_malformed_key(self):
        with pytest.raises(ConfigError, match="Invalid API key format"):
            load_config(env={"METASO_API_KEY": "mk-short"})

    def test_bad_timeout(self):
        with pytest.raises(ConfigError, match="METASO_TIMEOUT"):
            load_config(env={"METASO_API_KEY": TEST_API_KEY, "METASO_TIMEOUT": "soon"})

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigError, match="Configuration validation failed: timeout"):
            load_config(env={"METASO_API_KEY": TEST_API_KEY, "METASO_TIMEOUT": "0"})

    def test_bad_base_url(self):
        with pytest.raises(ConfigError, match="METASO_BASE_URL"):
            load_config(env={"METASO_API_KEY": TEST_API_KEY, "METASO_BASE_URL": "metaso.cn"})
