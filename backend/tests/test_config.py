"""Configuration — tests for required API key and defaults.

Tests cover:
    - Missing or blank API_KEY raises ConfigurationError (process refuses to start)
    - Defaults match the documented port and log settings
    - Settings are frozen once built
"""

import pydantic
import pytest

from appstore_gateway.config import Settings, load_settings
from appstore_gateway.core.errors import ConfigurationError


def test_missing_api_key_is_configuration_error(monkeypatch):
    monkeypatch.delenv("API_KEY", raising=False)
    with pytest.raises(ConfigurationError, match="API_KEY environment variable is not set"):
        load_settings(_env_file=None)


def test_blank_api_key_is_configuration_error(monkeypatch):
    monkeypatch.setenv("API_KEY", "   ")
    with pytest.raises(ConfigurationError):
        load_settings(_env_file=None)


def test_invalid_port_reports_field(monkeypatch):
    monkeypatch.setenv("API_KEY", "k")
    monkeypatch.setenv("PORT", "not-a-port")
    with pytest.raises(ConfigurationError, match="PORT"):
        load_settings(_env_file=None)


def test_reads_key_from_environment(monkeypatch):
    monkeypatch.setenv("API_KEY", "from-env")
    settings = load_settings(_env_file=None)
    assert settings.api_key == "from-env"
    assert settings.port == 8081
    assert settings.log_format == "json"
    assert settings.store_default_country == "us"
    assert settings.cors_origins == []


def test_settings_are_frozen():
    settings = Settings(api_key="k", _env_file=None)
    with pytest.raises(pydantic.ValidationError):
        settings.api_key = "changed"
