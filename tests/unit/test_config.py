"""Unit tests for configuration validation"""
import pytest

from prime_officer import config
from prime_officer.exceptions import ConfigurationError


def test_defaults_are_valid():
    """Test shipped defaults pass validation"""
    config.validate_config()


def test_invalid_log_level(monkeypatch):
    """Test unknown log level is rejected"""
    monkeypatch.setattr(config, "LOG_LEVEL", "LOUD")

    with pytest.raises(ConfigurationError) as exc_info:
        config.validate_config()

    assert exc_info.value.config_key == "LOG_LEVEL"


def test_invalid_card_count(monkeypatch):
    """Test mission count must be positive"""
    monkeypatch.setattr(config, "DEFAULT_DAILY_CARD_COUNT", 0)

    with pytest.raises(ConfigurationError):
        config.validate_config()


def test_invalid_strategy(monkeypatch):
    """Test unknown selection strategy is rejected"""
    monkeypatch.setattr(config, "SELECTION_STRATEGY", "random")

    with pytest.raises(ConfigurationError) as exc_info:
        config.validate_config()

    assert exc_info.value.config_key == "SELECTION_STRATEGY"


def test_invalid_timezone(monkeypatch):
    """Test unknown timezone is rejected"""
    monkeypatch.setattr(config, "TIMEZONE", "Mars/Olympus")

    with pytest.raises(ConfigurationError) as exc_info:
        config.validate_config()

    assert exc_info.value.config_key == "PRIME_OFFICER_TIMEZONE"
