"""
Tests for the shared data structures

These tests verify that:
1. Default settings pre-configure both mock providers
2. Serialization omits None values and sorts mapping keys
3. Partial documents load with empty defaults, bad shapes are rejected
4. WeatherResult renders the user-facing line

Run with: python -m pytest tests/test_models.py -v
"""

import json
import logging
import sys
from pathlib import Path

import pytest

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

sys.path.insert(0, str(Path(__file__).parent.parent))

from weather_cli.errors import ConfigIoError
from weather_cli.models import ProviderConfig, Settings, WeatherResult


class TestSettings:
    """Test suite for Settings serialization."""

    def test_default_settings(self):
        settings = Settings.default()

        assert settings.addresses == {}
        assert settings.default_alias is None
        assert settings.default_provider is None
        assert settings.providers["mock"].key == "mock-key"
        assert settings.providers["grpc"].key == "grpc-mock-key"

    def test_serialization_skips_none(self):
        settings = Settings()
        assert json.dumps(settings.to_dict()) == '{"addresses": {}, "providers": {}}'

    def test_serialization_full(self):
        settings = Settings(
            addresses={"home": "London"},
            default_alias="home",
            providers={"ow": ProviderConfig(key="12345")},
            default_provider="ow",
        )
        data = settings.to_dict()

        assert data["default_alias"] == "home"
        assert data["default_provider"] == "ow"
        assert data["addresses"]["home"] == "London"
        assert data["providers"]["ow"]["key"] == "12345"

    def test_provider_without_key_serializes_empty(self):
        settings = Settings(providers={"wa": ProviderConfig()})
        assert settings.to_dict()["providers"] == {"wa": {}}

    def test_keys_sorted(self):
        settings = Settings.default()
        settings.addresses["z"] = "Last"
        settings.addresses["a"] = "First"

        data = settings.to_dict()
        logger.info(f"[TEST] Address order: {list(data['addresses'])}")
        assert list(data["addresses"]) == ["a", "z"]
        assert list(data["providers"]) == ["grpc", "mock"]

    def test_deserialization_partial(self):
        settings = Settings.from_dict({"addresses": {"work": "Berlin"}})

        assert settings.addresses == {"work": "Berlin"}
        assert settings.default_alias is None
        assert settings.providers == {}
        assert settings.default_provider is None

    def test_dangling_default_alias_tolerated(self):
        settings = Settings.from_dict({"addresses": {}, "default_alias": "gone"})
        assert settings.default_alias == "gone"

    def test_unknown_default_provider_tolerated(self):
        settings = Settings.from_dict({"default_provider": "does-not-exist"})
        assert settings.default_provider == "does-not-exist"

    @pytest.mark.parametrize("document", [
        [],
        "text",
        {"addresses": ["home"]},
        {"addresses": {"home": 1}},
        {"providers": {"ow": "key"}},
        {"providers": {"ow": {"key": 42}}},
        {"default_alias": 3},
    ])
    def test_bad_shapes_rejected(self, document):
        with pytest.raises(ConfigIoError):
            Settings.from_dict(document)

    def test_provider_key_ignores_empty(self):
        settings = Settings(providers={"ow": ProviderConfig(key=""), "wa": ProviderConfig(key="k")})
        assert settings.provider_key("ow") is None
        assert settings.provider_key("wa") == "k"
        assert settings.provider_key("missing") is None


class TestWeatherResult:
    """Test suite for WeatherResult formatting."""

    def test_format_with_description(self):
        result = WeatherResult("UK", "London", "2024-01-01", 50.3, 81, "Light rain")
        assert str(result) == "Weather in 'UK, London': 50.3°F, Light rain, Humidity: 81%"

    def test_format_without_description(self):
        result = WeatherResult("FR", "Paris", "2024-01-01", -3.0, 40)
        assert result.format() == "Weather in 'FR, Paris': -3.0°F, Humidity: 40%"

    def test_immutable(self):
        result = WeatherResult("FR", "Paris", "2024-01-01", 1.0, 40)
        with pytest.raises(AttributeError):
            result.city = "Lyon"


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
