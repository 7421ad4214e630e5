"""
Tests for address and provider resolution

These tests verify that:
1. Aliases map to their address and anything else is used literally
2. The default alias is used when no address is given
3. A dangling default alias warns and then fails
4. Provider precedence is explicit > stored default > offline mock
5. Providers that need a key fail before any network call

Run with: python -m pytest tests/test_resolution.py -v
"""

import logging
import sys
from pathlib import Path

import pytest

logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)

sys.path.insert(0, str(Path(__file__).parent.parent))

from weather_cli.errors import MissingCredentialError, NoAddressSpecifiedError, UnknownProviderError
from weather_cli.models import GRPC_MOCK_PROVIDER_KEY, MOCK_PROVIDER_KEY, ProviderConfig, Settings
from weather_cli.providers import Provider
from weather_cli.resolution import resolve_address, resolve_provider


@pytest.fixture
def settings():
    return Settings(addresses={"home": "London, UK", "work": "Berlin"})


class TestResolveAddress:
    """Test suite for resolve_address()."""

    def test_alias_hit(self, settings):
        assert resolve_address(settings, "home") == "London, UK"

    def test_literal_address(self, settings):
        assert resolve_address(settings, "Paris") == "Paris"

    def test_alias_lookup_is_exact(self, settings):
        assert resolve_address(settings, "HOME") == "HOME"

    def test_default_alias(self, settings):
        settings.default_alias = "work"
        assert resolve_address(settings) == "Berlin"

    def test_explicit_beats_default(self, settings):
        settings.default_alias = "work"
        assert resolve_address(settings, "home") == "London, UK"

    def test_no_input_no_default(self, settings):
        with pytest.raises(NoAddressSpecifiedError, match="weather get <LOCATION>"):
            resolve_address(settings)

    def test_dangling_default_warns_then_fails(self, settings, capsys):
        settings.default_alias = "gone"

        with pytest.raises(NoAddressSpecifiedError):
            resolve_address(settings)

        err = capsys.readouterr().err
        logger.info(f"[TEST] stderr: {err!r}")
        assert "Default alias 'gone' is set but not found in saved aliases." in err


class TestResolveProvider:
    """Test suite for resolve_provider()."""

    def test_empty_settings_fall_back_to_mock(self):
        provider, key = resolve_provider(Settings())
        assert provider is Provider.MOCK
        assert key is None

    def test_default_settings(self):
        provider, key = resolve_provider(Settings.default())
        assert provider is Provider.MOCK
        assert key == MOCK_PROVIDER_KEY

    def test_explicit_input_wins(self):
        settings = Settings.default()
        settings.default_provider = "mock"

        provider, key = resolve_provider(settings, "grpc")
        assert provider is Provider.GRPC_MOCK
        assert key == GRPC_MOCK_PROVIDER_KEY

    def test_stored_default(self):
        settings = Settings(providers={"wa": ProviderConfig(key="wa-key")}, default_provider="wa")

        provider, key = resolve_provider(settings)
        assert provider is Provider.WEATHER_API
        assert key == "wa-key"

    def test_missing_key(self):
        with pytest.raises(MissingCredentialError) as exc_info:
            resolve_provider(Settings.default(), "wa")

        message = str(exc_info.value)
        logger.info(f"[TEST] Error: {message}")
        assert "WeatherApi" in message
        assert "weather provider wa --key <API_KEY>" in message

    def test_empty_key_counts_as_missing(self):
        settings = Settings(providers={"ow": ProviderConfig(key="")})

        with pytest.raises(MissingCredentialError):
            resolve_provider(settings, "ow")

    def test_grpc_without_key_is_missing(self):
        with pytest.raises(MissingCredentialError, match="weather provider grpc"):
            resolve_provider(Settings(), "grpc")

    def test_unknown_explicit_provider(self):
        with pytest.raises(UnknownProviderError) as exc_info:
            resolve_provider(Settings.default(), "nope")

        message = str(exc_info.value)
        assert "Unknown provider: 'nope'" in message
        for provider in Provider:
            assert provider.id in message

    def test_unparseable_stored_default_falls_back(self, caplog):
        settings = Settings.default()
        settings.default_provider = "retired"

        with caplog.at_level(logging.WARNING, logger="weather_cli.resolution"):
            provider, key = resolve_provider(settings)

        assert provider is Provider.MOCK
        assert key == MOCK_PROVIDER_KEY
        assert any("retired" in m for m in caplog.messages)


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
