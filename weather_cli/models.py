"""
Data structures shared across weather-cli.

- WeatherResult: the uniform record every provider produces
- Settings / ProviderConfig: the persisted configuration document

Settings keeps its mappings sorted on output so the file on disk diffs
cleanly between saves.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from weather_cli.errors import ConfigIoError

# Sentinel keys that let the mock backends run with zero configuration
MOCK_PROVIDER_KEY = "mock-key"
GRPC_MOCK_PROVIDER_KEY = "grpc-mock-key"

TEMPERATURE_UNIT = "F"


@dataclass(frozen=True)
class WeatherResult:
    """Weather for one location and day, independent of any provider."""
    country: str
    city: str
    date: str  # ISO YYYY-MM-DD
    temperature: float  # provider-native unit
    humidity: int  # percentage 0-100
    description: Optional[str] = None

    def format(self) -> str:
        description = f", {self.description}" if self.description is not None else ""
        return (
            f"Weather in '{self.country}, {self.city}': "
            f"{self.temperature:.1f}°{TEMPERATURE_UNIT}{description}, "
            f"Humidity: {self.humidity}%"
        )

    def __str__(self) -> str:
        return self.format()


@dataclass
class ProviderConfig:
    """Per-provider settings (currently just the API key)."""
    key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.key is not None:
            data["key"] = self.key
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "ProviderConfig":
        if not isinstance(data, dict):
            raise ConfigIoError(f"Provider entry must be an object, got {type(data).__name__}")
        key = data.get("key")
        if key is not None and not isinstance(key, str):
            raise ConfigIoError("Provider 'key' must be a string")
        return cls(key=key)


@dataclass
class Settings:
    """
    Persistent configuration of the application.

    Maps directly to the JSON config file. Missing fields load as empty
    mappings / None; None values are left out when saving.
    """
    addresses: Dict[str, str] = field(default_factory=dict)
    default_alias: Optional[str] = None
    providers: Dict[str, ProviderConfig] = field(default_factory=dict)
    default_provider: Optional[str] = None

    @classmethod
    def default(cls) -> "Settings":
        """Fresh settings with both mock providers pre-configured."""
        return cls(
            providers={
                "grpc": ProviderConfig(key=GRPC_MOCK_PROVIDER_KEY),
                "mock": ProviderConfig(key=MOCK_PROVIDER_KEY),
            }
        )

    def provider_key(self, provider_id: str) -> Optional[str]:
        """Stored, non-empty API key for a provider id, or None."""
        config = self.providers.get(provider_id)
        if config is None or not config.key:
            return None
        return config.key

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "addresses": {alias: self.addresses[alias] for alias in sorted(self.addresses)},
            "providers": {pid: self.providers[pid].to_dict() for pid in sorted(self.providers)},
        }
        if self.default_alias is not None:
            data["default_alias"] = self.default_alias
        if self.default_provider is not None:
            data["default_provider"] = self.default_provider
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Settings":
        """
        Build Settings from a decoded JSON document.

        Raises:
            ConfigIoError: If the document does not have the Settings shape
        """
        if not isinstance(data, dict):
            raise ConfigIoError(f"Settings must be a JSON object, got {type(data).__name__}")

        addresses = data.get("addresses") or {}
        if not isinstance(addresses, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in addresses.items()
        ):
            raise ConfigIoError("'addresses' must map alias names to address strings")

        providers_raw = data.get("providers") or {}
        if not isinstance(providers_raw, dict):
            raise ConfigIoError("'providers' must be an object")
        providers = {pid: ProviderConfig.from_dict(cfg) for pid, cfg in providers_raw.items()}

        default_alias = data.get("default_alias")
        default_provider = data.get("default_provider")
        for name, value in (("default_alias", default_alias), ("default_provider", default_provider)):
            if value is not None and not isinstance(value, str):
                raise ConfigIoError(f"'{name}' must be a string")

        return cls(
            addresses=dict(sorted(addresses.items())),
            default_alias=default_alias,
            providers=dict(sorted(providers.items())),
            default_provider=default_provider,
        )


__all__ = [
    "WeatherResult",
    "ProviderConfig",
    "Settings",
    "MOCK_PROVIDER_KEY",
    "GRPC_MOCK_PROVIDER_KEY",
    "TEMPERATURE_UNIT",
]
