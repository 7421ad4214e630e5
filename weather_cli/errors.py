"""
Error taxonomy for weather-cli.

Every failure the core can surface derives from WeatherCliError. The command
layer only prints the message and sets a non-zero exit code, so messages are
written to be shown to the user verbatim.
"""


class WeatherCliError(Exception):
    """Base class for all errors surfaced to the command line."""


class ConfigIoError(WeatherCliError):
    """Reading, parsing or writing the configuration file failed."""


class ValidationError(WeatherCliError):
    """User input was rejected before any state was changed."""


class UnknownProviderError(WeatherCliError):
    """A provider token matched none of the known providers."""


class MissingCredentialError(WeatherCliError):
    """The selected provider needs an API key and none is configured."""


class NoAddressSpecifiedError(WeatherCliError):
    """No location was given and no usable default alias exists."""


class LocationNotFoundError(WeatherCliError):
    """The geocoding step returned no match for the location."""


class TransportError(WeatherCliError):
    """Network, HTTP or RPC failure talking to a provider."""


__all__ = [
    "WeatherCliError",
    "ConfigIoError",
    "ValidationError",
    "UnknownProviderError",
    "MissingCredentialError",
    "NoAddressSpecifiedError",
    "LocationNotFoundError",
    "TransportError",
]
