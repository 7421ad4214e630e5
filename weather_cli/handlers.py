"""
Command handlers for weather-cli

Thin glue between parsed CLI arguments and the core:
- get_weather:    resolution -> provider -> print result
- list_providers / set_provider:   provider management
- list_aliases / set_alias / remove_alias:   alias management

Errors are not caught here; they propagate to cli.main which prints them.
"""

import logging
from typing import Optional

from colorama import Fore, Style

from weather_cli.context import AppContext
from weather_cli.errors import UnknownProviderError, ValidationError
from weather_cli.models import ProviderConfig, Settings, WeatherResult
from weather_cli.providers import Provider, fetch_weather
from weather_cli.resolution import resolve_address, resolve_provider

logger = logging.getLogger(__name__)

MAX_ALIAS_CHARS = 5


# =============================================================================
# WEATHER
# =============================================================================

async def get_weather(
    ctx: AppContext,
    address: Optional[str] = None,
    date: Optional[str] = None,
    provider: Optional[str] = None,
) -> WeatherResult:
    """
    Handle `weather get`.

    1. Resolve provider + API key (explicit, default, or offline mock)
    2. Resolve the address (alias, literal, or default alias)
    3. Fetch from the provider and print the formatted result
    """
    with ctx.config.read() as settings:
        selected, api_key = resolve_provider(settings, provider)
        location = resolve_address(settings, address)

    print(f"Fetching weather from '{selected}' for '{location}'...")
    logger.info(f"[get_weather] provider={selected.id} location={location!r} date={date!r}")

    result = await fetch_weather(selected, api_key, location, date, **ctx.fetch_options())

    print(f"{Fore.GREEN}{result}{Style.RESET_ALL}")
    return result


# =============================================================================
# PROVIDERS
# =============================================================================

def list_providers(ctx: AppContext) -> None:
    """Print every provider with its stored key, then the default."""
    settings = ctx.config.snapshot()

    print("Weather providers:\n")
    print(f"{'ID':<5} | {'PROVIDER':<15} | {'API KEY':<10}")
    print("------+-----------------+---------")

    for provider in Provider:
        key = settings.provider_key(provider.id) or "-"
        print(f"{provider.id:<5} | {provider.display_name:<15} | {key:<10}")
    print()

    default_id = settings.default_provider
    if default_id is None:
        print("Default provider is not set.")
        return

    try:
        display_name = str(Provider.parse(default_id))
    except UnknownProviderError:
        display_name = default_id
    print(f"Default provider: '{display_name}' ({default_id})")


def set_provider(ctx: AppContext, provider: str, key: Optional[str] = None) -> bool:
    """
    Store an API key and/or make a provider the default.

    The provider becomes the default only if it is offline or has a key
    (new or previously saved). Otherwise a warning is printed and the
    default is left alone.

    Returns:
        True if the default provider was changed
    """
    selected = Provider.parse(provider)
    key_to_set = key if key else None

    def mutate(settings: Settings) -> bool:
        if key_to_set is not None:
            settings.providers.setdefault(selected.id, ProviderConfig()).key = key_to_set
        if selected.is_offline or settings.provider_key(selected.id) is not None:
            settings.default_provider = selected.id
            return True
        return False

    changed = ctx.config.update(mutate)

    if key_to_set is not None:
        print(f"API key for '{selected}' updated.")
    if changed:
        print(f"Default provider set to: '{selected}'")
    else:
        print(
            f"{Fore.YELLOW}WARNING: API key not found for '{selected}'. Default provider NOT changed.\n"
            f"Please set the key first using --key <API_KEY>{Style.RESET_ALL}"
        )
    return changed


# =============================================================================
# ALIASES
# =============================================================================

def list_aliases(ctx: AppContext) -> None:
    """Print the alias table and the default alias."""
    settings = ctx.config.snapshot()

    if not settings.addresses:
        print("No aliases are set.")
        return

    print("Aliases:\n")
    print(f"{'ALIAS':<10} | {'ADDRESS':<30}")
    print("-----------+--------------")
    for alias, address in sorted(settings.addresses.items()):
        print(f"{alias:<10} | {address:<30}")
    print()

    if settings.default_alias is not None:
        print(f"Default alias: {settings.default_alias}")
    else:
        print("No default alias is set.")


def set_alias(ctx: AppContext, alias: str, address: Optional[str] = None) -> None:
    """
    Create or update an alias, or make an existing one the default.

    With no address the alias is made the default. The first alias ever
    saved becomes the default automatically.

    Raises:
        ValidationError: Blank address, alias outside 1-5 characters, or
                         (default mode) alias not found
    """
    if address is None:
        set_default_alias(ctx, alias)
        return

    if not address.strip():
        raise ValidationError("Address cannot be empty. Use --address <ADDRESS>")

    alias = alias.strip()
    if not alias or len(alias) > MAX_ALIAS_CHARS:
        raise ValidationError(f"Alias must be between 1 and {MAX_ALIAS_CHARS} characters long.")

    def mutate(settings: Settings) -> bool:
        settings.addresses[alias] = address
        if settings.default_alias is None:
            settings.default_alias = alias
            return True
        return False

    became_default = ctx.config.update(mutate)

    if became_default:
        print(f"Alias '{alias}' set as default.")
    print(f"Alias '{alias}' set to '{address}'")


def set_default_alias(ctx: AppContext, alias: str) -> None:
    """
    Make an existing alias the default.

    Raises:
        ValidationError: If the alias is not saved
    """
    with ctx.config.read() as settings:
        exists = alias in settings.addresses
    if not exists:
        raise ValidationError(f"Alias '{alias}' not found")

    def mutate(settings: Settings) -> None:
        settings.default_alias = alias

    ctx.config.update(mutate)

    print(f"Alias '{alias}' set as default.")


def remove_alias(ctx: AppContext, alias: str) -> bool:
    """
    Remove an alias, clearing the default if it pointed there.

    Returns:
        True if the alias existed
    """
    def mutate(settings: Settings):
        existed = settings.addresses.pop(alias, None) is not None
        was_default = settings.default_alias == alias
        if was_default:
            settings.default_alias = None
        return existed, was_default

    existed, was_default = ctx.config.update(mutate)

    if existed:
        print(f"Alias '{alias}' removed.")
        if was_default:
            print(f"Note: '{alias}' was the default alias. Default alias is now unset.")
    else:
        print(f"Alias '{alias}' not found.")
    return existed
