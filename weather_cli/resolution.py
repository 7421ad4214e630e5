"""
Resolution of CLI input against stored settings.

Both functions are pure in their inputs (a settings snapshot and what the
user typed) apart from warnings. Every failure is raised before any network
call is made.
"""

import logging
import sys
from typing import Optional, Tuple

from weather_cli.errors import MissingCredentialError, NoAddressSpecifiedError, UnknownProviderError
from weather_cli.models import Settings
from weather_cli.providers import Provider

logger = logging.getLogger(__name__)


def resolve_provider(settings: Settings, provider_input: Optional[str] = None) -> Tuple[Provider, Optional[str]]:
    """
    Decide which provider to use and fetch its API key.

    Order: explicit input, then settings.default_provider, then the offline
    mock. A stored default that no longer parses is skipped with a warning.

    Raises:
        UnknownProviderError: Explicit input names no known provider
        MissingCredentialError: Provider needs a key and none is stored
    """
    if provider_input is not None:
        provider = Provider.parse(provider_input)
    elif settings.default_provider is not None:
        try:
            provider = Provider.parse(settings.default_provider)
        except UnknownProviderError:
            logger.warning(
                f"[resolve_provider] Stored default provider {settings.default_provider!r} "
                f"is not known, using {Provider.MOCK}"
            )
            provider = Provider.MOCK
    else:
        provider = Provider.MOCK

    api_key = settings.provider_key(provider.id)

    if not provider.is_offline and api_key is None:
        raise MissingCredentialError(
            f"API key not found for provider '{provider}'. Please configure it first: "
            f"'weather provider {provider.id} --key <API_KEY>'"
        )

    logger.debug(f"[resolve_provider] Using {provider} ({provider.id})")
    return provider, api_key


def resolve_address(settings: Settings, address_input: Optional[str] = None) -> str:
    """
    Turn an alias, a literal address or nothing into the address to query.

    - Input given: the mapped address if it is an alias, else the input as-is
    - No input: the default alias's address

    Raises:
        NoAddressSpecifiedError: No input and no usable default alias
    """
    addresses = settings.addresses

    if address_input is not None:
        if address_input in addresses:
            return addresses[address_input]
        return address_input

    default_alias = settings.default_alias
    if default_alias is not None:
        if default_alias in addresses:
            return addresses[default_alias]
        logger.info(f"[resolve_address] Default alias {default_alias!r} points to no saved address")
        print(
            f"Default alias '{default_alias}' is set but not found in saved aliases.",
            file=sys.stderr,
        )

    raise NoAddressSpecifiedError(
        "No address specified and no default address alias found. "
        "Use 'weather get <LOCATION>' or set a default alias."
    )


__all__ = ["resolve_provider", "resolve_address"]
