"""Resolve the target URL for a send."""

from typing import Mapping, Optional

from slack_send.errors import ConfigurationError

ADDRESS_ENV_KEY = "ADDRESS"


def resolve_address(address: Optional[str], environment: Mapping[str, str]) -> str:
    """
    Return the explicit address, else the ADDRESS environment value.

    One trailing slash is stripped so callers can append API paths.
    """
    resolved = address or environment.get(ADDRESS_ENV_KEY)

    if not resolved:
        raise ConfigurationError(
            "No URL specified. Provide address parameter or ADDRESS environment variable"
        )

    return resolved[:-1] if resolved.endswith("/") else resolved
