"""Resolve the Authorization header for Slack Web API calls.

Credentials are picked from the execution context once per invocation.

Priority:
  1. Bearer token (BEARER_AUTH_TOKEN)
  2. Basic auth (BASIC_USERNAME + BASIC_PASSWORD)
  3. OAuth2 authorization-code access token (OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN)
  4. OAuth2 client credentials (OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET + env config),
     exchanged for an access token at the token endpoint
"""

import base64
import json
import logging
from dataclasses import dataclass
from typing import Optional, Union

import httpx

from slack_send.errors import AuthExchangeError, ConfigurationError
from slack_send.schemas.message import ExecutionContext

logger = logging.getLogger(__name__)

IN_PARAMS_AUTH_STYLE = "InParams"


@dataclass(frozen=True)
class BearerToken:
    token: str


@dataclass(frozen=True)
class BasicAuth:
    username: str
    password: str


@dataclass(frozen=True)
class AuthorizationCodeToken:
    access_token: str


@dataclass(frozen=True)
class ClientCredentials:
    token_url: str
    client_id: str
    client_secret: str
    scope: Optional[str] = None
    audience: Optional[str] = None
    # "InParams" sends client_id/client_secret in the form body, anything else as Basic
    auth_style: Optional[str] = None


Credentials = Union[BearerToken, BasicAuth, AuthorizationCodeToken, ClientCredentials]


def select_credentials(context: ExecutionContext) -> Credentials:
    """Pick the credential scheme configured in the context, by fixed priority."""
    env = context.environment
    secrets = context.secrets

    if secrets.get("BEARER_AUTH_TOKEN"):
        return BearerToken(secrets["BEARER_AUTH_TOKEN"])

    if secrets.get("BASIC_USERNAME") and secrets.get("BASIC_PASSWORD"):
        return BasicAuth(secrets["BASIC_USERNAME"], secrets["BASIC_PASSWORD"])

    if secrets.get("OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN"):
        return AuthorizationCodeToken(secrets["OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN"])

    if secrets.get("OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET"):
        token_url = env.get("OAUTH2_CLIENT_CREDENTIALS_TOKEN_URL")
        client_id = env.get("OAUTH2_CLIENT_CREDENTIALS_CLIENT_ID")
        if not token_url or not client_id:
            raise ConfigurationError(
                "OAuth2 Client Credentials flow requires TOKEN_URL and CLIENT_ID in env"
            )
        return ClientCredentials(
            token_url=token_url,
            client_id=client_id,
            client_secret=secrets["OAUTH2_CLIENT_CREDENTIALS_CLIENT_SECRET"],
            scope=env.get("OAUTH2_CLIENT_CREDENTIALS_SCOPE"),
            audience=env.get("OAUTH2_CLIENT_CREDENTIALS_AUDIENCE"),
            auth_style=env.get("OAUTH2_CLIENT_CREDENTIALS_AUTH_STYLE"),
        )

    raise ConfigurationError(
        "No authentication configured. Provide one of: "
        "BEARER_AUTH_TOKEN, BASIC_USERNAME/BASIC_PASSWORD, "
        "OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN, or OAUTH2_CLIENT_CREDENTIALS_*"
    )


async def authorization_header(
    credentials: Credentials,
    client: httpx.AsyncClient,
    user_agent: str,
) -> str:
    """Render credentials as an Authorization header value."""
    if isinstance(credentials, BearerToken):
        return _bearer(credentials.token)
    elif isinstance(credentials, BasicAuth):
        return _basic(credentials.username, credentials.password)
    elif isinstance(credentials, AuthorizationCodeToken):
        return _bearer(credentials.access_token)
    elif isinstance(credentials, ClientCredentials):
        token = await fetch_client_credentials_token(credentials, client, user_agent)
        return f"Bearer {token}"
    else:
        raise ConfigurationError(f"Unknown credential scheme: {type(credentials).__name__}")


async def resolve_authorization(
    context: ExecutionContext,
    client: httpx.AsyncClient,
    user_agent: str,
) -> str:
    credentials = select_credentials(context)
    logger.debug("Using %s credentials", type(credentials).__name__)
    return await authorization_header(credentials, client, user_agent)


async def fetch_client_credentials_token(
    credentials: ClientCredentials,
    client: httpx.AsyncClient,
    user_agent: str,
) -> str:
    """Exchange client credentials for an access token (RFC 6749 section 4.4)."""
    form = {"grant_type": "client_credentials"}
    if credentials.scope:
        form["scope"] = credentials.scope
    if credentials.audience:
        form["audience"] = credentials.audience

    headers = {
        "Content-Type": "application/x-www-form-urlencoded",
        "Accept": "application/json",
        "User-Agent": user_agent,
    }

    if credentials.auth_style == IN_PARAMS_AUTH_STYLE:
        form["client_id"] = credentials.client_id
        form["client_secret"] = credentials.client_secret
    else:
        headers["Authorization"] = _basic(credentials.client_id, credentials.client_secret)

    resp = await client.post(credentials.token_url, data=form, headers=headers)

    if not resp.is_success:
        try:
            error_text = json.dumps(resp.json())
        except ValueError:
            error_text = resp.text
        raise AuthExchangeError(
            f"OAuth2 token request failed: {resp.status_code} {resp.reason_phrase} - {error_text}",
            status=resp.status_code,
        )

    try:
        data = resp.json()
    except ValueError:
        data = None

    token = data.get("access_token") if isinstance(data, dict) else None
    if not token:
        raise AuthExchangeError("No access_token in OAuth2 response", status=resp.status_code)

    logger.info("Obtained OAuth2 access token from %s", credentials.token_url)
    return token


def _bearer(token: str) -> str:
    return token if token.startswith("Bearer ") else f"Bearer {token}"


def _basic(username: str, password: str) -> str:
    encoded = base64.b64encode(f"{username}:{password}".encode()).decode()
    return f"Basic {encoded}"
