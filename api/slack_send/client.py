"""HTTP client factory for outbound Slack calls."""

from typing import Optional

import httpx


def http_client(
    timeout: float = 15,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout, transport=transport)


async def send_payload(client: httpx.AsyncClient, payload) -> httpx.Response:
    """Issue the request described by a ChannelPayload."""
    return await client.request(
        method=payload.method,
        url=payload.url,
        headers=payload.headers,
        content=payload.body,
    )
