"""Request payloads for the two Slack delivery modes."""

from dataclasses import dataclass


@dataclass
class ChannelPayload:
    """Represents the HTTP request payload for a Slack delivery."""
    method: str
    url: str
    headers: dict[str, str]
    body: str  # JSON string
