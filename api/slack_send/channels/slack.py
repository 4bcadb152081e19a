"""Slack Web API adapter (chat.postMessage)."""

import json

from slack_send.channels import ChannelPayload

POST_MESSAGE_PATH = "/api/chat.postMessage"


def format_post_message(
    text: str,
    channel: str,
    base_url: str,
    authorization: str,
    user_agent: str,
) -> ChannelPayload:
    """
    Format a chat.postMessage call.

    ``base_url`` has no trailing slash; ``authorization`` is the full header value.
    """
    return ChannelPayload(
        method="POST",
        url=f"{base_url}{POST_MESSAGE_PATH}",
        headers={
            "Authorization": authorization,
            "Content-Type": "application/json",
            "User-Agent": user_agent,
        },
        body=json.dumps({"text": text, "channel": channel}),
    )
