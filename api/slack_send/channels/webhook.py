"""Slack incoming-webhook adapter."""

import json

from slack_send.channels import ChannelPayload

# Incoming webhooks answer with this plain-text body when the message was accepted
WEBHOOK_ACK_BODY = "ok"


def format_webhook(text: str, webhook_url: str, user_agent: str) -> ChannelPayload:
    """
    Format a message for a Slack incoming webhook.

    The URL already identifies workspace and channel, so only the text is sent.
    """
    return ChannelPayload(
        method="POST",
        url=webhook_url,
        headers={
            "Content-Type": "application/json",
            "User-Agent": user_agent,
        },
        body=json.dumps({"text": text}),
    )


def is_acknowledged(response_text: str) -> bool:
    return response_text == WEBHOOK_ACK_BODY
