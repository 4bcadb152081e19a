"""Message dispatcher: invoke, error and halt entry points."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, Union

import httpx

from slack_send.address import resolve_address
from slack_send.auth import resolve_authorization
from slack_send.channels.slack import format_post_message
from slack_send.channels.webhook import format_webhook, is_acknowledged
from slack_send.classifier import Classification, classify
from slack_send.client import http_client, send_payload
from slack_send.config import Settings, settings
from slack_send.errors import PlatformError, RetryFailedError, TransportError, ValidationError
from slack_send.schemas.message import (
    ApiSendResult,
    ExecutionContext,
    HaltResult,
    RetryRequested,
    SendRequest,
    SendResult,
    WebhookSendResult,
)

logger = logging.getLogger(__name__)

TEXT_REQUIRED_MESSAGE = "text parameter is required and cannot be empty"
CHANNEL_REQUIRED_MESSAGE = "channel parameter is required for API mode"


class Dispatcher:
    """
    Sends one Slack message per ``invoke`` call.

    ``transport`` replaces the network layer of every HTTP client this
    dispatcher opens; ``sleep`` is awaited before the rate-limit retry.
    """

    def __init__(
        self,
        config: Settings = settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.config = config
        self._transport = transport
        self._sleep = sleep

    def _client(self) -> httpx.AsyncClient:
        return http_client(timeout=self.config.http_timeout, transport=self._transport)

    async def invoke(self, request: SendRequest, context: ExecutionContext) -> SendResult:
        logger.info("Starting Slack send message action")

        text = request.text
        if not text or not text.strip():
            raise ValidationError(TEXT_REQUIRED_MESSAGE)
        if len(text) > self.config.max_text_length:
            raise ValidationError(
                f"text parameter cannot exceed {self.config.max_text_length} characters"
            )

        logger.info("Using %s mode", request.mode)
        async with self._client() as client:
            if request.mode == "webhook":
                return await self._send_webhook(client, request, context)
            return await self._send_api(client, request, context)

    async def _send_webhook(
        self,
        client: httpx.AsyncClient,
        request: SendRequest,
        context: ExecutionContext,
    ) -> WebhookSendResult:
        webhook_url = resolve_address(request.address, context.environment)
        payload = format_webhook(request.text, webhook_url, self.config.user_agent)

        resp = await send_payload(client, payload)
        if not resp.is_success:
            raise TransportError(
                f"Webhook request failed: {resp.status_code} {resp.reason_phrase}",
                status=resp.status_code,
                reason=resp.reason_phrase,
            )

        ok = is_acknowledged(resp.text)
        if not ok:
            logger.warning("Webhook accepted message but answered %r", resp.text[:200])

        logger.info("Message sent via webhook. Status: %s", resp.status_code)
        return WebhookSendResult(text=request.text, ok=ok)

    async def _send_api(
        self,
        client: httpx.AsyncClient,
        request: SendRequest,
        context: ExecutionContext,
    ) -> ApiSendResult:
        channel = request.channel
        if not channel or not channel.strip():
            raise ValidationError(CHANNEL_REQUIRED_MESSAGE)

        authorization = await resolve_authorization(context, client, self.config.user_agent)
        api_url = resolve_address(request.address, context.environment)
        payload = format_post_message(
            request.text, channel, api_url, authorization, self.config.user_agent
        )

        resp = await send_payload(client, payload)
        if not resp.is_success:
            raise TransportError(
                f"Slack API request failed: {resp.status_code} {resp.reason_phrase}",
                status=resp.status_code,
                reason=resp.reason_phrase,
            )

        try:
            result = resp.json()
        except ValueError:
            result = None
        if not isinstance(result, dict):
            result = {}

        if not result.get("ok"):
            code = result.get("error")
            raise PlatformError(f"Slack API error: {code or 'Unknown error'}", code=code)

        ts = result.get("ts")
        logger.info("Message sent via API to channel %s. Timestamp: %s", channel, ts)
        return ApiSendResult(text=request.text, channel=channel, ts=ts, ok=True)

    async def error(
        self,
        request: SendRequest,
        context: ExecutionContext,
        error: BaseException,
    ) -> Union[SendResult, RetryRequested]:
        """
        Handle a failed invoke.

        A rate limit is retried once here after a fixed pause. Fatal errors are
        re-raised unchanged; everything else is handed back for the caller's
        own backoff.
        """
        decision = classify(error)
        logger.info("Classified error as %s: %s", decision.value, error)

        if decision is Classification.RETRY_NOW:
            logger.warning(
                "Rate limited, retrying once in %s seconds", self.config.rate_limit_retry_delay
            )
            await self._sleep(self.config.rate_limit_retry_delay)
            try:
                return await self.invoke(request, context)
            except Exception as exc:
                raise RetryFailedError(f"Retry after rate limit failed: {exc}") from exc

        if decision is Classification.FATAL:
            raise error

        return RetryRequested()

    async def halt(self, reason: Optional[str], context: Optional[ExecutionContext] = None) -> HaltResult:
        logger.info("Slack send message action halted: %s", reason)
        return HaltResult(reason=reason, halted_at=datetime.now(timezone.utc))
