"""Pydantic schemas for send requests, execution context and results."""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


class SendRequest(BaseModel):
    text: Optional[str] = Field(None, description="Message text to send (required)")
    channel: Optional[str] = Field(
        None, description="Channel name or ID. Required in API mode, ignored for webhooks."
    )
    is_webhook: bool = Field(
        False,
        alias="isWebhook",
        description="POST to an incoming-webhook URL instead of chat.postMessage",
    )
    address: Optional[str] = Field(
        None,
        description="Webhook URL or Slack API base URL. Falls back to the ADDRESS environment key.",
    )

    model_config = {"populate_by_name": True}

    @property
    def mode(self) -> str:
        return "webhook" if self.is_webhook else "api"


class ExecutionContext(BaseModel):
    """Environment and secrets handed over by the execution framework."""

    environment: dict[str, str] = Field(default_factory=dict)
    secrets: dict[str, str] = Field(default_factory=dict)


class WebhookSendResult(BaseModel):
    status: Literal["success"] = "success"
    text: str
    ok: bool = Field(..., description="Whether the webhook acknowledged with a literal 'ok'")
    mode: Literal["webhook"] = "webhook"


class ApiSendResult(BaseModel):
    status: Literal["success"] = "success"
    text: str
    channel: str
    ts: Optional[str] = Field(None, description="Slack message timestamp")
    ok: bool
    mode: Literal["api"] = "api"


SendResult = Union[WebhookSendResult, ApiSendResult]


class RetryRequested(BaseModel):
    status: Literal["retry_requested"] = "retry_requested"


class HaltResult(BaseModel):
    status: Literal["halted"] = "halted"
    reason: Optional[str] = None
    halted_at: datetime
