"""Request bodies for the invoke / error / halt endpoints."""

from typing import Optional

from pydantic import BaseModel, Field

from slack_send.schemas.message import ExecutionContext, SendRequest


class InvokeRequest(BaseModel):
    params: SendRequest
    context: ExecutionContext = Field(default_factory=ExecutionContext)


class ErrorReport(BaseModel):
    """A failure as returned in the ``error`` object of a failed invoke."""

    message: str = Field(..., description="Message of the failure being reported")
    type: Optional[str] = Field(
        None, description="Error type from the envelope, e.g. ConfigurationError"
    )
    status: Optional[int] = Field(None, description="Upstream HTTP status, if any")
    platform_code: Optional[str] = Field(None, description="Slack error code, if any")


class ErrorRequest(BaseModel):
    params: SendRequest = Field(
        default_factory=SendRequest,
        description="Original invoke params, replayed when a rate-limited send is retried",
    )
    context: ExecutionContext = Field(default_factory=ExecutionContext)
    error: ErrorReport


class HaltRequest(BaseModel):
    reason: Optional[str] = None
    context: ExecutionContext = Field(default_factory=ExecutionContext)
