"""Map a send failure to a retry decision.

Errors raised by this package carry their kind (HTTP status, Slack error
code), so they are classified on that. Errors reported back by the execution
framework only carry a message and are matched on conventional tokens.
"""

import enum
import logging

from slack_send.errors import (
    AuthExchangeError,
    ConfigurationError,
    PlatformError,
    RetryFailedError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class Classification(str, enum.Enum):
    RETRY_NOW = "retry_now"
    RETRY_REQUESTED = "retry_requested"
    FATAL = "fatal"


RATE_LIMIT_STATUS = 429
RETRYABLE_STATUSES = {502, 503, 504}
FATAL_STATUSES = {401, 403}
FATAL_PLATFORM_CODES = {"invalid_auth", "channel_not_found"}

_RATE_LIMIT_TOKENS = ("429",)
_RETRYABLE_TOKENS = ("502", "503", "504")
_FATAL_TOKENS = ("401", "403", "invalid_auth", "channel_not_found", "is required")


def classify(error: BaseException) -> Classification:
    if isinstance(error, (ValidationError, ConfigurationError, AuthExchangeError)):
        return Classification.FATAL

    if isinstance(error, TransportError):
        return classify_status(error.status)

    if isinstance(error, PlatformError):
        if error.code in FATAL_PLATFORM_CODES:
            return Classification.FATAL
        return Classification.RETRY_REQUESTED

    # Already retried once in-process; leave further attempts to the caller
    if isinstance(error, RetryFailedError):
        return Classification.RETRY_REQUESTED

    return classify_message(str(error))


def classify_status(status: int) -> Classification:
    if status == RATE_LIMIT_STATUS:
        return Classification.RETRY_NOW
    if status in RETRYABLE_STATUSES:
        return Classification.RETRY_REQUESTED
    if status in FATAL_STATUSES:
        return Classification.FATAL
    return Classification.RETRY_REQUESTED


def classify_message(message: str) -> Classification:
    if any(token in message for token in _RATE_LIMIT_TOKENS):
        return Classification.RETRY_NOW
    if any(token in message for token in _RETRYABLE_TOKENS):
        return Classification.RETRY_REQUESTED
    if any(token in message for token in _FATAL_TOKENS):
        return Classification.FATAL
    return Classification.RETRY_REQUESTED
