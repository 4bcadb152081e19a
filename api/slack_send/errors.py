"""Error types for message delivery.

The dispatcher raises these and never classifies them itself; the error
handler in ``slack_send.classifier`` decides whether a failure is retried.
"""

from typing import Optional


class SlackSendError(Exception):
    """Base error for send failures."""

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(SlackSendError):
    """Raised when the text or channel inputs are missing or malformed."""


class ConfigurationError(SlackSendError):
    """Raised when no address or no credentials can be resolved."""


class TransportError(SlackSendError):
    """Raised when a webhook or API call returns a non-2xx status."""

    def __init__(self, message: str, status: int, reason: str = ""):
        super().__init__(message)
        self.status = status
        self.reason = reason


class PlatformError(SlackSendError):
    """Raised when Slack answers 2xx but reports ``ok: false`` in the body."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class AuthExchangeError(SlackSendError):
    """Raised when the OAuth2 client-credentials token exchange fails."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class RetryFailedError(SlackSendError):
    """Raised when the single retry after a rate limit fails as well."""


class ReportedError(SlackSendError):
    """A failure reported back by the execution framework, known only by its message."""


def from_report(
    type_name: Optional[str],
    message: str,
    status: Optional[int] = None,
    platform_code: Optional[str] = None,
) -> SlackSendError:
    """
    Rebuild an error that was serialized into the service's error envelope.

    Unknown or missing types, and transport errors without a status, come
    back as ReportedError and are classified on their message.
    """
    if type_name in _SIMPLE_ERRORS:
        return _SIMPLE_ERRORS[type_name](message)
    if type_name == "TransportError" and status is not None:
        return TransportError(message, status=status)
    if type_name == "PlatformError":
        return PlatformError(message, code=platform_code)
    if type_name == "AuthExchangeError":
        return AuthExchangeError(message, status=status)
    return ReportedError(message)


_SIMPLE_ERRORS = {
    "ValidationError": ValidationError,
    "ConfigurationError": ConfigurationError,
    "RetryFailedError": RetryFailedError,
}
