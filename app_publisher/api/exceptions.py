"""Exception definitions for app-publisher"""

from typing import Any, Dict, Optional

from ..constants import ErrorCode, BROKER_MISCONFIGURED_CODE


class PublisherError(Exception):
    """Base exception for app-publisher"""

    def __init__(self, message: str, error_code: str = None, hint: str = None):
        super().__init__(message)
        self.error_code = error_code
        self.hint = hint


class ConfigError(PublisherError):
    """Configuration error (missing broker URL or device credential)"""

    def __init__(self, message: str, hint: str = None):
        super().__init__(message, ErrorCode.CONFIG_ERROR, hint)


class BundlingError(PublisherError):
    """Source directory unreadable, output path uncreatable or archive writer failure"""

    def __init__(self, message: str):
        super().__init__(
            message,
            ErrorCode.BUNDLING_FAILED,
            "Check that the app directory exists and the bundle directory is writable",
        )


class TransportError(PublisherError):
    """Base class for errors raised while talking to a publish transport"""
    pass


class BrokerConnectionError(TransportError):
    """The broker could not be reached at all"""

    def __init__(self, message: str):
        super().__init__(
            message,
            ErrorCode.BROKER_UNREACHABLE,
            "Check your network connection and the configured broker URL",
        )


class InvalidRequestError(TransportError):
    """An outgoing request body failed validation and was not sent"""

    def __init__(self, message: str):
        super().__init__(
            message,
            ErrorCode.INVALID_REQUEST,
            "Check the app id and bundle before publishing again",
        )


class TransportStartError(TransportError):
    """Broker rejected a request with a non-2xx response

    Attributes:
        status_code: HTTP status code
        status_text: HTTP reason phrase
        response_body: Raw response body (never exposed in diagnostics)
        broker_error_code: Structured error code parsed from the body, if any
    """

    default_code = ErrorCode.UNKNOWN_BROKER_ERROR
    default_hint = "Retry later; contact support if the problem persists"

    def __init__(self,
                 message: str,
                 status_code: Optional[int] = None,
                 status_text: str = "",
                 response_body: Optional[str] = None,
                 broker_error_code: Optional[str] = None,
                 hint: Optional[str] = None):
        super().__init__(message, self.default_code, hint or self.default_hint)
        self.status_code = status_code
        self.status_text = status_text
        self.response_body = response_body
        self.broker_error_code = broker_error_code

    def is_auth_error(self) -> bool:
        return self.status_code == 401

    def is_broker_misconfigured(self) -> bool:
        return self.status_code == 503 and self.broker_error_code == BROKER_MISCONFIGURED_CODE

    def get_diagnostics(self) -> Dict[str, Any]:
        """Diagnostics-safe view; the response body may contain secrets"""
        return {
            "status_code": self.status_code,
            "status_text": self.status_text,
            "message": str(self),
        }


class AuthenticationFailed(TransportStartError):
    default_code = ErrorCode.AUTHENTICATION_FAILED
    default_hint = "Check device token configuration"


class AccessDenied(TransportStartError):
    default_code = ErrorCode.ACCESS_DENIED
    default_hint = "This device is not allowed to publish this app; check its permissions on the broker"


class NotFound(TransportStartError):
    default_code = ErrorCode.NOT_FOUND
    default_hint = "Check the broker URL; the publish endpoint was not found"


class RateLimited(TransportStartError):
    default_code = ErrorCode.RATE_LIMITED
    default_hint = "Too many publish requests; wait a minute and try again"


class BrokerMisconfigured(TransportStartError):
    default_code = ErrorCode.BROKER_MISCONFIGURED
    default_hint = "The hosting service is missing required configuration; contact the broker operator"


class ServiceUnavailable(TransportStartError):
    default_code = ErrorCode.SERVICE_UNAVAILABLE
    default_hint = "The hosting service is temporarily unavailable; try again shortly"


class ProtocolError(TransportStartError):
    """Broker response did not match the expected schema"""

    default_code = ErrorCode.PROTOCOL_ERROR
    default_hint = "The broker returned an unexpected response; check client and broker versions"


class UnknownBrokerError(TransportStartError):
    default_code = ErrorCode.UNKNOWN_BROKER_ERROR


class UploadError(PublisherError):
    """Bundle was accepted by start but rejected during upload

    Attributes:
        job_id: Broker-side job created by the start call
        cause: Classified transport error, or the OSError raised while reading the archive
    """

    def __init__(self, message: str, job_id: str, cause: Optional[Exception] = None):
        hint = getattr(cause, "hint", None) or "Check your network connection and try publishing again"
        super().__init__(message, ErrorCode.UPLOAD_FAILED, hint)
        self.job_id = job_id
        self.cause = cause
