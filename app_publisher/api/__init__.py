"""Public exception API for app-publisher"""

from .exceptions import (
    PublisherError,
    ConfigError,
    BundlingError,
    TransportError,
    BrokerConnectionError,
    TransportStartError,
    AuthenticationFailed,
    AccessDenied,
    NotFound,
    RateLimited,
    BrokerMisconfigured,
    ServiceUnavailable,
    ProtocolError,
    UnknownBrokerError,
    UploadError,
)

__all__ = [
    "PublisherError",
    "ConfigError",
    "BundlingError",
    "TransportError",
    "BrokerConnectionError",
    "TransportStartError",
    "AuthenticationFailed",
    "AccessDenied",
    "NotFound",
    "RateLimited",
    "BrokerMisconfigured",
    "ServiceUnavailable",
    "ProtocolError",
    "UnknownBrokerError",
    "UploadError",
]
