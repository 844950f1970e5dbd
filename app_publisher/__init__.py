"""App Publisher - bundle an app directory and publish it through a broker.

Without a configured broker, publishing is simulated in-process and a
finished job points at the local app directory.
"""

from .__version__ import __version__, __version_info__, __author__, __license__

# Core API
from .core.bundler import create_bundle, cleanup_bundle
from .core.exclusion import should_exclude
from .core.job_registry import JobRegistry
from .services.config_service import ConfigService
from .services.publish_service import PublishService

# Transports
from .transport import PublishTransport, HttpTransport, StubTransport, TransportFactory

# Data models
from .models import (
    BundleInfo,
    BrokerConfig,
    PublishStatus,
    StatusResponse,
    CancelResponse,
    PublishStartResult,
    PublishDiagnostics,
)

# Exceptions
from .api.exceptions import (
    PublisherError,
    ConfigError,
    BundlingError,
    TransportError,
    TransportStartError,
    InvalidRequestError,
    UploadError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__license__",

    # Core API
    "create_bundle",
    "cleanup_bundle",
    "should_exclude",
    "JobRegistry",
    "ConfigService",
    "PublishService",

    # Transports
    "PublishTransport",
    "HttpTransport",
    "StubTransport",
    "TransportFactory",

    # Data models
    "BundleInfo",
    "BrokerConfig",
    "PublishStatus",
    "StatusResponse",
    "CancelResponse",
    "PublishStartResult",
    "PublishDiagnostics",

    # Exceptions
    "PublisherError",
    "ConfigError",
    "BundlingError",
    "TransportError",
    "TransportStartError",
    "InvalidRequestError",
    "UploadError",
]
