"""Data models for app-publisher"""

from .bundle import BundleInfo, BundlePhase, BundleProgress
from .config import BrokerConfig, ConfigSource, PublishSettings
from .publish import (
    PublishStatus,
    TERMINAL_STATUSES,
    STATUS_PROGRESSION,
    VALID_TRANSITIONS,
    StartRequest,
    StartResponse,
    StatusResponse,
    CancelResponse,
    PublishJob,
    PublishStartResult,
    CleanupWarning,
    PublishDiagnostics,
)

__all__ = [
    # Bundle models
    "BundleInfo",
    "BundlePhase",
    "BundleProgress",

    # Config models
    "BrokerConfig",
    "ConfigSource",
    "PublishSettings",

    # Publish models
    "PublishStatus",
    "TERMINAL_STATUSES",
    "STATUS_PROGRESSION",
    "VALID_TRANSITIONS",
    "StartRequest",
    "StartResponse",
    "StatusResponse",
    "CancelResponse",
    "PublishJob",
    "PublishStartResult",
    "CleanupWarning",
    "PublishDiagnostics",
]
