"""CLI utilities"""

from .output import (
    console,
    format_bundle_info,
    format_error,
    format_status,
    format_diagnostics,
    format_broker_status,
)

__all__ = [
    "console",
    "format_bundle_info",
    "format_error",
    "format_status",
    "format_diagnostics",
    "format_broker_status",
]
