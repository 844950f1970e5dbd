"""Core components for app-publisher"""

from .bundler import create_bundle, cleanup_bundle, scan_directory
from .exclusion import should_exclude
from .job_registry import JobRegistry

__all__ = [
    "create_bundle",
    "cleanup_bundle",
    "scan_directory",
    "should_exclude",
    "JobRegistry",
]
