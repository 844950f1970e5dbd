"""Utility functions for app-publisher"""

from .async_utils import run_async, run_blocking
from .file_utils import ensure_parent, format_size, get_file_size, remove_if_exists
from .hash_utils import calculate_sha256, fingerprint_secret

__all__ = [
    "run_async",
    "run_blocking",
    "ensure_parent",
    "format_size",
    "get_file_size",
    "remove_if_exists",
    "calculate_sha256",
    "fingerprint_secret",
]
