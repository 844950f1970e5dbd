"""Publish transports for app-publisher"""

from .base import PublishTransport, get_status_message
from .factory import TransportFactory
from .http import HttpTransport, classify_error
from .stub import StubTransport, simulate, local_file_url

__all__ = [
    "PublishTransport",
    "get_status_message",
    "TransportFactory",
    "HttpTransport",
    "classify_error",
    "StubTransport",
    "simulate",
    "local_file_url",
]
