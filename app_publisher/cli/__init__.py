"""Command line interface for app-publisher"""

from .main import cli, main

__all__ = ["cli", "main"]
