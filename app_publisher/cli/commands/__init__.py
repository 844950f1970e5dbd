"""CLI commands"""

from . import bundle
from . import publish
from . import jobs
from . import diagnostics

__all__ = [
    "bundle",
    "publish",
    "jobs",
    "diagnostics",
]
