"""Bundle exclusion policy"""

import re

from ..constants import EXCLUDED_DIRECTORIES, EXCLUDED_FILE_PATTERNS

_SEPARATORS = re.compile(r"[\\/]")


def split_segments(relative_path: str) -> list:
    """Split a relative path on both forward and back slashes"""
    return [part for part in _SEPARATORS.split(relative_path) if part]


def is_excluded_file_name(name: str) -> bool:
    """Check a basename against the excluded file patterns"""
    return any(pattern.fullmatch(name) for pattern in EXCLUDED_FILE_PATTERNS)


def should_exclude(relative_path: str, is_directory: bool) -> bool:
    """
    Decide whether a path is left out of the bundle

    A path is excluded when any of its segments is an excluded directory
    name, or, for files, when its basename matches an excluded pattern.
    Matching is always against whole segments, so ``git-utils.ts`` or
    ``src/node-modules-utils.ts`` stay in.

    Args:
        relative_path: Path relative to the bundle root, either separator
        is_directory: Whether the entry is a directory

    Returns:
        True if the entry must not be bundled
    """
    segments = split_segments(relative_path)
    if not segments:
        return False

    if any(segment in EXCLUDED_DIRECTORIES for segment in segments):
        return True

    if not is_directory and is_excluded_file_name(segments[-1]):
        return True

    return False
