"""File operation utilities"""

import logging
from pathlib import Path


logger = logging.getLogger(__name__)


def get_file_size(file_path: Path) -> int:
    """
    Get file size in bytes

    Args:
        file_path: Path to file

    Returns:
        Size in bytes
    """
    return file_path.stat().st_size


def format_size(size: int) -> str:
    """
    Format file size in human-readable format

    Args:
        size: Size in bytes

    Returns:
        Formatted size string
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    return f"{size:.2f} PB"


def remove_if_exists(file_path: Path) -> bool:
    """
    Delete a file, treating an already-missing file as success

    Args:
        file_path: Path to delete

    Returns:
        True if the file was deleted, False if it was already absent

    Raises:
        OSError: Deletion failed for any other reason
    """
    try:
        file_path.unlink()
    except FileNotFoundError:
        logger.debug(f"Already absent: {file_path}")
        return False
    return True


def ensure_parent(file_path: Path) -> Path:
    """Create the parent directory of a file if needed"""
    parent = file_path.parent
    parent.mkdir(parents=True, exist_ok=True)
    return parent
