"""Bundle data models"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class BundlePhase(Enum):
    """Bundler progress phases"""
    SCANNING = "scanning"
    ARCHIVING = "archiving"
    HASHING = "hashing"
    COMPLETE = "complete"


@dataclass(frozen=True)
class BundleProgress:
    """Progress event emitted by the bundler"""

    phase: BundlePhase
    files_processed: int = 0
    total_files: int = 0
    current_file: Optional[str] = None


@dataclass(frozen=True)
class BundleInfo:
    """Result of bundling a source directory

    Attributes:
        content_hash: Lower-case hex SHA-256 of the archive bytes
        size_bytes: Archive file size on disk
        file_count: Number of entries written to the archive
        archive_path: Location of the archive
    """

    content_hash: str
    size_bytes: int
    file_count: int
    archive_path: Path

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "content_hash": self.content_hash,
            "size_bytes": self.size_bytes,
            "file_count": self.file_count,
            "archive_path": str(self.archive_path),
        }
