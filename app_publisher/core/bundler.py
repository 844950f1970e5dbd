# app_publisher/core/bundler.py
"""Bundle creation: scan, archive and hash an app directory"""

import logging
import os
import shutil
import zipfile
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..api.exceptions import BundlingError
from ..constants import (
    BUNDLE_COMPRESSION_LEVEL,
    BUNDLE_ENTRY_DATE_TIME,
    BUNDLE_FILE_MODE,
    HASH_CHUNK_SIZE,
)
from ..models.bundle import BundleInfo, BundlePhase, BundleProgress
from ..utils.file_utils import ensure_parent, get_file_size, remove_if_exists
from ..utils.hash_utils import calculate_sha256
from .exclusion import should_exclude

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[BundleProgress], None]


def scan_directory(source_dir: Path) -> List[Tuple[str, Path]]:
    """
    Recursively collect the files to bundle

    Entries are visited in name order so two scans of an unchanged tree
    produce the same list. Symlinks are skipped.

    Args:
        source_dir: Bundle root

    Returns:
        List of (POSIX relative path, absolute path) pairs
    """
    results = []
    pending = [source_dir]

    while pending:
        current = pending.pop()
        with os.scandir(current) as it:
            entries = sorted(it, key=lambda e: e.name)

        subdirs = []
        for entry in entries:
            full_path = Path(entry.path)
            relative_path = full_path.relative_to(source_dir).as_posix()
            is_dir = entry.is_dir(follow_symlinks=False)

            if should_exclude(relative_path, is_dir):
                continue

            if is_dir:
                subdirs.append(full_path)
            elif entry.is_file(follow_symlinks=False):
                results.append((relative_path, full_path))

        pending.extend(subdirs)

    results.sort(key=lambda item: item[0])
    return results


def _make_entry(relative_path: str) -> zipfile.ZipInfo:
    """Archive entry with normalized metadata"""
    info = zipfile.ZipInfo(relative_path, date_time=BUNDLE_ENTRY_DATE_TIME)
    info.external_attr = BUNDLE_FILE_MODE << 16
    info.create_system = 3  # Unix, so the mode bits are honoured everywhere
    info.compress_type = zipfile.ZIP_DEFLATED
    # ZipFile.open does not apply the archive compresslevel to a prebuilt ZipInfo
    info._compresslevel = BUNDLE_COMPRESSION_LEVEL
    return info


def create_bundle(source_dir: Path,
                  output_path: Path,
                  on_progress: Optional[ProgressCallback] = None) -> BundleInfo:
    """
    Create a zip bundle of an app directory

    Entry timestamps and permissions are normalized, so bundling an
    unchanged tree twice yields identical bytes and the same hash.

    Args:
        source_dir: Directory to bundle
        output_path: Archive file to create
        on_progress: Optional progress callback

    Returns:
        BundleInfo describing the archive

    Raises:
        BundlingError: Source unreadable, output uncreatable or write failure
    """
    source_dir = Path(source_dir)
    output_path = Path(output_path)

    def report(phase: BundlePhase, processed: int = 0, total: int = 0,
               current: Optional[str] = None) -> None:
        if on_progress:
            on_progress(BundleProgress(phase, processed, total, current))

    logger.info(f"Creating bundle from {source_dir} to {output_path}")

    # Phase 1: scan
    report(BundlePhase.SCANNING)

    if not source_dir.is_dir():
        raise BundlingError(f"Source directory not found: {source_dir}")

    try:
        files = scan_directory(source_dir)
    except OSError as e:
        raise BundlingError(f"Cannot read source directory {source_dir}: {e}") from e

    total = len(files)
    logger.info(f"Found {total} files to bundle")

    # Phase 2: archive
    report(BundlePhase.ARCHIVING, 0, total)

    try:
        ensure_parent(output_path)
    except OSError as e:
        raise BundlingError(f"Cannot create bundle directory {output_path.parent}: {e}") from e

    try:
        with zipfile.ZipFile(output_path, "w",
                             compression=zipfile.ZIP_DEFLATED,
                             compresslevel=BUNDLE_COMPRESSION_LEVEL) as archive:
            for processed, (relative_path, full_path) in enumerate(files, 1):
                entry = _make_entry(relative_path)
                with full_path.open("rb") as src:
                    entry.file_size = os.fstat(src.fileno()).st_size
                    with archive.open(entry, "w") as dst:
                        shutil.copyfileobj(src, dst, HASH_CHUNK_SIZE)
                report(BundlePhase.ARCHIVING, processed, total, relative_path)
    except (OSError, zipfile.BadZipFile, ValueError) as e:
        # The archive handle is closed by now; drop the partial file
        try:
            remove_if_exists(output_path)
        except OSError:
            logger.warning(f"Could not remove partial bundle: {output_path}")
        raise BundlingError(f"Failed to write bundle {output_path}: {e}") from e

    # Phase 3: hash the finished archive
    report(BundlePhase.HASHING, total, total)

    try:
        content_hash = calculate_sha256(output_path)
        size_bytes = get_file_size(output_path)
    except OSError as e:
        raise BundlingError(f"Failed to read bundle {output_path}: {e}") from e

    bundle_info = BundleInfo(
        content_hash=content_hash,
        size_bytes=size_bytes,
        file_count=total,
        archive_path=output_path,
    )

    logger.info(
        f"Bundle created: {total} files, {size_bytes} bytes, hash={content_hash[:16]}..."
    )

    report(BundlePhase.COMPLETE, total, total)
    return bundle_info


def cleanup_bundle(bundle_path: Path) -> bool:
    """
    Delete a bundle file

    Args:
        bundle_path: Archive to delete

    Returns:
        True if deleted, False if it was already gone

    Raises:
        OSError: Deletion failed for another reason (e.g. permissions)
    """
    removed = remove_if_exists(Path(bundle_path))
    if removed:
        logger.info(f"Cleaned up bundle: {bundle_path}")
    return removed
