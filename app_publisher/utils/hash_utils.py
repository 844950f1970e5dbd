"""Hash calculation utilities"""

import hashlib
from pathlib import Path

from ..constants import HASH_CHUNK_SIZE, FINGERPRINT_LENGTH


def calculate_sha256(file_path: Path, chunk_size: int = HASH_CHUNK_SIZE) -> str:
    """
    Calculate SHA256 hash of file

    Args:
        file_path: Path to file
        chunk_size: Read chunk size

    Returns:
        Lower-case hex digest string
    """
    sha256_hash = hashlib.sha256()

    with open(file_path, 'rb') as f:
        while chunk := f.read(chunk_size):
            sha256_hash.update(chunk)

    return sha256_hash.hexdigest()


def fingerprint_secret(secret: str, length: int = FINGERPRINT_LENGTH) -> str:
    """
    Short one-way fingerprint of a secret, safe to show in diagnostics

    Args:
        secret: Secret value (e.g. device token)
        length: Number of hex characters to keep

    Returns:
        Truncated SHA256 hex digest
    """
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()[:length]
