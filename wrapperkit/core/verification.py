"""
Checksum verification for downloaded distribution archives.

This module provides:
- Streaming file digest computation (SHA-256, SHA-512, SHA-1, MD5)
- A verifier that raises ChecksumMismatchError naming the property to update
- Timing-attack resistant digest comparison
"""

import hashlib
import logging
import secrets
from pathlib import Path

from wrapperkit.core.exceptions import ChecksumMismatchError

logger = logging.getLogger(__name__)

SHA_256_ALGORITHM = "SHA-256"

_CHUNK_SIZE = 8192


def _normalize_algorithm(algorithm: str) -> str:
    """Map 'SHA-256', 'sha256' or 'Sha_256' onto the hashlib name."""
    return algorithm.lower().replace("-", "").replace("_", "")


def compute_file_hash(file_path: Path, algorithm: str = SHA_256_ALGORITHM) -> str:
    """
    Compute cryptographic hash of file.

    The file is streamed in fixed-size chunks; the digest is returned as
    lowercase hex, two digits per byte, without separators.

    Args:
        file_path: Path to file
        algorithm: Hash algorithm ('SHA-256', 'SHA-512', 'SHA-1', 'MD5')

    Returns:
        Hex string of hash

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If algorithm is not supported

    Example:
        >>> digest = compute_file_hash(Path("maven-3.9.9-bin.zip"))
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    name = _normalize_algorithm(algorithm)

    if name == "sha256":
        hasher = hashlib.sha256()
    elif name == "sha512":
        hasher = hashlib.sha512()
    elif name == "sha1":
        logger.warning(
            "SHA1 is cryptographically weak and should not be used for security. "
            "Use SHA256 or SHA512 instead."
        )
        hasher = hashlib.sha1()
    elif name == "md5":
        logger.warning(
            "MD5 is cryptographically broken and should not be used for security. "
            "Use SHA256 or SHA512 instead."
        )
        hasher = hashlib.md5()
    else:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")

    with open(file_path, "rb") as f:
        while chunk := f.read(_CHUNK_SIZE):
            hasher.update(chunk)

    return hasher.hexdigest()


def _constant_time_compare(a: str, b: str) -> bool:
    """Compare two strings in constant time to prevent timing attacks."""
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


class HashVerifier:
    """
    Verifies files against an expected hex digest.

    Callers decide whether verification is needed at all; an empty expected
    digest is never treated as "skip" and simply fails to match.

    Example:
        >>> verifier = HashVerifier()
        >>> verifier.verify(
        ...     Path("maven-3.9.9-bin.zip"),
        ...     "distributionSha256Sum",
        ...     SHA_256_ALGORITHM,
        ...     "4ec3f26fb1a692473aea0235c300bd20f0f9fe741947c82c1234cefd76ac3a3c",
        ... )
    """

    def verify(
        self, file_path: Path, property_name: str, algorithm: str, expected_sum: str
    ) -> None:
        """
        Verify that file_path hashes to expected_sum.

        Args:
            file_path: File to verify
            property_name: Configuration property holding expected_sum,
                named in the error message so the user knows what to update
            algorithm: Hash algorithm name
            expected_sum: Expected hex digest (case-insensitive)

        Raises:
            ChecksumMismatchError: If the digests differ
            FileNotFoundError: If file_path does not exist
        """
        actual_sum = compute_file_hash(file_path, algorithm)
        expected = (expected_sum or "").strip().lower()

        if expected and _constant_time_compare(actual_sum, expected):
            logger.info(
                f"Validated {algorithm} hash for {file_path} to be equal ({expected})"
            )
            return

        logger.error(
            f"{algorithm} mismatch for {file_path}: expected '{expected}', got {actual_sum}"
        )
        raise ChecksumMismatchError(file_path, algorithm, property_name)
