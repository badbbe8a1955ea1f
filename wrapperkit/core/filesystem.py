"""
File system utilities for wrapperkit.

This module provides platform-aware file operations including:
- Safe archive extraction (zip, tar.gz) that blocks directory traversal
- Atomic writes (temp file + rename)
- Directory listing/removal helpers used by the installers
- Executable permission fix-up for launcher scripts
"""

import logging
import os
import shutil
import stat
import sys
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Optional, Union

from wrapperkit.core.exceptions import (
    ArchiveExtractionError,
    InsecureArchiveError,
    UnsupportedArchiveFormat,
)

logger = logging.getLogger(__name__)

IS_WINDOWS = os.name == "nt"

SUPPORTED_ARCHIVE_SUFFIXES = (".zip", ".tar.gz", ".tgz")

# rwxr-xr-x
EXECUTABLE_PERMISSIONS = (
    stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
)

_CHUNK_SIZE = 8192


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Example:
        >>> is_relative_to(Path("/home/user/project/file.txt"), Path("/home/user"))
        True
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def is_supported_archive(file_name: str) -> bool:
    """Return True if file_name has an extension extract_archive handles."""
    return file_name.lower().endswith(SUPPORTED_ARCHIVE_SUFFIXES)


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(name: str, destination: Path) -> Path:
    """
    Validate that an archive member path is safe to extract.

    The member path is joined to the destination and normalized lexically;
    the result must still lie under the destination.

    Args:
        name: Member path from archive
        destination: Normalized absolute extraction destination

    Returns:
        Normalized target path for the member

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    target = Path(os.path.normpath(destination / name))

    if not is_relative_to(target, destination):
        raise InsecureArchiveError(
            f"Archive includes an invalid entry '{name}' that attempts directory "
            "traversal. This is a security risk and extraction has been blocked."
        )

    return target


def extract_archive(archive_path: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Extract an archive to a destination directory.

    Every member path is validated before anything is written, so an archive
    containing a traversal entry leaves the destination untouched.

    Supported formats:
    - .zip, or any file with zip content whatever its name
    - .tar.gz, .tgz

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        InsecureArchiveError: If archive contains malicious paths
        ArchiveExtractionError: If extraction fails

    Example:
        >>> extract_archive("apache-maven-3.9.9-bin.zip", "dists/apache-maven-3.9.9-bin/1a2b3c")
    """
    archive_path = Path(archive_path)
    destination = Path(os.path.normpath(os.path.abspath(destination)))

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    archive_name = archive_path.name.lower()

    try:
        if archive_name.endswith((".tar.gz", ".tgz")):
            _extract_tar_gz(archive_path, destination)
        elif archive_name.endswith(".zip") or zipfile.is_zipfile(archive_path):
            # Repository download endpoints often serve zips without a suffix
            _extract_zip(archive_path, destination)
        else:
            raise UnsupportedArchiveFormat(
                f"Unsupported archive format: {archive_path.name}. "
                "Supported: .zip, .tar.gz, .tgz"
            )
    except (InsecureArchiveError, UnsupportedArchiveFormat):
        raise
    except (OSError, zipfile.BadZipFile, tarfile.TarError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_zip(archive_path: Path, destination: Path) -> None:
    """Extract a ZIP archive, skipping directory entries."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        entries = zf.infolist()

        # Validate all paths first
        targets = [_validate_archive_path(entry.filename, destination) for entry in entries]

        for entry, target in zip(entries, targets):
            if entry.is_dir():
                continue

            target.parent.mkdir(parents=True, exist_ok=True)
            with zf.open(entry) as src, open(target, "wb") as dst:
                shutil.copyfileobj(src, dst, _CHUNK_SIZE)

            # Keep POSIX mode bits recorded by zip tools on Unix
            mode = (entry.external_attr >> 16) & 0o777
            if mode and not IS_WINDOWS:
                os.chmod(target, mode)


def _extract_tar_gz(archive_path: Path, destination: Path) -> None:
    """Extract a .tar.gz archive."""
    destination.mkdir(parents=True, exist_ok=True)

    with tarfile.open(archive_path, "r:gz") as tar:
        members = tar.getmembers()

        # Validate all paths first
        for member in members:
            _validate_archive_path(member.name, destination)
            if member.issym() or member.islnk():
                _validate_archive_path(
                    os.path.join(os.path.dirname(member.name), member.linkname)
                    if member.issym()
                    else member.linkname,
                    destination,
                )

        # Extract with filter for security (Python 3.12+)
        # For older Python, we've already validated paths above
        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    This ensures the file is never in a partially-written state.
    If the write fails, the original file (if any) remains unchanged.

    Example:
        >>> atomic_write("jdk-17-temurin.properties", "version=17.0.15\\n")
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Create temp file in same directory (ensures same filesystem)
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        # Atomic rename (replaces destination if it exists)
        temp_path.replace(file_path)

    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree with safeguards.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        OSError: If deletion fails
    """
    path = Path(path).resolve()

    # Safety check: require path to be under specified prefix
    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if IS_WINDOWS:

        def handle_remove_readonly(func, path, exc):
            """Error handler for Windows read-only files."""
            if not os.access(path, os.W_OK):
                os.chmod(path, stat.S_IWRITE)
                func(path)
            else:
                raise

        shutil.rmtree(path, onerror=handle_remove_readonly)
    else:
        shutil.rmtree(path)


def list_directories(path: Path) -> list[Path]:
    """
    List the immediate subdirectories of path, sorted by name.

    Returns an empty list if path does not exist. Files are ignored.
    """
    path = Path(path)
    if not path.exists():
        return []
    return sorted(child for child in path.iterdir() if child.is_dir())


def set_executable(file_path: Path) -> bool:
    """
    Mark a file rwxr-xr-x.

    Does nothing on Windows. Failures are logged as warnings, never raised:
    a missing permission bit is something the user can fix by hand.

    Returns:
        True if the permissions were set
    """
    if IS_WINDOWS:
        return False

    try:
        os.chmod(file_path, EXECUTABLE_PERMISSIONS)
        return True
    except OSError:
        logger.warning(
            f"Could not set executable permissions for: {Path(file_path).absolute()}. "
            "Please do this manually if you want to use Maven."
        )
        return False
