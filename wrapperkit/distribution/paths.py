"""
Deterministic on-disk layout for downloaded distributions.

A distribution URL such as ``https://host/apache-maven-3.9.9-bin.zip`` maps
to::

    <distribution root>/apache-maven-3.9.9-bin/<hash>/          (extract dir)
    <zip store root>/apache-maven-3.9.9-bin/<hash>/apache-maven-3.9.9-bin.zip

where ``<hash>`` is the Java ``String.hashCode`` of the full URL in hex, so
same-named archives from different sources never share a directory. With the
default settings both roots are the same, and the archive lives inside the
extract directory next to the unpacked tree.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from wrapperkit.config.configuration import (
    MAVEN_USER_HOME_STRING,
    PROJECT_STRING,
    InstallRequest,
)
from wrapperkit.core.download import url_file_name
from wrapperkit.core.exceptions import ConfigurationError


def java_string_hash(value: str) -> int:
    """
    Compute Java's ``String.hashCode`` for value.

    Unlike Python's ``hash`` this is stable across processes.

    Example:
        >>> java_string_hash("abc")
        96354
    """
    data = value.encode("utf-16-be")
    h = 0
    # Java strings hash UTF-16 code units
    for i in range(0, len(data), 2):
        h = (31 * h + ((data[i] << 8) | data[i + 1])) & 0xFFFFFFFF
    return h - 0x100000000 if h >= 0x80000000 else h


def url_hash(url: str) -> str:
    """Short stable hash of a URL as unsigned lowercase hex (Integer.toHexString)."""
    return format(java_string_hash(url) & 0xFFFFFFFF, "x")


def remove_extension(name: str) -> str:
    """Strip the last extension, keeping names that start with a dot intact."""
    dot = name.rfind(".")
    return name[:dot] if dot > 0 else name


@dataclass(frozen=True)
class LocalDistribution:
    """Local locations of one distribution."""

    distribution_dir: Path
    """Directory the archive is unpacked into"""

    zip_file: Path
    """Location of the downloaded archive"""


def local_paths_for(url: str, distribution_root: Path, zip_root: Path) -> LocalDistribution:
    """
    Compute the local archive and extract locations for url.

    Pure function: no file system access.

    Args:
        url: Full distribution URL
        distribution_root: Base directory joined with the distribution path
        zip_root: Base directory joined with the zip store path
    """
    name = url_file_name(url)
    root_dir_name = Path(remove_extension(name), url_hash(url))
    return LocalDistribution(
        distribution_dir=Path(distribution_root) / root_dir_name,
        zip_file=Path(zip_root) / root_dir_name / name,
    )


class PathAssembler:
    """
    Resolves symbolic base directories and assembles distribution paths.

    Example:
        >>> assembler = PathAssembler(Path.home() / ".m2")
        >>> local = assembler.get_distribution(request)
        >>> print(local.distribution_dir)
    """

    def __init__(self, maven_user_home: Path, project_dir: Optional[Path] = None):
        """
        Initialize path assembler.

        Args:
            maven_user_home: Directory behind the MAVEN_USER_HOME selector
            project_dir: Directory behind the PROJECT selector (default: the
                current working directory at lookup time)
        """
        self.maven_user_home = Path(maven_user_home)
        self.project_dir = Path(project_dir) if project_dir is not None else None

    def get_distribution(self, request: InstallRequest) -> LocalDistribution:
        """
        Determine the local locations for the distribution of request.

        Raises:
            ConfigurationError: If a base selector is unknown
        """
        return local_paths_for(
            request.distribution_url,
            self.get_base_dir(request.distribution_base) / request.distribution_path,
            self.get_base_dir(request.zip_base) / request.zip_path,
        )

    def get_base_dir(self, base: str) -> Path:
        """
        Resolve a base directory selector.

        Raises:
            ConfigurationError: If base is neither MAVEN_USER_HOME nor PROJECT
        """
        if base == MAVEN_USER_HOME_STRING:
            return self.maven_user_home
        elif base == PROJECT_STRING:
            return self.project_dir if self.project_dir is not None else Path(os.getcwd())
        else:
            raise ConfigurationError(f"Base: {base} is unknown")
