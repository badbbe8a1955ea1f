"""
JDK download and installation.

Installs JDKs next to the Maven distributions, one directory per version and
vendor::

    <maven user home>/jdks/jdk-17-temurin/jdk-17.0.15+6/bin/java

The workflow for one JDK:
1. Resolve the download URL (explicit URL, or through JdkResolver)
2. Skip everything if the install directory already exists
3. Download the archive into the install directory
4. Verify its SHA-256 (when one is known)
5. Extract and delete the archive
6. Locate the JDK home (a directory with bin/java, up to 3 levels deep)
7. Hand the result to the toolchain registrar

A failed install removes the half-populated install directory.
"""

import logging
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from wrapperkit.core.directory import get_jdks_dir
from wrapperkit.core.download import ContentFetcher, strip_user_info, url_file_name
from wrapperkit.core.exceptions import JdkNotFoundError, UnsupportedArchiveFormat
from wrapperkit.core.filesystem import (
    extract_archive,
    is_supported_archive,
    list_directories,
    safe_rmtree,
)
from wrapperkit.core.verification import SHA_256_ALGORITHM, HashVerifier
from wrapperkit.jdk.resolver import JdkResolver

if TYPE_CHECKING:
    from wrapperkit.config.configuration import WrapperConfiguration

logger = logging.getLogger(__name__)

JDK_SHA_256_PROPERTY = "sha256Sum"
MAX_JDK_HOME_DEPTH = 3
UNKNOWN_VENDOR = "unknown"


@dataclass(frozen=True)
class JdkRequest:
    """What to install for one JDK (main or toolchain)."""

    version: str
    vendor: Optional[str] = None
    distribution_url: Optional[str] = None
    sha256_sum: Optional[str] = None


@dataclass(frozen=True)
class ToolchainRegistration:
    """An installed JDK, as handed to the toolchain registrar."""

    version: str
    """Requested JDK version, e.g. '17'"""

    vendor: str
    """Vendor name, or 'unknown'"""

    jdk_home: Path
    """Directory containing bin/java"""


ToolchainRegistrar = Callable[[ToolchainRegistration], None]


def is_jdk_home(directory: Path) -> bool:
    """True if directory has a bin/java (or bin/java.exe) executable."""
    bin_dir = Path(directory) / "bin"
    if not bin_dir.is_dir():
        return False
    return (bin_dir / "java").exists() or (bin_dir / "java.exe").exists()


def find_jdk_home(directory: Path, max_depth: int = MAX_JDK_HOME_DEPTH) -> Path:
    """
    Find the JDK home inside an extracted archive.

    Searches breadth-first, at most max_depth levels below directory, so
    layouts like ``jdk-17.0.15+6/Contents/Home`` are found.

    Raises:
        JdkNotFoundError: If directory does not exist or holds no JDK
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise JdkNotFoundError(f"Extracted directory does not exist: {directory}")

    queue = deque([(directory, 0)])
    while queue:
        current, depth = queue.popleft()
        if is_jdk_home(current):
            return current
        if depth < max_depth:
            queue.extend((child, depth + 1) for child in list_directories(current))

    raise JdkNotFoundError(f"Could not find JDK home directory in {directory}")


class JdkInstaller:
    """
    Installs JDKs under the Maven user home.

    Example:
        >>> installer = JdkInstaller(fetcher, HashVerifier(), Path("~/.m2"), resolver)
        >>> java_home = installer.install(JdkRequest("17", "temurin"))
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        verifier: HashVerifier,
        user_home: Path,
        resolver: JdkResolver,
        registrar: Optional[ToolchainRegistrar] = None,
    ):
        """
        Initialize JDK installer.

        Args:
            fetcher: Downloads JDK archives
            verifier: Checks archive digests
            user_home: Maven user home; JDKs go into its jdks/ directory
            resolver: Resolves version/vendor pairs without an explicit URL
            registrar: Optional callable receiving a ToolchainRegistration
                for every freshly installed JDK that should be registered
        """
        self.fetcher = fetcher
        self.verifier = verifier
        self.user_home = Path(user_home)
        self.resolver = resolver
        self.registrar = registrar

    def install_jdk(self, configuration: "WrapperConfiguration") -> Optional[Path]:
        """Install the main JDK of configuration, if one is configured."""
        request = configuration.jdk_request()
        if request is None:
            return None

        logger.info(f"Setting up JDK {request.version}")
        return self.install(
            request,
            always_download=configuration.always_download_jdk,
            register=configuration.update_toolchains,
        )

    def install_toolchain_jdk(self, configuration: "WrapperConfiguration") -> Optional[Path]:
        """Install the toolchain JDK of configuration; it is always registered."""
        request = configuration.toolchain_jdk_request()
        if request is None:
            return None

        logger.info(f"Setting up toolchain JDK {request.version}")
        return self.install(
            request, always_download=configuration.always_download_jdk, register=True
        )

    def install(
        self, request: JdkRequest, always_download: bool = False, register: bool = False
    ) -> Path:
        """
        Install one JDK and return its home directory.

        Args:
            request: Version, vendor and optional explicit URL/checksum
            always_download: Reinstall even if the install directory exists
            register: Hand the result to the toolchain registrar

        Raises:
            VersionResolutionError: If the version cannot be resolved
            DownloadError: If the archive cannot be downloaded
            ChecksumMismatchError: If the archive digest does not match
            ArchiveExtractionError: If the archive cannot be extracted
            JdkNotFoundError: If the archive holds no JDK
        """
        url = request.distribution_url
        sha256_sum = request.sha256_sum
        vendor = request.vendor

        if not url:
            metadata = self.resolver.resolve_jdk(request.version, vendor)
            url = metadata.download_url
            if not sha256_sum:
                sha256_sum = metadata.sha256_sum
            if not vendor:
                vendor = metadata.vendor

        install_dir = self.jdk_install_directory(request.version, vendor)

        if install_dir.exists() and not always_download:
            logger.info(f"JDK {request.version} already installed at {install_dir}")
            return find_jdk_home(install_dir)

        logger.info(f"Downloading JDK {request.version} from {strip_user_info(url)}")
        try:
            jdk_home = find_jdk_home(self._download_and_extract(url, install_dir, sha256_sum))
        except Exception:
            logger.info(f"Cleaning up failed JDK install: {install_dir}")
            safe_rmtree(install_dir, require_prefix=get_jdks_dir(self.user_home))
            raise

        if register:
            self._register(request.version, vendor, jdk_home)

        logger.info(f"JDK {request.version} installed successfully at {jdk_home}")
        return jdk_home

    def jdk_install_directory(self, version: str, vendor: Optional[str]) -> Path:
        """Directory a JDK of version and vendor is installed into."""
        return get_jdks_dir(self.user_home) / f"jdk-{version}-{vendor or UNKNOWN_VENDOR}"

    def _download_and_extract(
        self, url: str, install_dir: Path, sha256_sum: Optional[str]
    ) -> Path:
        """Fetch, verify and unpack url into install_dir; return the unpacked root."""
        archive_name = url_file_name(url)
        if not is_supported_archive(archive_name):
            raise UnsupportedArchiveFormat(
                f"Unsupported JDK archive format: {archive_name}. "
                "Expected .zip, .tar.gz or .tgz"
            )

        if install_dir.exists():
            safe_rmtree(install_dir, require_prefix=get_jdks_dir(self.user_home))
        install_dir.mkdir(parents=True)

        archive_path = install_dir / archive_name
        self.fetcher.download(url, archive_path)

        if sha256_sum and sha256_sum.strip():
            self.verifier.verify(
                archive_path, JDK_SHA_256_PROPERTY, SHA_256_ALGORITHM, sha256_sum
            )

        extract_archive(archive_path, install_dir)
        archive_path.unlink()

        directories = list_directories(install_dir)
        if len(directories) == 1:
            return directories[0]
        return install_dir

    def _register(self, version: str, vendor: Optional[str], jdk_home: Path) -> None:
        if self.registrar is None:
            return

        registration = ToolchainRegistration(version, vendor or UNKNOWN_VENDOR, jdk_home)
        try:
            self.registrar(registration)
        except OSError as e:
            logger.warning(f"Failed to update toolchains.xml: {e}")
