"""
Distribution installation.

Turns an InstallRequest into an unpacked distribution on disk and returns its
home directory. A run goes through these steps, each of which may be skipped
when a previous run already did the work:

1. Download the archive (when missing, or when alwaysDownload is set)
2. Verify its SHA-256 (when a checksum is configured)
3. Clear stale unpacked directories and extract the archive
4. Check that the archive held exactly one top-level directory
5. Mark the launcher script executable

Steps 2 and 3 run together, only when the archive was just downloaded,
alwaysUnpack is set, or nothing has been unpacked yet. Repeating an install
with the same request therefore neither touches the network nor rewrites
anything on disk except the launcher's permission bits.
"""

import logging
from pathlib import Path

from wrapperkit.config.configuration import DISTRIBUTION_SHA_256_SUM, InstallRequest
from wrapperkit.core.download import ContentFetcher, strip_user_info
from wrapperkit.core.exceptions import CorruptDistributionError
from wrapperkit.core.filesystem import (
    extract_archive,
    list_directories,
    safe_rmtree,
    set_executable,
)
from wrapperkit.core.verification import SHA_256_ALGORITHM, HashVerifier
from wrapperkit.distribution.paths import PathAssembler

logger = logging.getLogger(__name__)

DEFAULT_LAUNCHER_SCRIPT = Path("bin", "mvn")


class Installer:
    """
    Downloads, verifies and unpacks distributions.

    Example:
        >>> installer = Installer(ContentFetcher(), HashVerifier(), PathAssembler(home))
        >>> maven_home = installer.create_dist(configuration.install_request())
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        verifier: HashVerifier,
        path_assembler: PathAssembler,
        launcher_script: Path = DEFAULT_LAUNCHER_SCRIPT,
    ):
        """
        Initialize installer.

        Args:
            fetcher: Downloads distribution archives
            verifier: Checks archive digests
            path_assembler: Computes local archive and unpack locations
            launcher_script: Script inside the distribution home to mark executable
        """
        self.fetcher = fetcher
        self.verifier = verifier
        self.path_assembler = path_assembler
        self.launcher_script = Path(launcher_script)

    def create_dist(self, request: InstallRequest) -> Path:
        """
        Install the distribution described by request.

        Returns:
            The single top-level directory of the unpacked archive

        Raises:
            ConfigurationError: If a base directory selector is unknown
            DownloadError: If the archive cannot be downloaded
            ChecksumMismatchError: If the archive digest does not match
            ArchiveExtractionError: If the archive is unreadable or unsafe
            CorruptDistributionError: If the archive does not hold exactly
                one top-level directory
        """
        local = self.path_assembler.get_distribution(request)
        distribution_dir = local.distribution_dir
        zip_file = local.zip_file
        safe_url = strip_user_info(request.distribution_url)

        downloaded = False
        if request.always_download or not zip_file.exists():
            self._download(request.distribution_url, zip_file)
            downloaded = zip_file.exists()

        directories = list_directories(distribution_dir)

        if downloaded or request.always_unpack or not directories:
            if request.sha256_sum:
                self.verifier.verify(
                    zip_file, DISTRIBUTION_SHA_256_SUM, SHA_256_ALGORITHM, request.sha256_sum
                )

            for directory in directories:
                logger.info(f"Deleting directory {directory}")
                safe_rmtree(directory, require_prefix=distribution_dir)

            logger.info(f"Unzipping {zip_file} to {distribution_dir}")
            extract_archive(zip_file, distribution_dir)

            directories = list_directories(distribution_dir)
            if not directories:
                raise CorruptDistributionError(
                    f"Maven distribution '{safe_url}' does not contain any "
                    "directory. Expected to find exactly 1 directory."
                )

        if len(directories) != 1:
            raise CorruptDistributionError(
                f"Maven distribution '{safe_url}' contains too many "
                "directories. Expected to find exactly 1 directory."
            )

        root = directories[0]
        self._set_executable_permissions(root)
        return root

    def _download(self, url: str, zip_file: Path) -> None:
        """Download url through a .part sibling and move it over zip_file."""
        part_file = zip_file.with_name(zip_file.name + ".part")
        part_file.unlink(missing_ok=True)

        logger.info(f"Downloading {strip_user_info(url)}")
        self.fetcher.download(url, part_file)
        part_file.replace(zip_file)

    def _set_executable_permissions(self, root: Path) -> None:
        launcher = root / self.launcher_script
        if launcher.exists() and set_executable(launcher):
            logger.debug(f"Set executable permissions for: {launcher}")
