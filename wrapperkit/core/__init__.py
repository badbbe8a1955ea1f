"""
Core functionality for wrapperkit.

This package contains the foundational modules that the installers depend on.
"""

from .directory import (
    get_maven_user_home,
    get_version_cache_dir,
    get_jdks_dir,
)

from .download import (
    ContentFetcher,
    strip_user_info,
    url_file_name,
)

from .environment import (
    configure_logging,
    is_verbose,
    parse_boolean,
)

from .exceptions import (
    WrapperKitError,
    ConfigurationError,
    NetworkError,
    DownloadError,
    VersionResolutionError,
    ChecksumMismatchError,
    CorruptDistributionError,
    ArchiveExtractionError,
    UnsupportedArchiveFormat,
    InsecureArchiveError,
    PlatformUnsupportedError,
    JdkNotFoundError,
)

from .filesystem import (
    extract_archive,
    atomic_write,
    safe_rmtree,
    list_directories,
    set_executable,
)

from .platform import (
    UNSUPPORTED_PLATFORM,
    detect_platform,
    platform_token,
    clear_platform_cache,
)

from .verification import (
    SHA_256_ALGORITHM,
    HashVerifier,
    compute_file_hash,
)

__all__ = [
    # Directory
    "get_maven_user_home",
    "get_version_cache_dir",
    "get_jdks_dir",
    # Download
    "ContentFetcher",
    "strip_user_info",
    "url_file_name",
    # Environment
    "configure_logging",
    "is_verbose",
    "parse_boolean",
    # Exceptions
    "WrapperKitError",
    "ConfigurationError",
    "NetworkError",
    "DownloadError",
    "VersionResolutionError",
    "ChecksumMismatchError",
    "CorruptDistributionError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "PlatformUnsupportedError",
    "JdkNotFoundError",
    # Filesystem
    "extract_archive",
    "atomic_write",
    "safe_rmtree",
    "list_directories",
    "set_executable",
    # Platform
    "UNSUPPORTED_PLATFORM",
    "detect_platform",
    "platform_token",
    "clear_platform_cache",
    # Verification
    "SHA_256_ALGORITHM",
    "HashVerifier",
    "compute_file_hash",
]
