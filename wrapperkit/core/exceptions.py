"""
Centralized exception hierarchy for wrapperkit.

Every failure raised by the install pipeline derives from WrapperKitError so
that the front end can catch one type and print an actionable message.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class WrapperKitError(Exception):
    """Base exception for all wrapperkit errors."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigurationError(WrapperKitError):
    """Invalid or missing configuration value."""

    pass


# ============================================================================
# Network Exceptions
# ============================================================================


class NetworkError(WrapperKitError):
    """Base exception for transport failures and bad HTTP responses."""

    pass


class DownloadError(NetworkError):
    """Raised when downloading distribution content fails."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Could not download {url}: {message}")


class VersionResolutionError(NetworkError):
    """Raised when a version cannot be resolved through the metadata API."""

    pass


# ============================================================================
# Distribution Exceptions
# ============================================================================


class ChecksumMismatchError(WrapperKitError):
    """Raised when a file digest does not match the configured checksum."""

    def __init__(self, file_path, algorithm: str, property_name: str):
        self.file_path = file_path
        self.algorithm = algorithm
        self.property_name = property_name
        super().__init__(
            f"Failed to validate Maven distribution {algorithm} for {file_path}, "
            "your Maven distribution might be compromised. If you updated your "
            f"Maven version, you need to update the specified {property_name} property."
        )


class CorruptDistributionError(WrapperKitError):
    """Raised when an unpacked distribution does not have exactly one root."""

    pass


class ArchiveExtractionError(WrapperKitError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains an entry that escapes the destination (zip-slip)."""

    pass


# ============================================================================
# JDK Exceptions
# ============================================================================


class PlatformUnsupportedError(WrapperKitError):
    """Raised when the current OS/architecture has no JDK platform token."""

    pass


class JdkNotFoundError(WrapperKitError):
    """Raised when no JDK home can be located inside an install directory."""

    pass
