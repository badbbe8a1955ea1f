"""
Wrapper configuration model.

The front end reads ``.mvn/wrapper/maven-wrapper.properties`` (and any
command-line overrides) into a plain mapping; ``WrapperConfiguration.from_properties``
turns that mapping plus the environment into a validated, immutable
configuration object. ``InstallRequest`` is the per-invocation slice of it
the distribution installer works from.

Example:
    >>> config = WrapperConfiguration.from_properties(
    ...     {"distributionUrl": "https://repo.maven.apache.org/maven2/org/apache/"
    ...      "maven/apache-maven/3.9.9/apache-maven-3.9.9-bin.zip"},
    ...     properties_file=Path(".mvn/wrapper/maven-wrapper.properties"),
    ... )
    >>> request = config.install_request()
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional
from urllib.parse import urlsplit

from wrapperkit.core.directory import DEFAULT_DISTRIBUTION_PATH
from wrapperkit.core.download import strip_user_info
from wrapperkit.core.environment import (
    ALWAYS_DOWNLOAD_ENV,
    ALWAYS_UNPACK_ENV,
    JDK_DOWNLOAD_ENV,
    JDK_VENDOR_ENV,
    JDK_VERSION_ENV,
    MVNW_REPOURL,
    TOOLCHAIN_JDK_ENV,
    parse_boolean,
)
from wrapperkit.core.exceptions import ConfigurationError
from wrapperkit.jdk.installer import JdkRequest
from wrapperkit.jdk.version_cache import DEFAULT_UPDATE_POLICY, UpdatePolicy

logger = logging.getLogger(__name__)

MAVEN_USER_HOME_STRING = "MAVEN_USER_HOME"
PROJECT_STRING = "PROJECT"

DISTRIBUTION_URL_PROPERTY = "distributionUrl"
DISTRIBUTION_BASE_PROPERTY = "distributionBase"
DISTRIBUTION_PATH_PROPERTY = "distributionPath"
ZIP_STORE_BASE_PROPERTY = "zipStoreBase"
ZIP_STORE_PATH_PROPERTY = "zipStorePath"
DISTRIBUTION_SHA_256_SUM = "distributionSha256Sum"
ALWAYS_DOWNLOAD = "alwaysDownload"
ALWAYS_UNPACK = "alwaysUnpack"

JDK_VERSION_PROPERTY = "jdkVersion"
JDK_VENDOR_PROPERTY = "jdkVendor"
JDK_DISTRIBUTION_URL_PROPERTY = "jdkDistributionUrl"
JDK_SHA_256_SUM = "jdkSha256Sum"
ALWAYS_DOWNLOAD_JDK = "alwaysDownloadJdk"
UPDATE_TOOLCHAINS = "updateToolchains"
JDK_UPDATE_POLICY = "jdkUpdatePolicy"

TOOLCHAIN_JDK_VERSION_PROPERTY = "toolchainJdkVersion"
TOOLCHAIN_JDK_VENDOR_PROPERTY = "toolchainJdkVendor"
TOOLCHAIN_JDK_DISTRIBUTION_URL_PROPERTY = "toolchainJdkDistributionUrl"
TOOLCHAIN_JDK_SHA_256_SUM = "toolchainJdkSha256Sum"

_REPOSITORY_PACKAGE_PATH = "org/apache/maven"


@dataclass(frozen=True)
class InstallRequest:
    """Immutable description of one distribution install."""

    distribution_url: str
    """Resolved or explicit distribution URL"""

    sha256_sum: str = ""
    """Expected SHA-256 of the archive; empty means no verification"""

    always_download: bool = False
    """Re-download even if the archive is present"""

    always_unpack: bool = False
    """Re-extract even if an unpacked tree is present"""

    distribution_base: str = MAVEN_USER_HOME_STRING
    """Base directory selector for the unpacked distribution"""

    distribution_path: Path = DEFAULT_DISTRIBUTION_PATH
    """Path under distribution_base"""

    zip_base: str = MAVEN_USER_HOME_STRING
    """Base directory selector for the downloaded archive"""

    zip_path: Path = DEFAULT_DISTRIBUTION_PATH
    """Path under zip_base"""


@dataclass(frozen=True)
class WrapperConfiguration:
    """
    Fully-populated wrapper configuration.

    Attributes mirror the keys of maven-wrapper.properties.
    """

    distribution_url: str
    distribution_base: str = MAVEN_USER_HOME_STRING
    distribution_path: Path = DEFAULT_DISTRIBUTION_PATH
    zip_base: str = MAVEN_USER_HOME_STRING
    zip_path: Path = DEFAULT_DISTRIBUTION_PATH
    distribution_sha256_sum: str = ""
    always_download: bool = False
    always_unpack: bool = False

    jdk_version: Optional[str] = None
    jdk_vendor: Optional[str] = None
    jdk_distribution_url: Optional[str] = None
    jdk_sha256_sum: Optional[str] = None
    always_download_jdk: bool = False
    update_toolchains: bool = True
    jdk_update_policy: UpdatePolicy = field(
        default_factory=lambda: UpdatePolicy.parse(DEFAULT_UPDATE_POLICY)
    )

    toolchain_jdk_version: Optional[str] = None
    toolchain_jdk_vendor: Optional[str] = None
    toolchain_jdk_distribution_url: Optional[str] = None
    toolchain_jdk_sha256_sum: Optional[str] = None

    @classmethod
    def from_properties(
        cls,
        properties: Mapping[str, str],
        properties_file: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> "WrapperConfiguration":
        """
        Build a configuration from parsed wrapper properties.

        Args:
            properties: Parsed key/value pairs of the properties file
            properties_file: Location of the properties file, used to resolve
                relative distribution URLs and in error messages
            env: Environment mapping (default: os.environ)

        Raises:
            ConfigurationError: If a required property is missing or a value
                is invalid
        """
        env = os.environ if env is None else env
        source = str(properties_file) if properties_file is not None else "<properties>"

        def get(key: str, default: Optional[str] = None) -> Optional[str]:
            value = properties.get(key, default)
            return value.strip() if value is not None else None

        def optional(key: str, default: Optional[str] = None) -> Optional[str]:
            value = get(key, default)
            return value if value else None

        raw_url = get(DISTRIBUTION_URL_PROPERTY)
        if not raw_url:
            raise ConfigurationError(
                f"No value with key '{DISTRIBUTION_URL_PROPERTY}' specified in "
                f"wrapper properties file '{source}'."
            )

        return cls(
            distribution_url=prepare_distribution_url(raw_url, properties_file, env),
            distribution_base=get(DISTRIBUTION_BASE_PROPERTY, MAVEN_USER_HOME_STRING),
            distribution_path=Path(
                get(DISTRIBUTION_PATH_PROPERTY, str(DEFAULT_DISTRIBUTION_PATH))
            ),
            zip_base=get(ZIP_STORE_BASE_PROPERTY, MAVEN_USER_HOME_STRING),
            zip_path=Path(get(ZIP_STORE_PATH_PROPERTY, str(DEFAULT_DISTRIBUTION_PATH))),
            distribution_sha256_sum=get(DISTRIBUTION_SHA_256_SUM, ""),
            always_download=parse_boolean(
                get(ALWAYS_DOWNLOAD, env.get(ALWAYS_DOWNLOAD_ENV))
            ),
            always_unpack=parse_boolean(get(ALWAYS_UNPACK, env.get(ALWAYS_UNPACK_ENV))),
            jdk_version=optional(JDK_VERSION_PROPERTY, env.get(JDK_VERSION_ENV)),
            jdk_vendor=optional(JDK_VENDOR_PROPERTY, env.get(JDK_VENDOR_ENV)),
            jdk_distribution_url=optional(JDK_DISTRIBUTION_URL_PROPERTY),
            jdk_sha256_sum=optional(JDK_SHA_256_SUM),
            always_download_jdk=parse_boolean(
                get(ALWAYS_DOWNLOAD_JDK, env.get(JDK_DOWNLOAD_ENV))
            ),
            update_toolchains=parse_boolean(get(UPDATE_TOOLCHAINS, "true")),
            jdk_update_policy=UpdatePolicy.parse(
                get(JDK_UPDATE_POLICY, DEFAULT_UPDATE_POLICY)
            ),
            toolchain_jdk_version=optional(
                TOOLCHAIN_JDK_VERSION_PROPERTY, env.get(TOOLCHAIN_JDK_ENV)
            ),
            toolchain_jdk_vendor=optional(TOOLCHAIN_JDK_VENDOR_PROPERTY),
            toolchain_jdk_distribution_url=optional(TOOLCHAIN_JDK_DISTRIBUTION_URL_PROPERTY),
            toolchain_jdk_sha256_sum=optional(TOOLCHAIN_JDK_SHA_256_SUM),
        )

    def install_request(self) -> InstallRequest:
        """The distribution install described by this configuration."""
        return InstallRequest(
            distribution_url=self.distribution_url,
            sha256_sum=self.distribution_sha256_sum,
            always_download=self.always_download,
            always_unpack=self.always_unpack,
            distribution_base=self.distribution_base,
            distribution_path=self.distribution_path,
            zip_base=self.zip_base,
            zip_path=self.zip_path,
        )

    def jdk_request(self) -> Optional[JdkRequest]:
        """The main JDK install, or None if no JDK is configured."""
        if not self.jdk_version:
            return None
        return JdkRequest(
            self.jdk_version,
            self.jdk_vendor,
            self.jdk_distribution_url,
            self.jdk_sha256_sum,
        )

    def toolchain_jdk_request(self) -> Optional[JdkRequest]:
        """The toolchain JDK install, or None if none is configured."""
        if not self.toolchain_jdk_version:
            return None
        return JdkRequest(
            self.toolchain_jdk_version,
            self.toolchain_jdk_vendor,
            self.toolchain_jdk_distribution_url,
            self.toolchain_jdk_sha256_sum,
        )


def prepare_distribution_url(
    url: str, properties_file: Optional[Path], env: Mapping[str, str]
) -> str:
    """
    Apply relative-path resolution and the MVNW_REPOURL mirror override.

    A URL without a scheme is a path relative to the properties file. When
    MVNW_REPOURL is set, the part of the URL before ``org/apache/maven`` is
    replaced by the mirror URL.

    Example:
        >>> prepare_distribution_url(
        ...     "https://repo.maven.apache.org/maven2/org/apache/maven/x.zip",
        ...     None,
        ...     {"MVNW_REPOURL": "https://mirror.example.com/maven/"},
        ... )
        'https://mirror.example.com/maven/org/apache/maven/x.zip'
    """
    parts = urlsplit(url)

    if not parts.scheme or (len(parts.scheme) == 1 and os.name == "nt"):
        base = Path(properties_file).parent if properties_file is not None else Path.cwd()
        return (base / url).absolute().as_uri()

    repo_url = env.get(MVNW_REPOURL)
    if not repo_url:
        return url

    logger.info(f"Detected {MVNW_REPOURL} environment variable {strip_user_info(repo_url)}")
    repo_url = repo_url.rstrip("/")

    distribution_path = parts.path
    index = distribution_path.find(_REPOSITORY_PACKAGE_PATH)
    if index > 1:
        distribution_path = "/" + distribution_path[index:]
    else:
        logger.warning(f"distributionUrl don't contain package name {parts.path}")

    return repo_url + distribution_path
