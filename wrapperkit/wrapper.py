"""
Install pipeline entry point.

Reads the wrapper properties, installs the configured JDKs and the Maven
distribution, and reports where they ended up. Starting Maven from the
returned home directory is left to the launcher.

Example:
    >>> executor = WrapperExecutor.create(Path(".mvn/wrapper/maven-wrapper.properties"))
    >>> result = executor.execute()
    >>> print(result.maven_home)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from wrapperkit.config.configuration import WrapperConfiguration
from wrapperkit.core.directory import get_maven_user_home, get_version_cache_dir
from wrapperkit.core.download import ContentFetcher
from wrapperkit.core.exceptions import ConfigurationError
from wrapperkit.core.properties import parse_properties
from wrapperkit.core.verification import HashVerifier
from wrapperkit.distribution.installer import Installer
from wrapperkit.distribution.paths import PathAssembler
from wrapperkit.jdk.installer import JdkInstaller, ToolchainRegistrar
from wrapperkit.jdk.resolver import JdkResolver
from wrapperkit.jdk.version_cache import JdkVersionCache

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("wrapperkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

APPLICATION_NAME = "mvnw"


@dataclass(frozen=True)
class InstallResult:
    """Where the pipeline installed things."""

    maven_home: Path
    """Top-level directory of the unpacked Maven distribution"""

    java_home: Optional[Path] = None
    """Home of the main JDK, if one was configured"""

    toolchain_java_home: Optional[Path] = None
    """Home of the toolchain JDK, if one was configured"""


def load_configuration(
    properties_file: Path, env: Optional[Mapping[str, str]] = None
) -> WrapperConfiguration:
    """
    Read a maven-wrapper.properties file into a WrapperConfiguration.

    Raises:
        ConfigurationError: If the file cannot be read or is invalid
    """
    properties_file = Path(properties_file)
    try:
        properties = parse_properties(properties_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Could not load wrapper properties from '{properties_file}': {e}"
        ) from e

    return WrapperConfiguration.from_properties(
        properties, properties_file=properties_file, env=env
    )


class WrapperExecutor:
    """
    Runs the full install pipeline for one configuration.

    Example:
        >>> executor = WrapperExecutor(installer, jdk_installer)
        >>> result = executor.execute(configuration)
    """

    def __init__(
        self,
        installer: Installer,
        jdk_installer: Optional[JdkInstaller] = None,
        configuration: Optional[WrapperConfiguration] = None,
    ):
        """
        Initialize executor.

        Args:
            installer: Installs the Maven distribution
            jdk_installer: Installs JDKs. If None, JDK settings are ignored.
            configuration: Default configuration for execute()
        """
        self.installer = installer
        self.jdk_installer = jdk_installer
        self.configuration = configuration

    @classmethod
    def create(
        cls,
        properties_file: Path,
        env: Optional[Mapping[str, str]] = None,
        project_dir: Optional[Path] = None,
        registrar: Optional[ToolchainRegistrar] = None,
    ) -> "WrapperExecutor":
        """
        Build an executor with the default collaborators.

        Args:
            properties_file: Path of maven-wrapper.properties
            env: Environment mapping (default: os.environ)
            project_dir: Directory behind the PROJECT base selector
            registrar: Optional toolchain registrar for installed JDKs
        """
        env = os.environ if env is None else env
        configuration = load_configuration(properties_file, env)
        user_home = get_maven_user_home(env)

        fetcher = ContentFetcher(APPLICATION_NAME, __version__, env=env)
        verifier = HashVerifier()
        resolver = JdkResolver(
            version_cache=JdkVersionCache(
                get_version_cache_dir(user_home), configuration.jdk_update_policy
            ),
            user_agent=fetcher.user_agent,
        )

        return cls(
            Installer(fetcher, verifier, PathAssembler(user_home, project_dir)),
            JdkInstaller(fetcher, verifier, user_home, resolver, registrar),
            configuration,
        )

    def execute(self, configuration: Optional[WrapperConfiguration] = None) -> InstallResult:
        """
        Install the JDK, the toolchain JDK and the distribution, in that order.

        Raises:
            ConfigurationError: If no configuration is available
            WrapperKitError: If any install step fails
        """
        configuration = configuration or self.configuration
        if configuration is None:
            raise ConfigurationError("No wrapper configuration to execute")

        java_home = None
        toolchain_java_home = None
        if self.jdk_installer is not None:
            java_home = self.jdk_installer.install_jdk(configuration)
            toolchain_java_home = self.jdk_installer.install_toolchain_jdk(configuration)

        maven_home = self.installer.create_dist(configuration.install_request())
        logger.info(f"Maven home: {maven_home}")

        return InstallResult(maven_home, java_home, toolchain_java_home)
