"""
Environment variables consulted by wrapperkit and logging setup.

The wrapper scripts communicate with the installer through a handful of
environment variables. They are read through a mapping argument (defaulting
to ``os.environ``) so that callers and tests can supply their own view.
"""

import logging
import os
from typing import Mapping, Optional

MAVEN_USER_HOME = "MAVEN_USER_HOME"
MVNW_VERBOSE = "MVNW_VERBOSE"
MVNW_USERNAME = "MVNW_USERNAME"
MVNW_PASSWORD = "MVNW_PASSWORD"
MVNW_REPOURL = "MVNW_REPOURL"

ALWAYS_UNPACK_ENV = "MAVEN_WRAPPER_ALWAYS_UNPACK"
ALWAYS_DOWNLOAD_ENV = "MAVEN_WRAPPER_ALWAYS_DOWNLOAD"
JDK_VERSION_ENV = "MAVEN_WRAPPER_JDK_VERSION"
JDK_VENDOR_ENV = "MAVEN_WRAPPER_JDK_VENDOR"
JDK_DOWNLOAD_ENV = "MAVEN_WRAPPER_JDK_DOWNLOAD"
TOOLCHAIN_JDK_ENV = "MAVEN_WRAPPER_TOOLCHAIN_JDK"


def parse_boolean(value: Optional[str]) -> bool:
    """
    Parse a boolean the way Java's ``Boolean.parseBoolean`` does.

    Only the string ``"true"`` (in any case, surrounding whitespace ignored)
    is true; everything else, including ``None``, is false.

    Example:
        >>> parse_boolean("TRUE")
        True
        >>> parse_boolean("yes")
        False
    """
    return value is not None and value.strip().lower() == "true"


def is_verbose(env: Optional[Mapping[str, str]] = None) -> bool:
    """Return True when ``MVNW_VERBOSE`` asks for verbose output."""
    env = os.environ if env is None else env
    return parse_boolean(env.get(MVNW_VERBOSE))


def configure_logging(
    verbose: Optional[bool] = None, env: Optional[Mapping[str, str]] = None
) -> int:
    """
    Configure root logging for an installer run.

    Progress messages are logged at INFO/DEBUG and only shown in verbose
    mode; warnings and errors are always shown.

    Args:
        verbose: Force verbose mode on or off. Read from ``MVNW_VERBOSE`` if None.
        env: Environment mapping (default: ``os.environ``)

    Returns:
        The logging level that was configured
    """
    if verbose is None:
        verbose = is_verbose(env)

    if verbose:
        level = logging.DEBUG
        format_str = "%(levelname)s [%(name)s] %(message)s"
    else:
        level = logging.WARNING
        format_str = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=format_str, force=True)
    return level
