"""
Base directory resolution for wrapperkit.

Directory Structure (under the Maven user home, ``~/.m2`` by default):
    - wrapper/dists/ : Downloaded archives and unpacked distributions
    - wrapper/cache/ : Resolved JDK version cache (one .properties per key)
    - jdks/          : Installed JDKs, one directory per version and vendor
"""

import os
from pathlib import Path, PurePath
from typing import Mapping, Optional

from wrapperkit.core.environment import MAVEN_USER_HOME

DEFAULT_DISTRIBUTION_PATH = Path("wrapper", "dists")
VERSION_CACHE_PATH = Path("wrapper", "cache")
JDKS_PATH = Path("jdks")


def get_maven_user_home(env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Get the Maven user home directory.

    Returns:
        Path: ``$MAVEN_USER_HOME`` when set and non-empty, otherwise ``~/.m2``

    Example:
        >>> get_maven_user_home({"MAVEN_USER_HOME": "/opt/m2"})
        PosixPath('/opt/m2')
    """
    env = os.environ if env is None else env
    user_home = env.get(MAVEN_USER_HOME)
    if user_home:
        return Path(user_home)
    return Path.home() / ".m2"


def get_version_cache_dir(user_home: Path) -> Path:
    """Directory holding the JDK version cache files."""
    if not isinstance(user_home, (Path, PurePath)):
        user_home = Path(user_home)
    return user_home / VERSION_CACHE_PATH


def get_jdks_dir(user_home: Path) -> Path:
    """Directory holding installed JDKs."""
    if not isinstance(user_home, (Path, PurePath)):
        user_home = Path(user_home)
    return user_home / JDKS_PATH
