"""
JDK resolution and installation.

Resolves version/vendor requests through the SDKMAN API (with an on-disk
version cache) and installs the resulting JDKs under the Maven user home.
"""

from .version_cache import JdkVersionCache, UpdatePolicy
from .resolver import JdkMetadata, JdkResolver, normalize_vendor
from .installer import (
    JdkInstaller,
    JdkRequest,
    ToolchainRegistration,
    find_jdk_home,
)

__all__ = [
    "JdkVersionCache",
    "UpdatePolicy",
    "JdkMetadata",
    "JdkResolver",
    "normalize_vendor",
    "JdkInstaller",
    "JdkRequest",
    "ToolchainRegistration",
    "find_jdk_home",
]
