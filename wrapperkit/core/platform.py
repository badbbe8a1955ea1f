"""
Platform detection for JDK resolution.

Maps the current operating system and CPU architecture onto the platform
tokens used by the SDKMAN candidates API (the same mapping as SDKMAN's own
``infer_platform``). Combinations without a JDK build map to the ``exotic``
sentinel, which callers turn into a PlatformUnsupportedError.

Usage:
    from wrapperkit.core.platform import detect_platform

    token = detect_platform()  # e.g. 'linuxx64', 'darwinarm64'
"""

import functools
import os
import platform
from typing import Optional

UNSUPPORTED_PLATFORM = "exotic"

_LINUX_ARCHITECTURES = {
    "i686": "linuxx32",
    "x86_64": "linuxx64",
    "amd64": "linuxx64",
    "armv6l": "linuxarm32hf",
    "armv7l": "linuxarm32hf",
    "armv8l": "linuxarm32hf",
    "aarch64": "linuxarm64",
    "arm64": "linuxarm64",
}

_DARWIN_ARCHITECTURES = {
    "x86_64": "darwinx64",
    "amd64": "darwinx64",
    "arm64": "darwinarm64",
    "aarch64": "darwinarm64",
}

_WINDOWS_ARCHITECTURES = {
    "x86_64": "windowsx64",
    "amd64": "windowsx64",
}


def platform_token(system: str, machine: str) -> str:
    """
    Map an OS name and machine architecture onto a platform token.

    Args:
        system: OS name as reported by ``platform.system()``
            ('Linux', 'Darwin', 'Windows', ...)
        machine: Architecture as reported by ``platform.machine()``

    Returns:
        Platform token, or UNSUPPORTED_PLATFORM

    Example:
        >>> platform_token("Linux", "x86_64")
        'linuxx64'
        >>> platform_token("SunOS", "sparc")
        'exotic'
    """
    system = system.lower()
    machine = machine.lower()

    if system.startswith("linux"):
        return _LINUX_ARCHITECTURES.get(machine, UNSUPPORTED_PLATFORM)
    elif system.startswith("darwin") or system.startswith("mac os x"):
        # Unknown Mac architectures fall back to Intel builds (Rosetta)
        return _DARWIN_ARCHITECTURES.get(machine, "darwinx64")
    elif system.startswith("windows"):
        return _WINDOWS_ARCHITECTURES.get(machine, UNSUPPORTED_PLATFORM)
    else:
        return UNSUPPORTED_PLATFORM


@functools.lru_cache(maxsize=1)
def detect_platform() -> str:
    """
    Detect the platform token of the running interpreter.

    This function is cached - it only runs detection once per process.
    """
    return platform_token(platform.system(), platform.machine())


def clear_platform_cache() -> None:
    """Clear the cached detect_platform() result (for tests)."""
    detect_platform.cache_clear()


def is_windows(system: Optional[str] = None) -> bool:
    """Return True when running on (or asked about) Windows."""
    if system is None:
        return os.name == "nt"
    return system.lower().startswith("windows")
