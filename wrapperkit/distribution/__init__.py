"""
Maven distribution layout and installation.
"""

from .paths import LocalDistribution, PathAssembler, local_paths_for, url_hash
from .installer import Installer

__all__ = [
    "LocalDistribution",
    "PathAssembler",
    "local_paths_for",
    "url_hash",
    "Installer",
]
