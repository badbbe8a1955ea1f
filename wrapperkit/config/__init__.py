"""Wrapper configuration loading and validation."""

from .configuration import (
    MAVEN_USER_HOME_STRING,
    PROJECT_STRING,
    InstallRequest,
    WrapperConfiguration,
    prepare_distribution_url,
)

__all__ = [
    "MAVEN_USER_HOME_STRING",
    "PROJECT_STRING",
    "InstallRequest",
    "WrapperConfiguration",
    "prepare_distribution_url",
]
