"""
Pytest configuration and shared fixtures for wrapperkit tests.
"""

import io
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Dict

import pytest

from wrapperkit.core.platform import clear_platform_cache


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_platform_cache():
    """Platform detection is cached per process; reset it around each test."""
    clear_platform_cache()
    yield
    clear_platform_cache()


@pytest.fixture
def make_zip(tmp_path: Path) -> Callable[..., Path]:
    """Factory building a zip archive from a {member name: content} mapping."""

    def _make_zip(entries: Dict[str, bytes], name: str = "archive.zip") -> Path:
        archive = tmp_path / "archives" / name
        archive.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive, "w") as zf:
            for member, content in entries.items():
                zf.writestr(member, content)
        return archive

    return _make_zip


@pytest.fixture
def make_tar_gz(tmp_path: Path) -> Callable[..., Path]:
    """Factory building a .tar.gz archive from a {member name: content} mapping."""

    def _make_tar_gz(entries: Dict[str, bytes], name: str = "archive.tar.gz") -> Path:
        archive = tmp_path / "archives" / name
        archive.parent.mkdir(parents=True, exist_ok=True)
        with tarfile.open(archive, "w:gz") as tar:
            for member, content in entries.items():
                info = tarfile.TarInfo(member)
                info.size = len(content)
                info.mode = 0o755 if "/bin/" in member else 0o644
                tar.addfile(info, io.BytesIO(content))
        return archive

    return _make_tar_gz


@pytest.fixture
def maven_zip(make_zip) -> Path:
    """Minimal Maven distribution: one maven-0.9/ root with bin/mvn and a jar."""
    return make_zip(
        {
            "maven-0.9/": b"",
            "maven-0.9/bin/mvn": b"#!/bin/sh\necho maven\n",
            "maven-0.9/lib/maven-core-0.9.jar": b"PK fake jar",
        },
        name="maven-0.9.zip",
    )


class FakeFetcher:
    """ContentFetcher stand-in copying a local file and counting calls."""

    def __init__(self, source: Path):
        self.source = Path(source)
        self.calls = []

    def download(self, url: str, destination: Path) -> None:
        self.calls.append((url, Path(destination)))
        destination = Path(destination)
        if destination.exists():
            return
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(self.source.read_bytes())


@pytest.fixture
def fake_fetcher_factory() -> Callable[[Path], FakeFetcher]:
    """Factory for fetchers serving a fixed local archive."""
    return FakeFetcher
