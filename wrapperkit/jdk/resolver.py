"""
JDK version resolution through the SDKMAN candidates API.

Turns a user-facing ``(version, vendor)`` request such as ``("17", "amazon")``
into a concrete download URL:

1. Normalize the vendor (aliases like 'adoptium' or 'aws' map onto the
   canonical SDKMAN vendor names; missing vendor means 'temurin')
2. Detect the platform token ('linuxx64', 'darwinarm64', ...)
3. Expand a bare major version into a patch version, using the version cache
   before asking the "list all versions" endpoint
4. Ask the broker endpoint for the binary download URL

Metadata requests are retried with exponential backoff and jitter on 5xx
responses and transport errors.
"""

import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from wrapperkit.core.exceptions import (
    PlatformUnsupportedError,
    VersionResolutionError,
)
from wrapperkit.core.platform import UNSUPPORTED_PLATFORM, detect_platform
from wrapperkit.jdk.version_cache import JdkVersionCache

logger = logging.getLogger(__name__)

SDKMAN_API = "https://api.sdkman.io/2"

DEFAULT_VENDOR = "temurin"

VENDOR_ALIASES = {
    "adoptium": "temurin",
    "adoptopenjdk": "temurin",
    "eclipse": "temurin",
    "amazon": "corretto",
    "aws": "corretto",
    "azul": "zulu",
    "bellsoft": "liberica",
    "ms": "microsoft",
    "ibm": "semeru",
    "graal": "graalvm",
}

VENDOR_SUFFIXES = {
    "temurin": "tem",
    "corretto": "amzn",
    "zulu": "zulu",
    "liberica": "librca",
    "oracle": "oracle",
    "microsoft": "ms",
    "semeru": "sem",
    "graalvm": "grl",
}

SUFFIX_VENDORS = {suffix: vendor for vendor, suffix in VENDOR_SUFFIXES.items()}

MAX_ATTEMPTS = 3
BASE_DELAY_SECONDS = 2.0
MAX_JITTER_FRACTION = 0.2

_REDIRECT_CODES = (301, 302, 303, 307, 308)


@dataclass(frozen=True)
class JdkMetadata:
    """Resolved JDK download information."""

    download_url: str
    """Direct URL of the JDK archive"""

    sha256_sum: Optional[str]
    """Expected SHA-256 of the archive (SDKMAN does not publish one)"""

    version: str
    """Concrete JDK version, e.g. '17.0.15'"""

    vendor: str
    """Canonical vendor, e.g. 'temurin'"""


def normalize_vendor(vendor: Optional[str]) -> str:
    """
    Map a vendor name or alias onto its canonical name.

    Example:
        >>> normalize_vendor("AWS")
        'corretto'
        >>> normalize_vendor(None)
        'temurin'
    """
    if vendor is None or not vendor.strip():
        return DEFAULT_VENDOR

    normalized = vendor.strip().lower()
    return VENDOR_ALIASES.get(normalized, normalized)


def vendor_suffix(vendor: str) -> str:
    """SDKMAN identifier suffix for a canonical vendor (temurin for unknown ones)."""
    return VENDOR_SUFFIXES.get(vendor, VENDOR_SUFFIXES[DEFAULT_VENDOR])


class JdkResolver:
    """
    Resolves JDK versions and download URLs.

    Example:
        >>> cache = JdkVersionCache(Path("~/.m2/wrapper/cache"), "daily")
        >>> resolver = JdkResolver(version_cache=cache)
        >>> metadata = resolver.resolve_jdk("17", "temurin")
        >>> print(metadata.download_url)
    """

    def __init__(
        self,
        version_cache: Optional[JdkVersionCache] = None,
        api_base: str = SDKMAN_API,
        session: Optional[requests.Session] = None,
        platform: Optional[str] = None,
        user_agent: str = "mvnw",
        timeout: int = 30,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize JDK resolver.

        Args:
            version_cache: Cache for major-version expansions. None disables caching.
            api_base: Base URL of the SDKMAN API
            session: Optional requests session
            platform: Platform token override. If None, detected on first use.
            user_agent: User-Agent header for API requests
            timeout: Request timeout in seconds
            sleep: Blocking sleep used between retries
            rng: Random source for backoff jitter
        """
        self.version_cache = version_cache
        self.api_base = api_base.rstrip("/")
        self.session = session or requests.Session()
        self.platform = platform
        self.user_agent = user_agent
        self.timeout = timeout
        self.sleep = sleep
        self.rng = rng or random.Random()

    def resolve_jdk(self, version: str, vendor: Optional[str] = None) -> JdkMetadata:
        """
        Resolve JDK metadata for a version and vendor.

        Args:
            version: Major ('17') or full ('17.0.15') version
            vendor: Vendor name or alias; None means temurin

        Returns:
            JdkMetadata with the download URL

        Raises:
            ValueError: If version is empty
            PlatformUnsupportedError: If the current platform has no JDK builds
            VersionResolutionError: If the API cannot resolve the request
        """
        if version is None or not version.strip():
            raise ValueError("JDK version cannot be null or empty")

        version = version.strip()
        normalized_vendor = normalize_vendor(vendor)
        platform = self._detect_platform()
        sdkman_version = self.resolve_sdkman_version(version, normalized_vendor, platform)

        logger.info(f"Resolving JDK {sdkman_version} for {platform}")
        download_url = self._resolve_download_url(sdkman_version, platform)

        base_version, _, suffix = sdkman_version.rpartition("-")
        return JdkMetadata(
            download_url=download_url,
            sha256_sum=None,
            version=base_version,
            vendor=SUFFIX_VENDORS.get(suffix, DEFAULT_VENDOR),
        )

    def resolve_sdkman_version(self, version: str, vendor: str, platform: str) -> str:
        """
        Build the SDKMAN identifier ('17.0.15-tem') for a version and vendor.

        A bare major version is expanded to the newest matching patch
        version; anything else is used as given.
        """
        suffix = vendor_suffix(vendor)

        if version.isascii() and version.isdigit():
            return f"{self._resolve_major_version(version, vendor, suffix, platform)}-{suffix}"

        return f"{version}-{suffix}"

    def _detect_platform(self) -> str:
        platform = self.platform or detect_platform()
        if platform == UNSUPPORTED_PLATFORM:
            raise PlatformUnsupportedError(
                "Unsupported platform: JDK resolution is not available for this "
                "operating system and architecture. Set jdkDistributionUrl to an "
                "explicit JDK download URL instead."
            )
        return platform

    def _resolve_major_version(
        self, major_version: str, vendor: str, suffix: str, platform: str
    ) -> str:
        """Expand a major version, consulting the cache first."""
        if self.version_cache is not None:
            cached = self.version_cache.get(major_version, vendor)
            if cached:
                logger.debug(f"Using cached JDK version {cached} for {major_version} {vendor}")
                return cached

        url = f"{self.api_base}/candidates/java/{platform}/versions/all"
        response = self._request_with_retry(url)
        if response.status_code != 200:
            raise VersionResolutionError(
                f"SDKMAN API request failed with response code {response.status_code} for URL: {url}"
            )

        resolved = self._select_version(response.text, major_version, suffix)
        if resolved is None:
            raise VersionResolutionError(
                f"No JDK {major_version} release found for vendor '{vendor}' on {platform}. "
                "Specify a full version or set jdkDistributionUrl."
            )

        logger.info(f"Resolved JDK {major_version} ({vendor}) to {resolved}")
        if self.version_cache is not None:
            self.version_cache.put(major_version, vendor, resolved)

        return resolved

    @staticmethod
    def _select_version(listing: str, major_version: str, suffix: str) -> Optional[str]:
        """
        Pick the first listed version matching major version and vendor suffix.

        The API lists versions newest-first and the first match is taken
        as-is; the listing is not re-sorted.
        """
        tail = f"-{suffix}"
        for token in listing.split(","):
            token = token.strip()
            if not token.endswith(tail):
                continue
            candidate = token[: -len(tail)]
            if candidate.split(".")[0] == major_version:
                return candidate
        return None

    def _resolve_download_url(self, sdkman_version: str, platform: str) -> str:
        """Ask the broker endpoint for the archive URL."""
        url = f"{self.api_base}/broker/download/java/{sdkman_version}/{platform}"
        response = self._request_with_retry(url)

        if response.status_code in _REDIRECT_CODES:
            location = (response.headers.get("Location") or "").strip()
            if not location:
                raise VersionResolutionError(
                    "SDKMAN API returned redirect without location header"
                )
            return location

        if response.status_code == 200:
            body = response.text.strip()
            if not body:
                raise VersionResolutionError(
                    f"SDKMAN API returned empty download URL for {sdkman_version} on {platform}"
                )
            return body

        raise VersionResolutionError(
            f"SDKMAN API request failed with response code {response.status_code} for URL: {url}"
        )

    def _request_with_retry(self, url: str) -> requests.Response:
        """
        GET url without following redirects, retrying transient failures.

        5xx responses and transport errors are retried up to MAX_ATTEMPTS
        times, sleeping BASE_DELAY_SECONDS * 2**attempt plus up to 20% jitter
        between attempts. 4xx responses fail immediately.

        Raises:
            VersionResolutionError: On 4xx or when all attempts fail
        """
        last_error = None

        for attempt in range(MAX_ATTEMPTS):
            try:
                response = self.session.get(
                    url,
                    headers={"User-Agent": self.user_agent},
                    timeout=self.timeout,
                    allow_redirects=False,
                )
            except RequestException as e:
                last_error = str(e)
            else:
                if response.status_code < 400:
                    return response
                if response.status_code < 500:
                    raise VersionResolutionError(
                        f"SDKMAN API request failed with response code "
                        f"{response.status_code} for URL: {url}"
                    )
                last_error = f"HTTP {response.status_code}"

            if attempt == MAX_ATTEMPTS - 1:
                break

            delay = self.backoff_delay(attempt)
            logger.warning(
                f"SDKMAN API attempt {attempt + 1} failed: {last_error}. "
                f"Retrying in {delay:.1f}s..."
            )
            self.sleep(delay)

        raise VersionResolutionError(
            f"SDKMAN API request failed after {MAX_ATTEMPTS} attempts for URL: {url}: {last_error}"
        )

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retry number attempt + 1 (exponential, with jitter)."""
        delay = BASE_DELAY_SECONDS * (2**attempt)
        return delay + delay * self.rng.uniform(0, MAX_JITTER_FRACTION)
