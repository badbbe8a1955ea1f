"""
On-disk cache of resolved JDK versions.

Each ``(major version, vendor)`` key maps to one properties file under the
cache directory holding the resolved version, the write timestamp (epoch
milliseconds) and the update policy active at write time. Entries are
rewritten wholesale; concurrent writers race with last-write-wins, which is
harmless because resolutions for one key converge.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from wrapperkit.core.exceptions import ConfigurationError
from wrapperkit.core.filesystem import atomic_write
from wrapperkit.core.properties import format_properties, parse_properties

logger = logging.getLogger(__name__)

NEVER = "never"
DAILY = "daily"
ALWAYS = "always"
INTERVAL_PREFIX = "interval:"

DEFAULT_UPDATE_POLICY = DAILY

_MILLIS_PER_MINUTE = 60 * 1000
_MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class UpdatePolicy:
    """
    How long a cached version resolution stays fresh.

    Attributes:
        name: 'never', 'daily', 'always' or 'interval'
        interval_minutes: Freshness window for 'interval' policies
    """

    name: str
    interval_minutes: int = 0

    @classmethod
    def parse(cls, text: Optional[str]) -> "UpdatePolicy":
        """
        Parse a policy string.

        Raises:
            ConfigurationError: If text is not 'never', 'daily', 'always'
                or 'interval:N' with a positive integer N

        Example:
            >>> UpdatePolicy.parse("interval:90").ttl_minutes
            90
        """
        if text in (NEVER, DAILY, ALWAYS):
            return cls(text)

        if text and text.startswith(INTERVAL_PREFIX):
            interval = text[len(INTERVAL_PREFIX) :]
            if interval.isdigit() and int(interval) > 0:
                return cls("interval", int(interval))

        raise ConfigurationError(
            f"Invalid JDK update policy: '{text}'. "
            "Expected one of 'never', 'daily', 'always' or 'interval:<minutes>'."
        )

    @property
    def ttl_minutes(self) -> Optional[int]:
        """Freshness window in minutes; None means entries never expire."""
        if self.name == DAILY:
            return _MINUTES_PER_DAY
        if self.name == "interval":
            return self.interval_minutes
        if self.name == ALWAYS:
            return 0
        return None

    def __str__(self) -> str:
        if self.name == "interval":
            return f"{INTERVAL_PREFIX}{self.interval_minutes}"
        return self.name


class JdkVersionCache:
    """
    TTL cache mapping (major version, vendor) to a resolved JDK version.

    The cache is an explicit object owned by the resolver; nothing is kept in
    module state, so each run (and each test) gets an isolated view.

    Example:
        >>> cache = JdkVersionCache(Path("~/.m2/wrapper/cache"), "daily")
        >>> cache.put("17", "temurin", "17.0.15")
        >>> cache.get("17", "temurin")
        '17.0.15'
    """

    def __init__(
        self,
        cache_dir: Path,
        update_policy: Union[str, UpdatePolicy, None] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize version cache.

        Args:
            cache_dir: Directory holding the cache files
            update_policy: UpdatePolicy or policy string (default: daily)
            clock: Returns the current time in epoch seconds
        """
        self.cache_dir = Path(cache_dir)
        if update_policy is None:
            update_policy = DEFAULT_UPDATE_POLICY
        if not isinstance(update_policy, UpdatePolicy):
            update_policy = UpdatePolicy.parse(update_policy)
        self.update_policy = update_policy
        self.clock = clock

    @staticmethod
    def is_valid_update_policy(policy: Optional[str]) -> bool:
        """Return True if policy is a valid update policy string."""
        try:
            UpdatePolicy.parse(policy)
            return True
        except ConfigurationError:
            return False

    def cache_file(self, major_version: str, vendor: str) -> Path:
        """Path of the cache file for a key."""
        return self.cache_dir / f"jdk-{major_version}-{vendor}.properties"

    def get(self, major_version: str, vendor: str) -> Optional[str]:
        """
        Get a cached version resolution if present and fresh.

        Unreadable or malformed entries count as a miss.

        Returns:
            Cached resolved version, or None
        """
        if self.update_policy.name == ALWAYS:
            return None

        cache_file = self.cache_file(major_version, vendor)
        if not cache_file.exists():
            return None

        try:
            props = parse_properties(cache_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read JDK version cache: {e}")
            return None

        cached_version = props.get("version")
        timestamp = props.get("timestamp")
        if not cached_version or timestamp is None:
            return None

        if self._is_expired(timestamp):
            logger.debug(f"JDK version cache entry expired: {cache_file}")
            return None

        return cached_version

    def put(self, major_version: str, vendor: str, resolved_version: str) -> None:
        """
        Cache a version resolution result.

        Does nothing under the 'never' policy. Write failures are logged and
        otherwise ignored.
        """
        if self.update_policy.name == NEVER:
            return

        props = {
            "version": resolved_version,
            "timestamp": str(self._now_millis()),
            "updatePolicy": str(self.update_policy),
        }

        try:
            atomic_write(
                self.cache_file(major_version, vendor),
                format_properties(
                    props, comment=f"JDK version cache for {major_version} {vendor}"
                ),
            )
        except OSError as e:
            logger.warning(f"Failed to cache JDK version: {e}")

    def clear(self) -> None:
        """Remove all cached version resolutions."""
        if not self.cache_dir.exists():
            return

        for path in self.cache_dir.glob("jdk-*.properties"):
            try:
                path.unlink()
            except OSError:
                logger.warning(f"Failed to delete cache file: {path}")

    def _now_millis(self) -> int:
        return int(self.clock() * 1000)

    def _is_expired(self, timestamp: str) -> bool:
        """Check if an entry written at timestamp (epoch millis) is stale."""
        ttl = self.update_policy.ttl_minutes
        if ttl is None:
            return False

        try:
            written = int(timestamp)
        except ValueError:
            logger.warning(f"Failed to parse cache timestamp: {timestamp}")
            return True

        # Age in whole minutes, truncated toward zero
        age_minutes = int((self._now_millis() - written) / _MILLIS_PER_MINUTE)
        return age_minutes >= ttl
