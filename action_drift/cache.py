"""
On-disk cache for remote lookups
"""

import hashlib
import logging
import os
import tempfile
import time
from enum import Enum
from pathlib import Path
from typing import Optional

CACHE_TTL_SECONDS = 24 * 60 * 60
CACHE_DIR_ENV = "ACTION_DRIFT_CACHE_DIR"


class QueryKind(Enum):
    """Kinds of cached queries. Part of every cache key."""

    LATEST_RELEASE = "latest-release"
    DEFAULT_BRANCH = "default-branch"
    COMMIT_SHA = "commit-sha"
    AHEAD_COUNT = "ahead-count"
    COMPATIBILITY = "compatibility"


def default_cache_dir() -> Path:
    """Resolve the cache directory from the environment."""
    override = os.getenv(CACHE_DIR_ENV)
    if override:
        return Path(override)

    xdg_cache = os.getenv("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / "action-drift"

    return Path.home() / ".cache" / "action-drift"


class FileCache:
    """One file per key; the file's mtime is the entry's timestamp."""

    def __init__(self, cache_dir: Optional[Path] = None, ttl: int = CACHE_TTL_SECONDS):
        self.cache_dir = Path(cache_dir) if cache_dir else default_cache_dir()
        self.ttl = ttl
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def key(kind: QueryKind, *params: str) -> str:
        """Derive the cache key for a query."""
        raw = f"{kind.value}:" + "\x1f".join(params)
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    def _path(self, kind: QueryKind, *params: str) -> Path:
        return self.cache_dir / self.key(kind, *params)

    def is_fresh(self, path: Path) -> bool:
        """Check whether a cache file is younger than the TTL."""
        try:
            mtime = path.stat().st_mtime
        except OSError:
            return False
        return time.time() - mtime < self.ttl

    def get(self, kind: QueryKind, *params: str) -> Optional[str]:
        """Return the cached value, or None on a miss or a stale entry."""
        path = self._path(kind, *params)
        if not self.is_fresh(path):
            return None

        try:
            value = path.read_text(encoding="utf-8")
        except OSError as e:
            self.logger.debug(f"Cannot read cache entry {path}: {e}")
            return None

        self.logger.debug(f"Cache hit for {kind.value} {' '.join(params)}")
        return value

    def set(self, kind: QueryKind, *params: str, value: str) -> None:
        """Store a value. Failures to write only cost a future cache miss."""
        path = self._path(kind, *params)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.cache_dir, prefix=".tmp-")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            self.logger.debug(f"Cannot write cache entry {path}: {e}")
