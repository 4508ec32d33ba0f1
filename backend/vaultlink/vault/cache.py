"""Time-boxed in-memory cache of the full vault file list"""

import logging
import time
from dataclasses import dataclass
from typing import Callable

from ..config import get_settings
from ..models import WalkFailure
from .walker import TreeLister, walk_vault

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """Snapshot of the vault file list"""
    files: list[str]
    timestamp: float


class FilesCache:
    """
    Memoizes ``walk_vault`` over the whole vault for ``ttl_seconds``.

    States: empty -> populated -> expired/invalidated -> populated ...
    There is no lock: concurrent misses each rebuild and the last one to
    finish is kept. An ``invalidate()`` racing a rebuild may be overwritten
    by that rebuild's result.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds is None:
            ttl_seconds = get_settings().files_cache_ttl
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: CacheEntry | None = None
        self.last_walk_failures: list[WalkFailure] = []

    @property
    def entry(self) -> CacheEntry | None:
        return self._entry

    def age(self) -> float | None:
        """Seconds since the cached list was captured, None when empty"""
        entry = self._entry
        if entry is None:
            return None
        return self._clock() - entry.timestamp

    def is_fresh(self) -> bool:
        age = self.age()
        return age is not None and age < self.ttl_seconds

    def invalidate(self) -> None:
        """Drop the cached list; the next lookup rebuilds regardless of TTL"""
        self._entry = None

    async def get_index(self, client: TreeLister) -> list[str]:
        """Return every file path in the vault, walking it on a miss"""
        entry = self._entry
        if entry is not None and self._clock() - entry.timestamp < self.ttl_seconds:
            logger.debug("find_files: cache hit (0 API calls)")
            return entry.files

        logger.debug("find_files: cache miss - scanning vault")
        start_time = time.perf_counter()
        try:
            walked = await walk_vault(client)
        except Exception:
            # 重建失败后不再返回旧数据
            self._entry = None
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(f"find_files: scanned {len(walked.files)} files in {duration_ms:.0f}ms")

        self.last_walk_failures = walked.failures
        self._entry = CacheEntry(files=walked.files, timestamp=self._clock())
        return walked.files


# Process-wide cache shared by all requests
_files_cache: FilesCache | None = None


def get_files_cache() -> FilesCache:
    """Get or create the process-wide files cache"""
    global _files_cache
    if _files_cache is None:
        _files_cache = FilesCache()
    return _files_cache


def invalidate_files_cache() -> None:
    """Called by every tool that adds, removes or renames a file"""
    get_files_cache().invalidate()
