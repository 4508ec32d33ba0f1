"""Vault module - tree walking and the cached file index"""

from .walker import walk_vault, join_path
from .cache import (
    FilesCache,
    CacheEntry,
    get_files_cache,
    invalidate_files_cache,
)

__all__ = [
    "walk_vault",
    "join_path",
    "FilesCache",
    "CacheEntry",
    "get_files_cache",
    "invalidate_files_cache",
]
