"""find_files - fuzzy filename search over the cached vault index"""

from ..config import get_settings
from ..matcher import match_files
from ..vault import FilesCache, get_files_cache
from ..vault.walker import TreeLister
from .common import require, tool_handler


@tool_handler("find_files")
async def find_files(
    client: TreeLister,
    query: str,
    fuzzy: bool = True,
    max_results: int | None = None,
    cache: FilesCache | None = None,
) -> dict:
    """Search vault paths by (partial, possibly misspelled) filename"""
    require(query, "query")
    if max_results is None:
        max_results = get_settings().find_max_results

    cache = cache or get_files_cache()
    all_files = await cache.get_index(client)

    matches = match_files(query, all_files, fuzzy=fuzzy, max_results=max_results)
    return {
        "query": query,
        "total_matches": len(matches),
        "matches": [m.to_dict() for m in matches],
    }
