"""search - full-text search across vault notes"""

from ..content_search import NoteReader, search_content
from .common import require, tool_handler


@tool_handler("search")
async def search(
    client: NoteReader,
    query: str,
    case_sensitive: bool = False,
    regex: bool = False,
    max_results: int | None = None,
) -> dict:
    require(query, "query")
    matches = await search_content(
        client,
        query,
        case_sensitive=case_sensitive,
        use_regex=regex,
        max_results=max_results,
    )
    return {
        "matches": [m.to_dict() for m in matches],
        "total_matches": len(matches),
    }
