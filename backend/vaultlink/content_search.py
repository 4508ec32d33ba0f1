"""Content search - line-by-line literal or regex grep over vault notes"""

import logging
import re
from typing import Protocol

from .config import get_settings
from .errors import SearchPatternError, describe_error
from .models import ContentMatch
from .vault import walk_vault
from .vault.walker import TreeLister

logger = logging.getLogger(__name__)


class NoteReader(TreeLister, Protocol):
    """Lists directories and reads single files"""

    async def read_file(self, path: str) -> str:
        ...


def compile_pattern(query: str, case_sensitive: bool = False, use_regex: bool = False) -> re.Pattern:
    """Compile the search pattern; literal queries match character for character"""
    flags = 0 if case_sensitive else re.IGNORECASE
    source = query if use_regex else re.escape(query)
    try:
        return re.compile(source, flags)
    except re.error as e:
        raise SearchPatternError(f"Invalid regex pattern: {e}") from e


def match_lines(file: str, content: str, pattern: re.Pattern, limit: int) -> list[ContentMatch]:
    """Collect up to ``limit`` matching lines of one file with one line of context"""
    matches: list[ContentMatch] = []
    # 只按 "\n" 切分，兼容 CRLF；U+2028 等字符不算换行
    lines = [line[:-1] if line.endswith("\r") else line for line in content.split("\n")]
    for i, line in enumerate(lines):
        if len(matches) >= limit:
            break
        if pattern.search(line):
            matches.append(ContentMatch(
                file=file,
                line=i + 1,
                content=line,
                context_before=lines[i - 1] if i > 0 else None,
                context_after=lines[i + 1] if i < len(lines) - 1 else None,
            ))
    return matches


async def search_content(
    client: NoteReader,
    query: str,
    case_sensitive: bool = False,
    use_regex: bool = False,
    max_results: int | None = None,
) -> list[ContentMatch]:
    """
    Scan every note for lines matching ``query``.

    The file list is walked fresh on each call rather than taken from the
    filename cache. Files are read one at a time, results come back in
    (file visit order, line number) order, and scanning stops as soon as
    ``max_results`` matches are collected. An unreadable file is logged
    and skipped.

    Raises:
        SearchPatternError: the regex does not compile (before any vault call)
    """
    settings = get_settings()
    if max_results is None:
        max_results = settings.search_max_results

    pattern = compile_pattern(query, case_sensitive=case_sensitive, use_regex=use_regex)
    if max_results < 1:
        return []

    walked = await walk_vault(client)
    notes = [path for path in walked.files if path.endswith(settings.note_extension)]

    matches: list[ContentMatch] = []
    for path in notes:
        if len(matches) >= max_results:
            break
        try:
            content = await client.read_file(path)
        except Exception as e:
            logger.warning(f"Failed to read file {path}: {describe_error(e)}")
            continue
        matches.extend(match_lines(path, content, pattern, max_results - len(matches)))

    return matches
