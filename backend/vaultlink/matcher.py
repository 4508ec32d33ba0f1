"""Fuzzy filename matcher - tiered ranking of vault paths against a query"""

from typing import Iterable

from .models import FileMatch, MatchType


EXACT_SCORE = 1000.0
PREFIX_SCORE = 800.0
SUBSTRING_SCORE = 600.0
FUZZY_SCORE = 400.0

# In-tier penalties never exceed this, so score bands do not overlap
MAX_TIER_PENALTY = 199


def split_filename(path: str) -> tuple[str, str]:
    """Return (filename, filename without extension) for a vault path"""
    filename = path.rsplit("/", 1)[-1]
    dot = filename.rfind(".")
    # Dotfiles like ".gitignore" have no extension
    stem = filename[:dot] if dot > 0 else filename
    return filename, stem


def subsequence_gap(query: str, text: str) -> int | None:
    """
    Smallest number of skipped characters between the first and last matched
    character over every in-order occurrence of ``query`` within ``text``.

    Returns None when ``query`` is not a subsequence of ``text``.
    """
    if not query:
        return 0

    best: int | None = None
    first = query[0]
    for start, char in enumerate(text):
        if char != first:
            continue

        # Greedy forward match gives the earliest end for this start
        qi = 1
        end = start
        for pos in range(start + 1, len(text)):
            if qi == len(query):
                break
            if text[pos] == query[qi]:
                qi += 1
                end = pos
        if qi < len(query):
            # A later start has even less text to work with
            break

        gap = (end - start + 1) - len(query)
        if best is None or gap < best:
            best = gap
            if best == 0:
                break
    return best


def fuzzy_score(gap: int, path_length: int) -> float:
    """Tighter clusters and shorter paths score higher; always in (0, 400]"""
    return FUZZY_SCORE / (1 + gap + 0.01 * path_length)


def score_path(query: str, path: str, fuzzy: bool = True) -> FileMatch | None:
    """
    Rank a single path. ``query`` must already be lower-cased.

    The first rule that matches wins:
        1. exact full path or filename
        2. filename (without extension) starts with the query
        3. query appears anywhere in the path
        4. query characters appear in order (fuzzy only)
    """
    lowered = path.lower()
    filename, stem = split_filename(lowered)

    if query == lowered or query == filename:
        return FileMatch(path=path, score=EXACT_SCORE, match_type=MatchType.EXACT)

    if stem.startswith(query):
        penalty = min(len(stem) - len(query), MAX_TIER_PENALTY)
        return FileMatch(path=path, score=PREFIX_SCORE - penalty, match_type=MatchType.PREFIX)

    if query in lowered:
        penalty = min(len(lowered) - len(query), MAX_TIER_PENALTY)
        return FileMatch(path=path, score=SUBSTRING_SCORE - penalty, match_type=MatchType.SUBSTRING)

    if fuzzy:
        gap = subsequence_gap(query, lowered)
        if gap is not None:
            return FileMatch(
                path=path,
                score=fuzzy_score(gap, len(lowered)),
                match_type=MatchType.FUZZY,
            )

    return None


def match_files(
    query: str,
    candidates: Iterable[str],
    fuzzy: bool = True,
    max_results: int = 10,
) -> list[FileMatch]:
    """
    Score every candidate and return the best ``max_results`` matches.

    Sorting is by (tier, score desc, path length, path), so a match in a
    stronger tier always ranks above any match in a weaker one. The list is
    truncated only after every candidate has been scored.

    Args:
        query: Partial filename, may contain typos
        candidates: Vault file paths
        fuzzy: Allow subsequence matches
        max_results: Maximum number of matches returned

    Returns:
        Matches, best first
    """
    needle = query.strip().lower()
    if not needle or max_results < 1:
        return []

    matches = []
    for path in candidates:
        match = score_path(needle, path, fuzzy=fuzzy)
        if match is not None:
            matches.append(match)

    matches.sort(key=lambda m: m.sort_key)
    return matches[:max_results]
