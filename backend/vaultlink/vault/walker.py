"""Recursive vault walker with partial-failure tolerance"""

import asyncio
import logging
from typing import Protocol

from ..errors import describe_error
from ..models import WalkFailure, WalkResult

logger = logging.getLogger(__name__)


class TreeLister(Protocol):
    """Anything that can list one directory level of the vault"""

    async def list_vault(self, path: str = "") -> tuple[list[str], list[str]]:
        ...


def join_path(parent: str, name: str) -> str:
    """Join a vault path and a child name; the root prefix is omitted"""
    return f"{parent}/{name}" if parent else name


async def walk_vault(client: TreeLister, path: str = "") -> WalkResult:
    """
    Recursively collect every file path under ``path`` (vault root when empty).

    Subfolders are walked concurrently. A subfolder whose walk fails is left
    out of the result and recorded in ``WalkResult.failures``; only a failure
    to list ``path`` itself is raised.

    The warning is logged by the level that owns the failed subfolder, so its
    ``total_folders`` counts the siblings at that level only. ``failures`` on
    the returned result aggregates every depth.

    Args:
        client: Directory lister (usually a VaultClient)
        path: Folder to start from, relative to the vault root

    Returns:
        WalkResult with files in no guaranteed order
    """
    files, folders = await client.list_vault(path)

    result = WalkResult(files=[join_path(path, name) for name in files])
    if not folders:
        return result

    subpaths = [join_path(path, folder) for folder in folders]
    outcomes = await asyncio.gather(
        *(walk_vault(client, subpath) for subpath in subpaths),
        return_exceptions=True,
    )

    failed: list[WalkFailure] = []
    for subpath, outcome in zip(subpaths, outcomes):
        if isinstance(outcome, WalkResult):
            result.files.extend(outcome.files)
            result.failures.extend(outcome.failures)
        elif isinstance(outcome, Exception):
            failed.append(WalkFailure(folder=subpath, message=describe_error(outcome)))
        else:
            # CancelledError and friends are not ours to swallow
            raise outcome

    if failed:
        logger.warning(
            f"Failed to scan folders under '{path or '/'}': "
            f"total_folders={len(folders)} failed_count={len(failed)} "
            f"error={failed[0].message}"
        )
        result.failures.extend(failed)

    return result
