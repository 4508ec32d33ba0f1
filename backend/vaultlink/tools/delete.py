"""Delete tools - soft delete to the trash folder or permanent delete"""

import asyncio
import logging
import time
from datetime import datetime, timezone

import httpx

from ..client import VaultClient
from ..config import get_settings
from ..errors import ToolInputError, describe_error
from ..models import ToolResult
from ..vault import invalidate_files_cache, walk_vault
from .common import require, tool_handler

logger = logging.getLogger(__name__)


def trash_timestamp() -> str:
    """ISO-8601 UTC timestamp safe for use in a filename"""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"


async def _move_to_trash(client: VaultClient, path: str, trash_path: str) -> None:
    content = await client.read_file(path)
    await client.write_file(trash_path, content)
    await client.delete_file(path)


@tool_handler("delete_file")
async def delete_file(
    client: VaultClient,
    path: str,
    confirm: bool = False,
    permanent: bool = False,
) -> dict:
    """Delete a file; by default it is moved to the trash folder"""
    require(path, "path")
    if not confirm:
        raise ToolInputError("confirm=true is required to delete a file (safety check)")

    if not await client.file_exists(path):
        return ToolResult.fail(f"File not found: {path}")

    if permanent:
        await client.delete_file(path)
        invalidate_files_cache()
        return {
            "deleted_path": path,
            "message": "File permanently deleted (irreversible)",
        }

    trash_folder = get_settings().trash_folder
    filename = path.rsplit("/", 1)[-1]
    trash_path = f"{trash_folder}/{trash_timestamp()}_{filename}"

    try:
        await _move_to_trash(client, path, trash_path)
    finally:
        invalidate_files_cache()

    return {
        "original_path": path,
        "trash_location": trash_path,
        "message": f"File moved to {trash_folder}/ (open in Obsidian to restore)",
    }


@tool_handler("delete_folder")
async def delete_folder(
    client: VaultClient,
    path: str,
    confirm: bool = False,
    permanent: bool = False,
) -> dict:
    """
    Delete every file under a folder, concurrently.

    Empty folders remain (the API cannot remove them). The folder is walked
    fresh, not taken from the filename cache.
    """
    if not confirm:
        raise ToolInputError("confirm=true is required to delete a folder (safety check)")
    require(path, "path")
    folder = path.rstrip("/")

    try:
        walked = await walk_vault(client, folder)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            return ToolResult.fail("Folder empty or not found")
        raise

    all_files = walked.files
    if not all_files:
        return ToolResult.fail("Folder empty or not found")

    if permanent:
        outcomes = await asyncio.gather(
            *(client.delete_file(f) for f in all_files),
            return_exceptions=True,
        )
        data = {
            "deleted_files": 0,
            "message": "Files permanently deleted (irreversible). Empty folders remain.",
        }
    else:
        trash_root = f"{get_settings().trash_folder}/{int(time.time() * 1000)}"
        outcomes = await asyncio.gather(
            *(_move_to_trash(client, f, f"{trash_root}/{f}") for f in all_files),
            return_exceptions=True,
        )
        data = {
            "moved_files": 0,
            "trash_location": f"{trash_root}/",
            "message": "Files moved to trash (recoverable). Empty folders remain.",
        }

    failed = {}
    for file_path, outcome in zip(all_files, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            failed[file_path] = describe_error(outcome)

    # Some files may be gone even if others failed
    invalidate_files_cache()

    if len(failed) == len(all_files):
        first_error = next(iter(failed.values()))
        return ToolResult.fail(f"Failed to delete any file in {folder}: {first_error}")

    count_key = "deleted_files" if permanent else "moved_files"
    data[count_key] = len(all_files) - len(failed)
    if failed:
        logger.warning(f"delete_folder: {len(failed)} of {len(all_files)} files failed in {folder}")
        data["failed_files"] = failed
    if walked.failures:
        data["skipped_folders"] = [f.folder for f in walked.failures]
    return data
