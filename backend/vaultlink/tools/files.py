"""File tools - list, read, write and move"""

import logging

import httpx

from ..client import VaultClient
from ..errors import ToolInputError
from ..models import ToolResult
from ..vault import invalidate_files_cache
from .common import require, tool_handler

logger = logging.getLogger(__name__)

WRITE_MODES = ("create", "overwrite", "append")


def _normalize_dir(path: str | None) -> str:
    return (path or "").rstrip("/")


@tool_handler("list_dir")
async def list_dir(client: VaultClient, path: str = "") -> dict:
    """Immediate subdirectories of a folder"""
    _, folders = await client.list_vault(_normalize_dir(path))
    return {"path": path or "", "directories": sorted(folders)}


@tool_handler("list_files")
async def list_files(client: VaultClient, path: str = "", extension: str | None = None) -> dict:
    """Immediate files of a folder, optionally filtered by extension"""
    files, _ = await client.list_vault(_normalize_dir(path))
    if extension:
        suffix = extension if extension.startswith(".") else f".{extension}"
        files = [f for f in files if f.lower().endswith(suffix.lower())]
    return {"path": path or "", "files": sorted(files)}


@tool_handler("read_file")
async def read_file(client: VaultClient, path: str) -> dict:
    require(path, "path")
    if path.endswith("/"):
        raise ToolInputError('File path must not end with / (use "Notes/meeting.md")')
    content = await client.read_file(path)
    return {"path": path, "content": content}


async def _write(client: VaultClient, path: str, content: str, append: bool) -> None:
    if append:
        await client.append_file(path, content)
    else:
        await client.write_file(path, content)


async def write_with_parent(client: VaultClient, path: str, content: str, append: bool = False) -> None:
    """
    Write a file, creating its parent folder when the API reports it missing.

    The parent is created by writing an empty ``keep.md`` into it, then the
    write is retried once. If the retry fails the original error is raised.
    """
    try:
        await _write(client, path, content, append)
    except httpx.HTTPStatusError as error:
        if error.response.status_code not in (400, 404) or "/" not in path:
            raise
        parent = path.rsplit("/", 1)[0]
        logger.info(f"Creating missing parent directory: {parent}")
        try:
            await client.write_file(f"{parent}/keep.md", "")
            await _write(client, path, content, append)
        except Exception:
            raise error


@tool_handler("write_file")
async def write_file(client: VaultClient, path: str, content: str, mode: str = "create") -> dict:
    """Create, overwrite or append to a file"""
    require(path, "path")
    if content is None:
        raise ToolInputError("content parameter is required")
    if mode not in WRITE_MODES:
        raise ToolInputError(f"Invalid mode '{mode}' (expected one of: {', '.join(WRITE_MODES)})")

    if mode == "create" and await client.file_exists(path):
        return ToolResult.fail(f"File already exists: {path}. Use mode='overwrite' to replace.")

    try:
        await write_with_parent(client, path, content, append=(mode == "append"))
    finally:
        # 失败时也可能已创建 keep.md
        invalidate_files_cache()

    action = "appended to" if mode == "append" else "wrote"
    return {
        "path": path,
        "message": f'Successfully {action} file "{path}"',
    }


@tool_handler("move_file")
async def move_file(client: VaultClient, source: str, destination: str, overwrite: bool = False) -> dict:
    """Move or rename a file (read, write to the new path, delete the old one)"""
    require(source, "source")
    require(destination, "destination")
    if source == destination:
        raise ToolInputError("source and destination must differ")

    if not await client.file_exists(source):
        return ToolResult.fail(f"File not found: {source}")
    if not overwrite and await client.file_exists(destination):
        return ToolResult.fail(f"Destination already exists: {destination}. Use overwrite=true to replace.")

    content = await client.read_file(source)
    try:
        await write_with_parent(client, destination, content)
        await client.delete_file(source)
    finally:
        # 删除源文件失败时，目标文件已经写入
        invalidate_files_cache()

    return {
        "source": source,
        "destination": destination,
        "message": f'Moved "{source}" to "{destination}"',
    }
