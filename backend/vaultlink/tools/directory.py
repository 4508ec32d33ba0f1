"""create_directory - folders exist implicitly, so write a placeholder note"""

from ..client import VaultClient
from ..errors import ToolInputError
from ..vault import invalidate_files_cache
from .common import require, tool_handler

PLACEHOLDER_NAME = "keep.md"


@tool_handler("create_directory")
async def create_directory(client: VaultClient, path: str) -> dict:
    require(path, "path")
    if path.endswith("/"):
        raise ToolInputError('Path must not end with / (use "Notes" not "Notes/")')

    if await client.directory_exists(path):
        return {
            "path": path,
            "created": False,
            "message": f"Directory already exists: {path}/",
        }

    # PUT on a folder path is rejected by some API versions;
    # writing a file creates its parents instead
    await client.write_file(f"{path}/{PLACEHOLDER_NAME}", "")
    invalidate_files_cache()

    return {
        "path": path,
        "created": True,
        "message": f"Directory created: {path}/ (initialized with {PLACEHOLDER_NAME})",
    }
