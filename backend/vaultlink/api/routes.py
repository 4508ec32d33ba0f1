"""API routes for health, tool listing and tool calls."""

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel

from .. import __version__
from ..client import VaultClient, get_vault_client
from ..errors import UnknownToolError
from ..tools import call_tool, list_tools
from ..vault import get_files_cache, invalidate_files_cache


router = APIRouter(prefix="/api")


# === Response Models ===

class FilesCacheStatus(BaseModel):
    cached: bool
    fresh: bool
    age_seconds: Optional[float] = None
    files: int = 0
    failed_folders: int = 0


class HealthResponse(BaseModel):
    status: str
    version: str
    files_cache: FilesCacheStatus


class ToolsResponse(BaseModel):
    tools: list[dict]


class GenericStatusResponse(BaseModel):
    status: str


# === Health Check ===

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint, with the state of the files cache"""
    cache = get_files_cache()
    entry = cache.entry
    age = cache.age()
    return HealthResponse(
        status="ok",
        version=__version__,
        files_cache=FilesCacheStatus(
            cached=entry is not None,
            fresh=cache.is_fresh(),
            age_seconds=round(age, 2) if age is not None else None,
            files=len(entry.files) if entry else 0,
            failed_folders=len(cache.last_walk_failures),
        ),
    )


# === Tools ===

@router.get("/tools", response_model=ToolsResponse)
async def get_tools():
    """List available tools with their JSON argument schemas"""
    return ToolsResponse(tools=list_tools())


@router.post("/tools/{name}")
async def run_tool(
    name: str,
    arguments: Optional[dict[str, Any]] = Body(default=None),
    client: VaultClient = Depends(get_vault_client),
):
    """
    Call a tool by name.

    The request body is the tool's argument object. A failed tool answers
    400 with the error message as ``detail``.
    """
    try:
        result = await call_tool(client, name, arguments)
    except UnknownToolError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if not result.success:
        raise HTTPException(status_code=400, detail=result.error or "Tool execution failed")
    return result.data


# === Cache ===

@router.post("/cache/invalidate", response_model=GenericStatusResponse)
async def invalidate_cache():
    """Force the next find_files call to re-walk the vault"""
    invalidate_files_cache()
    return GenericStatusResponse(status="ok")
