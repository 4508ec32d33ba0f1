"""Tool registry - argument schemas and dispatch by tool name"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Literal, Optional

from pydantic import BaseModel, Field, ValidationError

from ..client import VaultClient
from ..errors import UnknownToolError
from ..models import ToolResult
from .delete import delete_file, delete_folder
from .directory import create_directory
from .files import list_dir, list_files, move_file, read_file, write_file
from .find import find_files
from .search import search


# === Argument Models ===

class ListDirArgs(BaseModel):
    path: str = Field(default="", description='Directory path, e.g. "BUSINESS/" or "" for root')


class ListFilesArgs(BaseModel):
    path: str = Field(default="", description='Directory path, e.g. "Notes/" or "" for root')
    extension: Optional[str] = Field(default=None, description='Filter by extension (e.g. "md")')


class ReadFileArgs(BaseModel):
    path: str = Field(description='File path without trailing slash, e.g. "Notes/meeting.md"')


class WriteFileArgs(BaseModel):
    path: str = Field(description="Path to file")
    content: str = Field(description="File content")
    mode: Literal["create", "overwrite", "append"] = Field(
        default="create", description="Write mode (default: create)"
    )


class SearchArgs(BaseModel):
    query: str = Field(description="Search query")
    case_sensitive: bool = Field(default=False, description="Case sensitive search (default: false)")
    regex: bool = Field(default=False, description="Use regex pattern (default: false)")
    max_results: Optional[int] = Field(default=None, ge=1, description="Maximum results (default: 100)")


class MoveFileArgs(BaseModel):
    source: str = Field(description="Source path")
    destination: str = Field(description="Destination path")
    overwrite: bool = Field(default=False, description="Overwrite if exists (default: false)")


class DeleteArgs(BaseModel):
    path: str = Field(description="Path to file or folder")
    confirm: bool = Field(description="Must be true (safety check)")
    permanent: bool = Field(
        default=False,
        description="If true, permanently delete (irreversible). Default: false (moves to trash)",
    )


class FindFilesArgs(BaseModel):
    query: str = Field(description="Search query (partial filename, can contain typos)")
    fuzzy: bool = Field(default=True, description="Enable fuzzy matching for typo tolerance (default: true)")
    max_results: Optional[int] = Field(default=None, ge=1, description="Maximum number of results (default: 10)")


class CreateDirectoryArgs(BaseModel):
    path: str = Field(description='Directory path without trailing slash, e.g. "Projects/2024"')


# === Registry ===

@dataclass(frozen=True)
class ToolSpec:
    """A callable tool with its argument schema"""
    name: str
    description: str
    args_model: type[BaseModel]
    handler: Callable[..., Awaitable[ToolResult]]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.args_model.model_json_schema(),
        }


TOOLS: dict[str, ToolSpec] = {
    spec.name: spec
    for spec in [
        ToolSpec(
            "list_dir",
            "List subdirectories in a path.",
            ListDirArgs,
            list_dir,
        ),
        ToolSpec(
            "list_files",
            "List files in a directory, optionally filtered by extension.",
            ListFilesArgs,
            list_files,
        ),
        ToolSpec(
            "read_file",
            "Read content of a file. If you don't know the exact filename, use find_files first.",
            ReadFileArgs,
            read_file,
        ),
        ToolSpec(
            "write_file",
            "Create or update a file. Missing parent folders are created.",
            WriteFileArgs,
            write_file,
        ),
        ToolSpec(
            "search",
            "Search for text across all notes, with optional regex.",
            SearchArgs,
            search,
        ),
        ToolSpec(
            "move_file",
            "Move or rename a file.",
            MoveFileArgs,
            move_file,
        ),
        ToolSpec(
            "delete_file",
            "Delete a file. By default moves it to the trash folder for recovery. "
            "Set permanent=true for irreversible deletion.",
            DeleteArgs,
            delete_file,
        ),
        ToolSpec(
            "delete_folder",
            "Delete all files in a folder recursively. By default moves them to the trash folder. "
            "Empty folders remain (API limitation).",
            DeleteArgs,
            delete_folder,
        ),
        ToolSpec(
            "find_files",
            "Search files in the vault with fuzzy matching. Use this when you don't know the exact filename.",
            FindFilesArgs,
            find_files,
        ),
        ToolSpec(
            "create_directory",
            "Create a directory (initialized with a keep.md placeholder).",
            CreateDirectoryArgs,
            create_directory,
        ),
    ]
}


def list_tools() -> list[dict]:
    return [spec.to_dict() for spec in TOOLS.values()]


def format_validation_error(error: ValidationError) -> str:
    """Flatten pydantic errors into one readable line"""
    messages = []
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "arguments"
        if item["type"] == "missing":
            messages.append(f"{field} parameter is required")
        else:
            messages.append(f"{field}: {item['msg']}")
    return "; ".join(messages)


async def call_tool(client: VaultClient, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
    """
    Validate arguments and run a tool by name.

    Raises:
        UnknownToolError: no tool with that name
    """
    spec = TOOLS.get(name)
    if spec is None:
        raise UnknownToolError(f"Unknown tool: {name}")

    try:
        args = spec.args_model.model_validate(arguments or {})
    except ValidationError as e:
        return ToolResult.fail(format_validation_error(e))

    return await spec.handler(client, **args.model_dump())
