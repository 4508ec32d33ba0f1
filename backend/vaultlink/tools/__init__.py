"""Tools module - file operations and search exposed to agents"""

from .files import list_dir, list_files, read_file, write_file, move_file
from .delete import delete_file, delete_folder
from .directory import create_directory
from .find import find_files
from .search import search
from .registry import TOOLS, ToolSpec, call_tool, list_tools

__all__ = [
    "list_dir",
    "list_files",
    "read_file",
    "write_file",
    "move_file",
    "delete_file",
    "delete_folder",
    "create_directory",
    "find_files",
    "search",
    "TOOLS",
    "ToolSpec",
    "call_tool",
    "list_tools",
]
