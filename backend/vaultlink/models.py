"""Data models for vaultlink"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MatchType(str, Enum):
    """Tier of a filename match, strongest first"""
    EXACT = "exact"
    PREFIX = "prefix"
    SUBSTRING = "substring"
    FUZZY = "fuzzy"


# Sort order of the tiers; lower sorts first
MATCH_TIERS = {
    MatchType.EXACT: 0,
    MatchType.PREFIX: 1,
    MatchType.SUBSTRING: 2,
    MatchType.FUZZY: 3,
}


@dataclass
class FileMatch:
    """A vault path ranked against a filename query"""
    path: str
    score: float
    match_type: MatchType

    @property
    def sort_key(self) -> tuple:
        return (MATCH_TIERS[self.match_type], -self.score, len(self.path), self.path)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "score": round(self.score, 2),
            "match_type": self.match_type.value,
        }


@dataclass
class ContentMatch:
    """A single line matching a content search"""
    file: str
    line: int                       # 1-based
    content: str
    context_before: str | None = None
    context_after: str | None = None

    def to_dict(self) -> dict:
        data = {
            "file": self.file,
            "line": self.line,
            "content": self.content,
        }
        # Absent at file boundaries
        if self.context_before is not None:
            data["context_before"] = self.context_before
        if self.context_after is not None:
            data["context_after"] = self.context_after
        return data


@dataclass
class WalkFailure:
    """A subfolder whose listing failed during a walk"""
    folder: str
    message: str


@dataclass
class WalkResult:
    """Files collected by a walk plus the subtrees that were dropped"""
    files: list[str] = field(default_factory=list)
    failures: list[WalkFailure] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failures


@dataclass
class ToolResult:
    """Outcome of a tool call"""
    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any) -> "ToolResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "ToolResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}
