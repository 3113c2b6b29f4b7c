#!/usr/bin/env python3

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field, field_validator

# Path used by unified diffs for the missing side of an added or deleted file
DELETED_FILE_PATH = "/dev/null"


class ChangeType(str, Enum):
    ADDED = "add"
    REMOVED = "del"
    CONTEXT = "normal"


@dataclass(frozen=True)
class LineChange:
    """A single line of a hunk."""
    change_type: ChangeType
    content: str
    new_line: Optional[int] = None
    old_line: Optional[int] = None

    @property
    def marker(self) -> str:
        if self.change_type is ChangeType.ADDED:
            return "+"
        if self.change_type is ChangeType.REMOVED:
            return "-"
        return " "

    @property
    def is_commentable(self) -> bool:
        # Only new-file line numbers can carry a review comment
        return self.change_type is not ChangeType.REMOVED and self.new_line is not None


@dataclass
class DiffChunk:
    """Data class for one hunk of a changed file."""
    header: str
    content: str
    changes: List[LineChange] = field(default_factory=list)


@dataclass
class DiffFile:
    """Data class for a changed file in a PR."""
    new_path: str
    old_path: str
    chunks: List[DiffChunk] = field(default_factory=list)

    @property
    def is_deleted(self) -> bool:
        return self.new_path == DELETED_FILE_PATH

    @property
    def is_added(self) -> bool:
        return self.old_path == DELETED_FILE_PATH

    @property
    def path(self) -> str:
        return self.old_path if self.is_deleted else self.new_path

    @property
    def added_count(self) -> int:
        return sum(
            1 for chunk in self.chunks for change in chunk.changes
            if change.change_type is ChangeType.ADDED
        )

    @property
    def removed_count(self) -> int:
        return sum(
            1 for chunk in self.chunks for change in chunk.changes
            if change.change_type is ChangeType.REMOVED
        )


@dataclass
class PRDetails:
    """Data class for pull request details."""
    owner: str
    repo: str
    pull_number: int
    title: str
    description: Optional[str] = None


@dataclass(frozen=True)
class Comment:
    """An inline review comment anchored on a new-file line."""
    path: str
    line: int
    body: str

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "line": self.line, "body": self.body}


class ReviewFinding(BaseModel):
    lineNumber: int = Field(..., description="The new-file line number the comment is about")
    reviewComment: str = Field(..., description="The code review comment")
    severity: Optional[int] = Field(None, description="Severity from 1 (nit) to 5 (critical)")

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return None


class PRSummary(BaseModel):
    summary: str = Field(..., description="Narrative technical summary of the pull request")
    highlights: List[str] = Field(default_factory=list, description="Discrete change highlights")


@dataclass
class ParsedFindings:
    """Findings recovered from a model reply."""
    findings: List[ReviewFinding]
    discarded: int = 0


@dataclass
class ParseFailure:
    """A model reply that could not be used at all."""
    reason: str
    raw: Optional[str] = None
