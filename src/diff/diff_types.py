"""Shared dataclasses for diff operations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class DiffLineKind(Enum):
    """Enumeration of the kinds of line that can appear in a hunk."""
    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"


@dataclass
class DiffSegment:
    """A character range of a line that differs from its paired line."""

    start: int  # Character offset into the line content (inclusive)
    end: int  # Character offset into the line content (exclusive)
    kind: DiffLineKind
    text: str


@dataclass
class DiffLine:
    """Represents a single line in a diff hunk."""

    kind: DiffLineKind
    content: str  # The actual line content (without the prefix character)
    old_line_no: int = 0  # 1-indexed, 0 for added lines
    new_line_no: int = 0  # 1-indexed, 0 for removed lines
    segments: List[DiffSegment] = field(default_factory=list)


@dataclass
class DiffHunk:
    """Represents a single hunk from a unified diff."""

    header: str  # The verbatim "@@ ... @@" line
    lines: List[DiffLine] = field(default_factory=list)


@dataclass
class DiffResult:
    """Result of parsing a unified diff."""

    old_file: str = ""
    new_file: str = ""
    hunks: List[DiffHunk] = field(default_factory=list)


@dataclass
class DiffLinePair:
    """
    A pair of lines shown side by side.

    Context lines are paired with themselves.  Removed and added lines that
    have no counterpart leave the other side as None.
    """

    left: DiffLine | None
    right: DiffLine | None
