"""Dataclasses describing parsed patches and the commits built from them."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List


class PatchActionType(Enum):
    """The kind of change a patch makes to a file."""
    ADD = "add"
    DELETE = "delete"
    UPDATE = "update"


@dataclass
class PatchChunk:
    """A contiguous block of deleted and inserted lines within an updated file."""

    orig_index: int = -1  # 0-based line in the original file where the chunk starts
    del_lines: List[str] = field(default_factory=list)
    ins_lines: List[str] = field(default_factory=list)


@dataclass
class PatchAction:
    """A single file operation parsed from patch text."""

    type: PatchActionType
    new_file: str | None = None  # Full content, ADD only
    chunks: List[PatchChunk] = field(default_factory=list)  # UPDATE only
    move_path: str | None = None


@dataclass
class Patch:
    """All file operations parsed from patch text, keyed by path."""

    actions: Dict[str, PatchAction] = field(default_factory=dict)


@dataclass
class PatchFileChange:
    """A fully resolved change to one file."""

    type: PatchActionType
    old_content: str | None = None
    new_content: str | None = None
    move_path: str | None = None


@dataclass
class PatchCommit:
    """A set of file changes ready to be written out, keyed by path."""

    changes: Dict[str, PatchFileChange] = field(default_factory=dict)


@dataclass
class PatchValidationResult:
    """Result of validating a patch without applying it."""

    valid: bool
    message: str
    fuzz: int = 0
