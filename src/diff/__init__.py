"""
Unified diff parsing and generation, intraline highlighting, and patch application.

This package parses and generates unified diffs, marks the characters that
changed between paired diff lines, and parses and applies "*** Begin Patch"
style patches.  It never touches the filesystem itself: callers pass in the
functions used to read, write and remove files.
"""

from diff.diff_exceptions import (
    DiffError,
    PatchApplicationError,
    PatchContextError,
    PatchFileError,
    PatchFormatError,
    PatchFuzzError,
)
from diff.diff_generator import DiffGenerator, generate_diff
from diff.diff_highlighter import IntralineHighlighter, highlight_intraline_changes, pair_lines
from diff.diff_parser import DiffParser, parse_unified_diff
from diff.diff_settings import DiffSettings, PatchSettings
from diff.diff_types import (
    DiffHunk,
    DiffLine,
    DiffLineKind,
    DiffLinePair,
    DiffResult,
    DiffSegment,
)
from diff.patch_commit import (
    apply_commit,
    assemble_changes,
    load_files,
    patch_to_commit,
    process_patch,
    validate_patch,
)
from diff.patch_matcher import ContextMatcher
from diff.patch_parser import (
    PatchParser,
    identify_files_added,
    identify_files_needed,
    text_to_patch,
)
from diff.patch_types import (
    Patch,
    PatchAction,
    PatchActionType,
    PatchChunk,
    PatchCommit,
    PatchFileChange,
    PatchValidationResult,
)

__all__ = [
    # Exceptions
    'DiffError',
    'PatchFormatError',
    'PatchContextError',
    'PatchFileError',
    'PatchFuzzError',
    'PatchApplicationError',
    # Settings
    'DiffSettings',
    'PatchSettings',
    # Types
    'DiffLineKind',
    'DiffSegment',
    'DiffLine',
    'DiffHunk',
    'DiffResult',
    'DiffLinePair',
    'PatchActionType',
    'PatchChunk',
    'PatchAction',
    'Patch',
    'PatchFileChange',
    'PatchCommit',
    'PatchValidationResult',
    # Core classes
    'DiffParser',
    'DiffGenerator',
    'IntralineHighlighter',
    'ContextMatcher',
    'PatchParser',
    # Functions
    'parse_unified_diff',
    'generate_diff',
    'pair_lines',
    'highlight_intraline_changes',
    'identify_files_needed',
    'identify_files_added',
    'text_to_patch',
    'patch_to_commit',
    'load_files',
    'assemble_changes',
    'apply_commit',
    'process_patch',
    'validate_patch',
]
