"""Shared fixtures and utilities for diff and patch tests."""

import re
from typing import Dict, List

import pytest

from diff.diff_generator import DiffGenerator
from diff.diff_parser import DiffParser
from diff.diff_types import DiffLineKind, DiffResult
from diff.patch_matcher import ContextMatcher


class InMemoryFileStore:
    """Dictionary-backed file store providing open/write/remove callables."""

    def __init__(self, files: Dict[str, str] | None = None):
        self.files: Dict[str, str] = dict(files or {})
        self.written: List[str] = []
        self.removed: List[str] = []

    def open(self, path: str) -> str:
        """Read a file."""
        if path not in self.files:
            raise FileNotFoundError(path)

        return self.files[path]

    def write(self, path: str, content: str) -> None:
        """Write a file."""
        self.files[path] = content
        self.written.append(path)

    def remove(self, path: str) -> None:
        """Remove a file."""
        if path not in self.files:
            raise FileNotFoundError(path)

        del self.files[path]
        self.removed.append(path)


@pytest.fixture
def file_store():
    """Factory for in-memory file stores."""
    def _create_store(files: Dict[str, str] | None = None) -> InMemoryFileStore:
        return InMemoryFileStore(files)
    return _create_store


@pytest.fixture
def diff_parser():
    """Create a unified diff parser."""
    return DiffParser()


@pytest.fixture
def diff_generator():
    """Create a unified diff generator with default settings."""
    return DiffGenerator()


@pytest.fixture
def context_matcher():
    """Create a context matcher with default settings."""
    return ContextMatcher()


class DiffTestHelpers:
    """Helper utilities for diff testing."""

    HUNK_RANGE_PATTERN = re.compile(r'^@@ -(\d+)(?:,(\d+))? ')

    @staticmethod
    def make_patch(*lines: str) -> str:
        """Build patch text from individual lines."""
        return '\n'.join(("*** Begin Patch",) + lines + ("*** End Patch",))

    @staticmethod
    def apply_parsed_diff(before: List[str], result: DiffResult) -> List[str]:
        """Rebuild the new lines from the old lines and a parsed diff."""
        output: List[str] = []
        pos = 0
        for hunk in result.hunks:
            match = DiffTestHelpers.HUNK_RANGE_PATTERN.match(hunk.header)
            assert match is not None
            start = int(match.group(1))
            length = int(match.group(2)) if match.group(2) is not None else 1

            # Empty ranges name the line before the insertion point
            index = start if length == 0 else start - 1
            output.extend(before[pos:index])
            pos = index

            for line in hunk.lines:
                if line.kind == DiffLineKind.CONTEXT:
                    output.append(line.content)
                    pos += 1

                elif line.kind == DiffLineKind.REMOVED:
                    pos += 1

                else:
                    output.append(line.content)

        output.extend(before[pos:])
        return output


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return DiffTestHelpers
