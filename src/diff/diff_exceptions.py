"""Custom exceptions for diff and patch operations."""

from typing import Any


class DiffError(Exception):
    """Base exception for diff and patch operations."""

    def __init__(self, message: str, error_details: dict[str, Any] | None = None):
        """
        Initialize the exception.

        Args:
            message: Error message
            error_details: Optional dictionary with detailed error information
        """
        super().__init__(message)
        self.error_details = error_details


class PatchFormatError(DiffError):
    """Raised when patch text does not follow the patch grammar."""


class PatchContextError(DiffError):
    """Raised when the context of a patch section cannot be found in the original file."""

    def __init__(self, line_index: int, snippet: str, eof: bool = False):
        """
        Initialize the exception.

        Args:
            line_index: 0-based line index in the original file where the search started
            snippet: The context lines that could not be matched
            eof: True if the section was expected at the end of the file
        """
        prefix = "Invalid EOF Context" if eof else "Invalid Context"
        super().__init__(
            f"{prefix} {line_index}:\n{snippet}",
            {
                'phase': 'matching',
                'line_index': line_index,
                'snippet': snippet,
                'eof': eof,
            }
        )
        self.line_index = line_index
        self.snippet = snippet
        self.eof = eof


class PatchFileError(DiffError):
    """Raised when a patch references a file in a way that conflicts with the loaded files."""

    def __init__(self, action: str, reason: str, path: str):
        """
        Initialize the exception.

        Args:
            action: Action verb of the failing directive ("Add", "Delete" or "Update")
            reason: Short description of the problem
            path: The file path named by the directive
        """
        super().__init__(
            f"{action} File Error: {reason}: {path}",
            {
                'phase': 'parsing',
                'action': action,
                'reason': reason,
                'path': path,
            }
        )
        self.action = action
        self.reason = reason
        self.path = path


class PatchFuzzError(DiffError):
    """Raised when a patch only matched with more fuzz than allowed."""

    def __init__(self, fuzz: int, max_fuzz: int):
        super().__init__(
            f"Patch fuzz {fuzz} exceeds the allowed maximum of {max_fuzz}",
            {'phase': 'matching', 'fuzz': fuzz, 'max_fuzz': max_fuzz}
        )
        self.fuzz = fuzz


class PatchApplicationError(DiffError):
    """Raised when a parsed patch or commit cannot be turned into file contents."""
