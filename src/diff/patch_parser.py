"""
Parser for the "*** Begin Patch" text format.

A patch names files to add, delete or update.  Updates are given as sections of
context, deleted and inserted lines which are located in the original file
content using ContextMatcher:

    *** Begin Patch
    *** Add File: path/to/new.py
    +line of the new file
    *** Delete File: path/to/old.py
    *** Update File: path/to/existing.py
    *** Move to: path/to/renamed.py
    @@ class Example
     unchanged line
    -removed line
    +added line
    *** End of File
    *** End Patch

The parser does not read files.  Callers use identify_files_needed() to find the
files an update or delete refers to and pass their content in.
"""

import logging
from typing import Dict, List, Tuple

from diff.diff_exceptions import PatchContextError, PatchFileError, PatchFormatError, PatchFuzzError
from diff.diff_settings import PatchSettings
from diff.patch_matcher import ContextMatcher
from diff.patch_types import Patch, PatchAction, PatchActionType, PatchChunk


BEGIN_PATCH = "*** Begin Patch"
END_PATCH = "*** End Patch"
ADD_FILE = "*** Add File: "
DELETE_FILE = "*** Delete File: "
UPDATE_FILE = "*** Update File: "
MOVE_TO = "*** Move to: "
END_OF_FILE = "*** End of File"

# Lines that end the body of an add or update directive
_FILE_TERMINATORS = (END_PATCH, UPDATE_FILE.rstrip(), DELETE_FILE.rstrip(), ADD_FILE.rstrip())
_UPDATE_TERMINATORS = _FILE_TERMINATORS + (END_OF_FILE,)
_SECTION_TERMINATORS = ("@@",) + _UPDATE_TERMINATORS


def _norm(line: str) -> str:
    """Strip a trailing CR so directives are recognized in CRLF patches."""
    return line.rstrip('\r')


class PatchParser:
    """
    State machine that turns patch lines into a Patch.

    The parser keeps a single forward-only index into the patch lines.  Each
    directive handler consumes the lines it owns and leaves the index on the next
    directive.
    """

    def __init__(
        self,
        current_files: Dict[str, str],
        lines: List[str],
        settings: PatchSettings | None = None
    ):
        """
        Initialize the parser.

        Args:
            current_files: Original content of every file the patch updates or deletes
            lines: Patch text split into lines
            settings: Patch settings used for context matching
        """
        self.current_files = current_files
        self.lines = lines
        self.index = 0
        self.patch = Patch()
        self.fuzz = 0
        self._matcher = ContextMatcher(settings)
        self._logger = logging.getLogger("PatchParser")

    def is_done(self, prefixes: Tuple[str, ...] = ()) -> bool:
        """
        Check if parsing has reached the end of the lines or a line with one of the prefixes.

        Args:
            prefixes: Prefixes that end the current construct

        Returns:
            True if there is nothing more to parse for the current construct
        """
        if self.index >= len(self.lines):
            return True

        return bool(prefixes) and _norm(self.lines[self.index]).startswith(prefixes)

    def startswith(self, prefix: str | Tuple[str, ...]) -> bool:
        """Check if the current line starts with a prefix."""
        if self.index >= len(self.lines):
            return False

        return _norm(self.lines[self.index]).startswith(prefix)

    def read_str(self, prefix: str, return_everything: bool = False) -> str | None:
        """
        Consume the current line if it starts with prefix.

        Args:
            prefix: Required prefix
            return_everything: If True return the whole line rather than the text after the prefix

        Returns:
            The line text, or None if the current line does not start with prefix
        """
        if not self.startswith(prefix):
            return None

        line = _norm(self.lines[self.index])
        self.index += 1
        return line if return_everything else line[len(prefix):]

    def read_line(self) -> str:
        """Consume and return the current line."""
        if self.index >= len(self.lines):
            raise PatchFormatError("Unexpected end of patch")

        line = self.lines[self.index]
        self.index += 1
        return line

    def parse(self) -> None:
        """
        Parse directives until the "*** End Patch" line.

        Raises:
            PatchFormatError: If the patch text is malformed
            PatchFileError: If a directive conflicts with the loaded files
            PatchContextError: If update context cannot be found
        """
        while not self.is_done((END_PATCH,)):
            path = self.read_str(UPDATE_FILE)
            if path is not None:
                path = path.strip()
                if path in self.patch.actions:
                    raise PatchFileError("Update", "Duplicate Path", path)

                move_to = self.read_str(MOVE_TO)
                if path not in self.current_files:
                    raise PatchFileError("Update", "Missing File", path)

                action = self._parse_update_file(self.current_files[path])
                action.move_path = move_to.strip() if move_to and move_to.strip() else None
                self.patch.actions[path] = action
                continue

            path = self.read_str(DELETE_FILE)
            if path is not None:
                path = path.strip()
                if path in self.patch.actions:
                    raise PatchFileError("Delete", "Duplicate Path", path)

                if path not in self.current_files:
                    raise PatchFileError("Delete", "Missing File", path)

                self.patch.actions[path] = PatchAction(type=PatchActionType.DELETE)
                continue

            path = self.read_str(ADD_FILE)
            if path is not None:
                path = path.strip()
                if path in self.patch.actions:
                    raise PatchFileError("Add", "Duplicate Path", path)

                if path in self.current_files:
                    raise PatchFileError("Add", "File already exists", path)

                self.patch.actions[path] = self._parse_add_file()
                continue

            raise PatchFormatError(f"Unknown Line: {self.lines[self.index]}")

        if not self.startswith(END_PATCH):
            raise PatchFormatError("Missing End Patch")

        self.index += 1

    def _parse_update_file(self, text: str) -> PatchAction:
        """
        Parse the sections of an update directive.

        Args:
            text: Original content of the file being updated

        Returns:
            Update action with chunks positioned in the original file
        """
        action = PatchAction(type=PatchActionType.UPDATE)
        file_lines = text.split('\n')
        index = 0

        while not self.is_done(_UPDATE_TERMINATORS):
            section_start = index
            marker = self.read_str("@@ ")
            bare_marker = marker is None and self.lines[self.index].strip() == "@@"
            if bare_marker:
                self.read_line()

            if marker is None and not bare_marker and index != 0:
                raise PatchFormatError(f"Invalid Line:\n{self.lines[self.index]}")

            if marker and marker.strip():
                marker_index, marker_fuzz = self._matcher.find_marker(file_lines, marker, index)
                if marker_index == -1:
                    self._logger.debug("Section marker not found, ignoring it: %s", marker)

                else:
                    index = marker_index
                    self.fuzz += marker_fuzz

            context, chunks, end_index, eof = peek_next_section(self.lines, self.index)
            new_index, fuzz = self._matcher.find_context(file_lines, context, index, eof)
            if new_index == -1 and index != section_start:
                # The marker line may itself be the first line of context
                new_index, fuzz = self._matcher.find_context(file_lines, context, section_start, eof)

            if new_index == -1:
                raise PatchContextError(section_start, "\n".join(context), eof)

            self.fuzz += fuzz
            for chunk in chunks:
                chunk.orig_index += new_index
                action.chunks.append(chunk)

            index = new_index + len(context)
            self.index = end_index

        return action

    def _parse_add_file(self) -> PatchAction:
        """
        Parse the "+" prefixed lines of an add directive.

        Returns:
            Add action holding the full new file content
        """
        lines: List[str] = []
        while not self.is_done(_FILE_TERMINATORS):
            line = self.read_line()
            if not line.startswith('+'):
                raise PatchFormatError(f"Invalid Add File Line: {line}")

            lines.append(line[1:])

        return PatchAction(type=PatchActionType.ADD, new_file='\n'.join(lines))


def peek_next_section(lines: List[str], index: int) -> Tuple[List[str], List[PatchChunk], int, bool]:
    """
    Read one section of an update directive.

    Args:
        lines: Patch lines
        index: Index of the first line of the section

    Returns:
        Tuple of (old lines, chunks, end index, eof) where old lines are the context and
        deleted lines to find in the original file, chunk indexes are relative to the start
        of the old lines, and eof is True if the section ended with "*** End of File".

    Raises:
        PatchFormatError: If the section contains an invalid line or is empty
    """
    old: List[str] = []
    del_lines: List[str] = []
    ins_lines: List[str] = []
    chunks: List[PatchChunk] = []
    mode = "keep"
    start_index = index

    while index < len(lines):
        line = lines[index]
        normed = _norm(line)
        if normed.startswith(_SECTION_TERMINATORS) or normed == "***":
            break

        if normed.startswith("***"):
            raise PatchFormatError(f"Invalid Line: {line}")

        index += 1

        last_mode = mode
        if normed == "":
            line = " "

        if line[0] == '+':
            mode = "add"

        elif line[0] == '-':
            mode = "delete"

        elif line[0] == ' ':
            mode = "keep"

        else:
            raise PatchFormatError(f"Invalid Line: {line}")

        content = line[1:]

        if mode == "keep" and last_mode != mode:
            if ins_lines or del_lines:
                chunks.append(PatchChunk(
                    orig_index=len(old) - len(del_lines),
                    del_lines=del_lines,
                    ins_lines=ins_lines
                ))

            del_lines = []
            ins_lines = []

        if mode == "delete":
            del_lines.append(content)
            old.append(content)

        elif mode == "add":
            ins_lines.append(content)

        else:
            old.append(content)

    if ins_lines or del_lines:
        chunks.append(PatchChunk(
            orig_index=len(old) - len(del_lines),
            del_lines=del_lines,
            ins_lines=ins_lines
        ))

    if index < len(lines) and _norm(lines[index]) == END_OF_FILE:
        return old, chunks, index + 1, True

    if index == start_index:
        raise PatchFormatError(f"Nothing in this section at line {index}")

    return old, chunks, index, False


def text_to_patch(
    text: str,
    orig: Dict[str, str],
    settings: PatchSettings | None = None
) -> Tuple[Patch, int]:
    """
    Parse patch text.

    Args:
        text: Patch text, from "*** Begin Patch" to "*** End Patch"
        orig: Original content of the files the patch updates or deletes
        settings: Patch settings

    Returns:
        Tuple of (patch, accumulated fuzz)

    Raises:
        PatchFormatError: If the patch text is malformed
        PatchFileError: If a directive conflicts with the loaded files
        PatchContextError: If update context cannot be found
        PatchFuzzError: If the fuzz exceeds the configured maximum
    """
    settings = settings or PatchSettings()
    lines = text.strip().split('\n')
    if len(lines) < 2 or _norm(lines[0]) != BEGIN_PATCH or _norm(lines[-1]) != END_PATCH:
        raise PatchFormatError("Invalid patch text - missing sentinels")

    parser = PatchParser(orig, lines, settings)
    parser.index = 1
    parser.parse()

    if parser.index < len(lines):
        raise PatchFormatError(f"Unexpected text after End Patch: {lines[parser.index]}")

    if settings.max_fuzz is not None and parser.fuzz > settings.max_fuzz:
        raise PatchFuzzError(parser.fuzz, settings.max_fuzz)

    return parser.patch, parser.fuzz


def _directive_paths(text: str, prefixes: Tuple[str, ...]) -> List[str]:
    paths: Dict[str, None] = {}
    for line in text.split('\n'):
        line = _norm(line)
        for prefix in prefixes:
            if line.startswith(prefix):
                paths[line[len(prefix):].strip()] = None

    return list(paths)


def identify_files_needed(text: str) -> List[str]:
    """
    Get the paths a patch updates or deletes, in order of first appearance.

    Args:
        text: Patch text

    Returns:
        Paths whose content must be loaded before calling text_to_patch()
    """
    return _directive_paths(text, (UPDATE_FILE, DELETE_FILE))


def identify_files_added(text: str) -> List[str]:
    """
    Get the paths a patch adds, in order of first appearance.

    Args:
        text: Patch text

    Returns:
        Paths of new files
    """
    return _directive_paths(text, (ADD_FILE,))
