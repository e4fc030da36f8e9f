"""Unified diff parsing."""

import logging
import re
from typing import List

from diff.diff_settings import DiffSettings
from diff.diff_types import DiffHunk, DiffLine, DiffLineKind, DiffResult


class DiffParser:
    """
    Permissive parser for unified diff format.

    The parser never rejects its input.  Anything it cannot make sense of is
    skipped, so malformed text produces an empty or partial result rather
    than an error.
    """

    HUNK_HEADER_PATTERN = re.compile(r'^@@\s+-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s+@@')

    def __init__(self, settings: DiffSettings | None = None):
        """
        Initialize the parser.

        Args:
            settings: Diff settings.  The context size is a hint only and does not affect parsing.
        """
        self._settings = settings or DiffSettings()
        self._logger = logging.getLogger("DiffParser")

    def parse(self, diff_text: str) -> DiffResult:
        """
        Parse unified diff text into a structured result.

        Args:
            diff_text: Unified diff format text

        Returns:
            Parsed diff.  Empty input gives a result with no hunks.
        """
        result = DiffResult()
        if not diff_text:
            return result

        lines = self._split_lines(diff_text)

        hunk: DiffHunk | None = None
        old_line = new_line = 1
        old_remaining = new_remaining = 0

        for line in lines:
            # File headers are only recognized between hunks.  While a hunk still expects
            # lines, "--- x" is the removed line "-- x" and "+++ x" the added line "++ x".
            between_hunks = hunk is None or (old_remaining <= 0 and new_remaining <= 0)

            if line.startswith('--- ') and between_hunks:
                result.old_file = self._parse_file_name(line[4:], 'a/')
                hunk = None
                continue

            if line.startswith('+++ ') and between_hunks:
                result.new_file = self._parse_file_name(line[4:], 'b/')
                hunk = None
                continue

            if line.startswith('@@'):
                match = self.HUNK_HEADER_PATTERN.match(line)
                if not match:
                    self._logger.debug("Ignoring invalid hunk header: %s", line)
                    hunk = None
                    continue

                hunk = DiffHunk(header=line)
                result.hunks.append(hunk)
                old_line = int(match.group(1))
                new_line = int(match.group(3))
                old_remaining = int(match.group(2)) if match.group(2) is not None else 1
                new_remaining = int(match.group(4)) if match.group(4) is not None else 1
                continue

            if hunk is None:
                # Preamble such as "diff --git" or "index" lines
                continue

            if line.startswith('\\'):
                # "\ No newline at end of file"
                continue

            if line.startswith('-'):
                hunk.lines.append(DiffLine(DiffLineKind.REMOVED, line[1:], old_line_no=old_line))
                old_line += 1
                old_remaining -= 1
                continue

            if line.startswith('+'):
                hunk.lines.append(DiffLine(DiffLineKind.ADDED, line[1:], new_line_no=new_line))
                new_line += 1
                new_remaining -= 1
                continue

            # Context line.  A blank line is an empty context line and an unprefixed
            # line is taken as context that lost its leading space.
            content = line[1:] if line.startswith(' ') else line
            hunk.lines.append(
                DiffLine(DiffLineKind.CONTEXT, content, old_line_no=old_line, new_line_no=new_line)
            )
            old_line += 1
            new_line += 1
            old_remaining -= 1
            new_remaining -= 1

        self._logger.debug(
            "Parsed %d hunk(s) for '%s' (context size hint %d)",
            len(result.hunks),
            result.new_file or result.old_file,
            self._settings.context_size
        )
        return result

    def _split_lines(self, text: str) -> List[str]:
        """
        Split on newlines, dropping the empty string after a trailing newline.

        A CR before each newline is removed so CRLF diffs parse like LF diffs.
        """
        lines = [line.rstrip('\r') for line in text.split('\n')]
        if lines and lines[-1] == '':
            lines.pop()

        return lines

    def _parse_file_name(self, text: str, prefix: str) -> str:
        """
        Extract a file name from a "---" or "+++" header.

        Args:
            text: Header text after the marker
            prefix: The "a/" or "b/" prefix to remove

        Returns:
            File name without prefix or trailing timestamp
        """
        name = text.split('\t', 1)[0].rstrip('\r')
        if name.startswith(prefix):
            name = name[len(prefix):]

        return name


def parse_unified_diff(diff_text: str, settings: DiffSettings | None = None) -> DiffResult:
    """
    Parse unified diff text.

    Args:
        diff_text: Unified diff format text
        settings: Optional diff settings (informational only)

    Returns:
        Parsed diff
    """
    return DiffParser(settings).parse(diff_text)
