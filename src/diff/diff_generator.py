"""Unified diff generation."""

import difflib
import logging
from typing import List, Tuple

from diff.diff_settings import DiffSettings


class DiffGenerator:
    """Generates unified diffs between two versions of a text."""

    NO_NEWLINE_MARKER = '\\ No newline at end of file'

    def __init__(self, settings: DiffSettings | None = None):
        """
        Initialize the generator.

        Args:
            settings: Diff settings providing the number of context lines
        """
        self._settings = settings or DiffSettings()
        self._logger = logging.getLogger("DiffGenerator")

    def generate(self, before: str, after: str, file_name: str) -> Tuple[str, int, int]:
        """
        Generate a unified diff.

        Args:
            before: Original text
            after: Modified text
            file_name: Name used in the "---" and "+++" headers

        Returns:
            Tuple of (diff text, number of added lines, number of removed lines).
            Identical inputs give an empty diff and zero counts.
        """
        if before == after:
            return "", 0, 0

        old_lines = self._split_lines(before)
        new_lines = self._split_lines(after)

        matcher = difflib.SequenceMatcher(None, old_lines, new_lines, autojunk=False)

        output: List[str] = [f"--- a/{file_name}\n", f"+++ b/{file_name}\n"]
        added = 0
        removed = 0
        hunk_count = 0

        for group in matcher.get_grouped_opcodes(self._settings.context_size):
            first, last = group[0], group[-1]
            old_range = self._format_range(first[1], last[2])
            new_range = self._format_range(first[3], last[4])
            output.append(f"@@ -{old_range} +{new_range} @@\n")
            hunk_count += 1

            for tag, i1, i2, j1, j2 in group:
                if tag == 'equal':
                    self._append_lines(output, ' ', old_lines[i1:i2])
                    continue

                if tag in ('replace', 'delete'):
                    self._append_lines(output, '-', old_lines[i1:i2])
                    removed += i2 - i1

                if tag in ('replace', 'insert'):
                    self._append_lines(output, '+', new_lines[j1:j2])
                    added += j2 - j1

        self._logger.debug(
            "Generated %d hunk(s) for '%s': +%d -%d", hunk_count, file_name, added, removed
        )
        return "".join(output), added, removed

    def _split_lines(self, text: str) -> List[str]:
        """
        Split text into lines, keeping the newline on every line that has one.

        Only "\\n" ends a line, so a final line without a newline stays distinguishable.
        """
        lines = [line + '\n' for line in text.split('\n')]
        lines[-1] = lines[-1][:-1]
        if not lines[-1]:
            lines.pop()

        return lines

    def _format_range(self, start: int, stop: int) -> str:
        """
        Format a 0-based half-open line range as a unified diff range.

        Args:
            start: First line index
            stop: Index one past the last line

        Returns:
            "start,length" with a 1-based start.  Empty ranges refer to the line before them.
        """
        length = stop - start
        beginning = start + 1
        if not length:
            beginning -= 1

        return f"{beginning},{length}"

    def _append_lines(self, output: List[str], prefix: str, lines: List[str]) -> None:
        for line in lines:
            if line.endswith('\n'):
                output.append(prefix + line)
                continue

            output.append(f"{prefix}{line}\n{self.NO_NEWLINE_MARKER}\n")


def generate_diff(
    before: str,
    after: str,
    file_name: str,
    settings: DiffSettings | None = None
) -> Tuple[str, int, int]:
    """
    Generate a unified diff between two texts.

    Args:
        before: Original text
        after: Modified text
        file_name: Name used in the diff headers
        settings: Optional diff settings

    Returns:
        Tuple of (diff text, added line count, removed line count)
    """
    return DiffGenerator(settings).generate(before, after, file_name)
