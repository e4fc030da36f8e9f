"""Exact-then-fuzzy search for patch context in original file content."""

import logging
import unicodedata
from typing import Callable, List, Tuple

from diff.diff_settings import PatchSettings


# Typographic punctuation folded to ASCII before comparing normalized lines.  NFKC already
# handles compatibility characters such as non-breaking spaces and the ellipsis.
_PUNCTUATION_MAP = str.maketrans({
    '\u2018': "'",
    '\u2019': "'",
    '\u201a': "'",
    '\u201b': "'",
    '\u2032': "'",
    '\u201c': '"',
    '\u201d': '"',
    '\u201e': '"',
    '\u201f': '"',
    '\u2033': '"',
    '\u00ab': '"',
    '\u00bb': '"',
    '\u2010': '-',
    '\u2011': '-',
    '\u2012': '-',
    '\u2013': '-',
    '\u2014': '-',
    '\u2015': '-',
    '\u2212': '-',
})


def normalize_line(line: str) -> str:
    """
    Normalize a line for the loosest level of context matching.

    The line is NFKC normalized, typographic quotes and dashes become their ASCII
    equivalents, and every run of Unicode whitespace collapses to a single space with
    leading and trailing whitespace removed.

    Args:
        line: Line to normalize

    Returns:
        Normalized line
    """
    text = unicodedata.normalize('NFKC', line).translate(_PUNCTUATION_MAP)
    return ' '.join(text.split())


def _exact(line: str) -> str:
    return line


def _stripped(line: str) -> str:
    return line.strip()


class ContextMatcher:
    """
    Locates the context and deleted lines of a patch section in an original file.

    Matching is tried at three levels, each searching forward over the whole
    remaining file before the next, looser, level is tried:

    1. exact equality (fuzz 0)
    2. equality after stripping leading and trailing whitespace (fuzz 1 per line)
    3. equality after normalize_line (fuzz 2 per line)

    The fuzz of a match is the sum over its lines of the cost of the strictest
    level at which each line compares equal.
    """

    LEVELS: List[Tuple[Callable[[str], str], int]] = [
        (_exact, 0),
        (_stripped, 1),
        (normalize_line, 2),
    ]

    def __init__(self, settings: PatchSettings | None = None):
        """
        Initialize the matcher.

        Args:
            settings: Patch settings providing the EOF fuzz penalty
        """
        self._settings = settings or PatchSettings()
        self._logger = logging.getLogger("ContextMatcher")

    def find_context_core(self, lines: List[str], context: List[str], start: int) -> Tuple[int, int]:
        """
        Find the first position at or after start where context appears in lines.

        Args:
            lines: Lines of the original file
            context: Context and deleted lines to find
            start: First index to consider

        Returns:
            Tuple of (index, fuzz).  The index is -1 if there is no match.  Empty context
            matches at start with no fuzz.
        """
        if not context:
            return start, 0

        start = max(start, 0)
        last = len(lines) - len(context)

        for level, (normalize, _cost) in enumerate(self.LEVELS):
            target = [normalize(s) for s in context]
            candidates = [normalize(s) for s in lines]

            for i in range(start, last + 1):
                if candidates[i:i + len(context)] == target:
                    fuzz = self._window_fuzz(lines[i:i + len(context)], context)
                    if level > 0:
                        self._logger.debug("Context matched at line %d with fuzz %d", i, fuzz)

                    return i, fuzz

        return -1, 0

    def find_context(
        self,
        lines: List[str],
        context: List[str],
        start: int,
        eof: bool
    ) -> Tuple[int, int]:
        """
        Find context, preferring the end of the file for end-of-file sections.

        End-of-file context is first looked for at the tail of the file.  If it is not
        there the normal forward search runs from start and any match found that way
        carries the EOF fuzz penalty.

        Args:
            lines: Lines of the original file
            context: Context and deleted lines to find
            start: First index to consider
            eof: True if the section was marked as ending at the end of the file

        Returns:
            Tuple of (index, fuzz), with index -1 if not found
        """
        if not eof:
            return self.find_context_core(lines, context, start)

        # A trailing newline leaves an empty last element that the context never includes
        end = len(lines)
        if end and lines[-1] == '':
            end -= 1

        index, fuzz = self.find_context_core(lines, context, max(end - len(context), start))
        if index != -1:
            return index, fuzz

        index, fuzz = self.find_context_core(lines, context, start)
        if index == -1:
            return -1, 0

        self._logger.warning("End of file context found at line %d, not at the end of the file", index)
        return index, fuzz + self._settings.eof_fuzz_penalty

    def find_marker(self, lines: List[str], marker: str, start: int) -> Tuple[int, int]:
        """
        Find a section marker line (the text after "@@ ") at or after start.

        Args:
            lines: Lines of the original file
            marker: Marker text
            start: First index to consider

        Returns:
            Tuple of (index just past the marker line, fuzz), or (-1, 0) if not found
        """
        for level, (normalize, cost) in enumerate(self.LEVELS[:2]):
            target = normalize(marker)
            for i in range(max(start, 0), len(lines)):
                if normalize(lines[i]) == target:
                    if level > 0:
                        self._logger.debug("Section marker matched at line %d with fuzz %d", i, cost)

                    return i + 1, cost

        return -1, 0

    def _window_fuzz(self, actual: List[str], expected: List[str]) -> int:
        fuzz = 0
        for act, exp in zip(actual, expected):
            for normalize, cost in self.LEVELS:
                if normalize(act) == normalize(exp):
                    fuzz += cost
                    break

        return fuzz
