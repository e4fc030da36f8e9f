"""Character-level highlighting of changed lines within a hunk."""

import difflib
import logging
from typing import List

from diff.diff_types import DiffHunk, DiffLine, DiffLineKind, DiffLinePair, DiffSegment


def pair_lines(lines: List[DiffLine]) -> List[DiffLinePair]:
    """
    Pair up the lines of a hunk for side-by-side display.

    A removed line immediately followed by an added line forms one pair.  Any other
    removed or added line is paired with None, and context lines are paired with
    themselves.

    Args:
        lines: Lines of a hunk

    Returns:
        List of line pairs in hunk order
    """
    pairs: List[DiffLinePair] = []
    i = 0
    while i < len(lines):
        line = lines[i]

        if line.kind == DiffLineKind.REMOVED:
            if i + 1 < len(lines) and lines[i + 1].kind == DiffLineKind.ADDED:
                pairs.append(DiffLinePair(left=line, right=lines[i + 1]))
                i += 2
                continue

            pairs.append(DiffLinePair(left=line, right=None))

        elif line.kind == DiffLineKind.ADDED:
            pairs.append(DiffLinePair(left=None, right=line))

        else:
            pairs.append(DiffLinePair(left=line, right=line))

        i += 1

    return pairs


class IntralineHighlighter:
    """Marks the characters that differ between paired removed and added lines."""

    def __init__(self) -> None:
        """Initialize the highlighter."""
        self._logger = logging.getLogger("IntralineHighlighter")

    def highlight(self, hunk: DiffHunk) -> None:
        """
        Populate the segments of paired changed lines in a hunk.

        Segments are recomputed from scratch on every call, so highlighting the same
        hunk twice gives the same result as highlighting it once.

        Args:
            hunk: Hunk to update in place
        """
        for line in hunk.lines:
            line.segments = []

        highlighted = 0
        for pair in pair_lines(hunk.lines):
            if pair.left is None or pair.right is None:
                continue

            if pair.left.kind == pair.right.kind:
                continue

            self._highlight_pair(pair.left, pair.right)
            highlighted += 1

        self._logger.debug("Highlighted %d line pair(s) in hunk %s", highlighted, hunk.header)

    def _highlight_pair(self, removed: DiffLine, added: DiffLine) -> None:
        """
        Compute the character diff of a removed/added pair.

        Args:
            removed: The removed line (left side)
            added: The added line (right side)
        """
        old_text = removed.content
        new_text = added.content
        matcher = difflib.SequenceMatcher(None, old_text, new_text, autojunk=False)

        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == 'equal':
                continue

            if i2 > i1:
                removed.segments.append(
                    DiffSegment(start=i1, end=i2, kind=removed.kind, text=old_text[i1:i2])
                )

            if j2 > j1:
                added.segments.append(
                    DiffSegment(start=j1, end=j2, kind=added.kind, text=new_text[j1:j2])
                )


def highlight_intraline_changes(hunk: DiffHunk) -> None:
    """
    Add character-level segments to the paired changed lines of a hunk.

    Args:
        hunk: Hunk to update in place
    """
    IntralineHighlighter().highlight(hunk)
