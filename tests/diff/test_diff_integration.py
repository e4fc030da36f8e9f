"""Integration tests for the diff module."""

import random

import pytest

from diff import (
    DiffLineKind,
    DiffSettings,
    generate_diff,
    highlight_intraline_changes,
    identify_files_needed,
    parse_unified_diff,
    process_patch,
)


def _lines(text):
    return text.split('\n')[:-1]


def _random_text(rng, words):
    return "".join(rng.choice(words) + "\n" for _ in range(rng.randint(0, 12)))


def _mutate(rng, text, words):
    lines = _lines(text)
    for _ in range(rng.randint(1, 4)):
        choice = rng.randint(0, 2)
        position = rng.randint(0, len(lines))
        if choice == 0:
            lines.insert(position, rng.choice(words))

        elif lines and choice == 1:
            del lines[min(position, len(lines) - 1)]

        elif lines:
            lines[min(position, len(lines) - 1)] = rng.choice(words)

    return "".join(line + "\n" for line in lines)


class TestGenerateThenParse:
    """Test that generated diffs parse back into the change they describe."""

    CASES = [
        ("", "one\n"),
        ("one\n", ""),
        ("a\nb\nc\n", "a\nB\nc\n"),
        ("a\nb\nc\n", "b\nc\nd\n"),
        ("keep\n\nkeep\n", "keep\nnew\n\nkeep\n"),
        ("".join(f"line {i}\n" for i in range(40)), "".join(f"line {i}\n" for i in range(40) if i % 9)),
    ]

    @pytest.mark.parametrize("before,after", CASES)
    @pytest.mark.parametrize("context_size", [0, 1, 3])
    def test_handcrafted(self, helpers, before, after, context_size):
        """Test reconstructing the new text from the old text and the parsed diff."""
        diff_text, added, removed = generate_diff(before, after, "f.txt", DiffSettings(context_size=context_size))

        result = parse_unified_diff(diff_text)

        assert result.old_file == "f.txt"
        assert result.new_file == "f.txt"
        assert helpers.apply_parsed_diff(_lines(before), result) == _lines(after)
        lines = [line for hunk in result.hunks for line in hunk.lines]
        assert added == sum(1 for line in lines if line.kind == DiffLineKind.ADDED)
        assert removed == sum(1 for line in lines if line.kind == DiffLineKind.REMOVED)

    def test_random_texts(self, helpers):
        """Test reconstruction over random edits of random texts."""
        rng = random.Random(20240517)
        words = ["alpha", "beta", "gamma", "", "x = 1", "    return x", "}"]

        for _ in range(200):
            before = _random_text(rng, words)
            after = _mutate(rng, before, words)
            context_size = rng.randint(0, 4)

            diff_text, added, removed = generate_diff(before, after, "r.txt", DiffSettings(context_size=context_size))
            result = parse_unified_diff(diff_text)

            if before == after:
                assert diff_text == ""
                assert result.hunks == []
                continue

            assert helpers.apply_parsed_diff(_lines(before), result) == _lines(after)
            lines = [line for hunk in result.hunks for line in hunk.lines]
            assert added == sum(1 for line in lines if line.kind == DiffLineKind.ADDED)
            assert removed == sum(1 for line in lines if line.kind == DiffLineKind.REMOVED)

    @pytest.mark.parametrize("before,after", [
        ("-- a\n", "++ b\n"),
        ("keep\n-- old\nkeep\n", "keep\n++ new\nkeep\n"),
        ("--- a/x\n+++ b/x\n", "--- a/y\n+++ b/y\n"),
    ])
    def test_lines_that_look_like_file_headers(self, helpers, before, after):
        """Test that changed lines starting with dashes or pluses survive the round trip."""
        diff_text, added, removed = generate_diff(before, after, "f.txt")

        result = parse_unified_diff(diff_text)

        assert result.old_file == "f.txt"
        assert result.new_file == "f.txt"
        assert helpers.apply_parsed_diff(_lines(before), result) == _lines(after)
        lines = [line for hunk in result.hunks for line in hunk.lines]
        assert [line.content for line in lines if line.kind == DiffLineKind.REMOVED] == [
            line for line in _lines(before) if line not in _lines(after)
        ]
        assert added == sum(1 for line in lines if line.kind == DiffLineKind.ADDED)
        assert removed == sum(1 for line in lines if line.kind == DiffLineKind.REMOVED)

    def test_line_numbers_increase(self):
        """Test that parsed line numbers increase within each file side."""
        before = "".join(f"{i}\n" for i in range(30))
        after = before.replace("4\n", "four\n", 1).replace("20\n", "twenty\n")

        result = parse_unified_diff(generate_diff(before, after, "n.txt")[0])

        old_numbers = [line.old_line_no for hunk in result.hunks for line in hunk.lines if line.old_line_no]
        new_numbers = [line.new_line_no for hunk in result.hunks for line in hunk.lines if line.new_line_no]
        assert old_numbers == sorted(old_numbers)
        assert new_numbers == sorted(new_numbers)
        assert len(set(old_numbers)) == len(old_numbers)


class TestGenerateParseHighlight:
    """Test highlighting parsed hunks from generated diffs."""

    def test_segments_describe_changed_text(self):
        """Test that segments index into the line content and only cover changed lines."""
        before = "def area(w, h):\n    return w * h\n"
        after = "def area(width, height):\n    return width * height\n"

        result = parse_unified_diff(generate_diff(before, after, "geo.py")[0])
        for hunk in result.hunks:
            highlight_intraline_changes(hunk)

        lines = result.hunks[0].lines
        assert [line.kind for line in lines] == [
            DiffLineKind.REMOVED, DiffLineKind.REMOVED, DiffLineKind.ADDED, DiffLineKind.ADDED
        ]
        # Only the second removed line is paired with an added line
        assert lines[0].segments == []
        assert lines[1].segments
        assert lines[2].segments
        assert lines[3].segments == []
        for line in lines:
            for segment in line.segments:
                assert segment.kind == line.kind
                assert segment.text == line.content[segment.start:segment.end]


class TestPatchWorkflow:
    """Test applying a patch and diffing the result."""

    def test_patch_then_diff(self, file_store, helpers):
        """Test that the diff of a patched file shows exactly the patch's edits."""
        original = "import os\n\ndef main():\n    print(os.getcwd())\n"
        store = file_store({"app.py": original})
        text = helpers.make_patch(
            "*** Update File: app.py",
            "@@ def main():",
            "-    print(os.getcwd())",
            "+    print(os.getcwd(), flush=True)",
        )

        assert identify_files_needed(text) == ["app.py"]
        assert process_patch(text, store.open, store.write, store.remove) == 0

        diff_text, added, removed = generate_diff(original, store.files["app.py"], "app.py")

        assert (added, removed) == (1, 1)
        assert "-    print(os.getcwd())\n+    print(os.getcwd(), flush=True)\n" in diff_text
