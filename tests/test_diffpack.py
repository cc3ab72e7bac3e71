"""Tests for unified diff parsing."""

import pytest

from conftest import SAMPLE_DIFF
from gitdsl.diffpack import DiffProcessor
from gitdsl.errors import DiffParseError
from gitdsl.model import ChangeKind


class TestDiffProcessor:
    """Test DiffProcessor.parse."""

    def test_empty_diff(self):
        """Identical revisions produce no entries."""
        assert DiffProcessor().parse("") == []
        assert DiffProcessor().parse("\n  \n") == []

    def test_entries_in_diff_order(self):
        """One entry per file section, in the order git printed them."""
        entries = DiffProcessor().parse(SAMPLE_DIFF)
        assert [(e.from_path, e.to_path) for e in entries] == [
            ("config.json", "config.json"),
            ("old_name.txt", "new_name.txt"),
            (None, "created.txt"),
        ]

    def test_chunk_lines_keep_markers(self):
        """Line content keeps its marker and loses the trailing newline."""
        entry = DiffProcessor().parse(SAMPLE_DIFF)[1]
        chunk = entry.chunks[0]
        assert chunk.header == "@@ -1,2 +1,3 @@"
        assert chunk.old_start == 1
        assert chunk.old_lines == 2
        assert chunk.new_start == 1
        assert chunk.new_lines == 3
        assert [c.content for c in chunk.changes] == [
            " keep",
            "-drop",
            "+add one",
            "+add two",
        ]
        assert [c.kind for c in chunk.changes] == [
            ChangeKind.CONTEXT,
            ChangeKind.DELETE,
            ChangeKind.ADD,
            ChangeKind.ADD,
        ]

    def test_line_numbers(self):
        """Context lines carry both numbers, edits carry one."""
        changes = DiffProcessor().parse(SAMPLE_DIFF)[1].chunks[0].changes
        assert (changes[0].old_lineno, changes[0].new_lineno) == (1, 1)
        assert (changes[1].old_lineno, changes[1].new_lineno) == (2, None)
        assert (changes[2].old_lineno, changes[2].new_lineno) == (None, 2)

    def test_no_newline_marker_skipped(self):
        """The "\\ No newline at end of file" annotation is not a change."""
        diff = (
            "--- a/f.txt\n"
            "+++ b/f.txt\n"
            "@@ -1 +1 @@\n"
            "-old\n"
            "\\ No newline at end of file\n"
            "+new\n"
            "\\ No newline at end of file\n"
        )
        changes = DiffProcessor().parse(diff)[0].chunks[0].changes
        assert [c.content for c in changes] == ["-old", "+new"]

    def test_section_header_kept(self):
        """Function context after the hunk range stays in the header."""
        diff = (
            "--- a/m.py\n"
            "+++ b/m.py\n"
            "@@ -3,1 +3,1 @@ def main():\n"
            "-    return 1\n"
            "+    return 2\n"
        )
        chunk = DiffProcessor().parse(diff)[0].chunks[0]
        assert chunk.header == "@@ -3,1 +3,1 @@ def main():"

    def test_malformed_diff(self):
        """Garbage inside a hunk raises DiffParseError with the revisions."""
        diff = "--- a/x\n+++ b/x\n@@ -1,2 +1,2 @@\n?bogus\n"
        with pytest.raises(DiffParseError) as exc_info:
            DiffProcessor().parse(diff, "b1", "h1")
        assert exc_info.value.code == "DIFF_PARSE_FAILED"
        assert exc_info.value.details["base"] == "b1"
        assert exc_info.value.details["head"] == "h1"
