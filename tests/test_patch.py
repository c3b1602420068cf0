"""Tests for gitlane.diff.patch module."""

from gitlane.diff import (
    LineType,
    build_partial_patch,
    build_patch,
    parse_diff_hunks,
    select_lines,
)


SCENARIO_HUNK = "@@ -10,3 +10,4 @@\n ctx1\n+new1\n ctx2\n-old1\n ctx3\n"


def _hunk(text=SCENARIO_HUNK):
    return parse_diff_hunks(text)[0]


class TestBuildPatch:
    """Tests for build_patch function."""

    def test_file_header_and_trailing_newline(self):
        patch = build_patch("docs/readme.md", [_hunk()])

        assert patch.startswith("--- a/docs/readme.md\n+++ b/docs/readme.md\n@@ -10,3 +10,4 @@\n")
        assert patch.endswith(" ctx3\n")


class TestSelectLines:
    """Tests for select_lines function."""

    def test_unselected_deletion_becomes_context(self):
        """Test staging only an addition keeps the deletion as context."""
        result = select_lines(_hunk(), [1])

        assert result.header == "@@ -10,4 +10,5 @@"
        assert (result.old_count, result.new_count) == (4, 5)
        assert [line.type for line in result.lines] == [
            LineType.CONTEXT,
            LineType.ADDITION,
            LineType.CONTEXT,
            LineType.CONTEXT,
            LineType.CONTEXT,
        ]
        assert result.lines[3].content == "old1"

    def test_line_numbers_recomputed(self):
        result = select_lines(_hunk(), [1])

        numbers = [(line.old_line_number, line.new_line_number) for line in result.lines]
        assert numbers == [(10, 10), (None, 11), (11, 12), (12, 13), (13, 14)]

    def test_unselected_addition_dropped(self):
        result = select_lines(_hunk(), [3])

        assert result.header == "@@ -10,4 +10,3 @@"
        assert [line.content for line in result.lines] == ["ctx1", "ctx2", "old1", "ctx3"]
        assert result.lines[2].type is LineType.DELETION

    def test_reverse_keeps_unselected_addition_as_context(self):
        """Test the reverse rules used for unstaging and discarding."""
        result = select_lines(_hunk(), [3], reverse=True)

        assert result.header == "@@ -10,5 +10,4 @@"
        assert result.lines[1].type is LineType.CONTEXT
        assert result.lines[1].content == "new1"
        assert result.lines[3].type is LineType.DELETION

    def test_reverse_drops_unselected_deletion(self):
        result = select_lines(_hunk(), [1], reverse=True)

        assert result.header == "@@ -10,3 +10,4 @@"
        assert [line.content for line in result.lines] == ["ctx1", "new1", "ctx2", "ctx3"]

    def test_keeps_section_heading(self):
        hunk = _hunk("@@ -1,2 +1,4 @@ def f():\n a\n+b\n+c\n d\n")

        result = select_lines(hunk, [2])

        assert result.header == "@@ -1,2 +1,3 @@ def f():"

    def test_context_only_selection_is_none(self):
        assert select_lines(_hunk(), [0, 2, 4]) is None
        assert select_lines(_hunk(), []) is None

    def test_out_of_range_indices_ignored(self):
        assert select_lines(_hunk(), [42]) is None


class TestBuildPartialPatch:
    """Tests for build_partial_patch function."""

    def test_partial_selection(self):
        patch = build_partial_patch("notes.txt", _hunk(), [1])

        assert patch == (
            "--- a/notes.txt\n"
            "+++ b/notes.txt\n"
            "@@ -10,4 +10,5 @@\n"
            " ctx1\n"
            "+new1\n"
            " ctx2\n"
            " old1\n"
            " ctx3\n"
        )

    def test_all_changes_selected_equals_whole_hunk(self):
        hunk = _hunk()

        assert build_partial_patch("notes.txt", hunk, [1, 3]) == build_patch("notes.txt", [hunk])
        assert build_partial_patch("notes.txt", hunk, range(5), reverse=True) == build_patch(
            "notes.txt", [hunk]
        )

    def test_nothing_selected_is_none(self):
        assert build_partial_patch("notes.txt", _hunk(), []) is None
        assert build_partial_patch("notes.txt", _hunk(), [0, 4]) is None

    def test_no_newline_marker_kept(self):
        hunk = _hunk("@@ -1 +1 @@\n-old\n\\ No newline at end of file\n+new\n\\ No newline at end of file\n")

        patch = build_partial_patch("f", hunk, [0])

        assert patch == (
            "--- a/f\n"
            "+++ b/f\n"
            "@@ -1,1 +1,0 @@\n"
            "-old\n"
            "\\ No newline at end of file\n"
        )
