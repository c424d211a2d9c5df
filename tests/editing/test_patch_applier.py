"""Tests for the PatchApplier."""

import itertools

import pytest

from notebook_sync.editing.patch_applier import PatchApplier, apply_edits
from notebook_sync.errors import InvalidEditError, OverlappingEditsError
from notebook_sync.ranges import TextEdit


CELL = 'print("hello")\n\na = True\nb = False'


def _apply(text, *edits):
    return PatchApplier().apply(text, list(edits))


class TestGoldenFixtures:
    def test_two_edits_either_order(self):
        first = TextEdit.of(1, 0, 1, 1, "X")
        second = TextEdit.of(3, 0, 3, 1, "Y")

        assert _apply("a\nb\nc", first, second) == "X\nb\nY"
        assert _apply("a\nb\nc", second, first) == "X\nb\nY"

    def test_deletion_across_lines_collapses_into_one(self):
        assert _apply("x\ny\nz", TextEdit.of(1, 1, 2, 0, "")) == "xy\nz"


class TestSingleEdit:
    def test_replace_inside_first_line(self):
        result = _apply(CELL, TextEdit.of(1, 1, 1, 4, "a"))
        assert result == 'pat("hello")\n\na = True\nb = False'

    def test_insert_into_empty_line(self):
        result = _apply(CELL, TextEdit.of(2, 0, 2, 0, "c = 42"))
        assert result == 'print("hello")\nc = 42\na = True\nb = False'

    def test_insert_on_last_line(self):
        result = _apply(CELL, TextEdit.of(4, 1, 4, 1, "oo"))
        assert result == 'print("hello")\n\na = True\nboo = False'

    def test_clearing_a_line_keeps_it(self):
        result = _apply(CELL, TextEdit.of(1, 0, 1, 14, ""))
        assert result == '\n\na = True\nb = False'

    def test_multi_line_deletion_drops_emptied_line(self):
        result = _apply(CELL, TextEdit.of(2, 0, 3, 8, ""))
        assert result == 'print("hello")\nb = False'

    def test_multi_line_replacement_with_newline(self):
        result = _apply(CELL, TextEdit.of(2, 0, 3, 8, "\n"))
        assert result == 'print("hello")\n\n\nb = False'

    def test_replacement_can_split_a_line(self):
        assert _apply("abc", TextEdit.of(1, 1, 1, 2, "X\nY")) == "aX\nYc"

    def test_deleting_trailing_lines_leaves_no_empty_line(self):
        assert _apply("a\nb\nc", TextEdit.of(2, 0, 3, 1, "")) == "a"

    def test_deleting_everything(self):
        assert _apply("a\nb", TextEdit.of(1, 0, 2, 1, "")) == ""

    def test_insert_into_empty_text(self):
        assert _apply("", TextEdit.of(1, 0, 1, 0, "hello")) == "hello"

    def test_add_then_remove_trailing_newline(self):
        with_newline = _apply(CELL, TextEdit.of(4, 9, 4, 9, "\n"))
        assert with_newline == CELL + "\n"

        assert _apply(with_newline, TextEdit.of(4, 9, 5, 0, "")) == CELL

    def test_carriage_return_is_line_content(self):
        assert _apply("a\r\nb", TextEdit.of(1, 1, 1, 2, "")) == "a\nb"

    def test_no_edits_returns_original(self):
        assert _apply(CELL) == CELL


class TestMultipleEdits:
    def test_edits_on_different_lines(self):
        result = _apply(
            CELL,
            TextEdit.of(4, 4, 4, 9, "0"),
            TextEdit.of(3, 4, 3, 8, "1"),
        )
        assert result == 'print("hello")\n\na = 1\nb = 0'

    def test_untouched_lines_between_edits(self):
        result = _apply(
            CELL,
            TextEdit.of(1, 7, 1, 12, "hi"),
            TextEdit.of(4, 4, 4, 9, "0"),
        )
        assert result == 'print("hi")\n\na = True\nb = 0'

    def test_two_edits_on_same_line(self):
        result = _apply(
            CELL,
            TextEdit.of(3, 4, 3, 8, "0"),
            TextEdit.of(3, 0, 3, 1, "c"),
        )
        assert result == 'print("hello")\n\nc = 0\nb = False'

    def test_three_edits_on_same_line(self):
        result = _apply(
            CELL,
            TextEdit.of(1, 1, 1, 4, "a"),
            TextEdit.of(1, 0, 1, 1, "d"),
            TextEdit.of(1, 7, 1, 9, "hello"),
        )
        assert result == 'dat("hellollo")\n\na = True\nb = False'

    def test_adjacent_edits_are_allowed(self):
        assert _apply("abc", TextEdit.of(1, 0, 1, 1, "X"), TextEdit.of(1, 1, 1, 2, "Y")) == "XYc"

    def test_insertion_right_after_deleted_lines_keeps_line(self):
        result = _apply(
            "a\nb\nc\nd",
            TextEdit.of(2, 0, 3, 1, ""),
            TextEdit.of(3, 1, 3, 1, "new"),
        )
        assert result == "a\nnew\nd"

    def test_result_independent_of_order(self):
        edits = [
            TextEdit.of(1, 0, 1, 5, "PRINT"),
            TextEdit.of(2, 0, 3, 1, "z"),
            TextEdit.of(4, 9, 4, 9, "  # done"),
        ]
        expected = _apply(CELL, *edits)

        for permutation in itertools.permutations(edits):
            assert _apply(CELL, *permutation) == expected

    def test_module_shortcut(self):
        assert apply_edits("a\nb", [TextEdit.of(2, 0, 2, 1, "c")]) == "a\nc"


class TestContractViolations:
    def test_end_before_start(self):
        with pytest.raises(InvalidEditError, match="ends before it starts"):
            _apply("abc", TextEdit.of(1, 2, 1, 1, ""))

    def test_line_out_of_bounds(self):
        with pytest.raises(InvalidEditError, match="line 5"):
            _apply("a\nb\nc", TextEdit.of(5, 0, 5, 0, "x"))

    def test_line_zero_is_invalid(self):
        with pytest.raises(InvalidEditError):
            _apply("a", TextEdit.of(0, 0, 1, 0, "x"))

    def test_column_past_end_of_line(self):
        with pytest.raises(InvalidEditError, match="column 5"):
            _apply("a\nb", TextEdit.of(1, 5, 1, 5, "x"))

    def test_column_cannot_reach_into_terminator(self):
        with pytest.raises(InvalidEditError):
            _apply("ab\ncd", TextEdit.of(1, 0, 1, 3, ""))

    def test_overlapping_edits(self):
        with pytest.raises(OverlappingEditsError):
            _apply("abcdef", TextEdit.of(1, 0, 1, 3, "x"), TextEdit.of(1, 2, 1, 4, "y"))

    def test_edits_sharing_a_start(self):
        with pytest.raises(OverlappingEditsError):
            _apply("abc", TextEdit.of(1, 1, 1, 1, "x"), TextEdit.of(1, 1, 1, 1, "y"))

    def test_overlap_is_an_invalid_edit(self):
        assert issubclass(OverlappingEditsError, InvalidEditError)
        assert issubclass(InvalidEditError, ValueError)
