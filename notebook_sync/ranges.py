"""
Text ranges and edits shared by the patch applier and the projector.

Lines are 1-based, columns are 0-based character offsets.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TextRange:
    """A span of text from (start_line, start_col) to (end_line, end_col)."""
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @property
    def start(self) -> tuple[int, int]:
        return (self.start_line, self.start_col)

    @property
    def end(self) -> tuple[int, int]:
        return (self.end_line, self.end_col)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def with_lines(self, start_line: int, end_line: int) -> "TextRange":
        """Return a copy moved to other lines, keeping both columns."""
        return TextRange(start_line, self.start_col, end_line, self.end_col)


@dataclass(frozen=True)
class TextEdit:
    """Replace ``range`` with ``new_text``."""
    range: TextRange
    new_text: str = ""

    @classmethod
    def of(cls, start_line: int, start_col: int, end_line: int, end_col: int,
           new_text: str = "") -> "TextEdit":
        return cls(TextRange(start_line, start_col, end_line, end_col), new_text)
