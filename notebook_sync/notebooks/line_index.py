"""
Line index — maps lines of the concatenated virtual document back to the
cells they came from.

The virtual document is every cell's text joined by a delimiter line.  The
index is built in one pass together with that text so the two can never
disagree, and it is tagged with the notebook version it was built for.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, NamedTuple, Protocol, Sequence

from ..errors import CrossCellRangeError, InvalidDelimiterError, MappingMissError
from ..ranges import TextEdit, TextRange

logger = logging.getLogger(__name__)

DEFAULT_CELL_DELIMITER = "#NOTEBOOK_CELL_DELIMITER\n"


class _CellLike(Protocol):
    uri: str
    text: str


class CellLine(NamedTuple):
    """A line inside one cell."""
    cell_uri: str
    line: int


@dataclass(frozen=True)
class CellRange:
    """A range expressed in one cell's own coordinates."""
    cell_uri: str
    range: TextRange


@dataclass(frozen=True)
class CellEdits:
    """The edits of one fix that land in a single cell."""
    cell_uri: str
    edits: tuple[TextEdit, ...] = field(default_factory=tuple)


def validate_delimiter(delimiter: str) -> str:
    """Return *delimiter* if it is exactly one line ending with ``\\n``."""
    if not delimiter.endswith("\n") or delimiter.count("\n") != 1:
        raise InvalidDelimiterError(
            f"Cell delimiter must be a single line ending with a newline, "
            f"got {delimiter!r}"
        )
    return delimiter


def _content_lines(text: str, is_last: bool) -> list[str]:
    lines = text.split("\n")
    if not is_last and (not text or text.endswith("\n")):
        # The empty tail after the final terminator is where the delimiter sits
        lines.pop()
    return lines


class LineIndex:
    """Virtual line -> (cell, local line) lookup for one notebook version."""

    def __init__(
        self,
        for_version: int,
        text: str,
        entries: list[CellLine],
        spans: dict[str, tuple[int, int]],
    ) -> None:
        self._for_version = for_version
        self._text = text
        self._entries = entries
        # cell uri -> (first virtual line of its content, number of content lines)
        self._spans = spans

    @classmethod
    def build(
        cls,
        cells: Sequence[_CellLike],
        version: int,
        delimiter: str = DEFAULT_CELL_DELIMITER,
    ) -> "LineIndex":
        """Concatenate *cells* and index every virtual line.

        A delimiter line is emitted between consecutive cells and attributed
        to the first line of the cell that follows it.  A non-empty cell that
        does not end with a newline gets one in the virtual text so the
        delimiter always sits on a line of its own.
        """
        parts: list[str] = []
        entries: list[CellLine] = []
        spans: dict[str, tuple[int, int]] = {}
        last = len(cells) - 1

        for i, cell in enumerate(cells):
            text = cell.text
            if i > 0:
                parts.append(delimiter)
                entries.append(CellLine(cell.uri, 1))

            lines = _content_lines(text, i == last)
            spans[cell.uri] = (len(entries) + 1, len(lines))
            entries.extend(CellLine(cell.uri, n) for n in range(1, len(lines) + 1))

            parts.append(text)
            if i < last and text and not text.endswith("\n"):
                parts.append("\n")

        logger.debug(
            "[LineIndex] Indexed %d line(s) across %d cell(s) for version %d",
            len(entries), len(cells), version,
        )
        return cls(version, "".join(parts), entries, spans)

    @property
    def for_version(self) -> int:
        return self._for_version

    @property
    def text(self) -> str:
        """The virtual document exactly as sent to the analyzer."""
        return self._text

    @property
    def line_count(self) -> int:
        return len(self._entries)

    @property
    def cell_uris(self) -> list[str]:
        """Uris of the indexed cells, in notebook order."""
        return list(self._spans)

    def lookup(self, line: int) -> CellLine | None:
        """Return the owning cell and local line of virtual *line*."""
        if line < 1 or line > len(self._entries):
            return None
        return self._entries[line - 1]

    def cell_uri_for_line(self, line: int) -> str | None:
        entry = self.lookup(line)
        return entry.cell_uri if entry else None

    def virtual_line(self, cell_uri: str, local_line: int) -> int | None:
        """Return the virtual line holding *local_line* of *cell_uri*."""
        span = self._spans.get(cell_uri)
        if span is None:
            return None
        first, count = span
        if local_line < 1 or local_line > count:
            return None
        return first + local_line - 1

    def cell_line_count(self, cell_uri: str) -> int:
        """Number of lines *cell_uri* contributes to the virtual document."""
        span = self._spans.get(cell_uri)
        return span[1] if span else 0


class RangeMapper:
    """Project virtual-document ranges and edits onto cells."""

    def __init__(self, index: LineIndex) -> None:
        self._index = index

    @property
    def index(self) -> LineIndex:
        return self._index

    def _resolve(self, line: int) -> CellLine:
        entry = self._index.lookup(line)
        if entry is None:
            raise MappingMissError(
                f"Line {line} is not indexed at version {self._index.for_version} "
                f"({self._index.line_count} line(s))"
            )
        return entry

    def to_cell_range(self, rng: TextRange) -> CellRange:
        """Map a virtual range to a range inside its owning cell.

        Columns are unchanged since concatenation only shifts lines.
        """
        start = self._resolve(rng.start_line)
        end = self._resolve(rng.end_line)
        if start.cell_uri != end.cell_uri:
            raise CrossCellRangeError(
                f"Range {rng.start}-{rng.end} spans {start.cell_uri} "
                f"and {end.cell_uri}"
            )
        return CellRange(start.cell_uri, rng.with_lines(start.line, end.line))

    def to_cell_edits(self, edits: Iterable[TextEdit]) -> list[CellEdits]:
        """Map each edit to its cell, grouped per cell in first-seen order.

        A single failing edit fails the whole batch so the group can be
        applied atomically or not at all.
        """
        grouped: dict[str, list[TextEdit]] = {}
        for edit in edits:
            mapped = self.to_cell_range(edit.range)
            grouped.setdefault(mapped.cell_uri, []).append(
                TextEdit(mapped.range, edit.new_text)
            )
        return [CellEdits(uri, tuple(cell_edits)) for uri, cell_edits in grouped.items()]
