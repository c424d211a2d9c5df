"""
Cell / notebook model — an ordered collection of cells with a version that
moves forward by one on every mutation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from ..editing.patch_applier import PatchApplier
from ..errors import ContractViolation, DuplicateCellError, UnknownCellError
from ..ranges import TextEdit
from .line_index import (
    DEFAULT_CELL_DELIMITER, LineIndex, RangeMapper, validate_delimiter,
)

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "ipynb"


@dataclass
class Cell:
    """One independently editable unit of a notebook."""
    uri: str
    text: str = ""
    version: int = 0


@dataclass(frozen=True)
class VirtualDocument:
    """The payload handed to the analyzer for one notebook version."""
    notebook_uri: str
    version: int
    text: str
    language: str = DEFAULT_LANGUAGE


@dataclass(frozen=True)
class _CellTable:
    """Ordered cells plus their uri lookup, always swapped as one value."""
    ordered: tuple[Cell, ...] = ()
    by_uri: dict[str, Cell] = field(default_factory=dict)

    @classmethod
    def of(cls, cells: Iterable[Cell]) -> "_CellTable":
        ordered = tuple(cells)
        by_uri: dict[str, Cell] = {}
        for cell in ordered:
            if cell.uri in by_uri:
                raise DuplicateCellError(f"Cell {cell.uri} appears twice")
            by_uri[cell.uri] = cell
        return cls(ordered, by_uri)

    def get(self, uri: str) -> Cell | None:
        return self.by_uri.get(uri)


class Notebook:
    """An open notebook.

    Mutations are expected from a single writer at a time; the model adds
    no locking.  The line index is rebuilt on first access after a version
    change and reused until the next mutation.
    """

    def __init__(
        self,
        uri: str,
        delimiter: str = DEFAULT_CELL_DELIMITER,
        *,
        version: int = 0,
        patch_applier: PatchApplier | None = None,
    ) -> None:
        self._uri = uri
        self._delimiter = validate_delimiter(delimiter)
        self._version = version
        self._table = _CellTable.of(())
        self._index: LineIndex | None = None
        self._applier = patch_applier or PatchApplier()

    def __repr__(self) -> str:
        return (
            f"Notebook(uri={self._uri!r}, version={self._version}, "
            f"cells={len(self._table.ordered)})"
        )

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def version(self) -> int:
        return self._version

    @property
    def delimiter(self) -> str:
        return self._delimiter

    @property
    def cells(self) -> tuple[Cell, ...]:
        return self._table.ordered

    @property
    def cell_uris(self) -> list[str]:
        return [cell.uri for cell in self._table.ordered]

    def get_cell(self, cell_uri: str) -> Cell | None:
        return self._table.get(cell_uri)

    def has_cell(self, cell_uri: str) -> bool:
        return self._table.get(cell_uri) is not None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def open(self, cells: Iterable[Cell]) -> None:
        """Replace every cell with *cells*."""
        self._table = _CellTable.of(cells)
        self._bump()

    def apply_structure_change(
        self,
        opened: Iterable[tuple[int, Cell]] = (),
        closed_uris: Iterable[str] = (),
    ) -> list[Cell]:
        """Remove *closed_uris*, then insert each opened cell at its position.

        Positions are applied in the order given, each against the cell list
        as it stands after the previous insertion.  The change is validated
        in full before anything is swapped in.

        Returns the removed cells.
        """
        table = self._table
        closed_set = set(closed_uris)
        for uri in closed_set:
            if table.get(uri) is None:
                raise UnknownCellError(f"Cannot close unknown cell {uri}")

        removed = [cell for cell in table.ordered if cell.uri in closed_set]
        cells = [cell for cell in table.ordered if cell.uri not in closed_set]
        known = {cell.uri for cell in cells}
        for position, cell in opened:
            if cell.uri in known:
                raise DuplicateCellError(f"Cell {cell.uri} is already open")
            if position < 0 or position > len(cells):
                raise ContractViolation(
                    f"Cannot insert {cell.uri} at position {position} "
                    f"of {len(cells)} cell(s)"
                )
            cells.insert(position, cell)
            known.add(cell.uri)

        self._table = _CellTable.of(cells)
        self._bump()
        logger.debug(
            "[Notebook] %s: closed %d cell(s), now %d cell(s) at version %d",
            self._uri, len(removed), len(cells), self._version,
        )
        return removed

    def apply_content_change(
        self,
        cell_uri: str,
        edits: Iterable[TextEdit],
        version: int | None = None,
    ) -> Cell:
        """Patch the text of a single cell.

        *version* is the editor's version for the cell; when omitted the
        cell version is incremented.
        """
        cell = self._table.get(cell_uri)
        if cell is None:
            raise UnknownCellError(
                f"Content change for unknown cell {cell_uri} in {self._uri}"
            )
        cell.text = self._applier.apply(cell.text, edits)
        cell.version = version if version is not None else cell.version + 1
        self._bump()
        return cell

    def _bump(self) -> None:
        self._version += 1

    # ------------------------------------------------------------------
    # Virtual document
    # ------------------------------------------------------------------

    @property
    def line_index(self) -> LineIndex:
        """The line index for the current version, rebuilt if stale."""
        index = self._index
        if index is None or index.for_version != self._version:
            index = LineIndex.build(self._table.ordered, self._version, self._delimiter)
            self._index = index
        return index

    @property
    def text(self) -> str:
        return self.line_index.text

    def range_mapper(self) -> RangeMapper:
        return RangeMapper(self.line_index)

    def virtual_document(self, language: str = DEFAULT_LANGUAGE) -> VirtualDocument:
        index = self.line_index
        return VirtualDocument(self._uri, index.for_version, index.text, language)

    def cell_uri_for_line(self, line: int) -> str | None:
        """Return the uri of the cell owning virtual *line*."""
        return self.line_index.cell_uri_for_line(line)
