"""Notebook model, virtual-document line index and open-notebook registry."""

from .line_index import (
    CellEdits, CellLine, CellRange, LineIndex, RangeMapper,
    DEFAULT_CELL_DELIMITER, validate_delimiter,
)
from .model import Cell, Notebook, VirtualDocument, DEFAULT_LANGUAGE
from .registry import NotebookRegistry

__all__ = [
    "Cell", "Notebook", "VirtualDocument", "DEFAULT_LANGUAGE",
    "LineIndex", "RangeMapper", "CellLine", "CellRange", "CellEdits",
    "DEFAULT_CELL_DELIMITER", "validate_delimiter",
    "NotebookRegistry",
]
