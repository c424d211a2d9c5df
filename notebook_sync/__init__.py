"""
notebook_sync — keeps a notebook's cells and the single virtual document
seen by a line-oriented analyzer in step.

Public API for library usage::

    from notebook_sync import NotebookSync, Cell

    sync = NotebookSync()
    sync.open("file:///nb.ipynb", [Cell("file:///nb.ipynb#c1", "a = 1\\n")])
    print(sync.virtual_document("file:///nb.ipynb").text)
"""

from .config import Config
from .diagnostics import (
    CellFlow, CellFlowLocation, CellQuickFix, Diagnostic, DiagnosticsProjector,
    Finding, Flow, FlowLocation, QuickFix,
)
from .editing import PatchApplier, apply_edits
from .errors import (
    ContractViolation, CrossCellRangeError, DuplicateCellError, InvalidDelimiterError,
    InvalidEditError, MappingMissError, NotebookSyncError, OverlappingEditsError,
    ProjectionError, UnknownCellError, UnknownNotebookError,
)
from .notebooks import (
    Cell, CellEdits, CellLine, CellRange, LineIndex, Notebook, NotebookRegistry,
    RangeMapper, VirtualDocument, DEFAULT_CELL_DELIMITER,
)
from .ranges import TextEdit, TextRange
from .service import NotebookSync

__all__ = [
    "NotebookSync", "Config",
    "Cell", "Notebook", "VirtualDocument", "NotebookRegistry",
    "LineIndex", "RangeMapper", "CellLine", "CellRange", "CellEdits",
    "DEFAULT_CELL_DELIMITER",
    "PatchApplier", "apply_edits",
    "TextRange", "TextEdit",
    "Finding", "Flow", "FlowLocation", "QuickFix",
    "Diagnostic", "CellFlow", "CellFlowLocation", "CellQuickFix",
    "DiagnosticsProjector",
    "NotebookSyncError", "ContractViolation", "InvalidEditError",
    "OverlappingEditsError", "UnknownCellError", "DuplicateCellError",
    "UnknownNotebookError", "InvalidDelimiterError",
    "ProjectionError", "MappingMissError", "CrossCellRangeError",
]
