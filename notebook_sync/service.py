"""
Notebook sync facade — the surface used by an editor-protocol layer.

Example usage::

    from notebook_sync import NotebookSync, Cell, Finding, TextRange

    sync = NotebookSync(publish=lambda uri, diags: client.publish(uri, diags))
    sync.open("file:///nb.ipynb", [Cell("file:///nb.ipynb#a", "x = 1\\n")])
    doc = sync.virtual_document("file:///nb.ipynb")
    findings = analyzer.analyze(doc.text, doc.language)
    sync.project_diagnostics("file:///nb.ipynb", findings, doc.version)
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from .config import Config
from .diagnostics.findings import CellQuickFix, Diagnostic, Finding, QuickFix
from .diagnostics.projector import CellDiagnostics, DiagnosticsProjector
from .log_setup import setup_logger
from .notebooks.model import Cell, Notebook, VirtualDocument
from .notebooks.registry import NotebookRegistry
from .ranges import TextEdit

_logger = logging.getLogger(__name__)

Publisher = Callable[[str, list[Diagnostic]], None]


class NotebookSync:
    """Keep open notebooks, their virtual documents and diagnostics in step.

    Mutations of one notebook must arrive in order from a single caller;
    different notebooks may be used from different threads.
    """

    def __init__(self, config: Config | None = None,
                 publish: Publisher | None = None):
        self._config = config or Config()
        self._registry = NotebookRegistry(self._config.CELL_DELIMITER)
        self._projector = DiagnosticsProjector()
        self._publish = publish

    @classmethod
    def from_config(cls, config_path: str | None = None,
                    publish: Publisher | None = None) -> "NotebookSync":
        """Load configuration, set up logging and build a facade."""
        config = Config.load(config_path)
        setup_logger(config.LOG_LEVEL, config.LOG_FILE)
        return cls(config, publish)

    @property
    def registry(self) -> NotebookRegistry:
        return self._registry

    @property
    def projector(self) -> DiagnosticsProjector:
        return self._projector

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def open(self, uri: str, cells: Iterable[Cell]) -> Notebook:
        return self._registry.open(uri, cells)

    def close(self, uri: str) -> CellDiagnostics:
        """Close *uri* and clear the diagnostics of all its cells once."""
        notebook = self._registry.close(uri)
        if notebook is None:
            _logger.debug("[NotebookSync] %s already closed", uri)
            return {}
        cleared = self._projector.remove_all(notebook)
        self._emit(cleared)
        return cleared

    def apply_structure_change(
        self,
        uri: str,
        opened: Iterable[tuple[int, Cell]] = (),
        closed_uris: Iterable[str] = (),
    ) -> Notebook:
        """Insert and remove whole cells; removed cells get their diagnostics cleared."""
        notebook = self._registry.require(uri)
        removed = notebook.apply_structure_change(opened, closed_uris)
        for cell in removed:
            self._emit(self._projector.remove_cell(uri, cell.uri))
        return notebook

    def apply_content_change(
        self,
        uri: str,
        cell_uri: str,
        edits: Iterable[TextEdit],
        version: int | None = None,
    ) -> Cell:
        return self._registry.require(uri).apply_content_change(cell_uri, edits, version)

    # ------------------------------------------------------------------
    # Read-only transforms
    # ------------------------------------------------------------------

    def virtual_document(self, uri: str) -> VirtualDocument:
        """The text to send to the analyzer for *uri*'s current version."""
        return self._registry.require(uri).virtual_document(self._config.LANGUAGE)

    def project_diagnostics(
        self,
        uri: str,
        findings: Iterable[Finding],
        analyzed_version: int | None = None,
    ) -> CellDiagnostics:
        """Project *findings* onto the cells of *uri* and publish them.

        Findings for a notebook that has been closed in the meantime are
        ignored.
        """
        notebook = self._registry.get(uri)
        if notebook is None:
            _logger.debug("[NotebookSync] Dropping findings for closed notebook %s", uri)
            return {}
        projected = self._projector.project(notebook, findings, analyzed_version)
        self._emit(projected)
        return projected

    def project_quick_fix_edits(self, uri: str, quick_fix: QuickFix) -> CellQuickFix | None:
        return self._projector.project_quick_fix(self._registry.require(uri), quick_fix)

    def cell_uri_for_absolute_line(self, uri: str, line: int) -> str | None:
        """Return the cell owning virtual *line* of notebook *uri*."""
        notebook = self._registry.get(uri)
        return notebook.cell_uri_for_line(line) if notebook else None

    def is_known_cell_uri(self, cell_uri: str) -> bool:
        return self._registry.is_known_cell_uri(cell_uri)

    def notebook_uri_for_cell(self, cell_uri: str) -> str | None:
        notebook = self._registry.find_owning_notebook(cell_uri)
        return notebook.uri if notebook else None

    def _emit(self, by_cell: CellDiagnostics) -> None:
        if self._publish is None:
            return
        for cell_uri, diagnostics in by_cell.items():
            self._publish(cell_uri, diagnostics)
