"""
Diagnostics projector — groups analyzer findings per cell and works out
which cells must be cleared explicitly.

An editor only replaces diagnostics for the uris it is sent.  A cell that
goes from some issues to none therefore needs an explicit empty set, and the
projector remembers which cells carried diagnostics on the previous pass of
each notebook to find those cells.
"""

from __future__ import annotations

import logging
import threading
import weakref
from typing import Iterable

from ..errors import ProjectionError
from ..notebooks.line_index import RangeMapper
from ..notebooks.model import Notebook
from .findings import (
    CellFlow, CellFlowLocation, CellQuickFix, Diagnostic, Finding, Flow, QuickFix,
)

logger = logging.getLogger(__name__)

CellDiagnostics = dict[str, list[Diagnostic]]


class DiagnosticsProjector:
    """Project findings onto cells and track stale per-cell diagnostics."""

    def __init__(self) -> None:
        # notebook uri -> cell uris that carried diagnostics on the last pass
        self._published: dict[str, set[str]] = {}
        self._cleared: weakref.WeakSet[Notebook] = weakref.WeakSet()
        self._lock = threading.Lock()

    def project(
        self,
        notebook: Notebook,
        findings: Iterable[Finding],
        analyzed_version: int | None = None,
    ) -> CellDiagnostics:
        """Group *findings* by owning cell.

        Every cell of the notebook is present in the result, with an empty
        list when it has no findings.  Cells that had diagnostics on the
        previous pass but have since left the notebook are included with an
        empty list too.

        Parameters
        ----------
        notebook:
            The notebook the findings were computed for.
        findings:
            Findings against the notebook's virtual document.
        analyzed_version:
            The notebook version that was sent to the analyzer.  When it no
            longer matches, the findings are stale and nothing is returned.

        Returns
        -------
        dict
            cell uri -> diagnostics, in notebook cell order.
        """
        if analyzed_version is not None and analyzed_version != notebook.version:
            logger.debug(
                "[Projector] Ignoring findings for %s at version %d, notebook "
                "is at version %d", notebook.uri, analyzed_version, notebook.version,
            )
            return {}
        with self._lock:
            if notebook in self._cleared:
                logger.debug("[Projector] Ignoring findings for closed notebook %s",
                             notebook.uri)
                return {}

        mapper = notebook.range_mapper()
        by_cell: CellDiagnostics = {uri: [] for uri in mapper.index.cell_uris}
        total = dropped = 0
        for finding in findings:
            total += 1
            diagnostic = self._project_finding(mapper, finding)
            if diagnostic is None:
                dropped += 1
                continue
            by_cell[diagnostic.cell_uri].append(diagnostic)

        with_diagnostics = {uri for uri, diagnostics in by_cell.items() if diagnostics}
        with self._lock:
            # Cleared while the findings were being mapped
            if notebook in self._cleared:
                logger.debug("[Projector] %s was closed during projection", notebook.uri)
                return {}
            previous = self._published.get(notebook.uri, set())
            self._published[notebook.uri] = with_diagnostics

        for uri in sorted(previous - by_cell.keys()):
            by_cell[uri] = []

        logger.debug(
            "[Projector] %s v%d: %d finding(s), %d dropped, %d cell(s) with issues",
            notebook.uri, mapper.index.for_version, total, dropped, len(with_diagnostics),
        )
        return by_cell

    def project_quick_fix(self, notebook: Notebook, quick_fix: QuickFix) -> CellQuickFix | None:
        """Split *quick_fix* into per-cell edit groups, or ``None`` if unmappable."""
        return self._project_quick_fix(notebook.range_mapper(), quick_fix)

    def remove_all(self, notebook: Notebook) -> CellDiagnostics:
        """Return an empty diagnostic set for every cell of *notebook*.

        Only the first call for a given notebook produces anything; later
        calls return an empty dict.
        """
        with self._lock:
            if notebook in self._cleared:
                return {}
            self._cleared.add(notebook)
            previous = self._published.pop(notebook.uri, set())

        cleared: CellDiagnostics = {uri: [] for uri in notebook.cell_uris}
        for uri in sorted(previous - cleared.keys()):
            cleared[uri] = []
        logger.debug("[Projector] Cleared %d cell(s) of %s", len(cleared), notebook.uri)
        return cleared

    def remove_cell(self, notebook_uri: str, cell_uri: str) -> CellDiagnostics:
        """Forget *cell_uri* and return its empty diagnostic set."""
        with self._lock:
            published = self._published.get(notebook_uri)
            if published is not None:
                published.discard(cell_uri)
        return {cell_uri: []}

    def cells_with_diagnostics(self, notebook_uri: str) -> set[str]:
        """Cells that carried diagnostics on the last pass for *notebook_uri*."""
        with self._lock:
            return set(self._published.get(notebook_uri, ()))

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    def _project_finding(self, mapper: RangeMapper, finding: Finding) -> Diagnostic | None:
        if finding.range is None:
            logger.warning(
                "[Projector] Dropping finding %s without a location: %s",
                finding.rule_key, finding.message,
            )
            return None
        try:
            cell_range = mapper.to_cell_range(finding.range)
        except ProjectionError as exc:
            logger.warning("[Projector] Dropping finding %s: %s", finding.rule_key, exc)
            return None

        quick_fixes = tuple(
            fix for fix in (
                self._project_quick_fix(mapper, quick_fix)
                for quick_fix in finding.quick_fixes
            )
            if fix is not None
        )
        return Diagnostic(
            cell_uri=cell_range.cell_uri,
            range=cell_range.range,
            rule_key=finding.rule_key,
            message=finding.message,
            severity=finding.severity,
            flows=tuple(self._project_flow(mapper, flow) for flow in finding.flows),
            quick_fixes=quick_fixes,
        )

    @staticmethod
    def _project_quick_fix(mapper: RangeMapper, quick_fix: QuickFix) -> CellQuickFix | None:
        try:
            cell_edits = mapper.to_cell_edits(quick_fix.edits)
        except ProjectionError as exc:
            logger.warning(
                "[Projector] Dropping quick fix '%s': %s", quick_fix.message, exc,
            )
            return None
        return CellQuickFix(quick_fix.message, tuple(cell_edits))

    @staticmethod
    def _project_flow(mapper: RangeMapper, flow: Flow) -> CellFlow:
        locations: list[CellFlowLocation] = []
        for location in flow.locations:
            try:
                mapped = mapper.to_cell_range(location.range)
            except ProjectionError as exc:
                logger.warning("[Projector] Dropping flow location: %s", exc)
                continue
            locations.append(
                CellFlowLocation(mapped.cell_uri, mapped.range, location.message)
            )
        return CellFlow(tuple(locations))
