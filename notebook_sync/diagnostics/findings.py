"""
Analyzer findings and their per-cell projections.

Findings are expressed against the virtual document; diagnostics are the
same data moved into the coordinate space of the owning cell.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..notebooks.line_index import CellEdits
from ..ranges import TextEdit, TextRange


@dataclass(frozen=True)
class FlowLocation:
    """One secondary location of a finding."""
    range: TextRange
    message: str = ""


@dataclass(frozen=True)
class Flow:
    locations: tuple[FlowLocation, ...] = ()


@dataclass(frozen=True)
class QuickFix:
    """A suggested fix: every edit is applied together or not at all."""
    message: str
    edits: tuple[TextEdit, ...] = ()


@dataclass(frozen=True)
class Finding:
    """An issue reported by the analyzer on the virtual document.

    ``range`` is ``None`` for issues that apply to the whole document.
    """
    rule_key: str
    message: str
    range: TextRange | None = None
    severity: str | None = None
    flows: tuple[Flow, ...] = ()
    quick_fixes: tuple[QuickFix, ...] = ()


@dataclass(frozen=True)
class CellFlowLocation:
    cell_uri: str
    range: TextRange
    message: str = ""


@dataclass(frozen=True)
class CellFlow:
    locations: tuple[CellFlowLocation, ...] = ()


@dataclass(frozen=True)
class CellQuickFix:
    """A quick fix whose edits are grouped by the cell they land in."""
    message: str
    cell_edits: tuple[CellEdits, ...] = ()

    @property
    def cell_uris(self) -> list[str]:
        return [group.cell_uri for group in self.cell_edits]


@dataclass(frozen=True)
class Diagnostic:
    """A finding projected onto one cell, valid for one notebook version."""
    cell_uri: str
    range: TextRange
    rule_key: str
    message: str
    severity: str | None = None
    flows: tuple[CellFlow, ...] = field(default_factory=tuple)
    quick_fixes: tuple[CellQuickFix, ...] = field(default_factory=tuple)
