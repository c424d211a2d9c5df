"""Finding types and their projection onto notebook cells."""

from .findings import (
    CellFlow, CellFlowLocation, CellQuickFix, Diagnostic, Finding, Flow,
    FlowLocation, QuickFix,
)
from .projector import DiagnosticsProjector

__all__ = [
    "Finding", "Flow", "FlowLocation", "QuickFix",
    "Diagnostic", "CellFlow", "CellFlowLocation", "CellQuickFix",
    "DiagnosticsProjector",
]
