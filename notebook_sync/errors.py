"""
Error hierarchy for notebook synchronization.

Two families: caller contract violations, which are raised immediately
because they mean the editor and this model disagree about document state,
and projection errors, which describe analyzer output that cannot be mapped
back onto a cell and are dropped by the projector.
"""


class NotebookSyncError(Exception):
    """Base class for all notebook_sync errors."""


class ContractViolation(NotebookSyncError, ValueError):
    """The caller broke a precondition of the call."""


class InvalidEditError(ContractViolation):
    """An edit range is malformed or out of bounds."""


class OverlappingEditsError(InvalidEditError):
    """Two edits in one batch overlap or share a start position."""


class UnknownCellError(ContractViolation, KeyError):
    """A cell uri is not part of the notebook."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return Exception.__str__(self)


class DuplicateCellError(ContractViolation):
    """A cell uri is opened twice in the same notebook."""


class UnknownNotebookError(ContractViolation, KeyError):
    """A notebook uri is not open."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class InvalidDelimiterError(ContractViolation):
    """The configured cell delimiter is not a single terminated line."""


class ProjectionError(NotebookSyncError):
    """A virtual-document location cannot be projected onto a cell."""


class MappingMissError(ProjectionError):
    """A virtual line has no entry in the current line index."""


class CrossCellRangeError(ProjectionError):
    """A range starts and ends in different cells."""
