"""
Patch applier — applies a batch of disjoint range edits to one text blob
in a single forward pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from ..errors import InvalidEditError, OverlappingEditsError
from ..ranges import TextEdit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _ResolvedEdit:
    """An edit with its range converted to absolute offsets."""
    start: int
    end: int
    edit: TextEdit

    @property
    def spans_lines(self) -> bool:
        return self.edit.range.end_line > self.edit.range.start_line


def _line_starts(text: str) -> list[int]:
    """Return the offset at which each line of *text* begins."""
    starts = [0]
    pos = text.find("\n")
    while pos != -1:
        starts.append(pos + 1)
        pos = text.find("\n", pos + 1)
    return starts


class PatchApplier:
    """Apply range edits to text.

    Edits are expressed against the original text, so the result does not
    depend on the order they are supplied in.  Edits must not overlap; a
    malformed or overlapping batch raises instead of being repaired.
    """

    def apply(self, original: str, edits: Iterable[TextEdit]) -> str:
        """Return *original* with every edit in *edits* applied.

        Parameters
        ----------
        original:
            The text the edit coordinates refer to.
        edits:
            Pairwise non-overlapping edits.  Lines are 1-based, columns
            0-based.

        Returns
        -------
        str
            The patched text.

        Raises
        ------
        InvalidEditError
            A range ends before it starts or points outside *original*.
        OverlappingEditsError
            Two edits overlap or start at the same position.
        """
        edits = list(edits)
        if not edits:
            return original

        line_starts = _line_starts(original)
        resolved = sorted(
            (self._resolve(original, line_starts, edit) for edit in edits),
            key=lambda r: (r.start, r.end),
        )
        self._check_disjoint(resolved)

        out: list[str] = []
        cursor = 0
        for i, item in enumerate(resolved):
            out.append(original[cursor:item.start])
            out.append(item.edit.new_text)
            cursor = item.end

            next_start = resolved[i + 1].start if i + 1 < len(resolved) else None
            if self._leaves_empty_merged_line(original, out, item, next_start):
                if cursor < len(original):
                    # Swallow the terminator of the emptied line
                    cursor += 1
                else:
                    _drop_trailing_terminator(out)

        out.append(original[cursor:])

        logger.debug("[PatchApplier] Applied %d edit(s)", len(resolved))
        return "".join(out)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _resolve(original: str, line_starts: list[int], edit: TextEdit) -> _ResolvedEdit:
        rng = edit.range
        line_count = len(line_starts)

        def offset(line: int, col: int, what: str) -> int:
            if line < 1 or line > line_count:
                raise InvalidEditError(
                    f"{what} line {line} is outside 1..{line_count}"
                )
            line_start = line_starts[line - 1]
            line_end = (
                line_starts[line] - 1 if line < line_count else len(original)
            )
            if col < 0 or col > line_end - line_start:
                raise InvalidEditError(
                    f"{what} column {col} is outside 0..{line_end - line_start} "
                    f"on line {line}"
                )
            return line_start + col

        if rng.end < rng.start:
            raise InvalidEditError(
                f"Edit range ends before it starts: {rng.start} > {rng.end}"
            )
        return _ResolvedEdit(
            start=offset(rng.start_line, rng.start_col, "Start"),
            end=offset(rng.end_line, rng.end_col, "End"),
            edit=edit,
        )

    @staticmethod
    def _check_disjoint(resolved: list[_ResolvedEdit]) -> None:
        for prev, cur in zip(resolved, resolved[1:]):
            if cur.start < prev.end or cur.start == prev.start:
                raise OverlappingEditsError(
                    f"Edits overlap: {prev.edit.range} and {cur.edit.range}"
                )

    # ------------------------------------------------------------------
    # Line merging
    # ------------------------------------------------------------------

    @staticmethod
    def _leaves_empty_merged_line(
        original: str,
        out: list[str],
        item: _ResolvedEdit,
        next_start: int | None,
    ) -> bool:
        """True when a multi-line deletion collapses its lines into nothing.

        The merged line is empty when nothing was emitted on it before the
        edit, nothing of the original follows the edit end on its line, and
        no later edit writes at that position.
        """
        if not item.spans_lines or item.edit.new_text:
            return False
        if next_start == item.end:
            return False
        if item.end < len(original) and original[item.end] != "\n":
            return False
        return _at_line_start(out)


def _at_line_start(out: list[str]) -> bool:
    for chunk in reversed(out):
        if chunk:
            return chunk.endswith("\n")
    return True


def _drop_trailing_terminator(out: list[str]) -> None:
    for i in range(len(out) - 1, -1, -1):
        if out[i]:
            if out[i].endswith("\n"):
                out[i] = out[i][:-1]
            return


def apply_edits(original: str, edits: Iterable[TextEdit]) -> str:
    """Module-level shortcut for :meth:`PatchApplier.apply`."""
    return PatchApplier().apply(original, edits)
