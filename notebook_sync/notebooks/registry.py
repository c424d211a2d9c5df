"""
Notebook registry — the set of notebooks currently open in the editor.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable

from ..errors import UnknownNotebookError
from .line_index import DEFAULT_CELL_DELIMITER, validate_delimiter
from .model import Cell, Notebook

logger = logging.getLogger(__name__)


class NotebookRegistry:
    """Thread-safe map of notebook uri -> :class:`Notebook`.

    The lock only guards dict lookups and updates and is never held while a
    notebook is mutated or read, so it behaves as a concurrent map: work on
    one notebook never waits on another.

    Versions keep increasing across a close and reopen of the same uri, so
    results computed for an earlier incarnation are always seen as stale.
    """

    def __init__(self, delimiter: str = DEFAULT_CELL_DELIMITER) -> None:
        self._delimiter = validate_delimiter(delimiter)
        self._notebooks: dict[str, Notebook] = {}
        # uri -> last version reached before it was closed
        self._closed_versions: dict[str, int] = {}
        self._lock = threading.Lock()

    def open(self, uri: str, cells: Iterable[Cell]) -> Notebook:
        """Register *uri* with *cells*, replacing any notebook already open."""
        cells = list(cells)
        with self._lock:
            previous = self._notebooks.get(uri)
            base = (previous.version if previous is not None
                    else self._closed_versions.get(uri, 0))
            # Not yet visible to readers; only builds the cell table
            notebook = Notebook(uri, self._delimiter, version=base)
            notebook.open(cells)
            self._notebooks[uri] = notebook
            self._closed_versions.pop(uri, None)
        if previous is not None:
            logger.warning(
                "[Registry] Notebook %s was opened twice, replacing the "
                "previous state", uri,
            )
        logger.debug("[Registry] Opened %s with %d cell(s)", uri, len(notebook.cells))
        return notebook

    def close(self, uri: str) -> Notebook | None:
        """Forget *uri*. Returns the notebook on the first close only."""
        with self._lock:
            notebook = self._notebooks.pop(uri, None)
            if notebook is not None:
                self._closed_versions[uri] = notebook.version
        if notebook is not None:
            logger.debug("[Registry] Closed %s", uri)
        return notebook

    def get(self, uri: str) -> Notebook | None:
        with self._lock:
            return self._notebooks.get(uri)

    def require(self, uri: str) -> Notebook:
        """Like :meth:`get` but raises for a notebook that is not open."""
        notebook = self.get(uri)
        if notebook is None:
            raise UnknownNotebookError(f"Notebook {uri} is not open")
        return notebook

    def is_notebook(self, uri: str) -> bool:
        with self._lock:
            return uri in self._notebooks

    def all(self) -> list[Notebook]:
        """Snapshot of every open notebook."""
        with self._lock:
            return list(self._notebooks.values())

    def find_owning_notebook(self, cell_uri: str) -> Notebook | None:
        """Return the open notebook that contains *cell_uri*, if any."""
        for notebook in self.all():
            if notebook.has_cell(cell_uri):
                return notebook
        return None

    def is_known_cell_uri(self, cell_uri: str) -> bool:
        return self.find_owning_notebook(cell_uri) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._notebooks)

    def __contains__(self, uri: object) -> bool:
        with self._lock:
            return uri in self._notebooks
