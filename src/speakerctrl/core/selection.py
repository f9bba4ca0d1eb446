"""Selection tracker for the speakers the user wants to group next."""

import logging
from collections.abc import Iterable

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


class SelectionTracker(QObject):
    """Set of device names marked for grouping.

    Names are not checked against the directory when toggled; stale names
    are dropped by prune() on the next successful refresh.

    Example:
        selection = SelectionTracker()
        selection.toggle("Kitchen")
        selection.prune({"Kitchen", "Living Room"})
        selection.snapshot()  # ["Kitchen"]
    """

    selection_changed = Signal(object)  # list[str]

    def __init__(self) -> None:
        """Initialize with nothing selected."""
        super().__init__()
        self._selected: set[str] = set()

    def __len__(self) -> int:
        return len(self._selected)

    def is_selected(self, name: str) -> bool:
        """Return True if the name is currently selected."""
        return name in self._selected

    def toggle(self, name: str) -> bool:
        """Flip membership of a name.

        Args:
            name: Device name.

        Returns:
            True if the name is now selected.
        """
        if name in self._selected:
            self._selected.discard(name)
            selected = False
        else:
            self._selected.add(name)
            selected = True
        self.selection_changed.emit(self.snapshot())
        return selected

    def prune(self, valid_names: Iterable[str]) -> None:
        """Drop every selected name not in valid_names.

        Args:
            valid_names: Names present in the current directory snapshot.
        """
        kept = self._selected.intersection(valid_names)
        if kept == self._selected:
            return
        dropped = self._selected - kept
        logger.debug("Dropping vanished devices from selection: %s", sorted(dropped))
        self._selected = kept
        self.selection_changed.emit(self.snapshot())

    def snapshot(self) -> list[str]:
        """Return the selected names (sorted for stable display)."""
        return sorted(self._selected)

    def clear(self) -> None:
        """Deselect everything."""
        if not self._selected:
            return
        self._selected.clear()
        self.selection_changed.emit([])
