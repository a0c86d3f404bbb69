"""Navigator state machine for browsing directory inventories.

The navigator owns the directory currently displayed, its inventory and a
cursor. Every mutating transition funnels through ``load``, which re-scans
the target directory and resets the cursor; ``load`` is atomic from the
caller's point of view and never raises for filesystem conditions.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path

from diskrank.core.data.filesystem import DirectoryScanner
from diskrank.types.models import Entry, Inventory, NavigatorSnapshot

logger = logging.getLogger(__name__)


class Command(str, Enum):
    """User commands, each mapping to exactly one navigator transition."""

    NEXT = "next"
    PREVIOUS = "previous"
    ENTER = "enter"
    UP = "up"
    REFRESH = "refresh"
    QUIT = "quit"


def normalize_path(path: Path | str) -> Path:
    """Return an absolute path with ``.`` and ``..`` components collapsed."""
    return Path(os.path.abspath(path))


class Navigator:
    """Browsing session over a directory hierarchy.

    Attributes are read through properties; the only way to change them is
    through the transitions (``load``, ``move_next``, ``move_previous``,
    ``descend``, ``ascend``, ``reload``, ``quit``).
    """

    def __init__(self, path: Path | str, scanner: DirectoryScanner | None = None) -> None:
        """Initialize the navigator and load the starting directory.

        Args:
            path: Directory to display first
            scanner: Scanner used for every load (defaults to a new one)
        """
        self._scanner: DirectoryScanner = scanner or DirectoryScanner()
        self._current_path: Path = normalize_path(path)
        self._inventory: Inventory = Inventory.empty()
        self._cursor: int | None = None
        self._terminated: bool = False
        self.load(self._current_path)

    @property
    def current_path(self) -> Path:
        return self._current_path

    @property
    def inventory(self) -> Inventory:
        return self._inventory

    @property
    def cursor(self) -> int | None:
        return self._cursor

    @property
    def terminated(self) -> bool:
        return self._terminated

    @property
    def selected_entry(self) -> Entry | None:
        """Entry under the cursor, or None when the inventory is empty."""
        if self._cursor is None:
            return None
        return self._inventory.entries[self._cursor]

    def snapshot(self) -> NavigatorSnapshot:
        """Return the current session state for rendering."""
        return NavigatorSnapshot(
            current_path=self._current_path,
            entries=self._inventory.entries,
            total_size=self._inventory.total_size,
            cursor=self._cursor,
            terminated=self._terminated,
        )

    def load(self, path: Path | str) -> None:
        """Display ``path``: re-scan it, replace the inventory, reset the cursor.

        Args:
            path: Directory to load
        """
        self._current_path = normalize_path(path)
        self._inventory = self._scanner.scan(self._current_path)
        self._cursor = None if self._inventory.is_empty else 0
        logger.debug(
            "Loaded directory",
            extra={"path": str(self._current_path), "entries": len(self._inventory)},
        )

    def move_next(self) -> None:
        """Advance the cursor by one, wrapping from the last entry to the first."""
        if self._cursor is None:
            return
        self._cursor = (self._cursor + 1) % len(self._inventory)

    def move_previous(self) -> None:
        """Move the cursor back by one, wrapping from the first entry to the last."""
        if self._cursor is None:
            return
        self._cursor = (self._cursor - 1) % len(self._inventory)

    def descend(self) -> None:
        """Load the directory under the cursor; no-op for files or an empty list."""
        entry = self.selected_entry
        if entry is None or not entry.is_directory:
            return
        self.load(entry.path)

    def ascend(self) -> None:
        """Load the parent directory; no-op at a filesystem root."""
        parent = self._current_path.parent
        if parent == self._current_path:
            return
        self.load(parent)

    def reload(self) -> None:
        """Re-scan the current directory in place."""
        self.load(self._current_path)

    def quit(self) -> None:
        """Request the browsing loop to exit."""
        self._terminated = True

    def handle(self, command: Command) -> NavigatorSnapshot:
        """Apply a user command and return the resulting state.

        Commands received after ``quit`` are ignored.

        Args:
            command: Command to apply

        Returns:
            Snapshot of the state after the transition
        """
        if self._terminated:
            logger.debug("Ignoring command after quit", extra={"command": command.value})
            return self.snapshot()

        match command:
            case Command.NEXT:
                self.move_next()
            case Command.PREVIOUS:
                self.move_previous()
            case Command.ENTER:
                self.descend()
            case Command.UP:
                self.ascend()
            case Command.REFRESH:
                self.reload()
            case Command.QUIT:
                self.quit()

        return self.snapshot()
