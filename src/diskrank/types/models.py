"""Data models for diskrank.

This module defines immutable dataclasses used to pass scan results from the
scanner to the navigator and on to the renderers.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class Entry:
    """One immediate child of a scanned directory with its aggregate size.

    Created fresh on every scan and never mutated afterwards.
    """

    path: Path
    name: str
    size: int
    is_directory: bool


@dataclass(slots=True, frozen=True)
class Inventory:
    """Ordered outcome of one directory scan.

    Entries are sorted by size descending; entries of equal size keep the
    order in which the directory listing produced them. ``total_size`` is
    always the exact sum of the entry sizes.
    """

    entries: tuple[Entry, ...]
    total_size: int

    @classmethod
    def from_entries(cls, entries: Iterable[Entry]) -> Inventory:
        """Build an inventory from entries given in listing order.

        Args:
            entries: Entries in directory enumeration order

        Returns:
            Inventory sorted by size descending with the exact total
        """
        # sorted() is stable, so ties keep their listing order
        ranked = tuple(sorted(entries, key=lambda entry: entry.size, reverse=True))
        return cls(entries=ranked, total_size=sum(entry.size for entry in ranked))

    @classmethod
    def empty(cls) -> Inventory:
        """Return the inventory of an empty or unreadable directory."""
        return cls(entries=(), total_size=0)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries


@dataclass(slots=True, frozen=True)
class NavigatorSnapshot:
    """Immutable view of the navigator session, re-read by renderers each frame."""

    current_path: Path
    entries: tuple[Entry, ...]
    total_size: int
    cursor: int | None
    terminated: bool = False

    @property
    def selected(self) -> Entry | None:
        if self.cursor is None:
            return None
        return self.entries[self.cursor]
