"""Shared data types for diskrank."""

from __future__ import annotations

from diskrank.types.models import Entry, Inventory, NavigatorSnapshot

__all__ = [
    "Entry",
    "Inventory",
    "NavigatorSnapshot",
]
