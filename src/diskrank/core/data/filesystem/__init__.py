"""Filesystem operations module for directory scanning and size calculations."""

from __future__ import annotations

from .scanner import DirectoryScanner
from .size_probe import SizeMode, SizeProbe

__all__ = [
    "DirectoryScanner",
    "SizeMode",
    "SizeProbe",
]
