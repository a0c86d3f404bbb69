"""Renderers consuming scanner and navigator output: report and browser."""

from __future__ import annotations


class TerminalError(Exception):
    """Raised when the terminal cannot be put into interactive mode."""


__all__ = ["TerminalError"]
