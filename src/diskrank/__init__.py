"""diskrank - rank the immediate children of a directory by aggregate size.

This package measures every child of a directory concurrently and presents
the results either as a one-shot ranked report or as an interactively
browsable hierarchy.
"""

from diskrank.__main__ import main

__all__ = ["main"]
