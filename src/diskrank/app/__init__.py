"""Application module: command-line interface and mode runner."""

from __future__ import annotations

from diskrank.app.cli import cli
from diskrank.app.runner import ApplicationRunner

__all__ = [
    "cli",
    "ApplicationRunner",
]
