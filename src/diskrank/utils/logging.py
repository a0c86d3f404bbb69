"""Logging infrastructure with scan ID tracking.

This module configures logging for the diskrank application. Every directory
scan is tagged with a short scan ID held in a ContextVar; the scanner copies
the current context into each worker task, so log records emitted by size
probes running on pool threads carry the ID of the scan that dispatched them.
"""

import contextvars
import logging
import sys
import uuid
from pathlib import Path
from typing import Final

from typing_extensions import override

# Scan ID context variable for tracing probe activity back to a scan
scan_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scan_id",
    default=None,
)

# Log format constants
DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(scan_id)s] - %(message)s"

FILE_LOG_FORMAT: Final[str] = (
    "%(asctime)s - %(process)d - %(threadName)s - %(name)s - %(levelname)s - [%(scan_id)s] - %(message)s"
)

DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


class ScanIdFilter(logging.Filter):
    """Logging filter that adds the current scan ID to log records.

    Records logged outside of a scan get ``-`` as their scan ID.
    """

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        """Add scan ID to log record from ContextVar.

        Args:
            record: Log record to enhance with the scan ID

        Returns:
            True to allow the record to be logged
        """
        scan_id = scan_id_var.get()
        record.scan_id = scan_id if scan_id is not None else "-"
        return True


def configure_logging(
    *,
    log_level: str = "WARNING",
    log_file: Path | None = None,
    enable_console: bool = True,
) -> None:
    """Configure application logging.

    Sets up logging infrastructure with:
    - Scan ID tracking via ContextVar
    - Console output on stderr, so report output on stdout stays clean
    - Optional file output (the only sink while the interactive browser
      owns the terminal)

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a log file to append to
        enable_console: Enable the stderr console handler

    Example:
        >>> configure_logging(log_level="DEBUG", log_file=Path("diskrank.log"))
        >>> logger = logging.getLogger(__name__)
        >>> logger.debug("Scanning", extra={"path": "/data"})
    """
    root_logger = logging.getLogger()

    level = getattr(logging, log_level.upper(), logging.WARNING)
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    scan_filter = ScanIdFilter()

    if log_file is not None:
        try:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError as exc:
            print(f"Warning: Could not open log file {log_file}: {exc}", file=sys.stderr)
        else:
            file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT))
            file_handler.addFilter(scan_filter)
            root_logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT, datefmt=DATE_FORMAT))
        console_handler.addFilter(scan_filter)
        root_logger.addHandler(console_handler)

    if not root_logger.handlers:
        # Keep the last-resort handler from printing warnings over the screen
        root_logger.addHandler(logging.NullHandler())


def new_scan_id() -> str:
    """Return a fresh short scan ID."""
    return uuid.uuid4().hex[:8]


def set_scan_id(scan_id: str) -> contextvars.Token[str | None]:
    """Set the scan ID for the current context.

    Args:
        scan_id: Identifier of the scan now running

    Returns:
        Token that restores the previous value via ``reset_scan_id``
    """
    return scan_id_var.set(scan_id)


def reset_scan_id(token: contextvars.Token[str | None]) -> None:
    """Restore the scan ID that was current before ``set_scan_id``."""
    scan_id_var.reset(token)


def get_scan_id() -> str | None:
    """Get the current scan ID from context, or None outside of a scan."""
    return scan_id_var.get()
