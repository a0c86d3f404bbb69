"""Shared utility modules for common operations.

This package provides pure, stateless formatting helpers (sizes, percentages,
progress bars) and the logging setup used across the application.
"""

from diskrank.utils.formatting import (
    create_progress_bar,
    display_name,
    format_size,
    percentage,
)

__all__ = [
    "create_progress_bar",
    "display_name",
    "format_size",
    "percentage",
]
