"""Pure formatting utilities for human-readable output.

This module provides stateless formatting functions shared by the report
renderer and the interactive browser. All functions are pure with no side
effects.
"""

from typing import Final

# Decimal unit steps (1000-based), as shown by most disk usage tools
_DECIMAL_UNITS: Final[tuple[str, ...]] = ("B", "kB", "MB", "GB", "TB", "PB", "EB")
_BINARY_UNITS: Final[tuple[str, ...]] = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")

BAR_FILLED: Final[str] = "█"
BAR_EMPTY: Final[str] = "░"
DEFAULT_BAR_WIDTH: Final[int] = 20


def format_size(size: int, *, binary: bool = False, precision: int = 2) -> str:
    """Convert a byte count to a human-readable size.

    Args:
        size: Number of bytes to format (must be non-negative)
        binary: Use 1024-based units (KiB, MiB, ...) instead of decimal ones
        precision: Decimal places shown for values of one kilo-unit or more

    Returns:
        Human-readable string such as ``"120 B"`` or ``"5.00 MB"``

    Raises:
        ValueError: If size is negative

    Examples:
        >>> format_size(120)
        '120 B'
        >>> format_size(5_000_000)
        '5.00 MB'
        >>> format_size(2048, binary=True)
        '2.00 KiB'
    """
    if size < 0:
        msg = "size must be non-negative"
        raise ValueError(msg)

    step = 1024 if binary else 1000
    units = _BINARY_UNITS if binary else _DECIMAL_UNITS

    if size < step:
        return f"{size} B"

    value = float(size)
    unit_index = 0
    while value >= step and unit_index < len(units) - 1:
        value /= step
        unit_index += 1

    return f"{value:.{precision}f} {units[unit_index]}"


def percentage(size: int, total: int) -> float:
    """Share of ``total`` taken by ``size``, in percent (0.0 when total is 0)."""
    if total <= 0:
        return 0.0
    return size / total * 100.0


def create_progress_bar(percent: float, width: int = DEFAULT_BAR_WIDTH) -> str:
    """Render a fixed-width bar for a percentage.

    The number of filled cells is ``round(percent / 100 * width)`` clamped to
    ``[0, width]``.

    Examples:
        >>> create_progress_bar(50.0, width=10)
        '█████░░░░░'
        >>> create_progress_bar(0.0, width=4)
        '░░░░'
    """
    filled = round(percent / 100.0 * width)
    filled = max(0, min(filled, width))
    return BAR_FILLED * filled + BAR_EMPTY * (width - filled)


def display_name(name: str) -> str:
    """Make a filesystem name safe to print.

    Names that are not valid UTF-8 reach Python with surrogate escapes;
    those bytes are shown as U+FFFD instead of failing on output.

    Examples:
        >>> display_name("bad\\udcffname") == "bad\\ufffdname"
        True
    """
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")
