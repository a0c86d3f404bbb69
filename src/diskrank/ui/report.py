"""One-shot ranked textual report of a directory inventory."""

from __future__ import annotations

from pathlib import Path
from typing import Final

import click

from diskrank.types.models import Inventory
from diskrank.utils.formatting import (
    DEFAULT_BAR_WIDTH,
    create_progress_bar,
    display_name,
    format_size,
    percentage,
)

# Colour thresholds (decimal units)
GB: Final[int] = 1_000_000_000
MB_100: Final[int] = 100_000_000
MB_10: Final[int] = 10_000_000
MB_1: Final[int] = 1_000_000

# Minimum rule width; wider bars stretch it to the header
RULE_WIDTH: Final[int] = 70
EMPTY_MESSAGE: Final[str] = "Directory is empty or cannot be accessed"
SEPARATOR: Final[str] = " │ "


def size_color(size: int) -> str:
    """Return the click colour name used for an entry of ``size`` bytes."""
    if size >= GB:
        return "bright_red"
    if size >= MB_100:
        return "yellow"
    if size >= MB_10:
        return "green"
    if size >= MB_1:
        return "cyan"
    return "white"


def render_report(
    inventory: Inventory,
    *,
    bar_width: int = DEFAULT_BAR_WIDTH,
    color: bool = True,
    binary_units: bool = False,
) -> list[str]:
    """Render the table rows for an inventory.

    Colour is applied after padding and only to the size and name columns,
    so columns stay aligned whether or not colour is enabled.

    Args:
        inventory: Inventory to render, in ranked order
        bar_width: Width of the usage bar column
        color: Wrap sizes and names in ANSI colour codes
        binary_units: Show sizes in 1024-based units

    Returns:
        Output lines; a single explanatory line for an empty inventory
    """
    if inventory.is_empty:
        return [EMPTY_MESSAGE]

    header = SEPARATOR.join(
        [
            f"{'Size':>12}",
            f"{'Usage':<{bar_width}}",
            f"{'Share':>7}",
            "Name",
        ]
    )
    lines = [header, "─" * max(RULE_WIDTH, len(header))]

    for entry in inventory.entries:
        share = percentage(entry.size, inventory.total_size)
        size_col = f"{format_size(entry.size, binary=binary_units):>12}"
        name_col = display_name(entry.name) + ("/" if entry.is_directory else "")

        if color:
            fg = size_color(entry.size)
            size_col = click.style(size_col, fg=fg)
            name_col = click.style(name_col, fg=fg)

        lines.append(
            SEPARATOR.join(
                [
                    size_col,
                    f"{create_progress_bar(share, bar_width):<{bar_width}}",
                    f"{share:>6.1f}%",
                    name_col,
                ]
            )
        )

    return lines


def print_report(
    root: Path,
    inventory: Inventory,
    *,
    bar_width: int = DEFAULT_BAR_WIDTH,
    color: bool = True,
    binary_units: bool = False,
) -> None:
    """Print the full report for ``root`` to stdout."""
    click.echo(f"Analyzing: {display_name(str(root))}")
    for line in render_report(inventory, bar_width=bar_width, color=color, binary_units=binary_units):
        click.echo(line)
    if not inventory.is_empty:
        click.echo(f"Total: {format_size(inventory.total_size, binary=binary_units)} in {len(inventory)} entries")
