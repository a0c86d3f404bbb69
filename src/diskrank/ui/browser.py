"""Interactive full-screen browser driven by the navigator.

The browser only reads ``Navigator.snapshot()`` and feeds decoded key
presses back as ``Command`` values; it never measures anything itself.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import Final, Protocol

import click

from diskrank.core.navigator import Command, Navigator
from diskrank.types.models import Entry, NavigatorSnapshot
from diskrank.ui.report import size_color
from diskrank.utils.formatting import (
    DEFAULT_BAR_WIDTH,
    create_progress_bar,
    display_name,
    format_size,
    percentage,
)

logger = logging.getLogger(__name__)

KEY_BINDINGS: Final[dict[bytes, Command]] = {
    b"\x1b[B": Command.NEXT,  # Down
    b"\x1bOB": Command.NEXT,
    b"j": Command.NEXT,
    b"\x1b[A": Command.PREVIOUS,  # Up
    b"\x1bOA": Command.PREVIOUS,
    b"k": Command.PREVIOUS,
    b"\r": Command.ENTER,
    b"\n": Command.ENTER,
    b"\x7f": Command.UP,  # Backspace
    b"\x08": Command.UP,
    b"r": Command.REFRESH,
    b"q": Command.QUIT,
    b"\x1b": Command.QUIT,  # Esc
    b"\x03": Command.QUIT,  # Ctrl-C arrives as a byte in raw mode
}

HELP_LINE: Final[str] = "↑/↓ or j/k: Navigate | Enter: Open | Backspace: Up | r: Refresh | q/Esc: Quit"
EMPTY_LINE: Final[str] = "(empty or unreadable directory)"

# Title, summary, separator above the list and help line below it
CHROME_ROWS: Final[int] = 4


class Screen(Protocol):
    """Terminal surface the browser draws on."""

    def raw_mode(self) -> AbstractContextManager[None]: ...

    def size(self) -> tuple[int, int]: ...

    def write(self, text: str) -> None: ...

    def read_key(self, timeout: float | None = None) -> bytes: ...


def decode_key(data: bytes) -> Command | None:
    """Map raw key bytes to a command, or None for unbound keys."""
    return KEY_BINDINGS.get(data)


def split_keys(data: bytes) -> Iterator[bytes]:
    r"""Split one terminal read into individual key presses.

    Keys typed while the browser was busy arrive together in a single read.
    CSI (``ESC [ ... final``) and SS3 (``ESC O x``) sequences are kept whole,
    a lone ``ESC`` is the Esc key, and anything else is one byte per key.

    Examples:
        >>> list(split_keys(b"\x1b[Bj\x1b"))
        [b'\x1b[B', b'j', b'\x1b']
    """
    index = 0
    while index < len(data):
        if data.startswith(b"\x1b[", index):
            end = index + 2
            # Parameter and intermediate bytes, then one final byte in 0x40..0x7E
            while end < len(data) and not 0x40 <= data[end] <= 0x7E:
                end += 1
            end = min(end + 1, len(data))
        elif data.startswith(b"\x1bO", index) and index + 2 < len(data):
            end = index + 3
        else:
            end = index + 1
        yield data[index:end]
        index = end


def decode_keys(data: bytes) -> list[Command]:
    """Decode every bound key press in ``data``, in arrival order."""
    return [command for key in split_keys(data) if (command := decode_key(key)) is not None]


def scroll_offset(cursor: int | None, offset: int, visible_rows: int) -> int:
    """Return the smallest change of ``offset`` that keeps ``cursor`` visible.

    Examples:
        >>> scroll_offset(12, 0, 10)
        3
        >>> scroll_offset(2, 3, 10)
        2
        >>> scroll_offset(None, 5, 10)
        0
    """
    if cursor is None or visible_rows <= 0:
        return 0
    if cursor < offset:
        return cursor
    if cursor >= offset + visible_rows:
        return cursor - visible_rows + 1
    return offset


def _clip(text: str, width: int) -> str:
    return text if len(text) <= width else text[: max(width - 1, 0)] + "…"


def format_row(
    entry: Entry,
    total_size: int,
    *,
    selected: bool,
    bar_width: int = DEFAULT_BAR_WIDTH,
    binary_units: bool = False,
) -> str:
    """Plain-text list row for one entry."""
    share = percentage(entry.size, total_size)
    marker = ">> " if selected else "   "
    kind = "[D]" if entry.is_directory else "[F]"
    return (
        f"{marker}{kind} {format_size(entry.size, binary=binary_units):>12} "
        f"{create_progress_bar(share, bar_width)} {share:>6.1f}%  {display_name(entry.name)}"
    )


def render_frame(
    snapshot: NavigatorSnapshot,
    *,
    width: int,
    height: int,
    offset: int,
    bar_width: int = DEFAULT_BAR_WIDTH,
    color: bool = True,
    binary_units: bool = False,
) -> list[str]:
    """Render one screen worth of lines for a navigator snapshot.

    Args:
        snapshot: State to draw
        width: Terminal columns; every line is clipped to this width
        height: Terminal rows
        offset: Index of the first entry shown in the list area
        bar_width: Width of the usage bar
        color: Colour rows by size and highlight the cursor row
        binary_units: Show sizes in 1024-based units

    Returns:
        Exactly ``height`` lines (fewer only if height is below the chrome)
    """
    visible_rows = max(height - CHROME_ROWS, 0)
    lines = [
        _clip(f"diskrank - Path: {display_name(str(snapshot.current_path))}", width),
        _clip(
            f"Total: {format_size(snapshot.total_size, binary=binary_units)}"
            f" | Entries: {len(snapshot.entries)}",
            width,
        ),
        "─" * width,
    ]

    if not snapshot.entries:
        body = [_clip(EMPTY_LINE, width)]
    else:
        body = []
        for index in range(offset, min(offset + visible_rows, len(snapshot.entries))):
            entry = snapshot.entries[index]
            selected = index == snapshot.cursor
            row = _clip(
                format_row(
                    entry,
                    snapshot.total_size,
                    selected=selected,
                    bar_width=bar_width,
                    binary_units=binary_units,
                ),
                width,
            )
            if color:
                row = click.style(row, fg=size_color(entry.size), bold=selected, reverse=selected)
            body.append(row)

    body = body[:visible_rows]
    body.extend([""] * (visible_rows - len(body)))
    lines.extend(body)
    lines.append(_clip(HELP_LINE, width))
    return lines[: max(height, 0)]


class Browser:
    """Event loop tying key presses, the navigator and frame drawing together."""

    def __init__(
        self,
        navigator: Navigator,
        screen: Screen,
        *,
        bar_width: int = DEFAULT_BAR_WIDTH,
        color: bool = True,
        binary_units: bool = False,
        poll_interval: float = 0.1,
    ) -> None:
        self.navigator = navigator
        self.screen = screen
        self.bar_width = bar_width
        self.color = color
        self.binary_units = binary_units
        self.poll_interval = poll_interval
        self._offset = 0

    def draw(self) -> None:
        snapshot = self.navigator.snapshot()
        width, height = self.screen.size()
        self._offset = scroll_offset(snapshot.cursor, self._offset, max(height - CHROME_ROWS, 0))
        lines = render_frame(
            snapshot,
            width=width,
            height=height,
            offset=self._offset,
            bar_width=self.bar_width,
            color=self.color,
            binary_units=self.binary_units,
        )
        # Raw mode needs explicit carriage returns
        self.screen.write("\x1b[H" + "\r\n".join("\x1b[2K" + line for line in lines))

    def step(self, data: bytes) -> None:
        """Apply every key press contained in one read, in order."""
        for command in decode_keys(data):
            logger.debug("Handling command", extra={"command": command.value})
            previous_path = self.navigator.current_path
            _ = self.navigator.handle(command)
            if command is Command.REFRESH or self.navigator.current_path != previous_path:
                self._offset = 0

    def run(self) -> None:
        """Draw and handle keys until the navigator is terminated."""
        with self.screen.raw_mode():
            while not self.navigator.terminated:
                self.draw()
                key = self.screen.read_key(self.poll_interval)
                if key:
                    self.step(key)
