"""Terminal control for the interactive browser.

Owns the raw-mode and alternate-screen lifecycle as a scoped resource:
``raw_mode()`` enters both before the browser loop starts and restores the
saved terminal state on every exit path.
"""

from __future__ import annotations

import contextlib
import os
import select
import shutil
import termios
import tty
from collections.abc import Iterator

from diskrank.ui import TerminalError

# Enter alternate screen and hide cursor / show cursor and leave alternate screen
_ENTER_SEQUENCE = b"\x1b[?1049h\x1b[?25l"
_LEAVE_SEQUENCE = b"\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Raw-mode terminal used as the browser screen."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Save the current terminal attributes of ``stdin_fd``.

        Raises:
            TerminalError: If ``stdin_fd`` is not a terminal
        """
        if not os.isatty(stdin_fd):
            raise TerminalError("standard input is not a terminal")
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error as exc:
            raise TerminalError(f"cannot read terminal attributes: {exc}") from exc

    def enable_tui_mode(self) -> None:
        """Switch to raw input and the alternate screen."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, _ENTER_SEQUENCE)

    def disable_tui_mode(self) -> None:
        """Leave the alternate screen and restore the saved attributes."""
        os.write(self.stdout_fd, _LEAVE_SEQUENCE)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Hold the terminal in TUI mode for the duration of the block."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

    def size(self) -> tuple[int, int]:
        """Return (columns, rows) of the terminal."""
        columns, rows = shutil.get_terminal_size()
        return columns, rows

    def write(self, text: str) -> None:
        """Write ``text`` as UTF-8, replacing anything that cannot be encoded."""
        os.write(self.stdout_fd, text.encode("utf-8", "replace"))

    def read_key(self, timeout: float | None = None) -> bytes:
        """Read whatever input is pending, up to 32 bytes.

        Several key presses may arrive in one read; callers split them.

        Returns empty bytes when ``timeout`` expires without input.
        """
        ready, _, _ = select.select([self.stdin_fd], [], [], timeout)
        if not ready:
            return b""
        return os.read(self.stdin_fd, 32)
