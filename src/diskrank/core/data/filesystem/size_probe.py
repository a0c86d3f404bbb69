"""Aggregate size measurement for a single filesystem path."""

from __future__ import annotations

import logging
import os
import stat
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class SizeMode(str, Enum):
    """Enumeration for size calculation modes."""

    APPARENT = "apparent"  # Apparent size (file content size)
    DISK_USAGE = "disk_usage"  # Actual disk usage (considering filesystem blocks)


class SizeProbe:
    """Compute the total byte size of a file or directory tree.

    Provides best-effort size measurement with:
    - Direct size for regular files
    - Iterative depth-first walk for directories (no call-stack recursion)
    - Symbolic links never followed; links and special files count as 0
    - Every unreadable entry absorbed as a zero contribution

    ``measure`` never raises for filesystem conditions. A probe holds no
    mutable state, so one instance may be shared by many worker threads.
    """

    def __init__(self, mode: SizeMode = SizeMode.APPARENT) -> None:
        """Initialize the size probe.

        Args:
            mode: Size calculation mode (apparent size vs disk usage)
        """
        self.mode: SizeMode = mode

    def measure(self, path: Path | str) -> int:
        """Measure the aggregate size of a path.

        Args:
            path: File or directory to measure

        Returns:
            Size in bytes of the file, or sum of all regular files beneath
            the directory; 0 when the path is unreadable, a symlink, or a
            special file
        """
        try:
            st = os.lstat(path)
        except OSError as exc:
            logger.debug(
                "Cannot stat path, counting as zero",
                extra={"path": str(path), "error": str(exc)},
            )
            return 0

        if stat.S_ISREG(st.st_mode):
            return self._size_from_stat(st)

        if stat.S_ISDIR(st.st_mode):
            return self._measure_directory(os.fspath(path))

        return 0

    def _size_from_stat(self, st: os.stat_result) -> int:
        """Calculate file size from a stat result according to the mode.

        Args:
            st: os.stat_result object

        Returns:
            File size in bytes
        """
        if self.mode == SizeMode.APPARENT:
            return st.st_size
        # st_blocks is in 512-byte blocks on POSIX systems
        return getattr(st, "st_blocks", 0) * 512

    def _measure_directory(self, root: str) -> int:
        """Sum the sizes of all regular files beneath a directory.

        Uses an explicit work list so deeply nested trees do not grow the
        call stack.

        Args:
            root: Directory path

        Returns:
            Total size in bytes of regular files in the tree
        """
        total_size = 0
        skipped = 0
        pending: list[str] = [root]

        while pending:
            current = pending.pop()
            try:
                with os.scandir(current) as entries:
                    for entry in entries:
                        try:
                            if entry.is_dir(follow_symlinks=False):
                                pending.append(entry.path)
                            elif entry.is_file(follow_symlinks=False):
                                total_size += self._size_from_stat(entry.stat(follow_symlinks=False))
                        except OSError as exc:
                            # Vanished mid-walk or permission denied on the entry
                            skipped += 1
                            logger.debug(
                                "Cannot read entry, counting as zero",
                                extra={"path": entry.path, "error": str(exc)},
                            )
            except OSError as exc:
                skipped += 1
                logger.debug(
                    "Cannot list directory, counting as zero",
                    extra={"path": current, "error": str(exc)},
                )

        if skipped:
            logger.debug(
                "Directory measured with unreadable entries",
                extra={"path": root, "size": total_size, "skipped": skipped},
            )

        return total_size
