"""Directory scanner ranking the immediate children of a directory by size."""

from __future__ import annotations

import contextvars
import logging
import os
import time
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from diskrank.types.models import Entry, Inventory
from diskrank.utils.logging import new_scan_id, reset_scan_id, set_scan_id

from .size_probe import SizeProbe

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 4096


class DirectoryScanner:
    """Scanner producing a size-ranked inventory of a directory's children.

    Provides concurrent size aggregation with:
    - One SizeProbe measurement per immediate child on a bounded thread pool
    - Batched submission so huge directories never queue unbounded work
    - Results collected by position, independent of completion order
    - Silent empty result for directories that cannot be listed
    """

    def __init__(
        self,
        probe: SizeProbe | None = None,
        *,
        max_workers: int | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        """Initialize the directory scanner.

        Args:
            probe: Size probe used for every child (defaults to apparent size)
            max_workers: Worker thread count (None for one per CPU)
            batch_size: Maximum number of measurements pending at once

        Raises:
            ValueError: If max_workers or batch_size is not positive
        """
        if max_workers is not None and max_workers <= 0:
            msg = f"max_workers must be positive, got: {max_workers}"
            raise ValueError(msg)
        if batch_size <= 0:
            msg = f"batch_size must be positive, got: {batch_size}"
            raise ValueError(msg)

        self.probe: SizeProbe = probe or SizeProbe()
        self.max_workers: int = max_workers or os.cpu_count() or 1
        self.batch_size: int = batch_size

    def scan(self, path: Path | str) -> Inventory:
        """Scan a directory and rank its immediate children by size.

        Args:
            path: Directory to scan

        Returns:
            Inventory sorted by size descending; empty when the directory is
            empty, missing, not a directory, or unreadable
        """
        token = set_scan_id(new_scan_id())
        try:
            return self._scan(Path(path))
        finally:
            reset_scan_id(token)

    def _scan(self, path: Path) -> Inventory:
        tic = time.perf_counter()

        children = self._list_children(path)
        if not children:
            logger.info("Nothing to measure", extra={"path": str(path)})
            return Inventory.empty()

        sizes = self._measure_all([child_path for child_path, _ in children])

        inventory = Inventory.from_entries(
            Entry(
                path=child_path,
                name=child_path.name,
                size=size,
                is_directory=is_directory,
            )
            for (child_path, is_directory), size in zip(children, sizes, strict=True)
        )

        logger.info(
            "Scan complete",
            extra={
                "path": str(path),
                "entries": len(inventory),
                "total_size": inventory.total_size,
                "elapsed_seconds": round(time.perf_counter() - tic, 3),
            },
        )
        return inventory

    def _list_children(self, path: Path) -> list[tuple[Path, bool]]:
        """List immediate children with their directory classification.

        Args:
            path: Directory to list

        Returns:
            (child path, is_directory) pairs in enumeration order; empty
            list when the directory cannot be listed
        """
        children: list[tuple[Path, bool]] = []
        try:
            with os.scandir(path) as entries:
                for entry in entries:
                    try:
                        is_directory = entry.is_dir(follow_symlinks=False)
                    except OSError:
                        is_directory = False
                    children.append((path / entry.name, is_directory))
        except OSError as exc:
            logger.info(
                "Cannot list directory, returning empty inventory",
                extra={"path": str(path), "error": str(exc)},
            )
            return []

        logger.debug("Listed children", extra={"path": str(path), "count": len(children)})
        return children

    def _measure_all(self, paths: Sequence[Path]) -> list[int]:
        """Measure every path concurrently, returning sizes aligned by index.

        Args:
            paths: Paths to measure

        Returns:
            List where ``sizes[i]`` is the size of ``paths[i]``
        """
        sizes: list[int] = [0] * len(paths)
        workers = min(self.max_workers, len(paths))

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="diskrank-probe") as executor:
            for start in range(0, len(paths), self.batch_size):
                batch = paths[start : start + self.batch_size]
                # Each task runs in its own copy of the context so the scan ID follows it
                futures: list[Future[int]] = [
                    executor.submit(contextvars.copy_context().run, self.probe.measure, child)
                    for child in batch
                ]
                for offset, future in enumerate(futures):
                    sizes[start + offset] = self._result_or_zero(future, batch[offset])

        return sizes

    @staticmethod
    def _result_or_zero(future: Future[int], path: Path) -> int:
        try:
            return future.result()
        except Exception as exc:
            logger.warning(
                "Unexpected error measuring path, counting as zero",
                extra={"path": str(path), "error": str(exc)},
            )
            return 0
