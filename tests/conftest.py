"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

FileFactory = Callable[[Path, int], Path]


def _write_file(path: Path, size: int) -> Path:
    """Create a file of exactly ``size`` bytes (sparse where supported)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        _ = f.truncate(size)
    return path


@pytest.fixture
def make_file() -> FileFactory:
    """Factory creating files of an exact byte length."""
    return _write_file


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Directory with a large file, a small file and a subdirectory.

    Layout::

        data/
          big.log        5,000,000 bytes
          small.txt      120 bytes
          sub/
            inner.bin    3,000,000 bytes
    """
    root = tmp_path / "data"
    root.mkdir()
    _ = _write_file(root / "big.log", 5_000_000)
    _ = _write_file(root / "small.txt", 120)
    _ = _write_file(root / "sub" / "inner.bin", 3_000_000)
    return root


@pytest.fixture
def restore_root_logger() -> Iterator[logging.Logger]:
    """Restore root logger handlers and level after code that reconfigures logging."""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(saved_level)


@pytest.fixture
def undecodable_tree(tmp_path: Path) -> Path:
    """Directory holding one file whose name is not valid UTF-8 (``bad\\xffname``)."""
    root = tmp_path / "mixed"
    root.mkdir()
    try:
        fd = os.open(os.path.join(os.fsencode(root), b"bad\xffname"), os.O_WRONLY | os.O_CREAT, 0o644)
    except OSError:
        pytest.skip("filesystem rejects names that are not valid UTF-8")
    try:
        _ = os.write(fd, b"x" * 2048)
    finally:
        os.close(fd)
    return root
