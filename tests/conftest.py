"""Pytest configuration and fixtures."""

import io
import logging
import sys
import tarfile
from pathlib import Path

import pytest

# Add repo root to path (for running without an install)
sys.path.insert(0, str(Path(__file__).parent.parent))

from debpack.compression import decompress
from debpack.verify import read_members

DEMO_CONTROL = (
    "Package: demo\n"
    "Version: 1.0\n"
    "Architecture: amd64\n"
    "Maintainer: a@b\n"
    "Description: x\n"
)


@pytest.fixture(autouse=True)
def _reset_debpack_logging():
    """setup_logging() installs handlers on the debpack logger; drop them after each test."""
    logger = logging.getLogger("debpack")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def control_dir(tmp_path: Path) -> Path:
    d = tmp_path / "control"
    d.mkdir()
    (d / "control").write_text(DEMO_CONTROL)
    return d


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    d = tmp_path / "data"
    (d / "usr" / "bin").mkdir(parents=True)
    (d / "usr" / "bin" / "tool").write_bytes(b"\x7fELF" + b"A" * 1996)
    return d


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    d = tmp_path / "out"
    d.mkdir()
    return d


def deb_members(path: Path) -> dict:
    with open(path, "rb") as f:
        return dict(read_members(f))


def tar_contents(data: bytes, suffix: str = ".gz") -> dict:
    """Map of member name -> (TarInfo, bytes or None)."""
    result = {}
    with tarfile.open(fileobj=io.BytesIO(decompress(data, suffix)), mode="r:") as tar:
        for info in tar.getmembers():
            f = tar.extractfile(info) if info.isfile() else None
            result[info.name] = (info, f.read() if f else None)
    return result
