"""Shared fixtures for dups tests."""

import logging
import pathlib

import pytest


@pytest.fixture
def tmp_root(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create an empty directory to scan."""
    root = tmp_path / "root"
    root.mkdir()
    return root


@pytest.fixture
def make_file(tmp_root: pathlib.Path):
    """Return a helper writing *content* to a path relative to tmp_root."""

    def _make(name: str, content: bytes) -> pathlib.Path:
        p = tmp_root / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(content)
        return p

    return _make


@pytest.fixture(autouse=True)
def reset_dups_logger():
    """Drop handlers configure_logging() attached during a test."""
    yield
    logger = logging.getLogger("dups")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
