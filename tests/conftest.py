"""Pytest configuration and shared fixtures."""

import shutil
import tempfile

import pytest


@pytest.fixture(scope="module")
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def socket_dir():
    """Short-lived directory for server sockets.

    Unix socket paths are limited to ~100 bytes, so this avoids the deep
    pytest tmp_path tree.
    """
    path = tempfile.mkdtemp(prefix="ec-")
    yield path
    shutil.rmtree(path, ignore_errors=True)
