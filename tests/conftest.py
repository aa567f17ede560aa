"""Shared pytest configuration for logmon tests."""

from __future__ import annotations

import time
from typing import Callable

import pytest


def wait_for(predicate: Callable[[], bool], timeout: float = 3.0, interval: float = 0.01) -> bool:
    """Poll predicate until it returns True or timeout elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def append(path, data) -> None:
    """Append text or bytes to path and flush."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    with open(path, "ab") as f:
        f.write(data)
        f.flush()


@pytest.fixture
def log_paths(tmp_path):
    """Fresh (input, output) paths; the input exists and is empty."""
    input_path = tmp_path / "input.log"
    output_path = tmp_path / "output.log"
    input_path.write_bytes(b"")
    return str(input_path), str(output_path)


@pytest.fixture
def wait():
    """The wait_for helper, for tests that need to wait on a monitor thread."""
    return wait_for


@pytest.fixture
def append_to():
    """The append helper, for tests that grow an input file."""
    return append
