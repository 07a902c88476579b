"""
Shared fixtures for scanning core tests.
Creates isolated temporary directories with controlled test files.
"""
import os
import threading
import time
import pytest
import tempfile
from pathlib import Path
from typing import Dict

from dedupscan.core.hasher import HasherImpl
from dedupscan.core.models import HashOutcome


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for duplicate scenarios:
    - 3 identical 10KB files (one in a subdirectory)
    - 2 identical 2KB files
    - 2 files of equal size with different content
    - 1 empty file (never hashed, reported as zero-length)
    - 1 large-ish file (64KB) used for size ceiling tests
    """
    files = {}

    content_a = b"A" * 10 * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["dup1_c"] = subdir / "dup_in_subdir.txt"
    files["dup1_c"].write_bytes(content_a)

    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "dup2_a.jpg"
    files["dup2_b"] = subdir / "dup2_b.jpg"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Same size, different content
    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 1500)

    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    files["big"] = temp_dir / "big.bin"
    files["big"].write_bytes(os.urandom(64 * 1024))

    return files


class TrackingHasher:
    """
    Wraps HasherImpl and records how many digests run at the same time.
    A short sleep widens the window in which tasks overlap.
    """

    def __init__(self, delay: float = 0.02):
        self._inner = HasherImpl()
        self._lock = threading.Lock()
        self.delay = delay
        self.active = 0
        self.peak = 0
        self.calls = 0

    def compute_digest(self, path: str) -> HashOutcome:
        with self._lock:
            self.active += 1
            self.calls += 1
            self.peak = max(self.peak, self.active)
        try:
            time.sleep(self.delay)
            return self._inner.compute_digest(path)
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def tracking_hasher():
    return TrackingHasher()
