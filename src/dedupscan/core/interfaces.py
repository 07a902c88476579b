"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the scanning pipeline.
These protocols enforce structural typing using Python's `typing.Protocol` to ensure
consistency across modules while maintaining flexibility and modularity.

Key Components:
---------------
- HashAlgorithm: Factory for streaming digest accumulators (xxHash64, MD5, SHA-256).
- Hasher: Interface for computing the content digest of a file.
- ResultSink: Receiver of hashing results (the duplicate index).
- FileScanner: Interface for scanning a directory tree into a ScanResult.
"""

from typing import Protocol, Optional, Callable
from dedupscan.core.models import FileRecord, HashOutcome, ScanResult


# ===== Interfaces =====

class DigestAccumulator(Protocol):
    """Streaming state object, as returned by hashlib.new() or xxhash.xxh64()."""
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like SHA-256, MD5, or xxHash
    without affecting the rest of the pipeline.
    """

    @staticmethod
    def new() -> DigestAccumulator:
        """Returns a fresh streaming accumulator."""
        ...


class Hasher(Protocol):
    """Interface for hashing the full content of a file."""
    def compute_digest(self, path: str) -> HashOutcome: ...


class ResultSink(Protocol):
    """
    Receiver for scan results. All methods must be safe to call from many threads.
    """
    def record(self, record: FileRecord) -> None: ...
    def mark_zero_length(self, path: str) -> None: ...
    def mark_oversize(self, path: str) -> None: ...


class FileScanner(Protocol):
    """
    Interface for scanning file systems and collecting duplicate groups.

    Methods:
        scan: Walks the configured root and returns the finished result.
    """
    def scan(
        self,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> ScanResult:
        """
        Scan files from the configured directory.

        Args:
            progress_callback: Optional callback for reporting progress (stage, current, total).

        Returns:
            ScanResult containing every group and the zero-length/oversize lists.
        """
        ...
