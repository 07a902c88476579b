"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements full-content file hashing with pluggable hash algorithms.

HasherImpl streams a file through a fixed-size buffer into the accumulator of the
configured algorithm. The result is an explicit HashOutcome: either a hex digest of
the complete content or a failure, never a partially computed value.

Buffers are reused through a small pool so that Q concurrent hashing tasks hold at
most Q buffers, no matter how many files are scanned.
"""

import hashlib
import logging
import queue
from typing import Dict, Type

import xxhash

from dedupscan.core.interfaces import Hasher, HashAlgorithm, DigestAccumulator
from dedupscan.core.models import HashOutcome, HashAlgorithmName

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 4 * 1024 * 1024  # 4MB per read


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    @staticmethod
    def new() -> DigestAccumulator:
        return xxhash.xxh64()


class MD5AlgorithmImpl(HashAlgorithm):
    @staticmethod
    def new() -> DigestAccumulator:
        return hashlib.md5()


class SHA256AlgorithmImpl(HashAlgorithm):
    @staticmethod
    def new() -> DigestAccumulator:
        return hashlib.sha256()


ALGORITHMS: Dict[HashAlgorithmName, Type[HashAlgorithm]] = {
    HashAlgorithmName.XXHASH: XXHashAlgorithmImpl,
    HashAlgorithmName.MD5: MD5AlgorithmImpl,
    HashAlgorithmName.SHA256: SHA256AlgorithmImpl,
}


def algorithm_for(name: HashAlgorithmName) -> HashAlgorithm:
    """Returns the algorithm implementation registered for the given name."""
    try:
        return ALGORITHMS[name]()
    except KeyError:
        raise ValueError(f"Unsupported hash algorithm: {name!r}")


class BufferPool:
    """
    Pool of reusable read buffers. Buffers are created lazily, so the pool never
    holds more buffers than the peak number of concurrent borrowers.
    """

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size <= 0:
            raise ValueError("Buffer size must be positive")
        self.buffer_size = buffer_size
        self._free: "queue.SimpleQueue[bytearray]" = queue.SimpleQueue()

    def acquire(self) -> bytearray:
        try:
            return self._free.get_nowait()
        except queue.Empty:
            return bytearray(self.buffer_size)

    def release(self, buffer: bytearray) -> None:
        self._free.put(buffer)


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Safe to share between threads: the only shared state is the buffer pool.
    """

    def __init__(self, algorithm: HashAlgorithm = None, buffer_pool: BufferPool = None):
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.buffer_pool = buffer_pool or BufferPool()

    def compute_digest(self, path: str) -> HashOutcome:
        """
        Computes the hex digest of the whole file.
        Any open/read error abandons the attempt and yields a failed outcome.
        """
        buffer = self.buffer_pool.acquire()
        try:
            accumulator = self.algorithm.new()
            with open(path, 'rb') as f, memoryview(buffer) as view:
                while True:
                    n = f.readinto(view)
                    if not n:
                        break
                    accumulator.update(view[:n])
            return HashOutcome.success(path, accumulator.hexdigest())
        except OSError as e:
            logger.warning(f"Error hashing {path}: {e}")
            return HashOutcome.failure(path, str(e))
        finally:
            self.buffer_pool.release(buffer)
