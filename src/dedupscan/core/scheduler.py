"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scheduler.py
Bounded hashing scheduler.

The producer (the tree walker) calls submit() for every eligible file. submit()
takes one of Q permits before handing the file to the worker pool, so it blocks
only when Q hashes are already running. Each task releases its permit when it
finishes, whatever the outcome. join() waits for every outstanding task.

There is no cancellation: once submitted, a hash runs to completion.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from dedupscan.core.interfaces import Hasher, ResultSink
from dedupscan.core.models import FileRecord
from dedupscan.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)

LARGE_FILE_THRESHOLD = 4 * 1024 * 1024 * 1024  # 4GB


class BoundedHashScheduler:
    """
    Runs at most `max_concurrency` hashing tasks at any instant.
    Successful digests are published to the sink as FileRecords; failures are
    logged and counted, never published.
    """

    def __init__(self, hasher: Hasher, sink: ResultSink, max_concurrency: int):
        if max_concurrency < 1:
            raise ValueError("Concurrency limit must be a positive integer")
        self.hasher = hasher
        self.sink = sink
        self.max_concurrency = max_concurrency
        self._permits = threading.BoundedSemaphore(max_concurrency)
        self._executor = ThreadPoolExecutor(
            max_workers=max_concurrency,
            thread_name_prefix="dedupscan-hash"
        )
        self._lock = threading.Lock()
        self._closed = False
        self.active = 0
        self.peak_active = 0
        self.submitted = 0
        self.hashed = 0
        self.failed = 0

    def submit(self, path: str, size: int, modified_at: float) -> None:
        """
        Starts hashing one file. Blocks only while all permits are held.
        """
        if self._closed:
            raise RuntimeError("Scheduler already joined")

        if size > LARGE_FILE_THRESHOLD:
            logger.info(f"Processing large ({ConvertUtils.bytes_to_megabytes(size):.2f} MB) file: {path}")

        self._permits.acquire()
        try:
            self._executor.submit(self._run, path, size, modified_at)
        except BaseException:
            self._permits.release()
            raise
        with self._lock:
            self.submitted += 1

    def _run(self, path: str, size: int, modified_at: float) -> None:
        with self._lock:
            self.active += 1
            if self.active > self.peak_active:
                self.peak_active = self.active

        start_time = time.time()
        try:
            outcome = self.hasher.compute_digest(path)
            if outcome.ok:
                self.sink.record(FileRecord(
                    path=path,
                    size=size,
                    digest=outcome.digest,
                    modified_at=modified_at
                ))
                with self._lock:
                    self.hashed += 1
            else:
                with self._lock:
                    self.failed += 1
        except Exception:
            # Unexpected hasher errors count as failures
            logger.exception(f"Unexpected error while hashing {path}")
            with self._lock:
                self.failed += 1
        finally:
            with self._lock:
                self.active -= 1
            self._permits.release()

        if size > LARGE_FILE_THRESHOLD:
            elapsed = time.time() - start_time
            logger.info(f"File processed in {ConvertUtils.seconds_to_human(elapsed)}: {path}")

    def join(self) -> None:
        """Waits until every submitted task has completed."""
        self._closed = True
        self._executor.shutdown(wait=True)
        logger.debug(
            f"Hashing finished: {self.hashed} hashed, {self.failed} failed, "
            f"peak concurrency {self.peak_active}/{self.max_concurrency}"
        )

    def __enter__(self) -> "BoundedHashScheduler":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.join()
