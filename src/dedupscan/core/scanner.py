"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Single-threaded tree walker feeding the bounded hashing scheduler.
Features:
- Recursively scans directories with os.walk (symlinks are never followed nor hashed)
- Applies name patterns and the size ceiling
- Routes empty and oversize files to their own lists instead of hashing them
- Hands eligible files to BoundedHashScheduler and waits for all hashes at the end
"""

import os
import stat
import time
import logging
from typing import List, Optional, Callable, Pattern

from dedupscan.core.errors import ScanRootError
from dedupscan.core.filter import classify, compile_patterns, name_matches
from dedupscan.core.hasher import HasherImpl
from dedupscan.core.index import DuplicateIndex
from dedupscan.core.interfaces import FileScanner, Hasher
from dedupscan.core.models import Eligibility, ScanResult, ScanStats, DEFAULT_MAX_QUEUE_LENGTH, DEFAULT_DETAIL
from dedupscan.core.scheduler import BoundedHashScheduler
from dedupscan.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class FileScannerImpl(FileScanner):
    """
    Walks a directory tree and builds a ScanResult.

    Attributes:
        root_dir: Root directory to scan
        max_queue_length: Maximum number of concurrent hashing tasks (Q)
        max_size: Size ceiling in bytes, 0 for no ceiling
        patterns: Regular expressions; a file's base name must match one of them
        detail: Report progress every N files, 0 to disable
        total_count: Expected number of files (from a pre-count), 0 if unknown
    """

    def __init__(
        self,
        root_dir: str,
        max_queue_length: int = DEFAULT_MAX_QUEUE_LENGTH,
        max_size: int = 0,
        patterns: Optional[List[str]] = None,
        detail: int = DEFAULT_DETAIL,
        total_count: int = 0,
        hasher: Optional[Hasher] = None,
        index: Optional[DuplicateIndex] = None
    ):
        self.root_dir = root_dir
        self.max_queue_length = max_queue_length
        self.max_size = max_size
        self.patterns: List[Pattern[str]] = compile_patterns(patterns or [])
        self.detail = detail
        self.total_count = total_count
        self.hasher = hasher if hasher is not None else HasherImpl()
        self.index = index if index is not None else DuplicateIndex()
        self._stats = ScanStats()

    def validate_root(self) -> None:
        """Raises ScanRootError if the root is missing or not a directory."""
        if not os.path.exists(self.root_dir):
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise ScanRootError(error_msg)
        if not os.path.isdir(self.root_dir):
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise ScanRootError(error_msg)

    def scan(self,
             progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None) -> ScanResult:
        """
        Walks the tree, waits for every hash to finish and returns the result.
        Raises ScanRootError if the root is missing or not a directory.
        Each call starts from an empty index, so a scanner can be run again.
        """
        logger.debug("Starting scan operation")
        logger.debug(f"Root directory: {self.root_dir}")
        logger.debug(f"Filters: max_size={self.max_size}, patterns={[p.pattern for p in self.patterns]}")

        self.validate_root()

        self.index.clear()

        self._stats = ScanStats()
        start_time = time.time()

        scheduler = BoundedHashScheduler(self.hasher, self.index, self.max_queue_length)
        try:
            for root, dirs, files in os.walk(self.root_dir, onerror=self._on_walk_error):
                for filename in files:
                    self._process_entry(os.path.join(root, filename), scheduler, progress_callback)
        except Exception:
            logger.exception("Unexpected error during scanning")
            raise
        finally:
            # Files already handed out are hashed to completion even if the walk failed
            scheduler.join()

        if progress_callback and self.detail > 0:
            progress_callback('scanning', self._stats.files_visited, self.total_count or None)

        self._stats.files_submitted = scheduler.submitted
        self._stats.files_hashed = scheduler.hashed
        self._stats.hash_failures = scheduler.failed
        self._stats.peak_concurrency = scheduler.peak_active
        self._stats.total_time = time.time() - start_time

        logger.debug(f"Total scan time: {self._stats.total_time:.2f} seconds")
        logger.debug(f"Scan completed. Hashed {scheduler.hashed} of {scheduler.submitted} files.")

        return self.index.result(self._stats)

    def _on_walk_error(self, error: OSError) -> None:
        """Unreadable directories are logged and skipped."""
        self._stats.traversal_errors += 1
        logger.warning(f"Error accessing file: {error.filename}: {error.strerror or error}")

    def _process_entry(
            self,
            path: str,
            scheduler: BoundedHashScheduler,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> None:
        """
        Classifies one directory entry and routes it: zero-length list, oversize list,
        or the hashing scheduler.
        """
        try:
            st = os.lstat(path)
        except OSError as e:
            self._stats.traversal_errors += 1
            logger.warning(f"Error accessing file: {path}: {e}")
            return

        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping non-regular entry: {path}")
            return

        # Names are filtered before the zero-length and oversize routing below
        if not name_matches(path, self.patterns):
            return

        self._stats.files_visited += 1
        self._report_progress(path, progress_callback)

        verdict = classify(path, st.st_size, True, self.patterns, self.max_size)
        if verdict is Eligibility.ZERO_LENGTH:
            logger.debug(f"Zero-byte file: {path}")
            self.index.mark_zero_length(path)
        elif verdict is Eligibility.OVERSIZE:
            logger.info(
                f"Skipping VERY large {ConvertUtils.bytes_to_megabytes(st.st_size):.2f}MB file: {path}"
            )
            self.index.mark_oversize(path)
        elif verdict is Eligibility.ELIGIBLE:
            scheduler.submit(path, st.st_size, st.st_mtime)

    def _report_progress(
            self,
            path: str,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> None:
        count = self._stats.files_visited
        if self.detail <= 0 or count % self.detail != 0:
            return

        directory = os.path.dirname(path)
        if self.total_count > 0:
            percent = count / self.total_count * 100
            logger.info(f"Processed {count} of {self.total_count} files ({percent:.2f}%).\t{directory}")
        else:
            logger.info(f"Processed {count} files.\t{directory}")

        if progress_callback:
            progress_callback('scanning', count, self.total_count or None)
