"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/index.py
Thread-safe duplicate index: the single owner of mutable scan results.

Every mutation runs under one lock. Hashing threads hold it only for the
dict/list update, never while reading files.
"""

import logging
import threading
from typing import Dict, List, Set, Optional

from dedupscan.core.interfaces import ResultSink
from dedupscan.core.models import (
    DuplicateGroup, DuplicateKey, FileRecord, ScanResult, ScanStats
)

logger = logging.getLogger(__name__)


class DuplicateIndex(ResultSink):
    """
    Maps DuplicateKey -> DuplicateGroup and tracks which keys are duplicates.
    A key is flagged the moment its group reaches two members and is never unflagged.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._groups: Dict[DuplicateKey, DuplicateGroup] = {}
        self._duplicate_keys: Set[DuplicateKey] = set()
        self._zero_length: List[str] = []
        self._oversize: List[str] = []

    def record(self, record: FileRecord) -> None:
        key = record.key
        with self._lock:
            group = self._groups.get(key)
            if group is None:
                self._groups[key] = DuplicateGroup(key=key, files=[record])
                return
            group.add_file(record)
            first_duplicate = len(group.files) == 2
            if first_duplicate:
                self._duplicate_keys.add(key)
        if first_duplicate:
            logger.debug(f"Duplicate found for {key}: {record.path}")

    def mark_zero_length(self, path: str) -> None:
        with self._lock:
            self._zero_length.append(path)

    def mark_oversize(self, path: str) -> None:
        with self._lock:
            self._oversize.append(path)

    def clear(self) -> None:
        """Forgets every group, flag and list."""
        with self._lock:
            self._groups.clear()
            self._duplicate_keys.clear()
            self._zero_length.clear()
            self._oversize.clear()

    def is_duplicate(self, key: DuplicateKey) -> bool:
        with self._lock:
            return key in self._duplicate_keys

    def group_size(self, key: DuplicateKey) -> int:
        with self._lock:
            group = self._groups.get(key)
            return len(group.files) if group else 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._groups)

    def result(self, stats: Optional[ScanStats] = None) -> ScanResult:
        """
        Snapshot of the index. Groups and lists are copied under the lock,
        so the caller never holds a reference to the live structures.
        """
        with self._lock:
            groups = {
                key: DuplicateGroup(key=key, files=list(group.files))
                for key, group in self._groups.items()
            }
            return ScanResult(
                groups=groups,
                duplicate_keys=set(self._duplicate_keys),
                zero_length_paths=list(self._zero_length),
                oversize_paths=list(self._oversize),
                stats=stats or ScanStats(),
            )
