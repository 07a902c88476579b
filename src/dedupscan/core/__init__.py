"""
Core scanning engine — walker, filter, hasher, scheduler, index and extractor.

This package contains the performance-critical foundation of dedupscan:
- FileScannerImpl: single-threaded tree walk routing files to the lists or to hashing
- BoundedHashScheduler: at most Q concurrent hashing tasks, walker blocks on the Q+1th
- HasherImpl + XXHashAlgorithmImpl: streaming full-content digests with pooled buffers
- DuplicateIndex: lock-protected (size, digest) -> group mapping
- CanonicalExtractor: one copy per duplicate group plus a manifest of the others
- Models: FileRecord, DuplicateGroup, ScanResult and configuration objects

All components are pure Python with no UI dependencies.
"""

from .models import (
    FileRecord, DuplicateKey, DuplicateGroup, ScanResult, ScanStats, ScanParams,
    HashOutcome, Eligibility, ExtractionOutcome, HashAlgorithmName)
from .errors import DedupScanError, ScanRootError, ExtractionSetupError
from .filter import classify, eligible, compile_patterns
from .hasher import HasherImpl, XXHashAlgorithmImpl, MD5AlgorithmImpl, SHA256AlgorithmImpl
from .index import DuplicateIndex
from .scheduler import BoundedHashScheduler
from .scanner import FileScannerImpl
from .counter import FileCounter
from .extractor import CanonicalExtractor, select_canonical, unique_path

__all__ = [
    "FileRecord",
    "DuplicateKey",
    "DuplicateGroup",
    "ScanResult",
    "ScanStats",
    "ScanParams",
    "HashOutcome",
    "Eligibility",
    "ExtractionOutcome",
    "HashAlgorithmName",
    "DedupScanError",
    "ScanRootError",
    "ExtractionSetupError",
    "classify",
    "eligible",
    "compile_patterns",
    "HasherImpl",
    "XXHashAlgorithmImpl",
    "MD5AlgorithmImpl",
    "SHA256AlgorithmImpl",
    "DuplicateIndex",
    "BoundedHashScheduler",
    "FileScannerImpl",
    "FileCounter",
    "CanonicalExtractor",
    "select_canonical",
    "unique_path",
]
