"""
dedupscan — concurrent duplicate file finder.

Core features:
- Size + full content digest comparison (xxHash64 by default, MD5 or SHA-256 on request)
- Bounded concurrency: at most Q files are hashed at once, the walker waits for a free slot
- Unreadable files are skipped without aborting the scan
- Optional extraction of one canonical copy per duplicate set, with a list of the others
- CLI interface with text and JSON reports
"""

from importlib.metadata import version as _version, PackageNotFoundError

try:
    __version__ = _version("dedupscan")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from dedupscan.commands import ScanCommand
from dedupscan.core import (
    ScanParams, ScanResult, FileRecord, DuplicateKey, DuplicateGroup, HashAlgorithmName
)
from dedupscan.services.report_service import ReportService
from dedupscan.utils.convert_utils import ConvertUtils

__all__ = [
    "ScanCommand",
    "ScanParams",
    "ScanResult",
    "FileRecord",
    "DuplicateKey",
    "DuplicateGroup",
    "HashAlgorithmName",
    "ReportService",
    "ConvertUtils",
    "__version__",
]
