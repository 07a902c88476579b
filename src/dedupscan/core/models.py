"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for scanning, hashing and duplicate aggregation.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Set, NamedTuple
from enum import Enum
import os


# =============================
# Enums
# =============================

class Eligibility(Enum):
    """
    Outcome of the eligibility check for a single directory entry.
    Only ELIGIBLE entries are hashed; ZERO_LENGTH and OVERSIZE are reported separately.
    """
    ELIGIBLE = "eligible"
    NOT_REGULAR = "not-regular"
    ZERO_LENGTH = "zero-length"
    OVERSIZE = "oversize"
    NAME_MISMATCH = "name-mismatch"

    def __repr__(self) -> str:
        return self.value


class HashAlgorithmName(Enum):
    XXHASH = "xxhash"
    MD5 = "md5"
    SHA256 = "sha256"

    @property
    def display_name(self) -> str:
        """Human-readable name for help text."""
        mapping = {
            HashAlgorithmName.XXHASH: "xxHash64",
            HashAlgorithmName.MD5: "MD5",
            HashAlgorithmName.SHA256: "SHA-256",
        }
        return mapping.get(self, self.value)


# ======================
#  Core Data Models
# ======================

class DuplicateKey(NamedTuple):
    """(size, digest) pair. Two records are duplicates iff their keys are equal."""
    size: int
    digest: str

    def __str__(self) -> str:
        return f"{self.size}:{self.digest}"


@dataclass(frozen=True)
class FileRecord:
    """
    A successfully hashed file.
    Immutable: created exactly once per eligible file whose digest was computed.
    """
    path: str
    size: int  # in bytes
    digest: str
    modified_at: float  # st_mtime

    @property
    def key(self) -> DuplicateKey:
        return DuplicateKey(self.size, self.digest)

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def to_dict(self) -> Dict[str, object]:
        return {
            "path": self.path,
            "size": self.size,
            "digest": self.digest,
            "modified_at": self.modified_at,
        }


@dataclass
class DuplicateGroup:
    """
    Records sharing one DuplicateKey, in the order their hashing tasks completed.
    """
    key: DuplicateKey
    files: List[FileRecord] = field(default_factory=list)

    @property
    def size(self) -> int:
        return self.key.size

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    def add_file(self, record: FileRecord) -> None:
        if record.key != self.key:
            raise ValueError("Cannot add file with a different size or digest to a group.")
        self.files.append(record)

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def paths(self) -> List[str]:
        return [f.path for f in self.files]

    def __repr__(self):
        return f"<DuplicateGroup key={self.key}, count={len(self.files)}>"


@dataclass
class HashOutcome:
    """
    Result of one digest attempt. A failed attempt never carries a digest,
    so a failure cannot be mistaken for (or grouped with) a valid value.
    """
    path: str
    digest: Optional[str] = None
    error: Optional[str] = None

    def __post_init__(self):
        if (self.digest is None) == (self.error is None):
            raise ValueError("HashOutcome needs exactly one of digest or error")

    @property
    def ok(self) -> bool:
        return self.digest is not None

    @classmethod
    def success(cls, path: str, digest: str) -> "HashOutcome":
        return cls(path=path, digest=digest)

    @classmethod
    def failure(cls, path: str, error: str) -> "HashOutcome":
        return cls(path=path, error=error)


@dataclass
class ScanStats:
    """
    Counters collected during a scan. Advisory only: nothing in the core
    makes decisions based on them.
    """
    files_visited: int = 0
    files_submitted: int = 0
    files_hashed: int = 0
    hash_failures: int = 0
    traversal_errors: int = 0
    peak_concurrency: int = 0
    total_time: float = 0.0

    def to_dict(self) -> Dict[str, object]:
        return {
            "files_visited": self.files_visited,
            "files_submitted": self.files_submitted,
            "files_hashed": self.files_hashed,
            "hash_failures": self.hash_failures,
            "traversal_errors": self.traversal_errors,
            "peak_concurrency": self.peak_concurrency,
            "total_time": round(self.total_time, 3),
        }

    def print_summary(self) -> str:
        lines = [
            "Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Files visited: {self.files_visited}",
            f"Files hashed: {self.files_hashed} / {self.files_submitted}",
            f"Hash failures: {self.hash_failures}",
            f"Traversal errors: {self.traversal_errors}",
            f"Peak concurrent hashes: {self.peak_concurrency}",
        ]
        return "\n".join(lines)


@dataclass
class ScanResult:
    """
    Finished scan: every group (including single-member ones), the set of keys
    flagged as duplicate, and the paths routed around hashing.
    """
    groups: Dict[DuplicateKey, DuplicateGroup] = field(default_factory=dict)
    duplicate_keys: Set[DuplicateKey] = field(default_factory=set)
    zero_length_paths: List[str] = field(default_factory=list)
    oversize_paths: List[str] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)

    def duplicate_groups(self) -> List[DuplicateGroup]:
        """Groups whose key is flagged duplicate, largest files first."""
        groups = [self.groups[key] for key in self.duplicate_keys]
        groups.sort(key=lambda g: (-g.size, g.key.digest))
        return groups

    def group_for(self, path: str) -> Optional[DuplicateGroup]:
        for group in self.groups.values():
            if path in group.paths():
                return group
        return None


@dataclass
class ExtractionOutcome:
    """What the canonical extractor did for one duplicate group."""
    key: DuplicateKey
    canonical_path: str
    copy_path: Optional[str] = None
    manifest_path: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


"""
DTO for scan parameters with built-in validation.
Interface-agnostic: used by the CLI and by library callers.
"""
from dedupscan.utils.convert_utils import ConvertUtils

DEFAULT_MAX_QUEUE_LENGTH = 5
DEFAULT_DETAIL = 77


@dataclass
class ScanParams:
    """Parameters for a scan operation with validation."""
    root_dir: str
    max_queue_length: int = DEFAULT_MAX_QUEUE_LENGTH
    max_size_bytes: int = 0  # 0 means unlimited
    patterns: List[str] = field(default_factory=list)
    unique_files_path: Optional[str] = None
    detail: int = DEFAULT_DETAIL
    precount: bool = False
    algorithm: HashAlgorithmName = HashAlgorithmName.XXHASH

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if self.max_queue_length < 1:
            raise ValueError("Maximum queue length must be a positive integer")

        if self.max_size_bytes < 0:
            raise ValueError("Maximum size cannot be negative")

        if self.detail < 0:
            raise ValueError("Progress interval cannot be negative")

        if isinstance(self.algorithm, str):
            self.algorithm = HashAlgorithmName(self.algorithm)

        # Empty strings would match every name, drop them
        self.patterns = [p for p in self.patterns if p]

        if self.unique_files_path == "":
            self.unique_files_path = None

    @property
    def extraction_enabled(self) -> bool:
        return self.unique_files_path is not None

    @staticmethod
    def from_human_readable(
            root_dir: str,
            max_size_str: str = "0",
            max_queue_length: int = DEFAULT_MAX_QUEUE_LENGTH,
            patterns: Optional[List[str]] = None,
            unique_files_path: Optional[str] = None,
            detail: int = DEFAULT_DETAIL,
            precount: bool = False,
            algorithm: HashAlgorithmName = HashAlgorithmName.XXHASH,
    ) -> 'ScanParams':
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing.
        """
        return ScanParams(
            root_dir=root_dir,
            max_queue_length=max_queue_length,
            max_size_bytes=ConvertUtils.human_to_bytes(max_size_str),
            patterns=list(patterns or []),
            unique_files_path=unique_files_path,
            detail=detail,
            precount=precount,
            algorithm=algorithm,
        )
