"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Fatal, run-wide errors. Per-file problems are logged and skipped instead.
"""


class DedupScanError(RuntimeError):
    """Base class for errors that abort a run."""


class ScanRootError(DedupScanError):
    """Root directory is missing or is not a directory."""


class ExtractionSetupError(DedupScanError):
    """Destination directory for canonical copies could not be created."""
