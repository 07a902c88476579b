"""
Unified command orchestrator for a scan run.
This is the SINGLE source of truth for the workflow; the CLI only parses arguments and prints.
"""
import logging
from typing import List, Optional, Callable, Tuple

from dedupscan.core.counter import FileCounter
from dedupscan.core.extractor import CanonicalExtractor
from dedupscan.core.hasher import HasherImpl, algorithm_for
from dedupscan.core.models import ScanParams, ScanResult, ExtractionOutcome
from dedupscan.core.scanner import FileScannerImpl

logger = logging.getLogger(__name__)


class ScanCommand:
    """
    Orchestrates the entire workflow:
    1. Validate name patterns and the root, then create the destination directory (fatal errors surface here)
    2. Optionally pre-count files for percentage progress
    3. Scan and hash with bounded concurrency
    4. Optionally extract one canonical copy per duplicate group

    Usage:
        params = ScanParams(root_dir="~/Pictures", max_queue_length=8, unique_files_path="/tmp/uniq")
        result, extractions = ScanCommand().execute(params, progress_callback=cli_progress_printer)
    """

    def __init__(self):
        self._result: Optional[ScanResult] = None

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[ScanResult, List[ExtractionOutcome]]:
        """
        Execute a scan with given parameters.

        Args:
            params: Validated scan parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None

        Returns:
            Tuple of (scan_result, extraction_outcomes); outcomes are empty when extraction is off

        Raises:
            ValueError: If a name pattern is not a valid regular expression
            ExtractionSetupError: If the destination directory cannot be created
            ScanRootError: If the root directory is missing or not a directory
        """
        # Step 1: everything that can fail fatally happens before the walk
        scanner = FileScannerImpl(
            root_dir=params.root_dir,
            max_queue_length=params.max_queue_length,
            max_size=params.max_size_bytes,
            patterns=params.patterns,
            detail=params.detail,
            hasher=HasherImpl(algorithm_for(params.algorithm))
        )
        scanner.validate_root()

        if params.extraction_enabled:
            CanonicalExtractor.prepare_destination(params.unique_files_path)

        # Step 2: optional pre-count
        if params.precount:
            counter = FileCounter(patterns=params.patterns, detail=params.detail)
            scanner.total_count = counter.count(params.root_dir)
            if progress_callback:
                progress_callback('counting', scanner.total_count, scanner.total_count)

        # Step 3: scan
        self._result = scanner.scan(progress_callback=progress_callback)

        # Step 4: extraction runs after the join barrier, one group at a time
        extractions: List[ExtractionOutcome] = []
        if params.extraction_enabled:
            extractor = CanonicalExtractor(params.unique_files_path)
            extractions = extractor.extract(self._result)

        return self._result, extractions

    def get_result(self) -> Optional[ScanResult]:
        """Get the result of the last execution."""
        return self._result
