"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/counter.py
Plain, single-threaded pre-count of the files a scan will visit.
Only used to turn progress messages into percentages.
"""

import os
import stat
import logging
from typing import List, Optional

from dedupscan.core.filter import compile_patterns, name_matches

logger = logging.getLogger(__name__)


class FileCounter:
    """Counts regular files under a root, and how many of them match the name patterns."""

    def __init__(self, patterns: Optional[List[str]] = None, detail: int = 0):
        self.patterns = compile_patterns(patterns or [])
        self.detail = detail
        self.total_files = 0
        self.matching_files = 0

    def count(self, root_dir: str) -> int:
        """
        Returns the number of regular files matching the patterns.
        Errors are logged and never abort the count.
        """
        self.total_files = 0
        self.matching_files = 0

        for root, _dirs, files in os.walk(root_dir, onerror=self._on_walk_error):
            for filename in files:
                path = os.path.join(root, filename)
                try:
                    if not stat.S_ISREG(os.lstat(path).st_mode):
                        continue
                except OSError as e:
                    logger.warning(f"Error accessing file: {path}: {e}")
                    continue

                self.total_files += 1
                if name_matches(path, self.patterns):
                    self.matching_files += 1

                if self.detail > 0 and self.total_files % self.detail == 0:
                    logger.info(
                        f"Counted {self.total_files} files of which {self.matching_files} matched a regex. "
                        f"Currently in dir {root}."
                    )

        logger.debug(f"Pre-count finished: {self.matching_files}/{self.total_files} files")
        return self.matching_files

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.warning(f"Error accessing file: {error.filename}: {error.strerror or error}")
