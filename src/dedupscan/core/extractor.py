"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/extractor.py
Canonical extraction: one copy per duplicate group plus a manifest of the other members.

Runs sequentially over a finished ScanResult. Names already taken at the destination
get a numeric suffix before the extension (photo.jpg -> photo_1.jpg -> photo_2.jpg).
"""

import os
import logging
from typing import List

from dedupscan.core.errors import ExtractionSetupError
from dedupscan.core.models import DuplicateGroup, ExtractionOutcome, FileRecord, ScanResult
from dedupscan.services.file_service import FileService

logger = logging.getLogger(__name__)

MANIFEST_SUFFIX = "-dup-list.txt"


def select_canonical(group: DuplicateGroup) -> FileRecord:
    """
    Member with the latest modification time.
    On a tie the first member in group order wins.
    """
    if not group.files:
        raise ValueError("Cannot select a canonical file from an empty group")
    return max(group.files, key=lambda f: f.modified_at)


def unique_path(path: str) -> str:
    """
    Returns path if nothing exists there, otherwise the first free
    `<stem>_<n><ext>` for n = 1, 2, ...
    """
    if not os.path.lexists(path):
        return path

    stem, ext = os.path.splitext(path)
    counter = 1
    while True:
        candidate = f"{stem}_{counter}{ext}"
        if not os.path.lexists(candidate):
            return candidate
        counter += 1


class CanonicalExtractor:
    """
    Copies the canonical member of each duplicate group into `destination`
    and writes `<copy name>-dup-list.txt` next to it.
    """

    def __init__(self, destination: str):
        self.destination = destination

    @staticmethod
    def prepare_destination(destination: str) -> None:
        """
        Creates the destination directory. Failure is fatal and must be
        reported before any scanning starts.
        """
        try:
            FileService.ensure_directory(destination)
        except RuntimeError as e:
            raise ExtractionSetupError(f"Error creating unique files path: {e}") from e

    def extract(self, result: ScanResult) -> List[ExtractionOutcome]:
        """
        Extracts every duplicate group. A failing group is logged and skipped;
        the remaining groups are still processed.
        """
        outcomes = []
        for group in result.duplicate_groups():
            outcomes.append(self.extract_group(group))

        failed = sum(1 for o in outcomes if not o.ok)
        logger.debug(f"Extraction finished: {len(outcomes) - failed} groups extracted, {failed} failed")
        return outcomes

    def extract_group(self, group: DuplicateGroup) -> ExtractionOutcome:
        canonical = select_canonical(group)
        outcome = ExtractionOutcome(key=group.key, canonical_path=canonical.path)

        base_path = os.path.join(self.destination, canonical.name)
        copy_path = unique_path(base_path)
        if copy_path != base_path:
            logger.info(
                f"File {os.path.basename(base_path)} already exists, using {os.path.basename(copy_path)} instead"
            )

        try:
            FileService.copy_file(canonical.path, copy_path)
        except RuntimeError as e:
            logger.error(f"{e}")
            outcome.error = str(e)
            return outcome
        outcome.copy_path = copy_path

        base_manifest = copy_path + MANIFEST_SUFFIX
        manifest_path = unique_path(base_manifest)
        if manifest_path != base_manifest:
            logger.info(f"Duplicate list file already exists, created {manifest_path} instead")

        siblings = [f.path for f in group.files if f is not canonical]
        try:
            FileService.write_manifest(siblings, manifest_path)
        except RuntimeError as e:
            logger.error(f"{e}")
            outcome.error = str(e)
            return outcome
        outcome.manifest_path = manifest_path

        return outcome
