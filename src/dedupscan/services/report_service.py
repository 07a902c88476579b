"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/report_service.py
Rendering of a finished ScanResult as plain text or JSON.
The core never serializes anything itself; the CLI calls into this service.
"""
import json
from typing import Dict, List, Optional

from dedupscan.core.models import ScanResult, ExtractionOutcome


class ReportService:

    @staticmethod
    def to_dict(result: ScanResult, max_size_bytes: int = 0) -> Dict[str, object]:
        """JSON-ready view of the result. Keys render as '<size>:<digest>'."""
        groups = {
            str(key): [record.to_dict() for record in group.files]
            for key, group in sorted(result.groups.items(), key=lambda item: (item[0].size, item[0].digest))
        }
        return {
            "groups": groups,
            "duplicate_keys": sorted(str(key) for key in result.duplicate_keys),
            "zero_length_files": list(result.zero_length_paths),
            "oversize_files": list(result.oversize_paths),
            "max_size_bytes": max_size_bytes,
            "stats": result.stats.to_dict(),
        }

    @staticmethod
    def write_json(result: ScanResult, output_path: str, max_size_bytes: int = 0) -> None:
        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(ReportService.to_dict(result, max_size_bytes), f, indent=2)
                f.write("\n")
        except OSError as e:
            raise RuntimeError(f"Error creating JSON output file {output_path}: {e}") from e

    @staticmethod
    def render_text(
            result: ScanResult,
            extractions: Optional[List[ExtractionOutcome]] = None
    ) -> List[str]:
        """Lines of the plain-text report, without the trailing run time."""
        lines = []
        copies = {o.key: o for o in (extractions or [])}

        for group in result.duplicate_groups():
            lines.append(f"Duplicate files found for {group.key}:")
            for record in group.files:
                lines.append(f"  {record.path}")
            outcome = copies.get(group.key)
            if outcome is not None and outcome.ok:
                lines.append(f"  -> kept {outcome.canonical_path} as {outcome.copy_path}")
            elif outcome is not None:
                lines.append(f"  -> extraction failed: {outcome.error}")

        lines.append("")
        lines.append("Zero length files:")
        for path in result.zero_length_paths:
            lines.append(f"  {path}")

        lines.append("")
        lines.append("Oversize files:")
        for path in result.oversize_paths:
            lines.append(f"  {path}")

        lines.append("")
        lines.append("Done.")
        return lines
