"""
Tests for ReportService — text report layout and JSON output.
"""
import json

import pytest

from dedupscan.core.index import DuplicateIndex
from dedupscan.core.models import DuplicateKey, ExtractionOutcome, FileRecord, ScanStats
from dedupscan.services.report_service import ReportService


def build_result():
    index = DuplicateIndex()
    index.record(FileRecord("/p/a.jpg", 2048, "aaaa", 1.0))
    index.record(FileRecord("/p/sub/a.jpg", 2048, "aaaa", 2.0))
    index.record(FileRecord("/p/big1", 9000, "bbbb", 1.0))
    index.record(FileRecord("/p/big2", 9000, "bbbb", 1.0))
    index.record(FileRecord("/p/lonely", 50, "cccc", 1.0))
    index.mark_zero_length("/p/empty")
    index.mark_oversize("/p/huge.iso")
    return index.result(ScanStats(files_visited=7, files_hashed=5, files_submitted=5))


class TestRenderText:

    def test_layout(self):
        lines = ReportService.render_text(build_result())

        assert lines == [
            "Duplicate files found for 9000:bbbb:",
            "  /p/big1",
            "  /p/big2",
            "Duplicate files found for 2048:aaaa:",
            "  /p/a.jpg",
            "  /p/sub/a.jpg",
            "",
            "Zero length files:",
            "  /p/empty",
            "",
            "Oversize files:",
            "  /p/huge.iso",
            "",
            "Done.",
        ]

    def test_single_member_groups_not_reported(self):
        lines = ReportService.render_text(build_result())
        assert not any("/p/lonely" in line for line in lines)

    def test_extraction_outcomes_are_shown(self):
        ok = ExtractionOutcome(
            key=DuplicateKey(2048, "aaaa"),
            canonical_path="/p/sub/a.jpg",
            copy_path="/out/a.jpg",
            manifest_path="/out/a.jpg-dup-list.txt",
        )
        failed = ExtractionOutcome(
            key=DuplicateKey(9000, "bbbb"),
            canonical_path="/p/big1",
            error="Error opening source file /p/big1",
        )

        lines = ReportService.render_text(build_result(), [ok, failed])

        assert "  -> kept /p/sub/a.jpg as /out/a.jpg" in lines
        assert "  -> extraction failed: Error opening source file /p/big1" in lines

    def test_empty_result(self):
        lines = ReportService.render_text(DuplicateIndex().result())
        assert lines == ["", "Zero length files:", "", "Oversize files:", "", "Done."]


class TestJson:

    def test_to_dict_keys(self):
        data = ReportService.to_dict(build_result(), max_size_bytes=1024)

        assert set(data) == {
            "groups", "duplicate_keys", "zero_length_files",
            "oversize_files", "max_size_bytes", "stats",
        }
        assert data["duplicate_keys"] == ["2048:aaaa", "9000:bbbb"]
        assert "50:cccc" in data["groups"]
        assert [f["path"] for f in data["groups"]["2048:aaaa"]] == ["/p/a.jpg", "/p/sub/a.jpg"]
        assert data["zero_length_files"] == ["/p/empty"]
        assert data["oversize_files"] == ["/p/huge.iso"]
        assert data["max_size_bytes"] == 1024
        assert data["stats"]["files_visited"] == 7

    def test_write_json_round_trips_through_json_module(self, tmp_path):
        out = tmp_path / "result.json"
        ReportService.write_json(build_result(), str(out), max_size_bytes=0)

        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["duplicate_keys"] == ["2048:aaaa", "9000:bbbb"]
        assert data["max_size_bytes"] == 0

    def test_write_json_into_missing_directory(self, tmp_path):
        with pytest.raises(RuntimeError, match="Error creating JSON output file"):
            ReportService.write_json(build_result(), str(tmp_path / "missing" / "r.json"))
