"""
Tests for canonical extraction: selection by modification time, collision-safe
naming, manifest format and per-group failure isolation.
"""
from unittest import mock

import pytest

from dedupscan.core.errors import ExtractionSetupError
from dedupscan.core.extractor import CanonicalExtractor, select_canonical, unique_path
from dedupscan.core.index import DuplicateIndex
from dedupscan.core.models import DuplicateGroup, DuplicateKey, FileRecord
from dedupscan.services.file_service import FileService


def make_group(paths_and_mtimes, size=4, digest="d1"):
    key = DuplicateKey(size, digest)
    return DuplicateGroup(
        key=key,
        files=[FileRecord(path=p, size=size, digest=digest, modified_at=m) for p, m in paths_and_mtimes]
    )


def make_result(groups):
    index = DuplicateIndex()
    for group in groups:
        for record in group.files:
            index.record(record)
    return index.result()


class TestSelectCanonical:

    def test_latest_modification_time_wins(self):
        group = make_group([("/old", 100.0), ("/newest", 300.0), ("/mid", 200.0)])
        assert select_canonical(group).path == "/newest"

    def test_tie_keeps_first_in_group_order(self):
        group = make_group([("/first", 300.0), ("/second", 300.0), ("/old", 1.0)])
        assert select_canonical(group).path == "/first"

    def test_empty_group_rejected(self):
        with pytest.raises(ValueError):
            select_canonical(DuplicateGroup(key=DuplicateKey(1, "x")))


class TestUniquePath:

    def test_free_name_is_kept(self, tmp_path):
        assert unique_path(str(tmp_path / "photo.jpg")) == str(tmp_path / "photo.jpg")

    def test_suffix_inserted_before_extension(self, tmp_path):
        (tmp_path / "photo.jpg").write_bytes(b"x")
        assert unique_path(str(tmp_path / "photo.jpg")) == str(tmp_path / "photo_1.jpg")

    def test_counter_increments_until_free(self, tmp_path):
        for name in ("photo.jpg", "photo_1.jpg", "photo_2.jpg"):
            (tmp_path / name).write_bytes(b"x")
        assert unique_path(str(tmp_path / "photo.jpg")) == str(tmp_path / "photo_3.jpg")

    def test_name_without_extension(self, tmp_path):
        (tmp_path / "README").write_bytes(b"x")
        assert unique_path(str(tmp_path / "README")) == str(tmp_path / "README_1")

    def test_dotfile_suffix_goes_after_name(self, tmp_path):
        """A leading dot is part of the name, not an extension."""
        (tmp_path / ".bashrc").write_bytes(b"x")
        assert unique_path(str(tmp_path / ".bashrc")) == str(tmp_path / ".bashrc_1")


class TestExtractGroup:

    @pytest.fixture
    def duplicates(self, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        (src / "a").mkdir()
        (src / "b").mkdir()
        older = src / "a" / "photo.jpg"
        newer = src / "b" / "photo.jpg"
        older.write_bytes(b"same")
        newer.write_bytes(b"same")
        group = make_group([(str(older), 100.0), (str(newer), 200.0)])
        dest = tmp_path / "dest"
        dest.mkdir()
        return group, older, newer, dest

    def test_copies_canonical_and_writes_manifest(self, duplicates):
        group, older, newer, dest = duplicates

        outcome = CanonicalExtractor(str(dest)).extract_group(group)

        assert outcome.ok
        assert outcome.canonical_path == str(newer)
        assert outcome.copy_path == str(dest / "photo.jpg")
        assert (dest / "photo.jpg").read_bytes() == b"same"
        manifest = dest / "photo.jpg-dup-list.txt"
        assert outcome.manifest_path == str(manifest)
        assert manifest.read_text(encoding="utf-8") == f"{older}\n"

    def test_existing_name_gets_numeric_suffix(self, duplicates):
        """
        Destination already holds photo.jpg: the copy goes to photo_1.jpg and the
        manifest to photo_1.jpg-dup-list.txt; the existing file is untouched.
        """
        group, older, newer, dest = duplicates
        (dest / "photo.jpg").write_bytes(b"from a previous run")

        outcome = CanonicalExtractor(str(dest)).extract_group(group)

        assert (dest / "photo.jpg").read_bytes() == b"from a previous run"
        assert outcome.copy_path == str(dest / "photo_1.jpg")
        assert (dest / "photo_1.jpg").read_bytes() == b"same"
        assert outcome.manifest_path == str(dest / "photo_1.jpg-dup-list.txt")

    def test_existing_manifest_gets_its_own_suffix(self, duplicates):
        group, older, newer, dest = duplicates
        (dest / "photo.jpg-dup-list.txt").write_text("stale\n")

        outcome = CanonicalExtractor(str(dest)).extract_group(group)

        assert outcome.copy_path == str(dest / "photo.jpg")
        assert outcome.manifest_path == str(dest / "photo.jpg-dup-list_1.txt")
        assert (dest / "photo.jpg-dup-list.txt").read_text() == "stale\n"

    def test_manifest_lists_all_other_members(self, tmp_path):
        dest = tmp_path / "dest"
        dest.mkdir()
        paths = []
        for i in range(4):
            p = tmp_path / f"copy{i}.txt"
            p.write_bytes(b"dup")
            paths.append(p)
        group = make_group([(str(p), float(i)) for i, p in enumerate(paths)], size=3)

        outcome = CanonicalExtractor(str(dest)).extract_group(group)

        lines = (dest / "copy3.txt-dup-list.txt").read_text(encoding="utf-8").splitlines()
        assert outcome.canonical_path == str(paths[3])
        assert lines == [str(p) for p in paths[:3]]

    def test_copy_failure_is_reported_not_raised(self, tmp_path):
        dest = tmp_path / "dest"
        dest.mkdir()
        group = make_group([(str(tmp_path / "vanished1"), 1.0), (str(tmp_path / "vanished2"), 2.0)])

        outcome = CanonicalExtractor(str(dest)).extract_group(group)

        assert not outcome.ok
        assert outcome.copy_path is None
        assert "vanished2" in outcome.error
        assert list(dest.iterdir()) == []


class TestExtract:

    def test_failing_group_does_not_stop_others(self, tmp_path):
        dest = tmp_path / "dest"
        dest.mkdir()
        good_a = tmp_path / "good_a.txt"
        good_b = tmp_path / "good_b.txt"
        good_a.write_bytes(b"good")
        good_b.write_bytes(b"good")

        broken = make_group([(str(tmp_path / "gone_a"), 1.0), (str(tmp_path / "gone_b"), 2.0)],
                            size=9, digest="broken")
        healthy = make_group([(str(good_a), 1.0), (str(good_b), 2.0)], size=4, digest="healthy")
        result = make_result([broken, healthy])

        outcomes = CanonicalExtractor(str(dest)).extract(result)

        by_key = {o.key: o for o in outcomes}
        assert not by_key[broken.key].ok
        assert by_key[healthy.key].ok
        assert (dest / "good_b.txt").read_bytes() == b"good"

    def test_manifest_failure_keeps_processing(self, tmp_path):
        dest = tmp_path / "dest"
        dest.mkdir()
        a = tmp_path / "a.txt"
        b = tmp_path / "b.txt"
        a.write_bytes(b"aa")
        b.write_bytes(b"aa")
        result = make_result([make_group([(str(a), 1.0), (str(b), 2.0)], size=2)])

        with mock.patch.object(FileService, "write_manifest", side_effect=RuntimeError("disk full")):
            outcomes = CanonicalExtractor(str(dest)).extract(result)

        assert len(outcomes) == 1
        assert outcomes[0].copy_path == str(dest / "b.txt")
        assert outcomes[0].manifest_path is None
        assert outcomes[0].error == "disk full"

    def test_single_member_groups_are_not_extracted(self, tmp_path):
        dest = tmp_path / "dest"
        dest.mkdir()
        lonely = tmp_path / "lonely.txt"
        lonely.write_bytes(b"x")
        result = make_result([make_group([(str(lonely), 1.0)], size=1)])

        assert CanonicalExtractor(str(dest)).extract(result) == []
        assert list(dest.iterdir()) == []


class TestPrepareDestination:

    def test_creates_nested_directory(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"
        CanonicalExtractor.prepare_destination(str(target))
        assert target.is_dir()

    def test_failure_is_fatal(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_bytes(b"x")
        with pytest.raises(ExtractionSetupError):
            CanonicalExtractor.prepare_destination(str(blocker / "sub"))
