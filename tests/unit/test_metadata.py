"""Unit tests for the metadata collector."""

import json
import os
from unittest.mock import patch

from disk_harvester.local.selection import Filtered, IncludeAll
from disk_harvester.pipeline.metadata import (
    DIRECTORY,
    FILE,
    MetadataCollector,
    MetadataRecord,
)
from disk_harvester.pipeline.runlog import RunLog

from tests.conftest import TEST_TIMESTAMP
from tests.integration.mock_blob_storage import MockBlobDestination


class TestMetadataRecord:
    """Tests for MetadataRecord."""

    def test_file_record(self, tmp_path):
        """Should capture size and timestamps for a file."""
        target = tmp_path / "a.bin"
        target.write_bytes(b"12345")

        record = MetadataRecord.from_path(str(target), is_dir=False)

        assert record.type == FILE
        assert record.size == 5
        assert record.creation_time is not None
        assert record.last_write_time is not None
        assert record.last_access_time is not None

    def test_directory_size_is_zero(self, tmp_path):
        """Should report size 0 for directories."""
        record = MetadataRecord.from_path(str(tmp_path), is_dir=True)

        assert record.type == DIRECTORY
        assert record.size == 0

    def test_missing_entry_still_recorded(self, tmp_path):
        """Should keep a record without timestamps when stat fails."""
        record = MetadataRecord.from_path(str(tmp_path / "vanished"), is_dir=False)

        assert record.size == 0
        assert record.last_write_time is None

    def test_to_dict_schema(self):
        """Should serialise with the documented key names."""
        record = MetadataRecord("C:\\a", FILE, 3, "t1", "t2", "t3")

        assert record.to_dict() == {
            "path": "C:\\a",
            "type": "File",
            "size": 3,
            "creationTime": "t1",
            "lastWriteTime": "t2",
            "lastAccessTime": "t3",
        }


class TestCollect:
    """Tests for MetadataCollector.collect()."""

    def test_counts_files_and_directories(self, volume_c):
        """Should produce one record per visited entry."""
        records = MetadataCollector(MockBlobDestination(), RunLog()).collect([volume_c], IncludeAll())

        assert len(records) == 9
        assert sum(1 for r in records if r.type == DIRECTORY) == 5
        assert all(r.size == 0 for r in records if r.type == DIRECTORY)

    def test_follows_inclusions(self, volume_c):
        """Should walk only the inclusion roots."""
        root = os.path.join(volume_c.identifier, "Users", "x", "downloads")

        records = MetadataCollector(MockBlobDestination(), RunLog()).collect(
            [volume_c], Filtered([root])
        )

        assert sorted(os.path.basename(r.path) for r in records) == ["notes.txt", "report.PDF"]


class TestPublish:
    """Tests for MetadataCollector.publish()."""

    def test_uploads_json_array(self):
        """Should upload all records as one JSON array."""
        destination = MockBlobDestination()
        run_log = RunLog()
        records = [MetadataRecord("C:\\a", FILE, 1), MetadataRecord("C:\\b", DIRECTORY, 0)]

        assert MetadataCollector(destination, run_log).publish(records, "18-10-2026-09-30-00") is True

        data = json.loads(destination.text("metadata/metadata-18-10-2026-09-30-00.json"))
        assert [d["path"] for d in data] == ["C:\\a", "C:\\b"]
        assert run_log.entries[-1].startswith("SUCCESS")

    def test_blob_name_is_lowercase(self):
        """Should lower-case the metadata blob name."""
        destination = MockBlobDestination()

        MetadataCollector(destination, RunLog()).publish([], "18-OCT-2026")

        assert destination.attempts == ["metadata/metadata-18-oct-2026.json"]

    def test_failure_is_recorded_not_raised(self):
        """Should record a failure entry and return False."""
        destination = MockBlobDestination(fail_when=lambda name: True)
        run_log = RunLog()

        assert MetadataCollector(destination, run_log).publish([], TEST_TIMESTAMP) is False
        assert run_log.failure_count == 1
        assert "Failed to upload metadata" in run_log.entries[0]

    def test_scratch_file_removed_after_success(self):
        """Should remove the staging file after upload."""
        destination = MockBlobDestination()

        MetadataCollector(destination, RunLog()).publish([], TEST_TIMESTAMP)

        assert destination.staged_paths
        assert not destination.staged_paths[0].exists()

    def test_scratch_file_removed_after_failure(self):
        """Should remove the staging file when the upload fails."""
        destination = MockBlobDestination(fail_when=lambda name: True)

        MetadataCollector(destination, RunLog()).publish([], TEST_TIMESTAMP)

        assert not destination.staged_paths[0].exists()

    def test_serialisation_failure_is_recorded(self):
        """Should record a failure when the inventory cannot be written."""
        run_log = RunLog()

        with patch("disk_harvester.pipeline.metadata.json.dump", side_effect=OSError("disk full")):
            ok = MetadataCollector(MockBlobDestination(), run_log).publish([], TEST_TIMESTAMP)

        assert ok is False
        assert "disk full" in run_log.entries[0]
