"""Metadata inventory for Disk Harvester.

Records path, kind, size and timestamps for every file and directory in the
selection, then uploads the inventory as a single JSON array.
"""

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from disk_harvester.cloud.storage import BlobDestination
from disk_harvester.config.paths import metadata_blob_name
from disk_harvester.exceptions import MetadataUploadFailure
from disk_harvester.local.selection import Selection
from disk_harvester.local.volumes import VolumeInfo
from disk_harvester.local.walker import walk_entries
from disk_harvester.pipeline.runlog import RunLog
from disk_harvester.utils.scratch import scratch_file

logger = logging.getLogger("disk_harvester.metadata")

FILE = "File"
DIRECTORY = "Directory"


def _isoformat(timestamp: Optional[float]) -> Optional[str]:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp).isoformat()


@dataclass
class MetadataRecord:
    """Inventory entry for one file or directory."""
    path: str
    type: str
    size: int
    creation_time: Optional[str] = None
    last_write_time: Optional[str] = None
    last_access_time: Optional[str] = None

    def to_dict(self) -> dict:
        """JSON representation of the record."""
        return {
            "path": self.path,
            "type": self.type,
            "size": self.size,
            "creationTime": self.creation_time,
            "lastWriteTime": self.last_write_time,
            "lastAccessTime": self.last_access_time,
        }

    @classmethod
    def from_path(cls, path: str, is_dir: bool) -> "MetadataRecord":
        """
        Build a record from the filesystem.

        Entries that cannot be stat'ed are still recorded, without
        timestamps, so that every visited entry has a record.
        """
        kind = DIRECTORY if is_dir else FILE
        try:
            st = os.stat(path, follow_symlinks=False)
        except OSError as e:
            logger.warning(f"Cannot stat {path}: {e}")
            return cls(path=path, type=kind, size=0)

        # st_ctime is the creation time on Windows; st_birthtime where available
        created = getattr(st, "st_birthtime", st.st_ctime)
        return cls(
            path=path,
            type=kind,
            size=0 if is_dir else st.st_size,
            creation_time=_isoformat(created),
            last_write_time=_isoformat(st.st_mtime),
            last_access_time=_isoformat(st.st_atime),
        )


class MetadataCollector:
    """Collects and uploads the metadata inventory for a run."""

    def __init__(self, destination: BlobDestination, run_log: RunLog):
        """
        Initialize the collector.

        Args:
            destination: Container to upload into
            run_log: Collector receiving the upload outcome
        """
        self._destination = destination
        self._run_log = run_log

    def collect(self, volumes: Sequence[VolumeInfo], selection: Selection) -> List[MetadataRecord]:
        """
        Walk the selection and record every file and directory.

        Args:
            volumes: Selected volumes
            selection: Strategy giving the walk roots per volume

        Returns:
            Records in walk order
        """
        records: List[MetadataRecord] = []
        for volume in volumes:
            for root in selection.roots_for(volume, volumes):
                for path, is_dir in walk_entries(root):
                    records.append(MetadataRecord.from_path(path, is_dir))
        logger.info(f"Collected metadata for {len(records)} entries")
        return records

    def publish(self, records: Sequence[MetadataRecord], timestamp: str) -> bool:
        """
        Upload records as one JSON array.

        A failed upload is recorded in the run log and does not raise.
        The scratch file is removed whatever the outcome.

        Args:
            records: Records to upload
            timestamp: Run timestamp

        Returns:
            True if the inventory was uploaded
        """
        blob_name = metadata_blob_name(timestamp)
        try:
            with scratch_file(suffix=".json") as staging:
                with open(staging, "w", encoding="utf-8") as f:
                    json.dump([r.to_dict() for r in records], f, indent=2)
                self._destination.upload_file(staging, blob_name)
        except Exception as e:
            self._run_log.failure(str(MetadataUploadFailure(blob_name, e)))
            return False

        self._run_log.success(f"Uploaded metadata for {len(records)} entries to '{blob_name}'")
        return True

    def run(self, volumes: Sequence[VolumeInfo], selection: Selection, timestamp: str) -> bool:
        """Collect and publish in one step."""
        return self.publish(self.collect(volumes, selection), timestamp)
