"""File uploader for Disk Harvester.

Walks the selected volumes and uploads every file to the destination
container under a per-run, per-volume prefix.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence

from disk_harvester.cloud.storage import BlobDestination
from disk_harvester.config.paths import DISKS_PREFIX
from disk_harvester.exceptions import UploadFailure
from disk_harvester.local.selection import Selection
from disk_harvester.local.volumes import VolumeInfo
from disk_harvester.local.walker import walk_files
from disk_harvester.pipeline.runlog import RunLog

logger = logging.getLogger("disk_harvester.uploader")


@dataclass
class SelectedFile:
    """A file chosen for upload."""
    path: str
    volume: VolumeInfo
    blob_name: str


@dataclass
class UploadResult:
    """Result of uploading a single file."""
    path: str
    blob_name: str
    success: bool
    error_message: Optional[str] = None
    bytes_transferred: int = 0
    duration_seconds: float = 0.0


# Type alias for per-file completion callback
CompletionCallback = Callable[[SelectedFile, UploadResult], None]


def volume_relative_path(volume: VolumeInfo, path: str) -> str:
    r"""
    Path of a file relative to its volume root, with forward slashes.

    Args:
        volume: Owning volume
        path: Absolute file path

    Returns:
        Relative path without a leading separator

    Examples:
        ("C:\\", "C:\\Users\\x\\a.txt") -> "Users/x/a.txt"
    """
    if path.startswith(volume.identifier):
        relative = path[len(volume.identifier):]
    else:
        relative = os.path.splitdrive(path)[1]
    return relative.replace("\\", "/").lstrip("/")


def build_destination_key(volume: VolumeInfo, path: str, timestamp: str) -> str:
    """
    Destination blob name for a file.

    Format: disks/<volume name>-<timestamp>/<volume relative path>,
    lower-cased throughout.
    """
    relative = volume_relative_path(volume, path)
    return f"{DISKS_PREFIX}/{volume.name}-{timestamp}/{relative}".lower()


def iter_selected_files(
    volumes: Sequence[VolumeInfo],
    selection: Selection,
    timestamp: str,
) -> Iterator[SelectedFile]:
    """
    Enumerate the files to upload, volume by volume.

    Args:
        volumes: Selected volumes
        selection: Strategy giving the walk roots per volume
        timestamp: Run timestamp

    Yields:
        SelectedFile for every non-directory entry under the walk roots
    """
    for volume in volumes:
        for root in selection.roots_for(volume, volumes):
            logger.info(f"Scanning {root}")
            for path in walk_files(root):
                yield SelectedFile(
                    path=path,
                    volume=volume,
                    blob_name=build_destination_key(volume, path, timestamp),
                )


class FileUploader:
    """Uploads selected files, recording one log entry per file.

    A failed file is recorded and skipped; the batch always continues.
    """

    def __init__(self, destination: BlobDestination, run_log: RunLog):
        """
        Initialize the uploader.

        Args:
            destination: Container to upload into
            run_log: Collector receiving one entry per file
        """
        self._destination = destination
        self._run_log = run_log

    def upload_file(self, selected: SelectedFile) -> UploadResult:
        """
        Upload one file. Each file is attempted exactly once.

        Args:
            selected: File to upload

        Returns:
            UploadResult with success/failure status
        """
        start_time = time.time()
        try:
            size = self._destination.upload_file(selected.path, selected.blob_name)
        except Exception as e:
            failure = UploadFailure(selected.path, selected.blob_name, e)
            self._run_log.failure(str(failure))
            return UploadResult(
                path=selected.path,
                blob_name=selected.blob_name,
                success=False,
                error_message=str(e),
                duration_seconds=time.time() - start_time,
            )

        self._run_log.success(f"Uploaded '{selected.path}' to '{selected.blob_name}'")
        return UploadResult(
            path=selected.path,
            blob_name=selected.blob_name,
            success=True,
            bytes_transferred=size,
            duration_seconds=time.time() - start_time,
        )

    def upload_batch(
        self,
        volumes: Sequence[VolumeInfo],
        selection: Selection,
        timestamp: str,
        on_complete: Optional[CompletionCallback] = None,
    ) -> List[UploadResult]:
        """
        Upload every selected file.

        Continues on individual failures, collects all results.

        Args:
            volumes: Selected volumes
            selection: Strategy giving the walk roots per volume
            timestamp: Run timestamp
            on_complete: Optional callback when each file completes

        Returns:
            List of UploadResult, one per visited file
        """
        results: List[UploadResult] = []

        for selected in iter_selected_files(volumes, selection, timestamp):
            result = self.upload_file(selected)
            results.append(result)

            if on_complete:
                on_complete(selected, result)

        return results

    @staticmethod
    def get_batch_summary(results: List[UploadResult]) -> dict:
        """
        Get summary statistics for a batch upload.

        Args:
            results: List of upload results

        Returns:
            Dictionary with summary statistics
        """
        successful = [r for r in results if r.success]
        failed = [r for r in results if not r.success]

        return {
            "total": len(results),
            "successful": len(successful),
            "failed": len(failed),
            "bytes_transferred": sum(r.bytes_transferred for r in results),
            "duration_seconds": sum(r.duration_seconds for r in results),
            "failures": [(r.path, r.error_message) for r in failed],
        }
