"""Run log publishing.

Uploads the accumulated run log as the last step of a run.
"""

import logging

from disk_harvester.cloud.storage import BlobDestination
from disk_harvester.config.paths import logs_blob_name
from disk_harvester.exceptions import LogPublishError
from disk_harvester.pipeline.runlog import RunLog
from disk_harvester.utils.scratch import scratch_file

logger = logging.getLogger("disk_harvester.publisher")


class LogPublisher:
    """Uploads the run log to logs/logs-<timestamp>.txt."""

    def __init__(self, destination: BlobDestination):
        self._destination = destination

    def publish(self, run_log: RunLog, timestamp: str) -> str:
        """
        Upload all run log entries as one text blob.

        Args:
            run_log: Entries to publish
            timestamp: Run timestamp

        Returns:
            Name of the uploaded blob

        Raises:
            LogPublishError: If the upload fails
        """
        blob_name = logs_blob_name(timestamp)
        with scratch_file(suffix=".txt") as staging:
            try:
                # Undecodable POSIX file names reach the log as lone surrogates
                staging.write_text(run_log.text(), encoding="utf-8", errors="backslashreplace")
                self._destination.upload_file(staging, blob_name)
            except Exception as e:
                logger.error(f"Run log upload failed: {e}")
                raise LogPublishError(blob_name, e)

        logger.info(f"Published {len(run_log)} log entries to '{blob_name}'")
        return blob_name
