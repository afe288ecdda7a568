"""Harvest run orchestration.

A run is strictly linear:

    fetch token -> provision container -> list fixed volumes -> select
      -> upload files -> upload metadata -> publish run log

Setup and selection failures, and a failed run log upload, raise a
HarvestError and abort the run. Per-file and metadata failures are recorded
in the run log and the run continues.
"""

import logging
import socket
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from disk_harvester.cloud.credentials import TokenFetcher
from disk_harvester.cloud.storage import BlobDestination, ContainerProvisioner
from disk_harvester.config.paths import RUN_TIMESTAMP_FORMAT
from disk_harvester.config.settings import AppSettings
from disk_harvester.local.selection import Selection, make_selection
from disk_harvester.local.volumes import VolumeInfo, get_fixed_volumes
from disk_harvester.pipeline.metadata import MetadataCollector
from disk_harvester.pipeline.publisher import LogPublisher
from disk_harvester.pipeline.runlog import RunLog
from disk_harvester.pipeline.uploader import FileUploader

logger = logging.getLogger("disk_harvester.runner")

ProvisionerFactory = Callable[[str, str], ContainerProvisioner]
VolumeSource = Callable[[], List[VolumeInfo]]


@dataclass
class RunContext:
    """State threaded through every stage of one run."""
    destination: BlobDestination
    container_name: str
    timestamp: str
    selection: Selection
    volumes: List[VolumeInfo]
    run_log: RunLog = field(default_factory=RunLog)


@dataclass
class RunResult:
    """Summary of a completed run."""
    container_name: str
    timestamp: str
    volumes: List[str]
    files_attempted: int
    files_uploaded: int
    files_failed: int
    bytes_uploaded: int
    metadata_uploaded: bool
    log_blob: str


def client_container_name(hostname: Optional[str] = None) -> str:
    """
    Destination container name for this machine.

    Uses the first label of the host name, lower-cased.
    """
    hostname = hostname or socket.gethostname()
    return hostname.split(".")[0].lower()


def run_timestamp(now: Optional[datetime] = None) -> str:
    """Run timestamp shared by every upload of a run."""
    return (now or datetime.now()).strftime(RUN_TIMESTAMP_FORMAT)


def upload_files(context: RunContext) -> dict:
    """
    Upload every selected file.

    Returns:
        Batch summary from FileUploader.get_batch_summary()
    """
    uploader = FileUploader(context.destination, context.run_log)
    results = uploader.upload_batch(context.volumes, context.selection, context.timestamp)
    summary = FileUploader.get_batch_summary(results)
    logger.info(
        f"File uploads complete: {summary['successful']}/{summary['total']} successful, "
        f"{summary['bytes_transferred']} bytes"
    )
    return summary


def upload_metadata(context: RunContext) -> bool:
    """Collect and upload the metadata inventory; failures are only logged."""
    collector = MetadataCollector(context.destination, context.run_log)
    return collector.run(context.volumes, context.selection, context.timestamp)


def publish_run_log(context: RunContext) -> str:
    """Upload the run log. Raises LogPublishError on failure."""
    return LogPublisher(context.destination).publish(context.run_log, context.timestamp)


def run_harvest(
    settings: AppSettings,
    token_fetcher: Optional[TokenFetcher] = None,
    provisioner_factory: ProvisionerFactory = ContainerProvisioner,
    volume_source: VolumeSource = get_fixed_volumes,
    hostname: Optional[str] = None,
    now: Optional[datetime] = None,
) -> RunResult:
    """
    Execute one harvest run.

    Args:
        settings: Account, token and selection options
        token_fetcher: Fetcher for the access token (created from settings if omitted)
        provisioner_factory: Builds a ContainerProvisioner from (account, token)
        volume_source: Returns the local fixed volumes
        hostname: Override for the client host name
        now: Override for the run time

    Returns:
        RunResult describing the completed run

    Raises:
        CredentialRetrievalError: Token could not be read
        ProvisioningError: Destination container unavailable
        NoMatchingDisksError: Nothing selected
        LogPublishError: Run log could not be uploaded
    """
    timestamp = run_timestamp(now)
    container_name = client_container_name(hostname)
    logger.info(f"Starting run {timestamp} for container {container_name}")

    owns_fetcher = token_fetcher is None
    fetcher = token_fetcher or TokenFetcher(timeout=settings.timeout)
    try:
        token = fetcher.fetch(settings.account, settings.token_blob, settings.token_container)
    finally:
        if owns_fetcher:
            fetcher.close()

    destination = provisioner_factory(settings.account, token).provision(container_name)

    selection = make_selection(settings.include_all, settings.inclusions)
    volumes = selection.select(volume_source())

    context = RunContext(
        destination=destination,
        container_name=container_name,
        timestamp=timestamp,
        selection=selection,
        volumes=volumes,
    )

    summary = upload_files(context)
    metadata_uploaded = upload_metadata(context)
    log_blob = publish_run_log(context)

    return RunResult(
        container_name=context.container_name,
        timestamp=context.timestamp,
        volumes=[v.identifier for v in context.volumes],
        files_attempted=summary["total"],
        files_uploaded=summary["successful"],
        files_failed=summary["failed"],
        bytes_uploaded=summary["bytes_transferred"],
        metadata_uploaded=metadata_uploaded,
        log_blob=log_blob,
    )
