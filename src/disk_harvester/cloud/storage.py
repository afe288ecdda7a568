"""Blob storage access for Disk Harvester.

Provides the destination container handle used by every upload stage and
the provisioner that creates it on first use.
"""

import logging
import os
import time
from pathlib import Path
from typing import Union

from azure.core.exceptions import AzureError, ResourceExistsError
from azure.storage.blob import BlobServiceClient, ContainerClient

from disk_harvester.config.paths import get_account_url
from disk_harvester.exceptions import ProvisioningError
from disk_harvester.utils.validators import validate_container_name

logger = logging.getLogger("disk_harvester.storage")


class BlobDestination:
    """Uploads local files into one blob container."""

    def __init__(self, container_client: ContainerClient):
        """
        Initialize the destination.

        Args:
            container_client: Authenticated client for the destination container
        """
        self._container = container_client

    @property
    def container_name(self) -> str:
        """Name of the destination container."""
        return self._container.container_name

    def upload_file(self, local_path: Union[str, Path], blob_name: str) -> int:
        """
        Upload a local file, replacing any existing blob of the same name.

        Args:
            local_path: File to upload
            blob_name: Destination blob name

        Returns:
            Number of bytes uploaded

        Raises:
            OSError: If the local file cannot be read
            AzureError: If the upload fails
        """
        start_time = time.time()
        size = os.path.getsize(local_path)
        with open(local_path, "rb") as data:
            self._container.upload_blob(name=blob_name, data=data, overwrite=True, length=size)
        logger.debug(
            f"Uploaded {local_path} -> {blob_name} ({size} bytes in {time.time() - start_time:.2f}s)"
        )
        return size


class ContainerProvisioner:
    """Ensures the destination container exists."""

    def __init__(self, account: str, token: str):
        """
        Initialize the provisioner.

        Args:
            account: Storage account name or URL
            token: SAS token granting access to the account
        """
        self._account_url = get_account_url(account)
        self._service = BlobServiceClient(account_url=self._account_url, credential=token)

    def provision(self, container_name: str) -> BlobDestination:
        """
        Look up the container and create it if absent.

        Idempotent: an existing container is used as-is.

        Args:
            container_name: Destination container name

        Returns:
            BlobDestination for the container

        Raises:
            ProvisioningError: If the name is invalid or the container cannot be created
        """
        is_valid, error = validate_container_name(container_name)
        if not is_valid:
            raise ProvisioningError(container_name, error)

        container = self._service.get_container_client(container_name)
        try:
            if container.exists():
                logger.info(f"Using existing container {container_name}")
            else:
                logger.info(f"Creating container {container_name}")
                container.create_container()
        except ResourceExistsError:
            logger.info(f"Container {container_name} already exists")
        except AzureError as e:
            logger.error(f"Container provisioning failed for {container_name}: {e}")
            raise ProvisioningError(container_name, original_error=e)

        return BlobDestination(container)
