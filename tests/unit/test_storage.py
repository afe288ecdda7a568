"""Unit tests for ContainerProvisioner and BlobDestination."""

from unittest.mock import MagicMock, patch

import pytest
from azure.core.exceptions import HttpResponseError, ResourceExistsError

from disk_harvester.cloud.storage import BlobDestination, ContainerProvisioner
from disk_harvester.exceptions import ProvisioningError


@pytest.fixture
def service():
    with patch("disk_harvester.cloud.storage.BlobServiceClient") as mock_service_cls:
        yield mock_service_cls


class TestContainerProvisioner:
    """Tests for ContainerProvisioner.provision()."""

    def test_authenticates_with_token(self, service):
        """Should build the service client from the account URL and token."""
        ContainerProvisioner("harvesttest", "sv=1&sig=abc")

        service.assert_called_once_with(
            account_url="https://harvesttest.blob.core.windows.net",
            credential="sv=1&sig=abc",
        )

    def test_creates_missing_container(self, service):
        """Should create the container when it does not exist."""
        container = service.return_value.get_container_client.return_value
        container.exists.return_value = False

        destination = ContainerProvisioner("harvesttest", "tok").provision("workstation01")

        service.return_value.get_container_client.assert_called_once_with("workstation01")
        container.create_container.assert_called_once()
        assert isinstance(destination, BlobDestination)

    def test_existing_container_is_noop(self, service):
        """Should not create a container that already exists."""
        container = service.return_value.get_container_client.return_value
        container.exists.return_value = True

        ContainerProvisioner("harvesttest", "tok").provision("workstation01")

        container.create_container.assert_not_called()

    def test_already_exists_race_is_noop(self, service):
        """Should treat a concurrent creation as success."""
        container = service.return_value.get_container_client.return_value
        container.exists.return_value = False
        container.create_container.side_effect = ResourceExistsError("exists")

        destination = ContainerProvisioner("harvesttest", "tok").provision("workstation01")

        assert isinstance(destination, BlobDestination)

    def test_creation_failure_raises(self, service):
        """Should raise ProvisioningError for other failures."""
        container = service.return_value.get_container_client.return_value
        container.exists.return_value = False
        container.create_container.side_effect = HttpResponseError(message="AuthorizationFailure")

        with pytest.raises(ProvisioningError) as exc_info:
            ContainerProvisioner("harvesttest", "tok").provision("workstation01")

        assert exc_info.value.container == "workstation01"
        assert "AuthorizationFailure" in str(exc_info.value)

    def test_lookup_failure_raises(self, service):
        """Should raise ProvisioningError when the lookup fails."""
        container = service.return_value.get_container_client.return_value
        container.exists.side_effect = HttpResponseError(message="denied")

        with pytest.raises(ProvisioningError):
            ContainerProvisioner("harvesttest", "tok").provision("workstation01")

    @pytest.mark.parametrize("name", ["ws", "my_host", "-host", "host--01", "x" * 64])
    def test_invalid_container_name_raises(self, service, name):
        """Should reject names the service would refuse, before any call."""
        with pytest.raises(ProvisioningError):
            ContainerProvisioner("harvesttest", "tok").provision(name)

        service.return_value.get_container_client.assert_not_called()


class TestBlobDestination:
    """Tests for BlobDestination.upload_file()."""

    def test_uploads_file_with_overwrite(self, tmp_path):
        """Should upload the file content under the blob name."""
        source = tmp_path / "a.txt"
        source.write_bytes(b"abc")
        container = MagicMock()
        container.container_name = "workstation01"

        size = BlobDestination(container).upload_file(source, "disks/c-ts/a.txt")

        assert size == 3
        kwargs = container.upload_blob.call_args.kwargs
        assert kwargs["name"] == "disks/c-ts/a.txt"
        assert kwargs["overwrite"] is True
        assert kwargs["length"] == 3

    def test_container_name(self):
        """Should expose the container name."""
        container = MagicMock()
        container.container_name = "workstation01"

        assert BlobDestination(container).container_name == "workstation01"

    def test_upload_error_propagates(self, tmp_path):
        """Should let service errors propagate to the caller."""
        source = tmp_path / "a.txt"
        source.write_bytes(b"abc")
        container = MagicMock()
        container.upload_blob.side_effect = HttpResponseError(message="boom")

        with pytest.raises(HttpResponseError):
            BlobDestination(container).upload_file(source, "k")

    def test_missing_file_raises(self, tmp_path):
        """Should raise OSError for a missing local file."""
        with pytest.raises(OSError):
            BlobDestination(MagicMock()).upload_file(tmp_path / "missing", "k")
