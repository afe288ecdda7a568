"""Exceptions for Disk Harvester.

Custom exception hierarchy for harvest runs. Fatal errors abort the run;
per-file and metadata failures are recorded in the run log instead.
"""


class HarvestError(Exception):
    """Base exception for all harvest-related errors."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class CredentialRetrievalError(HarvestError):
    """The access token blob could not be read or was empty."""

    def __init__(self, account: str, blob_name: str, reason: str = "", original_error: Exception = None):
        self.account = account
        self.blob_name = blob_name
        message = f"Failed to retrieve access token '{blob_name}' from account '{account}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, original_error)


class ProvisioningError(HarvestError):
    """Destination container could not be found or created."""

    def __init__(self, container: str, reason: str = "", original_error: Exception = None):
        self.container = container
        message = f"Failed to provision container '{container}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, original_error)


class NoMatchingDisksError(HarvestError):
    """Selection produced no volumes to process."""

    def __init__(self, inclusions=None):
        self.inclusions = list(inclusions or [])
        if self.inclusions:
            message = f"No fixed disk matches the inclusions: {', '.join(self.inclusions)}"
        else:
            message = "No disks selected: pass inclusions or enable all disks"
        super().__init__(message)


class UploadFailure(HarvestError):
    """A single file could not be uploaded. Recorded, never raised out of a run."""

    def __init__(self, file_path: str, blob_name: str, original_error: Exception = None):
        self.file_path = file_path
        self.blob_name = blob_name
        message = f"Failed to upload '{file_path}' to '{blob_name}'"
        super().__init__(message, original_error)


class MetadataUploadFailure(HarvestError):
    """The metadata inventory could not be uploaded. Recorded, never raised out of a run."""

    def __init__(self, blob_name: str, original_error: Exception = None):
        self.blob_name = blob_name
        message = f"Failed to upload metadata to '{blob_name}'"
        super().__init__(message, original_error)


class LogPublishError(HarvestError):
    """The run log could not be uploaded."""

    def __init__(self, blob_name: str, original_error: Exception = None):
        self.blob_name = blob_name
        message = f"Failed to publish run log to '{blob_name}'"
        super().__init__(message, original_error)
