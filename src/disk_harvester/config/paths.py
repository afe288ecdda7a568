"""Path constants and discovery for Disk Harvester.

Defines destination blob layout constants and application data directories.
"""

import os
import sys
from pathlib import Path


# Application name for config directories
APP_NAME = "DiskHarvester"


# Container holding the access token blobs
TOKEN_CONTAINER = "sas-token"

# Top-level prefixes inside the destination container
DISKS_PREFIX = "disks"
METADATA_PREFIX = "metadata"
LOGS_PREFIX = "logs"

# Run timestamp: day-month-year-hour-minute-second
RUN_TIMESTAMP_FORMAT = "%d-%m-%Y-%H-%M-%S"


# Overrides the per-user data directory (settings file and log directory)
HOME_ENV_VAR = "DISK_HARVESTER_HOME"

SETTINGS_FILE_NAME = "settings.json"
LOG_FILE_NAME = "disk-harvester.log"


def _platform_config_base() -> Path:
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def get_app_data_dir() -> Path:
    """
    Per-user directory holding settings and logs, created on first use.

    ``DISK_HARVESTER_HOME`` wins when set. Otherwise:
        - Windows: %APPDATA%/DiskHarvester
        - Linux: $XDG_CONFIG_HOME/DiskHarvester (~/.config by default)
        - macOS: ~/Library/Application Support/DiskHarvester
    """
    override = os.environ.get(HOME_ENV_VAR)
    app_dir = Path(override) if override else _platform_config_base() / APP_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_settings_path() -> Path:
    return get_app_data_dir() / SETTINGS_FILE_NAME


def get_log_dir() -> Path:
    """Directory for the local application log, created on first use."""
    log_dir = get_app_data_dir() / "logs"
    log_dir.mkdir(exist_ok=True)
    return log_dir


def get_log_file_path() -> Path:
    """Local application log (distinct from the run log uploaded to the container)."""
    return get_log_dir() / LOG_FILE_NAME


def get_account_url(account: str) -> str:
    """
    Resolve a storage account identifier to its blob endpoint URL.

    Args:
        account: Account name (e.g. "myaccount") or full https URL

    Returns:
        Blob endpoint URL without trailing slash
    """
    account = account.strip()
    if account.lower().startswith("https://"):
        return account.rstrip("/")
    return f"https://{account}.blob.core.windows.net"


def metadata_blob_name(timestamp: str) -> str:
    """Blob name of the metadata inventory for a run."""
    return f"{METADATA_PREFIX}/metadata-{timestamp}.json".lower()


def logs_blob_name(timestamp: str) -> str:
    """Blob name of the run log for a run."""
    return f"{LOGS_PREFIX}/logs-{timestamp}.txt".lower()
