"""Input validators for Disk Harvester.

Provides validation functions for storage account identifiers, container
and blob names, and numeric options.
"""

import re
from typing import Optional, Tuple


# Azure storage account names: 3-24 lower-case letters and digits
ACCOUNT_NAME_PATTERN = re.compile(r'^[a-z0-9]{3,24}$')

# Account URL, e.g. https://myaccount.blob.core.windows.net
ACCOUNT_URL_PATTERN = re.compile(r'^https://[A-Za-z0-9.\-]+(:\d+)?(/[A-Za-z0-9\-]*)?/?$')

# Container names: letters, digits and single hyphens, no leading/trailing hyphen
CONTAINER_NAME_PATTERN = re.compile(r'^[a-z0-9](?!.*--)[a-z0-9-]{1,61}[a-z0-9]$')

MAX_BLOB_NAME_LENGTH = 1024


def validate_account(account: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a storage account identifier (account name or account URL).

    Args:
        account: Account name or https URL

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not account or not account.strip():
        return False, "Storage account is required"

    account = account.strip()

    if account.lower().startswith("https://"):
        if ACCOUNT_URL_PATTERN.match(account):
            return True, None
        return False, f"Invalid storage account URL: {account}"

    if ACCOUNT_NAME_PATTERN.match(account):
        return True, None

    return False, (
        f"Invalid storage account name: {account}. "
        "Must be 3-24 lower-case letters or digits."
    )


def validate_container_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a blob container name.

    Args:
        name: Container name to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not name:
        return False, "Container name is required"

    if CONTAINER_NAME_PATTERN.match(name):
        return True, None

    return False, (
        f"Invalid container name: {name}. Must be 3-63 lower-case letters, "
        "digits or single hyphens, starting and ending with a letter or digit."
    )


def validate_blob_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a blob name.

    Args:
        name: Blob name to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not name or not name.strip():
        return False, "Blob name is required"

    if len(name) > MAX_BLOB_NAME_LENGTH:
        return False, f"Blob name is too long ({len(name)} > {MAX_BLOB_NAME_LENGTH})"

    if name.endswith("/") or name.endswith("."):
        return False, f"Blob name cannot end with '/' or '.': {name}"

    return True, None


def validate_timeout(timeout: int) -> Tuple[bool, Optional[str]]:
    """
    Validate a timeout value in seconds.

    Args:
        timeout: Timeout in seconds

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(timeout, int):
        try:
            timeout = int(timeout)
        except (ValueError, TypeError):
            return False, "Timeout must be a number"

    if timeout < 5 or timeout > 300:
        return False, f"Timeout must be between 5 and 300 seconds, got {timeout}"

    return True, None
