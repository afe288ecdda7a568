"""Access token retrieval for Disk Harvester.

Reads the SAS token for a run from a publicly readable blob in the token
container of the storage account. No credentials are needed for this read.
"""

import logging
from typing import Optional

import requests

from disk_harvester.config.paths import TOKEN_CONTAINER, get_account_url
from disk_harvester.exceptions import CredentialRetrievalError

logger = logging.getLogger("disk_harvester.credentials")

# Request timeout in seconds
REQUEST_TIMEOUT = 30

# Blob service REST API version sent with anonymous reads
STORAGE_API_VERSION = "2021-08-06"


class TokenFetcher:
    """Fetches the opaque access token from a well-known blob."""

    def __init__(self, timeout: int = REQUEST_TIMEOUT, session: Optional[requests.Session] = None):
        """
        Initialize the token fetcher.

        Args:
            timeout: Request timeout in seconds
            session: Optional requests session (a new one is created if omitted)
        """
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({
            "x-ms-version": STORAGE_API_VERSION,
            "User-Agent": "DiskHarvester/1.0",
        })

    @staticmethod
    def token_url(account: str, blob_name: str, container: str = TOKEN_CONTAINER) -> str:
        """URL of the token blob."""
        return f"{get_account_url(account)}/{container}/{blob_name}"

    def fetch(self, account: str, blob_name: str, container: str = TOKEN_CONTAINER) -> str:
        """
        Read the token blob as text.

        Args:
            account: Storage account name or URL
            blob_name: Name of the blob holding the token
            container: Container holding token blobs

        Returns:
            Token text with surrounding whitespace removed

        Raises:
            CredentialRetrievalError: If the blob is inaccessible or empty
        """
        url = self.token_url(account, blob_name, container)
        logger.info(f"Fetching access token {container}/{blob_name}")

        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.exceptions.Timeout as e:
            logger.error("Token request timed out")
            raise CredentialRetrievalError(account, blob_name, "request timed out", e)
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Token request connection error: {e}")
            raise CredentialRetrievalError(account, blob_name, "unable to connect", e)
        except requests.exceptions.RequestException as e:
            logger.error(f"Token request error: {e}")
            raise CredentialRetrievalError(account, blob_name, "request failed", e)

        if response.status_code == 404:
            raise CredentialRetrievalError(account, blob_name, "blob not found")
        if response.status_code in (401, 403):
            raise CredentialRetrievalError(account, blob_name, "anonymous read access denied")
        if response.status_code != 200:
            raise CredentialRetrievalError(
                account, blob_name, f"storage error {response.status_code}"
            )

        token = response.text.strip()
        if not token:
            raise CredentialRetrievalError(account, blob_name, "token blob is empty")

        logger.debug(f"Fetched access token ({len(token)} characters)")
        return token

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self) -> "TokenFetcher":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
