"""Pytest configuration and shared fixtures for Disk Harvester tests."""

import os
from pathlib import Path
from typing import Generator

import pytest

from disk_harvester.config.settings import AppSettings
from disk_harvester.local.volumes import VolumeInfo

from tests.integration.mock_blob_storage import MockBlobDestination


# Test constants
TEST_ACCOUNT = "harvesttest"
TEST_TOKEN_BLOB = "workstation-token"
TEST_HOSTNAME = "WORKSTATION01"
TEST_TIMESTAMP = "18-10-2026-09-30-00"


@pytest.fixture
def settings() -> AppSettings:
    """Provide run settings pointing at the test account."""
    return AppSettings(account=TEST_ACCOUNT, token_blob=TEST_TOKEN_BLOB)


@pytest.fixture
def destination() -> MockBlobDestination:
    """Provide an in-memory destination container."""
    return MockBlobDestination()


@pytest.fixture
def volume_c(tmp_path: Path) -> VolumeInfo:
    """
    Create a fake volume "c" rooted in a temporary directory.

    Layout:
        Users/x/downloads/report.PDF
        Users/x/downloads/notes.txt
        Users/x/.hidden/secret.cfg
        Windows/system.ini
    """
    root = tmp_path / "vol_c"
    downloads = root / "Users" / "x" / "downloads"
    downloads.mkdir(parents=True)
    (downloads / "report.PDF").write_bytes(b"%PDF-1.4 test")
    (downloads / "notes.txt").write_text("remember the milk")
    hidden = root / "Users" / "x" / ".hidden"
    hidden.mkdir()
    (hidden / "secret.cfg").write_text("key=value")
    (root / "Windows").mkdir()
    (root / "Windows" / "system.ini").write_text("[boot]")
    return VolumeInfo(identifier=str(root) + os.sep, name="c", total_bytes=1024)


@pytest.fixture
def volume_d(tmp_path: Path) -> VolumeInfo:
    """Create a second fake volume "d" with one file."""
    root = tmp_path / "vol_d"
    (root / "Data").mkdir(parents=True)
    (root / "Data" / "archive.zip").write_bytes(b"PK\x03\x04")
    return VolumeInfo(identifier=str(root) + os.sep, name="d", total_bytes=2048)


@pytest.fixture
def temp_settings_file(tmp_path: Path) -> Generator[Path, None, None]:
    """Provide a temporary settings file path for testing."""
    settings_file = tmp_path / "settings.json"
    yield settings_file
    # Cleanup handled by tmp_path fixture
