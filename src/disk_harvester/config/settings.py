"""Persisted run defaults for Disk Harvester.

Values stored here are the starting point of every run; command-line
options are overlaid on top of them by the entry point.
"""

import json
import logging
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import List, Optional

from disk_harvester.config.paths import TOKEN_CONTAINER, get_settings_path

logger = logging.getLogger("disk_harvester.settings")


@dataclass
class AppSettings:
    """Run defaults stored between invocations."""

    # Where the token lives and which account receives the uploads
    account: str = ""
    token_blob: str = ""
    token_container: str = TOKEN_CONTAINER
    timeout: int = 30

    # What to harvest
    inclusions: List[str] = field(default_factory=list)
    include_all: bool = False

    verbose: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Build settings from stored JSON; keys this version doesn't know are dropped."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


class SettingsManager:
    """Reads and writes the settings JSON file."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Args:
            config_path: Settings file; the app data directory is used when omitted
        """
        self._path = Path(config_path) if config_path else get_settings_path()

    @property
    def config_path(self) -> Path:
        return self._path

    def load(self) -> AppSettings:
        """
        Read stored settings.

        A missing file gives the defaults. So does a file that is not a JSON
        object or cannot be read; the problem is logged and the run goes on.

        Returns:
            AppSettings instance
        """
        if not self._path.exists():
            return AppSettings()

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return AppSettings.from_dict(data)
        except (json.JSONDecodeError, OSError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable settings file {self._path}: {e}")
            return AppSettings()

    def save(self, settings: AppSettings) -> None:
        """
        Write settings, creating the parent directory as needed.

        Args:
            settings: Settings to store
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
        logger.debug(f"Settings written to {self._path}")

    def reset(self) -> AppSettings:
        """Delete the stored file and return the defaults."""
        self._path.unlink(missing_ok=True)
        logger.debug(f"Settings removed from {self._path}")
        return AppSettings()

