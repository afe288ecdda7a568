"""Local drive operations module.

This module provides:
- Fixed volume detection for Windows, macOS, and Linux
- Selection strategies: IncludeAll and Filtered
- Filesystem walking for uploads and metadata
"""

from disk_harvester.local.selection import Filtered, IncludeAll, make_selection
from disk_harvester.local.volumes import get_fixed_volumes, VolumeInfo
from disk_harvester.local.walker import walk_entries, walk_files

__all__ = [
    "Filtered",
    "IncludeAll",
    "make_selection",
    "get_fixed_volumes",
    "VolumeInfo",
    "walk_entries",
    "walk_files",
]
