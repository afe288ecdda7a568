"""Disk Harvester.

Uploads files from local fixed disks to Azure Blob Storage together with a
metadata inventory and a run log.
"""

__version__ = "1.0.0"
