r"""Platform-specific detection of local fixed volumes.

Detects volumes based on the operating system:
- Windows: Drive letters (C:\, D:\, ...) reported as DRIVE_FIXED
- macOS/Linux: Mounted partitions reported by psutil, minus removable,
  network and optical media
"""

import logging
import shutil
import sys
from dataclasses import dataclass
from typing import List

import psutil

logger = logging.getLogger("disk_harvester.volumes")

# GetDriveTypeW return values
DRIVE_REMOVABLE = 2
DRIVE_FIXED = 3
DRIVE_REMOTE = 4
DRIVE_CDROM = 5

# Filesystems that are never local fixed storage
NETWORK_FSTYPES = {
    "nfs", "nfs4", "cifs", "smbfs", "smb3", "afpfs", "webdav",
    "fuse.sshfs", "sshfs", "9p", "ceph", "glusterfs",
}
OPTICAL_FSTYPES = {"iso9660", "udf", "cd9660"}

# Mount roots used for hot-plugged media
REMOVABLE_MOUNT_ROOTS = ("/media/", "/run/media/", "/mnt/usb", "/Volumes/")


@dataclass
class VolumeInfo:
    """Information about a local volume."""
    identifier: str
    name: str
    total_bytes: int = 0
    drive_type: str = "fixed"
    label: str = ""


def volume_name_for(identifier: str) -> str:
    r"""
    Derive the short volume name used in destination keys.

    Args:
        identifier: Volume root (e.g. "C:\\" or "/data/")

    Returns:
        Lower-case drive letter on Windows, or the mount path with
        separators replaced by hyphens ("root" for "/")

    Examples:
        "C:\\" -> "c"
        "/" -> "root"
        "/mnt/disk2/" -> "mnt-disk2"
    """
    if len(identifier) >= 2 and identifier[1] == ":":
        return identifier[0].lower()
    stripped = identifier.strip("/\\")
    if not stripped:
        return "root"
    return stripped.replace("/", "-").replace("\\", "-").lower()


def get_fixed_volumes() -> List[VolumeInfo]:
    """
    Get local fixed volumes based on platform.

    Returns:
        List of VolumeInfo objects, empty if none were found

    Examples:
        Windows: [VolumeInfo("C:\\", "c", 511101108224), ...]
        Linux: [VolumeInfo("/", "root", 250790436864)]
    """
    if sys.platform == "win32":
        volumes = _get_windows_drives()
    else:
        volumes = _get_posix_volumes()

    if not volumes:
        logger.warning("No local fixed volumes found")
    else:
        logger.info(f"Found {len(volumes)} fixed volume(s): {', '.join(v.identifier for v in volumes)}")
    return volumes


def _get_windows_drives() -> List[VolumeInfo]:
    """
    Get fixed drive letters on Windows.

    Returns:
        List of VolumeInfo objects for fixed drives
    """
    import ctypes
    import string

    drives = []
    bitmask = ctypes.windll.kernel32.GetLogicalDrives()
    for index, letter in enumerate(string.ascii_uppercase):
        if not bitmask & (1 << index):
            continue

        root = f"{letter}:\\"
        drive_type = ctypes.windll.kernel32.GetDriveTypeW(root)
        if drive_type != DRIVE_FIXED:
            logger.debug(f"Skipping {root} (drive type {drive_type})")
            continue

        label = f"{letter}:"
        try:
            volume_name_buffer = ctypes.create_unicode_buffer(1024)
            ctypes.windll.kernel32.GetVolumeInformationW(
                root,
                volume_name_buffer,
                ctypes.sizeof(volume_name_buffer),
                None, None, None, None, 0
            )
            if volume_name_buffer.value:
                label = f"{letter}: ({volume_name_buffer.value})"
        except OSError as e:
            logger.debug(f"Could not read volume label of {root}: {e}")

        drives.append(VolumeInfo(
            identifier=root,
            name=volume_name_for(root),
            total_bytes=_total_bytes(root),
            label=label,
        ))
        logger.debug(f"Found Windows fixed drive: {root}")

    return drives


def _get_posix_volumes() -> List[VolumeInfo]:
    """
    Get fixed volumes on macOS and Linux.

    Returns:
        List of VolumeInfo objects for local physical partitions
    """
    volumes = []
    seen = set()

    for part in psutil.disk_partitions(all=False):
        mountpoint = part.mountpoint
        fstype = (part.fstype or "").lower()

        if fstype in NETWORK_FSTYPES or fstype in OPTICAL_FSTYPES:
            logger.debug(f"Skipping {mountpoint} ({fstype})")
            continue
        if "removable" in (part.opts or "") or _is_removable_mount(mountpoint):
            logger.debug(f"Skipping removable mount {mountpoint}")
            continue
        if mountpoint in seen:
            continue
        seen.add(mountpoint)

        identifier = mountpoint if mountpoint.endswith("/") else mountpoint + "/"
        volumes.append(VolumeInfo(
            identifier=identifier,
            name=volume_name_for(identifier),
            total_bytes=_total_bytes(mountpoint),
            label=part.device,
        ))
        logger.debug(f"Found fixed volume: {identifier} ({part.device}, {fstype})")

    return volumes


def _is_removable_mount(mountpoint: str) -> bool:
    """Mounts under the hot-plug roots are treated as removable."""
    if sys.platform == "darwin" and mountpoint.startswith("/Volumes/Macintosh HD"):
        return False
    return mountpoint.startswith(REMOVABLE_MOUNT_ROOTS)


def _total_bytes(root: str) -> int:
    """Total capacity of the volume, 0 if it cannot be queried."""
    try:
        return shutil.disk_usage(root).total
    except OSError as e:
        logger.debug(f"Could not read capacity of {root}: {e}")
        return 0
