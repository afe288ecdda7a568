"""Local filesystem walker.

Recursively lists files and directories under a walk root without crossing
into other mounted filesystems. Hidden and system entries are included.
"""

import logging
import os
import stat
from typing import Iterator, Tuple

logger = logging.getLogger("disk_harvester.walker")


def _log_walk_error(error: OSError) -> None:
    """os.walk error callback: unreadable directories are skipped."""
    if isinstance(error, PermissionError):
        logger.warning(f"Permission denied accessing {error.filename}")
    else:
        logger.warning(f"Error scanning {error.filename}: {error}")


def walk_entries(root: str) -> Iterator[Tuple[str, bool]]:
    """
    Walk every entry below a root.

    The root itself is not yielded. A root that is a regular file yields
    only that file. A missing root yields nothing.

    Args:
        root: Directory (or file) to walk

    Yields:
        (absolute path, is_directory) tuples in walk order
    """
    if os.path.isfile(root):
        yield root, False
        return

    if not os.path.isdir(root):
        logger.warning(f"Path does not exist: {root}")
        return

    try:
        root_device = os.stat(root).st_dev
    except OSError as e:
        logger.warning(f"Cannot stat {root}: {e}")
        return

    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        kept = []
        for dirname in dirnames:
            full = os.path.join(dirpath, dirname)
            if os.path.islink(full):
                # Directory symlinks are recorded but not followed
                yield full, True
                continue
            try:
                if os.stat(full).st_dev != root_device:
                    logger.debug(f"Not crossing into mounted filesystem {full}")
                    continue
            except OSError as e:
                logger.warning(f"Cannot stat {full}: {e}")
                continue
            kept.append(dirname)
            yield full, True
        dirnames[:] = kept

        for filename in filenames:
            yield os.path.join(dirpath, filename), False


def _is_uploadable(path: str) -> bool:
    """Regular files and symlinks to regular files."""
    try:
        mode = os.stat(path).st_mode
    except OSError:
        # Broken links and vanished files are attempted so the failure is recorded
        return True
    if stat.S_ISREG(mode):
        return True
    logger.info(f"Skipping special file {path}")
    return False


def walk_files(root: str) -> Iterator[str]:
    """
    Walk every regular file below a root.

    Directories and special files (FIFOs, sockets, device nodes) are
    skipped; the metadata walk still records them.

    Args:
        root: Directory (or file) to walk

    Yields:
        Absolute file paths
    """
    for path, is_dir in walk_entries(root):
        if not is_dir and _is_uploadable(path):
            yield path
