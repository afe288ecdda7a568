"""Scratch file handling for staged uploads."""

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger("disk_harvester.scratch")


@contextmanager
def scratch_file(
    suffix: str = "",
    prefix: str = "disk-harvester-",
    directory: Optional[Path] = None,
) -> Iterator[Path]:
    """
    Provide a temporary file path that is removed on every exit path.

    The file is created empty; the caller writes to it and reads it back
    inside the ``with`` block.

    Args:
        suffix: File name suffix (e.g. ".json")
        prefix: File name prefix
        directory: Optional directory for the file (defaults to system temp)

    Yields:
        Path to the scratch file
    """
    fd, name = tempfile.mkstemp(suffix=suffix, prefix=prefix, dir=directory)
    os.close(fd)
    path = Path(name)
    logger.debug(f"Created scratch file {path}")
    try:
        yield path
    finally:
        try:
            path.unlink()
            logger.debug(f"Removed scratch file {path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove scratch file {path}: {e}")
