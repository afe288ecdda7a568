"""Volume selection strategies.

A run either processes every fixed volume (``IncludeAll``) or only the
volumes that own at least one inclusion path (``Filtered``).
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from disk_harvester.exceptions import NoMatchingDisksError
from disk_harvester.local.volumes import VolumeInfo

logger = logging.getLogger("disk_harvester.selection")


@dataclass(frozen=True)
class IncludeAll:
    """Process every file on every fixed volume."""

    def matches(self, volume: VolumeInfo) -> bool:
        return True

    def roots_for(self, volume: VolumeInfo, volumes: Sequence[VolumeInfo] = ()) -> List[str]:
        """Walk the whole volume. Nested mounts are left to their own volume."""
        return [volume.identifier]

    def select(self, volumes: Sequence[VolumeInfo]) -> List[VolumeInfo]:
        """
        Return all volumes unchanged.

        Raises:
            NoMatchingDisksError: If there are no volumes at all
        """
        selected = list(volumes)
        if not selected:
            raise NoMatchingDisksError()
        logger.info(f"Selected all {len(selected)} volume(s)")
        return selected


@dataclass(frozen=True)
class Filtered:
    """
    Process only the given inclusion paths.

    A volume is kept when an inclusion string starts with the volume
    identifier. This is a plain string prefix test: inclusions must use
    the same drive-letter casing and separators as the volume identifiers.
    """
    inclusions: tuple = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "inclusions", tuple(self.inclusions))

    def matches(self, volume: VolumeInfo) -> bool:
        return any(inc.startswith(volume.identifier) for inc in self.inclusions)

    def owner_of(self, inclusion: str, volumes: Sequence[VolumeInfo]) -> Optional[VolumeInfo]:
        """Volume with the longest identifier that prefixes the inclusion."""
        matching = [v for v in volumes if inclusion.startswith(v.identifier)]
        return max(matching, key=lambda v: len(v.identifier), default=None)

    def roots_for(self, volume: VolumeInfo, volumes: Sequence[VolumeInfo] = ()) -> List[str]:
        """
        Inclusion paths walked for the volume, in caller order.

        With nested mounts an inclusion prefix-matches several volumes;
        it is walked only from the one with the longest identifier among
        ``volumes``, so each file is visited once.

        Args:
            volume: Volume to get walk roots for
            volumes: All selected volumes (defaults to just ``volume``)
        """
        candidates = list(volumes) or [volume]
        roots = []
        for inc in self.inclusions:
            owner = self.owner_of(inc, candidates)
            if owner is not None and owner.identifier == volume.identifier:
                roots.append(inc)
        return roots

    def select(self, volumes: Sequence[VolumeInfo]) -> List[VolumeInfo]:
        """
        Keep volumes owning at least one inclusion.

        Raises:
            NoMatchingDisksError: If no volume matches
        """
        selected = [v for v in volumes if self.matches(v)]
        for v in volumes:
            if v not in selected:
                logger.debug(f"Volume {v.identifier} has no matching inclusion")
        if not selected:
            raise NoMatchingDisksError(self.inclusions)
        logger.info(
            f"Selected {len(selected)} of {len(volumes)} volume(s): "
            f"{', '.join(v.identifier for v in selected)}"
        )
        return selected


Selection = Union[IncludeAll, Filtered]


def make_selection(include_all: bool, inclusions: Sequence[str] = ()) -> Selection:
    """
    Build the selection strategy for a run.

    Args:
        include_all: Process every fixed volume, ignoring inclusions
        inclusions: Path prefixes to process when include_all is False

    Returns:
        IncludeAll or Filtered strategy
    """
    if include_all:
        if inclusions:
            logger.info("All disks requested; ignoring inclusions")
        return IncludeAll()
    return Filtered(tuple(inclusions or ()))
