"""Metadata lookup interface used to refresh playlist entries.

Parsers and the library scan receive a lookup object instead of calling the
tag codec directly, so tests can inject a deterministic fake and callers can
opt out of tag reads entirely.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
import logging

from ..models import TrackMetadata

logger = logging.getLogger(__name__)


class MetadataLookup(ABC):
    @abstractmethod
    def lookup(self, absolute_path: str) -> Optional[TrackMetadata]:
        """Return (title, artist, duration) for an existing file, or None if unavailable."""


class MutagenMetadataLookup(MetadataLookup):
    """Reads title, artist and duration from embedded tags via mutagen."""

    def lookup(self, absolute_path: str) -> Optional[TrackMetadata]:
        from .tags import read_track_metadata

        if not Path(absolute_path).is_file():
            return None
        return read_track_metadata(absolute_path)


class NullMetadataLookup(MetadataLookup):
    """Never reads files; every entry keeps its textual playlist metadata."""

    def lookup(self, absolute_path: str) -> Optional[TrackMetadata]:
        return None


__all__ = ["MetadataLookup", "MutagenMetadataLookup", "NullMetadataLookup"]
