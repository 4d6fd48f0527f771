from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Sequence
import logging
import time

import click

from ..errors import PathNotFoundError
from ..metadata.lookup import MetadataLookup, MutagenMetadataLookup
from ..models import Track
from ..utils.fs import iter_music_files
from ..utils.logging_helpers import format_summary

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ["flac", "mp3", "aac", "wav", "m4a", "ogg", "opus"]
PLAYLISTS_DIR_NAME = "Playlists"


@dataclass
class ScanResult:
    """Results from a music directory scan."""

    tracks: List[Track] = field(default_factory=list)
    files_seen: int = 0
    tagged: int = 0
    untagged: int = 0
    duration_seconds: float = 0.0


def _track_for(p: Path, base: Path, lookup: MetadataLookup, result: ScanResult) -> Track:
    absolute_path = str(p)
    relative_path = p.relative_to(base).as_posix()
    meta = lookup.lookup(absolute_path)
    if meta is None:
        result.untagged += 1
        logger.debug(f"{click.style('[untagged]', fg='yellow')} {p}")
        return Track(title=p.stem, relative_path=relative_path, absolute_path=absolute_path)

    result.tagged += 1
    logger.debug(
        f"{click.style('[tagged]', fg='green')} {p} | title='{meta.title}' artist='{meta.artist}' duration={meta.duration}"
    )
    return Track(
        title=meta.title or p.stem,
        artist=meta.artist,
        duration=meta.duration,
        relative_path=relative_path,
        absolute_path=absolute_path,
    )


def scan_library(
    root: str | Path,
    extensions: Iterable[str] | None = None,
    exclude_patterns: Sequence[str] | None = None,
    lookup: MetadataLookup | None = None,
    follow_symlinks: bool = False,
) -> ScanResult:
    """Walk ``root`` and build a Track for every audio file found.

    Directories named ``Playlists`` and directories matching an exclude
    pattern are not descended into. Tracks are sorted by absolute path and
    carry a ``relative_path`` relative to ``root``.

    Raises:
        PathNotFoundError: If ``root`` does not exist
    """
    base = Path(root).expanduser()
    if not base.is_dir():
        raise PathNotFoundError(str(root), what="Music directory")
    base = base.resolve()
    lookup = lookup or MutagenMetadataLookup()
    exts = list(extensions) if extensions else DEFAULT_EXTENSIONS

    result = ScanResult()
    start = time.time()
    logger.info(f"Scanning {base} ({', '.join(exts)})")

    for p in iter_music_files(
        base,
        exts,
        exclude_patterns=exclude_patterns or (),
        follow_symlinks=follow_symlinks,
        skip_dirs=(PLAYLISTS_DIR_NAME,),
    ):
        result.files_seen += 1
        result.tracks.append(_track_for(p, base, lookup, result))

    result.tracks.sort(key=lambda t: t.absolute_path)
    result.duration_seconds = time.time() - start
    logger.info(format_summary(
        found=result.files_seen,
        tagged=result.tagged,
        untagged=result.untagged,
        duration_seconds=result.duration_seconds,
        item_name="Library",
    ))
    return result


def scan_music_directory(
    root: str | Path,
    extensions: Iterable[str] | None = None,
    exclude_patterns: Sequence[str] | None = None,
    lookup: MetadataLookup | None = None,
) -> List[Track]:
    """List every audio track under ``root`` as Track values, sorted by absolute path."""
    return scan_library(root, extensions, exclude_patterns, lookup).tracks


__all__ = ["DEFAULT_EXTENSIONS", "ScanResult", "scan_library", "scan_music_directory"]
