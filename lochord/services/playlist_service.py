"""Playlist service: file-level playlist operations.

Handles operations on individual playlist files:
- List playlists under a music root
- Load a playlist into Track values
- Save, save-as (format change), create and delete playlist files

Every call works directly against the filesystem; nothing is cached between
calls.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Sequence

import click

from ..errors import PlaylistExistsError, PlaylistIOError
from ..metadata.lookup import MetadataLookup, MutagenMetadataLookup
from ..models import PlaylistFormat, PlaylistSaveOptions, Track
from ..playlists.builders import build_playlist, sanitize_filename
from ..playlists.index import PlaylistIndexSettings, list_playlists as _index_playlists
from ..playlists.parsers import parse_playlist

logger = logging.getLogger(__name__)


def resolve_playlist_dir(music_root: str | Path, configured_dir: str | Path | None = None) -> Path:
    """Return the configured playlist directory, else ``<music_root>/Playlists``."""
    if configured_dir:
        return Path(configured_dir).expanduser()
    return Path(music_root).expanduser() / PlaylistIndexSettings().default_directory_name


def list_playlists(
    music_root: str | Path,
    playlist_dir: str | Path | None = None,
    settings: PlaylistIndexSettings | None = None,
) -> List[str]:
    """Absolute paths of every playlist under ``music_root`` (see :mod:`lochord.playlists.index`)."""
    return _index_playlists(music_root, playlist_dir, settings)


def load_playlist(
    path: str | Path,
    lookup: MetadataLookup | None = None,
    music_root: str | Path | None = None,
) -> List[Track]:
    """Read and parse a playlist file.

    The format is chosen from the file extension; unknown extensions are read
    as M3U. Relative references that do not exist next to the playlist are
    retried against ``music_root`` when one is given.

    Args:
        path: Playlist file
        lookup: Metadata lookup for existing files (default: mutagen tags)
        music_root: Optional library root for re-resolving relative references

    Returns:
        Tracks in file order

    Raises:
        PlaylistIOError: If the file cannot be read
    """
    p = Path(path)
    try:
        content = p.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as e:
        raise PlaylistIOError("read", str(p), e) from e

    fallback_dirs = [str(music_root)] if music_root else []
    tracks = parse_playlist(
        content,
        str(p.parent),
        PlaylistFormat.from_path(p),
        lookup=lookup or MutagenMetadataLookup(),
        fallback_dirs=fallback_dirs,
    )
    logger.debug(f"{click.style('[loaded]', fg='cyan')} {p} tracks={len(tracks)}")
    return tracks


def save_playlist(
    path: str | Path,
    tracks: Sequence[Track],
    options: PlaylistSaveOptions | None = None,
) -> bool:
    """Serialize ``tracks`` and write them to ``path``, creating parent directories.

    The file is written as given; the format comes from ``options`` (default
    relative M3U8), not from the extension of ``path``.

    Raises:
        PlaylistIOError: If the directory cannot be created or the file cannot be written
    """
    p = Path(path)
    options = options or PlaylistSaveOptions()
    content = build_playlist(tracks, str(p.parent.resolve()), options)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
    except OSError as e:
        raise PlaylistIOError("write", str(p), e) from e
    logger.info(
        f"{click.style('[saved]', fg='green')} {p} tracks={len(tracks)} "
        f"format={options.format.value} mode={options.path_mode.value}"
    )
    return True


def save_playlist_as(
    path: str | Path,
    tracks: Sequence[Track],
    options: PlaylistSaveOptions | None = None,
) -> str:
    """Save under the same stem with the extension of ``options.format``.

    When the extension changes, the previous file is removed afterwards; a
    failed removal is logged and does not fail the save.

    Returns:
        Path of the written file
    """
    options = options or PlaylistSaveOptions()
    old = Path(path)
    new = old.with_suffix(options.format.extension)
    save_playlist(new, tracks, options)
    if new != old and old.exists():
        try:
            old.unlink()
            logger.debug(f"{click.style('[replaced]', fg='yellow')} {old} -> {new.name}")
        except OSError as e:
            logger.warning(f"Saved {new} but could not remove {old}: {e}")
    return str(new)


def create_playlist(
    music_root: str | Path,
    name: str,
    options: PlaylistSaveOptions | None = None,
    playlist_dir: str | Path | None = None,
) -> str:
    """Create an empty playlist named ``name`` in the playlist directory.

    Raises:
        ValueError: If ``name`` is blank
        PlaylistExistsError: If a playlist with that file name already exists
        PlaylistIOError: If the file cannot be written
    """
    clean = sanitize_filename(name or "")
    if not clean:
        raise ValueError("Playlist name must not be empty")
    options = options or PlaylistSaveOptions(music_root=str(music_root))
    target = resolve_playlist_dir(music_root, playlist_dir) / f"{clean}{options.format.extension}"
    if target.exists():
        raise PlaylistExistsError(str(target))
    save_playlist(target, [], options)
    return str(target)


def delete_playlist(path: str | Path) -> bool:
    """Remove a playlist file; succeeds if it is already absent.

    Raises:
        PlaylistIOError: If the file exists but cannot be removed
    """
    p = Path(path)
    try:
        p.unlink()
    except FileNotFoundError:
        logger.debug(f"[delete] {p} already absent")
        return True
    except OSError as e:
        raise PlaylistIOError("delete", str(p), e) from e
    logger.info(f"{click.style('[deleted]', fg='red')} {p}")
    return True


__all__ = [
    "resolve_playlist_dir",
    "list_playlists",
    "load_playlist",
    "save_playlist",
    "save_playlist_as",
    "create_playlist",
    "delete_playlist",
]
