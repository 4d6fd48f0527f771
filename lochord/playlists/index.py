"""Playlist directory index: discover playlist files under a music root.

M3U/M3U8 files are picked up anywhere below the music root. The dedicated
playlist directory is scanned for every supported format; when none is
configured, ``<music root>/Playlists`` is used for the formats that only live
there (TXT and CSV) and is created on first use.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Sequence
import logging

from ..utils.fs import iter_music_files

logger = logging.getLogger(__name__)

Scanner = Callable[..., Iterable[Path]]


@dataclass
class PlaylistIndexSettings:
    """Extension allow-lists used when discovering playlists."""
    root_extensions: List[str] = field(default_factory=lambda: ["m3u", "m3u8"])
    directory_extensions: List[str] = field(default_factory=lambda: ["m3u8", "m3u", "txt", "csv"])
    default_directory_extensions: List[str] = field(default_factory=lambda: ["txt", "csv"])
    default_directory_name: str = "Playlists"

    @classmethod
    def from_config(cls, playlists_cfg: Dict[str, Any]) -> PlaylistIndexSettings:
        defaults = cls()
        return cls(
            root_extensions=list(playlists_cfg.get("root_extensions") or defaults.root_extensions),
            directory_extensions=list(playlists_cfg.get("directory_extensions") or defaults.directory_extensions),
            default_directory_extensions=list(
                playlists_cfg.get("default_directory_extensions") or defaults.default_directory_extensions
            ),
            default_directory_name=playlists_cfg.get("default_directory_name") or defaults.default_directory_name,
        )


def _scan(scanner: Scanner, root: Path, extensions: Sequence[str]) -> List[str]:
    try:
        return [str(p) for p in scanner(root, extensions)]
    except OSError as e:
        logger.warning(f"Failed to scan {root} for playlists: {e}")
        return []


def list_playlists(
    music_root: str | Path,
    playlist_dir: str | Path | None = None,
    settings: PlaylistIndexSettings | None = None,
    scanner: Scanner = iter_music_files,
) -> List[str]:
    """Return absolute paths of playlist files, sorted and de-duplicated.

    Args:
        music_root: Library root, scanned recursively for M3U/M3U8
        playlist_dir: Dedicated playlist directory (all formats); when omitted
            ``<music_root>/Playlists`` is scanned for TXT/CSV only
        settings: Extension allow-lists
        scanner: Directory traversal, ``scanner(root, extensions)``

    Never raises: unreadable or missing directories contribute nothing.
    """
    settings = settings or PlaylistIndexSettings()
    root = Path(music_root).expanduser().resolve()
    found = _scan(scanner, root, settings.root_extensions)

    if playlist_dir:
        extra_dir = Path(playlist_dir).expanduser().resolve()
        extensions = settings.directory_extensions
    else:
        extra_dir = root / settings.default_directory_name
        extensions = settings.default_directory_extensions
        if root.is_dir() and not extra_dir.exists():
            try:
                extra_dir.mkdir(parents=True, exist_ok=True)
                logger.debug(f"[created] {extra_dir}")
            except OSError as e:
                logger.warning(f"Failed to create playlist directory {extra_dir}: {e}")

    found.extend(_scan(scanner, extra_dir, extensions))
    playlists = sorted(set(found))
    logger.debug(f"[indexed] {len(playlists)} playlist(s) under {root}")
    return playlists


__all__ = ["PlaylistIndexSettings", "list_playlists"]
