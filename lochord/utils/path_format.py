"""Utilities for formatting file paths in playlists.

Handles conversion between absolute paths and the textual references written
into playlist files (relative, absolute, relative to the music root, or
relative to a user-supplied prefix). Playlist references always use ``/``
separators so files stay portable between Windows and POSIX systems.
"""

from __future__ import annotations
from pathlib import Path
from typing import List, Tuple
import logging
import ntpath
import os

from ..models import PathMode

logger = logging.getLogger(__name__)


def to_forward_slashes(path: str | Path) -> str:
    return str(path).replace("\\", "/")


def _components(path: str | Path) -> List[str]:
    """Split a path into components, keeping the anchor as the first element.

    ``/music/a.mp3`` -> ``['/', 'music', 'a.mp3']``
    ``C:\\Music\\a.mp3`` -> ``['C:/', 'Music', 'a.mp3']``
    """
    text = to_forward_slashes(path)
    parts: List[str] = []
    drive, rest = ntpath.splitdrive(text)
    if drive:
        parts.append(drive + "/" if rest.startswith("/") else drive)
        rest = rest.lstrip("/")
    elif text.startswith("/"):
        parts.append("/")
    parts.extend(p for p in rest.split("/") if p and p != ".")
    return parts


def _same(a: str, b: str) -> bool:
    # Case-insensitive on Windows, exact elsewhere
    return os.path.normcase(a) == os.path.normcase(b)


def _strip_prefix(path_parts: List[str], root_parts: List[str]) -> List[str] | None:
    """Return the components of path below root, or None if it is not under root."""
    if not root_parts or len(path_parts) < len(root_parts):
        return None
    for a, b in zip(path_parts, root_parts):
        if not _same(a, b):
            return None
    return path_parts[len(root_parts):]


def compute_relative_path(from_dir: str | Path, to_file: str | Path) -> str:
    """Relative path from a directory to a file using ``..`` segments.

    The longest common run of leading components is dropped, one ``..`` is
    emitted for every remaining component of ``from_dir``, followed by the
    remaining components of ``to_file``.
    """
    from_parts = _components(from_dir)
    to_parts = _components(to_file)
    common = 0
    for a, b in zip(from_parts, to_parts):
        if not _same(a, b):
            break
        common += 1
    if common == 0:
        # Different anchors (e.g. other drive): nothing to walk up to
        return to_forward_slashes(to_file)
    ups = [".."] * (len(from_parts) - common)
    return "/".join(ups + to_parts[common:]) or "."


def to_playlist_path(
    absolute_path: str | Path,
    playlist_dir: str | Path,
    mode: PathMode | str = PathMode.RELATIVE,
    music_root: str | Path | None = None,
    path_prefix: str | None = None,
) -> str:
    r"""Format a track's absolute path for writing into a playlist.

    Args:
        absolute_path: Location of the audio file
        playlist_dir: Directory that will contain the playlist file
        mode: Path mode to apply
        music_root: Library root (used by relative-from-root and relative-from-prefix)
        path_prefix: Replacement for the music root (relative-from-prefix only)

    Returns:
        ``/``-separated path string. Never raises; in the worst case the
        absolute path is returned.

    Note:
        A missing or blank music_root degrades relative-from-root to plain
        relative behavior (relative to the playlist directory).
    """
    mode = PathMode.parse(mode)

    if mode is PathMode.ABSOLUTE:
        return to_forward_slashes(absolute_path)

    if mode in (PathMode.RELATIVE_FROM_ROOT, PathMode.RELATIVE_FROM_PREFIX):
        root = str(music_root).strip() if music_root is not None else ""
        if root:
            suffix = _strip_prefix(_components(absolute_path), _components(root))
            if suffix is not None:
                rel = "/".join(suffix)
                prefix = to_forward_slashes(path_prefix or "").strip().rstrip("/")
                if mode is PathMode.RELATIVE_FROM_PREFIX and prefix:
                    return f"{prefix}/{rel}" if rel else prefix
                return rel or "."
            logger.debug(f"[outside-root] {absolute_path} is not under {root}; writing relative path")
        else:
            logger.debug(f"No music root configured for {mode.value}; writing relative path")

    return compute_relative_path(playlist_dir, absolute_path)


def is_absolute_reference(reference: str) -> bool:
    """True for POSIX absolute paths and Windows drive or UNC paths."""
    text = to_forward_slashes(reference)
    if text.startswith("/"):
        return True
    drive, rest = ntpath.splitdrive(text)
    return bool(drive) and rest.startswith("/")


def to_absolute_path(raw_reference: str, playlist_dir: str | Path) -> Tuple[str, bool]:
    """Resolve a playlist reference to an absolute path.

    Absolute references are used as-is; relative ones are joined onto
    ``playlist_dir`` (backslashes are treated as separators). Canonicalization
    doubles as the existence check.

    Returns:
        (path, existed): the canonical path and True when the file exists,
        otherwise the joined, non-canonical path and False.
    """
    reference = raw_reference.strip()
    if is_absolute_reference(reference):
        joined = reference
    else:
        if os.sep == "/":
            reference = to_forward_slashes(reference)
        joined = os.path.join(str(playlist_dir), reference)

    try:
        return str(Path(joined).resolve(strict=True)), True
    except (OSError, RuntimeError):
        return joined, False


__all__ = [
    "to_playlist_path",
    "to_absolute_path",
    "compute_relative_path",
    "is_absolute_reference",
    "to_forward_slashes",
]
