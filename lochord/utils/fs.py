from __future__ import annotations
from pathlib import Path
from typing import Iterable, Iterator, Sequence, Set, Union
import fnmatch
import logging
import os

logger = logging.getLogger(__name__)


def normalize_extensions(extensions: Iterable[str]) -> Set[str]:
    """Lower-case extensions without the leading dot ('.MP3' -> 'mp3')."""
    return {e.lower().lstrip('.') for e in extensions if e and e.strip('.')}


def is_excluded(name: str, patterns: Sequence[str]) -> bool:
    """True when a name contains a pattern (case-insensitive) or matches it as a glob."""
    lowered = name.lower()
    for pat in patterns:
        if not pat:
            continue
        if pat.lower() in lowered or fnmatch.fnmatch(lowered, pat.lower()):
            return True
    return False


def iter_music_files(
    root: Union[Path, str],
    extensions: Iterable[str],
    exclude_patterns: Sequence[str] = (),
    follow_symlinks: bool = False,
    skip_dirs: Sequence[str] = (),
) -> Iterator[Path]:
    """Recursively yield files under ``root`` whose extension is allowed.

    Directories whose name is in ``skip_dirs`` or matches an exclude pattern are
    not descended into. Unreadable directories are skipped silently; a missing
    root yields nothing.
    """
    exts = normalize_extensions(extensions)
    base = Path(root)
    if not base.is_dir():
        return

    def _on_error(err: OSError) -> None:
        logger.debug(f"[io-error] {getattr(err, 'filename', '')}: {err}")

    for dirpath, dirnames, filenames in os.walk(base, onerror=_on_error, followlinks=follow_symlinks):
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in skip_dirs and not is_excluded(d, exclude_patterns)
        )
        for name in sorted(filenames):
            p = Path(dirpath) / name
            if not follow_symlinks and p.is_symlink():
                continue
            if p.suffix.lower().lstrip('.') in exts:
                yield p


__all__ = ["iter_music_files", "normalize_extensions", "is_excluded"]
