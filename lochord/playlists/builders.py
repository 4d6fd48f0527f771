"""Playlist builders: serialize an ordered track list to playlist text.

Every builder returns the complete file content terminated by a newline.
Track locations are written through :func:`to_playlist_path` using the path
mode from the save options.
"""
from __future__ import annotations
import csv
import io
from pathlib import Path
from typing import Callable, Dict, Sequence
import logging

from ..models import PlaylistFormat, PlaylistSaveOptions, Track
from ..utils.path_format import to_playlist_path

logger = logging.getLogger(__name__)

HEADER = "#EXTM3U"
CSV_HEADER = "title,artist,duration_sec,path"


def sanitize_filename(name: str) -> str:
    bad = '<>:"/\\|?*'
    for c in bad:
        name = name.replace(c, '_')
    return name.strip()


def _csv_writer(buf: io.StringIO):
    return csv.writer(buf, lineterminator="\n")


def csv_escape(field: str) -> str:
    """Quote a CSV field when it contains a comma, a quote or a line break."""
    if not field:
        return ""
    buf = io.StringIO()
    _csv_writer(buf).writerow([field])
    return buf.getvalue()[:-1]


def extinf_line(track: Track) -> str:
    display = f"{track.artist} - {track.title}" if track.artist else track.title
    display = display.replace("\r", " ").replace("\n", " ")
    return f"#EXTINF:{max(int(track.duration or 0), 0)},{display}"


def _location(track: Track, playlist_dir: str | Path, options: PlaylistSaveOptions) -> str:
    return to_playlist_path(
        track.absolute_path,
        playlist_dir,
        options.path_mode,
        music_root=options.music_root,
        path_prefix=options.path_prefix,
    )


def _finish(lines: list[str]) -> str:
    return "\n".join(lines) + "\n"


def build_m3u(tracks: Sequence[Track], playlist_dir: str | Path, options: PlaylistSaveOptions) -> str:
    """Extended M3U: header, then an EXTINF line and a path line per track."""
    lines = [HEADER]
    for t in tracks:
        lines.append(extinf_line(t))
        lines.append(_location(t, playlist_dir, options))
    return _finish(lines)


def build_txt(tracks: Sequence[Track], playlist_dir: str | Path, options: PlaylistSaveOptions) -> str:
    """One path per line, no metadata."""
    return _finish([_location(t, playlist_dir, options) for t in tracks])


def build_csv(tracks: Sequence[Track], playlist_dir: str | Path, options: PlaylistSaveOptions) -> str:
    buf = io.StringIO()
    writer = _csv_writer(buf)
    writer.writerow(CSV_HEADER.split(","))
    for t in tracks:
        writer.writerow([
            t.title,
            t.artist,
            str(max(int(t.duration or 0), 0)),
            _location(t, playlist_dir, options),
        ])
    return buf.getvalue()


Builder = Callable[[Sequence[Track], "str | Path", PlaylistSaveOptions], str]

BUILDERS: Dict[PlaylistFormat, Builder] = {
    PlaylistFormat.M3U8: build_m3u,
    PlaylistFormat.M3U: build_m3u,
    PlaylistFormat.TXT: build_txt,
    PlaylistFormat.CSV: build_csv,
}


def build_playlist(tracks: Sequence[Track], playlist_dir: str | Path,
                   options: PlaylistSaveOptions | None = None) -> str:
    """Serialize tracks in the format named by ``options`` (default: relative M3U8)."""
    options = options or PlaylistSaveOptions()
    content = BUILDERS[options.format](tracks, playlist_dir, options)
    logger.debug(
        f"[built] {options.format.value} tracks={len(tracks)} mode={options.path_mode.value} dir={playlist_dir}"
    )
    return content


__all__ = [
    "build_m3u",
    "build_txt",
    "build_csv",
    "build_playlist",
    "csv_escape",
    "extinf_line",
    "sanitize_filename",
    "BUILDERS",
]
