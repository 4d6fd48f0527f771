"""Playlist parsers: M3U8/M3U, plain text and CSV.

Each parser turns the full text of a playlist file into an ordered list of
Track objects. Parsing is best-effort: a malformed line or row yields no
entry and the rest of the file is still read. References are resolved against
the playlist's own directory; entries whose file exists take their display
fields from the metadata lookup, the others fall back to whatever the
playlist text says (EXTINF or CSV columns) and finally to the file name.
"""
from __future__ import annotations
import csv
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple
import logging

from ..metadata.lookup import MetadataLookup, NullMetadataLookup
from ..models import PlaylistFormat, Track
from ..utils.path_format import is_absolute_reference, to_absolute_path, to_forward_slashes

logger = logging.getLogger(__name__)

HEADER = "#EXTM3U"
EXTINF = "#EXTINF:"
CSV_HEADER_PREFIX = "title"


@dataclass(frozen=True)
class TextHint:
    """Display fields carried by the playlist text for the next reference."""
    title: str = ""
    artist: str = ""
    duration: int = 0


NO_HINT = TextHint()


def parse_duration(text: str) -> int:
    """Whole seconds from a duration field; 0 when absent, malformed or negative."""
    text = text.strip()
    try:
        value = int(text)
    except ValueError:
        try:
            value = int(float(text))
        except (ValueError, OverflowError):
            return 0
    return value if value > 0 else 0


def split_display(display: str) -> Tuple[str, str]:
    """Split EXTINF display text into (artist, title) on the first " - "."""
    display = display.strip()
    artist, sep, title = display.partition(" - ")
    if not sep:
        return "", display
    return artist, title


def parse_extinf(info: str) -> TextHint:
    """Parse the part of an EXTINF line after ``#EXTINF:``."""
    duration_text, _, display = info.partition(",")
    artist, title = split_display(display)
    return TextHint(title=title, artist=artist, duration=parse_duration(duration_text))


def _lines(content: str) -> Iterator[str]:
    for raw in content.lstrip("\ufeff").split("\n"):
        yield raw.strip()


class TrackResolver:
    """Turns a raw playlist reference into a Track.

    Args:
        playlist_dir: Directory containing the playlist file
        lookup: Metadata lookup consulted for files that exist
        fallback_dirs: Extra base directories tried for relative references
            that do not exist relative to the playlist (e.g. the music root)
    """

    def __init__(self, playlist_dir: str | Path, lookup: MetadataLookup | None = None,
                 fallback_dirs: Sequence[str | Path] = ()):
        self.playlist_dir = str(playlist_dir)
        self.lookup = lookup or NullMetadataLookup()
        self.fallback_dirs = [str(d) for d in fallback_dirs if d]

    def _locate(self, reference: str) -> Tuple[str, bool]:
        absolute_path, existed = to_absolute_path(reference, self.playlist_dir)
        if existed or is_absolute_reference(reference):
            return absolute_path, existed
        for base in self.fallback_dirs:
            candidate, found = to_absolute_path(reference, base)
            if found:
                logger.debug(f"[re-resolved] {reference} -> {candidate}")
                return candidate, True
        return absolute_path, False

    def resolve(self, reference: str, hint: TextHint = NO_HINT) -> Track:
        relative_path = to_forward_slashes(reference)
        absolute_path, existed = self._locate(reference)
        stem = PurePosixPath(relative_path).stem or "Unknown"

        meta = self.lookup.lookup(absolute_path) if existed else None
        if meta is not None:
            return Track(
                title=meta.title or hint.title or stem,
                artist=meta.artist,
                duration=meta.duration or hint.duration,
                relative_path=relative_path,
                absolute_path=absolute_path,
            )

        if not existed:
            logger.debug(f"[missing] {reference} (resolved to {absolute_path})")
        return Track(
            title=hint.title or stem,
            artist=hint.artist,
            duration=hint.duration,
            relative_path=relative_path,
            absolute_path=absolute_path,
        )


# --- M3U8 / M3U ---------------------------------------------------------------

def _m3u_step(pending: TextHint, line: str, resolver: TrackResolver) -> Tuple[TextHint, Optional[Track]]:
    """Advance the EXTINF state machine by one line.

    Returns the pending hint for the next line and the track produced by this
    line, if any. The hint resets after every path line.
    """
    if not line or line == HEADER:
        return pending, None
    if line.startswith(EXTINF):
        return parse_extinf(line[len(EXTINF):]), None
    if line.startswith("#"):
        return pending, None
    return NO_HINT, resolver.resolve(line, pending)


def parse_m3u(content: str, playlist_dir: str | Path, lookup: MetadataLookup | None = None,
              fallback_dirs: Sequence[str | Path] = ()) -> List[Track]:
    """Parse extended or plain M3U/M3U8 content."""
    resolver = TrackResolver(playlist_dir, lookup, fallback_dirs)
    tracks: List[Track] = []
    pending = NO_HINT
    for line in _lines(content):
        pending, track = _m3u_step(pending, line, resolver)
        if track is not None:
            tracks.append(track)
    return tracks


# --- plain text ---------------------------------------------------------------

def _txt_entry(line: str, resolver: TrackResolver) -> Optional[Track]:
    if not line or line.startswith("#"):
        return None
    return resolver.resolve(line)


def parse_txt(content: str, playlist_dir: str | Path, lookup: MetadataLookup | None = None,
              fallback_dirs: Sequence[str | Path] = ()) -> List[Track]:
    """Parse one path per line; blank and ``#`` lines are ignored."""
    resolver = TrackResolver(playlist_dir, lookup, fallback_dirs)
    entries = (_txt_entry(line, resolver) for line in _lines(content))
    return [t for t in entries if t is not None]


# --- CSV ----------------------------------------------------------------------

def split_csv_line(line: str) -> List[str]:
    """Split one CSV record into raw fields (standard double-quote escaping)."""
    return next(csv.reader([line]), None) or [""]


def _csv_rows(content: str) -> Iterator[List[str]]:
    """Yield CSV rows; quoted fields may span lines.

    A malformed record (e.g. an unterminated quote) is dropped and reading
    restarts on the line after the one it began on.
    """
    lines = [line + "\n" for line in content.lstrip("\ufeff").split("\n")]
    start = 0
    while start < len(lines):
        reader = csv.reader(lines[start:], strict=True)
        consumed = 0
        try:
            for row in reader:
                consumed = reader.line_num
                yield row
            return
        except csv.Error as e:
            logger.debug(f"[skip] malformed CSV record at line {start + consumed + 1}: {e}")
            start += consumed + 1


def _csv_entry(fields: List[str], resolver: TrackResolver) -> Optional[Track]:
    if len(fields) < 4:
        logger.debug(f"[skip] CSV row with {len(fields)} field(s)")
        return None
    reference = fields[3].strip()
    if not reference:
        logger.debug("[skip] CSV row without a path")
        return None
    hint = TextHint(
        title=fields[0].strip(),
        artist=fields[1].strip(),
        duration=parse_duration(fields[2]),
    )
    return resolver.resolve(reference, hint)


def parse_csv(content: str, playlist_dir: str | Path, lookup: MetadataLookup | None = None,
              fallback_dirs: Sequence[str | Path] = ()) -> List[Track]:
    """Parse ``title,artist,duration_sec,path`` rows; the header row is optional."""
    resolver = TrackResolver(playlist_dir, lookup, fallback_dirs)
    tracks: List[Track] = []
    first = True
    for fields in _csv_rows(content):
        if not any(f.strip() for f in fields):
            continue
        if first:
            first = False
            if fields[0].strip().lower().startswith(CSV_HEADER_PREFIX):
                continue
        track = _csv_entry(fields, resolver)
        if track is not None:
            tracks.append(track)
    return tracks


Parser = Callable[..., List[Track]]

PARSERS: Dict[PlaylistFormat, Parser] = {
    PlaylistFormat.M3U8: parse_m3u,
    PlaylistFormat.M3U: parse_m3u,
    PlaylistFormat.TXT: parse_txt,
    PlaylistFormat.CSV: parse_csv,
}


def parse_playlist(content: str, playlist_dir: str | Path, fmt: PlaylistFormat | str,
                   lookup: MetadataLookup | None = None,
                   fallback_dirs: Iterable[str | Path] = ()) -> List[Track]:
    """Dispatch to the parser for ``fmt``; unrecognized formats are read as M3U."""
    try:
        parser = PARSERS[PlaylistFormat.parse(fmt)]
    except ValueError:
        parser = parse_m3u
    tracks = parser(content, playlist_dir, lookup, list(fallback_dirs))
    logger.debug(f"[parsed] {len(tracks)} track(s) from {fmt} content in {playlist_dir}")
    return tracks


__all__ = [
    "TextHint",
    "TrackResolver",
    "parse_duration",
    "split_display",
    "parse_extinf",
    "parse_m3u",
    "parse_txt",
    "parse_csv",
    "split_csv_line",
    "parse_playlist",
    "PARSERS",
]
