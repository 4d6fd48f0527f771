"""Domain model types for playlists and tracks.

These dataclasses are plain values: they are rebuilt from disk on every load
and carry no identity beyond their paths.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class PathMode(str, Enum):
    """How a track location is written into a saved playlist."""

    RELATIVE = "relative"
    ABSOLUTE = "absolute"
    RELATIVE_FROM_ROOT = "relative-from-root"
    RELATIVE_FROM_PREFIX = "relative-from-prefix"

    @classmethod
    def parse(cls, value: str | PathMode | None) -> PathMode:
        """Accept enum members, their values, or underscore spellings."""
        if value is None:
            return cls.RELATIVE
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower().replace("_", "-"))


class PlaylistFormat(str, Enum):
    """On-disk playlist formats, valued by their file extension."""

    M3U8 = "m3u8"
    M3U = "m3u"
    TXT = "txt"
    CSV = "csv"

    @classmethod
    def parse(cls, value: str | PlaylistFormat | None) -> PlaylistFormat:
        if value is None:
            return cls.M3U8
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower().lstrip("."))

    @classmethod
    def from_path(cls, path: str | Path) -> PlaylistFormat:
        """Map a playlist file extension to its format (unknown -> M3U8)."""
        suffix = Path(path).suffix.lower().lstrip(".")
        try:
            return cls(suffix)
        except ValueError:
            return cls.M3U8

    @property
    def extension(self) -> str:
        return f".{self.value}"


@dataclass
class TrackMetadata:
    """Display fields read from a file's embedded tags."""
    title: str
    artist: str = ""
    duration: int = 0


@dataclass
class Track:
    """One playlist entry.

    ``absolute_path`` is always populated, even for files that do not exist.
    ``relative_path`` is the reference as written in the playlist (``/``-separated).
    ``duration`` is whole seconds, 0 when unknown.
    """
    title: str
    artist: str = ""
    duration: int = 0
    relative_path: str = ""
    absolute_path: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase shape used by the desktop front end."""
        return {
            "title": self.title,
            "artist": self.artist,
            "duration": self.duration,
            "relativePath": self.relative_path,
            "absolutePath": self.absolute_path,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Track:
        """Build a Track from camelCase or snake_case keys."""
        def pick(camel: str, snake: str, default: Any = "") -> Any:
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        try:
            duration = int(data.get("duration") or 0)
        except (TypeError, ValueError):
            duration = 0
        return cls(
            title=str(data.get("title") or ""),
            artist=str(data.get("artist") or ""),
            duration=max(duration, 0),
            relative_path=str(pick("relativePath", "relative_path") or ""),
            absolute_path=str(pick("absolutePath", "absolute_path") or ""),
        )


_AUDIO_TAG_KEYS = {
    "album_artist": "albumArtist",
    "track_number": "trackNumber",
    "total_tracks": "totalTracks",
    "disc_number": "discNumber",
    "total_discs": "totalDiscs",
    "cover_art": "coverArt",
}


@dataclass
class AudioTags:
    """Editable tag fields of an audio file.

    Integer fields use 0 for "unset". ``cover_art`` is a ``data:<mime>;base64,``
    URI, or an empty string when the file carries no front cover.
    """
    title: str = ""
    artist: str = ""
    album_artist: str = ""
    album: str = ""
    genre: str = ""
    year: int = 0
    track_number: int = 0
    total_tracks: int = 0
    disc_number: int = 0
    total_discs: int = 0
    composer: str = ""
    comment: str = ""
    lyrics: str = ""
    bpm: int = 0
    copyright: str = ""
    publisher: str = ""
    isrc: str = ""
    cover_art: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {_AUDIO_TAG_KEYS.get(k, k): v for k, v in asdict(self).items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AudioTags:
        values: Dict[str, Any] = {}
        for name, default in asdict(cls()).items():
            camel = _AUDIO_TAG_KEYS.get(name, name)
            raw = data.get(camel, data.get(name, default))
            if isinstance(default, int):
                try:
                    raw = int(raw or 0)
                except (TypeError, ValueError):
                    raw = 0
            else:
                raw = "" if raw is None else str(raw)
            values[name] = raw
        return cls(**values)


@dataclass
class PlaylistSaveOptions:
    """Options controlling how a playlist is serialized.

    ``music_root`` is needed by ``relative-from-root`` and ``relative-from-prefix``;
    without it those modes write paths relative to the playlist directory.
    """
    path_mode: PathMode = PathMode.RELATIVE
    music_root: Optional[str] = None
    format: PlaylistFormat = PlaylistFormat.M3U8
    path_prefix: Optional[str] = None

    def __post_init__(self):
        self.path_mode = PathMode.parse(self.path_mode)
        self.format = PlaylistFormat.parse(self.format)

    @classmethod
    def from_config(cls, playlists_cfg: Dict[str, Any], music_root: str | None = None) -> PlaylistSaveOptions:
        """Create options from the ``playlists`` config section."""
        return cls(
            path_mode=playlists_cfg.get("path_mode") or PathMode.RELATIVE,
            music_root=music_root,
            format=playlists_cfg.get("save_format") or PlaylistFormat.M3U8,
            path_prefix=playlists_cfg.get("path_prefix"),
        )

    def with_format(self, fmt: str | PlaylistFormat) -> PlaylistSaveOptions:
        return replace(self, format=PlaylistFormat.parse(fmt))

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["path_mode"] = self.path_mode.value
        data["format"] = self.format.value
        return data


@dataclass
class Playlist:
    """A playlist file with its tracks in presentation order."""
    name: str
    path: str
    tracks: List[Track] = field(default_factory=list)
    is_dirty: bool = False

    @classmethod
    def from_path(cls, path: str | Path, tracks: List[Track] | None = None) -> Playlist:
        from .utils.formatters import playlist_name_from_path

        return cls(name=playlist_name_from_path(str(path)), path=str(path), tracks=list(tracks or []))

    def add_track(self, track: Track) -> bool:
        """Append a track unless one with the same absolute path is present."""
        if any(t.absolute_path == track.absolute_path for t in self.tracks):
            return False
        self.tracks.append(track)
        self.is_dirty = True
        return True

    def remove_track(self, absolute_path: str) -> int:
        """Remove every track with this absolute path, returning how many went."""
        before = len(self.tracks)
        self.tracks = [t for t in self.tracks if t.absolute_path != absolute_path]
        removed = before - len(self.tracks)
        if removed:
            self.is_dirty = True
        return removed

    def reorder(self, tracks: List[Track]) -> None:
        self.tracks = list(tracks)
        self.is_dirty = True

    @property
    def total_duration(self) -> int:
        return sum(t.duration for t in self.tracks)


__all__ = [
    "PathMode",
    "PlaylistFormat",
    "TrackMetadata",
    "Track",
    "AudioTags",
    "PlaylistSaveOptions",
    "Playlist",
]
