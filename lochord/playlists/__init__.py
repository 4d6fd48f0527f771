"""Playlist interchange: format parsers, builders and the directory index."""

from .builders import build_playlist, csv_escape
from .index import PlaylistIndexSettings, list_playlists
from .parsers import parse_playlist, split_csv_line

__all__ = [
    "build_playlist",
    "csv_escape",
    "parse_playlist",
    "split_csv_line",
    "list_playlists",
    "PlaylistIndexSettings",
]
