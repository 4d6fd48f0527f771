"""Typed configuration dataclasses for lochord.

Provides strongly-typed configuration objects mirroring the dict produced by
:func:`lochord.config.load_config`.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict, fields
from typing import List, Dict, Any, Optional

from .models import PlaylistSaveOptions
from .playlists.index import PlaylistIndexSettings


def _known(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in names}


@dataclass
class LibraryConfig:
    """Local music library configuration."""
    root: Optional[str] = None
    extensions: List[str] = field(default_factory=lambda: ["flac", "mp3", "aac", "wav", "m4a", "ogg", "opus"])
    exclude_patterns: List[str] = field(default_factory=list)
    follow_symlinks: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PlaylistConfig:
    """Playlist discovery and save configuration."""
    directory: Optional[str] = None
    path_mode: str = "relative"
    path_prefix: Optional[str] = None
    save_format: str = "m3u8"
    root_extensions: List[str] = field(default_factory=lambda: ["m3u", "m3u8"])
    directory_extensions: List[str] = field(default_factory=lambda: ["m3u8", "m3u", "txt", "csv"])
    default_directory_extensions: List[str] = field(default_factory=lambda: ["txt", "csv"])
    default_directory_name: str = "Playlists"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def index_settings(self) -> PlaylistIndexSettings:
        """Extension allow-lists for the directory index."""
        return PlaylistIndexSettings.from_config(self.to_dict())

    def save_options(self, music_root: str | None = None) -> PlaylistSaveOptions:
        return PlaylistSaveOptions.from_config(self.to_dict(), music_root)


@dataclass
class AppConfig:
    """Root application configuration with all subsections."""
    log_level: str = "INFO"
    library: LibraryConfig = field(default_factory=LibraryConfig)
    playlists: PlaylistConfig = field(default_factory=PlaylistConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "log_level": self.log_level,
            "library": self.library.to_dict(),
            "playlists": self.playlists.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppConfig:
        """Create typed config from the dictionary returned by load_config.

        Unknown keys are ignored.
        """
        return cls(
            log_level=data.get("log_level", "INFO"),
            library=LibraryConfig(**_known(LibraryConfig, data.get("library", {}))),
            playlists=PlaylistConfig(**_known(PlaylistConfig, data.get("playlists", {}))),
        )


__all__ = ["AppConfig", "LibraryConfig", "PlaylistConfig"]
