"""Pytest fixtures shared by unit and integration tests.

Tests pass configuration dicts and lookups explicitly rather than relying on
environment variables, .env files or real audio tags.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Optional
import wave

import pytest

from lochord.metadata.lookup import MetadataLookup
from lochord.models import TrackMetadata


class FakeLookup(MetadataLookup):
    """Deterministic lookup keyed by absolute path (resolved)."""

    def __init__(self, entries: Dict[str, TrackMetadata] | None = None):
        self.entries = {str(Path(k).resolve()): v for k, v in (entries or {}).items()}
        self.calls: list[str] = []

    def lookup(self, absolute_path: str) -> Optional[TrackMetadata]:
        self.calls.append(absolute_path)
        return self.entries.get(str(Path(absolute_path).resolve()))


@pytest.fixture
def fake_lookup():
    return FakeLookup


@pytest.fixture
def music_root(tmp_path: Path) -> Path:
    """Empty music library root (resolved so path comparisons are stable)."""
    root = tmp_path.resolve() / "music"
    root.mkdir()
    return root


def touch(path: Path, data: bytes = b"audio") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


@pytest.fixture
def make_file():
    """Create a file (and its parents) and return its path."""
    return touch


@pytest.fixture
def test_config(music_root: Path) -> Dict[str, Any]:
    """Provide a minimal test configuration as a dict.

    Tests should pass this to the CLI via ``obj=`` rather than setting
    environment variables.
    """
    return {
        'log_level': 'DEBUG',
        'library': {
            'root': str(music_root),
            'extensions': ['flac', 'mp3', 'aac', 'wav', 'm4a', 'ogg', 'opus'],
            'exclude_patterns': [],
            'follow_symlinks': False,
        },
        'playlists': {
            'directory': None,
            'path_mode': 'relative',
            'path_prefix': None,
            'save_format': 'm3u8',
            'root_extensions': ['m3u', 'm3u8'],
            'directory_extensions': ['m3u8', 'm3u', 'txt', 'csv'],
            'default_directory_extensions': ['txt', 'csv'],
            'default_directory_name': 'Playlists',
        },
    }


def write_wav(path: Path, seconds: int = 1, rate: int = 8000) -> Path:
    """Write a silent mono 16-bit WAV file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(rate)
        w.writeframes(b"\x00\x00" * rate * seconds)
    return path


@pytest.fixture
def make_wav():
    return write_wav
