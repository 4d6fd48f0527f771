"""Unit tests for filesystem traversal helpers."""

from __future__ import annotations
import os
from pathlib import Path

import pytest

from lochord.utils.fs import is_excluded, iter_music_files, normalize_extensions


def _names(root: Path, paths) -> list[str]:
    return [p.relative_to(root).as_posix() for p in paths]


def test_normalize_extensions():
    assert normalize_extensions(['.MP3', 'flac', '', '.']) == {'mp3', 'flac'}


@pytest.mark.parametrize("name,patterns,expected", [
    ("Backup 2020", ["backup"], True),
    ("Live.old", ["*.old"], True),
    ("Albums", ["backup", "*.old"], False),
    ("Albums", [""], False),
])
def test_is_excluded(name, patterns, expected):
    assert is_excluded(name, patterns) is expected


class TestIterMusicFiles:

    def test_filters_by_extension_case_insensitive(self, music_root: Path, make_file):
        make_file(music_root / "a.MP3")
        make_file(music_root / "b.flac")
        make_file(music_root / "cover.jpg")
        assert _names(music_root, iter_music_files(music_root, ["mp3", ".flac"])) == ["a.MP3", "b.flac"]

    def test_recurses_and_skips_directories(self, music_root: Path, make_file):
        make_file(music_root / "x" / "y" / "deep.mp3")
        make_file(music_root / "Playlists" / "skip.mp3")
        make_file(music_root / "Old Backup" / "skip.mp3")
        found = iter_music_files(music_root, ["mp3"], exclude_patterns=["backup"], skip_dirs=["Playlists"])
        assert _names(music_root, found) == ["x/y/deep.mp3"]

    def test_missing_root_yields_nothing(self, tmp_path: Path):
        assert list(iter_music_files(tmp_path / "absent", ["mp3"])) == []

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlinked_files_skipped_by_default(self, music_root: Path, make_file, tmp_path: Path):
        real = make_file(tmp_path / "elsewhere" / "real.mp3")
        try:
            (music_root / "link.mp3").symlink_to(real)
        except OSError:
            pytest.skip("cannot create symlinks")
        assert list(iter_music_files(music_root, ["mp3"])) == []
        assert _names(music_root, iter_music_files(music_root, ["mp3"], follow_symlinks=True)) == ["link.mp3"]

