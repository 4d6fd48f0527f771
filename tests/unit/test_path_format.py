"""Unit tests for playlist path formatting and resolution."""

from __future__ import annotations
import os
from pathlib import Path

import pytest

from lochord.models import PathMode
from lochord.utils.path_format import (
    compute_relative_path,
    is_absolute_reference,
    to_absolute_path,
    to_playlist_path,
)


class TestComputeRelativePath:

    def test_sibling_directory(self):
        assert compute_relative_path("/music/Playlists", "/music/tracks/a.mp3") == "../tracks/a.mp3"

    def test_same_directory(self):
        assert compute_relative_path("/music", "/music/a.mp3") == "a.mp3"

    def test_deeper_playlist_directory(self):
        assert compute_relative_path("/music/lists/2024", "/music/a.mp3") == "../../a.mp3"

    def test_windows_paths(self):
        assert compute_relative_path("C:\\Music\\Playlists", "C:\\Music\\x\\a.mp3") == "../x/a.mp3"

    def test_different_drives_keep_target(self):
        assert compute_relative_path("C:/Music", "D:/Other/a.mp3") == "D:/Other/a.mp3"


class TestToPlaylistPath:

    def test_absolute_mode_uses_forward_slashes(self):
        out = to_playlist_path("C:\\Music\\a.mp3", "C:\\Music\\Playlists", PathMode.ABSOLUTE)
        assert out == "C:/Music/a.mp3"

    def test_relative_mode(self):
        assert to_playlist_path("/music/tracks/a.mp3", "/music/Playlists") == "../tracks/a.mp3"

    def test_relative_from_root(self):
        out = to_playlist_path("/music/artist/a.mp3", "/music/Playlists", "relative-from-root", music_root="/music")
        assert out == "artist/a.mp3"

    def test_relative_from_root_without_root_degrades_to_relative(self):
        out = to_playlist_path("/music/artist/a.mp3", "/music/Playlists", PathMode.RELATIVE_FROM_ROOT)
        assert out == "../artist/a.mp3"

    def test_relative_from_root_blank_root(self):
        out = to_playlist_path("/music/artist/a.mp3", "/music/Playlists", PathMode.RELATIVE_FROM_ROOT, music_root="  ")
        assert out == "../artist/a.mp3"

    def test_relative_from_root_outside_root(self):
        out = to_playlist_path("/other/a.mp3", "/music/Playlists", PathMode.RELATIVE_FROM_ROOT, music_root="/music")
        assert out == "../../other/a.mp3"

    def test_relative_from_prefix(self):
        out = to_playlist_path(
            "/music/artist/a.mp3", "/music/Playlists", PathMode.RELATIVE_FROM_PREFIX,
            music_root="/music", path_prefix="/mnt/usb/",
        )
        assert out == "/mnt/usb/artist/a.mp3"

    def test_relative_from_prefix_without_prefix_acts_like_root(self):
        out = to_playlist_path(
            "/music/artist/a.mp3", "/music/Playlists", PathMode.RELATIVE_FROM_PREFIX, music_root="/music",
        )
        assert out == "artist/a.mp3"


@pytest.mark.parametrize("ref,expected", [
    ("/music/a.mp3", True),
    ("C:\\Music\\a.mp3", True),
    ("C:/Music/a.mp3", True),
    ("\\\\server\\share\\a.mp3", True),
    ("a.mp3", False),
    ("../a.mp3", False),
    ("C:a.mp3", False),
])
def test_is_absolute_reference(ref, expected):
    assert is_absolute_reference(ref) is expected


class TestToAbsolutePath:

    def test_existing_relative_reference_is_canonical(self, music_root: Path, make_file):
        target = make_file(music_root / "tracks" / "a.mp3")
        playlist_dir = music_root / "Playlists"
        playlist_dir.mkdir()
        path, existed = to_absolute_path("../tracks/a.mp3", playlist_dir)
        assert existed is True
        assert path == str(target.resolve())

    def test_missing_reference_is_joined(self, music_root: Path):
        path, existed = to_absolute_path("x/none.mp3", music_root)
        assert existed is False
        assert path == os.path.join(str(music_root), "x/none.mp3")

    def test_absolute_reference_used_as_is(self, music_root: Path, make_file):
        target = make_file(music_root / "a.mp3")
        path, existed = to_absolute_path(str(target), "/somewhere/else")
        assert existed is True
        assert path == str(target.resolve())

    @pytest.mark.skipif(os.sep != "/", reason="backslash is already a separator")
    def test_backslash_reference_on_posix(self, music_root: Path, make_file):
        target = make_file(music_root / "sub" / "b.mp3")
        path, existed = to_absolute_path("sub\\b.mp3", music_root)
        assert existed is True
        assert path == str(target.resolve())

    def test_surrounding_whitespace_ignored(self, music_root: Path, make_file):
        make_file(music_root / "a.mp3")
        _, existed = to_absolute_path("  a.mp3  ", music_root)
        assert existed is True
