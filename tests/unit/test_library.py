"""Unit tests for the music directory scan."""

from __future__ import annotations
from pathlib import Path

import pytest

from lochord.errors import PathNotFoundError
from lochord.ingest.library import scan_library, scan_music_directory
from lochord.models import TrackMetadata


def test_scan_collects_tracks_sorted(music_root: Path, make_file, fake_lookup):
    b = make_file(music_root / "b" / "two.FLAC")
    a = make_file(music_root / "a" / "one.mp3")
    make_file(music_root / "a" / "cover.jpg")
    make_file(music_root / "Playlists" / "ignored.mp3")
    lookup = fake_lookup({str(a): TrackMetadata("One", "Artist", 100)})

    tracks = scan_music_directory(music_root, lookup=lookup)

    assert [t.absolute_path for t in tracks] == [str(a), str(b)]
    assert (tracks[0].title, tracks[0].artist, tracks[0].duration) == ("One", "Artist", 100)
    assert tracks[0].relative_path == "a/one.mp3"
    assert (tracks[1].title, tracks[1].artist, tracks[1].duration) == ("two", "", 0)


def test_scan_extension_and_exclude_filters(music_root: Path, make_file, fake_lookup):
    make_file(music_root / "keep.ogg")
    make_file(music_root / "skip.mp3")
    make_file(music_root / "Old Backup" / "skip.ogg")
    tracks = scan_music_directory(music_root, extensions=[".OGG"], exclude_patterns=["backup"], lookup=fake_lookup())
    assert [t.relative_path for t in tracks] == ["keep.ogg"]


def test_scan_result_counts(music_root: Path, make_file, fake_lookup):
    a = make_file(music_root / "a.mp3")
    make_file(music_root / "b.mp3")
    result = scan_library(music_root, lookup=fake_lookup({str(a): TrackMetadata("A")}))
    assert (result.files_seen, result.tagged, result.untagged) == (2, 1, 1)


def test_scan_missing_root(tmp_path: Path):
    with pytest.raises(PathNotFoundError) as exc:
        scan_music_directory(tmp_path / "absent")
    assert "does not exist" in str(exc.value)
