"""Save then load playlists through the service layer on a real directory tree."""

from __future__ import annotations
from pathlib import Path

import pytest

from lochord.models import PathMode, PlaylistFormat, PlaylistSaveOptions, Track, TrackMetadata
from lochord.services.playlist_service import load_playlist, save_playlist


@pytest.fixture
def library(music_root: Path, make_file):
    files = [
        make_file(music_root / "Daft Punk" / "One More Time.mp3"),
        make_file(music_root / "Air" / "La Femme d'Argent.flac"),
        make_file(music_root / "Misc" / "Song, With Comma.ogg"),
    ]
    tracks = [
        Track("One More Time", "Daft Punk", 320, absolute_path=str(files[0])),
        Track("La Femme d'Argent", "Air", 429, absolute_path=str(files[1])),
        Track('Song, "Quoted"', "Various", 61, absolute_path=str(files[2])),
    ]
    return tracks


@pytest.mark.parametrize("fmt", [PlaylistFormat.M3U8, PlaylistFormat.M3U, PlaylistFormat.CSV])
@pytest.mark.parametrize("mode", [PathMode.RELATIVE, PathMode.ABSOLUTE])
def test_round_trip_preserves_tracks(library, music_root: Path, fake_lookup, fmt, mode):
    target = music_root / "Playlists" / f"mix{fmt.extension}"
    assert save_playlist(target, library, PlaylistSaveOptions(path_mode=mode, format=fmt)) is True

    loaded = load_playlist(target, lookup=fake_lookup())

    assert [t.absolute_path for t in loaded] == [t.absolute_path for t in library]
    assert [(t.title, t.artist, t.duration) for t in loaded] == [(t.title, t.artist, t.duration) for t in library]


def test_txt_round_trip_keeps_paths_only(library, music_root: Path, fake_lookup):
    target = music_root / "Playlists" / "mix.txt"
    save_playlist(target, library, PlaylistSaveOptions(format="txt"))
    loaded = load_playlist(target, lookup=fake_lookup())
    assert [t.absolute_path for t in loaded] == [t.absolute_path for t in library]
    assert loaded[0].title == "One More Time"
    assert loaded[0].artist == ""


def test_relative_mode_writes_dot_dot_paths(library, music_root: Path):
    target = music_root / "Playlists" / "mix.m3u8"
    save_playlist(target, library[:1])
    assert target.read_text(encoding="utf-8") == (
        "#EXTM3U\n#EXTINF:320,Daft Punk - One More Time\n../Daft Punk/One More Time.mp3\n"
    )


def test_load_prefers_tags_for_existing_files(library, music_root: Path, fake_lookup):
    target = music_root / "Playlists" / "mix.m3u8"
    save_playlist(target, library[:1])
    lookup = fake_lookup({library[0].absolute_path: TrackMetadata("Retagged", "DP", 321)})
    t = load_playlist(target, lookup=lookup)[0]
    assert (t.title, t.artist, t.duration) == ("Retagged", "DP", 321)


def test_relative_from_root_reloaded_with_music_root(library, music_root: Path, tmp_path: Path, fake_lookup):
    # Written for a device that mirrors the library layout, read back elsewhere
    target = tmp_path / "device" / "mix.m3u8"
    opts = PlaylistSaveOptions(path_mode=PathMode.RELATIVE_FROM_ROOT, music_root=str(music_root))
    save_playlist(target, library, opts)
    assert "Air/La Femme d'Argent.flac" in target.read_text(encoding="utf-8")

    without_root = load_playlist(target, lookup=fake_lookup())
    assert not any(Path(t.absolute_path).exists() for t in without_root)

    with_root = load_playlist(target, lookup=fake_lookup(), music_root=music_root)
    assert [t.absolute_path for t in with_root] == [t.absolute_path for t in library]


def test_missing_tracks_survive_round_trip(music_root: Path, fake_lookup):
    gone = Track("Ghost", "Nobody", 100, absolute_path=str(music_root / "gone" / "ghost.mp3"))
    target = music_root / "Playlists" / "ghosts.csv"
    save_playlist(target, [gone], PlaylistSaveOptions(format="csv"))
    t = load_playlist(target, lookup=fake_lookup())[0]
    assert (t.title, t.artist, t.duration) == ("Ghost", "Nobody", 100)
    assert t.relative_path == "../gone/ghost.mp3"
    assert Path(t.absolute_path).resolve() == Path(gone.absolute_path)
