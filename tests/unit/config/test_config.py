"""Unit tests for configuration loading and typed config."""

from __future__ import annotations
from pathlib import Path

import pytest

from lochord.config import coerce_scalar, deep_merge, load_config, load_typed_config
from lochord.config_types import AppConfig, LibraryConfig, PlaylistConfig
from lochord.models import PathMode, PlaylistFormat


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv('LOCHORD_ENABLE_DOTENV', raising=False)
    for key in ('LOCHORD__LIBRARY__ROOT', 'LOCHORD__PLAYLISTS__PATH_MODE', 'LOCHORD__LIBRARY__EXTENSIONS',
                'LOCHORD__LOG_LEVEL', 'LOCHORD__PLAYLISTS__SAVE_FORMAT'):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    cfg = load_config()
    assert cfg['playlists']['path_mode'] == 'relative'
    assert cfg['playlists']['save_format'] == 'm3u8'
    assert cfg['library']['root'] is None
    assert 'opus' in cfg['library']['extensions']


def test_env_override(monkeypatch):
    monkeypatch.setenv('LOCHORD__PLAYLISTS__PATH_MODE', 'absolute')
    monkeypatch.setenv('LOCHORD__LIBRARY__ROOT', '/srv/music')
    cfg = load_config()
    assert cfg['playlists']['path_mode'] == 'absolute'
    assert cfg['library']['root'] == '/srv/music'


def test_env_list_override(monkeypatch):
    monkeypatch.setenv('LOCHORD__LIBRARY__EXTENSIONS', '["flac", "mp3"]')
    assert load_config()['library']['extensions'] == ['flac', 'mp3']


def test_overrides_win_over_env(monkeypatch):
    monkeypatch.setenv('LOCHORD__PLAYLISTS__SAVE_FORMAT', 'csv')
    cfg = load_config(overrides={'playlists': {'save_format': 'txt'}})
    assert cfg['playlists']['save_format'] == 'txt'
    assert cfg['playlists']['path_mode'] == 'relative'


def test_dotenv_skipped_under_pytest(tmp_path: Path):
    env = tmp_path / '.env'
    env.write_text('LOCHORD__PLAYLISTS__PATH_MODE=absolute\n', encoding='utf-8')
    assert load_config(env_file=env)['playlists']['path_mode'] == 'relative'


def test_dotenv_loaded_when_enabled(tmp_path: Path, monkeypatch):
    monkeypatch.setenv('LOCHORD_ENABLE_DOTENV', '1')
    env = tmp_path / '.env'
    env.write_text(
        '# comment\n'
        'LOCHORD__PLAYLISTS__PATH_MODE="relative-from-root"  # trailing\n'
        "LOCHORD__PLAYLISTS__PATH_PREFIX='/mnt/#usb'\n"
        'UNRELATED=1\n',
        encoding='utf-8',
    )
    cfg = load_config(env_file=env)
    assert cfg['playlists']['path_mode'] == 'relative-from-root'
    assert cfg['playlists']['path_prefix'] == '/mnt/#usb'
    assert 'unrelated' not in cfg


def test_real_env_wins_over_dotenv(tmp_path: Path, monkeypatch):
    monkeypatch.setenv('LOCHORD_ENABLE_DOTENV', '1')
    monkeypatch.setenv('LOCHORD__PLAYLISTS__PATH_MODE', 'absolute')
    env = tmp_path / '.env'
    env.write_text('LOCHORD__PLAYLISTS__PATH_MODE=relative-from-root\n', encoding='utf-8')
    assert load_config(env_file=env)['playlists']['path_mode'] == 'absolute'


@pytest.mark.parametrize("raw,expected", [
    ('true', True),
    ('No', False),
    ('42', 42),
    ('-3', -3),
    ('1.5', 1.5),
    ('null', None),
    ('["a"]', ['a']),
    ('[broken', '[broken'),
    ('hello', 'hello'),
])
def test_coerce_scalar(raw, expected):
    assert coerce_scalar(raw) == expected


def test_deep_merge_nested():
    merged = deep_merge({'a': {'x': 1, 'y': 2}, 'b': 1}, {'a': {'y': 3}, 'c': 4})
    assert merged == {'a': {'x': 1, 'y': 3}, 'b': 1, 'c': 4}


class TestTypedConfig:

    def test_from_dict_ignores_unknown_keys(self):
        app = AppConfig.from_dict({
            'log_level': 'DEBUG',
            'library': {'root': '/m', 'legacy': True},
            'playlists': {'path_mode': 'absolute'},
        })
        assert app.library == LibraryConfig(root='/m')
        assert app.playlists.path_mode == 'absolute'
        assert app.to_dict()['library']['root'] == '/m'

    def test_load_typed_config(self):
        app = load_typed_config({'library': {'root': '/m'}})
        assert isinstance(app, AppConfig)
        assert app.library.root == '/m'

    def test_index_settings_from_playlist_config(self):
        settings = PlaylistConfig(root_extensions=['m3u8'], default_directory_name='Lists').index_settings()
        assert settings.root_extensions == ['m3u8']
        assert settings.directory_extensions == ['m3u8', 'm3u', 'txt', 'csv']
        assert settings.default_directory_name == 'Lists'

    def test_save_options_from_playlist_config(self):
        opts = PlaylistConfig(path_mode='relative-from-prefix', path_prefix='/sd', save_format='txt').save_options('/m')
        assert opts.path_mode is PathMode.RELATIVE_FROM_PREFIX
        assert opts.format is PlaylistFormat.TXT
        assert (opts.music_root, opts.path_prefix) == ('/m', '/sd')
