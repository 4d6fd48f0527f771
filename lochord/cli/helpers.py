from __future__ import annotations
import functools
from typing import Any, Callable, Dict

import click

from ..config import load_typed_config
from ..config_types import AppConfig
from ..errors import LochordError
from ..version import __version__


@click.group()
@click.version_option(version=__version__, prog_name="lochord")
@click.option('--root', 'root', type=click.Path(file_okay=False), default=None,
              help='Music library root (overrides LOCHORD__LIBRARY__ROOT)')
@click.option('--playlist-dir', 'playlist_dir', type=click.Path(file_okay=False), default=None,
              help='Playlist directory (overrides LOCHORD__PLAYLISTS__DIRECTORY)')
@click.pass_context
def cli(ctx: click.Context, root: str | None, playlist_dir: str | None):
    """Local playlist manager: list, read, convert and write playlists.

    \b
    TYPICAL WORKFLOWS:

    \b
    Browse:
      lochord --root ~/Music playlists      # Every playlist under the library
      lochord show ~/Music/road.m3u8        # Tracks with resolved metadata

    \b
    Convert:
      lochord convert road.m3u8 --format csv --replace
      lochord convert road.m3u8 usb/road.m3u --path-mode absolute

    \b
    Library:
      lochord --root ~/Music scan           # Audio files with tag metadata
      lochord tags show song.flac
      lochord tags set song.flac --title "New Title"
    """
    if isinstance(ctx.obj, dict):
        cfg = ctx.obj
    else:
        cfg = load_typed_config().to_dict()
    if root:
        cfg.setdefault('library', {})['root'] = root
    if playlist_dir:
        cfg.setdefault('playlists', {})['directory'] = playlist_dir
    ctx.obj = cfg


def typed(cfg: Dict[str, Any]) -> AppConfig:
    return AppConfig.from_dict(cfg)


def require_root(cfg: Dict[str, Any]) -> str:
    """Return the configured music root or fail with a usage error."""
    root = (cfg.get('library') or {}).get('root')
    if not root:
        raise click.UsageError('No music root configured: pass --root or set LOCHORD__LIBRARY__ROOT')
    return str(root)


def handle_errors(fn: Callable) -> Callable:
    """Report lochord errors as click errors (exit code 1, message on stderr)."""
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except LochordError as e:
            raise click.ClickException(str(e)) from e
    return wrapper


__all__ = ["cli", "typed", "require_root", "handle_errors"]
