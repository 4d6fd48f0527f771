"""Playlist commands: list, show, convert, create, delete."""

from __future__ import annotations
import json as _json
import logging
from pathlib import Path

import click

from .helpers import cli, handle_errors, require_root, typed
from ..metadata.lookup import MutagenMetadataLookup, NullMetadataLookup
from ..models import PathMode, PlaylistFormat
from ..services.playlist_service import (
    create_playlist,
    delete_playlist,
    list_playlists,
    load_playlist,
    save_playlist,
    save_playlist_as,
)
from ..utils.formatters import format_duration, playlist_name_from_path
from ..utils.output import count_badge, file_path, section_header, success, track_line

logger = logging.getLogger(__name__)

FORMAT_CHOICE = click.Choice([f.value for f in PlaylistFormat], case_sensitive=False)
PATH_MODE_CHOICE = click.Choice([m.value for m in PathMode], case_sensitive=False)


def _lookup(no_tags: bool):
    return NullMetadataLookup() if no_tags else MutagenMetadataLookup()


@cli.command(name='playlists')
@click.option('--json', 'as_json', is_flag=True, help='Print a JSON array of paths')
@click.pass_context
@handle_errors
def playlists_cmd(ctx: click.Context, as_json: bool):
    """List playlist files under the music root and playlist directory."""
    cfg = ctx.obj
    root = require_root(cfg)
    app = typed(cfg)
    paths = list_playlists(root, app.playlists.directory, app.playlists.index_settings())
    if as_json:
        click.echo(_json.dumps(paths, indent=2))
        return
    click.echo(section_header(f"Playlists in {root}"))
    for p in paths:
        click.echo(file_path(p, playlist_name_from_path(p)))
    click.echo(count_badge(len(paths), "playlist(s)"))


@cli.command(name='show')
@click.argument('path', type=click.Path(dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print tracks as JSON')
@click.option('--no-tags', is_flag=True, help='Do not read embedded tags; use playlist text only')
@click.pass_context
@handle_errors
def show_cmd(ctx: click.Context, path: str, as_json: bool, no_tags: bool):
    """Show the tracks of a playlist file."""
    root = (ctx.obj.get('library') or {}).get('root')
    tracks = load_playlist(path, lookup=_lookup(no_tags), music_root=root)
    if as_json:
        click.echo(_json.dumps([t.to_dict() for t in tracks], indent=2, ensure_ascii=False))
        return
    click.echo(section_header(playlist_name_from_path(path)))
    missing = 0
    for i, t in enumerate(tracks, start=1):
        exists = Path(t.absolute_path).exists()
        missing += 0 if exists else 1
        click.echo(track_line(i, t, exists))
    total = sum(t.duration for t in tracks)
    summary = f"{count_badge(len(tracks), 'track(s)')}, {format_duration(total)}"
    if missing:
        summary += f", {count_badge(missing, 'missing', color='red')}"
    click.echo(summary)


@cli.command(name='convert')
@click.argument('src', type=click.Path(exists=True, dir_okay=False))
@click.argument('dest', type=click.Path(dir_okay=False), required=False)
@click.option('--format', 'fmt', type=FORMAT_CHOICE, default=None,
              help='Output format (default: DEST extension, else playlists.save_format)')
@click.option('--path-mode', type=PATH_MODE_CHOICE, default=None, help='How track paths are written')
@click.option('--music-root', type=click.Path(file_okay=False), default=None,
              help='Root for relative-from-root / relative-from-prefix (default: --root)')
@click.option('--path-prefix', default=None, help='Prefix for relative-from-prefix')
@click.option('--replace', is_flag=True, help='Without DEST: remove SRC when the extension changes')
@click.option('--no-tags', is_flag=True, help='Do not read embedded tags; use playlist text only')
@click.pass_context
@handle_errors
def convert_cmd(ctx: click.Context, src: str, dest: str | None, fmt: str | None, path_mode: str | None,
                music_root: str | None, path_prefix: str | None, replace: bool, no_tags: bool):
    """Rewrite a playlist in another format or path mode.

    \b
    Examples:
      lochord convert road.m3u8 --format csv            # road.csv next to road.m3u8
      lochord convert road.m3u8 --format txt --replace  # road.txt, road.m3u8 removed
      lochord convert road.m3u8 /mnt/usb/road.m3u --path-mode absolute
    """
    cfg = ctx.obj
    root = music_root or (cfg.get('library') or {}).get('root')
    options = typed(cfg).playlists.save_options(root)
    if dest and not fmt:
        fmt = PlaylistFormat.from_path(dest).value
    if fmt:
        options = options.with_format(fmt)
    if path_mode:
        options.path_mode = PathMode.parse(path_mode)
    if path_prefix is not None:
        options.path_prefix = path_prefix

    tracks = load_playlist(src, lookup=_lookup(no_tags), music_root=root)
    if dest:
        save_playlist(dest, tracks, options)
        target = dest
    elif replace:
        target = save_playlist_as(src, tracks, options)
    else:
        target = str(Path(src).with_suffix(options.format.extension))
        save_playlist(target, tracks, options)
    click.echo(success(f"Wrote {len(tracks)} track(s) to {target} ({options.format.value}, {options.path_mode.value})"))


@cli.command(name='create')
@click.argument('name')
@click.option('--format', 'fmt', type=FORMAT_CHOICE, default=None, help='File format (default: playlists.save_format)')
@click.pass_context
@handle_errors
def create_cmd(ctx: click.Context, name: str, fmt: str | None):
    """Create an empty playlist in the playlist directory."""
    cfg = ctx.obj
    root = require_root(cfg)
    app = typed(cfg)
    options = app.playlists.save_options(root)
    if fmt:
        options = options.with_format(fmt)
    try:
        path = create_playlist(root, name, options, app.playlists.directory)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='NAME') from e
    click.echo(success(f"Created {path}"))


@cli.command(name='delete')
@click.argument('path', type=click.Path(dir_okay=False))
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@handle_errors
def delete_cmd(path: str, yes: bool):
    """Delete a playlist file."""
    if not yes:
        click.confirm(f"Delete {path}?", abort=True)
    delete_playlist(path)
    click.echo(success(f"Deleted {path}"))


__all__ = ["playlists_cmd", "show_cmd", "convert_cmd", "create_cmd", "delete_cmd"]
