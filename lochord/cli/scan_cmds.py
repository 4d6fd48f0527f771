"""Library scanning command."""

from __future__ import annotations
import json as _json
import logging

import click

from .helpers import cli, handle_errors, require_root, typed
from ..ingest.library import scan_library
from ..metadata.lookup import MutagenMetadataLookup, NullMetadataLookup
from ..utils.output import count_badge, section_header, track_line

logger = logging.getLogger(__name__)


@cli.command()
@click.argument('root', type=click.Path(file_okay=False), required=False)
@click.option('--ext', 'extensions', multiple=True, help='Audio extension to include (repeatable; overrides config)')
@click.option('--exclude', 'exclude_patterns', multiple=True, help='Directory name pattern to skip (repeatable)')
@click.option('--no-tags', is_flag=True, help='Do not read embedded tags')
@click.option('--json', 'as_json', is_flag=True, help='Print tracks as JSON')
@click.pass_context
@handle_errors
def scan(ctx: click.Context, root: str | None, extensions: tuple, exclude_patterns: tuple,
         no_tags: bool, as_json: bool):
    """List audio files under the music root with their tag metadata.

    The Playlists directory is never descended into.

    Examples:
      lochord --root ~/Music scan
      lochord scan ~/Music/Incoming --ext flac --exclude "*.bak"
    """
    cfg = ctx.obj
    library = typed(cfg).library
    root = root or require_root(cfg)
    result = scan_library(
        root,
        extensions=list(extensions) or library.extensions,
        exclude_patterns=list(exclude_patterns) or library.exclude_patterns,
        lookup=NullMetadataLookup() if no_tags else MutagenMetadataLookup(),
        follow_symlinks=library.follow_symlinks,
    )
    if as_json:
        click.echo(_json.dumps([t.to_dict() for t in result.tracks], indent=2, ensure_ascii=False))
        return
    click.echo(section_header(f"Library {root}"))
    for i, t in enumerate(result.tracks, start=1):
        click.echo(track_line(i, t))
    click.echo(count_badge(len(result.tracks), "track(s)"))
    logger.debug(f"Duration: {result.duration_seconds:.2f}s")


__all__ = ["scan"]
