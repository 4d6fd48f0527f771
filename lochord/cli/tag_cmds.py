"""Embedded tag commands."""

from __future__ import annotations
import json as _json
import mimetypes
from dataclasses import fields, replace
from pathlib import Path

import click

from .helpers import cli, handle_errors
from ..metadata.tags import encode_data_uri, read_audio_tags, tags_summary, write_audio_tags
from ..models import AudioTags
from ..utils.output import section_header, success

EDITABLE = [f for f in fields(AudioTags) if f.name != "cover_art"]


def _tag_options(fn):
    for f in reversed(EDITABLE):
        fn = click.option(
            f"--{f.name.replace('_', '-')}",
            f.name,
            type=int if f.type in (int, "int") else str,
            default=None,
            help=f"New {f.name.replace('_', ' ')} (empty string clears it)" if f.type in (str, "str") else None,
        )(fn)
    return fn


@cli.group(name='tags')
def tags_group():  # pragma: no cover - simple container
    """Read and write embedded audio tags."""
    pass


@tags_group.command(name='show')
@click.argument('file', type=click.Path(dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print all fields as JSON')
@handle_errors
def tags_show(file: str, as_json: bool):
    """Show the embedded tags of an audio file."""
    summary = tags_summary(read_audio_tags(file))
    if as_json:
        click.echo(_json.dumps(summary, indent=2, ensure_ascii=False))
        return
    click.echo(section_header(Path(file).name))
    for key, value in summary.items():
        if value not in ("", 0):
            click.echo(f"  {key:<12} {value}")


@tags_group.command(name='set')
@click.argument('file', type=click.Path(dir_okay=False))
@_tag_options
@click.option('--cover', type=click.Path(exists=True, dir_okay=False), default=None,
              help='Image file to embed as front cover')
@handle_errors
def tags_set(file: str, cover: str | None, **changes):
    """Update selected tag fields; fields not given are kept."""
    current = read_audio_tags(file)
    updates = {k: v for k, v in changes.items() if v is not None}
    if cover:
        mime = mimetypes.guess_type(cover)[0] or "image/jpeg"
        updates["cover_art"] = encode_data_uri(mime, Path(cover).read_bytes())
    if not updates:
        raise click.UsageError("Nothing to change: pass at least one --field option")
    write_audio_tags(file, replace(current, **updates))
    click.echo(success(f"Updated {', '.join(sorted(updates))} in {file}"))


__all__ = ["tags_group", "tags_show", "tags_set"]
