"""Styled strings for CLI output."""

import click

from ..models import Track
from .formatters import format_duration


def section_header(text: str) -> str:
    return click.style(f"▶ {text}", fg='cyan', bold=True)


def success(text: str, prefix: str = "✓") -> str:
    return f"{click.style(prefix, fg='green')} {text}"


def file_path(path: str, label: str | None = None) -> str:
    """Format a file path, optionally preceded by a label.

    The path is printed as given; callers pass absolute paths.
    """
    styled = click.style(str(path), fg='yellow')
    if label:
        return f"  {click.style('•', fg='blue')} {label}: {styled}"
    return f"  {styled}"


def count_badge(count: int, label: str, color: str = 'cyan') -> str:
    return f"{click.style(str(count), fg=color, bold=True)} {label}"


def track_line(index: int, track: Track, exists: bool = True) -> str:
    """One numbered row of a track listing.

    Args:
        index: 1-based position in the playlist
        track: Track to render
        exists: Whether the referenced file is present on disk

    Returns:
        ``" 1. 3:45  Artist - Title"``; missing files are dimmed and flagged
    """
    display = f"{track.artist} - {track.title}" if track.artist else track.title
    row = f"{index:>3}. {format_duration(track.duration):>6}  {display}"
    if not exists:
        return click.style(f"{row}  [missing]", fg='bright_black')
    return row


__all__ = [
    "section_header",
    "success",
    "file_path",
    "count_badge",
    "track_line",
]
