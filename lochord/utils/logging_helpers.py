"""Logging helper utilities for consistent summary reporting."""

import click


def format_summary(
    found: int,
    tagged: int,
    untagged: int = 0,
    duration_seconds: float = 0.0,
    item_name: str = "items"
) -> str:
    """Format a summary line with colored counts.

    Args:
        found: Count of files found
        tagged: Count of files whose tags could be read
        untagged: Count of files without readable tags
        duration_seconds: Total duration in seconds
        item_name: Name of items (e.g., "Library", "Playlists")

    Returns:
        Formatted summary string with colors
    """
    parts = [
        click.style('✓', fg='green'),
        f"{item_name}:",
        click.style(f'{found} found', fg='green'),
        click.style(f'{tagged} tagged', fg='blue'),
    ]

    if untagged > 0:
        parts.append(click.style(f'{untagged} untagged', fg='yellow'))

    if duration_seconds > 0:
        parts.append(f"in {duration_seconds:.2f}s")

    return " ".join(parts)


__all__ = ["format_summary"]
