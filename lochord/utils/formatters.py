"""Formatting utilities for track and playlist display."""
import re

_PLAYLIST_SUFFIX = re.compile(r"\.(m3u8?|txt|csv)$", re.IGNORECASE)


def format_duration(seconds: int | float | None) -> str:
    """Format seconds as m:ss.

    Args:
        seconds: Duration in seconds (0, negative or None means unknown)

    Returns:
        'm:ss' string, or '--:--' when the duration is unknown
    """
    if not seconds or seconds <= 0:
        return "--:--"
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


def playlist_name_from_path(path: str) -> str:
    """Extract the display name of a playlist from its file path.

    Handles both separator styles so names from Windows paths display
    correctly on any platform.
    """
    normalized = path.replace("\\", "/")
    filename = normalized.rsplit("/", 1)[-1] or path
    return _PLAYLIST_SUFFIX.sub("", filename)


__all__ = ["format_duration", "playlist_name_from_path"]
