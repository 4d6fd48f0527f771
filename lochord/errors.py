"""Exception classes for lochord.

Exception Hierarchy:
    LochordError (base)
        PathNotFoundError - an input directory or file does not exist
        PlaylistIOError - reading, writing, creating or deleting a playlist failed
        PlaylistExistsError - a playlist with the requested name already exists
        TagWriteError - embedded tags could not be written

Malformed playlist lines are not errors: parsers drop them and carry on.
"""

from __future__ import annotations


class LochordError(Exception):
    """Base exception for all lochord errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g. path, original error).
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class PathNotFoundError(LochordError):
    """Raised when an input directory or file is absent."""

    def __init__(self, path: str, what: str = "Path") -> None:
        super().__init__(f"{what} does not exist: {path}", {"path": path})
        self.path = path


class PlaylistIOError(LochordError):
    """Raised when a playlist cannot be read, written or removed.

    The underlying OSError is kept in ``details['original_error']`` and chained
    as ``__cause__`` by the raising code.
    """

    def __init__(self, action: str, path: str, error: OSError | None = None) -> None:
        message = f"Failed to {action} playlist {path}"
        if error is not None:
            message = f"{message}: {error.strerror or error}"
        super().__init__(message, {"path": path, "original_error": error})
        self.path = path


class PlaylistExistsError(LochordError):
    """Raised when creating a playlist whose file is already present."""

    def __init__(self, path: str) -> None:
        super().__init__(f"A playlist already exists at {path}", {"path": path})
        self.path = path


class TagWriteError(LochordError):
    """Raised when the tag codec fails to save tags to an audio file."""

    def __init__(self, path: str, error: Exception) -> None:
        super().__init__(f"Failed to save tags to {path}: {error}", {"path": path, "original_error": error})
        self.path = path


__all__ = [
    "LochordError",
    "PathNotFoundError",
    "PlaylistIOError",
    "PlaylistExistsError",
    "TagWriteError",
]
