"""Library ingestion: turn a music directory into Track values."""

from .library import DEFAULT_EXTENSIONS, ScanResult, scan_library, scan_music_directory

__all__ = ["DEFAULT_EXTENSIONS", "ScanResult", "scan_library", "scan_music_directory"]
