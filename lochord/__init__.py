"""Top-level package for lochord, a local music library and playlist manager.

Version identifier is defined in :mod:`lochord.version` to keep a single source
of truth that can be imported without pulling heavier submodules.
"""

from .version import __version__  # re-export

__all__ = ["__version__"]
