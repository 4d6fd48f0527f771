"""CLI package bootstrap.

Defines root group (`cli`) in helpers and imports submodules so their
decorators register commands.
"""
from lochord.cli.helpers import cli  # root group
from lochord.cli import playlist_cmds  # noqa: F401
from lochord.cli import scan_cmds  # noqa: F401
from lochord.cli import tag_cmds  # noqa: F401
from lochord.cli import config_cmds  # noqa: F401

__all__ = ["cli"]
