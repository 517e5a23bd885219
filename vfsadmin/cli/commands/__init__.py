"""CLI command modules."""

from . import config_cmd, fs_cmd, serve_cmd

__all__ = ["config_cmd", "fs_cmd", "serve_cmd"]
