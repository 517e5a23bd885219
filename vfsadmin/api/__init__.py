"""User-facing API layer shared by the HTTP boundary and the CLI."""

from vfsadmin.api import vfs

__all__ = ["vfs"]
