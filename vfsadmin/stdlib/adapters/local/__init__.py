"""Local filesystem store adapters."""

from vfsadmin.stdlib.adapters.local.local_content_store import LocalContentStore

__all__ = ["LocalContentStore"]
