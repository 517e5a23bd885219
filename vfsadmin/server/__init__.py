"""HTTP admin API for vfsadmin."""

from vfsadmin.server.main import create_app, run_server

__all__ = ["create_app", "run_server"]
