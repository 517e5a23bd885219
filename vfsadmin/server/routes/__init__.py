"""API routes for the vfsadmin server."""

from vfsadmin.server.routes.admin import router as admin_router

__all__ = ["admin_router"]
