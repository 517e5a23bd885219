"""FastAPI server for the vfsadmin admin API."""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response

from vfsadmin import __version__
from vfsadmin.api.vfs import create_vfs_admin
from vfsadmin.kernel.config import VFSAdminConfig, get_default_config
from vfsadmin.kernel.exceptions import VFSError
from vfsadmin.kernel.logging import get_logger, reset_correlation_id, set_correlation_id
from vfsadmin.kernel.ports.vfs import VFSAdmin
from vfsadmin.server.routes import admin_router
from vfsadmin.server.routes.admin import vfs_error_handler

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(vfs: VFSAdmin | None = None, config: VFSAdminConfig | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        vfs: Service to serve. Built from ``config`` at startup when omitted;
            an injected service is not closed on shutdown.
        config: Configuration used to build the service.
    """
    config = config or get_default_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # Startup
        owned = vfs is None
        app.state.vfs = create_vfs_admin(config) if owned else vfs
        logger.info("Admin API ready ({backend} storage)", backend=config.storage.backend)
        try:
            yield
        finally:
            # Shutdown
            if owned:
                await app.state.vfs.aclose()
            logger.info("Admin API stopped")

    app = FastAPI(
        title="vfsadmin",
        description="Admin API for a virtual file system",
        version=__version__,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def correlation_id(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        cid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        token = set_correlation_id(cid)
        try:
            logger.debug("{method} {path}", method=request.method, path=request.url.path)
            response = await call_next(request)
        finally:
            reset_correlation_id(token)
        response.headers[REQUEST_ID_HEADER] = cid
        return response

    app.add_exception_handler(VFSError, vfs_error_handler)  # type: ignore[arg-type]

    # API routes
    app.include_router(admin_router, prefix="/api")

    # Health check
    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


def run_server(config: VFSAdminConfig | None = None) -> None:
    """Run the admin API under uvicorn.

    Args:
        config: Configuration; host and port come from ``config.server``.
    """
    import uvicorn

    config = config or get_default_config()
    app = create_app(config=config)
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
    )
