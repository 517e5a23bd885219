"""Admin API over the VFS.

Maps path-addressed HTTP requests onto the VFS admin service. ``VFSError``
raised by the service is turned into a JSON error body by
:func:`vfs_error_handler`, which the app registers at startup.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from vfsadmin.api import vfs as vfs_api
from vfsadmin.kernel.exceptions import ErrorKind, VFSError
from vfsadmin.kernel.logging import get_logger
from vfsadmin.kernel.ports.vfs import VFSAdmin

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INVALID_PATH: 400,
    ErrorKind.PARENT_MISSING: 400,
    ErrorKind.WRONG_KIND: 400,
    ErrorKind.DIRECTORY_NOT_EMPTY: 409,
    ErrorKind.STORAGE_FAILURE: 500,
}


class WriteRequest(BaseModel):
    """Body of a write: file content, or a directory marker."""

    content: str | None = None
    is_directory: bool = False


def get_vfs(request: Request) -> VFSAdmin:
    """Service created by the app lifespan."""
    return request.app.state.vfs


VFSDep = Annotated[VFSAdmin, Depends(get_vfs)]


async def vfs_error_handler(request: Request, exc: VFSError) -> JSONResponse:
    """Render a VFS error as ``{error, kind, path, details}``."""
    status = STATUS_BY_KIND.get(exc.kind, 500)
    if status >= 500:
        logger.error(
            "{method} {url} failed: {error}", method=request.method, url=request.url, error=exc
        )
    else:
        logger.info(
            "{method} {url} rejected ({kind}): {reason}",
            method=request.method,
            url=request.url,
            kind=exc.kind.value,
            reason=exc.reason,
        )
    return JSONResponse(status_code=status, content={"error": str(exc), **exc.to_dict()})


@router.get("")
async def list_root(vfs: VFSDep) -> dict[str, Any]:
    """List top-level entries."""
    return await vfs_api.list_path(vfs, None)


@router.get("/{file_path:path}")
async def read_path(
    file_path: str,
    vfs: VFSDep,
    exists: Annotated[bool, Query(description="Only report whether the path exists")] = False,
    attributes: Annotated[bool, Query(description="Return node metadata")] = False,
    list_: Annotated[bool, Query(alias="list", description="List directory children")] = False,
) -> dict[str, Any]:
    """Read a file, or query existence, metadata or children of a path."""
    if exists:
        return await vfs_api.exists_path(vfs, file_path)
    if attributes:
        return await vfs_api.stat_path(vfs, file_path)
    if list_:
        return await vfs_api.list_path(vfs, file_path)
    return await vfs_api.read_path(vfs, file_path)


async def _write(vfs: VFSAdmin, file_path: str, body: WriteRequest | None) -> Any:
    if body is not None and body.is_directory:
        return await vfs_api.make_directory(vfs, file_path)
    if body is not None and body.content is not None:
        return await vfs_api.write_path(vfs, file_path, body.content)
    return JSONResponse(
        status_code=400,
        content={"error": "Request body must contain a 'content' field as string"},
    )


@router.post("/{file_path:path}", response_model=None)
async def create_path(
    file_path: str, vfs: VFSDep, body: Annotated[WriteRequest | None, Body()] = None
) -> dict[str, Any] | JSONResponse:
    """Write a file (``{"content": ...}``) or create a directory (``{"is_directory": true}``)."""
    return await _write(vfs, file_path, body)


@router.put("/{file_path:path}", response_model=None)
async def replace_path(
    file_path: str, vfs: VFSDep, body: Annotated[WriteRequest | None, Body()] = None
) -> dict[str, Any] | JSONResponse:
    """Same as POST; writes are create-or-overwrite."""
    return await _write(vfs, file_path, body)


@router.delete("/{file_path:path}")
async def delete_path(
    file_path: str,
    vfs: VFSDep,
    recursive: Annotated[bool, Query(description="Also delete descendants")] = False,
) -> dict[str, Any]:
    """Delete a file or directory."""
    return await vfs_api.delete_path(vfs, file_path, recursive=recursive)
