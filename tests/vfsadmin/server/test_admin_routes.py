"""Tests for the admin HTTP API."""

from __future__ import annotations

import json
from collections.abc import Generator

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from vfsadmin.drivers.vfs import VFSAdminService
from vfsadmin.kernel.exceptions import (
    DirectoryNotEmptyError,
    InvalidPathError,
    NotFoundError,
    ParentMissingError,
    StorageFailureError,
    VFSError,
    WrongKindError,
)
from vfsadmin.server.main import REQUEST_ID_HEADER, create_app
from vfsadmin.server.routes.admin import vfs_error_handler
from vfsadmin.stdlib.adapters.memory import InMemoryContentStore, InMemoryNodeStore


class BrokenNodeStore(InMemoryNodeStore):
    """Node store whose lookups always fail."""

    async def aexists(self, path: str) -> bool:
        raise StorageFailureError(path, "database unavailable")


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Test client over a fresh in-memory service."""
    app = create_app(vfs=VFSAdminService(InMemoryNodeStore(), InMemoryContentStore()))
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_app_builds_its_own_service(self) -> None:
        with TestClient(create_app()) as test_client:
            response = test_client.post("/api/admin/f.txt", json={"content": "x"})
            assert response.status_code == 200

    def test_request_id_is_echoed(self, client: TestClient) -> None:
        response = client.get("/api/health", headers={REQUEST_ID_HEADER: "abc123"})
        assert response.headers[REQUEST_ID_HEADER] == "abc123"

    def test_request_id_is_generated(self, client: TestClient) -> None:
        assert client.get("/api/health").headers[REQUEST_ID_HEADER]


class TestReadmeScenario:
    def test_full_lifecycle(self, client: TestClient) -> None:
        response = client.post("/api/admin/docs", json={"is_directory": True})
        assert response.json() == {
            "success": True,
            "path": "docs",
            "action": "directory_created",
        }

        response = client.post("/api/admin/docs/readme.md", json={"content": "hello"})
        assert response.json() == {
            "success": True,
            "path": "docs/readme.md",
            "action": "written",
        }

        attributes = client.get("/api/admin/docs/readme.md", params={"attributes": True}).json()
        assert attributes["path"] == "docs/readme.md"
        assert attributes["attributes"]["kind"] == "file"
        assert attributes["attributes"]["size"] == 5

        response = client.get("/api/admin/docs/readme.md")
        assert response.json() == {"path": "docs/readme.md", "content": "hello"}

        response = client.delete("/api/admin/docs")
        assert response.status_code == 409
        assert response.json()["kind"] == "directory_not_empty"

        response = client.delete("/api/admin/docs", params={"recursive": True})
        assert response.json() == {"success": True, "path": "docs", "action": "deleted"}

        response = client.get("/api/admin/docs/readme.md", params={"exists": True})
        assert response.json() == {"path": "docs/readme.md", "exists": False}


class TestReads:
    def test_list_directory(self, client: TestClient) -> None:
        client.post("/api/admin/d", json={"is_directory": True})
        client.put("/api/admin/d/f.txt", json={"content": "x"})
        response = client.get("/api/admin/d", params={"list": True})
        assert response.status_code == 200
        assert response.json() == {
            "path": "d",
            "entries": [{"name": "f.txt", "kind": "file", "path": "d/f.txt"}],
        }

    def test_list_root(self, client: TestClient) -> None:
        client.post("/api/admin/top.txt", json={"content": "x"})
        response = client.get("/api/admin")
        assert [e["name"] for e in response.json()["entries"]] == ["top.txt"]

    def test_exists_true(self, client: TestClient) -> None:
        client.post("/api/admin/f", json={"content": ""})
        assert client.get("/api/admin/f", params={"exists": True}).json()["exists"] is True


class TestWrites:
    def test_put_overwrites(self, client: TestClient) -> None:
        client.post("/api/admin/f", json={"content": "one"})
        client.put("/api/admin/f", json={"content": "two"})
        assert client.get("/api/admin/f").json()["content"] == "two"

    @pytest.mark.parametrize("body", [{}, {"is_directory": False}, {"content": None}])
    def test_body_without_content_is_rejected(self, client: TestClient, body: dict) -> None:
        response = client.post("/api/admin/f", json=body)
        assert response.status_code == 400
        assert response.json() == {
            "error": "Request body must contain a 'content' field as string"
        }

    def test_missing_body_is_rejected(self, client: TestClient) -> None:
        assert client.put("/api/admin/f").status_code == 400

    def test_directory_flag_wins_over_content(self, client: TestClient) -> None:
        client.post("/api/admin/d", json={"is_directory": True, "content": "ignored"})
        assert client.get("/api/admin/d", params={"attributes": True}).json()["attributes"][
            "kind"
        ] == "directory"


class TestErrorMapping:
    def test_not_found(self, client: TestClient) -> None:
        response = client.get("/api/admin/missing.txt")
        assert response.status_code == 404
        body = response.json()
        assert body["kind"] == "not_found"
        assert body["path"] == "missing.txt"
        assert body["details"] == "no such file or directory"
        assert "missing.txt" in body["error"]

    def test_invalid_path(self, client: TestClient) -> None:
        response = client.get("/api/admin/~home/secrets")
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_path"

    def test_parent_missing(self, client: TestClient) -> None:
        response = client.post("/api/admin/a/b", json={"content": "x"})
        assert response.status_code == 400
        assert response.json()["kind"] == "parent_missing"

    def test_wrong_kind(self, client: TestClient) -> None:
        client.post("/api/admin/d", json={"is_directory": True})
        response = client.get("/api/admin/d")
        assert response.status_code == 400
        assert response.json()["kind"] == "wrong_kind"

    def test_storage_failure(self) -> None:
        app = create_app(vfs=VFSAdminService(BrokenNodeStore(), InMemoryContentStore()))
        with TestClient(app) as test_client:
            response = test_client.get("/api/admin/x", params={"exists": True})
        assert response.status_code == 500
        assert response.json()["kind"] == "storage_failure"


def _request(method: str = "GET", path: str = "/api/admin/x") -> Request:
    return Request(
        {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": b"",
            "headers": [],
            "scheme": "http",
            "server": ("testserver", 80),
        }
    )


class TestErrorHandler:
    @pytest.mark.asyncio()
    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (NotFoundError("a", "no such file or directory"), 404),
            (InvalidPathError("/~x", "home-relative paths are not allowed"), 400),
            (ParentMissingError("a/b", "parent does not exist"), 400),
            (WrongKindError("a", "is a directory"), 400),
            (DirectoryNotEmptyError("a", "directory is not empty"), 409),
            (StorageFailureError("a", "disk full"), 500),
        ],
    )
    async def test_renders_every_kind(self, error: VFSError, status: int) -> None:
        response = await vfs_error_handler(_request(), error)
        assert response.status_code == status
        body = json.loads(response.body)
        assert body["kind"] == error.kind.value
        assert body["path"] == error.path
        assert body["details"] == error.reason
        assert body["error"] == str(error)

    def test_home_prefix_behind_separator_is_rejected(self, client: TestClient) -> None:
        response = client.post("/api/admin//~x", json={"content": "x"})
        assert response.status_code == 400
        assert client.get("/api/admin").json()["entries"] == []
