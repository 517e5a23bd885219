"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from vfsadmin.kernel.exceptions import (
    ConfigurationError,
    DirectoryNotEmptyError,
    ErrorKind,
    InvalidPathError,
    NotFoundError,
    ParentMissingError,
    StorageFailureError,
    VFSAdminError,
    VFSError,
    WrongKindError,
)


class TestVFSError:
    @pytest.mark.parametrize(
        ("error_cls", "kind"),
        [
            (InvalidPathError, ErrorKind.INVALID_PATH),
            (NotFoundError, ErrorKind.NOT_FOUND),
            (ParentMissingError, ErrorKind.PARENT_MISSING),
            (WrongKindError, ErrorKind.WRONG_KIND),
            (DirectoryNotEmptyError, ErrorKind.DIRECTORY_NOT_EMPTY),
            (StorageFailureError, ErrorKind.STORAGE_FAILURE),
        ],
    )
    def test_kind_is_pinned_per_class(self, error_cls: type[VFSError], kind: ErrorKind) -> None:
        error = error_cls("a/b", "reason")
        assert error.kind is kind
        assert isinstance(error, VFSError)
        assert isinstance(error, VFSAdminError)

    def test_message_and_attributes(self) -> None:
        error = NotFoundError("docs/readme.md", "no such file or directory")
        assert str(error) == "VFS error at 'docs/readme.md': no such file or directory"
        assert error.path == "docs/readme.md"
        assert error.reason == "no such file or directory"

    def test_to_dict(self) -> None:
        error = DirectoryNotEmptyError("docs", "directory has children")
        assert error.to_dict() == {
            "kind": "directory_not_empty",
            "path": "docs",
            "details": "directory has children",
        }

    def test_error_kind_values_are_strings(self) -> None:
        assert ErrorKind.WRONG_KIND == "wrong_kind"


class TestConfigurationError:
    def test_message(self) -> None:
        error = ConfigurationError("storage.backend", "unknown backend 'redis'")
        assert "storage.backend" in str(error)
        assert error.component == "storage.backend"
        assert isinstance(error, VFSAdminError)
        assert not isinstance(error, VFSError)
