"""Path resolution for the VFS namespace.

Turns a raw, slash-separated logical path into its canonical key:

- redundant separators are collapsed (``"a//b/"`` -> ``"a/b"``)
- the canonical form has no leading or trailing separator
- ``.`` and ``..`` segments, backslashes, drive letters (``C:``), a ``~``
  leading the first segment and C0/C1 control characters are rejected

The root of the namespace is implicit and is not addressable; input that
collapses to nothing is therefore invalid.

Examples
--------
>>> resolve("/docs//readme.md")
'docs/readme.md'
>>> parent_of("docs/readme.md")
'docs'
>>> parent_of("docs") is None
True
"""

from __future__ import annotations

import re

from vfsadmin.kernel.exceptions import InvalidPathError

SEPARATOR = "/"
MAX_SEGMENT_LENGTH = 255
MAX_PATH_LENGTH = 4096

_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def resolve(raw_path: object) -> str:
    """Normalize and validate a raw path.

    Args
    ----
        raw_path: Path as received from a caller.

    Returns
    -------
        The canonical path.

    Raises
    ------
    InvalidPathError
        If the path is empty, escapes the namespace or contains
        forbidden characters or segments.
    """
    if not isinstance(raw_path, str):
        raise InvalidPathError(
            repr(raw_path), f"path must be a string, got {type(raw_path).__name__}"
        )
    if not raw_path:
        raise InvalidPathError(raw_path, "path is empty")
    if _CONTROL_CHARS.search(raw_path):
        escaped = raw_path.encode("unicode_escape").decode()
        raise InvalidPathError(escaped, "path contains control characters")
    if "\\" in raw_path:
        raise InvalidPathError(raw_path, "backslash is not a valid separator")
    if _DRIVE_PREFIX.match(raw_path.lstrip(SEPARATOR)):
        raise InvalidPathError(raw_path, "drive-qualified paths are not allowed")

    segments = [segment for segment in raw_path.split(SEPARATOR) if segment]
    if not segments:
        raise InvalidPathError(raw_path, "path refers to the root, which is not addressable")
    # Checked after splitting so "/~x" cannot canonicalize to "~x".
    if segments[0].startswith("~"):
        raise InvalidPathError(raw_path, "home-relative paths are not allowed")

    for segment in segments:
        if segment in (".", ".."):
            raise InvalidPathError(raw_path, f"relative segment {segment!r} is not allowed")
        if len(segment) > MAX_SEGMENT_LENGTH:
            raise InvalidPathError(raw_path, f"segment exceeds {MAX_SEGMENT_LENGTH} characters")

    canonical = SEPARATOR.join(segments)
    if len(canonical) > MAX_PATH_LENGTH:
        raise InvalidPathError(raw_path, f"path exceeds {MAX_PATH_LENGTH} characters")
    return canonical


def parent_of(path: str) -> str | None:
    """Return the parent of a canonical path, or None for a top-level path."""
    head, sep, _ = path.rpartition(SEPARATOR)
    return head if sep else None


def name_of(path: str) -> str:
    """Return the last segment of a canonical path."""
    return path.rpartition(SEPARATOR)[2]


def is_descendant(path: str, ancestor: str) -> bool:
    """True if ``ancestor`` is a proper prefix of ``path`` at a segment boundary."""
    return path.startswith(ancestor + SEPARATOR)


def depth_of(path: str) -> int:
    return path.count(SEPARATOR) + 1


__all__ = [
    "MAX_PATH_LENGTH",
    "MAX_SEGMENT_LENGTH",
    "SEPARATOR",
    "depth_of",
    "is_descendant",
    "name_of",
    "parent_of",
    "resolve",
]
