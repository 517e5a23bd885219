"""Configuration data models for vfsadmin."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from vfsadmin.kernel.exceptions import ConfigurationError

StorageBackend = Literal["memory", "sqlite"]


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Logging configuration.

    Attributes
    ----------
    level : str, default="INFO"
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    format : str, default="structured"
        Output format (console, json, structured, rich)
    output_file : str | None, default=None
        Optional file path to write JSON logs to
    use_color : bool, default=True
        Use ANSI color codes (auto-disabled for non-TTY)
    include_timestamp : bool, default=True
        Include timestamp in log output

    Examples
    --------
    TOML configuration:

    ```toml
    [tool.vfsadmin.logging]
    level = "DEBUG"
    format = "rich"
    ```

    Environment variable overrides:

    ```bash
    export VFSADMIN_LOG_LEVEL=DEBUG
    export VFSADMIN_LOG_FORMAT=json
    export VFSADMIN_LOG_FILE=/var/log/vfsadmin/app.log
    ```
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "structured", "rich"] = "structured"
    output_file: str | None = None
    use_color: bool = True
    include_timestamp: bool = True

    def __post_init__(self) -> None:
        if self.level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError("logging.level", f"unknown level {self.level!r}")
        if self.format not in ("console", "json", "structured", "rich"):
            raise ConfigurationError("logging.format", f"unknown format {self.format!r}")


@dataclass(frozen=True, slots=True)
class StorageConfig:
    """Backing store selection.

    Attributes
    ----------
    backend : {"memory", "sqlite"}
        ``memory`` keeps metadata and content in process. ``sqlite`` keeps
        metadata in a SQLite database and content as blob files on disk.
    db_path : str
        SQLite database file (``sqlite`` backend only).
    content_dir : str
        Directory for content blobs (``sqlite`` backend only).
    """

    backend: StorageBackend = "memory"
    db_path: str = "vfsadmin.db"
    content_dir: str = "vfsadmin-content"

    def __post_init__(self) -> None:
        if self.backend not in ("memory", "sqlite"):
            raise ConfigurationError(
                "storage.backend", f"expected 'memory' or 'sqlite', got {self.backend!r}"
            )
        if self.backend == "sqlite" and not self.db_path:
            raise ConfigurationError("storage.db_path", "required for the sqlite backend")
        if self.backend == "sqlite" and not self.content_dir:
            raise ConfigurationError("storage.content_dir", "required for the sqlite backend")


@dataclass(frozen=True, slots=True)
class ConcurrencyConfig:
    """Concurrency limits.

    Attributes
    ----------
    lock_timeout : float | None
        Seconds an operation may wait for its path locks before failing with
        a storage failure. None waits forever.
    """

    lock_timeout: float | None = 30.0

    def __post_init__(self) -> None:
        if self.lock_timeout is not None and self.lock_timeout <= 0:
            raise ConfigurationError(
                "concurrency.lock_timeout", f"must be positive, got {self.lock_timeout!r}"
            )


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """HTTP admin API bind address."""

    host: str = "127.0.0.1"
    port: int = 8787

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ConfigurationError("server.port", f"out of range: {self.port!r}")


@dataclass(frozen=True, slots=True)
class VFSAdminConfig:
    """Complete vfsadmin configuration."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    concurrency: ConcurrencyConfig = field(default_factory=ConcurrencyConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


__all__ = [
    "ConcurrencyConfig",
    "LoggingConfig",
    "ServerConfig",
    "StorageBackend",
    "StorageConfig",
    "VFSAdminConfig",
]
