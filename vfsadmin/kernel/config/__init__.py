"""Configuration loading and management for vfsadmin."""

from vfsadmin.kernel.config.loader import ConfigLoader, get_default_config, load_config
from vfsadmin.kernel.config.models import (
    ConcurrencyConfig,
    LoggingConfig,
    ServerConfig,
    StorageConfig,
    VFSAdminConfig,
)

__all__ = [
    "ConcurrencyConfig",
    "ConfigLoader",
    "LoggingConfig",
    "ServerConfig",
    "StorageConfig",
    "VFSAdminConfig",
    "get_default_config",
    "load_config",
]
