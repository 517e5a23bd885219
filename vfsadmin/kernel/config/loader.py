"""Configuration loader for vfsadmin.

Parses configuration into :class:`~vfsadmin.kernel.config.models.VFSAdminConfig`.
Supports two config sources:

1. **kind: Config YAML** — loaded via explicit path or the
   ``VFSADMIN_CONFIG_PATH`` env var.
2. **pyproject.toml [tool.vfsadmin]** — auto-discovery fallback.

Environment variables override file values; see
:meth:`ConfigLoader._apply_env_overrides`.
"""

from __future__ import annotations

import os
import re
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from vfsadmin.kernel.config.models import (
    ConcurrencyConfig,
    LoggingConfig,
    ServerConfig,
    StorageConfig,
    VFSAdminConfig,
)
from vfsadmin.kernel.exceptions import ConfigurationError
from vfsadmin.kernel.logging import get_logger

_TRUTHY_VALUES = frozenset({"true", "1", "yes", "on", "enabled"})
_FALSY_VALUES = frozenset({"false", "0", "no", "off", "disabled"})

# env var -> (section, key)
_ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "VFSADMIN_LOG_LEVEL": ("logging", "level"),
    "VFSADMIN_LOG_FORMAT": ("logging", "format"),
    "VFSADMIN_LOG_FILE": ("logging", "output_file"),
    "VFSADMIN_LOG_COLOR": ("logging", "use_color"),
    "VFSADMIN_LOG_TIMESTAMP": ("logging", "include_timestamp"),
    "VFSADMIN_STORAGE_BACKEND": ("storage", "backend"),
    "VFSADMIN_DB_PATH": ("storage", "db_path"),
    "VFSADMIN_CONTENT_DIR": ("storage", "content_dir"),
    "VFSADMIN_LOCK_TIMEOUT": ("concurrency", "lock_timeout"),
    "VFSADMIN_HOST": ("server", "host"),
    "VFSADMIN_PORT": ("server", "port"),
}

# Fields whose file values may arrive as strings after ${VAR} substitution.
_TYPED_FIELDS = frozenset({"use_color", "include_timestamp", "port", "lock_timeout"})

_SECTIONS: dict[str, type] = {
    "logging": LoggingConfig,
    "storage": StorageConfig,
    "concurrency": ConcurrencyConfig,
    "server": ServerConfig,
}

logger = get_logger(__name__)


def _parse_bool_env(value: str) -> bool:
    """Parse boolean from environment variable value.

    Raises
    ------
    ValueError
        If value is not a recognized boolean string
    """
    normalized = value.lower().strip()
    if normalized in _TRUTHY_VALUES:
        return True
    if normalized in _FALSY_VALUES:
        return False
    expected = sorted(_TRUTHY_VALUES | _FALSY_VALUES)
    raise ValueError(f"Invalid boolean value: {value!r}. Expected one of: {expected}")


def _coerce_env(key: str, raw: str) -> Any:
    """Convert an env var string to the type of the config field it overrides."""
    if key in ("use_color", "include_timestamp"):
        return _parse_bool_env(raw)
    if key == "port":
        return int(raw)
    if key == "lock_timeout":
        return None if raw.lower() in ("none", "") else float(raw)
    if key in ("level",):
        return raw.upper()
    if key in ("format", "backend"):
        return raw.lower()
    return raw


class ConfigLoader:
    """Loads and processes vfsadmin configuration files.

    Supports two config sources:

    1. ``kind: Config`` YAML manifests (explicit path or env var)
    2. ``pyproject.toml [tool.vfsadmin]`` (auto-discovery)
    """

    ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

    def load_config_file(self, path: str | Path | None = None) -> VFSAdminConfig:
        """Load configuration from YAML or pyproject.toml.

        Raises
        ------
        FileNotFoundError
            If no configuration file is found
        ConfigurationError
            If the file content is invalid
        """
        config_path = self._find_config_file(path)
        return self._load_and_parse(config_path)

    def _load_and_parse(self, config_path: Path) -> VFSAdminConfig:
        logger.info("Loading configuration from {path}", path=config_path)

        if config_path.suffix in (".yaml", ".yml"):
            data = self._load_yaml_config(config_path)
        else:
            data = self._load_toml_config(config_path)
        return self.parse(data)

    def _load_yaml_config(self, config_path: Path) -> dict[str, Any]:
        """Load a kind: Config YAML file and return its ``spec`` mapping."""
        with config_path.open("r", encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(str(config_path), f"invalid YAML: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                str(config_path), f"expected a mapping, got {type(data).__name__}"
            )

        kind = data.get("kind")
        if kind != "Config":
            raise ConfigurationError(
                str(config_path),
                f"YAML config file must use 'kind: Config' manifest format, got 'kind: {kind}'",
            )

        spec = data.get("spec", {}) or {}
        if not isinstance(spec, dict):
            raise ConfigurationError(str(config_path), "'spec' must be a mapping")
        return spec

    def _load_toml_config(self, config_path: Path) -> dict[str, Any]:
        """Load a TOML file and return its ``[tool.vfsadmin]`` table (or the flat file)."""
        with config_path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(str(config_path), f"invalid TOML: {e}") from e

        if "tool" in data and "vfsadmin" in data.get("tool", {}):
            return data["tool"]["vfsadmin"]
        if config_path.name == "pyproject.toml":
            logger.warning("No [tool.vfsadmin] section found in pyproject.toml, using defaults")
            return {}
        return data

    def _find_config_file(self, path: str | Path | None) -> Path:
        """Find configuration file.

        Discovery order:
        1. Explicit path argument
        2. ``VFSADMIN_CONFIG_PATH`` env var
        3. ``pyproject.toml`` with ``[tool.vfsadmin]`` in CWD or a parent directory
        """
        if path:
            config_path = Path(path)
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return config_path

        if env_path := os.getenv("VFSADMIN_CONFIG_PATH"):
            config_path = Path(env_path)
            if config_path.exists():
                logger.debug("Using config from VFSADMIN_CONFIG_PATH: {}", config_path)
                return config_path
            logger.warning("VFSADMIN_CONFIG_PATH set but file not found: {}", config_path)

        current = Path.cwd()
        for directory in (current, *current.parents):
            pyproject = directory / "pyproject.toml"
            if not pyproject.exists():
                continue
            with pyproject.open("rb") as f:
                try:
                    data = tomllib.load(f)
                except tomllib.TOMLDecodeError:
                    continue
            if "vfsadmin" in data.get("tool", {}):
                return pyproject

        raise FileNotFoundError(
            "No configuration file found. Provide a kind: Config YAML path, "
            "set VFSADMIN_CONFIG_PATH, or add [tool.vfsadmin] to pyproject.toml"
        )

    def _substitute_env_vars(self, data: Any) -> Any:
        """Recursively replace ``${VAR}`` placeholders with environment values."""
        if isinstance(data, str):

            def replacer(match: re.Match[str]) -> str:
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    logger.debug(
                        "Environment variable ${{{var_name}}} not found, keeping placeholder",
                        var_name=var_name,
                    )
                    return match.group(0)
                return value

            return self.ENV_VAR_PATTERN.sub(replacer, data)

        if isinstance(data, dict):
            return {key: self._substitute_env_vars(value) for key, value in data.items()}

        if isinstance(data, list):
            return [self._substitute_env_vars(item) for item in data]

        return data

    def _apply_env_overrides(self, data: dict[str, dict[str, Any]]) -> None:
        """Apply ``VFSADMIN_*`` environment overrides in place.

        - VFSADMIN_LOG_LEVEL / VFSADMIN_LOG_FORMAT / VFSADMIN_LOG_FILE
        - VFSADMIN_LOG_COLOR / VFSADMIN_LOG_TIMESTAMP (true/false)
        - VFSADMIN_STORAGE_BACKEND / VFSADMIN_DB_PATH / VFSADMIN_CONTENT_DIR
        - VFSADMIN_LOCK_TIMEOUT (seconds, or "none")
        - VFSADMIN_HOST / VFSADMIN_PORT
        """
        for env_name, (section, key) in _ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if raw is None:
                continue
            try:
                value = _coerce_env(key, raw)
            except ValueError as e:
                logger.warning("Ignoring invalid {} value: {}", env_name, e)
                continue
            data.setdefault(section, {})[key] = value
            logger.debug("Overriding {}.{} from env", section, key)

    def _coerce_section(self, name: str, section: dict[str, Any]) -> dict[str, Any]:
        """Convert string values of non-string fields, e.g. ``port: ${PORT}``."""
        coerced = dict(section)
        for key, value in section.items():
            if key not in _TYPED_FIELDS or not isinstance(value, str):
                continue
            try:
                coerced[key] = _coerce_env(key, value)
            except ValueError as e:
                raise ConfigurationError(f"{name}.{key}", str(e)) from e
        return coerced

    def parse(self, data: dict[str, Any]) -> VFSAdminConfig:
        """Build a :class:`VFSAdminConfig` from a raw mapping.

        Raises
        ------
        ConfigurationError
            If a section is not a mapping or holds unknown keys or bad values
        """
        data = self._substitute_env_vars(data)
        sections: dict[str, dict[str, Any]] = {}
        for name in _SECTIONS:
            raw_section = data.get(name, {}) or {}
            if not isinstance(raw_section, dict):
                raise ConfigurationError(name, "section must be a mapping")
            sections[name] = self._coerce_section(name, raw_section)

        self._apply_env_overrides(sections)

        built: dict[str, Any] = {}
        for name, model in _SECTIONS.items():
            try:
                built[name] = model(**sections[name])
            except TypeError as e:
                raise ConfigurationError(name, str(e)) from e
        return VFSAdminConfig(**built)


def load_config(path: str | Path | None = None) -> VFSAdminConfig:
    """Load configuration from file, or defaults (plus env overrides) if none is found."""
    loader = ConfigLoader()
    try:
        return loader.load_config_file(path)
    except FileNotFoundError:
        if path:
            raise
        logger.info("No configuration file found, using defaults")
        return loader.parse({})


@lru_cache(maxsize=1)
def get_default_config() -> VFSAdminConfig:
    """Defaults without file or environment input."""
    return VFSAdminConfig()


__all__ = ["ConfigLoader", "get_default_config", "load_config"]
