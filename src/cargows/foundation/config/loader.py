"""Cargows configuration management.

Loads configuration from .cargows/config.yaml with sensible defaults.
All settings can be overridden via environment variables (CARGOWS_*).

Config locations (in priority order):
1. CARGOWS_* environment variables
2. Explicit path passed to load_config()
3. .cargows/config.yaml (project-local)
4. ~/.cargows/config.yaml (user-global)
5. Built-in defaults
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from cargows.foundation.errors import config_error

logger = logging.getLogger(__name__)

_ENV_PREFIX = "CARGOWS_"

# Env vars read by configure_logging, not by the config loader
_LOGGING_ENV_VARS = frozenset({"CARGOWS_DEBUG", "CARGOWS_LOG_LEVEL"})

VALID_RESOLVERS = ("1", "2", "3")


@dataclass(frozen=True, slots=True)
class CargowsConfig:
    """Root configuration for cargows."""

    default_resolver: str = "3"
    """Resolver written when neither the CLI nor the manifest sets one."""

    cargo: str = "cargo"
    """Cargo executable used for metadata resolution."""

    git: str = "git"
    """Git executable used to initialize new workspaces."""

    metadata_timeout: float = 60.0
    """Seconds to wait for a single ``cargo metadata`` call."""

    vcs_timeout: float = 10.0
    """Seconds to wait for ``git init``."""

    offline: bool = False
    """Pass --offline to cargo metadata."""

    ignore_pattern: str = "**/target"
    """Entry written to .gitignore in newly created workspaces."""

    debug: bool = False
    """Enable debug logging by default."""


_config: CargowsConfig | None = None


def _coerce(value: str, default: Any) -> Any:
    """Coerce an environment string to the type of the field default."""
    if isinstance(default, bool):
        return value.lower() in ("true", "1", "yes")
    if isinstance(default, float):
        return float(value)
    if isinstance(default, int):
        return int(value)
    return value


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides.

    Environment variables follow pattern: CARGOWS_<FIELD>

    Examples:
        CARGOWS_DEFAULT_RESOLVER=2
        CARGOWS_METADATA_TIMEOUT=120
        CARGOWS_OFFLINE=true
    """
    defaults = asdict(CargowsConfig())

    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX) or key in _LOGGING_ENV_VARS:
            continue

        name = key[len(_ENV_PREFIX):].lower()
        if name not in defaults:
            continue

        try:
            config_dict[name] = _coerce(value, defaults[name])
        except ValueError as e:
            raise config_error(name, f"{key}={value!r}: {e}") from e

    return config_dict


def _dict_to_config(data: dict[str, Any]) -> CargowsConfig:
    """Convert a dict to CargowsConfig, ignoring unknown keys."""
    known = {f.name for f in fields(CargowsConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.debug("Ignoring unknown config keys: %s", ", ".join(unknown))

    values = {k: v for k, v in data.items() if k in known}
    resolver = str(values.get("default_resolver", "3"))
    if resolver not in VALID_RESOLVERS:
        raise config_error(
            "default_resolver",
            f"expected one of {', '.join(VALID_RESOLVERS)}, got {resolver!r}",
        )
    values["default_resolver"] = resolver

    return CargowsConfig(**values)


def load_config(path: str | Path | None = None) -> CargowsConfig:
    """Load configuration from file with defaults and env overrides.

    Args:
        path: Optional explicit config file path.

    Returns:
        Merged CargowsConfig instance.
    """
    global _config

    config_dict: dict[str, Any] = asdict(CargowsConfig())

    config_paths = []
    if path:
        config_paths.append(Path(path))
    config_paths.extend([
        Path(".cargows/config.yaml"),
        Path.home() / ".cargows" / "config.yaml",
    ])

    for config_path in config_paths:
        if config_path.exists():
            try:
                with open(config_path, encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Skipping unreadable config %s: %s", config_path, e)
                continue
            if not isinstance(file_config, dict):
                logger.warning("Skipping config %s: not a mapping", config_path)
                continue
            config_dict.update(file_config)
            logger.debug("Loaded config from %s", config_path)
            break  # Use first found config

    config_dict = _apply_env_overrides(config_dict)

    _config = _dict_to_config(config_dict)
    return _config


def get_config() -> CargowsConfig:
    """Get the current configuration, loading if needed."""
    if _config is None:
        return load_config()
    return _config


def reset_config() -> None:
    """Reset the global config (useful for testing)."""
    global _config
    _config = None
