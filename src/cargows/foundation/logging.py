"""Logging configuration for cargows.

Provides centralized logging setup with sensible defaults:
- Default: WARNING level (quiet operation, warnings still shown)
- --debug flag: DEBUG level with full context
- CARGOWS_DEBUG=true or CARGOWS_LOG_LEVEL=DEBUG env vars: Override for CI/scripting
- Config file: debug: true in .cargows/config.yaml

Usage:
    from cargows.foundation.logging import configure_logging
    configure_logging(debug=debug)

Priority for level resolution (highest to lowest):
    1. Explicit `level` parameter (programmatic override)
    2. CARGOWS_LOG_LEVEL env var (any level: DEBUG, INFO, WARNING, etc.)
    3. CARGOWS_DEBUG=true env var (simple boolean)
    4. `debug=True` parameter (--debug flag)
    5. Config file: debug: true
    6. WARNING (default)
"""

import logging
import os
import sys

# Format includes module path for tracing issues
_DEBUG_FORMAT = "%(asctime)s %(name)s [%(levelname)s] %(message)s"
_DEFAULT_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(
    *,
    debug: bool = False,
    level: int | str | None = None,
    stream: object = None,
    config_debug: bool = False,
) -> int:
    """Configure logging for the cargows CLI.

    Args:
        debug: Enable DEBUG level with detailed format
        level: Override log level (int or string like "DEBUG", "INFO")
        stream: Output stream (default: stderr)
        config_debug: ``debug`` value read from the config file

    Returns:
        The resolved log level.
    """
    resolved_level: int
    if level is not None:
        resolved_level = _parse_level(level)
    elif env_level := os.environ.get("CARGOWS_LOG_LEVEL"):
        resolved_level = _parse_level(env_level)
    elif os.environ.get("CARGOWS_DEBUG", "").lower() in ("true", "1", "yes"):
        resolved_level = logging.DEBUG
    elif debug or config_debug:
        resolved_level = logging.DEBUG
    else:
        resolved_level = logging.WARNING

    log_format = _DEBUG_FORMAT if resolved_level <= logging.DEBUG else _DEFAULT_FORMAT

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved_level)
    handler.setFormatter(logging.Formatter(log_format))
    root_logger.addHandler(handler)

    logging.getLogger(__name__).debug(
        "Logging configured: level=%s, debug=%s, from_config=%s",
        logging.getLevelName(resolved_level),
        debug,
        config_debug,
    )
    return resolved_level


def _parse_level(level: int | str) -> int:
    """Parse log level from int or string."""
    if isinstance(level, int):
        return level
    numeric = getattr(logging, level.upper(), None)
    if isinstance(numeric, int):
        return numeric
    try:
        return int(level)
    except ValueError:
        return logging.WARNING
