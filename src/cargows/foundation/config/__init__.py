"""Configuration management for cargows."""

from cargows.foundation.config.loader import (
    VALID_RESOLVERS,
    CargowsConfig,
    get_config,
    load_config,
    reset_config,
)

__all__ = [
    "VALID_RESOLVERS",
    "CargowsConfig",
    "get_config",
    "load_config",
    "reset_config",
]
