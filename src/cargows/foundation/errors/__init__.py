"""Error system for cargows."""

from cargows.foundation.errors.errors import (
    ERROR_MESSAGES,
    RECOVERY_HINTS,
    CargowsError,
    ErrorCode,
    config_error,
    format_error,
    io_error,
    metadata_error,
)

__all__ = [
    "ErrorCode",
    "ERROR_MESSAGES",
    "RECOVERY_HINTS",
    "CargowsError",
    "config_error",
    "format_error",
    "io_error",
    "metadata_error",
]
