"""Cargows Error System.

Provides structured error handling with:
- Numeric error codes for programmatic handling
- User-friendly messages naming the failing path and operation
- Recovery hints
- Context for debugging

Only I/O, format, config and unexpected runtime errors abort a run. Metadata and version-control
errors are recovered where they happen and surface as warnings.
"""


from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Numeric error codes organized by category.

    Format: XYYY where X = category, YYY = specific error

    Categories:
        2xxx - Metadata resolution errors
        3xxx - Version control errors
        4xxx - Manifest format errors
        5xxx - Configuration errors
        6xxx - Runtime errors
        7xxx - Filesystem/IO errors
    """

    # 2xxx - Metadata Errors
    METADATA_RESOLUTION_FAILED = 2001

    # 3xxx - Version Control Errors
    VCS_INIT_FAILED = 3001
    IGNORE_FILE_WRITE_FAILED = 3002

    # 4xxx - Manifest Format Errors
    MANIFEST_PARSE_ERROR = 4001
    WORKSPACE_NOT_TABLE = 4002
    MEMBERS_NOT_ARRAY = 4003

    # 5xxx - Configuration Errors
    CONFIG_INVALID = 5001

    # 6xxx - Runtime Errors
    RUNTIME_UNEXPECTED = 6001

    # 7xxx - IO Errors
    DIRECTORY_CREATE_FAILED = 7001
    FILE_READ_FAILED = 7002
    FILE_WRITE_FAILED = 7003

    @property
    def category(self) -> str:
        """Get the error category name."""
        prefix = self.value // 1000
        return {
            2: "metadata",
            3: "vcs",
            4: "format",
            5: "config",
            6: "runtime",
            7: "io",
        }.get(prefix, "unknown")

    @property
    def is_fatal(self) -> bool:
        """Whether this error type aborts the command."""
        return self.category in ("format", "config", "runtime", "io")


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    # Metadata errors
    ErrorCode.METADATA_RESOLUTION_FAILED: "Could not resolve workspace root for '{path}': {detail}",

    # VCS errors
    ErrorCode.VCS_INIT_FAILED: "Version control init failed in '{path}'.",
    ErrorCode.IGNORE_FILE_WRITE_FAILED: "Failed to write ignore file '{path}': {detail}",

    # Format errors
    ErrorCode.MANIFEST_PARSE_ERROR: "Failed to parse manifest '{path}': {detail}",
    ErrorCode.WORKSPACE_NOT_TABLE: "'workspace' in '{path}' is not a table.",
    ErrorCode.MEMBERS_NOT_ARRAY: "'workspace.members' in '{path}' is not an array.",

    # Config errors
    ErrorCode.CONFIG_INVALID: "Invalid configuration for '{key}': {detail}",

    # Runtime errors
    ErrorCode.RUNTIME_UNEXPECTED: "Unexpected error: {detail}",

    # IO errors
    ErrorCode.DIRECTORY_CREATE_FAILED: "Failed to create directory '{path}': {detail}",
    ErrorCode.FILE_READ_FAILED: "Failed to read file '{path}': {detail}",
    ErrorCode.FILE_WRITE_FAILED: "Failed to write file '{path}': {detail}",
}


RECOVERY_HINTS: dict[ErrorCode, list[str]] = {
    ErrorCode.METADATA_RESOLUTION_FAILED: [
        "Run 'cargo metadata --manifest-path {path}' to see the full error",
        "Check that cargo is installed and on PATH",
    ],
    ErrorCode.MANIFEST_PARSE_ERROR: [
        "Fix the TOML syntax error and run the command again",
    ],
    ErrorCode.WORKSPACE_NOT_TABLE: [
        "Declare the workspace as a '[workspace]' table",
        "Inline tables ('workspace = {{ ... }}') are not edited by this tool",
    ],
    ErrorCode.MEMBERS_NOT_ARRAY: [
        "Declare members as an array: members = [\"crate-a\"]",
    ],
    ErrorCode.CONFIG_INVALID: [
        "Check .cargows/config.yaml and CARGOWS_* environment variables",
    ],
    ErrorCode.DIRECTORY_CREATE_FAILED: [
        "Check that the parent directory is writable",
        "Make sure no file exists at that path",
    ],
    ErrorCode.FILE_WRITE_FAILED: [
        "Check file permissions on the workspace root",
    ],
}


class CargowsError(Exception):
    """Base error type for all cargows errors.

    Example:
        >>> err = CargowsError(
        ...     code=ErrorCode.MEMBERS_NOT_ARRAY,
        ...     context={"path": "Cargo.toml"},
        ... )
        >>> print(err)
        [CW-4003] 'workspace.members' in 'Cargo.toml' is not an array.
    """

    def __init__(
        self,
        code: ErrorCode,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.context = context or {}
        self.cause = cause
        super().__init__(str(self))

    @property
    def message(self) -> str:
        """Get the formatted user-friendly message."""
        template = ERROR_MESSAGES.get(self.code, "An error occurred: {detail}")
        try:
            return template.format(**self.context)
        except KeyError:
            return template

    @property
    def recovery_hints(self) -> list[str]:
        """Get recovery suggestions for this error."""
        formatted = []
        for hint in RECOVERY_HINTS.get(self.code, []):
            try:
                formatted.append(hint.format(**self.context))
            except KeyError:
                formatted.append(hint)
        return formatted

    @property
    def is_fatal(self) -> bool:
        return self.code.is_fatal

    @property
    def category(self) -> str:
        return self.code.category

    @property
    def error_id(self) -> str:
        """Get the error ID string (e.g., 'CW-4003')."""
        return f"CW-{self.code.value}"

    def __str__(self) -> str:
        return f"[{self.error_id}] {self.message}"

    def __repr__(self) -> str:
        return f"CargowsError(code={self.code!r}, context={self.context!r})"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dict for logging/JSON output."""
        return {
            "error_id": self.error_id,
            "code": self.code.value,
            "category": self.category,
            "message": self.message,
            "fatal": self.is_fatal,
            "recovery_hints": self.recovery_hints,
            "context": {k: str(v) for k, v in self.context.items()},
        }


# Convenience factory functions

def io_error(
    code: ErrorCode,
    path: object,
    cause: OSError,
) -> CargowsError:
    """Create a filesystem error from an OSError."""
    return CargowsError(
        code=code,
        context={"path": str(path), "detail": cause.strerror or str(cause)},
        cause=cause,
    )


def format_error(
    code: ErrorCode,
    path: object,
    detail: str = "",
    cause: Exception | None = None,
) -> CargowsError:
    """Create a manifest format error."""
    return CargowsError(
        code=code,
        context={"path": str(path), "detail": detail},
        cause=cause,
    )


def metadata_error(
    path: object,
    detail: str,
    cause: Exception | None = None,
) -> CargowsError:
    """Create a METADATA_RESOLUTION_FAILED error."""
    return CargowsError(
        code=ErrorCode.METADATA_RESOLUTION_FAILED,
        context={"path": str(path), "detail": detail},
        cause=cause,
    )


def config_error(key: str, detail: str) -> CargowsError:
    """Create a configuration error."""
    return CargowsError(
        code=ErrorCode.CONFIG_INVALID,
        context={"key": key, "detail": detail},
    )
