"""CLI Error Handler.

Provides unified error handling for the CLI with support for:
- Human-readable output (default)
- JSON output for machine consumption (--json)
"""

import json
import sys
from typing import NoReturn

from cargows.foundation.errors import CargowsError, ErrorCode


def _wrap(error: CargowsError | Exception) -> CargowsError:
    """Wrap a generic exception so it renders like any other error."""
    if isinstance(error, CargowsError):
        return error
    return CargowsError(
        code=ErrorCode.RUNTIME_UNEXPECTED,
        context={"detail": f"{type(error).__name__}: {error}"},
        cause=error,
    )


def handle_error(
    error: CargowsError | Exception,
    json_output: bool = False,
) -> NoReturn:
    """Handle an error with optional JSON output for machine consumption.

    Args:
        error: The error to handle (CargowsError or generic Exception)
        json_output: If True, output JSON to stderr

    Raises:
        SystemExit: Always exits with code 1
    """
    if json_output:
        print(format_error_for_json(error), file=sys.stderr)
        sys.exit(1)

    _print_human_error(_wrap(error))
    sys.exit(1)


def _print_human_error(error: CargowsError) -> None:
    """Print error in human-readable format using rich."""
    from rich.console import Console
    from rich.markup import escape
    from rich.text import Text

    console = Console(stderr=True)

    header = Text()
    header.append("✗ ", style="bold red")
    header.append(error.error_id, style="bold red")
    header.append(f" {error.message}")
    console.print(header)

    if error.recovery_hints:
        console.print("\n[bold]What you can do:[/]")
        for i, hint in enumerate(error.recovery_hints, 1):
            console.print(f"  {i}. {escape(hint)}")


def format_error_for_json(error: CargowsError | Exception) -> str:
    """Format an error as JSON string.

    Args:
        error: The error to format

    Returns:
        JSON string representation of the error
    """
    error = _wrap(error)
    error_dict = error.to_dict()
    if error.cause:
        error_dict["cause"] = str(error.cause)
    return json.dumps(error_dict)
