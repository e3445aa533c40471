"""Cargows CLI.

- core/ - entry point, error handling
- commands/ - command implementations (*_cmd.py files)
"""

from cargows.interface.cli.core.main import cli_entrypoint, main

__all__ = ["cli_entrypoint", "main"]
