"""Main CLI entry point.

    cargows init            # consolidate every crate under . into one workspace
    cargows init ~/monorepo -r 2
"""

import sys

import click
from rich.console import Console

from cargows.foundation.config import get_config
from cargows.foundation.logging import configure_logging
from cargows.interface.cli.commands.init_cmd import init

console = Console(stderr=True)


def cli_entrypoint() -> None:
    """Wrapped entrypoint with global error handling.

    Catches CargowsError and any unexpected exception and displays it
    nicely instead of a traceback.
    Called from pyproject.toml [project.scripts].
    """
    try:
        main(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except click.Abort:
        console.print("\n[dim]Aborted[/]")
        sys.exit(130)
    except Exception as e:
        from cargows.interface.cli.core.error_handler import handle_error

        handle_error(e, json_output="--json" in sys.argv[1:])


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="cargows", prog_name="cargows")
@click.pass_context
def main(ctx: click.Context, debug: bool) -> None:
    """Bootstrap Cargo workspaces from existing crates."""
    ctx.ensure_object(dict)
    config = get_config()
    configure_logging(debug=debug, config_debug=config.debug)
    ctx.obj["config"] = config


main.add_command(init)
