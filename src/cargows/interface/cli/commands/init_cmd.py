"""Workspace init command.

Creates or updates the root Cargo.toml so it declares every crate found
under PATH as a workspace member.
"""

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cargows.foundation.config import VALID_RESOLVERS, CargowsConfig, get_config
from cargows.foundation.errors import CargowsError
from cargows.workspace import InitResult, Resolver, initialize_workspace

console = Console()


@click.command("init")
@click.argument("path", type=click.Path(file_okay=False), default=".")
@click.option(
    "--resolver",
    "-r",
    type=click.Choice(VALID_RESOLVERS),
    default=None,
    help="Workspace feature resolver version [default: 3]",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output as JSON",
)
@click.pass_context
def init(ctx: click.Context, path: str, resolver: str | None, json_output: bool) -> None:
    """Initialize a new cargo workspace.

    \b
    Finds every Cargo.toml under PATH, resolves each one to its workspace
    root with `cargo metadata`, and writes the distinct roots to
    [workspace] members in PATH/Cargo.toml. PATH is created and
    git-initialized if it does not exist.

    \b
    Running it again on a workspace that already lists members does nothing.

    \b
    Examples:
        cargows init
        cargows init ~/code/monorepo --resolver 2
        cargows init . --json
    """
    config: CargowsConfig = (ctx.obj or {}).get("config") or get_config()

    try:
        result = initialize_workspace(
            path,
            Resolver(resolver) if resolver else None,
            config=config,
        )
    except CargowsError as e:
        from cargows.interface.cli.core.error_handler import handle_error

        handle_error(e, json_output=json_output)

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return

    _print_result(result)


def _print_result(result: InitResult) -> None:
    if result.already_initialized:
        console.print(f"[cyan]Already initialized[/cyan] {escape(str(result.root))}")
        return

    if result.created:
        console.print(f"[dim]Created {escape(str(result.root))}[/dim]")
    for warning in result.warnings:
        console.print(f"[yellow]⚠ {warning.error_id} {escape(warning.message)}[/yellow]")

    if result.members:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Member", style="green")
        for member in result.members:
            table.add_row(escape(member) or "[dim](root package)[/dim]")
        console.print(table)
    else:
        console.print("[yellow]No crates found[/yellow]")

    if result.skipped:
        console.print(
            f"[yellow]⚠ Skipped {len(result.skipped)} manifest(s) cargo could not "
            "resolve (run with --debug for details)[/yellow]"
        )

    console.print(
        f"[green]✓[/green] Initialized [cyan]{escape(str(result.root))}[/cyan] "
        f"[dim](resolver = {result.resolver})[/dim]"
    )
