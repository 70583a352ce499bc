"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="perf-wizard",
    help="Perf Wizard - Performance diagnostics for JavaScript and TypeScript projects",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.command()
def version() -> None:
    """Show version and exit."""
    console.print(f"[bold cyan]Perf Wizard[/bold cyan] version [green]{__version__}[/green]")


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
