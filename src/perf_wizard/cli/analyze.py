"""Main analysis command: unified through AnalysisKernel."""

from pathlib import Path
from typing import Optional

import typer

from ..exceptions import PerfWizardError
from ..formatters import get_formatter
from ..insights import AnalysisKernel
from ..logging_config import setup_logging_for
from . import app
from ._common import console, err_console, resolve_output_format, resolve_settings


@app.command()
def analyze(
    paths: Optional[list[Path]] = typer.Argument(
        None,
        help="Files or directories to analyze (default: current directory)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results in JSON format",
    ),
    summary: bool = typer.Option(
        False,
        "--summary",
        help="Show only the project summary",
    ),
    detailed: bool = typer.Option(
        False,
        "--detailed",
        help="Show every finding grouped by category",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (JSON or TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Verbose debug output",
    ),
    exclude: Optional[list[str]] = typer.Option(
        None,
        "--exclude",
        "-e",
        help="Exclude patterns (repeatable or comma-separated)",
    ),
    score_threshold: Optional[int] = typer.Option(
        None,
        "--score-threshold",
        help="Minimum acceptable average score",
        min=0,
        max=100,
    ),
    no_react: bool = typer.Option(
        False,
        "--no-react",
        help="Disable React component analysis",
    ),
    no_vue: bool = typer.Option(
        False,
        "--no-vue",
        help="Skip syntax analysis of .vue files",
    ),
    autofix: bool = typer.Option(
        False,
        "--autofix",
        help="Mark auto-fixable findings in detailed output",
    ),
    ci: bool = typer.Option(
        False,
        "--ci",
        help="Exit 1 when the average score is below the threshold",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel workers (default: auto-detect)",
        min=1,
        max=32,
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Per-file budget in seconds for syntax analysis",
        min=0.001,
    ),
):
    """
    Analyze JavaScript, TypeScript, JSX and Vue/Svelte sources.

    Reports nested loops, leaking listeners and timers, heavy imports, long
    method chains and React rendering pitfalls, scores each file from 0 to
    100 and grades the project.

    [bold cyan]Examples:[/bold cyan]

      perf-wizard analyze

      perf-wizard analyze src --json

      perf-wizard analyze src --ci --score-threshold 70

      perf-wizard analyze . --exclude legacy,vendor --detailed
    """
    try:
        settings = resolve_settings(
            config=config,
            output_format=resolve_output_format(json_output, summary, detailed),
            quiet=quiet,
            debug=debug,
            exclude=exclude,
            score_threshold=score_threshold,
            no_react=no_react,
            no_vue=no_vue,
            autofix=autofix,
            workers=workers,
            timeout=timeout,
        )
    except PerfWizardError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    logger = setup_logging_for(settings.log_level)
    targets = paths or [Path.cwd()]

    try:
        run = AnalysisKernel(settings).run(targets)
    except PerfWizardError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        err_console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)

    if not run.reports and settings.output_format != "json":
        console.print("[yellow]No files found to analyze[/yellow]")
        raise typer.Exit(0)

    output_format = settings.output_format
    if output_format == "console" and settings.log_level == "quiet":
        output_format = "summary"
    get_formatter(output_format, autofix=settings.autofix).render(run)

    if ci and not run.summary.passed_threshold:
        err_console.print(
            f"[red]--ci:[/red] average score {run.summary.average_score} is below "
            f"the threshold {run.summary.score_threshold}"
        )
        raise typer.Exit(1)
