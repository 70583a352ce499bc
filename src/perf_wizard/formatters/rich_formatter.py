"""Rich terminal formatters for Perf Wizard."""

import io
from collections import defaultdict
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..insights.kernel import AnalysisRun
from ..insights.models import FileReport, FindingKind, ProjectSummary, Severity, format_size
from .base import BaseFormatter


def _grade_style(grade: str) -> str:
    if grade in ("A+", "A"):
        return "green"
    elif grade == "B":
        return "yellow"
    else:
        return "red"


def _score_style(score: int) -> str:
    if score >= 80:
        return "green"
    elif score >= 60:
        return "yellow"
    else:
        return "red"


_SEVERITY_STYLES = {
    Severity.HIGH: "[red bold]high[/red bold]",
    Severity.MEDIUM: "[yellow]medium[/yellow]",
    Severity.LOW: "[blue]low[/blue]",
    Severity.INFO: "[green]info[/green]",
}


def capture(render, width: int = 100) -> str:
    """Run ``render(console)`` against an uncolored in-memory console."""
    buffer = io.StringIO()
    console = Console(file=buffer, width=width, color_system=None, force_terminal=False)
    render(console)
    return buffer.getvalue()


def print_summary(console: Console, summary: ProjectSummary) -> None:
    """Overall grade, totals, issue counts and timing."""
    style = _grade_style(summary.grade)
    lines = [
        f"[{style}]Overall Grade: {summary.grade} ({summary.average_score}/100)[/{style}]",
        f"Analyzed: [bold]{summary.total_files}[/bold] files ({format_size(summary.total_size)})",
        f"Estimated Bundle: [cyan]{format_size(summary.estimated_bundle_size)}[/cyan]",
    ]
    issues = summary.issue_count
    if issues.get("high"):
        lines.append(f"[red]High Priority Issues: {issues['high']}[/red]")
    if issues.get("medium"):
        lines.append(f"[yellow]Medium Priority Issues: {issues['medium']}[/yellow]")
    if issues.get("low"):
        lines.append(f"[blue]Optimization Opportunities: {issues['low']}[/blue]")
    if not issues.get("high") and not issues.get("medium"):
        lines.append("[green]No critical issues found[/green]")
    lines.append(f"[dim]Execution time: {summary.execution_ms}ms[/dim]")

    console.print(
        Panel("\n".join(lines), title="[bold cyan]Performance Summary[/bold cyan]", expand=False)
    )


class RichFormatter(BaseFormatter):
    """Overview, critical issues, per-file high severity findings and summary."""

    def __init__(self, console: Optional[Console] = None, autofix: bool = False):
        self.console = console or Console()
        self.autofix = autofix

    def render(self, run: AnalysisRun) -> None:
        self._print_run(self.console, run)

    def format(self, run: AnalysisRun) -> str:
        return capture(lambda console: self._print_run(console, run))

    def _print_run(self, console: Console, run: AnalysisRun) -> None:
        self._print_overview(console, run.summary)
        self._print_critical(console, run.summary)
        self._print_files(console, run.reports)
        print_summary(console, run.summary)

    # -- private helpers --

    def _print_overview(self, console: Console, summary: ProjectSummary) -> None:
        style = _grade_style(summary.grade)
        console.print("[bold cyan]Performance Analysis Results[/bold cyan]")
        console.print()
        console.print("[blue]Performance Overview[/blue]")
        console.print(f"   [{style}]Grade: {summary.grade} (Score: {summary.average_score}/100)[/{style}]")
        console.print(f"   [yellow]Bundle Size: {format_size(summary.estimated_bundle_size)}[/yellow]")
        console.print()

    def _print_critical(self, console: Console, summary: ProjectSummary) -> None:
        if not summary.critical_issues:
            return
        console.print("[red bold]Critical Issues to Fix:[/red bold]")
        for i, issue in enumerate(summary.critical_issues, 1):
            location = f"{issue.path}:{issue.finding.line}" if issue.finding.line else str(issue.path)
            console.print(f"   [red]{i}. {escape(issue.finding.message)}[/red] [dim]({escape(location)})[/dim]")
            if issue.finding.remediation:
                console.print(f"      [blue]-> {escape(issue.finding.remediation)}[/blue]")
        console.print()

    def _print_files(self, console: Console, reports) -> None:
        if not reports:
            console.print("[yellow]No files found to analyze[/yellow]")
            console.print()
            return

        table = Table(title="Files", expand=True)
        table.add_column("File", style="yellow", no_wrap=False, ratio=3)
        table.add_column("Size", justify="right")
        table.add_column("Type", justify="center")
        table.add_column("Score", justify="right")
        table.add_column("Lines", justify="right")
        table.add_column("Functions", justify="right")
        table.add_column("Complexity", justify="right")
        for report in reports:
            style = _score_style(report.score)
            table.add_row(
                escape(str(report.path)),
                format_size(report.size),
                report.path.suffix.lstrip(".").upper() or "FILE",
                f"[{style}]{report.score}/100[/{style}]",
                str(report.metrics.lines),
                str(report.metrics.functions),
                str(report.metrics.complexity),
            )
        console.print(table)
        console.print()

        for report in reports:
            high = [f for f in report.findings if f.severity is Severity.HIGH]
            if not high:
                continue
            console.print(f"[blue]{escape(str(report.path))}[/blue]")
            for finding in high:
                console.print(f"   [red]! {escape(finding.message)}[/red]")
                if finding.line:
                    console.print(f"      [dim]Line {finding.line}[/dim]")
            console.print()


class DetailedFormatter(RichFormatter):
    """Console output plus every finding of every file, grouped by category."""

    def _print_run(self, console: Console, run: AnalysisRun) -> None:
        super()._print_run(console, run)
        console.print()
        console.print("[bold cyan]Detailed Analysis Report[/bold cyan]")
        console.print()
        for report in run.reports:
            self._print_details(console, report)

    def _print_details(self, console: Console, report: FileReport) -> None:
        if all(f.kind is FindingKind.WELL_OPTIMIZED for f in report.findings):
            return

        console.print(f"[blue bold]{escape(str(report.path))} - Detailed Report[/blue bold]")
        if report.parse_error:
            console.print(f"  [dim]Advanced analysis skipped: {escape(report.parse_error)}[/dim]")

        categories = defaultdict(list)
        for finding in report.findings:
            categories[finding.category].append(finding)

        for category, findings in categories.items():
            console.print(f"\n  [yellow]{category.upper()}[/yellow]")
            for finding in findings:
                where = f" (line {finding.line})" if finding.line else ""
                console.print(f"    {_SEVERITY_STYLES[finding.severity]} {escape(finding.message)}{where}")
                if finding.impact:
                    console.print(f"       [dim]Impact: {escape(finding.impact)}[/dim]")
                if finding.remediation:
                    console.print(f"       [blue]Solution: {escape(finding.remediation)}[/blue]")
                if finding.autofixable and self.autofix:
                    console.print("       [green]Auto-fixable[/green]")
        console.print()
