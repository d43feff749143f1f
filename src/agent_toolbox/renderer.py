"""Rich-based terminal rendering with JSON support."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import (
    CycleTimeStats,
    FixResult,
    HealthReport,
    IssueMatch,
    PortfolioAnalysis,
    PortfolioSummary,
    ResubmissionReport,
    Severity,
)

_SEVERITY_STYLES = {
    Severity.HIGH: "bold red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "dim",
}


def _format_number(n: int) -> str:
    return f"{n:,}"


def _score_style(score: int) -> str:
    if score >= 80:
        return "bold green"
    if score >= 50:
        return "bold yellow"
    return "bold red"


def _make_bar(percentage: float, width: int = 20) -> str:
    filled = round(percentage / 100 * width)
    return "█" * filled + "░" * (width - filled)


def _header(console: Console, title: str) -> None:
    console.print(Panel(Text(title, justify="center"), style="bold cyan"))
    console.print()


def _failed_warning(console: Console, failed: list[str]) -> None:
    if failed:
        console.print(
            f"[bold yellow]Warning:[/bold yellow] Failed to inspect "
            f"{len(failed)} repo(s): {', '.join(failed)}"
        )
        console.print()


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "isoformat"):
        return value.isoformat()
    raise TypeError(f"Not JSON serializable: {type(value).__name__}")


def to_json(obj: Any) -> str:
    """Serialize a dataclass, list of dataclasses, or plain data to JSON."""
    if is_dataclass(obj) and not isinstance(obj, type):
        obj = asdict(obj)
    elif isinstance(obj, list):
        obj = [asdict(o) if is_dataclass(o) else o for o in obj]
    return json.dumps(obj, indent=2, ensure_ascii=False, default=_json_default)


def render_json(obj: Any) -> None:
    # Plain print keeps the output machine-readable (no rich markup)
    print(to_json(obj))


def render_health_report(report: HealthReport, console: Console | None = None) -> None:
    console = console or Console()
    _header(console, f"Repository Health: {report.name}")
    style = _score_style(report.score)
    console.print(f"Health Score: [{style}]{report.score}/100[/{style}]")
    console.print()

    if not report.issues:
        console.print("[green]Excellent! No issues found.[/green]")
    else:
        console.print("[bold]Issues[/bold]")
        for issue in report.issues:
            console.print(f"  - {issue}")
    console.print()

    if report.strengths:
        console.print("[bold]Strengths[/bold]")
        for strength in report.strengths:
            console.print(f"  + {strength}")
        console.print()

    if report.recommendations:
        console.print("[bold]Recommendations[/bold]")
        rec_table = Table(show_header=True, header_style="bold")
        rec_table.add_column("Priority")
        rec_table.add_column("Action")
        for rec in report.recommendations:
            rec_table.add_row(
                Text(rec.priority.value, style=_SEVERITY_STYLES[rec.priority]), rec.action
            )
        console.print(rec_table)
        console.print()


def render_portfolio_analysis(
    analysis: PortfolioAnalysis, console: Console | None = None
) -> None:
    console = console or Console()
    _header(console, "Repository Analysis")
    _failed_warning(console, analysis.failed_repos)
    console.print(analysis.summary_text)
    console.print()

    if analysis.issues:
        issue_table = Table(show_header=True, header_style="bold")
        issue_table.add_column("Repo", no_wrap=True)
        issue_table.add_column("Severity")
        issue_table.add_column("Issue")
        for issue in analysis.issues:
            issue_table.add_row(
                issue.repo_name,
                Text(issue.severity.value, style=_SEVERITY_STYLES[issue.severity]),
                issue.description,
            )
        console.print(issue_table)
        console.print()


def render_portfolio_summary(
    summary: PortfolioSummary, console: Console | None = None
) -> None:
    console = console or Console()
    _header(console, "Portfolio Statistics")

    console.print("[bold]Summary[/bold]")
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("label", style="dim")
    table.add_column("value", style="bold")
    table.add_row("Repositories", _format_number(summary.total))
    table.add_row("Public", _format_number(summary.public))
    table.add_row("Private", _format_number(summary.private))
    table.add_row("Total Stars", _format_number(summary.total_stars))
    table.add_row("Total Forks", _format_number(summary.total_forks))
    table.add_row("License Coverage", f"{summary.license_coverage_percent}%")
    readme = (
        f"{summary.readme_coverage_percent}%"
        if summary.readme_coverage_percent is not None
        else "-"
    )
    table.add_row("README Coverage", readme)
    console.print(table)
    console.print()

    if summary.language_histogram:
        console.print("[bold]Languages[/bold]")
        lang_table = Table(show_header=True, header_style="bold")
        lang_table.add_column("Language")
        lang_table.add_column("Bar")
        lang_table.add_column("Repos", justify="right")
        for lang, count in sorted(
            summary.language_histogram.items(), key=lambda x: x[1], reverse=True
        ):
            lang_table.add_row(lang, _make_bar(count / summary.total * 100), str(count))
        console.print(lang_table)
        console.print()

    if summary.insights:
        console.print("[bold]Insights[/bold]")
        for insight in summary.insights:
            console.print(f"  * {insight}")
        console.print()


def render_issue_matches(matches: list[IssueMatch], console: Console | None = None) -> None:
    console = console or Console()
    console.print(f"[bold]{len(matches)} matching issue(s)[/bold]")
    if not matches:
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Repo", no_wrap=True)
    table.add_column("Issue")
    table.add_column("URL")
    for m in matches:
        table.add_row(m.name, m.issue, m.url)
    console.print(table)


def render_fix_results(
    fixed: list[FixResult], failed: list[str], console: Console | None = None
) -> None:
    console = console or Console()
    _failed_warning(console, failed)
    if not fixed:
        console.print("[green]No issues to fix! All repositories are healthy.[/green]")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("Repo", no_wrap=True)
    table.add_column("Actions")
    for f in fixed:
        table.add_row(f.repo, ", ".join(f.actions))
    console.print(table)


def render_cycle_times(stats: CycleTimeStats, console: Console | None = None) -> None:
    console = console or Console()
    console.print("[bold]Days to Close[/bold]")
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("label", style="dim")
    table.add_column("value", style="bold")
    table.add_row("Closed Cases Analyzed", _format_number(stats.count))
    table.add_row("Average", f"{stats.avg_days:.2f}")
    table.add_row("Median", f"{stats.median_days:.2f}")
    table.add_row("Min", f"{stats.min_days:.2f}")
    table.add_row("Max", f"{stats.max_days:.2f}")
    console.print(table)


def render_resubmissions(report: ResubmissionReport, console: Console | None = None) -> None:
    console = console or Console()
    console.print("[bold]Resubmissions[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Cases Scanned", _format_number(report.scanned_count))
    summary.add_row("Potential Resubmissions", _format_number(report.resubmission_count))
    summary.add_row("Rate", f"{report.rate_percent}%")
    console.print(summary)

    if report.examples:
        console.print()
        table = Table(show_header=True, header_style="bold")
        table.add_column("Original")
        table.add_column("Closed")
        table.add_column("Resubmitted")
        table.add_column("Opened")
        table.add_column("Address")
        table.add_column("Issue")
        for e in report.examples:
            table.add_row(
                e.original_case,
                e.closed_at[:16],
                e.resubmitted_case,
                e.opened_at[:16],
                e.address,
                e.issue,
            )
        console.print(table)
