"""Orchestrator: wires settings, clients, engines and renderers together."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from . import collector, maintenance
from .cases import compute_cycle_times, detect_resubmissions
from .config import Settings
from .context import ToolContext
from .models import CaseFilters
from .renderer import (
    render_cycle_times,
    render_fix_results,
    render_health_report,
    render_issue_matches,
    render_json,
    render_portfolio_analysis,
    render_portfolio_summary,
    render_resubmissions,
)
from .sf311 import soql
from .tools import build_registry


async def run_analyze(
    settings: Settings, include_private: bool = True, output_format: str = "table"
) -> None:
    async with ToolContext.from_settings(settings) as ctx:
        analysis = await collector.analyze_all_repositories(
            ctx.require_github(),
            include_private=include_private,
            show_progress=output_format == "table",
        )
    if output_format == "json":
        render_json({**asdict(analysis), "summary": analysis.summary_text})
    else:
        render_portfolio_analysis(analysis)


async def run_health(
    settings: Settings, owner: str, repo: str, output_format: str = "table"
) -> None:
    async with ToolContext.from_settings(settings) as ctx:
        report = await collector.repository_health(ctx.require_github(), owner, repo)
    if output_format == "json":
        render_json(report)
    else:
        render_health_report(report)


async def run_find(settings: Settings, kind: str, output_format: str = "table") -> None:
    async with ToolContext.from_settings(settings) as ctx:
        matches = await collector.find_repositories_with_issues(
            ctx.require_github(), kind, show_progress=output_format == "table"
        )
    if output_format == "json":
        render_json(matches)
    else:
        render_issue_matches(matches)


async def run_stats(
    settings: Settings, probe_readme: bool = True, output_format: str = "table"
) -> None:
    async with ToolContext.from_settings(settings) as ctx:
        summary = await collector.portfolio_statistics(
            ctx.require_github(),
            probe_readme=probe_readme,
            show_progress=output_format == "table",
        )
    if output_format == "json":
        render_json(summary)
    else:
        render_portfolio_summary(summary)


async def run_maintenance(settings: Settings, action: str, **kwargs: Any) -> str:
    """Run a single-repository fix and return its status message."""
    actions = {
        "add-license": maintenance.add_license,
        "add-readme": maintenance.add_readme,
        "visibility": maintenance.change_visibility,
    }
    async with ToolContext.from_settings(settings) as ctx:
        _, message = await actions[action](ctx.require_github(), **kwargs)
    return message


async def run_autofix(settings: Settings, output_format: str = "table") -> None:
    async with ToolContext.from_settings(settings) as ctx:
        fixed, failed = await maintenance.auto_fix_all(
            ctx.require_github(), delay=settings.request_delay
        )
    if output_format == "json":
        render_json(
            {
                "fixed": [asdict(f) for f in fixed],
                "failed_repos": failed,
                "message": maintenance.auto_fix_message(fixed),
            }
        )
    else:
        render_fix_results(fixed, failed)


async def run_cycle_times(
    settings: Settings,
    filters: CaseFilters,
    days_ago: int = 90,
    output_format: str = "table",
) -> None:
    async with ToolContext.from_settings(settings) as ctx:
        records = await ctx.require_socrata().fetch_closed_cases(filters, days_ago)
    stats = compute_cycle_times(records, filters, lookback_days=days_ago)
    if output_format == "json":
        render_json(stats)
    else:
        render_cycle_times(stats)


async def run_resubmissions(
    settings: Settings,
    filters: CaseFilters,
    days_to_analyze: int = 30,
    reopen_window_days: int = 7,
    output_format: str = "table",
) -> None:
    async with ToolContext.from_settings(settings) as ctx:
        records = await ctx.require_socrata().fetch_recent_cases(filters, days_to_analyze)
    report = detect_resubmissions(
        records,
        filters,
        lookback_days=days_to_analyze,
        reopen_window_days=reopen_window_days,
    )
    if output_format == "json":
        render_json(report)
    else:
        render_resubmissions(report)


async def run_search(settings: Settings, query: soql.SoqlQuery) -> None:
    async with ToolContext.from_settings(settings) as ctx:
        rows = await ctx.require_socrata().query(query)
    render_json({"results": rows, "count": len(rows)})


async def run_tool_call(
    settings: Settings, name: str, payload: dict[str, Any]
) -> dict[str, Any]:
    async with ToolContext.from_settings(settings) as ctx:
        registry = build_registry(ctx)
        return await registry.call(name, payload)


def describe_tools(settings: Settings) -> list[dict[str, Any]]:
    # Schemas only; no client is ever used
    ctx = ToolContext(settings=settings)
    return build_registry(ctx).describe()
