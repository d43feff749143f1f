"""Tool handlers and their registration."""

from __future__ import annotations

from dataclasses import asdict

from . import collector, maintenance
from .cases import compute_cycle_times, detect_resubmissions
from .context import ToolContext
from .models import CaseFilters
from .registry import Tool, ToolRegistry
from .schemas import (
    ActionOutput,
    AddLicenseInput,
    AddReadmeInput,
    AnalyzeAllInput,
    AnalyzeAllOutput,
    AutoFixOutput,
    ChangeVisibilityInput,
    CycleTimeInput,
    CycleTimeOutput,
    EmptyInput,
    FindIssuesInput,
    FindIssuesOutput,
    IntersectionsInput,
    ListReposInput,
    ListReposOutput,
    PortfolioStatsOutput,
    RepositoryHealthInput,
    RepositoryHealthOutput,
    ResubmissionInput,
    ResubmissionOutput,
    RowsOutput,
    SearchInput,
)
from .sf311 import soql

GITHUB_ANALYSIS = "GitHub Analysis"
GITHUB_MANAGEMENT = "GitHub Management"
SF311 = "SF311"


def _github_tools(ctx: ToolContext) -> list[Tool]:
    async def analyze_all(params: AnalyzeAllInput) -> dict:
        analysis = await collector.analyze_all_repositories(
            ctx.require_github(), include_private=params.include_private
        )
        return {
            "total_repos": analysis.total_repos,
            "analyzed": analysis.repos_analyzed,
            "issues": [
                {"repo": i.repo_name, "severity": i.severity.value, "issue": i.description}
                for i in analysis.issues
            ],
            "summary": analysis.summary_text,
            "failed_repos": analysis.failed_repos,
        }

    async def repository_health(params: RepositoryHealthInput) -> dict:
        report = await collector.repository_health(
            ctx.require_github(), params.owner, params.repo
        )
        return {
            "name": report.name,
            "health_score": report.score,
            "issues": report.issues,
            "strengths": report.strengths,
            "recommendations": [
                {"priority": r.priority.value, "action": r.action}
                for r in report.recommendations
            ],
        }

    async def find_with_issues(params: FindIssuesInput) -> dict:
        matches = await collector.find_repositories_with_issues(
            ctx.require_github(), params.issue_type
        )
        return {"repositories": [asdict(m) for m in matches], "count": len(matches)}

    async def portfolio_statistics(params: EmptyInput) -> dict:
        summary = await collector.portfolio_statistics(ctx.require_github())
        return {
            "total_repositories": summary.total,
            "public_repos": summary.public,
            "private_repos": summary.private,
            "total_stars": summary.total_stars,
            "total_forks": summary.total_forks,
            "languages": summary.language_histogram,
            "license_coverage": summary.license_coverage_percent,
            "readme_coverage": summary.readme_coverage_percent,
            "insights": summary.insights,
        }

    async def list_names(params: ListReposInput) -> dict:
        repos = await ctx.require_github().list_repos()
        repositories = [
            {
                "name": r["name"],
                "description": r.get("description") or "No description",
                "url": r.get("html_url", ""),
                "language": r.get("language") or "Not specified",
                "is_private": bool(r.get("private", False)),
            }
            for r in repos
        ]
        return {"repositories": repositories, "count": len(repositories)}

    async def add_license(params: AddLicenseInput) -> dict:
        success, message = await maintenance.add_license(
            ctx.require_github(), params.repo_name, params.license_type
        )
        return {"success": success, "message": message}

    async def add_readme(params: AddReadmeInput) -> dict:
        success, message = await maintenance.add_readme(
            ctx.require_github(),
            params.repo_name,
            title=params.title,
            description=params.description,
        )
        return {"success": success, "message": message}

    async def auto_fix(params: EmptyInput) -> dict:
        fixed, failed = await maintenance.auto_fix_all(
            ctx.require_github(), delay=ctx.settings.request_delay
        )
        return {
            "fixed": [asdict(f) for f in fixed],
            "total_fixed": len(fixed),
            "message": maintenance.auto_fix_message(fixed),
            "failed_repos": failed,
        }

    async def change_visibility(params: ChangeVisibilityInput) -> dict:
        success, message = await maintenance.change_visibility(
            ctx.require_github(), params.repo_name, params.make_private
        )
        return {"success": success, "message": message}

    return [
        Tool(
            name="analyzeAllRepositories",
            description=(
                "Analyze all GitHub repositories for a user and provide health "
                "scores and recommendations"
            ),
            category=GITHUB_ANALYSIS,
            tags=["github", "analysis", "repositories"],
            input_model=AnalyzeAllInput,
            output_model=AnalyzeAllOutput,
            handler=analyze_all,
        ),
        Tool(
            name="getRepositoryHealth",
            description="Get detailed health score and analysis for a specific GitHub repository",
            category=GITHUB_ANALYSIS,
            tags=["github", "repository", "health"],
            input_model=RepositoryHealthInput,
            output_model=RepositoryHealthOutput,
            handler=repository_health,
        ),
        Tool(
            name="findRepositoriesWithIssues",
            description=(
                "Find all repositories with specific issues (missing LICENSE, README, etc.)"
            ),
            category=GITHUB_ANALYSIS,
            tags=["github", "search", "issues"],
            input_model=FindIssuesInput,
            output_model=FindIssuesOutput,
            handler=find_with_issues,
        ),
        Tool(
            name="getPortfolioStatistics",
            description="Get portfolio-wide statistics and insights across all repositories",
            category=GITHUB_ANALYSIS,
            tags=["github", "statistics", "portfolio"],
            input_model=EmptyInput,
            output_model=PortfolioStatsOutput,
            handler=portfolio_statistics,
        ),
        Tool(
            name="listAllRepositoryNames",
            description="List all repository names with basic information",
            category=GITHUB_ANALYSIS,
            tags=["github", "list", "repositories"],
            input_model=ListReposInput,
            output_model=ListReposOutput,
            handler=list_names,
        ),
        Tool(
            name="addLicenseToRepo",
            description="Add a LICENSE file to a repository",
            category=GITHUB_MANAGEMENT,
            tags=["github", "license", "create"],
            input_model=AddLicenseInput,
            output_model=ActionOutput,
            handler=add_license,
        ),
        Tool(
            name="addReadmeToRepo",
            description="Add a README file to a repository",
            category=GITHUB_MANAGEMENT,
            tags=["github", "readme", "create"],
            input_model=AddReadmeInput,
            output_model=ActionOutput,
            handler=add_readme,
        ),
        Tool(
            name="autoFixAllIssues",
            description=(
                "Automatically fix common issues across all repositories (add missing "
                "LICENSE, README, make practice repos private)"
            ),
            category=GITHUB_MANAGEMENT,
            tags=["github", "autofix", "batch"],
            input_model=EmptyInput,
            output_model=AutoFixOutput,
            handler=auto_fix,
        ),
        Tool(
            name="changeRepoVisibility",
            description="Change repository visibility (make public or private)",
            category=GITHUB_MANAGEMENT,
            tags=["github", "visibility", "privacy"],
            input_model=ChangeVisibilityInput,
            output_model=ActionOutput,
            handler=change_visibility,
        ),
    ]


def _sf311_tools(ctx: ToolContext) -> list[Tool]:
    async def search_or_aggregate(params: SearchInput) -> dict:
        query = soql.search_query(
            params.select,
            where=params.where,
            group_by=params.group_by,
            order_by=params.order_by,
            limit=params.limit,
        )
        rows = await ctx.require_socrata().query(query)
        return {"results": rows, "count": len(rows)}

    async def cycle_times(params: CycleTimeInput) -> dict:
        filters = CaseFilters(
            category_prefix=params.service_name_filter, neighborhood=params.neighborhood
        )
        records = await ctx.require_socrata().fetch_closed_cases(filters, params.days_ago)
        stats = compute_cycle_times(records, filters, lookback_days=params.days_ago)
        return {
            "total_closed_analyzed": stats.count,
            "avg_days_to_close": stats.avg_days,
            "median_days_to_close": stats.median_days,
            "max_days_to_close": stats.max_days,
            "min_days_to_close": stats.min_days,
        }

    async def resubmissions(params: ResubmissionInput) -> dict:
        filters = CaseFilters(
            category_prefix=params.service_name_filter, district=params.district
        )
        records = await ctx.require_socrata().fetch_recent_cases(
            filters, params.days_to_analyze
        )
        report = detect_resubmissions(
            records, filters, lookback_days=params.days_to_analyze
        )
        return {
            "total_cases_scanned": report.scanned_count,
            "potential_resubmissions": report.resubmission_count,
            "resubmission_rate_percent": report.rate_percent,
            "examples": [asdict(e) for e in report.examples],
        }

    async def intersections(params: IntersectionsInput) -> dict:
        rows = await ctx.require_socrata().fetch_intersections(
            params.service_query, params.days_ago
        )
        # Aggregated rows carry counts as strings
        total = sum(int(r.get("count", 0)) for r in rows)
        return {"results": rows, "count": total}

    return [
        Tool(
            name="searchOrAggregate",
            description=(
                "Execute a general search or aggregation using SoQL. Use this for "
                "general counts, grouping, and finding top records."
            ),
            category=SF311,
            tags=["311", "search", "aggregate"],
            input_model=SearchInput,
            output_model=RowsOutput,
            handler=search_or_aggregate,
        ),
        Tool(
            name="analyzeCycleTimes",
            description=(
                "Analyze how long it takes to close cases. Calculates avg, median, "
                "min, max duration in days."
            ),
            category=SF311,
            tags=["311", "analytics", "time"],
            input_model=CycleTimeInput,
            output_model=CycleTimeOutput,
            handler=cycle_times,
        ),
        Tool(
            name="analyzeResubmissions",
            description=(
                "Identify cases closed and then resubmitted at the same location "
                "within 7 days."
            ),
            category=SF311,
            tags=["311", "analytics", "resubmissions"],
            input_model=ResubmissionInput,
            output_model=ResubmissionOutput,
            handler=resubmissions,
        ),
        Tool(
            name="findIntersections",
            description=(
                "Specialized search for intersection-related queries. Finds requests "
                "where the address contains ' / '."
            ),
            category=SF311,
            tags=["311", "search", "intersection"],
            input_model=IntersectionsInput,
            output_model=RowsOutput,
            handler=intersections,
        ),
    ]


def build_registry(ctx: ToolContext) -> ToolRegistry:
    """Register every tool against ``ctx``."""
    registry = ToolRegistry()
    for tool in _github_tools(ctx) + _sf311_tools(ctx):
        registry.register(tool)
    return registry
