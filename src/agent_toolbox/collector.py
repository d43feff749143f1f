"""Fetch repository metadata from GitHub and feed it to the health engine."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from rich.progress import Progress, SpinnerColumn, TextColumn

from .github.client import GitHubClient
from .health import (
    ORGANIZER_WEIGHTS,
    TOOL_WEIGHTS,
    ScoringWeights,
    analyze_portfolio,
    classify_repository,
    find_by_issue_kind,
    score_repository,
)
from .models import (
    HealthReport,
    IssueMatch,
    PortfolioAnalysis,
    PortfolioSummary,
    RepositoryRecord,
)

logger = logging.getLogger(__name__)


@dataclass
class CollectedRepositories:
    total: int = 0
    records: list[RepositoryRecord] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


async def _build_record(
    client: GitHubClient, repo: dict[str, Any], probe_readme: bool
) -> RepositoryRecord:
    has_readme = False
    if probe_readme:
        owner = (repo.get("owner") or {}).get("login", "")
        has_readme = await client.readme_exists(owner, repo["name"])
    return RepositoryRecord.from_github(repo, has_readme=has_readme)


async def collect_repository_records(
    client: GitHubClient,
    include_private: bool = True,
    probe_readme: bool = True,
    show_progress: bool = False,
) -> CollectedRepositories:
    """List the user's repositories and build one record per repository.

    A failure listing repositories propagates. Failures for individual
    repositories are logged and recorded in ``failed``; records keep the
    listing order.
    """
    repos = await client.list_repos()
    collected = CollectedRepositories(total=len(repos))
    if not include_private:
        repos = [r for r in repos if not r.get("private", False)]

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
        disable=not show_progress,
    ) as progress:
        task = progress.add_task(
            f"Inspecting {len(repos)} repositories...", total=len(repos)
        )

        async def build_and_update(repo: dict[str, Any]) -> RepositoryRecord | None:
            name = repo.get("name", "?")
            try:
                return await _build_record(client, repo, probe_readme)
            except Exception:
                logger.warning("Failed to inspect repository %s", name, exc_info=True)
                collected.failed.append(name)
                return None
            finally:
                progress.advance(task)

        results = await asyncio.gather(*(build_and_update(r) for r in repos))

    collected.records = [r for r in results if r is not None]
    return collected


async def analyze_all_repositories(
    client: GitHubClient,
    include_private: bool = True,
    now: datetime | None = None,
    show_progress: bool = False,
) -> PortfolioAnalysis:
    collected = await collect_repository_records(
        client, include_private=include_private, show_progress=show_progress
    )
    analysis = PortfolioAnalysis(
        total_repos=collected.total,
        repos_analyzed=len(collected.records),
        failed_repos=collected.failed,
    )
    for record in collected.records:
        classification = classify_repository(record, weights=ORGANIZER_WEIGHTS, now=now)
        analysis.issues.extend(classification.issues)
    return analysis


async def portfolio_statistics(
    client: GitHubClient, probe_readme: bool = True, show_progress: bool = False
) -> PortfolioSummary:
    collected = await collect_repository_records(
        client, probe_readme=probe_readme, show_progress=show_progress
    )
    return analyze_portfolio(collected.records, readme_probed=probe_readme)


async def find_repositories_with_issues(
    client: GitHubClient,
    kind: str,
    now: datetime | None = None,
    show_progress: bool = False,
) -> list[IssueMatch]:
    # README probes cost one request per repository; skip them when unused.
    probe = kind in ("missing-readme", "all")
    collected = await collect_repository_records(
        client, probe_readme=probe, show_progress=show_progress
    )
    return find_by_issue_kind(collected.records, kind, now=now)


async def repository_health(
    client: GitHubClient,
    owner: str,
    repo: str,
    weights: ScoringWeights = TOOL_WEIGHTS,
    now: datetime | None = None,
) -> HealthReport:
    """Score a single repository. A missing repository raises HTTPStatusError."""
    payload = await client.get_repo(owner, repo)
    has_readme = await client.readme_exists(owner, repo)
    record = RepositoryRecord.from_github(payload, has_readme=has_readme)
    return score_repository(record, weights=weights, now=now)
