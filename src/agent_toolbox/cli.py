"""CLI entrypoint for agent-toolbox."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, Coroutine

import click
import httpx
from rich.logging import RichHandler

from . import __version__
from .config import Settings
from .exceptions import AgentToolboxError
from .health import ISSUE_KIND_FILTERS
from .github.templates import LICENSE_TYPES
from .models import CaseFilters

_FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    show_default=True,
    help="Output format",
)


def _run(coro: Coroutine[Any, Any, Any], target: str = "") -> Any:
    """Run a pipeline and turn upstream failures into friendly exits."""
    try:
        return asyncio.run(coro)
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        if status == 404:
            click.echo(f"Error: '{target}' not found. Check the owner/repo name.", err=True)
        elif status in (401, 403):
            click.echo(
                "Error: Authentication failed. Check your --github-token or $GITHUB_TOKEN.",
                err=True,
            )
        else:
            click.echo(f"Error: GitHub API returned {status}.", err=True)
        sys.exit(1)
    except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
        click.echo(f"Error: Could not connect to GitHub API. {exc}", err=True)
        sys.exit(1)
    except AgentToolboxError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _split_target(target: str) -> tuple[str, str]:
    if "/" not in target:
        raise click.BadParameter("expected OWNER/REPO", param_hint="TARGET")
    owner, repo = target.split("/", 1)
    return owner, repo


@click.group()
@click.option(
    "--github-token",
    envvar="GITHUB_TOKEN",
    default=None,
    show_envvar=True,
    help="GitHub personal access token",
)
@click.option(
    "--sf311-token",
    envvar="SF_311_APP_TOKEN",
    default=None,
    show_envvar=True,
    help="SF open data app token",
)
@click.option("--api-url", default=None, help="GitHub Enterprise API base URL")
@click.option(
    "--no-ssl-verify",
    is_flag=True,
    default=False,
    help="Disable SSL verification (self-signed certs)",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context,
    github_token: str | None,
    sf311_token: str | None,
    api_url: str | None,
    no_ssl_verify: bool,
    verbose: bool,
) -> None:
    """GitHub repository health and SF 311 analytics tools.

    \b
    Examples:
      agent-toolbox repos analyze
      agent-toolbox repos health octocat/hello-world
      agent-toolbox sf311 cycle-times --service Encamp --days 30
      agent-toolbox tools call getRepositoryHealth '{"owner": "o", "repo": "r"}'
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )
    settings = Settings.from_env()
    if github_token:
        settings.github_token = github_token
    if sf311_token:
        settings.sf311_app_token = sf311_token
    if api_url:
        settings.github_api_url = api_url
    if no_ssl_verify:
        settings.verify_ssl = False
    ctx.obj = settings


# --- repos ---


@main.group()
def repos() -> None:
    """Analyze and fix the authenticated user's GitHub repositories."""


@repos.command("analyze")
@click.option(
    "--exclude-private", is_flag=True, default=False, help="Skip private repositories"
)
@_FORMAT_OPTION
@click.pass_obj
def repos_analyze(settings: Settings, exclude_private: bool, output_format: str) -> None:
    """Classify issues across every repository."""
    from .orchestrator import run_analyze

    _run(run_analyze(settings, include_private=not exclude_private, output_format=output_format))


@repos.command("health")
@click.argument("target")
@_FORMAT_OPTION
@click.pass_obj
def repos_health(settings: Settings, target: str, output_format: str) -> None:
    """Score a single repository (TARGET is OWNER/REPO)."""
    from .orchestrator import run_health

    owner, repo = _split_target(target)
    _run(run_health(settings, owner, repo, output_format=output_format), target)


@repos.command("find")
@click.argument("kind", type=click.Choice(ISSUE_KIND_FILTERS))
@_FORMAT_OPTION
@click.pass_obj
def repos_find(settings: Settings, kind: str, output_format: str) -> None:
    """List repositories with a given kind of issue."""
    from .orchestrator import run_find

    _run(run_find(settings, kind, output_format=output_format))


@repos.command("stats")
@click.option(
    "--no-readme-probe",
    is_flag=True,
    default=False,
    help="Skip per-repository README checks (README coverage is then unknown)",
)
@_FORMAT_OPTION
@click.pass_obj
def repos_stats(settings: Settings, no_readme_probe: bool, output_format: str) -> None:
    """Portfolio-wide statistics and insights."""
    from .orchestrator import run_stats

    _run(run_stats(settings, probe_readme=not no_readme_probe, output_format=output_format))


@repos.command("list")
@click.pass_obj
def repos_list(settings: Settings) -> None:
    """List repository names with basic information (JSON)."""
    from .orchestrator import run_tool_call

    result = _run(run_tool_call(settings, "listAllRepositoryNames", {}))
    click.echo(json.dumps(result, indent=2, ensure_ascii=False))


@repos.command("add-license")
@click.argument("repo")
@click.option(
    "--license-type",
    type=click.Choice(LICENSE_TYPES),
    default="MIT",
    show_default=True,
)
@click.pass_obj
def repos_add_license(settings: Settings, repo: str, license_type: str) -> None:
    """Add a LICENSE file to REPO."""
    from .orchestrator import run_maintenance

    click.echo(
        _run(
            run_maintenance(settings, "add-license", repo=repo, license_type=license_type),
            repo,
        )
    )


@repos.command("add-readme")
@click.argument("repo")
@click.option("--title", default=None, help="README title")
@click.option("--description", default=None, help="Project description")
@click.pass_obj
def repos_add_readme(
    settings: Settings, repo: str, title: str | None, description: str | None
) -> None:
    """Add a README.md to REPO."""
    from .orchestrator import run_maintenance

    click.echo(
        _run(
            run_maintenance(
                settings, "add-readme", repo=repo, title=title, description=description
            ),
            repo,
        )
    )


@repos.command("visibility")
@click.argument("repo")
@click.argument("visibility", type=click.Choice(["private", "public"]))
@click.pass_obj
def repos_visibility(settings: Settings, repo: str, visibility: str) -> None:
    """Make REPO private or public."""
    from .orchestrator import run_maintenance

    click.echo(
        _run(
            run_maintenance(
                settings, "visibility", repo=repo, make_private=visibility == "private"
            ),
            repo,
        )
    )


@repos.command("autofix")
@click.confirmation_option(
    prompt="Add missing LICENSE/README files and make practice repos private?"
)
@_FORMAT_OPTION
@click.pass_obj
def repos_autofix(settings: Settings, output_format: str) -> None:
    """Fix common issues across every repository."""
    from .orchestrator import run_autofix

    _run(run_autofix(settings, output_format=output_format))


# --- sf311 ---


@main.group()
def sf311() -> None:
    """Analytics over SF 311 service requests."""


_SERVICE_OPTION = click.option(
    "--service",
    "service_prefix",
    default=None,
    help="Service name prefix (e.g. 'Encamp' matches 'Encampments')",
)


@sf311.command("cycle-times")
@_SERVICE_OPTION
@click.option("--neighborhood", default=None, help="Exact neighborhood name")
@click.option("--days", default=90, show_default=True, help="Look back window in days")
@_FORMAT_OPTION
@click.pass_obj
def sf311_cycle_times(
    settings: Settings,
    service_prefix: str | None,
    neighborhood: str | None,
    days: int,
    output_format: str,
) -> None:
    """Days-to-close statistics for closed cases."""
    from .orchestrator import run_cycle_times

    filters = CaseFilters(category_prefix=service_prefix, neighborhood=neighborhood)
    _run(run_cycle_times(settings, filters, days_ago=days, output_format=output_format))


@sf311.command("resubmissions")
@_SERVICE_OPTION
@click.option("--district", default=None, help="Supervisor district number")
@click.option("--days", default=30, show_default=True, help="Time window in days")
@click.option(
    "--window", default=7, show_default=True, help="Reopen window after closure, in days"
)
@_FORMAT_OPTION
@click.pass_obj
def sf311_resubmissions(
    settings: Settings,
    service_prefix: str | None,
    district: str | None,
    days: int,
    window: int,
    output_format: str,
) -> None:
    """Cases resubmitted at the same location shortly after closure."""
    from .orchestrator import run_resubmissions

    filters = CaseFilters(category_prefix=service_prefix, district=district)
    _run(
        run_resubmissions(
            settings,
            filters,
            days_to_analyze=days,
            reopen_window_days=window,
            output_format=output_format,
        )
    )


@sf311.command("search")
@click.option("--select", required=True, help="Columns to select")
@click.option("--where", default=None, help="Filter conditions")
@click.option("--group-by", default=None, help="Group by columns")
@click.option("--order-by", default=None, help="Order by clause")
@click.option("--limit", default=100, show_default=True)
@click.pass_obj
def sf311_search(
    settings: Settings,
    select: str,
    where: str | None,
    group_by: str | None,
    order_by: str | None,
    limit: int,
) -> None:
    """Run a SoQL search or aggregation (JSON)."""
    from .orchestrator import run_search
    from .sf311.soql import search_query

    _run(run_search(settings, search_query(select, where, group_by, order_by, limit)))


@sf311.command("intersections")
@click.argument("service")
@click.option("--days", default=90, show_default=True)
@click.pass_obj
def sf311_intersections(settings: Settings, service: str, days: int) -> None:
    """Requests at intersections for a service name prefix (JSON)."""
    from .orchestrator import run_tool_call

    result = _run(
        run_tool_call(
            settings, "findIntersections", {"service_query": service, "days_ago": days}
        )
    )
    click.echo(json.dumps(result, indent=2, ensure_ascii=False))


# --- tools ---


@main.group()
def tools() -> None:
    """Inspect and invoke registered agent tools."""


@tools.command("list")
@click.option("--schemas", is_flag=True, default=False, help="Include JSON schemas")
@click.pass_obj
def tools_list(settings: Settings, schemas: bool) -> None:
    from .orchestrator import describe_tools

    described = describe_tools(settings)
    if schemas:
        click.echo(json.dumps(described, indent=2))
        return
    for tool in described:
        click.echo(f"{tool['name']:<28} [{tool['category']}] {tool['description']}")


@tools.command("call")
@click.argument("name")
@click.argument("payload", default="{}")
@click.pass_obj
def tools_call(settings: Settings, name: str, payload: str) -> None:
    """Invoke tool NAME with a JSON PAYLOAD."""
    from .orchestrator import run_tool_call

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"invalid JSON: {exc}", param_hint="PAYLOAD") from exc
    result = _run(run_tool_call(settings, name, data), name)
    click.echo(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":  # pragma: no cover
    main()
