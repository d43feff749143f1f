"""Repository fixes: add LICENSE/README files and change visibility."""

from __future__ import annotations

import asyncio
import logging

import httpx

from .github.client import GitHubClient
from .github.templates import render_license, render_readme
from .health import is_practice_repository
from .models import FixResult

logger = logging.getLogger(__name__)


async def add_license(
    client: GitHubClient, repo: str, license_type: str = "MIT"
) -> tuple[bool, str]:
    """Add a LICENSE file unless one already exists."""
    owner = (await client.get_authenticated_user())["login"]
    if await client.file_exists(owner, repo, "LICENSE"):
        return False, f"LICENSE file already exists in {owner}/{repo}"
    await client.create_file(
        owner,
        repo,
        "LICENSE",
        render_license(license_type, owner),
        f"Add {license_type} LICENSE",
    )
    return True, f"Successfully added {license_type} LICENSE to {owner}/{repo}!"


async def add_readme(
    client: GitHubClient,
    repo: str,
    title: str | None = None,
    description: str | None = None,
) -> tuple[bool, str]:
    """Add a README.md built from the repository metadata unless one exists."""
    owner = (await client.get_authenticated_user())["login"]
    repo_data = await client.get_repo(owner, repo)
    if await client.readme_exists(owner, repo):
        return False, f"README.md already exists in {owner}/{repo}"
    license_info = repo_data.get("license") or {}
    content = render_readme(
        owner,
        repo,
        title=title or repo_data.get("name"),
        description=description or repo_data.get("description"),
        license_name=license_info.get("name"),
    )
    await client.create_file(owner, repo, "README.md", content, "Add README.md")
    return True, f"Successfully added README.md to {owner}/{repo}!"


async def change_visibility(
    client: GitHubClient, repo: str, make_private: bool
) -> tuple[bool, str]:
    owner = (await client.get_authenticated_user())["login"]
    await client.set_visibility(owner, repo, private=make_private)
    label = "private" if make_private else "public"
    return True, f"Successfully made {owner}/{repo} {label}!"


async def _fix_repository(client: GitHubClient, repo: dict, actions: list[str]) -> None:
    """Apply each missing fix, recording it in ``actions`` once committed."""
    owner = repo["owner"]["login"]
    name = repo["name"]

    if not repo.get("license") and not await client.file_exists(owner, name, "LICENSE"):
        await client.create_file(
            owner, name, "LICENSE", render_license("MIT", owner), "Add MIT LICENSE"
        )
        actions.append("Added LICENSE")

    if not await client.readme_exists(owner, name):
        content = render_readme(owner, name, description=repo.get("description"))
        await client.create_file(owner, name, "README.md", content, "Add README.md")
        actions.append("Added README")

    # Matches the name only
    if is_practice_repository(name) and not repo.get("private", False):
        await client.set_visibility(owner, name, private=True)
        actions.append("Made private")


async def auto_fix_all(
    client: GitHubClient, delay: float = 0.5
) -> tuple[list[FixResult], list[str]]:
    """Fix every repository in turn, pausing ``delay`` seconds between them.

    Returns the applied fixes and the names of repositories that failed. A
    repository that fails part way appears in both, with the fixes committed
    before the failure.
    """
    repos = await client.list_repos()
    fixed: list[FixResult] = []
    failed: list[str] = []
    for index, repo in enumerate(repos):
        actions: list[str] = []
        try:
            await _fix_repository(client, repo, actions)
        except httpx.HTTPError as exc:
            logger.warning("Failed to fix %s: %s", repo.get("name"), exc)
            failed.append(repo.get("name", "?"))
        if actions:
            fixed.append(FixResult(repo=repo["name"], actions=actions))
        if delay and index < len(repos) - 1:
            await asyncio.sleep(delay)
    return fixed, failed


def auto_fix_message(fixed: list[FixResult]) -> str:
    if not fixed:
        return "No issues to fix! All repositories are healthy."
    return f"Fixed issues in {len(fixed)} repositories"
