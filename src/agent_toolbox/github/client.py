"""GitHub REST API client."""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import Any

import httpx

from ..config import GITHUB_API_URL
from .rate_limit import RateLimitMonitor

logger = logging.getLogger(__name__)


class GitHubClient:
    """Async GitHub REST API client with pagination and rate limit support."""

    def __init__(
        self,
        token: str,
        concurrency: int = 5,
        base_url: str | None = None,
        verify_ssl: bool = True,
        min_interval: float = 0.0,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self._client = httpx.AsyncClient(
            base_url=base_url or GITHUB_API_URL,
            headers=headers,
            timeout=30.0,
            verify=verify_ssl,
        )
        self._rate_limit = RateLimitMonitor(min_interval=min_interval)
        self._semaphore = asyncio.Semaphore(concurrency)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        async with self._semaphore:
            await self._rate_limit.wait_if_needed()
            response = await self._client.request(method, url, params=params, json=json)
            self._rate_limit.update(response)
            response.raise_for_status()
            return response

    async def _get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        return await self._request("GET", url, params=params)

    async def _paginate(
        self, url: str, params: dict[str, Any] | None = None
    ) -> list[Any]:
        """Collect every page of a list endpoint by following ``rel="next"`` links."""
        items: list[Any] = []
        page_params: dict[str, Any] | None = {"per_page": 100, **(params or {})}
        next_url: str | None = url
        while next_url:
            response = await self._get(next_url, page_params)
            payload = response.json()
            items.extend(payload if isinstance(payload, list) else [payload])
            # next links already carry the query string
            next_url = response.links.get("next", {}).get("url")
            page_params = None
        return items

    async def get_authenticated_user(self) -> dict[str, Any]:
        response = await self._get("/user")
        return response.json()

    async def list_repos(
        self, sort: str = "updated", direction: str = "desc"
    ) -> list[dict[str, Any]]:
        """List every repository the authenticated user can access."""
        return await self._paginate(
            "/user/repos", params={"sort": sort, "direction": direction}
        )

    async def get_repo(self, owner: str, repo: str) -> dict[str, Any]:
        """Fetch one repository. A missing repository raises HTTPStatusError."""
        response = await self._get(f"/repos/{owner}/{repo}")
        return response.json()

    async def file_exists(self, owner: str, repo: str, path: str) -> bool:
        """Probe a file in the default branch.

        Not-found and transient failures are indistinguishable here: both
        report the file as absent.
        """
        try:
            await self._get(f"/repos/{owner}/{repo}/contents/{path}")
        except Exception as exc:
            logger.debug("%s/%s: %s not found (%s)", owner, repo, path, exc)
            return False
        return True

    async def readme_exists(self, owner: str, repo: str) -> bool:
        return await self.file_exists(owner, repo, "README.md")

    async def create_file(
        self, owner: str, repo: str, path: str, content: str, message: str
    ) -> dict[str, Any]:
        """Create a file on the default branch via the contents API."""
        encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
        response = await self._request(
            "PUT",
            f"/repos/{owner}/{repo}/contents/{path}",
            json={"message": message, "content": encoded},
        )
        return response.json()

    async def set_visibility(
        self, owner: str, repo: str, private: bool
    ) -> dict[str, Any]:
        response = await self._request(
            "PATCH", f"/repos/{owner}/{repo}", json={"private": private}
        )
        return response.json()
