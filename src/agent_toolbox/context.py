"""Shared clients handed to tool handlers."""

from __future__ import annotations

from dataclasses import dataclass

from .config import Settings
from .exceptions import AgentToolboxError
from .github.client import GitHubClient
from .sf311.client import SocrataClient


@dataclass
class ToolContext:
    """Owns the API clients for the lifetime of a session.

    Clients are created on first use unless injected. Use as an async
    context manager so the underlying HTTP connections are closed on exit.
    """

    settings: Settings
    github: GitHubClient | None = None
    socrata: SocrataClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ToolContext:
        return cls(settings=settings)

    def require_github(self) -> GitHubClient:
        if self.github is None:
            if not self.settings.github_token:
                raise AgentToolboxError("GITHUB_TOKEN is not configured")
            self.github = GitHubClient(
                token=self.settings.github_token,
                base_url=self.settings.github_api_url,
                verify_ssl=self.settings.verify_ssl,
                min_interval=self.settings.github_min_interval,
            )
        return self.github

    def require_socrata(self) -> SocrataClient:
        if self.socrata is None:
            self.socrata = SocrataClient(
                app_token=self.settings.sf311_app_token,
                base_url=self.settings.sf311_api_url,
            )
        return self.socrata

    async def close(self) -> None:
        if self.github is not None:
            await self.github.close()
        if self.socrata is not None:
            await self.socrata.close()

    async def __aenter__(self) -> ToolContext:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
