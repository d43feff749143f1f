"""Runtime settings loaded from the environment and an optional .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

GITHUB_API_URL = "https://api.github.com"
SF_311_API_URL = "https://data.sfgov.org/api/v3/views/vw6y-z8j6/query.json"
DEFAULT_REQUEST_DELAY = 0.5

_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass
class Settings:
    github_token: str | None = None
    github_api_url: str = GITHUB_API_URL
    sf311_app_token: str | None = None
    sf311_api_url: str = SF_311_API_URL
    # Pause between per-repository batch writes (auto-fix)
    request_delay: float = DEFAULT_REQUEST_DELAY
    # Minimum spacing between consecutive GitHub API calls
    github_min_interval: float = 0.0
    verify_ssl: bool = True

    @classmethod
    def from_env(cls, dotenv: bool = True) -> Settings:
        """Build settings from environment variables.

        ``SF_DATA_APP_TOKEN`` is accepted as a fallback name for the SF 311
        app token. ``GITHUB_VERIFY_SSL=0`` disables certificate checks.
        """
        if dotenv:
            load_dotenv()
        delay = os.getenv("GITHUB_REQUEST_DELAY")
        interval = os.getenv("GITHUB_MIN_INTERVAL")
        verify = os.getenv("GITHUB_VERIFY_SSL", "")
        return cls(
            github_token=os.getenv("GITHUB_TOKEN") or None,
            github_api_url=os.getenv("GITHUB_API_URL") or GITHUB_API_URL,
            sf311_app_token=(
                os.getenv("SF_311_APP_TOKEN") or os.getenv("SF_DATA_APP_TOKEN") or None
            ),
            sf311_api_url=os.getenv("SF_311_API_URL") or SF_311_API_URL,
            request_delay=float(delay) if delay else DEFAULT_REQUEST_DELAY,
            github_min_interval=float(interval) if interval else 0.0,
            verify_ssl=verify.strip().lower() not in _FALSE_VALUES,
        )
