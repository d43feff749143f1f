"""SF 311 (Socrata SODA3) query client."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from ..config import SF_311_API_URL
from ..exceptions import QueryTimeoutError, SocrataError
from ..models import CaseFilters, CaseRecord
from .soql import SoqlQuery, cycle_time_query, intersection_query, resubmission_query

logger = logging.getLogger(__name__)


class SocrataClient:
    """Async client that POSTs SoQL queries to the SF 311 dataset."""

    def __init__(
        self,
        app_token: str | None = None,
        base_url: str | None = None,
        timeout: float = 45.0,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if app_token:
            headers["X-App-Token"] = app_token
        else:
            logger.warning("SF 311 app token is missing; requests will be rate-limited")
        self._url = base_url or SF_311_API_URL
        self._client = httpx.AsyncClient(headers=headers, timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> SocrataClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def query(self, soql: SoqlQuery | str) -> list[dict[str, Any]]:
        """Run a SoQL query and return the result rows."""
        text = str(soql)
        logger.info("[SoQL] Executing: %s", text)
        try:
            response = await self._client.post(self._url, json={"query": text})
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise QueryTimeoutError() from exc
        except httpx.HTTPStatusError as exc:
            message = _error_message(exc.response)
            logger.error("[SoQL] Error: %s", message)
            raise SocrataError(f"Data fetch failed: {message}") from exc
        except httpx.HTTPError as exc:
            logger.error("[SoQL] Error: %s", exc)
            raise SocrataError(f"Data fetch failed: {exc}") from exc
        data = response.json()
        return data if isinstance(data, list) else []

    async def fetch_closed_cases(
        self, filters: CaseFilters, lookback_days: int, now: datetime | None = None
    ) -> list[CaseRecord]:
        rows = await self.query(cycle_time_query(filters, lookback_days, now))
        return [CaseRecord.from_socrata(r) for r in rows]

    async def fetch_recent_cases(
        self, filters: CaseFilters, lookback_days: int, now: datetime | None = None
    ) -> list[CaseRecord]:
        rows = await self.query(resubmission_query(filters, lookback_days, now))
        return [CaseRecord.from_socrata(r) for r in rows]

    async def fetch_intersections(
        self, service_prefix: str, lookback_days: int, now: datetime | None = None
    ) -> list[dict[str, Any]]:
        return await self.query(intersection_query(service_prefix, lookback_days, now))


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"
