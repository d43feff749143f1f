"""SoQL query construction for the SF 311 dataset.

Text filters are prefix-only (``LIKE 'x%'``). A leading wildcard forces a
full scan of the dataset and routinely times out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ..models import CaseFilters

CYCLE_TIME_LIMIT = 2000
RESUBMISSION_LIMIT = 3000
INTERSECTION_LIMIT = 50


def quote(value: str) -> str:
    """Quote a string literal, doubling embedded single quotes."""
    return "'" + value.replace("'", "''") + "'"


def prefix_like(column: str, prefix: str) -> str:
    return f"{column} LIKE {quote(prefix + '%')}"


def equals(column: str, value: str) -> str:
    return f"{column} = {quote(value)}"


def since_clause(lookback_days: int, now: datetime | None = None) -> str:
    start = (now or datetime.now()) - timedelta(days=lookback_days)
    return f"requested_datetime > {quote(start.strftime('%Y-%m-%dT%H:%M:%S'))}"


@dataclass
class SoqlQuery:
    select: str
    where: list[str] = field(default_factory=list)
    group_by: str | None = None
    order_by: str | None = None
    limit: int | None = None

    def and_where(self, clause: str) -> SoqlQuery:
        self.where.append(clause)
        return self

    def render(self) -> str:
        parts = [f"SELECT {self.select}"]
        if self.where:
            parts.append("WHERE " + " AND ".join(self.where))
        if self.group_by:
            parts.append(f"GROUP BY {self.group_by}")
        if self.order_by:
            parts.append(f"ORDER BY {self.order_by}")
        if self.limit is not None:
            parts.append(f"LIMIT {self.limit}")
        return " ".join(parts)

    def __str__(self) -> str:
        return self.render()


def search_query(
    select: str,
    where: str | None = None,
    group_by: str | None = None,
    order_by: str | None = None,
    limit: int = 100,
) -> SoqlQuery:
    """Free-form query; ``where`` is passed through verbatim."""
    return SoqlQuery(
        select=select,
        where=[where] if where else [],
        group_by=group_by,
        order_by=order_by,
        limit=limit,
    )


def cycle_time_query(
    filters: CaseFilters, lookback_days: int, now: datetime | None = None
) -> SoqlQuery:
    query = SoqlQuery(
        select=(
            "service_request_id, service_name, requested_datetime, closed_date, "
            "status_description, neighborhoods_sffind_boundaries"
        ),
        limit=CYCLE_TIME_LIMIT,
    )
    query.and_where("status_description = 'Closed'")
    query.and_where(since_clause(lookback_days, now))
    query.and_where("closed_date IS NOT NULL")
    if filters.category_prefix:
        query.and_where(prefix_like("service_name", filters.category_prefix))
    if filters.neighborhood:
        query.and_where(equals("neighborhoods_sffind_boundaries", filters.neighborhood))
    return query


def resubmission_query(
    filters: CaseFilters, lookback_days: int, now: datetime | None = None
) -> SoqlQuery:
    query = SoqlQuery(
        select=(
            "service_request_id, service_name, service_subtype, address, "
            "requested_datetime, closed_date, status_description, supervisor_district"
        ),
        order_by="address, service_subtype, requested_datetime ASC",
        limit=RESUBMISSION_LIMIT,
    )
    query.and_where(since_clause(lookback_days, now))
    if filters.category_prefix:
        query.and_where(prefix_like("service_name", filters.category_prefix))
    if filters.district:
        query.and_where(equals("supervisor_district", filters.district))
    return query


def intersection_query(
    service_prefix: str, lookback_days: int, now: datetime | None = None
) -> SoqlQuery:
    # Intersections are the one infix match; the date bound keeps it cheap.
    query = SoqlQuery(
        select="count(*) as count, address, service_name",
        group_by="address, service_name",
        order_by="count DESC",
        limit=INTERSECTION_LIMIT,
    )
    query.and_where(prefix_like("service_name", service_prefix))
    query.and_where("address LIKE '% / %'")
    query.and_where(since_clause(lookback_days, now))
    return query
