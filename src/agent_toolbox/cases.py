"""Time-windowed analytics over SF 311 case records."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from .models import (
    CaseFilters,
    CaseRecord,
    CycleTimeStats,
    ResubmissionExample,
    ResubmissionReport,
)

REOPEN_WINDOW_DAYS = 7
MAX_EXAMPLES = 5


def matches_prefix(value: str | None, prefix: str | None) -> bool:
    """Prefix-only match, the in-memory twin of SoQL ``LIKE 'prefix%'``."""
    if not prefix:
        return True
    return value is not None and value.startswith(prefix)


def _in_window(record: CaseRecord, now: datetime, lookback_days: int) -> bool:
    return now - timedelta(days=lookback_days) <= record.requested_at <= now


def _median(values: list[float]) -> float:
    mid = len(values) // 2
    if len(values) % 2:
        return values[mid]
    return (values[mid - 1] + values[mid]) / 2


def compute_cycle_times(
    records: Iterable[CaseRecord],
    filters: CaseFilters | None = None,
    lookback_days: int = 90,
    now: datetime | None = None,
) -> CycleTimeStats:
    """Closure-duration statistics in days over closed cases in the window.

    Durations are not sanity-checked: a case closed before it was requested
    contributes a negative value.
    """
    filters = filters or CaseFilters()
    now = now or datetime.now()

    durations = sorted(
        r.duration_days
        for r in records
        if r.is_closed
        and _in_window(r, now, lookback_days)
        and matches_prefix(r.category, filters.category_prefix)
        and (not filters.neighborhood or r.neighborhood == filters.neighborhood)
    )
    if not durations:
        return CycleTimeStats()

    return CycleTimeStats(
        count=len(durations),
        avg_days=round(sum(durations) / len(durations), 2),
        median_days=round(_median(durations), 2),
        min_days=round(durations[0], 2),
        max_days=round(durations[-1], 2),
    )


def detect_resubmissions(
    records: Iterable[CaseRecord],
    filters: CaseFilters | None = None,
    lookback_days: int = 30,
    reopen_window_days: int = REOPEN_WINDOW_DAYS,
    now: datetime | None = None,
) -> ResubmissionReport:
    """Find cases reopened at the same address and subtype soon after closure.

    Only neighbours in ``(address, subtype, requested_at)`` order are
    compared, so this is a heuristic rather than an exhaustive search.
    """
    filters = filters or CaseFilters()
    now = now or datetime.now()

    scanned = sorted(
        (
            r
            for r in records
            if _in_window(r, now, lookback_days)
            and matches_prefix(r.category, filters.category_prefix)
            and (not filters.district or r.district == filters.district)
        ),
        key=lambda r: (r.address, r.subtype, r.requested_at),
    )

    report = ResubmissionReport(scanned_count=len(scanned))
    for prev, curr in zip(scanned, scanned[1:]):
        if prev.address != curr.address or prev.subtype != curr.subtype:
            continue
        if prev.closed_at is None:
            continue
        gap_days = (curr.requested_at - prev.closed_at).total_seconds() / 86400
        if not 0 <= gap_days <= reopen_window_days:
            continue
        report.resubmission_count += 1
        if len(report.examples) < MAX_EXAMPLES:
            report.examples.append(
                ResubmissionExample(
                    original_case=prev.id,
                    closed_at=prev.closed_text or prev.closed_at.isoformat(),
                    resubmitted_case=curr.id,
                    opened_at=curr.requested_text or curr.requested_at.isoformat(),
                    address=curr.address,
                    issue=curr.subtype,
                )
            )

    if report.scanned_count:
        report.rate_percent = round(
            report.resubmission_count / report.scanned_count * 100, 2
        )
    return report
