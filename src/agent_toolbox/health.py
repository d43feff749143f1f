"""Repository health engine: issue classification, scoring and portfolio stats."""

from __future__ import annotations

import calendar
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from .models import (
    Classification,
    HealthReport,
    Issue,
    IssueKind,
    IssueMatch,
    PortfolioSummary,
    Recommendation,
    RepositoryRecord,
    Severity,
)

PRACTICE_KEYWORDS = (
    "practice",
    "test",
    "learning",
    "tutorial",
    "example",
    "demo",
    "temp",
    "experiment",
)

MIN_DESCRIPTION_LENGTH = 10
STAR_STRENGTH_THRESHOLD = 10

MISSING_LICENSE = "Missing LICENSE file"
WEAK_DESCRIPTION = "Weak or missing description"
MISSING_README = "Missing README.md"
PRACTICE_SHOULD_BE_PRIVATE = "Practice/demo code should be private"

_SEVERITIES = {
    IssueKind.MISSING_LICENSE: Severity.HIGH,
    IssueKind.WEAK_DESCRIPTION: Severity.MEDIUM,
    IssueKind.MISSING_README: Severity.HIGH,
    IssueKind.STALE: Severity.LOW,
    IssueKind.PRACTICE_SHOULD_BE_PRIVATE: Severity.MEDIUM,
}

# Emitted in this order, only for the kinds present.
_RECOMMENDATIONS = (
    (
        IssueKind.MISSING_README,
        Severity.HIGH,
        "Add a comprehensive README with installation and usage instructions",
    ),
    (
        IssueKind.MISSING_LICENSE,
        Severity.HIGH,
        "Add an appropriate LICENSE file (MIT recommended for open source)",
    ),
    (
        IssueKind.WEAK_DESCRIPTION,
        Severity.MEDIUM,
        "Add a clear, concise description explaining what the project does",
    ),
)

ISSUE_KIND_FILTERS = ("missing-license", "missing-readme", "weak-description", "stale", "all")


@dataclass(frozen=True)
class ScoringWeights:
    """Penalty per issue kind plus the staleness cutoff in calendar months.

    ``unknown_is_stale`` decides whether a repository without an update
    time counts as stale.
    """

    license: int
    readme: int
    description: int
    stale: int
    stale_months: int
    unknown_is_stale: bool = False

    def penalty(self, kind: IssueKind) -> int:
        return {
            IssueKind.MISSING_LICENSE: self.license,
            IssueKind.MISSING_README: self.readme,
            IssueKind.WEAK_DESCRIPTION: self.description,
            IssueKind.STALE: self.stale,
        }.get(kind, 0)

    @property
    def stale_description(self) -> str:
        if self.stale_months == 6:
            return "Repository hasn't been updated in 6+ months"
        return "Not recently updated"


# getRepositoryHealth tool weights.
TOOL_WEIGHTS = ScoringWeights(
    license=15, readme=20, description=10, stale=10, stale_months=1, unknown_is_stale=True
)
# Repository organizer weights (portfolio checks and its health report).
ORGANIZER_WEIGHTS = ScoringWeights(
    license=20, readme=20, description=10, stale=10, stale_months=6
)


def months_before(moment: datetime, months: int) -> datetime:
    """Step back ``months`` calendar months, clamping to the month's last day."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def has_weak_description(description: str | None) -> bool:
    return not description or len(description) < MIN_DESCRIPTION_LENGTH


def is_practice_repository(name: str, description: str | None = None) -> bool:
    """Case-insensitive keyword match against name and description."""
    haystacks = [name.lower()]
    if description:
        haystacks.append(description.lower())
    return any(kw in text for kw in PRACTICE_KEYWORDS for text in haystacks)


def is_stale(
    record: RepositoryRecord, cutoff: datetime, unknown_is_stale: bool = False
) -> bool:
    if record.updated_at is None:
        return unknown_is_stale
    return record.updated_at < cutoff


def classify_repository(
    record: RepositoryRecord,
    weights: ScoringWeights = ORGANIZER_WEIGHTS,
    now: datetime | None = None,
) -> Classification:
    """Apply every issue rule independently to a single repository."""
    now = now or _now()
    cutoff = months_before(now, weights.stale_months)
    result = Classification()

    def flag(kind: IssueKind, description: str) -> None:
        result.issues.append(
            Issue(
                repo_name=record.name,
                kind=kind,
                severity=_SEVERITIES[kind],
                description=description,
            )
        )

    if not record.has_license:
        flag(IssueKind.MISSING_LICENSE, MISSING_LICENSE)
    else:
        result.strengths.append(f"Has {record.license_name or 'a'} license")

    if has_weak_description(record.description):
        flag(IssueKind.WEAK_DESCRIPTION, WEAK_DESCRIPTION)
    else:
        result.strengths.append("Has detailed description")

    if not record.has_readme:
        flag(IssueKind.MISSING_README, MISSING_README)
    else:
        result.strengths.append("Has README.md")

    if is_stale(record, cutoff, weights.unknown_is_stale):
        flag(IssueKind.STALE, weights.stale_description)
    elif record.updated_at is not None:
        result.strengths.append("Recently updated")

    if is_practice_repository(record.name, record.description) and not record.is_private:
        flag(IssueKind.PRACTICE_SHOULD_BE_PRIVATE, PRACTICE_SHOULD_BE_PRIVATE)

    if record.stars > STAR_STRENGTH_THRESHOLD:
        result.strengths.append(f"{record.stars} stars")

    return result


def score_repository(
    record: RepositoryRecord,
    weights: ScoringWeights = TOOL_WEIGHTS,
    now: datetime | None = None,
) -> HealthReport:
    """Score one repository from 100 down by the fixed penalty of each issue.

    The practice/demo heuristic is reported but carries no penalty.
    """
    classification = classify_repository(record, weights=weights, now=now)
    score = 100 - sum(weights.penalty(i.kind) for i in classification.issues)
    kinds = classification.kinds()
    recommendations = [
        Recommendation(priority=priority, action=action)
        for kind, priority, action in _RECOMMENDATIONS
        if kind in kinds
    ]
    return HealthReport(
        name=record.name,
        score=max(0, min(100, score)),
        issues=[i.description for i in classification.issues],
        strengths=classification.strengths,
        recommendations=recommendations,
    )


def issue_count_score(issues: list[str] | list[Issue]) -> int:
    """Quick listing score used by the organizer: 20 points per issue."""
    return max(0, 100 - len(issues) * 20)


def _percent(part: int, total: int) -> int:
    if total == 0:
        return 0
    # half rounds up
    return int(part / total * 100 + 0.5)


def analyze_portfolio(
    records: Iterable[RepositoryRecord], readme_probed: bool = False
) -> PortfolioSummary:
    """Aggregate counts, language histogram, coverage and insights."""
    summary = PortfolioSummary()
    licensed = 0
    with_readme = 0
    languages: Counter[str] = Counter()

    for record in records:
        summary.total += 1
        if record.is_private:
            summary.private += 1
        else:
            summary.public += 1
        summary.total_stars += record.stars
        summary.total_forks += record.forks
        if record.language:
            languages[record.language] += 1
        if record.has_license:
            licensed += 1
        if record.has_readme:
            with_readme += 1

    summary.language_histogram = dict(languages)
    summary.license_coverage_percent = _percent(licensed, summary.total)
    if readme_probed:
        summary.readme_coverage_percent = _percent(with_readme, summary.total)

    if summary.total and summary.license_coverage_percent < 80:
        summary.insights.append(
            f"Only {summary.license_coverage_percent}% of repositories have licenses. "
            "Consider adding licenses to protect your work."
        )
    if summary.public > summary.private * 2:
        summary.insights.append(
            f"You have significantly more public repos ({summary.public}) than "
            f"private ({summary.private}). Consider organizing practice/demo code privately."
        )
    if languages:
        # max keeps the first-seen language on ties
        top_language, top_count = max(languages.items(), key=lambda x: x[1])
        summary.insights.append(
            f"Your primary language is {top_language} with {top_count} repositories."
        )
    return summary


def find_by_issue_kind(
    records: Iterable[RepositoryRecord],
    kind: str,
    now: datetime | None = None,
) -> list[IssueMatch]:
    """Return one match per (repository, issue) for the requested kind."""
    if kind not in ISSUE_KIND_FILTERS:
        raise ValueError(
            f"Unknown issue kind {kind!r}; expected one of {', '.join(ISSUE_KIND_FILTERS)}"
        )
    cutoff = months_before(now or _now(), 6)

    def wanted(name: str) -> bool:
        return kind == name or kind == "all"

    matches: list[IssueMatch] = []
    for record in records:
        if wanted("missing-license") and not record.has_license:
            matches.append(IssueMatch(record.name, record.url, MISSING_LICENSE))
        if wanted("missing-readme") and not record.has_readme:
            matches.append(IssueMatch(record.name, record.url, MISSING_README))
        if wanted("weak-description") and has_weak_description(record.description):
            matches.append(IssueMatch(record.name, record.url, WEAK_DESCRIPTION))
        if wanted("stale") and is_stale(record, cutoff):
            matches.append(IssueMatch(record.name, record.url, "Not updated in 6+ months"))
    return matches
