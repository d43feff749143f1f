"""Data models for agent-toolbox."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Severity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IssueKind(str, Enum):
    MISSING_LICENSE = "missing-license"
    WEAK_DESCRIPTION = "weak-description"
    MISSING_README = "missing-readme"
    STALE = "stale"
    PRACTICE_SHOULD_BE_PRIVATE = "practice-should-be-private"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp from GitHub or Socrata.

    Naive values (Socrata floating timestamps) are returned as-is; a trailing
    ``Z`` is read as UTC.
    """
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class RepositoryRecord:
    """Snapshot of one repository's metadata at analysis time."""

    name: str
    description: str | None = None
    has_license: bool = False
    license_name: str | None = None
    has_readme: bool = False
    is_private: bool = False
    updated_at: datetime | None = None
    stars: int = 0
    forks: int = 0
    language: str | None = None
    url: str = ""
    owner: str = ""

    @classmethod
    def from_github(
        cls, payload: dict[str, Any], has_readme: bool = False
    ) -> RepositoryRecord:
        license_info = payload.get("license") or None
        owner = payload.get("owner") or {}
        return cls(
            name=payload["name"],
            description=payload.get("description"),
            has_license=license_info is not None,
            license_name=license_info.get("name") if license_info else None,
            has_readme=has_readme,
            is_private=bool(payload.get("private", False)),
            updated_at=parse_timestamp(payload.get("updated_at")),
            stars=payload.get("stargazers_count", 0) or 0,
            forks=payload.get("forks_count", 0) or 0,
            language=payload.get("language"),
            url=payload.get("html_url", ""),
            owner=owner.get("login", ""),
        )


@dataclass(frozen=True)
class Issue:
    repo_name: str
    kind: IssueKind
    severity: Severity
    description: str


@dataclass
class Classification:
    issues: list[Issue] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)

    @property
    def healthy(self) -> bool:
        return not self.issues

    def kinds(self) -> set[IssueKind]:
        return {i.kind for i in self.issues}


@dataclass
class Recommendation:
    priority: Severity
    action: str


@dataclass
class HealthReport:
    name: str
    score: int
    issues: list[str] = field(default_factory=list)
    strengths: list[str] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)


@dataclass
class PortfolioSummary:
    """Portfolio-wide statistics across a set of repositories."""

    total: int = 0
    public: int = 0
    private: int = 0
    total_stars: int = 0
    total_forks: int = 0
    language_histogram: dict[str, int] = field(default_factory=dict)
    license_coverage_percent: int = 0
    # None when README presence was never probed
    readme_coverage_percent: int | None = None
    insights: list[str] = field(default_factory=list)


@dataclass
class PortfolioAnalysis:
    """Result of classifying every repository of the authenticated user."""

    total_repos: int = 0
    repos_analyzed: int = 0
    issues: list[Issue] = field(default_factory=list)
    failed_repos: list[str] = field(default_factory=list)

    def count(self, severity: Severity) -> int:
        return sum(1 for i in self.issues if i.severity == severity)

    @property
    def summary_text(self) -> str:
        return (
            f"Analyzed {self.repos_analyzed} repositories. "
            f"Found {len(self.issues)} total issues: "
            f"{self.count(Severity.HIGH)} high priority, "
            f"{self.count(Severity.MEDIUM)} medium priority, "
            f"{self.count(Severity.LOW)} low priority."
        )


@dataclass
class IssueMatch:
    name: str
    url: str
    issue: str


@dataclass
class FixResult:
    repo: str
    actions: list[str] = field(default_factory=list)


@dataclass
class CaseRecord:
    """One SF 311 service request."""

    id: str
    requested_at: datetime
    closed_at: datetime | None = None
    address: str = ""
    category: str = ""
    subtype: str = ""
    status: str = ""
    neighborhood: str | None = None
    district: str | None = None
    # Timestamps exactly as the dataset returned them
    requested_text: str | None = field(default=None, compare=False, repr=False)
    closed_text: str | None = field(default=None, compare=False, repr=False)

    @property
    def is_closed(self) -> bool:
        return self.closed_at is not None and self.status.lower() == "closed"

    @property
    def duration_days(self) -> float | None:
        if self.closed_at is None:
            return None
        return (self.closed_at - self.requested_at).total_seconds() / 86400

    @classmethod
    def from_socrata(cls, row: dict[str, Any]) -> CaseRecord:
        return cls(
            id=str(row.get("service_request_id", "")),
            requested_at=parse_timestamp(row["requested_datetime"]),
            closed_at=parse_timestamp(row.get("closed_date")),
            address=row.get("address") or "",
            category=row.get("service_name") or "",
            subtype=row.get("service_subtype") or "",
            status=row.get("status_description") or "",
            neighborhood=row.get("neighborhoods_sffind_boundaries"),
            district=row.get("supervisor_district"),
            requested_text=row["requested_datetime"],
            closed_text=row.get("closed_date"),
        )


@dataclass
class CaseFilters:
    category_prefix: str | None = None
    neighborhood: str | None = None
    district: str | None = None


@dataclass
class CycleTimeStats:
    count: int = 0
    avg_days: float = 0
    median_days: float = 0
    min_days: float = 0
    max_days: float = 0


@dataclass
class ResubmissionExample:
    original_case: str
    closed_at: str
    resubmitted_case: str
    opened_at: str
    address: str
    issue: str


@dataclass
class ResubmissionReport:
    scanned_count: int = 0
    resubmission_count: int = 0
    rate_percent: float = 0
    examples: list[ResubmissionExample] = field(default_factory=list)
