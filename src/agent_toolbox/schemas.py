"""Input and output schemas for the registered tools.

Field aliases keep the wire names agents already use (camelCase for the
GitHub tools, snake_case for SF 311).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Priority = Literal["high", "medium", "low"]
IssueKindFilter = Literal["missing-license", "missing-readme", "weak-description", "stale", "all"]
LicenseType = Literal["MIT", "Apache-2.0", "GPL-3.0"]


class ToolModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class EmptyInput(ToolModel):
    pass


# --- GitHub ---


class AnalyzeAllInput(ToolModel):
    username: str | None = Field(
        default=None,
        description="GitHub username to analyze (optional, defaults to authenticated user)",
    )
    include_private: bool = Field(
        default=True, alias="includePrivate", description="Include private repositories"
    )


class RepoIssue(ToolModel):
    repo: str
    severity: Priority
    issue: str


class AnalyzeAllOutput(ToolModel):
    total_repos: int = Field(alias="totalRepos")
    analyzed: int
    issues: list[RepoIssue]
    summary: str
    failed_repos: list[str] = Field(default_factory=list, alias="failedRepos")


class RepositoryHealthInput(ToolModel):
    owner: str = Field(description="Repository owner username")
    repo: str = Field(description="Repository name")


class RecommendationOut(ToolModel):
    priority: Priority
    action: str


class RepositoryHealthOutput(ToolModel):
    name: str
    health_score: int = Field(ge=0, le=100, alias="healthScore")
    issues: list[str]
    strengths: list[str]
    recommendations: list[RecommendationOut]


class FindIssuesInput(ToolModel):
    issue_type: IssueKindFilter = Field(
        alias="issueType", description="Type of issue to search for"
    )


class IssueMatchOut(ToolModel):
    name: str
    url: str
    issue: str


class FindIssuesOutput(ToolModel):
    repositories: list[IssueMatchOut]
    count: int


class PortfolioStatsOutput(ToolModel):
    total_repositories: int = Field(alias="totalRepositories")
    public_repos: int = Field(alias="publicRepos")
    private_repos: int = Field(alias="privateRepos")
    total_stars: int = Field(alias="totalStars")
    total_forks: int = Field(alias="totalForks")
    languages: dict[str, int]
    license_coverage: int = Field(ge=0, le=100, alias="licenseCoverage")
    readme_coverage: int | None = Field(default=None, ge=0, le=100, alias="readmeCoverage")
    insights: list[str]


class ListReposInput(ToolModel):
    username: str | None = Field(default=None, description="GitHub username (optional)")


class RepositorySummary(ToolModel):
    name: str
    description: str
    url: str
    language: str
    is_private: bool = Field(alias="isPrivate")


class ListReposOutput(ToolModel):
    repositories: list[RepositorySummary]
    count: int


class AddLicenseInput(ToolModel):
    repo_name: str = Field(alias="repoName", description="Repository name")
    license_type: LicenseType = Field(
        default="MIT", alias="licenseType", description="License type"
    )


class AddReadmeInput(ToolModel):
    repo_name: str = Field(alias="repoName", description="Repository name")
    title: str | None = Field(default=None, description="README title")
    description: str | None = Field(default=None, description="Project description")


class ChangeVisibilityInput(ToolModel):
    repo_name: str = Field(alias="repoName", description="Repository name")
    make_private: bool = Field(
        alias="makePrivate", description="True to make private, false to make public"
    )


class ActionOutput(ToolModel):
    success: bool
    message: str


class FixedRepo(ToolModel):
    repo: str
    actions: list[str]


class AutoFixOutput(ToolModel):
    fixed: list[FixedRepo]
    total_fixed: int = Field(alias="totalFixed")
    message: str
    failed_repos: list[str] = Field(default_factory=list, alias="failedRepos")


# --- SF 311 ---


class SearchInput(ToolModel):
    select: str = Field(
        description="Columns to select (e.g., 'service_name, count(*) as count')"
    )
    where: str | None = Field(
        default=None,
        description=(
            "Filter conditions (e.g., \"service_name = 'Graffiti' AND "
            "supervisor_district = '3'\")"
        ),
    )
    group_by: str | None = Field(default=None, description="Group by columns")
    order_by: str | None = Field(default=None, description="Order by clause (e.g., 'count DESC')")
    limit: int = Field(default=100, gt=0)


class RowsOutput(ToolModel):
    results: list[Any]
    count: int


class CycleTimeInput(ToolModel):
    service_name_filter: str | None = Field(
        default=None, description="Prefix match for service name (e.g. 'Encampment')"
    )
    neighborhood: str | None = Field(default=None, description="Exact neighborhood name")
    days_ago: int = Field(default=90, gt=0, description="Look back window in days")


class CycleTimeOutput(ToolModel):
    total_closed_analyzed: int
    avg_days_to_close: float
    median_days_to_close: float
    max_days_to_close: float
    min_days_to_close: float


class ResubmissionInput(ToolModel):
    service_name_filter: str | None = Field(
        default=None, description="Service name prefix (e.g. 'Encampment')"
    )
    district: str | None = Field(default=None, description="Supervisor district number (e.g. '6')")
    days_to_analyze: int = Field(default=30, gt=0, description="Time window in days")


class ResubmissionExampleOut(ToolModel):
    original_case: str
    closed_at: str
    resubmitted_case: str
    opened_at: str
    address: str
    issue: str


class ResubmissionOutput(ToolModel):
    total_cases_scanned: int
    potential_resubmissions: int
    resubmission_rate_percent: float
    examples: list[ResubmissionExampleOut] = Field(max_length=5)


class IntersectionsInput(ToolModel):
    service_query: str = Field(description="Service name prefix")
    days_ago: int = Field(default=90, gt=0)
