"""Tests for the renderer module."""

from __future__ import annotations

import json
from datetime import datetime, timezone

from agent_toolbox.models import (
    CycleTimeStats,
    FixResult,
    HealthReport,
    Issue,
    IssueKind,
    IssueMatch,
    PortfolioAnalysis,
    PortfolioSummary,
    Recommendation,
    ResubmissionExample,
    ResubmissionReport,
    Severity,
)
from agent_toolbox.renderer import (
    render_cycle_times,
    render_fix_results,
    render_health_report,
    render_issue_matches,
    render_json,
    render_portfolio_analysis,
    render_portfolio_summary,
    render_resubmissions,
    to_json,
)


def _make_report(**kwargs) -> HealthReport:
    defaults = dict(
        name="hello",
        score=70,
        issues=["Missing README.md", "Not recently updated"],
        strengths=["Has MIT License license"],
        recommendations=[
            Recommendation(Severity.HIGH, "Add a comprehensive README"),
        ],
    )
    defaults.update(kwargs)
    return HealthReport(**defaults)


def test_render_health_report(capsys):
    render_health_report(_make_report())
    out = capsys.readouterr().out
    assert "hello" in out
    assert "70/100" in out
    assert "Missing README.md" in out
    assert "high" in out


def test_render_health_report_no_issues(capsys):
    render_health_report(_make_report(score=100, issues=[], recommendations=[]))
    assert "No issues found" in capsys.readouterr().out


def test_render_portfolio_analysis_shows_failed_repos(capsys):
    analysis = PortfolioAnalysis(
        total_repos=2,
        repos_analyzed=1,
        issues=[Issue("demo", IssueKind.STALE, Severity.LOW, "stale")],
        failed_repos=["broken"],
    )
    render_portfolio_analysis(analysis)
    out = capsys.readouterr().out
    assert "Warning" in out
    assert "broken" in out
    assert "demo" in out


def test_render_portfolio_summary(capsys):
    summary = PortfolioSummary(
        total=4,
        public=3,
        private=1,
        total_stars=1234,
        language_histogram={"Python": 3, "Go": 1},
        license_coverage_percent=75,
        insights=["Your primary language is Python with 3 repositories."],
    )
    render_portfolio_summary(summary)
    out = capsys.readouterr().out
    assert "1,234" in out
    assert "75%" in out
    assert "Python" in out
    assert "primary language" in out


def test_render_issue_matches(capsys):
    render_issue_matches([IssueMatch("demo", "https://github.com/o/demo", "Missing README.md")])
    out = capsys.readouterr().out
    assert "1 matching issue(s)" in out
    assert "demo" in out


def test_render_fix_results_empty(capsys):
    render_fix_results([], [])
    assert "No issues to fix" in capsys.readouterr().out


def test_render_fix_results(capsys):
    render_fix_results([FixResult("demo", ["Added LICENSE"])], ["locked"])
    out = capsys.readouterr().out
    assert "Added LICENSE" in out
    assert "locked" in out


def test_render_cycle_times(capsys):
    render_cycle_times(CycleTimeStats(count=3, avg_days=2, median_days=2, min_days=1, max_days=3))
    out = capsys.readouterr().out
    assert "2.00" in out
    assert "3.00" in out


def test_render_resubmissions(capsys):
    report = ResubmissionReport(
        scanned_count=10,
        resubmission_count=1,
        rate_percent=10.0,
        examples=[
            ResubmissionExample(
                "A", "2026-01-01T08:00:00", "B", "2026-01-03T09:00:00", "1 MAIN", "Bulky"
            )
        ],
    )
    render_resubmissions(report)
    out = capsys.readouterr().out
    assert "10.0%" in out
    assert "1 MAIN" in out


def test_to_json_serializes_enums_and_datetimes():
    data = json.loads(
        to_json(
            {
                "severity": Severity.MEDIUM,
                "at": datetime(2026, 1, 1, tzinfo=timezone.utc),
            }
        )
    )
    assert data == {"severity": "medium", "at": "2026-01-01T00:00:00+00:00"}


def test_render_json_dataclass_list(capsys):
    render_json([IssueMatch("demo", "u", "Missing LICENSE file")])
    data = json.loads(capsys.readouterr().out)
    assert data == [{"name": "demo", "url": "u", "issue": "Missing LICENSE file"}]


def test_render_json_nested_enums(capsys):
    render_json(_make_report())
    data = json.loads(capsys.readouterr().out)
    assert data["recommendations"][0]["priority"] == "high"
