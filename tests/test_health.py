"""Tests for the repository health engine."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from agent_toolbox.health import (
    ORGANIZER_WEIGHTS,
    TOOL_WEIGHTS,
    analyze_portfolio,
    classify_repository,
    find_by_issue_kind,
    is_practice_repository,
    issue_count_score,
    months_before,
    score_repository,
)
from agent_toolbox.models import IssueKind, RepositoryRecord, Severity

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
SEVEN_MONTHS_AGO = datetime(2025, 6, 10, tzinfo=timezone.utc)
LAST_WEEK = datetime(2026, 1, 8, tzinfo=timezone.utc)


def _healthy(**kwargs) -> RepositoryRecord:
    defaults = dict(
        name="widget-service",
        description="Serves widgets over HTTP",
        has_license=True,
        license_name="MIT License",
        has_readme=True,
        is_private=False,
        updated_at=LAST_WEEK,
        stars=3,
        forks=1,
        language="Python",
        url="https://github.com/me/widget-service",
    )
    defaults.update(kwargs)
    return RepositoryRecord(**defaults)


def _neglected() -> RepositoryRecord:
    return RepositoryRecord(
        name="react-demo",
        description="",
        has_license=False,
        has_readme=False,
        is_private=False,
        updated_at=SEVEN_MONTHS_AGO,
    )


def test_healthy_repository_has_no_issues():
    result = classify_repository(_healthy(), now=NOW)
    assert result.healthy
    assert result.strengths == [
        "Has MIT License license",
        "Has detailed description",
        "Has README.md",
        "Recently updated",
    ]


def test_neglected_repository_triggers_every_rule():
    result = classify_repository(_neglected(), weights=ORGANIZER_WEIGHTS, now=NOW)
    assert [i.kind for i in result.issues] == [
        IssueKind.MISSING_LICENSE,
        IssueKind.WEAK_DESCRIPTION,
        IssueKind.MISSING_README,
        IssueKind.STALE,
        IssueKind.PRACTICE_SHOULD_BE_PRIVATE,
    ]
    severities = {i.kind: i.severity for i in result.issues}
    assert severities[IssueKind.MISSING_LICENSE] == Severity.HIGH
    assert severities[IssueKind.WEAK_DESCRIPTION] == Severity.MEDIUM
    assert severities[IssueKind.MISSING_README] == Severity.HIGH
    assert severities[IssueKind.STALE] == Severity.LOW
    assert severities[IssueKind.PRACTICE_SHOULD_BE_PRIVATE] == Severity.MEDIUM
    stale = next(i for i in result.issues if i.kind == IssueKind.STALE)
    assert stale.description == "Repository hasn't been updated in 6+ months"


def test_organizer_weights_score_neglected_repository():
    report = score_repository(_neglected(), weights=ORGANIZER_WEIGHTS, now=NOW)
    # 100 - 20 (readme) - 20 (license) - 10 (description) - 10 (stale)
    assert report.score == 40
    assert "Practice/demo code should be private" in report.issues


def test_tool_weights_penalize_license_by_fifteen():
    report = score_repository(_neglected(), weights=TOOL_WEIGHTS, now=NOW)
    assert report.score == 45
    assert "Not recently updated" in report.issues


def test_tool_weights_use_one_month_cutoff():
    record = _healthy(updated_at=datetime(2025, 12, 1, tzinfo=timezone.utc))
    assert score_repository(record, weights=TOOL_WEIGHTS, now=NOW).score == 90
    assert score_repository(record, weights=ORGANIZER_WEIGHTS, now=NOW).score == 100


def test_tool_weights_treat_unknown_update_time_as_stale():
    report = score_repository(_healthy(updated_at=None), weights=TOOL_WEIGHTS, now=NOW)
    assert report.score == 90
    assert report.issues == ["Not recently updated"]
    assert "Recently updated" not in report.strengths


def test_organizer_weights_ignore_unknown_update_time():
    record = _healthy(updated_at=None)
    result = classify_repository(record, weights=ORGANIZER_WEIGHTS, now=NOW)
    assert IssueKind.STALE not in result.kinds()
    assert "Recently updated" not in result.strengths
    assert score_repository(record, weights=ORGANIZER_WEIGHTS, now=NOW).score == 100
    assert find_by_issue_kind([record], "stale", now=NOW) == []


def test_portfolio_insights_only_for_nonempty_portfolio():
    summary = analyze_portfolio([_healthy(has_license=False, is_private=True)])
    assert summary.insights[0].startswith("Only 0% of repositories have licenses")


def test_practice_heuristic_skipped_for_private_repos():
    record = _healthy(name="learning-rust", is_private=True)
    result = classify_repository(record, now=NOW)
    assert IssueKind.PRACTICE_SHOULD_BE_PRIVATE not in result.kinds()


def test_practice_heuristic_matches_description_case_insensitively():
    assert is_practice_repository("widgets", "My TUTORIAL project")
    assert is_practice_repository("Experiment-42")
    assert not is_practice_repository("widgets", None)


def test_short_description_is_weak():
    result = classify_repository(_healthy(description="todo app"), now=NOW)
    assert IssueKind.WEAK_DESCRIPTION in result.kinds()


def test_star_strength_only_above_ten():
    assert "11 stars" in classify_repository(_healthy(stars=11), now=NOW).strengths
    assert not any(
        s.endswith("stars") for s in classify_repository(_healthy(stars=10), now=NOW).strengths
    )


def test_score_is_deterministic_and_bounded():
    record = _neglected()
    first = score_repository(record, now=NOW)
    second = score_repository(record, now=NOW)
    assert first == second
    assert 0 <= first.score <= 100


def test_score_clamps_at_zero():
    heavy = ORGANIZER_WEIGHTS.__class__(
        license=60, readme=60, description=10, stale=10, stale_months=6
    )
    assert score_repository(_neglected(), weights=heavy, now=NOW).score == 0


def test_recommendations_follow_fixed_order():
    report = score_repository(_neglected(), now=NOW)
    assert [(r.priority, r.action.split()[2]) for r in report.recommendations] == [
        (Severity.HIGH, "comprehensive"),
        (Severity.HIGH, "appropriate"),
        (Severity.MEDIUM, "clear,"),
    ]


def test_no_recommendations_for_healthy_repo():
    assert score_repository(_healthy(), now=NOW).recommendations == []


def test_issue_count_score():
    assert issue_count_score([]) == 100
    assert issue_count_score(["a", "b"]) == 60
    assert issue_count_score(["x"] * 7) == 0


def test_months_before_clamps_day():
    assert months_before(datetime(2026, 3, 31), 1) == datetime(2026, 2, 28)
    assert months_before(datetime(2026, 1, 15), 6) == datetime(2025, 7, 15)


# --- portfolio ---


def test_portfolio_empty_has_zero_coverage():
    summary = analyze_portfolio([])
    assert summary.total == 0
    assert summary.license_coverage_percent == 0
    assert summary.readme_coverage_percent is None
    assert summary.insights == []


def test_portfolio_counts_and_coverage():
    records = [
        _healthy(name="a", stars=5, forks=2, language="Go"),
        _healthy(name="b", has_license=False, stars=1, language="Python"),
        _healthy(name="c", is_private=True, has_readme=False, language="Go"),
    ]
    summary = analyze_portfolio(records, readme_probed=True)
    assert (summary.total, summary.public, summary.private) == (3, 2, 1)
    assert summary.total_stars == 9
    assert summary.total_forks == 4
    assert summary.language_histogram == {"Go": 2, "Python": 1}
    assert summary.license_coverage_percent == 67
    assert summary.readme_coverage_percent == 67
    assert summary.insights[0].startswith("Only 67% of repositories have licenses")
    assert summary.insights[-1] == "Your primary language is Go with 2 repositories."


def test_portfolio_coverage_rounds_half_up():
    records = [_healthy(name=str(i), has_license=i == 0, is_private=True) for i in range(8)]
    # 1/8 = 12.5%
    assert analyze_portfolio(records).license_coverage_percent == 13


def test_portfolio_public_heavy_insight():
    records = [_healthy(name=str(i), language=None) for i in range(3)]
    summary = analyze_portfolio(records)
    assert summary.insights == [
        "You have significantly more public repos (3) than private (0). "
        "Consider organizing practice/demo code privately."
    ]


def test_portfolio_top_language_tie_keeps_first_seen():
    records = [
        _healthy(name="a", language="Rust", is_private=True),
        _healthy(name="b", language="Python", is_private=True),
        _healthy(name="c", language="Python"),
        _healthy(name="d", language="Rust"),
    ]
    summary = analyze_portfolio(records)
    assert summary.insights[-1] == "Your primary language is Rust with 2 repositories."


# --- find by issue kind ---


def test_find_by_issue_kind_single():
    records = [_healthy(name="ok"), _neglected()]
    matches = find_by_issue_kind(records, "missing-license", now=NOW)
    assert [(m.name, m.issue) for m in matches] == [("react-demo", "Missing LICENSE file")]


def test_find_by_issue_kind_all_unions_kinds():
    matches = find_by_issue_kind([_neglected()], "all", now=NOW)
    assert [m.issue for m in matches] == [
        "Missing LICENSE file",
        "Missing README.md",
        "Weak or missing description",
        "Not updated in 6+ months",
    ]


def test_find_by_issue_kind_is_idempotent():
    records = [_healthy(), _neglected()]
    snapshot = list(records)
    first = find_by_issue_kind(records, "all", now=NOW)
    second = find_by_issue_kind(records, "all", now=NOW)
    assert first == second
    assert records == snapshot


def test_find_by_issue_kind_rejects_unknown():
    with pytest.raises(ValueError):
        find_by_issue_kind([], "no-tests")
