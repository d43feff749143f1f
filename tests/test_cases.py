"""Tests for the SF 311 case analytics engine."""

from __future__ import annotations

from datetime import datetime, timedelta

from agent_toolbox.cases import (
    MAX_EXAMPLES,
    compute_cycle_times,
    detect_resubmissions,
    matches_prefix,
)
from agent_toolbox.models import CaseFilters, CaseRecord, CycleTimeStats

NOW = datetime(2026, 1, 15, 12, 0)


def _closed(case_id: str, days_ago: float, duration: float, **kwargs) -> CaseRecord:
    requested = NOW - timedelta(days=days_ago)
    defaults = dict(
        id=case_id,
        requested_at=requested,
        closed_at=requested + timedelta(days=duration),
        address="100 MARKET ST",
        category="Street and Sidewalk Cleaning",
        subtype="Bulky Items",
        status="Closed",
        neighborhood="Financial District",
        district="3",
    )
    defaults.update(kwargs)
    return CaseRecord(**defaults)


def _open(case_id: str, days_ago: float, **kwargs) -> CaseRecord:
    return _closed(case_id, days_ago, 0, closed_at=None, status="Open", **kwargs)


# --- cycle times ---


def test_cycle_times_empty_input_is_all_zero():
    assert compute_cycle_times([], now=NOW) == CycleTimeStats()


def test_cycle_times_filtered_to_nothing_is_all_zero():
    records = [_closed("1", 5, 2, category="Graffiti")]
    stats = compute_cycle_times(records, CaseFilters(category_prefix="Encamp"), now=NOW)
    assert stats == CycleTimeStats(count=0, avg_days=0, median_days=0, min_days=0, max_days=0)


def test_cycle_times_odd_median():
    records = [_closed(str(d), 10, d) for d in (3, 1, 2)]
    stats = compute_cycle_times(records, now=NOW)
    assert stats.count == 3
    assert stats.median_days == 2
    assert stats.avg_days == 2
    assert (stats.min_days, stats.max_days) == (1, 3)


def test_cycle_times_even_median():
    records = [_closed(str(d), 10, d) for d in (4, 1, 3, 2)]
    assert compute_cycle_times(records, now=NOW).median_days == 2.5


def test_cycle_times_rounds_to_two_decimals():
    records = [_closed("1", 10, 1 / 3)]
    stats = compute_cycle_times(records, now=NOW)
    assert stats.avg_days == 0.33
    assert stats.median_days == 0.33


def test_cycle_times_skip_open_and_out_of_window_cases():
    records = [
        _closed("in", 10, 2),
        _open("open", 5),
        _closed("old", 120, 1),
        _closed("pending", 5, 1, status="Open"),
    ]
    stats = compute_cycle_times(records, lookback_days=90, now=NOW)
    assert stats.count == 1
    assert stats.avg_days == 2


def test_cycle_times_keep_negative_durations():
    records = [_closed("bad", 10, -1), _closed("ok", 10, 3)]
    stats = compute_cycle_times(records, now=NOW)
    assert stats.min_days == -1
    assert stats.avg_days == 1


def test_cycle_times_neighborhood_is_exact():
    records = [
        _closed("1", 10, 1, neighborhood="Mission"),
        _closed("2", 10, 5, neighborhood="Mission Bay"),
    ]
    stats = compute_cycle_times(records, CaseFilters(neighborhood="Mission"), now=NOW)
    assert stats.count == 1
    assert stats.max_days == 1


# --- prefix filter ---


def test_prefix_filter_is_prefix_only():
    assert matches_prefix("Encampments", "Encamp")
    assert not matches_prefix("Abandoned Encampment", "Encamp")
    assert matches_prefix("anything", None)
    assert matches_prefix("anything", "")
    assert not matches_prefix(None, "Encamp")


def test_cycle_times_category_prefix():
    records = [
        _closed("1", 10, 1, category="Encampments"),
        _closed("2", 10, 9, category="Abandoned Encampment"),
    ]
    stats = compute_cycle_times(records, CaseFilters(category_prefix="Encamp"), now=NOW)
    assert stats.count == 1
    assert stats.avg_days == 1


# --- resubmissions ---


def test_resubmission_within_window_is_detected():
    first = _closed("A", 20, 0)
    second = _open("B", 15)
    report = detect_resubmissions([second, first], now=NOW)
    assert report.scanned_count == 2
    assert report.resubmission_count == 1
    assert report.rate_percent == 50.0
    example = report.examples[0]
    assert (example.original_case, example.resubmitted_case) == ("A", "B")
    assert example.closed_at == first.closed_at.isoformat()
    assert example.opened_at == second.requested_at.isoformat()
    assert example.address == "100 MARKET ST"
    assert example.issue == "Bulky Items"


def test_resubmission_examples_keep_dataset_timestamps():
    base = {
        "address": "100 MARKET ST",
        "service_name": "Street and Sidewalk Cleaning",
        "service_subtype": "Bulky Items",
    }
    first = CaseRecord.from_socrata(
        {
            **base,
            "service_request_id": "A",
            "requested_datetime": "2026-01-01T08:00:00.000",
            "closed_date": "2026-01-02T10:00:00.000",
            "status_description": "Closed",
        }
    )
    second = CaseRecord.from_socrata(
        {
            **base,
            "service_request_id": "B",
            "requested_datetime": "2026-01-05T09:30:00.000",
            "status_description": "Open",
        }
    )
    example = detect_resubmissions([first, second], now=NOW).examples[0]
    assert example.closed_at == "2026-01-02T10:00:00.000"
    assert example.opened_at == "2026-01-05T09:30:00.000"


def test_resubmission_outside_window_is_ignored():
    first = _closed("A", 20, 0)
    second = _open("B", 12)
    report = detect_resubmissions([first, second], reopen_window_days=7, now=NOW)
    assert report.resubmission_count == 0
    assert report.examples == []


def test_resubmission_requires_same_subtype_and_address():
    records = [
        _closed("A", 20, 0),
        _open("B", 18, subtype="Graffiti"),
        _open("C", 18, address="1 MAIN ST"),
    ]
    assert detect_resubmissions(records, now=NOW).resubmission_count == 0


def test_resubmission_requires_previous_closure():
    records = [_open("A", 20), _open("B", 18)]
    assert detect_resubmissions(records, now=NOW).resubmission_count == 0


def test_resubmission_before_closure_is_ignored():
    # B was opened while A was still open
    records = [_closed("A", 20, 5), _open("B", 18)]
    assert detect_resubmissions(records, now=NOW).resubmission_count == 0


def test_resubmission_compares_neighbours_only():
    # A -> B is a match; A is never compared with C
    records = [_closed("A", 25, 0), _closed("B", 24, 10), _open("C", 20)]
    report = detect_resubmissions(records, now=NOW)
    assert report.resubmission_count == 1
    assert report.examples[0].resubmitted_case == "B"


def test_resubmission_examples_are_capped():
    records = [_closed(str(i), 28 - i, 0.5) for i in range(10)]
    report = detect_resubmissions(records, now=NOW)
    assert report.resubmission_count == 9
    assert len(report.examples) == MAX_EXAMPLES
    assert report.rate_percent == 90.0


def test_resubmission_district_and_prefix_filters():
    records = [
        _closed("A", 20, 0, district="3"),
        _open("B", 18, district="3"),
        _closed("C", 20, 0, district="6", address="9 MISSION ST"),
        _open("D", 18, district="6", address="9 MISSION ST"),
    ]
    report = detect_resubmissions(records, CaseFilters(district="6"), now=NOW)
    assert report.scanned_count == 2
    assert report.examples[0].original_case == "C"

    report = detect_resubmissions(
        records, CaseFilters(category_prefix="Graffiti"), now=NOW
    )
    assert report.scanned_count == 0
    assert report.rate_percent == 0


def test_resubmission_window_excludes_old_cases():
    records = [_closed("A", 45, 0), _open("B", 40)]
    report = detect_resubmissions(records, lookback_days=30, now=NOW)
    assert report.scanned_count == 0
