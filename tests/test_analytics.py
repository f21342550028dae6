"""Tests for the latency aggregators and coarse indicators."""

from __future__ import annotations

from datetime import datetime, timezone

from repo_finder.analytics import (
    days_since,
    estimate_contributors,
    issue_response_stats,
    parse_timestamp,
    pr_merge_stats,
)
from repo_finder.models import IssueResponseStats, PRStats


def _pr(created: str, merged: str | None) -> dict:
    return {"state": "closed", "created_at": created, "merged_at": merged}


def _issue(number: int, comments: int, created: str = "2024-03-01T00:00:00Z") -> dict:
    return {"number": number, "comments": comments, "created_at": created}


# --- parse_timestamp / days_since ---


def test_parse_timestamp_zulu():
    ts = parse_timestamp("2024-06-01T12:30:00Z")
    assert ts == datetime(2024, 6, 1, 12, 30, tzinfo=timezone.utc)


def test_parse_timestamp_naive_assumed_utc():
    ts = parse_timestamp("2024-06-01T12:30:00")
    assert ts is not None
    assert ts.tzinfo is not None


def test_parse_timestamp_missing_or_invalid():
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None
    assert parse_timestamp("yesterday") is None


def test_days_since_floors_partial_days():
    now = datetime(2024, 6, 10, 11, 0, tzinfo=timezone.utc)
    assert days_since("2024-06-01T12:00:00Z", now) == 8


def test_days_since_future_timestamp_clamped():
    now = datetime(2024, 6, 10, tzinfo=timezone.utc)
    assert days_since("2024-06-12T00:00:00Z", now) == 0


def test_days_since_unknown():
    now = datetime(2024, 6, 10, tzinfo=timezone.utc)
    assert days_since(None, now) is None


# --- pr_merge_stats ---


def test_pr_merge_stats_empty():
    assert pr_merge_stats([]) == PRStats(avg_merge_time=None, merged_count=0)


def test_pr_merge_stats_no_merged_prs():
    prs = [_pr("2024-01-01T00:00:00Z", None), _pr("2024-01-02T00:00:00Z", None)]
    assert pr_merge_stats(prs) == PRStats(avg_merge_time=None, merged_count=0)


def test_pr_merge_stats_average():
    prs = [
        _pr("2024-01-01T00:00:00Z", "2024-01-03T00:00:00Z"),  # 2 days
        _pr("2024-01-01T00:00:00Z", "2024-01-05T00:00:00Z"),  # 4 days
    ]
    assert pr_merge_stats(prs) == PRStats(avg_merge_time=3.0, merged_count=2)


def test_pr_merge_stats_ignores_closed_unmerged():
    prs = [
        _pr("2024-01-01T00:00:00Z", "2024-01-02T12:00:00Z"),  # 1.5 days
        _pr("2024-01-01T00:00:00Z", None),
    ]
    result = pr_merge_stats(prs)
    assert result.merged_count == 1
    assert result.avg_merge_time == 1.5


def test_pr_merge_stats_rounds_to_one_decimal():
    prs = [
        _pr("2024-01-01T00:00:00Z", "2024-01-01T01:00:00Z"),  # 1/24 day
        _pr("2024-01-01T00:00:00Z", "2024-01-02T00:00:00Z"),  # 1 day
        _pr("2024-01-01T00:00:00Z", "2024-01-02T00:00:00Z"),  # 1 day
    ]
    # (0.041666 + 1 + 1) / 3 = 0.680555...
    assert pr_merge_stats(prs).avg_merge_time == 0.7


# --- issue_response_stats ---


def test_issue_response_stats_example():
    issues = [
        _issue(1, comments=2),
        _issue(2, comments=1),
        _issue(3, comments=0),
        _issue(4, comments=0),
    ]
    first_comments = {
        1: "2024-03-01T01:00:00Z",  # 1h
        2: "2024-03-01T03:00:00Z",  # 3h
    }
    assert issue_response_stats(issues, first_comments) == IssueResponseStats(
        avg_response_time=2.0, response_rate=50
    )


def test_issue_response_stats_no_responses():
    issues = [_issue(1, comments=0), _issue(2, comments=0)]
    assert issue_response_stats(issues, {}) == IssueResponseStats(
        avg_response_time=None, response_rate=0
    )


def test_issue_response_stats_empty_sample():
    assert issue_response_stats([], {}) == IssueResponseStats(
        avg_response_time=None, response_rate=0
    )


def test_issue_response_stats_failed_comment_fetch_counts_as_unanswered():
    # Issue 2 has comments but its first comment could not be fetched; it is
    # treated as a non-response and still counts in the denominator.
    issues = [_issue(1, comments=3), _issue(2, comments=5)]
    first_comments = {1: "2024-03-01T04:00:00Z"}
    result = issue_response_stats(issues, first_comments)
    assert result.avg_response_time == 4.0
    assert result.response_rate == 50


def test_issue_response_stats_ignores_comments_on_uncommented_issues():
    # Only issues reporting comments > 0 are examined for a response
    issues = [_issue(1, comments=0)]
    result = issue_response_stats(issues, {1: "2024-03-01T04:00:00Z"})
    assert result == IssueResponseStats(avg_response_time=None, response_rate=0)


def test_issue_response_stats_rate_rounding():
    issues = [_issue(1, comments=1), _issue(2, comments=1), _issue(3, comments=0)]
    first_comments = {1: "2024-03-01T02:00:00Z", 2: "2024-03-01T02:00:00Z"}
    assert issue_response_stats(issues, first_comments).response_rate == 67

    one_of_three = {1: "2024-03-01T02:00:00Z"}
    assert issue_response_stats(issues, one_of_three).response_rate == 33


def test_issue_response_stats_pull_requests_count_in_sample():
    # The sample comes from the issues endpoint, which also lists PRs
    issues = [
        _issue(1, comments=1),
        {**_issue(2, comments=0), "pull_request": {"url": "..."}},
        {**_issue(3, comments=1), "pull_request": {"url": "..."}},
        _issue(4, comments=0),
    ]
    first_comments = {1: "2024-03-01T02:00:00Z", 3: "2024-03-01T04:00:00Z"}
    result = issue_response_stats(issues, first_comments)
    assert result.avg_response_time == 3.0
    assert result.response_rate == 50


# --- estimate_contributors ---


def test_estimate_contributors():
    assert estimate_contributors([{"login": "alice"}]) == "10+"
    assert estimate_contributors([]) == "0"
    assert estimate_contributors(None) is None
