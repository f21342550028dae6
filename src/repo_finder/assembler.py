"""Build scored RepositoryAnalysis records from raw repository snapshots."""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from typing import Any

from .analytics import (
    days_since,
    estimate_contributors,
    issue_response_stats,
    pr_merge_stats,
)
from .models import GoodFirstIssue, RepositoryAnalysis, RepositorySnapshot
from .scoring import DEFAULT_SCORING, ScoringConfig, is_active, overall_score


def _to_good_first_issue(raw: dict[str, Any]) -> GoodFirstIssue:
    return GoodFirstIssue(
        title=raw.get("title", ""),
        url=raw.get("html_url", ""),
        number=raw.get("number", 0),
        created_at=raw.get("created_at", ""),
        comments=raw.get("comments", 0),
    )


def _license_name(repo: dict[str, Any]) -> str | None:
    license_info = repo.get("license")
    if not license_info:
        return None
    return license_info.get("name")


def build_analysis(
    snapshot: RepositorySnapshot,
    advanced: bool = False,
    now: datetime | None = None,
    config: ScoringConfig = DEFAULT_SCORING,
) -> RepositoryAnalysis:
    """Assemble and score one repository.

    ``now`` anchors the days-since-last-commit computation; passing it makes
    the result fully deterministic. Advanced stats are populated only when
    ``advanced`` is set, otherwise they stay ``None``.
    """
    now = now or datetime.now(timezone.utc)
    repo = snapshot.repo
    last_activity = days_since(snapshot.last_commit_at, now)

    analysis = RepositoryAnalysis(
        name=repo.get("full_name", ""),
        description=repo.get("description") or "No description",
        stars=repo.get("stargazers_count", 0),
        language=repo.get("language"),
        last_activity_days=last_activity,
        active=is_active(last_activity),
        url=repo.get("html_url", ""),
        open_issues=repo.get("open_issues_count", 0),
        forks=repo.get("forks_count", 0),
        has_contributing=snapshot.has_contributing,
        has_code_of_conduct=snapshot.has_code_of_conduct,
        license=_license_name(repo),
        contributors_count=estimate_contributors(snapshot.contributors_page),
        good_first_issues=tuple(_to_good_first_issue(i) for i in snapshot.good_first_issues),
        topics=tuple(repo.get("topics") or ()),
    )

    if advanced:
        analysis = dataclasses.replace(
            analysis,
            pr_stats=pr_merge_stats(snapshot.closed_pull_requests),
            issue_response_stats=issue_response_stats(
                snapshot.recent_issues, snapshot.first_comment_at
            ),
        )

    return score_analysis(analysis, config)


def score_analysis(
    analysis: RepositoryAnalysis, config: ScoringConfig = DEFAULT_SCORING
) -> RepositoryAnalysis:
    """Return a copy of ``analysis`` with ``activity_score`` recomputed."""
    return dataclasses.replace(analysis, activity_score=overall_score(analysis, config))
