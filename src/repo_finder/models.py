"""Data models for repo-finder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class GoodFirstIssue:
    title: str
    url: str
    number: int
    created_at: str
    comments: int = 0


@dataclass(frozen=True)
class PRStats:
    """Merge latency over a sample of recently closed pull requests."""

    avg_merge_time: float | None = None  # days
    merged_count: int = 0


@dataclass(frozen=True)
class IssueResponseStats:
    """First-response latency over a sample of recently updated issues."""

    avg_response_time: float | None = None  # hours
    response_rate: int = 0  # percent of examined issues


@dataclass(frozen=True)
class RepositoryAnalysis:
    name: str
    description: str
    stars: int
    url: str
    language: str | None = None
    last_activity_days: int | None = None
    active: bool = False
    open_issues: int = 0
    forks: int = 0
    has_contributing: bool = False
    has_code_of_conduct: bool = False
    license: str | None = None
    contributors_count: str | None = None
    good_first_issues: tuple[GoodFirstIssue, ...] = ()
    topics: tuple[str, ...] = ()
    activity_score: float = 0.0
    # Only set when advanced analytics were requested
    pr_stats: PRStats | None = None
    issue_response_stats: IssueResponseStats | None = None


@dataclass
class RepositorySnapshot:
    """Raw GitHub data collected for one repository.

    Fetch failures are already normalized: an unavailable value is ``None``
    (or an empty list) by the time a snapshot is built.
    """

    repo: dict[str, Any]
    last_commit_at: str | None = None
    good_first_issues: list[dict[str, Any]] = field(default_factory=list)
    has_contributing: bool = False
    has_code_of_conduct: bool = False
    contributors_page: list[dict[str, Any]] | None = None
    # Advanced analytics samples
    closed_pull_requests: list[dict[str, Any]] = field(default_factory=list)
    recent_issues: list[dict[str, Any]] = field(default_factory=list)
    first_comment_at: dict[int, str | None] = field(default_factory=dict)


@dataclass
class AnalysisReport:
    analyses: list[RepositoryAnalysis] = field(default_factory=list)
    failed_repos: list[str] = field(default_factory=list)
    filtered_inactive: int = 0
    query: str | None = None


@dataclass
class SearchParams:
    keywords: str
    language: str
    min_stars: int = 100
    max_results: int = 5
    license: str | None = None
    min_forks: int | None = None
    require_good_first_issues: bool = True
