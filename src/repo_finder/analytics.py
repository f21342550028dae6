"""Sample-based latency aggregators and coarse repository indicators.

The inputs are raw GitHub REST payloads (lists of dicts) already fetched by
the collector. Samples are small and recency-biased, so the averages are
estimates of current maintainer responsiveness, not historical means.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping

from .models import IssueResponseStats, PRStats
from .scoring import round_half_up

logger = logging.getLogger(__name__)

_SECONDS_PER_HOUR = 3600
_SECONDS_PER_DAY = 86400


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a GitHub ISO 8601 timestamp into an aware datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable timestamp: %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def days_since(value: str | None, now: datetime) -> int | None:
    """Whole days elapsed between ``value`` and ``now`` (never negative)."""
    then = parse_timestamp(value)
    if then is None:
        return None
    elapsed = (now - then).total_seconds() // _SECONDS_PER_DAY
    return max(0, int(elapsed))


def pr_merge_stats(pull_requests: list[dict[str, Any]]) -> PRStats:
    """Average time from creation to merge, in days, over merged PRs."""
    merge_days: list[float] = []
    for pr in pull_requests:
        merged = parse_timestamp(pr.get("merged_at"))
        if merged is None:
            continue
        created = parse_timestamp(pr.get("created_at"))
        if created is None:
            continue
        merge_days.append((merged - created).total_seconds() / _SECONDS_PER_DAY)

    if not merge_days:
        return PRStats(avg_merge_time=None, merged_count=0)

    avg = sum(merge_days) / len(merge_days)
    return PRStats(avg_merge_time=round_half_up(avg, 1), merged_count=len(merge_days))


def issue_response_stats(
    issues: list[dict[str, Any]],
    first_comment_at: Mapping[int, str | None],
) -> IssueResponseStats:
    """Average hours to first comment and share of issues that got one.

    ``first_comment_at`` maps issue numbers to the timestamp of their first
    comment. An issue with comments but no entry (the comment fetch failed)
    counts as unanswered; the rate is always taken over the whole sample.
    """
    response_hours: list[float] = []
    for issue in issues:
        if issue.get("comments", 0) <= 0:
            continue
        responded = parse_timestamp(first_comment_at.get(issue.get("number")))
        created = parse_timestamp(issue.get("created_at"))
        if responded is None or created is None:
            continue
        response_hours.append((responded - created).total_seconds() / _SECONDS_PER_HOUR)

    if not response_hours:
        return IssueResponseStats(avg_response_time=None, response_rate=0)

    avg = sum(response_hours) / len(response_hours)
    rate = int(round_half_up(len(response_hours) / len(issues) * 100))
    return IssueResponseStats(avg_response_time=round_half_up(avg, 1), response_rate=rate)


def estimate_contributors(page: list[dict[str, Any]] | None) -> str | None:
    """Coarse contributor indicator from a one-item contributor page.

    ``"10+"`` means "has contributors", not a count; ``None`` means the page
    could not be fetched.
    """
    if page is None:
        return None
    return "10+" if page else "0"
