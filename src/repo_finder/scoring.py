"""Contribution-friendliness scoring.

Every function here is pure and total: any well-typed input, including a
missing commit date, produces a valid score. Weights and activity thresholds
are carried by an immutable :class:`ScoringConfig` so alternative weightings
can be scored without touching the functions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .models import RepositoryAnalysis

# (exclusive upper bound, score), checked in order
_STAR_TIERS: tuple[tuple[int, int], ...] = (
    (10, 1),
    (50, 3),
    (100, 4),
    (500, 6),
    (1000, 7),
    (5000, 8),
    (10000, 9),
)
_MAX_STAR_SCORE = 10

_OPEN_ISSUE_TIERS: tuple[tuple[int, int], ...] = (
    (10, 5),
    (50, 4),
    (100, 3),
    (500, 2),
)
_MIN_OPEN_ISSUE_SCORE = 1

# Days since the last commit below which a repository counts as active
ACTIVE_DAYS = 30


@dataclass(frozen=True)
class ActivityThresholds:
    """Days-since-last-commit bucket boundaries (exclusive)."""

    very_active: int = 7
    active: int = 30
    moderate: int = 90
    inactive: int = 180


@dataclass(frozen=True)
class ScoreWeights:
    activity: float = 0.30
    stars: float = 0.20
    issues: float = 0.15
    contributing: float = 0.15
    good_first_issues: float = 0.20

    def __post_init__(self) -> None:
        values = (
            self.activity,
            self.stars,
            self.issues,
            self.contributing,
            self.good_first_issues,
        )
        if any(v < 0 for v in values):
            raise ValueError("Score weights must be non-negative")
        if not math.isclose(sum(values), 1.0, abs_tol=1e-9):
            raise ValueError(f"Score weights must sum to 1.0, got {sum(values)}")


@dataclass(frozen=True)
class ScoringConfig:
    thresholds: ActivityThresholds = field(default_factory=ActivityThresholds)
    weights: ScoreWeights = field(default_factory=ScoreWeights)


DEFAULT_SCORING = ScoringConfig()


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, unlike the built-in banker's rounding."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def is_active(last_activity_days: int | None) -> bool:
    """Whether the last commit is recent enough to flag the repository active.

    The cutoff is fixed; custom :class:`ActivityThresholds` only change the
    activity score.
    """
    return last_activity_days is not None and last_activity_days < ACTIVE_DAYS


def activity_score(
    last_activity_days: int | None, config: ScoringConfig = DEFAULT_SCORING
) -> int:
    """Score recency of the last commit in discrete buckets (0-10)."""
    if last_activity_days is None:
        return 0
    t = config.thresholds
    if last_activity_days < t.very_active:
        return 10
    if last_activity_days < t.active:
        return 8
    if last_activity_days < t.moderate:
        return 5
    if last_activity_days < t.inactive:
        return 3
    return 1


def popularity_score(stars: int) -> int:
    """Stepwise approximation of a logarithmic star curve."""
    for bound, score in _STAR_TIERS:
        if stars < bound:
            return score
    return _MAX_STAR_SCORE


def issue_health_score(open_issues: int, good_first_issues: int) -> int:
    """Reward beginner issues, penalize large open-issue backlogs."""
    good_first = min(good_first_issues * 2, 5)
    backlog = _MIN_OPEN_ISSUE_SCORE
    for bound, score in _OPEN_ISSUE_TIERS:
        if open_issues < bound:
            backlog = score
            break
    return min(good_first + backlog, 10)


def good_first_issue_volume_score(good_first_issues: int) -> int:
    return min(good_first_issues * 2, 10)


def overall_score(
    analysis: RepositoryAnalysis, config: ScoringConfig = DEFAULT_SCORING
) -> float:
    """Weighted composite score in [0, 10], rounded to one decimal."""
    w = config.weights
    gfi_count = len(analysis.good_first_issues)
    total = (
        activity_score(analysis.last_activity_days, config) * w.activity
        + popularity_score(analysis.stars) * w.stars
        + issue_health_score(analysis.open_issues, gfi_count) * w.issues
        + (10 if analysis.has_contributing else 0) * w.contributing
        + good_first_issue_volume_score(gfi_count) * w.good_first_issues
    )
    return min(max(round_half_up(total, 1), 0.0), 10.0)
