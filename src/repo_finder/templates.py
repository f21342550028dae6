"""Quick search presets for common use cases."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta

from .models import SearchParams


@dataclass(frozen=True)
class QuickTemplate:
    name: str
    description: str
    params: SearchParams


def _days_ago(days: int, today: date) -> str:
    return (today - timedelta(days=days)).isoformat()


def get_templates(today: date | None = None) -> dict[str, QuickTemplate]:
    """Build the templates; date qualifiers are relative to ``today``."""
    today = today or date.today()
    week_ago = _days_ago(7, today)
    return {
        "trending": QuickTemplate(
            name="Trending",
            description="Trending repositories this week",
            params=SearchParams(
                keywords=f"created:>{week_ago}",
                language="TypeScript",
                min_stars=500,
                max_results=20,
                require_good_first_issues=False,
            ),
        ),
        "beginner": QuickTemplate(
            name="Beginner Friendly",
            description="Perfect projects for beginners",
            params=SearchParams(
                keywords="good-first-issue",
                language="TypeScript",
                min_stars=100,
                max_results=30,
                min_forks=10,
            ),
        ),
        "active": QuickTemplate(
            name="Super Active",
            description="Highly active projects with recent commits",
            params=SearchParams(
                keywords=f"pushed:>{week_ago}",
                language="TypeScript",
                min_stars=500,
                max_results=20,
                require_good_first_issues=False,
            ),
        ),
        "small": QuickTemplate(
            name="Small Projects",
            description="Growing projects (100-1000 stars)",
            params=SearchParams(
                keywords="stars:100..1000",
                language="TypeScript",
                min_stars=100,
                max_results=25,
            ),
        ),
        "hacktoberfest": QuickTemplate(
            name="Hacktoberfest",
            description="Hacktoberfest-ready repositories",
            params=SearchParams(
                keywords="hacktoberfest topic:hacktoberfest",
                language="TypeScript",
                min_stars=50,
                max_results=30,
            ),
        ),
    }


def get_template(
    name: str, language: str | None = None, today: date | None = None
) -> QuickTemplate | None:
    """Look up a template by name, optionally overriding its language."""
    template = get_templates(today).get(name.lower())
    if template is None or language is None:
        return template
    return replace(template, params=replace(template.params, language=language))
