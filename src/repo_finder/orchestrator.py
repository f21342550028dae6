"""Orchestrator: wires together client, collector, and renderer."""

from __future__ import annotations

from .collector import analyze_targets, search_and_analyze
from .config import DEFAULT_CACHE_TTL
from .github.client import GitHubClient
from .models import AnalysisReport, SearchParams
from .renderer import (
    render_comparison,
    render_csv,
    render_html,
    render_json,
    render_markdown,
    render_report,
)
from .scoring import DEFAULT_SCORING, ScoringConfig


def _render(
    report: AnalysisReport,
    output_format: str,
    output_file: str | None,
    title: str,
    compare: bool = False,
) -> None:
    if output_format == "json":
        render_json(report, output_file=output_file)
    elif output_format == "csv":
        render_csv(report, output_file=output_file)
    elif output_format == "html":
        render_html(report, output_file=output_file)
    elif output_format == "markdown":
        render_markdown(report, output_file=output_file)
    elif compare:
        render_comparison(report, output_file=output_file)
    else:
        render_report(report, output_file=output_file, title=title)


async def run_search(
    params: SearchParams,
    token: str | None,
    advanced: bool = False,
    active_only: bool = False,
    output_format: str = "table",
    output_file: str | None = None,
    no_cache: bool = False,
    cache_ttl: int = DEFAULT_CACHE_TTL,
    api_url: str | None = None,
    verify_ssl: bool = True,
    title: str = "repo-finder",
    config: ScoringConfig = DEFAULT_SCORING,
) -> AnalysisReport:
    """Search pipeline: search, analyze, render."""
    async with GitHubClient(
        token=token,
        no_cache=no_cache,
        base_url=api_url,
        verify_ssl=verify_ssl,
        cache_ttl=cache_ttl,
    ) as client:
        report = await search_and_analyze(
            client, params, advanced=advanced, active_only=active_only, config=config
        )

    _render(report, output_format, output_file, title)
    return report


async def run_analyze(
    targets: list[str],
    token: str | None,
    advanced: bool = True,
    compare: bool = False,
    output_format: str = "table",
    output_file: str | None = None,
    no_cache: bool = False,
    cache_ttl: int = DEFAULT_CACHE_TTL,
    api_url: str | None = None,
    verify_ssl: bool = True,
    config: ScoringConfig = DEFAULT_SCORING,
) -> AnalysisReport:
    """Analyze (or compare) explicitly named repositories."""
    async with GitHubClient(
        token=token,
        no_cache=no_cache,
        base_url=api_url,
        verify_ssl=verify_ssl,
        cache_ttl=cache_ttl,
    ) as client:
        report = await analyze_targets(client, targets, advanced=advanced, config=config)

    _render(report, output_format, output_file, "repo-finder: analyze", compare=compare)
    return report
