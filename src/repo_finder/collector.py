"""Data collection: fetch raw repository data and produce scored analyses."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

from rich.progress import Progress, SpinnerColumn, TextColumn

from .assembler import build_analysis
from .github.client import GitHubClient, build_search_query, parse_repo_url
from .models import AnalysisReport, RepositoryAnalysis, RepositorySnapshot, SearchParams
from .scoring import DEFAULT_SCORING, ScoringConfig

logger = logging.getLogger(__name__)


def _owner_and_name(repo: dict[str, Any]) -> tuple[str, str]:
    owner = (repo.get("owner") or {}).get("login")
    name = repo.get("name")
    if owner and name:
        return owner, name
    owner, _, name = repo.get("full_name", "").partition("/")
    return owner, name


async def _collect_first_comments(
    client: GitHubClient, owner: str, name: str, issues: list[dict[str, Any]]
) -> dict[int, str | None]:
    """First-comment timestamps for every sampled issue that has comments."""
    commented = [i["number"] for i in issues if i.get("comments", 0) > 0]
    results = await asyncio.gather(
        *(client.get_first_comment_date(owner, name, n) for n in commented),
        return_exceptions=True,
    )
    first_comments: dict[int, str | None] = {}
    for number, result in zip(commented, results):
        if isinstance(result, Exception):
            logger.warning(
                "%s/%s: error fetching comments of #%d: %s", owner, name, number, result
            )
            continue
        first_comments[number] = result
    return first_comments


async def collect_snapshot(
    client: GitHubClient, repo: dict[str, Any], advanced: bool = False
) -> RepositorySnapshot:
    """Fetch everything needed to score one repository.

    Individual fetch failures are logged and replaced by an empty value so the
    repository can still be scored.
    """
    owner, name = _owner_and_name(repo)

    results = await asyncio.gather(
        client.get_last_commit_date(owner, name),
        client.list_good_first_issues(owner, name),
        client.has_file(owner, name, "CONTRIBUTING.md"),
        client.has_file(owner, name, "CODE_OF_CONDUCT.md"),
        client.list_contributors_page(owner, name),
        return_exceptions=True,
    )
    last_commit_at, issues, has_contributing, has_coc, contributors = results

    if isinstance(last_commit_at, Exception):
        logger.warning("%s/%s: error fetching last commit: %s", owner, name, last_commit_at)
        last_commit_at = None
    if isinstance(issues, Exception):
        logger.warning("%s/%s: error fetching good first issues: %s", owner, name, issues)
        issues = []
    if isinstance(has_contributing, Exception):
        logger.warning(
            "%s/%s: error checking CONTRIBUTING.md: %s", owner, name, has_contributing
        )
        has_contributing = False
    if isinstance(has_coc, Exception):
        logger.warning("%s/%s: error checking CODE_OF_CONDUCT.md: %s", owner, name, has_coc)
        has_coc = False
    if isinstance(contributors, Exception):
        logger.warning("%s/%s: error fetching contributors: %s", owner, name, contributors)
        contributors = None

    snapshot = RepositorySnapshot(
        repo=repo,
        last_commit_at=last_commit_at,
        good_first_issues=issues,
        has_contributing=has_contributing,
        has_code_of_conduct=has_coc,
        contributors_page=contributors,
    )

    if advanced:
        prs, recent_issues = await asyncio.gather(
            client.list_closed_pull_requests(owner, name),
            client.list_recent_issues(owner, name),
            return_exceptions=True,
        )
        if isinstance(prs, Exception):
            logger.warning("%s/%s: error fetching pull requests: %s", owner, name, prs)
            prs = []
        if isinstance(recent_issues, Exception):
            logger.warning("%s/%s: error fetching issues: %s", owner, name, recent_issues)
            recent_issues = []
        snapshot.closed_pull_requests = prs
        snapshot.recent_issues = recent_issues
        snapshot.first_comment_at = await _collect_first_comments(
            client, owner, name, recent_issues
        )

    return snapshot


async def analyze_repo(
    client: GitHubClient,
    repo: dict[str, Any],
    advanced: bool = False,
    config: ScoringConfig = DEFAULT_SCORING,
    now: datetime | None = None,
) -> RepositoryAnalysis:
    snapshot = await collect_snapshot(client, repo, advanced=advanced)
    return build_analysis(snapshot, advanced=advanced, now=now, config=config)


async def analyze_repos(
    client: GitHubClient,
    repos: list[dict[str, Any]],
    advanced: bool = False,
    config: ScoringConfig = DEFAULT_SCORING,
    now: datetime | None = None,
) -> AnalysisReport:
    """Analyze several repositories, keeping input order and recording failures."""
    failed_repos: list[str] = []

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
    ) as progress:
        task = progress.add_task(f"Analyzing {len(repos)} repos...", total=len(repos))

        async def analyze_and_update(repo: dict[str, Any]) -> RepositoryAnalysis | None:
            full_name = repo.get("full_name") or repo.get("name", "?")
            try:
                return await analyze_repo(client, repo, advanced, config, now)
            except Exception as exc:
                logger.warning("Failed to analyze %s: %s", full_name, exc)
                failed_repos.append(full_name)
                return None
            finally:
                progress.advance(task)

        results = await asyncio.gather(*(analyze_and_update(r) for r in repos))

    return AnalysisReport(
        analyses=[r for r in results if r is not None],
        failed_repos=failed_repos,
    )


async def fetch_repos(
    client: GitHubClient, targets: list[str]
) -> tuple[list[dict[str, Any]], list[str], list[Exception]]:
    """Resolve ``owner/repo`` references or URLs to repository payloads.

    Returns the payloads, the targets that could not be resolved, and the
    errors raised while fetching them.
    """
    repos: list[dict[str, Any]] = []
    failed: list[str] = []
    errors: list[Exception] = []
    for target in targets:
        parsed = parse_repo_url(target)
        if parsed is None:
            logger.warning("Not a repository reference: %s", target)
            failed.append(target)
            continue
        try:
            repos.append(await client.get_repo(*parsed))
        except Exception as exc:
            logger.warning("Failed to fetch %s: %s", target, exc)
            failed.append(target)
            errors.append(exc)
    return repos, failed, errors


async def analyze_targets(
    client: GitHubClient,
    targets: list[str],
    advanced: bool = True,
    config: ScoringConfig = DEFAULT_SCORING,
) -> AnalysisReport:
    """Analyze named repositories.

    Targets that fail to resolve are recorded in ``failed_repos``. When none
    resolves, the first fetch error is raised instead.
    """
    repos, failed, errors = await fetch_repos(client, targets)
    if not repos and errors:
        raise errors[0]
    report = await analyze_repos(client, repos, advanced=advanced, config=config)
    report.failed_repos = failed + report.failed_repos
    return report


async def search_and_analyze(
    client: GitHubClient,
    params: SearchParams,
    advanced: bool = False,
    active_only: bool = False,
    config: ScoringConfig = DEFAULT_SCORING,
) -> AnalysisReport:
    """Search, score, optionally drop inactive repos, and sort best first."""
    repos = await client.search_repos(params)
    report = await analyze_repos(client, repos, advanced=advanced, config=config)
    report.query = build_search_query(params)

    if active_only:
        before = len(report.analyses)
        report.analyses = [a for a in report.analyses if a.active]
        report.filtered_inactive = before - len(report.analyses)

    report.analyses.sort(key=lambda a: a.activity_score, reverse=True)
    return report
