"""GitHub REST API client."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any

import httpx

from ..cache import FileCache
from ..config import (
    DEFAULT_CACHE_TTL,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    GOOD_FIRST_ISSUE_LIMIT,
    ISSUE_SAMPLE_SIZE,
    PR_SAMPLE_SIZE,
)
from ..models import SearchParams
from .rate_limit import RateLimitMonitor
from .retry import with_retry

logger = logging.getLogger(__name__)

BASE_URL = "https://api.github.com"

GOOD_FIRST_ISSUE_LABELS = "good first issue,help wanted"

_URL_PREFIX = re.compile(r"^(?:https?://)?(?:www\.)?github\.com/", re.IGNORECASE)


def parse_repo_url(value: str) -> tuple[str, str] | None:
    """Extract (owner, repo) from a GitHub URL or an ``owner/repo`` string."""
    cleaned = _URL_PREFIX.sub("", value.strip())
    parts = [p for p in cleaned.split("/") if p]
    if len(parts) < 2:
        return None
    repo = parts[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    if not repo:
        return None
    return parts[0], repo


def build_search_query(params: SearchParams) -> str:
    query = f"{params.keywords} language:{params.language} stars:>{params.min_stars}"
    if params.require_good_first_issues:
        query += " good-first-issues:>1"
    if params.license:
        query += f" license:{params.license}"
    if params.min_forks:
        query += f" forks:>{params.min_forks}"
    return query


class GitHubClient:
    """Async GitHub REST API client with caching, retries and rate limit support."""

    def __init__(
        self,
        token: str | None = None,
        concurrency: int = 5,
        no_cache: bool = False,
        base_url: str | None = None,
        verify_ssl: bool = True,
        cache_ttl: int = DEFAULT_CACHE_TTL,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url or BASE_URL,
            headers=headers,
            timeout=30.0,
            verify=verify_ssl,
        )
        self._rate_limit = RateLimitMonitor()
        self._semaphore = asyncio.Semaphore(concurrency)
        self._cache: FileCache | None = None if no_cache else FileCache(ttl=cache_ttl)
        self._retry_attempts = retry_attempts
        self._retry_delay = retry_delay

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _get_once(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        async with self._semaphore:
            await self._rate_limit.wait_if_needed()
            response = await self._client.get(url, params=params)
            self._rate_limit.update(response)
            response.raise_for_status()
            return response

    async def _get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        return await with_retry(
            lambda: self._get_once(url, params),
            description=f"GET {url}",
            attempts=self._retry_attempts,
            initial_delay=self._retry_delay,
        )

    async def _cached_get_json(
        self, url: str, params: dict[str, Any] | None = None
    ) -> Any:
        """GET with file cache support. Returns parsed JSON."""
        if self._cache is not None:
            cached = self._cache.get(url, params)
            if cached is not None:
                return cached
        response = await self._get(url, params)
        data = response.json()
        if self._cache is not None:
            self._cache.set(url, params, data)
        return data

    async def search_repos(self, params: SearchParams) -> list[dict[str, Any]]:
        """Search repositories matching the given filters, most recently updated first."""
        query = build_search_query(params)
        logger.debug("Search query: %s", query)
        data = await self._cached_get_json(
            "/search/repositories",
            params={
                "q": query,
                "sort": "updated",
                "order": "desc",
                "per_page": params.max_results,
            },
        )
        return data.get("items", []) if isinstance(data, dict) else []

    async def get_repo(self, owner: str, repo: str) -> dict[str, Any]:
        return await self._cached_get_json(f"/repos/{owner}/{repo}")

    async def get_last_commit_date(self, owner: str, repo: str) -> str | None:
        """Timestamp of the most recent commit, or None for an empty repository."""
        try:
            commits = await self._cached_get_json(
                f"/repos/{owner}/{repo}/commits", params={"per_page": 1}
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 409:
                return None
            raise
        if not commits:
            return None
        commit = commits[0].get("commit", {})
        author = commit.get("author") or commit.get("committer") or {}
        return author.get("date")

    async def list_good_first_issues(
        self, owner: str, repo: str, limit: int = GOOD_FIRST_ISSUE_LIMIT
    ) -> list[dict[str, Any]]:
        return await self._cached_get_json(
            f"/repos/{owner}/{repo}/issues",
            params={"labels": GOOD_FIRST_ISSUE_LABELS, "state": "open", "per_page": limit},
        )

    async def has_file(self, owner: str, repo: str, path: str) -> bool:
        """Check whether a file exists at ``path`` on the default branch."""
        try:
            await self._get(f"/repos/{owner}/{repo}/contents/{path}")
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code == 404:
                return False
            raise
        return True

    async def list_contributors_page(
        self, owner: str, repo: str
    ) -> list[dict[str, Any]]:
        """First page (one item) of the contributor list."""
        response = await self._get(
            f"/repos/{owner}/{repo}/contributors", params={"per_page": 1}
        )
        # Empty repositories answer 204 with no body
        if response.status_code == 204:
            return []
        data = response.json()
        return data if isinstance(data, list) else []

    async def list_closed_pull_requests(
        self, owner: str, repo: str, limit: int = PR_SAMPLE_SIZE
    ) -> list[dict[str, Any]]:
        return await self._cached_get_json(
            f"/repos/{owner}/{repo}/pulls",
            params={
                "state": "closed",
                "sort": "updated",
                "direction": "desc",
                "per_page": limit,
            },
        )

    async def list_recent_issues(
        self, owner: str, repo: str, limit: int = ISSUE_SAMPLE_SIZE
    ) -> list[dict[str, Any]]:
        """Recently updated issues.

        The issues endpoint also returns pull requests; they are kept, so the
        sample is always ``limit`` items when the repository has that many.
        """
        return await self._cached_get_json(
            f"/repos/{owner}/{repo}/issues",
            params={
                "state": "all",
                "sort": "updated",
                "direction": "desc",
                "per_page": limit,
            },
        )

    async def get_first_comment_date(
        self, owner: str, repo: str, number: int
    ) -> str | None:
        comments = await self._cached_get_json(
            f"/repos/{owner}/{repo}/issues/{number}/comments",
            params={"per_page": 1},
        )
        if not comments:
            return None
        return comments[0].get("created_at")
