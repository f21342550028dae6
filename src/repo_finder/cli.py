"""CLI entrypoint for repo-finder."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Callable, Coroutine

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .cache import FileCache
from .config import (
    DEFAULT_CACHE_TTL,
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_RESULTS,
    DEFAULT_MIN_STARS,
    LICENSES,
)
from .github.client import parse_repo_url
from .models import SearchParams
from .templates import get_template, get_templates


def _configure_logging(verbose: bool) -> None:
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger = logging.getLogger("repo_finder")
    package_logger.handlers[:] = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _run(coro: Coroutine[Any, Any, Any], target: str) -> None:
    """Run a pipeline coroutine, mapping API failures to readable errors."""
    try:
        asyncio.run(coro)
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        if status == 404:
            click.echo(f"Error: '{target}' not found. Check the repository name.", err=True)
        elif status in (401, 403):
            click.echo(
                "Error: Authentication failed or rate limit exceeded. "
                "Check your --token or $GITHUB_TOKEN.",
                err=True,
            )
        elif status == 422:
            click.echo("Error: GitHub rejected the search query.", err=True)
        else:
            click.echo(f"Error: GitHub API returned {status}.", err=True)
        sys.exit(1)
    except (httpx.ConnectError, httpx.ConnectTimeout) as exc:
        click.echo(f"Error: Could not connect to GitHub API. {exc}", err=True)
        sys.exit(1)
    except Exception as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


def _common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every command that talks to the GitHub API."""
    options = [
        click.option(
            "--token",
            envvar="GITHUB_TOKEN",
            default=None,
            show_envvar=True,
            help="GitHub personal access token (raises the rate limit)",
        ),
        click.option(
            "--format",
            "output_format",
            type=click.Choice(
                ["table", "json", "csv", "markdown", "html"], case_sensitive=False
            ),
            default="table",
            show_default=True,
            help="Output format",
        ),
        click.option(
            "--output",
            "output_file",
            default=None,
            type=click.Path(),
            help="Save output to file instead of stdout",
        ),
        click.option(
            "--no-cache", is_flag=True, default=False, help="Disable HTTP response caching"
        ),
        click.option(
            "--cache-ttl",
            default=DEFAULT_CACHE_TTL,
            show_default=True,
            type=click.IntRange(min=0),
            help="Cache lifetime in seconds",
        ),
        click.option("--api-url", default=None, help="GitHub Enterprise API base URL"),
        click.option(
            "--no-ssl-verify",
            is_flag=True,
            default=False,
            help="Disable SSL verification (self-signed certs)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _warn_without_token(token: str | None) -> None:
    if not token:
        click.echo(
            "Warning: GITHUB_TOKEN not set. Rate limit: 60 requests/hour.", err=True
        )


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.version_option(version=__version__)
def main(verbose: bool) -> None:
    """Find GitHub repositories that welcome new contributors.

    \b
    Examples:
      repo-finder search react component library --language TypeScript
      repo-finder search --template beginner --language Python
      repo-finder analyze https://github.com/pallets/click
      repo-finder compare pallets/click tiangolo/typer --format markdown
    """
    _configure_logging(verbose)


@main.command()
@click.argument("keywords", nargs=-1)
@click.option(
    "--language", default=DEFAULT_LANGUAGE, show_default=True, help="Programming language"
)
@click.option(
    "--license",
    "license_key",
    type=click.Choice(sorted(LICENSES.values()), case_sensitive=False),
    default=None,
    help="Only repositories under this license",
)
@click.option("--min-stars", default=DEFAULT_MIN_STARS, show_default=True, type=click.IntRange(min=0))
@click.option("--min-forks", default=0, type=click.IntRange(min=0), help="0 = no filter")
@click.option(
    "--max-results",
    default=DEFAULT_MAX_RESULTS,
    show_default=True,
    type=click.IntRange(1, 100),
)
@click.option(
    "--good-first-issues/--any-issues",
    "require_good_first_issues",
    default=True,
    show_default=True,
    help="Require repositories with good first issues",
)
@click.option(
    "--active-only",
    is_flag=True,
    default=False,
    help="Only show repositories with a commit in the last 30 days",
)
@click.option(
    "--advanced",
    is_flag=True,
    default=False,
    help="Collect PR merge and issue response times (more API calls)",
)
@click.option(
    "--template",
    type=click.Choice(sorted(get_templates()), case_sensitive=False),
    default=None,
    help="Use a quick search preset",
)
@_common_options
def search(
    keywords: tuple[str, ...],
    language: str,
    license_key: str | None,
    min_stars: int,
    min_forks: int,
    max_results: int,
    require_good_first_issues: bool,
    active_only: bool,
    advanced: bool,
    template: str | None,
    token: str | None,
    output_format: str,
    output_file: str | None,
    no_cache: bool,
    cache_ttl: int,
    api_url: str | None,
    no_ssl_verify: bool,
) -> None:
    """Search repositories and rank them by contribution friendliness."""
    title = "repo-finder"
    if template:
        preset = get_template(template, language=language)
        if preset is None:
            raise click.BadParameter(
                f"Unknown template '{template}'.", param_hint="--template"
            )
        params = preset.params
        title = f"repo-finder: {preset.name}"
    elif keywords:
        params = SearchParams(
            keywords=" ".join(keywords),
            language=language,
            min_stars=min_stars,
            max_results=max_results,
            license=license_key,
            min_forks=min_forks or None,
            require_good_first_issues=require_good_first_issues,
        )
    else:
        raise click.UsageError("Provide search KEYWORDS or --template.")

    _warn_without_token(token)

    from .orchestrator import run_search

    _run(
        run_search(
            params,
            token=token,
            advanced=advanced,
            active_only=active_only,
            output_format=output_format,
            output_file=output_file,
            no_cache=no_cache,
            cache_ttl=cache_ttl,
            api_url=api_url,
            verify_ssl=not no_ssl_verify,
            title=title,
        ),
        params.keywords,
    )


def _validate_targets(targets: tuple[str, ...]) -> list[str]:
    for target in targets:
        if parse_repo_url(target) is None:
            raise click.BadParameter(
                f"'{target}' is not a repository. Use owner/repo or a GitHub URL.",
                param_hint="TARGET",
            )
    return list(targets)


@main.command()
@click.argument("target")
@click.option(
    "--advanced/--basic",
    default=True,
    show_default=True,
    help="Collect PR merge and issue response times",
)
@_common_options
def analyze(
    target: str,
    advanced: bool,
    token: str | None,
    output_format: str,
    output_file: str | None,
    no_cache: bool,
    cache_ttl: int,
    api_url: str | None,
    no_ssl_verify: bool,
) -> None:
    """Analyze a single repository (owner/repo or GitHub URL)."""
    targets = _validate_targets((target,))
    _warn_without_token(token)

    from .orchestrator import run_analyze

    _run(
        run_analyze(
            targets,
            token=token,
            advanced=advanced,
            output_format=output_format,
            output_file=output_file,
            no_cache=no_cache,
            cache_ttl=cache_ttl,
            api_url=api_url,
            verify_ssl=not no_ssl_verify,
        ),
        target,
    )


@main.command()
@click.argument("targets", nargs=-1, required=True)
@_common_options
def compare(
    targets: tuple[str, ...],
    token: str | None,
    output_format: str,
    output_file: str | None,
    no_cache: bool,
    cache_ttl: int,
    api_url: str | None,
    no_ssl_verify: bool,
) -> None:
    """Compare two or more repositories side by side."""
    # Accept "a,b,c" as well as separate arguments
    names = tuple(t.strip() for arg in targets for t in arg.split(",") if t.strip())
    if len(names) < 2:
        raise click.UsageError("Provide at least 2 repositories to compare.")
    validated = _validate_targets(names)
    _warn_without_token(token)

    from .orchestrator import run_analyze

    _run(
        run_analyze(
            validated,
            token=token,
            advanced=True,
            compare=True,
            output_format=output_format,
            output_file=output_file,
            no_cache=no_cache,
            cache_ttl=cache_ttl,
            api_url=api_url,
            verify_ssl=not no_ssl_verify,
        ),
        ", ".join(validated),
    )


@main.group()
def cache() -> None:
    """Inspect or clear the response cache."""


@cache.command("stats")
def cache_stats() -> None:
    """Show cache entry count and size."""
    stats = FileCache().stats()
    click.echo(f"Cache: {stats.files} entries ({stats.size_formatted})")


@cache.command("clear")
def cache_clear() -> None:
    """Delete all cached responses."""
    removed = FileCache().clear()
    click.echo(f"Removed {removed} cache entries.")


if __name__ == "__main__":  # pragma: no cover
    main()
