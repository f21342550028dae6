"""Rich-based terminal report renderer with JSON/CSV/Markdown/HTML export."""

from __future__ import annotations

import csv
import html
import io
import json
from dataclasses import asdict
from datetime import date
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import AnalysisReport, RepositoryAnalysis

_OPTIONAL_STATS = ("pr_stats", "issue_response_stats")

_CSV_HEADER = [
    "name",
    "description",
    "stars",
    "language",
    "last_activity_days",
    "active",
    "open_issues",
    "forks",
    "has_contributing",
    "has_code_of_conduct",
    "license",
    "good_first_issues",
    "activity_score",
    "topics",
    "url",
]


def _format_number(n: int) -> str:
    return f"{n:,}"


def _format_days_ago(days: int | None) -> str:
    if days is None:
        return "-"
    if days == 0:
        return "today"
    return f"{days}d ago"


def _format_hours(h: float | None) -> str:
    if h is None:
        return "-"
    if h < 1:
        return f"{h * 60:.0f}m"
    if h < 24:
        return f"{h:.1f}h"
    return f"{h / 24:.1f}d"


def _score_style(score: float) -> str:
    if score >= 7:
        return "bold green"
    if score >= 4:
        return "yellow"
    return "red"


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {output_file}")


def _make_console(output_file: str | None) -> tuple[Console, io.StringIO | None]:
    if output_file:
        string_io = io.StringIO()
        return Console(file=string_io, force_terminal=False, width=120), string_io
    return Console(), None


def analysis_to_dict(analysis: RepositoryAnalysis) -> dict[str, Any]:
    """Plain dict for export; advanced stats are omitted when not collected."""
    data = asdict(analysis)
    for key in _OPTIONAL_STATS:
        if data[key] is None:
            del data[key]
    return data


def _render_details(console: Console, index: int, a: RepositoryAnalysis) -> None:
    header = Text(f"{index}. {a.name}  ", style="bold")
    header.append(f"{a.activity_score:.1f}/10", style=_score_style(a.activity_score))
    console.print(header)
    console.print(f"   [dim]{a.description}[/dim]")
    console.print(f"   {a.url}")

    info = Table(show_header=False, box=None, padding=(0, 2))
    info.add_column("label", style="dim")
    info.add_column("value")
    info.add_row("Stars", _format_number(a.stars))
    info.add_row("Forks", _format_number(a.forks))
    info.add_row("Language", a.language or "-")
    info.add_row("Last commit", _format_days_ago(a.last_activity_days))
    info.add_row("Status", "[green]active[/green]" if a.active else "[red]inactive[/red]")
    info.add_row("Open issues", _format_number(a.open_issues))
    info.add_row("License", a.license or "-")
    if a.contributors_count:
        info.add_row("Contributors", a.contributors_count)
    info.add_row("CONTRIBUTING.md", _yes_no(a.has_contributing))
    info.add_row("CODE_OF_CONDUCT.md", _yes_no(a.has_code_of_conduct))
    if a.topics:
        info.add_row("Topics", ", ".join(a.topics))
    if a.pr_stats is not None:
        merge = a.pr_stats.avg_merge_time
        info.add_row(
            "Avg PR merge time",
            f"{merge:.1f}d ({a.pr_stats.merged_count} merged)" if merge is not None else "-",
        )
    if a.issue_response_stats is not None:
        irs = a.issue_response_stats
        info.add_row(
            "Issue response",
            f"{_format_hours(irs.avg_response_time)} avg, {irs.response_rate}% answered",
        )
    console.print(info)

    if a.good_first_issues:
        console.print(f"   [bold]Good first issues ({len(a.good_first_issues)})[/bold]")
        for issue in a.good_first_issues:
            console.print(f"   - #{issue.number} {issue.title} [dim]{issue.url}[/dim]")
    else:
        console.print("   [dim]No good first issues at the moment[/dim]")
    console.print()


def render_report(
    report: AnalysisReport,
    output_file: str | None = None,
    title: str = "repo-finder",
) -> None:
    """Render analyses to the terminal using rich."""
    console, string_io = _make_console(output_file)

    subtitle = f"\nQuery: {report.query}" if report.query else ""
    console.print(Panel(Text(f"{title}{subtitle}", justify="center"), style="bold cyan"))
    console.print()

    if report.failed_repos:
        console.print(
            f"[bold yellow]Warning:[/bold yellow] Failed to analyze "
            f"{len(report.failed_repos)} repo(s): {', '.join(report.failed_repos)}"
        )
        console.print()
    if report.filtered_inactive:
        console.print(
            f"[yellow]Filtered out {report.filtered_inactive} inactive repositories.[/yellow]"
        )
        console.print()

    if not report.analyses:
        console.print("[bold red]No repositories found.[/bold red]")
    else:
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Repository", no_wrap=True)
        table.add_column("Score", justify="right")
        table.add_column("Stars", justify="right")
        table.add_column("Language")
        table.add_column("Last commit", justify="right")
        table.add_column("GFI", justify="right")
        table.add_column("Guide", justify="center")
        for i, a in enumerate(report.analyses, 1):
            table.add_row(
                str(i),
                a.name,
                Text(f"{a.activity_score:.1f}", style=_score_style(a.activity_score)),
                _format_number(a.stars),
                a.language or "-",
                _format_days_ago(a.last_activity_days),
                str(len(a.good_first_issues)),
                "✓" if a.has_contributing else "",
            )
        console.print(table)
        console.print()
        for i, a in enumerate(report.analyses, 1):
            _render_details(console, i, a)

    if string_io is not None and output_file:
        _write_to_file(string_io.getvalue(), output_file)


def best_match(analyses: list[RepositoryAnalysis]) -> RepositoryAnalysis | None:
    """Highest scoring analysis; the earliest wins ties."""
    best: RepositoryAnalysis | None = None
    for a in analyses:
        if best is None or a.activity_score > best.activity_score:
            best = a
    return best


def render_comparison(report: AnalysisReport, output_file: str | None = None) -> None:
    """Side-by-side comparison of several repositories."""
    console, string_io = _make_console(output_file)

    console.print(Panel(Text("repo-finder: compare", justify="center"), style="bold cyan"))
    if report.failed_repos:
        console.print(
            f"[bold yellow]Warning:[/bold yellow] Could not analyze: "
            f"{', '.join(report.failed_repos)}"
        )

    if not report.analyses:
        console.print("[bold red]No repositories could be analyzed.[/bold red]")
    else:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Repository", no_wrap=True)
        table.add_column("Stars", justify="right")
        table.add_column("Forks", justify="right")
        table.add_column("Issues", justify="right")
        table.add_column("GFI", justify="right")
        table.add_column("Merge time", justify="right")
        table.add_column("Response", justify="right")
        table.add_column("Score", justify="right")
        for a in report.analyses:
            merge = a.pr_stats.avg_merge_time if a.pr_stats else None
            response = (
                a.issue_response_stats.avg_response_time if a.issue_response_stats else None
            )
            table.add_row(
                a.name,
                _format_number(a.stars),
                _format_number(a.forks),
                _format_number(a.open_issues),
                str(len(a.good_first_issues)),
                f"{merge:.1f}d" if merge is not None else "-",
                _format_hours(response),
                Text(f"{a.activity_score:.1f}/10", style=_score_style(a.activity_score)),
            )
        console.print(table)

        winner = best_match(report.analyses)
        if winner is not None:
            console.print(
                f"[bold green]Best match:[/bold green] {winner.name} "
                f"(score {winner.activity_score:.1f}/10)"
            )

    if string_io is not None and output_file:
        _write_to_file(string_io.getvalue(), output_file)


def render_json(report: AnalysisReport, output_file: str | None = None) -> None:
    content = json.dumps(
        [analysis_to_dict(a) for a in report.analyses], indent=2, ensure_ascii=False
    )
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)


def render_csv(report: AnalysisReport, output_file: str | None = None) -> None:
    """Render one CSV row per repository."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(_CSV_HEADER)
    for a in report.analyses:
        writer.writerow(
            [
                a.name,
                a.description,
                a.stars,
                a.language or "",
                "" if a.last_activity_days is None else a.last_activity_days,
                _yes_no(a.active),
                a.open_issues,
                a.forks,
                _yes_no(a.has_contributing),
                _yes_no(a.has_code_of_conduct),
                a.license or "",
                len(a.good_first_issues),
                f"{a.activity_score:.1f}",
                "; ".join(a.topics),
                a.url,
            ]
        )
    content = output.getvalue()
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content, end="")


def render_markdown(
    report: AnalysisReport, output_file: str | None = None, today: date | None = None
) -> None:
    today = today or date.today()
    analyses = report.analyses
    lines = [
        "# GitHub Repositories for Contributing",
        "",
        f"Date: {today.isoformat()}",
        "",
        "## Summary",
        "",
        f"- Total repositories: {len(analyses)}",
        f"- Active repositories: {sum(1 for a in analyses if a.active)}",
        f"- With contributing guide: {sum(1 for a in analyses if a.has_contributing)}",
        f"- Total good first issues: {sum(len(a.good_first_issues) for a in analyses)}",
        "",
        "---",
        "",
    ]
    for i, a in enumerate(analyses, 1):
        lines += [
            f"## {i}. [{a.name}]({a.url})",
            "",
            a.description,
            "",
            f"**Activity Score:** {a.activity_score:.1f}/10",
            "",
            "**Metrics:**",
            f"- Stars: {_format_number(a.stars)}",
            f"- Language: {a.language or 'N/A'}",
            "- Last activity: "
            + (f"{a.last_activity_days} days ago" if a.last_activity_days is not None else "N/A"),
            f"- Open issues: {a.open_issues}",
            f"- Forks: {_format_number(a.forks)}",
        ]
        if a.contributors_count:
            lines.append(f"- Contributors: {a.contributors_count}")
        lines.append("- Active" if a.active else "- Inactive")
        lines.append(
            "- Has CONTRIBUTING.md" if a.has_contributing else "- No CONTRIBUTING.md"
        )
        if a.has_code_of_conduct:
            lines.append("- Has CODE_OF_CONDUCT.md")
        if a.license:
            lines.append(f"- License: {a.license}")
        if a.pr_stats is not None and a.pr_stats.avg_merge_time is not None:
            lines.append(f"- Avg PR merge time: {a.pr_stats.avg_merge_time:.1f} days")
        if a.issue_response_stats is not None:
            irs = a.issue_response_stats
            lines.append(
                f"- Issue response: {_format_hours(irs.avg_response_time)} avg, "
                f"{irs.response_rate}% answered"
            )
        lines.append("")
        if a.topics:
            lines += [f"**Topics:** {', '.join(a.topics)}", ""]
        if a.good_first_issues:
            lines += [f"**Good First Issues ({len(a.good_first_issues)}):**", ""]
            lines += [
                f"{n}. [{issue.title}]({issue.url})"
                for n, issue in enumerate(a.good_first_issues, 1)
            ]
            lines.append("")
        lines += ["---", ""]

    content = "\n".join(lines)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)


_HTML_STYLE = """
body { font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; color: #24292e;
       background: #f6f8fa; padding: 20px; line-height: 1.6; }
.container { max-width: 1000px; margin: 0 auto; }
.summary { display: flex; gap: 24px; margin-bottom: 24px; }
.stat-value { font-size: 24px; font-weight: bold; }
.repo-card { background: #fff; border: 1px solid #e1e4e8; border-radius: 6px;
             padding: 16px; margin-bottom: 16px; }
.repo-name { font-size: 20px; font-weight: bold; color: #0366d6; text-decoration: none; }
.badge-active { color: #28a745; }
.badge-inactive { color: #cb2431; }
.score { float: right; font-weight: bold; }
.topic { background: #f1f8ff; color: #0366d6; border-radius: 12px; padding: 2px 8px;
         margin-right: 4px; font-size: 12px; }
"""


def _html_repo_card(index: int, a: RepositoryAnalysis) -> str:
    esc = html.escape
    metrics = [
        f"<li><strong>{_format_number(a.stars)}</strong> stars</li>",
        f"<li>{esc(a.language or 'N/A')}</li>",
    ]
    if a.last_activity_days is not None:
        metrics.append(f"<li><strong>{a.last_activity_days}</strong> days ago</li>")
    metrics.append(f"<li><strong>{a.open_issues}</strong> open issues</li>")
    if a.forks:
        metrics.append(f"<li><strong>{_format_number(a.forks)}</strong> forks</li>")
    if a.contributors_count:
        metrics.append(f"<li><strong>{esc(a.contributors_count)}</strong> contributors</li>")

    features = []
    if a.has_contributing:
        features.append("Contributing Guide")
    if a.has_code_of_conduct:
        features.append("Code of Conduct")
    if a.license:
        features.append(esc(a.license))

    parts = [
        '<div class="repo-card">',
        f'  <span class="score">{a.activity_score:.1f}/10</span>',
        f'  #{index} <a class="repo-name" href="{esc(a.url, quote=True)}">{esc(a.name)}</a>',
        f'  <span class="{"badge-active" if a.active else "badge-inactive"}">'
        f'{"Active" if a.active else "Inactive"}</span>',
        f"  <p>{esc(a.description)}</p>",
        f"  <ul>{''.join(metrics)}</ul>",
    ]
    if features:
        parts.append(f"  <p>{' | '.join(features)}</p>")
    if a.topics:
        topics = "".join(f'<span class="topic">{esc(t)}</span>' for t in a.topics)
        parts.append(f"  <p>{topics}</p>")
    if a.good_first_issues:
        parts.append(f"  <h4>Good First Issues ({len(a.good_first_issues)})</h4>")
        parts.append("  <ol>")
        parts += [
            f'    <li><a href="{esc(issue.url, quote=True)}">{esc(issue.title)}</a></li>'
            for issue in a.good_first_issues
        ]
        parts.append("  </ol>")
    parts.append("</div>")
    return "\n".join(parts)


def render_html(
    report: AnalysisReport, output_file: str | None = None, today: date | None = None
) -> None:
    """Render a standalone HTML page with one card per repository."""
    today = today or date.today()
    analyses = report.analyses
    summary = [
        ("Repositories", len(analyses)),
        ("Active", sum(1 for a in analyses if a.active)),
        ("With Guide", sum(1 for a in analyses if a.has_contributing)),
        ("Good Issues", sum(len(a.good_first_issues) for a in analyses)),
    ]
    stats = "\n".join(
        f'  <div><div class="stat-value">{value}</div><div>{label}</div></div>'
        for label, value in summary
    )
    cards = "\n".join(_html_repo_card(i, a) for i, a in enumerate(analyses, 1))
    content = f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>GitHub Repositories Report</title>
<style>{_HTML_STYLE}</style>
</head>
<body>
<div class="container">
<h1>GitHub Repositories for Contributing</h1>
<p>Date: {today.isoformat()}</p>
<div class="summary">
{stats}
</div>
{cards}
<p>Generated by <strong>repo-finder</strong></p>
</div>
</body>
</html>
"""
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)
