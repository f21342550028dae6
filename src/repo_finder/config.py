"""Default settings and choice lists."""

from __future__ import annotations

from pathlib import Path

LANGUAGES = [
    "TypeScript",
    "JavaScript",
    "Python",
    "Go",
    "Rust",
    "Java",
]

# Display name -> GitHub license key
LICENSES: dict[str, str] = {
    "MIT": "mit",
    "Apache 2.0": "apache-2.0",
    "GPL 3.0": "gpl-3.0",
    "BSD 3-Clause": "bsd-3-clause",
    "ISC": "isc",
    "Mozilla Public License 2.0": "mpl-2.0",
}

DEFAULT_LANGUAGE = "TypeScript"
DEFAULT_MIN_STARS = 100
DEFAULT_MAX_RESULTS = 5

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "repo-finder"
DEFAULT_CACHE_TTL = 3600  # 1 hour

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 1.0  # seconds, doubled per attempt

# Sample sizes for advanced analytics
PR_SAMPLE_SIZE = 10
ISSUE_SAMPLE_SIZE = 20
GOOD_FIRST_ISSUE_LIMIT = 5
