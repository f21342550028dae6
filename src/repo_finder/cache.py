"""File-based caching layer for API responses."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .config import DEFAULT_CACHE_DIR, DEFAULT_CACHE_TTL

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    files: int
    size: int

    @property
    def size_formatted(self) -> str:
        return format_bytes(self.size)


def format_bytes(n: int) -> str:
    size = float(n)
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.2f} {unit}"
        size /= 1024
    return f"{size:.2f} GB"


class FileCache:
    """JSON file cache keyed by request URL and params, with a TTL."""

    def __init__(
        self, cache_dir: Path = DEFAULT_CACHE_DIR, ttl: int = DEFAULT_CACHE_TTL
    ) -> None:
        self._cache_dir = cache_dir
        self._ttl = ttl
        self._cache_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _make_key(url: str, params: dict[str, Any] | None = None) -> str:
        raw = url + json.dumps(params or {}, sort_keys=True)
        return hashlib.sha256(raw.encode()).hexdigest()

    def _path_for(self, key: str) -> Path:
        return self._cache_dir / f"{key}.json"

    def get(self, url: str, params: dict[str, Any] | None = None) -> Any | None:
        path = self._path_for(self._make_key(url, params))
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
        except (json.JSONDecodeError, OSError):
            return None
        if time.time() - data.get("ts", 0) > self._ttl:
            path.unlink(missing_ok=True)
            return None
        logger.debug("Cache hit: %s", url)
        return data.get("value")

    def set(self, url: str, params: dict[str, Any] | None, value: Any) -> None:
        path = self._path_for(self._make_key(url, params))
        payload = {"ts": time.time(), "url": url, "value": value}
        try:
            path.write_text(json.dumps(payload, ensure_ascii=False))
        except OSError as exc:
            logger.warning("Could not write cache entry %s: %s", path, exc)

    def _entries(self) -> list[Path]:
        return sorted(self._cache_dir.glob("*.json"))

    def clear(self) -> int:
        """Delete every cache entry and return how many were removed."""
        removed = 0
        for path in self._entries():
            try:
                path.unlink()
                removed += 1
            except OSError as exc:
                logger.warning("Could not remove %s: %s", path, exc)
        return removed

    def stats(self) -> CacheStats:
        entries = self._entries()
        return CacheStats(files=len(entries), size=sum(p.stat().st_size for p in entries))
