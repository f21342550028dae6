"""Tests for the cache module."""

from __future__ import annotations

import json
import time

from repo_finder.cache import FileCache, format_bytes


def test_cache_get_set(tmp_path):
    cache = FileCache(cache_dir=tmp_path, ttl=3600)
    cache.set("/search/repositories", {"q": "cli"}, {"items": [1, 2, 3]})
    assert cache.get("/search/repositories", {"q": "cli"}) == {"items": [1, 2, 3]}


def test_cache_miss(tmp_path):
    cache = FileCache(cache_dir=tmp_path, ttl=3600)
    assert cache.get("/nonexistent", None) is None


def test_cache_ttl_expired(tmp_path):
    cache = FileCache(cache_dir=tmp_path, ttl=1)
    cache.set("/repos/o/r", None, {"data": True})

    # Manually backdate the timestamp
    key = FileCache._make_key("/repos/o/r", None)
    path = tmp_path / f"{key}.json"
    data = json.loads(path.read_text())
    data["ts"] = time.time() - 10
    path.write_text(json.dumps(data))

    assert cache.get("/repos/o/r", None) is None
    assert not path.exists()


def test_cache_param_order_does_not_matter(tmp_path):
    cache = FileCache(cache_dir=tmp_path, ttl=3600)
    cache.set("/url", {"a": "1", "b": "2"}, "value")
    assert cache.get("/url", {"b": "2", "a": "1"}) == "value"


def test_cache_different_params(tmp_path):
    cache = FileCache(cache_dir=tmp_path, ttl=3600)
    cache.set("/url", {"a": "1"}, "first")
    cache.set("/url", {"a": "2"}, "second")
    assert cache.get("/url", {"a": "1"}) == "first"
    assert cache.get("/url", {"a": "2"}) == "second"


def test_cache_corrupt_entry_is_a_miss(tmp_path):
    cache = FileCache(cache_dir=tmp_path, ttl=3600)
    key = FileCache._make_key("/url", None)
    (tmp_path / f"{key}.json").write_text("{not json")
    assert cache.get("/url", None) is None


def test_cache_stats_and_clear(tmp_path):
    cache = FileCache(cache_dir=tmp_path, ttl=3600)
    assert cache.stats().files == 0

    cache.set("/a", None, [1])
    cache.set("/b", None, [2])
    stats = cache.stats()
    assert stats.files == 2
    assert stats.size > 0

    assert cache.clear() == 2
    assert cache.stats().files == 0
    assert cache.get("/a", None) is None


def test_format_bytes():
    assert format_bytes(0) == "0 B"
    assert format_bytes(512) == "512 B"
    assert format_bytes(2048) == "2.00 KB"
    assert format_bytes(3 * 1024 * 1024) == "3.00 MB"
