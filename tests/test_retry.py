"""Tests for retry with backoff and rate limit handling."""

from __future__ import annotations

import time
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from repo_finder.github.rate_limit import RateLimitMonitor
from repo_finder.github.retry import backoff_delay, is_retryable, with_retry


def _status_error(status: int) -> httpx.HTTPStatusError:
    response = MagicMock(spec=httpx.Response)
    response.status_code = status
    return httpx.HTTPStatusError("error", request=MagicMock(), response=response)


def test_is_retryable():
    assert is_retryable(_status_error(500)) is True
    assert is_retryable(_status_error(403)) is True
    assert is_retryable(_status_error(401)) is False
    assert is_retryable(_status_error(404)) is False
    assert is_retryable(_status_error(422)) is False
    assert is_retryable(httpx.ConnectError("boom")) is True
    assert is_retryable(ValueError("boom")) is False


def test_backoff_delay_doubles_with_bounded_jitter():
    for attempt, base in [(1, 1.0), (2, 2.0), (3, 4.0)]:
        delay = backoff_delay(attempt, 1.0)
        assert base <= delay <= base * 1.3


@pytest.mark.asyncio
async def test_with_retry_returns_first_success():
    call = AsyncMock(return_value="ok")
    assert await with_retry(call, attempts=3, initial_delay=0) == "ok"
    assert call.await_count == 1


@pytest.mark.asyncio
async def test_with_retry_recovers_after_transient_errors():
    call = AsyncMock(side_effect=[httpx.ConnectError("down"), _status_error(503), "ok"])
    with patch("repo_finder.github.retry.asyncio.sleep", new=AsyncMock()) as sleep:
        assert await with_retry(call, attempts=3, initial_delay=0.01) == "ok"
    assert call.await_count == 3
    assert sleep.await_count == 2


@pytest.mark.asyncio
async def test_with_retry_gives_up_after_attempts():
    call = AsyncMock(side_effect=_status_error(500))
    with patch("repo_finder.github.retry.asyncio.sleep", new=AsyncMock()):
        with pytest.raises(httpx.HTTPStatusError):
            await with_retry(call, attempts=3, initial_delay=0)
    assert call.await_count == 3


@pytest.mark.asyncio
async def test_with_retry_non_retryable_raises_immediately():
    call = AsyncMock(side_effect=_status_error(401))
    with pytest.raises(httpx.HTTPStatusError):
        await with_retry(call, attempts=5, initial_delay=0)
    assert call.await_count == 1


@pytest.mark.asyncio
async def test_with_retry_other_exceptions_propagate():
    call = AsyncMock(side_effect=KeyError("bad payload"))
    with pytest.raises(KeyError):
        await with_retry(call, attempts=3, initial_delay=0)
    assert call.await_count == 1


def _response_with_headers(headers: dict) -> MagicMock:
    resp = MagicMock(spec=httpx.Response)
    resp.headers = headers
    return resp


def test_rate_limit_update():
    monitor = RateLimitMonitor()
    monitor.update(
        _response_with_headers({"X-RateLimit-Remaining": "42", "X-RateLimit-Reset": "1700000000"})
    )
    assert monitor.remaining == 42


@pytest.mark.asyncio
async def test_rate_limit_no_wait_with_headroom():
    monitor = RateLimitMonitor(threshold=5)
    monitor.update(
        _response_with_headers(
            {"X-RateLimit-Remaining": "100", "X-RateLimit-Reset": str(time.time() + 60)}
        )
    )
    with patch("repo_finder.github.rate_limit.asyncio.sleep", new=AsyncMock()) as sleep:
        await monitor.wait_if_needed()
    sleep.assert_not_awaited()


@pytest.mark.asyncio
async def test_rate_limit_waits_when_exhausted():
    monitor = RateLimitMonitor(threshold=5)
    monitor.update(
        _response_with_headers(
            {"X-RateLimit-Remaining": "1", "X-RateLimit-Reset": str(time.time() + 30)}
        )
    )
    with patch("repo_finder.github.rate_limit.asyncio.sleep", new=AsyncMock()) as sleep:
        await monitor.wait_if_needed()
    sleep.assert_awaited_once()
    waited = sleep.await_args.args[0]
    assert 0 < waited <= 32
