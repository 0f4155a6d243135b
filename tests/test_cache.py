"""Tests for the in-memory response cache and retry wrapper."""

import asyncio

import httpx
import pytest

from market_dashboard.data.cache import ResponseCache
from market_dashboard.data.retry import RetryPolicy, is_retryable, with_retry


def status_error(code: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "https://example.test/")
    response = httpx.Response(code, request=request)
    return httpx.HTTPStatusError(f"HTTP {code}", request=request, response=response)


class TestResponseCache:
    """Test TTL handling."""

    def test_missing_key(self, clock):
        cache = ResponseCache(clock=clock)
        assert cache.get("missing") == (None, False)

    def test_fresh_then_stale(self, clock):
        cache = ResponseCache(clock=clock)
        cache.put(("DGS10", "d"), [1, 2, 3], ttl=60)

        assert cache.get(("DGS10", "d")) == ([1, 2, 3], True)

        clock.advance(61)
        assert cache.get(("DGS10", "d")) == ([1, 2, 3], False)
        assert cache.get_fresh(("DGS10", "d")) is None

    def test_status_and_clear(self, clock):
        cache = ResponseCache(clock=clock)
        cache.put("a", 1, ttl=10)
        clock.advance(5)

        status = cache.get_cache_status()
        assert status["a"]["age_seconds"] == 5.0
        assert status["a"]["fresh"] is True
        assert "a" in cache

        cache.clear()
        assert len(cache) == 0


class TestRetry:
    """Test the backoff wrapper."""

    def test_delays_double(self):
        policy = RetryPolicy(max_attempts=4, base_delay=1.0, backoff_factor=2.0, max_delay=3.0)
        assert [policy.delay_for(n) for n in (1, 2, 3)] == [1.0, 2.0, 3.0]

    def test_is_retryable(self):
        assert is_retryable(httpx.ConnectTimeout("timeout"))
        assert is_retryable(httpx.ConnectError("refused"))
        assert is_retryable(status_error(503))
        assert not is_retryable(status_error(404))
        assert not is_retryable(status_error(429))

    def test_succeeds_after_transient_failures(self, sleep_recorder):
        calls = []

        async def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise httpx.ReadTimeout("slow")
            return "ok"

        result = asyncio.run(with_retry(flaky, RetryPolicy(), sleep=sleep_recorder))

        assert result == "ok"
        assert len(calls) == 3
        assert sleep_recorder.delays == [1.0, 2.0]

    def test_client_error_not_retried(self, sleep_recorder):
        calls = []

        async def not_found():
            calls.append(1)
            raise status_error(404)

        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(with_retry(not_found, RetryPolicy(), sleep=sleep_recorder))

        assert len(calls) == 1
        assert sleep_recorder.delays == []

    def test_exhaustion_reraises(self, sleep_recorder):
        calls = []

        async def down():
            calls.append(1)
            raise status_error(503)

        with pytest.raises(httpx.HTTPStatusError):
            asyncio.run(with_retry(down, RetryPolicy(max_attempts=3), sleep=sleep_recorder))

        assert len(calls) == 3
        assert sleep_recorder.delays == [1.0, 2.0]

    def test_other_errors_propagate(self, sleep_recorder):
        async def broken():
            raise KeyError("chart")

        with pytest.raises(KeyError):
            asyncio.run(with_retry(broken, sleep=sleep_recorder))
        assert sleep_recorder.delays == []
