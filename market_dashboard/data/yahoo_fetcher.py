"""Yahoo Finance chart API client for market quotes and daily history."""

import asyncio
import logging
from typing import Awaitable, Callable

import httpx
import numpy as np
import pandas as pd

from market_dashboard.config import Settings
from market_dashboard.data.cache import ResponseCache
from market_dashboard.data.retry import RetryPolicy, send_with_deadline, with_retry
from market_dashboard.models.market_data import MarketQuote, ObservationSeries


logger = logging.getLogger(__name__)


DEFAULT_TIMEZONE = "America/New_York"
HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; market-dashboard)"}


def _chart_result(payload: dict, symbol: str) -> dict:
    chart = payload.get("chart") or {}
    results = chart.get("result") or []
    if not results or not results[0]:
        error = chart.get("error") or {}
        raise ValueError(
            f"Invalid chart response for {symbol}: {error.get('description', 'no result')}"
        )
    return results[0]


def _optional(meta: dict, key: str) -> float | None:
    value = meta.get(key)
    return float(value) if value is not None else None


def parse_quote(payload: dict, symbol: str) -> MarketQuote:
    """Latest price and day change from the chart `meta` block."""
    meta = _chart_result(payload, symbol).get("meta") or {}

    price = meta.get("regularMarketPrice")
    previous = meta.get("previousClose") or meta.get("chartPreviousClose")
    if price is None or not previous:
        raise ValueError(f"No price for {symbol}")

    price = float(price)
    previous = float(previous)
    change = price - previous

    return MarketQuote(
        symbol=symbol,
        price=price,
        previous_close=previous,
        change=change,
        change_percent=(change / previous) * 100,
        volume=_optional(meta, "regularMarketVolume"),
        day_high=_optional(meta, "regularMarketDayHigh"),
        day_low=_optional(meta, "regularMarketDayLow"),
        fifty_two_week_high=_optional(meta, "fiftyTwoWeekHigh"),
        fifty_two_week_low=_optional(meta, "fiftyTwoWeekLow"),
        timestamp=meta.get("regularMarketTime"),
    )


def parse_history(payload: dict, symbol: str) -> ObservationSeries:
    """
    Daily closes as an ascending series.

    Null closes are dropped. Timestamps are converted to calendar dates in
    the exchange's own timezone.
    """
    result = _chart_result(payload, symbol)
    timestamps = result.get("timestamp") or []
    quotes = (result.get("indicators") or {}).get("quote") or [{}]
    closes = quotes[0].get("close") or []

    if not timestamps or not closes:
        raise ValueError(f"No price data available for {symbol}")

    timezone = (result.get("meta") or {}).get("exchangeTimezoneName") or DEFAULT_TIMEZONE

    df = pd.DataFrame({
        "timestamp": timestamps[: len(closes)],
        "close": pd.to_numeric(pd.Series(closes[: len(timestamps)]), errors="coerce"),
    })
    df = df.dropna()
    df = df[np.isfinite(df["close"].to_numpy(dtype=float))].copy()

    local = pd.to_datetime(df["timestamp"], unit="s", utc=True).dt.tz_convert(timezone)
    df["date"] = local.dt.date
    # Intraday bars on the last session collapse to one close per day
    df = df.sort_values("timestamp").drop_duplicates("date", keep="last")

    return ObservationSeries(
        values=tuple(float(v) for v in df["close"]),
        dates=tuple(df["date"]),
        series_id=symbol,
    )


class YahooFetcher:
    """Fetches quotes and price history from the Yahoo Finance chart endpoint."""

    def __init__(
        self,
        settings: Settings | None = None,
        cache: ResponseCache | None = None,
        client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.settings = settings or Settings()
        self.cache = cache if cache is not None else ResponseCache()
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=self.settings.retry_attempts,
            base_delay=self.settings.retry_base_delay,
            max_delay=self.settings.retry_max_delay,
        )
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.settings.request_timeout, headers=HEADERS
            )
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "YahooFetcher":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def _fetch_chart(self, symbol: str, range_: str, interval: str) -> dict:
        request = self.client.build_request(
            "GET",
            f"{self.settings.yahoo_base_url}/{symbol}",
            params={"range": range_, "interval": interval},
        )
        response = await send_with_deadline(self.client, request, self.settings.request_timeout)
        response.raise_for_status()
        return response.json()

    async def _cached_fetch(self, key: tuple, ttl: float, symbol: str, fetch, parse):
        """Fresh cache, else live fetch with retry, else stale cache, else None."""
        cached, fresh = self.cache.get(key)
        if fresh and cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        try:
            payload = await with_retry(
                fetch, self.retry_policy, sleep=self._sleep, description=f"Yahoo {symbol}"
            )
            value = parse(payload, symbol)
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching {symbol}: {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching {symbol}: {e}")
        else:
            self.cache.put(key, value, ttl)
            return value

        if cached is not None:
            logger.warning(f"Serving stale cached data for {key}")
        return cached

    async def get_quote(self, symbol: str) -> MarketQuote | None:
        """Latest quote, or None when unavailable."""
        logger.info(f"Fetching quote for {symbol}...")
        return await self._cached_fetch(
            ("quote", symbol),
            self.settings.quote_ttl,
            symbol,
            lambda: self._fetch_chart(symbol, "1d", "1d"),
            parse_quote,
        )

    async def get_history(self, symbol: str, range_: str | None = None) -> ObservationSeries | None:
        """Daily closes over `range_` (default from settings), or None."""
        range_ = range_ or self.settings.market_history_range
        logger.info(f"Fetching {range_} history for {symbol}...")
        return await self._cached_fetch(
            ("history", symbol, range_),
            self.settings.history_ttl,
            symbol,
            lambda: self._fetch_chart(symbol, range_, "1d"),
            parse_history,
        )
