"""FRED API client with TTL caching and retry."""

import asyncio
import logging
from datetime import date
from typing import Awaitable, Callable

import httpx
import numpy as np
import pandas as pd

from market_dashboard.config import Settings
from market_dashboard.data.cache import ResponseCache
from market_dashboard.data.retry import RetryPolicy, send_with_deadline, with_retry
from market_dashboard.models.market_data import (
    MISSING_VALUE_SENTINEL,
    Frequency,
    ObservationSeries,
    parse_calendar_date,
)


logger = logging.getLogger(__name__)


def lookback_start(frequency: Frequency, limit: int, today: date) -> date:
    """
    First observation date to request.

    Covers twice the requested number of periods so holidays and missing
    releases still leave `limit` observations.
    """
    if frequency is Frequency.WEEKLY:
        offset = pd.DateOffset(days=limit * 14)
    elif frequency is Frequency.MONTHLY:
        offset = pd.DateOffset(months=limit * 2)
    elif frequency is Frequency.QUARTERLY:
        offset = pd.DateOffset(months=limit * 6)
    elif frequency is Frequency.ANNUAL:
        offset = pd.DateOffset(years=limit * 2)
    else:
        offset = pd.DateOffset(days=limit * 2)
    return (pd.Timestamp(today) - offset).date()


def parse_observations(payload: dict, series_id: str = "") -> ObservationSeries:
    """
    Convert a FRED observations payload into an ascending series.

    The "." missing-value sentinel and any non-numeric value are dropped.
    """
    observations = payload.get("observations", [])
    if not observations:
        return ObservationSeries((), (), series_id)

    df = pd.DataFrame(observations)
    if "date" not in df.columns or "value" not in df.columns:
        raise ValueError(f"Unexpected FRED payload for {series_id}: columns {list(df.columns)}")

    df = df[df["value"] != MISSING_VALUE_SENTINEL].copy()
    df["value"] = pd.to_numeric(df["value"], errors="coerce")
    df = df[["date", "value"]].dropna()
    df = df[np.isfinite(df["value"].to_numpy(dtype=float))].copy()

    df["date"] = df["date"].map(parse_calendar_date)
    df = df.sort_values("date", kind="stable")

    return ObservationSeries(
        values=tuple(float(v) for v in df["value"]),
        dates=tuple(df["date"]),
        series_id=series_id,
    )


class FredFetcher:
    """Fetches observation series from the FRED API."""

    def __init__(
        self,
        settings: Settings | None = None,
        cache: ResponseCache | None = None,
        client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.settings = settings or Settings()
        self.settings.validate()
        self.cache = cache if cache is not None else ResponseCache()
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=self.settings.retry_attempts,
            base_delay=self.settings.retry_base_delay,
            max_delay=self.settings.retry_max_delay,
        )
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep
        self._today = today

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.request_timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close HTTP client if we created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "FredFetcher":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def _fetch_observations(
        self, series_id: str, frequency: Frequency, limit: int
    ) -> ObservationSeries:
        """Single request against /series/observations."""
        today = self._today()
        params = {
            "series_id": series_id,
            "api_key": self.settings.fred_api_key,
            "file_type": "json",
            "sort_order": "desc",
            "limit": limit,
            "observation_start": lookback_start(frequency, limit, today).isoformat(),
            "observation_end": today.isoformat(),
        }
        request = self.client.build_request(
            "GET", f"{self.settings.fred_base_url}/series/observations", params=params
        )
        response = await send_with_deadline(self.client, request, self.settings.request_timeout)
        response.raise_for_status()
        return parse_observations(response.json(), series_id)

    async def fetch_series(
        self, series_id: str, frequency: Frequency, limit: int
    ) -> ObservationSeries | None:
        """
        Fetch the most recent `limit` observations of a series.

        Args:
            series_id: FRED series ID
            frequency: Native reporting frequency, sizes the lookback window
            limit: Number of observations wanted

        Returns:
            Ascending series, served from cache when a fresh entry covers
            `limit`. When every attempt fails, a stale cached copy if there is
            one, otherwise None. A response that cannot be parsed or holds
            no usable observations counts as a failure.
        """
        key = (series_id, frequency.value)
        cached, fresh = self.cache.get(key)
        if fresh and cached is not None:
            cached_limit, series = cached
            if cached_limit >= limit:
                logger.debug(f"Cache hit for {series_id}")
                return series.tail(limit)

        logger.info(f"Fetching {series_id} ({limit} obs)...")
        try:
            series = await with_retry(
                lambda: self._fetch_observations(series_id, frequency, limit),
                self.retry_policy,
                sleep=self._sleep,
                description=f"FRED {series_id}",
            )
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching {series_id}: {e.response.status_code}")
            return self._stale(series_id, cached, limit)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching {series_id}: {e}")
            return self._stale(series_id, cached, limit)

        if series.is_empty:
            # Keep the last good copy rather than caching an empty response
            logger.warning(f"No usable observations returned for {series_id}")
            return self._stale(series_id, cached, limit)

        series = series.tail(limit)
        logger.info(f"  Got {len(series)} observations for {series_id}")
        self.cache.put(key, (limit, series), self.settings.economic_ttl)
        return series

    def _stale(self, series_id: str, cached, limit: int) -> ObservationSeries | None:
        if cached is None:
            return None
        logger.warning(f"Serving stale cached data for {series_id}")
        _, series = cached
        return series.tail(limit)
