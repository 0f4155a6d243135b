"""Fetch cycle: fetch every configured indicator and build its update."""

import asyncio
import logging
from typing import Awaitable, Callable, Sequence

from market_dashboard.config import Settings
from market_dashboard.data.fred_fetcher import FredFetcher
from market_dashboard.data.yahoo_fetcher import YahooFetcher
from market_dashboard.indicators import builders
from market_dashboard.models.market_data import (
    Category,
    Frequency,
    IndicatorSpec,
    IndicatorUpdate,
)


logger = logging.getLogger(__name__)


class DataFetchOrchestrator:
    """
    Runs one fetch-and-normalize pass over an indicator table.

    Indicators are processed sequentially with a fixed pause between them.
    A failing indicator produces an error-flagged update; the cycle always
    returns an update for every configured key.
    """

    def __init__(
        self,
        indicators: Sequence[IndicatorSpec],
        fred: FredFetcher,
        yahoo: YahooFetcher | None = None,
        settings: Settings | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        keys = [spec.key for spec in indicators]
        duplicates = {key for key in keys if keys.count(key) > 1}
        if duplicates:
            raise ValueError(f"Duplicate indicator keys: {sorted(duplicates)}")

        self.indicators = tuple(indicators)
        self.fred = fred
        self.yahoo = yahoo
        self.settings = settings or fred.settings
        self._sleep = sleep
        self.updates: dict[str, IndicatorUpdate] = {}

    async def run_cycle(self) -> dict[str, IndicatorUpdate]:
        """
        Fetch and normalize every indicator once.

        Returns:
            Mapping of chart key to update. It replaces the previous cycle's
            mapping wholesale.
        """
        logger.info(f"Starting fetch cycle for {len(self.indicators)} indicators")
        updates: dict[str, IndicatorUpdate] = {}
        errors = []

        for position, spec in enumerate(self.indicators):
            if position > 0 and self.settings.request_delay > 0:
                await self._sleep(self.settings.request_delay)

            try:
                updates[spec.key] = await self.build_update(spec)
            except Exception as e:
                logger.error(f"Error building {spec.key} ({spec.series_id}): {e}")
                errors.append(spec.key)
                updates[spec.key] = builders.build_error_update(spec, str(e))

        if errors:
            logger.warning(f"Failed to build {len(errors)} indicators: {errors}")
        logger.info(f"Fetch cycle complete: {len(updates) - len(errors)}/{len(updates)} ok")

        self.updates = updates
        return updates

    async def build_update(self, spec: IndicatorSpec) -> IndicatorUpdate:
        """Fetch the data for one spec and dispatch to its category factory."""
        if spec.category is Category.MARKET:
            return await self._build_market(spec)

        if spec.category is Category.SPREAD:
            short_id, long_id = spec.components
            two_year = await self._require_series(short_id, spec.frequency, spec.limit)
            ten_year = await self._require_series(long_id, spec.frequency, spec.limit)
            return builders.build_spread_update(spec, two_year, ten_year)

        raw = await self._require_series(spec.series_id, spec.frequency, spec.limit)
        if spec.category is Category.RATE:
            return builders.build_rate_update(spec, raw)
        if spec.category is Category.BANKING:
            return builders.build_banking_update(spec, raw)
        return builders.build_economic_update(spec, raw)

    async def _require_series(self, series_id: str, frequency: Frequency, limit: int):
        series = await self.fred.fetch_series(series_id, frequency, limit)
        if series is None:
            raise builders.InsufficientDataError(f"No data returned for {series_id}")
        return series

    async def _build_market(self, spec: IndicatorSpec) -> IndicatorUpdate:
        if self.yahoo is None:
            raise RuntimeError(f"No market data client configured for {spec.key}")
        quote = await self.yahoo.get_quote(spec.series_id)
        if quote is None:
            raise builders.InsufficientDataError(f"No quote returned for {spec.series_id}")
        history = await self.yahoo.get_history(spec.series_id)
        return builders.build_market_update(spec, quote, history)


async def run_once(
    indicators: Sequence[IndicatorSpec], settings: Settings | None = None
) -> dict[str, IndicatorUpdate]:
    """Open both clients, run a single cycle and close them."""
    settings = settings or Settings()
    async with FredFetcher(settings) as fred, YahooFetcher(settings, cache=fred.cache) as yahoo:
        orchestrator = DataFetchOrchestrator(indicators, fred, yahoo, settings)
        return await orchestrator.run_cycle()
