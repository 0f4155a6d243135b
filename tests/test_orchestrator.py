"""Tests for the fetch cycle."""

import asyncio
from dataclasses import replace
from datetime import date, timedelta

import httpx
import pytest

from market_dashboard.config import ECONOMIC_INDICATORS, MARKET_INDICATORS, RATE_INDICATORS
from market_dashboard.data.fred_fetcher import FredFetcher
from market_dashboard.data.orchestrator import DataFetchOrchestrator
from market_dashboard.models.market_data import ChangeType, MarketQuote, ObservationSeries


def spec_for(table, key):
    return next(spec for spec in table if spec.key == key)


def daily_series(series_id, value, count=30, start=date(2025, 1, 1)):
    dates = [start + timedelta(days=i) for i in range(count)]
    return ObservationSeries.from_lists([value] * count, dates, series_id)


class FakeFred:
    """Serves canned series by id; unknown ids return None."""

    def __init__(self, settings, series):
        self.settings = settings
        self.series = series
        self.requests = []

    async def fetch_series(self, series_id, frequency, limit):
        self.requests.append((series_id, frequency, limit))
        return self.series.get(series_id)


class FakeYahoo:
    def __init__(self, quote=None, history=None):
        self.quote = quote
        self.history = history

    async def get_quote(self, symbol):
        return self.quote

    async def get_history(self, symbol, range_=None):
        return self.history


SPECS = (
    spec_for(RATE_INDICATORS, "2yr-chart"),
    spec_for(RATE_INDICATORS, "10yr-chart"),
    spec_for(RATE_INDICATORS, "spread-chart"),
)


class TestRunCycle:
    """Test sequencing, pacing and error isolation."""

    def test_every_key_present(self, settings, sleep_recorder):
        fred = FakeFred(settings, {
            "DGS2": daily_series("DGS2", 4.2),
            "DGS10": daily_series("DGS10", 4.6),
        })
        orchestrator = DataFetchOrchestrator(SPECS, fred, sleep=sleep_recorder)

        updates = asyncio.run(orchestrator.run_cycle())

        assert list(updates) == ["2yr-chart", "10yr-chart", "spread-chart"]
        assert not any(update.has_error for update in updates.values())
        assert updates["spread-chart"].current == pytest.approx(0.4)
        assert ("DGS2", SPECS[2].frequency, SPECS[2].limit) in fred.requests
        assert orchestrator.updates is updates

    def test_failure_isolated(self, settings, sleep_recorder):
        fred = FakeFred(settings, {"DGS10": daily_series("DGS10", 4.6)})
        orchestrator = DataFetchOrchestrator(SPECS, fred, sleep=sleep_recorder)

        updates = asyncio.run(orchestrator.run_cycle())

        assert updates["2yr-chart"].has_error
        assert "DGS2" in updates["2yr-chart"].error_message
        assert not updates["10yr-chart"].has_error
        assert updates["spread-chart"].has_error
        assert updates["spread-chart"].change_type is ChangeType.NEUTRAL

    def test_pacing_between_indicators(self, sleep_recorder):
        from market_dashboard.config import Settings

        paced = Settings(fred_api_key="test-key", request_delay=0.5)
        fred = FakeFred(paced, {})
        orchestrator = DataFetchOrchestrator(SPECS, fred, sleep=sleep_recorder)

        asyncio.run(orchestrator.run_cycle())

        assert sleep_recorder.delays == [0.5, 0.5]

    def test_new_mapping_each_cycle(self, settings, sleep_recorder):
        fred = FakeFred(settings, {"DGS10": daily_series("DGS10", 4.6)})
        orchestrator = DataFetchOrchestrator(SPECS[1:2], fred, sleep=sleep_recorder)

        first = asyncio.run(orchestrator.run_cycle())
        fred.series["DGS10"] = daily_series("DGS10", 4.7)
        second = asyncio.run(orchestrator.run_cycle())

        assert first is not second
        assert first["10yr-chart"].current == pytest.approx(4.6)
        assert second["10yr-chart"].current == pytest.approx(4.7)

    def test_duplicate_keys_rejected(self, settings):
        spec = SPECS[0]
        with pytest.raises(ValueError, match="2yr-chart"):
            DataFetchOrchestrator((spec, replace(spec, series_id="DGS5")), FakeFred(settings, {}))


class TestMarketDispatch:
    def test_market_without_client(self, settings, sleep_recorder):
        spec = spec_for(MARKET_INDICATORS, "sp500-chart")
        orchestrator = DataFetchOrchestrator((spec,), FakeFred(settings, {}), sleep=sleep_recorder)

        updates = asyncio.run(orchestrator.run_cycle())

        assert updates["sp500-chart"].has_error

    def test_market_quote_missing(self, settings, sleep_recorder):
        spec = spec_for(MARKET_INDICATORS, "sp500-chart")
        orchestrator = DataFetchOrchestrator(
            (spec,), FakeFred(settings, {}), FakeYahoo(), sleep=sleep_recorder
        )
        updates = asyncio.run(orchestrator.run_cycle())
        assert "SPY" in updates["sp500-chart"].error_message

    def test_market_update(self, settings, sleep_recorder):
        spec = spec_for(MARKET_INDICATORS, "sp500-chart")
        quote = MarketQuote("SPY", 590.0, 580.0, 10.0, 1.72)
        yahoo = FakeYahoo(quote, daily_series("SPY", 580.0))
        orchestrator = DataFetchOrchestrator((spec,), FakeFred(settings, {}), yahoo, sleep=sleep_recorder)

        update = asyncio.run(orchestrator.run_cycle())["sp500-chart"]

        assert update.current == 590.0
        assert update.change_type is ChangeType.POSITIVE
        assert len(update.historical_data) == 30


class TestEndToEnd:
    """Core CPI through the real FRED client and a mock transport."""

    def test_core_cpi(self, settings, sleep_recorder):
        values = [300.0 + 9.0 * i / 23 for i in range(24)]
        observations = [
            {"date": f"{2023 + i // 12}-{i % 12 + 1:02d}-01", "value": f"{v:.6f}"}
            for i, v in enumerate(values)
        ]

        def handler(request):
            # FRED returns newest first with sort_order=desc
            return httpx.Response(200, json={"observations": observations[::-1]})

        spec = spec_for(ECONOMIC_INDICATORS, "corecpi-chart")

        async def _run():
            client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            fred = FredFetcher(settings, client=client, sleep=sleep_recorder)
            try:
                return await DataFetchOrchestrator((spec,), fred, sleep=sleep_recorder).run_cycle()
            finally:
                await client.aclose()

        record = asyncio.run(_run())["corecpi-chart"].to_dict()

        parsed = [float(f"{v:.6f}") for v in values]
        expected = (parsed[23] - parsed[11]) / parsed[11] * 100
        assert len(record["historicalData"]) == 12
        assert record["current"] == pytest.approx(expected)
        assert record["dates"][-1] == "Dec '24"
        assert record["originalDates"][-1] == "2024-12-01"
        assert record["changeType"] == "positive"
        assert "returns" not in record
        assert "hasError" not in record
