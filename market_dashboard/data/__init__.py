"""Data fetching and caching."""

from .cache import ResponseCache
from .fred_fetcher import FredFetcher
from .orchestrator import DataFetchOrchestrator
from .retry import RetryPolicy, with_retry
from .yahoo_fetcher import YahooFetcher

__all__ = [
    "DataFetchOrchestrator",
    "FredFetcher",
    "ResponseCache",
    "RetryPolicy",
    "YahooFetcher",
    "with_retry",
]
