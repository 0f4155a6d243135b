"""Configuration package."""

from market_dashboard.config.settings import (
    ALL_INDICATORS,
    BANKING_INDICATORS,
    ECONOMIC_INDICATORS,
    FRED_SERIES,
    H8_SERIES,
    MARKET_INDICATORS,
    MARKET_SYMBOLS,
    RATE_INDICATORS,
    RATE_SPREADS,
    RELEASE_SCHEDULES,
    Settings,
)

__all__ = [
    "ALL_INDICATORS",
    "BANKING_INDICATORS",
    "ECONOMIC_INDICATORS",
    "FRED_SERIES",
    "H8_SERIES",
    "MARKET_INDICATORS",
    "MARKET_SYMBOLS",
    "RATE_INDICATORS",
    "RATE_SPREADS",
    "RELEASE_SCHEDULES",
    "Settings",
]
