"""Configuration settings for the dashboard."""

from dataclasses import dataclass, field
import os

from dotenv import load_dotenv

from market_dashboard.models.market_data import (
    Category,
    ChangeMode,
    ChangeRule,
    Frequency,
    IndicatorSpec,
    ReleaseSchedule,
    ReleaseKind,
    Transform,
)


load_dotenv()


# FRED series definitions - headline economic indicators
FRED_SERIES: dict[str, str] = {
    "coreCPI": "CPILFESL",
    "corePPI": "WPSFD4131",
    "corePCE": "PCEPILFE",
    "gdp": "A191RL1Q225SBEA",
    "tradeDeficit": "BOPGSTB",
    "unemployment": "UNRATE",
    "joblessClaims": "ICSA",
    "retailSales": "MRTSMPCSM44000USS",
    "durableGoods": "DGORDER",
    "newHomeSales": "HSN1F",
    "existingHomeSales": "EXHOSLUSM495S",
    "consumerSentiment": "UMCSENT",
    # Rates
    "fedFunds": "DFEDTARU",
    "treasury2yr": "DGS2",
    "treasury5yr": "DGS5",
    "treasury10yr": "DGS10",
    "treasury30yr": "DGS30",
    "sofr1m": "SOFR30DAYAVG",
    "tbill3m": "DTB3",
    "highYield": "BAMLH0A0HYM2",
}

# H.8 Assets and Liabilities of Commercial Banks (weekly, billions unless noted)
H8_SERIES: dict[str, str] = {
    "totalLoans": "LLBDCBW027NBOG",
    "ciLoans": "CILDCBW027NBOG",
    "consumerLoans": "CLSDCBW027SBOG",
    "creLoans": "CREDCBW027NBOG",
    "otherLoans": "AOLDCBW027NBOG",
    "deposits": "DPSDCBW027NBOG",
    "largeTimeDeposits": "LTDDCBW027NBOG",
    "otherDeposits": "ODSDCBW027NBOG",
    "borrowings": "H8B3094NDMD",  # millions
}

# Yahoo Finance symbols keyed by chart id
MARKET_SYMBOLS: dict[str, str] = {
    "sp500-chart": "SPY",
    "dow-chart": "DIA",
    "nasdaq-chart": "QQQ",
    "russell-chart": "IWM",
    "gold-chart": "GLD",
    "silver-chart": "SLV",
    "oil-chart": "USO",
    "dxy-chart": "UUP",
}

# Spread chart id -> (short leg, long leg)
RATE_SPREADS: dict[str, tuple[str, str]] = {
    "spread-chart": (FRED_SERIES["treasury2yr"], FRED_SERIES["treasury10yr"]),
}


ECONOMIC_INDICATORS: tuple[IndicatorSpec, ...] = (
    IndicatorSpec(
        key="corecpi-chart",
        series_id=FRED_SERIES["coreCPI"],
        name="Core CPI",
        category=Category.ECONOMIC,
        limit=24,
        transform=Transform.YOY,
        change_rule=ChangeRule.RISE_IS_BAD,
    ),
    IndicatorSpec(
        key="coreppi-chart",
        series_id=FRED_SERIES["corePPI"],
        name="Core PPI",
        category=Category.ECONOMIC,
        limit=24,
        transform=Transform.YOY,
        change_rule=ChangeRule.RISE_IS_BAD,
    ),
    IndicatorSpec(
        key="corepce-chart",
        series_id=FRED_SERIES["corePCE"],
        name="Core PCE",
        category=Category.ECONOMIC,
        limit=24,
        transform=Transform.YOY,
        change_rule=ChangeRule.RISE_IS_BAD,
    ),
    # Already QoQ annualized, never transformed
    IndicatorSpec(
        key="gdp-chart",
        series_id=FRED_SERIES["gdp"],
        name="Real GDP",
        category=Category.ECONOMIC,
        frequency=Frequency.QUARTERLY,
        limit=8,
        change_label="QoQ",
        display_points=8,
    ),
    IndicatorSpec(
        key="trade-chart",
        series_id=FRED_SERIES["tradeDeficit"],
        name="Trade Deficit",
        category=Category.ECONOMIC,
        limit=13,
        change_mode=ChangeMode.PERCENT,
        change_rule=ChangeRule.RISE_IS_BAD,
        scale=0.001,
        absolute=True,
    ),
    IndicatorSpec(
        key="unemployment-chart",
        series_id=FRED_SERIES["unemployment"],
        name="Unemployment Rate",
        category=Category.ECONOMIC,
        limit=13,
        change_rule=ChangeRule.RISE_IS_BAD,
    ),
    IndicatorSpec(
        key="jobless-chart",
        series_id=FRED_SERIES["joblessClaims"],
        name="Initial Jobless Claims",
        category=Category.ECONOMIC,
        frequency=Frequency.WEEKLY,
        limit=13,
        change_rule=ChangeRule.RISE_IS_BAD,
        change_label="WoW",
        scale=0.001,
        display_points=13,
    ),
    IndicatorSpec(
        key="retail-chart",
        series_id=FRED_SERIES["retailSales"],
        name="Retail Sales (MoM %)",
        category=Category.ECONOMIC,
        limit=13,
        change_rule=ChangeRule.SIGN_OF_LEVEL,
    ),
    IndicatorSpec(
        key="durablegoods-chart",
        series_id=FRED_SERIES["durableGoods"],
        name="Durable Goods Orders (MoM %)",
        category=Category.ECONOMIC,
        limit=14,
        transform=Transform.MOM,
        change_rule=ChangeRule.SIGN_OF_LEVEL,
    ),
    IndicatorSpec(
        key="newhomes-chart",
        series_id=FRED_SERIES["newHomeSales"],
        name="New Home Sales",
        category=Category.ECONOMIC,
        limit=13,
        change_mode=ChangeMode.PERCENT,
    ),
    IndicatorSpec(
        key="existinghomes-chart",
        series_id=FRED_SERIES["existingHomeSales"],
        name="Existing Home Sales",
        category=Category.ECONOMIC,
        limit=13,
        change_mode=ChangeMode.PERCENT,
        scale=1e-6,
    ),
    IndicatorSpec(
        key="sentiment-chart",
        series_id=FRED_SERIES["consumerSentiment"],
        name="Consumer Sentiment",
        category=Category.ECONOMIC,
        limit=13,
    ),
)


def _rate(key: str, name: str, series_key: str, limit: int = 365) -> IndicatorSpec:
    return IndicatorSpec(
        key=key,
        series_id=FRED_SERIES[series_key],
        name=name,
        category=Category.RATE,
        frequency=Frequency.DAILY,
        limit=limit,
        change_rule=ChangeRule.RISE_IS_BAD,
        change_label="1D",
        display_points=None,
    )


RATE_INDICATORS: tuple[IndicatorSpec, ...] = (
    _rate("2yr-chart", "2-Year Treasury", "treasury2yr", limit=2000),
    _rate("5yr-chart", "5-Year Treasury", "treasury5yr", limit=2000),
    _rate("10yr-chart", "10-Year Treasury", "treasury10yr"),
    _rate("30yr-chart", "30-Year Treasury", "treasury30yr"),
    _rate("sofr-chart", "1-Month SOFR", "sofr1m"),
    _rate("fedfunds-chart", "Fed Funds Upper Target", "fedFunds", limit=2000),
    _rate("tbill-chart", "3-Month T-Bill", "tbill3m"),
    _rate("highyield-chart", "High Yield Index", "highYield"),
    IndicatorSpec(
        key="spread-chart",
        series_id="DGS10-DGS2",
        name="2s10s Spread",
        category=Category.SPREAD,
        frequency=Frequency.DAILY,
        limit=365,
        change_rule=ChangeRule.RISE_IS_GOOD,
        change_label="1D",
        display_points=None,
        components=RATE_SPREADS["spread-chart"],
    ),
)


_H8_NAMES: dict[str, str] = {
    "totalLoans": "Total Loans & Leases",
    "ciLoans": "C&I Loans",
    "consumerLoans": "Consumer Loans",
    "creLoans": "Commercial Real Estate Loans",
    "otherLoans": "All Other Loans",
    "deposits": "Total Deposits",
    "largeTimeDeposits": "Large Time Deposits",
    "otherDeposits": "Other Deposits",
    "borrowings": "Borrowings",
}

BANKING_INDICATORS: tuple[IndicatorSpec, ...] = tuple(
    IndicatorSpec(
        key=f"h8-{key.lower()}-chart",
        series_id=series_id,
        name=_H8_NAMES[key],
        category=Category.BANKING,
        frequency=Frequency.WEEKLY,
        limit=260,
        change_label="WoW",
        scale=0.001 if key == "borrowings" else 1.0,
        display_points=53,
    )
    for key, series_id in H8_SERIES.items()
)

_MARKET_NAMES: dict[str, str] = {
    "SPY": "S&P 500",
    "DIA": "Dow Jones",
    "QQQ": "Nasdaq 100",
    "IWM": "Russell 2000",
    "GLD": "Gold",
    "SLV": "Silver",
    "USO": "Crude Oil",
    "UUP": "US Dollar",
}

MARKET_INDICATORS: tuple[IndicatorSpec, ...] = tuple(
    IndicatorSpec(
        key=key,
        series_id=symbol,
        name=_MARKET_NAMES[symbol],
        category=Category.MARKET,
        frequency=Frequency.DAILY,
        limit=0,
        change_label="Day",
        display_points=None,
    )
    for key, symbol in MARKET_SYMBOLS.items()
)

ALL_INDICATORS: tuple[IndicatorSpec, ...] = (
    ECONOMIC_INDICATORS + RATE_INDICATORS + BANKING_INDICATORS + MARKET_INDICATORS
)


# Release calendar by series id
RELEASE_SCHEDULES: dict[str, ReleaseSchedule] = {
    FRED_SERIES["coreCPI"]: ReleaseSchedule("CPI", ReleaseKind.MONTHLY, day=10),
    FRED_SERIES["corePPI"]: ReleaseSchedule("PPI", ReleaseKind.MONTHLY, day=13),
    FRED_SERIES["corePCE"]: ReleaseSchedule("PCE", ReleaseKind.MONTHLY, day=31),
    FRED_SERIES["gdp"]: ReleaseSchedule("GDP", ReleaseKind.QUARTERLY),
    FRED_SERIES["tradeDeficit"]: ReleaseSchedule("Trade Balance", ReleaseKind.MONTHLY, day=7),
    FRED_SERIES["unemployment"]: ReleaseSchedule("Jobs Report", ReleaseKind.FIRST_FRIDAY),
    FRED_SERIES["joblessClaims"]: ReleaseSchedule("Jobless Claims", ReleaseKind.WEEKLY),
    FRED_SERIES["retailSales"]: ReleaseSchedule("Retail Sales", ReleaseKind.MONTHLY, day=15),
    FRED_SERIES["durableGoods"]: ReleaseSchedule("Durable Goods", ReleaseKind.MONTHLY, day=26),
    FRED_SERIES["newHomeSales"]: ReleaseSchedule("New Home Sales", ReleaseKind.MONTHLY, day=25),
    FRED_SERIES["existingHomeSales"]: ReleaseSchedule(
        "Existing Home Sales", ReleaseKind.MONTHLY, day=20
    ),
    FRED_SERIES["consumerSentiment"]: ReleaseSchedule(
        "Consumer Sentiment", ReleaseKind.MONTHLY, day=10
    ),
    FRED_SERIES["treasury2yr"]: ReleaseSchedule("2-Year Treasury", ReleaseKind.DAILY),
    FRED_SERIES["treasury5yr"]: ReleaseSchedule("5-Year Treasury", ReleaseKind.DAILY),
    FRED_SERIES["treasury10yr"]: ReleaseSchedule("10-Year Treasury", ReleaseKind.DAILY),
    FRED_SERIES["treasury30yr"]: ReleaseSchedule("30-Year Treasury", ReleaseKind.DAILY),
    FRED_SERIES["sofr1m"]: ReleaseSchedule("1-Month SOFR", ReleaseKind.DAILY),
    FRED_SERIES["fedFunds"]: ReleaseSchedule("Fed Funds", ReleaseKind.FOMC),
    FRED_SERIES["tbill3m"]: ReleaseSchedule("3-Month T-Bill", ReleaseKind.WEEKLY),
    FRED_SERIES["highYield"]: ReleaseSchedule("High Yield Index", ReleaseKind.DAILY),
}


@dataclass
class Settings:
    """Application settings."""

    fred_api_key: str = field(default_factory=lambda: os.getenv("FRED_API_KEY", ""))
    fred_base_url: str = field(
        default_factory=lambda: os.getenv(
            "FRED_BASE_URL", "https://api.stlouisfed.org/fred"
        )
    )
    yahoo_base_url: str = field(
        default_factory=lambda: os.getenv(
            "YAHOO_BASE_URL", "https://query1.finance.yahoo.com/v8/finance/chart"
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT", "15"))
    )
    # Seconds between indicators within one cycle
    request_delay: float = field(
        default_factory=lambda: float(os.getenv("REQUEST_DELAY", "0.5"))
    )
    retry_attempts: int = field(
        default_factory=lambda: int(os.getenv("RETRY_ATTEMPTS", "3"))
    )
    retry_base_delay: float = 1.0
    retry_max_delay: float = 8.0
    economic_ttl: float = 3600.0
    quote_ttl: float = 60.0
    history_ttl: float = 300.0
    market_history_range: str = "5y"

    def validate(self) -> None:
        """Validate required settings."""
        if not self.fred_api_key:
            raise ValueError(
                "FRED_API_KEY not set. Get one at: "
                "https://fred.stlouisfed.org/docs/api/api_key.html"
            )
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive, got {self.request_timeout}")
        if self.retry_attempts < 1:
            raise ValueError(f"retry_attempts must be >= 1, got {self.retry_attempts}")
