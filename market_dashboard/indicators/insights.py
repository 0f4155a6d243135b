"""
Plain-language summaries derived from the latest indicator updates.

Economic summary readings:
- inflation: Core CPI/PCE against the Fed's 2% target
- labor market: unemployment rate and initial claims
- Fed stance: derived from both plus GDP
"""

import logging
from typing import Mapping

from market_dashboard.models.market_data import IndicatorUpdate


logger = logging.getLogger(__name__)


INFLATION_TARGET = 2.0
# Relative move between readings that counts as a trend
TREND_THRESHOLD = 0.02

CORE_CPI_KEY = "corecpi-chart"
CORE_PCE_KEY = "corepce-chart"
UNEMPLOYMENT_KEY = "unemployment-chart"
JOBLESS_CLAIMS_KEY = "jobless-chart"
GDP_KEY = "gdp-chart"
TWO_YEAR_KEY = "2yr-chart"
TEN_YEAR_KEY = "10yr-chart"


def _usable(updates: Mapping[str, IndicatorUpdate], key: str) -> IndicatorUpdate | None:
    update = updates.get(key)
    if update is None or update.has_error:
        return None
    return update


def trend(recent: float, previous: float) -> str:
    """'rising', 'declining' or 'stable' using a 2% relative band."""
    if recent > previous * (1 + TREND_THRESHOLD):
        return "rising"
    if recent < previous * (1 - TREND_THRESHOLD):
        return "declining"
    return "stable"


def analyze_inflation(average: float, previous_average: float) -> str:
    direction = trend(average, previous_average)
    if average > INFLATION_TARGET + 1:
        if direction == "declining":
            return "Inflation cooling but remains well above Fed's 2% target"
        return "Inflation remains stubbornly elevated above target"
    if average > INFLATION_TARGET:
        if direction == "declining":
            return "Inflation moderating toward Fed's target"
        return "Inflation remains sticky above target"
    return "Inflation approaching Fed's 2% target"


def analyze_labor_market(unemployment: float, claims_thousands: float | None) -> str:
    """
    Labor clause of the summary.

    Claims are in thousands, as carried by the jobless claims update. Missing
    claims only rule out the claims-based branches.
    """
    claims_low = claims_thousands is not None and claims_thousands < 250
    claims_moderate = claims_thousands is not None and claims_thousands < 300

    if unemployment < 4.0 and claims_low:
        return "while labor market remains robust"
    if unemployment < 4.5 and claims_moderate:
        return "with labor market showing resilience"
    if unemployment > 4.5:
        return "as labor market shows signs of softening"
    return "while job market stays balanced"


def analyze_fed_policy(inflation: float, unemployment: float, gdp: float | None) -> str:
    if inflation > 3 and unemployment < 4:
        return "Fed likely to keep rates higher for longer"
    if inflation > 2.5:
        return "Fed expected to proceed cautiously with gradual rate adjustments"
    if unemployment > 4.5 or (gdp is not None and gdp < 1):
        return "Fed may pivot to more accommodative stance if growth slows"
    return "Fed poised for measured approach to policy normalization"


def generate_economic_summary(updates: Mapping[str, IndicatorUpdate]) -> str | None:
    """
    One-sentence economic summary, or None when Core CPI, Core PCE or the
    unemployment rate is unavailable.

    The inflation trend compares the current CPI/PCE average with the
    average one release earlier (current minus each update's change).
    """
    cpi = _usable(updates, CORE_CPI_KEY)
    pce = _usable(updates, CORE_PCE_KEY)
    unemployment = _usable(updates, UNEMPLOYMENT_KEY)
    if cpi is None or pce is None or unemployment is None:
        logger.info("Economic summary skipped: core inflation or unemployment unavailable")
        return None

    claims = _usable(updates, JOBLESS_CLAIMS_KEY)
    gdp = _usable(updates, GDP_KEY)

    average = (cpi.current + pce.current) / 2
    previous_average = ((cpi.current - cpi.change) + (pce.current - pce.change)) / 2

    inflation = analyze_inflation(average, previous_average)
    labor = analyze_labor_market(
        unemployment.current, claims.current if claims is not None else None
    )
    fed = analyze_fed_policy(
        average, unemployment.current, gdp.current if gdp is not None else None
    )
    return f"{inflation} {labor}. {fed}."


def generate_rates_summary(updates: Mapping[str, IndicatorUpdate]) -> str | None:
    """Curve shape and 2-year direction, or None without both Treasury legs."""
    two_year = _usable(updates, TWO_YEAR_KEY)
    ten_year = _usable(updates, TEN_YEAR_KEY)
    if two_year is None or ten_year is None:
        return None

    spread = ten_year.current - two_year.current
    curve = "Yield curve normalizing" if spread > 0 else "Yield curve remains inverted"

    # 2-year change is in basis points
    if two_year.change > 0:
        direction = "rates drift higher"
    elif two_year.change < 0:
        direction = "yields decline"
    else:
        direction = "rates hold steady"

    if spread < 0:
        implication = "signaling ongoing recession concerns"
    else:
        implication = "reflecting improved growth outlook"
    return f"{curve} as {direction}, {implication}."
