"""Build IndicatorUpdate records, one factory per indicator category."""

import logging

from market_dashboard.indicators import derived, labels
from market_dashboard.indicators.filters import filter_series
from market_dashboard.indicators.returns import (
    calculate_h8_changes,
    calculate_series_returns,
    percent_change,
)
from market_dashboard.models.market_data import (
    ChangeMode,
    ChangeRule,
    ChangeType,
    ChartLabelSet,
    Frequency,
    IndicatorSpec,
    IndicatorUpdate,
    MarketQuote,
    ObservationSeries,
    ReturnUnit,
)


logger = logging.getLogger(__name__)


# Banking charts show one year plus one week of weekly data
H8_CHART_WEEKS = 53
H8_LABEL_MONTHS = 13


class InsufficientDataError(ValueError):
    """Not enough observations to build an indicator."""


def classify_change(change: float, rule: ChangeRule, level: float = 0.0) -> ChangeType:
    """
    Map a change to positive/negative/neutral.

    RISE_IS_BAD flips the sign (inflation, unemployment, yields).
    SIGN_OF_LEVEL looks at the current level instead of the change.
    """
    if rule is ChangeRule.SIGN_OF_LEVEL:
        signal = level
    elif rule is ChangeRule.RISE_IS_BAD:
        signal = -change
    else:
        signal = change

    if signal > 0:
        return ChangeType.POSITIVE
    if signal < 0:
        return ChangeType.NEGATIVE
    return ChangeType.NEUTRAL


def _require(series: ObservationSeries, minimum: int, what: str) -> None:
    if len(series) < minimum:
        raise InsufficientDataError(
            f"{what}: need at least {minimum} observations, got {len(series)}"
        )


def _headline_change(series: ObservationSeries, mode: ChangeMode) -> float:
    """Change between the last two points; a single point compares to itself."""
    current = series.last_value
    previous = series.values[-2] if len(series) >= 2 else current
    if mode is ChangeMode.PERCENT:
        change = percent_change(current, previous)
        return change if change is not None else 0.0
    return current - previous


def _update(
    spec: IndicatorSpec,
    series: ObservationSeries,
    chart: ObservationSeries,
    label_set: ChartLabelSet,
    change: float,
    change_type: ChangeType,
    **kwargs,
) -> IndicatorUpdate:
    return IndicatorUpdate(
        key=spec.key,
        series_id=spec.series_id,
        category=spec.category,
        current=series.last_value,
        change=change,
        change_type=change_type,
        change_label=spec.change_label,
        historical_data=chart.values,
        dates=label_set.labels,
        original_dates=label_set.original_dates,
        observation_date=series.last_date.isoformat(),
        **kwargs,
    )


def build_economic_update(spec: IndicatorSpec, raw: ObservationSeries) -> IndicatorUpdate:
    """
    Economic card/chart: downsample, scale, optional YoY/MoM transform.

    Every point of the short display window gets its own label.
    """
    series = filter_series(raw, spec.frequency)
    if spec.scale != 1.0 or spec.absolute:
        series = series.scaled(spec.scale, absolute=spec.absolute)
    series = derived.apply_transform(series, spec.transform, spec.frequency)
    _require(series, 1, spec.key)

    chart = series.tail(spec.display_points) if spec.display_points else series
    change = _headline_change(chart, spec.change_mode)
    change_type = classify_change(change, spec.change_rule, level=chart.last_value)

    label_set = labels.point_labels(chart.dates, spec.frequency)
    return _update(spec, chart, chart, label_set, change, change_type)


def build_rate_update(spec: IndicatorSpec, raw: ObservationSeries) -> IndicatorUpdate:
    """Daily rate: change and returns in basis points, sparse month labels."""
    series = filter_series(raw, spec.frequency)
    _require(series, 1, spec.key)

    previous = series.values[-2] if len(series) >= 2 else series.last_value
    change = (series.last_value - previous) * 100
    change_type = classify_change(change, spec.change_rule)

    returns = calculate_series_returns(
        series,
        unit=ReturnUnit.BASIS_POINTS,
        skip_weekends=spec.frequency is Frequency.DAILY,
    )
    chart = series.tail(spec.display_points) if spec.display_points else series
    return _update(
        spec,
        series,
        chart,
        labels.generate(chart.dates),
        change,
        change_type,
        returns=returns,
    )


def build_spread_update(
    spec: IndicatorSpec, two_year: ObservationSeries, ten_year: ObservationSeries
) -> IndicatorUpdate:
    """
    2s10s curve spread.

    The current value and chart are in percentage points; the change and
    returns are in basis points.
    """
    spread_bps = derived.spread(two_year, ten_year)
    if spread_bps is None:
        raise InsufficientDataError(f"{spec.key}: fewer than 2 aligned dates")

    series = spread_bps.scaled(0.01)
    change = spread_bps.values[-1] - spread_bps.values[-2]
    change_type = classify_change(change, spec.change_rule)

    returns = calculate_series_returns(
        series, unit=ReturnUnit.BASIS_POINTS, skip_weekends=True
    )
    chart = series.tail(spec.display_points) if spec.display_points else series
    return _update(
        spec,
        series,
        chart,
        labels.generate(chart.dates),
        change,
        change_type,
        returns=returns,
    )


def build_banking_update(spec: IndicatorSpec, raw: ObservationSeries) -> IndicatorUpdate:
    """
    H.8 weekly balance-sheet series.

    Current is in billions, the 53-week chart in trillions with month-end
    label anchors. The headline change is week-over-week percent.
    """
    series = filter_series(raw, spec.frequency)
    if spec.scale != 1.0:
        series = series.scaled(spec.scale)
    _require(series, 1, spec.key)

    h8 = calculate_h8_changes(series)
    change = h8.wow if h8.wow is not None else 0.0
    change_type = classify_change(change, spec.change_rule)
    returns = calculate_series_returns(series, unit=ReturnUnit.PERCENT)

    chart = series.tail(spec.display_points or H8_CHART_WEEKS).scaled(0.001)
    label_set = labels.generate_monthly(chart.dates, chart.values, H8_LABEL_MONTHS)
    return _update(
        spec,
        series,
        chart,
        label_set,
        change,
        change_type,
        returns=returns,
        h8_changes=h8,
    )


def build_market_update(
    spec: IndicatorSpec, quote: MarketQuote, history: ObservationSeries | None
) -> IndicatorUpdate:
    """Market instrument: quote plus daily history for returns and chart."""
    change = quote.change_percent
    change_type = classify_change(change, ChangeRule.RISE_IS_GOOD)

    returns = {}
    chart = ObservationSeries((), (), spec.series_id)
    if history is not None and not history.is_empty:
        returns = calculate_series_returns(
            history, unit=ReturnUnit.PERCENT, skip_weekends=True, include_daily=True
        )
        chart = history.tail(spec.display_points) if spec.display_points else history
    else:
        logger.warning(f"{spec.key}: no price history, returns unavailable")

    label_set = labels.generate(chart.dates)
    extras = {
        "previousClose": quote.previous_close,
        "changeAmount": quote.change,
    }
    if quote.volume is not None:
        extras["volume"] = quote.volume

    return IndicatorUpdate(
        key=spec.key,
        series_id=spec.series_id,
        category=spec.category,
        current=quote.price,
        change=change,
        change_type=change_type,
        change_label=spec.change_label,
        historical_data=chart.values,
        dates=label_set.labels,
        original_dates=label_set.original_dates,
        observation_date=chart.last_date.isoformat() if not chart.is_empty else "",
        returns=returns,
        extras=extras,
    )


def build_error_update(spec: IndicatorSpec, message: str) -> IndicatorUpdate:
    """Placeholder shown as "unavailable" when an indicator could not be built."""
    return IndicatorUpdate(
        key=spec.key,
        series_id=spec.series_id,
        category=spec.category,
        current=0.0,
        change=0.0,
        change_type=ChangeType.NEUTRAL,
        change_label=spec.change_label,
        has_error=True,
        error_message=message,
    )
