"""Data models for observations, indicator configuration and dashboard updates."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Sequence

import pandas as pd


MISSING_VALUE_SENTINEL = "."


class Frequency(Enum):
    """Reporting frequency of a series (FRED frequency codes)."""

    DAILY = "d"
    WEEKLY = "w"
    MONTHLY = "m"
    QUARTERLY = "q"
    ANNUAL = "a"

    @property
    def yoy_lag(self) -> int:
        """Number of periods between an observation and the one a year earlier."""
        return _YOY_LAGS[self]


_YOY_LAGS = {
    Frequency.DAILY: 252,
    Frequency.WEEKLY: 52,
    Frequency.MONTHLY: 12,
    Frequency.QUARTERLY: 4,
    Frequency.ANNUAL: 1,
}


class Direction(Enum):
    """Which side of a target date an aligned observation may fall on."""

    BEFORE = "before"
    AFTER = "after"


class ReturnUnit(Enum):
    PERCENT = "percent"
    BASIS_POINTS = "basis_points"


class ChangeType(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Category(Enum):
    """Indicator family; selects the update factory."""

    ECONOMIC = "economic"
    RATE = "rate"
    SPREAD = "spread"
    BANKING = "banking"
    MARKET = "market"


class Transform(Enum):
    NONE = "none"
    YOY = "yoy"
    MOM = "mom"


class ChangeMode(Enum):
    """How the headline change is derived from the last two points."""

    DIFFERENCE = "difference"
    PERCENT = "percent"


class ChangeRule(Enum):
    """How a change maps to a positive/negative flag.

    RISE_IS_GOOD: growth, sentiment, home sales.
    RISE_IS_BAD: inflation, unemployment, yields, trade deficit.
    SIGN_OF_LEVEL: series that are already a rate of change (retail sales MoM).
    """

    RISE_IS_GOOD = "rise_is_good"
    RISE_IS_BAD = "rise_is_bad"
    SIGN_OF_LEVEL = "sign_of_level"


class ReleaseKind(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    FOMC = "fomc"
    FIRST_FRIDAY = "first_friday"


@dataclass(frozen=True)
class ReleaseSchedule:
    """Approximate publication calendar for a series."""

    name: str
    kind: ReleaseKind
    day: int | None = None


# Period key -> signed return. A missing key means "insufficient history".
PeriodReturnSet = dict[str, float]


def parse_calendar_date(text: str) -> date:
    """
    Parse a YYYY-MM-DD string into a calendar date.

    The string is split into year/month/day explicitly so no timezone
    conversion can shift the day.
    """
    parts = text.strip().split("-")
    if len(parts) != 3:
        raise ValueError(f"Invalid calendar date: {text!r}")
    year, month, day = (int(p) for p in parts)
    return date(year, month, day)


def as_calendar_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    return parse_calendar_date(value)


@dataclass(frozen=True)
class Observation:
    """Single parsed observation."""

    date: date
    value: float


@dataclass(frozen=True)
class ObservationSeries:
    """
    Ordered observations stored as parallel value/date tuples.

    Every operation that slices or filters returns a new series built from
    the same mask on both tuples.
    """

    values: tuple[float, ...]
    dates: tuple[date, ...]
    series_id: str = ""

    def __post_init__(self) -> None:
        if len(self.values) != len(self.dates):
            raise ValueError(
                f"Parallel arrays out of sync for {self.series_id or 'series'}: "
                f"{len(self.values)} values vs {len(self.dates)} dates"
            )

    @classmethod
    def from_observations(
        cls, observations: Iterable[Observation], series_id: str = ""
    ) -> "ObservationSeries":
        observations = list(observations)
        return cls(
            values=tuple(float(obs.value) for obs in observations),
            dates=tuple(obs.date for obs in observations),
            series_id=series_id,
        )

    @classmethod
    def from_lists(
        cls,
        values: Sequence[float],
        dates: Sequence[date | str],
        series_id: str = "",
    ) -> "ObservationSeries":
        return cls(
            values=tuple(float(v) for v in values),
            dates=tuple(as_calendar_date(d) for d in dates),
            series_id=series_id,
        )

    def __len__(self) -> int:
        return len(self.values)

    @property
    def is_empty(self) -> bool:
        return len(self.values) == 0

    @property
    def last_value(self) -> float:
        return self.values[-1]

    @property
    def last_date(self) -> date:
        return self.dates[-1]

    def observations(self) -> list[Observation]:
        return [Observation(d, v) for d, v in zip(self.dates, self.values)]

    def take(self, indices: Iterable[int]) -> "ObservationSeries":
        """Select the given positions from both arrays."""
        indices = list(indices)
        return ObservationSeries(
            values=tuple(self.values[i] for i in indices),
            dates=tuple(self.dates[i] for i in indices),
            series_id=self.series_id,
        )

    def tail(self, count: int) -> "ObservationSeries":
        if count <= 0:
            return ObservationSeries((), (), self.series_id)
        return ObservationSeries(
            values=self.values[-count:],
            dates=self.dates[-count:],
            series_id=self.series_id,
        )

    def scaled(self, factor: float, absolute: bool = False) -> "ObservationSeries":
        values = (abs(v) * factor if absolute else v * factor for v in self.values)
        return ObservationSeries(tuple(values), self.dates, self.series_id)

    def date_strings(self) -> list[str]:
        return [d.isoformat() for d in self.dates]

    def to_frame(self) -> pd.DataFrame:
        """DataFrame with DatetimeIndex and 'value' column."""
        if self.is_empty:
            return pd.DataFrame(columns=["value"])
        df = pd.DataFrame(
            {"value": list(self.values)},
            index=pd.DatetimeIndex([pd.Timestamp(d) for d in self.dates], name="date"),
        )
        return df


@dataclass(frozen=True)
class MarketQuote:
    """Latest quote for a market symbol."""

    symbol: str
    price: float
    previous_close: float
    change: float
    change_percent: float
    volume: float | None = None
    day_high: float | None = None
    day_low: float | None = None
    fifty_two_week_high: float | None = None
    fifty_two_week_low: float | None = None
    timestamp: int | None = None


@dataclass(frozen=True)
class ChartLabelSet:
    """Sparse x-axis labels with the dense dates they were derived from."""

    labels: tuple[str, ...]
    monthly_label_indices: tuple[int, ...]
    original_dates: tuple[str, ...]
    anchor_values: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        if len(self.labels) != len(self.original_dates):
            raise ValueError(
                f"{len(self.labels)} labels vs {len(self.original_dates)} dates"
            )


@dataclass(frozen=True)
class H8Changes:
    """Banking-specific changes; None means not computable."""

    wow: float | None = None
    qtd: float | None = None
    yoy_qtr: float | None = None

    def to_dict(self) -> dict[str, float]:
        result = {}
        if self.wow is not None:
            result["WoW"] = self.wow
        if self.qtd is not None:
            result["QTD"] = self.qtd
        if self.yoy_qtr is not None:
            result["YoYQtr"] = self.yoy_qtr
        return result


@dataclass(frozen=True)
class IndicatorSpec:
    """One configured dashboard metric."""

    key: str
    series_id: str
    name: str
    category: Category
    frequency: Frequency = Frequency.MONTHLY
    limit: int = 13
    transform: Transform = Transform.NONE
    change_mode: ChangeMode = ChangeMode.DIFFERENCE
    change_rule: ChangeRule = ChangeRule.RISE_IS_GOOD
    change_label: str = "MoM"
    scale: float = 1.0
    absolute: bool = False
    display_points: int | None = 12
    components: tuple[str, ...] = ()


@dataclass(frozen=True)
class IndicatorUpdate:
    """Display-ready record for one chart/card, rebuilt every fetch cycle."""

    key: str
    series_id: str
    category: Category
    current: float
    change: float
    change_type: ChangeType
    change_label: str
    historical_data: tuple[float, ...] = ()
    dates: tuple[str, ...] = ()
    original_dates: tuple[str, ...] = ()
    observation_date: str = ""
    returns: PeriodReturnSet | None = None
    h8_changes: H8Changes | None = None
    has_error: bool = False
    error_message: str | None = None
    extras: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if len(self.historical_data) != len(self.dates):
            raise ValueError(
                f"{self.key}: {len(self.historical_data)} points vs {len(self.dates)} labels"
            )

    def to_dict(self) -> dict:
        """Outbound record in the shape the rendering layer consumes."""
        record = {
            "current": self.current,
            "change": self.change,
            "changeType": self.change_type.value,
            "changeLabel": self.change_label,
            "historicalData": list(self.historical_data),
            "dates": list(self.dates),
            "originalDates": list(self.original_dates),
            "observationDate": self.observation_date,
            "seriesId": self.series_id,
        }
        if self.returns is not None:
            record["returns"] = dict(self.returns)
        if self.h8_changes is not None:
            record["h8Changes"] = self.h8_changes.to_dict()
        if self.extras:
            record.update(self.extras)
        if self.has_error:
            record["hasError"] = True
            record["errorMessage"] = self.error_message
        return record
