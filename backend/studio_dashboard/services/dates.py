from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime

import pandas as pd


MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


@dataclass(frozen=True, order=True)
class MonthBucket:
    """A calendar month with a zero-indexed month (0 = January)."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 0 <= self.month <= 11:
            raise ValueError(f"Month must be between 0 and 11, got {self.month}.")

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month}"

    @property
    def ordinal(self) -> int:
        return self.year * 12 + self.month

    @property
    def name(self) -> str:
        return MONTH_NAMES[self.month]

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month + 1)[1]

    def shift(self, months: int) -> MonthBucket:
        index = self.year * 12 + self.month + months
        return MonthBucket(year=index // 12, month=index % 12)

    def label(self, target_year: int) -> str:
        if self.year == target_year:
            return self.name
        if self.year == target_year - 1:
            return f"{self.name}..."
        return f"{self.name} '{str(self.year)[-2:]}"

    @classmethod
    def from_instant(cls, instant: datetime) -> MonthBucket:
        return cls(year=instant.year, month=instant.month - 1)


def parse_date(text: str | None) -> datetime | None:
    """Parse an export timestamp.

    Two shapes show up in the exports: ISO strings such as
    ``2025-09-30T23:18:14.368Z`` and local strings such as
    ``2025-09-30, 6:49 PM``. Offsets are dropped so the written wall-clock
    date decides the month.
    """
    if not text or not str(text).strip():
        return None

    text = str(text).strip()
    if "T" not in text:
        text = text.replace(", ", " ")

    parsed = pd.to_datetime(text, errors="coerce")
    if pd.isna(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_localize(None)
    return parsed


LOCAL_FORMAT = "%Y-%m-%d %I:%M %p"
UTC_OFFSET_PATTERN = r"(?:Z|[+-]\d{2}:?\d{2})$"


def _parse_mixed(text: pd.Series) -> pd.Series:
    try:
        parsed = pd.to_datetime(text, format="mixed", errors="coerce")
    except ValueError:
        # Mixed offsets in one column.
        return pd.to_datetime(text.map(parse_date))
    if isinstance(parsed.dtype, pd.DatetimeTZDtype):
        return parsed.dt.tz_localize(None)
    if parsed.dtype == object:
        return pd.to_datetime(text.map(parse_date))
    return parsed


def parse_date_column(values: pd.Series) -> pd.Series:
    """Parse a whole column of export timestamps at once.

    Agrees with :func:`parse_date` value for value. ISO rows have their offset
    cut from the text before parsing so they keep the written wall-clock time.
    Unusable values become ``NaT``.
    """
    text = values.fillna("").astype(str).str.strip()
    present = text != ""
    iso = present & text.str.contains("T", regex=False)
    local = present & ~iso

    text = text.where(~local, text.str.replace(", ", " ", regex=False))
    text = text.where(~iso, text.str.replace(UTC_OFFSET_PATTERN, "", regex=True))

    parsed = pd.Series(pd.NaT, index=text.index, dtype="datetime64[ns]")
    if iso.any():
        parsed.loc[iso] = pd.to_datetime(text[iso], format="ISO8601", errors="coerce")
    if local.any():
        parsed.loc[local] = pd.to_datetime(text[local], format=LOCAL_FORMAT, errors="coerce")

    pending = present & parsed.isna()
    if pending.any():
        parsed.loc[pending] = _parse_mixed(text[pending])
    return parsed


def month_ordinals(instants: pd.Series) -> pd.Series:
    """``year * 12 + zero-indexed month`` per instant, ``NaN`` where missing."""
    return (instants.dt.year * 12 + instants.dt.month - 1).astype("float64")


def _is_missing(instant: datetime | None) -> bool:
    return instant is None or pd.isna(instant)


def is_in_month(instant: datetime | None, month: int, year: int) -> bool:
    if _is_missing(instant):
        return False
    return instant.year == year and instant.month - 1 == month


def is_in_three_month_window(instant: datetime | None, start_month: int, year: int) -> bool:
    # No wraparound: callers pass a start month and year that keep the window inside one year.
    if _is_missing(instant):
        return False
    month = instant.month - 1
    return instant.year == year and start_month <= month <= start_month + 2


def trailing_window(bucket: MonthBucket) -> list[MonthBucket]:
    return [bucket.shift(-2), bucket.shift(-1), bucket]


def is_in_trailing_window(instant: datetime | None, bucket: MonthBucket) -> bool:
    start = bucket.shift(-2)
    if start.year == bucket.year:
        return is_in_three_month_window(instant, start.month, start.year)
    return any(is_in_month(instant, window.month, window.year) for window in trailing_window(bucket))
