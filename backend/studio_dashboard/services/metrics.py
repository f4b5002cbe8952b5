from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import pandas as pd

from studio_dashboard.schemas.dashboard import DashboardMetrics, MetricValue, StudioExports
from studio_dashboard.services.classification import PatternSet, SaleCategory, categorize_sale, classify_by_pattern
from studio_dashboard.services.csv_parser import parse_csv_frame
from studio_dashboard.services.dates import MonthBucket, month_ordinals, parse_date_column


logger = logging.getLogger(__name__)

MEMBERSHIP_DATE_COLUMN = "Bought Date/Time (GMT)"
PURCHASE_DATE_COLUMN = "Purchase date"
JOIN_DATE_COLUMN = "Join date"
FIRST_PURCHASE_COLUMN = "First purchase"
CONVERTED_TO_COLUMN = "Converted to"
PAYMENT_DATE_COLUMN = "Date"
SALE_VALUE_COLUMN = "Sale value"
REFUNDED_COLUMN = "Refunded"
PAYMENT_STATUS_COLUMN = "Payment status"
CATEGORY_COLUMN = "Category"
ITEM_COLUMN = "Item"
CUSTOMER_EMAIL_COLUMN = "Customer Email"

SUCCEEDED_STATUS = "Succeeded"


@dataclass
class ExportFrames:
    membership_sales: pd.DataFrame
    membership_sales_with_renewals: pd.DataFrame
    intro_sales: pd.DataFrame
    leads_customers: pd.DataFrame
    intro_conversions: pd.DataFrame
    payments: pd.DataFrame

    @classmethod
    def from_exports(cls, exports: StudioExports) -> ExportFrames:
        return cls(
            membership_sales=_load(exports.membership_sales, MEMBERSHIP_DATE_COLUMN),
            membership_sales_with_renewals=_load(exports.membership_sales_with_renewals, MEMBERSHIP_DATE_COLUMN),
            intro_sales=_load(exports.intro_sales, PURCHASE_DATE_COLUMN),
            leads_customers=_load(exports.leads_customers, JOIN_DATE_COLUMN),
            intro_conversions=_load(exports.intro_conversions, PURCHASE_DATE_COLUMN),
            payments=_load(exports.payments, PAYMENT_DATE_COLUMN),
        )


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def calculate_percentage_change(current: float, previous: float) -> int:
    if previous == 0:
        return 100 if current > 0 else 0
    return int(round_half_up(((current - previous) / previous) * 100))


def period(month: int, year: int, offset: int = 0) -> MonthBucket:
    return MonthBucket(year=year, month=month).shift(offset)


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    if name in df.columns:
        return df[name].fillna("").astype(str)
    if not df.empty:
        logger.warning("Column %r not found; rows depending on it are excluded.", name)
    return pd.Series([""] * len(df), index=df.index, dtype=str)


def ordinal_column(column: str) -> str:
    return f"__month__{column}"


def _month_ordinals(df: pd.DataFrame, column: str) -> pd.Series:
    cached = ordinal_column(column)
    if cached in df.columns:
        return df[cached]
    return month_ordinals(parse_date_column(_column(df, column)))


def with_month_ordinals(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """Parse ``column`` once and keep its month ordinals on the frame for every later mask."""
    if df.empty:
        return df
    df[ordinal_column(column)] = _month_ordinals(df, column)
    return df


def _load(text: str | None, date_column: str) -> pd.DataFrame:
    return with_month_ordinals(parse_csv_frame(text or ""), date_column)


def month_mask(df: pd.DataFrame, column: str, bucket: MonthBucket) -> pd.Series:
    return _month_ordinals(df, column) == bucket.ordinal


def trailing_window_mask(df: pd.DataFrame, column: str, bucket: MonthBucket) -> pd.Series:
    """Rows dated in ``bucket`` or either of the two months before it, across year ends."""
    return _month_ordinals(df, column).between(bucket.ordinal - 2, bucket.ordinal)


def pattern_mask(df: pd.DataFrame, column: str, pattern_set: PatternSet) -> pd.Series:
    return _column(df, column).map(lambda text: classify_by_pattern(text, pattern_set)).astype(bool)


def _to_numeric(series: pd.Series) -> pd.Series:
    return pd.to_numeric(
        series.astype(str).str.replace(",", "", regex=False).str.replace(r"[^0-9.\-]", "", regex=True),
        errors="coerce",
    ).fillna(0.0)


def _percentage(numerator: int, denominator: int) -> float:
    if denominator <= 0:
        return 0
    return round_half_up(numerator / denominator * 100, 1)


def count_in_month(df: pd.DataFrame, column: str, bucket: MonthBucket) -> int:
    if df.empty:
        return 0
    return int(month_mask(df, column, bucket).sum())


def count_in_trailing_window(df: pd.DataFrame, column: str, bucket: MonthBucket) -> int:
    if df.empty:
        return 0
    return int(trailing_window_mask(df, column, bucket).sum())


def count_new_members(membership_sales: pd.DataFrame, month: int, year: int, offset: int = 0) -> int:
    return count_in_month(membership_sales, MEMBERSHIP_DATE_COLUMN, period(month, year, offset))


def count_intros_sold(intro_sales: pd.DataFrame, month: int, year: int, offset: int = 0) -> int:
    return count_in_month(intro_sales, PURCHASE_DATE_COLUMN, period(month, year, offset))


def average_leads_per_day(leads: pd.DataFrame, month: int, year: int, offset: int = 0) -> float:
    bucket = period(month, year, offset)
    leads_in_month = count_in_month(leads, JOIN_DATE_COLUMN, bucket)
    return round_half_up(leads_in_month / bucket.days_in_month, 1)


def lead_to_intro_conversion(leads: pd.DataFrame, month: int, year: int, offset: int = 0) -> float:
    """Share of leads in the trailing three months whose first purchase was an intro offer."""
    if leads.empty:
        return 0
    window = trailing_window_mask(leads, JOIN_DATE_COLUMN, period(month, year, offset))
    intro_leads = window & pattern_mask(leads, FIRST_PURCHASE_COLUMN, PatternSet.INTRO)
    return _percentage(int(intro_leads.sum()), int(window.sum()))


def _intro_conversion(
    conversions: pd.DataFrame,
    intro_sales: pd.DataFrame,
    pattern_set: PatternSet,
    bucket: MonthBucket,
) -> float:
    # Denominator is every intro sold in the window, not the rows of the conversions report.
    intros_in_window = count_in_trailing_window(intro_sales, PURCHASE_DATE_COLUMN, bucket)
    if conversions.empty or intros_in_window == 0:
        return 0
    window = trailing_window_mask(conversions, PURCHASE_DATE_COLUMN, bucket)
    converted = window & pattern_mask(conversions, CONVERTED_TO_COLUMN, pattern_set)
    return _percentage(int(converted.sum()), intros_in_window)


def intro_to_member_conversion(
    conversions: pd.DataFrame,
    intro_sales: pd.DataFrame,
    month: int,
    year: int,
    offset: int = 0,
) -> float:
    return _intro_conversion(conversions, intro_sales, PatternSet.MEMBERSHIP, period(month, year, offset))


def intro_to_pack_conversion(
    conversions: pd.DataFrame,
    intro_sales: pd.DataFrame,
    month: int,
    year: int,
    offset: int = 0,
) -> float:
    return _intro_conversion(conversions, intro_sales, PatternSet.PACKAGE, period(month, year, offset))


def succeeded_payments(payments: pd.DataFrame, bucket: MonthBucket) -> pd.DataFrame:
    """Succeeded payment rows dated in ``bucket`` with a ``net_value`` and ``sale_category`` column."""
    if payments.empty:
        return pd.DataFrame(columns=["net_value", "sale_category"])

    mask = month_mask(payments, PAYMENT_DATE_COLUMN, bucket) & (
        _column(payments, PAYMENT_STATUS_COLUMN) == SUCCEEDED_STATUS
    )
    rows = payments.loc[mask].copy()
    rows["net_value"] = _to_numeric(_column(rows, SALE_VALUE_COLUMN)) - _to_numeric(_column(rows, REFUNDED_COLUMN))
    categories = _column(rows, CATEGORY_COLUMN)
    items = _column(rows, ITEM_COLUMN)
    rows["sale_category"] = [
        categorize_sale(category, item).value for category, item in zip(categories.tolist(), items.tolist())
    ]
    return rows


def total_sales(payments: pd.DataFrame, month: int, year: int, offset: int = 0) -> int:
    rows = succeeded_payments(payments, period(month, year, offset))
    return int(round_half_up(float(rows["net_value"].sum())))


def count_pack_sales(payments: pd.DataFrame, month: int, year: int, offset: int = 0) -> int:
    rows = succeeded_payments(payments, period(month, year, offset))
    return int((rows["sale_category"] == SaleCategory.PACK.value).sum())


def active_member_emails(with_renewals: pd.DataFrame, bucket: MonthBucket) -> set[str]:
    if with_renewals.empty:
        return set()
    mask = month_mask(with_renewals, MEMBERSHIP_DATE_COLUMN, bucket)
    emails = _column(with_renewals, CUSTOMER_EMAIL_COLUMN).loc[mask].str.strip().str.lower()
    return {email for email in emails.tolist() if email}


def count_membership_cancellations(with_renewals: pd.DataFrame, month: int, year: int, offset: int = 0) -> int:
    """Members active the month before who have no membership purchase this month."""
    bucket = period(month, year, offset)
    previous = active_member_emails(with_renewals, bucket.shift(-1))
    current = active_member_emails(with_renewals, bucket)
    return len(previous - current)


def _metric(compute, *args) -> MetricValue:
    current = compute(*args, offset=0)
    previous = compute(*args, offset=-1)
    return MetricValue(value=current, change=calculate_percentage_change(current, previous))


def build_dashboard_metrics(frames: ExportFrames, month: int, year: int) -> DashboardMetrics:
    return DashboardMetrics(
        new_members=_metric(count_new_members, frames.membership_sales, month, year),
        intros_sold=_metric(count_intros_sold, frames.intro_sales, month, year),
        avg_leads_per_day=_metric(average_leads_per_day, frames.leads_customers, month, year),
        lead_to_intro_conversion=_metric(lead_to_intro_conversion, frames.leads_customers, month, year),
        intro_to_member_conversion=_metric(
            intro_to_member_conversion, frames.intro_conversions, frames.intro_sales, month, year
        ),
        intro_to_pack_conversion=_metric(
            intro_to_pack_conversion, frames.intro_conversions, frames.intro_sales, month, year
        ),
        total_sales=_metric(total_sales, frames.payments, month, year),
        pack_sales=_metric(count_pack_sales, frames.payments, month, year),
        membership_cancellations=_metric(
            count_membership_cancellations, frames.membership_sales_with_renewals, month, year
        ),
    )
