from __future__ import annotations

import logging

import pandas as pd

from studio_dashboard.schemas.dashboard import (
    ChartData,
    CumulativeMembersPoint,
    LeadsIntroSalesPoint,
    NewMembersPoint,
    TotalSalesPoint,
)
from studio_dashboard.services.classification import SaleCategory
from studio_dashboard.services.dates import MonthBucket
from studio_dashboard.services.metrics import (
    JOIN_DATE_COLUMN,
    MEMBERSHIP_DATE_COLUMN,
    PURCHASE_DATE_COLUMN,
    ExportFrames,
    count_in_month,
    round_half_up,
    succeeded_payments,
)
from studio_dashboard.services.targets import KpiName, TargetMetric, get_target, resolve_target


logger = logging.getLogger(__name__)

CHART_MONTHS = 13


def chart_buckets(month: int, year: int) -> list[MonthBucket]:
    target = MonthBucket(year=year, month=month)
    return [target.shift(offset) for offset in range(-(CHART_MONTHS - 1), 1)]


def format_month_label(bucket: MonthBucket, target_year: int) -> str:
    return bucket.label(target_year)


def generate_leads_intro_sales_chart_data(
    intro_sales: pd.DataFrame,
    leads: pd.DataFrame,
    month: int,
    year: int,
) -> list[LeadsIntroSalesPoint]:
    points = []
    for bucket in chart_buckets(month, year):
        points.append(
            LeadsIntroSalesPoint(
                month=format_month_label(bucket, year),
                intro_sales=count_in_month(intro_sales, PURCHASE_DATE_COLUMN, bucket),
                new_leads=count_in_month(leads, JOIN_DATE_COLUMN, bucket),
                target_intro_sales=get_target(TargetMetric.INTROS_SOLD, bucket.year, bucket.month),
                target_new_leads=get_target(TargetMetric.NEW_LEADS_PER_MONTH, bucket.year, bucket.month),
            )
        )
    return points


def generate_new_members_chart_data(membership_sales: pd.DataFrame, month: int, year: int) -> list[NewMembersPoint]:
    return [
        NewMembersPoint(
            month=format_month_label(bucket, year),
            new_members=count_in_month(membership_sales, MEMBERSHIP_DATE_COLUMN, bucket),
            target=resolve_target(KpiName.NEW_MEMBERS, bucket.year, bucket.month),
        )
        for bucket in chart_buckets(month, year)
    ]


def generate_cumulative_members_chart_data(
    with_renewals: pd.DataFrame,
    no_renewals: pd.DataFrame,
    month: int,
    year: int,
) -> list[CumulativeMembersPoint]:
    points = []
    for bucket in chart_buckets(month, year):
        total_members = count_in_month(with_renewals, MEMBERSHIP_DATE_COLUMN, bucket)
        new_members = count_in_month(no_renewals, MEMBERSHIP_DATE_COLUMN, bucket)
        retained_members = total_members - new_members
        if retained_members < 0:
            # Not clamped. With-renewals counts must cover every new sale of the month.
            logger.warning(
                "Retained members negative for %s (%d total, %d new); exports look inconsistent.",
                bucket.key,
                total_members,
                new_members,
            )
        points.append(
            CumulativeMembersPoint(
                month=format_month_label(bucket, year),
                retained_members=retained_members,
                new_members=new_members,
                total_members=total_members,
                target_total_members=get_target(TargetMetric.TOTAL_MEMBERSHIPS, bucket.year, bucket.month),
            )
        )
    return points


def generate_total_sales_chart_data(payments: pd.DataFrame, month: int, year: int) -> list[TotalSalesPoint]:
    points = []
    for bucket in chart_buckets(month, year):
        rows = succeeded_payments(payments, bucket)
        totals = rows.groupby("sale_category")["net_value"].sum().to_dict() if not rows.empty else {}
        categories = {
            category.value: int(round_half_up(float(totals.get(category.value, 0.0)))) for category in SaleCategory
        }
        points.append(
            TotalSalesPoint(
                month=format_month_label(bucket, year),
                membership=categories[SaleCategory.MEMBERSHIP.value],
                intro=categories[SaleCategory.INTRO.value],
                drop_in=categories[SaleCategory.DROP_IN.value],
                pack=categories[SaleCategory.PACK.value],
                private=categories[SaleCategory.PRIVATE.value],
                party=categories[SaleCategory.PARTY.value],
                other=categories[SaleCategory.OTHER.value],
                total_sales=sum(categories.values()),
            )
        )
        if bucket == MonthBucket(year=year, month=month):
            logger.info("Total sales for %s: %d across %d payments.", bucket.key, sum(categories.values()), len(rows))
    return points


def build_chart_data(frames: ExportFrames, month: int, year: int) -> ChartData:
    return ChartData(
        leads_intro_sales=generate_leads_intro_sales_chart_data(frames.intro_sales, frames.leads_customers, month, year),
        new_members=generate_new_members_chart_data(frames.membership_sales, month, year),
        cumulative_members=generate_cumulative_members_chart_data(
            frames.membership_sales_with_renewals, frames.membership_sales, month, year
        ),
        total_sales=generate_total_sales_chart_data(frames.payments, month, year),
    )
