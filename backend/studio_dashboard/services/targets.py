from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from studio_dashboard.services.dates import MonthBucket


class TargetMetric(str, Enum):
    INTROS_SOLD = "introsSold"
    TOTAL_MEMBERSHIPS = "totalMemberships"
    CLASS_PACKS = "classPacks"
    TOTAL_SALES = "totalSales"
    LEADS_PER_DAY = "leadsPerDay"
    NEW_LEADS_PER_MONTH = "newLeadsPerMonth"


class KpiName(str, Enum):
    NEW_MEMBERS = "newMembers"
    INTROS_SOLD = "introsSold"
    AVG_LEADS_PER_DAY = "avgLeadsPerDay"
    LEAD_TO_INTRO_CONVERSION = "leadToIntroConversion"
    INTRO_TO_MEMBER_CONVERSION = "introToMemberConversion"
    INTRO_TO_PACK_CONVERSION = "introToPackConversion"
    TOTAL_SALES = "totalSales"
    PACK_SALES = "packSales"
    MEMBERSHIP_CANCELLATIONS = "membershipCancellations"


class StatusColor(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    GRAY = "gray"


def _plan(start: MonthBucket, values: list[int]) -> dict[MonthBucket, int]:
    return {start.shift(offset): value for offset, value in enumerate(values)}


# Monthly plan from December 2025 through December 2026.
PLAN_START = MonthBucket(year=2025, month=11)
MONTHLY_TARGETS: dict[TargetMetric, dict[MonthBucket, int]] = {
    TargetMetric.INTROS_SOLD: _plan(PLAN_START, [53, 55, 49, 42, 42, 37, 31, 33, 32, 47, 47, 42, 37]),
    TargetMetric.TOTAL_MEMBERSHIPS: _plan(
        PLAN_START, [143, 132, 135, 140, 142, 138, 133, 128, 123, 128, 132, 134, 136]
    ),
    TargetMetric.CLASS_PACKS: _plan(PLAN_START, [34] + [33] * 12),
    TargetMetric.TOTAL_SALES: _plan(
        PLAN_START,
        [40614, 43548, 39892, 40016, 40254, 39173, 38131, 37405, 35961, 37691, 38221, 38106, 38207],
    ),
}
DEFAULT_TARGETS: dict[TargetMetric, int] = {
    TargetMetric.INTROS_SOLD: 90,
    TargetMetric.TOTAL_MEMBERSHIPS: 30,
    TargetMetric.CLASS_PACKS: 33,
    TargetMetric.TOTAL_SALES: 45000,
}
CONSTANT_TARGETS: dict[TargetMetric, int] = {
    TargetMetric.LEADS_PER_DAY: 8,
    TargetMetric.NEW_LEADS_PER_MONTH: 238,
}

YELLOW_RATIO = 0.8
CANCELLATIONS_GREEN_MAX = 12
CANCELLATIONS_YELLOW_MAX = 15


@dataclass(frozen=True)
class TargetThresholds:
    target: float
    yellow_threshold: float
    green_threshold: float


@dataclass(frozen=True)
class StaticThresholds:
    green: float
    yellow: float


# KPIs without a monthly plan are colored against fixed cut points.
METRIC_THRESHOLDS: dict[KpiName, StaticThresholds] = {
    KpiName.NEW_MEMBERS: StaticThresholds(green=30, yellow=15),
    KpiName.LEAD_TO_INTRO_CONVERSION: StaticThresholds(green=40, yellow=30),
    KpiName.INTRO_TO_MEMBER_CONVERSION: StaticThresholds(green=33, yellow=20),
}
KPI_TARGET_METRIC: dict[KpiName, TargetMetric] = {
    KpiName.INTROS_SOLD: TargetMetric.INTROS_SOLD,
    KpiName.TOTAL_SALES: TargetMetric.TOTAL_SALES,
    KpiName.PACK_SALES: TargetMetric.CLASS_PACKS,
    KpiName.AVG_LEADS_PER_DAY: TargetMetric.LEADS_PER_DAY,
}


def get_target(metric: TargetMetric, year: int, month: int) -> float | None:
    if metric in CONSTANT_TARGETS:
        return CONSTANT_TARGETS[metric]
    table = MONTHLY_TARGETS.get(metric)
    if table is None:
        return None
    return table.get(MonthBucket(year=year, month=month), DEFAULT_TARGETS[metric])


def get_high_is_good_thresholds(target: float) -> TargetThresholds:
    return TargetThresholds(target=target, yellow_threshold=target * YELLOW_RATIO, green_threshold=target)


def get_cancellation_thresholds() -> TargetThresholds:
    return TargetThresholds(
        target=CANCELLATIONS_GREEN_MAX,
        yellow_threshold=CANCELLATIONS_GREEN_MAX + 1,
        green_threshold=CANCELLATIONS_GREEN_MAX,
    )


def resolve_target(kpi: KpiName, year: int, month: int) -> float | None:
    if kpi in KPI_TARGET_METRIC:
        return get_target(KPI_TARGET_METRIC[kpi], year, month)
    if kpi in METRIC_THRESHOLDS:
        return METRIC_THRESHOLDS[kpi].green
    if kpi is KpiName.MEMBERSHIP_CANCELLATIONS:
        return get_cancellation_thresholds().target
    return None


def _color_for(value: float, green: float, yellow: float) -> StatusColor:
    if value >= green:
        return StatusColor.GREEN
    if value >= yellow:
        return StatusColor.YELLOW
    return StatusColor.RED


def high_is_good_color(value: float, target: float) -> StatusColor:
    thresholds = get_high_is_good_thresholds(target)
    return _color_for(value, thresholds.green_threshold, thresholds.yellow_threshold)


def cancellation_color(value: float) -> StatusColor:
    if value <= CANCELLATIONS_GREEN_MAX:
        return StatusColor.GREEN
    if value <= CANCELLATIONS_YELLOW_MAX:
        return StatusColor.YELLOW
    return StatusColor.RED


def get_metric_color(kpi: KpiName, value: float, year: int, month: int) -> StatusColor:
    if kpi is KpiName.INTRO_TO_PACK_CONVERSION:
        return StatusColor.GRAY
    if kpi is KpiName.MEMBERSHIP_CANCELLATIONS:
        return cancellation_color(value)
    if kpi in METRIC_THRESHOLDS:
        static = METRIC_THRESHOLDS[kpi]
        return _color_for(value, static.green, static.yellow)

    target = resolve_target(kpi, year, month)
    if target is None:
        return StatusColor.GRAY
    return high_is_good_color(value, target)
