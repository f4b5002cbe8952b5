import pytest

from studio_dashboard.services.dates import MonthBucket
from studio_dashboard.services.targets import (
    KpiName,
    StatusColor,
    TargetMetric,
    cancellation_color,
    get_high_is_good_thresholds,
    get_metric_color,
    get_target,
    high_is_good_color,
    resolve_target,
)


def test_monthly_table_lookup_and_key_distinctness() -> None:
    assert MonthBucket(2026, 1).key != MonthBucket(2026, 10).key
    assert get_target(TargetMetric.INTROS_SOLD, 2026, 1) == 49
    assert get_target(TargetMetric.INTROS_SOLD, 2026, 10) == 42
    assert get_target(TargetMetric.TOTAL_SALES, 2025, 11) == 40614
    assert get_target(TargetMetric.CLASS_PACKS, 2025, 11) == 34


def test_defaults_outside_plan_window() -> None:
    assert get_target(TargetMetric.INTROS_SOLD, 2025, 8) == 90
    assert get_target(TargetMetric.TOTAL_MEMBERSHIPS, 2027, 0) == 30
    assert get_target(TargetMetric.CLASS_PACKS, 2024, 5) == 33
    assert get_target(TargetMetric.TOTAL_SALES, 2025, 10) == 45000


def test_constant_targets_ignore_month() -> None:
    assert get_target(TargetMetric.LEADS_PER_DAY, 2025, 0) == 8
    assert get_target(TargetMetric.NEW_LEADS_PER_MONTH, 2031, 6) == 238


def test_high_is_good_thresholds() -> None:
    thresholds = get_high_is_good_thresholds(100)

    assert thresholds.target == 100
    assert thresholds.green_threshold == 100
    assert thresholds.yellow_threshold == pytest.approx(80)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(100, StatusColor.GREEN), (120, StatusColor.GREEN), (80, StatusColor.YELLOW), (79, StatusColor.RED)],
)
def test_high_is_good_boundaries(value: float, expected: StatusColor) -> None:
    assert high_is_good_color(value, 100) is expected


def test_just_under_target_is_not_green() -> None:
    assert high_is_good_color(99.999, 100) is StatusColor.YELLOW
    assert high_is_good_color(79.999, 100) is StatusColor.RED


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, StatusColor.GREEN), (12, StatusColor.GREEN), (13, StatusColor.YELLOW), (15, StatusColor.YELLOW), (16, StatusColor.RED)],
)
def test_cancellations_are_low_is_good(value: int, expected: StatusColor) -> None:
    assert cancellation_color(value) is expected
    assert get_metric_color(KpiName.MEMBERSHIP_CANCELLATIONS, value, 2025, 8) is expected


def test_pack_conversion_is_always_gray() -> None:
    assert get_metric_color(KpiName.INTRO_TO_PACK_CONVERSION, 99.0, 2025, 8) is StatusColor.GRAY
    assert resolve_target(KpiName.INTRO_TO_PACK_CONVERSION, 2025, 8) is None


def test_metric_color_uses_monthly_plan() -> None:
    # December 2025 sales target is 40,614.
    assert get_metric_color(KpiName.TOTAL_SALES, 40614, 2025, 11) is StatusColor.GREEN
    assert get_metric_color(KpiName.TOTAL_SALES, 40614, 2025, 10) is StatusColor.YELLOW
    assert get_metric_color(KpiName.PACK_SALES, 20, 2026, 3) is StatusColor.RED


def test_static_thresholds_for_unplanned_kpis() -> None:
    assert get_metric_color(KpiName.NEW_MEMBERS, 30, 2025, 8) is StatusColor.GREEN
    assert get_metric_color(KpiName.NEW_MEMBERS, 15, 2025, 8) is StatusColor.YELLOW
    assert get_metric_color(KpiName.INTRO_TO_MEMBER_CONVERSION, 19.9, 2025, 8) is StatusColor.RED
    assert resolve_target(KpiName.LEAD_TO_INTRO_CONVERSION, 2025, 8) == 40
