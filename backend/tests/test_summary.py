from studio_dashboard.schemas.dashboard import DashboardMetrics, MetricValue
from studio_dashboard.services.summary import FALLBACK_SENTENCE, generate_summary
from studio_dashboard.services.targets import KpiName, StatusColor


def _metrics(**overrides: tuple[float, int]) -> DashboardMetrics:
    # Middle-of-the-road values that trigger no commentary.
    values = {
        "new_members": (25, 0),
        "intros_sold": (40, 0),
        "avg_leads_per_day": (6.0, 0),
        "lead_to_intro_conversion": (30.0, 0),
        "intro_to_member_conversion": (25.0, 0),
        "intro_to_pack_conversion": (10.0, 0),
        "total_sales": (38000, 0),
        "pack_sales": (30, 0),
        "membership_cancellations": (10, 0),
    }
    values.update(overrides)
    return DashboardMetrics(**{name: MetricValue(value=v, change=c) for name, (v, c) in values.items()})


def _yellow_statuses() -> dict[KpiName, StatusColor]:
    return {kpi: StatusColor.YELLOW for kpi in KpiName}


def _targets() -> dict[KpiName, float | None]:
    return {kpi: None for kpi in KpiName}


def test_quiet_month_uses_fallback_and_flat_closing() -> None:
    summary = generate_summary(_metrics(), _yellow_statuses(), _targets(), 8, 2025)

    assert summary == f"{FALLBACK_SENTENCE} Total sales are flat against last month."


def test_sharp_increase_and_positive_closing_names_next_month() -> None:
    summary = generate_summary(
        _metrics(new_members=(30, 25), total_sales=(40000, 16)),
        _yellow_statuses(),
        _targets(),
        11,
        2025,
    )

    assert summary.startswith("Sharp increases this month: new members up 25% and total sales up 16%.")
    assert "going into January" in summary
    assert FALLBACK_SENTENCE not in summary


def test_sharp_decrease_below_threshold_is_ignored() -> None:
    summary = generate_summary(_metrics(pack_sales=(28, -14)), _yellow_statuses(), _targets(), 8, 2025)

    assert "pack sales" not in summary


def test_target_miss_and_beat_callouts() -> None:
    statuses = _yellow_statuses()
    statuses[KpiName.INTROS_SOLD] = StatusColor.RED
    statuses[KpiName.TOTAL_SALES] = StatusColor.GREEN
    targets = _targets()
    targets[KpiName.INTROS_SOLD] = 90
    targets[KpiName.TOTAL_SALES] = 38000

    summary = generate_summary(_metrics(total_sales=(38000, -5)), statuses, targets, 8, 2025)

    assert "Well short of target: intros sold (40 vs 90)." in summary
    assert "At or above target: total sales ($38,000 vs $38,000)." in summary
    assert summary.endswith("Total sales are down 5% on last month, worth a closer look before October.")


def test_red_status_close_to_target_is_not_called_out() -> None:
    statuses = _yellow_statuses()
    statuses[KpiName.INTROS_SOLD] = StatusColor.RED
    targets = _targets()
    targets[KpiName.INTROS_SOLD] = 50

    summary = generate_summary(_metrics(), statuses, targets, 8, 2025)

    assert "short of target" not in summary


def test_conversion_commentary() -> None:
    summary = generate_summary(
        _metrics(intro_to_member_conversion=(12.5, 0), lead_to_intro_conversion=(41.2, 0)),
        _yellow_statuses(),
        _targets(),
        8,
        2025,
    )

    assert "Intro to member conversion is soft at 12.5%" in summary
    assert "healthy 41.2%" in summary
