"""
Rule-based narrative for the monthly dashboard.

Fragments are collected in a fixed order:
- sharp increases
- sharp decreases
- target misses and beats
- conversion-rate commentary
and closed with a clause that follows the direction of total sales.
"""

from __future__ import annotations

from studio_dashboard.schemas.dashboard import DashboardMetrics
from studio_dashboard.services.dates import MonthBucket
from studio_dashboard.services.targets import KpiName, StatusColor


SHARP_CHANGE_THRESHOLDS: dict[KpiName, int] = {
    KpiName.NEW_MEMBERS: 20,
    KpiName.INTROS_SOLD: 20,
    KpiName.AVG_LEADS_PER_DAY: 20,
    KpiName.LEAD_TO_INTRO_CONVERSION: 20,
    KpiName.INTRO_TO_MEMBER_CONVERSION: 20,
    KpiName.INTRO_TO_PACK_CONVERSION: 20,
    KpiName.TOTAL_SALES: 15,
    KpiName.PACK_SALES: 15,
}
TARGET_MISS_RATIO = 0.7

INTRO_TO_MEMBER_STRONG = 30
INTRO_TO_MEMBER_WEAK = 20
LEAD_TO_INTRO_STRONG = 35
LEAD_TO_INTRO_WEAK = 25

KPI_LABELS: dict[KpiName, str] = {
    KpiName.NEW_MEMBERS: "new members",
    KpiName.INTROS_SOLD: "intros sold",
    KpiName.AVG_LEADS_PER_DAY: "leads per day",
    KpiName.LEAD_TO_INTRO_CONVERSION: "lead to intro conversion",
    KpiName.INTRO_TO_MEMBER_CONVERSION: "intro to member conversion",
    KpiName.INTRO_TO_PACK_CONVERSION: "intro to pack conversion",
    KpiName.TOTAL_SALES: "total sales",
    KpiName.PACK_SALES: "pack sales",
    KpiName.MEMBERSHIP_CANCELLATIONS: "membership cancellations",
}
PERCENT_KPIS = {
    KpiName.LEAD_TO_INTRO_CONVERSION,
    KpiName.INTRO_TO_MEMBER_CONVERSION,
    KpiName.INTRO_TO_PACK_CONVERSION,
}

FALLBACK_SENTENCE = "Numbers held steady this month, with no sharp swings and nothing far off target."


def _fmt_value(kpi: KpiName, value: float) -> str:
    if kpi in PERCENT_KPIS:
        return f"{value:g}%"
    if kpi is KpiName.TOTAL_SALES:
        return f"${value:,.0f}"
    return f"{value:g}"


def _join(parts: list[str]) -> str:
    if len(parts) == 1:
        return parts[0]
    return ", ".join(parts[:-1]) + " and " + parts[-1]


def _sentence(text: str) -> str:
    return text[0].upper() + text[1:] + "."


def _sharp_movements(values: dict[str, dict]) -> tuple[list[str], list[str]]:
    increases, decreases = [], []
    for kpi, threshold in SHARP_CHANGE_THRESHOLDS.items():
        change = values[kpi.value]["change"]
        if change >= threshold:
            increases.append(f"{KPI_LABELS[kpi]} up {change}%")
        elif change <= -threshold:
            decreases.append(f"{KPI_LABELS[kpi]} down {abs(change)}%")
    return increases, decreases


def _target_callouts(
    values: dict[str, dict],
    statuses: dict[KpiName, StatusColor],
    targets: dict[KpiName, float | None],
) -> tuple[list[str], list[str]]:
    misses, beats = [], []
    for kpi in KpiName:
        status = statuses.get(kpi)
        target = targets.get(kpi)
        if status in (None, StatusColor.GRAY) or target is None:
            continue

        value = values[kpi.value]["value"]
        label = f"{KPI_LABELS[kpi]} ({_fmt_value(kpi, value)} vs {_fmt_value(kpi, target)})"
        if kpi is KpiName.MEMBERSHIP_CANCELLATIONS:
            # Lower is better; the color already encodes the cut points.
            if status is StatusColor.RED:
                misses.append(label)
            elif status is StatusColor.GREEN:
                beats.append(label)
            continue

        if status is StatusColor.RED and value < TARGET_MISS_RATIO * target:
            misses.append(label)
        elif status is StatusColor.GREEN and value >= target:
            beats.append(label)
    return misses, beats


def _conversion_commentary(values: dict[str, dict]) -> list[str]:
    remarks = []
    intro_to_member = values[KpiName.INTRO_TO_MEMBER_CONVERSION.value]["value"]
    if intro_to_member >= INTRO_TO_MEMBER_STRONG:
        remarks.append(f"Intro to member conversion is strong at {intro_to_member:g}%.")
    elif intro_to_member < INTRO_TO_MEMBER_WEAK:
        remarks.append(
            f"Intro to member conversion is soft at {intro_to_member:g}%, so follow-up with intro buyers could use attention."
        )

    lead_to_intro = values[KpiName.LEAD_TO_INTRO_CONVERSION.value]["value"]
    if lead_to_intro >= LEAD_TO_INTRO_STRONG:
        remarks.append(f"Leads are turning into intro purchases at a healthy {lead_to_intro:g}%.")
    elif lead_to_intro < LEAD_TO_INTRO_WEAK:
        remarks.append(f"Only {lead_to_intro:g}% of leads bought an intro offer over the last three months.")
    return remarks


def _closing(values: dict[str, dict], bucket: MonthBucket) -> str:
    change = values[KpiName.TOTAL_SALES.value]["change"]
    next_month = bucket.shift(1).name
    if change > 0:
        return f"Total sales are up {change}% on last month, which is good momentum going into {next_month}."
    if change < 0:
        return f"Total sales are down {abs(change)}% on last month, worth a closer look before {next_month}."
    return "Total sales are flat against last month."


def generate_summary(
    metrics: DashboardMetrics,
    statuses: dict[KpiName, StatusColor],
    targets: dict[KpiName, float | None],
    month: int,
    year: int,
) -> str:
    values = metrics.model_dump(by_alias=True)
    fragments: list[str] = []

    increases, decreases = _sharp_movements(values)
    if increases:
        fragments.append(_sentence("sharp increases this month: " + _join(increases)))
    if decreases:
        fragments.append(_sentence("sharp decreases this month: " + _join(decreases)))

    misses, beats = _target_callouts(values, statuses, targets)
    if misses:
        fragments.append(_sentence("well short of target: " + _join(misses)))
    if beats:
        fragments.append(_sentence("at or above target: " + _join(beats)))

    fragments.extend(_conversion_commentary(values))

    if not fragments:
        fragments.append(FALLBACK_SENTENCE)

    fragments.append(_closing(values, MonthBucket(year=year, month=month)))
    return " ".join(fragments)
