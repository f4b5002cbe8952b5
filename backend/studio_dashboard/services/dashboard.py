from __future__ import annotations

import logging

from studio_dashboard.schemas.dashboard import DashboardReport, StudioExports
from studio_dashboard.services.charts import build_chart_data
from studio_dashboard.services.dates import MONTH_NAMES, MonthBucket
from studio_dashboard.services.metrics import ExportFrames, build_dashboard_metrics
from studio_dashboard.services.summary import generate_summary
from studio_dashboard.services.targets import KpiName, get_metric_color, resolve_target


logger = logging.getLogger(__name__)

MONTH_NAME_TO_NUM = {name[:3].lower(): index for index, name in enumerate(MONTH_NAMES)}


def get_month_number(month_name: str) -> int:
    """Resolve ``"September"`` (or ``"sep"``) to its zero-indexed month number."""
    text = str(month_name).strip().lower()
    month_num = MONTH_NAME_TO_NUM.get(text[:3])
    if month_num is None or not MONTH_NAMES[month_num].lower().startswith(text):
        raise ValueError(f"Unknown month name: {month_name!r}")
    return month_num


def resolve_month(month: str | int) -> int:
    if isinstance(month, int):
        if not 0 <= month <= 11:
            raise ValueError(f"Month number must be between 0 and 11, got {month}.")
        return month
    text = str(month).strip()
    if text.isdigit():
        return resolve_month(int(text))
    return get_month_number(text)


def resolve_targets(month: int, year: int) -> dict[KpiName, float | None]:
    return {kpi: resolve_target(kpi, year, month) for kpi in KpiName}


def process_csv_data(exports: StudioExports, month: int, year: int) -> DashboardReport:
    exports.require_all()
    bucket = MonthBucket(year=year, month=month)

    frames = ExportFrames.from_exports(exports)
    metrics = build_dashboard_metrics(frames, month, year)
    values = metrics.model_dump(by_alias=True)

    statuses = {kpi: get_metric_color(kpi, values[kpi.value]["value"], year, month) for kpi in KpiName}
    targets = resolve_targets(month, year)
    summary = generate_summary(metrics, statuses, targets, month, year)

    logger.info(
        "Processed dashboard for %s %d: %d payments, %d leads, %d membership sales.",
        bucket.name,
        year,
        len(frames.payments),
        len(frames.leads_customers),
        len(frames.membership_sales),
    )

    return DashboardReport(
        month=bucket.name,
        month_number=month,
        year=year,
        metrics=metrics,
        statuses={kpi.value: color for kpi, color in statuses.items()},
        targets={kpi.value: target for kpi, target in targets.items()},
        charts=build_chart_data(frames, month, year),
        summary=summary,
    )
