from typing import Any

from fastapi import APIRouter, HTTPException, Query

from studio_dashboard.core.report_activity import list_report_activity, record_report_activity
from studio_dashboard.schemas.dashboard import DashboardReport, DashboardRequest, StudioExports, TargetsResponse
from studio_dashboard.services.dashboard import process_csv_data, resolve_month, resolve_targets
from studio_dashboard.services.ingest import load_exports_from_folder

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _metric_preview(report: DashboardReport) -> dict[str, Any]:
    metrics = report.metrics.model_dump(by_alias=True)
    return {name: metric["value"] for name, metric in metrics.items()}


def _build_report(exports: StudioExports, month: str | int, year: int, source: str) -> DashboardReport:
    try:
        month_number = resolve_month(month)
        report = process_csv_data(exports, month_number, year)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    record_report_activity(
        source=source,
        month=report.month,
        year=report.year,
        metrics=_metric_preview(report),
        summary=report.summary,
    )
    return report


@router.post("/process", response_model=DashboardReport)
def process_dashboard(payload: DashboardRequest) -> DashboardReport:
    """
    Build the monthly dashboard from the raw text of the six Momence exports.

    `month` accepts a month name ("September", "sep") or a zero-indexed number.
    Every export is required; the error names the ones that are missing.
    """
    return _build_report(payload, payload.month, payload.year, source="upload")


@router.get("/folder", response_model=DashboardReport)
def process_dashboard_folder(
    month: str = Query(..., description="Month name or zero-indexed month number."),
    year: int = Query(..., ge=2000, le=2100),
) -> DashboardReport:
    try:
        exports = load_exports_from_folder()
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return _build_report(exports, month, year, source="folder")


@router.get("/targets", response_model=TargetsResponse)
def dashboard_targets(
    year: int = Query(..., ge=2000, le=2100),
    month: str = Query(..., description="Month name or zero-indexed month number."),
) -> TargetsResponse:
    try:
        month_number = resolve_month(month)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    targets = resolve_targets(month_number, year)
    return TargetsResponse(year=year, month=month_number, targets={kpi.value: value for kpi, value in targets.items()})


@router.get("/activity")
def dashboard_activity(limit: int = Query(default=25, ge=1, le=50)) -> dict:
    return {"events": list_report_activity(limit=limit)}
