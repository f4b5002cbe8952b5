from __future__ import annotations

import logging
from pathlib import Path

from studio_dashboard.core.config import settings
from studio_dashboard.schemas.dashboard import EXPORT_LABELS, StudioExports


logger = logging.getLogger(__name__)

EXPORT_FILENAMES: dict[str, str] = {
    "membership_sales": "momence--membership-sales-export-norenewals.csv",
    "membership_sales_with_renewals": "momence--membership-sales-export-withrenewals.csv",
    "intro_sales": "momence-intro-offers-sales-report.csv",
    "leads_customers": "momence-new-leads-and-customers.csv",
    "intro_conversions": "momence-intro-offers-conversions-report.csv",
    "payments": "momence-latest-payments-report.csv",
}


def read_export_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError:
        return path.read_text(encoding="latin-1")


def list_export_files(data_dir: Path | None = None) -> dict[str, Path]:
    data_dir = data_dir or settings.data_dir
    return {name: data_dir / filename for name, filename in EXPORT_FILENAMES.items()}


def load_exports_from_folder(data_dir: Path | None = None) -> StudioExports:
    data_dir = data_dir or settings.data_dir
    paths = list_export_files(data_dir)

    missing = [name for name, path in paths.items() if not path.exists()]
    if missing:
        details = ", ".join(f"{EXPORT_LABELS[name]} ({EXPORT_FILENAMES[name]})" for name in missing)
        raise FileNotFoundError(f"Missing export file(s) in {data_dir}: {details}")

    contents = {name: read_export_text(path) for name, path in paths.items()}
    logger.info("Loaded %d export files from %s.", len(contents), data_dir)
    return StudioExports(**contents)
