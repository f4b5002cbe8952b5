import json
import logging
import sys
from pathlib import Path

import uvicorn

from studio_dashboard.core.config import settings
from studio_dashboard.services.dashboard import process_csv_data, resolve_month
from studio_dashboard.services.ingest import load_exports_from_folder


USAGE = (
    "Usage: python -m studio_dashboard.cli report <Month> <Year> [data_dir]\n"
    "       python -m studio_dashboard.cli serve [host] [port]"
)


def main() -> None:
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    command = sys.argv[1] if len(sys.argv) > 1 else None

    if command == "report" and len(sys.argv) >= 4:
        month = resolve_month(sys.argv[2])
        year = int(sys.argv[3])
        data_dir = Path(sys.argv[4]) if len(sys.argv) > 4 else None
        exports = load_exports_from_folder(data_dir)
        report = process_csv_data(exports, month, year)
        print(json.dumps(report.model_dump(mode="json", by_alias=True), indent=2))
        return

    if command == "serve":
        host = sys.argv[2] if len(sys.argv) > 2 else settings.host
        port = int(sys.argv[3]) if len(sys.argv) > 3 else settings.port
        uvicorn.run("studio_dashboard.main:app", host=host, port=port, log_level=settings.log_level.lower())
        return

    print(USAGE)


if __name__ == "__main__":
    main()
