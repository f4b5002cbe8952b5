from __future__ import annotations

from collections import deque
from datetime import datetime, timezone
from threading import Lock
from typing import Any

from studio_dashboard.core.config import settings

_EVENTS: deque[dict[str, Any]] = deque(maxlen=settings.activity_max_events)
_LOCK = Lock()
_SEQUENCE = 0


def record_report_activity(
    *,
    source: str,
    month: str,
    year: int,
    metrics: dict[str, Any] | None = None,
    summary: str = "",
) -> None:
    global _SEQUENCE

    with _LOCK:
        _SEQUENCE += 1
        _EVENTS.appendleft(
            {
                "event_id": _SEQUENCE,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "source": source,
                "period": f"{month} {year}",
                "metrics": dict(metrics or {}),
                "summary": summary if len(summary) <= 120 else f"{summary[:117]}...",
            }
        )


def list_report_activity(limit: int = 25) -> list[dict[str, Any]]:
    safe_limit = max(1, min(limit, settings.activity_max_events))
    with _LOCK:
        return list(_EVENTS)[:safe_limit]
