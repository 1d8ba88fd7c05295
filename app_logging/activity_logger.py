from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import structlog

from config.settings import get_settings


class ActivityLogger:
    """
    Structured activity logger. Writes JSON lines to file and emits the same
    event through structlog (stderr). Thread-safe via a class-level write lock.

    Each log record schema:
    {
        "timestamp":  "2025-01-01T00:00:00+00:00",
        "level":      "INFO",
        "event":      "issue_generated",
        "component":  "IssueWriterAgent",
        "request_id": "uuid",      (optional)
        "message":    "...",
        ...extra_fields
    }
    """

    _lock = threading.Lock()

    def __init__(self, component: str) -> None:
        self.component = component
        self._log = structlog.get_logger(component)

    def _write(
        self,
        level: str,
        event: str,
        request_id: Optional[str] = None,
        message: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        record: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "event": event,
            "component": self.component,
        }
        if request_id:
            record["request_id"] = request_id
        record["message"] = message or event
        record.update(kwargs)

        line = json.dumps(record, default=str)
        log_path = Path(get_settings().activity_log_path)

        with self._lock:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(log_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

        # Also emit through structlog so container log drivers collect it
        fields = {k: v for k, v in record.items() if k not in ("timestamp", "level", "event")}
        getattr(self._log, level.lower())(event, **fields)

    # ── Public interface ──────────────────────────────────────────────────────

    def info(self, event: str, **kwargs: Any) -> None:
        self._write("INFO", event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._write("WARNING", event, **kwargs)

    def error(
        self,
        event: str,
        exc: Optional[BaseException] = None,
        **kwargs: Any,
    ) -> None:
        if exc:
            kwargs.setdefault("error_type", type(exc).__name__)
            kwargs.setdefault("error_message", str(exc))
        self._write("ERROR", event, **kwargs)

    def debug(self, event: str, **kwargs: Any) -> None:
        if get_settings().log_level.upper() == "DEBUG":
            self._write("DEBUG", event, **kwargs)
