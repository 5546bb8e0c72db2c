"""
Telemetry Emitter — fire-and-forget structured events per pipeline stage.

Events go to a list of sink callbacks and into a bounded ring buffer of
recent events. A sink that raises is logged and skipped; telemetry can never
fail a detection.
"""

from __future__ import annotations

from collections import deque
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import BaseModel, Field

from orchestrator.logger import get_logger

logger = get_logger("telemetry")

CACHE_HIT = "lang_detect.cache_hit"
REMOTE_CALLED = "lang_detect.remote_called"
FALLBACK = "lang_detect.fallback"
RESULT = "lang_detect.result"


class TelemetryEvent(BaseModel):
    name: str
    attributes: dict[str, Any] = Field(default_factory=dict)
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    )


TelemetrySink = Callable[[TelemetryEvent], None]


def log_sink(event: TelemetryEvent) -> None:
    """Default sink: one structlog line per event."""
    logger.info(event.name, **event.attributes)


class TelemetryEmitter:
    def __init__(
        self,
        sinks: Optional[list[TelemetrySink]] = None,
        buffer_size: int = 256,
    ) -> None:
        self._sinks: list[TelemetrySink] = list(sinks) if sinks is not None else [log_sink]
        self._recent: deque[TelemetryEvent] = deque(maxlen=buffer_size)

    def add_sink(self, sink: TelemetrySink) -> None:
        self._sinks.append(sink)

    def emit(self, name: str, **attributes: Any) -> None:
        event = TelemetryEvent(name=name, attributes=attributes)
        self._recent.append(event)
        for sink in self._sinks:
            try:
                sink(event)
            except Exception as e:
                logger.warning("telemetry_sink_failed", event_name=name, error=str(e))

    def recent(self, name: Optional[str] = None) -> list[TelemetryEvent]:
        events = list(self._recent)
        if name is None:
            return events
        return [event for event in events if event.name == name]
