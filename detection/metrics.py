"""
Detection metrics — running counters over every `detect` call.
Advisory only: a lost update under contention is acceptable.
"""

from __future__ import annotations

import threading
from collections import Counter

from api.schemas import DetectionResult, DetectionSource, MetricsSnapshot


class DetectionMetrics:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._total = 0
            self._time_sum = 0.0
            self._confidence_sum = 0.0
            self._errors = 0
            self._languages: Counter[str] = Counter()
            self._sources: Counter[str] = Counter()

    def record(self, result: DetectionResult) -> None:
        with self._lock:
            self._total += 1
            self._time_sum += result.processing_time_ms
            self._confidence_sum += result.confidence
            self._languages[result.language.value] += 1
            self._sources[result.source.value] += 1
            if result.source == DetectionSource.ERROR:
                self._errors += 1

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            total = self._total
            return MetricsSnapshot(
                total_detections=total,
                average_processing_time_ms=self._time_sum / total if total else 0.0,
                average_confidence=self._confidence_sum / total if total else 0.0,
                errors=self._errors,
                language_distribution=dict(self._languages),
                source_distribution=dict(self._sources),
            )
