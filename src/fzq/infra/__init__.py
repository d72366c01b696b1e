from __future__ import annotations

from .metrics import (
    CounterSnapshot,
    InMemoryMetrics,
    MetricsRecorder,
    MetricsSnapshot,
    NullMetricsRecorder,
    ObservationSnapshot,
)

__all__ = [
    "CounterSnapshot",
    "InMemoryMetrics",
    "MetricsRecorder",
    "MetricsSnapshot",
    "NullMetricsRecorder",
    "ObservationSnapshot",
]
