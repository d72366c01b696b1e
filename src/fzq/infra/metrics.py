from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Protocol

TagsKey = tuple[tuple[str, str], ...]


def _normalize_tags(tags: Mapping[str, str] | None) -> TagsKey:
    if not tags:
        return ()
    return tuple(sorted(tags.items()))


@dataclass(frozen=True)
class CounterSnapshot:
    count: int


@dataclass(frozen=True)
class ObservationSnapshot:
    count: int
    minimum: float
    maximum: float
    total: float
    average: float


@dataclass(frozen=True)
class MetricsSnapshot:
    counters: Mapping[str, Mapping[TagsKey, CounterSnapshot]]
    observations: Mapping[str, Mapping[TagsKey, ObservationSnapshot]]

    @classmethod
    def empty(cls) -> MetricsSnapshot:
        return cls(counters={}, observations={})

    def to_dict(self) -> dict[str, Any]:
        """Flatten into JSON-friendly data, summing counters across tags."""
        counters = {
            name: sum(counter.count for counter in series.values())
            for name, series in sorted(self.counters.items())
        }
        observations: dict[str, dict[str, float]] = {}
        for name, series in sorted(self.observations.items()):
            if not series:
                continue
            count = sum(item.count for item in series.values())
            total = sum(item.total for item in series.values())
            observations[name] = {
                "count": count,
                "min": min(item.minimum for item in series.values()),
                "max": max(item.maximum for item in series.values()),
                "average": round(total / count, 3),
            }
        return {"counters": counters, "observations": observations}


class MetricsRecorder(Protocol):
    def increment(self, name: str, tags: Mapping[str, str] | None = None) -> None:
        ...

    def observe(self, name: str, value: float, tags: Mapping[str, str] | None = None) -> None:
        ...


class NullMetricsRecorder(MetricsRecorder):
    def increment(self, name: str, tags: Mapping[str, str] | None = None) -> None:
        return None

    def observe(self, name: str, value: float, tags: Mapping[str, str] | None = None) -> None:
        return None


@dataclass
class _Observation:
    count: int = 0
    minimum: float = float("inf")
    maximum: float = float("-inf")
    total: float = 0.0

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value
        if value < self.minimum:
            self.minimum = value
        if value > self.maximum:
            self.maximum = value


@dataclass
class InMemoryMetrics(MetricsRecorder):
    """Aggregate counters and observations for the lifetime of one run."""

    _lock: Lock = field(default_factory=Lock, repr=False)
    _counters: dict[str, dict[TagsKey, int]] = field(default_factory=dict)
    _observations: dict[str, dict[TagsKey, _Observation]] = field(default_factory=dict)

    def increment(self, name: str, tags: Mapping[str, str] | None = None) -> None:
        key = _normalize_tags(tags)
        with self._lock:
            series = self._counters.setdefault(name, {})
            series[key] = series.get(key, 0) + 1

    def observe(self, name: str, value: float, tags: Mapping[str, str] | None = None) -> None:
        key = _normalize_tags(tags)
        with self._lock:
            series = self._observations.setdefault(name, {})
            series.setdefault(key, _Observation()).add(float(value))

    def counter(self, name: str, **tags: str) -> int:
        """Sum ``name`` over every tag set that contains ``tags``."""
        expected = tags.items()
        with self._lock:
            series = dict(self._counters.get(name, {}))
        total = 0
        for recorded_tags, count in series.items():
            recorded = dict(recorded_tags)
            if all(recorded.get(key) == value for key, value in expected):
                total += count
        return total

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            counters = {
                name: {tags: CounterSnapshot(count) for tags, count in series.items()}
                for name, series in self._counters.items()
            }
            observations = {
                name: {
                    tags: ObservationSnapshot(
                        count=item.count,
                        minimum=item.minimum,
                        maximum=item.maximum,
                        total=item.total,
                        average=item.total / item.count,
                    )
                    for tags, item in series.items()
                    if item.count
                }
                for name, series in self._observations.items()
            }
        return MetricsSnapshot(counters=counters, observations=observations)


__all__ = [
    "CounterSnapshot",
    "InMemoryMetrics",
    "MetricsRecorder",
    "MetricsSnapshot",
    "NullMetricsRecorder",
    "ObservationSnapshot",
    "TagsKey",
]
