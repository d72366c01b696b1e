from __future__ import annotations

from collections import deque
from itertools import islice
from typing import Deque, Iterator

from .similarity import Metric, SimilarityFn, metric_fn


class SimilarityBuffer:
    """Remember the most recent comparison keys and report near-duplicates.

    Keys are kept most-recent first. A match consumes the matched entry, and
    the new key always takes the front slot, so one old key is never matched
    twice by a run of near-duplicates.
    """

    def __init__(
        self,
        capacity: int = 100,
        threshold: float = 0.85,
        metric: Metric | str = Metric.JARO,
        *,
        similarity: SimilarityFn | None = None,
    ) -> None:
        if capacity < 0:
            raise ValueError("capacity must be a non-negative integer")
        self._threshold = threshold
        self._similarity = similarity or metric_fn(metric)
        self._capacity = capacity
        self._buf: Deque[str] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def threshold(self) -> float:
        return self._threshold

    def __len__(self) -> int:
        return len(self._buf)

    def __iter__(self) -> Iterator[str]:
        return iter(self._buf)

    def check_and_record(self, key: str) -> bool:
        matched = False
        for index, prev in enumerate(self._buf):
            if self._similarity(key, prev) >= self._threshold:
                del self._buf[index]
                matched = True
                break
        # a full deque drops its least recent key on appendleft
        self._buf.appendleft(key)
        return matched

    def resize(self, capacity: int) -> None:
        """Change the capacity, keeping the most recent keys that still fit."""
        if capacity < 0:
            raise ValueError("capacity must be a non-negative integer")
        self._capacity = capacity
        self._buf = deque(islice(self._buf, capacity), maxlen=capacity)

    def clear(self) -> None:
        """Forget every remembered key; the capacity is unchanged."""
        self._buf.clear()
