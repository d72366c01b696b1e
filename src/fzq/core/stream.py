from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from ..config.filter import FilterSettings
from ..infra.metrics import MetricsRecorder, NullMetricsRecorder
from .dedupe import SimilarityBuffer
from .keys import derive_key


@dataclass(frozen=True, slots=True)
class RawLine:
    position: int
    text: str


class StreamFilter:
    """Emit lines that are novel (or, with ``all_similar``, near-duplicates).

    Each line's decision depends only on the lines before it; the buffer is
    updated for every line whether or not it is emitted.
    """

    def __init__(
        self,
        settings: FilterSettings | None = None,
        *,
        metrics: MetricsRecorder | None = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._settings = settings or FilterSettings()
        self._buffer = SimilarityBuffer(
            capacity=self._settings.buffer_size,
            threshold=self._settings.threshold,
            metric=self._settings.metric,
        )
        self._metrics = metrics or NullMetricsRecorder()
        self._logger = logger or logging.getLogger(__name__)
        self._read = 0
        self._emitted = 0
        self._similar = 0

    @property
    def settings(self) -> FilterSettings:
        return self._settings

    @property
    def buffer(self) -> SimilarityBuffer:
        return self._buffer

    def is_similar(self, text: str) -> bool:
        key = derive_key(text, self._settings.keys)
        self._metrics.observe("key.length", len(key))
        return self._buffer.check_and_record(key)

    def process(self, line: RawLine) -> Optional[str]:
        """Return the text to write for ``line``, or ``None`` to drop it."""
        self._read += 1
        self._metrics.increment("lines.read")
        similar = self.is_similar(line.text)
        if similar:
            self._similar += 1
            self._metrics.increment("lines.similar")
            self._logger.debug(
                "line_similar",
                extra={"event": "line_similar", "position": line.position},
            )
        if similar != self._settings.all_similar:
            return None
        self._emitted += 1
        self._metrics.increment("lines.emitted")
        if self._settings.line_number:
            return f"{line.position}:{line.text}"
        return line.text

    def run(self, lines: Iterable[str]) -> Iterator[str]:
        for position, text in enumerate(lines, start=1):
            out = self.process(RawLine(position, text))
            if out is not None:
                yield out
        self._logger.info(
            "stream_complete",
            extra={
                "event": "stream_complete",
                "lines_read": self._read,
                "lines_emitted": self._emitted,
                "lines_similar": self._similar,
            },
        )


def filter_lines(
    lines: Iterable[str],
    settings: FilterSettings | None = None,
    *,
    metrics: MetricsRecorder | None = None,
) -> list[str]:
    return list(StreamFilter(settings, metrics=metrics).run(lines))


__all__ = ["RawLine", "StreamFilter", "filter_lines"]
