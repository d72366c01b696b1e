from __future__ import annotations

import logging

import pytest

from fzq.config.filter import FilterSettings
from fzq.core.keys import KeyOptions
from fzq.core.similarity import Metric
from fzq.core.stream import RawLine, StreamFilter, filter_lines
from fzq.infra.metrics import InMemoryMetrics


def test_default_settings_emit_novel_lines() -> None:
    assert filter_lines(["test 1", "test 2", "hello", "test 3"]) == ["test 1", "hello"]


@pytest.mark.parametrize(
    "settings,lines,expected",
    [
        (
            FilterSettings(buffer_size=1),
            ["test 1", "test 2", "foobar 1", "foobar 2", "test 3", "end"],
            ["test 1", "foobar 1", "test 3", "end"],
        ),
        (
            FilterSettings(threshold=0.99),
            ["test 1", "test 2", "test 3", "end"],
            ["test 1", "test 2", "test 3", "end"],
        ),
        (
            FilterSettings(keys=KeyOptions(skip_fields=1)),
            ["asdf test text 1", "hahaha test text 2", "lorem test text 3", "end"],
            ["asdf test text 1", "end"],
        ),
        (
            FilterSettings(keys=KeyOptions(ignore_case=True)),
            ["test 1", "TEST 2", "tEsT 3", "end"],
            ["test 1", "end"],
        ),
        (
            FilterSettings(all_similar=True),
            ["test 1", "test 2", "test 3", "end"],
            ["test 2", "test 3"],
        ),
        (
            FilterSettings(metric=Metric.DAMERAU_LEVENSHTEIN),
            ["test text 1", "test text 2", "test text 3", "end"],
            ["test text 1", "end"],
        ),
        (
            FilterSettings(keys=KeyOptions(check_chars=5)),
            ["test asdf 1", "test foobar 2", "test hahaha 3", "end"],
            ["test asdf 1", "end"],
        ),
    ],
)
def test_filter_scenarios(settings: FilterSettings, lines: list[str], expected: list[str]) -> None:
    assert filter_lines(lines, settings) == expected


def test_emitted_text_is_original_line_not_key() -> None:
    settings = FilterSettings(keys=KeyOptions(skip_fields=1, ignore_case=True))

    assert filter_lines(["ID-1 Hello World", "ID-2 HELLO WORLD", "ID-3 bye"], settings) == [
        "ID-1 Hello World",
        "ID-3 bye",
    ]


def test_line_numbers_prefix_output() -> None:
    settings = FilterSettings(line_number=True)

    assert filter_lines(["test 1", "test 2", "test 3", "end"], settings) == ["1:test 1", "4:end"]


def test_line_numbers_with_all_similar() -> None:
    settings = FilterSettings(line_number=True, all_similar=True)

    assert filter_lines(["test 1", "test 2", "test 3", "end"], settings) == ["2:test 2", "3:test 3"]


def test_process_keeps_caller_position() -> None:
    stream_filter = StreamFilter(FilterSettings(line_number=True))

    assert stream_filter.process(RawLine(41, "test 1")) == "41:test 1"
    assert stream_filter.process(RawLine(42, "test 2")) is None
    assert list(stream_filter.buffer) == ["test 2"]


def test_default_and_inverted_modes_partition_input() -> None:
    lines = ["alpha", "alpha 1", "beta", "gamma", "beta 2", "alpha 2", "delta"]

    novel = filter_lines(lines)
    similar = filter_lines(lines, FilterSettings(all_similar=True))

    assert sorted(novel + similar) == sorted(lines)
    assert not set(novel) & set(similar)


def test_run_is_lazy() -> None:
    seen: list[str] = []

    def source():
        for line in ["test 1", "hello", "test 2"]:
            seen.append(line)
            yield line

    output = StreamFilter().run(source())
    assert next(output) == "test 1"
    assert seen == ["test 1"]


def test_metrics_count_lines() -> None:
    metrics = InMemoryMetrics()

    filter_lines(["test 1", "test 2", "hello", "test 3"], metrics=metrics)

    assert metrics.counter("lines.read") == 4
    assert metrics.counter("lines.similar") == 2
    assert metrics.counter("lines.emitted") == 2
    observation = metrics.snapshot().observations["key.length"][()]
    assert observation.count == 4
    assert observation.maximum == 6


def test_logs_similar_lines_and_summary(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="fzq")

    filter_lines(["test 1", "test 2", "hello"])

    similar = [record for record in caplog.records if getattr(record, "event", "") == "line_similar"]
    assert [record.position for record in similar] == [2]
    summary = next(
        record for record in caplog.records if getattr(record, "event", "") == "stream_complete"
    )
    assert summary.lines_read == 3
    assert summary.lines_emitted == 2
    assert summary.lines_similar == 1
