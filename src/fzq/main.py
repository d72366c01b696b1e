"""Command-line entry point: ``fzq [options] [PATH]``.

Filters fuzzy matching lines from PATH (or standard input) and writes the
remaining lines to standard output.
"""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import os
import sys
from typing import IO, Any, ContextManager, Dict, Iterable, Iterator, Optional, Sequence

from . import __version__
from .config.filter import FilterSettings, load_filter_settings
from .config.loader import load_settings, merge_overrides
from .core.similarity import Metric
from .core.stream import StreamFilter
from .infra.metrics import InMemoryMetrics

_LOGGER = logging.getLogger("fzq")


def _count(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid count: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"count must be non-negative: {value!r}")
    return number


def _metric(value: str) -> Metric:
    try:
        return Metric.parse(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fzq",
        description=(
            "Filter fuzzy matching lines from INPUT (or standard input), "
            "writing to standard output."
        ),
    )
    parser.add_argument("path", nargs="?", metavar="PATH", help="input file (default: standard input)")
    parser.add_argument(
        "-D", "--all-similar", action="store_true", default=None, help="print similar lines"
    )
    parser.add_argument(
        "-b", "--buffer-size", type=_count, metavar="N", help="buffer last N lines to filter (default: 100)"
    )
    parser.add_argument(
        "-w", "--check-chars", type=_count, metavar="N", help="compare no more than N characters in lines"
    )
    parser.add_argument(
        "-i", "--ignore-case", action="store_true", default=None,
        help="ignore differences in case when comparing",
    )
    parser.add_argument(
        "-n", "--line-number", action="store_true", default=None,
        help="print line number with output lines",
    )
    parser.add_argument(
        "-m", "--metric", type=_metric, metavar="NAME",
        help=f"string metric to search similar lines: {', '.join(Metric.variants())} (default: Jaro)",
    )
    parser.add_argument(
        "-s", "--skip-chars", type=_count, metavar="N", help="avoid comparing the first N characters"
    )
    parser.add_argument(
        "-f", "--skip-fields", type=_count, metavar="N", help="avoid comparing the first N fields"
    )
    parser.add_argument(
        "-t", "--threshold", type=float, metavar="X",
        help=(
            "filter lines if similarity is equal or greater than the threshold; "
            "between 0.0 and 1.0, where 1.0 means an exact match (default: 0.85)"
        ),
    )
    parser.add_argument("-c", "--config", metavar="FILE", help="read default options from a JSON settings file")
    parser.add_argument("--stats", action="store_true", help="print run counters as JSON to standard error")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="log progress to standard error (repeat for debug)"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _configure_logging(verbosity: int, stream: IO[str]) -> logging.Handler:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter("fzq: %(message)s"))
    _LOGGER.addHandler(handler)
    _LOGGER.setLevel(level)
    return handler


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "buffer_size": args.buffer_size,
        "metric": args.metric,
        "threshold": args.threshold,
        "skip_fields": args.skip_fields,
        "skip_chars": args.skip_chars,
        "check_chars": args.check_chars,
        "ignore_case": args.ignore_case,
        "all_similar": args.all_similar,
        "line_number": args.line_number,
    }


def resolve_settings(args: argparse.Namespace) -> FilterSettings:
    base: Dict[str, Any] = load_settings(args.config) if args.config else {}
    return load_filter_settings(merge_overrides(base, _overrides(args)))


def read_lines(stream: Iterable[bytes]) -> Iterator[str]:
    """Yield UTF-8 lines without their ``\\n`` or ``\\r\\n`` terminator.

    Lines are decoded one at a time: an invalid byte raises
    ``UnicodeDecodeError`` only once every line before it has been yielded.
    """
    for raw in stream:
        if raw.endswith(b"\n"):
            raw = raw[:-1]
            if raw.endswith(b"\r"):
                raw = raw[:-1]
        yield raw.decode("utf-8")


def _open_input(path: Optional[str]) -> ContextManager[IO[bytes]]:
    if path is not None:
        return open(path, "rb")
    # standard input stays open for the rest of the process
    return contextlib.nullcontext(sys.stdin.buffer)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    previous_level = _LOGGER.level
    handler = _configure_logging(args.verbose, sys.stderr)
    try:
        return _run(parser, args)
    finally:
        _LOGGER.removeHandler(handler)
        _LOGGER.setLevel(previous_level)


def _run(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    try:
        settings = resolve_settings(args)
    except OSError as exc:
        parser.error(f"{exc.filename}: {exc.strerror}")
    except ValueError as exc:
        parser.error(str(exc))

    source = args.path if args.path is not None else "<stdin>"
    metrics = InMemoryMetrics()
    stream_filter = StreamFilter(settings, metrics=metrics)
    out = sys.stdout
    try:
        with _open_input(args.path) as stream:
            for text in stream_filter.run(read_lines(stream)):
                out.write(text + "\n")
                # written through before the next line is read
                out.flush()
    except BrokenPipeError:
        # silence the flush at interpreter exit once the reader is gone
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, out.fileno())
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
        _LOGGER.error(
            "%s: %s",
            source,
            reason,
            exc_info=_LOGGER.isEnabledFor(logging.INFO),
            extra={"event": "input_failed", "path": source},
        )
        return 1
    finally:
        if args.stats:
            json.dump(metrics.snapshot().to_dict(), sys.stderr, sort_keys=True)
            sys.stderr.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
