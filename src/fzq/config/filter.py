from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from ..core.keys import KeyOptions
from ..core.similarity import Metric

DEFAULT_BUFFER_SIZE = 100
DEFAULT_METRIC = Metric.JARO
DEFAULT_THRESHOLD = 0.85

SETTINGS_KEYS = frozenset(
    {
        "buffer_size",
        "metric",
        "threshold",
        "skip_fields",
        "skip_chars",
        "check_chars",
        "ignore_case",
        "all_similar",
        "line_number",
    }
)


@dataclass(frozen=True)
class FilterSettings:
    buffer_size: int = DEFAULT_BUFFER_SIZE
    metric: Metric = DEFAULT_METRIC
    threshold: float = DEFAULT_THRESHOLD
    keys: KeyOptions = field(default_factory=KeyOptions)
    all_similar: bool = False
    line_number: bool = False


def _ensure_non_negative_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{field_name} must be a non-negative integer")
    return value


def _optional_count(value: Any, field_name: str) -> Optional[int]:
    if value is None:
        return None
    return _ensure_non_negative_int(value, field_name)


def _ensure_threshold(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("threshold must be a number between 0.0 and 1.0")
    threshold = float(value)
    if not 0.0 <= threshold <= 1.0:
        raise ValueError("threshold must be a number between 0.0 and 1.0")
    return threshold


def _ensure_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{field_name} must be a boolean")
    return value


def load_filter_settings(settings: Mapping[str, Any]) -> FilterSettings:
    """Validate a plain mapping into :class:`FilterSettings`.

    Missing keys and ``None`` values fall back to the defaults. Options may
    also sit under a ``"filter"`` block, as in a settings file.
    """
    if not isinstance(settings, Mapping):
        raise ValueError("settings must be a mapping")
    block = settings.get("filter", settings)
    if not isinstance(block, Mapping):
        raise ValueError("filter must be a mapping")

    unknown = sorted(str(key) for key in block if key not in SETTINGS_KEYS)
    if block is not settings:
        unknown += sorted(str(key) for key in settings if key != "filter")
    if unknown:
        raise ValueError(f"unknown settings: {', '.join(unknown)}")

    def _get(key: str, default: Any) -> Any:
        value = block.get(key)
        return default if value is None else value

    buffer_size = _ensure_non_negative_int(_get("buffer_size", DEFAULT_BUFFER_SIZE), "buffer_size")
    metric = Metric.parse(_get("metric", DEFAULT_METRIC))
    threshold = _ensure_threshold(_get("threshold", DEFAULT_THRESHOLD))
    keys = KeyOptions(
        skip_fields=_optional_count(block.get("skip_fields"), "skip_fields"),
        skip_chars=_optional_count(block.get("skip_chars"), "skip_chars"),
        check_chars=_optional_count(block.get("check_chars"), "check_chars"),
        ignore_case=_ensure_bool(_get("ignore_case", False), "ignore_case"),
    )
    return FilterSettings(
        buffer_size=buffer_size,
        metric=metric,
        threshold=threshold,
        keys=keys,
        all_similar=_ensure_bool(_get("all_similar", False), "all_similar"),
        line_number=_ensure_bool(_get("line_number", False), "line_number"),
    )


__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "DEFAULT_METRIC",
    "DEFAULT_THRESHOLD",
    "FilterSettings",
    "SETTINGS_KEYS",
    "load_filter_settings",
]
