from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping


_LOGGER = logging.getLogger(__name__)


def load_settings(path: str) -> Dict[str, Any]:
    """Read a JSON object from ``path``.

    ``OSError`` propagates; malformed JSON or a non-object document raises
    ``ValueError``.
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"{path}: invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"{path}: settings must be a JSON object")
    _LOGGER.info(
        "settings_loaded",
        extra={"event": "settings_loaded", "path": path, "keys": sorted(data)},
    )
    return data


def merge_overrides(
    base: Mapping[str, Any], overrides: Mapping[str, Any]
) -> Dict[str, Any]:
    """Apply the non-``None`` values of ``overrides`` on top of ``base``.

    ``base`` may keep its options under a ``"filter"`` block; the result is
    always flat. A ``"filter"`` block that is not a mapping, or keys beside
    it, raise ``ValueError``.
    """
    block = _filter_block(base)
    merged: Dict[str, Any] = dict(block)
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value
    diff = _diff_mapping(block, merged)
    if diff:
        _LOGGER.debug(
            "settings_overridden",
            extra={"event": "settings_overridden", "diff": diff},
        )
    return merged


def _filter_block(base: Mapping[str, Any]) -> Mapping[str, Any]:
    if "filter" not in base:
        return base
    block = base["filter"]
    if not isinstance(block, Mapping):
        raise ValueError("filter must be a mapping")
    stray = sorted(str(key) for key in base if key != "filter")
    if stray:
        raise ValueError(f"unknown settings: {', '.join(stray)}")
    return block


def _diff_mapping(old: Mapping[str, Any], new: Mapping[str, Any]) -> Dict[str, Dict[str, Any]]:
    diff: Dict[str, Dict[str, Any]] = {}
    for key in sorted(set(old) | set(new), key=str):
        prev = old.get(key)
        curr = new.get(key)
        if prev != curr:
            diff[str(key)] = {"old": prev, "new": curr}
    return diff
