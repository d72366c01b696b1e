from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

_SEPARATORS = frozenset(" \t")


@dataclass(frozen=True, slots=True)
class KeyOptions:
    skip_fields: Optional[int] = None
    skip_chars: Optional[int] = None
    check_chars: Optional[int] = None
    ignore_case: bool = False


def skip_fields(text: str, count: int) -> str:
    """Drop the first ``count`` blank-separated fields and the separator after them.

    Returns an empty string when the text runs out before that separator.
    """
    fields = 0
    in_field = False
    for index, ch in enumerate(text):
        if ch in _SEPARATORS:
            in_field = False
            if fields >= count:
                return text[index + 1:]
        elif not in_field:
            fields += 1
            in_field = True
    return ""


def skip_chars(text: str, count: int) -> str:
    # shorter text is kept whole, unlike skip_fields which empties it
    if len(text) < count:
        return text
    return text[count:]


def check_chars(text: str, count: int) -> str:
    return text[:count]


def derive_key(line: str, options: KeyOptions) -> str:
    """Build the comparison key for ``line``.

    Steps run in a fixed order (fields, chars, truncation, case) and count
    code points, so a wide character is one unit.
    """
    key = line
    if options.skip_fields is not None:
        key = skip_fields(key, options.skip_fields)
    if options.skip_chars is not None:
        key = skip_chars(key, options.skip_chars)
    if options.check_chars is not None:
        key = check_chars(key, options.check_chars)
    if options.ignore_case:
        key = key.lower()
    return key


__all__ = ["KeyOptions", "derive_key", "skip_fields", "skip_chars", "check_chars"]
