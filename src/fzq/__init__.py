"""Fuzzy line filter: drop (or keep only) lines similar to recently seen ones.

```python
from fzq import SimilarityBuffer

buffer = SimilarityBuffer(capacity=100, threshold=0.85, metric="Jaro")
assert buffer.check_and_record("test 1") is False
assert buffer.check_and_record("test 2") is True
assert buffer.check_and_record("hello") is False
assert buffer.check_and_record("test 3") is True
```
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config.filter import FilterSettings, load_filter_settings
from .core.dedupe import SimilarityBuffer
from .core.keys import KeyOptions, derive_key
from .core.similarity import Metric, metric_fn
from .core.stream import RawLine, StreamFilter, filter_lines

__all__ = [
    "FilterSettings",
    "KeyOptions",
    "Metric",
    "RawLine",
    "SimilarityBuffer",
    "StreamFilter",
    "__version__",
    "derive_key",
    "filter_lines",
    "load_filter_settings",
    "metric_fn",
]
