from __future__ import annotations

import enum
from typing import Callable, Dict

from rapidfuzz.distance import DamerauLevenshtein, Jaro, JaroWinkler, Levenshtein

SimilarityFn = Callable[[str, str], float]


class Metric(enum.Enum):
    """String metrics available for matching lines."""

    DAMERAU_LEVENSHTEIN = "DamerauLevenshtein"
    LEVENSHTEIN = "Levenshtein"
    JARO = "Jaro"
    JARO_WINKLER = "JaroWinkler"

    @classmethod
    def parse(cls, name: str | Metric) -> Metric:
        """Resolve a metric selector case-insensitively.

        ``"JaroWinkler"``, ``"jaro_winkler"`` and ``"jaro-winkler"`` all select
        the same metric.
        """
        if isinstance(name, Metric):
            return name
        if not isinstance(name, str):
            raise ValueError(f"metric must be a string, got {type(name).__name__}")
        wanted = _canonical(name)
        for metric in cls:
            if _canonical(metric.value) == wanted:
                return metric
        choices = ", ".join(metric.value for metric in cls)
        raise ValueError(f"unsupported metric: {name!r} (choose from {choices})")

    @classmethod
    def variants(cls) -> list[str]:
        return [metric.value for metric in cls]

    def __str__(self) -> str:
        return self.value


def _canonical(name: str) -> str:
    return name.replace("-", "").replace("_", "").strip().lower()


def _scored(similarity: SimilarityFn) -> SimilarityFn:
    # identical inputs, two empty strings included, always score 1.0
    def score(a: str, b: str) -> float:
        if a == b:
            return 1.0
        return float(similarity(a, b))

    return score


normalized_levenshtein = _scored(Levenshtein.normalized_similarity)
normalized_damerau_levenshtein = _scored(DamerauLevenshtein.normalized_similarity)
jaro = _scored(Jaro.similarity)
jaro_winkler = _scored(JaroWinkler.similarity)


_METRIC_FUNCTIONS: Dict[Metric, SimilarityFn] = {
    Metric.DAMERAU_LEVENSHTEIN: normalized_damerau_levenshtein,
    Metric.LEVENSHTEIN: normalized_levenshtein,
    Metric.JARO: jaro,
    Metric.JARO_WINKLER: jaro_winkler,
}


def metric_fn(metric: Metric | str) -> SimilarityFn:
    """Return the similarity function for ``metric``; scores are in [0.0, 1.0]."""
    return _METRIC_FUNCTIONS[Metric.parse(metric)]


__all__ = [
    "Metric",
    "SimilarityFn",
    "metric_fn",
    "normalized_levenshtein",
    "normalized_damerau_levenshtein",
    "jaro",
    "jaro_winkler",
]
