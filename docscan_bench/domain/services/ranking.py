"""
Ranking of benchmark results.

Works on any result exposing is_disqualified, score, elapsed_seconds and
model_name: visual and text phase results as well as model pair results.
"""

from typing import Iterable, List, Optional, TypeVar

T = TypeVar("T")


def ranked_by_score(results: Iterable[T]) -> List[T]:
    """
    Drop disqualified results and order the rest by score descending,
    breaking ties by elapsed time ascending (faster wins).
    """
    qualifying = [r for r in results if not r.is_disqualified]
    return sorted(qualifying, key=lambda r: (-r.score, r.elapsed_seconds))


def best_model_name(results: Iterable[T]) -> Optional[str]:
    ranked = ranked_by_score(results)
    return ranked[0].model_name if ranked else None
