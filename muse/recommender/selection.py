"""
Weighting, first-pick narrowing and weighted sampling.

Everything here is pure in-memory work; the random source is always passed
in so callers (and tests) decide whether draws are reproducible.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple, TypeVar

from muse.recommender.config import SelectionConfig
from muse.recommender.errors import SelectionInvariantError

T = TypeVar("T")

_system_random = random.SystemRandom()


def default_rng() -> random.Random:
    return _system_random


def calculate_weight(movie: Any) -> float:
    """Rating scaled to 0..1 times log-damped popularity."""
    rating_score = float(movie.vote_average or 0) / 10
    popularity_score = math.log10((movie.vote_count or 0) + 1)
    return rating_score * popularity_score


@dataclass
class WeightedCandidate:
    movie: Any
    weight: float
    genres: List[str] = field(default_factory=list)


def weighted_random_select(pairs: Sequence[Tuple[T, float]], rng: Optional[random.Random] = None) -> Optional[T]:
    """
    Draw one item with probability proportional to its weight.

    Zero weights are allowed; when every weight is zero the draw falls back
    to a uniform choice. Returns None only for an empty input.
    """
    if not pairs:
        return None
    rng = rng or default_rng()

    total = 0.0
    for _, weight in pairs:
        if weight < 0 or not math.isfinite(weight):
            raise SelectionInvariantError(f"invalid selection weight: {weight!r}")
        total += weight

    if total <= 0:
        return rng.choice(pairs)[0]

    threshold = rng.random() * total
    running = 0.0
    for item, weight in pairs:
        running += weight
        if running > threshold:
            return item

    # float rounding: hand back the last item that could have been drawn
    for item, weight in reversed(pairs):
        if weight > 0:
            return item
    return pairs[-1][0]


def apply_first_pick_bias(
    candidates: List[WeightedCandidate],
    is_first_pick: bool,
    percentile: Optional[float] = None,
    min_pool: Optional[int] = None,
) -> List[WeightedCandidate]:
    """
    Keep only the top ``percentile`` by weight on a session's first pick.
    Unset arguments fall back to SelectionConfig at call time.
    """
    if percentile is None:
        percentile = SelectionConfig.FIRST_PICK_TOP_PERCENTILE
    if min_pool is None:
        min_pool = SelectionConfig.FIRST_PICK_MIN_POOL
    if not is_first_pick or len(candidates) <= min_pool:
        return candidates

    ranked = sorted(candidates, key=lambda c: c.weight, reverse=True)
    # round first so 100 * 0.3 keeps 30, not 31
    keep = math.ceil(round(len(ranked) * percentile, 9))
    return ranked[:keep]
