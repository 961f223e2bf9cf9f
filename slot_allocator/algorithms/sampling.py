"""
Percentile Band Sampling

Helpers used by the simulation driver to pick one resolver entry from a
contiguous, time-ordered slice of the resolver output.

A band [start, end) keeps the entries whose rank fraction i / n falls in
the interval. The random source is passed in so runs can be seeded.
"""

import math
import random
from typing import List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")


def percentile_band(
    entries: Sequence[T],
    band: Tuple[float, float],
    min_one: bool = False
) -> List[T]:
    """
    Slice a time-ordered sequence by rank fraction.

    Args:
        entries: Ordered entries (earliest first).
        band: (start, end) fractions, end exclusive.
        min_one: Widen the band to the first entry at `start` when it
            would otherwise be empty.

    Returns:
        Entries inside the band (may be empty).
    """
    n = len(entries)
    if n == 0:
        return []

    start, end = band
    selected = [entry for i, entry in enumerate(entries) if start <= i / n < end]

    if not selected and min_one:
        first = min(n - 1, math.ceil(start * n))
        selected = [entries[first]]

    return selected


def sample_band(
    entries: Sequence[T],
    band: Tuple[float, float],
    rng: random.Random,
    min_one: bool = False
) -> Optional[T]:
    """Pick one entry uniformly from the band, or None when it is empty."""
    candidates = percentile_band(entries, band, min_one=min_one)
    if not candidates:
        return None
    return candidates[rng.randrange(len(candidates))]
