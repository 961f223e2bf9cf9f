"""
Availability Score Algorithm

Deterministic priority score for a provider given the current commitment
state:

    score = w1 * x + w2 * e^(-1.2 * (capacity - 1))

where x = (slots remaining for the provider) / (total number of slots).

The first term rewards providers with more uncommitted slots left, the
second gives providers with few licenses a scarcity bonus that fades
quickly as capacity grows.

No randomness and no side effects - the store is only read.
"""

import logging
import math
from decimal import ROUND_DOWN, Decimal
from typing import Any

from slot_allocator.constants.thresholds import DECAY_RATE, SCORE_DECIMALS

logger = logging.getLogger(__name__)


# ============================================================================
# Scoring Functions
# ============================================================================


def scarcity_decay(capacity: int) -> float:
    """Exponential scarcity bonus, exactly 1.0 for a single-license provider."""
    return math.exp(-DECAY_RATE * (capacity - 1))


def score(provider: Any, store: Any, total_slots: int, weights: Any) -> float:
    """
    Compute the availability score of one provider.

    Args:
        provider: Object with `id` and `capacity`.
        store: Commitment store exposing `count(provider_id)`.
        total_slots: Size of the fixed slot sequence.
        weights: Object with `w1` and `w2`.

    Returns:
        Score as float. A provider with capacity <= 0 scores +inf instead
        of raising.
    """
    if provider.capacity <= 0:
        logger.debug(f"Provider {provider.id} has capacity {provider.capacity}, scoring as infinite")
        return math.inf

    remaining = total_slots - store.count(provider.id)
    x = remaining / total_slots

    return weights.w1 * x + weights.w2 * scarcity_decay(provider.capacity)


def truncate_score(value: float, places: int = SCORE_DECIMALS) -> float:
    """
    Truncate a score toward zero to `places` decimals.

    Truncation (not rounding) decides how often providers tie. It works on
    the shortest decimal form of the float, so 0.29 stays 0.29 (no binary
    0.29 * 100 == 28.999999999999996 slip) while 0.2899999999995 still
    truncates to 0.28.
    """
    if not math.isfinite(value):
        return value

    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_DOWN))
