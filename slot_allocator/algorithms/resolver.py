"""
Assignment Resolver

Determines which provider currently owns (may claim) a slot:

1. Candidates = providers without a commitment for the slot.
2. Each candidate's availability score is truncated to 2 decimals.
3. The highest truncated score wins.
4. Ties are broken deterministically: candidates sorted by id ascending,
   index = (sum of the slot id's numeric components) mod (number tied).

The tie-break hash deliberately ignores which component is the hour and
which the minute, so "10-30" and "30-10" hash alike.

Same store contents always resolve to the same provider.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from slot_allocator.algorithms.availability_score import score, truncate_score
from slot_allocator.constants.constants import SLOT_ID_SEPARATOR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedSlot:
    """One row of resolver output: the slot and the provider that owns it."""
    slot_id: str
    provider_id: int
    time_index: int


# ============================================================================
# Resolution Functions
# ============================================================================


def slot_hash(slot_id: str) -> int:
    """Sum of the integer components of a slot id ("10-30" -> 40)."""
    return sum(int(part or 0) for part in slot_id.split(SLOT_ID_SEPARATOR))


def resolve(
    slot_id: str,
    store: Any,
    providers: Sequence[Any],
    total_slots: int,
    weights: Any
) -> Optional[int]:
    """
    Resolve the owning provider for a single slot.

    Args:
        slot_id: Slot identifier ("hour-minute").
        store: Commitment store exposing `is_committed` and `count`.
        providers: All providers of the session.
        total_slots: Size of the fixed slot sequence.
        weights: Current score weights.

    Returns:
        Provider id, or None when every provider already holds the slot.
    """
    candidates = [p for p in providers if not store.is_committed(p.id, slot_id)]
    if not candidates:
        return None

    truncated: Dict[int, float] = {
        p.id: truncate_score(score(p, store, total_slots, weights))
        for p in candidates
    }
    return _pick_owner(slot_id, truncated)


def _pick_owner(slot_id: str, truncated: Dict[int, float]) -> int:
    """Highest truncated score wins; ties fall back to the slot hash."""
    best = max(truncated.values())
    tied = sorted(pid for pid, value in truncated.items() if value == best)

    if len(tied) == 1:
        return tied[0]

    return tied[slot_hash(slot_id) % len(tied)]


def resolve_all(
    store: Any,
    providers: Sequence[Any],
    slots: Sequence[Any],
    weights: Any
) -> List[ResolvedSlot]:
    """
    Resolve every slot, dropping exhausted ones, in slot time order.

    Scores only depend on per-provider commitment counts, so they are
    computed once and reused for every slot.
    """
    total_slots = len(slots)
    truncated = {
        p.id: truncate_score(score(p, store, total_slots, weights))
        for p in providers
    }

    resolved: List[ResolvedSlot] = []
    for slot in sorted(slots, key=lambda s: s.index):
        candidates = {
            p.id: truncated[p.id]
            for p in providers
            if not store.is_committed(p.id, slot.id)
        }
        if not candidates:
            continue

        owner = _pick_owner(slot.id, candidates)
        resolved.append(ResolvedSlot(slot_id=slot.id, provider_id=owner, time_index=slot.index))

    return resolved


def is_assignable(
    provider_id: int,
    slot_id: str,
    store: Any,
    providers: Sequence[Any],
    total_slots: int,
    weights: Any
) -> bool:
    """
    Whether a manual toggle is offered for this cell.

    True when the provider already holds the slot (so it can be released)
    or is the provider the resolver currently names for it.
    """
    if store.is_committed(provider_id, slot_id):
        return True
    return resolve(slot_id, store, providers, total_slots, weights) == provider_id
