"""
Algorithms Package

Pure scoring and selection algorithms:
- availability_score: Provider priority score (remaining share + scarcity bonus)
- resolver: Per-slot owner resolution with deterministic tie-break
- sampling: Percentile band slicing and seeded sampling for the simulation

Scoring and resolution are deterministic. Only `sampling` draws random
numbers, from a caller-supplied random.Random.
"""

from slot_allocator.algorithms.availability_score import score, scarcity_decay, truncate_score
from slot_allocator.algorithms.resolver import (
    ResolvedSlot,
    slot_hash,
    resolve,
    resolve_all,
    is_assignable,
)
from slot_allocator.algorithms.sampling import percentile_band, sample_band

__all__ = [
    "score",
    "scarcity_decay",
    "truncate_score",
    "ResolvedSlot",
    "slot_hash",
    "resolve",
    "resolve_all",
    "is_assignable",
    "percentile_band",
    "sample_band",
]
