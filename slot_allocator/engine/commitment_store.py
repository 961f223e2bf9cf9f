"""
Commitment Store

Authoritative sparse relation of finalized (provider, slot) pairs.

Manual control flips pairs with toggle(); the simulation driver only ever
adds through commit(). clear() is the only bulk removal and bumps
`generation`, which lets an in-flight simulation iteration notice that the
state it sampled from has been thrown away.
"""

import logging
from typing import List, Set, Tuple

logger = logging.getLogger(__name__)

Pair = Tuple[int, str]


class CommitmentStore:
    """Set of committed (provider_id, slot_id) pairs."""

    def __init__(self):
        self._pairs: Set[Pair] = set()
        self.generation = 0

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, pair: Pair) -> bool:
        return pair in self._pairs

    def is_committed(self, provider_id: int, slot_id: str) -> bool:
        return (provider_id, slot_id) in self._pairs

    def count(self, provider_id: int) -> int:
        """Number of slots committed to one provider."""
        return sum(1 for pid, _ in self._pairs if pid == provider_id)

    def toggle(self, provider_id: int, slot_id: str) -> bool:
        """
        Flip membership of a pair.

        Returns:
            True if the pair is committed after the call.
        """
        pair = (provider_id, slot_id)
        if pair in self._pairs:
            self._pairs.discard(pair)
            return False
        self._pairs.add(pair)
        return True

    def commit(self, provider_id: int, slot_id: str) -> None:
        """Mark a pair committed. Committing twice is a no-op."""
        self._pairs.add((provider_id, slot_id))

    def clear(self) -> None:
        if self._pairs:
            logger.debug(f"Clearing {len(self._pairs)} commitments")
        self._pairs.clear()
        self.generation += 1

    def copy(self) -> "CommitmentStore":
        """Detached working copy (same generation) for hypothetical commits."""
        clone = CommitmentStore()
        clone._pairs = set(self._pairs)
        clone.generation = self.generation
        return clone

    def pairs(self) -> List[Pair]:
        """Committed pairs sorted by provider then slot id."""
        return sorted(self._pairs)
