"""
Allocation Session

Single-writer facade over one allocation universe: the provider roster,
the fixed slot grid, the score weights, the commitment store and the
simulation driver. The API layer talks only to this object.

Observers subscribe with a plain callable and receive a SessionEvent after
every state change (toggle, weight change, reset, pending marks, commits,
run-state transitions).

Usage:
    from slot_allocator.engine.session import get_session

    session = get_session()
    owner = session.resolve("10-30")
    session.toggle(owner, "10-30")
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from slot_allocator.algorithms import resolver
from slot_allocator.algorithms.availability_score import score, truncate_score
from slot_allocator.constants.constants import (
    DEFAULT_PROVIDERS,
    EVENT_RESET,
    EVENT_TOGGLED,
    EVENT_WEIGHTS_CHANGED,
)
from slot_allocator.core.errors import NotFoundError, ValidationError
from slot_allocator.engine.commitment_store import CommitmentStore
from slot_allocator.engine.models import (
    Provider,
    Slot,
    Weights,
    build_providers,
    find_slot,
    generate_time_slots,
)
from slot_allocator.engine.simulation import SimulationDriver

logger = logging.getLogger(__name__)


@dataclass
class SessionEvent:
    """Notification sent to observers after a state change."""
    type: str
    payload: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[SessionEvent], None]


class AllocationSession:
    """Providers, slots, weights, commitments and the driver, kept together."""

    def __init__(
        self,
        providers: Sequence[Provider],
        slots: Sequence[Slot],
        weights: Optional[Weights] = None,
        rng: Optional[random.Random] = None,
        period_ms: Optional[int] = None,
        visibility_delay_ms: Optional[int] = None,
        settle_delay_ms: Optional[int] = None,
        sleep: Optional[Callable[[float], Any]] = None
    ):
        self.providers: List[Provider] = list(providers)
        self.slots: List[Slot] = sorted(slots, key=lambda s: s.index)
        self.weights = weights or Weights()
        self.store = CommitmentStore()
        self._listeners: List[Listener] = []

        self.driver = SimulationDriver(
            session=self,
            rng=rng,
            period_ms=period_ms,
            visibility_delay_ms=visibility_delay_ms,
            settle_delay_ms=settle_delay_ms,
            sleep=sleep,
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "AllocationSession":
        """Build a session from environment configuration."""
        records = settings.PROVIDERS_JSON or DEFAULT_PROVIDERS
        seed = settings.SIM_SEED

        session = cls(
            providers=build_providers(records),
            slots=generate_time_slots(
                settings.SLOT_START_HOUR,
                settings.SLOT_END_HOUR,
                settings.SLOT_INTERVAL_MINUTES,
            ),
            weights=Weights(w1=settings.DEFAULT_W1),
            rng=random.Random(seed) if seed is not None else None,
            period_ms=settings.SIM_ITERATION_PERIOD_MS,
            visibility_delay_ms=settings.SIM_VISIBILITY_DELAY_MS,
            settle_delay_ms=settings.SIM_SETTLE_DELAY_MS,
        )
        logger.info(
            f"Session ready: {len(session.providers)} providers, {len(session.slots)} slots, "
            f"weights={session.weights.as_dict()}, seed={seed}"
        )
        return session

    # ==================== Lookups ====================

    @property
    def total_slots(self) -> int:
        return len(self.slots)

    def get_provider(self, provider_id: int) -> Optional[Provider]:
        for provider in self.providers:
            if provider.id == provider_id:
                return provider
        return None

    def priority_order(self) -> List[int]:
        """Provider ids by license count ascending (stable for equal counts)."""
        return [p.id for p in sorted(self.providers, key=lambda p: p.capacity)]

    def require_provider(self, provider_id: int) -> Provider:
        provider = self.get_provider(provider_id)
        if provider is None:
            raise NotFoundError(
                f"Unknown provider {provider_id}",
                details={"provider_id": provider_id}
            )
        return provider

    def require_slot(self, slot_id: str) -> Slot:
        slot = find_slot(self.slots, slot_id)
        if slot is None:
            raise NotFoundError(f"Unknown slot {slot_id}", details={"slot_id": slot_id})
        return slot

    # ==================== Scoring and Resolution ====================

    def _store_or_default(self, store: Optional[CommitmentStore]) -> CommitmentStore:
        # An empty working copy is falsy (__len__), so compare against None
        return self.store if store is None else store

    def score(self, provider_id: int, store: Optional[CommitmentStore] = None) -> float:
        provider = self.require_provider(provider_id)
        return score(provider, self._store_or_default(store), self.total_slots, self.weights)

    def scores(self) -> List[Dict[str, Any]]:
        """Raw and truncated score per provider, in roster order."""
        result = []
        for provider in self.providers:
            raw = score(provider, self.store, self.total_slots, self.weights)
            result.append({
                "provider_id": provider.id,
                "score": raw,
                "truncated": truncate_score(raw),
                "committed": self.store.count(provider.id),
            })
        return result

    def resolve(self, slot_id: str, store: Optional[CommitmentStore] = None) -> Optional[int]:
        return resolver.resolve(
            slot_id, self._store_or_default(store), self.providers, self.total_slots, self.weights
        )

    def resolve_all(self, store: Optional[CommitmentStore] = None) -> List[resolver.ResolvedSlot]:
        return resolver.resolve_all(
            self._store_or_default(store), self.providers, self.slots, self.weights
        )

    def is_assignable(self, provider_id: int, slot_id: str) -> bool:
        return resolver.is_assignable(
            provider_id, slot_id, self.store, self.providers, self.total_slots, self.weights
        )

    # ==================== Mutations ====================

    def toggle(self, provider_id: int, slot_id: str) -> bool:
        """Manual toggle of one pair. Returns the new membership."""
        committed = self.store.toggle(provider_id, slot_id)
        logger.info(f"Manual toggle provider={provider_id} slot={slot_id} committed={committed}")

        self.emit(EVENT_TOGGLED, {
            "provider_id": provider_id,
            "slot_id": slot_id,
            "committed": committed,
        })
        self.driver.check_termination()
        return committed

    def set_weights(self, w1: Optional[float] = None, w2: Optional[float] = None) -> Weights:
        """
        Change the score weights. Exactly one of w1/w2 must be given; the
        other becomes its complement. Existing commitments are discarded
        because their scores no longer mean the same thing.
        """
        if (w1 is None) == (w2 is None):
            raise ValidationError(
                "Provide exactly one of w1 or w2",
                details={"w1": w1, "w2": w2}
            )

        if w1 is not None:
            self.weights.set_w1(w1)
        else:
            self.weights.set_w2(w2)

        self._clear_commitments()
        logger.info(f"Weights changed to {self.weights.as_dict()}, commitments cleared")

        self.emit(EVENT_WEIGHTS_CHANGED, self.weights.as_dict())
        return self.weights

    def reset(self) -> None:
        """Clear all commitments and marks without touching the run state."""
        self._clear_commitments()
        logger.info("Commitments reset")
        self.emit(EVENT_RESET, {})

    def _clear_commitments(self) -> None:
        self.store.clear()
        self.driver.clear_marks()

    # ==================== Observers ====================

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event_type: str, payload: Optional[Dict[str, Any]] = None) -> None:
        event = SessionEvent(type=event_type, payload=payload or {})
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.exception(f"Session listener failed on {event_type}: {e}")

    # ==================== Snapshot ====================

    def snapshot(self) -> Dict[str, Any]:
        """Everything a presentation layer needs to redraw the grid."""
        resolved = {entry.slot_id: entry.provider_id for entry in self.resolve_all()}
        slot_order = {slot.id: slot.index for slot in self.slots}

        def ordered(pairs):
            return [
                {"provider_id": pid, "slot_id": sid}
                for pid, sid in sorted(pairs, key=lambda p: (p[0], slot_order.get(p[1], -1)))
            ]

        return {
            "providers": [
                {"id": p.id, "name": p.name, "capacity": p.capacity}
                for p in self.providers
            ],
            "slots": [
                {"id": s.id, "index": s.index, "label": s.label}
                for s in self.slots
            ],
            "priority_order": self.priority_order(),
            "weights": self.weights.as_dict(),
            "scores": self.scores(),
            "resolver": [
                {"slot_id": slot.id, "provider_id": resolved.get(slot.id)}
                for slot in self.slots
            ],
            "commitments": ordered(self.store.pairs()),
            "pending": ordered(self.driver.pending),
            "newly_committed": ordered(self.driver.newly_committed),
            "simulation": self.driver.status(),
        }


# ============================================================================
# Singleton
# ============================================================================

_session: Optional[AllocationSession] = None


def get_session() -> AllocationSession:
    """Get (and lazily build) the process-wide session."""
    global _session

    if _session is None:
        from slot_allocator.core.config import get_settings
        _session = AllocationSession.from_settings(get_settings())

    return _session


def reset_session(session: Optional[AllocationSession] = None) -> None:
    """Replace the process-wide session (None = rebuild from settings on next use)."""
    global _session
    _session = session
