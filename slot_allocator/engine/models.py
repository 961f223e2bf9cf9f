"""
Domain Models

Immutable slot and provider records, the score weights, and builders for
the fixed slot grid and the provider roster.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from slot_allocator.constants.constants import SLOT_ID_SEPARATOR
from slot_allocator.constants.thresholds import (
    DEFAULT_W1,
    MAX_WEIGHT,
    MIN_WEIGHT,
    WEIGHT_DECIMALS,
)


@dataclass(frozen=True)
class Slot:
    """A fixed unit of schedulable time. `index` defines earliness."""
    id: str
    index: int
    hour: int
    minute: int
    label: str


@dataclass(frozen=True)
class Provider:
    """A resource competing for slots. `capacity` is the license count."""
    id: int
    name: str
    capacity: int


@dataclass
class Weights:
    """
    Score weights. w1 scales the remaining-slots share, w2 the scarcity
    bonus. They always sum to 1.0 and each stays within [0.1, 0.9].
    """
    w1: float = DEFAULT_W1
    w2: float = field(init=False)

    def __post_init__(self):
        self.set_w1(self.w1)

    def set_w1(self, value: float) -> None:
        self.w1 = _clamp_weight(value)
        self.w2 = round(1.0 - self.w1, WEIGHT_DECIMALS)

    def set_w2(self, value: float) -> None:
        self.w2 = _clamp_weight(value)
        self.w1 = round(1.0 - self.w2, WEIGHT_DECIMALS)

    def as_dict(self) -> Dict[str, float]:
        return {"w1": self.w1, "w2": self.w2}


def _clamp_weight(value: float) -> float:
    return round(max(MIN_WEIGHT, min(MAX_WEIGHT, float(value))), WEIGHT_DECIMALS)


# ============================================================================
# Builders
# ============================================================================

def generate_time_slots(start_hour: int, end_hour: int, interval_minutes: int) -> List[Slot]:
    """
    Build the ordered slot sequence, e.g. 10:00, 10:10, ... 12:50.

    Slot ids are "{hour}-{minute}" without padding ("10-0", "10-30").
    """
    slots: List[Slot] = []
    for hour in range(start_hour, end_hour):
        for minute in range(0, 60, interval_minutes):
            slots.append(Slot(
                id=f"{hour}{SLOT_ID_SEPARATOR}{minute}",
                index=len(slots),
                hour=hour,
                minute=minute,
                label=f"{hour:02d}:{minute:02d}",
            ))
    return slots


def build_providers(records: Iterable[Dict[str, Any]]) -> List[Provider]:
    """Turn raw {id, name, capacity} records into Provider objects."""
    return [
        Provider(id=int(r["id"]), name=str(r["name"]), capacity=int(r["capacity"]))
        for r in records
    ]


def find_slot(slots: Iterable[Slot], slot_id: str) -> Optional[Slot]:
    for slot in slots:
        if slot.id == slot_id:
            return slot
    return None
