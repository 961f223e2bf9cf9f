"""
Commitment Store and Session Tests

Tests for the manual control surface:
- CommitmentStore toggle/commit/clear/copy
- Weights complement and clamping
- Slot grid and roster builders
- AllocationSession toggles, weight changes, resets and snapshots

Run: pytest slot_allocator/tests/test_store.py -v
"""

import pytest

from slot_allocator.constants.constants import EVENT_RESET, EVENT_TOGGLED, EVENT_WEIGHTS_CHANGED
from slot_allocator.core.config import Settings
from slot_allocator.core.errors import NotFoundError, ValidationError
from slot_allocator.engine.commitment_store import CommitmentStore
from slot_allocator.engine.models import Weights, build_providers, find_slot, generate_time_slots
from slot_allocator.engine.session import AllocationSession


# ==================== Commitment Store Tests ====================

def test_toggle_flips_membership():
    store = CommitmentStore()

    assert store.toggle(1, "10-0") is True
    assert store.is_committed(1, "10-0")
    assert (1, "10-0") in store

    assert store.toggle(1, "10-0") is False
    assert not store.is_committed(1, "10-0")
    assert len(store) == 0


def test_commit_is_idempotent():
    store = CommitmentStore()
    store.commit(2, "10-10")
    store.commit(2, "10-10")

    assert len(store) == 1
    assert store.count(2) == 1


def test_count_per_provider():
    store = CommitmentStore()
    store.commit(1, "10-0")
    store.commit(1, "10-10")
    store.commit(2, "10-0")

    assert store.count(1) == 2
    assert store.count(2) == 1
    assert store.count(3) == 0


def test_clear_bumps_generation():
    store = CommitmentStore()
    store.commit(1, "10-0")
    generation = store.generation

    store.clear()

    assert len(store) == 0
    assert store.generation == generation + 1


def test_copy_is_detached():
    store = CommitmentStore()
    store.commit(1, "10-0")

    clone = store.copy()
    clone.commit(2, "10-10")

    assert clone.generation == store.generation
    assert len(store) == 1
    assert len(clone) == 2


def test_pairs_are_sorted():
    store = CommitmentStore()
    store.commit(2, "10-0")
    store.commit(1, "10-10")
    store.commit(1, "10-0")

    assert store.pairs() == [(1, "10-0"), (1, "10-10"), (2, "10-0")]


# ==================== Weights Tests ====================

def test_weights_complement_is_exact():
    weights = Weights(w1=0.3)

    assert weights.w1 == 0.3
    assert weights.w2 == 0.7

    weights.set_w2(0.25)
    assert weights.w1 == 0.75
    assert weights.w1 + weights.w2 == pytest.approx(1.0)


@pytest.mark.parametrize("value,expected_w1,expected_w2", [
    (0.95, 0.9, 0.1),
    (0.0, 0.1, 0.9),
    (-3, 0.1, 0.9),
])
def test_weights_are_clamped(value, expected_w1, expected_w2):
    weights = Weights()
    weights.set_w1(value)

    assert weights.w1 == expected_w1
    assert weights.w2 == expected_w2


def test_default_weights():
    assert Weights().as_dict() == {"w1": 0.8, "w2": 0.2}


# ==================== Builder Tests ====================

def test_generate_time_slots_default_window():
    slots = generate_time_slots(10, 13, 10)

    assert len(slots) == 18
    assert slots[0].id == "10-0"
    assert slots[0].label == "10:00"
    assert slots[3].id == "10-30"
    assert slots[-1].id == "12-50"
    assert [s.index for s in slots] == list(range(18))


def test_build_providers_and_find_slot():
    providers = build_providers([{"id": "5", "name": "NP Davis", "capacity": "4"}])
    slots = generate_time_slots(10, 11, 30)

    assert providers[0].id == 5
    assert providers[0].capacity == 4
    assert find_slot(slots, "10-30").index == 1
    assert find_slot(slots, "9-0") is None


# ==================== Session Tests ====================

def test_session_toggle_emits_event(make_session):
    session = make_session()
    events = []
    session.subscribe(events.append)

    assert session.toggle(4, "10-0") is True

    assert events[-1].type == EVENT_TOGGLED
    assert events[-1].payload == {"provider_id": 4, "slot_id": "10-0", "committed": True}
    assert session.resolve("10-0") == 2


def test_session_explicit_empty_store_is_used(make_session):
    """An empty working copy must not fall back to the live store."""
    session = make_session()
    session.toggle(4, "10-0")

    assert session.resolve("10-0") == 2
    assert session.resolve("10-0", CommitmentStore()) == 4


def test_set_weights_clears_commitments(make_session):
    session = make_session()
    session.toggle(4, "10-0")
    session.driver.newly_committed.add((4, "10-0"))
    events = []
    session.subscribe(events.append)

    weights = session.set_weights(w1=0.3)

    assert weights.w1 == 0.3
    assert weights.w2 == 0.7
    assert len(session.store) == 0
    assert not session.driver.newly_committed
    assert events[-1].type == EVENT_WEIGHTS_CHANGED
    assert events[-1].payload == {"w1": 0.3, "w2": 0.7}


@pytest.mark.parametrize("kwargs", [{}, {"w1": 0.3, "w2": 0.7}])
def test_set_weights_requires_exactly_one(make_session, kwargs):
    session = make_session()

    with pytest.raises(ValidationError):
        session.set_weights(**kwargs)


def test_reset_clears_store(make_session):
    session = make_session()
    session.toggle(4, "10-0")
    session.toggle(2, "10-10")
    events = []
    session.subscribe(events.append)

    session.reset()

    assert len(session.store) == 0
    assert events[-1].type == EVENT_RESET


def test_unknown_ids_raise_not_found(make_session):
    session = make_session()

    with pytest.raises(NotFoundError):
        session.require_provider(99)
    with pytest.raises(NotFoundError):
        session.require_slot("9-99")


def test_failing_listener_does_not_break_emit(make_session):
    session = make_session()
    received = []

    def broken(event):
        raise RuntimeError("observer failed")

    session.subscribe(broken)
    session.subscribe(received.append)
    session.toggle(4, "10-0")

    assert [e.type for e in received] == [EVENT_TOGGLED]


def test_snapshot_contents(make_session):
    session = make_session()
    session.toggle(4, "10-0")

    snapshot = session.snapshot()

    assert len(snapshot["providers"]) == 7
    assert snapshot["priority_order"] == [4, 2, 1, 5, 3, 6, 7]
    assert len(snapshot["slots"]) == 18
    assert snapshot["commitments"] == [{"provider_id": 4, "slot_id": "10-0"}]
    assert snapshot["resolver"][0] == {"slot_id": "10-0", "provider_id": 2}
    assert snapshot["simulation"]["state"] == "idle"
    assert snapshot["pending"] == []


def test_session_from_settings(monkeypatch):
    monkeypatch.setenv("PROVIDERS_JSON", '[{"id": 1, "name": "A", "capacity": 1}, {"id": 2, "name": "B", "capacity": 2}]')
    monkeypatch.setenv("SLOT_START_HOUR", "9")
    monkeypatch.setenv("SLOT_END_HOUR", "10")
    monkeypatch.setenv("SLOT_INTERVAL_MINUTES", "15")
    monkeypatch.setenv("DEFAULT_W1", "0.6")
    monkeypatch.setenv("SIM_SEED", "5")
    monkeypatch.setenv("SIM_ITERATION_PERIOD_MS", "100")

    session = AllocationSession.from_settings(Settings())

    assert [p.id for p in session.providers] == [1, 2]
    assert [s.id for s in session.slots] == ["9-0", "9-15", "9-30", "9-45"]
    assert session.weights.as_dict() == {"w1": 0.6, "w2": 0.4}
    assert session.driver.period_ms == 100


def test_settings_defaults(monkeypatch):
    for name in ("PROVIDERS_JSON", "SIM_SEED", "DEFAULT_W1", "SIM_ITERATION_PERIOD_MS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.PROVIDERS_JSON is None
    assert settings.SIM_SEED is None
    assert settings.DEFAULT_W1 == 0.8
    assert settings.SIM_ITERATION_PERIOD_MS == 1440


def test_run_id_filter_tags_records():
    import logging

    from slot_allocator.core.logging import RUN_ID, RunIdFilter, get_run_id, set_run_id

    token = RUN_ID.set("-")
    try:
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)
        RunIdFilter().filter(record)
        assert record.run_id == "-"

        set_run_id("abc12345")
        RunIdFilter().filter(record)
        assert record.run_id == "abc12345"
        assert get_run_id() == "abc12345"
    finally:
        RUN_ID.reset(token)


def test_priority_order_is_stable_for_equal_capacity(make_session):
    providers = build_providers([
        {"id": 9, "name": "C", "capacity": 2},
        {"id": 3, "name": "A", "capacity": 1},
        {"id": 5, "name": "B", "capacity": 2},
    ])
    session = make_session(providers=providers)

    assert session.priority_order() == [3, 9, 5]
