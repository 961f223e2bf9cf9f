"""
Algorithm Tests

Tests for the deterministic allocation functions:
- availability_score.score() / truncate_score()
- resolver.resolve() / resolve_all() / is_assignable()
- sampling.percentile_band() / sample_band()

Run: pytest slot_allocator/tests/test_algorithms.py -v
"""

import math
import random

import pytest

from slot_allocator.algorithms.availability_score import scarcity_decay, score, truncate_score
from slot_allocator.algorithms.resolver import is_assignable, resolve, resolve_all, slot_hash
from slot_allocator.algorithms.sampling import percentile_band, sample_band
from slot_allocator.constants.thresholds import STAGE1_BAND, STAGE2_BAND, STAGE3_BAND
from slot_allocator.engine.commitment_store import CommitmentStore
from slot_allocator.engine.models import Provider, Weights, generate_time_slots


# ==================== Availability Score Tests ====================

def test_single_license_provider_scores_w1_plus_w2():
    """Decay term is exactly 1 for capacity 1, so an untouched provider scores w1 + w2."""
    provider = Provider(id=4, name="NP Brown", capacity=1)
    weights = Weights(w1=0.6)

    result = score(provider, CommitmentStore(), 18, weights)

    assert scarcity_decay(1) == 1.0
    assert result == pytest.approx(weights.w1 + weights.w2)
    assert result == pytest.approx(1.0)


def test_score_matches_formula():
    provider = Provider(id=2, name="NP Johnson", capacity=2)
    store = CommitmentStore()
    store.commit(2, "10-0")
    store.commit(2, "10-10")

    result = score(provider, store, 18, Weights(w1=0.8))

    expected = 0.8 * (16 / 18) + 0.2 * math.exp(-1.2)
    assert result == pytest.approx(expected)


def test_score_non_increasing_with_commitments():
    """More commitments for the same capacity never raise the score."""
    provider = Provider(id=3, name="NP Williams", capacity=5)
    slots = generate_time_slots(10, 13, 10)
    store = CommitmentStore()
    weights = Weights()

    previous = score(provider, store, len(slots), weights)
    for slot in slots:
        store.commit(provider.id, slot.id)
        current = score(provider, store, len(slots), weights)
        assert current <= previous
        previous = current


def test_zero_capacity_scores_infinite():
    provider = Provider(id=9, name="Unlicensed", capacity=0)

    result = score(provider, CommitmentStore(), 18, Weights())

    assert math.isinf(result)
    assert truncate_score(result) == math.inf


def test_truncate_score_truncates_instead_of_rounding():
    assert truncate_score(0.819) == 0.81
    assert truncate_score(0.8602) == 0.86
    assert truncate_score(0.999) == 0.99
    assert truncate_score(1.0) == 1.0


def test_truncate_score_ignores_binary_noise():
    """0.29 * 100 is 28.999999999999996 in binary; it must stay 0.29."""
    assert truncate_score(0.29) == 0.29
    assert truncate_score(0.57) == 0.57


def test_truncate_score_keeps_sub_hundredth_values_below():
    assert truncate_score(0.2899999999995) == 0.28
    assert truncate_score(0.8599999999999) == 0.85


# ==================== Resolver Tests ====================

def test_resolve_picks_highest_truncated_score(default_providers, default_slots):
    """With an empty store the single-license provider outranks everyone."""
    store = CommitmentStore()

    owner = resolve("10-0", store, default_providers, len(default_slots), Weights())

    assert owner == 4


def test_resolve_is_deterministic(default_providers, default_slots):
    store = CommitmentStore()
    store.commit(4, "10-0")
    store.commit(2, "10-10")

    owners = {
        resolve("10-20", store, default_providers, len(default_slots), Weights())
        for _ in range(20)
    }

    assert len(owners) == 1


def test_committed_provider_never_resolves_again(default_providers, default_slots):
    """Repeatedly committing the owner walks through every provider exactly once."""
    store = CommitmentStore()
    seen = []

    while True:
        owner = resolve("10-30", store, default_providers, len(default_slots), Weights())
        if owner is None:
            break
        assert owner not in seen
        assert not store.is_committed(owner, "10-30")
        seen.append(owner)
        store.commit(owner, "10-30")

    assert sorted(seen) == [p.id for p in default_providers]


def test_fully_committed_slot_resolves_to_none(default_providers, default_slots):
    store = CommitmentStore()
    for provider in default_providers:
        store.commit(provider.id, "11-20")

    assert resolve("11-20", store, default_providers, len(default_slots), Weights()) is None


def test_slot_hash_sums_components():
    assert slot_hash("10-30") == 40
    assert slot_hash("10-0") == 10
    # Component order is not normalized
    assert slot_hash("30-10") == slot_hash("10-30")


def test_tie_break_example():
    """Providers 3 and 7 tie; slot 10-30 hashes to 40, 40 mod 2 = 0 -> provider 3."""
    providers = [
        Provider(id=7, name="NP Taylor", capacity=5),
        Provider(id=3, name="NP Williams", capacity=5),
    ]
    slots = generate_time_slots(10, 13, 10)
    store = CommitmentStore()

    for _ in range(5):
        assert resolve("10-30", store, providers, len(slots), Weights()) == 3

    # 11 mod 2 = 1 -> second candidate by id
    assert resolve("11-0", store, providers, len(slots), Weights()) == 7


def test_tie_break_three_candidates():
    providers = [Provider(id=i, name=f"P{i}", capacity=2) for i in (1, 2, 3)]
    slots = generate_time_slots(10, 13, 10)

    # 10 + 10 = 20, 20 mod 3 = 2
    assert resolve("10-10", CommitmentStore(), providers, len(slots), Weights()) == 3


def test_resolve_all_orders_by_time_and_drops_exhausted(default_providers, default_slots):
    store = CommitmentStore()
    for provider in default_providers:
        store.commit(provider.id, "10-0")

    entries = resolve_all(store, default_providers, default_slots, Weights())

    assert len(entries) == len(default_slots) - 1
    assert "10-0" not in [e.slot_id for e in entries]
    indexes = [e.time_index for e in entries]
    assert indexes == sorted(indexes)


def test_resolve_all_agrees_with_resolve(default_providers, default_slots):
    store = CommitmentStore()
    store.commit(4, "10-0")
    store.commit(4, "10-10")
    store.commit(2, "10-0")
    weights = Weights(w1=0.4)

    for entry in resolve_all(store, default_providers, default_slots, weights):
        assert entry.provider_id == resolve(
            entry.slot_id, store, default_providers, len(default_slots), weights
        )


def test_is_assignable(default_providers, default_slots):
    store = CommitmentStore()
    total = len(default_slots)

    assert is_assignable(4, "10-0", store, default_providers, total, Weights())
    assert not is_assignable(1, "10-0", store, default_providers, total, Weights())

    # A holder can always release its slot
    store.commit(1, "10-0")
    assert is_assignable(1, "10-0", store, default_providers, total, Weights())


# ==================== Band Sampling Tests ====================

def test_percentile_bands_partition_by_rank():
    entries = list(range(10))

    assert percentile_band(entries, STAGE1_BAND) == [0, 1]
    assert percentile_band(entries, STAGE2_BAND) == [2, 3, 4]
    assert percentile_band(entries, STAGE3_BAND) == [5, 6]


def test_percentile_band_small_inputs():
    assert percentile_band([], STAGE1_BAND, min_one=True) == []
    assert percentile_band(["a"], STAGE1_BAND) == ["a"]
    assert percentile_band(["a"], STAGE2_BAND) == []
    assert percentile_band(["a", "b"], STAGE2_BAND) == []
    assert percentile_band(["a", "b"], STAGE3_BAND) == ["b"]


def test_percentile_band_min_one_widens_empty_band():
    entries = ["a", "b", "c"]

    assert percentile_band(entries, (0.2, 0.25)) == []
    assert percentile_band(entries, (0.2, 0.25), min_one=True) == ["b"]


def test_sample_band_stays_inside_band():
    rng = random.Random(3)
    entries = list(range(20))

    picks = {sample_band(entries, STAGE2_BAND, rng) for _ in range(200)}

    assert picks <= set(range(4, 10))
    assert sample_band([], STAGE1_BAND, rng) is None


def test_sample_band_is_seedable():
    entries = list(range(50))

    first = [sample_band(entries, STAGE3_BAND, random.Random(11)) for _ in range(5)]
    second = [sample_band(entries, STAGE3_BAND, random.Random(11)) for _ in range(5)]

    assert first == second
