import random
import sys
from pathlib import Path

import pytest

# Add the project root to sys.path so that "slot_allocator" can be found
# structure: <root>/slot_allocator/tests/conftest.py
current_dir = Path(__file__).parent.absolute()
root_dir = current_dir.parent.parent
sys.path.insert(0, str(root_dir))

from slot_allocator.constants.constants import DEFAULT_PROVIDERS  # noqa: E402
from slot_allocator.engine.models import Provider, build_providers, generate_time_slots  # noqa: E402
from slot_allocator.engine.session import AllocationSession  # noqa: E402
from slot_allocator.tests.fakes import instant_sleep  # noqa: E402


@pytest.fixture
def default_providers():
    return build_providers(DEFAULT_PROVIDERS)


@pytest.fixture
def default_slots():
    return generate_time_slots(10, 13, 10)


@pytest.fixture
def make_session():
    """Factory for sessions with a seeded rng and instant delays."""

    def _make(providers=None, slots=None, seed=42, period_ms=60_000, sleep=instant_sleep, **kwargs):
        return AllocationSession(
            providers=providers if providers is not None else build_providers(DEFAULT_PROVIDERS),
            slots=slots if slots is not None else generate_time_slots(10, 13, 10),
            rng=random.Random(seed),
            period_ms=period_ms,
            visibility_delay_ms=0,
            settle_delay_ms=0,
            sleep=sleep,
            **kwargs
        )

    return _make


@pytest.fixture
def small_session(make_session):
    """Two providers, five slots (10:00 to 10:40)."""
    providers = [
        Provider(id=1, name="NP Smith", capacity=3),
        Provider(id=2, name="NP Johnson", capacity=2),
    ]
    slots = generate_time_slots(10, 11, 10)[:5]
    return make_session(providers=providers, slots=slots)
