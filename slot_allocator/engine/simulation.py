"""
Simulation Driver

Timed state machine that fills the slot grid autonomously:

    idle --start--> running --pause--> paused --resume--> running
    any  --stop---> idle (commitments, pending and newly-committed cleared)
    running --(nothing left to resolve)--> idle (commitments kept)

Each iteration samples up to three resolver entries from time-ordered
percentile bands, shows them as pending, then commits them one by one
with a short settle delay between commits:

    Stage 1: earliest 20% of resolver output (at least one entry)
    Stage 2: 20%-50% band, resolved against state that includes stage 1
    Stage 3: 50%-70% band, resolved against state including stages 1 and 2
             (only when stage 2 picked something)

At most one iteration is in flight. Ticks that arrive while an iteration is
still committing are skipped.

Randomness comes from an injectable random.Random; delays go through an
injectable sleep coroutine, so tests can run iterations instantly.
"""

import asyncio
import logging
import random
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Set, Tuple

from slot_allocator.algorithms.resolver import ResolvedSlot
from slot_allocator.algorithms.sampling import sample_band
from slot_allocator.constants.constants import (
    EVENT_COMMITTED,
    EVENT_ITERATION_EMPTY,
    EVENT_ITERATION_SKIPPED,
    EVENT_PENDING,
    EVENT_STATE_CHANGED,
    RUN_STATE_IDLE,
    RUN_STATE_PAUSED,
    RUN_STATE_RUNNING,
)
from slot_allocator.constants.thresholds import (
    ITERATION_PERIOD_MS,
    SETTLE_DELAY_MS,
    STAGE1_BAND,
    STAGE2_BAND,
    STAGE3_BAND,
    VISIBILITY_DELAY_MS,
)
from slot_allocator.core.errors import SimulationStateError
from slot_allocator.core.logging import set_run_id

if TYPE_CHECKING:
    from slot_allocator.engine.session import AllocationSession

logger = logging.getLogger(__name__)

Pair = Tuple[int, str]


class RunState(str, Enum):
    IDLE = RUN_STATE_IDLE
    RUNNING = RUN_STATE_RUNNING
    PAUSED = RUN_STATE_PAUSED


# Iteration outcomes
ITERATION_SKIPPED = "skipped"      # another iteration still in flight
ITERATION_EMPTY = "empty"          # nothing left to resolve
ITERATION_ABORTED = "aborted"      # store cleared while committing
ITERATION_COMMITTED = "committed"


@dataclass
class IterationResult:
    """Outcome of one run_iteration() call."""
    status: str
    selections: List[ResolvedSlot] = field(default_factory=list)
    committed: List[Pair] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "selections": [
                {"provider_id": s.provider_id, "slot_id": s.slot_id}
                for s in self.selections
            ],
            "committed": [
                {"provider_id": pid, "slot_id": sid}
                for pid, sid in self.committed
            ],
        }


class SimulationDriver:
    """Runs the staged select -> pending -> commit loop for one session."""

    def __init__(
        self,
        session: "AllocationSession",
        rng: Optional[random.Random] = None,
        period_ms: Optional[int] = None,
        visibility_delay_ms: Optional[int] = None,
        settle_delay_ms: Optional[int] = None,
        sleep: Optional[Callable[[float], Any]] = None
    ):
        self._session = session
        self._rng = rng or random.Random()
        self._sleep = sleep or asyncio.sleep

        self.period_ms = ITERATION_PERIOD_MS if period_ms is None else period_ms
        self.visibility_delay_ms = VISIBILITY_DELAY_MS if visibility_delay_ms is None else visibility_delay_ms
        self.settle_delay_ms = SETTLE_DELAY_MS if settle_delay_ms is None else settle_delay_ms

        self.state = RunState.IDLE
        self.run_id: Optional[str] = None
        self.iteration_count = 0

        # Advisory marks, never read by the resolver
        self.pending: Set[Pair] = set()
        self.newly_committed: Set[Pair] = set()

        self._in_flight = False
        self._ticker: Optional[asyncio.Task] = None
        self._tick_tasks: Set[asyncio.Task] = set()

    # ==================== Commands ====================

    async def start(self) -> RunState:
        """Start a new run (or resume a paused one). Starting twice is a no-op."""
        if self.state == RunState.RUNNING:
            return self.state
        if self.state == RunState.PAUSED:
            return self.resume()

        self.run_id = uuid.uuid4().hex[:8]
        set_run_id(self.run_id)
        self.iteration_count = 0

        self._set_state(RunState.RUNNING, reason="start")
        logger.info(
            f"Simulation started (period={self.period_ms}ms, "
            f"visibility={self.visibility_delay_ms}ms, settle={self.settle_delay_ms}ms)"
        )

        if not self.check_termination():
            self._start_ticker()
        return self.state

    def pause(self) -> RunState:
        """
        Freeze the tick timer. An iteration already past its guard is left
        to finish so its commits are never torn.
        """
        if self.state != RunState.RUNNING:
            raise SimulationStateError(
                f"Cannot pause a simulation that is {self.state.value}",
                details={"state": self.state.value}
            )

        self._cancel_ticker()
        self._set_state(RunState.PAUSED, reason="pause")
        logger.info("Simulation paused")
        return self.state

    def resume(self) -> RunState:
        if self.state != RunState.PAUSED:
            raise SimulationStateError(
                f"Cannot resume a simulation that is {self.state.value}",
                details={"state": self.state.value}
            )

        self._set_state(RunState.RUNNING, reason="resume")
        logger.info("Simulation resumed")

        if not self.check_termination():
            self._start_ticker()
        return self.state

    async def stop(self) -> RunState:
        """
        Stop from any state: cancel the timer and the iterations it spawned,
        then clear commitments and all marks.

        An iteration awaited directly by an outside caller is not cancelled;
        clearing the store makes it abort at its next commit boundary.
        """
        was = self.state
        self.state = RunState.IDLE

        current = asyncio.current_task()
        tasks = [
            task for task in (self._ticker, *self._tick_tasks)
            if task is not None and task is not current and not task.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._ticker = None

        self.clear_marks()
        self._session.store.clear()

        logger.info(f"Simulation stopped from {was.value}, commitments cleared")
        self._session.emit(EVENT_STATE_CHANGED, self._state_payload(reason="stop"))
        return self.state

    def check_termination(self) -> bool:
        """
        Auto-stop when running and no slot resolves to any provider.

        Returns:
            True if the driver just stopped.
        """
        if self.state != RunState.RUNNING:
            return False
        if self._session.resolve_all():
            return False

        self._cancel_ticker()
        self._set_state(RunState.IDLE, reason="exhausted")
        logger.info(
            f"Simulation finished after {self.iteration_count} iterations, "
            f"{len(self._session.store)} commitments"
        )
        return True

    def clear_marks(self) -> None:
        self.pending.clear()
        self.newly_committed.clear()

    # ==================== Iteration ====================

    async def run_iteration(self) -> IterationResult:
        """
        Run one select -> pending -> staggered commit cycle.

        Can be driven by the internal ticker or called directly by an
        external scheduler.
        """
        if self._in_flight:
            logger.debug("Previous iteration still in flight, skipping tick")
            self._session.emit(EVENT_ITERATION_SKIPPED, {})
            return IterationResult(status=ITERATION_SKIPPED)

        self._in_flight = True
        try:
            self.clear_marks()

            selections = self._select()
            if not selections:
                logger.debug("Resolver returned no eligible slots, iteration aborted")
                self._session.emit(EVENT_ITERATION_EMPTY, {})
                self.check_termination()
                return IterationResult(status=ITERATION_EMPTY)

            self.iteration_count += 1
            for entry in selections:
                self.pending.add((entry.provider_id, entry.slot_id))
            self._session.emit(EVENT_PENDING, {
                "iteration": self.iteration_count,
                "pairs": [{"provider_id": e.provider_id, "slot_id": e.slot_id} for e in selections],
            })

            return await self._commit_staggered(selections)

        except asyncio.CancelledError:
            self.pending.clear()
            raise
        finally:
            self._in_flight = False

    def _select(self) -> List[ResolvedSlot]:
        """
        Sample up to three entries. Runs without awaiting so the guard check
        and the selection are atomic with respect to other tasks.
        """
        session = self._session

        h0 = session.resolve_all()
        if not h0:
            return []

        first = sample_band(h0, STAGE1_BAND, self._rng, min_one=True)
        if first is None:
            return []
        selections = [first]

        working = session.store.copy()
        working.commit(first.provider_id, first.slot_id)
        h1 = session.resolve_all(working)

        second = sample_band(h1, STAGE2_BAND, self._rng)
        if second is not None:
            selections.append(second)
            working.commit(second.provider_id, second.slot_id)
            h2 = session.resolve_all(working)

            third = sample_band(h2, STAGE3_BAND, self._rng)
            if third is not None:
                selections.append(third)

        logger.debug(
            f"Iteration {self.iteration_count + 1} selections: "
            + ", ".join(f"{s.provider_id}@{s.slot_id}" for s in selections)
        )
        return selections

    async def _commit_staggered(self, selections: List[ResolvedSlot]) -> IterationResult:
        store = self._session.store
        generation = store.generation
        committed: List[Pair] = []

        await self._sleep(self.visibility_delay_ms / 1000)

        for position, entry in enumerate(selections):
            if position > 0:
                await self._sleep(self.settle_delay_ms / 1000)

            if store.generation != generation:
                logger.info(f"Commitments were cleared mid-iteration, dropping {len(selections) - position} pending")
                self.pending.clear()
                return IterationResult(status=ITERATION_ABORTED, selections=selections, committed=committed)

            pair = (entry.provider_id, entry.slot_id)
            store.commit(*pair)
            self.pending.discard(pair)
            self.newly_committed.add(pair)
            committed.append(pair)

            self._session.emit(EVENT_COMMITTED, {
                "iteration": self.iteration_count,
                "provider_id": entry.provider_id,
                "slot_id": entry.slot_id,
            })
            self.check_termination()

        logger.info(
            f"Iteration {self.iteration_count} committed {len(committed)} pair(s): "
            + ", ".join(f"{pid}@{sid}" for pid, sid in committed)
        )
        return IterationResult(status=ITERATION_COMMITTED, selections=selections, committed=committed)

    # ==================== Ticker ====================

    def _start_ticker(self) -> None:
        self._cancel_ticker()
        self._ticker = asyncio.create_task(self._tick_loop())

    def _cancel_ticker(self) -> None:
        ticker = self._ticker
        self._ticker = None
        if ticker is not None and ticker is not asyncio.current_task() and not ticker.done():
            ticker.cancel()

    def trigger_iteration(self) -> asyncio.Task:
        """Schedule run_iteration() as a background task on the running loop."""
        task = asyncio.create_task(self.run_iteration())
        self._tick_tasks.add(task)
        task.add_done_callback(self._tick_tasks.discard)
        return task

    async def _tick_loop(self) -> None:
        period = self.period_ms / 1000
        while self.state == RunState.RUNNING:
            await self._sleep(period)
            if self.state == RunState.RUNNING:
                self.trigger_iteration()

    # ==================== Status ====================

    def _set_state(self, state: RunState, reason: str) -> None:
        self.state = state
        self._session.emit(EVENT_STATE_CHANGED, self._state_payload(reason=reason))

    def _state_payload(self, reason: str) -> Dict[str, Any]:
        return {"state": self.state.value, "reason": reason, "run_id": self.run_id}

    def status(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "run_id": self.run_id,
            "iteration_count": self.iteration_count,
            "in_flight": self._in_flight,
            "period_ms": self.period_ms,
            "visibility_delay_ms": self.visibility_delay_ms,
            "settle_delay_ms": self.settle_delay_ms,
        }
