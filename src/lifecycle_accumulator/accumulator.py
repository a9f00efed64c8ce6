"""Accumulator: per-process buffering and on-demand reconciliation.

The accumulator buffers raw StateObject events per process id, tracks the
last terminal state seen for each process, and on ``drain`` produces the
longest causally valid run of the buffered history.

Two engine-wide counters couple otherwise independent processes:

``generation``
    Number of full reconciliations ever performed. Buffer eviction in
    ``accept`` is only possible once this is above zero.
``pending``
    Events accepted (for any process) since the last full reconciliation.
    Bounds how many trailing entries a reconciliation returns.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from lifecycle_accumulator.models import TERMINAL_STATES, State, StateObject
from lifecycle_accumulator.transitions import (
    build_valid_run,
    dedup_by_seq_no,
    filter_final_states,
    has_forward_progress,
    sort_state_objects,
    trim_to_window,
)

logger = logging.getLogger("lifecycle_accumulator.accumulator")


class AccumulatorConfig(BaseModel):
    """Behavior switches for InMemoryAccumulator.

    Defaults reproduce the reference behavior exactly.
    """

    model_config = ConfigDict(frozen=True)

    trim_to_pending: bool = Field(
        True,
        description=(
            "Return only the trailing `pending` entries of a reconciled run "
            "(False returns the whole run)"
        ),
    )
    evict_on_final_upgrade: bool = Field(
        True,
        description=(
            "Evict the buffer even when an incoming FINAL1 upgrades a "
            "recorded FINAL2"
        ),
    )


class AccumulatorSnapshot(BaseModel):
    """Point-in-time copy of the accumulator's internal state."""

    model_config = ConfigDict(frozen=True)

    generation: int = Field(..., ge=0, description="Full reconciliations performed")
    pending: int = Field(..., ge=0, description="Events accepted since last reconciliation")
    buffers: Dict[int, Tuple[StateObject, ...]] = Field(
        default_factory=dict, description="Buffered events per process id"
    )
    final_states: Dict[int, State] = Field(
        default_factory=dict, description="Last recorded terminal state per process id"
    )


class Accumulator(ABC):
    """Abstract interface for event accumulators."""

    @abstractmethod
    def accept(self, state_object: StateObject) -> None:
        """Buffer a single event."""
        pass

    @abstractmethod
    def accept_all(self, state_objects: Iterable[StateObject]) -> None:
        """Buffer events in order. Not atomic across the batch."""
        pass

    @abstractmethod
    def drain(self, process_id: int) -> List[StateObject]:
        """Return the reconciled sequence for a process."""
        pass


class InMemoryAccumulator(Accumulator):
    """Single-lock, in-memory accumulator.

    All four pieces of state (buffers, final-state registry, generation,
    pending) sit behind one re-entrant lock. Operations on different
    process ids are not independent, so there is no per-process locking.
    """

    def __init__(self, config: Optional[AccumulatorConfig] = None) -> None:
        self._config = config if config is not None else AccumulatorConfig()
        self._buffers: Dict[int, List[StateObject]] = {}
        self._final_states: Dict[int, State] = {}
        self._generation = 0
        self._pending = 0
        self._lock = threading.RLock()

    @property
    def config(self) -> AccumulatorConfig:
        return self._config

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def pending(self) -> int:
        return self._pending

    # -- ingestion ----------------------------------------------------------

    def accept(self, state_object: StateObject) -> None:
        """Buffer one event for its process.

        Steps:
        1. Evict the process's buffer if it already has a recorded terminal
           state and at least one reconciliation has ever completed.
        2. Append the event.
        3. Record the event's state if it is terminal.
        4. Bump ``pending``.
        """
        process_id = state_object.process_id
        with self._lock:
            if self._should_evict(process_id, state_object):
                self._buffers.pop(process_id, None)
                logger.info("Evicted buffer for process %s", process_id)

            self._buffers.setdefault(process_id, []).append(state_object)

            if state_object.state in TERMINAL_STATES:
                self._final_states[process_id] = state_object.state

            self._pending += 1
            logger.debug("Accepted %r (pending=%d)", state_object, self._pending)

    def accept_all(self, state_objects: Iterable[StateObject]) -> None:
        for state_object in state_objects:
            self.accept(state_object)

    def _should_evict(self, process_id: int, incoming: StateObject) -> bool:
        """Apply any FINAL2 -> FINAL1 upgrade, then decide on eviction."""
        recorded = self._final_states.get(process_id)
        if recorded is None:
            return False

        upgraded = False
        if recorded is State.FINAL2 and incoming.state is State.FINAL1:
            self._final_states[process_id] = State.FINAL1
            self._replace_final2(process_id, incoming)
            upgraded = True
            logger.info(
                "Upgraded final state of process %s from FINAL2 to FINAL1",
                process_id,
            )

        if self._generation == 0:
            return False
        if upgraded and not self._config.evict_on_final_upgrade:
            return False
        return True

    def _replace_final2(self, process_id: int, final1: StateObject) -> None:
        buffered = self._buffers.get(process_id)
        if buffered is None:
            return
        for i, obj in enumerate(buffered):
            if obj.state is State.FINAL2:
                buffered[i] = final1
                break

    # -- reconciliation -----------------------------------------------------

    def drain(self, process_id: int) -> List[StateObject]:
        """Return the longest valid run buffered for ``process_id``.

        If the buffer holds more than one event and no forward transition
        is detectable among them, only the terminal-state events are
        returned and no engine state changes. Otherwise the buffer is
        deduplicated by seq_no, ordered, and walked; ``generation`` is
        bumped and ``pending`` is reset.

        The buffer itself is never cleared here.
        """
        with self._lock:
            buffered = list(self._buffers.get(process_id, ()))
            if not buffered:
                return []

            if len(buffered) > 1 and not has_forward_progress(buffered):
                finals = filter_final_states(buffered)
                logger.info(
                    "No forward transition for process %s; returning %d final event(s)",
                    process_id,
                    len(finals),
                )
                return finals

            ordered = sort_state_objects(dedup_by_seq_no(buffered))
            self._generation += 1
            run = build_valid_run(ordered)

            if self._config.trim_to_pending:
                run = trim_to_window(run, self._pending)
            self._pending = 0

            logger.debug(
                "Drained %d event(s) for process %s (generation=%d)",
                len(run),
                process_id,
                self._generation,
            )
            return run

    # -- inspection ---------------------------------------------------------

    def process_ids(self) -> List[int]:
        """Sorted ids of processes that currently hold a buffer."""
        with self._lock:
            return sorted(self._buffers)

    def snapshot(self) -> AccumulatorSnapshot:
        """Copy the current state without touching any counter."""
        with self._lock:
            return AccumulatorSnapshot(
                generation=self._generation,
                pending=self._pending,
                buffers={
                    pid: tuple(objs) for pid, objs in self._buffers.items()
                },
                final_states=dict(self._final_states),
            )
