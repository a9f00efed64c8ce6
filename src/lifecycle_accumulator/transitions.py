"""State-graph tables and the ordering pipeline used during reconciliation.

Everything here is a pure function over StateObject sequences. The
accumulator owns all mutable state and calls into this module for the
actual ordering work.

Sections:
    1. Priority order
    2. Screening table
    3. Legal transition table
    4. Ordering pipeline
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from lifecycle_accumulator.models import (
    START_STATES,
    TERMINAL_STATES,
    State,
    StateObject,
)

# ── Section 1: Priority order ────────────────────────────────────────────────

# MID1 and MID2 share a priority; ties fall back to seq_no.
STATE_PRIORITY: Dict[State, int] = {
    State.START1: 0,
    State.START2: 1,
    State.MID1: 2,
    State.MID2: 2,
    State.FINAL1: 3,
    State.FINAL2: 4,
}


def state_object_sort_key(obj: StateObject) -> Tuple[int, int]:
    """Sort key: (state priority, seq_no)."""
    return (STATE_PRIORITY[obj.state], obj.seq_no)


# ── Section 2: Screening table ───────────────────────────────────────────────

# Coarse "is any forward edge present" check. Not the same table as
# ALLOWED_TRANSITIONS: START1 does not screen FINAL2, START2 does not
# screen FINAL1.
SCREENING_SUCCESSORS: Dict[State, FrozenSet[State]] = {
    State.START1: frozenset({State.MID1, State.FINAL1}),
    State.START2: frozenset({State.MID1, State.FINAL2}),
    State.MID1: frozenset({State.MID2, State.FINAL1, State.FINAL2}),
    State.MID2: frozenset({State.MID1, State.FINAL1, State.FINAL2}),
    State.FINAL1: frozenset(),
    State.FINAL2: frozenset(),
}

# ── Section 3: Legal transition table ────────────────────────────────────────

ALLOWED_TRANSITIONS: FrozenSet[Tuple[State, State]] = frozenset({
    # Entry
    (State.START1, State.MID1),
    (State.START1, State.FINAL1),
    (State.START1, State.FINAL2),
    (State.START2, State.MID1),
    (State.START2, State.FINAL1),
    (State.START2, State.FINAL2),
    # Interleaved mid states
    (State.MID1, State.MID2),
    (State.MID2, State.MID1),
    # Termination
    (State.MID1, State.FINAL1),
    (State.MID1, State.FINAL2),
    (State.MID2, State.FINAL1),
    (State.MID2, State.FINAL2),
})


def is_start_state(state: State) -> bool:
    return state in START_STATES


def is_final_state(state: State) -> bool:
    return state in TERMINAL_STATES


def is_valid_transition(from_state: State, to_state: State) -> bool:
    """Return True if to_state may directly follow from_state."""
    return (from_state, to_state) in ALLOWED_TRANSITIONS


# ── Section 4: Ordering pipeline ─────────────────────────────────────────────


def has_forward_progress(objects: Iterable[StateObject]) -> bool:
    """Screen a buffer for at least one plausible forward edge.

    Returns True if any present state has a screening successor that is
    also present in the buffer.
    """
    present: Set[State] = {obj.state for obj in objects}
    for state in present:
        if SCREENING_SUCCESSORS[state] & present:
            return True
    return False


def filter_final_states(objects: Sequence[StateObject]) -> List[StateObject]:
    """Return the terminal-state entries, preserving their relative order."""
    return [obj for obj in objects if is_final_state(obj.state)]


def dedup_by_seq_no(objects: Sequence[StateObject]) -> List[StateObject]:
    """Remove duplicates by seq_no. First occurrence wins."""
    seen: Set[int] = set()
    unique: List[StateObject] = []
    for obj in objects:
        if obj.seq_no not in seen:
            seen.add(obj.seq_no)
            unique.append(obj)
    return unique


def reorder_mid_states(objects: List[StateObject]) -> List[StateObject]:
    """Swap MID2, MID1 to MID1, MID2 when directly preceded by a start state.

    Single left-to-right pass over ``objects``, mutated in place. A swapped
    pair is not re-examined.
    """
    for i in range(1, len(objects) - 1):
        prev, current, nxt = objects[i - 1], objects[i], objects[i + 1]
        if (
            current.state is State.MID2
            and nxt.state is State.MID1
            and is_start_state(prev.state)
        ):
            objects[i], objects[i + 1] = nxt, current
    return objects


def sort_state_objects(objects: Sequence[StateObject]) -> List[StateObject]:
    """Sort by (priority, seq_no), then apply the mid-state correction."""
    ordered = sorted(objects, key=state_object_sort_key)
    return reorder_mid_states(ordered)


def build_valid_run(objects: Sequence[StateObject]) -> List[StateObject]:
    """Greedily walk ``objects`` and keep the longest legal run.

    Entries before the first start state are skipped. After that, an
    entry is kept only if it is a legal successor of the last kept entry;
    illegal entries are dropped. The walk stops right after the first
    terminal state is kept.
    """
    run: List[StateObject] = []
    tail: Optional[State] = None

    for obj in objects:
        if tail is None:
            if is_start_state(obj.state):
                run.append(obj)
                tail = obj.state
            continue
        if is_valid_transition(tail, obj.state):
            run.append(obj)
            tail = obj.state
            if is_final_state(obj.state):
                break

    return run


def trim_to_window(run: Sequence[StateObject], window: int) -> List[StateObject]:
    """Keep only the trailing ``window`` entries of ``run``."""
    drop = max(len(run) - window, 0)
    return list(run[drop:])
