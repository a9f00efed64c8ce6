"""
lifecycle-accumulator: reconcile out-of-order lifecycle events per process.

Events report that a process reached a lifecycle state at a sequence
number. They may arrive interleaved, delayed, duplicated, or out of causal
order. The accumulator buffers them per process and, on demand, produces
the longest run that starts at a start state and only follows legal
transitions.

Example:
    >>> from lifecycle_accumulator import InMemoryAccumulator, State, StateObject
    >>> acc = InMemoryAccumulator()
    >>> acc.accept_all([
    ...     StateObject(process_id=7, seq_no=3, state=State.FINAL1),
    ...     StateObject(process_id=7, seq_no=1, state=State.START1),
    ...     StateObject(process_id=7, seq_no=2, state=State.MID1),
    ... ])
    >>> [obj.seq_no for obj in acc.drain(7)]
    [1, 2, 3]
"""

__version__ = "1.0.0"

# Core data models
from lifecycle_accumulator.models import (
    State,
    StateObject,
    START_STATES,
    TERMINAL_STATES,
    AccumulatorError,
    ValidationError,
    normalize_state,
)

# State-graph tables and ordering pipeline
from lifecycle_accumulator.transitions import (
    STATE_PRIORITY,
    SCREENING_SUCCESSORS,
    ALLOWED_TRANSITIONS,
    state_object_sort_key,
    is_start_state,
    is_final_state,
    is_valid_transition,
    has_forward_progress,
    filter_final_states,
    dedup_by_seq_no,
    reorder_mid_states,
    sort_state_objects,
    build_valid_run,
    trim_to_window,
)

# Accumulator engine
from lifecycle_accumulator.accumulator import (
    Accumulator,
    AccumulatorConfig,
    AccumulatorSnapshot,
    InMemoryAccumulator,
)

__all__ = [
    # Models
    "State",
    "StateObject",
    "START_STATES",
    "TERMINAL_STATES",
    "normalize_state",
    # Exceptions
    "AccumulatorError",
    "ValidationError",
    # Transitions
    "STATE_PRIORITY",
    "SCREENING_SUCCESSORS",
    "ALLOWED_TRANSITIONS",
    "state_object_sort_key",
    "is_start_state",
    "is_final_state",
    "is_valid_transition",
    "has_forward_progress",
    "filter_final_states",
    "dedup_by_seq_no",
    "reorder_mid_states",
    "sort_state_objects",
    "build_valid_run",
    "trim_to_window",
    # Accumulator
    "Accumulator",
    "AccumulatorConfig",
    "AccumulatorSnapshot",
    "InMemoryAccumulator",
]
