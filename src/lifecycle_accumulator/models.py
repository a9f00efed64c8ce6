"""Core data models for lifecycle-accumulator library."""
from enum import Enum
from typing import Any, Dict, FrozenSet, Union

from pydantic import BaseModel, ConfigDict, Field


class State(str, Enum):
    """Lifecycle states a process can report."""

    START1 = "START1"
    START2 = "START2"
    MID1 = "MID1"
    MID2 = "MID2"
    FINAL1 = "FINAL1"
    FINAL2 = "FINAL2"


START_STATES: FrozenSet[State] = frozenset({State.START1, State.START2})

TERMINAL_STATES: FrozenSet[State] = frozenset({State.FINAL1, State.FINAL2})


class StateObject(BaseModel):
    """Immutable report that a process reached a state at a sequence number."""

    model_config = ConfigDict(frozen=True)

    process_id: int = Field(
        ...,
        description="Identity of the logical process this event belongs to"
    )
    seq_no: int = Field(
        ...,
        description="Caller-assigned sequence number (dedup key within a process)"
    )
    state: State = Field(
        ...,
        description="Lifecycle state reached"
    )

    def __repr__(self) -> str:
        """Human-readable representation."""
        return (
            f"StateObject(process={self.process_id}, "
            f"seq={self.seq_no}, "
            f"state={self.state.value})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StateObject":
        """Deserialize from a dictionary, accepting lower-case state names."""
        values = dict(data)
        if "state" in values:
            values["state"] = normalize_state(values["state"])
        return cls(**values)


def normalize_state(value: Union[str, State]) -> State:
    """Resolve a state name to a State member.

    Args:
        value: A State member, or its name in any letter case.

    Returns:
        The corresponding State enum member.

    Raises:
        ValidationError: If value does not name a known state.
    """
    if isinstance(value, State):
        return value
    if isinstance(value, str):
        candidate = value.strip().upper()
        for member in State:
            if member.value == candidate:
                return member
    raise ValidationError(
        f"Unknown state value: {value!r}. "
        f"Valid values: {[m.value for m in State]}"
    )


# Custom Exceptions
class AccumulatorError(Exception):
    """Base exception for all library errors."""
    pass


class ValidationError(AccumulatorError):
    """Inbound value could not be converted to a model."""
    pass
