"""Reusable test helpers for lifecycle-accumulator conformance testing.

Consumers can import these to write their own conformance assertions:
    from lifecycle_accumulator.conformance.pytest_helpers import (
        assert_payload_conforms,
        assert_payload_fails,
        assert_scenario_replays,
    )
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from lifecycle_accumulator.accumulator import (
    AccumulatorConfig,
    InMemoryAccumulator,
)
from lifecycle_accumulator.conformance.loader import ScenarioCase
from lifecycle_accumulator.conformance.validators import (
    ConformanceResult,
    validate_payload,
)
from lifecycle_accumulator.models import StateObject


def assert_payload_conforms(payload: Any, payload_type: str) -> ConformanceResult:
    """Assert a payload conforms to the canonical contract."""
    result = validate_payload(payload_type, payload)
    if not result.valid:
        violations = []
        for mv in result.model_violations:
            violations.append(f"  Model: {mv.field}: {mv.message}")
        for sv in result.schema_violations:
            violations.append(f"  Schema: {sv.json_path}: {sv.message}")
        raise AssertionError(
            f"Payload for {payload_type!r} failed conformance:\n"
            + "\n".join(violations)
        )
    return result


def assert_payload_fails(payload: Any, payload_type: str) -> ConformanceResult:
    """Assert a payload DOES NOT conform (expected invalid)."""
    result = validate_payload(payload_type, payload)
    if result.valid:
        raise AssertionError(
            f"Payload for {payload_type!r} was expected to fail but passed conformance."
        )
    return result


def assert_scenario_replays(
    scenario: ScenarioCase,
    accumulator: Optional[InMemoryAccumulator] = None,
) -> InMemoryAccumulator:
    """Replay a scenario and assert every drain matches its expectation.

    Returns the accumulator so callers can make further assertions on it.
    """
    acc = accumulator
    if acc is None:
        acc = InMemoryAccumulator(AccumulatorConfig(**scenario.config))

    for index, step in enumerate(scenario.steps):
        op = step["op"]
        if op == "accept":
            acc.accept(StateObject.from_dict(step["event"]))
        elif op == "accept_all":
            acc.accept_all(StateObject.from_dict(e) for e in step["events"])
        elif op == "drain":
            actual: List[Dict[str, Any]] = [
                obj.to_dict() for obj in acc.drain(step["process_id"])
            ]
            expected: List[Dict[str, Any]] = [
                StateObject.from_dict(e).to_dict() for e in step["expected"]
            ]
            if actual != expected:
                raise AssertionError(
                    f"Scenario {scenario.id!r} step {index}: "
                    f"drain({step['process_id']}) returned {actual}, "
                    f"expected {expected}"
                )
        else:
            raise ValueError(f"Scenario {scenario.id!r} step {index}: unknown op {op!r}")

    return acc
