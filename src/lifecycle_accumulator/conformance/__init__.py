"""Conformance test suite for lifecycle-accumulator.

Run: pytest --pyargs lifecycle_accumulator.conformance
"""
from lifecycle_accumulator.conformance.loader import (
    FixtureCase,
    ScenarioCase,
    load_fixtures,
    load_scenario,
    load_scenarios,
)
from lifecycle_accumulator.conformance.pytest_helpers import (
    assert_payload_conforms,
    assert_payload_fails,
    assert_scenario_replays,
)
from lifecycle_accumulator.conformance.validators import (
    ConformanceResult,
    ModelViolation,
    SchemaViolation,
    validate_payload,
)

__all__ = [
    "ConformanceResult",
    "FixtureCase",
    "ModelViolation",
    "ScenarioCase",
    "SchemaViolation",
    "assert_payload_conforms",
    "assert_payload_fails",
    "assert_scenario_replays",
    "load_fixtures",
    "load_scenario",
    "load_scenarios",
    "validate_payload",
]
