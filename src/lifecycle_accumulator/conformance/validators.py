"""Dual-layer validation for lifecycle-accumulator wire payloads.

1. Pydantic model validation (primary layer)
2. JSON Schema validation against the committed schema (secondary layer)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

from jsonschema import Draft202012Validator
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from lifecycle_accumulator.models import State, StateObject
from lifecycle_accumulator.schemas import load_schema


@dataclass(frozen=True)
class ModelViolation:
    """A violation detected by Pydantic model validation."""

    field: str
    message: str
    violation_type: str
    input_value: object


@dataclass(frozen=True)
class SchemaViolation:
    """A violation detected by JSON Schema validation."""

    json_path: str
    message: str
    validator: str
    validator_value: object
    schema_path: Tuple[Union[str, int], ...]


@dataclass(frozen=True)
class ConformanceResult:
    """Result of dual-layer conformance validation."""

    valid: bool
    model_violations: Tuple[ModelViolation, ...]
    schema_violations: Tuple[SchemaViolation, ...]
    payload_type: str


_PAYLOAD_TYPE_TO_MODEL: Dict[str, Any] = {
    "StateObject": StateObject,
    "State": State,
}

_PAYLOAD_TYPE_TO_SCHEMA: Dict[str, str] = {
    "StateObject": "state_object",
    "State": "state",
}


def _validate_with_model(payload: Any, model: Any) -> Tuple[ModelViolation, ...]:
    try:
        TypeAdapter(model).validate_python(payload)
        return ()
    except PydanticValidationError as e:
        return tuple(
            ModelViolation(
                field=".".join(str(loc) for loc in error["loc"]),
                message=error["msg"],
                violation_type=error["type"],
                input_value=error.get("input"),
            )
            for error in e.errors()
        )


def _validate_with_schema(payload: Any, schema_name: str) -> Tuple[SchemaViolation, ...]:
    validator = Draft202012Validator(load_schema(schema_name))
    violations = []
    for error in validator.iter_errors(payload):
        json_path = "$" + "".join(
            f"[{p}]" if isinstance(p, int) else f".{p}" for p in error.absolute_path
        )
        violations.append(
            SchemaViolation(
                json_path=json_path,
                message=error.message,
                validator=str(error.validator),
                validator_value=error.validator_value,
                schema_path=tuple(error.absolute_schema_path),
            )
        )
    return tuple(violations)


def validate_payload(payload_type: str, payload: Any) -> ConformanceResult:
    """Validate a wire payload against its contract.

    Args:
        payload_type: ``"StateObject"`` or ``"State"``.
        payload: The decoded JSON value to validate.

    Returns:
        ConformanceResult; valid only if both layers report no violations.

    Raises:
        ValueError: If payload_type is not recognized.
    """
    if payload_type not in _PAYLOAD_TYPE_TO_MODEL:
        raise ValueError(
            f"Unknown payload type: {payload_type!r}. "
            f"Known types: {list(_PAYLOAD_TYPE_TO_MODEL.keys())}"
        )

    model_violations = _validate_with_model(
        payload, _PAYLOAD_TYPE_TO_MODEL[payload_type]
    )
    schema_violations = _validate_with_schema(
        payload, _PAYLOAD_TYPE_TO_SCHEMA[payload_type]
    )

    return ConformanceResult(
        valid=not model_violations and not schema_violations,
        model_violations=model_violations,
        schema_violations=schema_violations,
        payload_type=payload_type,
    )
