"""Build-time JSON Schema generation script for lifecycle-accumulator models.

Run ``python -m lifecycle_accumulator.schemas.generate`` to regenerate the
committed schema files, or add ``--check`` to fail on drift (CI mode).
"""
from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Type

from pydantic import BaseModel, TypeAdapter

from lifecycle_accumulator.models import State, StateObject
from lifecycle_accumulator.schemas import SCHEMA_DIR, SCHEMA_SUFFIX, schema_id

PYDANTIC_MODELS: List[tuple[str, Type[BaseModel]]] = [
    ("state_object", StateObject),
]

ENUM_TYPES: List[tuple[str, type]] = [
    ("state", State),
]


def _with_header(name: str, schema: Dict[str, Any]) -> Dict[str, Any]:
    schema["$schema"] = "https://json-schema.org/draft/2020-12/schema"
    schema["$id"] = schema_id(name)
    return schema


def generate_schema(name: str, model: Type[BaseModel]) -> Dict[str, Any]:
    """Generate JSON Schema for a Pydantic model."""
    return _with_header(name, model.model_json_schema(mode="serialization"))


def generate_enum_schema(name: str, enum_cls: type) -> Dict[str, Any]:
    """Generate JSON Schema for an enum using TypeAdapter."""
    adapter: TypeAdapter[Any] = TypeAdapter(enum_cls)
    return _with_header(name, adapter.json_schema(mode="serialization"))


def schema_to_json(schema: Dict[str, Any]) -> str:
    """Serialize schema to deterministic JSON string with trailing newline."""
    return json.dumps(schema, indent=2, sort_keys=True) + "\n"


def generate_all_schemas() -> Dict[str, Dict[str, Any]]:
    """Generate all schemas keyed by schema name."""
    schemas: Dict[str, Dict[str, Any]] = {}
    for name, model in PYDANTIC_MODELS:
        schemas[name] = generate_schema(name, model)
    for name, enum_cls in ENUM_TYPES:
        schemas[name] = generate_enum_schema(name, enum_cls)
    return schemas


def write_all_schemas(schemas: Dict[str, Dict[str, Any]]) -> None:
    for name, schema in schemas.items():
        path = SCHEMA_DIR / f"{name}{SCHEMA_SUFFIX}"
        path.write_text(schema_to_json(schema), encoding="utf-8")
        print(f"Generated {path}")


def check_drift() -> int:
    """Compare generated schemas with committed files.

    Returns:
        0 if all schemas match, 1 if any drift detected
    """
    schemas = generate_all_schemas()
    drift_detected = False

    for name, schema in schemas.items():
        path = SCHEMA_DIR / f"{name}{SCHEMA_SUFFIX}"
        expected_content = schema_to_json(schema)

        if not path.exists():
            print(f"ERROR: Missing schema file: {path}", file=sys.stderr)
            drift_detected = True
            continue

        if path.read_text(encoding="utf-8") != expected_content:
            print(f"ERROR: Schema drift detected in {path}", file=sys.stderr)
            print("--- Expected", file=sys.stderr)
            print(expected_content, file=sys.stderr)
            drift_detected = True

    expected_files = {f"{name}{SCHEMA_SUFFIX}" for name in schemas}
    actual_files = {p.name for p in SCHEMA_DIR.glob(f"*{SCHEMA_SUFFIX}")}
    for orphan in sorted(actual_files - expected_files):
        print(f"Orphaned schema {orphan}", file=sys.stderr)
        drift_detected = True

    if drift_detected:
        print("\nSchema drift detected. Run without --check to regenerate.", file=sys.stderr)
        return 1

    print(f"All {len(schemas)} schemas are up to date.")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate JSON schemas for lifecycle-accumulator models"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Check for schema drift without writing files (CI mode)",
    )
    args = parser.parse_args()

    if args.check:
        return check_drift()

    schemas = generate_all_schemas()
    write_all_schemas(schemas)
    print(f"\nSuccessfully generated {len(schemas)} schemas.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
