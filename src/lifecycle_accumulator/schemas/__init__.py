"""Committed JSON Schemas for StateObject payloads and the State enum.

Schema files live beside this module as ``<name>.schema.json`` and carry
an ``$id`` of ``lifecycle-accumulator/<name>``. They are regenerated from
the pydantic models by ``python -m lifecycle_accumulator.schemas.generate``.
"""
from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List

SCHEMA_DIR = Path(__file__).parent
SCHEMA_SUFFIX = ".schema.json"
SCHEMA_ID_PREFIX = "lifecycle-accumulator/"


def schema_id(name: str) -> str:
    """Return the ``$id`` a schema named ``name`` is published under."""
    return f"{SCHEMA_ID_PREFIX}{name}"


def list_schemas() -> List[str]:
    """Names of the committed schemas, sorted."""
    return sorted(
        p.name[: -len(SCHEMA_SUFFIX)] for p in SCHEMA_DIR.glob(f"*{SCHEMA_SUFFIX}")
    )


def schema_path(name: str) -> Path:
    path = SCHEMA_DIR / f"{name}{SCHEMA_SUFFIX}"
    if not path.is_file():
        raise FileNotFoundError(
            f"No committed schema named {name!r}. Available: {', '.join(list_schemas())}"
        )
    return path


@lru_cache(maxsize=None)
def _read_schema(name: str) -> str:
    return schema_path(name).read_text(encoding="utf-8")


def load_schema(name: str) -> Dict[str, Any]:
    """Load a committed schema as a fresh dict.

    The file is read once per process; callers may mutate the result.
    """
    schema: Dict[str, Any] = json.loads(_read_schema(name))
    return schema
