"""Canonical fixture loading for lifecycle-accumulator conformance testing.

Provides FixtureCase and ScenarioCase (frozen dataclasses) plus
load_fixtures() / load_scenarios() for data-driven conformance tests.
Reads from the bundled manifest.json and fixture JSON files.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

_FIXTURES_DIR = Path(__file__).parent / "fixtures"
_MANIFEST_PATH = _FIXTURES_DIR / "manifest.json"

_VALID_CATEGORIES = frozenset({"state_objects", "scenarios"})

_SCENARIO_TYPE = "scenario"

# Typos in manifest fixture_type values raise ValueError.
_SPECIAL_FIXTURE_TYPES: frozenset[str] = frozenset({_SCENARIO_TYPE})

_VALID_OPS = frozenset({"accept", "accept_all", "drain"})


@dataclass(frozen=True)
class FixtureCase:
    """A single payload fixture loaded from the manifest."""

    id: str
    payload: Any
    expected_valid: bool
    payload_type: str
    notes: str
    min_version: str


@dataclass(frozen=True)
class ScenarioCase:
    """An ordered accept/drain script with expected drain results."""

    id: str
    steps: Tuple[Dict[str, Any], ...]
    notes: str
    min_version: str
    config: Dict[str, Any] = field(default_factory=dict)


def _read_manifest() -> Dict[str, Any]:
    with open(_MANIFEST_PATH, "r", encoding="utf-8") as fh:
        manifest: Dict[str, Any] = json.load(fh)
    return manifest


def _read_fixture(relative_path: str) -> Any:
    full_path = _FIXTURES_DIR / relative_path
    if not full_path.exists():
        raise FileNotFoundError(
            f"Fixture file referenced in manifest does not exist: {full_path}"
        )
    with open(full_path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def load_fixtures(category: str) -> List[FixtureCase]:
    """Load payload fixture cases for a category.

    Args:
        category: ``"state_objects"``. Scenario entries are skipped; use
            :func:`load_scenarios` for those.

    Returns:
        List of :class:`FixtureCase` instances with payloads loaded from JSON.

    Raises:
        ValueError: If *category* is unknown, or a manifest entry carries an
            unknown ``fixture_type``.
        FileNotFoundError: If the manifest or a referenced fixture file is missing.
    """
    if category not in _VALID_CATEGORIES:
        raise ValueError(
            f"Unknown fixture category: {category!r}. "
            f"Valid categories: {sorted(_VALID_CATEGORIES)}"
        )

    fixtures: List[FixtureCase] = []
    for entry in _read_manifest()["fixtures"]:
        fixture_path: str = entry["path"]
        if not fixture_path.startswith(category + "/"):
            continue

        ft: str | None = entry.get("fixture_type")
        if ft is not None:
            if ft not in _SPECIAL_FIXTURE_TYPES:
                raise ValueError(
                    f"Unknown fixture_type {ft!r} in manifest entry "
                    f"{entry.get('id', '?')!r}. "
                    f"Known types: {sorted(_SPECIAL_FIXTURE_TYPES)}"
                )
            continue

        fixtures.append(
            FixtureCase(
                id=entry["id"],
                payload=_read_fixture(fixture_path),
                expected_valid=entry["expected_result"] == "valid",
                payload_type=entry["payload_type"],
                notes=entry["notes"],
                min_version=entry["min_version"],
            )
        )

    return fixtures


def _scenario_from_entry(entry: Dict[str, Any]) -> ScenarioCase:
    data: Dict[str, Any] = _read_fixture(entry["path"])
    steps: List[Dict[str, Any]] = data["steps"]
    for index, step in enumerate(steps):
        if step.get("op") not in _VALID_OPS:
            raise ValueError(
                f"Scenario {entry['id']!r} step {index} has unknown op "
                f"{step.get('op')!r}. Valid ops: {sorted(_VALID_OPS)}"
            )
    return ScenarioCase(
        id=entry["id"],
        steps=tuple(steps),
        notes=entry["notes"],
        min_version=entry["min_version"],
        config=dict(data.get("config", {})),
    )


def load_scenarios() -> List[ScenarioCase]:
    """Load every replay scenario listed in the manifest."""
    return [
        _scenario_from_entry(entry)
        for entry in _read_manifest()["fixtures"]
        if entry.get("fixture_type") == _SCENARIO_TYPE
    ]


def load_scenario(fixture_id: str) -> ScenarioCase:
    """Load a single replay scenario by manifest id.

    Raises:
        ValueError: If *fixture_id* is not found or is not a scenario entry.
        FileNotFoundError: If the scenario file does not exist on disk.
    """
    for entry in _read_manifest()["fixtures"]:
        if entry["id"] != fixture_id:
            continue
        if entry.get("fixture_type") != _SCENARIO_TYPE:
            raise ValueError(
                f"Fixture {fixture_id!r} is not a scenario "
                f"(fixture_type={entry.get('fixture_type')!r}). "
                f"Use load_fixtures() for payload fixtures."
            )
        return _scenario_from_entry(entry)

    raise ValueError(f"Scenario fixture not found in manifest: {fixture_id!r}")
