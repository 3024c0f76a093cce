"""Conformance fixture loader for metch.

Loads YAML fixtures from tests/fixtures/ and feeds them to tests that ask for
``dispatch_case`` or ``error_fixture``. Each YAML document describes one
branch-table config plus the values to dispatch and the expected results;
documents marked ``expect_error`` must fail to parse or load.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml

from metch import BranchTable, RegistryBuilder, parse_branch_config
from metch.testing import register

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class FixtureCase:
    """A single dispatch case from a conformance fixture."""

    fixture_name: str
    case_name: str
    config: dict[str, Any]
    value: Any
    expect: Any


@dataclass
class ErrorFixture:
    """A config that must be rejected."""

    fixture_name: str
    config: dict[str, Any]


# ─── Fixture loading ────────────────────────────────────────────────────────


def _load_documents() -> list[dict[str, Any]]:
    docs: list[dict[str, Any]] = []
    for yaml_file in sorted(FIXTURE_DIR.glob("*.yaml")):
        with yaml_file.open() as f:
            for doc in yaml.safe_load_all(f):
                if doc is None:
                    continue
                doc["_source"] = yaml_file.name
                docs.append(doc)
    return docs


def load_dispatch_fixtures() -> list[FixtureCase]:
    """Load every positive fixture case."""
    cases: list[FixtureCase] = []
    for doc in _load_documents():
        if doc.get("expect_error", False):
            continue
        fixture_name = f"{doc['_source']}::{doc['name']}"
        for case in doc["cases"]:
            cases.append(
                FixtureCase(
                    fixture_name=fixture_name,
                    case_name=case["name"],
                    config=doc["config"],
                    value=case["value"],
                    expect=case["expect"],
                )
            )
    return cases


def load_error_fixtures() -> list[ErrorFixture]:
    """Load every fixture that must fail to parse or load."""
    return [
        ErrorFixture(f"{doc['_source']}::{doc['name']}", doc["config"])
        for doc in _load_documents()
        if doc.get("expect_error", False)
    ]


def pytest_generate_tests(metafunc: pytest.Metafunc) -> None:
    if "dispatch_case" in metafunc.fixturenames:
        cases = load_dispatch_fixtures()
        metafunc.parametrize(
            "dispatch_case",
            cases,
            ids=[f"{c.fixture_name}::{c.case_name}" for c in cases],
        )
    if "error_fixture" in metafunc.fixturenames:
        errors = load_error_fixtures()
        metafunc.parametrize(
            "error_fixture", errors, ids=[e.fixture_name for e in errors]
        )


# ─── Shared fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def compile_fixture():  # noqa: ANN201
    """Parse and load a fixture config into a BranchTable."""
    registry = register(RegistryBuilder()).build()

    def _compile(config: dict[str, Any]) -> BranchTable[Any, Any]:
        return registry.load(parse_branch_config(config))

    return _compile
