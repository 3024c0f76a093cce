"""Dispatch benchmarks for metch.

Measures the hot path: literal scanning, predicate judges, query
evaluation, miss-heavy workloads and config-built branch tables.

Run: uv run pytest tests/bench/test_bench_dispatch.py --benchmark-only
"""

from __future__ import annotations

from metch import (
    Branch,
    Query,
    RegistryBuilder,
    StringJudge,
    dispatch,
    dispatch_returning,
    parse_branch_config,
)
from metch.testing import register


def _ok(value: str) -> str:
    return "ok"


def _default(value: str) -> str:
    return "default"


def literal_branches(n: int) -> list[Branch[str, str]]:
    return [Branch(f"file_{i}.txt", _ok) for i in range(n)]


# ── Core scenarios ───────────────────────────────────────────────────────────


def test_bench_literal_hit(benchmark):
    branches = literal_branches(1)
    benchmark(dispatch, "file_0.txt", branches, _default)


def test_bench_literal_miss(benchmark):
    branches = literal_branches(1)
    benchmark(dispatch, "other", branches, _default)


def test_bench_predicate_hit(benchmark):
    branches = [Branch(lambda v: v.endswith(".txt"), _ok)]
    benchmark(dispatch, "data.txt", branches, _default)


def test_bench_prefix_judge_hit(benchmark):
    branches = [Branch(StringJudge.prefix("/api/"), _ok)]
    benchmark(dispatch, "/api/v2/users/123", branches, _default)


def test_bench_regex_judge_hit(benchmark):
    branches = [Branch(StringJudge.regex(r"^/api/v\d+/users/\d+$"), _ok)]
    benchmark(dispatch, "/api/v2/users/123", branches, _default)


# ── Queries ──────────────────────────────────────────────────────────────────


def test_bench_any_literals_miss(benchmark):
    branches = [Branch(Query.any(*range(100)), _ok)]
    benchmark(dispatch_returning, 500, branches, _default)


def test_bench_nested_query_hit(benchmark):
    q = Query.all(
        StringJudge.prefix("J"),
        "Jackie Chan",
        Query.any(lambda v: v.endswith("n"), False),
    )
    benchmark(dispatch_returning, "Jackie Chan", [Branch(q, _ok)], _default)


def test_bench_deep_query(benchmark):
    q: Query = Query.all(True)
    for _ in range(32):
        q = Query.all(q)
    benchmark(q.evaluate, "x")


# ── Scaling ──────────────────────────────────────────────────────────────────


def test_bench_scan_1000_last_hit(benchmark):
    branches = literal_branches(1000)
    benchmark(dispatch, "file_999.txt", branches, _default)


def test_bench_scan_1000_miss(benchmark):
    branches = literal_branches(1000)
    benchmark(dispatch, "nope", branches, _default)


# ── Config-built tables ──────────────────────────────────────────────────────


def test_bench_config_table_dispatch(benchmark):
    registry = register(RegistryBuilder()).build()
    config = parse_branch_config(
        {
            "branches": [
                {
                    "judge": {"type": "match", "value_match": {"Prefix": f"/svc{i}/"}},
                    "action": {"type_url": "metch.test.v1.Return", "config": {"value": i}},
                }
                for i in range(50)
            ],
            "default": {"type_url": "metch.test.v1.Return", "config": {"value": -1}},
        }
    )
    table = registry.load(config)
    benchmark(table.dispatch, "/svc49/health")


def test_bench_config_load(benchmark):
    registry = register(RegistryBuilder()).build()
    data = {
        "branches": [
            {
                "judge": {
                    "type": "any",
                    "judges": [{"type": "literal", "value": j} for j in range(10)],
                },
                "action": {"type_url": "metch.test.v1.Return", "config": {"value": i}},
            }
            for i in range(50)
        ]
    }
    benchmark(lambda: registry.load(parse_branch_config(data)))
