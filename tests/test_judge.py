"""Tests for single-judge evaluation and its precedence rules."""

from __future__ import annotations

import pytest

from metch import AwaitableJudgeError, Query, evaluate, strict_equals


class TestPredicateJudge:
    def test_truthy_result_matches(self) -> None:
        assert evaluate("data.txt", lambda v: v.endswith(".txt")) is True

    def test_falsy_result_does_not_match(self) -> None:
        assert evaluate("data.csv", lambda v: v.endswith(".txt")) is False

    def test_none_result_does_not_match(self) -> None:
        assert evaluate("x", lambda v: None) is False

    def test_receives_value(self) -> None:
        seen = []
        evaluate(42, seen.append)
        assert seen == [42]

    def test_exception_propagates(self) -> None:
        def boom(value: object) -> bool:
            raise RuntimeError("judge failed")

        with pytest.raises(RuntimeError, match="judge failed"):
            evaluate("x", boom)

    def test_callable_equal_to_value_uses_predicate(self) -> None:
        """A callable judge that is the value itself is still invoked."""

        def reject(value: object) -> bool:
            return False

        assert evaluate(reject, reject) is False

    def test_callable_true_wins_over_inequality(self) -> None:
        def accept(value: object) -> bool:
            return True

        assert evaluate("anything", accept) is True

    def test_async_predicate_rejected(self) -> None:
        async def is_txt(value: str) -> bool:
            return value.endswith(".txt")

        with pytest.raises(AwaitableJudgeError, match="aevaluate"):
            evaluate("a.txt", is_txt)

    def test_awaitable_judge_error_is_type_error(self) -> None:
        async def judge(value: object) -> bool:
            return True

        with pytest.raises(TypeError):
            evaluate("a", judge)


class TestLiteralJudge:
    def test_equal_string(self) -> None:
        assert evaluate("animal.txt", "animal.txt") is True

    def test_different_string(self) -> None:
        assert evaluate("data.txt", "animal.txt") is False

    def test_none_literal(self) -> None:
        assert evaluate(None, None) is True
        assert evaluate("x", None) is False

    def test_structural_equality(self) -> None:
        assert evaluate([1, 2], [1, 2]) is True
        assert evaluate({"a": 1}, {"a": 1}) is True

    def test_numeric_equality_across_types(self) -> None:
        assert evaluate(1, 1.0) is True

    def test_int_does_not_equal_bool(self) -> None:
        assert evaluate(1, True) is True  # rule 3: True matches anything
        assert evaluate(True, 1) is False
        assert evaluate(0, False) is False

    def test_false_matches_false_value(self) -> None:
        assert evaluate(False, False) is True


class TestBooleanJudge:
    def test_true_matches_anything(self) -> None:
        for value in ("x", 0, None, [], object()):
            assert evaluate(value, True) is True

    def test_false_matches_nothing_else(self) -> None:
        for value in ("x", 0, None, [], True):
            assert evaluate(value, False) is False


class TestQueryJudge:
    def test_query_consulted(self) -> None:
        assert evaluate(2, Query.any(1, 2, 3)) is True
        assert evaluate(5, Query.any(1, 2, 3)) is False

    def test_query_is_not_callable(self) -> None:
        assert not callable(Query.all())


class TestStrictEquals:
    def test_identity(self) -> None:
        marker = object()
        assert strict_equals(marker, marker) is True

    def test_bool_mismatch(self) -> None:
        assert strict_equals(1, True) is False
        assert strict_equals(True, 1) is False

    def test_bools(self) -> None:
        assert strict_equals(True, True) is True
        assert strict_equals(False, True) is False

    def test_nan_matches_only_itself(self) -> None:
        nan = float("nan")
        assert strict_equals(nan, nan) is True
        assert strict_equals(float("nan"), nan) is False
        assert evaluate(float("nan"), nan) is False
