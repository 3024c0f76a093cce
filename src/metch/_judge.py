"""Judge evaluation and Query composition.

``evaluate`` decides whether a single judge accepts a value. The precedence
is fixed and checked in this order:

1. callable judge -> call it, truthy result matches
2. strict equality between value and judge
3. ``True`` literal -> always matches
4. Query -> recurse into the composite
5. anything else -> no match

A callable judge never falls through to rules 2-4, even when it happens to
equal the value.

Query combines judges with ALL/ANY short-circuit evaluation. Nesting depth is
bounded only by the interpreter's recursion limit.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from metch._types import Judge


class MetchError(Exception):
    """Base class for errors raised by metch itself."""


class AwaitableJudgeError(MetchError, TypeError):
    """A predicate returned an awaitable during synchronous evaluation."""

    def __init__(self, judge: object) -> None:
        self.judge = judge
        name = getattr(judge, "__qualname__", type(judge).__name__)
        super().__init__(
            f"judge {name} returned an awaitable; use aevaluate/adispatch "
            "for deferred judges"
        )


class Mode(Enum):
    """Boolean aggregation mode of a Query."""

    ALL = "all"
    ANY = "any"


@dataclass(frozen=True, slots=True)
class Query:
    """An ALL/ANY composite of judges.

    Children may be predicates, literals, booleans or further queries.
    ALL short-circuits on the first rejecting child and is True when empty
    (vacuous truth). ANY short-circuits on the first accepting child and is
    False when empty.

    >>> Query.any(1, 2, 3).evaluate(2)
    True
    >>> Query.all(lambda v: v > 0, Query.any(4, 5)).evaluate(5)
    True
    """

    mode: Mode
    judges: tuple[Judge[Any], ...] = ()

    @classmethod
    def all(cls, *judges: Judge[Any]) -> Query:
        return cls(Mode.ALL, judges)

    @classmethod
    def any(cls, *judges: Judge[Any]) -> Query:
        return cls(Mode.ANY, judges)

    def evaluate(self, value: Any) -> bool:
        if self.mode is Mode.ALL:
            for judge in self.judges:
                if not evaluate(value, judge):
                    return False
            return True
        for judge in self.judges:
            if evaluate(value, judge):
                return True
        return False

    async def aevaluate(self, value: Any) -> bool:
        """Like evaluate(), awaiting deferred predicate results."""
        if self.mode is Mode.ALL:
            for judge in self.judges:
                if not await aevaluate(value, judge):
                    return False
            return True
        for judge in self.judges:
            if await aevaluate(value, judge):
                return True
        return False


def evaluate(value: Any, judge: Judge[Any]) -> bool:
    """Return True if ``judge`` accepts ``value``.

    Raises:
        AwaitableJudgeError: If a predicate returns an awaitable.

    Exceptions raised by a predicate propagate unchanged.
    """
    if callable(judge):
        result = judge(value)
        if inspect.isawaitable(result):
            _discard(result)
            raise AwaitableJudgeError(judge)
        return bool(result)
    if strict_equals(value, judge) or judge is True:
        return True
    if isinstance(judge, Query):
        return judge.evaluate(value)
    return False


async def aevaluate(value: Any, judge: Judge[Any]) -> bool:
    """Async counterpart of evaluate().

    Awaitable predicate results are awaited before their truthiness is
    checked; nested queries are evaluated with Query.aevaluate().
    """
    if callable(judge):
        result = judge(value)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)
    if strict_equals(value, judge) or judge is True:
        return True
    if isinstance(judge, Query):
        return await judge.aevaluate(value)
    return False


def strict_equals(value: Any, judge: Any) -> bool:
    """Identity or ``==``, refusing to equate bools with non-bools.

    Python treats ``1 == True``; judges do not, so an int literal never
    matches a bool value and vice versa. Identity wins over ``==``, so a NaN
    judge matches the same NaN object but never a different NaN.
    """
    if value is judge:
        return True
    if isinstance(value, bool) != isinstance(judge, bool):
        return False
    return bool(value == judge)


def query_depth(judge: Judge[Any]) -> int:
    """Calculate the nesting depth of a judge tree."""
    match judge:
        case Query(judges=children):
            return 1 + max((query_depth(j) for j in children), default=0)
        case _:
            return 1


def _discard(awaitable: Any) -> None:
    # Coroutines are closed; other awaitables are left untouched.
    close = getattr(awaitable, "close", None)
    if close is not None:
        close()
