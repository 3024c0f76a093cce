"""Branch dispatch with first-match-wins semantics.

Branches are scanned in order and the action of the first branch whose
judge accepts the value is invoked with that value:
- Later branches are never evaluated once one matches
- The default action runs only when no branch matches
- Judge and action exceptions propagate; there is no fallback on error
- Sync dispatch never awaits; a deferred action result is handed back as is
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple

from metch._judge import aevaluate, evaluate

if TYPE_CHECKING:
    from collections.abc import Iterable

    from metch._types import ActionFn, Judge

logger = logging.getLogger(__name__)


class DefaultBranch(Enum):
    """Catch-all judge for use inside a branch list.

    Matches any value when the dispatcher reaches it, so it belongs at the
    end of the list. Only the dispatch scan recognizes it; inside a Query it
    is an ordinary literal.
    """

    DEFAULT = "default"


class Branch[T, U](NamedTuple):
    """A ``(judge, action)`` pair. Plain 2-tuples are accepted everywhere."""

    judge: Judge[T]
    action: ActionFn[T, U]


def dispatch[T](
    value: T,
    branches: Iterable[tuple[Judge[T], ActionFn[T, Any]]],
    default: ActionFn[T, Any] | None = None,
) -> Any:
    """Invoke the action of the first branch whose judge accepts ``value``.

    Falls back to ``default(value)`` when nothing matches, or does nothing
    when there is no default. Whatever the invoked action returns, including
    an un-awaited coroutine, is returned to the caller.
    """
    action = _select(value, branches)
    if action is not None:
        return action(value)
    if default is not None:
        return default(value)
    return None


def dispatch_returning[T, U](
    value: T,
    branches: Iterable[tuple[Judge[T], ActionFn[T, U]]],
    default: ActionFn[T, U],
) -> Any:
    """Like dispatch(), but a default action is mandatory.

    The result is exactly what the matched (or default) action returned.

    Raises:
        TypeError: If ``default`` is None.
    """
    _require_default(default)
    action = _select(value, branches)
    if action is not None:
        return action(value)
    return default(value)


async def adispatch[T](
    value: T,
    branches: Iterable[tuple[Judge[T], ActionFn[T, Any]]],
    default: ActionFn[T, Any] | None = None,
) -> Any:
    """Async dispatch: awaits deferred judges and the selected action."""
    action = await _aselect(value, branches)
    if action is None:
        if default is None:
            return None
        action = default
    return await _settle(action(value))


async def adispatch_returning[T, U](
    value: T,
    branches: Iterable[tuple[Judge[T], ActionFn[T, U]]],
    default: ActionFn[T, U],
) -> U:
    """Async counterpart of dispatch_returning()."""
    _require_default(default)
    action = await _aselect(value, branches)
    if action is None:
        action = default
    return await _settle(action(value))


@dataclass(frozen=True, slots=True)
class BranchTable[T, U]:
    """A reusable, immutable branch list with an optional default.

    Produced by Registry.load() from config, or built directly.
    """

    branches: tuple[Branch[T, U], ...]
    default: ActionFn[T, U] | None = None

    def dispatch(self, value: T) -> Any:
        return dispatch(value, self.branches, self.default)

    def dispatch_returning(self, value: T) -> Any:
        return dispatch_returning(value, self.branches, self.default)

    async def adispatch(self, value: T) -> Any:
        return await adispatch(value, self.branches, self.default)

    async def adispatch_returning(self, value: T) -> Any:
        return await adispatch_returning(value, self.branches, self.default)


def _select(value: Any, branches: Iterable[Any]) -> ActionFn[Any, Any] | None:
    """Return the action of the first matching branch, or None."""
    for index, (judge, action) in enumerate(branches):
        if judge is DefaultBranch.DEFAULT or evaluate(value, judge):
            logger.debug("branch %d matched %r", index, value)
            return action
    logger.debug("no branch matched %r", value)
    return None


async def _aselect(
    value: Any, branches: Iterable[Any]
) -> ActionFn[Any, Any] | None:
    for index, (judge, action) in enumerate(branches):
        if judge is DefaultBranch.DEFAULT or await aevaluate(value, judge):
            logger.debug("branch %d matched %r", index, value)
            return action
    logger.debug("no branch matched %r", value)
    return None


async def _settle(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result


def _require_default(default: object) -> None:
    if default is None:
        msg = "dispatch_returning requires a default action"
        raise TypeError(msg)
