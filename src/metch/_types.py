"""Core type aliases for metch.

A judge is deliberately loose: any callable is a predicate, any other object
is a literal compared by strict equality, ``True`` is a catch-all and a
Query composes the rest. The aliases below document those shapes; runtime
resolution happens in ``metch._judge.evaluate``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from metch._judge import Query

# A predicate may be sync or deferred. Truthy results match.
type Predicate[T] = Callable[[T], object] | Callable[[T], Awaitable[object]]

# Anything usable as the first element of a branch.
type Judge[T] = Predicate[T] | Query | bool | Any

# Caller-supplied callback invoked with the dispatched value.
type ActionFn[T, U] = Callable[[T], U] | Callable[[T], Awaitable[U]]
