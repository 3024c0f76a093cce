"""Test utilities for metch.

Provides a recording action and a small test-domain registration for use in
tests and examples. For real applications, register your own predicate and
action factories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from metch._string_judges import StringJudge

if TYPE_CHECKING:
    from collections.abc import Callable

    from metch._registry import RegistryBuilder


@dataclass(slots=True)
class RecordingAction:
    """Action that remembers every value it was invoked with.

    >>> from metch import dispatch
    >>> from metch.testing import RecordingAction
    >>> hit = RecordingAction("hit")
    >>> dispatch("a", [("a", hit)])
    'hit'
    >>> hit.calls
    ['a']
    """

    result: Any = None
    calls: list[Any] = field(default_factory=list)

    def __call__(self, value: Any, /) -> Any:
        self.calls.append(value)
        return self.result

    @property
    def call_count(self) -> int:
        return len(self.calls)


def register(builder: RegistryBuilder) -> RegistryBuilder:
    """Register the test-domain predicate and action types.

    Type URLs:
    - metch.test.v1.Contains (predicate): { "substring": str }
    - metch.test.v1.Return (action): { "value": any }
    - metch.test.v1.Format (action): { "template": str }, formatted with value=...
    """
    return (
        builder.predicate("metch.test.v1.Contains", _contains_factory)
        .action("metch.test.v1.Return", _return_factory)
        .action("metch.test.v1.Format", _format_factory)
    )


def _contains_factory(config: dict[str, Any]) -> StringJudge:
    substring = config.get("substring")
    if not isinstance(substring, str):
        msg = "Contains requires a 'substring' field (string)"
        raise ValueError(msg)
    return StringJudge.contains(substring)


def _return_factory(config: dict[str, Any]) -> Callable[[Any], Any]:
    if "value" not in config:
        msg = "Return requires a 'value' field"
        raise ValueError(msg)
    result = config["value"]
    return lambda _value: result


def _format_factory(config: dict[str, Any]) -> Callable[[Any], str]:
    template = config.get("template")
    if not isinstance(template, str):
        msg = "Format requires a 'template' field (string)"
        raise ValueError(msg)
    return lambda value: template.format(value=value)
