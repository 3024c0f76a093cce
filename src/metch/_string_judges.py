"""String judges.

``StringJudge`` is a single callable judge parameterised by a ``StringKind``.
Non-string values never match, so a string judge can sit in a Query next to
literals of other types.

    >>> StringJudge.prefix("/api")("/api/users")
    True
    >>> StringJudge.suffix(".TXT", ignore_case=True)("notes.txt")
    True
    >>> StringJudge.prefix("/api")(42)
    False

Regex kinds compile with ``google-re2``, which matches in linear time and
has no backreferences or lookaround.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import re2

from metch._judge import MetchError

if TYPE_CHECKING:
    from collections.abc import Callable


class StringKind(Enum):
    """How a StringJudge compares its value against a candidate string.

    Member values double as the config variant names.
    """

    EXACT = "Exact"
    PREFIX = "Prefix"
    SUFFIX = "Suffix"
    CONTAINS = "Contains"
    REGEX = "Regex"


# (candidate, needle) -> bool
_COMPARE: dict[StringKind, Callable[[str, str], bool]] = {
    StringKind.EXACT: operator.eq,
    StringKind.PREFIX: str.startswith,
    StringKind.SUFFIX: str.endswith,
    StringKind.CONTAINS: operator.contains,
}


@dataclass(frozen=True, slots=True)
class StringJudge:
    """Match string values by kind.

    With ``ignore_case`` both sides are casefolded; for REGEX the pattern is
    compiled with the ``(?i)`` flag instead.

    Raises:
        MetchError: If a REGEX value is not valid RE2 syntax.
    """

    kind: StringKind
    value: str
    ignore_case: bool = False
    _test: Callable[[str], bool] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_test", _build_test(self.kind, self.value, self.ignore_case))

    @classmethod
    def exact(cls, value: str, *, ignore_case: bool = False) -> StringJudge:
        return cls(StringKind.EXACT, value, ignore_case)

    @classmethod
    def prefix(cls, value: str, *, ignore_case: bool = False) -> StringJudge:
        return cls(StringKind.PREFIX, value, ignore_case)

    @classmethod
    def suffix(cls, value: str, *, ignore_case: bool = False) -> StringJudge:
        return cls(StringKind.SUFFIX, value, ignore_case)

    @classmethod
    def contains(cls, value: str, *, ignore_case: bool = False) -> StringJudge:
        return cls(StringKind.CONTAINS, value, ignore_case)

    @classmethod
    def regex(cls, pattern: str, *, ignore_case: bool = False) -> StringJudge:
        return cls(StringKind.REGEX, pattern, ignore_case)

    def __call__(self, value: object, /) -> bool:
        return isinstance(value, str) and self._test(value)


def _build_test(kind: StringKind, value: str, ignore_case: bool) -> Callable[[str], bool]:
    if kind is StringKind.REGEX:
        try:
            compiled = re2.compile(f"(?i){value}" if ignore_case else value)
        except re2.error as e:
            msg = f"invalid regex pattern {value!r}: {e}"
            raise MetchError(msg) from e
        return lambda candidate: compiled.search(candidate) is not None

    compare = _COMPARE[kind]
    if ignore_case:
        needle = value.casefold()
        return lambda candidate: compare(candidate.casefold(), needle)
    return lambda candidate: compare(candidate, value)
