"""Type registry for config-driven branch tables.

The registry turns a parsed BranchTableConfig into a runnable BranchTable
without caller-side compile code:
- RegistryBuilder → .build() → Registry (immutable)
- Factories are plain callables: (config: dict) → predicate or action
- load() walks the config tree and constructs runtime judges and branches

Example::

    builder = RegistryBuilder()
    builder.action("app.v1.Greet", lambda cfg: lambda name: f"hi {name}")
    registry = builder.build()

    table = registry.load(parse_branch_config(yaml.safe_load(text)))
    table.dispatch_returning("alice")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from metch._config import (
    BoolConfig,
    DefaultJudgeConfig,
    LiteralConfig,
    PredicateConfig,
    QueryConfig,
    StringMatchConfig,
)
from metch._dispatch import Branch, BranchTable, DefaultBranch
from metch._judge import MetchError, Query
from metch._string_judges import StringJudge, StringKind

if TYPE_CHECKING:
    from collections.abc import Callable

    from metch._config import BranchConfig, BranchTableConfig, JudgeConfig, TypedConfig
    from metch._types import ActionFn, Judge, Predicate

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Limits
# ═══════════════════════════════════════════════════════════════════════════════

MAX_BRANCHES = 256
MAX_JUDGES_PER_QUERY = 256
MAX_PATTERN_LENGTH = 8192
MAX_REGEX_PATTERN_LENGTH = 4096

# ═══════════════════════════════════════════════════════════════════════════════
# Error types
# ═══════════════════════════════════════════════════════════════════════════════


class UnknownTypeUrlError(MetchError):
    """A type_url was not found in the registry."""

    def __init__(self, type_url: str, registry: str, available: list[str]) -> None:
        self.type_url = type_url
        self.registry = registry
        self.available = sorted(available)
        if self.available:
            registered = ", ".join(self.available)
            msg = (
                f"unknown {registry} type_url: {type_url!r} "
                f"(registered: {registered})"
            )
        else:
            msg = (
                f"unknown {registry} type_url: {type_url!r} "
                f"(no {registry} types are registered)"
            )
        super().__init__(msg)


class InvalidConfigError(MetchError):
    """A config payload was malformed or semantically invalid."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"invalid config: {source}")


class TooManyBranchesError(MetchError):
    """Config has too many branches (width-based limit)."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(f"too many branches: {count} exceeds maximum {max_}")


class TooManyJudgesError(MetchError):
    """Query has too many children (width-based limit)."""

    def __init__(self, count: int, max_: int) -> None:
        self.count = count
        self.max = max_
        super().__init__(
            f"too many judges in query: {count} exceeds maximum {max_}"
        )


class PatternTooLongError(MetchError):
    """A string match pattern exceeds the length limit."""

    def __init__(self, length: int, max_: int) -> None:
        self.length = length
        self.max = max_
        super().__init__(f"pattern length {length} exceeds maximum {max_}")


# ═══════════════════════════════════════════════════════════════════════════════
# Builder
# ═══════════════════════════════════════════════════════════════════════════════

type PredicateFactory = Callable[[dict[str, Any]], Predicate[Any]]
type ActionFactory = Callable[[dict[str, Any]], ActionFn[Any, Any]]


class RegistryBuilder:
    """Builder for constructing a Registry.

    Register predicate and action factories with type URLs, then call
    build() to produce an immutable Registry.
    """

    def __init__(self) -> None:
        self._predicate_factories: dict[str, PredicateFactory] = {}
        self._action_factories: dict[str, ActionFactory] = {}

    def predicate(self, type_url: str, factory: PredicateFactory) -> RegistryBuilder:
        """Register a predicate factory with a type URL."""
        self._predicate_factories[type_url] = factory
        return self

    def action(self, type_url: str, factory: ActionFactory) -> RegistryBuilder:
        """Register an action factory with a type URL."""
        self._action_factories[type_url] = factory
        return self

    def build(self) -> Registry:
        """Freeze the registry. No further registration is possible."""
        return Registry(
            _predicate_factories=MappingProxyType(dict(self._predicate_factories)),
            _action_factories=MappingProxyType(dict(self._action_factories)),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Registry
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Registry:
    """Immutable registry of predicate and action factories.

    Constructed via RegistryBuilder. Use load() to compile config into a
    runtime BranchTable.
    """

    _predicate_factories: MappingProxyType[str, PredicateFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )
    _action_factories: MappingProxyType[str, ActionFactory] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def load(self, config: BranchTableConfig) -> BranchTable[Any, Any]:
        """Load a BranchTable from configuration.

        Raises:
            UnknownTypeUrlError: predicate or action type_url not registered
            InvalidConfigError: factory rejected its config payload
            TooManyBranchesError: too many branches
            TooManyJudgesError: too many query children
            PatternTooLongError: pattern exceeds length limit
        """
        if len(config.branches) > MAX_BRANCHES:
            raise TooManyBranchesError(len(config.branches), MAX_BRANCHES)

        branches = tuple(self._load_branch(b) for b in config.branches)

        default = None
        if config.default is not None:
            default = self._load_action(config.default)

        logger.debug(
            "loaded branch table: %d branches, default=%s",
            len(branches),
            default is not None,
        )
        return BranchTable(branches=branches, default=default)

    def load_judge(self, config: JudgeConfig) -> Judge[Any]:
        """Build a runtime judge from a judge config."""
        match config:
            case LiteralConfig(value=value) | BoolConfig(value=value):
                return value
            case QueryConfig(mode=mode, judges=children):
                if len(children) > MAX_JUDGES_PER_QUERY:
                    raise TooManyJudgesError(len(children), MAX_JUDGES_PER_QUERY)
                if any(isinstance(j, DefaultJudgeConfig) for j in children):
                    msg = "'default' judge is only valid at branch level"
                    raise InvalidConfigError(msg)
                return Query(mode, tuple(self.load_judge(j) for j in children))
            case StringMatchConfig(variant=variant, value=value, ignore_case=ic):
                return _compile_string_match(variant, value, ic)
            case PredicateConfig(typed_config=tc):
                return self._resolve(tc, self._predicate_factories, "predicate")
            case DefaultJudgeConfig():
                return DefaultBranch.DEFAULT
            case _:  # pragma: no cover
                msg = f"unknown judge config type: {type(config).__name__}"
                raise InvalidConfigError(msg)

    @property
    def predicate_count(self) -> int:
        """Number of registered predicate types."""
        return len(self._predicate_factories)

    @property
    def action_count(self) -> int:
        """Number of registered action types."""
        return len(self._action_factories)

    def contains_predicate(self, type_url: str) -> bool:
        return type_url in self._predicate_factories

    def contains_action(self, type_url: str) -> bool:
        return type_url in self._action_factories

    def predicate_type_urls(self) -> list[str]:
        """Return all registered predicate type URLs (sorted)."""
        return sorted(self._predicate_factories.keys())

    def action_type_urls(self) -> list[str]:
        """Return all registered action type URLs (sorted)."""
        return sorted(self._action_factories.keys())

    # ── Private loading methods ────────────────────────────────────────────

    def _load_branch(self, config: BranchConfig) -> Branch[Any, Any]:
        judge = self.load_judge(config.judge)
        action = self._load_action(config.action)
        return Branch(judge, action)

    def _load_action(self, config: TypedConfig) -> ActionFn[Any, Any]:
        return self._resolve(config, self._action_factories, "action")

    @staticmethod
    def _resolve(
        config: TypedConfig,
        factories: MappingProxyType[str, Any],
        kind: str,
    ) -> Any:
        factory = factories.get(config.type_url)
        if factory is None:
            raise UnknownTypeUrlError(config.type_url, kind, list(factories.keys()))
        try:
            built = factory(config.config)
        except Exception as e:
            raise InvalidConfigError(str(e)) from e
        if not callable(built):
            msg = f"{kind} factory for {config.type_url!r} returned non-callable {built!r}"
            raise InvalidConfigError(msg)
        return built


# ═══════════════════════════════════════════════════════════════════════════════
# Built-in string judge compilation
# ═══════════════════════════════════════════════════════════════════════════════


def _check_pattern_length(variant: str, value: str) -> None:
    """Enforce pattern length limits on built-in string match configs."""
    if variant == "Regex":
        if len(value) > MAX_REGEX_PATTERN_LENGTH:
            raise PatternTooLongError(len(value), MAX_REGEX_PATTERN_LENGTH)
    elif len(value) > MAX_PATTERN_LENGTH:
        raise PatternTooLongError(len(value), MAX_PATTERN_LENGTH)


def _compile_string_match(variant: str, value: str, ignore_case: bool) -> StringJudge:
    """Compile a built-in string match variant into a StringJudge."""
    _check_pattern_length(variant, value)
    try:
        kind = StringKind(variant)
    except ValueError:
        msg = f"unknown built-in match variant: {variant!r}"
        raise InvalidConfigError(msg) from None
    try:
        return StringJudge(kind, value, ignore_case)
    except MetchError as e:
        raise InvalidConfigError(str(e)) from e
