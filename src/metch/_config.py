"""Config types for building branch tables from plain data.

The same dict shape can come from JSON or YAML. Config-driven path:
  dict → parse_branch_config() → BranchTableConfig → Registry.load() → BranchTable

Relationship to runtime types:

| Config type           | Runtime type             |
|-----------------------|--------------------------|
| BranchTableConfig     | BranchTable              |
| BranchConfig          | Branch                   |
| JudgeConfig           | Judge                    |
| QueryConfig           | Query                    |
| StringMatchConfig     | StringJudge              |
| TypedConfig           | predicate / action       |
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from metch._judge import MetchError, Mode
from metch._string_judges import StringKind

# ═══════════════════════════════════════════════════════════════════════════════
# Config types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TypedConfig:
    """Reference to a registered factory with its configuration.

    - type_url identifies the registered predicate or action factory
    - config carries the factory-specific payload
    """

    type_url: str
    config: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class LiteralConfig:
    """Match by strict equality against ``value``."""

    value: Any


@dataclass(frozen=True, slots=True)
class BoolConfig:
    """Constant judge: True matches everything."""

    value: bool


@dataclass(frozen=True, slots=True)
class QueryConfig:
    """ALL/ANY composite of child judges."""

    mode: Mode
    judges: tuple[JudgeConfig, ...]


@dataclass(frozen=True, slots=True)
class StringMatchConfig:
    """Built-in string judge.

    The variant name is a StringKind value: Exact, Prefix, Suffix, Contains,
    Regex:
    { "Exact": "hello" }, { "Prefix": "/api" }, { "Regex": "^foo" }
    """

    variant: str
    value: str
    ignore_case: bool = False


@dataclass(frozen=True, slots=True)
class PredicateConfig:
    """Custom predicate resolved via the registry's predicate factories."""

    typed_config: TypedConfig


@dataclass(frozen=True, slots=True)
class DefaultJudgeConfig:
    """The DefaultBranch.DEFAULT catch-all. Only valid as a branch's judge."""


type JudgeConfig = (
    LiteralConfig
    | BoolConfig
    | QueryConfig
    | StringMatchConfig
    | PredicateConfig
    | DefaultJudgeConfig
)


@dataclass(frozen=True, slots=True)
class BranchConfig:
    """Pairs a judge config with an action config."""

    judge: JudgeConfig
    action: TypedConfig


@dataclass(frozen=True, slots=True)
class BranchTableConfig:
    """Configuration for a BranchTable.

    Loaded into a runtime BranchTable via Registry.load().
    """

    branches: tuple[BranchConfig, ...]
    default: TypedConfig | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict → config types)
# ═══════════════════════════════════════════════════════════════════════════════

_STRING_MATCH_VARIANTS = frozenset(kind.value for kind in StringKind)


class ConfigParseError(MetchError):
    """Error parsing a config dict into config types."""


def parse_branch_config(data: dict[str, Any]) -> BranchTableConfig:
    """Parse a dict into a BranchTableConfig.

    This is the main entry point for config loading.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    raw_branches = data.get("branches")
    if raw_branches is None:
        msg = "missing required field 'branches'"
        raise ConfigParseError(msg)
    if not isinstance(raw_branches, list):
        msg = f"'branches' must be a list, got {type(raw_branches).__name__}"
        raise ConfigParseError(msg)

    branches = tuple(_parse_branch(b) for b in raw_branches)

    default = None
    if "default" in data:
        default = _parse_typed_config(data["default"])

    return BranchTableConfig(branches=branches, default=default)


def parse_judge_config(data: dict[str, Any]) -> JudgeConfig:
    """Parse a judge config dict.

    Uses the 'type' discriminant: literal, bool, all, any, match,
    predicate. The 'default' type is accepted only by parse_branch_config,
    as the direct judge of a branch.
    """
    if not isinstance(data, dict):
        msg = f"judge must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    judge_type = data.get("type")
    if judge_type is None:
        msg = "judge missing required field 'type'"
        raise ConfigParseError(msg)

    match judge_type:
        case "literal":
            if "value" not in data:
                msg = "literal judge missing required field 'value'"
                raise ConfigParseError(msg)
            return LiteralConfig(value=data["value"])
        case "bool":
            value = data.get("value")
            if not isinstance(value, bool):
                msg = f"bool judge 'value' must be a bool, got {type(value).__name__}"
                raise ConfigParseError(msg)
            return BoolConfig(value=value)
        case "all" | "any":
            children = data.get("judges", [])
            if not isinstance(children, list):
                msg = f"'judges' must be a list, got {type(children).__name__}"
                raise ConfigParseError(msg)
            return QueryConfig(
                mode=Mode(judge_type),
                judges=tuple(parse_judge_config(j) for j in children),
            )
        case "match":
            return _parse_string_match(data)
        case "predicate":
            if "predicate" not in data:
                msg = "predicate judge missing required field 'predicate'"
                raise ConfigParseError(msg)
            return PredicateConfig(typed_config=_parse_typed_config(data["predicate"]))
        case "default":
            msg = "'default' judge is only valid at branch level"
            raise ConfigParseError(msg)

    msg = f"unknown judge type: {judge_type!r}"
    raise ConfigParseError(msg)


def _parse_branch(data: dict[str, Any]) -> BranchConfig:
    """Parse a single branch config dict."""
    if not isinstance(data, dict):
        msg = f"branch must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    if "judge" not in data:
        msg = "branch missing required field 'judge'"
        raise ConfigParseError(msg)
    if "action" not in data:
        msg = "branch missing required field 'action'"
        raise ConfigParseError(msg)

    raw_judge = data["judge"]
    if isinstance(raw_judge, dict) and raw_judge.get("type") == "default":
        judge: JudgeConfig = DefaultJudgeConfig()
    else:
        judge = parse_judge_config(raw_judge)
    action = _parse_typed_config(data["action"])
    return BranchConfig(judge=judge, action=action)


def _parse_string_match(data: dict[str, Any]) -> StringMatchConfig:
    """Parse a match judge.

    Expected format: { "type": "match", "value_match": { "Prefix": "/api" } }
    """
    value_match = data.get("value_match")
    if not isinstance(value_match, dict):
        msg = f"value_match must be a dict, got {type(value_match).__name__}"
        raise ConfigParseError(msg)

    ignore_case = data.get("ignore_case", False)
    if not isinstance(ignore_case, bool):
        msg = f"ignore_case must be a bool, got {type(ignore_case).__name__}"
        raise ConfigParseError(msg)

    variants = [v for v in value_match if v in _STRING_MATCH_VARIANTS]
    if len(variants) != 1:
        expected = sorted(_STRING_MATCH_VARIANTS)
        msg = (
            f"value_match must contain exactly one of {expected}, "
            f"got keys: {sorted(value_match.keys())}"
        )
        raise ConfigParseError(msg)

    variant = variants[0]
    value = value_match[variant]
    if not isinstance(value, str):
        msg = f"value_match {variant} value must be a string, got {type(value).__name__}"
        raise ConfigParseError(msg)

    return StringMatchConfig(variant=variant, value=value, ignore_case=ignore_case)


def _parse_typed_config(data: dict[str, Any]) -> TypedConfig:
    """Parse a typed config dict."""
    if not isinstance(data, dict):
        msg = f"typed_config must be a dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    if "type_url" not in data:
        msg = "typed_config missing required field 'type_url'"
        raise ConfigParseError(msg)

    type_url = data["type_url"]
    if not isinstance(type_url, str):
        msg = f"type_url must be a string, got {type(type_url).__name__}"
        raise ConfigParseError(msg)

    config = data.get("config", {})
    if not isinstance(config, dict):
        msg = f"config must be a dict, got {type(config).__name__}"
        raise ConfigParseError(msg)

    return TypedConfig(type_url=type_url, config=config)
