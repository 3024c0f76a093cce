"""metch: ordered, predicate-driven branch selection.

All public types are exported from this module for flat imports:

    from metch import Query, dispatch, dispatch_returning
"""

__version__ = "0.1.0"

# Config types, see metch._config for details
from metch._config import (
    BoolConfig,
    BranchConfig,
    BranchTableConfig,
    ConfigParseError,
    DefaultJudgeConfig,
    JudgeConfig,
    LiteralConfig,
    PredicateConfig,
    QueryConfig,
    StringMatchConfig,
    TypedConfig,
    parse_branch_config,
    parse_judge_config,
)

# Dispatch
from metch._dispatch import (
    Branch,
    BranchTable,
    DefaultBranch,
    adispatch,
    adispatch_returning,
    dispatch,
    dispatch_returning,
)

# Judges and queries
from metch._judge import (
    AwaitableJudgeError,
    MetchError,
    Mode,
    Query,
    aevaluate,
    evaluate,
    query_depth,
    strict_equals,
)

# Registry, see metch._registry for details
from metch._registry import (
    MAX_BRANCHES,
    MAX_JUDGES_PER_QUERY,
    MAX_PATTERN_LENGTH,
    MAX_REGEX_PATTERN_LENGTH,
    InvalidConfigError,
    PatternTooLongError,
    Registry,
    RegistryBuilder,
    TooManyBranchesError,
    TooManyJudgesError,
    UnknownTypeUrlError,
)

# String judges
from metch._string_judges import StringJudge, StringKind
from metch._types import ActionFn, Judge, Predicate

__all__ = [
    # Type aliases
    "ActionFn",
    "Judge",
    "Predicate",
    # Judges and queries
    "evaluate",
    "aevaluate",
    "strict_equals",
    "Mode",
    "Query",
    "query_depth",
    "MetchError",
    "AwaitableJudgeError",
    # Dispatch
    "Branch",
    "BranchTable",
    "DefaultBranch",
    "dispatch",
    "dispatch_returning",
    "adispatch",
    "adispatch_returning",
    # String judges
    "StringJudge",
    "StringKind",
    # Config types
    "TypedConfig",
    "LiteralConfig",
    "BoolConfig",
    "QueryConfig",
    "StringMatchConfig",
    "PredicateConfig",
    "DefaultJudgeConfig",
    "JudgeConfig",
    "BranchConfig",
    "BranchTableConfig",
    "ConfigParseError",
    "parse_branch_config",
    "parse_judge_config",
    # Registry
    "RegistryBuilder",
    "Registry",
    "UnknownTypeUrlError",
    "InvalidConfigError",
    "TooManyBranchesError",
    "TooManyJudgesError",
    "PatternTooLongError",
    "MAX_BRANCHES",
    "MAX_JUDGES_PER_QUERY",
    "MAX_PATTERN_LENGTH",
    "MAX_REGEX_PATTERN_LENGTH",
]
