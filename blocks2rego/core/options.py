"""Generator configuration for Blocks2Rego

Options are normally supplied by the workspace that owns the blocks.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

from blocks2rego.core.errors import MalformedBlockError


# Workspace option names mapped onto GeneratorOptions attributes
_CAMEL_CASE_KEYS = {
    'oneBasedIndex': 'one_based_index',
    'oneBasedIndexing': 'one_based_index',
    'statementPrefix': 'statement_prefix',
    'statementPrefixHook': 'statement_prefix',
    'statementSuffix': 'statement_suffix',
    'statementSuffixHook': 'statement_suffix',
    'infiniteLoopTrap': 'infinite_loop_trap',
    'infiniteLoopGuardHook': 'infinite_loop_trap',
    'commentWrap': 'comment_wrap',
    'commentWrapColumn': 'comment_wrap',
    'variablePrefix': 'variable_prefix',
}


@dataclass
class GeneratorOptions:
    """Settings that influence generated code

    Attributes:
        one_based_index: True if user-facing indices start at 1
        statement_prefix: Code injected before each statement (%1 -> block id)
        statement_suffix: Code injected after each statement (%1 -> block id)
        infinite_loop_trap: Code injected at the top of each procedure body
        comment_wrap: Column at which comments are word-wrapped
        indent: Indentation unit for nested statements
        variable_prefix: Prefix prepended to every emitted variable name
    """
    one_based_index: bool = True
    statement_prefix: Optional[str] = None
    statement_suffix: Optional[str] = None
    infinite_loop_trap: Optional[str] = None
    comment_wrap: int = 60
    indent: str = '  '
    variable_prefix: str = ''

    def __post_init__(self) -> None:
        if self.comment_wrap < 4:
            raise ValueError(f"comment_wrap must be at least 4, got {self.comment_wrap}")

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'GeneratorOptions':
        """Build options from a workspace options mapping

        Args:
            data: Mapping using snake_case or workspace camelCase keys

        Returns:
            GeneratorOptions instance

        Raises:
            MalformedBlockError: If an option is unknown or has an invalid value
        """
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise MalformedBlockError(f"Options must be a JSON object: {data!r}")
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name not in known:
                raise MalformedBlockError(f"Unknown generator option: {key}")
            kwargs[name] = value
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as e:
            raise MalformedBlockError(f"Invalid generator options: {e}") from e
