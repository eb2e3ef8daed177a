"""Block tree model for Blocks2Rego

A workspace holds top-level blocks. Each block has a kind, field values,
value inputs (expression children), statement inputs (heads of nested
statement chains) and an optional link to the next statement.

The JSON interchange format read by Block.from_dict:

    {
      "type": "logic_compare",
      "id": "b7",
      "fields": {"OP": "LT"},
      "values": {"A": {...}, "B": null},
      "statements": {"DO0": {...}},
      "next": {...},
      "comment": "free text",
      "output": true,
      "enabled": true,
      "mutation": {"items": 3}
    }
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

from blocks2rego.core.errors import MalformedBlockError
from blocks2rego.core.options import GeneratorOptions


class BlockType(Enum):
    """Every block kind the generator can translate"""
    CONTROLS_IF = 'controls_if'
    CONTROLS_IFELSE = 'controls_ifelse'
    LOGIC_COMPARE = 'logic_compare'
    LOGIC_OPERATION = 'logic_operation'
    LOGIC_NEGATE = 'logic_negate'
    LOGIC_BOOLEAN = 'logic_boolean'
    LOGIC_NULL = 'logic_null'
    LOGIC_TERNARY = 'logic_ternary'
    MATH_NUMBER = 'math_number'
    PROCEDURES_DEFRETURN = 'procedures_defreturn'
    PROCEDURES_DEFNORETURN = 'procedures_defnoreturn'
    PROCEDURES_CALLRETURN = 'procedures_callreturn'
    PROCEDURES_CALLNORETURN = 'procedures_callnoreturn'
    PROCEDURES_IFRETURN = 'procedures_ifreturn'
    TEXT = 'text'
    TEXT_MULTILINE = 'text_multiline'
    TEXT_JOIN = 'text_join'
    TEXT_APPEND = 'text_append'
    TEXT_LENGTH = 'text_length'
    TEXT_IS_EMPTY = 'text_isEmpty'
    TEXT_INDEX_OF = 'text_indexOf'
    TEXT_CHAR_AT = 'text_charAt'
    TEXT_GET_SUBSTRING = 'text_getSubstring'
    TEXT_CHANGE_CASE = 'text_changeCase'
    TEXT_TRIM = 'text_trim'
    TEXT_PRINT = 'text_print'
    TEXT_PROMPT_EXT = 'text_prompt_ext'
    TEXT_PROMPT = 'text_prompt'
    TEXT_COUNT = 'text_count'
    TEXT_REPLACE = 'text_replace'
    TEXT_REVERSE = 'text_reverse'
    VARIABLES_GET = 'variables_get'
    VARIABLES_SET = 'variables_set'
    VARIABLES_GET_DYNAMIC = 'variables_get_dynamic'
    VARIABLES_SET_DYNAMIC = 'variables_set_dynamic'

    @classmethod
    def parse(cls, name: str) -> 'BlockType':
        """Look up a block kind by its workspace name

        Raises:
            MalformedBlockError: If the kind is unknown
        """
        try:
            return cls(name)
        except ValueError:
            raise MalformedBlockError(
                f'Language "Rego" does not know how to generate code for block type "{name}"'
            ) from None


# Kinds whose blocks produce a value unless told otherwise
VALUE_TYPES = frozenset({
    BlockType.LOGIC_COMPARE, BlockType.LOGIC_OPERATION, BlockType.LOGIC_NEGATE,
    BlockType.LOGIC_BOOLEAN, BlockType.LOGIC_NULL, BlockType.LOGIC_TERNARY,
    BlockType.MATH_NUMBER, BlockType.PROCEDURES_CALLRETURN, BlockType.TEXT,
    BlockType.TEXT_MULTILINE, BlockType.TEXT_JOIN, BlockType.TEXT_LENGTH,
    BlockType.TEXT_IS_EMPTY, BlockType.TEXT_INDEX_OF, BlockType.TEXT_CHAR_AT,
    BlockType.TEXT_GET_SUBSTRING, BlockType.TEXT_CHANGE_CASE, BlockType.TEXT_TRIM,
    BlockType.TEXT_PROMPT_EXT, BlockType.TEXT_PROMPT, BlockType.TEXT_COUNT,
    BlockType.TEXT_REPLACE, BlockType.TEXT_REVERSE, BlockType.VARIABLES_GET,
    BlockType.VARIABLES_GET_DYNAMIC,
})

# Kinds that inject the statement prefix/suffix themselves
SUPPRESS_PREFIX_SUFFIX = frozenset({BlockType.CONTROLS_IF, BlockType.CONTROLS_IFELSE})

_ids = count(1)


def _next_id() -> str:
    return f"block{next(_ids)}"


@dataclass(eq=False)
class Block:
    """One node of the block tree"""
    type: BlockType
    id: str = field(default_factory=_next_id)
    fields: Dict[str, Any] = field(default_factory=dict)
    values: Dict[str, Optional['Block']] = field(default_factory=dict)
    statements: Dict[str, Optional['Block']] = field(default_factory=dict)
    next: Optional['Block'] = None
    comment: Optional[str] = None
    output: Optional[bool] = None
    enabled: bool = True
    mutation: Dict[str, Any] = field(default_factory=dict)
    parent: Optional['Block'] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.type, str):
            self.type = BlockType.parse(self.type)
        if self.output is None:
            self.output = self.type in VALUE_TYPES
        for child in self.children():
            child.parent = self

    def children(self) -> Iterator['Block']:
        """Yield directly connected blocks (inputs first, then next)"""
        for child in self.values.values():
            if child is not None:
                yield child
        for child in self.statements.values():
            if child is not None:
                yield child
        if self.next is not None:
            yield self.next

    def descendants(self) -> Iterator['Block']:
        """Yield this block and every block nested in its inputs

        The next-statement chain of this block is not included, but the
        chains hanging off its statement inputs are.
        """
        yield self
        for child in self.values.values():
            if child is not None:
                yield from child._walk()
        for child in self.statements.values():
            if child is not None:
                yield from child._walk()

    def _walk(self) -> Iterator['Block']:
        yield from self.descendants()
        if self.next is not None:
            yield from self.next._walk()

    def has_input(self, name: str) -> bool:
        """Check if an input slot exists, connected or not"""
        return name in self.values or name in self.statements

    def get_value(self, name: str) -> Optional['Block']:
        """Get the block connected to a value input"""
        return self.values.get(name)

    def get_statement(self, name: str) -> Optional['Block']:
        """Get the first block of a statement input chain"""
        return self.statements.get(name)

    def get_field(self, name: str, default: Any = None) -> Any:
        """Get a field value"""
        return self.fields.get(name, default)

    @property
    def is_inline(self) -> bool:
        """True if this block's output is plugged into a parent"""
        return bool(self.output) and self.parent is not None

    def get_vars(self) -> List[str]:
        """Get procedure parameter names from the mutation"""
        return list(self.mutation.get('params', []))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Block':
        """Build a block tree from its JSON form

        Args:
            data: Mapping in the interchange format

        Returns:
            Root block of the tree

        Raises:
            MalformedBlockError: If the mapping is not a valid block
        """
        if not isinstance(data, Mapping) or 'type' not in data:
            raise MalformedBlockError(f"Block must be an object with a 'type': {data!r}")

        def load(child: Any) -> Optional['Block']:
            return None if child is None else cls.from_dict(child)

        kwargs: Dict[str, Any] = {
            'type': BlockType.parse(data['type']),
            'fields': dict(data.get('fields') or {}),
            'values': {k: load(v) for k, v in (data.get('values') or {}).items()},
            'statements': {k: load(v) for k, v in (data.get('statements') or {}).items()},
            'next': load(data.get('next')),
            'comment': data.get('comment'),
            'output': data.get('output'),
            'enabled': bool(data.get('enabled', True)),
            'mutation': dict(data.get('mutation') or {}),
        }
        if 'id' in data:
            kwargs['id'] = str(data['id'])
        return cls(**kwargs)


@dataclass
class Workspace:
    """Top-level blocks plus the variables and options that go with them"""
    top_blocks: List[Block] = field(default_factory=list)
    variables: Dict[str, str] = field(default_factory=dict)
    options: GeneratorOptions = field(default_factory=GeneratorOptions)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Workspace':
        """Build a workspace from its JSON form

        Variables may be given as a list of {"id", "name"} objects or as an
        id -> name mapping.
        """
        if not isinstance(data, Mapping):
            raise MalformedBlockError("Workspace must be a JSON object")
        raw_vars = data.get('variables') or {}
        if isinstance(raw_vars, Mapping):
            variables = {str(k): str(v) for k, v in raw_vars.items()}
        else:
            variables = {}
            for var in raw_vars:
                if not isinstance(var, Mapping) or 'name' not in var:
                    raise MalformedBlockError(f"Variable must be an object with a 'name': {var!r}")
                variables[str(var.get('id', var['name']))] = str(var['name'])
        return cls(
            top_blocks=[Block.from_dict(b) for b in data.get('blocks') or []],
            variables=variables,
            options=GeneratorOptions.from_dict(data.get('options')),
        )


def load_workspace(path: Path) -> Workspace:
    """Read a workspace from a JSON file

    Raises:
        FileNotFoundError: If the file does not exist
        MalformedBlockError: If the content is not a valid workspace
    """
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise MalformedBlockError(f"Invalid JSON in {path}: {e}") from e
    return Workspace.from_dict(data)
