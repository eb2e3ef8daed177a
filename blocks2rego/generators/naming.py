"""Naming scheme for Blocks2Rego

Maps user-facing identifiers (variables, procedures, developer
variables) onto safe, unique Rego identifiers:
- Characters that are not word characters become underscores
- Leading digits get a my_ prefix
- Reserved words and already allocated names get a numeric suffix
"""

import re
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Set
from urllib.parse import quote

from blocks2rego.core.generation_logger import GenerationKind, GenerationLogger


class NameType(Enum):
    """Namespace categories for allocated names"""
    VARIABLE = "VARIABLE"
    PROCEDURE = "PROCEDURE"
    DEVELOPER_VARIABLE = "DEVELOPER_VARIABLE"


# Rego keywords and built-ins that user names must not shadow
REGO_KEYWORDS = {
    'default', 'input', 'not', 'count', 'with', 'as', 'sum', 'product',
    'max', 'min', 'sort', 'all', 'any', 'array', 'object', 'json',
    'indexOf', 'lower', 'glob',
}

# Global names visible in the environment that runs the generated code
AMBIENT_GLOBALS = {
    'Array', 'ArrayBuffer', 'Boolean', 'DataView', 'Date', 'Error',
    'EvalError', 'Function', 'Infinity', 'Intl', 'JSON', 'Map', 'Math',
    'NaN', 'Number', 'Object', 'Promise', 'Proxy', 'RangeError',
    'ReferenceError', 'Reflect', 'RegExp', 'Set', 'String', 'Symbol',
    'SyntaxError', 'TypeError', 'URIError', 'WeakMap', 'WeakSet',
    'alert', 'arguments', 'console', 'decodeURI', 'decodeURIComponent',
    'document', 'encodeURI', 'encodeURIComponent', 'escape', 'eval',
    'globalThis', 'isFinite', 'isNaN', 'location', 'navigator',
    'parseFloat', 'parseInt', 'prompt', 'self', 'setInterval',
    'setTimeout', 'clearInterval', 'clearTimeout', 'undefined',
    'unescape', 'window',
}

RESERVED_WORDS = frozenset(REGO_KEYWORDS | AMBIENT_GLOBALS)

# Characters encodeURI leaves alone besides letters, digits and -_.~
_URI_SAFE = ";,/?:@&=+$!*'()#"
_NON_WORD = re.compile(r'[^\w]', re.ASCII)


class NameDatabase:
    """Allocates collision-free emitted names for one generation pass"""

    def __init__(self,
                 reserved_words: Iterable[str] = RESERVED_WORDS,
                 variable_prefix: str = '',
                 logger: Optional[GenerationLogger] = None) -> None:
        """Initialize name database

        Args:
            reserved_words: Names that must never be emitted
            variable_prefix: Prefix for variable and developer variable names
            logger: Optional logger receiving rename events
        """
        self._reserved: Set[str] = set(reserved_words)
        self.variable_prefix = variable_prefix
        self.logger = logger
        self._db: Dict[str, str] = {}
        self._db_reverse: Set[str] = set()
        self._variable_map: Mapping[str, str] = {}

    def reserve(self, names: Iterable[str]) -> None:
        """Add names to the permanent reserved set"""
        self._reserved.update(names)

    def is_reserved(self, name: str) -> bool:
        """Check if a name is reserved"""
        return name in self._reserved

    def reset(self) -> None:
        """Forget all allocations, keeping the reserved words"""
        self._db = {}
        self._db_reverse = set()
        self._variable_map = {}

    def set_variable_map(self, variable_map: Mapping[str, str]) -> None:
        """Set the variable id -> user name map used for variable lookups"""
        self._variable_map = variable_map

    def _prefix_for(self, name_type: NameType) -> str:
        if name_type in (NameType.VARIABLE, NameType.DEVELOPER_VARIABLE):
            return self.variable_prefix
        return ''

    def get_name(self, name: str, name_type: NameType) -> str:
        """Convert a user-facing name into a safe emitted name

        Repeated calls with the same name and category return the same
        result for the rest of the pass.

        Args:
            name: Source name, or variable id for the variable category
            name_type: Category of the name

        Returns:
            Emitted name
        """
        if name_type == NameType.VARIABLE:
            user_name = self._variable_map.get(name)
            if user_name:
                name = user_name
        normalized = f"{name.lower()}_{name_type.value}"
        prefix = self._prefix_for(name_type)
        if normalized in self._db:
            return prefix + self._db[normalized]
        safe_name = self.get_distinct_name(name, name_type)
        self._db[normalized] = safe_name[len(prefix):]
        return safe_name

    def get_distinct_name(self, name: str, name_type: NameType) -> str:
        """Allocate a name that differs from every name handed out so far

        Args:
            name: Desired name
            name_type: Category of the name

        Returns:
            Emitted name
        """
        safe_name = self.safe_name(name)
        candidate = safe_name
        suffix = 1
        while candidate in self._db_reverse or self.is_reserved(candidate):
            suffix += 1
            candidate = f"{safe_name}{suffix}"
        self._db_reverse.add(candidate)
        if candidate != name and self.logger is not None:
            self.logger.log(GenerationKind.RENAME, name, candidate)
        return self._prefix_for(name_type) + candidate

    @staticmethod
    def safe_name(name: str) -> str:
        """Make a name legal as an identifier

        Args:
            name: Potentially unsafe name

        Returns:
            Name containing only word characters, not starting with a digit
        """
        if not name:
            return 'unnamed'
        encoded = quote(name.replace(' ', '_'), safe=_URI_SAFE)
        safe = _NON_WORD.sub('_', encoded)
        if safe[0].isdigit():
            safe = f"my_{safe}"
        return safe
