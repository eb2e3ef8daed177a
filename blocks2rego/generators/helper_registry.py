"""Helper function registry for Blocks2Rego

Some blocks need a utility routine that has no native Rego equivalent.
Each routine is generated once per pass, under a name that cannot
collide with user procedures, and emitted ahead of the main code.
"""

import re
from typing import Dict, Optional, Sequence

from blocks2rego.core.generation_logger import GenerationKind, GenerationLogger
from blocks2rego.generators.naming import NameDatabase, NameType

# Token in helper templates replaced by the allocated function name
FUNCTION_NAME_PLACEHOLDER = '{leCUI8hutHZI4480Dc}'

# Namespace of helper entries in the definitions map
HELPER_KEY_PREFIX = 'helper%'

_LEADING_INDENT = re.compile(r'^((?:  )*)  ', re.MULTILINE)


class HelperRegistry:
    """Deduplicating cache of generated helper functions"""

    def __init__(self,
                 definitions: Dict[str, str],
                 name_db: NameDatabase,
                 indent: str = '  ',
                 logger: Optional[GenerationLogger] = None) -> None:
        """Initialize registry

        Args:
            definitions: Definitions map shared with the rest of the pass
            name_db: Name database used to allocate function names
            indent: Indentation unit that replaces two-space template indents
            logger: Optional logger receiving helper events
        """
        self._definitions = definitions
        self._name_db = name_db
        self._indent = indent
        self._logger = logger
        self._function_names: Dict[str, str] = {}

    def provide_function(self, desired_name: str, code: Sequence[str]) -> str:
        """Define a helper function once and return its emitted name

        Args:
            desired_name: Logical name of the helper
            code: Template lines using FUNCTION_NAME_PLACEHOLDER for the name

        Returns:
            The actual name of the helper function
        """
        if not self.contains(desired_name):
            function_name = self._name_db.get_distinct_name(desired_name, NameType.PROCEDURE)
            self._function_names[desired_name] = function_name
            code_text = '\n'.join(code).replace(FUNCTION_NAME_PLACEHOLDER, function_name)
            self._definitions[HELPER_KEY_PREFIX + desired_name] = self._reindent(code_text)
            if self._logger is not None:
                self._logger.log(GenerationKind.HELPER, desired_name, function_name)
        return self._function_names[desired_name]

    def _reindent(self, code_text: str) -> str:
        """Change all two-space template indents into the configured indent"""
        if self._indent == '  ':
            return code_text
        previous = None
        while previous != code_text:
            previous = code_text
            code_text = _LEADING_INDENT.sub(lambda m: m.group(1) + '\0', code_text)
        return code_text.replace('\0', self._indent)

    def contains(self, desired_name: str) -> bool:
        """Check if a helper was provided in this pass"""
        return desired_name in self._function_names

    def clear(self) -> None:
        """Forget all helpers"""
        for desired_name in self._function_names:
            self._definitions.pop(HELPER_KEY_PREFIX + desired_name, None)
        self._function_names.clear()
