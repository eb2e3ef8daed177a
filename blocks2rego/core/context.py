"""Generation context for Blocks2Rego

Holds the state of a single generation pass:
- Definitions printed before the main code (helpers and procedures)
- Helper function registry
- Name database
- Generator options
- Generation logging

A context is created when a pass begins and torn down when its output
is finalized. Independent passes use independent contexts.
"""

from typing import Dict, List, Mapping, Optional

from blocks2rego.core.generation_logger import GenerationKind, GenerationLogger
from blocks2rego.core.options import GeneratorOptions
from blocks2rego.generators.helper_registry import HelperRegistry
from blocks2rego.generators.naming import RESERVED_WORDS, NameDatabase, NameType

# Namespace of procedure entries in the definitions map
PROCEDURE_KEY_PREFIX = '%'


class GenerationContext:
    """Context for one generation pass"""

    def __init__(self,
                 options: Optional[GeneratorOptions] = None,
                 variable_map: Optional[Mapping[str, str]] = None,
                 name_db: Optional[NameDatabase] = None) -> None:
        """Initialize generation context

        Args:
            options: Generator options (defaults used if omitted)
            variable_map: Variable id -> user name map of the workspace
            name_db: Name database to reuse; it is reset for this pass
        """
        self.options = options or GeneratorOptions()
        self.logger = GenerationLogger()
        self.definitions: Dict[str, str] = {}

        if name_db is None:
            name_db = NameDatabase(RESERVED_WORDS, self.options.variable_prefix)
        else:
            name_db.reset()
        name_db.logger = self.logger
        name_db.set_variable_map(variable_map or {})
        self.name_db = name_db

        self.helpers = HelperRegistry(
            self.definitions, self.name_db, self.options.indent, self.logger
        )
        self._finished = False

    @property
    def indent(self) -> str:
        """Indentation unit for nested statements"""
        return self.options.indent

    @property
    def is_finished(self) -> bool:
        """True once the pass output has been finalized"""
        return self._finished

    def variable_name(self, name: str) -> str:
        """Get the emitted name of a user variable"""
        return self.name_db.get_name(name, NameType.VARIABLE)

    def procedure_name(self, name: str) -> str:
        """Get the emitted name of a user procedure"""
        return self.name_db.get_name(name, NameType.PROCEDURE)

    def provide_function(self, desired_name: str, code: List[str]) -> str:
        """Define a helper function once per pass

        Returns:
            Emitted name of the helper
        """
        return self.helpers.provide_function(desired_name, code)

    def define_procedure(self, func_name: str, code: str) -> None:
        """Register the text of a user procedure

        Args:
            func_name: Emitted procedure name
            code: Complete function text
        """
        key = PROCEDURE_KEY_PREFIX + func_name
        if key in self.definitions:
            self.logger.log_warning(f"Procedure {func_name} defined more than once")
        self.definitions[key] = code
        self.logger.log(GenerationKind.PROCEDURE, func_name)

    def get_definitions(self) -> List[str]:
        """Get all definitions in insertion order"""
        return list(self.definitions.values())

    def finish(self, code: str) -> str:
        """Prepend the definitions to the code and tear the pass down

        Args:
            code: Generated main code

        Returns:
            Completed code
        """
        if self._finished:
            raise RuntimeError("Generation pass already finished")
        definitions = self.get_definitions()
        self.helpers.clear()
        self.definitions.clear()
        self.name_db.reset()
        self._finished = True
        return '\n\n'.join(definitions) + '\n\n\n' + code
