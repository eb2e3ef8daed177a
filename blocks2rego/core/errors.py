"""Error types for Blocks2Rego

All generation failures derive from GenerationError so callers can
catch a single type. Malformed input aborts the whole pass.
"""

from typing import Optional


class GenerationError(Exception):
    """Base class for code generation failures"""


class MalformedBlockError(GenerationError, ValueError):
    """Block tree does not match what the generator understands"""


class UnhandledOptionError(MalformedBlockError):
    """A dropdown field holds a value with no translation rule"""

    def __init__(self, block_type: str, field: str, value: Optional[str]) -> None:
        """Initialize error

        Args:
            block_type: Kind of the offending block
            field: Name of the dropdown field
            value: Value found in the field
        """
        self.block_type = block_type
        self.field = field
        self.value = value
        super().__init__(f"Unhandled option ({block_type}.{field}={value!r})")
