"""Shared base for Blocks2Rego rule generators

Rule generators hold one visit_<block kind> method per block kind they
translate. They delegate input handling to the owning CodeGenerator.
"""

from typing import TYPE_CHECKING, Optional, Tuple, Union

from blocks2rego.core.block import Block
from blocks2rego.core.context import GenerationContext
from blocks2rego.core.errors import UnhandledOptionError
from blocks2rego.core.options import GeneratorOptions
from blocks2rego.core.order import Order

if TYPE_CHECKING:
    from blocks2rego.generators.code_generator import CodeGenerator

RuleResult = Union[str, Tuple[str, Order], None]


class BaseGenerator:
    """Base class for per-kind translation rules"""

    def __init__(self, generator: 'CodeGenerator') -> None:
        """Initialize rule generator

        Args:
            generator: Code generator driving the current pass
        """
        self.generator = generator

    @property
    def context(self) -> GenerationContext:
        """Context of the pass in progress"""
        return self.generator.require_context()

    @property
    def options(self) -> GeneratorOptions:
        return self.generator.options

    @property
    def indent(self) -> str:
        return self.generator.options.indent

    def generate(self, block: Block) -> RuleResult:
        """Generate code for a block using this rule set

        Args:
            block: Block to translate

        Returns:
            Statement code, (expression code, order) tuple, or None
        """
        method_name = f"visit_{block.type.value}"
        method = getattr(self, method_name, self._generic_visit)
        return method(block)

    def has_rule(self, block_kind: str) -> bool:
        """Check if this rule set translates a block kind"""
        return callable(getattr(self, f"visit_{block_kind}", None))

    def _generic_visit(self, block: Block) -> RuleResult:
        raise NotImplementedError(
            f"Block type {block.type.value} not handled by {self.__class__.__name__}"
        )

    def value_to_code(self, block: Block, name: str, order: Order,
                      default: Optional[str] = None) -> str:
        return self.generator.value_to_code(block, name, order, default)

    def statement_to_code(self, block: Block, name: str) -> str:
        return self.generator.statement_to_code(block, name)

    def inject_id(self, msg: str, block: Block) -> str:
        return self.generator.inject_id(msg, block)

    @staticmethod
    def unhandled(block: Block, field: str) -> UnhandledOptionError:
        """Build the error for an unrecognized dropdown value"""
        return UnhandledOptionError(block.type.value, field, block.get_field(field))
