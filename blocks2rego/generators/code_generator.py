"""Rego code generator

Drives a generation pass over a workspace:
- init() creates the pass context (definitions, helpers, names)
- block_to_code() translates one block through its rule
- value_to_code() / statement_to_code() translate block inputs
- finish() prepends helper and procedure definitions and tears down

Statement code carries its own trailing newline, expression code is
returned with its order so the parent can decide about parentheses.
"""

import re
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from blocks2rego.core.block import SUPPRESS_PREFIX_SUFFIX, Block, BlockType, Workspace
from blocks2rego.core.context import GenerationContext
from blocks2rego.core.generation_logger import GenerationKind, GenerationLogger
from blocks2rego.core.options import GeneratorOptions
from blocks2rego.core.order import Order, needs_parens, wrap
from blocks2rego.generators.expr_generator import ExprGenerator
from blocks2rego.generators.literals import (
    format_number, is_number, parse_number, prefix_lines, wrap_comment,
)
from blocks2rego.generators.naming import NameDatabase
from blocks2rego.generators.stmt_generator import StmtGenerator

Rule = Callable[[Block], Union[str, Tuple[str, Order], None]]


class CodeGenerator:
    """Generates Rego code from block trees"""

    COMMENT_PREFIX = '// '

    def __init__(self,
                 options: Optional[GeneratorOptions] = None,
                 name_db: Optional[NameDatabase] = None) -> None:
        """Initialize code generator

        Args:
            options: Generator options (defaults used if omitted)
            name_db: Name database reused across passes
        """
        self.options = options or GeneratorOptions()
        self._name_db = name_db
        self.context: Optional[GenerationContext] = None
        self.last_logger: Optional[GenerationLogger] = None
        self.expr_gen = ExprGenerator(self)
        self.stmt_gen = StmtGenerator(self)
        self._rules = self._build_rules()

    def _build_rules(self) -> Dict[BlockType, Rule]:
        """Map every block kind onto its rule

        Raises:
            NotImplementedError: If some block kind has no rule
        """
        rules: Dict[BlockType, Rule] = {}
        missing = []
        for block_type in BlockType:
            for rule_set in (self.expr_gen, self.stmt_gen):
                if rule_set.has_rule(block_type.value):
                    rules[block_type] = getattr(rule_set, f"visit_{block_type.value}")
                    break
            else:
                missing.append(block_type.value)
        if missing:
            raise NotImplementedError(f"No generator rule for block types: {', '.join(missing)}")
        return rules

    def require_context(self) -> GenerationContext:
        """Get the context of the pass in progress

        Raises:
            RuntimeError: If no pass is in progress
        """
        if self.context is None:
            raise RuntimeError("No generation pass in progress. Call init() first.")
        return self.context

    def init(self, variable_map: Optional[Mapping[str, str]] = None) -> GenerationContext:
        """Begin a generation pass

        Args:
            variable_map: Variable id -> user name map of the workspace

        Returns:
            The fresh pass context
        """
        self.context = GenerationContext(self.options, variable_map, self._name_db)
        self._name_db = self.context.name_db
        return self.context

    def finish(self, code: str) -> str:
        """Complete the pass: prepend definitions and discard pass state

        Args:
            code: Generated main code

        Returns:
            Completed code
        """
        context = self.require_context()
        code = context.finish(code)
        self.last_logger = context.logger
        self.context = None
        return code

    def scrub_naked_value(self, line: str) -> str:
        """Turn a value that is not plugged into anything into a statement"""
        return line + ';\n'

    def workspace_to_code(self, workspace: Workspace) -> str:
        """Generate code for all top-level blocks of a workspace

        Args:
            workspace: Workspace to generate code from

        Returns:
            Generated code
        """
        self.init(workspace.variables)
        try:
            lines: List[str] = []
            for block in workspace.top_blocks:
                line = self.block_to_code(block)
                if isinstance(line, tuple):
                    # Top-level blocks don't care about operator order.
                    line = line[0]
                if not line:
                    continue
                if block.output:
                    line = self.scrub_naked_value(line)
                    line = self._inject_prefix_suffix(block, line)
                lines.append(line)
            code = self.finish('\n'.join(lines))
        finally:
            if self.context is not None:
                self.last_logger = self.context.logger
                self.context = None

        code = re.sub(r'\A\s+\n', '', code)
        code = re.sub(r'\n\s+\Z', '\n', code)
        code = re.sub(r'[ \t]+\n', '\n', code)
        return code

    def _inject_prefix_suffix(self, block: Block, code: str) -> str:
        if block.type in SUPPRESS_PREFIX_SUFFIX:
            return code
        if self.options.statement_prefix:
            code = self.inject_id(self.options.statement_prefix, block) + code
        if self.options.statement_suffix:
            code = code + self.inject_id(self.options.statement_suffix, block)
        return code

    def block_to_code(self, block: Optional[Block],
                      this_only: bool = False) -> Union[str, Tuple[str, Order]]:
        """Generate code for a block and, unless this_only, its successors

        Args:
            block: Block to translate (None yields empty code)
            this_only: True to skip the following statements

        Returns:
            Statement code, or (code, order) for value blocks
        """
        if block is None:
            return ''
        context = self.require_context()
        if not block.enabled:
            context.logger.log(GenerationKind.SKIPPED_BLOCK, block.type.value,
                               "disabled", block.id)
            return '' if this_only else self.block_to_code(block.next)

        code = self._rules[block.type](block)
        if isinstance(code, tuple):
            if not block.output:
                raise TypeError(f"Expecting string from statement block: {block.type.value}")
            return self.scrub(block, code[0], this_only), code[1]
        if isinstance(code, str):
            code = self._inject_prefix_suffix(block, code)
            return self.scrub(block, code, this_only)
        if code is None:
            # Block has handled code generation itself.
            return ''
        raise TypeError(f"Invalid code generated: {code!r}")

    def value_to_code(self, block: Block, name: str, outer_order: Order,
                      default: Optional[str] = None) -> str:
        """Generate code for the block connected to a value input

        Args:
            block: Block owning the input
            name: Input name
            outer_order: Order the input's context requires
            default: Code used when the input is empty

        Returns:
            Code, parenthesized if needed, or the default ('' if none)
        """
        code = ''
        target = block.get_value(name)
        if target is not None:
            result = self.block_to_code(target)
            if result != '':
                if not isinstance(result, tuple):
                    raise TypeError(f"Expecting tuple from value block: {target.type.value}")
                code = wrap(result[0], outer_order, result[1])
        if not code and default is not None:
            self.require_context().logger.log(
                GenerationKind.DEFAULT_VALUE, f"{block.type.value}.{name}", default, block.id
            )
            return default
        return code

    def statement_to_code(self, block: Block, name: str) -> str:
        """Generate indented code for the chain in a statement input"""
        target = block.get_statement(name)
        code = self.block_to_code(target)
        if not isinstance(code, str):
            raise TypeError(f"Expecting code from statement block: {target.type.value}")
        if code:
            code = prefix_lines(code, self.options.indent)
        return code

    def inject_id(self, msg: str, block: Block) -> str:
        """Replace %1 in a hook template with the quoted block id"""
        return msg.replace('%1', f"'{block.id}'")

    def all_nested_comments(self, block: Block) -> str:
        """Collect comments of a block and everything nested in it"""
        comments = [b.comment for b in block.descendants() if b.comment]
        if comments:
            comments.append('')
        return '\n'.join(comments)

    def scrub(self, block: Block, code: str, this_only: bool = False) -> str:
        """Add comments and following statements to a block's code

        Comments are collected for blocks that aren't inline: the block's
        own comment and those of its value inputs, but not those of nested
        statements, which handle their own.

        Args:
            block: The current block
            code: Code created for this block
            this_only: True to generate code for only this statement

        Returns:
            Code with comments and subsequent blocks added
        """
        comment_code = ''
        if not block.is_inline:
            if block.comment:
                comment = wrap_comment(block.comment, self.options.comment_wrap - 3)
                comment_code += prefix_lines(comment + '\n', self.COMMENT_PREFIX)
            for child in block.values.values():
                if child is not None:
                    comment = self.all_nested_comments(child)
                    if comment:
                        comment_code += prefix_lines(comment, self.COMMENT_PREFIX)
        next_code = '' if this_only else self.block_to_code(block.next)
        return comment_code + code + next_code

    def get_adjusted(self, block: Block, at_id: str, delta: int = 0,
                     negate: bool = False, order: Order = Order.NONE) -> str:
        """Get an index input adjusted for zero-based indexing

        Literal indices are folded at generation time; dynamic ones get
        the adjustment emitted as code.

        Args:
            block: Block owning the index input
            at_id: Name of the index input
            delta: Value to add
            negate: Whether to negate the value
            order: Highest order acting on the result

        Returns:
            Index code
        """
        if self.options.one_based_index:
            delta -= 1
        default_at = '1' if self.options.one_based_index else '0'

        if delta > 0:
            outer = Order.ADDITION
        elif delta < 0:
            outer = Order.SUBTRACTION
        elif negate:
            outer = Order.UNARY_NEGATION
        else:
            outer = order
        at = self.value_to_code(block, at_id, outer, default_at)

        if is_number(at):
            # The index is a naked number, adjust it right now.
            value = parse_number(at) + delta
            if negate:
                value = -value
            return format_number(value)

        # The index is dynamic, adjust it in code.
        inner = None
        if delta > 0:
            at = f"{at} + {delta}"
            inner = Order.ADDITION
        elif delta < 0:
            at = f"{at} - {-delta}"
            inner = Order.SUBTRACTION
        if negate:
            at = f"-({at})" if delta else f"-{at}"
            inner = Order.UNARY_NEGATION
        if inner is not None and needs_parens(order, inner):
            at = f"({at})"
        return at


def workspace_to_code(workspace: Workspace,
                      options: Optional[GeneratorOptions] = None) -> str:
    """Generate Rego code for a workspace

    Args:
        workspace: Workspace to generate code from
        options: Options overriding the workspace's own

    Returns:
        Generated code
    """
    generator = CodeGenerator(options or workspace.options)
    return generator.workspace_to_code(workspace)
