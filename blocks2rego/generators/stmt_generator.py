"""Statement generator for Blocks2Rego

Translates statement blocks to Rego code: conditionals, assignments,
printing and procedures. Every rule returns newline-terminated code, or
None when the block registers its code as a definition instead.
"""

from typing import Optional

from blocks2rego.core.block import Block
from blocks2rego.core.order import Order
from blocks2rego.generators.base_generator import BaseGenerator
from blocks2rego.generators.literals import force_string, prefix_lines


class StmtGenerator(BaseGenerator):
    """Generates Rego code for statement blocks"""

    def _suffix_line(self, block: Block) -> str:
        """Indented statement suffix for the top of a branch, if configured"""
        suffix = self.options.statement_suffix
        if not suffix:
            return ''
        return prefix_lines(self.inject_id(suffix, block), self.indent)

    def visit_controls_if(self, block: Block) -> str:
        """If/elseif/else condition"""
        code = ''
        if self.options.statement_prefix:
            # Automatic prefix insertion is switched off for this block.
            code += self.inject_id(self.options.statement_prefix, block)
        n = 0
        while True:
            condition = self.value_to_code(block, f"IF{n}", Order.NONE, 'false')
            branch = self._suffix_line(block) + self.statement_to_code(block, f"DO{n}")
            code += (' else ' if n > 0 else '') + f"if ({condition}) {{\n{branch}}}"
            n += 1
            if not block.has_input(f"IF{n}"):
                break

        if block.has_input('ELSE') or self.options.statement_suffix:
            branch = self._suffix_line(block) + self.statement_to_code(block, 'ELSE')
            code += f" else {{\n{branch}}}"
        return code + '\n'

    visit_controls_ifelse = visit_controls_if

    def visit_variables_set(self, block: Block) -> str:
        """Variable setter"""
        argument0 = self.value_to_code(block, 'VALUE', Order.ASSIGNMENT, '0')
        var_name = self.context.variable_name(str(block.get_field('VAR')))
        return f"{var_name} = {argument0};\n"

    visit_variables_set_dynamic = visit_variables_set

    def visit_text_append(self, block: Block) -> str:
        """Append to a variable in place"""
        var_name = self.context.variable_name(str(block.get_field('VAR')))
        value = self.value_to_code(block, 'TEXT', Order.NONE, "''")
        return f"{var_name} += {force_string(value)[0]};\n"

    def visit_text_print(self, block: Block) -> str:
        """Print statement"""
        msg = self.value_to_code(block, 'TEXT', Order.NONE, "''")
        return f"window.alert({msg});\n"

    def visit_procedures_defreturn(self, block: Block) -> Optional[str]:
        """Define a procedure, with or without a return value

        The function text is registered as a definition; nothing is
        emitted inline.
        """
        func_name = self.context.procedure_name(str(block.get_field('NAME')))
        xfix1 = ''
        if self.options.statement_prefix:
            xfix1 += self.inject_id(self.options.statement_prefix, block)
        if self.options.statement_suffix:
            xfix1 += self.inject_id(self.options.statement_suffix, block)
        if xfix1:
            xfix1 = prefix_lines(xfix1, self.indent)
        loop_trap = ''
        if self.options.infinite_loop_trap:
            loop_trap = prefix_lines(
                self.inject_id(self.options.infinite_loop_trap, block), self.indent
            )
        branch = self.statement_to_code(block, 'STACK')
        return_value = self.value_to_code(block, 'RETURN', Order.NONE)
        xfix2 = ''
        if branch and return_value:
            # After executing the function body, revisit this block for the return.
            xfix2 = xfix1
        if return_value:
            return_value = f"{self.indent}return {return_value};\n"
        args = [self.context.variable_name(var) for var in block.get_vars()]
        code = (f"function {func_name}({', '.join(args)}) {{\n"
                f"{xfix1}{loop_trap}{branch}{xfix2}{return_value}}}")
        code = self.generator.scrub(block, code)
        self.context.define_procedure(func_name, code)
        return None

    # A procedure without a return value uses the same generator.
    visit_procedures_defnoreturn = visit_procedures_defreturn

    def visit_procedures_callnoreturn(self, block: Block) -> str:
        """Call a procedure with no return value"""
        code, _ = self.generator.expr_gen.visit_procedures_callreturn(block)
        return f"{code};\n"

    def visit_procedures_ifreturn(self, block: Block) -> str:
        """Conditionally return value from a procedure"""
        condition = self.value_to_code(block, 'CONDITION', Order.NONE, 'false')
        code = f"if ({condition}) {{\n"
        # The regular suffix at the end won't run if the return triggers.
        code += self._suffix_line(block)
        if block.mutation.get('value', True):
            value = self.value_to_code(block, 'VALUE', Order.NONE, 'null')
            code += f"{self.indent}return {value};\n"
        else:
            code += f"{self.indent}return;\n"
        return code + '}\n'
