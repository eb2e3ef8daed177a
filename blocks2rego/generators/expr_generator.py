"""Expression generator for Blocks2Rego

Translates value blocks to Rego expressions. Every rule returns a
(code, order) tuple; the caller decides about parentheses.
"""

import re
from typing import Tuple

from blocks2rego.core.block import Block
from blocks2rego.core.errors import MalformedBlockError
from blocks2rego.core.order import Order
from blocks2rego.generators.base_generator import BaseGenerator
from blocks2rego.generators.helper_registry import FUNCTION_NAME_PLACEHOLDER
from blocks2rego.generators.literals import (
    force_string, format_number, multiline_quote, parse_number, quote,
)

EMPTY_STRING = "''"

_SIMPLE_TEXT = re.compile(r"^'?\w+'?$", re.ASCII)

ExprResult = Tuple[str, Order]


def _index_expression(sequence: str, where: str, at: str) -> str:
    """Index expression into a sequence, used by substring helpers"""
    if where == 'FIRST':
        return '0'
    if where == 'FROM_END':
        return f"{sequence}.length - 1 - {at}"
    if where == 'LAST':
        return f"{sequence}.length - 1"
    return at


class ExprGenerator(BaseGenerator):
    """Generates Rego code for value blocks"""

    COMPARE_OPERATORS = {
        'EQ': '==',
        'NEQ': '!=',
        'LT': '<',
        'LTE': '<=',
        'GT': '>',
        'GTE': '>=',
    }

    CASE_OPERATORS = {
        'UPPERCASE': '.toUpperCase()',
        'LOWERCASE': '.toLowerCase()',
        'TITLECASE': None,
    }

    TRIM_OPERATORS = {
        'LEFT': ".replace(/^[\\s\\xa0]+/, '')",
        'RIGHT': ".replace(/[\\s\\xa0]+$/, '')",
        'BOTH': '.trim()',
    }

    WHERE_PASCAL_CASE = {
        'FIRST': 'First',
        'LAST': 'Last',
        'FROM_START': 'FromStart',
        'FROM_END': 'FromEnd',
    }

    # Logic

    def visit_logic_compare(self, block: Block) -> ExprResult:
        """Comparison operator"""
        operator = self.COMPARE_OPERATORS.get(block.get_field('OP'))
        if operator is None:
            raise self.unhandled(block, 'OP')
        order = Order.EQUALITY if operator in ('==', '!=') else Order.RELATIONAL
        argument0 = self.value_to_code(block, 'A', order, '0')
        argument1 = self.value_to_code(block, 'B', order, '0')
        return f"{argument0} {operator} {argument1}", order

    def visit_logic_operation(self, block: Block) -> ExprResult:
        """Operations 'and', 'or'"""
        op = block.get_field('OP')
        if op == 'AND':
            operator, order = '&&', Order.LOGICAL_AND
        elif op == 'OR':
            operator, order = '||', Order.LOGICAL_OR
        else:
            raise self.unhandled(block, 'OP')
        argument0 = self.value_to_code(block, 'A', order)
        argument1 = self.value_to_code(block, 'B', order)
        if not argument0 and not argument1:
            # No arguments at all: the result is false.
            argument0 = argument1 = 'false'
        else:
            # A single missing argument has no effect on the result.
            identity = 'true' if operator == '&&' else 'false'
            argument0 = argument0 or identity
            argument1 = argument1 or identity
        return f"{argument0} {operator} {argument1}", order

    def visit_logic_negate(self, block: Block) -> ExprResult:
        order = Order.LOGICAL_NOT
        argument0 = self.value_to_code(block, 'BOOL', order, 'true')
        return f"!{argument0}", order

    def visit_logic_boolean(self, block: Block) -> ExprResult:
        value = block.get_field('BOOL')
        if value not in ('TRUE', 'FALSE'):
            raise self.unhandled(block, 'BOOL')
        return ('true' if value == 'TRUE' else 'false'), Order.ATOMIC

    def visit_logic_null(self, block: Block) -> ExprResult:
        return 'null', Order.ATOMIC

    def visit_logic_ternary(self, block: Block) -> ExprResult:
        value_if = self.value_to_code(block, 'IF', Order.CONDITIONAL, 'false')
        value_then = self.value_to_code(block, 'THEN', Order.CONDITIONAL, 'null')
        value_else = self.value_to_code(block, 'ELSE', Order.CONDITIONAL, 'null')
        return f"{value_if} ? {value_then} : {value_else}", Order.CONDITIONAL

    # Math

    def visit_math_number(self, block: Block) -> ExprResult:
        """Numeric value"""
        raw = block.get_field('NUM', 0)
        try:
            value = parse_number(raw)
        except ValueError:
            raise MalformedBlockError(
                f"math_number.NUM is not a number: {raw!r}"
            ) from None
        order = Order.ATOMIC if value >= 0 else Order.UNARY_NEGATION
        return format_number(value), order

    # Text

    def visit_text(self, block: Block) -> ExprResult:
        return quote(str(block.get_field('TEXT', ''))), Order.ATOMIC

    def visit_text_multiline(self, block: Block) -> ExprResult:
        code = multiline_quote(str(block.get_field('TEXT', '')))
        order = Order.ADDITION if '+' in code else Order.ATOMIC
        return code, order

    def visit_text_join(self, block: Block) -> ExprResult:
        """Create a string made up of any number of elements of any type"""
        raw = block.mutation.get('items', 2)
        try:
            item_count = int(raw)
        except (TypeError, ValueError) as e:
            raise MalformedBlockError(f"text_join.items is not a count: {raw!r}") from e
        if item_count < 0:
            raise MalformedBlockError(f"text_join.items is negative: {raw!r}")
        if item_count == 0:
            return EMPTY_STRING, Order.ATOMIC
        if item_count == 1:
            element = self.value_to_code(block, 'ADD0', Order.NONE, EMPTY_STRING)
            return force_string(element)
        if item_count == 2:
            element0 = self.value_to_code(block, 'ADD0', Order.NONE, EMPTY_STRING)
            element1 = self.value_to_code(block, 'ADD1', Order.NONE, EMPTY_STRING)
            code = f"{force_string(element0)[0]} + {force_string(element1)[0]}"
            return code, Order.ADDITION
        elements = [
            self.value_to_code(block, f"ADD{i}", Order.NONE, EMPTY_STRING)
            for i in range(item_count)
        ]
        return f"[{','.join(elements)}].join('')", Order.FUNCTION_CALL

    def visit_text_length(self, block: Block) -> ExprResult:
        """String or array length"""
        text = self.value_to_code(block, 'VALUE', Order.MEMBER, EMPTY_STRING)
        return f"{text}.length", Order.MEMBER

    def visit_text_isEmpty(self, block: Block) -> ExprResult:
        text = self.value_to_code(block, 'VALUE', Order.MEMBER, EMPTY_STRING)
        return f"!{text}.length", Order.LOGICAL_NOT

    def visit_text_indexOf(self, block: Block) -> ExprResult:
        """Search the text for a substring"""
        end = block.get_field('END')
        if end == 'FIRST':
            operator = 'indexOf'
        elif end == 'LAST':
            operator = 'lastIndexOf'
        else:
            raise self.unhandled(block, 'END')
        substring = self.value_to_code(block, 'FIND', Order.NONE, EMPTY_STRING)
        text = self.value_to_code(block, 'VALUE', Order.MEMBER, EMPTY_STRING)
        code = f"{text}.{operator}({substring})"
        if self.options.one_based_index:
            return f"{code} + 1", Order.ADDITION
        return code, Order.FUNCTION_CALL

    def visit_text_charAt(self, block: Block) -> ExprResult:
        """Get letter at index"""
        where = block.get_field('WHERE') or 'FROM_START'
        text_order = Order.NONE if where == 'RANDOM' else Order.MEMBER
        text = self.value_to_code(block, 'VALUE', text_order, EMPTY_STRING)
        if where == 'FIRST':
            return f"{text}.charAt(0)", Order.FUNCTION_CALL
        if where == 'LAST':
            return f"{text}.slice(-1)", Order.FUNCTION_CALL
        if where == 'FROM_START':
            at = self.generator.get_adjusted(block, 'AT')
            return f"{text}.charAt({at})", Order.FUNCTION_CALL
        if where == 'FROM_END':
            at = self.generator.get_adjusted(block, 'AT', 1, True)
            return f"{text}.slice({at}).charAt(0)", Order.FUNCTION_CALL
        if where == 'RANDOM':
            function_name = self.context.provide_function('textRandomLetter', [
                f"function {FUNCTION_NAME_PLACEHOLDER}(text) {{",
                "  var x = Math.floor(Math.random() * text.length);",
                "  return text[x];",
                "}",
            ])
            return f"{function_name}({text})", Order.FUNCTION_CALL
        raise self.unhandled(block, 'WHERE')

    def visit_text_getSubstring(self, block: Block) -> ExprResult:
        """Get substring"""
        where1 = block.get_field('WHERE1')
        where2 = block.get_field('WHERE2')
        if where1 not in ('FIRST', 'FROM_START', 'FROM_END'):
            raise self.unhandled(block, 'WHERE1')
        if where2 not in ('LAST', 'FROM_START', 'FROM_END'):
            raise self.unhandled(block, 'WHERE2')

        length_free = (where1 not in ('FROM_END', 'LAST')
                       and where2 not in ('FROM_END', 'LAST'))
        text_order = Order.MEMBER if length_free else Order.NONE
        text = self.value_to_code(block, 'STRING', text_order, EMPTY_STRING)
        if where1 == 'FIRST' and where2 == 'LAST':
            return text, Order.NONE

        get_adjusted = self.generator.get_adjusted
        if _SIMPLE_TEXT.match(text) or length_free:
            # Variables, literals and slices that don't need the length
            # are inlined without a helper function.
            if where1 == 'FROM_START':
                at1 = get_adjusted(block, 'AT1')
            elif where1 == 'FROM_END':
                at1 = get_adjusted(block, 'AT1', 1, False, Order.SUBTRACTION)
                at1 = f"{text}.length - {at1}"
            else:
                at1 = '0'
            if where2 == 'FROM_START':
                at2 = get_adjusted(block, 'AT2', 1)
            elif where2 == 'FROM_END':
                at2 = get_adjusted(block, 'AT2', 0, False, Order.SUBTRACTION)
                at2 = f"{text}.length - {at2}"
            else:
                at2 = f"{text}.length"
            return f"{text}.slice({at1}, {at2})", Order.FUNCTION_CALL

        uses_at1 = where1 in ('FROM_END', 'FROM_START')
        uses_at2 = where2 in ('FROM_END', 'FROM_START')
        params = ['sequence']
        args = [text]
        if uses_at1:
            params.append('at1')
            args.append(get_adjusted(block, 'AT1'))
        if uses_at2:
            params.append('at2')
            args.append(get_adjusted(block, 'AT2'))
        function_name = self.context.provide_function(
            f"subsequence{self.WHERE_PASCAL_CASE[where1]}{self.WHERE_PASCAL_CASE[where2]}",
            [
                f"function {FUNCTION_NAME_PLACEHOLDER}({', '.join(params)}) {{",
                f"  var start = {_index_expression('sequence', where1, 'at1')};",
                f"  var end = {_index_expression('sequence', where2, 'at2')} + 1;",
                "  return sequence.slice(start, end);",
                "}",
            ])
        return f"{function_name}({', '.join(args)})", Order.FUNCTION_CALL

    def visit_text_changeCase(self, block: Block) -> ExprResult:
        """Change capitalization"""
        case = block.get_field('CASE')
        if case not in self.CASE_OPERATORS:
            raise self.unhandled(block, 'CASE')
        operator = self.CASE_OPERATORS[case]
        text_order = Order.MEMBER if operator else Order.NONE
        text = self.value_to_code(block, 'TEXT', text_order, EMPTY_STRING)
        if operator:
            return f"{text}{operator}", Order.FUNCTION_CALL
        # Title case is not native, define a helper.
        function_name = self.context.provide_function('textToTitleCase', [
            f"function {FUNCTION_NAME_PLACEHOLDER}(str) {{",
            "  return str.replace(/\\S+/g,",
            "      function(txt) {return txt[0].toUpperCase() + "
            "txt.substring(1).toLowerCase();});",
            "}",
        ])
        return f"{function_name}({text})", Order.FUNCTION_CALL

    def visit_text_trim(self, block: Block) -> ExprResult:
        """Trim spaces"""
        operator = self.TRIM_OPERATORS.get(block.get_field('MODE'))
        if operator is None:
            raise self.unhandled(block, 'MODE')
        text = self.value_to_code(block, 'TEXT', Order.MEMBER, EMPTY_STRING)
        return f"{text}{operator}", Order.FUNCTION_CALL

    def visit_text_prompt_ext(self, block: Block) -> ExprResult:
        """Prompt function"""
        if 'TEXT' in block.fields:
            # Internal message.
            msg = quote(str(block.get_field('TEXT')))
        else:
            # External message.
            msg = self.value_to_code(block, 'TEXT', Order.NONE, EMPTY_STRING)
        code = f"window.prompt({msg})"
        value_type = block.get_field('TYPE') or 'TEXT'
        if value_type == 'NUMBER':
            code = f"Number({code})"
        elif value_type != 'TEXT':
            raise self.unhandled(block, 'TYPE')
        return code, Order.FUNCTION_CALL

    visit_text_prompt = visit_text_prompt_ext

    def visit_text_count(self, block: Block) -> ExprResult:
        text = self.value_to_code(block, 'TEXT', Order.NONE, EMPTY_STRING)
        sub = self.value_to_code(block, 'SUB', Order.NONE, EMPTY_STRING)
        function_name = self.context.provide_function('textCount', [
            f"function {FUNCTION_NAME_PLACEHOLDER}(haystack, needle) {{",
            "  if (needle.length === 0) {",
            "    return haystack.length + 1;",
            "  } else {",
            "    return haystack.split(needle).length - 1;",
            "  }",
            "}",
        ])
        return f"{function_name}({text}, {sub})", Order.FUNCTION_CALL

    def visit_text_replace(self, block: Block) -> ExprResult:
        text = self.value_to_code(block, 'TEXT', Order.NONE, EMPTY_STRING)
        old = self.value_to_code(block, 'FROM', Order.NONE, EMPTY_STRING)
        new = self.value_to_code(block, 'TO', Order.NONE, EMPTY_STRING)
        function_name = self.context.provide_function('textReplace', [
            f"function {FUNCTION_NAME_PLACEHOLDER}(haystack, needle, replacement) {{",
            "  needle = needle.replace(/([-()\\[\\]{}+?*.$\\^|,:#<!\\\\])/g,\"\\\\$1\")",
            "                 .replace(/\\x08/g,\"\\\\x08\");",
            "  return haystack.replace(new RegExp(needle, 'g'), replacement);",
            "}",
        ])
        return f"{function_name}({text}, {old}, {new})", Order.FUNCTION_CALL

    def visit_text_reverse(self, block: Block) -> ExprResult:
        text = self.value_to_code(block, 'TEXT', Order.MEMBER, EMPTY_STRING)
        return f"{text}.split('').reverse().join('')", Order.FUNCTION_CALL

    # Variables

    def visit_variables_get(self, block: Block) -> ExprResult:
        """Variable getter"""
        return self.context.variable_name(str(block.get_field('VAR'))), Order.ATOMIC

    visit_variables_get_dynamic = visit_variables_get

    # Procedures

    def visit_procedures_callreturn(self, block: Block) -> ExprResult:
        """Call a procedure with a return value"""
        func_name = self.context.procedure_name(str(block.get_field('NAME')))
        args = [
            self.value_to_code(block, f"ARG{i}", Order.NONE, 'null')
            for i in range(len(block.get_vars()))
        ]
        return f"{func_name}({', '.join(args)})", Order.FUNCTION_CALL
