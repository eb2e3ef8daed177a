"""Operator precedence for Blocks2Rego

Defines the precedence (order) of every expression category and the
rule used to decide whether an inner expression must be parenthesized
when embedded in an outer syntactic context.

Lower rank binds tighter. Each member carries a (rank, sub) pair: the
rank is the comparison class, the sub-rank only distinguishes members
sharing a class so that override pairs can name them individually.
"""

from enum import Enum
from typing import FrozenSet, Tuple


class Order(Enum):
    """Precedence of generated expressions"""
    ATOMIC = (0, 0)            # 0 "" ...
    NEW = (1, 1)               # new
    MEMBER = (1, 2)            # . []
    FUNCTION_CALL = (2, 0)     # ()
    INCREMENT = (3, 0)         # ++
    DECREMENT = (3, 0)         # --
    BITWISE_NOT = (4, 1)       # ~
    UNARY_PLUS = (4, 2)        # +
    UNARY_NEGATION = (4, 3)    # -
    LOGICAL_NOT = (4, 4)       # !
    TYPEOF = (4, 5)            # typeof
    VOID = (4, 6)              # void
    DELETE = (4, 7)            # delete
    AWAIT = (4, 8)             # await
    EXPONENTIATION = (5, 0)    # **
    MULTIPLICATION = (5, 1)    # *
    DIVISION = (5, 2)          # /
    MODULUS = (5, 3)           # %
    SUBTRACTION = (6, 1)       # -
    ADDITION = (6, 2)          # +
    BITWISE_SHIFT = (7, 0)     # << >> >>>
    RELATIONAL = (8, 0)        # < <= > >=
    IN = (8, 0)                # in
    INSTANCEOF = (8, 0)        # instanceof
    EQUALITY = (9, 0)          # == !=
    BITWISE_AND = (10, 0)      # &
    BITWISE_XOR = (11, 0)      # ^
    BITWISE_OR = (12, 0)       # |
    LOGICAL_AND = (13, 0)      # &&
    LOGICAL_OR = (14, 0)       # ||
    CONDITIONAL = (15, 0)      # ?:
    ASSIGNMENT = (16, 0)       # = += -= ...
    YIELD = (17, 0)            # yield
    COMMA = (18, 0)            # ,
    NONE = (99, 0)             # (...)

    @property
    def rank(self) -> int:
        """Comparison class of this order"""
        return self.value[0]


# Outer-inner pairings that do NOT require parentheses.
ORDER_OVERRIDES: FrozenSet[Tuple[Order, Order]] = frozenset({
    # (foo()).bar -> foo().bar
    # (foo())[0] -> foo()[0]
    (Order.FUNCTION_CALL, Order.MEMBER),
    # (foo())() -> foo()()
    (Order.FUNCTION_CALL, Order.FUNCTION_CALL),
    # (foo.bar).baz -> foo.bar.baz
    # (foo[0])[1] -> foo[0][1]
    (Order.MEMBER, Order.MEMBER),
    # (foo.bar)() -> foo.bar()
    (Order.MEMBER, Order.FUNCTION_CALL),
    # !(!foo) -> !!foo
    (Order.LOGICAL_NOT, Order.LOGICAL_NOT),
    # a * (b * c) -> a * b * c
    (Order.MULTIPLICATION, Order.MULTIPLICATION),
    # a + (b + c) -> a + b + c
    (Order.ADDITION, Order.ADDITION),
    # a && (b && c) -> a && b && c
    (Order.LOGICAL_AND, Order.LOGICAL_AND),
    # a || (b || c) -> a || b || c
    (Order.LOGICAL_OR, Order.LOGICAL_OR),
})


def needs_parens(outer: Order, inner: Order) -> bool:
    """Decide whether inner code must be wrapped in its outer context

    Args:
        outer: Order required by the syntactic slot
        inner: Order of the expression placed in the slot

    Returns:
        True if the inner code needs parentheses
    """
    if inner.rank < outer.rank:
        return False
    if inner.rank == outer.rank and outer.rank in (Order.ATOMIC.rank, Order.NONE.rank):
        return False
    return (outer, inner) not in ORDER_OVERRIDES


def wrap(code: str, outer: Order, inner: Order) -> str:
    """Parenthesize code if its order requires it in the outer context"""
    if code and needs_parens(outer, inner):
        return f"({code})"
    return code
