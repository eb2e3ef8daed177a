"""Tests for operator precedence"""

import itertools

import pytest
from blocks2rego.core.order import ORDER_OVERRIDES, Order, needs_parens, wrap


ALL_ORDERS = list(Order)


class TestOrder:
    """Test suite for the precedence table"""

    def test_atomic_is_tightest(self):
        """Test ATOMIC has the lowest rank and NONE the highest"""
        ranks = [order.rank for order in ALL_ORDERS]
        assert Order.ATOMIC.rank == min(ranks)
        assert Order.NONE.rank == max(ranks)

    def test_ranks_follow_operator_classes(self):
        """Test the relative order of the main operator classes"""
        chain = [
            Order.ATOMIC, Order.MEMBER, Order.FUNCTION_CALL, Order.UNARY_NEGATION,
            Order.MULTIPLICATION, Order.ADDITION, Order.BITWISE_SHIFT,
            Order.RELATIONAL, Order.EQUALITY, Order.BITWISE_AND, Order.BITWISE_XOR,
            Order.BITWISE_OR, Order.LOGICAL_AND, Order.LOGICAL_OR,
            Order.CONDITIONAL, Order.ASSIGNMENT, Order.YIELD, Order.COMMA, Order.NONE,
        ]
        ranks = [order.rank for order in chain]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == len(ranks)

    def test_shared_ranks_are_aliases(self):
        """Test operators sharing a precedence are the same member"""
        assert Order.IN is Order.RELATIONAL
        assert Order.INSTANCEOF is Order.RELATIONAL
        assert Order.DECREMENT is Order.INCREMENT

    def test_sub_ranks_keep_members_distinct(self):
        """Test members of one class stay distinct"""
        assert Order.MULTIPLICATION is not Order.DIVISION
        assert Order.MULTIPLICATION.rank == Order.DIVISION.rank
        assert Order.UNARY_PLUS is not Order.UNARY_NEGATION
        assert Order.UNARY_PLUS.rank == Order.UNARY_NEGATION.rank


class TestNeedsParens:
    """Test suite for the parenthesization decision"""

    @pytest.mark.parametrize("outer,inner", [
        (Order.ADDITION, Order.MULTIPLICATION),
        (Order.NONE, Order.COMMA),
        (Order.LOGICAL_OR, Order.LOGICAL_AND),
        (Order.MEMBER, Order.ATOMIC),
    ])
    def test_tighter_inner_not_wrapped(self, outer, inner):
        """Test tighter inner expressions are left alone"""
        assert not needs_parens(outer, inner)

    @pytest.mark.parametrize("outer,inner", [
        (Order.MULTIPLICATION, Order.ADDITION),
        (Order.MEMBER, Order.ADDITION),
        (Order.LOGICAL_NOT, Order.EQUALITY),
        (Order.LOGICAL_AND, Order.LOGICAL_OR),
    ])
    def test_looser_inner_wrapped(self, outer, inner):
        """Test looser inner expressions are wrapped"""
        assert needs_parens(outer, inner)

    @pytest.mark.parametrize("outer,inner", [
        (Order.SUBTRACTION, Order.SUBTRACTION),
        (Order.DIVISION, Order.DIVISION),
        (Order.DIVISION, Order.MULTIPLICATION),
        (Order.ADDITION, Order.SUBTRACTION),
        (Order.SUBTRACTION, Order.ADDITION),
        (Order.UNARY_NEGATION, Order.UNARY_NEGATION),
        (Order.UNARY_PLUS, Order.UNARY_NEGATION),
    ])
    def test_same_class_wrapped_without_override(self, outer, inner):
        """Test same-class pairs keep evaluation order with parentheses"""
        assert needs_parens(outer, inner)

    @pytest.mark.parametrize("outer,inner", sorted(ORDER_OVERRIDES, key=str))
    def test_override_pairs_not_wrapped(self, outer, inner):
        """Test every override pair is exempt"""
        assert not needs_parens(outer, inner)

    def test_member_access_of_call_result(self):
        """Test foo.bar() used as a call subject is not wrapped"""
        assert not needs_parens(Order.MEMBER, Order.FUNCTION_CALL)
        assert needs_parens(Order.MEMBER, Order.UNARY_NEGATION)

    def test_atomic_and_none_pairs_not_wrapped(self):
        """Test ATOMIC/ATOMIC and NONE/NONE pairs"""
        assert not needs_parens(Order.ATOMIC, Order.ATOMIC)
        assert not needs_parens(Order.NONE, Order.NONE)

    def test_decision_over_all_pairs(self):
        """Test the decision over every declared pair of orders"""
        for outer, inner in itertools.product(ALL_ORDERS, repeat=2):
            result = needs_parens(outer, inner)
            if inner.rank < outer.rank or (outer, inner) in ORDER_OVERRIDES:
                assert result is False, (outer, inner)
            elif inner.rank > outer.rank:
                assert result is True, (outer, inner)


class TestWrap:
    """Test suite for wrap helper"""

    def test_wrap_adds_parentheses(self):
        """Test wrapping looser code"""
        assert wrap("a + b", Order.MULTIPLICATION, Order.ADDITION) == "(a + b)"

    def test_wrap_keeps_tight_code(self):
        """Test tight code is returned unchanged"""
        assert wrap("a * b", Order.ADDITION, Order.MULTIPLICATION) == "a * b"

    def test_wrap_empty_code(self):
        """Test empty code stays empty"""
        assert wrap("", Order.MULTIPLICATION, Order.ADDITION) == ""
