# =============================================================================
# test_ast.py - Expression Tree Tests
# =============================================================================
# Tests for the expression tree nodes and visitors.
#
# Test coverage includes:
#   - Node immutability
#   - ASTPrinter and DotPrinter output
#   - Reference evaluator: precedence, associativity, truncating
#     division and 64-bit wraparound
# =============================================================================

import pytest
from exprcc.ast import (
    ASTPrinter,
    ASTVisitor,
    BinaryOp,
    BinaryOperator,
    DotPrinter,
    Literal,
    children,
    evaluate,
)
from exprcc.errors import SourceLocation
from exprcc.parser import parse_source


# =============================================================================
# Node Tests
# =============================================================================

class TestNodes:
    """Tests for node construction."""

    def test_nodes_are_frozen(self):
        node = Literal(location=SourceLocation("<test>", 1, 1), value=1)
        with pytest.raises(AttributeError):
            node.value = 2

    def test_children_order(self):
        tree = parse_source("1-2")
        assert [c.value for c in children(tree)] == [1, 2]

    def test_literal_has_no_children(self):
        assert children(parse_source("1")) == []

    def test_operator_symbols(self):
        assert [op.value for op in BinaryOperator] == ["+", "-", "*", "/"]

    def test_visitor_dispatch(self):
        class LiteralCounter(ASTVisitor):
            def __init__(self):
                self.count = 0

            def visit_Literal(self, node):
                self.count += 1

        counter = LiteralCounter()
        counter.visit(parse_source("1+2*(3-4)"))
        assert counter.count == 4


# =============================================================================
# Printer Tests
# =============================================================================

class TestASTPrinter:
    """Tests for the indented tree printer."""

    def test_print_tree(self):
        output = ASTPrinter().print(parse_source("1-2*3"))
        assert output.splitlines() == [
            "BinaryOp(SUB)",
            "  Literal(1)",
            "  BinaryOp(MUL)",
            "    Literal(2)",
            "    Literal(3)",
        ]

    def test_print_unary(self):
        output = ASTPrinter().print(parse_source("-7"))
        assert output.splitlines() == ["UnaryMinus", "  Literal(7)"]

    def test_printer_reusable(self):
        printer = ASTPrinter()
        tree = parse_source("1+2")
        assert printer.print(tree) == printer.print(tree)


class TestDotPrinter:
    """Tests for the Graphviz printer."""

    def test_dot_output(self):
        output = DotPrinter().print(parse_source("1+2"))
        assert output.splitlines() == [
            "digraph G {",
            '  0 [label="BinaryOp(ADD)"];',
            "  0 -> 1;",
            '  1 [label="Literal(1)"];',
            "  0 -> 2;",
            '  2 [label="Literal(2)"];',
            "}",
        ]

    def test_preorder_numbering(self):
        output = DotPrinter().print(parse_source("-(1*2)+3"))
        assert "  0 -> 1;" in output
        assert '  1 [label="UnaryMinus"];' in output
        assert "  1 -> 2;" in output
        assert '  2 [label="BinaryOp(MUL)"];' in output
        assert "  0 -> 5;" in output
        assert '  5 [label="Literal(3)"];' in output


# =============================================================================
# Evaluator Tests
# =============================================================================

class TestEvaluate:
    """Tests for the reference evaluator."""

    @pytest.mark.parametrize("source,expected", [
        ("0", 0),
        ("42", 42),
        ("5+6*7", 47),
        ("5*(9-6)", 15),
        ("(3+5)/2", 4),
        ("5-(-1+2)", 4),
        ("+5+(-2)", 3),
        ("1-2-3", -4),
        ("100/10/2", 5),
    ])
    def test_values(self, source, expected):
        assert evaluate(parse_source(source)) == expected

    @pytest.mark.parametrize("a,b,c", [(1, 2, 3), (10, 4, 3), (0, 5, 7), (3, 10, 1)])
    def test_left_associative_subtraction(self, a, b, c):
        assert evaluate(parse_source(f"{a}-{b}-{c}")) == (a - b) - c

    @pytest.mark.parametrize("source,expected", [
        ("7/2", 3),
        ("-7/2", -3),
        ("7/-2", -3),
        ("-7/-2", 3),
    ])
    def test_division_truncates_toward_zero(self, source, expected):
        assert evaluate(parse_source(source)) == expected

    def test_wraps_at_64_bits(self):
        assert evaluate(parse_source("9223372036854775807+1")) == -(2**63)

    def test_division_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            evaluate(parse_source("1/0"))

    def test_binary_op_direct(self):
        location = SourceLocation("<test>", 1, 1)
        node = BinaryOp(
            location=location,
            operator=BinaryOperator.MUL,
            left=Literal(location=location, value=6),
            right=Literal(location=location, value=7),
        )
        assert evaluate(node) == 42
