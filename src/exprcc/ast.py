"""
Expression Tree Definitions
===========================

This module defines the expression tree built by the parser and read by
the code generator, plus visitors that walk it.

Node Hierarchy
--------------
Expression (base)
├── Literal - integer constant
├── UnaryMinus - arithmetic negation of a sub-expression
└── BinaryOp - +, -, *, / over two sub-expressions

Unary plus has no node: it parses to its operand unchanged.

Design Notes
------------
- All nodes are frozen dataclasses; a parent is only built once its
  children exist, so a partially built tree is never observable
- Each node stores its source location for error reporting
- The tree has no sharing and no cycles; every child has one parent
"""

from dataclasses import dataclass
from enum import Enum

from exprcc.errors import SourceLocation


# 64-bit two's complement wraparound used by the reference evaluator
WORD_BITS = 64
WORD_MASK = (1 << WORD_BITS) - 1
SIGN_BIT = 1 << (WORD_BITS - 1)


# =============================================================================
# Node Classes
# =============================================================================

@dataclass(frozen=True)
class Expression:
    """
    Base class for all expression nodes.

    Attributes:
        location: Source location where this node appears
    """
    location: SourceLocation


class BinaryOperator(Enum):
    """Binary operator types, valued by their source symbol."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


@dataclass(frozen=True)
class Literal(Expression):
    """
    Integer constant.

    Attributes:
        value: The non-negative value of the digit run
    """
    value: int = 0


@dataclass(frozen=True)
class UnaryMinus(Expression):
    """
    Negation of a sub-expression (-x).

    Attributes:
        operand: The negated expression
    """
    operand: Expression = None


@dataclass(frozen=True)
class BinaryOp(Expression):
    """
    Binary arithmetic (left op right).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: BinaryOperator = None
    left: Expression = None
    right: Expression = None


# =============================================================================
# Visitor Base Class
# =============================================================================

class ASTVisitor:
    """
    Base class for expression tree visitors.

    Dispatches visit(node) to visit_<ClassName>. Subclasses override the
    methods for the node types they handle.

    Usage:
        class Counter(ASTVisitor):
            def visit_Literal(self, node):
                return 1
    """

    def visit(self, node: Expression):
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Expression):
        """Visit children of nodes without a dedicated method."""
        for child in children(node):
            self.visit(child)

    def visit_Literal(self, node: Literal): return self.generic_visit(node)
    def visit_UnaryMinus(self, node: UnaryMinus): return self.generic_visit(node)
    def visit_BinaryOp(self, node: BinaryOp): return self.generic_visit(node)


def children(node: Expression) -> list[Expression]:
    """Return the direct sub-expressions of a node, left to right."""
    if isinstance(node, UnaryMinus):
        return [node.operand]
    if isinstance(node, BinaryOp):
        return [node.left, node.right]
    return []


def describe(node: Expression) -> str:
    """Short label for a node, used by printers and codegen comments."""
    if isinstance(node, Literal):
        return f"Literal({node.value})"
    if isinstance(node, UnaryMinus):
        return "UnaryMinus"
    if isinstance(node, BinaryOp):
        return f"BinaryOp({node.operator.name})"
    return node.__class__.__name__


# =============================================================================
# AST Printers
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for tree debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(tree))

    Output for 1-2*3:
        BinaryOp(SUB)
          Literal(1)
          BinaryOp(MUL)
            Literal(2)
            Literal(3)
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: Expression) -> str:
        """Print the tree and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def generic_visit(self, node: Expression):
        self._emit(describe(node))
        self.indent_level += 1
        for child in children(node):
            self.visit(child)
        self.indent_level -= 1


class DotPrinter(ASTVisitor):
    """
    Renders the tree in the Graphviz dot language.

    Nodes are numbered in pre-order, so the root is always 0 and the
    output for a given tree never changes.

        $ exprcc --mode dot "1+2" | dot -Tpng -o tree.png
    """

    def __init__(self):
        self.output: list[str] = []
        self._next_id = 0

    def print(self, node: Expression) -> str:
        """Render the tree and return the complete digraph."""
        self.output = ["digraph G {"]
        self._next_id = 0
        self.visit(node)
        self.output.append("}")
        return "\n".join(self.output)

    def generic_visit(self, node: Expression) -> int:
        node_id = self._next_id
        self._next_id += 1
        self.output.append(f'  {node_id} [label="{describe(node)}"];')
        for child in children(node):
            self.output.append(f"  {node_id} -> {self._next_id};")
            self.visit(child)
        return node_id


# =============================================================================
# Reference Evaluator
# =============================================================================

def _wrap(value: int) -> int:
    """Reduce to a signed 64-bit value."""
    value &= WORD_MASK
    if value & SIGN_BIT:
        value -= 1 << WORD_BITS
    return value


class ExpressionEvaluator(ASTVisitor):
    """
    Computes the value a compiled program would produce.

    Arithmetic wraps at 64 bits and division truncates toward zero, the
    same as the emitted add/sub/imul/idiv sequence.

    Raises:
        ZeroDivisionError: On division by zero (the compiled program
            traps instead)
    """

    def visit_Literal(self, node: Literal) -> int:
        return _wrap(node.value)

    def visit_UnaryMinus(self, node: UnaryMinus) -> int:
        return _wrap(-self.visit(node.operand))

    def visit_BinaryOp(self, node: BinaryOp) -> int:
        left = self.visit(node.left)
        right = self.visit(node.right)

        if node.operator == BinaryOperator.ADD:
            return _wrap(left + right)
        if node.operator == BinaryOperator.SUB:
            return _wrap(left - right)
        if node.operator == BinaryOperator.MUL:
            return _wrap(left * right)
        if right == 0:
            raise ZeroDivisionError("division by zero")
        quotient = abs(left) // abs(right)
        if (left < 0) != (right < 0):
            quotient = -quotient
        return _wrap(quotient)

    def generic_visit(self, node: Expression):
        raise TypeError(f"cannot evaluate {node.__class__.__name__}")


def evaluate(node: Expression) -> int:
    """Evaluate a tree to its signed 64-bit value."""
    return ExpressionEvaluator().visit(node)
