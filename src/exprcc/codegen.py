"""
x86-64 Code Generator
=====================

This module turns an expression tree into GNU assembler source (Intel
syntax) for a standalone program whose exit status is the value of the
expression.

Code Generation Strategy
------------------------
The generator is a stack machine over the hardware stack:

1. A literal pushes its value
2. A unary minus pops its operand, negates it, and pushes the result
3. A binary operation evaluates left then right, pops right into RDI
   and left into RAX, combines them in RAX, and pushes RAX
4. The entry function pops the final value into RAX and returns it;
   the C runtime hands it to exit(), which keeps the low 8 bits

Register Usage
--------------
| Register | Usage                                   |
|----------|-----------------------------------------|
| RAX      | Left operand, result, return value      |
| RDI      | Right operand                           |
| RDX      | Sign extension of RAX for IDIV (CQO)    |
| RSP      | Evaluation stack                        |

Division uses CQO + IDIV, so the quotient truncates toward zero. A zero
divisor is not checked here; the compiled program traps (SIGFPE).

Example output for 5+6*7:
    .intel_syntax noprefix
    .globl main
    main:
      push 5
      push 6
      push 7
      pop rdi
      pop rax
      imul rax, rdi
      push rax
      pop rdi
      pop rax
      add rax, rdi
      push rax
      pop rax
      ret

Usage
-----
>>> from exprcc.parser import parse_source
>>> from exprcc.codegen import CodeGenerator
>>> asm = CodeGenerator().generate(parse_source("42"))
"""

import logging

from exprcc.ast import (
    ASTVisitor,
    Expression,
    Literal,
    UnaryMinus,
    BinaryOp,
    BinaryOperator,
    describe,
)
from exprcc.errors import CodeGenError

logger = logging.getLogger(__name__)


# PUSH imm32 sign-extends to 64 bits
IMM32_MIN = -(2**31)
IMM32_MAX = 2**31 - 1


# Instructions combining RAX (left) with RDI (right), result in RAX
BINARY_INSTRUCTIONS: dict[BinaryOperator, list[str]] = {
    BinaryOperator.ADD: ["add rax, rdi"],
    BinaryOperator.SUB: ["sub rax, rdi"],
    BinaryOperator.MUL: ["imul rax, rdi"],
    BinaryOperator.DIV: ["cqo", "idiv rdi"],
}


class CodeGenerator(ASTVisitor):
    """
    Generates x86-64 assembly from an expression tree.

    The generator keeps a count of values its emitted code leaves on the
    stack. Every sub-expression must leave exactly one more value than it
    found, and exactly one must be left for the epilogue; anything else
    is a CodeGenError.

    Attributes:
        entry_symbol: Global label of the generated entry function
        output_comments: Annotate each node's code with a comment
    """

    def __init__(self, entry_symbol: str = "main", output_comments: bool = False):
        self.entry_symbol = entry_symbol
        self.output_comments = output_comments

        self._output: list[str] = []
        self._depth: int = 0

    def generate(self, root: Expression) -> str:
        """
        Generate a complete assembly program from a tree.

        Args:
            root: Root node of the expression tree (read only)

        Returns:
            Assembly source text, newline terminated
        """
        self._output = []
        self._depth = 0

        self._emit_prologue()
        self._gen_expression(root)

        if self._depth != 1:
            raise CodeGenError(f"evaluation stack holds {self._depth} values at exit, expected 1")

        self._emit_epilogue()

        logger.debug(f"Generated {len(self._output)} lines of assembly")
        return "\n".join(self._output) + "\n"

    # =========================================================================
    # Output Helpers
    # =========================================================================

    def _emit(self, instruction: str) -> None:
        self._output.append(f"  {instruction}")

    def _emit_label(self, label: str) -> None:
        self._output.append(f"{label}:")

    def _emit_comment(self, text: str) -> None:
        if self.output_comments:
            self._output.append(f"  # {text}")

    def _push(self, operand: str) -> None:
        self._emit(f"push {operand}")
        self._depth += 1

    def _pop(self, register: str) -> None:
        if self._depth <= 0:
            raise CodeGenError(f"pop into {register} from an empty evaluation stack")
        self._emit(f"pop {register}")
        self._depth -= 1

    def _emit_prologue(self) -> None:
        entry = self.entry_symbol
        self._output.append(".intel_syntax noprefix")
        self._output.append(f".globl {entry}")
        self._emit_label(entry)

    def _emit_epilogue(self) -> None:
        self._emit_comment("return value becomes the exit status")
        self._pop("rax")
        self._emit("ret")

    # =========================================================================
    # Expression Code Generation
    # =========================================================================

    def _gen_expression(self, node: Expression) -> None:
        """Emit code leaving the node's value on top of the stack."""
        depth_before = self._depth
        self.visit(node)
        if self._depth != depth_before + 1:
            raise CodeGenError(
                f"{describe(node)} changed stack depth by {self._depth - depth_before}, expected 1"
            )

    def visit_Literal(self, node: Literal) -> None:
        self._emit_comment(describe(node))
        if IMM32_MIN <= node.value <= IMM32_MAX:
            self._push(str(node.value))
        else:
            self._emit(f"mov rax, {node.value}")
            self._push("rax")

    def visit_UnaryMinus(self, node: UnaryMinus) -> None:
        self._gen_expression(node.operand)
        self._emit_comment(describe(node))
        self._pop("rax")
        self._emit("neg rax")
        self._push("rax")

    def visit_BinaryOp(self, node: BinaryOp) -> None:
        # Left first, so the right operand ends up on top
        self._gen_expression(node.left)
        self._gen_expression(node.right)

        self._emit_comment(describe(node))
        self._pop("rdi")
        self._pop("rax")
        for instruction in BINARY_INSTRUCTIONS[node.operator]:
            self._emit(instruction)
        self._push("rax")

    def generic_visit(self, node: Expression) -> None:
        raise CodeGenError(f"cannot generate code for {node.__class__.__name__}")


# =============================================================================
# Convenience Functions
# =============================================================================

def generate_assembly(root: Expression, entry_symbol: str = "main") -> str:
    """Generate uncommented assembly for a tree."""
    return CodeGenerator(entry_symbol=entry_symbol).generate(root)
