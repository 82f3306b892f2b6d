"""
exprcc - Arithmetic Expression Compiler
=======================================

This package compiles a single-line arithmetic expression over signed
integers into x86-64 assembly. Assembled and linked with a system C
compiler, the output is a program whose exit status is the value of the
expression.

Pipeline
--------
    Source → Lexer → Tokens → Parser → Expression Tree → Code Generator → Assembly

Main Components
---------------
- **lexer**: tokens for digits, + - * / and parentheses
- **parser**: recursive descent with precedence and left associativity
- **codegen**: stack-machine x86-64 emission (GNU as, Intel syntax)
- **compiler**: the driver tying the stages together
- **toolchain**: assemble/link/run helpers for verification (optional)

Quick Start
-----------
    >>> from exprcc import compile_expression
    >>> asm = compile_expression("5+6*7")

Or use the command-line tool:
    $ exprcc "5+6*7" > tmp.s
    $ cc -o tmp tmp.s && ./tmp; echo $?
    47

Language
--------
Supported:
- Non-negative integer literals (64-bit signed arithmetic)
- Binary + - * / (* and / bind tighter; all left-associative)
- One leading + or - per operand
- Parentheses

Not supported:
- Variables, control flow, function calls, floating point
- Chained signs such as --5 (write -(-5) instead)
"""

__version__ = "0.1.0"
__author__ = "exprcc Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from exprcc.compiler import (
    ExpressionCompiler,
    CompilerOptions,
    CompilerResult,
    compile_expression,
)
from exprcc.errors import (
    ExprCCError,
    CompileError,
    LexError,
    ParseError,
    CodeGenError,
    ToolchainError,
    SourceLocation,
)
from exprcc.lexer import Lexer, Token, TokenType, tokenize
from exprcc.parser import Parser, parse_source
from exprcc.codegen import CodeGenerator
from exprcc.ast import (
    Expression,
    Literal,
    UnaryMinus,
    BinaryOp,
    BinaryOperator,
    ASTPrinter,
    DotPrinter,
    evaluate,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Main API
    "ExpressionCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_expression",
    # Errors
    "ExprCCError",
    "CompileError",
    "LexError",
    "ParseError",
    "CodeGenError",
    "ToolchainError",
    "SourceLocation",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    # Parser
    "Parser",
    "parse_source",
    # Code generator
    "CodeGenerator",
    # Expression tree
    "Expression",
    "Literal",
    "UnaryMinus",
    "BinaryOp",
    "BinaryOperator",
    "ASTPrinter",
    "DotPrinter",
    "evaluate",
]
