"""
Expression Compiler Main Module
===============================

This module provides the main compiler interface. It runs the complete
compilation process once per call:

    Source → Lex → Parse → Generate → Assembly

Usage
-----
Command line:
    $ exprcc "5+6*7" > tmp.s
    $ cc -o tmp tmp.s && ./tmp; echo $?
    47

Programmatic:
    >>> from exprcc import compile_expression
    >>> asm = compile_expression("5+6*7")

Error Handling
--------------
LexError and ParseError are fatal. Either the full assembly text is
produced or the error propagates and nothing is produced.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from exprcc.ast import Expression
from exprcc.codegen import CodeGenerator
from exprcc.errors import CompileError
from exprcc.lexer import Lexer, Token
from exprcc.parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        entry_symbol: Global label of the entry function. The default
                      "main" lets the C runtime call the program and
                      turn its return value into the exit status.
        output_comments: Annotate each node's code with a comment
    """
    entry_symbol: str = "main"
    output_comments: bool = False


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        source: The source text that was compiled
        filename: Source name used in diagnostics
        success: True if compilation succeeded
        tokens: Tokens produced by the lexer, EOF included
        ast: Root of the expression tree
        assembly: Generated assembly text
    """
    source: str = ""
    filename: str = "<input>"
    success: bool = False
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Expression] = None
    assembly: str = ""

    @property
    def token_count(self) -> int:
        return len(self.tokens)


class ExpressionCompiler:
    """
    Compiler for single-line arithmetic expressions.

    Example:
        compiler = ExpressionCompiler()
        result = compiler.compile_source("(3+5)/2")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile expression source to assembly.

        Args:
            source: The expression text
            filename: Source name for error messages

        Returns:
            CompilerResult containing assembly output and intermediates

        Raises:
            LexError: On a character outside the token set
            ParseError: If the tokens do not form one expression
        """
        result = CompilerResult(source=source, filename=filename)

        try:
            # Stage 1: Lexical analysis
            result.tokens = self._lex(source, filename)

            # Stage 2: Parsing
            result.ast = self._parse(result.tokens, filename, source.splitlines())

            # Stage 3: Code generation
            result.assembly = self._generate(result.ast)
        except CompileError as e:
            logger.debug(f"Compilation of {filename} failed: {e.message}")
            raise

        result.success = True
        return result

    def tokenize(self, source: str, filename: str = "<input>") -> list[Token]:
        """Run only the lexer (used by the CLI token mode)."""
        return self._lex(source, filename)

    def parse(self, source: str, filename: str = "<input>") -> Expression:
        """Run the lexer and parser (used by the CLI ast and dot modes)."""
        return self._parse(self._lex(source, filename), filename, source.splitlines())

    def _lex(self, source: str, filename: str) -> list[Token]:
        tokens = list(Lexer(source, filename).tokenize())
        logger.debug(f"Lexed {len(tokens)} tokens")
        return tokens

    def _parse(self, tokens: list[Token], filename: str, source_lines: list[str]) -> Expression:
        return Parser(tokens, filename, source_lines).parse()

    def _generate(self, ast: Expression) -> str:
        generator = CodeGenerator(
            entry_symbol=self.options.entry_symbol,
            output_comments=self.options.output_comments,
        )
        return generator.generate(ast)


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_expression(source: str, filename: str = "<input>") -> str:
    """
    Compile an arithmetic expression to x86-64 assembly.

    This is the primary high-level interface.

    Raises:
        LexError: On a character outside the token set
        ParseError: If the tokens do not form one expression

    Example:
        >>> asm = compile_expression("5*(9-6)")
        >>> asm.splitlines()[0]
        '.intel_syntax noprefix'
    """
    return ExpressionCompiler().compile_source(source, filename).assembly
