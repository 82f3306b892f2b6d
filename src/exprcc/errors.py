"""
exprcc Error Hierarchy
======================

This module defines the exception hierarchy for the expression compiler.
All exceptions inherit from ExprCCError, allowing callers to catch every
compiler-related error with a single except clause if desired.

Exception Hierarchy
-------------------
ExprCCError (base)
├── CompileError (anything that stops a compilation)
│   ├── LexError - character outside the supported token set
│   ├── ParseError - token sequence does not match the grammar
│   └── CodeGenError - internal invariant violated during emission
└── ToolchainError - external assembler/linker/executor failed

Error Message Format
--------------------
Compile errors carry the source location and follow this format:

    <input>:1:3: error: unrecognized character 'a'
        1+a
          ^
    hint: only digits, '+', '-', '*', '/', '(' and ')' are allowed
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ExprCCError(Exception):
    """
    Base exception for all exprcc errors.

        try:
            compile_expression("1+")
        except ExprCCError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source text for error reporting.

    Attributes:
        filename: Name of the source (or "<input>" for command-line input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    @property
    def offset(self) -> int:
        """Character offset from the start of the line (0-indexed)."""
        return self.column - 1

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Compilation Errors
# =============================================================================

class CompileError(ExprCCError):
    """
    Base exception for errors that abort a compilation.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            <input>:1:5: error: unmatched parenthesis
                (1+2
                    ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class LexError(CompileError):
    """
    Unrecognized character in the source text.

    Raised by the lexer when it meets a character outside the token set,
    or a digit run too large for a 64-bit signed machine word.
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        message: Optional[str] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        if message is None:
            message = f"unrecognized character {char!r}"
            hint = hint or "only digits, '+', '-', '*', '/', '(' and ')' are allowed"
        super().__init__(message, location=location, hint=hint, source_line=source_line)


class ParseError(CompileError):
    """
    Token sequence does not match the expression grammar.

    Examples:
        - Unmatched parenthesis: (1+2
        - Missing operand: 1+
        - Trailing input: 1 2
        - Repeated sign: --5
    """

    def __init__(
        self,
        message: str,
        token=None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.token = token
        location = token.location if token is not None else None
        super().__init__(message, location=location, hint=hint, source_line=source_line)


class CodeGenError(CompileError):
    """
    Internal error during code generation.

    A well-formed tree never triggers this; it signals a node type the
    generator does not know or a broken evaluation-stack invariant.
    """
    pass


# =============================================================================
# Toolchain Errors
# =============================================================================

class ToolchainError(ExprCCError):
    """
    The external assembler, linker or executor failed.

    Attributes:
        command: The command line that failed
        stderr: Captured error output, if any
    """

    def __init__(self, message: str, command: Optional[list[str]] = None, stderr: str = ""):
        self.command = command or []
        self.stderr = stderr
        detail = message
        if stderr:
            detail = f"{message}\n{stderr.rstrip()}"
        super().__init__(detail)
