"""
Expression Lexer (Tokenizer)
============================

This module converts a single line of arithmetic source text into a
lazy stream of tokens for the parser.

Token Categories
----------------
- Numbers: maximal runs of decimal digits (no sign, no prefix)
- Operators: +, -, *, /
- Delimiters: (, )
- EOF: exactly one, always last

Whitespace
----------
Spaces and tabs between tokens are skipped. Anything else that is not a
token, newlines included, is a LexError.

Example Usage
-------------
>>> from exprcc.lexer import Lexer
>>> for token in Lexer("2 * (1+23)").tokenize():
...     print(token)
Token(NUMBER, 2, 1:1)
Token(STAR, 1:3)
Token(LPAREN, 1:5)
Token(NUMBER, 1, 1:6)
Token(PLUS, 1:7)
Token(NUMBER, 23, 1:8)
Token(RPAREN, 1:10)
Token(EOF, 1:11)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from exprcc.errors import LexError, SourceLocation

logger = logging.getLogger(__name__)


# Largest literal that fits a signed 64-bit register
MAX_LITERAL = 2**63 - 1


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """Token types for the expression language."""

    EOF = auto()            # End of input
    NUMBER = auto()         # Integer literal

    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /

    LPAREN = auto()         # (
    RPAREN = auto()         # )


# Map single-character tokens to their types
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from the source text.

    Attributes:
        type: The TokenType classification
        value: The integer value for NUMBER, the character for operators
               and delimiters, None for EOF
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the source
    """
    type: TokenType
    value: str | int | None
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        if isinstance(self.value, int):
            return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def offset(self) -> int:
        """Character offset from the start of the line."""
        return self.column - 1

    def describe(self) -> str:
        """Human-readable token text for diagnostics."""
        if self.type == TokenType.EOF:
            return "end of input"
        return str(self.value)


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes one line of arithmetic source text.

    tokenize() is a generator; each call starts over from the first
    character with its own read position, so several streams over the
    same Lexer never disturb each other. Every stream ends with a single
    EOF token.

    Usage:
        lexer = Lexer(source_text)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The text being tokenized
        filename: Name of the source (for error reporting)
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        # Diagnostics show the line up to any stray newline
        self._source_line = source.split("\n", 1)[0]

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source text.

        Yields:
            Token objects in left-to-right source order, ending with EOF

        Raises:
            LexError: On a character outside the token set
        """
        yield from _Scanner(self.source, self.filename, self._source_line).scan()


class _Scanner:
    """Read position over the source for a single tokenize() call."""

    WHITESPACE = " \t"

    def __init__(self, source: str, filename: str, source_line: str):
        self.source = source
        self.filename = filename
        self.source_line = source_line

        self._pos = 0
        self._line = 1
        self._column = 1

    def scan(self) -> Iterator[Token]:
        count = 0

        while True:
            self._skip_whitespace()
            if self._at_end():
                break
            yield self._scan_token()
            count += 1

        logger.debug(f"Tokenized {self.filename}: {count} tokens")
        yield self._make_token(TokenType.EOF, None)

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        """Current character, or empty string past the end."""
        if self._at_end():
            return ""
        return self.source[self._pos]

    def _advance(self) -> str:
        char = self.source[self._pos]
        self._pos += 1
        self._column += 1
        return char

    def _make_token(
        self,
        token_type: TokenType,
        value: str | int | None,
        start_column: Optional[int] = None,
    ) -> Token:
        return Token(
            type=token_type,
            value=value,
            line=self._line,
            column=start_column or self._column,
            filename=self.filename,
        )

    def _location(self, column: Optional[int] = None) -> SourceLocation:
        return SourceLocation(self.filename, self._line, column or self._column)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _skip_whitespace(self) -> None:
        while not self._at_end() and self._peek() in self.WHITESPACE:
            self._advance()

    def _scan_token(self) -> Token:
        start_column = self._column
        char = self._peek()

        if char in string.digits:
            return self._scan_number()

        if char in SINGLE_CHAR_TOKENS:
            self._advance()
            return self._make_token(SINGLE_CHAR_TOKENS[char], char, start_column)

        raise LexError(char, self._location(start_column), source_line=self.source_line)

    def _scan_number(self) -> Token:
        """Scan a maximal run of decimal digits."""
        start_column = self._column
        digits = []
        while not self._at_end() and self._peek() in string.digits:
            digits.append(self._advance())

        text = "".join(digits)
        value = int(text)
        if value > MAX_LITERAL:
            raise LexError(
                text,
                self._location(start_column),
                message=f"integer literal {text} out of range",
                hint=f"literals must not exceed {MAX_LITERAL}",
                source_line=self.source_line,
            )
        return self._make_token(TokenType.NUMBER, value, start_column)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize source text into a list.

    Raises:
        LexError: On a character outside the token set
    """
    return list(Lexer(source, filename).tokenize())
