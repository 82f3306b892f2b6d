"""
Expression Recursive Descent Parser
===================================

This module takes the token stream from the lexer and builds an
expression tree that honours precedence, associativity and parentheses.

Grammar (EBNF)
--------------
expr    ::= add
add     ::= mul (('+' | '-') mul)*
mul     ::= unary (('*' | '/') unary)*
unary   ::= ('+' | '-')? primary
primary ::= NUMBER | '(' expr ')'

Precedence (lowest to highest)
------------------------------
1. additive       + -   (left-associative)
2. multiplicative * /   (left-associative)
3. unary          + -   (at most one sign per primary)
4. primary        NUMBER, '(' expr ')'

A chain of signs such as --5 or +-5 is rejected: the second sign is not
a primary.

Example Usage
-------------
>>> from exprcc.parser import parse_source
>>> tree = parse_source("1-2-3")
>>> tree.operator, tree.left.operator
(<BinaryOperator.SUB: '-'>, <BinaryOperator.SUB: '-'>)
"""

import logging
from typing import Callable, Iterable, Optional

from exprcc.lexer import Lexer, Token, TokenType
from exprcc.ast import (
    Expression,
    Literal,
    UnaryMinus,
    BinaryOp,
    BinaryOperator,
)
from exprcc.errors import ParseError

logger = logging.getLogger(__name__)


class Parser:
    """
    Recursive descent parser for arithmetic expressions.

    Consumes tokens one at a time through a single-token lookahead, so
    it can be fed the lexer's generator directly. There is no error
    recovery: the first mismatch raises ParseError.

    Attributes:
        filename: Source filename for error reporting
        source_lines: Original source lines for error context
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        self.filename = filename
        self.source_lines = source_lines or []

        self._tokens = iter(tokens)
        self._current: Optional[Token] = None

    def parse(self) -> Expression:
        """
        Parse the whole token stream into one expression tree.

        Returns:
            Root node of the tree

        Raises:
            ParseError: If the tokens do not form exactly one expression
        """
        self._current = next(self._tokens)
        expr = self._parse_expression()

        if not self._check(TokenType.EOF):
            raise self._error("unexpected trailing input", hint="expected an operator or end of input")

        logger.debug(f"Parsed {self.filename}: root {expr.__class__.__name__}")
        return expr

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _peek(self) -> Token:
        return self._current

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._current
        if token.type != TokenType.EOF:
            self._current = next(self._tokens)
        return token

    def _check(self, *types: TokenType) -> bool:
        return self._current.type in types

    def _match(self, *types: TokenType) -> Optional[Token]:
        """Consume the current token if it matches one of the types."""
        if self._check(*types):
            return self._advance()
        return None

    def _get_source_line(self, line: int) -> Optional[str]:
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _error(self, message: str, token: Optional[Token] = None, hint: Optional[str] = None) -> ParseError:
        """Create a ParseError pointing at a token (default: the current one)."""
        token = token or self._current
        return ParseError(
            f"{message}, found '{token.describe()}'",
            token,
            hint=hint,
            source_line=self._get_source_line(token.line),
        )

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        return self._parse_additive()

    def _parse_additive(self) -> Expression:
        """Parse additive expression (+ -)."""
        return self._parse_binary(
            self._parse_multiplicative,
            {
                TokenType.PLUS: BinaryOperator.ADD,
                TokenType.MINUS: BinaryOperator.SUB,
            },
        )

    def _parse_multiplicative(self) -> Expression:
        """Parse multiplicative expression (* /)."""
        return self._parse_binary(
            self._parse_unary,
            {
                TokenType.STAR: BinaryOperator.MUL,
                TokenType.SLASH: BinaryOperator.DIV,
            },
        )

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: dict[TokenType, BinaryOperator],
    ) -> Expression:
        """
        Generic left-associative binary expression parser.

        Each operator folds the tree built so far into the new node's
        left side, so 1-2-3 becomes (1-2)-3.
        """
        expr = operand_parser()

        while self._peek().type in operators:
            op_token = self._advance()
            right = operand_parser()
            expr = BinaryOp(
                location=op_token.location,
                operator=operators[op_token.type],
                left=expr,
                right=right,
            )

        return expr

    def _parse_unary(self) -> Expression:
        """Parse an optional single leading sign."""
        if self._match(TokenType.PLUS):
            return self._parse_primary()

        token = self._match(TokenType.MINUS)
        if token:
            operand = self._parse_primary()
            return UnaryMinus(location=token.location, operand=operand)

        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        """Parse a number literal or a parenthesized expression."""
        token = self._peek()

        if token.type == TokenType.NUMBER:
            self._advance()
            return Literal(location=token.location, value=token.value)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            if not self._check(TokenType.RPAREN):
                raise self._error("unmatched parenthesis", hint=f"add ')' to close '(' at column {token.column}")
            self._advance()
            return expr

        hint = None
        if token.type in (TokenType.PLUS, TokenType.MINUS):
            hint = "only one sign is allowed per operand; use parentheses, e.g. -(-5)"
        raise self._error("expected expression", hint=hint)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, filename: str = "<input>") -> Expression:
    """
    Parse source text into an expression tree.

    Combines lexing and parsing; the lexer runs lazily as the parser
    pulls tokens.

    Raises:
        LexError: On a character outside the token set
        ParseError: If the tokens do not form an expression
    """
    lexer = Lexer(source, filename)
    parser = Parser(lexer.tokenize(), filename, source.splitlines())
    return parser.parse()
