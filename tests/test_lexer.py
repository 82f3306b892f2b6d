# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the expression lexer/tokenizer.
#
# Test coverage includes:
#   - Numbers, operators and parentheses
#   - Whitespace handling and column tracking
#   - Laziness and restartability of the token stream
#   - Error conditions (unrecognized characters, oversized literals)
# =============================================================================

import pytest
from exprcc.lexer import Lexer, Token, TokenType, tokenize, MAX_LITERAL
from exprcc.errors import LexError


# =============================================================================
# Helper Function
# =============================================================================

def token_types(source: str) -> list[TokenType]:
    """Return just the token types for a source string, EOF included."""
    return [t.type for t in tokenize(source)]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition."""

    def test_empty_source(self):
        """Empty source produces only EOF."""
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_whitespace_only(self):
        """Spaces and tabs alone produce only EOF."""
        assert token_types("  \t  ") == [TokenType.EOF]

    def test_single_number(self):
        tokens = tokenize("42")
        assert tokens[0].type == TokenType.NUMBER
        assert tokens[0].value == 42
        assert tokens[1].type == TokenType.EOF

    def test_zero(self):
        assert tokenize("0")[0].value == 0

    def test_leading_zeros_are_decimal(self):
        """Digits are always read base 10."""
        assert tokenize("010")[0].value == 10

    def test_operators_and_parentheses(self):
        assert token_types("+-*/()") == [
            TokenType.PLUS,
            TokenType.MINUS,
            TokenType.STAR,
            TokenType.SLASH,
            TokenType.LPAREN,
            TokenType.RPAREN,
            TokenType.EOF,
        ]

    def test_maximal_digit_run(self):
        """Adjacent digits form one literal."""
        tokens = tokenize("123+4567")
        assert [t.value for t in tokens if t.type == TokenType.NUMBER] == [123, 4567]

    def test_sign_is_not_part_of_number(self):
        """A leading minus is its own token."""
        tokens = tokenize("-5")
        assert tokens[0].type == TokenType.MINUS
        assert tokens[1].type == TokenType.NUMBER
        assert tokens[1].value == 5

    def test_exactly_one_eof(self):
        tokens = tokenize("1 + 2")
        assert [t.type for t in tokens].count(TokenType.EOF) == 1
        assert tokens[-1].type == TokenType.EOF

    def test_largest_literal(self):
        assert tokenize(str(MAX_LITERAL))[0].value == MAX_LITERAL


# =============================================================================
# Position Tracking Tests
# =============================================================================

class TestPositions:
    """Test line/column tracking for diagnostics."""

    def test_columns_with_whitespace(self):
        """Columns are 1-indexed and skip over whitespace."""
        tokens = tokenize("  2 * (1+23) - 456 / 7")
        assert [(t.type, t.column) for t in tokens] == [
            (TokenType.NUMBER, 3),
            (TokenType.STAR, 5),
            (TokenType.LPAREN, 7),
            (TokenType.NUMBER, 8),
            (TokenType.PLUS, 9),
            (TokenType.NUMBER, 10),
            (TokenType.RPAREN, 12),
            (TokenType.MINUS, 14),
            (TokenType.NUMBER, 16),
            (TokenType.SLASH, 20),
            (TokenType.NUMBER, 22),
            (TokenType.EOF, 23),
        ]

    def test_offset_is_zero_based(self):
        tokens = tokenize("(2)")
        assert [t.offset for t in tokens] == [0, 1, 2, 3]

    def test_all_tokens_on_line_one(self):
        assert all(t.line == 1 for t in tokenize("1 + 2 * 3"))

    def test_location_uses_filename(self):
        token = tokenize("7", "expr.txt")[0]
        assert str(token.location) == "expr.txt:1:1"

    def test_repr(self):
        tokens = tokenize("12+")
        assert repr(tokens[0]) == "Token(NUMBER, 12, 1:1)"
        assert repr(tokens[1]) == "Token(PLUS, 1:3)"
        assert repr(tokens[2]) == "Token(EOF, 1:4)"


# =============================================================================
# Token Stream Behaviour Tests
# =============================================================================

class TestTokenStream:
    """Test the generator returned by Lexer.tokenize()."""

    def test_tokenize_is_lazy(self):
        """Tokens before a bad character are produced before the error."""
        stream = Lexer("1+a").tokenize()
        assert next(stream).value == 1
        assert next(stream).type == TokenType.PLUS
        with pytest.raises(LexError):
            next(stream)

    def test_restartable_from_scratch(self):
        lexer = Lexer("3*4")
        first = list(lexer.tokenize())
        second = list(lexer.tokenize())
        assert first == second

    def test_interleaved_streams_are_independent(self):
        """A second tokenize() call does not disturb a stream in progress."""
        lexer = Lexer("12+34")
        first = lexer.tokenize()
        assert next(first).value == 12

        second = lexer.tokenize()
        assert [next(second).value for _ in range(3)] == [12, "+", 34]

        assert [t.value for t in first] == ["+", 34, None]
        assert [t.value for t in second] == [None]

    def test_interleaved_streams_keep_columns(self):
        lexer = Lexer("1 + 2")
        first = lexer.tokenize()
        second = lexer.tokenize()
        next(second)
        next(second)
        assert [t.column for t in first] == [1, 3, 5, 6]

    def test_exhausted_after_eof(self):
        stream = Lexer("1").tokenize()
        assert [t.type for t in stream] == [TokenType.NUMBER, TokenType.EOF]
        with pytest.raises(StopIteration):
            next(stream)

    def test_tokens_are_immutable(self):
        token = tokenize("1")[0]
        with pytest.raises(AttributeError):
            token.value = 2

    def test_token_equality(self):
        assert tokenize("5")[0] == Token(TokenType.NUMBER, 5, 1, 1, "<input>")


# =============================================================================
# Error Tests
# =============================================================================

class TestLexErrors:
    """Test LexError reporting."""

    def test_unrecognized_letter(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("1+a")
        error = exc_info.value
        assert error.char == "a"
        assert error.location.column == 3
        assert error.location.offset == 2

    def test_error_message_has_caret(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("1+a")
        lines = str(exc_info.value).splitlines()
        assert lines[0] == "<input>:1:3: error: unrecognized character 'a'"
        assert lines[1] == "    1+a"
        assert lines[2] == "      ^"

    @pytest.mark.parametrize("source", ["1%2", "1==1", "x", "1.5", "2^3", "1,2"])
    def test_unsupported_characters(self, source):
        with pytest.raises(LexError):
            tokenize(source)

    def test_newline_is_rejected(self):
        """Only one line of input is accepted."""
        with pytest.raises(LexError) as exc_info:
            tokenize("1+2\n")
        assert exc_info.value.char == "\n"
        assert exc_info.value.source_line == "1+2"

    def test_literal_out_of_range(self):
        with pytest.raises(LexError) as exc_info:
            tokenize(str(MAX_LITERAL + 1))
        assert "out of range" in exc_info.value.message
