"""
ninecc Recursive Descent Parser
===============================

This module implements a recursive descent parser for arithmetic
expressions. It takes the token list from the lexer and builds an
Abstract Syntax Tree (AST).

Grammar (EBNF)
--------------
expression      ::= equality
equality        ::= relational
relational      ::= additive
additive        ::= multiplicative (('+' | '-') multiplicative)*
multiplicative  ::= unary (('*' | '/') unary)*
unary           ::= '+' primary | '-' primary | primary
primary         ::= '(' expression ')' | NUMBER

The equality and relational layers currently pass straight through; the
lexer has no rules yet for '!=', '<=' and '>=' and the AST has no
comparison nodes.

Unary '-' builds (0 - primary) and unary '+' is dropped. Both apply to a
primary, not to another unary, so '--5' and '++5' are syntax errors while
'1--5' is 1 - (0 - 5).

Every binary layer folds left, so '10-2-3' is (10-2)-3.

Example Usage
-------------
>>> from ninecc.lexer import tokenize
>>> from ninecc.parser import Parser
>>> from ninecc.ast import format_expression
>>> source = "1+2*3"
>>> tree = Parser(tokenize(source), source).parse()
>>> print(format_expression(tree))
(1 + (2 * 3))
"""

from typing import Callable

from ninecc.lexer import Lexer, Token, TokenKind
from ninecc.ast import (
    Expression,
    BinaryExpression,
    NumberLiteral,
    BinaryOperator,
)
from ninecc.errors import (
    MissingTokenError,
    NotANumberError,
    TrailingTokenError,
)


class Parser:
    """
    Recursive descent parser for arithmetic expressions.

    The parser owns a single cursor into the token list and only moves it
    forward. The first syntax error is raised immediately; there is no
    recovery.

    Attributes:
        tokens: Token list ending in an EOF token
        source: Original source text, used for error reports
        allow_trailing_tokens: Accept leftover tokens after the expression
    """

    def __init__(
        self,
        tokens: list[Token],
        source: str,
        allow_trailing_tokens: bool = False,
    ):
        self.tokens = tokens
        self.source = source
        self.allow_trailing_tokens = allow_trailing_tokens

        # Current position in token stream
        self._pos = 0

    def parse(self) -> Expression:
        """
        Parse the token list into an expression tree.

        Returns:
            Root node of the AST

        Raises:
            CompileError: On the first syntax error
        """
        self._pos = 0
        expr = self._parse_expression()

        if not self.at_eof() and not self.allow_trailing_tokens:
            token = self.current
            raise TrailingTokenError(token.text, self.source, token.offset)

        return expr

    # =========================================================================
    # Token Cursor
    # =========================================================================

    @property
    def current(self) -> Token:
        """The token under the cursor."""
        return self.tokens[self._pos]

    def at_eof(self) -> bool:
        """Check if the cursor has reached the end of input."""
        return self.current.kind == TokenKind.EOF

    def _advance(self) -> None:
        if not self.at_eof():
            self._pos += 1

    def consume(self, op: str) -> bool:
        """
        Consume the current token if it is the reserved symbol `op`.

        Returns:
            True if the token matched and was consumed, False otherwise
        """
        if not self.current.is_reserved(op):
            return False
        self._advance()
        return True

    def expect(self, op: str) -> None:
        """
        Consume the reserved symbol `op`.

        Raises:
            MissingTokenError: If the current token is anything else
        """
        if not self.current.is_reserved(op):
            raise MissingTokenError(op, self.source, self.current.offset)
        self._advance()

    def expect_number(self) -> int:
        """
        Consume an integer literal and return its value.

        Raises:
            NotANumberError: If the current token is not a number
        """
        token = self.current
        if token.kind != TokenKind.NUM:
            raise NotANumberError(self.source, token.offset)
        self._advance()
        return token.value

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        return self._parse_equality()

    def _parse_equality(self) -> Expression:
        """Parse equality expression (no operators wired yet)."""
        return self._parse_relational()

    def _parse_relational(self) -> Expression:
        """Parse relational expression (no operators wired yet)."""
        return self._parse_additive()

    def _parse_additive(self) -> Expression:
        """Parse additive expression (+ -)."""
        return self._parse_binary(
            self._parse_multiplicative,
            {
                "+": BinaryOperator.ADD,
                "-": BinaryOperator.SUBTRACT,
            },
        )

    def _parse_multiplicative(self) -> Expression:
        """Parse multiplicative expression (* /)."""
        return self._parse_binary(
            self._parse_unary,
            {
                "*": BinaryOperator.MULTIPLY,
                "/": BinaryOperator.DIVIDE,
            },
        )

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: dict[str, BinaryOperator],
    ) -> Expression:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Function to parse operands
            operators: Map of reserved symbols to binary operators
        """
        expr = operand_parser()

        while True:
            for symbol, operator in operators.items():
                if self.consume(symbol):
                    right = operand_parser()
                    expr = BinaryExpression(
                        offset=expr.offset,
                        operator=operator,
                        left=expr,
                        right=right,
                    )
                    break
            else:
                return expr

    def _parse_unary(self) -> Expression:
        """Parse unary expression (+ -)."""
        offset = self.current.offset

        if self.consume("+"):
            return self._parse_primary()

        if self.consume("-"):
            return BinaryExpression(
                offset=offset,
                operator=BinaryOperator.SUBTRACT,
                left=NumberLiteral(offset=offset, value=0),
                right=self._parse_primary(),
            )

        return self._parse_primary()

    def _parse_primary(self) -> Expression:
        """Parse primary expression (number or parenthesized expression)."""
        if self.consume("("):
            expr = self._parse_expression()
            self.expect(")")
            return expr

        offset = self.current.offset
        return NumberLiteral(offset=offset, value=self.expect_number())


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str, allow_trailing_tokens: bool = False) -> Expression:
    """
    Tokenize and parse an expression.

    Args:
        source: The expression text
        allow_trailing_tokens: Ignore tokens left after the expression

    Returns:
        The root node of the AST

    Raises:
        CompileError: If tokenizing or parsing fails
    """
    tokens = Lexer(source).tokenize()
    parser = Parser(tokens, source, allow_trailing_tokens)
    return parser.parse()
