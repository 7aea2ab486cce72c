"""
ninecc Lexer (Tokenizer)
========================

This module converts an expression string into a list of classified
tokens for the parser.

Token Categories
----------------
- Reserved symbols: + - * / ( ) < >
- Equality operator: ==
- Integer literals: maximal runs of decimal digits
- End of input: exactly one, always last

ASCII whitespace (space, tab, newline, vertical tab, form feed, carriage
return) separates tokens and is otherwise ignored. Any other character
is a fatal error reported at its offset.

The token kinds NE (!=), LE (<=) and GE (>=) are part of the token set
but the scanner has no rule that produces them yet; `!` is rejected and
`<`/`>` always scan as single reserved symbols.

Example Usage
-------------
>>> from ninecc.lexer import Lexer
>>> for token in Lexer("12 + 3").tokenize():
...     print(token)
Token(NUM, 12, 0:2)
Token(RESERVED, '+', 3:1)
Token(NUM, 3, 5:1)
Token(EOF, 6:0)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from ninecc.errors import InvalidCharacterError, SourceSpan


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """Classification of a token."""

    RESERVED = auto()   # Single-character symbol
    EQ = auto()         # ==
    NE = auto()         # !=
    LE = auto()         # <=
    GE = auto()         # >=
    NUM = auto()        # Integer literal
    EOF = auto()        # End of input


# ASCII whitespace only; other Unicode spaces are invalid characters
WHITESPACE = " \t\n\v\f\r"

# Single-character symbols, matched after the two-character operators
RESERVED_SYMBOLS = "+-*/()<>"

# Two-character operators, matched first so they are never split
MULTI_CHAR_OPERATORS: dict[str, TokenKind] = {
    "==": TokenKind.EQ,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of the source expression.

    Attributes:
        kind: The TokenKind classification
        offset: Index of the first character in the source
        length: Number of source characters covered
        text: The matched source text
        value: Parsed value for NUM tokens, None otherwise
    """
    kind: TokenKind
    offset: int
    length: int
    text: str
    value: Optional[int] = None

    def __repr__(self) -> str:
        if self.kind == TokenKind.NUM:
            return f"Token({self.kind.name}, {self.value}, {self.span})"
        if self.kind == TokenKind.EOF:
            return f"Token({self.kind.name}, {self.span})"
        return f"Token({self.kind.name}, {self.text!r}, {self.span})"

    @property
    def span(self) -> SourceSpan:
        return SourceSpan(self.offset, self.length)

    def is_reserved(self, op: str) -> bool:
        """Return True if this is the reserved symbol `op` (kind and full text)."""
        return self.kind == TokenKind.RESERVED and self.text == op


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes an arithmetic expression.

    Usage:
        tokens = Lexer(source).tokenize()

    Attributes:
        source: The expression being tokenized
    """

    def __init__(self, source: str):
        self.source = source
        self._pos = 0
        self._tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        """
        Scan the whole source.

        Returns:
            The token list, always terminated by one EOF token

        Raises:
            InvalidCharacterError: If a character cannot start a token
        """
        self._pos = 0
        self._tokens = []

        while not self._at_end():
            char = self._peek()

            if char in WHITESPACE:
                self._pos += 1
                continue

            if self._scan_operator():
                continue

            if char in RESERVED_SYMBOLS:
                self._add(TokenKind.RESERVED, self._pos, 1)
                self._pos += 1
                continue

            if char in "0123456789":
                self._scan_number()
                continue

            raise InvalidCharacterError(self.source, self._pos)

        self._add(TokenKind.EOF, len(self.source), 0)
        return self._tokens

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        return self.source[self._pos]

    def _add(self, kind: TokenKind, offset: int, length: int,
             value: Optional[int] = None) -> None:
        text = self.source[offset:offset + length]
        self._tokens.append(Token(kind, offset, length, text, value))

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_operator(self) -> bool:
        """Match a two-character operator at the current position."""
        for op, kind in MULTI_CHAR_OPERATORS.items():
            if self.source.startswith(op, self._pos):
                self._add(kind, self._pos, len(op))
                self._pos += len(op)
                return True
        return False

    def _scan_number(self) -> None:
        """Scan a maximal run of decimal digits."""
        start = self._pos
        while not self._at_end() and self._peek() in "0123456789":
            self._pos += 1
        value = int(self.source[start:self._pos])
        self._add(TokenKind.NUM, start, self._pos - start, value)


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize(source: str) -> list[Token]:
    """Tokenize `source` and return the token list."""
    return Lexer(source).tokenize()


def format_tokens(tokens: list[Token]) -> str:
    """
    Render a token list for debugging, one block per token.

    Example output:
        kind:   NUM
        text:   '12'
        value:  12
        span:   0:2
        -----------------
    """
    lines = []
    for token in tokens:
        lines.append(f"kind:   {token.kind.name}")
        lines.append(f"text:   {token.text!r}")
        if token.value is not None:
            lines.append(f"value:  {token.value}")
        lines.append(f"span:   {token.span}")
        lines.append("-----------------")
    return "\n".join(lines)
