"""
ninecc Error Hierarchy
======================

This module defines the exception hierarchy for the ninecc compiler.
All exceptions inherit from NineccError, allowing callers to catch all
compiler-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
NineccError (base)
├── CompileError - fatal, position-annotated compilation error
│   ├── InvalidCharacterError - character the tokenizer cannot scan
│   ├── MissingTokenError - expected symbol not found
│   ├── NotANumberError - integer literal expected
│   └── TrailingTokenError - input left over after a complete expression
├── CodeGenError - AST the code generator cannot handle
├── UsageError - wrong command-line usage
└── StackMachineError - fault while evaluating generated assembly

Error Message Format
--------------------
A CompileError formats as a two-line report: the source line holding the
offending character, then a caret under its column followed by the message.

    1 $ 2
      ^ invalid character '$'

Compile errors are fatal. No stage catches them; the first one ends the
compilation and the command-line front end turns it into exit status 1.
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class NineccError(Exception):
    """
    Base exception for all ninecc errors.

        try:
            compile_expression("1 + (2")
        except NineccError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceSpan:
    """
    A byte range in the original source text.

    Attributes:
        offset: Index of the first character (0-indexed)
        length: Number of characters covered
    """
    offset: int
    length: int

    def __str__(self) -> str:
        return f"{self.offset}:{self.length}"

    @property
    def end(self) -> int:
        return self.offset + self.length


# =============================================================================
# Compilation Errors
# =============================================================================

class CompileError(NineccError):
    """
    Fatal error raised by the tokenizer or parser.

    The error keeps the complete source text and the offset of the
    offending character so it can point at it exactly.

    Attributes:
        message: The error description
        source: The full original input
        offset: Index of the offending character in source
    """

    def __init__(self, message: str, source: str, offset: int):
        self.message = message
        self.source = source
        self.offset = offset
        super().__init__(self._format_message())

    @property
    def line(self) -> str:
        """The source line containing the error offset."""
        start = self.source.rfind("\n", 0, self.offset) + 1
        end = self.source.find("\n", self.offset)
        if end == -1:
            end = len(self.source)
        return self.source[start:end]

    @property
    def column(self) -> int:
        """Zero-based column of the error offset within its line."""
        return self.offset - (self.source.rfind("\n", 0, self.offset) + 1)

    def _format_message(self) -> str:
        """
        Format the source line and a caret pointer.

        Example output:
            (1+2
                ^ expected ')'
        """
        padding = " " * self.column
        return f"{self.line}\n{padding}^ {self.message}"


class InvalidCharacterError(CompileError):
    """Character in the source that does not start any token."""

    def __init__(self, source: str, offset: int):
        self.char = source[offset]
        super().__init__(f"invalid character '{self.char}'", source, offset)


class MissingTokenError(CompileError):
    """
    Required symbol is missing.

    Raised when a required symbol (like ')') is not found where expected.
    """

    def __init__(self, expected: str, source: str, offset: int):
        self.expected = expected
        super().__init__(f"expected '{expected}'", source, offset)


class NotANumberError(CompileError):
    """An integer literal was required but something else was found."""

    def __init__(self, source: str, offset: int):
        super().__init__("expected a number", source, offset)


class TrailingTokenError(CompileError):
    """Tokens remain after a complete expression was parsed."""

    def __init__(self, found: str, source: str, offset: int):
        self.found = found
        super().__init__(f"unexpected token '{found}' after expression", source, offset)


# =============================================================================
# Other Errors
# =============================================================================

class CodeGenError(NineccError):
    """
    Error during code generation.

    Only raised for AST nodes or operators the generator does not know,
    which the parser never produces.
    """
    pass


class UsageError(NineccError):
    """Wrong command-line usage, detected before any compilation stage."""
    pass


class StackMachineError(NineccError):
    """
    Fault while evaluating generated assembly.

    Raised when:
    - The divisor of an idiv is zero
    - A pop finds the stack empty
    - An instruction outside the emitted subset is encountered
    """
    pass
