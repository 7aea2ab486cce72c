"""
ninecc Compiler Main Module
===========================

This module provides the main compiler interface. It runs the complete
compilation process:

    Source → Lex → Parse → Generate → Assembly

Usage
-----
Command line:
    $ ninecc "1+2*3" > tmp.s

Programmatic:
    >>> from ninecc import compile_expression
    >>> asm = compile_expression("1+2*3")

Error Handling
--------------
The first error raised by any stage ends the compilation. Errors are not
collected; the CompileError propagates to the caller unchanged.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from ninecc.ast import Expression, count_nodes
from ninecc.codegen import CodeGenerator
from ninecc.lexer import Lexer, Token
from ninecc.parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        entry_point: Name of the global label the program starts at
        allow_trailing_tokens: If True, tokens left after a complete
                     expression are ignored instead of rejected.
                     "1 2" then compiles to a program returning 1.
    """
    entry_point: str = "main"
    allow_trailing_tokens: bool = False


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        source: The compiled expression text
        success: True if compilation succeeded
        tokens: Token list from the lexer
        ast: Expression tree from the parser
        assembly: Generated assembly program
    """
    source: str = ""
    success: bool = False
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Expression] = None
    assembly: str = ""

    @property
    def instruction_count(self) -> int:
        """Number of instruction lines in the generated program."""
        return sum(1 for line in self.assembly.splitlines() if line.startswith("  "))


class ExpressionCompiler:
    """
    Compiles one expression to x86-64 assembly.

    Example:
        compiler = ExpressionCompiler()
        result = compiler.compile_source("(1+2)*3")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str) -> CompilerResult:
        """
        Compile an expression.

        Args:
            source: Expression text

        Returns:
            CompilerResult with tokens, AST and assembly

        Raises:
            CompileError: If tokenizing or parsing fails
        """
        result = CompilerResult(source=source)

        # Stage 1: Lexical analysis
        result.tokens = self.tokenize(source)
        logger.debug("tokenized %d tokens", len(result.tokens))

        # Stage 2: Parsing
        result.ast = self.parse(result.tokens, source)
        logger.debug("parsed %d AST nodes", count_nodes(result.ast))

        # Stage 3: Code generation
        generator = CodeGenerator(entry_point=self.options.entry_point)
        result.assembly = generator.generate(result.ast)
        result.success = True
        logger.debug("generated %d instructions", result.instruction_count)

        return result

    def tokenize(self, source: str) -> list[Token]:
        return Lexer(source).tokenize()

    def parse(self, tokens: list[Token], source: str) -> Expression:
        parser = Parser(
            tokens,
            source,
            allow_trailing_tokens=self.options.allow_trailing_tokens,
        )
        return parser.parse()


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_expression(source: str, options: Optional[CompilerOptions] = None) -> str:
    """
    Compile an expression to an x86-64 assembly program.

    Args:
        source: Expression text
        options: Compiler configuration (defaults if None)

    Returns:
        Assembly source text

    Raises:
        CompileError: If compilation fails

    Example:
        >>> print(compile_expression("42"))
        .intel_syntax noprefix
        .global main
        main:
          push 42
          pop rax
          ret
    """
    return ExpressionCompiler(options).compile_source(source).assembly
