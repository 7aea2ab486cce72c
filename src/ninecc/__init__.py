"""
ninecc - Arithmetic Expression Compiler
=======================================

This package compiles a single arithmetic expression into an x86-64
assembly program whose `main` returns the value of the expression.

Supported input: non-negative integer literals, the binary operators
+ - * /, unary + and -, and parentheses. Operators follow the usual
precedence and associate to the left.

Main Components
---------------
- **lexer**: splits the source into tokens
- **parser**: recursive descent parser building the AST
- **ast**: expression tree nodes, visitor and printer
- **codegen**: stack-machine x86-64 code generator
- **compiler**: runs the pipeline (ExpressionCompiler, compile_expression)
- **vm**: evaluates generated programs without an assembler
- **cli**: the `ninecc` command

Quick Start
-----------
    >>> from ninecc import compile_expression
    >>> asm = compile_expression("1+2*3")

    >>> from ninecc import evaluate
    >>> evaluate("10-2-3")
    5

Or from the shell:
    $ ninecc "1+2*3" > tmp.s
    $ cc -o tmp tmp.s && ./tmp; echo $?
    7
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from ninecc.errors import (
    NineccError,
    SourceSpan,
    CompileError,
    InvalidCharacterError,
    MissingTokenError,
    NotANumberError,
    TrailingTokenError,
    CodeGenError,
    UsageError,
    StackMachineError,
)
from ninecc.lexer import Lexer, Token, TokenKind, tokenize, format_tokens
from ninecc.ast import (
    ASTNode,
    Expression,
    BinaryExpression,
    NumberLiteral,
    BinaryOperator,
    ASTVisitor,
    ASTPrinter,
    format_expression,
)
from ninecc.parser import Parser, parse_source
from ninecc.codegen import CodeGenerator
from ninecc.compiler import (
    CompilerOptions,
    CompilerResult,
    ExpressionCompiler,
    compile_expression,
)
from ninecc.vm import StackMachine, evaluate

__all__ = [
    # Version info
    "__version__",
    # Errors
    "NineccError",
    "SourceSpan",
    "CompileError",
    "InvalidCharacterError",
    "MissingTokenError",
    "NotANumberError",
    "TrailingTokenError",
    "CodeGenError",
    "UsageError",
    "StackMachineError",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
    "format_tokens",
    # AST
    "ASTNode",
    "Expression",
    "BinaryExpression",
    "NumberLiteral",
    "BinaryOperator",
    "ASTVisitor",
    "ASTPrinter",
    "format_expression",
    # Parser
    "Parser",
    "parse_source",
    # Code generator
    "CodeGenerator",
    # Compiler
    "CompilerOptions",
    "CompilerResult",
    "ExpressionCompiler",
    "compile_expression",
    # Evaluator
    "StackMachine",
    "evaluate",
]
