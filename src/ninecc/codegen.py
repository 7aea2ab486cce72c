"""
x86-64 Code Generator for ninecc
================================

This module turns an expression AST into x86-64 assembly (GNU as, Intel
syntax) for a program whose `main` returns the value of the expression.

Code Generation Strategy
------------------------
The generator treats the machine stack as an evaluation stack:

1. A number literal pushes its value. Literals wrap to 64 bits, and
   values outside the signed 32-bit range go through `mov rax, imm`
   because PUSH cannot encode them
2. A binary node generates its left operand, then its right operand,
   pops the right into RDI and the left into RAX, applies the operator
   to RAX and pushes RAX

So a tree is emitted in post-order and every subtree leaves exactly one
value on the stack.

Register Usage
--------------
| Register | Usage                                   |
|----------|-----------------------------------------|
| RAX      | Left operand, result, return value      |
| RDI      | Right operand                           |
| RDX      | High half of the dividend for IDIV      |

Signed division needs the dividend sign-extended into RDX:RAX, which CQO
does before IDIV. The quotient is left in RAX.

Generated Assembly Format
-------------------------
    .intel_syntax noprefix
    .global main
    main:
      push 1
      push 2
      pop rdi
      pop rax
      add rax, rdi
      push rax
      pop rax
      ret

Usage
-----
>>> from ninecc.parser import parse_source
>>> from ninecc.codegen import CodeGenerator
>>> asm = CodeGenerator().generate(parse_source("1+2"))
"""

from ninecc.ast import (
    ASTNode,
    ASTVisitor,
    BinaryExpression,
    NumberLiteral,
    BinaryOperator,
)
from ninecc.errors import CodeGenError


# Registers are 64 bits wide and arithmetic wraps
WORD_BITS = 64
WORD_MASK = (1 << WORD_BITS) - 1
SIGN_BIT = 1 << (WORD_BITS - 1)

# PUSH takes at most a sign-extended 32-bit immediate
IMM32_MIN = -(1 << 31)
IMM32_MAX = (1 << 31) - 1


def to_signed(value: int) -> int:
    """Wrap an integer to a signed 64-bit value."""
    value &= WORD_MASK
    if value & SIGN_BIT:
        value -= 1 << WORD_BITS
    return value


def fits_imm32(value: int) -> bool:
    """Check if `value` can be encoded as a PUSH immediate."""
    return IMM32_MIN <= value <= IMM32_MAX


class CodeGenerator(ASTVisitor):
    """
    Generates x86-64 stack-machine assembly from an expression AST.

    Attributes:
        entry_point: Name of the global entry label
    """

    # Instructions applied to RAX (left) and RDI (right) for each operator
    OPERATIONS: dict[BinaryOperator, tuple[str, ...]] = {
        BinaryOperator.ADD: ("add rax, rdi",),
        BinaryOperator.SUBTRACT: ("sub rax, rdi",),
        BinaryOperator.MULTIPLY: ("imul rax, rdi",),
        BinaryOperator.DIVIDE: ("cqo", "idiv rdi"),
    }

    def __init__(self, entry_point: str = "main"):
        self.entry_point = entry_point

        # Assembly output lines
        self._output: list[str] = []

    def generate(self, node: ASTNode) -> str:
        """
        Generate a complete assembly program.

        Args:
            node: Root of the expression tree

        Returns:
            Assembly source text, newline terminated
        """
        self._output = []

        self._emit_header()
        self.visit(node)
        self._emit_footer()

        return "\n".join(self._output) + "\n"

    def generate_body(self, node: ASTNode) -> list[str]:
        """Generate only the instructions that evaluate `node`."""
        self._output = []
        self.visit(node)
        return list(self._output)

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, line: str) -> None:
        self._output.append(line)

    def _emit_instruction(self, instruction: str) -> None:
        self._emit(f"  {instruction}")

    def _emit_header(self) -> None:
        self._emit(".intel_syntax noprefix")
        self._emit(f".global {self.entry_point}")
        self._emit(f"{self.entry_point}:")

    def _emit_footer(self) -> None:
        # The result of the whole expression is the only value left
        self._emit_instruction("pop rax")
        self._emit_instruction("ret")

    # =========================================================================
    # Expression Code Generation
    # =========================================================================

    def generic_visit(self, node: ASTNode) -> None:
        raise CodeGenError(f"cannot generate code for {type(node).__name__}")

    def visit_NumberLiteral(self, node: NumberLiteral) -> None:
        value = to_signed(node.value)
        if fits_imm32(value):
            self._emit_instruction(f"push {value}")
        else:
            # Wider constants need a 64-bit MOV into a register first
            self._emit_instruction(f"mov rax, {value}")
            self._emit_instruction("push rax")

    def visit_BinaryExpression(self, node: BinaryExpression) -> None:
        operations = self.OPERATIONS.get(node.operator)
        if operations is None:
            raise CodeGenError(f"unsupported operator {node.operator}")

        self.visit(node.left)
        self.visit(node.right)

        self._emit_instruction("pop rdi")
        self._emit_instruction("pop rax")
        for instruction in operations:
            self._emit_instruction(instruction)
        self._emit_instruction("push rax")
