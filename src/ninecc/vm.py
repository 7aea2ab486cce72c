"""
Stack Machine Evaluator
=======================

Executes the assembly produced by the code generator without an external
assembler, so generated programs can be checked directly.

Only the instruction subset the compiler emits is supported:

| Instruction      | Effect                                       |
|------------------|----------------------------------------------|
| push imm32 / reg | Push a value (immediates are signed 32-bit)  |
| mov reg, imm/reg | Load a register                              |
| pop reg          | Pop into a register                          |
| add/sub r1, r2   | r1 = r1 +/- r2                               |
| imul r1, r2      | r1 = r1 * r2 (signed, low 64 bits)           |
| cqo              | Sign-extend RAX into RDX                     |
| idiv reg         | RAX = RDX:RAX / reg, RDX = remainder         |
| ret              | Stop, return RAX                             |

Directives (lines starting with '.') and labels are skipped. Registers
hold 64-bit two's complement values and all arithmetic wraps, as on the
real CPU. IDIV truncates toward zero.

Usage
-----
>>> from ninecc.vm import evaluate
>>> evaluate("(1+2)*3")
9
"""

import logging
from typing import Optional

from ninecc.codegen import WORD_BITS, WORD_MASK, fits_imm32, to_signed
from ninecc.compiler import CompilerOptions, compile_expression
from ninecc.errors import StackMachineError

logger = logging.getLogger(__name__)


REGISTERS = ("rax", "rbx", "rcx", "rdx", "rsi", "rdi")


class StackMachine:
    """
    Interpreter for generated stack-machine assembly.

    Example:
        machine = StackMachine()
        value = machine.run(assembly)
        print(value, machine.exit_status)

    Attributes:
        registers: Current register values (signed)
        stack: Evaluation stack, top of stack last
        steps: Number of instructions executed by the last run
    """

    def __init__(self):
        self.registers: dict[str, int] = {}
        self.stack: list[int] = []
        self.steps = 0
        self.reset()

    def reset(self) -> None:
        """Clear registers and stack."""
        self.registers = {name: 0 for name in REGISTERS}
        self.stack = []
        self.steps = 0

    @property
    def exit_status(self) -> int:
        """Process exit status a shell would see for the current RAX."""
        return self.registers["rax"] & 0xFF

    def run(self, assembly: str) -> int:
        """
        Execute an assembly program until `ret`.

        Args:
            assembly: Program text as produced by CodeGenerator

        Returns:
            Signed value of RAX at `ret`

        Raises:
            StackMachineError: On unknown instructions, stack underflow,
                division by zero, or a program without `ret`
        """
        self.reset()

        for line_number, line in enumerate(assembly.splitlines(), start=1):
            text = line.strip()
            if not text or text.startswith(".") or text.endswith(":"):
                continue

            self.steps += 1
            if self._execute(text, line_number):
                logger.debug("ret after %d steps, rax=%d", self.steps, self.registers["rax"])
                return self.registers["rax"]

        raise StackMachineError("program ended without 'ret'")

    # =========================================================================
    # Instruction Execution
    # =========================================================================

    def _execute(self, text: str, line_number: int) -> bool:
        """Execute one instruction. Returns True on `ret`."""
        mnemonic, _, rest = text.partition(" ")
        operands = [op.strip() for op in rest.split(",")] if rest.strip() else []

        if mnemonic == "push" and len(operands) == 1:
            self.stack.append(self._read_push_operand(operands[0], line_number))
        elif mnemonic == "mov" and len(operands) == 2:
            self._write(operands[0], self._read(operands[1], line_number), line_number)
        elif mnemonic == "pop" and len(operands) == 1:
            if not self.stack:
                raise StackMachineError(f"line {line_number}: pop from empty stack")
            self._write(operands[0], self.stack.pop(), line_number)
        elif mnemonic in ("add", "sub", "imul") and len(operands) == 2:
            left = self._read(operands[0], line_number)
            right = self._read(operands[1], line_number)
            if mnemonic == "add":
                result = left + right
            elif mnemonic == "sub":
                result = left - right
            else:
                result = left * right
            self._write(operands[0], to_signed(result), line_number)
        elif mnemonic == "cqo" and not operands:
            self.registers["rdx"] = -1 if self.registers["rax"] < 0 else 0
        elif mnemonic == "idiv" and len(operands) == 1:
            self._divide(self._read(operands[0], line_number), line_number)
        elif mnemonic == "ret" and not operands:
            return True
        else:
            raise StackMachineError(f"line {line_number}: unsupported instruction '{text}'")

        return False

    def _divide(self, divisor: int, line_number: int) -> None:
        """Signed divide of RDX:RAX, quotient to RAX and remainder to RDX."""
        if divisor == 0:
            raise StackMachineError(f"line {line_number}: division by zero")

        dividend = (self.registers["rdx"] << WORD_BITS) | (self.registers["rax"] & WORD_MASK)
        quotient = abs(dividend) // abs(divisor)
        if (dividend < 0) != (divisor < 0):
            quotient = -quotient
        remainder = dividend - quotient * divisor

        if to_signed(quotient) != quotient:
            raise StackMachineError(f"line {line_number}: division overflow")

        self.registers["rax"] = quotient
        self.registers["rdx"] = remainder

    def _read(self, operand: str, line_number: int) -> int:
        if operand in self.registers:
            return self.registers[operand]
        try:
            return to_signed(int(operand))
        except ValueError:
            raise StackMachineError(
                f"line {line_number}: bad operand '{operand}'"
            ) from None

    def _read_push_operand(self, operand: str, line_number: int) -> int:
        value = self._read(operand, line_number)
        if operand not in self.registers and not fits_imm32(int(operand)):
            raise StackMachineError(
                f"line {line_number}: push immediate '{operand}' does not fit in 32 bits"
            )
        return value

    def _write(self, operand: str, value: int, line_number: int) -> None:
        if operand not in self.registers:
            raise StackMachineError(f"line {line_number}: '{operand}' is not a register")
        self.registers[operand] = value


def evaluate(source: str, options: Optional[CompilerOptions] = None) -> int:
    """
    Compile an expression and run the generated program.

    Returns:
        The value the program returns in RAX

    Raises:
        CompileError: If compilation fails
        StackMachineError: If execution faults
    """
    return StackMachine().run(compile_expression(source, options))
