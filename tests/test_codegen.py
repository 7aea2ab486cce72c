"""
Code Generator Test Suite
=========================

Tests for the x86-64 stack-machine code generator: program framing,
post-order emission and the operator mapping.
"""

import platform
import shutil
import subprocess

import pytest
from ninecc.parser import parse_source
from ninecc.codegen import CodeGenerator
from ninecc.ast import ASTNode, BinaryExpression, NumberLiteral
from ninecc.errors import CodeGenError


# Skip assembler checks unless a native x86-64 GNU as is available
requires_as = pytest.mark.skipif(
    shutil.which("as") is None or platform.machine() not in ("x86_64", "AMD64"),
    reason="x86-64 GNU assembler not available",
)


def body(source: str) -> list:
    return CodeGenerator().generate_body(parse_source(source))


class TestProgramFrame:
    """Tests for the prologue and epilogue."""

    def test_exact_program_for_literal(self):
        asm = CodeGenerator().generate(parse_source("42"))
        assert asm == (
            ".intel_syntax noprefix\n"
            ".global main\n"
            "main:\n"
            "  push 42\n"
            "  pop rax\n"
            "  ret\n"
        )

    def test_custom_entry_point(self):
        asm = CodeGenerator(entry_point="start").generate(parse_source("1"))
        assert ".global start\n" in asm
        assert "\nstart:\n" in asm

    def test_epilogue_is_last(self):
        lines = CodeGenerator().generate(parse_source("1+2")).splitlines()
        assert lines[-2:] == ["  pop rax", "  ret"]

    def test_generator_is_reusable(self):
        gen = CodeGenerator()
        first = gen.generate(parse_source("1+2"))
        second = gen.generate(parse_source("1+2"))
        assert first == second


class TestExpressions:
    """Tests for expression bodies."""

    def test_literal_pushes_value(self):
        assert body("7") == ["  push 7"]

    def test_largest_push_immediate(self):
        assert body("2147483647") == ["  push 2147483647"]

    def test_wide_literal_loads_through_rax(self):
        """PUSH only encodes a sign-extended 32-bit immediate."""
        assert body("2147483648") == ["  mov rax, 2147483648", "  push rax"]
        assert body("3000000000") == ["  mov rax, 3000000000", "  push rax"]

    def test_literal_wraps_to_64_bits(self):
        assert body(str((1 << 64) + 5)) == ["  push 5"]
        assert body(str(1 << 63)) == [f"  mov rax, {-(1 << 63)}", "  push rax"]

    def test_no_push_immediate_outside_32_bits(self):
        for line in body("4294967296*4294967296+18446744073709551615"):
            mnemonic, _, operand = line.strip().partition(" ")
            if mnemonic == "push" and operand != "rax":
                assert -(1 << 31) <= int(operand) < (1 << 31)

    def test_addition(self):
        assert body("1+2") == [
            "  push 1",
            "  push 2",
            "  pop rdi",
            "  pop rax",
            "  add rax, rdi",
            "  push rax",
        ]

    def test_subtraction(self):
        assert "  sub rax, rdi" in body("5-3")

    def test_multiplication(self):
        assert "  imul rax, rdi" in body("5*3")

    def test_division_sign_extends_first(self):
        lines = body("6/3")
        assert lines[2:6] == ["  pop rdi", "  pop rax", "  cqo", "  idiv rdi"]
        assert lines[-1] == "  push rax"

    def test_left_operand_emitted_first(self):
        lines = body("10-4")
        assert lines.index("  push 10") < lines.index("  push 4")

    def test_post_order(self):
        lines = body("1+2*3")
        assert lines[:3] == ["  push 1", "  push 2", "  push 3"]
        assert lines.index("  imul rax, rdi") < lines.index("  add rax, rdi")

    def test_unary_minus(self):
        assert body("-5") == body("0-5")

    def test_parentheses_do_not_change_code(self):
        assert body("(1+2)") == body("1+2")

    def test_push_pop_balance(self):
        lines = body("(1+2)*(3-4)/5")
        pushes = sum(1 for line in lines if line.startswith("  push"))
        pops = sum(1 for line in lines if line.startswith("  pop"))
        assert pushes - pops == 1


class TestCodeGenErrors:
    """Tests for nodes the generator does not know."""

    def test_unknown_node(self):
        with pytest.raises(CodeGenError):
            CodeGenerator().generate(ASTNode(offset=0))

    def test_unknown_operator(self):
        node = BinaryExpression(
            offset=0,
            operator=None,
            left=NumberLiteral(offset=0, value=1),
            right=NumberLiteral(offset=0, value=2),
        )
        with pytest.raises(CodeGenError):
            CodeGenerator().generate(node)


@requires_as
class TestAssembles:
    """Generated programs are accepted by the GNU assembler."""

    @pytest.mark.parametrize("source", ["1+2*3", "3000000000", "-2147483648*2", "18446744073709551615"])
    def test_as_accepts_program(self, source, tmp_path):
        asm_file = tmp_path / "out.s"
        asm_file.write_text(CodeGenerator().generate(parse_source(source)))
        result = subprocess.run(
            ["as", "-o", str(tmp_path / "out.o"), str(asm_file)],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0, result.stderr
