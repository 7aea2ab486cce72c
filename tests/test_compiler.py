"""
Compiler Integration Test Suite
===============================

End-to-end tests: expression text in, assembly out, and the value that
assembly computes when run on the stack machine.
"""

import logging

import pytest
from ninecc import (
    CompilerOptions,
    ExpressionCompiler,
    compile_expression,
    evaluate,
)
from ninecc.ast import NumberLiteral
from ninecc.lexer import TokenKind
from ninecc.errors import CompileError, InvalidCharacterError, TrailingTokenError


class TestScenarios:
    """Concrete input/result pairs."""

    def test_precedence(self):
        assert evaluate("1+2*3") == 7

    def test_parentheses(self):
        assert evaluate("(1+2)*3") == 9

    def test_left_associative_subtraction(self):
        assert evaluate("10-2-3") == 5

    def test_unary_minus(self):
        assert evaluate("-3+5") == 2

    def test_division(self):
        assert evaluate("6/3") == 2

    def test_literal(self):
        for n in (0, 1, 42, 255, 1000000):
            assert evaluate(str(n)) == n

    def test_unary_minus_matches_zero_minus(self):
        assert evaluate("-5") == evaluate("(0-5)") == -5

    def test_unary_plus(self):
        assert evaluate("+5*2") == 10

    def test_binary_minus_then_unary(self):
        assert evaluate("1--5") == 6

    def test_signed_division_truncates(self):
        assert evaluate("-7/2") == -3

    def test_whitespace(self):
        assert evaluate(" 12 + 34 - 5 ") == 41


class TestArithmeticAgreement:
    """Generated programs agree with conventional integer arithmetic."""

    CASES = [
        "1+2+3+4",
        "2*3+4*5",
        "100/10/2",
        "(2+3)*(4-1)",
        "((8))",
        "5*(9-3)/2",
        "-(3*4)+20",
        "7-(2-(1-4))",
        "81/(3*3)-9",
    ]

    @staticmethod
    def reference(source: str) -> int:
        # Python's // floors; every case above divides exactly
        return eval(source.replace("/", "//"))

    @pytest.mark.parametrize("source", CASES)
    def test_matches_reference(self, source):
        assert evaluate(source) == self.reference(source)

    @pytest.mark.parametrize("source", CASES)
    def test_parentheses_round_trip(self, source):
        assert evaluate(f"({source})") == evaluate(source)


class TestExpressionCompiler:
    """Tests for the compiler driver."""

    def test_result_contents(self):
        result = ExpressionCompiler().compile_source("1+2")
        assert result.success
        assert result.source == "1+2"
        assert [t.kind for t in result.tokens][-1] == TokenKind.EOF
        assert len(result.tokens) == 4
        assert result.ast.left == NumberLiteral(offset=0, value=1)
        assert result.assembly.startswith(".intel_syntax noprefix\n")

    def test_instruction_count(self):
        result = ExpressionCompiler().compile_source("1+2")
        # push, push, pop, pop, add, push, pop, ret
        assert result.instruction_count == 8

    def test_compile_expression_matches_driver(self):
        assert compile_expression("3*4") == ExpressionCompiler().compile_source("3*4").assembly

    def test_entry_point_option(self):
        asm = compile_expression("1", CompilerOptions(entry_point="_start"))
        assert "_start:" in asm

    def test_trailing_tokens_rejected_by_default(self):
        with pytest.raises(TrailingTokenError):
            compile_expression("1 2")

    def test_allow_trailing_tokens_option(self):
        options = CompilerOptions(allow_trailing_tokens=True)
        assert evaluate("4 5", options) == 4

    def test_first_error_stops_compilation(self):
        with pytest.raises(InvalidCharacterError):
            compile_expression("1 $ (")

    def test_errors_propagate_unchanged(self):
        with pytest.raises(CompileError) as exc_info:
            ExpressionCompiler().compile_source("(1+2")
        assert str(exc_info.value) == "(1+2\n    ^ expected ')'"

    def test_debug_logging(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="ninecc.compiler"):
            compile_expression("1+2")
        messages = [r.getMessage() for r in caplog.records]
        assert "tokenized 4 tokens" in messages
        assert "parsed 3 AST nodes" in messages
        assert "generated 8 instructions" in messages
