"""
Diagnostics Test Suite
======================

Tests for the position-annotated error reports shared by the tokenizer
and the parser.
"""

import pytest
from ninecc.errors import (
    NineccError,
    SourceSpan,
    CompileError,
    InvalidCharacterError,
    MissingTokenError,
    NotANumberError,
    TrailingTokenError,
    UsageError,
)
from ninecc.parser import parse_source


class TestReportFormat:
    """Tests for the two-line report."""

    def test_two_line_report(self):
        error = CompileError("bad thing", "1 + x", 4)
        assert str(error) == "1 + x\n    ^ bad thing"

    def test_caret_at_column_zero(self):
        error = CompileError("oops", "$", 0)
        assert str(error).splitlines() == ["$", "^ oops"]

    def test_caret_past_end_of_input(self):
        error = CompileError("expected a number", "1+", 2)
        assert str(error).splitlines()[1] == "  ^ expected a number"

    def test_multiline_source_shows_error_line(self):
        error = CompileError("here", "1+\n2 $", 5)
        assert error.line == "2 $"
        assert error.column == 2
        assert str(error) == "2 $\n  ^ here"

    def test_attributes(self):
        error = CompileError("msg", "src", 1)
        assert error.message == "msg"
        assert error.source == "src"
        assert error.offset == 1


class TestErrorTypes:
    """Tests for the specific error classes."""

    def test_invalid_character(self):
        error = InvalidCharacterError("1 $ 2", 2)
        assert error.char == "$"
        assert str(error) == "1 $ 2\n  ^ invalid character '$'"

    def test_missing_token(self):
        error = MissingTokenError(")", "(1+2", 4)
        assert str(error).endswith("    ^ expected ')'")

    def test_not_a_number(self):
        assert "expected a number" in str(NotANumberError("1+", 2))

    def test_trailing_token(self):
        error = TrailingTokenError("2", "1 2", 2)
        assert "unexpected token '2'" in str(error)

    def test_hierarchy(self):
        for cls in (InvalidCharacterError, MissingTokenError,
                    NotANumberError, TrailingTokenError):
            assert issubclass(cls, CompileError)
        assert issubclass(CompileError, NineccError)
        assert issubclass(UsageError, NineccError)
        assert not issubclass(UsageError, CompileError)


class TestPipelineDiagnostics:
    """Reports produced by real inputs point at the offending character."""

    @pytest.mark.parametrize("source, offset", [
        ("1+", 2),
        ("(1+2", 4),
        ("1 $ 2", 2),
        ("2*(3+)", 5),
    ])
    def test_offsets(self, source, offset):
        with pytest.raises(CompileError) as exc_info:
            parse_source(source)
        assert exc_info.value.offset == offset
        caret_line = str(exc_info.value).splitlines()[1]
        assert caret_line.index("^") == offset


class TestSourceSpan:
    """Tests for SourceSpan."""

    def test_str(self):
        assert str(SourceSpan(3, 2)) == "3:2"

    def test_end(self):
        assert SourceSpan(3, 2).end == 5

    def test_frozen(self):
        with pytest.raises(AttributeError):
            SourceSpan(0, 1).offset = 4
