"""
Mini-C Compiler Pipeline Tests
==============================

End-to-end tests of lexing, parsing and analysis through the Compiler
front end: options, keep-going behaviour, error propagation and the
JSON-ready result form.
"""

import json

import pytest
from ctree.errors import CTreeError, SourceLocation
from ctree.minic import (
    Compiler,
    CompilerOptions,
    CompileResult,
    compile_source,
)
from ctree.minic.ast import NodeKind, validate_arity
from ctree.minic.complexity import ComplexityClass
from ctree.minic.errors import (
    CompilationError,
    CompilationFailed,
    CSyntaxError,
    ErrorCollector,
    ErrorKind,
    LexicalError,
    MalformedNumberError,
    UnterminatedCommentError,
)
from ctree.minic.lexer import TokenKind


SAMPLE = """\
// Sum the first n integers
int sum(int n) {
    int total = 0;
    for (int i = 0; i < n; i = i + 1) {
        total = total + i;
    }
    return total;
}
"""


# =============================================================================
# Successful Compilation
# =============================================================================

class TestCompileSource:
    """Tests for the successful pipeline path."""

    def test_returns_result(self):
        result = compile_source(SAMPLE)
        assert isinstance(result, CompileResult)
        assert result.success
        assert result.errors == []

    def test_tokens_include_comments_by_default(self):
        result = compile_source(SAMPLE)
        assert result.tokens[0].kind == TokenKind.COMMENT
        assert result.tokens[0].text == "// Sum the first n integers"

    def test_comments_can_be_excluded(self):
        result = compile_source(SAMPLE, options=CompilerOptions(include_comments=False))
        assert all(t.kind != TokenKind.COMMENT for t in result.tokens)
        assert result.tokens[0].text == "int"

    def test_ast_is_program(self):
        result = compile_source(SAMPLE)
        assert result.ast.kind == NodeKind.PROGRAM
        assert result.ast.children[0].value == "sum"
        assert validate_arity(result.ast) == []

    def test_complexity(self):
        result = compile_source(SAMPLE)
        assert result.complexity.time == ComplexityClass.ON
        assert result.complexity.space == ComplexityClass.ON
        assert "2 variables declared" in result.complexity.details[1]

    def test_filename_from_options(self):
        result = compile_source("x;", options=CompilerOptions(filename="opts.c"))
        assert result.filename == "opts.c"
        assert result.tokens[0].filename == "opts.c"

    def test_filename_argument_overrides_options(self):
        result = compile_source("x;", "arg.c", CompilerOptions(filename="opts.c"))
        assert result.filename == "arg.c"

    def test_idempotent(self):
        """Compiling the same text twice gives equal results."""
        assert compile_source(SAMPLE) == compile_source(SAMPLE)

    def test_compiler_reuse_is_idempotent(self):
        compiler = Compiler()
        first = compiler.compile_source(SAMPLE)
        second = compiler.compile_source(SAMPLE)
        assert first == second


# =============================================================================
# Result Serialization
# =============================================================================

class TestResultToDict:
    """Tests for the JSON-ready form of a result."""

    def test_keys(self):
        data = compile_source("int x = 10;").to_dict()
        assert set(data) == {"filename", "success", "tokens", "ast", "complexity", "errors"}

    def test_tokens(self):
        data = compile_source("int x = 10;").to_dict()
        assert data["tokens"][3] == {"kind": "NUMBER", "text": "10", "line": 1, "column": 9}

    def test_json_round_trip(self):
        """The whole result survives json.dumps unchanged."""
        data = compile_source(SAMPLE).to_dict()
        assert json.loads(json.dumps(data)) == data

    def test_complexity_labels(self):
        data = compile_source("while (a) while (b) b = 0;").to_dict()
        assert data["complexity"]["time"] == "O(n²)"
        assert data["complexity"]["space"] == "O(1)"


# =============================================================================
# Error Handling
# =============================================================================

class TestCompileErrors:
    """Tests for error propagation through the pipeline."""

    def test_lexical_error_is_raised_directly(self):
        with pytest.raises(LexicalError) as exc_info:
            compile_source("int x = 1.2.3;")
        error = exc_info.value
        assert isinstance(error, MalformedNumberError)
        assert error.to_dict()["kind"] == "Lexical"

    def test_lexical_error_not_recovered_with_keep_going(self):
        """Keep-going never turns a lexical error into a partial result."""
        with pytest.raises(UnterminatedCommentError) as exc_info:
            compile_source("/* unterminated", options=CompilerOptions(keep_going=True))
        assert (exc_info.value.line, exc_info.value.column) == (1, 16)

    def test_syntax_error_raises_by_default(self):
        with pytest.raises(CompilationFailed) as exc_info:
            compile_source("int x = ;\nint y = 5;")
        failure = exc_info.value
        assert failure.kind == ErrorKind.SYNTAX
        assert (failure.line, failure.column) == (1, 9)
        assert "expected expression" in failure.message
        assert isinstance(failure.partial, CompileResult)

    def test_partial_result_rides_along(self):
        with pytest.raises(CompilationFailed) as exc_info:
            compile_source("int x = ;\nint y = 5;")
        partial = exc_info.value.partial
        assert [c.value for c in partial.ast.children] == ["y"]
        assert partial.errors == exc_info.value.errors

    def test_keep_going_returns_result_with_errors(self):
        options = CompilerOptions(keep_going=True)
        result = compile_source("int x = ;\nint y = 5;", options=options)
        assert not result.success
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], CSyntaxError)
        assert "y" in [c.value for c in result.ast.children]
        assert result.to_dict()["errors"] == [{
            "kind": "Syntax",
            "message": "expected expression, got PUNCTUATION ';'",
            "line": 1,
            "column": 9,
        }]

    def test_max_errors_option(self):
        source = "\n".join(["int v = ;"] * 8)
        options = CompilerOptions(keep_going=True, max_errors=2)
        assert len(compile_source(source, options=options).errors) == 2

    def test_max_nesting_option(self):
        source = "x = " + "(" * 12 + "1" + ")" * 12 + ";"
        options = CompilerOptions(keep_going=True, max_nesting_depth=8)
        result = compile_source(source, options=options)
        assert "nesting deeper than 8 levels" in result.errors[0].message

    def test_raised_nesting_option_never_leaks_recursion_error(self):
        source = "x = " + "(" * 1500 + "1" + ")" * 1500 + ";"
        with pytest.raises(CompilationFailed) as exc_info:
            compile_source(source, options=CompilerOptions(max_nesting_depth=1000))
        assert exc_info.value.to_dict()["kind"] == "Syntax"
        assert "nesting deeper than" in exc_info.value.message

    def test_error_context_line_ignores_carriage_return(self):
        options = CompilerOptions(keep_going=True)
        result = compile_source("int a;\rint b = ;", options=options)
        error = result.errors[0]
        assert (error.line, error.column) == (1, 16)
        assert error.source_line == "int a;\rint b = ;"

    @pytest.mark.parametrize("field", ["max_errors", "max_nesting_depth"])
    def test_invalid_limits(self, field):
        with pytest.raises(ValueError):
            CompilerOptions(**{field: 0})

    def test_failure_message_lists_all_errors(self):
        with pytest.raises(CompilationFailed) as exc_info:
            compile_source("int a = ;\nint b = ;", "two.c")
        text = str(exc_info.value)
        assert "two.c:1:9" in text
        assert "two.c:2:9" in text
        assert text.endswith("2 errors")

    def test_errors_share_base_class(self):
        assert issubclass(CompilationError, CTreeError)
        assert issubclass(CompilationFailed, CTreeError)


# =============================================================================
# Files
# =============================================================================

class TestCompileFile:
    """Tests for compiling from disk."""

    def test_compile_file(self, tmp_path):
        path = tmp_path / "prog.c"
        path.write_text(SAMPLE)
        result = Compiler().compile_file(path)
        assert result.filename == str(path)
        assert result.success

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Compiler().compile_file(tmp_path / "missing.c")

    def test_error_location_uses_path(self, tmp_path):
        path = tmp_path / "bad.c"
        path.write_text("int x = @;")
        with pytest.raises(LexicalError) as exc_info:
            Compiler().compile_file(path)
        assert exc_info.value.filename == str(path)


# =============================================================================
# Error Support Types
# =============================================================================

class TestErrorSupport:
    """Tests for SourceLocation and ErrorCollector."""

    def test_source_location_str(self):
        assert str(SourceLocation("a.c", 3, 7)) == "a.c:3:7"

    def test_collector(self):
        collector = ErrorCollector(max_errors=2)
        assert collector.error_count() == 0
        error = CSyntaxError("boom", SourceLocation("a.c", 1, 1))
        collector.add(error)
        assert not collector.should_stop()
        collector.add(error)
        assert collector.should_stop()
        assert collector.errors == [error, error]
        collector.clear()
        assert collector.error_count() == 0

    def test_compilation_failed_needs_errors(self):
        with pytest.raises(ValueError):
            CompilationFailed([])
