"""
Mini-C Compiler Main Module
===========================

This module provides the main interface to the Mini-C pipeline. It
orchestrates the complete analysis of one source text:

    Source → Lexer → Tokens → Parser → AST → ComplexityAnalyzer → Report

Usage
-----
Command line:
    $ mcc prog.c --ast

Programmatic:
    >>> from ctree.minic import compile_source
    >>> result = compile_source('int main() { return 0; }')
    >>> str(result.complexity.time)
    'O(1)'

Error Handling
--------------
A lexical error stops the pipeline at once and is raised as-is. Syntax
errors are collected by the parser, which recovers and keeps parsing
later declarations. What happens next is the caller's choice:

- ``keep_going=False`` (default): CompilationFailed is raised with every
  syntax error; the partial CompileResult rides along as ``partial``.
- ``keep_going=True``: the CompileResult is returned with its ``errors``
  filled in and ``success`` false.

Either way a result never leaves the pipeline without its errors.

Every call builds fresh lexer, parser and analyzer state, so compiling
the same text twice gives equal results.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ctree.minic.ast import ASTNode
from ctree.minic.complexity import ComplexityAnalyzer, ComplexityReport
from ctree.minic.errors import CompilationError, CompilationFailed
from ctree.minic.lexer import Lexer, Token, TokenKind
from ctree.minic.parser import DEFAULT_MAX_NESTING_DEPTH, Parser

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        filename: Name used in error locations when compiling a string
        keep_going: Return a result carrying syntax errors instead of
            raising CompilationFailed
        max_errors: Syntax errors to collect before the parser gives up
        max_nesting_depth: Deepest statement/expression nesting accepted
        include_comments: Keep COMMENT tokens in CompileResult.tokens
    """
    filename: str = "<input>"
    keep_going: bool = False
    max_errors: int = 100
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH
    include_comments: bool = True

    def __post_init__(self):
        if self.max_errors < 1:
            raise ValueError("max_errors must be at least 1")
        if self.max_nesting_depth < 1:
            raise ValueError("max_nesting_depth must be at least 1")


@dataclass
class CompileResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        tokens: Token sequence (comments included unless disabled)
        ast: PROGRAM-rooted tree
        complexity: Time/space classification of ast
        errors: Syntax errors recovered from; empty on success
    """
    filename: str
    tokens: list[Token]
    ast: ASTNode
    complexity: ComplexityReport
    errors: list[CompilationError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        """
        Convert to plain data for JSON serialization.

        Only strings, numbers, None, lists and dicts appear in the output.
        """
        return {
            "filename": self.filename,
            "success": self.success,
            "tokens": [token.to_dict() for token in self.tokens],
            "ast": self.ast.to_dict(),
            "complexity": self.complexity.to_dict(),
            "errors": [error.to_dict() for error in self.errors],
        }


class Compiler:
    """
    Mini-C compiler front end.

    Holds configuration only; all per-source state is created inside
    compile_source().

    Example:
        compiler = Compiler(CompilerOptions(keep_going=True))
        result = compiler.compile_file("prog.c")
        for error in result.errors:
            print(error)
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: Optional[str] = None) -> CompileResult:
        """
        Run the whole pipeline on source.

        Args:
            source: Mini-C source code
            filename: Overrides options.filename for error locations

        Returns:
            CompileResult with tokens, AST and complexity report

        Raises:
            LexicalError: If tokenizing fails
            CompilationFailed: If syntax errors were found and
                options.keep_going is false
        """
        filename = filename or self.options.filename

        # Stage 1: Lexical analysis
        tokens = list(Lexer(source, filename).tokenize())
        logger.debug(f"{filename}: {len(tokens)} tokens")

        # Stage 2: Parsing
        parser = Parser(
            tokens,
            filename,
            source.split("\n"),
            max_errors=self.options.max_errors,
            max_nesting_depth=self.options.max_nesting_depth,
        )
        ast = parser.parse()
        errors = parser.errors
        logger.debug(
            f"{filename}: {len(ast.children)} top-level declarations, "
            f"{len(errors)} syntax errors"
        )

        # Stage 3: Complexity analysis
        complexity = ComplexityAnalyzer().analyze(ast)

        if not self.options.include_comments:
            tokens = [t for t in tokens if t.kind != TokenKind.COMMENT]

        result = CompileResult(
            filename=filename,
            tokens=tokens,
            ast=ast,
            complexity=complexity,
            errors=errors,
        )

        if errors and not self.options.keep_going:
            raise CompilationFailed(errors, partial=result)

        return result

    def compile_file(self, filepath: str | Path) -> CompileResult:
        """
        Compile a Mini-C source file.

        Raises:
            FileNotFoundError: If the file does not exist
            LexicalError, CompilationFailed: As for compile_source
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.compile_source(source, str(path))


def compile_source(
    source: str,
    filename: Optional[str] = None,
    options: Optional[CompilerOptions] = None,
) -> CompileResult:
    """
    Compile Mini-C source into tokens, an AST and a complexity report.

    This is the primary high-level interface.

    Raises:
        LexicalError: If tokenizing fails
        CompilationFailed: If syntax errors were found (unless
            options.keep_going)
    """
    return Compiler(options).compile_source(source, filename)
