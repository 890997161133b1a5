"""
Mini-C Compiler Error Hierarchy
===============================

This module defines the exceptions raised by the Mini-C pipeline. There
is exactly one error channel between stages: CompilationError, which
carries a kind tag and a source location as first-class fields.

Exception Hierarchy
-------------------
CompilationError (base for all single, positioned errors)
├── LexicalError - the lexer could not form a token
│   ├── InvalidCharacterError - character outside the language
│   ├── UnterminatedCommentError - '/*' without a closing '*/'
│   └── MalformedNumberError - e.g. a second decimal point
├── CSyntaxError - the parser found a grammar violation
│   ├── UnexpectedTokenError - a token that cannot start the construct
│   ├── MissingTokenError - a required token is absent
│   ├── InvalidAssignmentTargetError - '=' after a non-identifier
│   └── NestingTooDeepError - nesting beyond the configured limit
└── CSemanticError - reserved for future declaration/type checks

CompilationFailed wraps the ordered list of errors a stage collected,
together with whatever partial result was produced.

Error Message Format
--------------------
    prog.c:3:9: error: expected expression, got PUNCTUATION ';'
        int x = ;
                ^
    hint: an initializer needs a value after '='
"""

from enum import Enum
from typing import List, Optional

from ctree.errors import CTreeError, SourceLocation


# =============================================================================
# Error Kinds
# =============================================================================

class ErrorKind(Enum):
    """Stage that produced an error. The value is the boundary spelling."""

    LEXICAL = "Lexical"
    SYNTAX = "Syntax"
    SEMANTIC = "Semantic"

    def __str__(self) -> str:
        return self.value


# =============================================================================
# Base Compilation Error
# =============================================================================

class CompilationError(CTreeError):
    """
    A single structured error from one stage of the pipeline.

    Attributes:
        kind: The ErrorKind of the failing stage
        message: The error description (no location baked in)
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The source text of the offending line
    """

    kind: ErrorKind = ErrorKind.SYNTAX

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int:
        return self.location.column

    @property
    def filename(self) -> str:
        return self.location.filename

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example:

            prog.c:1:4: error: multiple decimal points in number
                1.2.3;
                   ^
        """
        parts = [f"{self.location}: error: {self.message}"]

        # Source context with caret pointer
        if self.source_line is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def to_dict(self) -> dict:
        """Return the boundary form {kind, message, line, column}."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "line": self.line,
            "column": self.column,
        }


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(CompilationError):
    """
    The lexer met input it cannot turn into a token.

    Lexical errors are never recovered: tokenizing stops at the first one.
    """

    kind = ErrorKind.LEXICAL


class InvalidCharacterError(LexicalError):
    """A character that is not part of the language."""

    def __init__(
        self,
        char: str,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"unexpected character '{char}'",
            location,
            source_line=source_line,
        )


class UnterminatedCommentError(LexicalError):
    """
    A block comment reached end of input without its closing marker.

    The location is the end-of-input position, where the '*/' was due.
    """

    def __init__(
        self,
        location: SourceLocation,
        opened_at: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.opened_at = opened_at
        hint = "add '*/' to terminate the comment"
        if opened_at is not None:
            hint = f"comment opened at {opened_at.line}:{opened_at.column}; {hint}"
        super().__init__(
            "unterminated block comment",
            location,
            hint=hint,
            source_line=source_line,
        )


class MalformedNumberError(LexicalError):
    """A numeric literal that does not follow digits[.digits]."""

    def __init__(
        self,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "multiple decimal points in number",
            location,
            hint="a number may contain at most one '.'",
            source_line=source_line,
        )


# =============================================================================
# Syntax Errors
# =============================================================================

class CSyntaxError(CompilationError):
    """
    Grammar violation found by the parser.

    Examples:
        - Missing semicolon
        - Expression expected but a ';' was found
        - Unexpected end of input inside a block
    """

    kind = ErrorKind.SYNTAX


class UnexpectedTokenError(CSyntaxError):
    """
    A token that cannot appear where it was found.

    Attributes:
        expected: Description of what the grammar wanted
        found: Description of the token actually present
    """

    def __init__(
        self,
        expected: str,
        found: str,
        location: SourceLocation,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        super().__init__(
            f"expected {expected}, got {found}",
            location,
            hint=hint,
            source_line=source_line,
        )


class MissingTokenError(UnexpectedTokenError):
    """A required token such as ';' or ')' is absent."""

    def __init__(
        self,
        expected: str,
        context: str,
        found: str,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ):
        self.context = context
        super().__init__(
            f"{expected} {context}" if context else expected,
            found,
            location,
            source_line=source_line,
        )


class InvalidAssignmentTargetError(CSyntaxError):
    """
    Left side of '=' is not a plain identifier.

    Examples:
        - 42 = x
        - (a + b) = x
    """

    def __init__(
        self,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "invalid assignment target",
            location,
            hint="only a variable name may appear on the left of '='",
            source_line=source_line,
        )


class NestingTooDeepError(CSyntaxError):
    """Statements or expressions nested beyond the parser's depth limit."""

    def __init__(
        self,
        limit: int,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ):
        self.limit = limit
        super().__init__(
            f"nesting deeper than {limit} levels",
            location,
            hint="raise CompilerOptions.max_nesting_depth or flatten the code",
            source_line=source_line,
        )


# =============================================================================
# Semantic Errors
# =============================================================================

class CSemanticError(CompilationError):
    """
    Semantic error in otherwise well-formed source.

    No stage raises this yet; the kind exists so that declaration and type
    checks can be added without changing the error taxonomy.
    """

    kind = ErrorKind.SEMANTIC


# =============================================================================
# Aggregate Failure
# =============================================================================

class CompilationFailed(CTreeError):
    """
    One or more errors were collected while compiling.

    Attributes:
        errors: The collected errors, in source order of discovery
        partial: The partial CompileResult, when the pipeline produced one
    """

    def __init__(self, errors: List[CompilationError], partial=None):
        if not errors:
            raise ValueError("CompilationFailed requires at least one error")
        self.errors = list(errors)
        self.partial = partial
        super().__init__(self._format_message())

    @property
    def primary(self) -> CompilationError:
        """The first error found."""
        return self.errors[0]

    @property
    def kind(self) -> ErrorKind:
        return self.primary.kind

    @property
    def message(self) -> str:
        return self.primary.message

    @property
    def line(self) -> int:
        return self.primary.line

    @property
    def column(self) -> int:
        return self.primary.column

    def _format_message(self) -> str:
        lines = []
        for error in self.errors:
            lines.append(str(error))
            lines.append("")  # Blank line between errors

        word = "error" if len(self.errors) == 1 else "errors"
        lines.append(f"{len(self.errors)} {word}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Boundary form of the primary error."""
        return self.primary.to_dict()


# =============================================================================
# Error Collection (for multi-error reporting)
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors for batch reporting.

    The parser uses this to keep going after a syntax error and report
    every problem in one run.

    Example:
        collector = ErrorCollector(max_errors=100)

        while more_declarations():
            try:
                parse_declaration()
            except CSyntaxError as e:
                collector.add(e)
                if collector.should_stop():
                    break

        errors = list(collector.errors)
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before stopping
        """
        self.errors: List[CompilationError] = []
        self.max_errors = max_errors

    def add(self, error: CompilationError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

    def should_stop(self) -> bool:
        """Return True if max_errors has been reached."""
        return len(self.errors) >= self.max_errors

    def error_count(self) -> int:
        return len(self.errors)

    def clear(self) -> None:
        self.errors.clear()
