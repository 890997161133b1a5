"""
ctree Error Hierarchy
=====================

This module defines the root of the exception hierarchy for the whole
ctree package. All exceptions inherit from CTreeError, allowing callers
to catch every toolkit error with a single except clause if desired.

Exception Hierarchy
-------------------
CTreeError (base)
├── CompilationError - a single positioned error from one pipeline stage
│   ├── LexicalError - unrecognised characters, bad literals, comments
│   ├── CSyntaxError - grammar violations found by the parser
│   └── CSemanticError - reserved for declaration/type checks
└── CompilationFailed - aggregate of every error a stage collected

The stage-specific classes live in ctree.minic.errors.

Design Philosophy
-----------------
Each error captures its source location (line, column) as real fields at
the point of failure. Nothing downstream ever recovers a location by
picking apart a message string.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class CTreeError(Exception):
    """
    Base exception for all ctree errors.

    All exceptions in the package inherit from this class:

        try:
            compile_source(text)
        except CTreeError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
