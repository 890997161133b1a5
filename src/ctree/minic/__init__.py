"""
Mini-C Front End
================

This package analyses source text written in Mini-C, a small C-like
teaching language, and produces three things: a token stream, a parse
tree, and a coarse time/space complexity estimate.

- A lexer (tokenizer) producing positioned tokens, comments included
- A recursive descent parser producing a PROGRAM-rooted AST, with
  panic-mode recovery that keeps every syntax error it recovers from
- A complexity analyzer that classifies loop nesting and counts
  variable declarations

Pipeline
--------
    Source → Lexer → Parser → AST → ComplexityAnalyzer → Report

Usage
-----
>>> from ctree.minic import compile_source
>>> result = compile_source("for (int i = 0; i < 5; i = i + 1) { }")
>>> str(result.complexity.time), str(result.complexity.space)
('O(n)', 'O(n)')

The language has int/char/float/double/void declarations, functions with
typed parameters, if/else, while, for, return, blocks, assignment and the
arithmetic, comparison and equality operators. There is no type checking,
no symbol table and no code generation.
"""

__version__ = "1.0.0"

from ctree.minic.compiler import Compiler, CompilerOptions, CompileResult, compile_source
from ctree.minic.errors import (
    CompilationError,
    CompilationFailed,
    CSemanticError,
    CSyntaxError,
    ErrorKind,
    LexicalError,
)
from ctree.minic.lexer import Lexer, Token, TokenKind, tokenize
from ctree.minic.parser import Parser, parse, parse_source
from ctree.minic.ast import ASTNode, ASTPrinter, NodeKind, node_at, walk
from ctree.minic.complexity import (
    ComplexityAnalyzer,
    ComplexityClass,
    ComplexityReport,
    analyze,
)

__all__ = [
    # Version
    "__version__",
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompileResult",
    "compile_source",
    # Errors
    "CompilationError",
    "CompilationFailed",
    "CSemanticError",
    "CSyntaxError",
    "ErrorKind",
    "LexicalError",
    # Lexer
    "Lexer",
    "Token",
    "TokenKind",
    "tokenize",
    # Parser
    "Parser",
    "parse",
    "parse_source",
    # AST
    "ASTNode",
    "ASTPrinter",
    "NodeKind",
    "node_at",
    "walk",
    # Complexity
    "ComplexityAnalyzer",
    "ComplexityClass",
    "ComplexityReport",
    "analyze",
]
