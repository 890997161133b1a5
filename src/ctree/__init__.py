"""
ctree - Parse Tree and Complexity Toolkit for Mini-C
====================================================

This package turns programs written in Mini-C, a small C-like teaching
language, into data a visualiser can draw: the token stream, the parse
tree, and a heuristic estimate of time and space complexity.

Main Components
---------------
- **minic**: lexer, parser, AST and complexity analyzer
    ``compile_source(text)`` runs the whole pipeline

- **cli**: command-line front end (mcc)
    Prints tokens, the tree, the complexity report, or JSON

Quick Start
-----------
    >>> from ctree.minic import compile_source
    >>> result = compile_source("int x = 10;")
    >>> [t.text for t in result.tokens]
    ['int', 'x', '=', '10', ';']

Or from the shell:
    $ mcc prog.c --tokens --ast --complexity
    $ mcc prog.c --json
"""

__version__ = "1.0.0"
__author__ = "ctree contributors"

from ctree.errors import CTreeError, SourceLocation

__all__ = [
    "__version__",
    "CTreeError",
    "SourceLocation",
]
