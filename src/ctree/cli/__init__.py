"""
ctree Command-Line Interface
============================

This package provides the command-line tool for ctree:

- **mcc**: Mini-C front end (tokens, parse tree, complexity report)

The tool is a Click-based CLI application with help text and uniform
error reporting.
"""

__all__ = ["mcc"]
