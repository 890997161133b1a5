"""
mcc - Mini-C Front End Command-Line Interface
=============================================

This module implements the command-line interface for the Mini-C
pipeline. It reads a source file (or standard input), runs the lexer,
parser and complexity analyzer, and prints what was asked for.

Usage Examples
--------------
Everything (tokens, tree, complexity):
    $ mcc prog.c

Only the parse tree:
    $ mcc prog.c --ast

Machine-readable output for a renderer:
    $ mcc prog.c --json

Keep the partial result when there are syntax errors:
    $ mcc prog.c --keep-going

From standard input:
    $ echo "int x = 10;" | mcc - --tokens
"""

import json
import logging
import sys
from pathlib import Path

import click

from ctree import __version__
from ctree.cli.errors import ExitCode, handle_cli_exception
from ctree.minic import Compiler, CompilerOptions, CompileResult
from ctree.minic.ast import ASTPrinter
from ctree.minic.errors import CompilationError, CompilationFailed

logger = logging.getLogger(__name__)


# =============================================================================
# Output Formatting
# =============================================================================

def format_tokens(result: CompileResult) -> str:
    """Format the token sequence as a table: kind, text, line, column."""
    lines = [f"{'KIND':<12} {'TEXT':<24} {'LINE':>5} {'COL':>5}"]
    for token in result.tokens:
        text = token.text.replace("\n", "\\n")
        if len(text) > 24:
            text = text[:21] + "..."
        lines.append(f"{token.kind.value:<12} {text:<24} {token.line:>5} {token.column:>5}")
    return "\n".join(lines)


def format_complexity(result: CompileResult) -> str:
    """Format the complexity report."""
    report = result.complexity
    lines = [
        f"Time complexity:  {report.time}",
        f"Space complexity: {report.space}",
    ]
    for detail in report.details:
        lines.append(f"  - {detail}")
    return "\n".join(lines)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option("--tokens", "show_tokens", is_flag=True, help="Print the token table")
@click.option("--ast", "show_ast", is_flag=True, help="Print the parse tree")
@click.option("--complexity", "show_complexity", is_flag=True,
              help="Print the complexity report")
@click.option("--json", "as_json", is_flag=True,
              help="Print the whole result (or the errors) as JSON")
@click.option("-k", "--keep-going", is_flag=True,
              help="Print partial results when there are syntax errors")
@click.option("--max-errors", type=click.IntRange(min=1), default=100, show_default=True,
              help="Stop after this many syntax errors")
@click.option("--no-comments", is_flag=True, help="Leave comments out of the token table")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.version_option(version=__version__, prog_name="mcc")
def main(
    input_file: Path,
    show_tokens: bool,
    show_ast: bool,
    show_complexity: bool,
    as_json: bool,
    keep_going: bool,
    max_errors: int,
    no_comments: bool,
    verbose: bool,
) -> None:
    """
    Analyse a Mini-C program.

    INPUT_FILE is the source file to read, or - for standard input.

    Without an output selector all three sections are printed.

    \b
    Examples:
        mcc prog.c                   # tokens, tree and complexity
        mcc prog.c --ast             # parse tree only
        mcc prog.c --json            # everything as JSON
        mcc prog.c -k                # show partial tree despite errors
    """
    setup_logging(verbose)

    if not (show_tokens or show_ast or show_complexity):
        show_tokens = show_ast = show_complexity = True

    try:
        if str(input_file) == "-":
            source = click.get_text_stream("stdin").read()
            filename = "<stdin>"
        else:
            source = input_file.read_text(encoding="utf-8")
            filename = str(input_file)

        logger.debug(f"Read {len(source)} characters from {filename}")

        options = CompilerOptions(
            filename=filename,
            keep_going=keep_going,
            max_errors=max_errors,
            include_comments=not no_comments,
        )
        result = Compiler(options).compile_source(source)

    except (CompilationError, CompilationFailed) as e:
        if as_json:
            errors = e.errors if isinstance(e, CompilationFailed) else [e]
            click.echo(json.dumps(
                {"success": False, "errors": [err.to_dict() for err in errors]},
                indent=2,
                ensure_ascii=False,
            ))
            sys.exit(ExitCode.BUILD_ERROR)
        handle_cli_exception(e, verbose)
    except Exception as e:
        handle_cli_exception(e, verbose)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        sections = []
        if show_tokens:
            sections.append(format_tokens(result))
        if show_ast:
            sections.append(ASTPrinter().print(result.ast))
        if show_complexity:
            sections.append(format_complexity(result))
        click.echo("\n\n".join(sections))

    if not result.success:
        # JSON output already carries the errors
        if not as_json:
            for error in result.errors:
                click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)


if __name__ == "__main__":
    main()
