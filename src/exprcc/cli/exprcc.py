"""
exprcc - Expression Compiler Command-Line Interface
===================================================

This module implements the command-line interface for the expression
compiler.

Usage Examples
--------------
Compile to stdout:
    $ exprcc "5+6*7"

Write the assembly to a file:
    $ exprcc "5*(9-6)" -o tmp.s

Inspect the pipeline:
    $ exprcc --mode token "1+2"
    $ exprcc --mode ast "1+2*3"
    $ exprcc --mode dot "1+2*3" | dot -Tpng -o tree.png

Build and run in one go (needs a C compiler on an x86-64 host):
    $ exprcc --run "(3+5)/2"
    4

Exit Codes
----------
0 - Success
1 - Compilation failed (lex/parse error)
2 - Invalid arguments
3 - Internal error
4 - Toolchain failure while building or running (--run)
"""

import logging
from pathlib import Path
from typing import Optional

import click

from exprcc import __version__
from exprcc.ast import ASTPrinter, DotPrinter
from exprcc.compiler import CompilerOptions, ExpressionCompiler
from exprcc.cli.errors import handle_cli_exception

logger = logging.getLogger(__name__)


MODE_TOKEN = "token"
MODE_AST = "ast"
MODE_DOT = "dot"
MODE_X86 = "x86"


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")


# =============================================================================
# CLI Definition
# =============================================================================

# ignore_unknown_options lets expressions such as "-5+3" through as arguments
@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("expression")
@click.option(
    "--mode",
    type=click.Choice([MODE_TOKEN, MODE_AST, MODE_DOT, MODE_X86], case_sensitive=False),
    default=MODE_X86,
    show_default=True,
    help="Stop after tokenizing (token), parsing (ast, dot) or emit assembly (x86)",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write output to a file instead of stdout",
)
@click.option(
    "--comments",
    is_flag=True,
    help="Annotate the assembly with expression-tree comments",
)
@click.option(
    "--entry",
    default="main",
    show_default=True,
    help="Entry symbol of the generated program",
)
@click.option(
    "--run",
    is_flag=True,
    help="Assemble, link and run the program, then print its exit status",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="exprcc")
def main(
    expression: str,
    mode: str,
    output: Optional[Path],
    comments: bool,
    entry: str,
    run: bool,
    verbose: bool,
) -> None:
    """
    Compile an arithmetic expression to x86-64 assembly.

    EXPRESSION is a single line using integers, + - * /, parentheses and
    one leading sign per operand. The assembled program exits with the
    value of the expression (modulo 256).

    \b
    Examples:
        exprcc "5+6*7" > tmp.s       # Then: cc -o tmp tmp.s && ./tmp
        exprcc "5-(-1+2)" -o tmp.s   # Write to a file
        exprcc --mode ast "1-2-3"    # Show the parsed tree
        exprcc --run "+5+(-2)"       # Build, run, print 3
    """
    setup_logging(verbose)
    mode = mode.lower()

    if run and mode != MODE_X86:
        handle_cli_exception(click.BadParameter("--run requires --mode x86"))

    options = CompilerOptions(entry_symbol=entry, output_comments=comments)
    compiler = ExpressionCompiler(options)

    try:
        if mode == MODE_TOKEN:
            tokens = compiler.tokenize(expression)
            text = "\n".join(repr(token) for token in tokens) + "\n"
        elif mode == MODE_AST:
            text = ASTPrinter().print(compiler.parse(expression)) + "\n"
        elif mode == MODE_DOT:
            text = DotPrinter().print(compiler.parse(expression)) + "\n"
        else:
            text = compiler.compile_source(expression).assembly

        if run:
            from exprcc.toolchain import build_and_run

            status = build_and_run(text)
            if output is not None:
                output.write_text(text, encoding="utf-8")
            click.echo(status)
            return

        if output is not None:
            output.write_text(text, encoding="utf-8")
            logger.debug(f"Wrote {len(text)} bytes to {output}")
        else:
            click.echo(text, nl=False)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
