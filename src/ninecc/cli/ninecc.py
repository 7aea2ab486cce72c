"""
ninecc - Expression Compiler Command-Line Interface
===================================================

This module implements the command-line interface for the expression
compiler. It takes exactly one expression argument and prints an x86-64
assembly program that returns the value of that expression.

Usage Examples
--------------
Basic compilation:
    $ ninecc "1+2*3" > tmp.s

With output file:
    $ ninecc "(1+2)*3" -o tmp.s

Leading minus:
    $ ninecc "-3+5"
    $ ninecc -- "-3+5"

Debugging:
    $ ninecc --tokens "1 + 2"
    $ ninecc --ast "1 + 2"
    $ ninecc -v --run "6/3"
"""

import logging
from pathlib import Path
from typing import Optional

import click

from ninecc import __version__
from ninecc.ast import ASTPrinter
from ninecc.cli.errors import ExitCode, handle_cli_exception
from ninecc.compiler import CompilerOptions, ExpressionCompiler
from ninecc.errors import UsageError
from ninecc.lexer import format_tokens
from ninecc.vm import StackMachine

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

class NineccCommand(click.Command):
    """Click command whose own usage errors exit with FAILURE instead of 2."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = ExitCode.FAILURE
            raise


@click.command(cls=NineccCommand, context_settings={"ignore_unknown_options": True})
@click.argument("expression", nargs=-1, type=click.UNPROCESSED)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write assembly to this file instead of stdout",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit (for debugging)",
)
@click.option(
    "--ast", "show_ast",
    is_flag=True,
    help="Print the AST and exit (for debugging)",
)
@click.option(
    "--run",
    is_flag=True,
    help="Evaluate the program before emitting it and print its result on stderr",
)
@click.option(
    "--allow-trailing",
    is_flag=True,
    help="Ignore tokens left over after a complete expression",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="ninecc")
def main(
    expression: tuple[str, ...],
    output: Optional[Path],
    tokens: bool,
    show_ast: bool,
    run: bool,
    allow_trailing: bool,
    verbose: bool,
) -> None:
    """
    Compile an arithmetic expression to x86-64 assembly.

    EXPRESSION is the whole expression as a single argument; quote it if
    it contains spaces or shell metacharacters.

    \b
    Examples:
        ninecc 42                  # Program returning 42
        ninecc "1+2*3"             # Returns 7
        ninecc "(1+2)*3" -o tmp.s  # Write to a file
        ninecc --ast "10-2-3"      # Show the parse tree
    """
    setup_logging(verbose)

    try:
        if len(expression) != 1:
            click.echo(click.get_current_context().get_usage(), err=True)
            raise UsageError(
                f"expected exactly one expression argument, got {len(expression)}"
            )

        source = expression[0]
        options = CompilerOptions(allow_trailing_tokens=allow_trailing)
        compiler = ExpressionCompiler(options)

        # Token dump mode
        if tokens:
            click.echo(format_tokens(compiler.tokenize(source)))
            return

        result = compiler.compile_source(source)

        # AST dump mode
        if show_ast:
            click.echo(ASTPrinter().print(result.ast))
            return

        # Evaluate first so a faulting program is never emitted
        if run:
            machine = StackMachine()
            value = machine.run(result.assembly)

        if output is None:
            click.echo(result.assembly, nl=False)
        else:
            output.write_text(result.assembly)
            logger.info("wrote %d bytes to %s", len(result.assembly), output)

        if run:
            click.echo(f"result: {value} (exit status {machine.exit_status})", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
