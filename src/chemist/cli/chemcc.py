"""
chemcc - Mini-C Compiler Command-Line Interface
===============================================

Compiles a mini-C source file to FASM assembly and, by default, runs
the fasm assembler on the result to produce an x86-64 Linux executable.

Usage Examples
--------------
Compile and assemble (writes prog.asm, then the executable prog):
    $ chemcc prog.c prog

Assembly only:
    $ chemcc -S prog.c prog

Use a specific assembler binary:
    $ chemcc --fasm /opt/fasm/fasm prog.c prog

Inspect the front end:
    $ chemcc --tokens prog.c prog
    $ chemcc --ast prog.c prog

On success nothing is printed (unless -v is given). On failure a single
diagnostic line goes to stderr and the exit status is non-zero.
"""

import logging
import subprocess
from pathlib import Path

import click

from chemist import __version__
from chemist.errors import AssemblerInvocationError
from chemist.minic import MiniCCompiler, CompilerOptions
from chemist.minic.ast import ASTPrinter
from chemist.minic.lexer import CLexer
from chemist.minic.parser import CParser
from chemist.cli.errors import handle_cli_exception

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def run_assembler(asm_path: Path, output_path: Path, fasm: str = "fasm") -> None:
    """
    Assemble `asm_path` into the executable `output_path` with fasm.

    Raises:
        AssemblerInvocationError: If fasm cannot be run or fails
    """
    cmd = [fasm, str(asm_path), str(output_path)]
    logger.debug("running %s", " ".join(cmd))

    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        raise AssemblerInvocationError(
            f"assembler '{fasm}' not found - is fasm installed?",
            command=cmd,
        )

    if result.returncode != 0:
        detail = result.stderr.strip() or result.stdout.strip()
        message = f"assembler failed with exit status {result.returncode}"
        if detail:
            message += f": {detail.splitlines()[-1]}"
        raise AssemblerInvocationError(
            message,
            command=cmd,
            return_code=result.returncode,
            stderr=result.stderr,
        )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.argument(
    "output",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-S", "--asm-only",
    is_flag=True,
    help="Write OUTPUT.asm and stop; do not run the assembler",
)
@click.option(
    "--fasm",
    default="fasm",
    show_default=True,
    help="Assembler executable",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print tokens and exit (for debugging)",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "--no-entry-check",
    is_flag=True,
    help="Do not require a 'main' function; leave it to the assembler",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="chemcc")
def main(
    input_file: Path,
    output: Path,
    asm_only: bool,
    fasm: str,
    tokens: bool,
    ast: bool,
    no_entry_check: bool,
    verbose: bool,
) -> None:
    """
    Compile mini-C source code for x86-64 Linux.

    INPUT_FILE is the source file to compile. OUTPUT is the executable to
    produce; the assembly is written to OUTPUT.asm.

    \b
    Examples:
        chemcc prog.c prog           # prog.asm + executable prog
        chemcc -S prog.c prog        # prog.asm only
    """
    setup_logging(verbose)

    asm_path = Path(f"{output}.asm")
    options = CompilerOptions(check_entry=not no_entry_check)

    try:
        if tokens or ast:
            # Front end only, so programs that fail generation can be inspected
            lexer = CLexer(input_file.read_bytes(), str(input_file))
            token_list = list(lexer.tokenize())
            if tokens:
                for token in token_list:
                    click.echo(repr(token))
            if ast:
                parser = CParser(token_list, str(input_file), lexer.source.split("\n"))
                click.echo(ASTPrinter().print(parser.parse()))
            return

        compiler = MiniCCompiler(options)
        result = compiler.compile_file(input_file, asm_path)

        if verbose:
            click.echo(f"Compiled {result.filename}")
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(f"Parsed: {len(result.ast.functions)} functions")
            click.echo(f"Wrote {len(result.assembly)} bytes to {asm_path}")

        if not asm_only:
            run_assembler(asm_path, output, fasm)
            if verbose:
                click.echo(f"Assembled {asm_path} -> {output}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
