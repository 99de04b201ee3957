"""
chemist - Mini-C to x86-64 Compiler
===================================

A single-pass compiler translating mini-C, a minimal C-like language,
into FASM assembly for x86-64 Linux.

Main Components
---------------
- **minic**: the compiler (lexer, parser, scope table, code generator)
- **cli**: the ``chemcc`` command-line tool

Quick Start
-----------
    >>> from chemist import compile_source
    >>> asm = compile_source("int main() { return 42; }")

Or from the command line:
    $ chemcc prog.c prog
    $ ./prog; echo $?
    42
"""

__version__ = "1.0.0"

from chemist.errors import ChemistError, SourceLocation, AssemblerInvocationError
from chemist.minic import (
    MiniCCompiler,
    CompilerOptions,
    compile_source,
    compile_file,
    MiniCError,
)

__all__ = [
    "__version__",
    "ChemistError",
    "SourceLocation",
    "AssemblerInvocationError",
    "MiniCCompiler",
    "CompilerOptions",
    "compile_source",
    "compile_file",
    "MiniCError",
]
