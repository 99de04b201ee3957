"""
Mini-C Compiler Main Module
===========================

This module provides the main compiler interface. It orchestrates the
complete compilation process:

    Source → Lex → Parse → Generate → Assembly

Usage
-----
Command line:
    $ chemcc prog.c prog

Programmatic:
    >>> from chemist.minic import compile_source
    >>> asm = compile_source('int main() { return 0; }')

Error Handling
--------------
Compilation stops at the first error. Errors propagate as MiniCError
exceptions; nothing is written to the output file unless generation
succeeded.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from chemist.minic.lexer import CLexer, CToken
from chemist.minic.parser import CParser
from chemist.minic.codegen import CodeGenerator
from chemist.minic.ast import ProgramNode
from chemist.minic.errors import MiniCError

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        check_entry: Fail with UndefinedEntryError when the program has no
                     'main' function. When False the entry trampoline still
                     calls 'main' and the assembler reports the missing label.
    """
    check_entry: bool = True


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        assembly: Generated assembly text
        tokens: Tokens produced by the lexer
        ast: Abstract syntax tree
    """
    filename: str = ""
    assembly: str = ""
    tokens: list[CToken] = field(default_factory=list)
    ast: Optional[ProgramNode] = None

    @property
    def token_count(self) -> int:
        return len(self.tokens)


class MiniCCompiler:
    """
    Compiler from mini-C source to FASM x86-64 assembly.

    Example:
        compiler = MiniCCompiler()
        result = compiler.compile_source(source, "prog.c")
        print(result.assembly)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str | bytes, filename: str = "<input>") -> CompilerResult:
        """
        Compile source code to assembly.

        Args:
            source: Source text or raw bytes
            filename: Source filename for error messages

        Returns:
            CompilerResult containing the assembly and intermediate stages

        Raises:
            MiniCError: On the first lexical, syntactic or semantic error
        """
        result = CompilerResult(filename=filename)

        # Stage 1: Lexical analysis
        lexer = CLexer(source, filename)
        result.tokens = list(lexer.tokenize())
        logger.debug("%s: %d tokens", filename, result.token_count)

        # Stage 2: Parsing
        source_lines = lexer.source.split("\n")
        parser = CParser(result.tokens, filename, source_lines)
        result.ast = parser.parse()
        logger.debug("%s: %d functions", filename, len(result.ast.functions))

        # Stage 3: Code generation
        generator = CodeGenerator(require_entry=self.options.check_entry)
        try:
            result.assembly = generator.generate(result.ast)
        except MiniCError as e:
            # Semantic errors are found after parsing; attach the offending line
            if e.source_line is None and e.location is not None:
                if 0 < e.location.line <= len(source_lines):
                    e.source_line = source_lines[e.location.line - 1]
            raise

        return result

    def compile_file(self, source_path: str | Path, output_path: Optional[str | Path] = None) -> CompilerResult:
        """
        Compile a source file, optionally writing the assembly to `output_path`.

        The input is read once in full before scanning; the output is
        written once, after generation has succeeded.

        Raises:
            MiniCError: If compilation fails
            FileNotFoundError: If the source file does not exist
        """
        path = Path(source_path)
        source = path.read_bytes()

        result = self.compile_source(source, str(source_path))

        if output_path is not None:
            Path(output_path).write_text(result.assembly, encoding="utf-8")
            logger.debug("wrote %d bytes to %s", len(result.assembly), output_path)

        return result


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_source(source: str | bytes, filename: str = "<input>") -> str:
    """
    Compile mini-C source code to assembly text.

    Raises:
        MiniCError: If compilation fails

    Example:
        >>> asm = compile_source('int main() { return 7; }')
    """
    return MiniCCompiler().compile_source(source, filename).assembly


def compile_file(
    source_path: str | Path,
    output_path: str | Path,
    options: Optional[CompilerOptions] = None,
) -> str:
    """
    Compile the file at `source_path` and write the assembly to `output_path`.

    Returns:
        The generated assembly text

    Raises:
        MiniCError: If compilation fails
        FileNotFoundError: If the source file does not exist
    """
    compiler = MiniCCompiler(options)
    return compiler.compile_file(source_path, output_path).assembly


# The two-path entry point of the compiler core
compile = compile_file
