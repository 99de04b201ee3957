"""
Mini-C Compiler
===============

This module implements a compiler for mini-C, a tiny C-like language,
targeting x86-64 Linux through the FASM assembler.

The language supports:

- int functions without parameters
- local int variables with optional initializers
- assignment of literals, variables and call results
- parameterless calls as statements or values
- return

Pipeline
--------
    Source → Lexer → Parser → AST → Code Generator (+ Scope Table) → Assembly

The generated assembly is assembled with ``fasm`` into an ELF64
executable whose exit status is the value returned by ``main``.

Usage
-----
>>> from chemist.minic import compile_source
>>> asm_output = compile_source('int main() { return 42; }')
"""

from chemist.minic.compiler import (
    MiniCCompiler,
    CompilerOptions,
    CompilerResult,
    compile_source,
    compile_file,
)
from chemist.minic.errors import (
    MiniCError,
    CSyntaxError,
    InvalidCharacterError,
    LiteralRangeError,
    UnexpectedTokenError,
    MissingTokenError,
    CSemanticError,
    UndeclaredIdentifierError,
    DuplicateDeclarationError,
    CCodeGenError,
    UnsupportedNodeError,
    UndefinedEntryError,
)
from chemist.minic.lexer import CLexer, CTokenType, CToken, tokenize
from chemist.minic.parser import CParser, parse_source
from chemist.minic.scope import ScopeTable, SLOT_SIZE
from chemist.minic.codegen import CodeGenerator
from chemist.minic.ast import (
    ASTNode,
    ProgramNode,
    FunctionNode,
    ReturnStatement,
    VariableDeclaration,
    AssignmentStatement,
    CallExpression,
    IdentifierExpression,
    NumberLiteral,
    ASTPrinter,
)

__all__ = [
    # Main API
    "MiniCCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_source",
    "compile_file",
    # Errors
    "MiniCError",
    "CSyntaxError",
    "InvalidCharacterError",
    "LiteralRangeError",
    "UnexpectedTokenError",
    "MissingTokenError",
    "CSemanticError",
    "UndeclaredIdentifierError",
    "DuplicateDeclarationError",
    "CCodeGenError",
    "UnsupportedNodeError",
    "UndefinedEntryError",
    # Lexer
    "CLexer",
    "CTokenType",
    "CToken",
    "tokenize",
    # Parser
    "CParser",
    "parse_source",
    # Scope table
    "ScopeTable",
    "SLOT_SIZE",
    # Code Generator
    "CodeGenerator",
    # AST Nodes
    "ASTNode",
    "ProgramNode",
    "FunctionNode",
    "ReturnStatement",
    "VariableDeclaration",
    "AssignmentStatement",
    "CallExpression",
    "IdentifierExpression",
    "NumberLiteral",
    "ASTPrinter",
]
