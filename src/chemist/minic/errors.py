"""
Mini-C Compiler Error Hierarchy
===============================

This module defines the exception hierarchy for the mini-C compiler.
All exceptions inherit from MiniCError, which itself inherits from
the base ChemistError for consistent error handling across the toolchain.

Every error is fatal: the compiler never recovers or accumulates errors,
the first one raised aborts the compilation.

Exception Hierarchy
-------------------
MiniCError (base for all compiler errors)
├── CSyntaxError - lexer and parser syntax errors
│   ├── InvalidCharacterError - unrecognized character reached the parser
│   ├── LiteralRangeError - integer literal does not fit an int
│   ├── UnexpectedTokenError - wrong token where a name/operand was required
│   └── MissingTokenError - expected token not found
├── CSemanticError - semantic errors found during generation
│   ├── UndeclaredIdentifierError - undefined variable
│   └── DuplicateDeclarationError - variable declared twice in a function
└── CCodeGenError - code generation errors
    ├── UnsupportedNodeError - tree shape the generator cannot handle
    └── UndefinedEntryError - no 'main' function to call from the entry point

Error Message Format
--------------------
str(error) is always a single line:

    prog.c:5:12: error: undeclared identifier 'cout' (hint: did you mean 'count'?)

format_detailed() adds the source context:

    prog.c:5:12: error: undeclared identifier 'cout'
        return cout;
               ^
    hint: did you mean 'count'?
"""

from typing import Optional, List

from chemist.errors import ChemistError, SourceLocation


# =============================================================================
# Base Compiler Exception
# =============================================================================

class MiniCError(ChemistError):
    """
    Base exception for all mini-C compiler errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the one-line diagnostic: location, message and hint."""
        if self.location:
            text = f"{self.location}: error: {self.message}"
        else:
            text = f"error: {self.message}"
        if self.hint:
            text += f" (hint: {self.hint})"
        return text

    def format_detailed(self) -> str:
        """
        Format the error with source context and a caret pointer.

            prog.c:2:5: error: expected ';'
                return 5
                        ^
            hint: ...
        """
        if self.location:
            parts = [f"{self.location}: error: {self.message}"]
        else:
            parts = [f"error: {self.message}"]

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Syntax Errors (Lexer and Parser)
# =============================================================================

class CSyntaxError(MiniCError):
    """
    Syntax error in source code.

    Raised by the parser when the token stream does not match the
    grammar. The lexer itself never raises: unrecognized characters
    become UNKNOWN tokens and are reported here once consumed.
    """
    pass


class InvalidCharacterError(CSyntaxError):
    """
    Unrecognized character in source code.

    Raised when the parser reaches an UNKNOWN token produced by the lexer.
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        if char and char.isascii() and char.isprintable():
            message = f"invalid character '{char}' (0x{ord(char):02X})"
        elif char:
            # Non-ASCII source bytes are reported raw, never decoded
            message = f"invalid byte 0x{ord(char):02X}"
        else:
            message = "invalid character"
        super().__init__(
            message,
            location=location,
            source_line=source_line,
        )


class LiteralRangeError(CSyntaxError):
    """
    Integer literal too large for the int type.

    Literals must fit a signed 32-bit int, so the generated immediate
    operands always assemble.
    """

    def __init__(
        self,
        literal: str,
        max_value: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.literal = literal
        self.max_value = max_value
        super().__init__(
            f"integer literal {literal} out of range",
            location=location,
            hint=f"maximum value is {max_value}",
            source_line=source_line,
        )


class UnexpectedTokenError(CSyntaxError):
    """
    Unexpected token during parsing.

    Raised when the parser encounters a token that doesn't match
    the expected grammar rule.
    """

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"unexpected token '{found}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MissingTokenError(CSyntaxError):
    """
    Required token is missing.

    Raised when a required token (like ';' or ')') is not found
    where expected.
    """

    def __init__(
        self,
        expected: str,
        found: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.found = found
        message = f"expected {expected}"
        if found:
            message += f", found '{found}'"
        super().__init__(
            message,
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Semantic Errors
# =============================================================================

class CSemanticError(MiniCError):
    """
    Semantic error in source code.

    Raised when the code is syntactically correct but violates the
    language rules, e.g. using or redeclaring a variable.
    """
    pass


class UndeclaredIdentifierError(CSemanticError):
    """
    Reference to an undeclared variable.

    The scope table suggests similarly-named variables when this error
    occurs, helping to catch typos.
    """

    def __init__(
        self,
        identifier: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_identifiers: Optional[List[str]] = None,
    ):
        self.identifier = identifier
        self.similar_identifiers = similar_identifiers or []

        hint = None
        if self.similar_identifiers:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_identifiers[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undeclared identifier '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class DuplicateDeclarationError(CSemanticError):
    """
    Variable declared more than once in the same function.
    """

    def __init__(
        self,
        identifier: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.identifier = identifier
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{identifier}' was first declared at {original_location}"

        super().__init__(
            f"redeclaration of '{identifier}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Code Generation Errors
# =============================================================================

class CCodeGenError(MiniCError):
    """
    Error during code generation.

    Raised when the code generator meets a tree it cannot translate.
    No partial assembly is ever returned once this is raised.
    """
    pass


class UnsupportedNodeError(CCodeGenError):
    """
    Tree node of a kind the generator does not support in this position.

    Example: a return operand that is neither a literal, a variable
    reference nor a call.
    """

    def __init__(
        self,
        node_kind: str,
        context: str,
        location: Optional[SourceLocation] = None,
    ):
        self.node_kind = node_kind
        self.context = context
        super().__init__(
            f"unsupported {context}: {node_kind}",
            location=location,
        )


class UndefinedEntryError(CCodeGenError):
    """
    The program defines no entry function.

    The entry trampoline always calls 'main'; without it the output
    would reference an undefined label.
    """

    def __init__(self, entry_name: str = "main"):
        self.entry_name = entry_name
        super().__init__(
            f"undefined entry function '{entry_name}'",
            hint=f"define 'int {entry_name}() {{ ... }}'",
        )
