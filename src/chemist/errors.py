"""
Chemist Error Hierarchy
=======================

This module defines the root of the exception hierarchy for the whole
toolchain. All exceptions inherit from ChemistError, allowing callers to
catch every toolchain-related error with a single except clause.

Exception Hierarchy
-------------------
ChemistError (base)
├── MiniCError (compiler errors, see chemist.minic.errors)
└── AssemblerInvocationError - external assembler missing or failed

Error messages follow this format:
    filename:line:column: error: description
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ChemistError(Exception):
    """
    Base exception for all chemist errors.

        try:
            compile_file("prog.c", "prog.asm")
        except ChemistError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# External Tool Errors
# =============================================================================

class AssemblerInvocationError(ChemistError):
    """
    The external assembler could not be run or reported a failure.

    Attributes:
        command: The command line that was executed
        return_code: Exit status of the assembler (None if it never ran)
        stderr: Diagnostic output captured from the assembler
    """

    def __init__(
        self,
        message: str,
        command: Optional[list[str]] = None,
        return_code: Optional[int] = None,
        stderr: str = "",
    ):
        self.command = command or []
        self.return_code = return_code
        self.stderr = stderr
        super().__init__(message)
