"""
x86-64 Code Generator for Mini-C
================================

This module generates FASM assembly for x86-64 Linux from the mini-C
AST. The output assembles directly into an ELF64 executable.

Code Generation Strategy
------------------------
Every value is computed into the accumulator (rax):

- literal       ->  mov rax, <n>
- variable      ->  mov rax, [rbp - <offset>]
- call          ->  call <name>        (callee leaves its result in rax)

Stores go from rax into the variable's slot:  mov [rbp - <offset>], rax

Register Usage
--------------
| Register | Usage                                    |
|----------|------------------------------------------|
| rax      | Values, function return values           |
| rbp      | Frame base, origin of local slots        |
| rsp      | Stack pointer                            |
| rdi      | Exit status passed to the exit syscall   |

Stack Frame Layout
------------------
    +----------------+
    | Return address |  (pushed by call)
    +----------------+
    | Saved rbp      |
    +----------------+ <- rbp
    | local 1        |  [rbp - 8]
    | local 2        |  [rbp - 16]
    | ...            |
    +----------------+ <- rsp  (rbp - 8*k)

Function Body Passes
--------------------
Each body is walked twice. The allocation pass declares every local in
order and emits the code for its initializer. The emission pass then
emits returns, bare calls and assignments. Declarations therefore
reserve their slot for the whole function, whatever their position.

Generated Assembly Format
-------------------------
    format ELF64 executable 3
    entry start
    segment readable executable
    main:
        push rbp
        mov rbp, rsp
        mov rax, 42
        pop rbp
        ret

    start:
        call main
        mov rdi, rax
        mov rax, 60
        syscall
    segment readable writable

Usage
-----
>>> from chemist.minic.parser import parse_source
>>> from chemist.minic.codegen import CodeGenerator
>>> asm = CodeGenerator().generate(parse_source('int main() { return 42; }'))
"""

import logging

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
)
from chemist.minic.errors import CCodeGenError, UnsupportedNodeError, UndefinedEntryError
from chemist.minic.scope import ScopeTable, SLOT_SIZE

logger = logging.getLogger(__name__)


# Function called by the entry trampoline
ENTRY_FUNCTION = "main"

# Label of the process entry point
ENTRY_LABEL = "start"

# Linux x86-64 exit system call number
SYS_EXIT = 60


class CodeGenerator:
    """
    Generates FASM x86-64 assembly from a mini-C AST.

    The generator owns the scope table and resets it for each function.
    Any tree it cannot translate raises a CCodeGenError subclass and no
    assembly is returned.

    Attributes:
        require_entry: Raise UndefinedEntryError when 'main' is missing
    """

    INDENT = "    "

    def __init__(self, require_entry: bool = True):
        self.require_entry = require_entry

        # Assembly output lines
        self._output: list[str] = []

        self._scope = ScopeTable()
        self._frame_size = 0

    def generate(self, program: ProgramNode) -> str:
        """
        Generate assembly code from the AST.

        Args:
            program: The root AST node

        Returns:
            Complete FASM source text

        Raises:
            CCodeGenError: For unsupported trees or a missing entry function
            CSemanticError: For undeclared or redeclared variables
        """
        self._output = []

        if self.require_entry and program.find_function(ENTRY_FUNCTION) is None:
            raise UndefinedEntryError(ENTRY_FUNCTION)

        self._emit_header()

        for func in program.functions:
            self._generate_function(func)

        self._emit_entry_trampoline()
        self._emit_footer()

        return "\n".join(self._output) + "\n"

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        self._output.append(line)

    def _emit_label(self, label: str) -> None:
        self._emit(f"{label}:")

    def _emit_instruction(self, mnemonic: str, operands: str = "") -> None:
        if operands:
            self._emit(f"{self.INDENT}{mnemonic} {operands}")
        else:
            self._emit(f"{self.INDENT}{mnemonic}")

    @staticmethod
    def _slot(offset: int) -> str:
        """Memory operand for the local at `offset` below the frame base."""
        return f"[rbp - {offset}]"

    # =========================================================================
    # Header and Footer Generation
    # =========================================================================

    def _emit_header(self) -> None:
        self._emit("format ELF64 executable 3")
        self._emit(f"entry {ENTRY_LABEL}")
        self._emit("segment readable executable")

    def _emit_entry_trampoline(self) -> None:
        """Call main and pass its result to the exit system call."""
        self._emit_label(ENTRY_LABEL)
        self._emit_instruction("call", ENTRY_FUNCTION)
        self._emit_instruction("mov", "rdi, rax")
        self._emit_instruction("mov", f"rax, {SYS_EXIT}")
        self._emit_instruction("syscall")

    def _emit_footer(self) -> None:
        self._emit("segment readable writable")

    # =========================================================================
    # Function Code Generation
    # =========================================================================

    def _generate_function(self, func: FunctionNode) -> None:
        """Generate code for a function definition."""
        if not func.name:
            raise CCodeGenError("function name is missing", location=func.location)

        self._scope.reset()

        # Frame size is known before any body code is emitted
        self._frame_size = len(func.declarations) * SLOT_SIZE
        logger.debug("generating %s (frame %d bytes)", func.name, self._frame_size)

        self._emit_label(func.name)
        self._emit_instruction("push", "rbp")
        self._emit_instruction("mov", "rbp, rsp")
        if self._frame_size > 0:
            self._emit_instruction("sub", f"rsp, {self._frame_size}")

        # Allocation pass
        for stmt in func.body:
            if isinstance(stmt, VariableDeclaration):
                self._generate_declaration(stmt)
        if len(self._scope):
            logger.debug("%s locals: %s", func.name, ", ".join(self._scope.names()))

        # Emission pass
        for stmt in func.body:
            self._generate_statement(stmt)

    def _generate_declaration(self, decl: VariableDeclaration) -> None:
        """Reserve the variable's slot and store its initializer, if any."""
        offset = self._scope.declare(decl.name, decl.location)
        if decl.initializer is not None:
            self._load_value(decl.initializer, "initializer")
            self._emit_instruction("mov", f"{self._slot(offset)}, rax")

    # =========================================================================
    # Statement Code Generation
    # =========================================================================

    def _generate_statement(self, stmt: ASTNode) -> None:
        if isinstance(stmt, ReturnStatement):
            self._generate_return(stmt)
        elif isinstance(stmt, CallExpression):
            self._generate_call(stmt)
        elif isinstance(stmt, AssignmentStatement):
            self._generate_assignment(stmt)
        elif isinstance(stmt, VariableDeclaration):
            pass  # handled by the allocation pass
        else:
            raise UnsupportedNodeError(
                type(stmt).__name__,
                "statement",
                location=getattr(stmt, "location", None),
            )

    def _generate_return(self, stmt: ReturnStatement) -> None:
        if stmt.value is None:
            raise CCodeGenError("return statement has no expression", location=stmt.location)

        self._load_value(stmt.value, "return value")

        # Function epilogue
        if self._frame_size > 0:
            self._emit_instruction("mov", "rsp, rbp")
        self._emit_instruction("pop", "rbp")
        self._emit_instruction("ret")
        self._emit()

    def _generate_assignment(self, stmt: AssignmentStatement) -> None:
        offset = self._scope.resolve(stmt.name, stmt.location)
        if stmt.value is None:
            raise CCodeGenError(
                f"assignment to '{stmt.name}' has no value",
                location=stmt.location,
            )
        self._load_value(stmt.value, "assigned value")
        self._emit_instruction("mov", f"{self._slot(offset)}, rax")

    def _generate_call(self, call: CallExpression) -> None:
        if not call.function_name:
            raise CCodeGenError("function call name is missing", location=call.location)
        self._emit_instruction("call", call.function_name)

    # =========================================================================
    # Value Code Generation
    # =========================================================================

    def _load_value(self, value: ASTNode, context: str) -> None:
        """Emit code leaving `value` in rax."""
        if isinstance(value, NumberLiteral):
            self._emit_instruction("mov", f"rax, {value.value}")
        elif isinstance(value, IdentifierExpression):
            offset = self._scope.resolve(value.name, value.location)
            self._emit_instruction("mov", f"rax, {self._slot(offset)}")
        elif isinstance(value, CallExpression):
            self._generate_call(value)
        else:
            raise UnsupportedNodeError(
                type(value).__name__,
                context,
                location=getattr(value, "location", None),
            )
