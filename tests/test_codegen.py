# =============================================================================
# test_codegen.py - Code Generator Unit Tests
# =============================================================================
# Tests for the x86-64 FASM code generator.
#
# Test coverage includes:
#   - Complete listings (header, functions, entry trampoline, footer)
#   - Stack frame setup and the epilogue with and without locals
#   - Slot allocation for declarations, assignments and variable loads
#   - Bare calls and calls used as values
#   - Semantic errors (undeclared, redeclared) and the entry check
#   - Trees the generator refuses to translate
# =============================================================================

import logging

import pytest
from chemist.errors import SourceLocation
from chemist.minic.parser import parse_source
from chemist.minic.codegen import CodeGenerator
from chemist.minic.ast import (
    ProgramNode,
    FunctionNode,
    ReturnStatement,
    AssignmentStatement,
    VariableDeclaration,
    CallExpression,
    NumberLiteral,
)
from chemist.minic.errors import (
    CCodeGenError,
    UnsupportedNodeError,
    UndefinedEntryError,
    UndeclaredIdentifierError,
    DuplicateDeclarationError,
)


HEADER = [
    "format ELF64 executable 3",
    "entry start",
    "segment readable executable",
]

TRAMPOLINE = [
    "start:",
    "    call main",
    "    mov rdi, rax",
    "    mov rax, 60",
    "    syscall",
    "segment readable writable",
]

LOC = SourceLocation("<test>", 1, 1)


# =============================================================================
# Helper Functions
# =============================================================================

def generate(source: str, require_entry: bool = True) -> str:
    """Parse `source` and return the generated assembly text."""
    return CodeGenerator(require_entry=require_entry).generate(parse_source(source, "test.c"))


def function_lines(source: str, name: str = "main") -> list:
    """Lines of function `name`, from its label up to the next label."""
    lines = generate(source).split("\n")
    start = lines.index(f"{name}:")
    end = start + 1
    while end < len(lines) and not lines[end].endswith(":"):
        end += 1
    return lines[start:end]


def program_of(*body) -> ProgramNode:
    """Hand-built program with a single 'main' holding `body`."""
    func = FunctionNode(location=LOC, name="main", body=list(body))
    return ProgramNode(location=LOC, functions=[func])


# =============================================================================
# Complete Listing Tests
# =============================================================================

class TestListing:
    """The whole output text, line for line."""

    def test_two_functions(self):
        asm = generate("int add() { return 5; } int main() { int x = add(); return x; }")
        assert asm == "\n".join(HEADER + [
            "add:",
            "    push rbp",
            "    mov rbp, rsp",
            "    mov rax, 5",
            "    pop rbp",
            "    ret",
            "",
            "main:",
            "    push rbp",
            "    mov rbp, rsp",
            "    sub rsp, 8",
            "    call add",
            "    mov [rbp - 8], rax",
            "    mov rax, [rbp - 8]",
            "    mov rsp, rbp",
            "    pop rbp",
            "    ret",
            "",
        ] + TRAMPOLINE) + "\n"

    def test_return_constant(self):
        asm = generate("int main() { return 42; }")
        assert asm.splitlines() == HEADER + [
            "main:",
            "    push rbp",
            "    mov rbp, rsp",
            "    mov rax, 42",
            "    pop rbp",
            "    ret",
            "",
        ] + TRAMPOLINE

    def test_ends_with_newline(self):
        asm = generate("int main() { return 0; }")
        assert asm.endswith("segment readable writable\n")
        assert not asm.endswith("\n\n")

    def test_empty_program_without_entry_check(self):
        asm = generate("", require_entry=False)
        assert asm.splitlines() == HEADER + TRAMPOLINE

    def test_functions_in_source_order(self):
        asm = generate("int b() { return 2; } int main() { return 0; } int a() { return 1; }")
        labels = [line for line in asm.splitlines() if line.endswith(":")]
        assert labels == ["b:", "main:", "a:", "start:"]

    def test_generator_is_reusable(self):
        generator = CodeGenerator()
        program = parse_source("int main() { int x = 1; return x; }")
        assert generator.generate(program) == generator.generate(program)


# =============================================================================
# Stack Frame Tests
# =============================================================================

class TestStackFrame:
    """Frame reservation and the epilogue."""

    def test_no_locals_no_reservation(self):
        lines = function_lines("int main() { return 0; }")
        assert not any("sub rsp" in line for line in lines)
        assert "    mov rsp, rbp" not in lines

    def test_frame_covers_every_declaration(self):
        lines = function_lines("int main() { int a; int b = 2; int c; return b; }")
        assert lines[3] == "    sub rsp, 24"

    def test_reservation_precedes_initializers(self):
        lines = function_lines("int main() { int a = 1; int b = 2; return a; }")
        assert lines == [
            "main:",
            "    push rbp",
            "    mov rbp, rsp",
            "    sub rsp, 16",
            "    mov rax, 1",
            "    mov [rbp - 8], rax",
            "    mov rax, 2",
            "    mov [rbp - 16], rax",
            "    mov rax, [rbp - 8]",
            "    mov rsp, rbp",
            "    pop rbp",
            "    ret",
            "",
        ]

    def test_declaration_without_initializer_emits_nothing(self):
        lines = function_lines("int main() { int x; return 3; }")
        assert lines[3:] == [
            "    sub rsp, 8",
            "    mov rax, 3",
            "    mov rsp, rbp",
            "    pop rbp",
            "    ret",
            "",
        ]

    def test_every_return_gets_epilogue(self):
        lines = function_lines("int main() { int x = 1; return x; return 2; }")
        assert lines.count("    ret") == 2
        assert lines.count("    mov rsp, rbp") == 2

    def test_function_without_return(self):
        lines = function_lines("int main() { int x = 1; }")
        assert lines == [
            "main:",
            "    push rbp",
            "    mov rbp, rsp",
            "    sub rsp, 8",
            "    mov rax, 1",
            "    mov [rbp - 8], rax",
        ]

    def test_locals_logged_in_declaration_order(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="chemist.minic.codegen"):
            generate("int main() { int b = 1; int a; return b; }")
        assert "main locals: b, a" in caplog.text

    def test_offsets_are_per_function(self):
        asm = generate(
            "int f() { int x = 1; return x; } "
            "int main() { int x = 2; return x; }"
        )
        assert asm.count("    mov [rbp - 8], rax") == 2
        assert "[rbp - 16]" not in asm


# =============================================================================
# Statement Tests
# =============================================================================

class TestStatements:
    """Code for assignments, calls and variable loads."""

    def test_assignment(self):
        lines = function_lines("int main() { int x; x = 7; return x; }")
        assert lines[4:6] == [
            "    mov rax, 7",
            "    mov [rbp - 8], rax",
        ]

    def test_assignment_from_variable(self):
        lines = function_lines("int main() { int a = 1; int b; b = a; return b; }")
        assert lines[6:8] == [
            "    mov rax, [rbp - 8]",
            "    mov [rbp - 16], rax",
        ]

    def test_assignment_from_call(self):
        lines = function_lines("int f() { return 1; } int main() { int x; x = f(); return x; }")
        assert lines[4:6] == [
            "    call f",
            "    mov [rbp - 8], rax",
        ]

    def test_bare_call(self):
        lines = function_lines("int f() { return 1; } int main() { f(); return 0; }")
        assert lines[3:5] == [
            "    call f",
            "    mov rax, 0",
        ]

    def test_call_initializer(self):
        lines = function_lines("int f() { return 1; } int main() { int x = f(); return 0; }")
        assert lines[4:6] == [
            "    call f",
            "    mov [rbp - 8], rax",
        ]

    def test_return_call(self):
        lines = function_lines("int f() { return 1; } int main() { return f(); }")
        assert lines[3:6] == [
            "    call f",
            "    pop rbp",
            "    ret",
        ]

    def test_declarations_allocated_before_other_statements(self):
        lines = function_lines("int f() { return 1; } int main() { f(); int x = 5; return x; }")
        assert lines[4:7] == [
            "    mov rax, 5",
            "    mov [rbp - 8], rax",
            "    call f",
        ]

    def test_assignment_before_declaration_resolves(self):
        lines = function_lines("int main() { x = 4; int x; return x; }")
        assert lines[4:6] == [
            "    mov rax, 4",
            "    mov [rbp - 8], rax",
        ]

    def test_self_initializer_reads_own_slot(self):
        lines = function_lines("int main() { int x = x; return 0; }")
        assert lines[4:6] == [
            "    mov rax, [rbp - 8]",
            "    mov [rbp - 8], rax",
        ]


# =============================================================================
# Semantic Error Tests
# =============================================================================

class TestSemanticErrors:
    """Name errors are reported during generation."""

    def test_undeclared_in_return(self):
        with pytest.raises(UndeclaredIdentifierError) as exc_info:
            generate("int main() { return y; }")
        assert exc_info.value.identifier == "y"
        assert str(exc_info.value.location) == "test.c:1:21"

    def test_undeclared_assignment_target(self):
        with pytest.raises(UndeclaredIdentifierError):
            generate("int main() { y = 1; return 0; }")

    def test_undeclared_initializer(self):
        with pytest.raises(UndeclaredIdentifierError):
            generate("int main() { int x = y; return x; }")

    def test_variable_not_visible_in_other_function(self):
        with pytest.raises(UndeclaredIdentifierError):
            generate("int f() { int x = 1; return x; } int main() { return x; }")

    def test_redeclaration(self):
        with pytest.raises(DuplicateDeclarationError) as exc_info:
            generate("int main() { int x; int x; return 0; }")
        assert str(exc_info.value.original_location) == "test.c:1:18"
        assert str(exc_info.value.location) == "test.c:1:25"

    def test_same_name_in_two_functions(self):
        generate("int f() { int x; return 0; } int main() { int x; return 0; }")


# =============================================================================
# Entry Function Tests
# =============================================================================

class TestEntryFunction:
    """The trampoline always calls 'main'."""

    def test_missing_main(self):
        with pytest.raises(UndefinedEntryError) as exc_info:
            generate("int f() { return 0; }")
        assert exc_info.value.entry_name == "main"
        assert "undefined entry function 'main'" in str(exc_info.value)

    def test_missing_main_without_check(self):
        asm = generate("int f() { return 0; }", require_entry=False)
        assert "    call main" in asm.splitlines()

    def test_entry_error_is_codegen_error(self):
        with pytest.raises(CCodeGenError):
            generate("")


# =============================================================================
# Unsupported Tree Tests
# =============================================================================

class TestUnsupportedTrees:
    """Hand-built trees the parser never produces."""

    def test_unsupported_statement(self):
        program = program_of(NumberLiteral(location=LOC, value=1))
        with pytest.raises(UnsupportedNodeError) as exc_info:
            CodeGenerator().generate(program)
        assert exc_info.value.node_kind == "NumberLiteral"
        assert exc_info.value.context == "statement"

    def test_unsupported_return_value(self):
        bad = ReturnStatement(location=LOC, value=ReturnStatement(location=LOC))
        with pytest.raises(UnsupportedNodeError) as exc_info:
            CodeGenerator().generate(program_of(bad))
        assert "unsupported return value: ReturnStatement" in str(exc_info.value)

    def test_unsupported_initializer(self):
        decl = VariableDeclaration(
            location=LOC,
            name="x",
            initializer=AssignmentStatement(location=LOC, name="y"),
        )
        with pytest.raises(UnsupportedNodeError) as exc_info:
            CodeGenerator().generate(program_of(decl))
        assert exc_info.value.context == "initializer"

    def test_return_without_value(self):
        with pytest.raises(CCodeGenError) as exc_info:
            CodeGenerator().generate(program_of(ReturnStatement(location=LOC)))
        assert "no expression" in str(exc_info.value)

    def test_call_without_name(self):
        with pytest.raises(CCodeGenError):
            CodeGenerator().generate(program_of(CallExpression(location=LOC)))

    def test_function_without_name(self):
        program = ProgramNode(location=LOC, functions=[
            FunctionNode(location=LOC, name="main"),
            FunctionNode(location=LOC, name=""),
        ])
        with pytest.raises(CCodeGenError):
            CodeGenerator().generate(program)
