"""
Mini-C Compiler Driver Test Suite
=================================

Tests for the compilation pipeline: in-memory compilation, file
compilation and the convenience entry points.
"""

import pytest
from chemist import ChemistError
from chemist.minic import (
    MiniCCompiler,
    CompilerOptions,
    compile_source,
    compile_file,
)
from chemist.minic.compiler import compile as compile_entry
from chemist.minic.ast import ProgramNode
from chemist.minic.lexer import CTokenType
from chemist.minic.errors import (
    MiniCError,
    CSyntaxError,
    UndefinedEntryError,
    UndeclaredIdentifierError,
)


PROGRAM = "int add() { return 5; }\nint main() { int x = add(); return x; }\n"


class TestCompileSource:
    """In-memory compilation."""

    def test_returns_assembly(self):
        asm = compile_source("int main() { return 3; }")
        assert asm.startswith("format ELF64 executable 3\n")
        assert "    mov rax, 3" in asm

    def test_bytes_source(self):
        assert compile_source(b"int main() { return 3; }") == compile_source("int main() { return 3; }")

    def test_result_stages(self):
        result = MiniCCompiler().compile_source(PROGRAM, "prog.c")
        assert result.filename == "prog.c"
        assert isinstance(result.ast, ProgramNode)
        assert [f.name for f in result.ast.functions] == ["add", "main"]
        assert result.tokens[-1].type == CTokenType.EOF
        assert result.token_count == len(result.tokens)
        assert "call add" in result.assembly

    def test_errors_carry_filename(self):
        with pytest.raises(CSyntaxError) as exc_info:
            compile_source("int main() { return 1 }", "bad.c")
        assert str(exc_info.value).startswith("bad.c:1:23: error:")

    def test_errors_share_base_class(self):
        for source in ("int main() {", "int main() { return y; }", "int f() { return 0; }"):
            with pytest.raises(MiniCError):
                compile_source(source)
            with pytest.raises(ChemistError):
                compile_source(source)

    def test_semantic_error_has_source_line(self):
        with pytest.raises(UndeclaredIdentifierError) as exc_info:
            compile_source("int main() {\n    return y;\n}", "prog.c")
        error = exc_info.value
        assert error.source_line == "    return y;"
        assert error.format_detailed().splitlines()[2] == " " * 15 + "^"

    def test_entry_check_default(self):
        with pytest.raises(UndefinedEntryError):
            MiniCCompiler().compile_source("int f() { return 0; }")

    def test_entry_check_disabled(self):
        compiler = MiniCCompiler(CompilerOptions(check_entry=False))
        result = compiler.compile_source("int f() { return 0; }")
        assert "f:" in result.assembly.splitlines()


class TestCompileFile:
    """Compilation from and to the file system."""

    def test_writes_output(self, tmp_path):
        src = tmp_path / "prog.c"
        src.write_text(PROGRAM)
        out = tmp_path / "prog.asm"

        asm = compile_file(src, out)

        assert out.read_text() == asm
        assert asm == compile_source(PROGRAM)

    def test_string_paths(self, tmp_path):
        src = tmp_path / "prog.c"
        src.write_text("int main() { return 0; }")
        out = tmp_path / "prog.asm"
        compile_file(str(src), str(out))
        assert out.exists()

    def test_overwrites_existing_output(self, tmp_path):
        src = tmp_path / "prog.c"
        src.write_text("int main() { return 0; }")
        out = tmp_path / "prog.asm"
        out.write_text("stale")
        compile_file(src, out)
        assert out.read_text().startswith("format ELF64")

    def test_no_output_on_error(self, tmp_path):
        src = tmp_path / "prog.c"
        src.write_text("int main() { return y; }")
        out = tmp_path / "prog.asm"
        with pytest.raises(UndeclaredIdentifierError) as exc_info:
            compile_file(src, out)
        assert not out.exists()
        assert str(exc_info.value.location.filename) == str(src)

    def test_missing_source(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            compile_file(tmp_path / "missing.c", tmp_path / "out.asm")

    def test_compiler_without_output(self, tmp_path):
        src = tmp_path / "prog.c"
        src.write_text("int main() { return 0; }")
        result = MiniCCompiler().compile_file(src)
        assert result.assembly
        assert list(tmp_path.iterdir()) == [src]

    def test_compile_alias(self, tmp_path):
        src = tmp_path / "prog.c"
        src.write_text("int main() { return 9; }")
        out = tmp_path / "prog.asm"
        compile_entry(src, out)
        assert "    mov rax, 9" in out.read_text().splitlines()

    def test_options_passed_through(self, tmp_path):
        src = tmp_path / "lib.c"
        src.write_text("int f() { return 0; }")
        out = tmp_path / "lib.asm"
        compile_file(src, out, CompilerOptions(check_entry=False))
        assert out.exists()
