## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import pytest

import bfrun.api as B


def test_run_dispatches_to_available_backend():
    assert B.run(",.", input="a") == "a"


def test_interpret_string():
    assert B.interpret("+++++[>++++++++++<-]>-.") == "1"


def test_output_bytes_above_ascii():
    assert B.interpret("-.") == "\xff"
    assert B.run_bytes("-.", backend='interpret') == b"\xff"


def test_syntax_error_before_execution():
    with pytest.raises(B.BfSyntaxError) as exc:
        B.run("[[]")
    assert exc.value.position == 0


def test_errors_are_classified():
    with pytest.raises(B.BfOutOfBounds):
        B.interpret("<")
    with pytest.raises(B.BfInputExhausted):
        B.interpret(",")
    with pytest.raises(B.BfTimeout):
        B.interpret("+[]", timeout=0.1)


def test_all_errors_share_base():
    for cls in (B.BfSyntaxError, B.BfOutOfBounds, B.BfInputExhausted, B.BfSignalError,
                B.BfCompileError, B.BfSubprocessError, B.BfTimeout):
        assert issubclass(cls, B.BfError)


def test_compile_and_source_helpers():
    insts = B.compile("+++>>>")
    assert insts == [B.AddBy(3), B.MoveBy(3)]
    assert B.to_source(insts) == "+++>>>"


def test_translate_returns_rust_source():
    code = B.translate(",.", "a")
    assert "fn main()" in code
    assert 'b"a"' in code


def test_wants_input():
    assert B.wants_input(",[.,]")
    assert not B.wants_input("+.")


def test_unknown_backend_rejected():
    with pytest.raises(ValueError):
        B.run_bytes("+", backend='jit')


def test_dispatcher_falls_back_without_compiler(tmp_path, capsys):
    rt = B.Runtime(compiler=str(tmp_path / "no-such-rustc"), verbosity=1)
    assert rt.compiler_available() is False
    assert rt.run("+++++[>++++++++++<-]>-.") == "1"
    assert "backend: interpret" in capsys.readouterr().err
