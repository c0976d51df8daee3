## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# End-to-end native backend tests against a real `rustc`; skipped when `rustc --version` fails.
#

import pytest

from bfrun.runtime import Runtime, compiler_available
from bfrun.errors import BfInputExhausted, BfOutOfBounds, BfTimeout

pytestmark = pytest.mark.skipif(not compiler_available(), reason="rustc not available")


@pytest.fixture
def rt(tmp_path):
    return Runtime(tmp_dir=tmp_path)


def test_in_out(rt):
    assert rt.transpile(",.", "a") == "a"


def test_loop_math(rt):
    assert rt.transpile("+++++[>++++++++++<-]>-.") == "1"


def test_out_of_bounds(rt):
    with pytest.raises(BfOutOfBounds):
        rt.transpile("<+")
    with pytest.raises(BfOutOfBounds):
        rt.transpile("<")


def test_out_of_input(rt):
    with pytest.raises(BfInputExhausted):
        rt.transpile(",")


def test_timeout_leaves_no_files(rt, tmp_path):
    with pytest.raises(BfTimeout):
        rt.transpile("+[]", timeout=0.5)
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize("source, input", [
    ("++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.", None),
    (",.,.,.", "a\"\\"),
    ("-.", None),
    ("++>+++++[<+>-]++++++++[<++++++>-]<.", None),
])
def test_backends_agree(rt, source, input):
    assert rt.transpile(source, input) == rt.interpret(source, input)


def test_trailing_whitespace_is_trimmed_only_by_native_backend(rt):
    # Native stdout is trimmed; the interpreter returns every byte printed.
    assert rt.interpret("++++++++++.") == "\n"
    assert rt.transpile("++++++++++.") == ""
    assert rt.transpile("++++++++++[>+++++<-]>-.<++++++++++.") == rt.interpret("++++++++++[>+++++<-]>-.<++++++++++.").rstrip()
