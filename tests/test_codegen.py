## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from bfrun.codegen import to_rust, escape_bytes
from bfrun.lexer import compile_source
from bfrun.types import MoveBy, AddBy, READ


def test_escape_keeps_printable_ascii():
    assert escape_bytes(b"Hello, World!") == "Hello, World!"


def test_escape_protects_literal_syntax():
    assert escape_bytes(b'a"b\\c') == "a\\x22b\\x5cc"
    assert escape_bytes(b"\n\r\t\x00\xff") == "\\x0a\\x0d\\x09\\x00\\xff"


def test_input_embedded_as_byte_string():
    code = to_rust([READ], 'say "hi"\n')
    assert 'let _i: &[u8] = b"say \\x22hi\\x22\\x0a";' in code


def test_missing_input_is_empty_literal():
    assert 'let _i: &[u8] = b"";' in to_rust([])


def test_unicode_input_is_utf8_encoded():
    assert 'b"\\xc3\\xa9"' in to_rust([READ], "é")


def test_statements_per_instruction():
    code = to_rust([MoveBy(3), MoveBy(-2), AddBy(5), AddBy(-1), AddBy(300)])
    assert "_p = _p.wrapping_add(3); let _ = &_m[_p];" in code
    assert "_p = _p.wrapping_sub(2); let _ = &_m[_p];" in code
    assert "_m[_p] += Wrapping(5u8);" in code
    assert "_m[_p] += Wrapping(255u8);" in code
    assert "_m[_p] += Wrapping(44u8);" in code


def test_read_exits_with_reserved_code():
    code = to_rust([READ])
    assert "None => std::process::exit(10)" in code


def test_loops_become_while_blocks():
    code = to_rust(compile_source("+[>[-]<-]."))
    assert code.count("while _m[_p].0 != 0 {") == 2
    assert code.count("{") == code.count("}")
    assert "        while _m[_p].0 != 0 {" in code  # nested loop is indented one level deeper


def test_program_shape():
    code = to_rust(compile_source("."))
    assert code.startswith("#![allow(unused_mut, unused_variables)]")
    assert "let mut _m = [Wrapping(0u8); 30000];" in code
    assert "_o.push(_m[_p].0);" in code
    assert code.rstrip().endswith("}")
