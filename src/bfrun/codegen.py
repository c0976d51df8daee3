## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# bfrun — Straight-line translation of folded instructions into Rust source.
#

import textwrap

from .types import TAPE_SIZE, EXIT_INPUT_EXHAUSTED, Instruction, MoveBy, AddBy, Print, Read, LoopStart, LoopEnd
from .interpreter import as_input_bytes


PRELUDE = textwrap.dedent(f"""\
    #![allow(unused_mut, unused_variables)]
    use std::io::Write;
    use std::num::Wrapping;

    fn main() {{
        let mut _m = [Wrapping(0u8); {TAPE_SIZE}];
        let (mut _p, mut _b) = (0usize, 0usize);
        let mut _o: Vec<u8> = Vec::new();
    """)

EPILOGUE = textwrap.dedent("""\
        let mut _out = std::io::stdout();
        _out.write_all(&_o).unwrap();
        _out.write_all(b"\\n").unwrap();
    }
    """)


def escape_bytes(data: bytes) -> str:
    """Body of a Rust byte string literal holding exactly `data`."""
    chars = []
    for b in data:
        if 0x20 <= b < 0x7F and b not in (0x22, 0x5C):
            chars.append(chr(b))
        else:
            chars.append(f"\\x{b:02x}")
    return ''.join(chars)


def _statement(inst: Instruction) -> str:
    match inst:
        # The tape lookup after a move is there for its bounds check: leaving the tape panics.
        case MoveBy(delta=d) if d >= 0:
            return f"_p = _p.wrapping_add({d}); let _ = &_m[_p];"
        case MoveBy(delta=d):
            return f"_p = _p.wrapping_sub({-d}); let _ = &_m[_p];"
        case AddBy(delta=d):
            return f"_m[_p] += Wrapping({d % 256}u8);"
        case Print():
            return "_o.push(_m[_p].0);"
        case Read():
            return ("_m[_p] = Wrapping(match _i.get(_b) { Some(c) => { _b += 1; *c } "
                    f"None => std::process::exit({EXIT_INPUT_EXHAUSTED}) }});")
        case LoopStart():
            return "while _m[_p].0 != 0 {"
        case LoopEnd():
            return "}"
    raise NotImplementedError(f"No translation for {inst!r}.")


def to_rust(instructions: list[Instruction], input: str | bytes | None = None) -> str:
    lines = [PRELUDE, f'    let _i: &[u8] = b"{escape_bytes(as_input_bytes(input))}";\n']
    depth = 1
    for inst in instructions:
        if isinstance(inst, LoopEnd): depth -= 1
        lines.append('    ' * depth + _statement(inst) + '\n')
        if isinstance(inst, LoopStart): depth += 1
    lines.append(EPILOGUE)
    return ''.join(lines)
