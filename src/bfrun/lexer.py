## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# bfrun — Lexing raw tape-machine source into folded instructions.
#

from typing import Iterator

import lark

from .types import Instruction, MoveBy, AddBy, PRINT, READ, LOOP_START, LOOP_END
from .errors import BfSyntaxError


GRAMMAR = r"""?start: (MOVE | DELTA | PRINT | READ | LOOP_START | LOOP_END)*

// Runs of pointer moves and cell deltas come out as single tokens, folded below.
MOVE: /[<>]+/
DELTA: /[+\-]+/
PRINT: "."
READ: ","
LOOP_START: "["
LOOP_END: "]"

// Anything else is commentary.
COMMENT: /[^<>+\-.,\[\]]+/
%ignore COMMENT
"""

_LEXER = lark.Lark(GRAMMAR, parser="lalr", lexer="basic")

_FOLDS = {'MOVE': (MoveBy, '>', '<'), 'DELTA': (AddBy, '+', '-')}
_MARKERS = {'PRINT': PRINT, 'READ': READ, 'LOOP_START': LOOP_START, 'LOOP_END': LOOP_END}


def tokenize(source: str | bytes) -> Iterator[lark.Token]:
    """Yield instruction tokens with their source offsets, skipping commentary."""
    if isinstance(source, bytes):
        # One character per byte keeps token offsets equal to byte offsets.
        source = source.decode('latin-1')
    yield from _LEXER.lex(source)


def check_brackets(source: str | bytes) -> None:
    """Raise `BfSyntaxError` at the first unmatched `]`, or at the innermost unmatched `[`."""
    opened: list[int] = []
    for tok in tokenize(source):
        if tok.type == 'LOOP_START':
            opened.append(tok.start_pos)
        elif tok.type == 'LOOP_END':
            if not opened:
                raise BfSyntaxError(tok.start_pos)
            opened.pop()
    if opened:
        raise BfSyntaxError(opened.pop())


def fold(source: str | bytes) -> list[Instruction]:
    """Fold consecutive moves and deltas into single instructions with a net signed count.

    A fold that nets to zero is dropped. When that leaves two folds of the same kind
    next to each other (e.g. `+><+`), the later one continues the earlier instruction
    so no two adjacent instructions are ever both moves or both deltas.
    """
    instructions: list[Instruction] = []
    kind, count = None, 0

    def flush():
        if kind is not None and count != 0:
            instructions.append(kind(count))

    for tok in tokenize(source):
        if tok.type in _FOLDS:
            new_kind, up, down = _FOLDS[tok.type]
            if kind is not new_kind:
                flush()
                kind, count = new_kind, 0
                if instructions and type(instructions[-1]) is new_kind:
                    count = instructions.pop().delta
            count += tok.value.count(up) - tok.value.count(down)
        else:
            flush()
            kind, count = None, 0
            instructions.append(_MARKERS[tok.type])
    flush()
    return instructions


def compile_source(source: str | bytes) -> list[Instruction]:
    """Validate brackets eagerly, then fold; nothing unbalanced reaches a backend."""
    check_brackets(source)
    return fold(source)


def wants_input(source: str | bytes) -> bool:
    """Check if the program will try to read input at all."""
    return (b',' if isinstance(source, bytes) else ',') in source
