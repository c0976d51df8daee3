## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import TAPE_SIZE, Instruction, MoveBy, AddBy, Print, Read, LoopStart, LoopEnd
from .errors import BfSyntaxError, BfOutOfBounds, BfInputExhausted, BfTimeout
from .deadline import Deadline, maybe_deadline


def map_loops(instructions: list[Instruction]) -> dict[int, int]:
    """Pair every `LoopStart` index with its `LoopEnd`, in both directions."""
    table: dict[int, int] = {}
    opened: list[int] = []
    for index, inst in enumerate(instructions):
        if isinstance(inst, LoopStart):
            opened.append(index)
        elif isinstance(inst, LoopEnd):
            if not opened:
                raise BfSyntaxError(index, bf_backend='interpreter')
            start = opened.pop()
            table[start] = index
            table[index] = start
    if opened:
        raise BfSyntaxError(opened.pop(), bf_backend='interpreter')
    return table


def as_input_bytes(input: str | bytes | None) -> bytes:
    if input is None: return b''
    return input if isinstance(input, bytes) else input.encode('utf-8')


def _show_step(step, p, inst, i, cell):
    print(f"\033[90m{step:>5} :\033[0m  ip=\033[97m{p:<5}\033[0m {inst!r:<14} dp={i:<5} cell={cell}")


def interpret(instructions: list[Instruction], jumps: dict[int, int], input: str | bytes | None = None,
              deadline: Deadline | None = None, verbosity: int = 0, stats: dict | None = None) -> bytes:
    tape = bytearray(TAPE_SIZE)
    data = as_input_bytes(input)
    output = bytearray()
    i, p, cursor = 0, 0, 0
    count = len(instructions)

    step = 0
    while p < count:
        inst = instructions[p]
        if verbosity >= 2:
            _show_step(step, p, inst, i, tape[i])
        step += 1

        match inst:
            case MoveBy(delta=d):
                if not 0 <= i + d < TAPE_SIZE:
                    raise BfOutOfBounds(bf_position=p, bf_backend='interpreter')
                i += d
            case AddBy(delta=d):
                tape[i] = (tape[i] + d) & 0xFF
            case Print():
                output.append(tape[i])
            case Read():
                if cursor >= len(data):
                    raise BfInputExhausted(bf_position=p, bf_backend='interpreter')
                tape[i] = data[cursor]
                cursor += 1
            case LoopStart():
                if tape[i] == 0: p = jumps[p]
            case LoopEnd():
                if tape[i] != 0: p = jumps[p]

        if deadline is not None and deadline.expired:
            raise BfTimeout(bf_position=p, bf_backend='interpreter')
        p += 1

    if stats is not None:
        stats['steps'] = stats.get('steps', 0) + step
    return bytes(output)


def run(instructions: list[Instruction], input: str | bytes | None = None, timeout: float | None = None,
        verbosity: int = 0, stats: dict | None = None) -> bytes:
    """Execute folded instructions on a fresh tape, aborting once `timeout` seconds have passed."""
    jumps = map_loops(instructions)
    if (deadline := maybe_deadline(timeout)) is None:
        return interpret(instructions, jumps, input, verbosity=verbosity, stats=stats)
    with deadline:
        return interpret(instructions, jumps, input, deadline=deadline, verbosity=verbosity, stats=stats)
