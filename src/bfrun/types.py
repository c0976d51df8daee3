## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from dataclasses import dataclass


# Canonical tape length of the language; cells are single unsigned bytes.
TAPE_SIZE = 30000

# Exit code reserved by generated programs for a read past the end of input.
EXIT_INPUT_EXHAUSTED = 10


@dataclass(frozen=True, slots=True)
class MoveBy:
    delta: int

    def __repr__(self):
        return f"MoveBy({self.delta:+d})"

@dataclass(frozen=True, slots=True)
class AddBy:
    delta: int

    def __repr__(self):
        return f"AddBy({self.delta:+d})"

@dataclass(frozen=True, slots=True)
class Print:
    def __repr__(self): return "Print"

@dataclass(frozen=True, slots=True)
class Read:
    def __repr__(self): return "Read"

@dataclass(frozen=True, slots=True)
class LoopStart:
    def __repr__(self): return "LoopStart"

@dataclass(frozen=True, slots=True)
class LoopEnd:
    def __repr__(self): return "LoopEnd"


Instruction = MoveBy | AddBy | Print | Read | LoopStart | LoopEnd

# Folded instructions are never mutated, the shared singletons avoid one object per marker.
PRINT, READ, LOOP_START, LOOP_END = Print(), Read(), LoopStart(), LoopEnd()


def to_source(instructions: list[Instruction]) -> str:
    """Render a folded instruction sequence back into canonical program text."""
    parts = []
    for inst in instructions:
        match inst:
            case MoveBy(delta=d):
                parts.append(('>' if d > 0 else '<') * abs(d))
            case AddBy(delta=d):
                parts.append(('+' if d > 0 else '-') * abs(d))
            case Print():
                parts.append('.')
            case Read():
                parts.append(',')
            case LoopStart():
                parts.append('[')
            case LoopEnd():
                parts.append(']')
    return ''.join(parts)
