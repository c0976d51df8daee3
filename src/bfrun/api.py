## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Instruction, MoveBy, AddBy, Print, Read, LoopStart, LoopEnd, to_source
from .errors import *
from .runtime import Runtime, compiler_available

_RUNTIME = Runtime()

def __getattr__(name):
    return getattr(_RUNTIME, name)
