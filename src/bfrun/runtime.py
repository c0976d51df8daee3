## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import sys
import subprocess
from pathlib import Path

from .types import Instruction
from .lexer import compile_source, wants_input
from .codegen import to_rust
from . import interpreter, native


def compiler_available(compiler: str | None = None) -> bool:
    """Check the external compiler once with `--version`, output discarded."""
    try:
        proc = subprocess.run([compiler or native.compiler_command(), '--version'],
                              stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except OSError:
        return False
    return proc.returncode == 0


def decode_output(output: bytes) -> str:
    # Each cell value becomes the code point of the same value, as `chr(byte)` would.
    return output.decode('latin-1')


class Runtime:
    """Minimal runtime facade that picks a backend and runs programs on it."""

    def __init__(self, compiler: str | None = None, tmp_dir: str | Path | None = None,
                 verbosity: int = 0, mem_limit_mb: int | None = None):
        self.compiler = compiler
        self.tmp_dir = tmp_dir
        self.verbosity = verbosity
        self.mem_limit_mb = mem_limit_mb

    # Assembly ────────────────────────────────────────────────────────────────────────────────
    def compile(self, program: str | bytes) -> list[Instruction]:
        return compile_source(program)

    def translate(self, program: str | bytes, input: str | bytes | None = None) -> str:
        return to_rust(compile_source(program), input)

    def wants_input(self, program: str | bytes) -> bool:
        return wants_input(program)

    # Dispatch ────────────────────────────────────────────────────────────────────────────────
    def compiler_available(self) -> bool:
        return compiler_available(self.compiler)

    def select_backend(self) -> str:
        backend = 'native' if self.compiler_available() else 'interpret'
        if self.verbosity > 0:
            print(f"\033[90m  ~ backend: {backend}\033[0m", file=sys.stderr)
        return backend

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, program: str | bytes, input: str | bytes | None = None, timeout: float | None = None,
            tmp_dir: str | Path | None = None, stats: dict | None = None) -> str:
        return decode_output(self.run_bytes(program, input, timeout, tmp_dir, stats))

    def run_bytes(self, program: str | bytes, input: str | bytes | None = None, timeout: float | None = None,
                  tmp_dir: str | Path | None = None, stats: dict | None = None, backend: str = 'auto') -> bytes:
        """Run on `backend` ('auto', 'interpret' or 'native') and return the raw output bytes."""
        instructions = compile_source(program)
        if backend == 'auto':
            backend = self.select_backend()
        match backend:
            case 'native':
                return self._native(instructions, input, timeout, tmp_dir)
            case 'interpret':
                return self._interpret(instructions, input, timeout, stats)
        raise ValueError(f"Unknown backend `{backend}`.")

    def interpret(self, program: str | bytes, input: str | bytes | None = None,
                  timeout: float | None = None, stats: dict | None = None) -> str:
        return decode_output(self._interpret(compile_source(program), input, timeout, stats))

    def transpile(self, program: str | bytes, input: str | bytes | None = None,
                  timeout: float | None = None, tmp_dir: str | Path | None = None) -> str:
        return decode_output(self._native(compile_source(program), input, timeout, tmp_dir))

    def _interpret(self, instructions, input, timeout, stats) -> bytes:
        return interpreter.run(instructions, input, timeout, verbosity=self.verbosity, stats=stats)

    def _native(self, instructions, input, timeout, tmp_dir) -> bytes:
        return native.run(instructions, input, timeout, tmp_dir=tmp_dir or self.tmp_dir, compiler=self.compiler,
                          mem_limit_mb=self.mem_limit_mb, verbosity=self.verbosity)
