## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# bfrun — Native backend: compile generated Rust and run the binary as a subprocess.
#

import os
import sys
import random
import string
import warnings
import subprocess
import contextlib
from pathlib import Path
from dataclasses import dataclass

from .types import EXIT_INPUT_EXHAUSTED, Instruction
from .errors import BfCompileError, BfSubprocessError, BfInputExhausted, BfOutOfBounds, BfSignalError, BfTimeout
from .codegen import to_rust
from .deadline import maybe_deadline


DEFAULT_COMPILER = 'rustc'


def compiler_command() -> str:
    return os.environ.get('BFRUN_RUSTC', DEFAULT_COMPILER)


def unique_name(length: int = 14) -> str:
    return 'bf' + ''.join(random.choices(string.ascii_letters + string.digits, k=length))


@dataclass(frozen=True)
class Artifacts:
    source: Path
    executable: Path


def _remove(artifacts: Artifacts) -> list[str]:
    errors = []
    for path in (artifacts.source, artifacts.executable):
        if not path.parent.is_dir(): continue
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            errors.append(f"Cleanup of temporary file `{path}` failed: {exc}")
    return errors


@contextlib.contextmanager
def scratch_artifacts(base_dir: str | Path | None = None):
    """Reserve a unique source/executable path pair, and delete both on every exit path.

    A failed deletion never replaces the run's own exception; it is attached as a note
    to that exception, or reported as a `RuntimeWarning` when the run succeeded.
    """
    # Absolute, since the compiler and the binary both run with the directory as cwd.
    base = (Path(base_dir) if base_dir is not None else Path.cwd()).resolve()
    name = unique_name()
    exe = base / (name + '.exe' if sys.platform == 'win32' else name)
    artifacts = Artifacts(source=base / f"{name}.rs", executable=exe)

    try:
        yield artifacts
    except BaseException as exc:
        for err in _remove(artifacts):
            exc.add_note(err)
        raise
    for err in _remove(artifacts):
        warnings.warn(err, RuntimeWarning, stacklevel=3)


def _child_preexec(mem_limit_mb: int | None):
    """Return a preexec_fn bounding the child's address space on POSIX systems."""
    def preexec():
        import resource
        if mem_limit_mb is not None:
            mem_bytes = int(mem_limit_mb) * 1024 * 1024
            resource.setrlimit(resource.RLIMIT_AS, (mem_bytes, mem_bytes))
    return preexec


def compile_rust(code: str, artifacts: Artifacts, compiler: str | None = None, verbosity: int = 0) -> None:
    try:
        artifacts.source.write_text(code, encoding='utf-8')
    except OSError as exc:
        raise BfSubprocessError(f"could not write `{artifacts.source}`: {exc}") from exc
    args = [compiler or compiler_command(), '-C', 'opt-level=3', '-o', str(artifacts.executable), str(artifacts.source)]
    if verbosity > 0:
        print(f"\033[90m  $ {' '.join(args)}\033[0m", file=sys.stderr)
    try:
        proc = subprocess.run(args, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                              cwd=artifacts.source.parent, text=True, errors='replace')
    except OSError as exc:
        raise BfCompileError(str(exc)) from exc
    if proc.returncode != 0:
        raise BfCompileError(proc.stderr or proc.stdout)


def classify(returncode: int, stdout: bytes) -> bytes:
    """Map the generated program's exit status onto a result or a runtime error."""
    if returncode == 0:
        return stdout.rstrip()
    if returncode == EXIT_INPUT_EXHAUSTED:
        raise BfInputExhausted(bf_backend='native')
    if returncode < 0:
        raise BfSignalError(-returncode)
    raise BfOutOfBounds(bf_backend='native')


def execute(executable: Path, timeout: float | None = None, mem_limit_mb: int | None = None) -> bytes:
    popen_kwargs = dict(
        args=[str(executable)],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={"PATH": os.environ.get("PATH", "")},
        close_fds=True,
        cwd=executable.parent,
    )
    if os.name != "nt" and mem_limit_mb is not None:
        popen_kwargs["preexec_fn"] = _child_preexec(mem_limit_mb)

    try:
        proc = subprocess.Popen(**popen_kwargs)
    except OSError as exc:
        raise BfSubprocessError(f"could not launch `{executable.name}`: {exc}") from exc

    with proc:
        try:
            out = _wait(proc, timeout)
        except BfTimeout:
            raise
        except OSError as exc:
            proc.kill()
            raise BfSubprocessError(f"waiting for `{executable.name}` failed: {exc}") from exc
    return classify(proc.returncode, out)


def _wait(proc: subprocess.Popen, timeout: float | None) -> bytes:
    if (deadline := maybe_deadline(timeout)) is None:
        out, _ = proc.communicate()
        return out
    with deadline:
        try:
            out, _ = proc.communicate(timeout=deadline.remaining())
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.communicate()
            raise BfTimeout(bf_backend='native') from None
    return out


def run(instructions: list[Instruction], input: str | bytes | None = None, timeout: float | None = None,
        tmp_dir: str | Path | None = None, compiler: str | None = None,
        mem_limit_mb: int | None = None, verbosity: int = 0) -> bytes:
    """Generate, compile and run a folded program, removing all temporary files afterwards."""
    code = to_rust(instructions, input)
    with scratch_artifacts(tmp_dir) as artifacts:
        compile_rust(code, artifacts, compiler=compiler, verbosity=verbosity)
        if not artifacts.executable.exists():
            raise BfSubprocessError(f"compiler reported success but `{artifacts.executable.name}` is missing")
        return execute(artifacts.executable, timeout=timeout, mem_limit_mb=mem_limit_mb)
