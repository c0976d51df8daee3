## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# bfrun — Run tape-machine programs by interpretation or through native compilation.
#

import sys
import time
from dataclasses import dataclass

import click

from .errors import (BfError, BfSyntaxError, BfRuntimeError, BfCompileError, BfSubprocessError, BfTimeout)
from .formatting import write_without_ansi, format_position_context
from .runtime import Runtime, decode_output


BACKENDS = ('auto', 'interpret', 'native')


@dataclass(frozen=True)
class RunnerConfig:
    backend: str
    timeout: float | None
    tmp_dir: str | None
    compiler: str | None
    mem_limit: int | None
    verbose: int
    stats: bool
    plain: bool


class BfRunner:
    def __init__(self, config: RunnerConfig):
        self.config = config
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = Runtime(compiler=config.compiler, tmp_dir=config.tmp_dir,
                               verbosity=config.verbose, mem_limit_mb=config.mem_limit)
        self.total_stats = {'steps': 0, 'start': time.time()} if config.stats else None
        self.failure = False

    def _fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '') -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True

    def _handle_exception(self, exc: BfError, filename: str, source: str) -> None:
        name = type(exc).__name__
        if isinstance(exc, BfSyntaxError):
            context = format_position_context(filename, source, exc.position) if exc.bf_backend is None else ''
            self._fatal_error("SYNTAX ERROR.", f"Parsing `\033[97m{filename}\033[0m` failed: {exc}", name, context)
        elif isinstance(exc, BfRuntimeError):
            self._fatal_error("RUNTIME ERROR.", f"Program `\033[97m{filename}\033[0m` stopped: {exc}", name)
        elif isinstance(exc, BfCompileError):
            self._fatal_error("COMPILE ERROR.", "Generated program was rejected by the compiler.", name,
                              f"\033[90m{exc.diagnostic.rstrip()}\033[0m\n")
        elif isinstance(exc, BfTimeout):
            self._fatal_error("TIMEOUT.", f"Program `\033[97m{filename}\033[0m` exceeded {self.config.timeout}s.", name)
        elif isinstance(exc, BfSubprocessError):
            self._fatal_error("SUBPROCESS ERROR.", str(exc), name)
        else:
            self._fatal_error("ERROR.", str(exc), name)
        for note in getattr(exc, '__notes__', ()):
            print(f"\033[90m  {note}\033[0m", file=sys.stderr)

    def read_input(self, source: str, given: str | None, stdin) -> str | None:
        if given is not None or not self.runtime.wants_input(source):
            return given
        print("Enter the input characters", file=sys.stderr)
        return stdin.readline().rstrip()

    def execute(self, source: str, filename: str, input: str | None) -> bytes | None:
        try:
            return self.runtime.run_bytes(source, input, self.config.timeout, stats=self.total_stats,
                                          backend=self.config.backend)
        except BfError as exc:
            self._handle_exception(exc, filename, source)
            return None

    def translate(self, source: str, filename: str, input: str | None) -> str | None:
        try:
            return self.runtime.translate(source, input)
        except BfError as exc:
            self._handle_exception(exc, filename, source)
            return None

    def finalize(self) -> int:
        if self.total_stats and not self.failure:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m", file=sys.stderr)
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m", file=sys.stderr)
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m", file=sys.stderr)
        return 1 if self.failure else 0


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('script', type=click.File('r', encoding='utf-8'), default='-')
@click.option('--input', 'input_', default=None, help='Input characters for the program; skips the prompt.')
@click.option('--timeout', '-t', type=float, default=None, help='Abort the program after this many seconds.')
@click.option('--backend', '-b', type=click.Choice(BACKENDS), default='auto', help='Execution strategy; `auto` uses the compiler when found.')
@click.option('--tmp-dir', type=click.Path(file_okay=False, exists=True), default=None, help='Directory for generated sources and binaries.')
@click.option('--compiler', default=None, help='Compiler binary for the native backend (default: $BFRUN_RUSTC or rustc).')
@click.option('--mem-limit', type=int, default=None, help='Address-space limit in MB for native binaries (POSIX only).')
@click.option('--emit-rust', is_flag=True, help='Print the generated Rust source instead of running.')
@click.option('--verbose', '-v', default=0, count=True, help='Show backend decisions, or trace every instruction with -vv.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, script, input_, timeout, backend, tmp_dir, compiler, mem_limit, emit_rust,
        verbose, stats, plain) -> None:
    """Run the program in SCRIPT, or the first line of standard input when SCRIPT is `-`."""
    config = RunnerConfig(backend=backend, timeout=timeout, tmp_dir=tmp_dir, compiler=compiler,
                          mem_limit=mem_limit, verbose=verbose, stats=stats, plain=plain)
    runner = BfRunner(config)

    from_stdin = script.name in ('-', '<stdin>')
    source = script.readline() if from_stdin else script.read()
    filename = '<STDIN>' if from_stdin else script.name
    input_ = runner.read_input(source, input_, script if from_stdin else sys.stdin)

    if emit_rust:
        if (code := runner.translate(source, filename, input_)) is not None:
            print(code, end='')
    elif (output := runner.execute(source, filename, input_)) is not None:
        print(decode_output(output), end='')
    ctx.exit(runner.finalize())


def main(argv: list[str] | None = None) -> None:
    cli.main(args=sys.argv[1:] if argv is None else argv, prog_name='bfrun')


if __name__ == "__main__":
    main()
