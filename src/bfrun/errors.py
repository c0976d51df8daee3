## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘


class BfError(Exception):
    def __init__(self, message: str = "", *, bf_position=None, bf_backend=None):
        """Base class for all errors raised while running a tape program."""
        super().__init__(message)
        self.bf_position: int = bf_position
        self.bf_backend: str = bf_backend

class BfSyntaxError(BfError):
    def __init__(self, position: int, *, bf_backend=None):
        super().__init__(f"Unmatched bracket at {position}.", bf_position=position, bf_backend=bf_backend)
        self.position = position


class BfRuntimeError(BfError, RuntimeError):
    pass

class BfOutOfBounds(BfRuntimeError):
    def __init__(self, message: str = "Data pointer moved out of memory bounds.", **kwargs):
        super().__init__(message, **kwargs)

class BfInputExhausted(BfRuntimeError):
    def __init__(self, message: str = "Input too short for the program's reads.", **kwargs):
        super().__init__(message, **kwargs)

class BfSignalError(BfRuntimeError):
    """Native process was terminated abnormally, not through an exit code."""
    def __init__(self, signal: int | None = None, **kwargs):
        detail = f" (signal {signal})" if signal is not None else ""
        super().__init__(f"Program terminated by a signal{detail}.", bf_backend='native', **kwargs)
        self.signal = signal


class BfCompileError(BfError):
    def __init__(self, diagnostic: str):
        super().__init__(f"Compiling the generated program failed.\n{diagnostic}", bf_backend='native')
        self.diagnostic = diagnostic

class BfSubprocessError(BfError, OSError):
    def __init__(self, detail: str):
        super().__init__(f"Process management failed: {detail}", bf_backend='native')
        self.detail = detail


class BfTimeout(BfError, TimeoutError):
    def __init__(self, message: str = "Program did not finish before the deadline.", **kwargs):
        super().__init__(message, **kwargs)
