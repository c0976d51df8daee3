## bfrun — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import time
import threading


class Deadline:
    """One-shot cancellation token, set by a timer thread once the duration has elapsed.

    The timer thread is the only writer; the executing thread polls `expired` without
    blocking, or asks for `remaining()` to bound a blocking wait.
    """

    def __init__(self, seconds: float):
        self.seconds = seconds
        self._fired = threading.Event()
        self._timer = threading.Timer(seconds, self._fired.set)
        self._timer.daemon = True
        self._started = None

    def start(self) -> "Deadline":
        self._started = time.monotonic()
        self._timer.start()
        return self

    def cancel(self) -> None:
        self._timer.cancel()

    @property
    def expired(self) -> bool:
        return self._fired.is_set()

    def remaining(self) -> float:
        if self._started is None: return self.seconds
        return max(0.0, self.seconds - (time.monotonic() - self._started))

    def __enter__(self):
        return self.start()

    def __exit__(self, *exc_info):
        self.cancel()
        return False


def maybe_deadline(seconds: float | None) -> Deadline | None:
    return None if seconds is None else Deadline(seconds)
