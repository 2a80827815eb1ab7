from __future__ import annotations

from collections.abc import Callable, Generator
from contextlib import contextmanager
from contextvars import ContextVar
from functools import lru_cache
from itertools import count
from threading import Lock
from typing import TypeVar

T = TypeVar("T")


class Sequence:
    """
    A monotonically increasing counter used to mint unique test values.

    Advancing the counter is guarded by a lock, so concurrent callers never
    observe the same value, free-threaded interpreters included. Only
    uniqueness is guaranteed, the order in which threads receive values is
    not.

    The counter starts at `start` and every call first increments, then
    reads, so the first value handed out is `start + 1`. It is never reset.
    """

    __slots__ = ("start", "_counter", "_lock")

    def __init__(self, start: int = 0) -> None:
        self.start = start
        self._counter = count(start + 1)
        self._lock = Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._counter)

    def __call__(self, format_fn: Callable[[int], T]) -> T:
        return format_fn(self.next())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(start={self.start})"


# Sequence bound to the current context, see `use_sequence`.
current_sequence: ContextVar[Sequence | None] = ContextVar("current_sequence", default=None)


@lru_cache
def get_default_sequence() -> Sequence:
    """
    Returns the process-wide sequence, created on first use from
    `settings.sequence_start`.
    """
    from sqlfactories.conf import settings

    return Sequence(settings.sequence_start)


def sequence(format_fn: Callable[[int], T], *, counter: Sequence | None = None) -> T:
    """
    Utility for generating unique ids or strings in factories.

    Each call hands a different number to `format_fn` and returns its result.

    ```python
    from sqlfactories import sequence

    assert sequence(lambda i: f"user-{i}@example.com") != sequence(
        lambda i: f"user-{i}@example.com"
    )
    ```

    The counter used is, in order: the `counter` argument, the sequence bound
    with `use_sequence` (or `factory_context`), the process-wide sequence.
    """
    if counter is None:
        counter = current_sequence.get()
    if counter is None:
        counter = get_default_sequence()
    return counter(format_fn)


@contextmanager
def use_sequence(counter: Sequence | None = None) -> Generator[Sequence, None, None]:
    """
    Binds `counter` (a fresh `Sequence` when omitted) for `sequence` calls made
    inside the block. Lets parallel test runs isolate their counters.
    """
    if counter is None:
        counter = Sequence()
    token = current_sequence.set(counter)
    try:
        yield counter
    finally:
        current_sequence.reset(token)
