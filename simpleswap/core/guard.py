"""Request validation and the pool's reentrancy lock."""

import threading
import time
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from simpleswap.core.errors import ErrorKind, PoolError

Clock = Callable[[], int]


def system_clock() -> int:
    """Current UNIX time in whole seconds."""
    return int(time.time())


def check_deadline(deadline: int, now: int) -> None:
    """Reject a request whose deadline has passed.

    A request is still valid at ``now == deadline``.

    Raises:
        PoolError: EXPIRED if ``now > deadline``
    """
    if now > deadline:
        raise PoolError(ErrorKind.EXPIRED, f"deadline {deadline} passed at {now}")


class RequestGuard:
    """Expiry checks against an injected clock."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or system_clock

    def now(self) -> int:
        return self.clock()

    def check_deadline(self, deadline: int) -> None:
        check_deadline(deadline, self.clock())


class ReentrancyLock:
    """Serializes mutating operations and rejects nested entry.

    Other threads wait for the lock. The owning thread re-entering (for
    example an asset adapter calling back into the pool mid-operation)
    gets a REENTRANT error instead.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entered = False

    @contextmanager
    def hold(self) -> Iterator[None]:
        with self._lock:
            if self._entered:
                raise PoolError(ErrorKind.REENTRANT, "pool operation already in progress")
            self._entered = True
            try:
                yield
            finally:
                self._entered = False
