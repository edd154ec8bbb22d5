"""Counting semaphores for the kernel."""

from __future__ import annotations

from dataclasses import dataclass, field

from .fifo import Fifo
from .kernel import Kernel

__all__ = ["SemaphoreTable", "MAX_SEM"]

MAX_SEM = 16


@dataclass
class _Semaphore:
    value: int
    waiting: Fifo = field(default_factory=Fifo)


class SemaphoreTable:
    """A fixed table of semaphores whose waiters are woken in arrival order.

    Any misuse (an unknown or closed semaphore, no free slot) stops the kernel.
    """

    def __init__(self, kernel: Kernel) -> None:
        self.kernel = kernel
        self._sems: list[_Semaphore | None] = [None] * MAX_SEM

    def _open(self, n: int) -> _Semaphore:
        sem = self._sems[n] if 0 <= n < MAX_SEM else None
        if sem is None:
            self.kernel.exit()
            raise RuntimeError(f"semaphore {n} is not open")
        return sem

    def create(self, value: int) -> int:
        """Open a semaphore with an initial ``value`` and return its number."""
        for n, sem in enumerate(self._sems):
            if sem is None:
                self._sems[n] = _Semaphore(value)
                return n
        self.kernel.exit()
        raise RuntimeError("no free semaphore")

    def close(self, n: int) -> None:
        """Close semaphore ``n`` so that its slot can be reused."""
        self._open(n)
        self._sems[n] = None

    def wait(self, n: int) -> None:
        """Take semaphore ``n``; the current task sleeps if none is available."""
        sem = self._open(n)
        sem.value -= 1
        if sem.value < 0:
            sem.waiting.push(self.kernel.current)
            self.kernel.sleep()

    def signal(self, n: int) -> None:
        """Give semaphore ``n`` back, waking the oldest waiter if there is one."""
        sem = self._open(n)
        sem.value += 1
        if sem.value <= 0:
            self.kernel.wake(sem.waiting.pop())