"""Recursive mutexes with priority inheritance for the kernel."""

from __future__ import annotations

from dataclasses import dataclass, field

from .fifo import Fifo
from .kernel import Kernel, TaskState

__all__ = ["MutexTable", "MutexTableFullError", "MAX_MUTEX", "MAX_WAITING"]

MAX_MUTEX = 8
MAX_WAITING = 16


class MutexTableFullError(RuntimeError):
    """Raised when every mutex slot is in use."""


@dataclass
class _Mutex:
    ref_count: int = -1
    owner: int | None = None
    waiting: Fifo = field(default_factory=lambda: Fifo(MAX_WAITING))


class MutexTable:
    """A fixed table of recursive mutexes.

    A more urgent task that blocks on a mutex lends its ready-queue slot to
    the owner, so the owner runs at the blocked task's priority. Misuse
    stops the kernel.
    """

    def __init__(self, kernel: Kernel) -> None:
        self.kernel = kernel
        self._mutexes = [_Mutex() for _ in range(MAX_MUTEX)]

    def _get(self, m: int) -> _Mutex:
        if not 0 <= m < MAX_MUTEX:
            self.kernel.exit()
            raise RuntimeError(f"mutex {m} out of range")
        return self._mutexes[m]

    def create(self) -> int:
        """Allocate a mutex and return its number."""
        for m, mutex in enumerate(self._mutexes):
            if mutex.ref_count == -1:
                mutex.ref_count = 0
                return m
        raise MutexTableFullError(f"all {MAX_MUTEX} mutexes are in use")

    def acquire(self, m: int) -> None:
        """Take mutex ``m`` for the current task, blocking if another task holds it."""
        mutex = self._get(m)
        if mutex.ref_count == -1:
            self.kernel.exit()
        kernel = self.kernel
        current = kernel.current

        if mutex.ref_count == 0:
            mutex.ref_count = 1
            mutex.owner = current
            return
        if mutex.owner == current:
            mutex.ref_count += 1
            return

        owner = mutex.owner
        if kernel.tcb(current).priority < kernel.tcb(owner).priority:
            # The owner inherits the blocked task's slot in the ready queue.
            kernel.ready.swap_ids(current, owner)
            mutex.waiting.push(current)
            kernel.tcb(current).status = TaskState.SUSPENDED
            kernel.ready.remove(owner)
            kernel.schedule()
        else:
            mutex.waiting.push(current)
            kernel.sleep()

    def release(self, m: int) -> None:
        """Release mutex ``m``; the oldest waiter, if any, becomes the owner."""
        mutex = self._get(m)
        kernel = self.kernel
        if mutex.owner != kernel.current or mutex.ref_count <= 0:
            kernel.exit()

        mutex.ref_count -= 1
        if mutex.ref_count > 0:
            return

        old_owner = mutex.owner
        old_tcb = kernel.tcb(old_owner)
        if len(mutex.waiting):
            successor = mutex.waiting.pop()
            mutex.owner = successor
            mutex.ref_count = 1
            if old_tcb.priority != old_tcb.base_priority:
                kernel.ready.remove(old_owner)
                old_tcb.priority = old_tcb.base_priority
                kernel.ready.add(old_owner)
            kernel.wake(successor)
        else:
            mutex.owner = None
            old_tcb.priority = old_tcb.base_priority

    def destroy(self, m: int) -> None:
        """Free mutex ``m``; it must be allocated and not held."""
        mutex = self._get(m)
        if mutex.ref_count != 0:
            self.kernel.exit()
        self._mutexes[m] = _Mutex()